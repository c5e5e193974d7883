"""Core functionality for vidinfo."""

from .errors import (
    ExtractionError,
    IdentifierMissing,
    TransportError,
    ConfigUnavailable,
    VideoUnavailable,
    MalformedResponse,
    DownloadUrlUnavailable,
)
from .models import (
    StreamFormat,
    FormatList,
    VideoInfo,
    ThumbnailQuality,
)
from .pipeline import ExtractionPipeline, ExtractionState
from .transport import HttpTransport
from .youtube_client import YouTubeClient, extract_video_id
from .downloader import SmartDownloader

__all__ = [
    "ExtractionError",
    "IdentifierMissing",
    "TransportError",
    "ConfigUnavailable",
    "VideoUnavailable",
    "MalformedResponse",
    "DownloadUrlUnavailable",
    "StreamFormat",
    "FormatList",
    "VideoInfo",
    "ThumbnailQuality",
    "ExtractionPipeline",
    "ExtractionState",
    "HttpTransport",
    "YouTubeClient",
    "extract_video_id",
    "SmartDownloader",
]
