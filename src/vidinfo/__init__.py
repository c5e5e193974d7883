"""vidinfo: video metadata and stream format extraction from YouTube watch pages."""

from .core import VideoInfo, StreamFormat, YouTubeClient, ExtractionPipeline
from .version import __version__

__all__ = ["VideoInfo", "StreamFormat", "YouTubeClient", "ExtractionPipeline", "__version__"]
