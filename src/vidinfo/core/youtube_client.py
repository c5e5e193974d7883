"""YouTube video info extraction from watch pages."""

import logging
import threading
from pathlib import Path
from typing import Callable, Optional, Union
from urllib.parse import ParseResult, parse_qs, urlparse

from ..utils.config import Config
from .downloader import SmartDownloader
from .errors import DownloadUrlUnavailable, IdentifierMissing
from .models import StreamFormat, ThumbnailQuality, VideoInfo
from .pipeline import ExtractionPipeline
from .transport import HttpTransport

logger = logging.getLogger(__name__)

WATCH_HOSTS = ("www.youtube.com", "youtube.com", "m.youtube.com")
SHORT_HOST = "youtu.be"

# Resolves a ciphered format to a playable URL using the player script
SignatureResolver = Callable[[StreamFormat, str], str]


def extract_video_id(url: Union[str, ParseResult]) -> str:
    """Return the video id of a watch, embed or youtu.be URL, or "" if unrecognized."""
    u = urlparse(url) if isinstance(url, str) else url
    if u.hostname in WATCH_HOSTS:
        if u.path == "/watch":
            return parse_qs(u.query).get("v", [""])[0]
        if u.path.startswith("/embed/"):
            return u.path[len("/embed/"):]
    elif u.hostname == SHORT_HOST:
        if len(u.path) > 1:
            return u.path[1:]
    return ""


class YouTubeClient:
    """Fetches watch pages and extracts video info and download URLs."""

    def __init__(self, config: Optional[Config] = None,
                 transport: Optional[HttpTransport] = None,
                 signature_resolver: Optional[SignatureResolver] = None):
        self.config = config or (transport.config if transport else Config())
        self.transport = transport or HttpTransport(self.config)
        self.pipeline = ExtractionPipeline(self.transport, self.config)
        self.signature_resolver = signature_resolver

    def get_video_info(self, value: str,
                       cancel_event: Optional[threading.Event] = None) -> VideoInfo:
        """Extract video info from a https:// URL or a bare video id."""
        if value.startswith("https://"):
            video_id = extract_video_id(value)
            if not video_id:
                raise IdentifierMissing(f"invalid youtube URL, no video id: {value}")
            return self.get_video_info_from_id(video_id, cancel_event)
        if not value:
            raise IdentifierMissing("empty video id")
        return self.get_video_info_from_id(value, cancel_event)

    def get_video_info_from_id(self, video_id: str,
                               cancel_event: Optional[threading.Event] = None) -> VideoInfo:
        """Fetch the watch page of video_id and run the extraction pipeline."""
        params = {
            "v": video_id,
            "gl": "US",
            "hl": "en",
            "has_verified": "1",
            "bpctr": "9999999999",
        }
        html = self.transport.get(self.config.watch_url, params=params, cancel_event=cancel_event)
        logger.info(f"Fetched watch page for {video_id} ({len(html)} bytes)")
        return self.pipeline.extract(video_id, html, cancel_event=cancel_event)

    def thumbnail_url(self, info: VideoInfo,
                      quality: ThumbnailQuality = ThumbnailQuality.DEFAULT) -> str:
        return self.config.thumbnail_url.format(id=info.id, quality=ThumbnailQuality(quality).value)

    def get_download_url(self, info: VideoInfo, fmt: StreamFormat) -> str:
        """Resolve a playable URL for one of info's formats."""
        if fmt.url:
            return fmt.url
        if not fmt.is_ciphered:
            raise DownloadUrlUnavailable(f"Format {fmt.itag} has neither URL nor signature cipher")
        if self.signature_resolver is None:
            raise DownloadUrlUnavailable(
                f"Format {fmt.itag} is ciphered and no signature resolver is configured")
        if not info.player_script:
            raise DownloadUrlUnavailable(f"Format {fmt.itag} is ciphered but the player script is unknown")
        return self.signature_resolver(fmt, info.player_script)

    def download(self, info: VideoInfo, fmt: StreamFormat, output_path: Path,
                 progress_callback: Optional[Callable[[float, int, int], None]] = None) -> int:
        """Download a format to output_path. Returns the number of bytes written."""
        url = self.get_download_url(info, fmt)
        logger.info(f"Downloading {info.id} itag={fmt.itag} to {output_path}")
        downloader = SmartDownloader(self.transport.session, url, output_path,
                                     progress_callback=progress_callback,
                                     timeout=self.config.timeout)
        return downloader.start()
