"""Data models for video info and stream formats."""

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Optional, Tuple


class ThumbnailQuality(str, Enum):
    """Thumbnail image variants served for every video."""
    DEFAULT = "default"
    HIGH = "hqdefault"
    MEDIUM = "mqdefault"
    STANDARD = "sddefault"
    MAX_RES = "maxresdefault"


@dataclass(frozen=True)
class StreamFormat:
    """Represents a single stream of a video."""
    itag: int
    adaptive: bool   # True: audio-only or video-only stream
    url: str = ""
    signature_cipher: str = ""  # raw "s=...&sp=...&url=..." query for ciphered streams
    mime_type: str = ""         # e.g. "video/mp4"
    container: str = ""         # e.g. "mp4"
    video_codec: str = ""
    audio_codec: str = ""
    quality: str = ""           # e.g. "hd720"
    quality_label: str = ""     # e.g. "720p"
    bitrate: int = 0
    width: int = 0
    height: int = 0
    fps: int = 0
    content_length: int = 0
    audio_sample_rate: int = 0
    audio_channels: int = 0

    @property
    def is_ciphered(self) -> bool:
        return not self.url and bool(self.signature_cipher)

    @property
    def has_video(self) -> bool:
        return bool(self.video_codec) or self.mime_type.startswith("video/")

    @property
    def has_audio(self) -> bool:
        if not self.adaptive:
            return True
        return bool(self.audio_codec) or self.mime_type.startswith("audio/")


class FormatList(tuple):
    """Ordered, immutable sequence of StreamFormat with lookup helpers."""

    def __new__(cls, formats: Iterable[StreamFormat] = ()):
        return super().__new__(cls, formats)

    def by_itag(self, itag: int) -> Optional[StreamFormat]:
        for fmt in self:
            if fmt.itag == itag:
                return fmt
        return None

    def muxed(self) -> "FormatList":
        return FormatList(f for f in self if not f.adaptive)

    def adaptive(self) -> "FormatList":
        return FormatList(f for f in self if f.adaptive)

    def video_only(self) -> "FormatList":
        return FormatList(f for f in self if f.adaptive and f.has_video and not f.has_audio)

    def audio_only(self) -> "FormatList":
        return FormatList(f for f in self if f.adaptive and f.has_audio and not f.has_video)


@dataclass(frozen=True)
class VideoInfo:
    """Metadata and available formats of a single video."""
    id: str
    title: str = ""
    description: str = ""
    uploader: str = ""
    published: Optional[date] = None
    duration: Optional[timedelta] = None
    song: str = ""
    artist: str = ""
    album: str = ""
    writers: str = ""
    keywords: Tuple[str, ...] = ()
    formats: FormatList = field(default_factory=FormatList)
    dash_manifest_url: str = ""
    hls_manifest_url: str = ""
    player_script: str = ""  # needed to resolve ciphered format URLs
    issues: Tuple[str, ...] = ()  # non-fatal problems met during extraction
