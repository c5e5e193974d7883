"""Decoding of stream formats from legacy stream maps and player-response JSON."""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple
from urllib.parse import parse_qsl

from .models import FormatList, StreamFormat

logger = logging.getLogger(__name__)


def parse_mime_type(mime: str) -> Tuple[str, str, List[str]]:
    """Split 'video/mp4; codecs="avc1.4d401f, mp4a.40.2"' into (mime, container, codecs)."""
    if not mime:
        return "", "", []
    base, _, params = mime.partition(";")
    base = base.strip()
    container = base.partition("/")[2]
    codecs: List[str] = []
    params = params.strip()
    if params.startswith("codecs="):
        raw = params[len("codecs="):].strip().strip('"')
        codecs = [c.strip() for c in raw.split(",") if c.strip()]
    return base, container, codecs


def _split_codecs(base_mime: str, codecs: List[str], adaptive: bool) -> Tuple[str, str]:
    """Assign codecs to (video, audio) based on the mime family."""
    if not codecs:
        return "", ""
    if base_mime.startswith("audio/"):
        return "", codecs[0]
    if adaptive or len(codecs) == 1:
        return codecs[0], ""
    return codecs[0], codecs[1]


def _to_int(value, name: str) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"non-integral {name}: {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"invalid {name}: {value!r}")
    if number < 0:
        raise ValueError(f"negative {name}: {value!r}")
    return number


def _parse_itag(value) -> int:
    if value is None or value == "":
        raise ValueError("missing itag")
    # bools are ints in Python, reject them explicitly
    if isinstance(value, bool):
        raise ValueError(f"invalid itag: {value!r}")
    return _to_int(value, "itag")


def _parse_size(size: str) -> Tuple[int, int]:
    if not size:
        return 0, 0
    width, sep, height = size.partition("x")
    if not sep:
        raise ValueError(f"invalid size: {size!r}")
    return _to_int(width, "width"), _to_int(height, "height")


def decode_query_string(segment: str, adaptive: bool) -> StreamFormat:
    """Decode one URL-query-encoded stream map entry.

    Raises:
        ValueError: if the segment has no usable itag or a malformed field.
    """
    fields: Dict[str, str] = dict(parse_qsl(segment, keep_blank_values=True))
    itag = _parse_itag(fields.get("itag"))

    mime, container, codecs = parse_mime_type(fields.get("type", ""))
    video_codec, audio_codec = _split_codecs(mime, codecs, adaptive)
    width, height = _parse_size(fields.get("size", ""))

    url = fields.get("url", "")
    cipher = ""
    if "s" in fields:
        # the url is only usable once the signature is descrambled
        cipher = segment
        url = ""
    elif url and fields.get("sig"):
        url = f"{url}&signature={fields['sig']}"

    return StreamFormat(
        itag=itag,
        adaptive=adaptive,
        url=url,
        signature_cipher=cipher,
        mime_type=mime,
        container=container,
        video_codec=video_codec,
        audio_codec=audio_codec,
        quality=fields.get("quality", ""),
        quality_label=fields.get("quality_label", ""),
        bitrate=_to_int(fields.get("bitrate"), "bitrate"),
        width=width,
        height=height,
        fps=_to_int(fields.get("fps"), "fps"),
        content_length=_to_int(fields.get("clen"), "clen"),
    )


def adapt_format_object(obj: Dict, adaptive: bool) -> StreamFormat:
    """Convert a player-response format object into a StreamFormat.

    Raises:
        ValueError: if the object has no usable itag or a malformed field.
    """
    if not isinstance(obj, dict):
        raise ValueError(f"format entry is not an object: {type(obj).__name__}")
    itag = _parse_itag(obj.get("itag"))

    mime, container, codecs = parse_mime_type(obj.get("mimeType", ""))
    video_codec, audio_codec = _split_codecs(mime, codecs, adaptive)

    url = obj.get("url") or ""
    cipher = ""
    if not url:
        cipher = obj.get("signatureCipher") or obj.get("cipher") or ""

    return StreamFormat(
        itag=itag,
        adaptive=adaptive,
        url=url,
        signature_cipher=cipher,
        mime_type=mime,
        container=container,
        video_codec=video_codec,
        audio_codec=audio_codec,
        quality=obj.get("quality", ""),
        quality_label=obj.get("qualityLabel", ""),
        bitrate=_to_int(obj.get("bitrate"), "bitrate"),
        width=_to_int(obj.get("width"), "width"),
        height=_to_int(obj.get("height"), "height"),
        fps=_to_int(obj.get("fps"), "fps"),
        content_length=_to_int(obj.get("contentLength"), "contentLength"),
        audio_sample_rate=_to_int(obj.get("audioSampleRate"), "audioSampleRate"),
        audio_channels=_to_int(obj.get("audioChannels"), "audioChannels"),
    )


def iter_stream_map(stream_map: str) -> Iterator[str]:
    """Yield the non-empty comma-separated segments of a legacy stream map."""
    for segment in stream_map.split(","):
        if segment:
            yield segment


class FormatListBuilder:
    """Accumulates formats from any source, keeping the first format seen per itag."""

    def __init__(self):
        self._formats: List[StreamFormat] = []
        self._itags = set()

    def __len__(self):
        return len(self._formats)

    def add(self, fmt: StreamFormat) -> bool:
        """Append a format unless its itag is already present."""
        if fmt.itag in self._itags:
            logger.debug(f"Dropping duplicate format itag={fmt.itag} (adaptive={fmt.adaptive})")
            return False
        self._itags.add(fmt.itag)
        self._formats.append(fmt)
        return True

    def add_stream_map(self, stream_map: Optional[str], adaptive: bool) -> int:
        """Decode and add every segment of a legacy stream map. Returns the number added."""
        added = 0
        for segment in iter_stream_map(stream_map or ""):
            try:
                fmt = decode_query_string(segment, adaptive)
            except ValueError as e:
                logger.debug(f"Skipping stream map entry: {e}")
                continue
            if self.add(fmt):
                added += 1
        return added

    def add_format_objects(self, objects: Optional[Iterable[Dict]], adaptive: bool) -> int:
        """Adapt and add player-response format objects. Returns the number added."""
        added = 0
        for obj in objects or []:
            try:
                fmt = adapt_format_object(obj, adaptive)
            except ValueError as e:
                logger.debug(f"Skipping format object: {e}")
                continue
            if self.add(fmt):
                added += 1
        return added

    def build(self) -> FormatList:
        return FormatList(self._formats)
