"""Parsing of the structured player_response JSON."""

import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from .errors import MalformedResponse, VideoUnavailable

logger = logging.getLogger(__name__)

PUBLISH_DATE_FORMAT = "%Y-%m-%d"
PLAYABLE_STATUS = "OK"


def _section(data: Dict, key: str) -> Dict:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


@dataclass(frozen=True)
class PlayerResponse:
    """Read-only view over a decoded player response."""
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def playability_status(self) -> str:
        return str(_section(self.data, "playabilityStatus").get("status", ""))

    @property
    def playability_reason(self) -> str:
        return str(_section(self.data, "playabilityStatus").get("reason", ""))

    @property
    def streaming_data(self) -> Dict:
        return _section(self.data, "streamingData")

    @property
    def video_details(self) -> Dict:
        return _section(self.data, "videoDetails")

    @property
    def formats(self) -> List:
        value = self.streaming_data.get("formats")
        return value if isinstance(value, list) else []

    @property
    def adaptive_formats(self) -> List:
        value = self.streaming_data.get("adaptiveFormats")
        return value if isinstance(value, list) else []

    @property
    def dash_manifest_url(self) -> str:
        return str(self.streaming_data.get("dashManifestUrl") or "")

    @property
    def hls_manifest_url(self) -> str:
        return str(self.streaming_data.get("hlsManifestUrl") or "")

    @property
    def title(self) -> str:
        return str(self.video_details.get("title") or "")

    @property
    def uploader(self) -> str:
        return str(self.video_details.get("author") or "")

    @property
    def keywords(self) -> Tuple[str, ...]:
        value = self.video_details.get("keywords")
        if not isinstance(value, list):
            return ()
        return tuple(str(k) for k in value)

    @property
    def duration(self) -> Optional[timedelta]:
        """Video length, or None if lengthSeconds is missing or not a count of seconds."""
        seconds = self.video_details.get("lengthSeconds")
        if seconds is None or seconds == "" or isinstance(seconds, bool):
            return None
        try:
            value = int(seconds)
        except (TypeError, ValueError):
            logger.debug(f"Ignoring non-numeric lengthSeconds {seconds!r}")
            return None
        if value < 0:
            logger.debug(f"Ignoring negative lengthSeconds {seconds!r}")
            return None
        return timedelta(seconds=value)

    @property
    def publish_date_text(self) -> str:
        renderer = _section(_section(self.data, "microformat"), "playerMicroformatRenderer")
        return str(renderer.get("publishDate") or "")

    @property
    def published(self) -> Optional[date]:
        text = self.publish_date_text
        try:
            return datetime.strptime(text, PUBLISH_DATE_FORMAT).date()
        except ValueError as e:
            logger.debug(f"Unable to parse date published {text!r}: {e}")
            return None


def parse_player_response(raw: Optional[str]) -> Optional[PlayerResponse]:
    """Decode a player_response string.

    Returns None when raw is empty.

    Raises:
        MalformedResponse: if raw is present but is not a JSON object.
    """
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as e:
        raise MalformedResponse(f"Couldn't parse player response: {e}") from e
    if not isinstance(data, dict):
        raise MalformedResponse("Couldn't parse player response: not a JSON object")
    return PlayerResponse(data)


def check_playability(response: PlayerResponse):
    """Raise VideoUnavailable unless the response reports the video as playable."""
    if response.playability_status != PLAYABLE_STATUS:
        raise VideoUnavailable(response.playability_reason or response.playability_status or "unknown")
