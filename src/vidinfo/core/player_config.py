"""Player configuration: embedded ytplayer.config or the get_video_info endpoint."""

import json
import logging
import re
import threading
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import parse_qs

from ..utils.config import Config
from .errors import ConfigUnavailable, MalformedResponse, TransportError, VideoUnavailable
from .transport import HttpTransport

logger = logging.getLogger(__name__)

PLAYER_CONFIG_PATTERN = re.compile(rb"ytplayer\.config = (.*?);ytplayer\.")

FAIL_STATUS = "fail"

# get_video_info keys and the PlayerConfiguration fields they fill
QUERY_FIELDS = {
    "errorcode": "error_code",
    "reason": "reason",
    "status": "status",
    "player_response": "player_response",
    "url_encoded_fmt_stream_map": "stream_map",
    "adaptive_fmts": "adaptive_stream_map",
    "dashmpd": "dash_manifest_url",
}


def _str(value) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


@dataclass(frozen=True)
class PlayerConfiguration:
    """Raw player arguments, from whichever source supplied them."""
    status: str = ""
    error_code: str = ""
    reason: str = ""
    player_response: str = ""
    stream_map: str = ""
    adaptive_stream_map: str = ""
    dash_manifest_url: str = ""
    player_script: str = ""
    source: str = ""

    @classmethod
    def from_embedded_json(cls, config: Dict) -> "PlayerConfiguration":
        """Build from a decoded ytplayer.config object ({"args": {...}, "assets": {...}})."""
        if not isinstance(config, dict):
            raise MalformedResponse("Player config is not a JSON object")
        args = config.get("args") or {}
        assets = config.get("assets") or {}
        if not isinstance(args, dict) or not isinstance(assets, dict):
            raise MalformedResponse("Player config has unexpected args/assets shape")

        player_response = args.get("player_response")
        if isinstance(player_response, dict):
            # newer pages embed the object instead of a JSON string
            player_response = json.dumps(player_response)

        return cls(
            status=_str(args.get("status")),
            error_code=_str(args.get("errorcode")),
            reason=_str(args.get("reason")),
            player_response=_str(player_response),
            stream_map=_str(args.get("url_encoded_fmt_stream_map")),
            adaptive_stream_map=_str(args.get("adaptive_fmts")),
            dash_manifest_url=_str(args.get("dashmpd")),
            player_script=_str(assets.get("js")),
            source="embedded",
        )

    @classmethod
    def from_query_body(cls, body: str) -> "PlayerConfiguration":
        """Build from a URL-query-encoded get_video_info body."""
        values = {}
        for key, items in parse_qs(body, keep_blank_values=True).items():
            field_name = QUERY_FIELDS.get(key)
            if field_name:
                values[field_name] = items[0]
        return cls(source="video_info", **values)


def extract_legacy_config(html: bytes) -> Optional[PlayerConfiguration]:
    """Find the embedded ytplayer.config object.

    Returns None when the page carries no such object.

    Raises:
        MalformedResponse: if the object is present but not valid JSON.
    """
    match = PLAYER_CONFIG_PATTERN.search(html)
    if not match:
        logger.debug("Unable to extract json from default url, trying video info endpoint")
        return None
    try:
        config = json.loads(match.group(1))
    except (ValueError, RecursionError) as e:
        raise MalformedResponse(f"Couldn't parse embedded player config: {e}") from e
    return PlayerConfiguration.from_embedded_json(config)


def fetch_video_info_config(transport: HttpTransport, video_id: str,
                            config: Optional[Config] = None,
                            cancel_event: Optional[threading.Event] = None) -> PlayerConfiguration:
    """Request the legacy get_video_info endpoint and parse its body.

    Raises:
        ConfigUnavailable: if the request fails, is cancelled or times out.
    """
    config = config or transport.config
    params = {
        "video_id": video_id,
        "eurl": config.eurl_base + video_id,
    }
    try:
        body = transport.get(config.video_info_url, params=params, cancel_event=cancel_event)
    except TransportError as e:
        raise ConfigUnavailable(f"Unable to read video info: {e}") from e

    return PlayerConfiguration.from_query_body(body.decode("utf-8", errors="replace"))


def check_status(config: PlayerConfiguration):
    """Raise VideoUnavailable if the configuration reports a failure status."""
    if config.status == FAIL_STATUS:
        raise VideoUnavailable(config.reason, code=config.error_code)
