"""Extraction pipeline turning a watch page into a VideoInfo.

The pipeline runs a fixed sequence of steps::

    START -> METADATA_EXTRACTED -> CONFIG_RESOLVED -> PLAYABILITY_CHECKED
          -> FORMATS_BUILT -> RESPONSE_PARSED -> DONE

Page metadata is best effort. The player configuration comes from the page's
embedded ``ytplayer.config`` or, when the page has none, from one request to
the ``get_video_info`` endpoint. A ``fail`` status in the configuration or a
non-``OK`` playability status in the player response aborts extraction with
:class:`VideoUnavailable`; undecodable structured payloads abort with
:class:`MalformedResponse`. Nothing partial is ever returned on those paths.

Formats are collected in this order, keeping the first format seen per itag:
legacy muxed map, legacy adaptive map, player response ``formats``, player
response ``adaptiveFormats``.
"""

import logging
import threading
from datetime import date, timedelta
from enum import Enum
from typing import List, Optional

from ..utils.config import Config
from .formats import FormatListBuilder
from .models import VideoInfo
from .page_metadata import PageMetadata, extract_page_metadata
from .player_config import (
    PlayerConfiguration,
    check_status,
    extract_legacy_config,
    fetch_video_info_config,
)
from .player_response import PlayerResponse, check_playability, parse_player_response
from .transport import HttpTransport

logger = logging.getLogger(__name__)


class ExtractionState(Enum):
    START = "start"
    METADATA_EXTRACTED = "metadata_extracted"
    CONFIG_RESOLVED = "config_resolved"
    PLAYABILITY_CHECKED = "playability_checked"
    FORMATS_BUILT = "formats_built"
    RESPONSE_PARSED = "response_parsed"
    DONE = "done"


class _Run:
    """Per-call working state. Never shared between extractions."""

    def __init__(self, video_id: str, html: bytes, cancel_event: Optional[threading.Event]):
        self.video_id = video_id
        self.html = html
        self.cancel_event = cancel_event
        self.state = ExtractionState.START
        self.metadata = PageMetadata()
        self.config: Optional[PlayerConfiguration] = None
        self.response: Optional[PlayerResponse] = None
        self.formats = FormatListBuilder()
        self.duration: Optional[timedelta] = None
        self.published: Optional[date] = None
        self.issues: List[str] = []

    def advance(self, state: ExtractionState):
        logger.debug(f"[{self.video_id}] {self.state.value} -> {state.value}")
        self.state = state


class ExtractionPipeline:
    """Runs the extraction steps for one video at a time."""

    def __init__(self, transport: Optional[HttpTransport] = None, config: Optional[Config] = None):
        self.config = config or (transport.config if transport else Config())
        self.transport = transport or HttpTransport(self.config)

    def extract(self, video_id: str, html: bytes,
                cancel_event: Optional[threading.Event] = None) -> VideoInfo:
        """Extract a VideoInfo from the watch page of video_id.

        Raises:
            ConfigUnavailable: no embedded config and the video info request failed.
            VideoUnavailable: the provider reports the video as unplayable.
            MalformedResponse: an embedded JSON payload could not be decoded.
        """
        run = _Run(video_id, html, cancel_event)
        self.extract_metadata(run)
        self.resolve_config(run)
        self.check_config_status(run)
        self.build_formats(run)
        self.parse_response(run)
        return self.finish(run)

    def extract_metadata(self, run: _Run):
        run.metadata = extract_page_metadata(run.html)
        run.issues.extend(run.metadata.issues)
        run.advance(ExtractionState.METADATA_EXTRACTED)

    def resolve_config(self, run: _Run):
        config = extract_legacy_config(run.html)
        if config is None:
            config = fetch_video_info_config(self.transport, run.video_id,
                                             config=self.config, cancel_event=run.cancel_event)
        run.config = config
        run.advance(ExtractionState.CONFIG_RESOLVED)

    def check_config_status(self, run: _Run):
        check_status(run.config)
        run.advance(ExtractionState.PLAYABILITY_CHECKED)

    def build_formats(self, run: _Run):
        run.formats.add_stream_map(run.config.stream_map, adaptive=False)
        run.formats.add_stream_map(run.config.adaptive_stream_map, adaptive=True)
        run.advance(ExtractionState.FORMATS_BUILT)

    def parse_response(self, run: _Run):
        response = parse_player_response(run.config.player_response)
        if response is None:
            logger.debug("Unable to extract player response JSON")
            run.issues.append("player response not found")
        else:
            check_playability(response)
            run.formats.add_format_objects(response.formats, adaptive=False)
            run.formats.add_format_objects(response.adaptive_formats, adaptive=True)
            run.duration = response.duration
            run.published = response.published
            if run.duration is None:
                run.issues.append("duration not found")
            if run.published is None:
                run.issues.append("publish date not found")
        run.response = response
        run.advance(ExtractionState.RESPONSE_PARSED)

    def finish(self, run: _Run) -> VideoInfo:
        formats = run.formats.build()
        if not formats:
            logger.warning(f"No formats found for video {run.video_id}")
            run.issues.append("no formats found")

        response = run.response or PlayerResponse()
        metadata = run.metadata
        info = VideoInfo(
            id=run.video_id,
            title=response.title,
            description=metadata.description,
            uploader=response.uploader,
            published=run.published,
            duration=run.duration,
            song=metadata.song,
            artist=metadata.artist,
            album=metadata.album,
            writers=metadata.writers,
            keywords=response.keywords,
            formats=formats,
            dash_manifest_url=response.dash_manifest_url or run.config.dash_manifest_url,
            hls_manifest_url=response.hls_manifest_url,
            player_script=run.config.player_script,
            issues=tuple(run.issues),
        )
        run.advance(ExtractionState.DONE)
        return info
