"""Best-effort metadata scraped from the ytInitialData blob of a watch page."""

import json
import logging
import re
from collections import deque
from dataclasses import dataclass
from typing import Generator, List, Tuple

logger = logging.getLogger(__name__)

INITIAL_DATA_PATTERN = re.compile(rb'\["ytInitialData"\] = (.+);')

# Row labels mapped to PageMetadata fields
METADATA_ROW_FIELDS = {
    "Artist": "artist",
    "Song": "song",
    "Album": "album",
    "Writers": "writers",
}


@dataclass(frozen=True)
class PageMetadata:
    description: str = ""
    song: str = ""
    artist: str = ""
    album: str = ""
    writers: str = ""
    issues: Tuple[str, ...] = ()


def search_dict(partial, search_key: str) -> Generator:
    """Breadth-first search yielding every value stored under search_key."""
    queue = deque([partial])
    while queue:
        current_item = queue.popleft()
        if isinstance(current_item, dict):
            for key, value in current_item.items():
                if key == search_key:
                    yield value
                else:
                    queue.append(value)
        elif isinstance(current_item, list):
            queue.extend(current_item)


def text_of(node) -> str:
    """Concatenate the text of a simpleText / runs node."""
    if isinstance(node, str):
        return node
    if not isinstance(node, dict):
        return ""
    if "simpleText" in node:
        return str(node["simpleText"])
    return "".join(str(run.get("text", "")) for run in node.get("runs", []) if isinstance(run, dict))


def _description(data) -> str:
    for renderer in search_dict(data, "videoSecondaryInfoRenderer"):
        if isinstance(renderer, dict) and "description" in renderer:
            return "".join(str(t) for t in search_dict(renderer["description"], "text"))
    return ""


def _metadata_rows(data) -> List[Tuple[str, str]]:
    rows = []
    for container in search_dict(data, "metadataRowContainer"):
        for renderer in search_dict(container, "metadataRowRenderer"):
            if not isinstance(renderer, dict):
                continue
            contents = renderer.get("contents") or [{}]
            rows.append((text_of(renderer.get("title")), text_of(contents[0])))
    return rows


def extract_page_metadata(html: bytes) -> PageMetadata:
    """Extract description and music metadata rows. Never raises."""
    match = INITIAL_DATA_PATTERN.search(html)
    if not match:
        logger.debug("No ytInitialData found in page")
        return PageMetadata(issues=("initial data not found",))

    try:
        data = json.loads(match.group(1))
    except (ValueError, RecursionError) as e:
        logger.debug(f"Unable to parse metadata rows: {e}")
        return PageMetadata(issues=(f"initial data unreadable: {e}",))

    values = {}
    issues = []
    try:
        description = _description(data)
        for label, value in _metadata_rows(data):
            if label in METADATA_ROW_FIELDS:
                values[METADATA_ROW_FIELDS[label]] = value
    except (AttributeError, TypeError, IndexError, KeyError, RecursionError) as e:
        logger.debug(f"Unable to parse metadata rows: {e}")
        return PageMetadata(issues=(f"metadata rows unreadable: {e}",))

    if not description:
        logger.debug("No description found in initial data")
        issues.append("description not found")
    if not values:
        issues.append("metadata rows not found")
    return PageMetadata(description=description, issues=tuple(issues), **values)
