"""Configuration management."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULTS: Dict[str, Any] = {
    "watch_url": "https://www.youtube.com/watch",
    "video_info_url": "https://www.youtube.com/get_video_info",
    "eurl_base": "https://youtube.googleapis.com/v/",
    "thumbnail_url": "http://img.youtube.com/vi/{id}/{quality}.jpg",
    "user_agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/114.0.0.0 Safari/537.36"
    ),
    "accept_language": "en",
    "timeout": 30.0,
    "max_retries": 0,
}


class Config:
    """Extraction settings, loaded from an optional JSON file over built-in defaults."""

    def __init__(self, config_file: Optional[Path] = None, **overrides):
        if config_file is None:
            config_file = Path.home() / "vidinfo_settings.json"
        self.file = Path(config_file)
        self.data: Dict[str, Any] = dict(DEFAULTS)
        self.load()
        self.data.update(overrides)

    def load(self):
        """Merge settings from the config file, if it exists."""
        if not self.file.exists():
            return
        try:
            with open(self.file, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable config file {self.file}: {e}")
            return
        if not isinstance(loaded, dict):
            logger.warning(f"Ignoring config file {self.file}: expected a JSON object")
            return
        self.data.update({k: v for k, v in loaded.items() if k in DEFAULTS})

    def save(self):
        """Write the current settings to the config file."""
        self.file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.file, "w", encoding="utf-8") as f:
            json.dump(self.data, f, indent=2)

    @property
    def watch_url(self) -> str:
        return self.data["watch_url"]

    @property
    def video_info_url(self) -> str:
        return self.data["video_info_url"]

    @property
    def eurl_base(self) -> str:
        return self.data["eurl_base"]

    @property
    def thumbnail_url(self) -> str:
        return self.data["thumbnail_url"]

    @property
    def user_agent(self) -> str:
        return self.data["user_agent"]

    @property
    def accept_language(self) -> str:
        return self.data["accept_language"]

    @property
    def timeout(self) -> float:
        """Per-request timeout in seconds."""
        try:
            return float(self.data["timeout"])
        except (TypeError, ValueError):
            return DEFAULTS["timeout"]

    @property
    def max_retries(self) -> int:
        try:
            return max(0, int(self.data["max_retries"]))
        except (TypeError, ValueError):
            return DEFAULTS["max_retries"]
