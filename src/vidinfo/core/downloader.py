"""Streaming download of a resolved format URL to a file."""

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

import requests

from .errors import TransportError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 64


class SmartDownloader:
    """Streams a URL into a file, reporting progress and honoring stop()."""

    def __init__(self, session: requests.Session, url: str, output_path: Path,
                 progress_callback: Optional[Callable[[float, int, int], None]] = None,
                 timeout: float = 60):
        self.session = session
        self.url = url
        self.output_path = Path(output_path)
        self.progress_callback = progress_callback
        self.timeout = timeout

        self._stop_event = threading.Event()
        self._downloaded_bytes = 0
        self._total_bytes = 0

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def start(self) -> int:
        """Download the file. Returns the number of bytes written.

        Raises:
            TransportError: on a failed request or a truncated body.
        """
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self.session.get(self.url, stream=True, timeout=self.timeout) as r:
                r.raise_for_status()

                content_length = r.headers.get('content-length')
                if content_length and content_length.isdigit():
                    self._total_bytes = int(content_length)

                with open(self.output_path, 'wb') as f:
                    for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                        if self._stop_event.is_set():
                            logger.info(f"Download of {self.output_path.name} stopped")
                            break
                        if chunk:
                            f.write(chunk)
                            self._downloaded_bytes += len(chunk)
                            self._report_progress(self._downloaded_bytes)
        except requests.RequestException as e:
            raise TransportError(f"Download failed: {e}",
                                 status_code=getattr(e.response, "status_code", None)) from e

        if not self.stopped and self._total_bytes and self._downloaded_bytes < self._total_bytes:
            raise TransportError(
                f"Download incomplete: Expected {self._total_bytes}, got {self._downloaded_bytes}")
        return self._downloaded_bytes

    def _report_progress(self, current: int):
        if self.progress_callback and self._total_bytes > 0:
            percent = (current / self._total_bytes) * 100
            self.progress_callback(percent, current, self._total_bytes)

    def stop(self):
        """Stop the download."""
        self._stop_event.set()
