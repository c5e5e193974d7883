"""HTTP transport shared by page fetches, the video info endpoint and downloads."""

import logging
import threading
from typing import Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..utils.config import Config
from .errors import TransportError

logger = logging.getLogger(__name__)


class HttpTransport:
    """Blocking GET requests over a configured requests session."""

    def __init__(self, config: Optional[Config] = None, session: Optional[requests.Session] = None):
        self.config = config or Config()
        self.session = session or self._build_session()

    def _build_session(self) -> requests.Session:
        session = requests.Session()
        retries = Retry(total=self.config.max_retries, backoff_factor=1,
                        status_forcelist=[500, 502, 503, 504], raise_on_status=False)
        session.mount('https://', HTTPAdapter(max_retries=retries))
        session.mount('http://', HTTPAdapter(max_retries=retries))
        session.headers["User-Agent"] = self.config.user_agent
        session.headers["Accept-Language"] = self.config.accept_language
        session.cookies.set("CONSENT", "YES+cb", domain=".youtube.com")
        return session

    def get(self, url: str, params: Optional[Dict[str, str]] = None,
            cancel_event: Optional[threading.Event] = None) -> bytes:
        """Fetch a URL and return the body.

        Raises:
            TransportError: on cancellation, timeout, connection failure or a non-2xx status.
        """
        if cancel_event is not None and cancel_event.is_set():
            raise TransportError(f"Request to {url} cancelled")

        logger.debug(f"GET {url} params={params}")
        try:
            response = self.session.get(url, params=params, timeout=self.config.timeout)
        except requests.Timeout as e:
            raise TransportError(f"Request to {url} timed out") from e
        except requests.RequestException as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise TransportError(f"Unexpected status code {response.status_code} from {url}",
                                 status_code=response.status_code)

        if cancel_event is not None and cancel_event.is_set():
            raise TransportError(f"Request to {url} cancelled")
        return response.content

    def close(self):
        self.session.close()
