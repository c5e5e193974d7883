"""Tests for HttpTransport and SmartDownloader."""

import threading
from unittest.mock import MagicMock, patch

import pytest
import requests

from vidinfo.core.downloader import SmartDownloader
from vidinfo.core.errors import TransportError
from vidinfo.core.transport import HttpTransport


def fake_response(status_code=200, content=b"", headers=None, chunks=()):
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    response.headers = headers or {}
    response.iter_content.return_value = iter(chunks)
    response.__enter__.return_value = response
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(response=response)
    return response


class TestHttpTransport:
    """Tests for HttpTransport.get."""

    def test_session_headers(self, config):
        transport = HttpTransport(config)
        assert transport.session.headers["User-Agent"] == config.user_agent
        assert transport.session.headers["Accept-Language"] == "en"

    def test_returns_body(self, config):
        transport = HttpTransport(config)
        with patch.object(transport.session, "get", return_value=fake_response(content=b"ok")) as get:
            assert transport.get("https://x", params={"a": "1"}) == b"ok"
        get.assert_called_once_with("https://x", params={"a": "1"}, timeout=config.timeout)

    def test_non_2xx_raises(self, config):
        transport = HttpTransport(config)
        with patch.object(transport.session, "get", return_value=fake_response(status_code=404)):
            with pytest.raises(TransportError) as exc_info:
                transport.get("https://x")
        assert exc_info.value.status_code == 404

    def test_timeout_raises(self, config):
        transport = HttpTransport(config)
        with patch.object(transport.session, "get", side_effect=requests.Timeout("slow")):
            with pytest.raises(TransportError, match="timed out"):
                transport.get("https://x")

    def test_connection_error_raises(self, config):
        transport = HttpTransport(config)
        with patch.object(transport.session, "get", side_effect=requests.ConnectionError("refused")):
            with pytest.raises(TransportError):
                transport.get("https://x")

    def test_cancelled_request_is_not_sent(self, config):
        transport = HttpTransport(config)
        cancel = threading.Event()
        cancel.set()
        with patch.object(transport.session, "get") as get:
            with pytest.raises(TransportError, match="cancelled"):
                transport.get("https://x", cancel_event=cancel)
        get.assert_not_called()

    def test_retry_exhaustion_keeps_final_response(self, config):
        transport = HttpTransport(config)
        retries = transport.session.get_adapter("https://www.youtube.com").max_retries
        assert retries.total == config.max_retries
        assert retries.raise_on_status is False

    def test_server_error_keeps_status_code(self, config):
        transport = HttpTransport(config)
        with patch.object(transport.session, "get", return_value=fake_response(status_code=503)):
            with pytest.raises(TransportError) as exc_info:
                transport.get("https://x")
        assert exc_info.value.status_code == 503


class TestSmartDownloader:
    """Tests for SmartDownloader."""

    def test_writes_chunks_and_reports_progress(self, tmp_path):
        session = MagicMock()
        session.get.return_value = fake_response(headers={"content-length": "6"}, chunks=[b"abc", b"", b"def"])
        progress = MagicMock()
        output = tmp_path / "sub" / "video.mp4"

        written = SmartDownloader(session, "https://r/18", output, progress_callback=progress).start()

        assert written == 6
        assert output.read_bytes() == b"abcdef"
        progress.assert_called_with(100.0, 6, 6)

    def test_truncated_body_raises(self, tmp_path):
        session = MagicMock()
        session.get.return_value = fake_response(headers={"content-length": "10"}, chunks=[b"abc"])

        with pytest.raises(TransportError, match="incomplete"):
            SmartDownloader(session, "https://r/18", tmp_path / "v.mp4").start()

    def test_http_error_raises(self, tmp_path):
        session = MagicMock()
        session.get.return_value = fake_response(status_code=403)

        with pytest.raises(TransportError) as exc_info:
            SmartDownloader(session, "https://r/18", tmp_path / "v.mp4").start()
        assert exc_info.value.status_code == 403

    def test_stop_before_start_writes_nothing(self, tmp_path):
        session = MagicMock()
        session.get.return_value = fake_response(headers={"content-length": "3"}, chunks=[b"abc"])
        downloader = SmartDownloader(session, "https://r/18", tmp_path / "v.mp4")
        downloader.stop()

        assert downloader.start() == 0
        assert downloader.stopped
