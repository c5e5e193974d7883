"""Tests for YouTubeClient and video id extraction."""

from unittest.mock import MagicMock, patch

import pytest

from vidinfo.core.errors import DownloadUrlUnavailable, IdentifierMissing
from vidinfo.core.models import StreamFormat, ThumbnailQuality, VideoInfo
from vidinfo.core.youtube_client import YouTubeClient, extract_video_id

from pages import VIDEO_ID, stream_map, watch_page


@pytest.fixture
def client(transport, config):
    return YouTubeClient(config=config, transport=transport)


class TestExtractVideoId:
    """Tests for extract_video_id."""

    @pytest.mark.parametrize("url", [
        f"https://www.youtube.com/watch?v={VIDEO_ID}",
        f"https://youtube.com/watch?feature=share&v={VIDEO_ID}",
        f"https://m.youtube.com/watch?v={VIDEO_ID}&t=42",
        f"https://www.youtube.com/embed/{VIDEO_ID}",
        f"https://youtu.be/{VIDEO_ID}",
    ])
    def test_recognized_shapes(self, url):
        assert extract_video_id(url) == VIDEO_ID

    @pytest.mark.parametrize("url", [
        "https://www.youtube.com/channel/UC123",
        "https://youtu.be/",
        "https://vimeo.com/watch?v=123",
        "https://www.youtube.com/watch",
    ])
    def test_unrecognized_shapes(self, url):
        assert extract_video_id(url) == ""


class TestGetVideoInfo:
    """Tests for page fetching and pipeline dispatch."""

    def test_fetches_watch_page(self, client, transport):
        config = {"args": {"url_encoded_fmt_stream_map": stream_map({"itag": "18", "url": "https://r/18"})}}
        transport.get.return_value = watch_page(config=config)

        info = client.get_video_info(f"https://youtu.be/{VIDEO_ID}")

        assert info.id == VIDEO_ID
        assert [f.itag for f in info.formats] == [18]
        url = transport.get.call_args.args[0]
        params = transport.get.call_args.kwargs["params"]
        assert url == "https://www.youtube.com/watch"
        assert params["v"] == VIDEO_ID
        assert params["hl"] == "en"

    def test_bare_id(self, client):
        with patch.object(client, "get_video_info_from_id") as from_id:
            client.get_video_info(VIDEO_ID)
        from_id.assert_called_once_with(VIDEO_ID, None)

    def test_unrecognized_url(self, client, transport):
        with pytest.raises(IdentifierMissing):
            client.get_video_info("https://example.com/video/1")
        transport.get.assert_not_called()

    def test_empty_id(self, client):
        with pytest.raises(IdentifierMissing):
            client.get_video_info("")


class TestUrls:
    """Tests for thumbnail and download URL resolution."""

    def test_thumbnail_url(self, client):
        info = VideoInfo(id=VIDEO_ID)
        assert client.thumbnail_url(info) == f"http://img.youtube.com/vi/{VIDEO_ID}/default.jpg"
        assert client.thumbnail_url(info, ThumbnailQuality.MAX_RES) == \
            f"http://img.youtube.com/vi/{VIDEO_ID}/maxresdefault.jpg"

    def test_direct_url(self, client):
        fmt = StreamFormat(itag=18, adaptive=False, url="https://r/18")
        assert client.get_download_url(VideoInfo(id=VIDEO_ID), fmt) == "https://r/18"

    def test_ciphered_url_uses_resolver(self, transport, config):
        resolver = MagicMock(return_value="https://r/18?sig=ok")
        client = YouTubeClient(config=config, transport=transport, signature_resolver=resolver)
        fmt = StreamFormat(itag=18, adaptive=False, signature_cipher="s=abc&url=https%3A%2F%2Fr")
        info = VideoInfo(id=VIDEO_ID, player_script="/s/player/abc/base.js")

        assert client.get_download_url(info, fmt) == "https://r/18?sig=ok"
        resolver.assert_called_once_with(fmt, "/s/player/abc/base.js")

    def test_ciphered_url_without_resolver(self, client):
        fmt = StreamFormat(itag=18, adaptive=False, signature_cipher="s=abc")
        with pytest.raises(DownloadUrlUnavailable):
            client.get_download_url(VideoInfo(id=VIDEO_ID, player_script="/js"), fmt)

    def test_ciphered_url_without_player_script(self, transport, config):
        client = YouTubeClient(config=config, transport=transport, signature_resolver=MagicMock())
        fmt = StreamFormat(itag=18, adaptive=False, signature_cipher="s=abc")
        with pytest.raises(DownloadUrlUnavailable):
            client.get_download_url(VideoInfo(id=VIDEO_ID), fmt)

    def test_no_url_at_all(self, client):
        with pytest.raises(DownloadUrlUnavailable):
            client.get_download_url(VideoInfo(id=VIDEO_ID), StreamFormat(itag=18, adaptive=False))

    def test_download_streams_resolved_url(self, client, tmp_path):
        fmt = StreamFormat(itag=18, adaptive=False, url="https://r/18")
        with patch("vidinfo.core.youtube_client.SmartDownloader") as downloader_cls:
            downloader_cls.return_value.start.return_value = 42
            written = client.download(VideoInfo(id=VIDEO_ID), fmt, tmp_path / "out.mp4")

        assert written == 42
        assert downloader_cls.call_args.args[1] == "https://r/18"
