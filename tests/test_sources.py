from unittest.mock import MagicMock, patch

import httpx
import pytest

from chordcharts.exceptions import FetchError, SourceError, UnsupportedSourceError
from chordcharts.registry import get_source
from chordcharts.sources.http import HttpSource
from chordcharts.sources.local import LocalFileSource

TEST_URL = "https://example.com/songs/home-again.chopro"


def _response(text, status_code=200, content_type="text/plain; charset=utf-8"):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    resp.headers = {"content-type": content_type}
    return resp


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


def test_registry_http_url():
    assert isinstance(get_source(TEST_URL), HttpSource)


def test_registry_local_path():
    assert isinstance(get_source("songs/home-again.chopro"), LocalFileSource)


def test_registry_unsupported_scheme():
    with pytest.raises(UnsupportedSourceError):
        get_source("ftp://example.com/song.chopro")


# ---------------------------------------------------------------------------
# Local files
# ---------------------------------------------------------------------------


def test_local_read_lines(tmp_path):
    song = tmp_path / "song.chopro"
    song.write_text("{title: Home}\n[Am]Home\n", encoding="utf-8")
    assert LocalFileSource().read_lines(str(song)) == ["{title: Home}", "[Am]Home"]


def test_local_missing_file(tmp_path):
    with pytest.raises(SourceError) as info:
        LocalFileSource().fetch(str(tmp_path / "nope.chopro"))
    assert "nope.chopro" in str(info.value)


def test_local_not_utf8(tmp_path):
    song = tmp_path / "latin1.chopro"
    song.write_bytes("{title: Café}".encode("latin-1"))
    with pytest.raises(SourceError):
        LocalFileSource().fetch(str(song))


def test_local_skips_byte_order_mark(tmp_path):
    song = tmp_path / "bom.chopro"
    song.write_text("{title: Home}\n", encoding="utf-8-sig")
    assert LocalFileSource().read_lines(str(song)) == ["{title: Home}"]


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


def test_http_plain_text():
    with patch("chordcharts.sources.http.httpx.get", return_value=_response("{t: X}\n[G]y")):
        assert HttpSource().read_lines(TEST_URL) == ["{t: X}", "[G]y"]


def test_http_html_pre_blocks():
    html = "<html><body><h1>Song</h1><pre>{t: X}\n[G]y</pre></body></html>"
    with patch("chordcharts.sources.http.httpx.get",
               return_value=_response(html, content_type="text/html")):
        assert HttpSource().read_lines(TEST_URL) == ["{t: X}", "[G]y"]


def test_http_html_without_pre():
    html = "<html><body><p>[G]y</p></body></html>"
    with patch("chordcharts.sources.http.httpx.get",
               return_value=_response(html, content_type="text/html")):
        assert HttpSource().fetch(TEST_URL) == "[G]y"


def test_http_status_error():
    with patch("chordcharts.sources.http.httpx.get", return_value=_response("", 404)):
        with pytest.raises(FetchError) as info:
            HttpSource().fetch(TEST_URL)
    assert info.value.status_code == 404
    assert info.value.url == TEST_URL


def test_http_request_error():
    with patch("chordcharts.sources.http.httpx.get", side_effect=httpx.ConnectError("down")):
        with pytest.raises(FetchError) as info:
            HttpSource().fetch(TEST_URL)
    assert info.value.status_code == 0


def test_fetch_error_is_source_error():
    assert isinstance(FetchError(TEST_URL, 500), SourceError)
