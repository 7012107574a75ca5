"""Chopro files served over HTTP(S).

Plain-text responses are used as they are.  HTML pages are common for song
collections on the web; for those the text of the ``<pre>`` blocks is taken
as the chopro source, or the whole page text when there are none.
"""

import httpx
from bs4 import BeautifulSoup

from ..exceptions import FetchError
from .base import SongSource


class HttpSource(SongSource):
    """Fetches chopro files from ``http://`` and ``https://`` URLs."""

    @classmethod
    def can_handle(cls, location: str) -> bool:
        return location.startswith(("http://", "https://"))

    def fetch(self, location: str) -> str:
        try:
            resp = httpx.get(location, follow_redirects=True, timeout=15)
        except httpx.RequestError as exc:
            raise FetchError(location, 0) from exc
        if resp.status_code != 200:
            raise FetchError(location, resp.status_code)
        if "html" in resp.headers.get("content-type", ""):
            return _pre_text(resp.text)
        return resp.text


def _pre_text(html: str) -> str:
    """Return the text of all ``<pre>`` blocks in *html*, one after the other."""
    soup = BeautifulSoup(html, "html.parser")
    blocks = soup.find_all("pre")
    if not blocks:
        return soup.get_text()
    return "\n".join(block.get_text() for block in blocks)
