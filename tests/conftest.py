"""
Pytest configuration and shared fixtures
"""

import pytest

from chordcharts.canvas import Canvas
from chordcharts.chords import Instrument
from chordcharts.layout import Renderer
from chordcharts.pagedim import PageDim


class RecordingCanvas(Canvas):
    """Canvas that remembers every call, grouped by page."""

    def __init__(self):
        super().__init__()
        self.calls: list[dict] = []
        self.pages: list[list[dict]] = []

    def _record(self, op, **kwargs):
        call = {"op": op, "state": self.state, **kwargs}
        self.calls.append(call)
        if self.pages:
            self.pages[-1].append(call)

    def begin_page(self, page):
        self.pages.append([])
        self._record("begin_page", page=page)

    def end_page(self):
        self._record("end_page")

    def line(self, x1, y1, x2, y2, width=0.3):
        self._record("line", x1=x1, y1=y1, x2=x2, y2=y2, width=width)

    def circle(self, x, y, radius, fill=False):
        self._record("circle", x=x, y=y, radius=radius, fill=fill)

    def text(self, x, y, text, font, size):
        self._record("text", x=x, y=y, text=text, font=font, size=size)

    def text_width(self, text, font, size):
        return 0.5 * size * len(text)

    def bookmark(self, title):
        self._record("bookmark", title=title)

    # --- Query helpers for tests ---

    def ops(self, op, page=None):
        calls = self.calls if page is None else self.pages[page]
        return [c for c in calls if c["op"] == op]

    def texts(self, font=None, page=None):
        return [c["text"] for c in self.ops("text", page) if font is None or c["font"] == font]


@pytest.fixture
def canvas():
    return RecordingCanvas()


@pytest.fixture
def renderer(canvas):
    return Renderer(canvas, Instrument.GUITAR, base_size=14.0)


@pytest.fixture
def page():
    return PageDim.a4(landscape=False)
