"""Drawing surface used by the layout engine.

:class:`Canvas` is the small set of drawing operations the layout needs;
:class:`PdfCanvas` implements it with reportlab.  Tests substitute a
recording canvas.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas as rl_canvas

from .pagedim import PageDim


@dataclass(frozen=True)
class TextState:
    """Text rendering parameters applied to every string drawn."""

    rise: float = 0.0
    char_space: float = 0.0
    word_space: float = 0.0
    gray: float = 0.0  # 0 is black


class Canvas(ABC):
    """Abstract drawing surface, one page at a time."""

    def __init__(self):
        self._states = [TextState()]

    @property
    def state(self) -> TextState:
        return self._states[-1]

    @contextmanager
    def text_state(self, **changes) -> Iterator[TextState]:
        """Temporarily change rise, char_space, word_space or gray."""
        self._states.append(replace(self.state, **changes))
        try:
            yield self.state
        finally:
            self._states.pop()

    @abstractmethod
    def begin_page(self, page: PageDim) -> None:
        """Start drawing on a new page of *page*'s size."""

    @abstractmethod
    def end_page(self) -> None:
        """Finish the current page."""

    @abstractmethod
    def line(self, x1: float, y1: float, x2: float, y2: float, width: float = 0.3) -> None:
        """Stroke a straight line."""

    @abstractmethod
    def circle(self, x: float, y: float, radius: float, fill: bool = False) -> None:
        """Stroke (or fill) a circle centred on ``(x, y)``."""

    @abstractmethod
    def text(self, x: float, y: float, text: str, font: str, size: float) -> None:
        """Draw *text* with its baseline starting at ``(x, y)``."""

    @abstractmethod
    def text_width(self, text: str, font: str, size: float) -> float:
        """Return the printed width of *text*, in page units."""

    @abstractmethod
    def bookmark(self, title: str) -> None:
        """Add a navigation entry for *title* pointing at the current page."""


class PdfCanvas(Canvas):
    """A :class:`Canvas` writing a PDF file through reportlab."""

    def __init__(self, path: str, title: str | None = None, author: str | None = None):
        super().__init__()
        self._canvas = rl_canvas.Canvas(path)
        if title:
            self._canvas.setTitle(title)
        if author:
            self._canvas.setAuthor(author)
        self._bookmarks = 0

    def begin_page(self, page: PageDim) -> None:
        self._canvas.setPageSize((page.width, page.height))

    def end_page(self) -> None:
        self._canvas.showPage()

    def line(self, x1, y1, x2, y2, width=0.3):
        self._canvas.setLineWidth(width)
        self._canvas.line(x1, y1, x2, y2)

    def circle(self, x, y, radius, fill=False):
        self._canvas.setLineWidth(0.3)
        self._canvas.circle(x, y, radius, stroke=1, fill=int(fill))

    def text(self, x, y, text, font, size):
        state = self.state
        obj = self._canvas.beginText(x, y)
        obj.setFont(font, size)
        obj.setRise(state.rise)
        obj.setCharSpace(state.char_space)
        obj.setWordSpace(state.word_space)
        obj.setFillGray(state.gray)
        obj.textOut(text)
        self._canvas.drawText(obj)

    def text_width(self, text, font, size):
        return pdfmetrics.stringWidth(text, font, size)

    def bookmark(self, title):
        self._bookmarks += 1
        key = f"song-{self._bookmarks}"
        self._canvas.bookmarkPage(key)
        self._canvas.addOutlineEntry(title, key, level=0)

    def save(self) -> None:
        self._canvas.save()
