"""Page geometry for A4 pages, with duplex-aware margins."""

from dataclasses import dataclass, replace

A4_PORTRAIT = (596.0, 842.0)
A4_LANDSCAPE = (842.0, 596.0)


@dataclass(frozen=True)
class PageDim:
    width: float
    height: float
    pageno: int = 1
    is_duplex: bool = False
    show_pageno: bool = True

    @classmethod
    def a4(cls, landscape: bool, pageno: int = 1, is_duplex: bool = False,
           show_pageno: bool = True) -> "PageDim":
        width, height = A4_LANDSCAPE if landscape else A4_PORTRAIT
        return cls(width, height, pageno, is_duplex, show_pageno)

    def next(self) -> "PageDim":
        return replace(self, pageno=self.pageno + 1)

    def is_verso(self) -> bool:
        """A page is verso (left hand, back side) on even pages when printing duplex."""
        return self.is_duplex and self.pageno % 2 == 0

    def inner_width(self) -> float:
        # Same on both sides; only the position of the text area moves.
        return self.width - 95.0

    def page_number(self) -> int | None:
        """The number to print on the page, or ``None`` when hidden."""
        return self.pageno if self.show_pageno else None

    def left(self) -> float:
        return 20.0 if self.is_verso() else 80.0

    def right(self) -> float:
        return self.width - (75.0 if self.is_verso() else 15.0)

    def top(self) -> float:
        return self.height - 20.0

    def bottom(self) -> float:
        return 20.0
