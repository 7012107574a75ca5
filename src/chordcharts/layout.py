"""Page and column flow for parsed songs.

:class:`Renderer` draws song elements top-down onto a
:class:`~chordcharts.canvas.Canvas`, moving a cursor down the page.  When the
cursor gets too low to leave room for a row of chord boxes, or a break
element asks for it, the flow continues in the next column or on a new page.

At the end of each song the chords it used are drawn as a grid of chord
boxes along the bottom of the last page::

    +---------------------------------------+
    | Title                                 |
    | [Am]Home [C]again                     |
    | ...                                   |
    | [Am] [C]  [D]  [Em] [F]  [G]          |  <- full rows above
    |                               [Dm7]   |  <- short first row, right aligned
    +---------------------------------------+
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum, auto
from itertools import chain

from .canvas import Canvas
from .chords import ChordHolder, Instrument, get_all
from .key import Key as MusicalKey, is_nashville
from .models import (
    ChordDefinition,
    Chorus,
    ColumnBreak,
    Comment,
    EndOfChorus,
    EndOfTab,
    Fingering,
    Key,
    Line,
    NewSong,
    PageBreak,
    StartColumns,
    SubTitle,
    Tab,
    Title,
)
from .pagedim import PageDim

logger = logging.getLogger(__name__)

TITLE_FONT = "Times-Bold"
SUBTITLE_FONT = "Times-Italic"
LYRIC_FONT = "Times-Roman"
CHORD_FONT = "Helvetica-Oblique"
COMMENT_FONT = "Helvetica-Oblique"
TAB_FONT = "Courier"
BOX_NAME_FONT = "Helvetica-Bold"
LABEL_FONT = "Helvetica"

COLUMN_GUTTER = 10.0


# ---------------------------------------------------------------------------
# Chord boxes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BoxStyle:
    """Geometry of one chord box cell, in points."""

    dx: float  # distance between strings
    dy: float  # distance between frets
    frets: float  # fret rows shown
    width: float
    height: float
    radius: float = 1.4

    name_space = 20.0  # room above the grid for the name and open/muted marks


GUITAR_BOX = BoxStyle(dx=5.0, dy=7.0, frets=4.4, width=50.0, height=58.0)
# Mandolin shapes are always drawn from the nut, so the box is tall and narrow.
MANDOLIN_BOX = BoxStyle(dx=5.0, dy=3.6, frets=12.4, width=36.0, height=72.0)


def box_style(strings: int) -> BoxStyle:
    return GUITAR_BOX if strings >= 6 else MANDOLIN_BOX


def draw_chordbox(canvas: Canvas, style: BoxStyle, x: float, y: float, cell_width: float,
                  name: str, fingering: Fingering) -> None:
    """Draw one chord diagram in the cell whose bottom left corner is ``(x, y)``."""
    strings = len(fingering) - 1
    dx, dy, radius = style.dx, style.dy, style.radius
    left = x + (cell_width - (strings - 1) * dx) / 2
    right = left + (strings - 1) * dx
    top = y + style.height - style.name_space
    bottom = top - style.frets * dy

    # Open and muted marks sit just above the nut; the name goes above them.
    above = top + 2.0 + radius
    canvas.text(left, above + radius + 2.0, name, BOX_NAME_FONT, 12.0)

    barre = fingering[0]
    if barre < 2:
        canvas.line(left - 0.15, top + 0.5, right + 0.15, top + 0.5, width=1.0)
        up = 0.0
    else:
        canvas.text(left - dx - 3, top - 0.9 * dy, str(barre), LABEL_FONT, dy)
        up = 1.6

    for fret in range(int(style.frets) + 1):
        canvas.line(left, top - fret * dy, right, top - fret * dy)
    for string in range(strings):
        sx = left + string * dx
        canvas.line(sx, top + up, sx, bottom)

    for string, fret in enumerate(fingering[1:]):
        sx = left + string * dx
        if fret == -2:
            continue
        if fret == -1:
            canvas.line(sx - radius, above - radius, sx + radius, above + radius)
            canvas.line(sx + radius, above - radius, sx - radius, above + radius)
        elif fret == 0:
            canvas.circle(sx, above, radius)
        else:
            canvas.circle(sx, top - (fret - 0.5) * dy, radius + 0.4, fill=True)


def grid_positions(count: int, per_row: int) -> list[tuple[int, int]]:
    """Return ``(row, column)`` cells for *count* chord boxes.

    Row 0 is the bottom row.  It is the short one, holding
    ``count % per_row`` boxes (or a full row) pushed to the right; the rows
    above it are filled left to right.  Chords are placed in list order.
    """
    if count == 0:
        return []
    first = count % per_row or per_row
    cells = [(0, per_row - first + i) for i in range(first)]
    for i in range(count - first):
        cells.append((1 + i // per_row, i % per_row))
    return cells


def grid_rows(count: int, per_row: int) -> int:
    return -(-count // per_row)


# ---------------------------------------------------------------------------
# Flow state
# ---------------------------------------------------------------------------


class Flow(Enum):
    CONTINUE = auto()
    COLUMN = auto()  # continue in the next column, or on a new page
    PAGE = auto()  # continue on a new page


@dataclass
class Cursor:
    x: float
    y: float
    column_top: float


@dataclass
class SongState:
    """What a song carries across pages until its end or a ``{new_song}``."""

    instrument: Instrument
    chords: ChordHolder = field(init=False)
    key: MusicalKey | None = None
    columns: int = 1

    def __post_init__(self):
        self.chords = ChordHolder.new_for(self.instrument)

    def reset(self) -> None:
        self.chords = ChordHolder.new_for(self.instrument)
        self.key = None
        self.columns = 1

    def chord_name(self, chord: str) -> str:
        if self.key is not None and is_nashville(chord):
            return self.key.from_nashville(chord)
        return chord


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


class Renderer:
    """Lay out songs on a canvas, page by page."""

    def __init__(self, canvas: Canvas, instrument: Instrument = Instrument.GUITAR,
                 base_size: float = 14.0):
        self.canvas = canvas
        self.instrument = instrument
        self.size = base_size
        self.box = box_style(instrument.strings)

    # --- Songs ---

    def render_song(self, elements: Iterable, page: PageDim,
                    filename: str | None = None) -> PageDim:
        """Render one input file's *elements*, starting on *page*.

        Returns the page the next input should start on.  Nothing is drawn,
        and *page* is returned unchanged, for an empty input.
        """
        elements = iter(elements)
        song = SongState(self.instrument)
        while True:
            first = next(elements, None)
            if first is None and not song.chords.used():
                return page
            stream = elements if first is None else chain([first], elements)
            done = self._render_page(page, stream, song, filename)
            page = page.next()
            if done:
                return page

    def _render_page(self, page: PageDim, elements: Iterator, song: SongState,
                     filename: str | None) -> bool:
        """Fill *page* from *elements*.  Returns True when they run out."""
        logger.debug("Rendering page %d", page.pageno)
        self.canvas.begin_page(page)
        self._decorate(page, filename)
        cursor = Cursor(x=page.left(), y=page.top(), column_top=page.top())
        min_y = page.bottom() + self.box.height

        for element in elements:
            if isinstance(element, StartColumns):
                song.columns = element.count
                cursor.column_top = cursor.y
                continue
            if isinstance(element, NewSong):
                self.render_chordboxes(page, song.chords.resolve_all())
                song.reset()
                self.canvas.end_page()
                return False

            flow = self.render_element(element, cursor, song)
            if flow is Flow.CONTINUE and cursor.y >= min_y:
                continue
            if flow is not Flow.PAGE and self._next_column(page, cursor, song.columns):
                continue
            self.canvas.end_page()
            return False

        self.render_chordboxes(page, song.chords.resolve_all())
        self.canvas.end_page()
        return True

    def _next_column(self, page: PageDim, cursor: Cursor, columns: int) -> bool:
        if columns < 2:
            return False
        step = page.inner_width() / columns + COLUMN_GUTTER
        if cursor.x + step >= page.right():
            return False
        cursor.x += step
        cursor.y = cursor.column_top
        return True

    def _decorate(self, page: PageDim, filename: str | None) -> None:
        size = 0.7 * self.size
        y = page.bottom() - 12.0
        pageno = page.page_number()
        if pageno is not None:
            text = str(pageno)
            if page.is_verso():
                x = page.left()
            else:
                x = page.right() - self.canvas.text_width(text, LABEL_FONT, size)
            self.canvas.text(x, y, text, LABEL_FONT, size)
        if filename:
            size = 0.5 * self.size
            if page.is_verso():
                x = page.right() - self.canvas.text_width(filename, LABEL_FONT, size)
            else:
                x = page.left()
            with self.canvas.text_state(gray=0.5):
                self.canvas.text(x, y, filename, LABEL_FONT, size)

    # --- Elements ---

    def render_element(self, element, cursor: Cursor, song: SongState) -> Flow:
        """Draw *element* at the cursor and move the cursor below it."""
        fs = self.size
        canvas = self.canvas

        if isinstance(element, Title):
            cursor.y -= 1.5 * fs
            canvas.text(cursor.x, cursor.y, element.text, TITLE_FONT, 1.4 * fs)
            canvas.bookmark(element.text)
        elif isinstance(element, SubTitle):
            cursor.y -= 1.2 * fs
            with canvas.text_state(char_space=0.05 * fs):
                canvas.text(cursor.x, cursor.y, element.text, SUBTITLE_FONT, fs)
        elif isinstance(element, Comment):
            cursor.y -= 1.1 * fs
            with canvas.text_state(gray=0.4):
                canvas.text(cursor.x, cursor.y, element.text, COMMENT_FONT, 0.8 * fs)
        elif isinstance(element, Line):
            self._line(element, cursor, song)
        elif isinstance(element, Chorus):
            return self._chorus(element, cursor, song)
        elif isinstance(element, Tab):
            cursor.y -= 0.3 * fs
            for line in element.lines:
                cursor.y -= 0.85 * fs
                canvas.text(cursor.x, cursor.y, line, TAB_FONT, 0.75 * fs)
            cursor.y -= 0.3 * fs
        elif isinstance(element, ChordDefinition):
            song.chords.define(element.name, element.fingering)
        elif isinstance(element, Key):
            song.key = MusicalKey(element.name)
        elif isinstance(element, ColumnBreak):
            return Flow.COLUMN
        elif isinstance(element, PageBreak):
            return Flow.PAGE
        elif isinstance(element, EndOfChorus):
            logger.warning("End of chorus without start of chorus")
        elif isinstance(element, EndOfTab):
            logger.warning("End of tab without start of tab")
        else:
            logger.warning("Ignoring %s here", type(element).__name__)
        return Flow.CONTINUE

    def _line(self, line: Line, cursor: Cursor, song: SongState) -> None:
        fs = self.size
        if not line.has_chords() and not line.text().strip():
            cursor.y -= 0.6 * fs
            return

        cursor.y -= (2.0 if line.has_chords() else 1.2) * fs
        chord_size = 0.7 * fs
        gap = 0.3 * fs
        x = cursor.x
        for text, chord in line.pairs():
            advance = self.canvas.text_width(text, LYRIC_FONT, fs)
            if chord is not None:
                name = song.chord_name(chord)
                song.chords.use(name)
                with self.canvas.text_state(rise=0.9 * fs):
                    self.canvas.text(x, cursor.y, name, CHORD_FONT, chord_size)
                advance = max(advance, self.canvas.text_width(name, CHORD_FONT, chord_size) + gap)
            if text:
                self.canvas.text(x, cursor.y, text, LYRIC_FONT, fs)
            x += advance

    def _chorus(self, chorus: Chorus, cursor: Cursor, song: SongState) -> Flow:
        fs = self.size
        top = cursor.y
        left = cursor.x
        cursor.x = left + 1.5 * fs
        flow = Flow.CONTINUE
        for element in chorus.elements:
            result = self.render_element(element, cursor, song)
            if result is not Flow.CONTINUE:
                flow = result
        cursor.x = left
        bar_x = left + 0.6 * fs
        self.canvas.line(bar_x, top - 0.2 * fs, bar_x, cursor.y - 0.3 * fs, width=1.0)
        cursor.y -= 0.3 * fs
        return flow

    # --- Chord boxes ---

    def render_chordboxes(self, page: PageDim, chords: list[tuple[str, Fingering]]) -> None:
        """Draw *chords* as a grid along the bottom of *page*."""
        if not chords:
            return
        style = box_style(len(chords[0][1]) - 1)
        width = page.inner_width()
        per_row = max(1, int(width // style.width))
        cell_width = width / per_row
        logger.debug("Drawing %d chord boxes, %d per row", len(chords), per_row)
        for (name, fingering), (row, col) in zip(chords, grid_positions(len(chords), per_row)):
            draw_chordbox(
                self.canvas,
                style,
                page.left() + col * cell_width,
                page.bottom() + row * style.height,
                cell_width,
                name,
                fingering,
            )

    def render_chord_reference(self, page: PageDim) -> PageDim:
        """Draw every chord known for the instrument on pages starting at *page*.

        Returns the page after the last one used.
        """
        chords = get_all(self.instrument)
        heading = f"{self.instrument.value.capitalize()} chords"
        per_row = max(1, int(page.inner_width() // self.box.width))
        rows = max(1, int((page.top() - page.bottom() - 2 * self.size) // self.box.height))
        per_page = per_row * rows
        for start in range(0, len(chords), per_page):
            self.canvas.begin_page(page)
            self._decorate(page, None)
            if start == 0:
                self.canvas.bookmark(heading)
            self.canvas.text(page.left(), page.top() - 1.5 * self.size, heading,
                             TITLE_FONT, 1.4 * self.size)
            self.render_chordboxes(page, chords[start:start + per_page])
            self.canvas.end_page()
            page = page.next()
        return page
