"""Chopro parser.

Turns the lines of a chopro file into a lazy stream of song elements
(see :mod:`chordcharts.models`):

  1. Source comments (``# ...``) are dropped before anything else.
  2. ``{name}`` / ``{name: argument}`` lines are directives, looked up
     case-insensitively in :data:`DIRECTIVES`.
  3. ``{soc}`` recursively parses the following lines into a
     :class:`~chordcharts.models.Chorus` until ``{eoc}``.
  4. ``{sot}`` collects raw lines verbatim until ``{eot}``.
  5. Any other line becomes a :class:`~chordcharts.models.Line` of
     alternating text and ``[Chord]`` segments.

Problems in the input are logged and turned into ``Comment`` elements;
parsing never stops on bad markup.
"""

import logging
import re
from collections.abc import Iterable, Iterator
from pathlib import Path

from .exceptions import UnknownKeyError
from .key import Key as MusicalKey
from .models import (
    ChordDefinition,
    Chorus,
    ColumnBreak,
    Comment,
    EndOfChorus,
    EndOfTab,
    Key,
    Line,
    NewSong,
    PageBreak,
    StartColumns,
    SubTitle,
    Tab,
    Title,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Regexes
# ---------------------------------------------------------------------------

SOURCE_COMMENT_RE = re.compile(r"^\s*#")

# {name} or {name: argument}
DIRECTIVE_RE = re.compile(r"^\s*\{\s*([^:}]+?)\s*(?::\s*(.*?))?\s*\}\s*$")

# Sm7 base-fret 2 frets x 1 3 1 2 1
DEFINE_RE = re.compile(
    r"^(\S+)\s+base-fret\s+(\d+)\s+frets((?:\s+[0-9xX-]){4,6})\s*$"
)

# A run of plain text, optionally followed by one [Chord].
SEGMENT_RE = re.compile(r"([^\[]*)(?:\[([^\]]*)\])?")

# ---------------------------------------------------------------------------
# Directive aliases
# ---------------------------------------------------------------------------

DIRECTIVES = {
    "title": "title",
    "t": "title",
    "subtitle": "subtitle",
    "st": "subtitle",
    "comment": "comment",
    "c": "comment",
    "ci": "comment",
    "cb": "comment",
    "define": "define",
    "soc": "start_of_chorus",
    "start_of_chorus": "start_of_chorus",
    "eoc": "end_of_chorus",
    "end_of_chorus": "end_of_chorus",
    "sot": "start_of_tab",
    "start_of_tab": "start_of_tab",
    "eot": "end_of_tab",
    "end_of_tab": "end_of_tab",
    "columns": "columns",
    "col": "columns",
    "colb": "column_break",
    "column_break": "column_break",
    "page_break": "page_break",
    "np": "page_break",
    "new_page": "page_break",
    "new_song": "new_song",
    "ns": "new_song",
    "key": "key",
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_lines(lines: Iterable[str]) -> Iterator:
    """Parse chopro *lines* into song elements.

    The result is a one-pass generator; parse the source again to restart.
    Trailing newlines on *lines* are ignored.
    """
    cursor = _source_lines(lines)
    yield from _elements(cursor)


def parse_text(text: str) -> list:
    """Parse a whole chopro document held in a string."""
    return list(parse_lines(text.splitlines()))


def parse_file(path: str | Path) -> Iterator:
    """Parse the chopro file at *path*, reading it lazily line by line."""
    with open(path, encoding="utf-8-sig") as f:
        yield from parse_lines(f)


def split_chords(text: str) -> list[str]:
    """Split a lyric line into alternating text and chord segments.

    Example::

        split_chords("[Am]Home[C]again") == ["", "Am", "Home", "C", "again"]

    An unclosed ``[`` is kept as plain text along with the rest of the line.
    """
    segments: list[str] = []
    pos = 0
    while True:
        m = SEGMENT_RE.match(text, pos)
        segments.append(m.group(1))
        if m.group(2) is None:
            if m.end() < len(text):
                segments[-1] += text[m.end():]
            return segments
        segments.append(m.group(2))
        pos = m.end()


def parse_fingering(argument: str) -> tuple[str, tuple[int, ...]] | None:
    """Parse a ``define`` argument into ``(name, fingering)``.

    Returns ``None`` when *argument* does not follow
    ``<name> base-fret <n> frets <f1> ... <f4..6>``.
    """
    m = DEFINE_RE.match(argument.strip())
    if not m:
        return None
    name, base_fret, frets = m.groups()
    fingering = [int(base_fret)]
    for token in frets.split():
        fingering.append(int(token) if token.isdigit() else -1)
    return name, tuple(fingering)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _source_lines(lines: Iterable[str]) -> Iterator[str]:
    """Strip line endings and byte order marks, drop ``#`` comment lines."""
    for line in lines:
        line = line.rstrip("\r\n").lstrip("\ufeff")
        if SOURCE_COMMENT_RE.match(line):
            continue
        yield line


def _elements(cursor: Iterator[str]) -> Iterator:
    """Yield elements until *cursor* is exhausted.

    Chorus and tab blocks consume further lines from the same *cursor*.
    """
    for line in cursor:
        m = DIRECTIVE_RE.match(line)
        if not m:
            yield Line(segments=split_chords(line.replace("\t", "    ")))
        elif DIRECTIVES.get(m.group(1).lower()) == "start_of_chorus":
            yield from _chorus(cursor)
        else:
            yield _directive(m.group(1), m.group(2) or "", line, cursor)


def _directive(name: str, argument: str, line: str, cursor: Iterator[str]):
    kind = DIRECTIVES.get(name.lower())

    if kind == "title":
        return Title(text=argument)
    if kind == "subtitle":
        return SubTitle(text=argument)
    if kind == "comment":
        return Comment(text=argument)
    if kind == "define":
        parsed = parse_fingering(argument)
        if parsed is None:
            logger.warning("Bad chord definition: %s", line.strip())
            return Comment(text=line)
        return ChordDefinition(*parsed)
    if kind == "end_of_chorus":
        return EndOfChorus()
    if kind == "start_of_tab":
        return _tab(cursor)
    if kind == "end_of_tab":
        return EndOfTab()
    if kind == "columns":
        if not argument.isdecimal() or int(argument) < 1:
            logger.warning("Bad column count: %s", line.strip())
            return Comment(text=line)
        return StartColumns(count=int(argument))
    if kind == "column_break":
        return ColumnBreak()
    if kind == "page_break":
        return PageBreak()
    if kind == "new_song":
        return NewSong()
    if kind == "key":
        try:
            MusicalKey(argument)
        except UnknownKeyError:
            logger.warning("Unknown key: %s", line.strip())
            return Comment(text=line)
        return Key(name=argument)

    logger.warning("Unknown directive: %s", line.strip())
    return Comment(text=line)


def _chorus(cursor: Iterator[str]) -> Iterator:
    """Yield the chorus read from *cursor*.

    A ``{new_song}`` inside an open chorus closes it and is yielded after it.
    """
    chorus = Chorus()
    for element in _elements(cursor):
        if isinstance(element, EndOfChorus):
            yield chorus
            return
        if isinstance(element, NewSong):
            logger.warning("Chorus not closed before new song")
            yield chorus
            yield element
            return
        chorus.elements.append(element)
    logger.warning("Chorus not closed before end of file")
    yield chorus


def _tab(cursor: Iterator[str]) -> Tab:
    tab = Tab()
    for line in cursor:
        m = DIRECTIVE_RE.match(line)
        if m and DIRECTIVES.get(m.group(1).lower()) == "end_of_tab":
            return tab
        tab.lines.append(line)
    logger.warning("Tab not closed before end of file")
    return tab
