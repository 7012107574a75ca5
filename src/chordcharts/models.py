from collections.abc import Iterator
from dataclasses import dataclass, field

# Barre/base fret first, then one entry per string:
# -1 muted, 0 open, -2 unknown, n > 0 fretted at n.
Fingering = tuple[int, ...]


@dataclass
class Title:
    text: str


@dataclass
class SubTitle:
    text: str


@dataclass
class Comment:
    text: str


@dataclass
class ChordDefinition:
    """A ``{define: ...}`` directive, local to the song it appears in."""

    name: str
    fingering: Fingering


@dataclass
class Chorus:
    """A ``{soc}`` ... ``{eoc}`` block.  The terminating marker is not kept."""

    elements: list = field(default_factory=list)


@dataclass
class EndOfChorus:
    pass


@dataclass
class Tab:
    """Verbatim tablature lines between ``{sot}`` and ``{eot}``."""

    lines: list[str] = field(default_factory=list)


@dataclass
class EndOfTab:
    pass


@dataclass
class StartColumns:
    count: int


@dataclass
class ColumnBreak:
    pass


@dataclass
class PageBreak:
    pass


@dataclass
class NewSong:
    pass


@dataclass
class Key:
    """Key for translating Nashville-number chords, e.g. ``{key: G}``."""

    name: str


@dataclass
class Line:
    """A lyric line with inline chords.

    Segments alternate plain text and chord names, plain text first:
    ``"[Am]Home[C]again"`` becomes ``["", "Am", "Home", "C", "again"]``.
    """

    segments: list[str] = field(default_factory=list)

    def chords(self) -> list[str]:
        return self.segments[1::2]

    def has_chords(self) -> bool:
        return len(self.segments) > 1

    def pairs(self) -> Iterator[tuple[str, str | None]]:
        """Yield ``(text, chord)`` pairs; the leading text has no chord."""
        texts = self.segments[0::2]
        chords = self.segments[1::2]
        for i, text in enumerate(texts):
            # A chord sits in front of the text that follows it.
            chord = chords[i - 1] if i > 0 else None
            yield text, chord

    def text(self) -> str:
        return "".join(self.segments[0::2])


@dataclass
class RenderOptions:
    """Document-wide settings collected by the command line."""

    output: str = "chords.pdf"
    title: str | None = None
    author: str | None = None
    instrument: str = "guitar"
    chords_page: bool = False
    show_filename: bool = False
    landscape: bool = False
    duplex: bool = False
    show_pageno: bool = True
    base_size: float = 14.0
