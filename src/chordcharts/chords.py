"""Chord tables and the per-song chord resolver.

Fingerings are tuples: the barre/base fret first, then one entry per string
from the lowest string up.  ``-1`` is a muted string, ``0`` an open string,
``-2`` an unknown chord (nothing is drawn) and any positive number the fret
that gets a dot.

The tables are built once at import time and are read-only afterwards.
Duplicate names keep the last fingering listed.
"""

import logging
from enum import Enum
from types import MappingProxyType

from .models import Fingering

logger = logging.getLogger(__name__)

# Names that mean "no chord here" rather than a chord to draw.
_NO_CHORD = {"", "NC", "N.C.", "%", "-"}

# Two-letter roots looked up under their enharmonic spelling.
_ENHARMONIC = {
    "A#": "Bb",
    "D#": "Eb",
    "Gb": "F#",
    "Cb": "B",
}


class Instrument(Enum):
    GUITAR = "guitar"  # e-a-d-g-b-e, no capo
    MANDOLIN = "mandolin"  # g-d-a-e

    @property
    def strings(self) -> int:
        return 6 if self is Instrument.GUITAR else 4


x = -1  # muted string

_GUITAR = [
    # name       base   e  a  d  g  b  e
    ("Ab",        4,    1, 3, 3, 2, 1, 1),
    ("Ab6",       1,    4, 3, 1, 1, 1, 1),
    ("Ab7",       4,    1, 3, 1, 2, 1, 1),
    ("Abm",       4,    1, 3, 3, 1, 1, 1),
    ("Abm7",      4,    1, 3, 1, 1, 1, 1),
    ("Abmaj7",    4,    1, 3, 2, 2, 1, 1),
    ("A",         0,    x, 0, 2, 2, 2, 0),
    ("A/E",       0,    0, 0, 2, 2, 2, 0),
    ("A6",        1,    x, 0, 2, 2, 2, 2),
    ("A7",        0,    x, 0, 2, 0, 2, 0),
    ("A7/C#",     4,    x, 1, 2, 3, 2, 2),
    ("A9",        4,    2, 1, 2, 1, 2, x),
    ("Am",        0,    x, 0, 2, 2, 1, 0),
    ("Am/C",      1,    x, 3, 2, 2, 1, 0),
    ("Am/E",      1,    0, 0, 2, 2, 1, 0),
    ("Am/F#",     1,    2, 0, 2, 2, 1, 0),
    ("Am/G",      1,    3, 0, 2, 2, 1, 0),
    ("Am6",       1,    x, 0, 2, 2, 1, 2),
    ("Am7",       1,    x, 0, 2, 0, 1, 0),
    ("Am7/G",     1,    3, 0, 2, 0, 1, 0),
    ("Am9",       5,    1, 3, 1, 1, 1, 3),
    ("Amaj7",     1,    x, 0, 2, 1, 2, 0),
    ("Asus",      1,    x, 0, 2, 2, 3, 0),
    ("Asus2",     1,    x, 0, 2, 2, 0, 0),
    ("Asus4",     1,    x, 0, 0, 2, 3, 0),

    ("Bb",        1,    x, 1, 3, 3, 3, 1),
    ("Bbm",       1,    x, 1, 3, 3, 2, 1),
    ("Bb7",       1,    x, 1, 3, 1, 3, 1),
    ("Bbm7",      1,    x, 1, 3, 1, 2, 1),
    ("Bb9'",      1,    x, 1, 0, 1, 1, 1),
    ("Bb/E",      1,    0, 1, 3, 3, 3, 1),
    ("Bb/D",      1,    x, x, 0, 2, 2, 1),
    ("B",         2,    x, 1, 3, 3, 3, 1),
    ("B6",        2,    x, 1, 3, 3, 3, 3),
    ("B7",        2,    x, 1, 3, 1, 3, 1),
    ("Bdim",      1,    x, 2, 3, 4, 3, x),
    ("Bm",        2,    x, 1, 3, 3, 2, 1),
    ("Bm/F#",     2,    1, 1, 3, 3, 2, 1),
    ("Bm/G#",     4,    1, 2, 1, 4, 4, 4),
    ("Bm7",       2,    x, 1, 3, 1, 2, 1),
    ("Bmaj7",     2,    x, 1, 3, 2, 3, 1),
    ("Bsus4",     2,    x, 1, 1, 3, 4, 1),

    ("C",         0,    x, 3, 2, 0, 1, 0),
    ("C/B",       1,    x, 2, 2, 0, 1, 0),
    ("C/D",       1,    x, x, 0, 0, 1, 0),
    ("C/E",       1,    0, 3, 2, 0, 1, 0),
    ("C/G",       1,    3, 3, 2, 0, 1, 0),
    ("C6",        1,    x, 3, 2, 2, 1, 0),
    ("C7",        1,    x, 3, 2, 3, 1, 0),
    ("C7sus4",    1,    x, 3, 3, 3, 1, 1),
    ("Cdim",      3,    x, 1, 2, 3, 2, x),
    ("Cm",        3,    x, 1, 3, 3, 2, 1),
    ("Cm7",       3,    x, 1, 3, 1, 2, 1),
    ("Cmaj7",     0,    x, 3, 2, 0, 0, 0),
    ("Cmaj7",     1,    x, 3, 2, 0, 0, 0),
    ("Csus4",     1,    x, 3, 3, 0, 1, 1),
    ("C#",        4,    x, 1, 3, 3, 3, 1),
    ("C#7",       4,    x, 1, 3, 1, 3, 1),
    ("C#m",       4,    x, 1, 3, 3, 2, 1),
    ("C#m7",      4,    x, 1, 3, 1, 2, 1),
    ("C#sus4",    1,    x, 4, 4, 1, 2, 2),

    ("Db",        1,    x, 4, 3, 1, 2, 1),
    ("D",         0,    x, x, 0, 2, 3, 2),
    ("D/A",       0,    x, 0, 0, 2, 3, 2),
    ("D/F#",      0,    2, 0, 0, 2, 3, 2),
    ("D7",        0,    x, x, 0, 2, 1, 2),
    ("Dm",        0,    x, x, 0, 2, 3, 1),
    ("Dm7",       0,    x, x, 0, 2, 1, 1),
    ("Dmaj7",     0,    x, x, 0, 2, 2, 2),
    ("Dsus4",     0,    x, x, 0, 2, 3, 3),
    ("D#dim",     0,    x, x, 1, 2, 4, 2),

    ("Eb",        3,    x, 4, 3, 1, 2, 1),
    ("Eb7",       0,    x, x, 1, 0, 2, 3),
    ("Ebm",       0,    x, x, 1, 3, 4, 2),
    ("E",         0,    0, 2, 2, 1, 0, 0),
    ("E/G#",      0,    x, x, x, 1, 0, 0),
    ("E7",        0,    0, 2, 2, 1, 3, 0),
    ("E9",        0,    0, 2, 0, 1, 0, 2),
    ("Eadd9",     0,    0, 2, 2, 1, 3, 3),
    ("Em",        0,    0, 2, 2, 0, 0, 0),
    ("Em6",       0,    0, 2, 2, 0, 2, 0),
    ("Em7",       0,    0, 2, 2, 0, 3, 0),
    ("Emaj7",     0,    0, 2, 1, 1, 0, 0),
    ("Esus4",     0,    0, 0, 2, 2, 0, 0),

    ("F",         0,    1, 3, 3, 2, 1, 1),
    ("F/A",       0,    x, 0, 3, 2, 1, 1),
    ("F7",        0,    1, 3, 1, 2, 1, 1),
    ("Fm",        0,    1, 3, 3, 1, 1, 1),
    ("Fmaj7",     0,    1, 3, 2, 2, 1, 1),
    ("Fsus4",     0,    1, 1, 3, 3, 1, 1),
    ("F#",        2,    1, 3, 3, 2, 1, 1),
    ("F#7",       2,    1, 3, 1, 2, 1, 1),
    ("F#dim",     0,    x, x, 4, 2, 1, 2),
    ("F#dim*",    0,    2, 3, 4, 2, x, x),
    ("F#m",       2,    1, 3, 3, 1, 1, 1),
    ("F#m7",      2,    1, 3, 1, 1, 1, 1),

    ("G",         0,    3, 2, 0, 0, 0, 3),
    ("G+",        0,    3, 2, 1, 0, 0, 3),
    ("G/A",       0,    x, 0, 0, 0, 0, 3),
    ("G/B",       0,    x, 2, 0, 0, 3, 3),
    ("G/C",       0,    x, 3, 0, 0, 0, 3),
    ("G/F",       0,    1, 2, 0, 0, 3, 3),
    ("G/F#",      0,    2, 2, 0, 0, 0, 3),
    ("G6",        0,    3, 2, 0, 0, 0, 0),
    ("G7",        0,    3, 2, 0, 0, 0, 1),
    ("G7/D",      0,    x, x, 0, 0, 0, 1),
    ("Gm",        3,    1, 3, 3, 1, 1, 1),
    ("Gm6",       0,    3, 1, 0, 0, 3, 0),
    ("Gm7",       3,    1, 3, 1, 1, 1, 1),
    ("Gmaj7",     0,    3, 2, 0, 0, 0, 2),
    ("Gsus4",     0,    3, 3, 0, 0, 3, 3),
    ("G#",        4,    1, 3, 3, 2, 1, 1),
    ("G#7",       4,    1, 3, 1, 2, 1, 1),
    ("G#dim",     4,    1, 2, 3, 1, x, x),
    ("G#m",       4,    1, 3, 3, 1, 1, 1),
    ("G#m7",      4,    1, 3, 1, 1, 1, 1),
]

# Mandolin chords are all shown from the nut, so the base fret is always 0.
_MANDOLIN = [
    # name      g  d  a  e
    ("Ab",      1, 1, 3, 4),  # also 7 6 3 4 or 1 1 3 x

    ("A",       9, 7, 4, 5),  # also 2 2 4 5 or 2 2 4 x
    ("A7",      6, 5, 7, 5),  # also 6 5 0 0
    ("Am",      9, 7, 3, 5),  # also 2 2 3 5 or 5 7 7 x
    ("Am7",     0, 2, 3, 0),  # also 2 2 3 3

    ("Bb",      3, 3, 5, 7),  # also 10 8 5 6 or 3 3 5 x

    ("B",       4, 4, 6, 7),  # also 11 9 6 7
    ("B7",      2, 1, 2, x),  # also 8 7 9 7
    ("Bm",      4, 4, 5, 7),  # also 11 9 5 7
    ("Bm7",     4, 4, 5, 5),  # also 2 4 5 2

    ("C",       5, 2, 3, 0),
    ("C7",      3, 2, 3, x),  # also 9 8 10 8
    ("Cm",      5, 1, 3, x),  # also 0 1 3 x or 5 5 6 8
    ("Cm7",     3, 1, 3, x),  # also 5 5 6 6
    ("Cmaj7",   5, 2, 2, 3),  # also 5 5 7 7
    ("C/G",     0, 2, 3, 0),

    ("C#",      6, 3, 4, 1),  # also 1 3 4 x or 6 3 4 x
    ("C#7",     4, 3, 4, x),
    ("C#m",     6, 2, 4, x),  # also 6 6 7 9

    ("D",       2, 0, 0, 2),  # also 7 4 5 2 or 2 4 5 x
    ("D7",      5, 4, 5, x),
    ("Dm",      7, 3, 5, x),  # also 2 3 5 x
    ("Dm7",     5, 3, 5, x),

    ("Eb",      8, 5, 6, 3),  # also 8 5 6 x or 3 5 6 x
    ("Eb7",     3, 1, 4, 3),  # also 6 5 6 x

    ("E",       4, 6, 7, x),  # also 9 6 7 4
    ("E7",      7, 6, 7, x),  # also 4 2 5 4 or 4 6 5 x
    ("Em",      4, 2, 2, 3),  # also 4 5 7 0
    ("Em7",     4, 2, 5, 3),  # also 7 5 7 x

    ("F",       5, 3, 0, 1),  # also 10 7 8 6 or 5 7 8 x
    ("F7",      5, 3, 6, 5),  # also 8 7 8 x or 2 1 3 1
    ("Fm",      5, 3, 3, 4),
    ("Fmaj7",   5, 3, 7, 5),  # also 10 7 7 8

    ("F#",      6, 4, 1, 2),  # also 11 8 9 6 or 6 8 9 x
    ("F#7",     6, 4, 7, 6),  # also 3 2 4 2 or 9 8 9 x
    ("F#m",     6, 4, 4, 5),  # also 2 4 4 x
    ("F#m7",    6, 4, 7, 5),

    ("G",       0, 0, 2, 3),  # also 7 5 2 3 or 7 9 10 7
    ("G7",      5, 4, 6, 4),  # also 7 5 8 7
    ("Gm",      0, 0, 1, 3),  # also 7 5 1 3 or 3 5 5 x
    ("Gm7",     7, 5, 8, 6),

    ("G#",      8, 6, 3, 4),  # also 1 1 3 4 or 1 1 3 x
]

del x

_TABLES = {
    Instrument.GUITAR: MappingProxyType({name: tuple(frets) for name, *frets in _GUITAR}),
    Instrument.MANDOLIN: MappingProxyType({name: (0, *frets) for name, *frets in _MANDOLIN}),
}


def unknown_chord(instrument: Instrument) -> Fingering:
    """Placeholder fingering: no barre and nothing on any string."""
    return (0,) + (-2,) * instrument.strings


def get_all(instrument: Instrument) -> list[tuple[str, Fingering]]:
    """Return every chord in the *instrument*'s table, sorted by name."""
    return sorted(_TABLES[instrument].items())


def enharmonic(name: str) -> str | None:
    """Return the alternative spelling to look *name* up under, if any.

    Only one rewrite is tried: German ``H`` becomes ``B``, and the roots
    ``A#``, ``D#``, ``Gb`` and ``Cb`` become ``Bb``, ``Eb``, ``F#`` and ``B``
    with the rest of the name kept.
    """
    if name.startswith("H"):
        return "B" + name[1:]
    replacement = _ENHARMONIC.get(name[:2])
    if replacement is None:
        return None
    return replacement + name[2:]


class ChordHolder:
    """Collects the chords a song uses and resolves their fingerings."""

    def __init__(self, instrument: Instrument = Instrument.GUITAR):
        self.instrument = instrument
        self._known = _TABLES[instrument]
        self._local: dict[str, Fingering] = {}
        self._used: dict[str, None] = {}  # insertion ordered set

    @classmethod
    def new_for(cls, instrument: Instrument) -> "ChordHolder":
        return cls(instrument)

    def use(self, name: str) -> None:
        if name in _NO_CHORD or name.startswith(("/", "x")):
            return
        self._used.setdefault(name, None)

    def define(self, name: str, fingering: Fingering) -> None:
        if len(fingering) != self.instrument.strings + 1:
            logger.warning("Ignoring chord definition %s, wrong instrument", name)
            return
        self._local[name] = tuple(fingering)

    def used(self) -> list[str]:
        """Distinct chord names in order of first use."""
        return list(self._used)

    def resolve(self, name: str) -> Fingering:
        found = self._local.get(name) or self._known.get(name)
        if found is None:
            replacement = enharmonic(name)
            if replacement is not None:
                found = self._known.get(replacement)
        if found is None:
            logger.warning("Unknown chord %s", name)
            found = unknown_chord(self.instrument)
        return found

    def resolve_all(self) -> list[tuple[str, Fingering]]:
        """Return ``(name, fingering)`` for every used chord, sorted by name."""
        return [(name, self.resolve(name)) for name in sorted(self._used)]

    get_used = resolve_all

    def get_all(self) -> list[tuple[str, Fingering]]:
        return get_all(self.instrument)
