"""Translate Nashville-number chords (``1``, ``4``, ``b7``, ``6m``) to names."""

import re

from .exceptions import UnknownKeyError

_BASES = {
    "A": 0,
    "A#": 1, "Bb": 1,
    "B": 2,
    "C": 3,
    "C#": 4, "Db": 4,
    "D": 5,
    "D#": 6, "Eb": 6,
    "E": 7,
    "F": 8,
    "F#": 9, "Gb": 9,
    "G": 10,
    "G#": 11, "Ab": 11,
}

_FLAT_NOTES = ("A", "Bb", "B", "C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab")
_SHARP_NOTES = ("A", "A#", "B", "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#")

# Semitones above the root for scale degrees 1-7, (major, minor).
_DEGREES = {
    "1": (0, 0),
    "2": (2, 2),
    "3": (4, 3),
    "4": (5, 5),
    "5": (7, 7),
    "6": (9, 8),
    "7": (11, 10),
}

NASHVILLE_RE = re.compile(r"^([b#]?)([1-7])(.*)$")


def is_nashville(chord: str) -> bool:
    return NASHVILLE_RE.match(chord) is not None


class Key:
    """A major or minor key, e.g. ``Key("G")`` or ``Key("F#m")``."""

    def __init__(self, key: str):
        key = key.strip()
        self.name = key
        self.major = not key.endswith("m")
        base = key if self.major else key[:-1]
        if base not in _BASES:
            raise UnknownKeyError(key)
        self.base = _BASES[base]
        flat = "b" in key or (not self.major and "#" not in key)
        self.notes = _FLAT_NOTES if flat else _SHARP_NOTES

    def from_nashville(self, chord: str) -> str:
        """Return the chord name for *chord* in this key.

        Names that are not Nashville numbers are returned unchanged.
        """
        m = NASHVILLE_RE.match(chord)
        if not m:
            return chord
        accidental, degree, rest = m.groups()
        major_step, minor_step = _DEGREES[degree]
        step = major_step if self.major else minor_step
        if accidental == "b":
            step -= 1
        elif accidental == "#":
            step += 1
        return self.notes[(self.base + step) % 12] + rest

    def __repr__(self) -> str:
        return f"Key({self.name!r})"
