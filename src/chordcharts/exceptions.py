class ChordChartsError(Exception):
    """Base exception for chordcharts."""


class SourceError(ChordChartsError):
    """Raised when an input file cannot be opened or read."""

    def __init__(self, location: str, reason: str):
        self.location = location
        self.reason = reason
        super().__init__(f"Cannot read {location}: {reason}")


class FetchError(SourceError):
    """Raised when an HTTP request for a remote song fails."""

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(url, f"HTTP {status_code}")


class UnsupportedSourceError(ChordChartsError):
    """Raised when no source can handle the given input location."""

    def __init__(self, location: str):
        self.location = location
        super().__init__(f"No source found for input: {location}")


class UnknownKeyError(ChordChartsError, ValueError):
    """Raised for a ``{key: ...}`` that is not a known major or minor key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Unknown key {key!r}")
