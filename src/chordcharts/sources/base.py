from abc import ABC, abstractmethod


class SongSource(ABC):
    """Abstract base class for the places chopro input can come from."""

    @classmethod
    @abstractmethod
    def can_handle(cls, location: str) -> bool:
        """Return True if this source can read the given location."""

    @abstractmethod
    def fetch(self, location: str) -> str:
        """Return the chopro text at location.

        Raises SourceError (or its subclass FetchError) when it cannot be read.
        """

    def read_lines(self, location: str) -> list[str]:
        """Convenience method: fetch, split into lines."""
        return self.fetch(location).splitlines()
