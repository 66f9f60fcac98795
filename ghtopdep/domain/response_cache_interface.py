"""Response cache interface (port) for raw HTTP bodies keyed by request URL."""
from abc import ABC, abstractmethod
from typing import Optional


class IResponseCache(ABC):
    """Abstract interface for caching response bodies.

    Freshness and storage medium are up to the implementation.
    """

    @abstractmethod
    def get(self, url: str) -> Optional[str]:
        """Return the cached body for ``url`` or None if absent or stale."""
        pass

    @abstractmethod
    def set(self, url: str, body: str) -> None:
        """Store the body fetched from ``url``."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Drop every cached body."""
        pass
