"""Page fetcher interface (port) for retrieving dependents pages.

This is the anti-corruption layer that shields the application from HTTP specifics.
"""
from abc import ABC, abstractmethod


class IPageFetcher(ABC):
    """Abstract interface for fetching raw HTML pages."""

    @abstractmethod
    async def fetch_page(self, url: str) -> str:
        """Fetch the raw body of a page.

        Args:
            url: Absolute page URL

        Returns:
            Response body as text

        Raises:
            NetworkError: If the page could not be fetched
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        pass
