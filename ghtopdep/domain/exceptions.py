"""Errors raised while collecting dependents."""
from typing import Optional, Sequence


class GhTopDepError(Exception):
    """Base class for every error surfaced to callers."""
    pass


class InputError(GhTopDepError):
    """Raised for malformed user input, before any network activity."""
    pass


class NetworkError(GhTopDepError):
    """Raised when a page could not be fetched."""

    def __init__(self, message: str, url: str, status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status


class RateLimitError(NetworkError):
    """Raised when GitHub answers with HTTP 429."""

    def __init__(self, url: str):
        super().__init__(f"Rate limited while fetching {url}", url, status=429)


class PackageNotFoundError(GhTopDepError):
    """Raised when the requested package is not listed and the run aborts."""

    def __init__(self, package_name: str, available_packages: Sequence[str]):
        super().__init__(f'Package "{package_name}" not found')
        self.package_name = package_name
        self.available_packages = tuple(available_packages)


class PaginationLimitExceeded(GhTopDepError):
    """Raised when the listing keeps reporting a next page past the page limit."""

    def __init__(self, max_pages: int, next_page_url: str):
        super().__init__(
            f"Still found a next page after {max_pages} pages ({next_page_url}); "
            f"the dependents markup may have changed"
        )
        self.max_pages = max_pages
        self.next_page_url = next_page_url
