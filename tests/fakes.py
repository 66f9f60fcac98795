"""Test doubles for the ports."""
from typing import Dict, List, Union

from ghtopdep.domain.exceptions import NetworkError
from ghtopdep.domain.page_fetcher_interface import IPageFetcher
from ghtopdep.domain.progress_interface import IProgressSink


class FakePageFetcher(IPageFetcher):
    """Serves canned pages and records every requested URL."""

    def __init__(self, pages: Dict[str, Union[str, Exception]]):
        self.pages = dict(pages)
        self.calls: List[str] = []
        self.closed = False

    async def fetch_page(self, url: str) -> str:
        self.calls.append(url)
        try:
            page = self.pages[url]
        except KeyError:
            raise NetworkError(f"GET {url} failed with HTTP 404", url, status=404) from None
        if isinstance(page, Exception):
            raise page
        return page

    async def close(self) -> None:
        self.closed = True


class RecordingProgressSink(IProgressSink):
    """Collects progress events as tuples."""

    def __init__(self):
        self.events = []

    def start(self, total: int) -> None:
        self.events.append(("start", total))

    def update(self, current: int) -> None:
        self.events.append(("update", current))

    def stop(self) -> None:
        self.events.append(("stop",))
