"""HTML parser for GitHub's network/dependents page."""
import logging
import re
from typing import List, Optional, Set
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from ghtopdep.config import DEFAULT_SELECTORS, Selectors
from ghtopdep.domain.models import DependentEntry, DependentPageResult


logger = logging.getLogger(__name__)

DIGITS = re.compile(r"\d+")


def parse_number(text: str) -> Optional[int]:
    """Parse the first run of digits, ignoring thousands separators."""
    match = DIGITS.search(text.replace(",", ""))
    if match is None:
        return None
    return int(match.group(0))


class DependentsParser:
    """Extracts counts, dependents and pagination from a dependents page.

    Parsing is best effort: missing elements yield zero or None, never an error.
    """

    def __init__(self, selectors: Selectors = DEFAULT_SELECTORS, base_url: str = "https://github.com"):
        """Initialize the parser.

        Args:
            selectors: CSS selector table describing GitHub's markup
            base_url: Prefix for relative repository links
        """
        self._selectors = selectors
        self._base_url = base_url.rstrip("/") + "/"

    @staticmethod
    def _soup(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "html.parser")

    def parse_total_count(self, html: str) -> int:
        """Number of dependents GitHub advertises, 0 when unknown."""
        return self._total_count(self._soup(html))

    def parse_entries(self, html: str, min_stars: int, self_url: str) -> DependentPageResult:
        """Extract the dependents listed on one page.

        Args:
            html: Page body
            min_stars: Rows with fewer stars are counted but not returned
            self_url: URL of the queried repository, never returned

        Returns:
            DependentPageResult without a next page URL
        """
        return self._entries(self._soup(html), min_stars, self_url)

    def parse_next_page_url(self, html: str) -> Optional[str]:
        """URL of the next page, None on the last page."""
        return self._next_page_url(self._soup(html))

    def parse_page(self, html: str, min_stars: int, self_url: str) -> DependentPageResult:
        """Entries plus next page URL over a single parse of the document."""
        soup = self._soup(html)
        result = self._entries(soup, min_stars, self_url)
        return DependentPageResult(
            entries=result.entries,
            total_rows_seen=result.total_rows_seen,
            with_stars_count=result.with_stars_count,
            next_page_url=self._next_page_url(soup),
        )

    def _total_count(self, soup: BeautifulSoup) -> int:
        element = soup.select_one(self._selectors.dependents_count)
        if element is None:
            return 0
        count = parse_number(element.get_text(" ", strip=True))
        return count if count is not None else 0

    def _entries(self, soup: BeautifulSoup, min_stars: int, self_url: str) -> DependentPageResult:
        rows = soup.select(self._selectors.dependent_row)
        self_url = self_url.rstrip("/").lower()
        entries: List[DependentEntry] = []
        seen: Set[str] = set()
        with_stars_count = 0

        for row in rows:
            stars_element = row.select_one(self._selectors.stars)
            if stars_element is None:
                # private or ghost dependent
                continue

            stars = parse_number(stars_element.get_text(strip=True))
            if stars is None:
                continue
            if stars > 0:
                with_stars_count += 1
            if stars < min_stars:
                continue

            link = row.select_one(self._selectors.repository_link)
            href = link.get("href") if link is not None else None
            if not href:
                continue

            url = urljoin(self._base_url, href).rstrip("/")
            if url.lower() == self_url or url in seen:
                continue

            seen.add(url)
            entries.append(DependentEntry(url=url, stars=stars))

        return DependentPageResult(
            entries=tuple(entries),
            total_rows_seen=len(rows),
            with_stars_count=with_stars_count,
        )

    def _next_page_url(self, soup: BeautifulSoup) -> Optional[str]:
        links = soup.select(self._selectors.pagination_link)

        if len(links) == 2:
            # Previous and Next
            link = links[1]
        elif len(links) == 1 and links[0].get_text(strip=True) == "Next":
            link = links[0]
        else:
            return None

        href = link.get("href")
        if not href:
            return None
        return urljoin(self._base_url, href)
