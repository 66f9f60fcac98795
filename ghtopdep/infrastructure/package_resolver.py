"""Resolves a package name to GitHub's package_id query parameter."""
import logging
from typing import List, Optional
from urllib.parse import parse_qs, urlsplit

from bs4 import BeautifulSoup

from ghtopdep.config import DEFAULT_SELECTORS, Selectors
from ghtopdep.domain.models import PackageInfo
from ghtopdep.domain.page_fetcher_interface import IPageFetcher


logger = logging.getLogger(__name__)


def package_id_from_href(href: str) -> Optional[str]:
    """Read the package_id query value of a menu link."""
    values = parse_qs(urlsplit(href).query).get("package_id")
    return values[0] if values else None


class PackageResolver:
    """Reads the package menu of a multi-package repository's dependents page."""

    def __init__(self, fetcher: IPageFetcher, selectors: Selectors = DEFAULT_SELECTORS):
        """Initialize the resolver.

        Args:
            fetcher: Fetcher used to load the unfiltered dependents page
            selectors: CSS selector table describing GitHub's markup
        """
        self._fetcher = fetcher
        self._selectors = selectors

    def has_package_filter(self, html: str) -> bool:
        """Whether the page offers package filtering at all."""
        soup = BeautifulSoup(html, "html.parser")
        return soup.select_one(self._selectors.package_filter_summary) is not None

    def is_already_filtered_by_package(self, html: str, package_name: str) -> bool:
        """Whether the page is already scoped to ``package_name``."""
        soup = BeautifulSoup(html, "html.parser")
        summary = soup.select_one(self._selectors.package_filter_summary)
        if summary is None:
            return False
        selected = summary.select_one(self._selectors.selected_package)
        if selected is None:
            return False
        return selected.get_text(strip=True) == package_name.strip()

    async def resolve(self, repo_url: str, package_name: str) -> PackageInfo:
        """Look up the package_id for ``package_name``.

        A miss is not an error: the returned PackageInfo has no resolved id
        and lists every package name found, in document order.

        Args:
            repo_url: Canonical URL of the queried repository
            package_name: Exact package name to look for

        Returns:
            PackageInfo for the lookup
        """
        html = await self._fetcher.fetch_page(f"{repo_url.rstrip('/')}/network/dependents")
        soup = BeautifulSoup(html, "html.parser")

        names: List[str] = []
        resolved_id: Optional[str] = None
        for option in soup.select(self._selectors.package_option):
            name_element = option.select_one(self._selectors.package_name)
            name = name_element.get_text(strip=True) if name_element is not None else ""
            if not name:
                continue
            if name not in names:
                names.append(name)
            if name == package_name and resolved_id is None:
                resolved_id = package_id_from_href(option.get("href", ""))

        if resolved_id is None:
            logger.info(f'Package "{package_name}" not among {len(names)} packages of {repo_url}')
        else:
            logger.info(f'Package "{package_name}" resolved to package_id={resolved_id}')

        return PackageInfo(resolved_id=resolved_id, available_package_names=tuple(names))
