"""Dependents service orchestrating the page by page scrape."""
import logging
import time
from typing import List, Optional, Tuple
from urllib.parse import urlencode

from ghtopdep.application.ranking import rank_dependents
from ghtopdep.config import QueryOptions, Settings
from ghtopdep.domain.exceptions import PackageNotFoundError, PaginationLimitExceeded
from ghtopdep.domain.models import (
    AggregateStats,
    DependentEntry,
    DependentsResult,
    DependentType,
    PackageMissPolicy,
    RepositoryRef,
)
from ghtopdep.domain.page_fetcher_interface import IPageFetcher
from ghtopdep.domain.progress_interface import IProgressSink
from ghtopdep.infrastructure.dependents_parser import DependentsParser
from ghtopdep.infrastructure.package_resolver import PackageResolver
from ghtopdep.infrastructure.progress import NullProgressSink


logger = logging.getLogger(__name__)


def dependents_url(repo_url: str, dependent_type: DependentType, package_id: Optional[str] = None) -> str:
    """Build the URL of the first dependents page."""
    params = []
    if package_id is not None:
        params.append(("package_id", package_id))
    params.append(("dependent_type", dependent_type.value))
    return f"{repo_url.rstrip('/')}/network/dependents?{urlencode(params)}"


class DependentsService:
    """Application service collecting the dependents of a repository.

    Coordinates fetcher, parser and package resolver. Pages are fetched one
    at a time since each page's URL comes from the previous page. A failure
    on any page aborts the run and discards what was collected so far.
    """

    def __init__(
        self,
        fetcher: IPageFetcher,
        settings: Settings,
        parser: Optional[DependentsParser] = None,
        resolver: Optional[PackageResolver] = None,
        progress: Optional[IProgressSink] = None,
    ):
        """Initialize dependents service.

        Args:
            fetcher: Page fetcher implementation
            settings: Settings providing base URL and page limit
            parser: Dependents page parser
            resolver: Package resolver, sharing the fetcher by default
            progress: Progress sink notified while paging
        """
        self._fetcher = fetcher
        self._settings = settings
        self._parser = parser or DependentsParser(base_url=settings.base_url)
        self._resolver = resolver or PackageResolver(fetcher)
        self._progress = progress or NullProgressSink()

    async def build_dependents_url(self, repo_url: str, options: QueryOptions) -> str:
        """Compute the first page URL, scoped to a package when requested.

        Args:
            repo_url: Canonical URL of the queried repository
            options: Query options

        Returns:
            URL of the first dependents page

        Raises:
            PackageNotFoundError: If the package is unknown and the policy is ABORT
        """
        base_url = dependents_url(repo_url, options.dependent_type)
        package_name = options.package_name
        if not package_name:
            return base_url

        logger.info(f"Looking for package: {package_name}")
        initial_html = await self._fetcher.fetch_page(base_url)

        if not self._resolver.has_package_filter(initial_html):
            logger.warning(
                f"Package filtering is not available for {repo_url}; "
                f"continuing without package filter"
            )
            return base_url

        if self._resolver.is_already_filtered_by_package(initial_html, package_name):
            logger.info(f'Already on package "{package_name}" page')
            return base_url

        package_info = await self._resolver.resolve(repo_url, package_name)
        if not package_info.found:
            if options.on_package_missing is PackageMissPolicy.ABORT:
                raise PackageNotFoundError(package_name, package_info.available_package_names)
            logger.warning(
                f'Package "{package_name}" not found, falling back to all dependents. '
                f"Available packages: {', '.join(package_info.available_package_names) or 'none'}"
            )
            return base_url

        logger.info(f'Found package "{package_name}"')
        return dependents_url(repo_url, options.dependent_type, package_info.resolved_id)

    async def fetch_all_dependents(
        self,
        initial_url: str,
        self_url: str,
        min_stars: int,
    ) -> Tuple[List[DependentEntry], AggregateStats]:
        """Walk every dependents page starting at ``initial_url``.

        Args:
            initial_url: URL of the first page
            self_url: URL of the queried repository, excluded from results
            min_stars: Minimum stars for an entry to be kept

        Returns:
            Tuple of (entries in discovery order, aggregate stats)

        Raises:
            NetworkError: If any page cannot be fetched
            PaginationLimitExceeded: If pagination does not end within max_pages
        """
        entries: List[DependentEntry] = []
        stats = AggregateStats()

        first_page_html = await self._fetcher.fetch_page(initial_url)
        expected_total = self._parser.parse_total_count(first_page_html)
        logger.info(f"GitHub reports {expected_total} dependents for {self_url}")

        self._progress.start(expected_total)
        try:
            html = first_page_html
            page_url = initial_url
            pages = 0

            while True:
                page = self._parser.parse_page(html, min_stars, self_url)
                pages += 1
                entries.extend(page.entries)
                stats = stats.with_page(page)
                logger.debug(
                    f"Page {pages}: {page.total_rows_seen} rows, "
                    f"{len(page.entries)} kept ({page_url})"
                )

                if page.next_page_url is None:
                    self._progress.update(expected_total)
                    break

                self._progress.update(min(stats.total_count, expected_total))

                if pages >= self._settings.max_pages:
                    raise PaginationLimitExceeded(self._settings.max_pages, page.next_page_url)

                page_url = page.next_page_url
                html = await self._fetcher.fetch_page(page_url)
        finally:
            self._progress.stop()

        logger.info(
            f"Scanned {pages} pages: {stats.total_count} dependents, "
            f"{stats.with_stars_count} with stars, {len(entries)} kept"
        )
        return entries, stats

    async def run(self, repo: RepositoryRef, options: QueryOptions) -> DependentsResult:
        """Collect, rank and return the dependents of ``repo``.

        Args:
            repo: Repository to query
            options: Query options

        Returns:
            DependentsResult with the ranked and the discovery ordered views
        """
        start_time = time.time()
        repo_url = repo.url(self._settings.base_url)

        initial_url = await self.build_dependents_url(repo_url, options)
        entries, stats = await self.fetch_all_dependents(initial_url, repo_url, options.min_stars)
        result_set = rank_dependents(entries, options.rows)

        logger.info(
            f"Collected {len(result_set)} {options.dependent_type.label} for "
            f"{repo.full_name} in {time.time() - start_time:.2f} seconds"
        )
        return DependentsResult(
            result_set=result_set,
            latest_dependents=tuple(entries),
            stats=stats,
        )

    async def close(self) -> None:
        """Close connections."""
        await self._fetcher.close()
