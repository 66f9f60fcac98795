"""Programmatic entry point for fetching dependents.

Example::

    import asyncio
    from ghtopdep.api import get_dependents

    result = asyncio.run(get_dependents("facebook/react", rows=50, min_stars=10))
    for entry in result.repositories:
        print(entry.url, entry.stars)
"""
import logging
from typing import Any, Dict, Optional

from ghtopdep.application.dependents_service import DependentsService
from ghtopdep.config import QueryOptions, Settings
from ghtopdep.domain.exceptions import InputError
from ghtopdep.domain.models import DependentsResult, RepositoryRef
from ghtopdep.domain.progress_interface import IProgressSink
from ghtopdep.domain.response_cache_interface import IResponseCache
from ghtopdep.infrastructure.page_fetcher import AiohttpPageFetcher
from ghtopdep.infrastructure.response_cache import TwoTierResponseCache


logger = logging.getLogger(__name__)


def build_service(
    settings: Settings,
    cache: Optional[IResponseCache] = None,
    progress: Optional[IProgressSink] = None,
) -> DependentsService:
    """Wire the default fetcher, cache and parser into a DependentsService."""
    if cache is None:
        cache = TwoTierResponseCache(settings.cache_dir, ttl_seconds=settings.cache_ttl_seconds)
    fetcher = AiohttpPageFetcher(settings, cache=cache)
    return DependentsService(fetcher, settings, progress=progress)


async def get_dependents(
    repo: str,
    options: Optional[QueryOptions] = None,
    *,
    token: Optional[str] = None,
    settings: Optional[Settings] = None,
    cache: Optional[IResponseCache] = None,
    progress: Optional[IProgressSink] = None,
    **labels: Any,
) -> DependentsResult:
    """Fetch the dependents of ``repo`` sorted by stars.

    Args:
        repo: Repository as "owner/repo" or full GitHub URL
        options: Query options; built from ``labels`` when None
        token: GitHub token, defaults to the configured one
        settings: Settings, read from the environment when None
        cache: Response cache, the on-disk cache when None
        progress: Progress sink, silent when None
        **labels: Keyword arguments for QueryOptions.from_labels
            (type, rows, min_stars, package_name, on_package_missing)

    Returns:
        DependentsResult with ranked and latest dependents plus totals

    Raises:
        InputError: For a malformed repository, invalid options or no token
        NetworkError: If GitHub cannot be reached
        PackageNotFoundError: If the package is unknown and the run aborts
    """
    if settings is None:
        settings = Settings.from_env()

    repo_ref = RepositoryRef.parse(repo, settings.base_url)
    if options is None:
        options = QueryOptions.from_labels(**labels)
    elif labels:
        raise InputError("Pass either options or keyword options, not both")

    if not (token or settings.token):
        raise InputError(
            "GitHub token is required. Pass token= or set the GITHUB_TOKEN environment variable"
        )

    service = build_service(settings, cache=cache, progress=progress)
    try:
        return await service.run(repo_ref, options)
    finally:
        await service.close()


class DependentsClient:
    """Reusable client holding default options and credentials.

    Example::

        client = DependentsClient(token="...", rows=50)
        result = await client.get_dependents("vuejs/vue", min_stars=100)
    """

    def __init__(
        self,
        token: Optional[str] = None,
        settings: Optional[Settings] = None,
        cache: Optional[IResponseCache] = None,
        **default_labels: Any,
    ):
        self._token = token
        self._settings = settings
        self._cache = cache
        self._default_labels: Dict[str, Any] = dict(default_labels)

    async def get_dependents(self, repo: str, token: Optional[str] = None, **labels: Any) -> DependentsResult:
        merged = {**self._default_labels, **labels}
        return await get_dependents(
            repo,
            token=token or self._token,
            settings=self._settings,
            cache=self._cache,
            **merged,
        )
