"""Command line entry point.

Lists the dependents of a GitHub repository sorted by stars.
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from ghtopdep.api import build_service
from ghtopdep.config import APP_NAME, APP_VERSION, DEFAULT_MIN_STARS, DEFAULT_ROWS, QueryOptions, Settings
from ghtopdep.domain.exceptions import GhTopDepError, PackageNotFoundError
from ghtopdep.domain.models import RepositoryRef
from ghtopdep.infrastructure.progress import RichProgressSink
from ghtopdep.infrastructure.response_cache import MemoryResponseCache, TwoTierResponseCache
from ghtopdep.presentation.results_presenter import ResultsPresenter


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Sort the dependents (repositories or packages) of a GitHub repository by stars",
    )
    parser.add_argument("repository", help='GitHub repository URL or "owner/repo"')
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument(
        "--packages",
        dest="type",
        action="store_const",
        const="packages",
        default="repositories",
        help="Sort dependent packages instead of repositories",
    )
    parser.add_argument("--json", action="store_true", help="JSON output mode")
    parser.add_argument("--rows", type=int, default=DEFAULT_ROWS, help="Number of dependents to show")
    parser.add_argument("--minstar", type=int, default=DEFAULT_MIN_STARS, help="Minimum number of stars")
    parser.add_argument("--package", dest="package_name", help="Query dependents of a specific package")
    parser.add_argument(
        "--on-package-missing",
        choices=["abort", "fallback"],
        default="abort",
        help="Abort, or list all dependents, when --package is not found",
    )
    parser.add_argument("--token", help="GitHub token (defaults to GITHUB_TOKEN or GHTOPDEP_TOKEN)")
    parser.add_argument("--no-cache", action="store_true", help="Do not read or write the on-disk cache")
    parser.add_argument("--clear-cache", action="store_true", help="Empty the on-disk cache before running")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")
    return parser


def configure_logging(verbosity: int) -> None:
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbosity, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


async def run(args: argparse.Namespace, settings: Settings, presenter: ResultsPresenter) -> int:
    """Execute one query and print its results."""
    repo = RepositoryRef.parse(args.repository, settings.base_url)
    options = QueryOptions.from_labels(
        type=args.type,
        rows=args.rows,
        min_stars=args.minstar,
        package_name=args.package_name,
        on_package_missing=args.on_package_missing,
    )

    if args.no_cache:
        cache = MemoryResponseCache()
    else:
        cache = TwoTierResponseCache(settings.cache_dir, ttl_seconds=settings.cache_ttl_seconds)
        if args.clear_cache:
            cache.clear()

    entity_type = options.dependent_type.label
    output_format = "json" if args.json else "table"
    service = build_service(settings, cache=cache, progress=RichProgressSink())
    try:
        result = await service.run(repo, options)
    finally:
        await service.close()

    if output_format == "table":
        presenter.display_project_info(repo.full_name, entity_type, options.package_name)
    presenter.display(result, entity_type, output_format, rows=options.rows)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, run the query and return the exit code."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    presenter = ResultsPresenter()
    try:
        settings = Settings.from_env()
        token = args.token or settings.token
        if not token:
            logger.error(
                "GitHub token is required. Use --token or set the GITHUB_TOKEN environment variable"
            )
            return 1

        return asyncio.run(run(args, settings, presenter))

    except PackageNotFoundError as e:
        presenter.display_package_not_found(e.package_name, e.available_packages)
        return 1
    except GhTopDepError as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
