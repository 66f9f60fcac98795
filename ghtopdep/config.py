"""Configuration objects built once at the process boundary."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from ghtopdep.domain.exceptions import InputError
from ghtopdep.domain.models import DependentType, PackageMissPolicy


APP_NAME = "top-github-dependents-by-stars"
APP_VERSION = "0.1.0"

DEFAULT_ROWS = 10
DEFAULT_MIN_STARS = 5


@dataclass(frozen=True)
class Selectors:
    """CSS selectors used to extract data from the dependents page.

    Bump ``version`` whenever GitHub's markup forces a change here.
    """
    version: str = "2024.1"
    dependents_count: str = ".table-list-header-toggle .btn-link.selected"
    pagination_link: str = "#dependents > div.paginate-container > div > a"
    dependent_row: str = "#dependents > div.Box > div.flex-items-center"
    repository_link: str = "span > a.text-bold"
    stars: str = "div > span:nth-child(1)"
    package_option: str = 'a.select-menu-item[href*="package_id"]'
    package_name: str = ".select-menu-item-text"
    package_filter_summary: str = "details.select-menu > summary.select-menu-button"
    selected_package: str = ".css-truncate-target"


DEFAULT_SELECTORS = Selectors()


def _default_cache_dir() -> Path:
    return Path.home() / ".cache" / APP_NAME


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise InputError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    """Process wide settings.

    Built once via ``from_env`` and passed to every component that needs it.
    """
    token: Optional[str] = None
    base_url: str = "https://github.com"
    user_agent: str = f"{APP_NAME}/{APP_VERSION}"
    timeout_seconds: float = 30.0
    max_retries: int = 15
    max_pages: int = 1000
    cache_dir: Path = field(default_factory=_default_cache_dir)
    cache_ttl_seconds: int = 86400

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from, ``os.environ`` when None

        Returns:
            Settings with environment overrides applied
        """
        if environ is None:
            environ = os.environ

        cache_dir = environ.get("GHTOPDEP_CACHE_DIR")
        return cls(
            token=environ.get("GITHUB_TOKEN") or environ.get("GHTOPDEP_TOKEN") or None,
            base_url=environ.get("GHTOPDEP_BASE_URL", "https://github.com").rstrip("/"),
            max_pages=_env_int(environ, "GHTOPDEP_MAX_PAGES", 1000),
            cache_dir=Path(cache_dir).expanduser() if cache_dir else _default_cache_dir(),
            cache_ttl_seconds=_env_int(environ, "GHTOPDEP_CACHE_TTL", 86400),
        )


@dataclass(frozen=True)
class QueryOptions:
    """Validated options for one dependents query."""
    dependent_type: DependentType = DependentType.REPOSITORY
    rows: int = DEFAULT_ROWS
    min_stars: int = DEFAULT_MIN_STARS
    package_name: Optional[str] = None
    on_package_missing: PackageMissPolicy = PackageMissPolicy.ABORT

    def __post_init__(self):
        if isinstance(self.rows, bool) or not isinstance(self.rows, int) or self.rows <= 0:
            raise InputError(f"rows must be a positive integer, got {self.rows!r}")
        if (
            isinstance(self.min_stars, bool)
            or not isinstance(self.min_stars, int)
            or self.min_stars < 0
        ):
            raise InputError(f"min_stars must be a non-negative integer, got {self.min_stars!r}")
        if self.package_name is not None and not self.package_name.strip():
            raise InputError("package_name must not be empty")

    @classmethod
    def from_labels(
        cls,
        type: str = "repositories",
        rows: int = DEFAULT_ROWS,
        min_stars: int = DEFAULT_MIN_STARS,
        package_name: Optional[str] = None,
        on_package_missing: str = "abort",
    ) -> "QueryOptions":
        """Build options from plain string labels as accepted by the API and CLI."""
        try:
            policy = PackageMissPolicy(on_package_missing)
        except ValueError:
            raise InputError(
                f'Invalid package miss policy "{on_package_missing}". Use "abort" or "fallback"'
            ) from None

        return cls(
            dependent_type=DependentType.from_label(type),
            rows=rows,
            min_stars=min_stars,
            package_name=package_name,
            on_package_missing=policy,
        )
