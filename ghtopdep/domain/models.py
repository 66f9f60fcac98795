"""Domain models representing dependents of a GitHub repository."""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ghtopdep.domain.exceptions import InputError


REPOSITORY_PATTERN = re.compile(r"^(?P<owner>[\w-]+)/(?P<name>[\w.-]+)$")


class DependentType(Enum):
    """Kind of dependents listed by GitHub, valued as the query parameter."""
    REPOSITORY = "REPOSITORY"
    PACKAGE = "PACKAGE"

    @classmethod
    def from_label(cls, label: str) -> "DependentType":
        """Map the user facing label ("repositories" or "packages")."""
        labels = {"repositories": cls.REPOSITORY, "packages": cls.PACKAGE}
        try:
            return labels[label]
        except KeyError:
            raise InputError(
                f'Invalid dependent type "{label}". Use "repositories" or "packages"'
            ) from None

    @property
    def label(self) -> str:
        return "repositories" if self is DependentType.REPOSITORY else "packages"


class PackageMissPolicy(Enum):
    """What to do when a requested package name is not offered by GitHub."""
    ABORT = "abort"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class RepositoryRef:
    """Immutable reference to the repository being queried."""
    owner: str
    name: str

    @classmethod
    def parse(cls, identifier: str, base_url: str = "https://github.com") -> "RepositoryRef":
        """Parse ``owner/repo`` or a full repository URL.

        Args:
            identifier: Repository identifier given by the user
            base_url: Site prefix accepted for the URL form

        Returns:
            RepositoryRef for the identifier

        Raises:
            InputError: If the identifier is malformed
        """
        value = (identifier or "").strip()
        prefix = base_url.rstrip("/") + "/"
        if value.startswith(prefix):
            value = value[len(prefix):].rstrip("/")

        match = REPOSITORY_PATTERN.match(value)
        if not match:
            raise InputError(
                f'Invalid repository "{identifier}". Use "owner/repo" '
                f'(e.g. "facebook/react") or a {prefix}owner/repo URL'
            )
        return cls(owner=match.group("owner"), name=match.group("name"))

    @property
    def full_name(self) -> str:
        """Returns the full repository name (owner/name)."""
        return f"{self.owner}/{self.name}"

    def url(self, base_url: str = "https://github.com") -> str:
        """Returns the canonical repository URL."""
        return f"{base_url.rstrip('/')}/{self.full_name}"


@dataclass(frozen=True)
class DependentEntry:
    """One dependent listed by GitHub."""
    url: str
    stars: int

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "stars": self.stars}


@dataclass(frozen=True)
class DependentPageResult:
    """Everything extracted from a single dependents page."""
    entries: Tuple[DependentEntry, ...]
    total_rows_seen: int
    with_stars_count: int
    next_page_url: Optional[str] = None


@dataclass(frozen=True)
class PackageInfo:
    """Outcome of looking up a package name in the package menu."""
    resolved_id: Optional[str]
    available_package_names: Tuple[str, ...] = ()

    @property
    def found(self) -> bool:
        return self.resolved_id is not None


@dataclass(frozen=True)
class AggregateStats:
    """Running totals across every fetched page."""
    total_count: int = 0
    with_stars_count: int = 0

    def with_page(self, page: DependentPageResult) -> "AggregateStats":
        """Returns new totals including the given page."""
        return AggregateStats(
            total_count=self.total_count + page.total_rows_seen,
            with_stars_count=self.with_stars_count + page.with_stars_count,
        )


@dataclass(frozen=True)
class ResultSet:
    """Deduplicated dependents sorted by stars, truncated to the row limit."""
    repositories: Tuple[DependentEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.repositories)

    def __iter__(self):
        return iter(self.repositories)


@dataclass(frozen=True)
class DependentsResult:
    """Result of one run: popularity view, recency view and totals."""
    result_set: ResultSet
    latest_dependents: Tuple[DependentEntry, ...] = field(default_factory=tuple)
    stats: AggregateStats = field(default_factory=AggregateStats)

    @property
    def repositories(self) -> Tuple[DependentEntry, ...]:
        return self.result_set.repositories

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form used for JSON output."""
        return {
            "repositories": [entry.to_dict() for entry in self.repositories],
            "latestDependents": [entry.to_dict() for entry in self.latest_dependents],
            "stats": {
                "totalDependents": self.stats.total_count,
                "withStars": self.stats.with_stars_count,
                "fetchedRepos": len(self.repositories),
            },
        }
