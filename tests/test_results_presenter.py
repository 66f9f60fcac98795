"""Tests for result rendering."""
import io
import json

import pytest
from rich.console import Console

from ghtopdep.domain.models import AggregateStats, DependentEntry, DependentsResult, ResultSet
from ghtopdep.presentation.results_presenter import ResultsPresenter, format_stars


TOP = DependentEntry(url="https://github.com/carol/site", stars=2500)
NEW = DependentEntry(url="https://github.com/alice/app", stars=120)
RESULT = DependentsResult(
    result_set=ResultSet(repositories=(TOP, NEW)),
    latest_dependents=(NEW, TOP),
    stats=AggregateStats(total_count=9, with_stars_count=4),
)


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def presenter(output) -> ResultsPresenter:
    return ResultsPresenter(Console(file=output, width=120, color_system=None))


@pytest.mark.parametrize(
    "stars, expected",
    [(0, "0"), (999, "999"), (1000, "1K"), (1234, "1.2K"), (9876, "9.9K"), (12345, "12K"), (2_300_000, "2.3M")],
)
def test_format_stars(stars, expected):
    assert format_stars(stars) == expected


def test_display_table(presenter, output):
    presenter.display(RESULT, "repositories", "table", rows=1)
    text = output.getvalue()

    assert "Top repositories by stars" in text
    assert "Latest repositories" in text
    assert "https://github.com/carol/site" in text
    assert "2.5K" in text
    assert "Found 9 repositories, others are private" in text
    assert "Found 4 repositories with more than zero stars" in text
    latest_section = text.split("Latest repositories")[1]
    assert "https://github.com/alice/app" in latest_section
    assert "https://github.com/carol/site" not in latest_section


def test_display_table_empty(presenter, output):
    presenter.display(DependentsResult(result_set=ResultSet()), "packages", "table")

    assert "No packages found" in output.getvalue()


def test_display_json(presenter, output):
    presenter.display(RESULT, "repositories", "json")

    assert json.loads(output.getvalue()) == RESULT.to_dict()


def test_display_project_info(presenter, output):
    presenter.display_project_info("octo/lib", "packages", "@octo/cli")
    text = output.getvalue()

    assert "octo/lib" in text
    assert "packages" in text
    assert "@octo/cli" in text


def test_display_package_not_found(presenter, output):
    presenter.display_package_not_found("@octo/nope", ["@octo/core", "@octo/cli"])
    text = output.getvalue()

    assert 'Package "@octo/nope" not found' in text
    assert "- @octo/core" in text
    assert "- @octo/cli" in text


def test_display_package_not_found_without_packages(presenter, output):
    presenter.display_package_not_found("@octo/nope", [])

    assert "No packages found for this repository" in output.getvalue()
