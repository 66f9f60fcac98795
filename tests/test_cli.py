"""Tests for the command line entry point."""
import json

import pytest

from ghtopdep import cli
from ghtopdep.infrastructure.response_cache import TwoTierResponseCache
from pages import dependent_row, dependents_page, package_menu


FIRST_URL = "https://github.com/octo/lib/network/dependents?dependent_type=REPOSITORY"
MENU_URL = "https://github.com/octo/lib/network/dependents"


@pytest.fixture
def environment(tmp_path, monkeypatch):
    """Point the CLI at a temporary cache directory and provide a token."""
    for name in ("GITHUB_TOKEN", "GHTOPDEP_TOKEN", "GHTOPDEP_BASE_URL", "GHTOPDEP_MAX_PAGES", "GHTOPDEP_CACHE_TTL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GHTOPDEP_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_test")
    return TwoTierResponseCache(tmp_path / "cache")


def test_parser_defaults():
    args = cli.build_parser().parse_args(["octo/lib"])

    assert args.type == "repositories"
    assert args.rows == 10
    assert args.minstar == 5
    assert args.package_name is None
    assert args.on_package_missing == "abort"
    assert not args.json


def test_json_output(environment, capsys):
    environment.set(
        FIRST_URL,
        dependents_page(
            rows=[dependent_row("alice", "app", stars="12"), dependent_row("carol", "site", stars="700")],
            total="2",
        ),
    )

    exit_code = cli.main(["https://github.com/octo/lib", "--json", "--rows", "1"])

    assert exit_code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["repositories"] == [{"url": "https://github.com/carol/site", "stars": 700}]
    assert output["stats"]["totalDependents"] == 2


def test_table_output(environment, capsys):
    environment.set(FIRST_URL, dependents_page(rows=[dependent_row("alice", "app", stars="12")], total="1"))

    assert cli.main(["octo/lib"]) == 0

    out = capsys.readouterr().out
    assert "octo/lib" in out
    assert "https://github.com/alice/app" in out


def test_missing_token(environment, monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN")

    assert cli.main(["octo/lib"]) == 1


def test_invalid_repository(environment):
    assert cli.main(["not a repository"]) == 1


def test_invalid_rows(environment):
    assert cli.main(["octo/lib", "--rows", "0"]) == 1


def test_package_not_found(environment, capsys):
    menu = package_menu(current="@octo/core", options=[("@octo/core", "UGFja2FnZS0x")])
    environment.set(FIRST_URL, dependents_page(menu=menu))
    environment.set(MENU_URL, dependents_page(menu=menu))

    assert cli.main(["octo/lib", "--package", "@octo/nope"]) == 1

    out = capsys.readouterr().out
    assert 'Package "@octo/nope" not found' in out
    assert "@octo/core" in out
