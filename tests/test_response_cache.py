"""Tests for the response caches."""
import os
import time

from ghtopdep.infrastructure.response_cache import MemoryResponseCache, TwoTierResponseCache, cache_key


URL = "https://github.com/octo/lib/network/dependents?dependent_type=REPOSITORY"


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_cache_key_is_stable():
    assert cache_key(URL) == cache_key(URL)
    assert cache_key(URL) != cache_key(URL + "&page=2")
    assert len(cache_key(URL)) == 32


def test_memory_cache_round_trip():
    cache = MemoryResponseCache()

    assert cache.get(URL) is None
    cache.set(URL, "<html>1</html>")
    assert cache.get(URL) == "<html>1</html>"

    cache.clear()
    assert cache.get(URL) is None


def test_memory_cache_expires():
    clock = FakeClock()
    cache = MemoryResponseCache(ttl_seconds=60, clock=clock)
    cache.set(URL, "<html>1</html>")

    clock.now += 59
    assert cache.get(URL) == "<html>1</html>"
    clock.now += 1
    assert cache.get(URL) is None


def test_two_tier_cache_persists_between_instances(tmp_path):
    TwoTierResponseCache(tmp_path).set(URL, "<html>persisted</html>")

    cache = TwoTierResponseCache(tmp_path)

    assert cache.get(URL) == "<html>persisted</html>"
    assert (tmp_path / f"{cache_key(URL)}.json").exists()


def test_two_tier_cache_creates_directory(tmp_path):
    cache_dir = tmp_path / "nested" / "cache"

    TwoTierResponseCache(cache_dir)

    assert cache_dir.is_dir()


def test_two_tier_cache_ignores_stale_files(tmp_path):
    TwoTierResponseCache(tmp_path).set(URL, "<html>old</html>")
    path = tmp_path / f"{cache_key(URL)}.json"
    two_days_ago = time.time() - 2 * 86400
    os.utime(path, (two_days_ago, two_days_ago))

    assert TwoTierResponseCache(tmp_path, ttl_seconds=86400).get(URL) is None


def test_two_tier_cache_ignores_unreadable_files(tmp_path):
    (tmp_path / f"{cache_key(URL)}.json").write_text("{not json", encoding="utf-8")

    assert TwoTierResponseCache(tmp_path).get(URL) is None


def test_two_tier_cache_clear(tmp_path):
    cache = TwoTierResponseCache(tmp_path)
    cache.set(URL, "<html>1</html>")
    cache.set(URL + "&page=2", "<html>2</html>")

    cache.clear()

    assert cache.get(URL) is None
    assert list(tmp_path.glob("*.json")) == []


def test_two_tier_cache_survives_failed_write(tmp_path):
    cache = TwoTierResponseCache(tmp_path)
    (tmp_path / f"{cache_key(URL)}.json").mkdir()

    cache.set(URL, "<html>1</html>")

    assert cache.get(URL) == "<html>1</html>"
