"""Response cache implementations for raw page bodies."""
import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

from ghtopdep.domain.response_cache_interface import IResponseCache


logger = logging.getLogger(__name__)


def cache_key(url: str) -> str:
    """Stable file-system friendly key for a request URL."""
    return hashlib.md5(url.encode("utf-8")).hexdigest()


class MemoryResponseCache(IResponseCache):
    """In-process cache with an optional time to live."""

    def __init__(self, ttl_seconds: Optional[float] = None, clock: Callable[[], float] = time.time):
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, str]] = {}

    def get(self, url: str) -> Optional[str]:
        entry = self._entries.get(cache_key(url))
        if entry is None:
            return None

        stored_at, body = entry
        if self._ttl_seconds is not None and self._clock() - stored_at >= self._ttl_seconds:
            del self._entries[cache_key(url)]
            return None
        return body

    def set(self, url: str, body: str) -> None:
        self._entries[cache_key(url)] = (self._clock(), body)

    def clear(self) -> None:
        self._entries.clear()


class TwoTierResponseCache(IResponseCache):
    """Memory cache in front of one JSON file per URL.

    Files older than the TTL count as misses. Concurrent writers are not
    coordinated; bodies for the same URL are expected to be identical.
    """

    def __init__(self, cache_dir: Path, ttl_seconds: float = 86400, clock: Callable[[], float] = time.time):
        """Initialize the cache.

        Args:
            cache_dir: Directory holding the cached files, created if missing
            ttl_seconds: Freshness window for both tiers
            clock: Returns the current time in seconds
        """
        self._cache_dir = Path(cache_dir)
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._memory = MemoryResponseCache(ttl_seconds=ttl_seconds, clock=clock)
        self._cache_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, url: str) -> Path:
        return self._cache_dir / f"{cache_key(url)}.json"

    def get(self, url: str) -> Optional[str]:
        body = self._memory.get(url)
        if body is not None:
            return body

        path = self._path_for(url)
        try:
            modified_at = path.stat().st_mtime
        except FileNotFoundError:
            return None

        if self._clock() - modified_at >= self._ttl_seconds:
            return None

        try:
            body = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable cache file {path}: {e}")
            return None

        if not isinstance(body, str):
            logger.warning(f"Ignoring cache file {path} with unexpected content")
            return None

        self._memory.set(url, body)
        return body

    def set(self, url: str, body: str) -> None:
        self._memory.set(url, body)
        path = self._path_for(url)
        try:
            path.write_text(json.dumps(body), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not write cache file {path}: {e}")
            return
        logger.debug(f"Cached {url} in {path}")

    def clear(self) -> None:
        self._memory.clear()
        removed = 0
        for path in self._cache_dir.glob("*.json"):
            path.unlink()
            removed += 1
        logger.info(f"Removed {removed} cached pages from {self._cache_dir}")
