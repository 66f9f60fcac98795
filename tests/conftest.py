import pytest

from fakes import RecordingProgressSink
from ghtopdep.config import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(token="ghp_test", cache_dir=tmp_path / "cache", max_pages=50)


@pytest.fixture
def progress() -> RecordingProgressSink:
    return RecordingProgressSink()
