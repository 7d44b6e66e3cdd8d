import pytest

from core.config import settings
from helpers import SAMPLE_REPORT


@pytest.fixture(autouse=True)
def disable_upstream_cache(monkeypatch):
    """Each test sees fresh upstream data unless it turns the cache back on."""
    monkeypatch.setitem(settings.cache, "enabled", False)


@pytest.fixture
def sample_report() -> str:
    return SAMPLE_REPORT
