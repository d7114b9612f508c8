"""Shared fixtures."""

from __future__ import annotations

import pytest

from whereabouts.adapters.cache import NullCache
from whereabouts.adapters.normalization import RuleBasedNormalizer
from whereabouts.config import reset_config


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Keep environment overrides from leaking into tests."""
    for var in (
        "WHEREABOUTS_CENTRALA_API_KEY",
        "WHEREABOUTS_NORMALIZER_STRATEGY",
        "WHEREABOUTS_SEARCH_MAX_ATTEMPTS",
        "WHEREABOUTS_SEARCH_TARGET_NAME",
    ):
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def normalizer():
    """Deterministic normalizer without fuzzy snapping."""
    return RuleBasedNormalizer(fuzzy_threshold=None)


@pytest.fixture
def null_cache():
    return NullCache()
