"""Shared fixtures for cronexpr tests."""

from __future__ import annotations

import logging
import os

import pytest

from cronexpr.api import compile_cached


@pytest.fixture(autouse=True)
def reset_cronexpr_logging():
    """Remove handlers installed by configure_logging between tests."""
    yield
    logger = logging.getLogger("cronexpr")
    for handler in list(logger.handlers):
        if getattr(handler, "_cronexpr_handler", False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def clear_compile_cache():
    """Start every test with an empty expression cache."""
    compile_cached.cache_clear()
    yield


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove CRONEXPR_* variables from the environment."""
    for key in list(os.environ):
        if key.startswith("CRONEXPR_"):
            monkeypatch.delenv(key)
    return monkeypatch
