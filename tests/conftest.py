# ruff: noqa: E402, I001
"""Pytest configuration for test isolation.

Two pieces of process-wide state can leak between tests:

- ``SC_*`` tunables and ``DATABASE_URL`` read from the environment (a developer
  ``.env`` or shell export would otherwise change matching behavior);
- SQLAlchemy engines cached per URL by ``db.client``.

An autouse fixture clears the former and disposes the latter after each test.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make sure the workspace `packages/` and `libs/db/src` dirs are importable
_ROOT = Path(__file__).resolve().parents[1]
_PATHS = [_ROOT / "packages", _ROOT / "libs" / "db" / "src", _ROOT]
sys.path[:0] = [str(p) for p in _PATHS if str(p) not in sys.path]

from db.client import dispose_engines
from smart_categorization.models import Transaction
from smart_categorization.repository import InMemoryRepository

from tests.helpers.factories import CATEGORIES, netflix_ledger

_ISOLATED_VARS = (
    "DATABASE_URL",
    "SC_FUZZY_THRESHOLD",
    "SC_AMOUNT_TOLERANCE",
    "SC_SECONDARY_CONCURRENCY",
    "SC_SUGGESTION_MIN_CONFIDENCE",
    "SMART_CATEGORIZATION_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch):
    """Start every test from a clean environment and no cached engines."""

    for var in _ISOLATED_VARS:
        monkeypatch.delenv(var, raising=False)
    yield
    dispose_engines()


@pytest.fixture
def ledger() -> list[Transaction]:
    return netflix_ledger()


@pytest.fixture
def repo(ledger: list[Transaction]) -> InMemoryRepository:
    return InMemoryRepository(ledger, CATEGORIES)
