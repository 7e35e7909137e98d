"""
Shared fixtures.

- Dummy environment variables are set for every test (autouse)
- The cached settings instance is discarded around every test
- The project root is put on ``sys.path`` so ``import brainbox`` resolves
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from brainbox.api.client import CatalogClient  # noqa: E402
from brainbox.catalog.models import Item  # noqa: E402
from brainbox.config import clear_settings_cache  # noqa: E402


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Minimal dummy configuration; restored by ``monkeypatch`` afterwards."""

    env: dict[str, str] = {
        "API_BASE_URL": "http://catalog.test",
        "API_TOKEN": "test-token",
        "LOG_LEVEL": "DEBUG",
    }
    for k, v in env.items():
        monkeypatch.setenv(k, v)

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def make_item() -> Callable[..., Item]:
    """Build an ``Item`` from remote-style fields."""

    def _make(item_id: str | int, item_type: str = "note", **fields: Any) -> Item:
        return Item.model_validate({"_id": item_id, "type": item_type, **fields})

    return _make


@pytest.fixture
def client() -> AsyncMock:
    """A ``CatalogClient`` double whose request methods are awaitable mocks."""
    return AsyncMock(spec=CatalogClient)
