from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from metacat.core.adapters.memory import MemoryCatalogStore  # noqa: E402

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


class TickingClock:
    """Clock returning `start`, then `start + step`, `start + 2*step`, ..."""

    def __init__(self, start: datetime = T0, step: timedelta = timedelta(0)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        return value


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def store(clock: TickingClock) -> MemoryCatalogStore:
    return MemoryCatalogStore(clock=clock)


@pytest.fixture
def ticking_store():
    """Factory for stores whose clock advances by `step` on every read."""

    def _make(step: timedelta) -> MemoryCatalogStore:
        return MemoryCatalogStore(clock=TickingClock(step=step))

    return _make
