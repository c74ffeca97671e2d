"""Clock fixtures"""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from datetimezone import construction

#: 2014-01-01 12:00:00 UTC
FROZEN_EPOCH = 1388577600


@dataclass
class FrozenClock:
    """Manually driven replacement for `construction.clock`."""

    seconds: float = FROZEN_EPOCH

    def __call__(self) -> float:
        return self.seconds

    def advance(self, seconds: float) -> None:
        """Move the clock forward."""
        self.seconds += seconds


@pytest.fixture
def frozen_clock(monkeypatch: pytest.MonkeyPatch) -> FrozenClock:
    """Freeze `now` at 2014-01-01 12:00:00 UTC (plus a fraction of a second).

    Returns:
        FrozenClock: call `advance()` to move time forward.
    """
    clock = FrozenClock(FROZEN_EPOCH + 0.25)
    monkeypatch.setattr(construction, "clock", clock)
    return clock
