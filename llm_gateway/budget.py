"""Process-wide token budget used as a soft cost guard."""
from __future__ import annotations

import threading

from config.settings import settings


class TokenBudget:
    """Cumulative token counter with a guard threshold.

    The count lives in memory only and starts over when the process restarts.
    """

    def __init__(self, ceiling: int, ratio: float = 0.9) -> None:
        self.ceiling = ceiling
        self.ratio = ratio
        self._used = 0
        self._lock = threading.Lock()

    @property
    def used(self) -> int:
        with self._lock:
            return self._used

    @property
    def threshold(self) -> float:
        return self.ceiling * self.ratio

    def record(self, tokens: int) -> int:
        """Add ``tokens`` and return the new cumulative total."""

        if tokens < 0:
            raise ValueError("token count must be non-negative")
        with self._lock:
            self._used += tokens
            return self._used

    def exhausted(self) -> bool:
        return self.used > self.threshold

    def reset(self) -> None:
        with self._lock:
            self._used = 0


default_budget = TokenBudget(settings.TOKEN_BUDGET, settings.BUDGET_GUARD_RATIO)


__all__ = ["TokenBudget", "default_budget"]
