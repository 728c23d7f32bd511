from __future__ import annotations

import math
from typing import Dict, Generic, Hashable, Iterable, List, Tuple, TypeVar

K = TypeVar("K", bound=Hashable)


class HoldRepeater(Generic[K]):
    """Auto-repeat for held keys, one timer per key.

    The initial press is not emitted here: the driver delivers it as a normal
    intent. While a key stays held, it repeats once after ``delay`` seconds
    and then every ``interval`` seconds. Releasing a key resets its timer.
    A key fires at most once per update; repeats missed during a long frame
    are skipped, not replayed.
    """

    def __init__(self, keys: Iterable[K], delay: float = 0.1, interval: float = 0.1) -> None:
        if delay < 0:
            raise ValueError(f"delay must not be negative, got {delay}")
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.keys: Tuple[K, ...] = tuple(keys)
        self.delay = float(delay)
        self.interval = float(interval)
        self._held_for: Dict[K, float] = {}
        self._next_at: Dict[K, float] = {}

    def reset(self) -> None:
        self._held_for.clear()
        self._next_at.clear()

    def update(self, held: Iterable[K], elapsed: float) -> List[K]:
        if not math.isfinite(elapsed) or elapsed < 0:
            elapsed = 0.0
        held_now = set(held)
        fired: List[K] = []
        for key in self.keys:
            if key not in held_now:
                self._held_for.pop(key, None)
                self._next_at.pop(key, None)
                continue
            if key not in self._held_for:
                # First frame of the hold; its press was handled by the caller.
                self._held_for[key] = 0.0
                self._next_at[key] = self.delay
                continue
            held_for = self._held_for[key] + elapsed
            self._held_for[key] = held_for
            next_at = self._next_at[key]
            if held_for >= next_at:
                fired.append(key)
                missed = math.floor((held_for - next_at) / self.interval) + 1
                self._next_at[key] = next_at + missed * self.interval
        return fired
