# ebrake/window.py
# Fixed-capacity circular buffer of health samples (True = success, False = failure)

from __future__ import annotations
from typing import List

import numpy as np

from .errors import require_int


class SampleWindow:
    """
    Moving window over the most recent `capacity` boolean samples.

    Storage is a fixed numpy arena plus two counters:
      - write_cursor: next slot to overwrite, always in [0, capacity)
      - filled_count: insertions so far, saturating at capacity

    Until the window fills, the logical samples are arena[:filled_count]
    (the cursor has not wrapped yet). Once full, every slot is logical and
    each insert evicts the oldest sample, which is the one under the cursor.

    A running failure tally is kept so failure_count() is O(1);
    recount_failures() rescans the arena and must always agree with it.
    """

    __slots__ = ("_capacity", "_arena", "_cursor", "_filled", "_failures")

    def __init__(self, capacity: int) -> None:
        self._capacity = require_int("capacity", capacity, minimum=1)
        self._arena = np.ones(self._capacity, dtype=bool)
        self._cursor = 0
        self._filled = 0
        self._failures = 0

    # --- read-only state ---

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def write_cursor(self) -> int:
        return self._cursor

    @property
    def filled_count(self) -> int:
        return self._filled

    @property
    def is_full(self) -> bool:
        return self._filled == self._capacity

    def __len__(self) -> int:
        return self._filled

    def __repr__(self) -> str:
        return (f"SampleWindow(capacity={self._capacity}, samples={self._filled}, "
                f"failures={self._failures})")

    # --- mutation ---

    def insert(self, outcome: bool) -> None:
        ok = bool(outcome)
        slot = self._cursor
        if self._filled == self._capacity:
            # slot holds the oldest sample; its failure leaves the window
            if not self._arena[slot]:
                self._failures -= 1
        else:
            self._filled += 1
        self._arena[slot] = ok
        if not ok:
            self._failures += 1
        self._cursor = (slot + 1) % self._capacity

    # --- counts ---

    def failure_count(self) -> int:
        return self._failures

    def success_count(self) -> int:
        return self._filled - self._failures

    def recount_failures(self) -> int:
        """Count failures by scanning the logical window (O(capacity))."""
        return int(np.count_nonzero(~self._arena[: self._filled]))

    def samples(self) -> List[bool]:
        """Logical window, oldest first."""
        if not self.is_full:
            return self._arena[: self._filled].tolist()
        return np.concatenate((self._arena[self._cursor:], self._arena[: self._cursor])).tolist()
