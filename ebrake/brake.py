# ebrake/brake.py
# Trip decision: compares the window's failure count to a fixed threshold

from __future__ import annotations
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any, Dict

from .errors import require_int
from .window import SampleWindow

if TYPE_CHECKING:
    from .config import BrakeConfig


@dataclass(frozen=True)
class BrakeSnapshot:
    """Point-in-time view of a Brake, safe to hand to other threads or serialize."""
    capacity: int
    threshold: int
    samples: int
    failures: int
    successes: int
    tripped: bool

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, eq=False)
class Brake:
    """
    Emergency brake over one stream of health samples.

    should_trip() is True iff failures in the window >= threshold:
      - threshold 0 trips immediately, even before any sample
      - threshold > window size never trips
    There is no latched state. When failures age out of the window the brake
    clears again. The brake only advises; reacting to a trip (killing a
    process, paging someone) is the caller's job.

    Not thread-safe. Callers sharing one instance guard it with a single lock
    (see ebrake.monitor.BrakeMonitor).
    """
    sample_window_size: int
    threshold: int
    window: SampleWindow = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        window = SampleWindow(self.sample_window_size)
        threshold = require_int("threshold", self.threshold, minimum=0)
        object.__setattr__(self, "window", window)
        object.__setattr__(self, "sample_window_size", window.capacity)
        object.__setattr__(self, "threshold", threshold)

    @classmethod
    def from_config(cls, cfg: "BrakeConfig") -> "Brake":
        return cls(sample_window_size=cfg.WINDOW_SIZE, threshold=cfg.THRESHOLD)

    def add_sample(self, outcome: bool) -> None:
        self.window.insert(outcome)

    def should_trip(self) -> bool:
        return self.window.failure_count() >= self.threshold

    def trigger(self) -> bool:
        return self.should_trip()

    @property
    def failures(self) -> int:
        return self.window.failure_count()

    @property
    def successes(self) -> int:
        return self.window.success_count()

    @property
    def samples(self) -> int:
        return len(self.window)

    def snapshot(self) -> BrakeSnapshot:
        return BrakeSnapshot(
            capacity=self.window.capacity,
            threshold=self.threshold,
            samples=len(self.window),
            failures=self.window.failure_count(),
            successes=self.window.success_count(),
            tripped=self.should_trip(),
        )
