# ebrake/monitor.py
# Poll loop around one Brake: run a check, record the sample, report trips

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple
import sys
import threading
import time

from observability import metrics
from .brake import Brake, BrakeSnapshot
from .checks import Check
from .config import BrakeConfig
from .errors import InvalidConfiguration
from .reaper import Reaper, kill_current_process

OnTrip = Callable[[str], None]

@dataclass
class BrakeMonitor:
    """
    Drives a Brake from a health check and reports trips.

    All access to the brake goes through one lock, so a sample and the trip
    check that follows it are never interleaved with another thread's sample.

    With latch=True, on_trip fires once per trip episode: it re-arms only
    after the brake has cleared (failures aged out of the window). The Brake
    itself never latches.
    """
    brake: Brake
    check: Check
    on_trip: OnTrip
    latch: bool = True
    now_fn: Callable[[], float] = time.monotonic

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _fired: bool = False

    def observe(self, outcome: bool) -> BrakeSnapshot:
        with self._lock:
            self.brake.add_sample(outcome)
            snap = self.brake.snapshot()
        metrics.samples_total.labels(outcome="success" if outcome else "failure").inc()
        metrics.window_failures.set(snap.failures)
        metrics.window_samples.set(snap.samples)
        return snap

    def tripped(self) -> bool:
        with self._lock:
            return self.brake.should_trip()

    def snapshot(self) -> BrakeSnapshot:
        with self._lock:
            return self.brake.snapshot()

    def poll(self) -> bool:
        """Run the check once. A check that raises counts as a failure."""
        t0 = self.now_fn()
        try:
            outcome = bool(self.check())
        except Exception as e:
            name = getattr(self.check, "__name__", "check")
            print(f"[EBRAKE] {name} raised {e.__class__.__name__}: {e}", file=sys.stderr)
            outcome = False
        metrics.check_latency_ms.observe((self.now_fn() - t0) * 1000.0)
        return outcome

    def step(self) -> BrakeSnapshot:
        snap = self.observe(self.poll())
        if not snap.tripped:
            self._fired = False
            return snap
        if self.latch and self._fired:
            return snap
        self._fired = True
        metrics.brake_trips_total.inc()
        reason = (f"HARD:ebrake_tripped failures={snap.failures} "
                  f"window={snap.capacity} threshold={snap.threshold}")
        print(f"[EBRAKE] {reason}", file=sys.stderr)
        self.on_trip(reason)
        return snap


def start_monitor(
    check: Check,
    *,
    config: Optional[BrakeConfig] = None,
    on_trip: Optional[OnTrip] = None,
) -> Tuple[BrakeMonitor, threading.Event]:
    """
    Spin up a daemon thread that polls `check` every POLL_INTERVAL_S seconds.
    Without on_trip, a trip kills the current process via Reaper.
    Raises InvalidConfiguration before any thread starts if the config is unusable.
    Returns:
      (monitor, stop_evt)
    """
    cfg = config or BrakeConfig()
    brake = Brake.from_config(cfg)
    interval = cfg.POLL_INTERVAL_S
    if isinstance(interval, bool) or not isinstance(interval, (int, float)) or not interval > 0:
        raise InvalidConfiguration("poll_interval_s", interval, "must be > 0")
    if on_trip is None:
        on_trip = Reaper(kill=kill_current_process).trigger

    monitor = BrakeMonitor(brake=brake, check=check, on_trip=on_trip, latch=cfg.LATCH)

    if cfg.METRICS_ENABLED:
        metrics.serve_metrics(port=cfg.METRICS_PORT)
        print(f"[metrics] Prometheus exporter on http://127.0.0.1:{cfg.METRICS_PORT}/metrics",
              file=sys.stderr)

    stop_evt = threading.Event()

    def monitor_thread():
        # poll until stopped; wait() returns early when stop_evt is set
        while not stop_evt.is_set():
            try:
                monitor.step()
            except Exception as e:
                # a failed trip action or metrics call must not end monitoring
                print(f"[EBRAKE] monitor step failed: {e.__class__.__name__}: {e}", file=sys.stderr)
            stop_evt.wait(interval)

    t = threading.Thread(target=monitor_thread, name="ebrake-monitor", daemon=True)
    t.start()

    return monitor, stop_evt
