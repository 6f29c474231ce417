# ebrake/reaper.py
# Termination actions a caller wires to a tripped brake. The brake itself never kills anything.

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
import os
import signal
import sys

from observability.metrics import reaper_trips_total

KillFn = Callable[[str], None]


def reason_label(reason: str) -> str:
    """Metric label for a trip reason: its first token ("HARD:ebrake_tripped"), or "unknown"."""
    tokens = reason.split()
    return tokens[0] if tokens else "unknown"


@dataclass
class Reaper:
    """
    Runs one kill strategy when the brake trips.

    The kill always runs, whatever the reason string looks like; the log line
    and the trip counter come first so they survive a kill that never returns.
    """
    kill: KillFn
    trips: int = 0

    def trigger(self, reason: str) -> None:
        self.trips += 1
        reaper_trips_total.labels(reason=reason_label(reason)).inc()
        print(f"[REAPER] trip #{self.trips}, terminating: {reason or '<no reason>'}", file=sys.stderr)
        self.kill(reason)


# --- kill strategies ---

def exit_process(code: int = 1) -> KillFn:
    # Hard exit without cleanup; atexit handlers and finally blocks do not run
    def _exit(_: str) -> None:
        os._exit(code)
    return _exit


def kill_current_process(reason: str) -> None:
    exit_process(1)(reason)


def signal_pid(pid: int, sig: int = signal.SIGTERM) -> KillFn:
    """
    Kill strategy for a watchdog running beside the process it guards.
    A PID that is gone or not ours to signal is reported, never raised:
    the monitor loop must outlive a failed kill.
    """
    sig_name = signal.Signals(sig).name

    def _signal(reason: str) -> None:
        try:
            os.kill(pid, sig)
        except ProcessLookupError:
            print(f"[REAPER] PID {pid} not found", file=sys.stderr)
        except PermissionError:
            print(f"[REAPER] not permitted to send {sig_name} to PID {pid}", file=sys.stderr)
    return _signal
