# ebrake/cli.py
# Command-line watchdog: poll one dependency and act when the brake trips

from __future__ import annotations

import argparse
import json
import signal
import sys
from typing import Optional, Sequence

from .brake import Brake
from .checks import Check, command_check, pid_check, tcp_check
from .config import BrakeConfig, load_config
from .errors import InvalidConfiguration
from .monitor import BrakeMonitor, start_monitor
from .reaper import Reaper, kill_current_process, signal_pid

EXIT_OK = 0
EXIT_TRIPPED = 1
EXIT_CONFIG = 2


# ----------------------------- helpers -----------------------------

def _parse_hostport(s: str) -> tuple[str, int]:
    host, sep, port = s.rpartition(":")
    if not sep or not host:
        raise argparse.ArgumentTypeError(f"expected HOST:PORT, got {s!r}")
    try:
        return host, int(port)
    except ValueError:
        raise argparse.ArgumentTypeError(f"bad port in {s!r}") from None

def _build_check(args: argparse.Namespace, cfg: BrakeConfig) -> Check:
    if args.tcp is not None:
        host, port = args.tcp
        return tcp_check(host, port, timeout_s=cfg.CHECK_TIMEOUT_S)
    if args.pid is not None:
        return pid_check(args.pid)
    return command_check(args.cmd, timeout_s=cfg.CHECK_TIMEOUT_S)

def _apply_overrides(cfg: BrakeConfig, args: argparse.Namespace) -> BrakeConfig:
    if args.window is not None:
        cfg.WINDOW_SIZE = args.window
    if args.threshold is not None:
        cfg.THRESHOLD = args.threshold
    if args.interval is not None:
        cfg.POLL_INTERVAL_S = args.interval
    if args.timeout is not None:
        cfg.CHECK_TIMEOUT_S = args.timeout
    if args.metrics_port is not None:
        cfg.METRICS_ENABLED = True
        cfg.METRICS_PORT = args.metrics_port
    return cfg


# ----------------------------- argparse -----------------------------

def _make_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="python -m ebrake",
        description="Trip when too many recent health checks of a dependency fail",
    )
    target = p.add_mutually_exclusive_group(required=True)
    target.add_argument("--tcp", type=_parse_hostport, metavar="HOST:PORT",
                        help="Healthy while a TCP connection to HOST:PORT succeeds")
    target.add_argument("--pid", type=int, help="Healthy while process PID exists")
    target.add_argument("--cmd", nargs=argparse.REMAINDER,
                        help="Healthy while the command exits 0 (must be last)")

    p.add_argument("--window", type=int, default=None, help="Samples kept (default: $EBRAKE_WINDOW_SIZE or 25)")
    p.add_argument("--threshold", type=int, default=None, help="Failures in window that trip (default: $EBRAKE_THRESHOLD or 3)")
    p.add_argument("--interval", type=float, default=None, help="Seconds between checks")
    p.add_argument("--timeout", type=float, default=None, help="Per-check timeout in seconds")
    p.add_argument("--metrics-port", type=int, default=None, help="Serve Prometheus metrics on this port")
    p.add_argument("--signal-pid", type=int, default=None,
                   help="On trip, send SIGTERM to this PID instead of exiting")
    p.add_argument("--once", action="store_true",
                   help="Run a single check, print the brake state as JSON, exit 1 if tripped")
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _make_parser()
    args = parser.parse_args(argv)
    if args.cmd is not None and not args.cmd:
        parser.error("--cmd needs a command")

    cfg = _apply_overrides(load_config(), args)
    try:
        brake = Brake.from_config(cfg)
    except InvalidConfiguration as e:
        print(f"[EBRAKE] {e}", file=sys.stderr)
        return EXIT_CONFIG

    check = _build_check(args, cfg)

    if args.once:
        monitor = BrakeMonitor(brake=brake, check=check, on_trip=lambda _reason: None)
        snap = monitor.step()
        print(json.dumps(snap.as_dict(), sort_keys=True))
        return EXIT_TRIPPED if snap.tripped else EXIT_OK

    if args.signal_pid is not None:
        kill = signal_pid(args.signal_pid, signal.SIGTERM)
    else:
        kill = kill_current_process
    try:
        _, stop_evt = start_monitor(check, config=cfg, on_trip=Reaper(kill=kill).trigger)
    except InvalidConfiguration as e:
        print(f"[EBRAKE] {e}", file=sys.stderr)
        return EXIT_CONFIG
    print(f"[EBRAKE] watching {getattr(check, '__name__', 'check')} "
          f"window={cfg.WINDOW_SIZE} threshold={cfg.THRESHOLD} interval_s={cfg.POLL_INTERVAL_S}",
          file=sys.stderr)
    try:
        while not stop_evt.wait(1.0):
            pass
    except KeyboardInterrupt:
        stop_evt.set()
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
