# ebrake/checks.py
# Service checkers: each returns a zero-arg callable producing one health sample per poll

from __future__ import annotations
from typing import Callable, Sequence
import os
import socket
import subprocess

Check = Callable[[], bool]


def tcp_check(host: str, port: int, timeout_s: float = 2.0) -> Check:
    """Healthy if a TCP connection to host:port opens within timeout_s."""
    def _check() -> bool:
        try:
            with socket.create_connection((host, int(port)), timeout=timeout_s):
                return True
        except OSError:
            # refused, unreachable, DNS failure, timeout
            return False
    _check.__name__ = f"tcp_check[{host}:{port}]"
    return _check


def pid_check(pid: int) -> Check:
    """Healthy while the process exists."""
    def _check() -> bool:
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            return False
        except PermissionError:
            # exists, owned by someone else
            return True
        return True
    _check.__name__ = f"pid_check[{pid}]"
    return _check


def command_check(argv: Sequence[str], timeout_s: float = 2.0) -> Check:
    """Healthy if the command exits 0 within timeout_s. Output is discarded."""
    args = list(argv)
    if not args:
        raise ValueError("command_check needs a command")

    def _check() -> bool:
        try:
            proc = subprocess.run(
                args,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=timeout_s,
                check=False,
            )
        except (subprocess.TimeoutExpired, OSError):
            return False
        return proc.returncode == 0
    _check.__name__ = f"command_check[{args[0]}]"
    return _check
