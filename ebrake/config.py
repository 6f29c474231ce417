# ebrake/config.py
# Central configuration for the brake, its poll loop, and metrics. Values come from EBRAKE_* env vars.

from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping, Optional
import os

ENV_PREFIX = "EBRAKE_"

# ---------- Helpers ----------
def _to_bool(v: Optional[str], default: bool) -> bool:
    if v is None:
        return default
    return str(v).strip().lower() in {"1", "true", "yes", "on", "y", "t"}

def _to_int(v: Optional[str], default: int) -> int:
    try:
        return int(v) if v is not None else default
    except ValueError:
        return default

def _to_float(v: Optional[str], default: float) -> float:
    try:
        return float(v) if v is not None else default
    except ValueError:
        return default

# ---------- Config Dataclass ----------
@dataclass
class BrakeConfig:
    # Trip policy: trip once THRESHOLD or more of the last WINDOW_SIZE samples failed
    WINDOW_SIZE: int = 25
    THRESHOLD: int = 3

    # Poll loop
    POLL_INTERVAL_S: float = 5.0          # seconds between health checks
    CHECK_TIMEOUT_S: float = 2.0          # per-probe timeout (tcp/cmd checks)
    LATCH: bool = True                    # fire on_trip once per trip episode

    # Metrics (Prometheus exporter)
    METRICS_ENABLED: bool = False
    METRICS_PORT: int = 9100


def load_config(env: Optional[Mapping[str, str]] = None) -> BrakeConfig:
    """
    Build a BrakeConfig from environment variables (EBRAKE_WINDOW_SIZE, EBRAKE_THRESHOLD, ...).
    Unparseable values fall back to the defaults; range checks happen when the Brake is built.
    """
    env = os.environ if env is None else env
    d = BrakeConfig()

    def get(name: str) -> Optional[str]:
        return env.get(ENV_PREFIX + name)

    return BrakeConfig(
        WINDOW_SIZE=_to_int(get("WINDOW_SIZE"), d.WINDOW_SIZE),
        THRESHOLD=_to_int(get("THRESHOLD"), d.THRESHOLD),
        POLL_INTERVAL_S=_to_float(get("POLL_INTERVAL_S"), d.POLL_INTERVAL_S),
        CHECK_TIMEOUT_S=_to_float(get("CHECK_TIMEOUT_S"), d.CHECK_TIMEOUT_S),
        LATCH=_to_bool(get("LATCH"), d.LATCH),
        METRICS_ENABLED=_to_bool(get("METRICS_ENABLED"), d.METRICS_ENABLED),
        METRICS_PORT=_to_int(get("METRICS_PORT"), d.METRICS_PORT),
    )
