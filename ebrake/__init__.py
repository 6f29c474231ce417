# ebrake/__init__.py
# Emergency brake: trips when too many recent health samples are failures

from .errors import InvalidConfiguration
from .window import SampleWindow
from .brake import Brake, BrakeSnapshot

__all__ = [
    "Brake", "BrakeSnapshot", "InvalidConfiguration", "SampleWindow",
    "brake", "checks", "cli", "config", "errors", "monitor", "reaper", "window",
]
