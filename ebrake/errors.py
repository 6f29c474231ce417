# ebrake/errors.py
# The one error the brake raises: bad construction parameters.

from __future__ import annotations
from numbers import Integral
from typing import Any


class InvalidConfiguration(ValueError):
    """
    Raised when a SampleWindow or Brake is built with unusable parameters.

    Attributes:
      - field: name of the offending parameter (e.g. "capacity", "threshold")
      - value: the value that was rejected
    """

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"invalid {field}={value!r}: {reason}")


def require_int(field: str, value: Any, *, minimum: int) -> int:
    # bool is an int subclass; True/False as a size is always a caller bug
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidConfiguration(field, value, "must be an integer")
    if value < minimum:
        raise InvalidConfiguration(field, value, f"must be >= {minimum}")
    return int(value)
