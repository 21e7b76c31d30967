"""Input validation helpers shared by snapshot factories and engines."""

from __future__ import annotations

import math
from typing import Any

from .errors import InputError


def is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def require_number(value: Any, name: str) -> int | float:
    """Return *value* if it is a usable number, else raise ``InputError``."""
    if value is None:
        raise InputError(f"Missing required value: {name}")
    if not is_number(value):
        raise InputError(f"{name} must be a number, got {value!r}")
    return value


def require_non_negative_int(value: Any, name: str) -> int:
    if value is None:
        raise InputError(f"Missing required value: {name}")
    if isinstance(value, bool) or not isinstance(value, int):
        raise InputError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InputError(f"{name} must be non-negative, got {value}")
    return value


def require_param(parameters: dict[str, Any], name: str) -> Any:
    if name not in parameters or parameters[name] is None:
        raise InputError(f"Missing required parameter: {name}")
    return parameters[name]
