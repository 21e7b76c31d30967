"""Input generators for array-based algorithms."""

from __future__ import annotations

import logging
import random

from . import constants
from .errors import InputError
from .validation import require_non_negative_int

logger = logging.getLogger(__name__)

_LOW, _HIGH = 10, 99


def generate_values(
    pattern: str = constants.PATTERN_RANDOM, size: int = 10, seed: int | None = None
) -> list[int]:
    """Generate *size* integers following *pattern*.

    Patterns: ``random``, ``sorted``, ``nearly_sorted`` (sorted with roughly
    a tenth of the positions swapped), ``reversed`` and ``few_unique``. Pass
    *seed* for a reproducible sequence.
    """
    size = require_non_negative_int(size, "size")
    rng = random.Random(seed)
    values = [rng.randint(_LOW, _HIGH) for _ in range(size)]

    if pattern == constants.PATTERN_RANDOM:
        return values
    if pattern == constants.PATTERN_SORTED:
        return sorted(values)
    if pattern == constants.PATTERN_REVERSED:
        return sorted(values, reverse=True)
    if pattern == constants.PATTERN_NEARLY_SORTED:
        values.sort()
        for _ in range(max(1, size // 10) if size > 1 else 0):
            i, j = rng.randrange(size), rng.randrange(size)
            values[i], values[j] = values[j], values[i]
        return values
    if pattern == constants.PATTERN_FEW_UNIQUE:
        return [rng.choice(constants.FEW_UNIQUE_VALUES) for _ in range(size)]
    raise InputError(f"Unknown pattern '{pattern}'. Available: {list(constants.PATTERNS)}")
