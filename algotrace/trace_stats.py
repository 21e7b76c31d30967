"""Pure functions for computing statistics over recorded steps."""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from algotrace.steps import Step, StepKind


def count_step_kinds(steps: Iterable[Step]) -> dict[str, int]:
    """Return a frequency map of step kind names in the given steps.

    Args:
        steps: Recorded steps, typically ``trace.steps``.

    Returns:
        A dict mapping step kind strings to their occurrence counts.
        Empty dict for an empty input.
    """
    return dict(Counter(step.kind.value for step in steps))


def count_comparisons(steps: Iterable[Step]) -> int:
    return sum(1 for step in steps if step.kind == StepKind.COMPARE)


def count_relocations(steps: Iterable[Step]) -> int:
    """Swaps plus value writes, the two ways an element changes slot."""
    return sum(
        1 for step in steps if step.kind in (StepKind.SWAP, StepKind.MUTATE_VALUE)
    )
