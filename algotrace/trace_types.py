"""Trace and result data types for step-by-step replay."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .call_tree import CallNode
from .errors import ContainerCapacityError
from .run_types import RunStats
from .steps import Step


@dataclass(frozen=True)
class Trace:
    """Complete, append-only record of one algorithm run.

    Holds the initial snapshot (before any step), every recorded Step in
    replay order, and the terminal result value.
    """

    algorithm: str
    steps: tuple[Step, ...] = ()
    result: Any = None
    initial_snapshot: Any = None

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def final_step(self) -> Step | None:
        return self.steps[-1] if self.steps else None


@dataclass(frozen=True)
class AlgorithmRun:
    trace: Trace
    stats: RunStats = field(default_factory=RunStats, compare=False)

    @property
    def result(self) -> Any:
        return self.trace.result


# ── Result values ────────────────────────────────────────────────


@dataclass(frozen=True)
class SearchResult:
    found: bool
    index: int = -1


@dataclass(frozen=True)
class RecursionResult:
    value: Any
    call_tree: CallNode
    call_count: int


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a container primitive (stack, queue, BST, array)."""

    snapshot: Any
    value: Any = None
    error: ContainerCapacityError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class GraphResult:
    order: tuple[str, ...] = ()
    distances: dict[str, float] = field(default_factory=dict)
    previous: dict[str, str | None] = field(default_factory=dict)
    path: tuple[str, ...] = ()
