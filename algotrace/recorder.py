"""Trace recorder — append-only step sink used by the engines."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from .steps import Role, Step, StepKind
from .trace_types import Trace

logger = logging.getLogger(__name__)


class TraceRecorder:
    """Collects Steps for one run, then seals them into a Trace."""

    def __init__(self, algorithm: str, initial_snapshot: Any = None):
        self._algorithm = algorithm
        self._initial_snapshot = initial_snapshot
        self._steps: list[Step] = []
        self._closed = False

    @property
    def steps(self) -> tuple[Step, ...]:
        return tuple(self._steps)

    @property
    def closed(self) -> bool:
        return self._closed

    def emit(
        self,
        kind: StepKind,
        description: str = "",
        *,
        subjects: Iterable[str] = (),
        positions: Iterable[int] = (),
        role: Role | None = None,
        old_value: Any = None,
        new_value: Any = None,
        payload: dict[str, Any] | None = None,
        snapshot: Any = None,
    ) -> Step:
        if self._closed:
            raise RuntimeError(f"Trace for {self._algorithm} is already finished")
        step = Step(
            step_index=len(self._steps),
            kind=kind,
            subjects=tuple(subjects),
            positions=tuple(positions),
            description=description,
            role=role,
            old_value=old_value,
            new_value=new_value,
            payload=payload or {},
            snapshot=snapshot,
        )
        self._steps.append(step)
        return step

    def finish(self, result: Any) -> Trace:
        if self._closed:
            raise RuntimeError(f"Trace for {self._algorithm} is already finished")
        self._closed = True
        logger.debug("Recorded %d steps for %s", len(self._steps), self._algorithm)
        return Trace(
            algorithm=self._algorithm,
            steps=tuple(self._steps),
            result=result,
            initial_snapshot=self._initial_snapshot,
        )
