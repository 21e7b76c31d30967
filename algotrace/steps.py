"""Step model — one described state-transition event within a trace."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class StepKind(str, Enum):
    # Lifecycle
    START = "start"
    INFO = "info"
    # Array / container events
    COMPARE = "compare"
    SWAP = "swap"
    VISIT = "visit"
    MARK_RANGE = "mark-range"
    SET_ROLE = "set-role"
    MUTATE_VALUE = "mutate-value"
    INSERT = "insert"
    REMOVE = "remove"
    RELINK = "relink"
    # Recursion events
    CALL = "call"
    RETURN = "return"
    BASE_CASE = "base-case"
    MOVE = "move"
    # Terminal events
    FOUND = "found"
    NOT_FOUND = "not-found"
    ERROR = "error"
    FINAL_RESULT = "final-result"


class Role(str, Enum):
    NORMAL = "normal"
    COMPARING = "comparing"
    SWAPPING = "swapping"
    SORTED = "sorted"
    PIVOT = "pivot"
    MIN = "min"
    FOUND = "found"
    VISITED = "visited"
    RANGE = "range"
    FRONT = "front"
    REAR = "rear"
    TOP = "top"
    HEAD = "head"
    ACTIVE = "active"
    COMPLETED = "completed"
    BASE_CASE = "base-case"


class Step(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    step_index: int
    kind: StepKind
    subjects: tuple[str, ...] = ()
    positions: tuple[int, ...] = ()
    description: str = ""
    role: Role | None = None
    old_value: Any = None
    new_value: Any = None
    payload: dict[str, Any] = {}
    snapshot: Any = None  # container state after this step

    def __str__(self) -> str:
        parts = [f"#{self.step_index}", self.kind.value]
        if self.role is not None:
            parts.append(f"[{self.role.value}]")
        if self.positions:
            parts.append(str(list(self.positions)))
        if self.description:
            parts.append(f": {self.description}")
        return " ".join(parts)
