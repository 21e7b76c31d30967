"""Array primitives: insert, delete, search and update."""

from __future__ import annotations

import logging
from typing import Any

from .. import constants
from ..errors import InputError
from ..snapshot_types import ArraySnapshot, Element
from ..snapshots import make_array_snapshot
from ..steps import Role, StepKind
from ..trace_types import OperationResult
from ..validation import require_number, require_param
from ._base import BaseEngine

logger = logging.getLogger(__name__)


def _next_identity(snapshot: ArraySnapshot) -> str:
    taken = [
        int(e.identity[len(constants.ELEMENT_ID_PREFIX):])
        for e in snapshot.elements
        if e.identity.startswith(constants.ELEMENT_ID_PREFIX)
        and e.identity[len(constants.ELEMENT_ID_PREFIX):].isdigit()
    ]
    return f"{constants.ELEMENT_ID_PREFIX}{max(taken, default=-1) + 1}"


def _reindexed(elements: list[Element]) -> ArraySnapshot:
    return ArraySnapshot(
        elements=tuple(
            Element(value=e.value, index=i, identity=e.identity)
            for i, e in enumerate(elements)
        )
    )


def _require_index(value: Any, upper: int) -> int:
    """Index in ``[0, upper]``."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InputError(f"index must be an integer, got {value!r}")
    if not 0 <= value <= upper:
        raise InputError(f"index {value} is out of range [0, {upper}]")
    return value


class ArrayEngine(BaseEngine):
    FAMILY = constants.FAMILY_ARRAY

    def __init__(self):
        super().__init__()
        self._snap: ArraySnapshot | None = None
        self._ALGORITHMS = {
            "insert": self._insert,
            "delete": self._delete,
            "search": self._search,
            "update": self._update,
        }

    def _current_snapshot(self) -> ArraySnapshot | None:
        return self._snap

    def _default_snapshot(self) -> ArraySnapshot:
        return make_array_snapshot(constants.SAMPLE_ARRAY_VALUES)

    def _load(self, snapshot: Any) -> ArraySnapshot:
        return self._require_array(snapshot)

    def _finish(self, value: Any, description: str) -> OperationResult:
        self._emit(StepKind.FINAL_RESULT, description, new_value=value)
        return OperationResult(snapshot=self._snap, value=value)

    def _insert(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        snap = self._load(snapshot)
        value = require_number(require_param(params, "value"), "value")
        index = _require_index(params.get("index", len(snap)), len(snap))
        self._snap = snap
        self._emit(StepKind.START, f"Inserting {value} at index {index}")
        shifted = snap.elements[index:]
        if shifted:
            self._emit(
                StepKind.INFO,
                f"Shifting {len(shifted)} element(s) one slot to the right",
                subjects=tuple(e.identity for e in shifted),
                positions=tuple(e.index for e in shifted),
            )
        element = Element(value=value, index=index, identity=_next_identity(snap))
        items = list(snap.elements)
        items.insert(index, element)
        self._snap = _reindexed(items)
        self._emit(
            StepKind.INSERT,
            f"Inserted {value} at index {index}",
            subjects=(element.identity,),
            positions=(index,),
            new_value=value,
        )
        return self._finish(value, f"Successfully inserted {value} at index {index}")

    def _delete(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        snap = self._load(snapshot)
        if not len(snap):
            raise InputError("Array is empty, nothing to delete")
        index = _require_index(params.get("index", len(snap) - 1), len(snap) - 1)
        self._snap = snap
        target = snap.elements[index]
        self._emit(StepKind.START, f"Deleting {target.value} from index {index}")
        self._emit(
            StepKind.SET_ROLE,
            f"Selected {target.value} at index {index}",
            subjects=(target.identity,),
            positions=(index,),
            role=Role.ACTIVE,
        )
        items = list(snap.elements)
        del items[index]
        self._snap = _reindexed(items)
        self._emit(
            StepKind.REMOVE,
            f"Removed {target.value}, later elements shift left",
            subjects=(target.identity,),
            positions=(index,),
            old_value=target.value,
        )
        return self._finish(
            target.value, f"Successfully deleted {target.value} from index {index}"
        )

    def _search(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        snap = self._load(snapshot)
        value = require_number(require_param(params, "value"), "value")
        self._snap = snap
        self._emit(StepKind.START, f"Searching for {value}")
        for e in snap.elements:
            self._emit(
                StepKind.COMPARE,
                f"Checking arr[{e.index}] = {e.value}",
                subjects=(e.identity,),
                positions=(e.index,),
            )
            if e.value == value:
                self._emit(
                    StepKind.FOUND,
                    f"Found {value} at index {e.index}",
                    subjects=(e.identity,),
                    positions=(e.index,),
                )
                return self._finish(e.index, f"Found {value} at index {e.index}")
            self._emit(
                StepKind.VISIT,
                f"{e.value} != {value}",
                subjects=(e.identity,),
                positions=(e.index,),
            )
        self._emit(StepKind.NOT_FOUND, f"{value} not found in the array")
        return self._finish(constants.NOT_FOUND_INDEX, f"{value} not found in the array")

    def _update(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        snap = self._load(snapshot)
        value = require_number(require_param(params, "value"), "value")
        if not len(snap):
            raise InputError("Array is empty, nothing to update")
        index = _require_index(require_param(params, "index"), len(snap) - 1)
        self._snap = snap
        old = snap.elements[index]
        self._emit(
            StepKind.START, f"Updating index {index} from {old.value} to {value}"
        )
        items = list(snap.elements)
        items[index] = Element(value=value, index=index, identity=old.identity)
        self._snap = _reindexed(items)
        self._emit(
            StepKind.MUTATE_VALUE,
            f"arr[{index}] = {value}",
            subjects=(old.identity,),
            positions=(index,),
            old_value=old.value,
            new_value=value,
        )
        return self._finish(value, f"Successfully updated index {index} to {value}")
