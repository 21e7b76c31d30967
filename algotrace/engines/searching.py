"""Search algorithms over array snapshots."""

from __future__ import annotations

import logging
import math
from typing import Any

from .. import constants
from ..snapshot_types import ArraySnapshot
from ..steps import StepKind
from ..trace_types import SearchResult
from ..validation import require_number, require_param
from ._base import BaseEngine

logger = logging.getLogger(__name__)


class SearchingEngine(BaseEngine):
    """Linear, binary, jump, interpolation and exponential search.

    Every run needs a numeric ``target`` parameter. All searches except
    ``linear`` assume non-descending input; this is not checked, and unsorted
    input yields an arbitrary (but non-crashing) result.
    """

    FAMILY = constants.FAMILY_SEARCHING

    def __init__(self):
        super().__init__()
        self._snap: ArraySnapshot | None = None
        self._ALGORITHMS = {
            "linear": self._linear,
            "binary": self._binary,
            "jump": self._jump,
            "interpolation": self._interpolation,
            "exponential": self._exponential,
        }

    def _current_snapshot(self) -> ArraySnapshot | None:
        return self._snap

    def _begin(self, snapshot: Any, params: dict[str, Any], name: str):
        snap = self._require_array(snapshot)
        target = require_number(require_param(params, "target"), "target")
        for e in snap.elements:
            require_number(e.value, f"element {e.identity}")
        self._snap = snap
        self._emit(
            StepKind.START,
            f"Starting {name} for {target}",
            payload={"target": target},
        )
        return snap.values, target

    # ── step helpers ─────────────────────────────────────────────

    def _ids(self, low: int, high: int) -> tuple[str, ...]:
        return tuple(e.identity for e in self._snap.elements[low : high + 1])

    def _range(self, low: int, high: int, description: str):
        self._emit(
            StepKind.MARK_RANGE,
            description,
            subjects=self._ids(low, high),
            positions=(low, high),
            payload={"low": low, "high": high},
        )

    def _probe(self, i: int, target: Any, description: str = ""):
        value = self._snap.elements[i].value
        self._emit(
            StepKind.COMPARE,
            description or f"Checking arr[{i}] = {value} against target {target}",
            subjects=(self._snap.elements[i].identity,),
            positions=(i,),
        )

    def _reject(self, i: int, description: str):
        self._emit(
            StepKind.VISIT,
            description,
            subjects=(self._snap.elements[i].identity,),
            positions=(i,),
        )

    def _found(self, i: int, target: Any) -> SearchResult:
        self._emit(
            StepKind.FOUND,
            f"Found {target} at index {i}",
            subjects=(self._snap.elements[i].identity,),
            positions=(i,),
            payload={"index": i},
        )
        return SearchResult(found=True, index=i)

    def _not_found(self, target: Any) -> SearchResult:
        self._emit(
            StepKind.NOT_FOUND,
            f"{target} not found in array",
            payload={"index": constants.NOT_FOUND_INDEX},
        )
        return SearchResult(found=False, index=constants.NOT_FOUND_INDEX)

    # ── linear ───────────────────────────────────────────────────

    def _linear(self, snapshot: Any, params: dict[str, Any]) -> SearchResult:
        arr, target = self._begin(snapshot, params, "Linear Search")
        for i, value in enumerate(arr):
            self._probe(i, target)
            if value == target:
                return self._found(i, target)
            self._reject(i, f"{value} != {target}, moving on")
        return self._not_found(target)

    # ── binary ───────────────────────────────────────────────────

    def _binary(self, snapshot: Any, params: dict[str, Any]) -> SearchResult:
        arr, target = self._begin(snapshot, params, "Binary Search")
        return self._binary_between(arr, target, 0, len(arr) - 1)

    def _binary_between(
        self, arr: list, target: Any, low: int, high: int
    ) -> SearchResult:
        while low <= high:
            self._range(low, high, f"Searching range [{low}, {high}]")
            mid = (low + high) // 2
            self._probe(mid, target, f"Middle element arr[{mid}] = {arr[mid]}")
            if arr[mid] == target:
                return self._found(mid, target)
            if arr[mid] < target:
                self._reject(mid, f"{arr[mid]} < {target}, discarding the left half")
                low = mid + 1
            else:
                self._reject(mid, f"{arr[mid]} > {target}, discarding the right half")
                high = mid - 1
        return self._not_found(target)

    # ── jump ─────────────────────────────────────────────────────

    def _jump(self, snapshot: Any, params: dict[str, Any]) -> SearchResult:
        arr, target = self._begin(snapshot, params, "Jump Search")
        n = len(arr)
        if n == 0:
            return self._not_found(target)
        block = max(1, math.isqrt(n))
        self._emit(
            StepKind.INFO, f"Jump size is floor(sqrt({n})) = {block}", payload={"block": block}
        )
        prev, step = 0, block
        while True:
            end = min(step, n) - 1
            self._probe(end, target, f"Checking block end arr[{end}] = {arr[end]}")
            if arr[end] >= target:
                break
            self._reject(end, f"{arr[end]} < {target}, jumping ahead")
            prev, step = step, step + block
            if prev >= n:
                return self._not_found(target)
        end = min(step, n) - 1
        self._range(prev, end, f"Linear scan of block [{prev}, {end}]")
        for i in range(prev, end + 1):
            self._probe(i, target)
            if arr[i] == target:
                return self._found(i, target)
            self._reject(i, f"{arr[i]} != {target}")
            if arr[i] > target:
                break
        return self._not_found(target)

    # ── interpolation ────────────────────────────────────────────

    def _interpolation(self, snapshot: Any, params: dict[str, Any]) -> SearchResult:
        arr, target = self._begin(snapshot, params, "Interpolation Search")
        low, high = 0, len(arr) - 1
        while low <= high and arr[low] <= target <= arr[high]:
            self._range(low, high, f"Searching range [{low}, {high}]")
            if arr[low] == arr[high]:
                # Equal endpoints: the probe formula would divide by zero.
                self._probe(low, target, f"Range values are equal, checking arr[{low}]")
                if arr[low] == target:
                    return self._found(low, target)
                self._reject(low, f"{arr[low]} != {target}")
                break
            estimate = (target - arr[low]) * (high - low) / (arr[high] - arr[low])
            if not math.isfinite(estimate):
                # Infinite or overflowing bounds leave no usable estimate; step past arr[low].
                self._probe(low, target, f"No finite estimate, checking arr[{low}]")
                if arr[low] == target:
                    return self._found(low, target)
                self._reject(low, f"{arr[low]} != {target}, searching right")
                low += 1
                continue
            pos = low + int(estimate)
            self._probe(pos, target, f"Estimated position {pos}: arr[{pos}] = {arr[pos]}")
            if arr[pos] == target:
                return self._found(pos, target)
            if arr[pos] < target:
                self._reject(pos, f"{arr[pos]} < {target}, searching right")
                low = pos + 1
            else:
                self._reject(pos, f"{arr[pos]} > {target}, searching left")
                high = pos - 1
        return self._not_found(target)

    # ── exponential ──────────────────────────────────────────────

    def _exponential(self, snapshot: Any, params: dict[str, Any]) -> SearchResult:
        arr, target = self._begin(snapshot, params, "Exponential Search")
        n = len(arr)
        if n == 0:
            return self._not_found(target)
        self._probe(0, target, f"Checking first element arr[0] = {arr[0]}")
        if arr[0] == target:
            return self._found(0, target)
        self._reject(0, f"{arr[0]} != {target}")
        i = 1
        while i < n and arr[i] <= target:
            self._probe(i, target, f"arr[{i}] = {arr[i]} <= {target}, doubling the bound")
            self._reject(i, f"Bound {i} does not pass the target yet")
            i *= 2
        low, high = i // 2, min(i, n - 1)
        self._emit(
            StepKind.INFO,
            f"Target lies in range [{low}, {high}], switching to binary search",
        )
        return self._binary_between(arr, target, low, high)
