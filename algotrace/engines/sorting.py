"""Comparison sorts instrumented to emit compare/swap/relocation steps."""

from __future__ import annotations

import logging
from typing import Any

from .. import constants
from ..snapshot_types import ArraySnapshot
from ..steps import Role, StepKind
from ..validation import require_number
from ._base import BaseEngine, WorkingArray

logger = logging.getLogger(__name__)


class SortingEngine(BaseEngine):
    """Bubble, selection, insertion, merge, quick and heap sort.

    Every engine emits one ``compare`` per comparison and one ``swap`` or
    ``mutate-value`` per relocation, and ends with a single ``final-result``
    whose snapshot is sorted ascending.
    """

    FAMILY = constants.FAMILY_SORTING

    _INTROS: dict[str, str] = {
        "bubble": "Bubble Sort: repeatedly swap adjacent elements that are out of order",
        "selection": "Selection Sort: find the minimum element and place it at the beginning",
        "insertion": "Insertion Sort: build the sorted prefix one element at a time",
        "merge": "Merge Sort: divide and conquer, merging sorted halves",
        "quick": "Quick Sort: partition around a pivot, then sort each side",
        "heap": "Heap Sort: build a max heap and repeatedly extract the maximum",
    }

    def __init__(self):
        super().__init__()
        self._arr: WorkingArray | None = None
        self._ALGORITHMS = {
            "bubble": self._bubble,
            "selection": self._selection,
            "insertion": self._insertion,
            "merge": self._merge_sort,
            "quick": self._quick,
            "heap": self._heap,
        }

    # ── shared helpers ───────────────────────────────────────────

    def _current_snapshot(self) -> ArraySnapshot | None:
        return self._arr.snapshot() if self._arr is not None else None

    def _begin(self, snapshot: Any, algorithm: str) -> WorkingArray:
        snap = self._require_array(snapshot)
        for e in snap.elements:
            require_number(e.value, f"element {e.identity}")
        self._arr = WorkingArray(snap)
        self._emit(
            StepKind.START,
            f"Starting {self._INTROS[algorithm]}",
            snapshot=self._arr.snapshot(),
        )
        return self._arr

    def _compare(self, i: int, j: int, description: str = "") -> None:
        a = self._arr
        self._emit(
            StepKind.COMPARE,
            description or f"Comparing arr[{i}] = {a[i]} and arr[{j}] = {a[j]}",
            subjects=(a.ids[i], a.ids[j]),
            positions=(i, j),
            snapshot=a.snapshot(),
        )

    def _swap(self, i: int, j: int, description: str = "") -> None:
        a = self._arr
        a.swap(i, j)
        self._emit(
            StepKind.SWAP,
            description or f"Swapping {a[j]} and {a[i]}",
            subjects=(a.ids[i], a.ids[j]),
            positions=(i, j),
            snapshot=a.snapshot(),
        )

    def _set_role(self, role: Role, i: int, description: str) -> None:
        a = self._arr
        self._emit(
            StepKind.SET_ROLE,
            description,
            subjects=(a.ids[i],),
            positions=(i,),
            role=role,
            snapshot=a.snapshot(),
        )

    def _finish(self, algorithm: str) -> ArraySnapshot:
        a = self._arr
        final = a.snapshot()
        self._emit(
            StepKind.FINAL_RESULT,
            f"{algorithm.capitalize()} Sort completed! Array is now sorted",
            subjects=tuple(a.ids),
            positions=tuple(range(len(a))),
            role=Role.SORTED,
            snapshot=final,
        )
        self._arr = None
        return final

    # ── bubble ───────────────────────────────────────────────────

    def _bubble(self, snapshot: Any, params: dict[str, Any]) -> ArraySnapshot:
        a = self._begin(snapshot, "bubble")
        n = len(a)
        for i in range(n - 1):
            swapped = False
            self._emit(
                StepKind.INFO,
                f"Pass {i + 1}: comparing adjacent elements",
                payload={"pass": i + 1},
            )
            for j in range(n - i - 1):
                self._compare(j, j + 1)
                if a[j] > a[j + 1]:
                    self._swap(j, j + 1)
                    swapped = True
            last = n - i - 1
            self._set_role(
                Role.SORTED, last, f"Element at index {last} is now in its final position"
            )
            if not swapped:
                self._emit(
                    StepKind.INFO, "No swaps occurred in this pass: array is sorted"
                )
                break
        return self._finish("bubble")

    # ── selection ────────────────────────────────────────────────

    def _selection(self, snapshot: Any, params: dict[str, Any]) -> ArraySnapshot:
        a = self._begin(snapshot, "selection")
        n = len(a)
        for i in range(n - 1):
            min_index = i
            self._set_role(
                Role.MIN, i, f"Starting from index {i}, looking for the minimum element"
            )
            for j in range(i + 1, n):
                self._compare(
                    min_index,
                    j,
                    f"Comparing current min ({a[min_index]}) with arr[{j}] = {a[j]}",
                )
                if a[j] < a[min_index]:
                    min_index = j
                    self._set_role(
                        Role.MIN, j, f"New minimum found: {a[j]} at index {j}"
                    )
            if min_index != i:
                self._swap(i, min_index)
            self._set_role(
                Role.SORTED, i, f"Element {a[i]} placed at its correct position {i}"
            )
        return self._finish("selection")

    # ── insertion ────────────────────────────────────────────────

    def _insertion(self, snapshot: Any, params: dict[str, Any]) -> ArraySnapshot:
        a = self._begin(snapshot, "insertion")
        n = len(a)
        for i in range(1, n):
            key = a[i]
            self._emit(
                StepKind.INFO,
                f"Selecting element {key} at index {i} to insert into the sorted portion",
                subjects=(a.ids[i],),
                positions=(i,),
            )
            j = i
            while j > 0:
                self._compare(j - 1, j)
                if a[j - 1] <= a[j]:
                    break
                self._swap(
                    j - 1, j, f"Shifting {a[j - 1]} right past {a[j]}"
                )
                j -= 1
            self._emit(
                StepKind.INFO,
                f"Inserted {key} at position {j}",
                subjects=(a.ids[j],),
                positions=(j,),
            )
        return self._finish("insertion")

    # ── merge ────────────────────────────────────────────────────

    def _merge_sort(self, snapshot: Any, params: dict[str, Any]) -> ArraySnapshot:
        a = self._begin(snapshot, "merge")
        if len(a) > 1:
            self._merge_sort_range(0, len(a) - 1)
        return self._finish("merge")

    def _merge_sort_range(self, low: int, high: int):
        if low >= high:
            return
        a = self._arr
        mid = (low + high) // 2
        self._emit(
            StepKind.MARK_RANGE,
            f"Splitting [{low}, {high}] into [{low}, {mid}] and [{mid + 1}, {high}]",
            subjects=tuple(a.ids_between(low, high)),
            positions=(low, high),
            snapshot=a.snapshot(),
        )
        self._merge_sort_range(low, mid)
        self._merge_sort_range(mid + 1, high)
        self._merge(low, mid, high)

    def _merge(self, low: int, mid: int, high: int):
        """In-place stable merge of [low, mid] and [mid + 1, high].

        The slot being written is ``k``; the remaining left run occupies
        ``[k, j)`` and the remaining right run ``[j, high]``.
        """
        a = self._arr
        self._emit(
            StepKind.MARK_RANGE,
            f"Merging {a.values[low:mid + 1]} and {a.values[mid + 1:high + 1]}",
            subjects=tuple(a.ids_between(low, high)),
            positions=(low, high),
            snapshot=a.snapshot(),
        )
        k, j = low, mid + 1
        while k < j <= high:
            self._compare(k, j, f"Comparing {a[k]} and {a[j]}")
            if a[k] <= a[j]:
                k += 1
                continue
            old = a[k]
            a.move(j, k)
            self._emit(
                StepKind.MUTATE_VALUE,
                f"Writing {a[k]} into position {k}",
                subjects=(a.ids[k],),
                positions=(k,),
                old_value=old,
                new_value=a[k],
                payload={"from": j},
                snapshot=a.snapshot(),
            )
            k += 1
            j += 1
        self._emit(
            StepKind.INFO,
            f"Merged subarray: {a.values[low:high + 1]}",
            positions=(low, high),
        )

    # ── quick ────────────────────────────────────────────────────

    def _quick(self, snapshot: Any, params: dict[str, Any]) -> ArraySnapshot:
        a = self._begin(snapshot, "quick")
        if len(a) > 1:
            self._quick_range(0, len(a) - 1)
        return self._finish("quick")

    def _quick_range(self, low: int, high: int):
        a = self._arr
        if low < high:
            self._emit(
                StepKind.MARK_RANGE,
                f"Partitioning subarray from index {low} to {high}",
                subjects=tuple(a.ids_between(low, high)),
                positions=(low, high),
                snapshot=a.snapshot(),
            )
            p = self._partition(low, high)
            self._quick_range(low, p - 1)
            self._quick_range(p + 1, high)
        elif low == high:
            self._set_role(Role.SORTED, low, f"Single element at index {low} is sorted")

    def _partition(self, low: int, high: int) -> int:
        a = self._arr
        pivot = a[high]
        self._set_role(Role.PIVOT, high, f"Selecting pivot: {pivot} at index {high}")
        i = low - 1
        for j in range(low, high):
            self._compare(j, high, f"Comparing arr[{j}] = {a[j]} with pivot {pivot}")
            if a[j] <= pivot:
                i += 1
                if i != j:
                    self._swap(i, j)
        if i + 1 != high:
            self._swap(i + 1, high)
        self._set_role(
            Role.SORTED, i + 1, f"Pivot {pivot} placed at correct position {i + 1}"
        )
        return i + 1

    # ── heap ─────────────────────────────────────────────────────

    def _heap(self, snapshot: Any, params: dict[str, Any]) -> ArraySnapshot:
        a = self._begin(snapshot, "heap")
        n = len(a)
        if n < 2:
            return self._finish("heap")
        self._emit(StepKind.INFO, "Building max heap from array")
        for i in range(n // 2 - 1, -1, -1):
            self._heapify(n, i)
        self._emit(StepKind.INFO, "Extracting elements from heap in sorted order")
        for end in range(n - 1, 0, -1):
            self._swap(0, end, f"Moving current maximum from root to position {end}")
            self._set_role(
                Role.SORTED, end, f"Element {a[end]} placed at final position {end}"
            )
            self._heapify(end, 0)
        return self._finish("heap")

    def _heapify(self, size: int, root: int):
        a = self._arr
        while True:
            largest = root
            left, right = 2 * root + 1, 2 * root + 2
            if left < size:
                self._compare(largest, left)
                if a[left] > a[largest]:
                    largest = left
            if right < size:
                self._compare(largest, right)
                if a[right] > a[largest]:
                    largest = right
            if largest == root:
                return
            self._swap(
                root,
                largest,
                f"Swapping {a[root]} and {a[largest]} to maintain heap property",
            )
            root = largest
