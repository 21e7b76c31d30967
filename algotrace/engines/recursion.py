"""Recursive procedures that record their call tree as they run."""

from __future__ import annotations

import logging
from typing import Any

from .. import constants
from ..call_tree import CallFrame, CallNode
from ..errors import InputError
from ..snapshot_types import ArraySnapshot
from ..steps import StepKind
from ..trace_types import RecursionResult
from ..validation import require_non_negative_int, require_number, require_param
from ._base import BaseEngine

logger = logging.getLogger(__name__)

Move = tuple[str, str]


class RecursionEngine(BaseEngine):
    """factorial, fibonacci, hanoi, binary_search and power.

    Each invocation becomes a ``CallNode``; the step snapshots are the stack
    of active ``CallFrame``s, outermost first. The root call has depth 1.
    """

    FAMILY = constants.FAMILY_RECURSION

    def __init__(self):
        super().__init__()
        self._stack: list[CallNode] = []
        self._root: CallNode | None = None
        self._calls = 0
        self._rods: dict[str, list[int]] = {}
        self._ALGORITHMS = {
            "factorial": self._factorial,
            "fibonacci": self._fibonacci,
            "hanoi": self._hanoi,
            "binary_search": self._binary_search,
            "power": self._power,
        }

    def _current_snapshot(self) -> tuple[CallFrame, ...]:
        return tuple(node.frame() for node in self._stack)

    # ── call bookkeeping ─────────────────────────────────────────

    def _reset(self):
        self._stack = []
        self._root = None
        self._calls = 0

    def _enter(self, function_name: str, parameters: tuple[Any, ...]) -> CallNode:
        node = CallNode(
            call_id=f"{constants.CALL_ID_PREFIX}{self._calls}",
            function_name=function_name,
            parameters=parameters,
            depth=len(self._stack) + 1,
        )
        self._calls += 1
        if self._stack:
            self._stack[-1].add_child(node)
        else:
            self._root = node
        self._stack.append(node)
        self._emit(
            StepKind.CALL,
            f"Calling {node.signature()}",
            subjects=(node.call_id,),
            payload={
                "function": function_name,
                "parameters": parameters,
                "depth": node.depth,
            },
        )
        return node

    def _base_case(self, node: CallNode, description: str):
        self._emit(StepKind.BASE_CASE, description, subjects=(node.call_id,))

    def _leave(self, node: CallNode, value: Any, description: str = "") -> Any:
        node.resolve(value)
        self._stack.pop()
        self._emit(
            StepKind.RETURN,
            description or f"{node.signature()} returns {value}",
            subjects=(node.call_id,),
            new_value=value,
            payload={"depth": node.depth},
        )
        return value

    def _finish(self, value: Any, description: str) -> RecursionResult:
        root = self._root
        self._emit(
            StepKind.FINAL_RESULT,
            description,
            subjects=(root.call_id,),
            new_value=value,
        )
        logger.debug("%s made %d calls", root.function_name, root.count())
        result = RecursionResult(value=value, call_tree=root, call_count=root.count())
        self._reset()
        return result

    # ── factorial ────────────────────────────────────────────────

    def _factorial(self, snapshot: Any, params: dict[str, Any]) -> RecursionResult:
        n = require_non_negative_int(require_param(params, "n"), "n")
        self._reset()
        value = self._factorial_call(n)
        return self._finish(value, f"factorial({n}) = {value}")

    def _factorial_call(self, n: int) -> int:
        node = self._enter("factorial", (n,))
        if n <= 1:
            self._base_case(node, f"Base case: factorial({n}) = 1")
            return self._leave(node, 1)
        self._emit(
            StepKind.INFO,
            f"Recursive case: factorial({n}) = {n} * factorial({n - 1})",
            subjects=(node.call_id,),
        )
        sub = self._factorial_call(n - 1)
        return self._leave(node, n * sub, f"Returning {n} * {sub} = {n * sub}")

    # ── fibonacci ────────────────────────────────────────────────

    def _fibonacci(self, snapshot: Any, params: dict[str, Any]) -> RecursionResult:
        n = require_non_negative_int(require_param(params, "n"), "n")
        self._reset()
        value = self._fibonacci_call(n)
        return self._finish(value, f"fibonacci({n}) = {value}")

    def _fibonacci_call(self, n: int) -> int:
        node = self._enter("fibonacci", (n,))
        if n <= 1:
            self._base_case(node, f"Base case: fibonacci({n}) = {n}")
            return self._leave(node, n)
        self._emit(
            StepKind.INFO,
            f"Recursive case: fibonacci({n}) = fibonacci({n - 1}) + fibonacci({n - 2})",
            subjects=(node.call_id,),
        )
        a = self._fibonacci_call(n - 1)
        b = self._fibonacci_call(n - 2)
        return self._leave(node, a + b, f"Returning {a} + {b} = {a + b}")

    # ── towers of hanoi ──────────────────────────────────────────

    def _hanoi(self, snapshot: Any, params: dict[str, Any]) -> RecursionResult:
        n = require_non_negative_int(require_param(params, "n"), "n")
        source = params.get("source", constants.HANOI_SOURCE_ROD)
        target = params.get("target", constants.HANOI_TARGET_ROD)
        auxiliary = params.get("auxiliary", constants.HANOI_AUXILIARY_ROD)
        if len({source, target, auxiliary}) != 3:
            raise InputError(
                f"Hanoi rods must be distinct, got {source}, {target}, {auxiliary}"
            )
        self._reset()
        self._rods = {
            source: list(range(n, 0, -1)),
            auxiliary: [],
            target: [],
        }
        moves: list[Move] = []
        if n == 0:
            node = self._enter("hanoi", (0, source, target, auxiliary))
            self._base_case(node, "Base case: no disks to move")
            self._leave(node, 0)
        else:
            self._hanoi_call(n, source, target, auxiliary, moves)
        return self._finish(moves, f"Solved {n} disks in {len(moves)} moves")

    def _hanoi_call(
        self, n: int, source: str, target: str, auxiliary: str, moves: list[Move]
    ) -> int:
        """Move *n* disks; returns the number of moves this call made."""
        node = self._enter("hanoi", (n, source, target, auxiliary))
        if n == 1:
            self._base_case(node, f"Base case: move disk 1 from {source} to {target}")
            self._move_disk(1, source, target, moves)
            return self._leave(node, 1)
        self._emit(
            StepKind.INFO,
            f"Move {n - 1} disks from {source} to {auxiliary} using {target}",
            subjects=(node.call_id,),
        )
        made = self._hanoi_call(n - 1, source, auxiliary, target, moves)
        self._move_disk(n, source, target, moves)
        made += 1
        made += self._hanoi_call(n - 1, auxiliary, target, source, moves)
        return self._leave(node, made, f"Moved {n} disks with {made} moves")

    def _move_disk(self, disk: int, source: str, target: str, moves: list[Move]):
        self._rods[source].pop()
        self._rods[target].append(disk)
        moves.append((source, target))
        self._emit(
            StepKind.MOVE,
            f"Move disk {disk} from {source} to {target}",
            subjects=(f"{constants.DISK_ID_PREFIX}{disk}",),
            payload={
                "disk": disk,
                "from": source,
                "to": target,
                "rods": {rod: tuple(disks) for rod, disks in self._rods.items()},
            },
        )

    # ── recursive binary search ──────────────────────────────────

    def _binary_search(self, snapshot: Any, params: dict[str, Any]) -> RecursionResult:
        snap = self._require_array(snapshot)
        target = require_number(require_param(params, "target"), "target")
        for e in snap.elements:
            require_number(e.value, f"element {e.identity}")
        self._reset()
        index = self._binary_search_call(snap, target, 0, len(snap) - 1)
        if index == constants.NOT_FOUND_INDEX:
            description = f"Element {target} not found in array"
        else:
            description = f"Found {target} at index {index}"
        return self._finish(index, description)

    def _binary_search_call(
        self, snap: ArraySnapshot, target: Any, low: int, high: int
    ) -> int:
        node = self._enter("binarySearch", (target, low, high))
        if low > high:
            self._base_case(node, f"Base case: empty range [{low}, {high}]")
            return self._leave(node, constants.NOT_FOUND_INDEX)
        self._emit(
            StepKind.MARK_RANGE,
            f"Searching range [{low}, {high}]",
            subjects=tuple(e.identity for e in snap.elements[low : high + 1]),
            positions=(low, high),
            payload={"low": low, "high": high},
        )
        mid = (low + high) // 2
        mid_el = snap.elements[mid]
        self._emit(
            StepKind.COMPARE,
            f"mid = floor(({low} + {high}) / 2) = {mid}, arr[{mid}] = {mid_el.value}",
            subjects=(mid_el.identity,),
            positions=(mid,),
        )
        if mid_el.value == target:
            self._emit(
                StepKind.FOUND,
                f"Found {target} at index {mid}",
                subjects=(mid_el.identity,),
                positions=(mid,),
            )
            self._base_case(node, f"Base case: found {target} at index {mid}")
            return self._leave(node, mid)
        if target < mid_el.value:
            self._emit(
                StepKind.INFO,
                f"{target} < {mid_el.value}, searching left half [{low}, {mid - 1}]",
                subjects=(node.call_id,),
            )
            result = self._binary_search_call(snap, target, low, mid - 1)
        else:
            self._emit(
                StepKind.INFO,
                f"{target} > {mid_el.value}, searching right half [{mid + 1}, {high}]",
                subjects=(node.call_id,),
            )
            result = self._binary_search_call(snap, target, mid + 1, high)
        return self._leave(node, result)

    # ── power ────────────────────────────────────────────────────

    def _power(self, snapshot: Any, params: dict[str, Any]) -> RecursionResult:
        base = require_number(require_param(params, "base"), "base")
        exponent = require_non_negative_int(require_param(params, "exponent"), "exponent")
        self._reset()
        value = self._power_call(base, exponent)
        return self._finish(value, f"{base}^{exponent} = {value}")

    def _power_call(self, base: Any, exponent: int) -> Any:
        node = self._enter("power", (base, exponent))
        if exponent == 0:
            self._base_case(node, f"Base case: {base}^0 = 1")
            return self._leave(node, 1)
        if exponent == 1:
            self._base_case(node, f"Base case: {base}^1 = {base}")
            return self._leave(node, base)
        self._emit(
            StepKind.INFO,
            f"Recursive case: {base}^{exponent} = {base} * {base}^{exponent - 1}",
            subjects=(node.call_id,),
        )
        sub = self._power_call(base, exponent - 1)
        return self._leave(node, base * sub, f"Returning {base} * {sub} = {base * sub}")
