"""Singly linked list primitives over an arena of ListNodes."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from .. import constants
from ..errors import InputError, Underflow
from ..snapshot_types import ListNode, ListSnapshot, Number
from ..snapshots import make_list_snapshot
from ..steps import Role, StepKind
from ..trace_types import OperationResult
from ..validation import require_non_negative_int, require_number, require_param
from .containers import ContainerEngine

logger = logging.getLogger(__name__)


class ListModel:
    """Mutable working copy of a ListSnapshot.

    Nodes stay frozen; relinking swaps in a replaced ListNode under the same id.
    """

    NAME = "linked list"

    def __init__(self, snapshot: ListSnapshot):
        self.nodes: dict[str, ListNode] = dict(snapshot.nodes)
        self.head = snapshot.head
        self.next_id = snapshot.next_id

    def __getitem__(self, node_id: str) -> ListNode:
        return self.nodes[node_id]

    def order(self) -> list[str]:
        return self.snapshot().identities

    def new_node(self, value: Number, next_node: str | None) -> str:
        node_id = f"{constants.NODE_ID_PREFIX}{self.next_id}"
        self.next_id += 1
        self.nodes[node_id] = ListNode(node_id=node_id, value=value, next=next_node)
        return node_id

    def set_next(self, node_id: str, next_node: str | None):
        self.nodes[node_id] = dataclasses.replace(self.nodes[node_id], next=next_node)

    def unlink(self, node_id: str, previous: str | None) -> ListNode:
        node = self.nodes.pop(node_id)
        if previous is None:
            self.head = node.next
        else:
            self.set_next(previous, node.next)
        return node

    def require_nodes(self, action: str):
        if self.head is None:
            raise Underflow(self.NAME, f"cannot {action} an empty list")

    def snapshot(self) -> ListSnapshot:
        return ListSnapshot(nodes=dict(self.nodes), head=self.head, next_id=self.next_id)


class LinkedListEngine(ContainerEngine):
    """insert, delete, search and reverse on a singly linked list.

    ``insert`` takes ``value`` and an optional ``index`` (default: append at
    the tail). ``delete`` removes the node holding ``value`` when one is given,
    otherwise the node at ``index`` (default: the tail). Deleting from an empty
    list is an ``Underflow`` recorded as the final ``error`` step.
    """

    FAMILY = constants.FAMILY_LINKED_LIST

    def __init__(self):
        super().__init__()
        self._ALGORITHMS = {
            "insert": self._insert,
            "delete": self._delete,
            "search": self._search,
            "reverse": self._reverse,
        }

    def _default_snapshot(self) -> ListSnapshot:
        return make_list_snapshot()

    def _require_list(self, snapshot: Any) -> ListSnapshot:
        if not isinstance(snapshot, ListSnapshot):
            raise InputError(
                f"linked list operations need a ListSnapshot, got {type(snapshot).__name__}"
            )
        return snapshot

    def _begin(self, snapshot: ListSnapshot, description: str) -> ListModel:
        self._model = ListModel(snapshot)
        self._emit(StepKind.START, description)
        self._mark_head()
        return self._model

    def _mark_head(self):
        head = self._model.head
        if head is not None:
            self._node_step(
                StepKind.SET_ROLE, head, 0, f"Head is {self._model[head].value}", role=Role.HEAD
            )

    def _node_step(
        self, kind: StepKind, node_id: str, position: int, description: str, **kwargs: Any
    ):
        self._emit(kind, description, subjects=(node_id,), positions=(position,), **kwargs)

    def _walk(self, order: list[str], count: int, purpose: str):
        for position in range(count):
            node_id = order[position]
            self._node_step(
                StepKind.VISIT,
                node_id,
                position,
                f"{purpose}: passing {self._model[node_id].value}",
            )

    # ── insert ───────────────────────────────────────────────────

    def _insert(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        snap = self._require_list(snapshot)
        value = require_number(require_param(params, "value"), "value")
        index = params.get("index")
        if index is None:
            index = snap.size
        index = require_non_negative_int(index, "index")
        if index > snap.size:
            raise InputError(f"index {index} out of range for a list of {snap.size} nodes")
        model = self._begin(snap, f"Inserting {value} at position {index}")

        def operation():
            order = model.order()
            self._walk(order, index, f"Walking to position {index}")
            previous = order[index - 1] if index > 0 else None
            following = model[previous].next if previous is not None else model.head
            node_id = model.new_node(value, following)
            if previous is None:
                model.head = node_id
                description = f"Inserted {value} at the head"
            else:
                model.set_next(previous, node_id)
                description = f"Inserted {value} after {model[previous].value}"
            self._node_step(
                StepKind.INSERT,
                node_id,
                index,
                description,
                new_value=value,
                payload={"previous": previous, "next": following},
            )
            if previous is None:
                self._mark_head()
            return value

        return self._guarded(operation)

    # ── delete ───────────────────────────────────────────────────

    def _delete(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        snap = self._require_list(snapshot)
        if params.get("value") is not None:
            value = require_number(params["value"], "value")
            model = self._begin(snap, f"Deleting the node holding {value}")
            return self._guarded(lambda: self._delete_value(model, value))
        index = params.get("index")
        if index is None:
            index = max(snap.size - 1, 0)
        index = require_non_negative_int(index, "index")
        if snap.size and index >= snap.size:
            raise InputError(f"index {index} out of range for a list of {snap.size} nodes")
        model = self._begin(snap, f"Deleting the node at position {index}")
        return self._guarded(lambda: self._delete_index(model, index))

    def _delete_index(self, model: ListModel, index: int) -> Number:
        model.require_nodes("delete from")
        order = model.order()
        self._walk(order, index, f"Walking to position {index}")
        previous = order[index - 1] if index > 0 else None
        return self._remove(model, order[index], index, previous)

    def _delete_value(self, model: ListModel, value: Number) -> Number | None:
        model.require_nodes("delete from")
        order = model.order()
        for position, node_id in enumerate(order):
            node_value = model[node_id].value
            self._node_step(
                StepKind.COMPARE, node_id, position, f"Checking {node_value} against {value}"
            )
            if node_value == value:
                previous = order[position - 1] if position > 0 else None
                return self._remove(model, node_id, position, previous)
            self._node_step(StepKind.VISIT, node_id, position, f"{node_value} != {value}")
        self._emit(StepKind.NOT_FOUND, f"{value} not found in the linked list")
        return None

    def _remove(
        self, model: ListModel, node_id: str, position: int, previous: str | None
    ) -> Number:
        node = model.unlink(node_id, previous)
        if previous is None:
            description = f"Removed head {node.value}"
        else:
            description = f"Removed {node.value}, {model[previous].value} now links past it"
        self._node_step(
            StepKind.REMOVE,
            node_id,
            position,
            description,
            old_value=node.value,
            payload={"previous": previous, "next": node.next},
        )
        if previous is None:
            self._mark_head()
        return node.value

    # ── search ───────────────────────────────────────────────────

    def _search(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        snap = self._require_list(snapshot)
        value = require_number(require_param(params, "value"), "value")
        model = self._begin(snap, f"Searching for {value}")

        def operation():
            for position, node_id in enumerate(model.order()):
                node_value = model[node_id].value
                self._node_step(
                    StepKind.COMPARE, node_id, position, f"Checking {node_value} against {value}"
                )
                if node_value == value:
                    self._node_step(
                        StepKind.FOUND,
                        node_id,
                        position,
                        f"Found {value} at position {position}",
                        payload={"index": position},
                    )
                    return position
                self._node_step(StepKind.VISIT, node_id, position, f"{node_value} != {value}")
            self._emit(StepKind.NOT_FOUND, f"{value} not found in the linked list")
            return None

        return self._guarded(operation)

    # ── reverse ──────────────────────────────────────────────────

    def _reverse(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        snap = self._require_list(snapshot)
        model = self._begin(snap, "Reversing the linked list")

        def operation():
            order = model.order()
            if len(order) <= 1:
                self._emit(StepKind.INFO, "List has 0 or 1 node, nothing to reverse")
                return model.snapshot().values
            previous = None
            for position, node_id in enumerate(order):
                following = model[node_id].next
                model.set_next(node_id, previous)
                target = model[previous].value if previous is not None else "null"
                self._node_step(
                    StepKind.RELINK,
                    node_id,
                    position,
                    f"{model[node_id].value}.next now points to {target}",
                    old_value=following,
                    new_value=previous,
                )
                previous = node_id
            model.head = previous
            self._mark_head()
            logger.debug("Reversed %d nodes, new head %s", len(order), previous)
            return model.snapshot().values

        return self._guarded(operation)
