"""Snapshot factories and cloning."""

from __future__ import annotations

import copy
from typing import Any, Iterable

from . import constants
from .errors import InputError
from .snapshot_types import (
    ArraySnapshot,
    Element,
    GraphEdge,
    GraphSnapshot,
    ListNode,
    ListSnapshot,
    Number,
    QueueSlot,
    QueueSnapshot,
    StackSnapshot,
    TreeNode,
    TreeSnapshot,
)
from .validation import require_number


def clone_snapshot(snapshot: Any) -> Any:
    """Deep, independent copy of *snapshot*; identities are preserved."""
    return copy.deepcopy(snapshot)


def make_array_snapshot(values: Iterable[Number]) -> ArraySnapshot:
    """Build an array snapshot, assigning identities ``el-0``, ``el-1``, ..."""
    elements = tuple(
        Element(
            value=require_number(v, f"values[{i}]"),
            index=i,
            identity=f"{constants.ELEMENT_ID_PREFIX}{i}",
        )
        for i, v in enumerate(values)
    )
    return ArraySnapshot(elements=elements)


def make_stack_snapshot(
    values: Iterable[Number] = (), capacity: int = constants.DEFAULT_CAPACITY
) -> StackSnapshot:
    """Build a stack from bottom to top."""
    _require_capacity(capacity)
    vals = list(values)
    if len(vals) > capacity:
        raise InputError(f"{len(vals)} values exceed stack capacity {capacity}")
    elements = tuple(
        Element(
            value=require_number(v, f"values[{i}]"),
            index=i,
            identity=f"{constants.ITEM_ID_PREFIX}{i}",
        )
        for i, v in enumerate(vals)
    )
    return StackSnapshot(elements=elements, capacity=capacity, next_id=len(vals))


def make_queue_snapshot(
    values: Iterable[Number] = (), capacity: int = constants.DEFAULT_CAPACITY
) -> QueueSnapshot:
    """Build a circular queue holding *values* front to rear, starting at slot 0."""
    _require_capacity(capacity)
    vals = list(values)
    if len(vals) > capacity:
        raise InputError(f"{len(vals)} values exceed queue capacity {capacity}")
    slots = []
    for i in range(capacity):
        element = None
        if i < len(vals):
            element = Element(
                value=require_number(vals[i], f"values[{i}]"),
                index=i,
                identity=f"{constants.ITEM_ID_PREFIX}{i}",
            )
        slots.append(QueueSlot(index=i, element=element))
    return QueueSnapshot(
        slots=tuple(slots),
        capacity=capacity,
        front=0,
        rear=(len(vals) - 1) % capacity,
        size=len(vals),
        next_id=len(vals),
    )


def make_list_snapshot(values: Iterable[Number] = ()) -> ListSnapshot:
    """Build a singly linked list head to tail, assigning ``node-0``, ``node-1``, ..."""
    vals = [require_number(v, f"values[{i}]") for i, v in enumerate(values)]
    nodes: dict[str, ListNode] = {}
    for i, value in enumerate(vals):
        node_id = f"{constants.NODE_ID_PREFIX}{i}"
        next_id = f"{constants.NODE_ID_PREFIX}{i + 1}" if i + 1 < len(vals) else None
        nodes[node_id] = ListNode(node_id=node_id, value=value, next=next_id)
    head = f"{constants.NODE_ID_PREFIX}0" if vals else None
    return ListSnapshot(nodes=nodes, head=head, next_id=len(vals))


def make_tree_snapshot(values: Iterable[Number] = ()) -> TreeSnapshot:
    """Build a BST by inserting *values* in order. Duplicates are skipped."""
    nodes: dict[str, TreeNode] = {}
    root: str | None = None
    next_id = 0
    for raw in values:
        value = require_number(raw, "value")
        node_id = f"{constants.NODE_ID_PREFIX}{next_id}"
        if root is None:
            nodes[node_id] = TreeNode(node_id=node_id, value=value)
            root = node_id
            next_id += 1
            continue
        current = root
        while True:
            node = nodes[current]
            if value == node.value:
                break
            side = "left" if value < node.value else "right"
            child = getattr(node, side)
            if child is None:
                nodes[node_id] = TreeNode(node_id=node_id, value=value, parent=current)
                nodes[current] = _with_child(node, side, node_id)
                next_id += 1
                break
            current = child
    return TreeSnapshot(nodes=nodes, root=root, next_id=next_id)


def make_graph_snapshot(
    nodes: Iterable[str],
    edges: Iterable[tuple[str, str] | tuple[str, str, Number]] = (),
    directed: bool = False,
) -> GraphSnapshot:
    """Build a graph; duplicate edges are ignored, as are duplicate nodes."""
    node_list: list[str] = []
    for n in nodes:
        if n not in node_list:
            node_list.append(n)
    edge_list: list[GraphEdge] = []
    seen: set[tuple[str, str]] = set()
    for edge in edges:
        source, target = edge[0], edge[1]
        weight = edge[2] if len(edge) > 2 else 1
        if source not in node_list or target not in node_list:
            raise InputError(f"Edge {source}-{target} references an unknown node")
        require_number(weight, f"weight of {source}-{target}")
        if (source, target) in seen:
            continue
        seen.add((source, target))
        edge_list.append(GraphEdge(source=source, target=target, weight=weight))
    return GraphSnapshot(nodes=tuple(node_list), edges=tuple(edge_list), directed=directed)


def sample_graph(directed: bool = False) -> GraphSnapshot:
    return make_graph_snapshot(
        constants.SAMPLE_GRAPH_NODES, constants.SAMPLE_GRAPH_EDGES, directed=directed
    )


def _with_child(node: TreeNode, side: str, child: str | None) -> TreeNode:
    if side == "left":
        return TreeNode(node.node_id, node.value, child, node.right, node.parent)
    return TreeNode(node.node_id, node.value, node.left, child, node.parent)


def _require_capacity(capacity: Any):
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
        raise InputError(f"capacity must be a positive integer, got {capacity!r}")
