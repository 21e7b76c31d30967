"""Binary search tree primitives over an arena of TreeNodes."""

from __future__ import annotations

import dataclasses
import logging
from collections import deque
from typing import Any

from .. import constants
from ..errors import InputError
from ..snapshot_types import Number, TreeNode, TreeSnapshot
from ..snapshots import make_tree_snapshot
from ..steps import Role, StepKind
from ..trace_types import OperationResult
from ..validation import require_number, require_param
from ._base import BaseEngine

logger = logging.getLogger(__name__)


class TreeModel:
    """Mutable working copy of a TreeSnapshot.

    Nodes stay frozen; every edit swaps in a replaced TreeNode under the same id.
    """

    def __init__(self, snapshot: TreeSnapshot):
        self.nodes: dict[str, TreeNode] = dict(snapshot.nodes)
        self.root = snapshot.root
        self.next_id = snapshot.next_id

    def __getitem__(self, node_id: str) -> TreeNode:
        return self.nodes[node_id]

    def update(self, node_id: str, **changes: Any):
        self.nodes[node_id] = dataclasses.replace(self.nodes[node_id], **changes)

    def new_node(self, value: Number, parent: str | None) -> str:
        node_id = f"{constants.NODE_ID_PREFIX}{self.next_id}"
        self.next_id += 1
        self.nodes[node_id] = TreeNode(node_id=node_id, value=value, parent=parent)
        return node_id

    def replace_child(self, parent: str | None, old: str, new: str | None):
        """Point *parent*'s link (or the root) at *new* instead of *old*."""
        if parent is None:
            self.root = new
        elif self.nodes[parent].left == old:
            self.update(parent, left=new)
        else:
            self.update(parent, right=new)
        if new is not None:
            self.update(new, parent=parent)

    def snapshot(self) -> TreeSnapshot:
        return TreeSnapshot(nodes=dict(self.nodes), root=self.root, next_id=self.next_id)


class BSTEngine(BaseEngine):
    """insert, search, delete and the four traversals."""

    FAMILY = constants.FAMILY_BST

    def __init__(self):
        super().__init__()
        self._tree: TreeModel | None = None
        self._ALGORITHMS = {
            "insert": self._insert,
            "search": self._search,
            "delete": self._delete,
            "inorder": self._inorder,
            "preorder": self._preorder,
            "postorder": self._postorder,
            "levelorder": self._levelorder,
        }

    def _default_snapshot(self) -> TreeSnapshot:
        return make_tree_snapshot()

    def _current_snapshot(self) -> TreeSnapshot | None:
        return self._tree.snapshot() if self._tree is not None else None

    def _begin(self, snapshot: Any, description: str) -> TreeModel:
        if not isinstance(snapshot, TreeSnapshot):
            raise InputError(f"bst operations need a TreeSnapshot, got {type(snapshot).__name__}")
        self._tree = TreeModel(snapshot)
        self._emit(StepKind.START, description)
        return self._tree

    def _finish(self, value: Any, description: str) -> OperationResult:
        self._emit(StepKind.FINAL_RESULT, description, new_value=value)
        return OperationResult(snapshot=self._tree.snapshot(), value=value)

    def _node_step(self, kind: StepKind, node_id: str, description: str, **kwargs: Any):
        self._emit(kind, description, subjects=(node_id,), **kwargs)

    def _compare(self, node_id: str, value: Number):
        node = self._tree[node_id]
        if value == node.value:
            relation = "equals"
        elif value < node.value:
            relation = "is less than"
        else:
            relation = "is greater than"
        self._node_step(StepKind.COMPARE, node_id, f"{value} {relation} {node.value}")

    def _find(self, start: str | None, value: Number) -> str | None:
        current = start
        while current is not None:
            self._compare(current, value)
            node = self._tree[current]
            if value == node.value:
                return current
            current = node.left if value < node.value else node.right
        return None

    # ── insert ───────────────────────────────────────────────────

    def _insert(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        value = require_number(require_param(params, "value"), "value")
        tree = self._begin(snapshot, f"Inserting {value}")
        if tree.root is None:
            node_id = tree.new_node(value, None)
            tree.root = node_id
            self._node_step(StepKind.INSERT, node_id, f"Inserted {value} as root", new_value=value)
            return self._finish(value, f"Inserted {value}")
        current = tree.root
        while True:
            self._compare(current, value)
            node = tree[current]
            if value == node.value:
                self._node_step(
                    StepKind.INFO, current, f"Value {value} already exists in the tree"
                )
                return self._finish(None, f"{value} not inserted: duplicate value")
            side = "left" if value < node.value else "right"
            child = getattr(node, side)
            if child is None:
                node_id = tree.new_node(value, current)
                tree.update(current, **{side: node_id})
                self._node_step(
                    StepKind.INSERT,
                    node_id,
                    f"Inserted {value} as {side} child of {node.value}",
                    new_value=value,
                    payload={"parent": current, "side": side},
                )
                return self._finish(value, f"Inserted {value}")
            current = child

    # ── search ───────────────────────────────────────────────────

    def _search(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        value = require_number(require_param(params, "value"), "value")
        tree = self._begin(snapshot, f"Searching for {value}")
        node_id = self._find(tree.root, value)
        if node_id is None:
            self._emit(StepKind.NOT_FOUND, f"{value} not found in the tree")
            return self._finish(None, f"{value} not found")
        self._node_step(StepKind.FOUND, node_id, f"Found {value}")
        return self._finish(node_id, f"Found {value}")

    # ── delete ───────────────────────────────────────────────────

    def _delete(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        value = require_number(require_param(params, "value"), "value")
        tree = self._begin(snapshot, f"Deleting {value}")
        if not self._delete_from(tree.root, value):
            self._emit(StepKind.NOT_FOUND, f"{value} not found in the tree")
            return self._finish(None, f"{value} not found, tree unchanged")
        return self._finish(value, f"Deleted {value}")

    def _delete_from(self, start: str | None, value: Number) -> bool:
        tree = self._tree
        node_id = self._find(start, value)
        if node_id is None:
            return False
        node = tree[node_id]
        if node.left is not None and node.right is not None:
            successor = self._minimum(node.right)
            succ_value = tree[successor].value
            self._node_step(
                StepKind.SET_ROLE,
                successor,
                f"In-order successor is {succ_value}",
                role=Role.MIN,
            )
            tree.update(node_id, value=succ_value)
            self._node_step(
                StepKind.MUTATE_VALUE,
                node_id,
                f"Replacing {value} with successor {succ_value}",
                old_value=value,
                new_value=succ_value,
            )
            return self._delete_from(tree[node_id].right, succ_value)
        child = node.left if node.left is not None else node.right
        tree.replace_child(node.parent, node_id, child)
        del tree.nodes[node_id]
        if child is None:
            description = f"Removed leaf {value}"
        else:
            description = f"Removed {value}, its child {tree[child].value} takes its place"
        self._node_step(
            StepKind.REMOVE,
            node_id,
            description,
            old_value=value,
            payload={"replacement": child},
        )
        return True

    def _minimum(self, start: str) -> str:
        current = start
        self._node_step(StepKind.VISIT, current, f"Looking for the minimum from {self._tree[current].value}")
        while self._tree[current].left is not None:
            current = self._tree[current].left
            self._node_step(StepKind.VISIT, current, f"Moving left to {self._tree[current].value}")
        return current

    # ── traversals ───────────────────────────────────────────────

    def _traverse(self, name: str, order: list[str]) -> OperationResult:
        values = []
        for position, node_id in enumerate(order, start=1):
            node_value = self._tree[node_id].value
            values.append(node_value)
            self._node_step(
                StepKind.VISIT,
                node_id,
                f"Visiting {node_value}",
                payload={"order": position},
            )
        return self._finish(values, f"{name} traversal: {values}")

    def _inorder(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        tree = self._begin(snapshot, "In-order traversal (left, root, right)")
        order: list[str] = []

        def walk(node_id: str | None):
            if node_id is None:
                return
            walk(tree[node_id].left)
            order.append(node_id)
            walk(tree[node_id].right)

        walk(tree.root)
        return self._traverse("In-order", order)

    def _preorder(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        tree = self._begin(snapshot, "Pre-order traversal (root, left, right)")
        order: list[str] = []

        def walk(node_id: str | None):
            if node_id is None:
                return
            order.append(node_id)
            walk(tree[node_id].left)
            walk(tree[node_id].right)

        walk(tree.root)
        return self._traverse("Pre-order", order)

    def _postorder(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        tree = self._begin(snapshot, "Post-order traversal (left, right, root)")
        order: list[str] = []

        def walk(node_id: str | None):
            if node_id is None:
                return
            walk(tree[node_id].left)
            walk(tree[node_id].right)
            order.append(node_id)

        walk(tree.root)
        return self._traverse("Post-order", order)

    def _levelorder(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        tree = self._begin(snapshot, "Level-order traversal (breadth first)")
        order: list[str] = []
        pending = deque([tree.root] if tree.root is not None else [])
        while pending:
            node_id = pending.popleft()
            order.append(node_id)
            node = tree[node_id]
            for child in (node.left, node.right):
                if child is not None:
                    pending.append(child)
        return self._traverse("Level-order", order)
