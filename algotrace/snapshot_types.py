"""Snapshot data types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

Number = Union[int, float]

# ── Linear containers ────────────────────────────────────────────


@dataclass(frozen=True)
class Element:
    value: Number
    index: int
    identity: str


@dataclass(frozen=True)
class ArraySnapshot:
    elements: tuple[Element, ...] = ()

    @property
    def values(self) -> list[Number]:
        return [e.value for e in self.elements]

    @property
    def identities(self) -> list[str]:
        return [e.identity for e in self.elements]

    def __len__(self) -> int:
        return len(self.elements)


@dataclass(frozen=True)
class StackSnapshot:
    """Bottom-first stack contents; the last element is the top."""

    elements: tuple[Element, ...] = ()
    capacity: int = 10
    next_id: int = 0

    @property
    def top(self) -> Element | None:
        return self.elements[-1] if self.elements else None

    @property
    def is_empty(self) -> bool:
        return not self.elements

    @property
    def is_full(self) -> bool:
        return len(self.elements) >= self.capacity

    @property
    def values(self) -> list[Number]:
        return [e.value for e in self.elements]


@dataclass(frozen=True)
class QueueSlot:
    index: int
    element: Element | None = None

    @property
    def is_empty(self) -> bool:
        return self.element is None


@dataclass(frozen=True)
class QueueSnapshot:
    """Fixed-capacity circular buffer."""

    slots: tuple[QueueSlot, ...] = ()
    capacity: int = 10
    front: int = 0
    rear: int = 9
    size: int = 0
    next_id: int = 0

    @property
    def is_empty(self) -> bool:
        return self.size == 0

    @property
    def is_full(self) -> bool:
        return self.size == self.capacity

    @property
    def utilization(self) -> float:
        return (self.size / self.capacity) * 100 if self.capacity else 0.0

    def ordered(self) -> list[Element]:
        """Elements from front to rear."""
        return [
            self.slots[(self.front + i) % self.capacity].element
            for i in range(self.size)
        ]

    @property
    def values(self) -> list[Number]:
        return [e.value for e in self.ordered()]


# ── Singly linked list (arena + id indirection) ──────────────────


@dataclass(frozen=True)
class ListNode:
    node_id: str
    value: Number
    next: str | None = None


@dataclass(frozen=True)
class ListSnapshot:
    nodes: dict[str, ListNode] = field(default_factory=dict)
    head: str | None = None
    next_id: int = 0

    @property
    def size(self) -> int:
        return len(self.nodes)

    @property
    def is_empty(self) -> bool:
        return self.head is None

    def node(self, node_id: str) -> ListNode:
        return self.nodes[node_id]

    def ordered(self) -> list[ListNode]:
        """Nodes reachable from the head, following ``next`` links."""
        out: list[ListNode] = []
        seen: set[str] = set()
        current = self.head
        while current is not None and current not in seen:
            seen.add(current)
            node = self.nodes[current]
            out.append(node)
            current = node.next
        return out

    @property
    def values(self) -> list[Number]:
        return [n.value for n in self.ordered()]

    @property
    def identities(self) -> list[str]:
        return [n.node_id for n in self.ordered()]


# ── Trees (arena + id indirection) ───────────────────────────────


@dataclass(frozen=True)
class TreeNode:
    node_id: str
    value: Number
    left: str | None = None
    right: str | None = None
    parent: str | None = None


@dataclass(frozen=True)
class TreeSnapshot:
    nodes: dict[str, TreeNode] = field(default_factory=dict)
    root: str | None = None
    next_id: int = 0

    @property
    def size(self) -> int:
        return len(self.nodes)

    def node(self, node_id: str) -> TreeNode:
        return self.nodes[node_id]

    def height(self) -> int:
        return self._height(self.root)

    def _height(self, node_id: str | None) -> int:
        if node_id is None:
            return 0
        n = self.nodes[node_id]
        return 1 + max(self._height(n.left), self._height(n.right))

    def inorder_values(self) -> list[Number]:
        out: list[Number] = []

        def walk(node_id: str | None):
            if node_id is None:
                return
            n = self.nodes[node_id]
            walk(n.left)
            out.append(n.value)
            walk(n.right)

        walk(self.root)
        return out


# ── Graphs ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class GraphEdge:
    source: str
    target: str
    weight: Number = 1

    @property
    def edge_id(self) -> str:
        return f"{self.source}-{self.target}"


@dataclass(frozen=True)
class GraphSnapshot:
    nodes: tuple[str, ...] = ()
    edges: tuple[GraphEdge, ...] = ()
    directed: bool = False

    def neighbors(self, node: str) -> list[tuple[str, GraphEdge]]:
        """Adjacent nodes in edge insertion order."""
        out: list[tuple[str, GraphEdge]] = []
        for edge in self.edges:
            if edge.source == node:
                out.append((edge.target, edge))
            elif not self.directed and edge.target == node:
                out.append((edge.source, edge))
        return out
