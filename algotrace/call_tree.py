"""Call-tree data types for the recursion engines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


UNSET: Any = _Unset()


@dataclass(frozen=True)
class CallFrame:
    """Read-only view of one active call, as shown on the visible call stack."""

    call_id: str
    function_name: str
    parameters: tuple[Any, ...]
    depth: int


@dataclass
class CallNode:
    """One activation in a recursion tree.

    Children are append-only and the node freezes once its return value is
    resolved.
    """

    call_id: str
    function_name: str
    parameters: tuple[Any, ...]
    depth: int
    children: list[CallNode] = field(default_factory=list)
    return_value: Any = UNSET

    @property
    def is_resolved(self) -> bool:
        return self.return_value is not UNSET

    def add_child(self, child: CallNode):
        if self.is_resolved:
            raise RuntimeError(f"{self.call_id} already returned; cannot add calls")
        self.children.append(child)

    def resolve(self, value: Any):
        if self.is_resolved:
            raise RuntimeError(f"{self.call_id} already returned {self.return_value!r}")
        self.return_value = value

    def frame(self) -> CallFrame:
        return CallFrame(self.call_id, self.function_name, self.parameters, self.depth)

    def signature(self) -> str:
        args = ", ".join(str(p) for p in self.parameters)
        return f"{self.function_name}({args})"

    def count(self) -> int:
        return 1 + sum(c.count() for c in self.children)

    def max_depth(self) -> int:
        return max([self.depth] + [c.max_depth() for c in self.children])

    def walk(self):
        """Pre-order iteration over the subtree."""
        yield self
        for child in self.children:
            yield from child.walk()
