"""Fixed-capacity stack and circular queue primitives."""

from __future__ import annotations

import logging
from typing import Any, Callable

from .. import constants
from ..errors import ContainerCapacityError, InputError, Overflow, Underflow
from ..snapshot_types import Element, QueueSlot, QueueSnapshot, StackSnapshot
from ..snapshots import make_queue_snapshot, make_stack_snapshot
from ..steps import Role, StepKind
from ..trace_types import OperationResult
from ..validation import require_number, require_param
from ._base import BaseEngine

logger = logging.getLogger(__name__)


# ── Container models ─────────────────────────────────────────────


class StackModel:
    """Mutable working copy of a StackSnapshot."""

    NAME = "stack"

    def __init__(self, snapshot: StackSnapshot):
        self.items: list[Element] = list(snapshot.elements)
        self.capacity = snapshot.capacity
        self.next_id = snapshot.next_id

    @property
    def top(self) -> Element | None:
        return self.items[-1] if self.items else None

    def push(self, value: Any) -> Element:
        if len(self.items) >= self.capacity:
            raise Overflow(self.NAME, f"cannot push {value}, stack is full")
        element = Element(
            value=value,
            index=len(self.items),
            identity=f"{constants.ITEM_ID_PREFIX}{self.next_id}",
        )
        self.next_id += 1
        self.items.append(element)
        return element

    def pop(self) -> Element:
        if not self.items:
            raise Underflow(self.NAME, "cannot pop from an empty stack")
        return self.items.pop()

    def peek(self) -> Element:
        if not self.items:
            raise Underflow(self.NAME, "cannot peek at an empty stack")
        return self.items[-1]

    def snapshot(self) -> StackSnapshot:
        return StackSnapshot(
            elements=tuple(self.items), capacity=self.capacity, next_id=self.next_id
        )


class QueueModel:
    """Mutable working copy of a QueueSnapshot (circular buffer)."""

    NAME = "queue"

    def __init__(self, snapshot: QueueSnapshot):
        self.slots: list[Element | None] = [s.element for s in snapshot.slots]
        self.capacity = snapshot.capacity
        self.front = snapshot.front
        self.rear = snapshot.rear
        self.size = snapshot.size
        self.next_id = snapshot.next_id

    def enqueue(self, value: Any) -> Element:
        if self.size == self.capacity:
            raise Overflow(self.NAME, f"cannot enqueue {value}, queue is full")
        self.rear = (self.rear + 1) % self.capacity
        element = Element(
            value=value,
            index=self.rear,
            identity=f"{constants.ITEM_ID_PREFIX}{self.next_id}",
        )
        self.next_id += 1
        self.slots[self.rear] = element
        self.size += 1
        return element

    def dequeue(self) -> Element:
        if self.size == 0:
            raise Underflow(self.NAME, "cannot dequeue from an empty queue")
        element = self.slots[self.front]
        self.slots[self.front] = None
        self.front = (self.front + 1) % self.capacity
        self.size -= 1
        return element

    def peek_front(self) -> Element:
        if self.size == 0:
            raise Underflow(self.NAME, "cannot peek at an empty queue")
        return self.slots[self.front]

    def peek_rear(self) -> Element:
        if self.size == 0:
            raise Underflow(self.NAME, "cannot peek at an empty queue")
        return self.slots[self.rear]

    def ordered(self) -> list[Element]:
        return [self.slots[(self.front + i) % self.capacity] for i in range(self.size)]

    def clear(self):
        self.slots = [None] * self.capacity
        self.front = 0
        self.rear = self.capacity - 1
        self.size = 0

    def snapshot(self) -> QueueSnapshot:
        return QueueSnapshot(
            slots=tuple(QueueSlot(index=i, element=e) for i, e in enumerate(self.slots)),
            capacity=self.capacity,
            front=self.front,
            rear=self.rear,
            size=self.size,
            next_id=self.next_id,
        )


# ── Engines ──────────────────────────────────────────────────────


class ContainerEngine(BaseEngine):
    """Shared plumbing for the container primitives.

    Capacity failures raised by the model are caught here and recorded as a
    final ``error`` step; ``run`` then returns normally with the error in
    ``OperationResult.error``.
    """

    def __init__(self):
        super().__init__()
        self._model: Any = None

    def _current_snapshot(self) -> Any:
        return self._model.snapshot() if self._model is not None else None

    def _guarded(self, operation: Callable[[], Any]) -> OperationResult:
        try:
            value = operation()
        except ContainerCapacityError as err:
            logger.debug("%s", err)
            self._emit(
                StepKind.ERROR,
                str(err),
                payload={"container": err.container, "error": err.label},
            )
            return OperationResult(snapshot=self._model.snapshot(), error=err)
        self._emit(StepKind.FINAL_RESULT, "Operation complete", new_value=value)
        return OperationResult(snapshot=self._model.snapshot(), value=value)

    def _element_step(
        self, kind: StepKind, element: Element, description: str, **kwargs: Any
    ):
        self._emit(
            kind,
            description,
            subjects=(element.identity,),
            positions=(element.index,),
            **kwargs,
        )

    def _scan(self, elements: list[Element], value: Any, origin: str) -> int | None:
        """Compare each element with *value*; returns the 1-based position or None."""
        for position, element in enumerate(elements, start=1):
            self._element_step(
                StepKind.COMPARE,
                element,
                f"Checking {element.value} at position {position} from {origin}",
            )
            if element.value == value:
                self._element_step(
                    StepKind.FOUND,
                    element,
                    f"Found {value} at position {position} from {origin}",
                    payload={"position": position},
                )
                return position
            self._element_step(StepKind.VISIT, element, f"{element.value} != {value}")
        self._emit(StepKind.NOT_FOUND, f"{value} not found in the {self.FAMILY}")
        return None


class StackEngine(ContainerEngine):
    """push, pop, peek, search and clear on a bounded stack."""

    FAMILY = constants.FAMILY_STACK

    def __init__(self):
        super().__init__()
        self._ALGORITHMS = {
            "push": self._push,
            "pop": self._pop,
            "peek": self._peek,
            "search": self._search,
            "clear": self._clear,
        }

    def _default_snapshot(self) -> StackSnapshot:
        return make_stack_snapshot()

    def _begin(self, snapshot: Any, description: str) -> StackModel:
        if not isinstance(snapshot, StackSnapshot):
            raise InputError(f"stack operations need a StackSnapshot, got {type(snapshot).__name__}")
        self._model = StackModel(snapshot)
        self._emit(StepKind.START, description)
        self._mark_top()
        return self._model

    def _mark_top(self):
        top = self._model.top
        if top is not None:
            self._element_step(
                StepKind.SET_ROLE, top, f"Top of stack is {top.value}", role=Role.TOP
            )

    def _push(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        value = require_number(require_param(params, "value"), "value")
        model = self._begin(snapshot, f"Pushing {value} onto the stack")

        def operation():
            element = model.push(value)
            self._element_step(
                StepKind.INSERT, element, f"Pushed {value} onto the stack", new_value=value
            )
            self._mark_top()
            return value

        return self._guarded(operation)

    def _pop(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        model = self._begin(snapshot, "Popping the top of the stack")

        def operation():
            top = model.peek()
            self._element_step(
                StepKind.SET_ROLE, top, f"Removing {top.value}", role=Role.ACTIVE
            )
            model.pop()
            self._element_step(
                StepKind.REMOVE, top, f"Popped {top.value} from the stack", old_value=top.value
            )
            self._mark_top()
            return top.value

        return self._guarded(operation)

    def _peek(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        model = self._begin(snapshot, "Peeking at the top of the stack")

        def operation():
            top = model.peek()
            self._element_step(
                StepKind.SET_ROLE, top, f"Top element is {top.value}", role=Role.ACTIVE
            )
            self._mark_top()
            return top.value

        return self._guarded(operation)

    def _search(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        value = require_number(require_param(params, "value"), "value")
        model = self._begin(snapshot, f"Searching for {value} in the stack")
        return self._guarded(lambda: self._scan(model.items[::-1], value, "top"))

    def _clear(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        model = self._begin(snapshot, "Clearing stack")

        def operation():
            while model.items:
                element = model.pop()
                self._element_step(
                    StepKind.REMOVE, element, f"Removed {element.value}", old_value=element.value
                )
            return None

        return self._guarded(operation)


class QueueEngine(ContainerEngine):
    """enqueue, dequeue, peek_front, peek_rear, search and clear on a circular queue."""

    FAMILY = constants.FAMILY_QUEUE

    def __init__(self):
        super().__init__()
        self._ALGORITHMS = {
            "enqueue": self._enqueue,
            "dequeue": self._dequeue,
            "peek_front": self._peek_front,
            "peek_rear": self._peek_rear,
            "search": self._search,
            "clear": self._clear,
        }

    def _default_snapshot(self) -> QueueSnapshot:
        return make_queue_snapshot()

    def _begin(self, snapshot: Any, description: str) -> QueueModel:
        if not isinstance(snapshot, QueueSnapshot):
            raise InputError(f"queue operations need a QueueSnapshot, got {type(snapshot).__name__}")
        self._model = QueueModel(snapshot)
        self._emit(StepKind.START, description)
        self._mark_ends()
        return self._model

    def _mark_ends(self):
        """Front wins when front and rear are the same element."""
        model = self._model
        if model.size == 0:
            return
        front = model.slots[model.front]
        rear = model.slots[model.rear]
        if rear.identity != front.identity:
            self._element_step(
                StepKind.SET_ROLE, rear, f"Rear is {rear.value} at slot {rear.index}", role=Role.REAR
            )
        self._element_step(
            StepKind.SET_ROLE, front, f"Front is {front.value} at slot {front.index}", role=Role.FRONT
        )

    def _enqueue(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        value = require_number(require_param(params, "value"), "value")
        model = self._begin(snapshot, f"Enqueuing {value}")

        def operation():
            element = model.enqueue(value)
            self._element_step(
                StepKind.INSERT,
                element,
                f"Enqueued {value} at slot {element.index}",
                new_value=value,
                payload={"front": model.front, "rear": model.rear},
            )
            self._mark_ends()
            return value

        return self._guarded(operation)

    def _dequeue(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        model = self._begin(snapshot, "Dequeuing from the front")

        def operation():
            front = model.peek_front()
            self._element_step(
                StepKind.SET_ROLE, front, f"Removing {front.value}", role=Role.ACTIVE
            )
            model.dequeue()
            self._element_step(
                StepKind.REMOVE,
                front,
                f"Dequeued {front.value} from slot {front.index}",
                old_value=front.value,
                payload={"front": model.front, "rear": model.rear},
            )
            self._mark_ends()
            return front.value

        return self._guarded(operation)

    def _peek_front(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        model = self._begin(snapshot, "Peeking at the front of the queue")

        def operation():
            front = model.peek_front()
            self._element_step(
                StepKind.SET_ROLE, front, f"Front element is {front.value}", role=Role.ACTIVE
            )
            self._mark_ends()
            return front.value

        return self._guarded(operation)

    def _peek_rear(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        model = self._begin(snapshot, "Peeking at the rear of the queue")

        def operation():
            rear = model.peek_rear()
            self._element_step(
                StepKind.SET_ROLE, rear, f"Rear element is {rear.value}", role=Role.ACTIVE
            )
            self._mark_ends()
            return rear.value

        return self._guarded(operation)

    def _search(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        value = require_number(require_param(params, "value"), "value")
        model = self._begin(snapshot, f"Searching for {value} in the queue")
        return self._guarded(lambda: self._scan(model.ordered(), value, "front"))

    def _clear(self, snapshot: Any, params: dict[str, Any]) -> OperationResult:
        model = self._begin(snapshot, "Clearing queue")

        def operation():
            elements = model.ordered()
            model.clear()
            for element in elements:
                self._element_step(
                    StepKind.REMOVE, element, f"Removed {element.value}", old_value=element.value
                )
            return None

        return self._guarded(operation)
