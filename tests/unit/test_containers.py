"""Tests for the bounded stack and circular queue engines."""

import pytest

from algotrace import constants
from algotrace.engines import get_engine
from algotrace.errors import InputError, Overflow, Underflow
from algotrace.projector import project_prefix
from algotrace.snapshots import make_queue_snapshot, make_stack_snapshot
from algotrace.steps import Role, StepKind


def _stack(operation, snapshot=None, **parameters):
    return get_engine(constants.FAMILY_STACK).run(operation, snapshot, parameters)


def _queue(operation, snapshot=None, **parameters):
    return get_engine(constants.FAMILY_QUEUE).run(operation, snapshot, parameters)


def _final_roles(trace):
    return project_prefix(trace.steps, len(trace.steps) - 1).roles


class TestStackOperations:
    def test_push_appends_on_top(self):
        trace = _stack("push", make_stack_snapshot([10, 20, 30]), value=40)
        result = trace.result
        assert result.ok
        assert result.value == 40
        assert result.snapshot.values == [10, 20, 30, 40]
        assert result.snapshot.top.identity == "item-3"
        assert trace.steps[-1].kind == StepKind.FINAL_RESULT

    def test_push_onto_default_empty_stack(self):
        result = _stack("push", value=5).result
        assert result.snapshot.values == [5]
        assert result.snapshot.capacity == constants.DEFAULT_CAPACITY

    def test_pop_removes_top(self):
        trace = _stack("pop", make_stack_snapshot([10, 20, 30]))
        assert trace.result.value == 30
        assert trace.result.snapshot.values == [10, 20]
        removed = [s for s in trace.steps if s.kind == StepKind.REMOVE]
        assert removed[0].subjects == ("item-2",)
        assert removed[0].old_value == 30

    def test_peek_leaves_stack_unchanged(self):
        snapshot = make_stack_snapshot([10, 20])
        result = _stack("peek", snapshot).result
        assert result.value == 20
        assert result.snapshot == snapshot

    def test_search_counts_from_top(self):
        assert _stack("search", make_stack_snapshot([10, 20, 30]), value=20).result.value == 2
        assert _stack("search", make_stack_snapshot([10, 20, 30]), value=30).result.value == 1

    def test_search_miss(self):
        trace = _stack("search", make_stack_snapshot([10, 20]), value=99)
        assert trace.result.value is None
        kinds = [s.kind for s in trace.steps]
        assert StepKind.NOT_FOUND in kinds
        assert kinds[-1] == StepKind.FINAL_RESULT

    def test_clear_removes_everything(self):
        trace = _stack("clear", make_stack_snapshot([1, 2, 3]))
        assert trace.result.snapshot.is_empty
        assert len([s for s in trace.steps if s.kind == StepKind.REMOVE]) == 3

    def test_identities_never_reused(self):
        pushed = _stack("push", make_stack_snapshot([1, 2]), value=3).result.snapshot
        popped = _stack("pop", pushed).result.snapshot
        again = _stack("push", popped, value=4).result.snapshot
        assert again.top.identity == "item-3"


class TestStackCapacityErrors:
    def test_overflow_becomes_error_step(self):
        snapshot = make_stack_snapshot([1, 2, 3], capacity=3)
        trace = _stack("push", snapshot, value=4)
        assert trace.steps[-1].kind == StepKind.ERROR
        assert trace.steps[-1].payload == {"container": "stack", "error": "Overflow"}
        assert isinstance(trace.result.error, Overflow)
        assert not trace.result.ok
        assert trace.result.snapshot == snapshot

    @pytest.mark.parametrize("operation", ["pop", "peek"])
    def test_underflow_on_empty(self, operation):
        trace = _stack(operation, make_stack_snapshot())
        assert isinstance(trace.result.error, Underflow)
        assert "Stack Underflow" in str(trace.result.error)
        assert StepKind.FINAL_RESULT not in [s.kind for s in trace.steps]


class TestStackInputErrors:
    def test_push_requires_value(self):
        with pytest.raises(InputError):
            _stack("push", make_stack_snapshot())

    def test_push_rejects_non_number(self):
        with pytest.raises(InputError):
            _stack("push", make_stack_snapshot(), value="ten")

    def test_wrong_snapshot_type(self):
        with pytest.raises(InputError, match="StackSnapshot"):
            _stack("pop", make_queue_snapshot([1]))


class TestStackProjection:
    def test_top_role_moves_to_new_element(self):
        trace = _stack("push", make_stack_snapshot([10, 20]), value=30)
        roles = _final_roles(trace)
        assert roles["item-2"] == Role.TOP
        assert Role.TOP not in [roles.get("item-0"), roles.get("item-1")]

    def test_top_role_after_pop(self):
        trace = _stack("pop", make_stack_snapshot([10, 20]))
        roles = _final_roles(trace)
        assert roles == {"item-0": Role.TOP}


class TestQueueOperations:
    def test_enqueue_at_rear(self):
        result = _queue("enqueue", make_queue_snapshot([10, 20, 30], capacity=5), value=40).result
        assert result.value == 40
        assert result.snapshot.values == [10, 20, 30, 40]
        assert result.snapshot.rear == 3
        assert result.snapshot.size == 4

    def test_dequeue_from_front(self):
        result = _queue("dequeue", make_queue_snapshot([10, 20, 30])).result
        assert result.value == 10
        assert result.snapshot.values == [20, 30]
        assert result.snapshot.front == 1

    def test_wraparound(self):
        snapshot = make_queue_snapshot([10, 20, 30], capacity=3)
        after_dequeue = _queue("dequeue", snapshot).result.snapshot
        result = _queue("enqueue", after_dequeue, value=40).result
        assert result.ok
        assert result.snapshot.rear == 0
        assert result.snapshot.slots[0].element.value == 40
        assert result.snapshot.values == [20, 30, 40]
        assert result.snapshot.is_full

    def test_peeks(self):
        snapshot = make_queue_snapshot([10, 20, 30])
        assert _queue("peek_front", snapshot).result.value == 10
        assert _queue("peek_rear", snapshot).result.value == 30
        assert _queue("peek_front", snapshot).result.snapshot == snapshot

    def test_search_counts_from_front(self):
        result = _queue("search", make_queue_snapshot([10, 20, 30]), value=30).result
        assert result.value == 3

    def test_clear_resets_pointers(self):
        snapshot = _queue("clear", make_queue_snapshot([1, 2, 3], capacity=4)).result.snapshot
        assert snapshot.is_empty
        assert (snapshot.front, snapshot.rear) == (0, 3)
        assert all(slot.is_empty for slot in snapshot.slots)

    def test_utilization(self):
        snapshot = make_queue_snapshot([1, 2, 3], capacity=5)
        assert snapshot.utilization == 60.0
        full = _queue("enqueue", make_queue_snapshot([1], capacity=2), value=2).result.snapshot
        assert full.utilization == 100.0


class TestQueueCapacityErrors:
    def test_overflow(self):
        trace = _queue("enqueue", make_queue_snapshot([1, 2], capacity=2), value=3)
        assert isinstance(trace.result.error, Overflow)
        assert trace.steps[-1].kind == StepKind.ERROR
        assert trace.steps[-1].payload["container"] == "queue"

    @pytest.mark.parametrize("operation", ["dequeue", "peek_front", "peek_rear"])
    def test_underflow(self, operation):
        trace = _queue(operation)
        assert isinstance(trace.result.error, Underflow)
        assert trace.result.snapshot.is_empty


class TestQueueProjection:
    def test_single_element_is_front_not_rear(self):
        trace = _queue("peek_front", make_queue_snapshot([10]))
        assert _final_roles(trace) == {"item-0": Role.FRONT}

    def test_enqueue_marks_both_ends(self):
        trace = _queue("enqueue", make_queue_snapshot([10], capacity=5), value=20)
        assert _final_roles(trace) == {"item-0": Role.FRONT, "item-1": Role.REAR}

    def test_dequeue_moves_front(self):
        trace = _queue("dequeue", make_queue_snapshot([10, 20, 30]))
        assert _final_roles(trace) == {"item-1": Role.FRONT, "item-2": Role.REAR}


class TestQueueCapacityCycle:
    def test_fill_then_drain_one(self):
        capacity = 4
        snapshot = make_queue_snapshot(capacity=capacity)
        for value in range(capacity):
            assert not snapshot.is_full
            snapshot = _queue("enqueue", snapshot, value=value).result.snapshot
        assert snapshot.is_full
        assert snapshot.rear == capacity - 1
        drained = _queue("dequeue", snapshot).result.snapshot
        assert drained.size == capacity - 1
        assert sum(1 for slot in drained.slots if slot.is_empty) == 1
        refilled = _queue("enqueue", drained, value=99).result.snapshot
        assert refilled.is_full
        assert refilled.rear == 0

    def test_indices_wrap_over_many_cycles(self):
        capacity = 3
        snapshot = make_queue_snapshot([1, 2], capacity=capacity)
        for step in range(10):
            snapshot = _queue("dequeue", snapshot).result.snapshot
            snapshot = _queue("enqueue", snapshot, value=step).result.snapshot
            assert 0 <= snapshot.front < capacity
            assert snapshot.rear == (snapshot.front + snapshot.size - 1) % capacity
        assert snapshot.values == [8, 9]


class TestSampleContainers:
    def test_sample_stack_top_is_last_value(self):
        snapshot = make_stack_snapshot(constants.SAMPLE_CONTAINER_VALUES)
        assert _stack("peek", snapshot).result.value == 50
        assert _stack("search", snapshot, value=10).result.value == 5

    def test_sample_queue_ends(self):
        snapshot = make_queue_snapshot(constants.SAMPLE_CONTAINER_VALUES)
        assert _queue("peek_front", snapshot).result.value == 10
        assert _queue("peek_rear", snapshot).result.value == 50
        assert snapshot.utilization == 50.0
