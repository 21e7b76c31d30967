"""Tests for the array primitives."""

import pytest

from algotrace import constants
from algotrace.engines import get_engine
from algotrace.errors import InputError
from algotrace.snapshots import make_array_snapshot
from algotrace.steps import StepKind


def _array(operation, snapshot=None, **parameters):
    return get_engine(constants.FAMILY_ARRAY).run(operation, snapshot, parameters)


class TestInsert:
    def test_insert_in_middle(self):
        trace = _array("insert", make_array_snapshot([10, 20, 30]), value=99, index=2)
        snapshot = trace.result.snapshot
        assert snapshot.values == [10, 20, 99, 30]
        assert snapshot.identities == ["el-0", "el-1", "el-3", "el-2"]
        assert [e.index for e in snapshot.elements] == [0, 1, 2, 3]
        shifted = [s for s in trace.steps if s.kind == StepKind.INFO][0]
        assert shifted.subjects == ("el-2",)

    def test_insert_appends_by_default(self):
        trace = _array("insert", make_array_snapshot([1, 2]), value=3)
        assert trace.result.snapshot.values == [1, 2, 3]
        assert StepKind.INFO not in [s.kind for s in trace.steps]

    def test_insert_into_empty(self):
        snapshot = _array("insert", make_array_snapshot([]), value=5).result.snapshot
        assert snapshot.identities == ["el-0"]

    def test_new_identity_follows_highest(self):
        deleted = _array("delete", make_array_snapshot([1, 2, 3]), index=1).result.snapshot
        inserted = _array("insert", deleted, value=7).result.snapshot
        assert inserted.identities == ["el-0", "el-2", "el-3"]

    @pytest.mark.parametrize("index", [-1, 4, True, "1"])
    def test_bad_index(self, index):
        with pytest.raises(InputError):
            _array("insert", make_array_snapshot([1, 2, 3]), value=9, index=index)


class TestDelete:
    def test_delete_last_by_default(self):
        result = _array("delete", make_array_snapshot([1, 2, 3])).result
        assert result.value == 3
        assert result.snapshot.values == [1, 2]

    def test_delete_first(self):
        trace = _array("delete", make_array_snapshot([1, 2, 3]), index=0)
        assert trace.result.snapshot.values == [2, 3]
        removed = [s for s in trace.steps if s.kind == StepKind.REMOVE][0]
        assert removed.subjects == ("el-0",)
        assert removed.old_value == 1

    def test_delete_from_empty(self):
        with pytest.raises(InputError, match="empty"):
            _array("delete", make_array_snapshot([]))


class TestSearchAndUpdate:
    def test_search_found(self):
        assert _array("search", make_array_snapshot([5, 6, 7]), value=7).result.value == 2

    def test_search_missing(self):
        trace = _array("search", make_array_snapshot([5, 6, 7]), value=8)
        assert trace.result.value == constants.NOT_FOUND_INDEX
        assert len([s for s in trace.steps if s.kind == StepKind.COMPARE]) == 3

    def test_update_keeps_identity(self):
        trace = _array("update", make_array_snapshot([5, 6, 7]), index=1, value=60)
        snapshot = trace.result.snapshot
        assert snapshot.values == [5, 60, 7]
        assert snapshot.identities == ["el-0", "el-1", "el-2"]
        write = [s for s in trace.steps if s.kind == StepKind.MUTATE_VALUE][0]
        assert (write.old_value, write.new_value) == (6, 60)

    def test_update_requires_index(self):
        with pytest.raises(InputError, match="index"):
            _array("update", make_array_snapshot([5]), value=1)

    def test_default_snapshot(self):
        result = _array("search", value=40).result
        assert result.value == constants.SAMPLE_ARRAY_VALUES.index(40)

    def test_input_snapshot_untouched(self):
        snapshot = make_array_snapshot([1, 2, 3])
        _array("update", snapshot, index=0, value=9)
        assert snapshot.values == [1, 2, 3]
