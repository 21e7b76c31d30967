"""Tests for the binary search tree engine."""

import random

import pytest

from algotrace import constants
from algotrace.engines import get_engine
from algotrace.errors import InputError
from algotrace.snapshots import make_array_snapshot, make_tree_snapshot
from algotrace.steps import Role, StepKind


def _sample():
    return make_tree_snapshot(constants.SAMPLE_BST_VALUES)


def _bst(operation, snapshot, **parameters):
    return get_engine(constants.FAMILY_BST).run(operation, snapshot, parameters)


def _assert_valid_bst(tree):
    """Ordering holds, parent links agree and every node is reachable from the root."""
    reachable = []

    def walk(node_id, low, high, parent):
        if node_id is None:
            return
        node = tree.node(node_id)
        assert node.parent == parent
        assert low is None or node.value > low
        assert high is None or node.value < high
        reachable.append(node_id)
        walk(node.left, low, node.value, node_id)
        walk(node.right, node.value, high, node_id)

    walk(tree.root, None, None, None)
    assert sorted(reachable) == sorted(tree.nodes)


class TestInsert:
    def test_insert_as_leaf(self):
        trace = _bst("insert", _sample(), value=45)
        tree = trace.result.snapshot
        assert trace.result.value == 45
        assert tree.inorder_values() == [20, 30, 40, 45, 50, 60, 70, 80]
        insert = [s for s in trace.steps if s.kind == StepKind.INSERT][0]
        assert insert.subjects == ("node-7",)
        assert insert.payload == {"parent": "node-4", "side": "right"}
        _assert_valid_bst(tree)

    def test_insert_compares_along_path(self):
        trace = _bst("insert", _sample(), value=45)
        path = [s.subjects[0] for s in trace.steps if s.kind == StepKind.COMPARE]
        assert path == ["node-0", "node-1", "node-4"]

    def test_insert_into_empty_tree(self):
        tree = _bst("insert", make_tree_snapshot(), value=7).result.snapshot
        assert tree.root == "node-0"
        assert tree.size == 1

    def test_default_snapshot_is_empty_tree(self):
        tree = _bst("insert", None, value=7).result.snapshot
        assert tree.inorder_values() == [7]

    def test_duplicate_is_ignored(self):
        trace = _bst("insert", _sample(), value=40)
        assert trace.result.value is None
        assert trace.result.snapshot.size == 7
        assert StepKind.INSERT not in [s.kind for s in trace.steps]

    def test_input_snapshot_not_modified(self):
        original = _sample()
        nodes_before = dict(original.nodes)
        _bst("insert", original, value=45)
        assert original.nodes == nodes_before


class TestSearch:
    def test_found_returns_node_id(self):
        trace = _bst("search", _sample(), value=60)
        assert trace.result.value == "node-5"
        found = [s for s in trace.steps if s.kind == StepKind.FOUND]
        assert found[0].subjects == ("node-5",)

    def test_miss(self):
        trace = _bst("search", _sample(), value=65)
        assert trace.result.value is None
        kinds = [s.kind for s in trace.steps]
        assert kinds.count(StepKind.COMPARE) == 3
        assert StepKind.NOT_FOUND in kinds

    def test_search_empty_tree(self):
        trace = _bst("search", make_tree_snapshot(), value=1)
        assert [s.kind for s in trace.steps] == [
            StepKind.START,
            StepKind.NOT_FOUND,
            StepKind.FINAL_RESULT,
        ]


class TestDelete:
    def test_delete_leaf(self):
        tree = _bst("delete", _sample(), value=20).result.snapshot
        assert "node-3" not in tree.nodes
        assert tree.node("node-1").left is None
        _assert_valid_bst(tree)

    def test_delete_node_with_one_child(self):
        with_child = _bst("insert", _sample(), value=45).result.snapshot
        trace = _bst("delete", with_child, value=40)
        tree = trace.result.snapshot
        assert tree.node("node-1").right == "node-7"
        assert tree.node("node-7").parent == "node-1"
        removed = [s for s in trace.steps if s.kind == StepKind.REMOVE][0]
        assert removed.payload == {"replacement": "node-7"}
        _assert_valid_bst(tree)

    def test_delete_node_with_two_children_uses_successor(self):
        trace = _bst("delete", _sample(), value=50)
        tree = trace.result.snapshot
        assert tree.root == "node-0"
        assert tree.node("node-0").value == 60
        assert "node-5" not in tree.nodes
        assert tree.inorder_values() == [20, 30, 40, 60, 70, 80]
        successor = [s for s in trace.steps if s.role == Role.MIN]
        assert successor[0].subjects == ("node-5",)
        write = [s for s in trace.steps if s.kind == StepKind.MUTATE_VALUE][0]
        assert (write.old_value, write.new_value) == (50, 60)
        _assert_valid_bst(tree)

    def test_delete_root_with_single_child(self):
        tree = _bst("delete", make_tree_snapshot([10, 20]), value=10).result.snapshot
        assert tree.root == "node-1"
        assert tree.node("node-1").parent is None

    def test_delete_last_node(self):
        tree = _bst("delete", make_tree_snapshot([10]), value=10).result.snapshot
        assert tree.root is None
        assert tree.size == 0

    def test_delete_missing_value(self):
        original = _sample()
        result = _bst("delete", original, value=99).result
        assert result.value is None
        assert result.snapshot == original


class TestTraversals:
    @pytest.mark.parametrize(
        "operation,expected",
        [
            ("inorder", [20, 30, 40, 50, 60, 70, 80]),
            ("preorder", [50, 30, 20, 40, 70, 60, 80]),
            ("postorder", [20, 40, 30, 60, 80, 70, 50]),
            ("levelorder", [50, 30, 70, 20, 40, 60, 80]),
        ],
    )
    def test_order(self, operation, expected):
        trace = _bst(operation, _sample())
        assert trace.result.value == expected
        visits = [s for s in trace.steps if s.kind == StepKind.VISIT]
        assert [s.payload["order"] for s in visits] == list(range(1, 8))

    @pytest.mark.parametrize("operation", ["inorder", "preorder", "postorder", "levelorder"])
    def test_empty_tree(self, operation):
        assert _bst(operation, make_tree_snapshot()).result.value == []

    def test_sample_height(self):
        assert _sample().height() == 3


class TestRandomisedInvariant:
    @pytest.mark.parametrize("seed", range(5))
    def test_inserts_and_deletes_keep_bst_shape(self, seed):
        rng = random.Random(seed)
        tree = make_tree_snapshot()
        present = set()
        for _ in range(40):
            value = rng.randint(0, 30)
            if value in present and rng.random() < 0.6:
                tree = _bst("delete", tree, value=value).result.snapshot
                present.discard(value)
            else:
                tree = _bst("insert", tree, value=value).result.snapshot
                present.add(value)
            _assert_valid_bst(tree)
            assert tree.inorder_values() == sorted(present)


class TestBSTInputErrors:
    def test_wrong_snapshot_type(self):
        with pytest.raises(InputError, match="TreeSnapshot"):
            _bst("inorder", make_array_snapshot([1]))

    def test_missing_value(self):
        with pytest.raises(InputError):
            _bst("insert", _sample())
