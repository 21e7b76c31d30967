"""Composable API functions, one per algorithm family.

Each function wraps ``run_algorithm`` with the parameters its family needs,
so a UI layer can call e.g. ``sort_array([5, 2, 9], "merge")`` directly.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from . import constants
from .run import run_algorithm
from .run_types import RunConfig
from .snapshot_types import (
    ArraySnapshot,
    GraphSnapshot,
    ListSnapshot,
    Number,
    QueueSnapshot,
    StackSnapshot,
    TreeSnapshot,
)
from .snapshots import make_array_snapshot
from .trace_types import AlgorithmRun

logger = logging.getLogger(__name__)


def _as_array(values: ArraySnapshot | Iterable[Number]) -> ArraySnapshot:
    if isinstance(values, ArraySnapshot):
        return values
    return make_array_snapshot(values)


def _params(**kwargs: Any) -> dict[str, Any]:
    return {k: v for k, v in kwargs.items() if v is not None}


def sort_array(
    values: ArraySnapshot | Iterable[Number],
    algorithm: str = "bubble",
    config: RunConfig = RunConfig(),
) -> AlgorithmRun:
    """Sort *values* ascending; ``run.result`` is the sorted ArraySnapshot."""
    return run_algorithm(constants.FAMILY_SORTING, algorithm, _as_array(values), config=config)


def search_array(
    values: ArraySnapshot | Iterable[Number],
    target: Number,
    algorithm: str = "linear",
    config: RunConfig = RunConfig(),
) -> AlgorithmRun:
    """Search *values* for *target*; ``run.result`` is a SearchResult.

    Every algorithm except ``linear`` expects *values* in non-descending order.
    """
    return run_algorithm(
        constants.FAMILY_SEARCHING,
        algorithm,
        _as_array(values),
        {"target": target},
        config=config,
    )


def run_recursion(
    algorithm: str,
    snapshot: ArraySnapshot | None = None,
    config: RunConfig = RunConfig(),
    **parameters: Any,
) -> AlgorithmRun:
    """Run a recursive procedure; ``run.result`` is a RecursionResult.

    Examples: ``run_recursion("factorial", n=5)``,
    ``run_recursion("hanoi", n=3)``, ``run_recursion("power", base=2, exponent=4)``.
    """
    return run_algorithm(
        constants.FAMILY_RECURSION, algorithm, snapshot, parameters, config=config
    )


def stack_operation(
    operation: str,
    snapshot: StackSnapshot | None = None,
    value: Number | None = None,
    config: RunConfig = RunConfig(),
) -> AlgorithmRun:
    """Apply one stack primitive; ``run.result`` is an OperationResult."""
    return run_algorithm(
        constants.FAMILY_STACK, operation, snapshot, _params(value=value), config=config
    )


def queue_operation(
    operation: str,
    snapshot: QueueSnapshot | None = None,
    value: Number | None = None,
    config: RunConfig = RunConfig(),
) -> AlgorithmRun:
    """Apply one circular queue primitive; ``run.result`` is an OperationResult."""
    return run_algorithm(
        constants.FAMILY_QUEUE, operation, snapshot, _params(value=value), config=config
    )


def bst_operation(
    operation: str,
    snapshot: TreeSnapshot | None = None,
    value: Number | None = None,
    config: RunConfig = RunConfig(),
) -> AlgorithmRun:
    return run_algorithm(
        constants.FAMILY_BST, operation, snapshot, _params(value=value), config=config
    )


def graph_traversal(
    algorithm: str,
    start: str,
    target: str | None = None,
    snapshot: GraphSnapshot | None = None,
    config: RunConfig = RunConfig(),
) -> AlgorithmRun:
    """Run bfs, dfs or dijkstra; defaults to the five-node sample graph."""
    return run_algorithm(
        constants.FAMILY_GRAPH,
        algorithm,
        snapshot,
        _params(start=start, target=target),
        config=config,
    )


def array_operation(
    operation: str,
    snapshot: ArraySnapshot | None = None,
    value: Number | None = None,
    index: int | None = None,
    config: RunConfig = RunConfig(),
) -> AlgorithmRun:
    return run_algorithm(
        constants.FAMILY_ARRAY,
        operation,
        snapshot,
        _params(value=value, index=index),
        config=config,
    )


def linked_list_operation(
    operation: str,
    snapshot: ListSnapshot | None = None,
    value: Number | None = None,
    index: int | None = None,
    config: RunConfig = RunConfig(),
) -> AlgorithmRun:
    """Apply insert, delete, search or reverse to a singly linked list.

    ``delete`` removes by ``value`` when given, else by ``index``.
    """
    return run_algorithm(
        constants.FAMILY_LINKED_LIST,
        operation,
        snapshot,
        _params(value=value, index=index),
        config=config,
    )
