"""Orchestrator — run_algorithm() entry point."""

from __future__ import annotations

import logging
import time
from typing import Any

from .engines import get_engine
from .errors import AlgotraceError
from .run_types import RunConfig, RunStats
from .snapshot_types import (
    ArraySnapshot,
    GraphSnapshot,
    ListSnapshot,
    QueueSnapshot,
    StackSnapshot,
    TreeSnapshot,
)
from .trace_stats import count_step_kinds
from .trace_types import AlgorithmRun, Trace

logger = logging.getLogger(__name__)


def _input_size(snapshot: Any) -> int:
    if isinstance(snapshot, (ArraySnapshot, StackSnapshot)):
        return len(snapshot.elements)
    if isinstance(snapshot, QueueSnapshot):
        return snapshot.size
    if isinstance(snapshot, (TreeSnapshot, ListSnapshot)):
        return snapshot.size
    if isinstance(snapshot, GraphSnapshot):
        return len(snapshot.nodes)
    return 0


def _print_trace(trace: Trace):
    """Print verbose step-by-step trace info."""
    print(f"═══ Trace: {trace.algorithm} ═══")
    for step in trace.steps:
        print(f"  {step}")
        if step.old_value is not None or step.new_value is not None:
            print(f"    {step.old_value!r} → {step.new_value!r}")
    print(f"  result: {trace.result!r}")
    print()


def run_algorithm(
    family: str,
    algorithm: str,
    snapshot: Any = None,
    parameters: dict[str, Any] | None = None,
    config: RunConfig = RunConfig(),
) -> AlgorithmRun:
    """Run one instrumented algorithm and collect its trace.

    Args:
        family: Engine family ("sorting", "searching", "recursion", "stack",
            "queue", "bst", "graph", "array" or "linked_list").
        algorithm: Algorithm or operation name within the family.
        snapshot: Initial container state; families with a sensible default
            container (stack, queue, bst, graph, array, linked_list) accept None.
        parameters: Algorithm parameters such as ``target`` or ``value``.
        config: Run configuration; ``verbose`` prints every step.

    Raises:
        InputError: invalid parameters or unknown family/algorithm. No trace
            is produced.
    """
    engine = get_engine(family)
    stats = RunStats(family=family, algorithm=algorithm)

    t0 = time.perf_counter()
    try:
        trace = engine.run(algorithm, snapshot, parameters)
    except AlgotraceError as err:
        logger.warning("%s/%s rejected its input: %s", family, algorithm, err)
        raise
    stats.engine_time = time.perf_counter() - t0
    stats.input_size = _input_size(trace.initial_snapshot)
    stats.step_count = len(trace.steps)
    stats.kind_counts = count_step_kinds(trace.steps)

    logger.info(
        "%s/%s recorded %d steps in %.1fms",
        family,
        algorithm,
        stats.step_count,
        stats.engine_time * 1000,
    )

    if config.verbose:
        _print_trace(trace)
        print(stats.report())

    return AlgorithmRun(trace=trace, stats=stats)
