"""Demo: record a few algorithm traces and replay one with pause/resume."""

import asyncio
import logging

from algotrace import (
    PlaybackController,
    PlaybackState,
    RunConfig,
    constants,
    graph_traversal,
    linked_list_operation,
    run_recursion,
    sort_array,
    stack_operation,
)
from algotrace.generators import generate_values
from algotrace.run_types import PlaybackConfig
from algotrace.snapshots import make_list_snapshot, make_stack_snapshot


def _show_roles(visual_state):
    return ", ".join(f"{k}={v.value}" for k, v in sorted(visual_state.roles.items()))


async def _replay(trace):
    controller = PlaybackController(PlaybackConfig.from_speed(480))
    handle = None

    def on_step(step, index):
        print(f"  {step}")
        roles = _show_roles(handle.visual_state)
        if roles:
            print(f"      roles: {roles}")
        if index == 3:
            print("  -- pausing --")
            handle.pause()

    def on_complete(result):
        print(f"  done: {result.values}")

    handle = controller.play(trace, on_step, on_complete)
    while handle.state != PlaybackState.PAUSED and handle.is_active:
        await asyncio.sleep(0.01)
    await asyncio.sleep(0.1)
    print("  -- resuming --")
    handle.resume()
    await handle.wait()


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("SORT: merge sort on a nearly sorted input")
    print("=" * 60)
    values = generate_values("nearly_sorted", size=6, seed=7)
    run = sort_array(values, "merge")
    print(run.stats.report())

    print()
    print("=" * 60)
    print("PLAYBACK")
    print("=" * 60)
    asyncio.run(_replay(run.trace))

    print()
    print("=" * 60)
    print("RECURSION: hanoi(3), verbose")
    print("=" * 60)
    hanoi = run_recursion("hanoi", config=RunConfig(verbose=True), n=3)
    print(f"moves: {hanoi.result.value}")

    print()
    print("=" * 60)
    print("STACK: push onto a full stack")
    print("=" * 60)
    full = make_stack_snapshot(constants.SAMPLE_CONTAINER_VALUES, capacity=5)
    result = stack_operation("push", full, value=60).result
    print(f"ok={result.ok} error={result.error}")

    print()
    print("=" * 60)
    print("GRAPH: dijkstra A -> E")
    print("=" * 60)
    route = graph_traversal("dijkstra", "A", "E").result
    print(f"path: {' -> '.join(route.path)}  distance: {route.distances['E']}")

    print()
    print("=" * 60)
    print("LINKED LIST: reverse, verbose")
    print("=" * 60)
    chain = make_list_snapshot(constants.SAMPLE_LIST_VALUES)
    reversed_run = linked_list_operation("reverse", chain, config=RunConfig(verbose=True))
    print(f"values: {reversed_run.result.value}")


if __name__ == "__main__":
    main()
