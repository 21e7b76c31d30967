"""Graph traversals and shortest paths over a GraphSnapshot."""

from __future__ import annotations

import logging
from collections import deque
from typing import Any

from .. import constants
from ..errors import InputError
from ..snapshot_types import GraphEdge, GraphSnapshot
from ..snapshots import sample_graph
from ..steps import StepKind
from ..trace_types import GraphResult
from ..validation import require_param
from ._base import BaseEngine

logger = logging.getLogger(__name__)


class GraphEngine(BaseEngine):
    """bfs, dfs and dijkstra from a ``start`` node, with an optional ``target``.

    Neighbours are examined in edge insertion order. When ``target`` is
    given the run stops as soon as it is reached and the result carries the
    path to it.
    """

    FAMILY = constants.FAMILY_GRAPH

    def __init__(self):
        super().__init__()
        self._graph: GraphSnapshot | None = None
        self._ALGORITHMS = {
            "bfs": self._bfs,
            "dfs": self._dfs,
            "dijkstra": self._dijkstra,
        }

    def _default_snapshot(self) -> GraphSnapshot:
        return sample_graph()

    def _current_snapshot(self) -> GraphSnapshot | None:
        return self._graph

    def _begin(
        self, snapshot: Any, params: dict[str, Any], name: str
    ) -> tuple[GraphSnapshot, str, str | None]:
        if not isinstance(snapshot, GraphSnapshot):
            raise InputError(f"graph algorithms need a GraphSnapshot, got {type(snapshot).__name__}")
        start = require_param(params, "start")
        target = params.get("target")
        if start not in snapshot.nodes:
            raise InputError(f"Start node {start!r} is not in the graph")
        if target is not None and target not in snapshot.nodes:
            raise InputError(f"Target node {target!r} is not in the graph")
        self._graph = snapshot
        self._emit(StepKind.START, f"Starting {name} from {start}", payload={"start": start})
        return snapshot, start, target

    def _examine(self, current: str, neighbor: str, edge: GraphEdge):
        self._emit(
            StepKind.COMPARE,
            f"Examining edge {current}-{neighbor} (weight {edge.weight})",
            subjects=(edge.edge_id, neighbor),
            payload={"edge": edge.edge_id, "weight": edge.weight},
        )

    def _visit(self, node: str, description: str, **payload: Any):
        self._emit(StepKind.VISIT, description, subjects=(node,), payload=payload)

    def _finish(
        self,
        name: str,
        order: list[str],
        distances: dict[str, float],
        previous: dict[str, str | None],
        target: str | None,
    ) -> GraphResult:
        path: tuple[str, ...] = ()
        if target is not None:
            if target in order:
                path = self._path_to(target, previous)
                self._emit(
                    StepKind.FOUND,
                    f"Reached {target} via {' -> '.join(path)}",
                    subjects=path,
                    payload={"path": path},
                )
            else:
                self._emit(StepKind.NOT_FOUND, f"{target} is not reachable")
        self._emit(
            StepKind.FINAL_RESULT,
            f"{name} visited {', '.join(order)}",
            new_value=tuple(order),
        )
        return GraphResult(
            order=tuple(order), distances=distances, previous=previous, path=path
        )

    @staticmethod
    def _path_to(target: str, previous: dict[str, str | None]) -> tuple[str, ...]:
        path = [target]
        while previous.get(path[-1]) is not None:
            path.append(previous[path[-1]])
        return tuple(reversed(path))

    # ── breadth first ────────────────────────────────────────────

    def _bfs(self, snapshot: Any, params: dict[str, Any]) -> GraphResult:
        graph, start, target = self._begin(snapshot, params, "Breadth-First Search")
        order = [start]
        distances: dict[str, float] = {start: 0}
        previous: dict[str, str | None] = {start: None}
        self._visit(start, f"Visiting start node {start}", distance=0)
        pending = deque([start])
        while pending:
            current = pending.popleft()
            if target is not None and current == target:
                break
            for neighbor, edge in graph.neighbors(current):
                self._examine(current, neighbor, edge)
                if neighbor in distances:
                    continue
                distances[neighbor] = distances[current] + 1
                previous[neighbor] = current
                order.append(neighbor)
                pending.append(neighbor)
                self._visit(
                    neighbor,
                    f"Discovered {neighbor} at distance {distances[neighbor]}",
                    distance=distances[neighbor],
                )
        return self._finish("BFS", order, distances, previous, target)

    # ── depth first ──────────────────────────────────────────────

    def _dfs(self, snapshot: Any, params: dict[str, Any]) -> GraphResult:
        graph, start, target = self._begin(snapshot, params, "Depth-First Search")
        order: list[str] = []
        distances: dict[str, float] = {}
        previous: dict[str, str | None] = {start: None}

        def explore(current: str, depth: int) -> bool:
            order.append(current)
            distances[current] = depth
            self._visit(current, f"Visiting {current} at depth {depth}", distance=depth)
            if target is not None and current == target:
                return True
            for neighbor, edge in graph.neighbors(current):
                self._examine(current, neighbor, edge)
                if neighbor in distances:
                    continue
                previous[neighbor] = current
                if explore(neighbor, depth + 1):
                    return True
            return False

        explore(start, 0)
        return self._finish("DFS", order, distances, previous, target)

    # ── dijkstra ─────────────────────────────────────────────────

    def _dijkstra(self, snapshot: Any, params: dict[str, Any]) -> GraphResult:
        graph, start, target = self._begin(snapshot, params, "Dijkstra's Algorithm")
        for edge in graph.edges:
            if edge.weight < 0:
                raise InputError(f"Dijkstra needs non-negative weights, {edge.edge_id} has {edge.weight}")
        distances: dict[str, float] = {node: float("inf") for node in graph.nodes}
        previous: dict[str, str | None] = {node: None for node in graph.nodes}
        distances[start] = 0
        unvisited = list(graph.nodes)
        order: list[str] = []
        while unvisited:
            current = min(unvisited, key=lambda node: distances[node])
            if distances[current] == float("inf"):
                break
            unvisited.remove(current)
            order.append(current)
            self._visit(
                current,
                f"Finalized {current} with distance {distances[current]}",
                distance=distances[current],
            )
            if target is not None and current == target:
                break
            for neighbor, edge in graph.neighbors(current):
                if neighbor not in unvisited:
                    continue
                self._examine(current, neighbor, edge)
                alt = distances[current] + edge.weight
                if alt < distances[neighbor]:
                    old = distances[neighbor]
                    distances[neighbor] = alt
                    previous[neighbor] = current
                    self._emit(
                        StepKind.MUTATE_VALUE,
                        f"Shorter path to {neighbor} through {current}: {alt}",
                        subjects=(neighbor,),
                        old_value=old,
                        new_value=alt,
                        payload={"via": current},
                    )
        return self._finish("Dijkstra", order, distances, previous, target)
