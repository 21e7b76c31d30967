"""BaseEngine — family-agnostic trace recording infrastructure."""

from __future__ import annotations

import logging
from typing import Any, Callable

from ..errors import InputError
from ..recorder import TraceRecorder
from ..snapshot_types import ArraySnapshot, Element, Number
from ..steps import Step, StepKind
from ..trace_types import Trace

logger = logging.getLogger(__name__)


class BaseEngine:
    """Base class for algorithm engines.

    Subclasses set ``FAMILY`` and populate ``_ALGORITHMS`` with handlers of the
    form ``handler(snapshot, parameters) -> result``. Handlers validate their
    input before emitting anything, so an ``InputError`` never leaves a
    partial trace behind.
    """

    FAMILY: str = ""

    def __init__(self):
        self._recorder: TraceRecorder | None = None
        self._ALGORITHMS: dict[str, Callable[[Any, dict[str, Any]], Any]] = {}

    @property
    def algorithms(self) -> tuple[str, ...]:
        return tuple(self._ALGORITHMS.keys())

    # ── entry point ──────────────────────────────────────────────

    def run(
        self,
        algorithm: str,
        snapshot: Any = None,
        parameters: dict[str, Any] | None = None,
    ) -> Trace:
        handler = self._ALGORITHMS.get(algorithm)
        if handler is None:
            raise InputError(
                f"Unknown {self.FAMILY} algorithm '{algorithm}'. "
                f"Available: {list(self._ALGORITHMS.keys())}"
            )
        params = dict(parameters or {})
        if snapshot is None:
            snapshot = self._default_snapshot()
        self._recorder = TraceRecorder(f"{self.FAMILY}/{algorithm}", snapshot)
        try:
            result = handler(snapshot, params)
            return self._recorder.finish(result)
        finally:
            self._recorder = None

    # ── helpers ──────────────────────────────────────────────────

    def _emit(self, kind: StepKind, description: str = "", **kwargs: Any) -> Step:
        if "snapshot" not in kwargs:
            kwargs["snapshot"] = self._current_snapshot()
        return self._recorder.emit(kind, description, **kwargs)

    def _default_snapshot(self) -> Any:
        """Container used when the caller passes no snapshot."""
        return None

    def _current_snapshot(self) -> Any:
        """State attached to steps that do not pass one explicitly."""
        return None

    def _require_array(self, snapshot: Any) -> ArraySnapshot:
        if not isinstance(snapshot, ArraySnapshot):
            raise InputError(
                f"{self.FAMILY} algorithms need an ArraySnapshot, "
                f"got {type(snapshot).__name__}"
            )
        return snapshot


class WorkingArray:
    """Mutable scratch copy of an ArraySnapshot.

    Identities travel with their values on every relocation, so each
    snapshot taken from it is a permutation of the input.
    """

    def __init__(self, snapshot: ArraySnapshot):
        self.ids: list[str] = [e.identity for e in snapshot.elements]
        self.values: list[Number] = [e.value for e in snapshot.elements]

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, i: int) -> Number:
        return self.values[i]

    def swap(self, i: int, j: int):
        self.ids[i], self.ids[j] = self.ids[j], self.ids[i]
        self.values[i], self.values[j] = self.values[j], self.values[i]

    def move(self, src: int, dst: int):
        """Relocate the element at *src* to *dst* (dst <= src), shifting the rest right."""
        ident = self.ids.pop(src)
        value = self.values.pop(src)
        self.ids.insert(dst, ident)
        self.values.insert(dst, value)

    def ids_between(self, low: int, high: int) -> list[str]:
        return self.ids[low : high + 1]

    def snapshot(self) -> ArraySnapshot:
        return ArraySnapshot(
            elements=tuple(
                Element(value=v, index=i, identity=ident)
                for i, (ident, v) in enumerate(zip(self.ids, self.values))
            )
        )
