"""Playback controller — replays a trace over time on the asyncio event loop.

Usage::

    controller = PlaybackController(PlaybackConfig.from_speed(400))
    handle = controller.play(run.trace, on_step=render, on_complete=done)
    ...
    handle.pause()
    handle.resume()
    await handle.wait()
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from enum import Enum
from typing import Any, Callable, Optional

from .projector import VisualState, project
from .run_types import PlaybackConfig
from .steps import Step
from .trace_types import Trace

logger = logging.getLogger(__name__)

StepSink = Callable[[Step, int], Any]
CompleteSink = Callable[[Any], Any]


class PlaybackState(str, Enum):
    PLAYING = "playing"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


_TRANSITIONS: dict[PlaybackState, frozenset[PlaybackState]] = {
    PlaybackState.PLAYING: frozenset(
        {PlaybackState.PAUSED, PlaybackState.COMPLETED, PlaybackState.CANCELLED}
    ),
    PlaybackState.PAUSED: frozenset({PlaybackState.PLAYING, PlaybackState.CANCELLED}),
    PlaybackState.COMPLETED: frozenset(),
    PlaybackState.CANCELLED: frozenset(),
}


async def _deliver(sink: Callable[..., Any], *args: Any):
    result = sink(*args)
    if inspect.isawaitable(result):
        await result


class PlaybackHandle:
    """One in-flight replay of a trace.

    Steps are dispatched in order. After each dispatch the current delay is
    sampled and the task sleeps. An ``asyncio.Event`` gates dispatch while
    paused, and ``cancel()`` preempts a pending sleep by cancelling the task.
    """

    def __init__(
        self,
        trace: Trace,
        on_step: StepSink,
        on_complete: Optional[CompleteSink] = None,
        delay_ms: float = 0.0,
    ):
        self._trace = trace
        self._on_step = on_step
        self._on_complete = on_complete
        self._delay_ms = self._check_delay(delay_ms)
        self._state = PlaybackState.PLAYING
        self._position = 0
        self._visual_state = VisualState()
        self._running = asyncio.Event()
        self._running.set()
        self._task: asyncio.Task | None = None

    # ── observers ────────────────────────────────────────────────

    @property
    def trace(self) -> Trace:
        return self._trace

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def position(self) -> int:
        """Number of steps dispatched so far."""
        return self._position

    @property
    def visual_state(self) -> VisualState:
        return self._visual_state

    @property
    def delay_ms(self) -> float:
        return self._delay_ms

    @property
    def is_active(self) -> bool:
        return self._state in (PlaybackState.PLAYING, PlaybackState.PAUSED)

    # ── controls ─────────────────────────────────────────────────

    def pause(self) -> bool:
        if not self._transition(PlaybackState.PAUSED):
            return False
        self._running.clear()
        return True

    def resume(self) -> bool:
        if not self._transition(PlaybackState.PLAYING):
            return False
        self._running.set()
        return True

    def cancel(self) -> bool:
        """Stop delivery permanently. Safe to call from inside ``on_step``."""
        if not self._transition(PlaybackState.CANCELLED):
            return False
        self._running.set()
        task = self._task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
        return True

    def set_delay(self, delay_ms: float):
        """Change the inter-step delay; applies from the next wait onwards."""
        self._delay_ms = self._check_delay(delay_ms)

    async def wait(self):
        """Wait for the run to end; re-raises an exception raised by a sink."""
        if self._task is None:
            return
        await asyncio.wait({self._task})
        if self._task.cancelled():
            return
        error = self._task.exception()
        if error is not None:
            raise error

    # ── internals ────────────────────────────────────────────────

    @staticmethod
    def _check_delay(delay_ms: float) -> float:
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be non-negative, got {delay_ms}")
        return float(delay_ms)

    def _transition(self, new_state: PlaybackState) -> bool:
        if new_state not in _TRANSITIONS[self._state]:
            logger.debug("Ignoring %s request in state %s", new_state.value, self._state.value)
            return False
        logger.debug("Playback %s -> %s", self._state.value, new_state.value)
        self._state = new_state
        return True

    def _start(self):
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run())
        self._task.add_done_callback(self._retrieve_error)

    @staticmethod
    def _retrieve_error(task: asyncio.Task):
        # Already logged in _run; wait() still re-raises it.
        if not task.cancelled():
            task.exception()

    async def _run(self):
        steps = self._trace.steps
        try:
            for index, step in enumerate(steps):
                await self._running.wait()
                if self._state == PlaybackState.CANCELLED:
                    return
                self._visual_state = project(self._visual_state, step)
                self._position = index + 1
                await _deliver(self._on_step, step, index)
                if self._state == PlaybackState.CANCELLED:
                    return
                if index < len(steps) - 1:
                    await asyncio.sleep(self._delay_ms / 1000)
            await self._running.wait()
            if self._transition(PlaybackState.COMPLETED) and self._on_complete is not None:
                logger.info("Playback of %s completed (%d steps)", self._trace.algorithm, len(steps))
                await _deliver(self._on_complete, self._trace.result)
        except asyncio.CancelledError:
            self._state = PlaybackState.CANCELLED
            raise
        except Exception:
            logger.exception("Playback sink failed at step %d", self._position - 1)
            if self.is_active:
                self._state = PlaybackState.CANCELLED
            raise


class PlaybackController:
    """Owns at most one active playback; a new ``play`` replaces the old one."""

    def __init__(self, config: PlaybackConfig = PlaybackConfig()):
        self._config = config
        self._current: PlaybackHandle | None = None

    @property
    def config(self) -> PlaybackConfig:
        return self._config

    @property
    def current(self) -> PlaybackHandle | None:
        return self._current

    def play(
        self,
        trace: Trace,
        on_step: StepSink,
        on_complete: Optional[CompleteSink] = None,
        delay_ms: float | None = None,
    ) -> PlaybackHandle:
        """Start replaying *trace*. Must be called with a running event loop.

        Any still-active previous run of this controller is cancelled first.
        """
        asyncio.get_running_loop()
        if self._current is not None and self._current.is_active:
            logger.info("Cancelling previous playback of %s", self._current.trace.algorithm)
            self._current.cancel()
        handle = PlaybackHandle(
            trace,
            on_step,
            on_complete,
            self._config.delay_ms if delay_ms is None else delay_ms,
        )
        handle._start()
        self._current = handle
        return handle
