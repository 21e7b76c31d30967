"""Tests for timed trace playback."""

import asyncio
import gc
import time

import pytest

from algotrace import constants
from algotrace.engines import get_engine
from algotrace.playback import PlaybackController, PlaybackState
from algotrace.projector import project_prefix
from algotrace.run_types import PlaybackConfig
from algotrace.snapshots import make_array_snapshot
from algotrace.steps import Step, StepKind
from algotrace.trace_types import Trace


def _make_trace(n=5):
    steps = tuple(
        Step(step_index=i, kind=StepKind.INFO, description=f"step {i}") for i in range(n)
    )
    return Trace(algorithm="test/info", steps=steps, result="done")


def _fast_controller():
    return PlaybackController(PlaybackConfig(delay_ms=0))


class TestDelivery:
    def test_all_steps_then_complete(self):
        seen, done = [], []

        async def scenario():
            handle = _fast_controller().play(
                _make_trace(), on_step=lambda step, i: seen.append(i), on_complete=done.append
            )
            await handle.wait()
            return handle

        handle = asyncio.run(scenario())
        assert seen == [0, 1, 2, 3, 4]
        assert done == ["done"]
        assert handle.state == PlaybackState.COMPLETED
        assert handle.position == 5
        assert not handle.is_active

    def test_steps_arrive_in_trace_order(self):
        received = []

        async def scenario():
            trace = _make_trace(3)
            handle = _fast_controller().play(trace, on_step=lambda step, i: received.append(step))
            await handle.wait()
            return trace

        trace = asyncio.run(scenario())
        assert tuple(received) == trace.steps

    def test_async_sinks_are_awaited(self):
        seen, done = [], []

        async def on_step(step, index):
            await asyncio.sleep(0)
            seen.append(index)

        async def on_complete(result):
            done.append(result)

        async def scenario():
            handle = _fast_controller().play(_make_trace(3), on_step, on_complete)
            await handle.wait()

        asyncio.run(scenario())
        assert seen == [0, 1, 2]
        assert done == ["done"]

    def test_visual_state_tracks_steps(self):
        trace = get_engine(constants.FAMILY_SORTING).run(
            "bubble", make_array_snapshot([3, 1, 2])
        )

        async def scenario():
            handle = _fast_controller().play(trace, on_step=lambda step, i: None)
            await handle.wait()
            return handle

        handle = asyncio.run(scenario())
        assert handle.visual_state == project_prefix(trace.steps, len(trace.steps) - 1)

    def test_empty_trace_completes(self):
        done = []

        async def scenario():
            handle = _fast_controller().play(
                _make_trace(0), on_step=lambda step, i: None, on_complete=done.append
            )
            await handle.wait()
            return handle

        assert asyncio.run(scenario()).state == PlaybackState.COMPLETED
        assert done == ["done"]


class TestCancellation:
    def test_cancel_from_step_sink(self):
        seen, done = [], []
        holder = {}

        def on_step(step, index):
            seen.append(index)
            if index == 1:
                holder["handle"].cancel()

        async def scenario():
            holder["handle"] = _fast_controller().play(_make_trace(), on_step, done.append)
            await holder["handle"].wait()

        asyncio.run(scenario())
        assert seen == [0, 1]
        assert done == []
        assert holder["handle"].state == PlaybackState.CANCELLED

    def test_cancel_interrupts_pending_delay(self):
        seen, done = [], []

        async def scenario():
            controller = PlaybackController(PlaybackConfig(delay_ms=200))
            handle = controller.play(
                _make_trace(), on_step=lambda step, i: seen.append(i), on_complete=done.append
            )
            await asyncio.sleep(0.05)
            assert handle.cancel()
            await handle.wait()
            await asyncio.sleep(0.3)
            return handle

        handle = asyncio.run(scenario())
        assert seen == [0]
        assert done == []
        assert handle.state == PlaybackState.CANCELLED

    def test_cancel_while_paused(self):
        seen = []

        async def scenario():
            handle = _fast_controller().play(_make_trace(), on_step=lambda step, i: seen.append(i))
            handle.pause()
            await asyncio.sleep(0.01)
            handle.cancel()
            await handle.wait()
            return handle

        assert asyncio.run(scenario()).state == PlaybackState.CANCELLED
        assert seen == []

    def test_new_play_replaces_active_run(self):
        first_seen, second_seen = [], []

        async def scenario():
            controller = PlaybackController(PlaybackConfig(delay_ms=200))
            first = controller.play(_make_trace(), on_step=lambda step, i: first_seen.append(i))
            second = controller.play(
                _make_trace(2), on_step=lambda step, i: second_seen.append(i), delay_ms=0
            )
            await second.wait()
            await first.wait()
            return controller, first, second

        controller, first, second = asyncio.run(scenario())
        assert first.state == PlaybackState.CANCELLED
        assert second.state == PlaybackState.COMPLETED
        assert first_seen == []
        assert second_seen == [0, 1]
        assert controller.current is second


class TestPauseResume:
    def test_pause_before_first_step(self):
        seen = []

        async def scenario():
            handle = _fast_controller().play(_make_trace(3), on_step=lambda step, i: seen.append(i))
            assert handle.pause()
            await asyncio.sleep(0.02)
            assert seen == []
            assert handle.state == PlaybackState.PAUSED
            assert handle.resume()
            await handle.wait()
            return handle

        assert asyncio.run(scenario()).state == PlaybackState.COMPLETED
        assert seen == [0, 1, 2]

    def test_pause_from_step_sink(self):
        seen = []
        holder = {}

        def on_step(step, index):
            seen.append(index)
            if index == 1:
                holder["handle"].pause()

        async def scenario():
            handle = _fast_controller().play(_make_trace(), on_step)
            holder["handle"] = handle
            await asyncio.sleep(0.02)
            assert seen == [0, 1]
            assert handle.position == 2
            assert handle.state == PlaybackState.PAUSED
            handle.resume()
            await handle.wait()
            return handle

        assert asyncio.run(scenario()).state == PlaybackState.COMPLETED
        assert seen == [0, 1, 2, 3, 4]

    def test_illegal_transitions_are_ignored(self):
        async def scenario():
            handle = _fast_controller().play(_make_trace(2), on_step=lambda step, i: None)
            assert handle.resume() is False
            assert handle.pause() is True
            assert handle.pause() is False
            assert handle.resume() is True
            await handle.wait()
            return handle

        handle = asyncio.run(scenario())
        assert handle.state == PlaybackState.COMPLETED
        assert handle.pause() is False
        assert handle.resume() is False
        assert handle.cancel() is False


class TestSinkFailures:
    def test_step_sink_error_surfaces_from_wait(self):
        holder = {}

        def on_step(step, index):
            if index == 1:
                raise ValueError("render failed")

        async def scenario():
            holder["handle"] = _fast_controller().play(_make_trace(), on_step)
            await holder["handle"].wait()

        with pytest.raises(ValueError, match="render failed"):
            asyncio.run(scenario())
        assert holder["handle"].state == PlaybackState.CANCELLED
        assert holder["handle"].position == 2

    def test_complete_sink_error_keeps_completed_state(self):
        holder = {}

        def on_complete(result):
            raise RuntimeError("boom")

        async def scenario():
            holder["handle"] = _fast_controller().play(
                _make_trace(1), on_step=lambda step, i: None, on_complete=on_complete
            )
            await holder["handle"].wait()

        with pytest.raises(RuntimeError, match="boom"):
            asyncio.run(scenario())
        assert holder["handle"].state == PlaybackState.COMPLETED

    def test_unawaited_failure_is_not_reported_as_unretrieved(self):
        reported = []

        def on_step(step, index):
            raise ValueError("render failed")

        async def scenario():
            loop = asyncio.get_running_loop()
            loop.set_exception_handler(lambda loop, context: reported.append(context))
            controller = _fast_controller()
            controller.play(_make_trace(), on_step)
            await asyncio.sleep(0.02)
            assert controller.current.state == PlaybackState.CANCELLED
            del controller
            gc.collect()

        asyncio.run(scenario())
        messages = [context.get("message", "") for context in reported]
        assert not any("never retrieved" in message for message in messages)


class TestTimingConfig:
    def test_play_needs_running_loop(self):
        with pytest.raises(RuntimeError):
            _fast_controller().play(_make_trace(), on_step=lambda step, i: None)

    @pytest.mark.parametrize("speed,delay", [(0, 500.0), (400, 100.0), (500, 0.0), (900, 0.0)])
    def test_from_speed(self, speed, delay):
        assert PlaybackConfig.from_speed(speed).delay_ms == delay

    def test_controller_default_delay(self):
        assert PlaybackController().config.delay_ms == constants.DEFAULT_DELAY_MS

    def test_set_delay(self):
        async def scenario():
            handle = _fast_controller().play(_make_trace(2), on_step=lambda step, i: None)
            handle.set_delay(50)
            assert handle.delay_ms == 50.0
            with pytest.raises(ValueError):
                handle.set_delay(-1)
            await handle.wait()

        asyncio.run(scenario())

    def test_negative_delay_rejected_at_play(self):
        async def scenario():
            _fast_controller().play(_make_trace(), on_step=lambda step, i: None, delay_ms=-5)

        with pytest.raises(ValueError):
            asyncio.run(scenario())

    def test_delay_change_applies_from_next_wait(self):
        arrivals = []

        async def scenario():
            controller = PlaybackController(PlaybackConfig(delay_ms=300))
            handle = controller.play(
                _make_trace(3), on_step=lambda step, i: arrivals.append(time.perf_counter())
            )
            await asyncio.sleep(0.05)
            handle.set_delay(0)
            await handle.wait()

        asyncio.run(scenario())
        assert len(arrivals) == 3
        assert arrivals[1] - arrivals[0] >= 0.25
        assert arrivals[2] - arrivals[1] < 0.1
