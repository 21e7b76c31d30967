"""Run and playback configuration types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass, field

from . import constants


@dataclass(frozen=True)
class RunConfig:
    """Groups engine run configuration."""

    verbose: bool = False


@dataclass(frozen=True)
class PlaybackConfig:
    """Groups playback timing configuration."""

    delay_ms: float = constants.DEFAULT_DELAY_MS
    max_delay_ms: float = constants.MAX_DELAY_MS

    @classmethod
    def from_speed(
        cls, speed: float, max_delay_ms: float = constants.MAX_DELAY_MS
    ) -> PlaybackConfig:
        """Map a speed slider value to an inter-step delay (faster = shorter)."""
        return cls(delay_ms=max(0.0, max_delay_ms - speed), max_delay_ms=max_delay_ms)


@dataclass
class RunStats:
    """Timing and size statistics for one engine run."""

    family: str = ""
    algorithm: str = ""
    input_size: int = 0
    engine_time: float = 0.0
    step_count: int = 0
    kind_counts: dict[str, int] = field(default_factory=dict)

    def report(self) -> str:
        lines = [
            "═══ Run Statistics ═══",
            f"  Algorithm: {self.family}/{self.algorithm} (input size {self.input_size})",
            f"  Engine time: {self.engine_time * 1000:.1f}ms, {self.step_count} steps",
            "",
            f"  {'Step kind':<20} {'Count':>8}",
            f"  {'─' * 20} {'─' * 8}",
        ]
        for kind, count in sorted(self.kind_counts.items()):
            lines.append(f"  {kind:<20} {count:>8}")
        return "\n".join(lines)
