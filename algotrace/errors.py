"""Error taxonomy for engine runs."""

from __future__ import annotations


class AlgotraceError(Exception):
    """Base class for every error raised by the engine core."""


class InputError(AlgotraceError, ValueError):
    """Invalid or missing run input. Raised before any trace is produced."""


class ContainerCapacityError(AlgotraceError):
    """A fixed-capacity container refused an operation.

    Raised inside the container models and caught at the engine boundary,
    where it becomes part of the run's result instead of propagating.
    """

    label = "Capacity error"

    def __init__(self, container: str, message: str):
        super().__init__(f"{container.capitalize()} {self.label}: {message}")
        self.container = container
        self.detail = message


class Overflow(ContainerCapacityError):
    label = "Overflow"


class Underflow(ContainerCapacityError):
    label = "Underflow"
