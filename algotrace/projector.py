"""State projector — pure (VisualState, Step) -> VisualState mapping."""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from .steps import Role, Step, StepKind

SINGLE_HOLDER_ROLES: frozenset[Role] = frozenset(
    {Role.PIVOT, Role.MIN, Role.FRONT, Role.REAR, Role.TOP, Role.HEAD}
)

_TRANSIENT_KINDS: dict[StepKind, Role] = {
    StepKind.COMPARE: Role.COMPARING,
    StepKind.SWAP: Role.SWAPPING,
    StepKind.MUTATE_VALUE: Role.SWAPPING,
    StepKind.INSERT: Role.SWAPPING,
    StepKind.MOVE: Role.SWAPPING,
    StepKind.RELINK: Role.SWAPPING,
}

_PERSISTENT_KINDS: dict[StepKind, Role] = {
    StepKind.VISIT: Role.VISITED,
    StepKind.FOUND: Role.FOUND,
    StepKind.CALL: Role.ACTIVE,
    StepKind.BASE_CASE: Role.BASE_CASE,
}


@dataclass(frozen=True)
class VisualState:
    """Per-identity roles after some prefix of a trace.

    ``base`` holds roles that persist until replaced; ``overlay`` holds the
    transient highlight of the latest step only. Identities absent from both
    are ``normal``, and ``normal`` is never stored.
    """

    base: dict[str, Role] = field(default_factory=dict)
    overlay: dict[str, Role] = field(default_factory=dict)

    @property
    def roles(self) -> dict[str, Role]:
        return {**self.base, **self.overlay}

    def role_of(self, identity: str) -> Role:
        return self.roles.get(identity, Role.NORMAL)


def _assign(roles: dict[str, Role], identity: str, role: Role):
    if role == Role.NORMAL:
        roles.pop(identity, None)
    else:
        roles[identity] = role


def _drop_role(roles: dict[str, Role], role: Role) -> dict[str, Role]:
    return {k: v for k, v in roles.items() if v != role}


def project(state: VisualState, step: Step) -> VisualState:
    """Return the visual state after *step*; *state* is not modified."""
    base = dict(state.base)
    overlay: dict[str, Role] = {}
    kind = step.kind

    if kind in _TRANSIENT_KINDS:
        for identity in step.subjects:
            overlay[identity] = _TRANSIENT_KINDS[kind]
    elif kind in _PERSISTENT_KINDS:
        for identity in step.subjects:
            base[identity] = _PERSISTENT_KINDS[kind]
    elif kind == StepKind.MARK_RANGE:
        base = _drop_role(base, Role.RANGE)
        for identity in step.subjects:
            if identity not in base:
                base[identity] = Role.RANGE
    elif kind == StepKind.NOT_FOUND:
        base = _drop_role(base, Role.RANGE)
    elif kind == StepKind.SET_ROLE and step.role is not None:
        if step.role in SINGLE_HOLDER_ROLES:
            base = _drop_role(base, step.role)
        for identity in step.subjects:
            _assign(base, identity, step.role)
    elif kind == StepKind.REMOVE:
        for identity in step.subjects:
            base.pop(identity, None)
    elif kind == StepKind.RETURN:
        for identity in step.subjects:
            if base.get(identity) != Role.BASE_CASE:
                base[identity] = Role.COMPLETED
    elif kind == StepKind.FINAL_RESULT and step.role is not None:
        for identity in step.subjects:
            _assign(base, identity, step.role)

    return VisualState(base=base, overlay=overlay)


def project_prefix(steps: Sequence[Step], index: int) -> VisualState:
    """Visual state after ``steps[0..index]`` in one batch (scrubbing).

    A negative *index* gives the initial state.
    """
    if index < 0:
        return VisualState()
    return functools.reduce(project, steps[: index + 1], VisualState())


def iter_states(steps: Sequence[Step]) -> Iterator[VisualState]:
    """Successive visual states, one per step, computed incrementally."""
    state = VisualState()
    for step in steps:
        state = project(state, step)
        yield state
