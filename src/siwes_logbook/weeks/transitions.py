"""Week approval state machine.

Each (actor, action) pair maps the states it may start from to the state it
leads to. Anything not listed is an illegal move.
"""
from __future__ import annotations

from typing import Optional

from ..core.enums import Role, WeekAction, WeekStatus
from ..core.exceptions import IllegalTransitionError

_TRANSITIONS: dict[tuple[Role, WeekAction], dict[Optional[WeekStatus], WeekStatus]] = {
    (Role.STUDENT, WeekAction.SAVE_DRAFT): {
        None: WeekStatus.DRAFT,
        WeekStatus.DRAFT: WeekStatus.DRAFT,
        WeekStatus.REJECTED: WeekStatus.REJECTED,
    },
    (Role.STUDENT, WeekAction.SUBMIT): {
        None: WeekStatus.SUBMITTED,
        WeekStatus.DRAFT: WeekStatus.SUBMITTED,
        WeekStatus.SUBMITTED: WeekStatus.SUBMITTED,
        WeekStatus.REJECTED: WeekStatus.SUBMITTED,
    },
    (Role.INDUSTRY_SUPERVISOR, WeekAction.FORWARD): {
        WeekStatus.SUBMITTED: WeekStatus.FORWARDED,
    },
    (Role.INDUSTRY_SUPERVISOR, WeekAction.REJECT): {
        WeekStatus.SUBMITTED: WeekStatus.REJECTED,
    },
    (Role.SCHOOL_SUPERVISOR, WeekAction.APPROVE): {
        WeekStatus.FORWARDED: WeekStatus.APPROVED,
    },
    (Role.SCHOOL_SUPERVISOR, WeekAction.REJECT): {
        WeekStatus.SUBMITTED: WeekStatus.REJECTED,
        WeekStatus.FORWARDED: WeekStatus.REJECTED,
    },
}


def allowed_sources(actor: Role, action: WeekAction, *, two_tier: bool = True) -> set[Optional[WeekStatus]]:
    sources = set(_TRANSITIONS.get((actor, action), {}))
    if actor is Role.SCHOOL_SUPERVISOR and action is WeekAction.APPROVE and not two_tier:
        sources.add(WeekStatus.SUBMITTED)
    return sources


def next_status(
    current: Optional[WeekStatus],
    action: WeekAction,
    actor: Role,
    *,
    two_tier: bool = True,
) -> WeekStatus:
    """Target state for ``action`` taken by ``actor`` on a week in ``current``.

    ``current`` is None for a week that does not exist yet. Raises
    IllegalTransitionError for moves outside the table.
    """
    if current is WeekStatus.APPROVED:
        if actor is Role.STUDENT:
            raise IllegalTransitionError("Cannot edit an approved week")
        raise IllegalTransitionError("Week is already approved")

    table = _TRANSITIONS.get((actor, action))
    if table is None:
        raise IllegalTransitionError(f"{actor.value} cannot {action.value} a week")

    if current in table:
        return table[current]

    if current is WeekStatus.SUBMITTED and current in allowed_sources(actor, action, two_tier=two_tier):
        return WeekStatus.APPROVED

    state = current.value if current is not None else "new"
    raise IllegalTransitionError(f"Cannot {action.value} a week that is {state}")
