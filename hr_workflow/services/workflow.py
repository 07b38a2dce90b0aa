"""Workflow state machine - status transitions for timesheets and time off.

Pure value objects, no I/O. Services look up the transition for an action,
ask the access policy whether the principal may fire it, and then persist it
as a single write guarded on ``transition.from_state``.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from hr_workflow.errors import InvalidActionError, InvalidStateError
from hr_workflow.models.common import ReviewAction
from hr_workflow.models.time_off import TimeOffStatus
from hr_workflow.models.timesheet import TimesheetStatus


class Actor(str, Enum):
    """Who may fire a transition."""

    OWNER = "owner"
    MANAGER = "manager"


@dataclass(frozen=True)
class Transition:
    """
    A single allowed move between states.

    ``from_state`` is None for transitions that create the record.
    ``verb`` is used in error messages ("Only draft timesheets can be <verb>").
    """

    action: str
    from_state: Optional[str]
    to_state: str
    actor: Actor
    verb: str


@dataclass(frozen=True)
class Workflow:
    """A deterministic state machine for one record kind."""

    noun: str
    states: tuple[str, ...]
    initial_state: str
    terminal_states: tuple[str, ...]
    transitions: tuple[Transition, ...]

    def __post_init__(self):
        if self.initial_state not in self.states:
            raise ValueError(f"Initial state {self.initial_state!r} is not a {self.noun} state")
        for transition in self.transitions:
            for state in (transition.from_state, transition.to_state):
                if state is not None and state not in self.states:
                    raise ValueError(f"Transition {transition.action!r} references unknown state {state!r}")
            if transition.from_state in self.terminal_states:
                raise ValueError(f"Terminal state {transition.from_state!r} cannot have outgoing transitions")

    def is_terminal(self, state: str) -> bool:
        return state in self.terminal_states

    def _candidates(self, action: str) -> list[Transition]:
        candidates = [t for t in self.transitions if t.action == action]
        if not candidates:
            raise KeyError(f"{self.noun} workflow has no {action!r} transition")
        return candidates

    def actor_for(self, action: str) -> Actor:
        """Role required to fire ``action``, before any state is known."""
        return self._candidates(action)[0].actor

    def source_states(self, action: str) -> list[Optional[str]]:
        return [t.from_state for t in self._candidates(action)]

    def state_message(self, action: str) -> str:
        """
        Error message for firing ``action`` from a state that does not allow it.

        Example:
            >>> TIMESHEET_WORKFLOW.state_message("submit")
            'Only draft timesheets can be submitted'
        """
        candidates = self._candidates(action)
        sources = [t.from_state.lower() for t in candidates if t.from_state is not None]
        return f"Only {' or '.join(dict.fromkeys(sources))} {self.noun}s can be {candidates[0].verb}"

    def transition(self, action: str, current: Optional[str]) -> Transition:
        """
        Resolve the transition for ``action`` from ``current``.

        Args:
            action: Transition name (save, submit, approve, reject)
            current: Current status, or None if the record does not exist yet

        Returns:
            The matching transition

        Raises:
            InvalidStateError: If ``action`` is not allowed from ``current``
        """
        for candidate in self._candidates(action):
            if candidate.from_state == current:
                return candidate
        raise InvalidStateError(self.state_message(action), current_status=current)

    def review(self, current: str, action: str) -> Transition:
        """
        Resolve a manager review decision.

        The state is checked before the action so that reviewing a record that
        is not awaiting review fails the same way for any action value.

        Raises:
            InvalidStateError: If the record is not awaiting review
            InvalidActionError: If ``action`` is not approve or reject
        """
        if current not in self.source_states(ReviewAction.APPROVE.value):
            raise InvalidStateError(
                self.state_message(ReviewAction.APPROVE.value),
                current_status=current,
            )
        try:
            decision = ReviewAction(action)
        except ValueError:
            raise InvalidActionError(action) from None
        return self.transition(decision.value, current)


def _review_transitions(source: str, approved: str, rejected: str) -> tuple[Transition, ...]:
    return (
        Transition(ReviewAction.APPROVE.value, source, approved, Actor.MANAGER, "reviewed"),
        Transition(ReviewAction.REJECT.value, source, rejected, Actor.MANAGER, "reviewed"),
    )


TIMESHEET_WORKFLOW = Workflow(
    noun="timesheet",
    states=tuple(status.value for status in TimesheetStatus),
    initial_state=TimesheetStatus.DRAFT.value,
    terminal_states=(TimesheetStatus.APPROVED.value, TimesheetStatus.REJECTED.value),
    transitions=(
        Transition("save", None, TimesheetStatus.DRAFT.value, Actor.OWNER, "updated"),
        Transition("save", TimesheetStatus.DRAFT.value, TimesheetStatus.DRAFT.value, Actor.OWNER, "updated"),
        Transition("submit", TimesheetStatus.DRAFT.value, TimesheetStatus.SUBMITTED.value, Actor.OWNER, "submitted"),
        *_review_transitions(
            TimesheetStatus.SUBMITTED.value,
            TimesheetStatus.APPROVED.value,
            TimesheetStatus.REJECTED.value,
        ),
    ),
)

TIME_OFF_WORKFLOW = Workflow(
    noun="time off request",
    states=tuple(status.value for status in TimeOffStatus),
    initial_state=TimeOffStatus.PENDING.value,
    terminal_states=(TimeOffStatus.APPROVED.value, TimeOffStatus.REJECTED.value),
    transitions=(
        Transition("create", None, TimeOffStatus.PENDING.value, Actor.OWNER, "created"),
        *_review_transitions(
            TimeOffStatus.PENDING.value,
            TimeOffStatus.APPROVED.value,
            TimeOffStatus.REJECTED.value,
        ),
    ),
)
