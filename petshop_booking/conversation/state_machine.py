"""
Finite state machine for the multi-step booking wizard.

Defines the five wizard steps and explicit transitions with triggers.
Forward transitions are guarded by validity predicates over the current
``Selection``, so the wizard can never advance with missing data.

Usage:
    sm = BookingStateMachine()
    sm.transition(TransitionTrigger.CONTACT_INFO_COMPLETE, selection)
    assert sm.current_state == BookingState.CHOOSING_SERVICE_AND_OPTIONS
"""

from enum import Enum
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Callable

from petshop_booking.conversation.selection import (
    Selection,
    has_contact_info,
    has_service_options,
    has_time_slot,
    is_complete,
)
from petshop_booking.logging_context import get_session_logger

logger = get_session_logger(__name__)


class BookingState(str, Enum):
    """All steps of the booking wizard."""
    COLLECTING_CONTACT_INFO = "collecting_contact_info"
    CHOOSING_SERVICE_AND_OPTIONS = "choosing_service_and_options"
    CHOOSING_DATE_TIME = "choosing_date_time"
    REVIEW_AND_SUBMIT = "review_and_submit"
    SUBMITTED = "submitted"


class TransitionTrigger(str, Enum):
    """Events that cause state transitions."""
    CONTACT_INFO_COMPLETE = "contact_info_complete"
    SERVICE_OPTIONS_COMPLETE = "service_options_complete"
    TIME_SLOT_CHOSEN = "time_slot_chosen"
    SUBMIT_SUCCEEDED = "submit_succeeded"
    SUBMIT_FAILED = "submit_failed"
    DISPLAY_DELAY_ELAPSED = "display_delay_elapsed"
    BACK = "back"


@dataclass
class Transition:
    """A single valid state transition."""
    from_state: BookingState
    to_state: BookingState
    trigger: TransitionTrigger
    guard: Optional[Callable[[Selection], bool]] = None


@dataclass
class StateEntry:
    """Recorded history entry for a state visit."""
    state: BookingState
    entered_at: datetime
    trigger: Optional[TransitionTrigger] = None


class InvalidTransitionError(Exception):
    """Raised when a transition is not valid from the current state."""


class BookingStateMachine:
    """
    Deterministic state machine controlling the booking wizard.

    Every transition must be explicitly defined. A trigger whose guard
    rejects the current selection is refused with a clear error listing
    the triggers that are allowed.
    """

    TRANSITIONS: list[Transition] = [
        # --- Forward ---
        Transition(BookingState.COLLECTING_CONTACT_INFO,
                   BookingState.CHOOSING_SERVICE_AND_OPTIONS,
                   TransitionTrigger.CONTACT_INFO_COMPLETE, has_contact_info),
        Transition(BookingState.CHOOSING_SERVICE_AND_OPTIONS,
                   BookingState.CHOOSING_DATE_TIME,
                   TransitionTrigger.SERVICE_OPTIONS_COMPLETE, has_service_options),
        Transition(BookingState.CHOOSING_DATE_TIME, BookingState.REVIEW_AND_SUBMIT,
                   TransitionTrigger.TIME_SLOT_CHOSEN, has_time_slot),

        # --- Submission result ---
        Transition(BookingState.REVIEW_AND_SUBMIT, BookingState.SUBMITTED,
                   TransitionTrigger.SUBMIT_SUCCEEDED, is_complete),
        Transition(BookingState.REVIEW_AND_SUBMIT, BookingState.REVIEW_AND_SUBMIT,
                   TransitionTrigger.SUBMIT_FAILED),

        # --- Confirmation shown, start over ---
        Transition(BookingState.SUBMITTED, BookingState.COLLECTING_CONTACT_INFO,
                   TransitionTrigger.DISPLAY_DELAY_ELAPSED),

        # --- Back navigation ---
        Transition(BookingState.CHOOSING_SERVICE_AND_OPTIONS,
                   BookingState.COLLECTING_CONTACT_INFO, TransitionTrigger.BACK),
        Transition(BookingState.CHOOSING_DATE_TIME,
                   BookingState.CHOOSING_SERVICE_AND_OPTIONS, TransitionTrigger.BACK),
        Transition(BookingState.REVIEW_AND_SUBMIT, BookingState.CHOOSING_DATE_TIME,
                   TransitionTrigger.BACK),
    ]

    def __init__(self) -> None:
        self._current_state = BookingState.COLLECTING_CONTACT_INFO
        self._history: list[StateEntry] = [
            StateEntry(state=self._current_state, entered_at=datetime.now(timezone.utc))
        ]
        self._failed_submissions: int = 0

    @property
    def current_state(self) -> BookingState:
        return self._current_state

    @property
    def failed_submissions(self) -> int:
        return self._failed_submissions

    def _find(self, trigger: TransitionTrigger, selection: Selection) -> Optional[Transition]:
        for t in self.TRANSITIONS:
            if t.from_state == self._current_state and t.trigger == trigger:
                if t.guard is not None and not t.guard(selection):
                    continue
                return t
        return None

    def can_transition(self, trigger: TransitionTrigger, selection: Selection) -> bool:
        """Check whether ``trigger`` would be accepted for ``selection``."""
        return self._find(trigger, selection) is not None

    def transition(self, trigger: TransitionTrigger, selection: Selection) -> BookingState:
        """
        Execute a state transition.

        Args:
            trigger: The event triggering the transition.
            selection: The current choices, checked by the transition guard.

        Returns:
            The new booking state.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        t = self._find(trigger, selection)
        if t is None:
            valid = [v.value for v in self.get_valid_triggers()]
            raise InvalidTransitionError(
                f"No valid transition from '{self._current_state.value}' "
                f"with trigger '{trigger.value}'. Valid triggers: {valid}"
            )

        old_state = self._current_state
        self._current_state = t.to_state
        self._history.append(StateEntry(
            state=self._current_state,
            entered_at=datetime.now(timezone.utc),
            trigger=trigger,
        ))

        if trigger == TransitionTrigger.SUBMIT_FAILED:
            self._failed_submissions += 1

        logger.debug(
            "State transition: %s -> %s (trigger: %s)",
            old_state.value, self._current_state.value, trigger.value,
        )
        return self._current_state

    def get_valid_triggers(self) -> list[TransitionTrigger]:
        """Return all triggers defined from the current state, ignoring guards."""
        return [t.trigger for t in self.TRANSITIONS if t.from_state == self._current_state]

    def get_history(self) -> list[StateEntry]:
        """Return the full state transition history."""
        return list(self._history)

    def get_state_trace(self) -> list[str]:
        """Return ordered list of state names visited."""
        return [entry.state.value for entry in self._history]

    def is_submitted(self) -> bool:
        return self._current_state == BookingState.SUBMITTED
