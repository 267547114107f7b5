"""Tests for the booking wizard state machine."""

import pytest

from petshop_booking.conversation.selection import (
    EMPTY_SELECTION,
    with_contact,
    with_date,
    with_service,
    with_time,
    with_weight,
)
from petshop_booking.conversation.state_machine import (
    BookingState,
    InvalidTransitionError,
    TransitionTrigger,
)
from petshop_booking.schemas.catalog_schema import PetWeight, ServiceType
from tests.conftest import BOOKING_DAY

CONTACT = with_contact(EMPTY_SELECTION, "Thor", "Ana Souza", "(11) 98765-4321")
WITH_SERVICE = with_weight(with_service(CONTACT, ServiceType.BATH), PetWeight.KG_10)
COMPLETE = with_time(with_date(WITH_SERVICE, BOOKING_DAY), 10)


def to_review(sm):
    sm.transition(TransitionTrigger.CONTACT_INFO_COMPLETE, COMPLETE)
    sm.transition(TransitionTrigger.SERVICE_OPTIONS_COMPLETE, COMPLETE)
    sm.transition(TransitionTrigger.TIME_SLOT_CHOSEN, COMPLETE)


class TestInitialState:
    def test_starts_collecting_contact_info(self, state_machine):
        assert state_machine.current_state == BookingState.COLLECTING_CONTACT_INFO

    def test_initial_history_has_one_entry(self, state_machine):
        assert len(state_machine.get_history()) == 1

    def test_not_submitted_at_start(self, state_machine):
        assert not state_machine.is_submitted()
        assert state_machine.failed_submissions == 0


class TestGuards:
    def test_contact_info_required(self, state_machine):
        assert not state_machine.can_transition(
            TransitionTrigger.CONTACT_INFO_COMPLETE, EMPTY_SELECTION
        )
        with pytest.raises(InvalidTransitionError):
            state_machine.transition(TransitionTrigger.CONTACT_INFO_COMPLETE, EMPTY_SELECTION)
        assert state_machine.current_state == BookingState.COLLECTING_CONTACT_INFO

    def test_weight_required_for_grooming(self, state_machine):
        state_machine.transition(TransitionTrigger.CONTACT_INFO_COMPLETE, CONTACT)
        no_weight = with_service(CONTACT, ServiceType.BATH)
        assert not state_machine.can_transition(
            TransitionTrigger.SERVICE_OPTIONS_COMPLETE, no_weight
        )

    def test_visit_advances_without_weight(self, state_machine):
        state_machine.transition(TransitionTrigger.CONTACT_INFO_COMPLETE, CONTACT)
        visit = with_service(CONTACT, ServiceType.VISIT_DAYCARE)
        new = state_machine.transition(TransitionTrigger.SERVICE_OPTIONS_COMPLETE, visit)
        assert new == BookingState.CHOOSING_DATE_TIME

    def test_time_slot_required(self, state_machine):
        state_machine.transition(TransitionTrigger.CONTACT_INFO_COMPLETE, WITH_SERVICE)
        state_machine.transition(TransitionTrigger.SERVICE_OPTIONS_COMPLETE, WITH_SERVICE)
        assert not state_machine.can_transition(
            TransitionTrigger.TIME_SLOT_CHOSEN, with_date(WITH_SERVICE, BOOKING_DAY)
        )

    def test_invalid_trigger_lists_valid_ones(self, state_machine):
        with pytest.raises(InvalidTransitionError, match="contact_info_complete"):
            state_machine.transition(TransitionTrigger.SUBMIT_SUCCEEDED, COMPLETE)


class TestHappyPath:
    def test_forward_to_review(self, state_machine):
        to_review(state_machine)
        assert state_machine.current_state == BookingState.REVIEW_AND_SUBMIT

    def test_submit_success_then_reset(self, state_machine):
        to_review(state_machine)
        state_machine.transition(TransitionTrigger.SUBMIT_SUCCEEDED, COMPLETE)
        assert state_machine.is_submitted()
        new = state_machine.transition(TransitionTrigger.DISPLAY_DELAY_ELAPSED, EMPTY_SELECTION)
        assert new == BookingState.COLLECTING_CONTACT_INFO

    def test_state_trace(self, state_machine):
        to_review(state_machine)
        assert state_machine.get_state_trace() == [
            "collecting_contact_info",
            "choosing_service_and_options",
            "choosing_date_time",
            "review_and_submit",
        ]


class TestSubmissionFailure:
    def test_failure_returns_to_review(self, state_machine):
        to_review(state_machine)
        new = state_machine.transition(TransitionTrigger.SUBMIT_FAILED, COMPLETE)
        assert new == BookingState.REVIEW_AND_SUBMIT
        assert state_machine.failed_submissions == 1

    def test_cannot_succeed_with_incomplete_selection(self, state_machine):
        to_review(state_machine)
        assert not state_machine.can_transition(
            TransitionTrigger.SUBMIT_SUCCEEDED, with_time(COMPLETE, None)
        )


class TestBackNavigation:
    def test_back_from_review(self, state_machine):
        to_review(state_machine)
        assert state_machine.transition(TransitionTrigger.BACK, COMPLETE) == (
            BookingState.CHOOSING_DATE_TIME
        )

    def test_no_back_from_first_step(self, state_machine):
        assert not state_machine.can_transition(TransitionTrigger.BACK, COMPLETE)

    def test_no_back_once_submitted(self, state_machine):
        to_review(state_machine)
        state_machine.transition(TransitionTrigger.SUBMIT_SUCCEEDED, COMPLETE)
        with pytest.raises(InvalidTransitionError):
            state_machine.transition(TransitionTrigger.BACK, COMPLETE)
