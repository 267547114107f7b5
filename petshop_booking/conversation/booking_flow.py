"""
Booking session: drives the availability and pricing engine from the
wizard's user actions and hands finished bookings to storage and
notification sinks.

The session owns no business rules. Every user action is applied through
the pure ``Selection`` transitions, and prices and bookable hours are
recomputed from the current selection whenever they are asked for.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Callable, Iterable
from datetime import date
from typing import Optional

from petshop_booking.config import AppConfig, settings
from petshop_booking.conversation import selection as sel
from petshop_booking.conversation.selection import EMPTY_SELECTION, Selection
from petshop_booking.conversation.state_machine import (
    BookingState,
    BookingStateMachine,
    TransitionTrigger,
)
from petshop_booking.logging_context import get_session_logger, set_session_id
from petshop_booking.schemas.booking_schema import NotificationRecord
from petshop_booking.schemas.catalog_schema import PetWeight, ServiceType
from petshop_booking.tools.addons import eligible_addons
from petshop_booking.tools.availability import get_bookable_hours
from petshop_booking.tools.booking import (
    AppointmentStore,
    build_appointment,
    build_notification_record,
    new_booking_id,
)
from petshop_booking.tools.services import ADDON_CATALOG

logger = get_session_logger(__name__)

NotificationSink = Callable[[NotificationRecord], None]

_FORWARD_TRIGGERS: dict[BookingState, TransitionTrigger] = {
    BookingState.COLLECTING_CONTACT_INFO: TransitionTrigger.CONTACT_INFO_COMPLETE,
    BookingState.CHOOSING_SERVICE_AND_OPTIONS: TransitionTrigger.SERVICE_OPTIONS_COMPLETE,
    BookingState.CHOOSING_DATE_TIME: TransitionTrigger.TIME_SLOT_CHOSEN,
}


class BookingSession:
    """One customer's pass through the booking wizard."""

    def __init__(
        self,
        store: AppointmentStore,
        notifiers: Iterable[NotificationSink] = (),
        clock: Callable[[], float] = time.monotonic,
        today: Callable[[], date] = date.today,
        config: Optional[AppConfig] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self._store = store
        self._notifiers = list(notifiers)
        self._clock = clock
        self._today = today
        self._config = config or settings
        self.session_id = session_id or f"SES-{uuid.uuid4().hex[:8]}"
        self.selection: Selection = EMPTY_SELECTION
        self.state_machine = BookingStateMachine()
        self.last_record: Optional[NotificationRecord] = None
        self._submitting = False
        self._submitted_at: Optional[float] = None
        self._pending_booking: Optional[tuple[Selection, str]] = None
        set_session_id(self.session_id)

    @property
    def state(self) -> BookingState:
        return self.state_machine.current_state

    # ------------------------------------------------------------------ #
    # User actions
    # ------------------------------------------------------------------ #

    def update_contact(
        self,
        pet_name: Optional[str] = None,
        owner_name: Optional[str] = None,
        whatsapp: Optional[str] = None,
    ) -> Selection:
        self.selection = sel.with_contact(self.selection, pet_name, owner_name, whatsapp)
        return self.selection

    def choose_service(self, service: ServiceType) -> Selection:
        self.selection = sel.with_service(self.selection, service)
        return self.selection

    def choose_weight(self, weight: PetWeight) -> Selection:
        self.selection = sel.with_weight(self.selection, weight)
        return self.selection

    def toggle_addon(self, addon_id: str) -> Selection:
        self.selection = sel.with_addon_toggled(self.selection, addon_id)
        return self.selection

    def choose_date(self, day: date) -> Selection:
        self.selection = sel.with_date(self.selection, day)
        return self.selection

    def choose_time(self, start_hour: int) -> bool:
        """Pick a start hour; refused unless it is currently bookable."""
        set_session_id(self.session_id)
        if start_hour not in self.bookable_hours():
            logger.info("Start hour %s is not bookable; keeping previous choice", start_hour)
            return False
        self.selection = sel.with_time(self.selection, start_hour)
        return True

    # ------------------------------------------------------------------ #
    # Derived values
    # ------------------------------------------------------------------ #

    def bookable_hours(self) -> list[int]:
        """Start hours open for the chosen service on the chosen date."""
        day = self.selection.booking_date
        if day is None or self.selection.service is None:
            return []
        appointments = self._store.list_appointments_from(day)
        return get_bookable_hours(
            self.selection.service, day, appointments, today=self._today(), config=self._config,
        )

    def eligible_addons(self) -> set[str]:
        return eligible_addons(ADDON_CATALOG, self.selection.service, self.selection.weight)

    def price(self) -> int:
        return sel.price_for(self.selection)

    # ------------------------------------------------------------------ #
    # Navigation
    # ------------------------------------------------------------------ #

    def advance(self) -> BookingState:
        """Move to the next step if the current one is complete."""
        set_session_id(self.session_id)
        trigger = _FORWARD_TRIGGERS.get(self.state)
        if trigger is not None and self.state_machine.can_transition(trigger, self.selection):
            return self.state_machine.transition(trigger, self.selection)
        return self.state

    def back(self) -> BookingState:
        set_session_id(self.session_id)
        if self.state_machine.can_transition(TransitionTrigger.BACK, self.selection):
            return self.state_machine.transition(TransitionTrigger.BACK, self.selection)
        return self.state

    # ------------------------------------------------------------------ #
    # Submission
    # ------------------------------------------------------------------ #

    def submit(self) -> bool:
        """Persist the booking, then send it to every notifier.

        Only one submission may be in flight per session. Any failure
        leaves the session on the review step with the selection intact.
        A booking whose notification fails is withdrawn from the store.
        """
        set_session_id(self.session_id)
        if self._submitting:
            logger.warning("Submission already in progress; ignoring duplicate request")
            return False
        if self.state != BookingState.REVIEW_AND_SUBMIT:
            logger.warning("Cannot submit from state '%s'", self.state.value)
            return False
        if not sel.is_complete(self.selection):
            logger.info("Selection incomplete; submission refused")
            return False

        self._submitting = True
        try:
            ok = self._deliver()
        finally:
            self._submitting = False

        if ok:
            self.state_machine.transition(TransitionTrigger.SUBMIT_SUCCEEDED, self.selection)
            self._submitted_at = self._clock()
        else:
            self.state_machine.transition(TransitionTrigger.SUBMIT_FAILED, self.selection)
        return ok

    def _deliver(self) -> bool:
        current = self.selection
        # Occupancy may have changed since the hour was picked.
        if current.start_hour not in self.bookable_hours():
            logger.warning(
                "Slot %s %02d:00 is no longer available",
                current.booking_date, current.start_hour,
            )
            return False

        appointment = build_appointment(
            current.service,
            current.booking_date,
            current.start_hour,
            current.pet_name,
            current.owner_name,
            current.whatsapp,
            booking_id=self._booking_id_for(current),
        )
        record = build_notification_record(
            appointment, current.weight, current.addons, sel.price_for(current),
        )

        try:
            stored = self._store.insert(appointment)
        except Exception:
            logger.exception("Appointment store failed for %s", appointment.id)
            return False
        if not stored:
            logger.error("Appointment store rejected booking %s", appointment.id)
            return False

        try:
            for notify in self._notifiers:
                notify(record)
        except Exception:
            logger.exception("Notification failed for %s; withdrawing it", appointment.id)
            self._store.remove(appointment.id)
            return False

        self._pending_booking = None
        self.last_record = record
        logger.info(
            "Booking %s submitted: %s on %s, price %s",
            appointment.id, record.service, record.start_time, record.price,
        )
        return True

    def _booking_id_for(self, current: Selection) -> str:
        """Retries of an unchanged selection reuse the same booking id."""
        if self._pending_booking is None or self._pending_booking[0] != current:
            self._pending_booking = (current, new_booking_id())
        return self._pending_booking[1]

    def reset_if_due(self) -> bool:
        """Start over once the confirmation has been shown long enough."""
        if not self.state_machine.is_submitted() or self._submitted_at is None:
            return False
        elapsed = self._clock() - self._submitted_at
        if elapsed < self._config.flow.confirmation_display_sec:
            return False
        self.state_machine.transition(TransitionTrigger.DISPLAY_DELAY_ELAPSED, self.selection)
        self.selection = EMPTY_SELECTION
        self._submitted_at = None
        return True
