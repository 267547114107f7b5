"""Shared test fixtures and helpers."""

from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from petshop_booking.conversation.booking_flow import BookingSession
from petshop_booking.conversation.state_machine import BookingStateMachine
from petshop_booking.schemas.booking_schema import Appointment
from petshop_booking.schemas.catalog_schema import ServiceType
from petshop_booking.tools.booking import InMemoryAppointmentStore

# A Tuesday; tests pass ``today`` explicitly so the calendar never drifts.
BOOKING_DAY = date(2025, 3, 18)
TODAY = date(2025, 3, 17)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_appointment(
    hour: int,
    hours: float = 1,
    day: date = BOOKING_DAY,
    service: ServiceType = ServiceType.BATH,
    appointment_id: Optional[str] = None,
) -> Appointment:
    """Helper to create an Appointment starting on the hour."""
    start = datetime(day.year, day.month, day.day, hour)
    return Appointment(
        id=appointment_id or f"APT-{day.isoformat()}-{hour}-{hours}",
        pet_name="Thor",
        owner_name="Ana Souza",
        whatsapp="(11) 98765-4321",
        service=service,
        start_time=start,
        end_time=start + timedelta(hours=hours),
    )


@pytest.fixture
def state_machine():
    return BookingStateMachine()


@pytest.fixture
def store():
    return InMemoryAppointmentStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifications():
    return []


@pytest.fixture
def session(store, clock, notifications):
    return BookingSession(
        store,
        notifiers=[notifications.append],
        clock=clock,
        today=lambda: TODAY,
        session_id="SES-test",
    )
