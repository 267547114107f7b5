"""
In-memory appointment store and booking record builders.

In production the store is backed by a spreadsheet or database and the
notification record is posted to webhooks; both sit behind the small
interfaces defined here.
"""

import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Any, Optional, Protocol

from pydantic import ValidationError

from petshop_booking.schemas.booking_schema import Appointment, NotificationRecord
from petshop_booking.schemas.catalog_schema import PetWeight, ServiceType
from petshop_booking.tools.addons import addon_labels
from petshop_booking.tools.services import WEIGHT_LABELS, get_service, match_service

logger = logging.getLogger(__name__)


class AppointmentStore(Protocol):
    """Read/write surface the booking flow needs from storage."""

    def list_appointments_from(self, start_date: date) -> list[Appointment]: ...

    def insert(self, appointment: Appointment) -> bool: ...

    def remove(self, appointment_id: str) -> bool: ...


class InMemoryAppointmentStore:
    """Appointment store kept in a dict keyed by appointment id."""

    def __init__(self, appointments: Optional[list[Appointment]] = None) -> None:
        self._appointments: dict[str, Appointment] = {}
        for appointment in appointments or []:
            self._appointments[appointment.id] = appointment

    def list_appointments_from(self, start_date: date) -> list[Appointment]:
        """Appointments starting on or after ``start_date``, oldest first."""
        return sorted(
            (a for a in self._appointments.values() if a.start_time.date() >= start_date),
            key=lambda a: a.start_time,
        )

    def insert(self, appointment: Appointment) -> bool:
        if appointment.id in self._appointments:
            logger.warning("Appointment %s already stored", appointment.id)
            return False
        self._appointments[appointment.id] = appointment
        logger.info(
            "Appointment stored: %s for %s at %s",
            appointment.id, appointment.pet_name, appointment.start_time.isoformat(),
        )
        return True

    def remove(self, appointment_id: str) -> bool:
        return self._appointments.pop(appointment_id, None) is not None

    def reset(self) -> None:
        """Clear all appointments. Used by test fixtures for isolation."""
        self._appointments.clear()


def new_booking_id() -> str:
    return f"BK-{uuid.uuid4().hex[:6].upper()}"


def build_appointment(
    service_type: ServiceType,
    day: date,
    start_hour: int,
    pet_name: str,
    owner_name: str,
    whatsapp: str,
    booking_id: Optional[str] = None,
) -> Appointment:
    """Create the appointment for a chosen slot; end = start + service duration."""
    service = get_service(service_type)
    if service is None:
        raise ValueError(f"Unknown service: {service_type!r}")
    start_time = datetime(day.year, day.month, day.day, start_hour)
    return Appointment(
        id=booking_id or new_booking_id(),
        pet_name=pet_name,
        owner_name=owner_name,
        whatsapp=whatsapp,
        service=service.id,
        start_time=start_time,
        end_time=start_time + timedelta(hours=service.duration),
    )


def build_notification_record(
    appointment: Appointment,
    weight: Optional[PetWeight],
    enabled_addon_ids: frozenset[str],
    price: int,
) -> NotificationRecord:
    """Flatten an appointment and its pricing into labels for downstream sinks."""
    service = get_service(appointment.service)
    return NotificationRecord(
        id=appointment.id,
        start_time=appointment.start_time.isoformat(),
        pet_name=appointment.pet_name,
        owner_name=appointment.owner_name,
        whatsapp=appointment.whatsapp,
        service=service.label if service else appointment.service.value,
        weight=WEIGHT_LABELS.get(weight) if weight is not None else None,
        addons=addon_labels(enabled_addon_ids),
        price=price,
    )


def parse_stored_appointment(record: dict[str, Any]) -> Optional[Appointment]:
    """Rebuild an Appointment from a stored row.

    The ``service`` field may hold an enum id or the display label. Rows
    with an unrecognised service or malformed fields are skipped.
    """
    raw_service = str(record.get("service", ""))
    service_type = match_service(raw_service)
    if service_type is None:
        logger.warning(
            "Skipping stored appointment %s: unrecognised service %r",
            record.get("id"), raw_service,
        )
        return None
    try:
        return Appointment(**{**record, "service": service_type})
    except ValidationError as exc:
        logger.warning("Skipping malformed stored appointment %s: %s", record.get("id"), exc)
        return None


def load_appointments(records: list[dict[str, Any]]) -> list[Appointment]:
    """Parse stored rows, dropping the inconsistent ones."""
    parsed = (parse_stored_appointment(r) for r in records)
    return [a for a in parsed if a is not None]
