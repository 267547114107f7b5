"""
Slot availability checks for the grooming and visit schedules.

A slot is a (date, start hour) pair. Whether it can be booked depends on
the service duration, closing time, the lunch break, and how many
appointments already occupy each hour the service would span.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Optional

from petshop_booking.config import AppConfig, settings
from petshop_booking.schemas.booking_schema import Appointment
from petshop_booking.schemas.catalog_schema import ServiceDefinition, ServiceType
from petshop_booking.tools.occupancy import compute_occupancy
from petshop_booking.tools.services import get_service
from petshop_booking.utils import is_bookable_date


@dataclass(frozen=True)
class LunchCarveOut:
    """Lets a service of ``duration`` hours starting at ``start_hour`` run through lunch."""

    duration: int
    start_hour: int


def grooming_carve_outs(lunch_hour: int) -> frozenset[LunchCarveOut]:
    """Lunch exceptions for the grooming booking flow.

    A bath & grooming booked at the hour before lunch (11:00 by default)
    is allowed to straddle the break and finish at 13:00.
    """
    return frozenset({LunchCarveOut(duration=2, start_hour=lunch_hour - 1)})


def _has_carve_out(
    carve_outs: Iterable[LunchCarveOut], duration: int, start_hour: int
) -> bool:
    return any(
        c.duration == duration and c.start_hour == start_hour for c in carve_outs
    )


def is_slot_available(
    service: Optional[ServiceDefinition],
    start_hour: int,
    occupancy: Mapping[int, int],
    working_hours: Iterable[int],
    lunch_hour: int,
    max_capacity: int,
    closing_hour: int,
    carve_outs: Iterable[LunchCarveOut] = (),
) -> bool:
    """
    Decide whether ``service`` can start at ``start_hour``.

    Rules are checked in order and the first failure wins: a service
    must be selected, it must finish by closing time, it may not touch a
    blocked lunch hour (unless a carve-out matches), and no hour it spans
    may already be at capacity.
    """
    if service is None:
        return False

    duration = service.duration
    end_hour = start_hour + duration
    if end_hour > closing_hour:
        return False

    span = range(start_hour, end_hour)
    lunch_blocked = lunch_hour not in set(working_hours)
    carved_out = _has_carve_out(carve_outs, duration, start_hour)

    if lunch_blocked and lunch_hour in span and not carved_out:
        return False

    for hour in span:
        if carved_out and lunch_blocked and hour == lunch_hour:
            continue
        if occupancy.get(hour, 0) >= max_capacity:
            return False

    return True


def working_hours_for(
    service: ServiceDefinition, config: Optional[AppConfig] = None
) -> tuple[int, ...]:
    """Start hours offered for the service's category."""
    schedule = (config or settings).schedule
    if service.is_visit:
        return schedule.visit_working_hours
    return schedule.working_hours


def get_bookable_hours(
    service_type: Optional[ServiceType],
    target_date: date,
    appointments: Iterable[Appointment],
    today: Optional[date] = None,
    config: Optional[AppConfig] = None,
) -> list[int]:
    """Return every start hour on ``target_date`` that can take ``service_type``."""
    service = get_service(service_type)
    if service is None:
        return []
    if not is_bookable_date(target_date, today):
        return []

    schedule = (config or settings).schedule
    hours = working_hours_for(service, config)
    occupancy = compute_occupancy(appointments, target_date, hours)
    carve_outs = grooming_carve_outs(schedule.lunch_hour)

    return [
        hour
        for hour in hours
        if is_slot_available(
            service,
            hour,
            occupancy,
            hours,
            schedule.lunch_hour,
            schedule.max_capacity_per_slot,
            schedule.closing_hour,
            carve_outs,
        )
    ]
