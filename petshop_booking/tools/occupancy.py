"""Per-hour occupancy derived from the booked appointments of one day."""

import logging
import math
from collections.abc import Iterable
from datetime import date, timedelta

from petshop_booking.schemas.booking_schema import Appointment
from petshop_booking.utils import is_same_day

logger = logging.getLogger(__name__)

ONE_HOUR = timedelta(hours=1)
HOURS_PER_DAY = 24


def appointment_span_hours(appointment: Appointment) -> int:
    """Length of an appointment in whole hours, rounded half-up.

    Fractional-hour appointments are not supported; 1h29 counts as one
    hour and 1h30 as two.
    """
    hours = (appointment.end_time - appointment.start_time) / ONE_HOUR
    return math.floor(hours + 0.5)


def compute_occupancy(
    appointments: Iterable[Appointment],
    target_date: date,
    working_hours: Iterable[int],
) -> dict[int, int]:
    """
    Count how many appointments occupy each hour of ``target_date``.

    Every working hour is present in the result (zero when free). Hours
    outside ``working_hours`` that an appointment touches, such as a
    booking running through lunch, are added as well rather than dropped.
    Counting stops at midnight; the part of a booking that runs into the
    next day is not carried over.
    """
    counts: dict[int, int] = {hour: 0 for hour in working_hours}

    for appointment in appointments:
        if not is_same_day(appointment.start_time, target_date):
            continue
        start_hour = appointment.start_time.hour
        span = appointment_span_hours(appointment)
        if span <= 0:
            logger.warning(
                "Appointment %s has a non-positive span (%s -> %s); ignoring",
                appointment.id, appointment.start_time, appointment.end_time,
            )
            continue
        for hour in range(start_hour, min(start_hour + span, HOURS_PER_DAY)):
            counts[hour] = counts.get(hour, 0) + 1

    return counts
