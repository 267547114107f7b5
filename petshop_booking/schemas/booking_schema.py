"""Appointment and booking notification data models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from petshop_booking.schemas.catalog_schema import ServiceType


class Appointment(BaseModel):
    """An existing booking as read back from the appointment store.

    ``end_time`` is expected to be ``start_time + service duration``; the
    occupancy calculator trusts the stored timestamps and does not
    re-derive the span from the service.
    """
    id: str
    pet_name: str
    owner_name: str
    whatsapp: str
    service: ServiceType
    start_time: datetime
    end_time: datetime


class NotificationRecord(BaseModel):
    """Flattened booking record handed to notification sinks."""
    id: str
    start_time: str
    pet_name: str
    owner_name: str
    whatsapp: str
    service: str
    weight: Optional[str] = None
    addons: list[str] = Field(default_factory=list)
    price: int = 0
