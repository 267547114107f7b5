"""
The customer's in-progress booking choices as an immutable value.

Every transition returns a new ``Selection``; nothing is mutated in
place. Downstream choices that an upstream change could invalidate
(the start hour, add-ons) are reset or reconciled by the transition
itself.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional

from petshop_booking.schemas.catalog_schema import PetWeight, ServiceType
from petshop_booking.tools.addons import (
    is_addon_eligible,
    reconcile_on_service_change,
    reconcile_on_weight_change,
    toggle_addon,
)
from petshop_booking.tools.pricing import compute_price
from petshop_booking.tools.services import get_addon, get_service


@dataclass(frozen=True)
class Selection:
    pet_name: str = ""
    owner_name: str = ""
    whatsapp: str = ""
    service: Optional[ServiceType] = None
    weight: Optional[PetWeight] = None
    addons: frozenset[str] = field(default_factory=frozenset)
    booking_date: Optional[date] = None
    start_hour: Optional[int] = None


EMPTY_SELECTION = Selection()


def with_contact(
    selection: Selection,
    pet_name: Optional[str] = None,
    owner_name: Optional[str] = None,
    whatsapp: Optional[str] = None,
) -> Selection:
    """Update any of the contact fields; omitted ones are kept."""
    return replace(
        selection,
        pet_name=selection.pet_name if pet_name is None else pet_name,
        owner_name=selection.owner_name if owner_name is None else owner_name,
        whatsapp=selection.whatsapp if whatsapp is None else whatsapp,
    )


def with_service(selection: Selection, service: ServiceType) -> Selection:
    return replace(
        selection,
        service=service,
        addons=reconcile_on_service_change(selection.addons, service, selection.weight),
        start_hour=None,
    )


def with_weight(selection: Selection, weight: PetWeight) -> Selection:
    return replace(
        selection,
        weight=weight,
        addons=reconcile_on_weight_change(selection.addons, weight),
    )


def with_addon_toggled(selection: Selection, addon_id: str) -> Selection:
    """Toggle an add-on; requests to enable an ineligible one are ignored."""
    if addon_id not in selection.addons:
        addon = get_addon(addon_id)
        if addon is None or not is_addon_eligible(addon, selection.service, selection.weight):
            return selection
    return replace(selection, addons=toggle_addon(selection.addons, addon_id))


def with_date(selection: Selection, day: date) -> Selection:
    return replace(selection, booking_date=day, start_hour=None)


def with_time(selection: Selection, start_hour: Optional[int]) -> Selection:
    return replace(selection, start_hour=start_hour)


def has_contact_info(selection: Selection) -> bool:
    return all(
        value.strip()
        for value in (selection.pet_name, selection.owner_name, selection.whatsapp)
    )


def has_service_options(selection: Selection) -> bool:
    """A service is chosen and, unless it is a visit, so is a weight class."""
    service = get_service(selection.service)
    if service is None:
        return False
    return service.is_visit or selection.weight is not None


def has_time_slot(selection: Selection) -> bool:
    return selection.booking_date is not None and selection.start_hour is not None


def is_complete(selection: Selection) -> bool:
    return has_contact_info(selection) and has_service_options(selection) and has_time_slot(selection)


def price_for(selection: Selection) -> int:
    """Recomputed from the current choices every time it is asked for."""
    return compute_price(selection.service, selection.weight, selection.addons)
