"""Add-on eligibility and mutual-exclusion rules."""

import logging
from collections.abc import Iterable, Mapping
from typing import Optional

from petshop_booking.schemas.catalog_schema import AddonDefinition, PetWeight, ServiceType
from petshop_booking.tools.services import (
    ADDON_CATALOG,
    ADDON_EXCLUSION_GROUPS,
    get_service,
)

logger = logging.getLogger(__name__)


def _weight_allowed(addon: AddonDefinition, weight: PetWeight) -> bool:
    if addon.requires_weight is not None and weight not in addon.requires_weight:
        return False
    if addon.excludes_weight is not None and weight in addon.excludes_weight:
        return False
    return True


def is_addon_eligible(
    addon: AddonDefinition,
    service_type: Optional[ServiceType],
    weight: Optional[PetWeight],
) -> bool:
    """True when ``addon`` can be selected for this service and weight class."""
    service = get_service(service_type)
    if service is None or weight is None:
        return False
    if service.is_visit:
        return False
    if addon.requires_service is not None and addon.requires_service != service.id:
        return False
    return _weight_allowed(addon, weight)


def eligible_addons(
    addons: Iterable[AddonDefinition],
    service_type: Optional[ServiceType],
    weight: Optional[PetWeight],
) -> set[str]:
    """Ids of the add-ons currently selectable."""
    return {a.id for a in addons if is_addon_eligible(a, service_type, weight)}


def reconcile_on_weight_change(
    enabled: Iterable[str],
    new_weight: PetWeight,
    addons: Iterable[AddonDefinition] = ADDON_CATALOG,
) -> frozenset[str]:
    """Switch off enabled add-ons whose weight rules reject ``new_weight``.

    Nothing is remembered: returning to the previous weight does not
    re-enable what was dropped.
    """
    by_id = {a.id: a for a in addons}
    kept = set()
    for addon_id in enabled:
        addon = by_id.get(addon_id)
        if addon is not None and not _weight_allowed(addon, new_weight):
            logger.debug("Add-on %s dropped after weight change to %s", addon_id, new_weight.value)
            continue
        kept.add(addon_id)
    return frozenset(kept)


def reconcile_on_service_change(
    enabled: Iterable[str],
    service_type: Optional[ServiceType],
    weight: Optional[PetWeight],
    addons: Iterable[AddonDefinition] = ADDON_CATALOG,
) -> frozenset[str]:
    """Switch off enabled add-ons the new service does not allow.

    Visit services take no add-ons, so every selection is cleared.
    """
    service = get_service(service_type)
    if service is not None and service.is_visit:
        return frozenset()

    by_id = {a.id: a for a in addons}
    kept = set()
    for addon_id in enabled:
        addon = by_id.get(addon_id)
        if (
            addon is not None
            and addon.requires_service is not None
            and addon.requires_service != service_type
        ):
            continue
        kept.add(addon_id)
    if weight is not None:
        return reconcile_on_weight_change(kept, weight, addons)
    return frozenset(kept)


def toggle_addon(
    enabled: Iterable[str],
    addon_id: str,
    exclusion_groups: Mapping[str, str] = ADDON_EXCLUSION_GROUPS,
) -> frozenset[str]:
    """Flip ``addon_id`` on or off.

    Switching an add-on on switches off every other member of its
    exclusion group.
    """
    current = set(enabled)
    if addon_id in current:
        current.discard(addon_id)
        return frozenset(current)

    group = exclusion_groups.get(addon_id)
    if group is not None:
        current = {
            other for other in current if exclusion_groups.get(other) != group
        }
    current.add(addon_id)
    return frozenset(current)


def addon_labels(
    enabled: Iterable[str],
    addons: Iterable[AddonDefinition] = ADDON_CATALOG,
) -> list[str]:
    """Labels of the enabled add-ons in catalog order."""
    enabled_ids = set(enabled)
    return [a.label for a in addons if a.id in enabled_ids]
