"""Total price for a service, weight class, and add-on selection."""

import logging
from collections.abc import Iterable, Mapping
from typing import Optional

from petshop_booking.schemas.catalog_schema import AddonDefinition, PetWeight, ServiceType
from petshop_booking.tools.services import ADDON_CATALOG, BASE_PRICES, get_service

logger = logging.getLogger(__name__)


def compute_price(
    service_type: Optional[ServiceType],
    weight: Optional[PetWeight],
    enabled_addon_ids: Iterable[str],
    price_table: Mapping[PetWeight, Mapping[ServiceType, int]] = BASE_PRICES,
    addon_catalog: Iterable[AddonDefinition] = ADDON_CATALOG,
) -> int:
    """
    Base price for the weight class plus every enabled add-on.

    Visit services and incomplete selections cost nothing. Add-on ids
    missing from the catalog are skipped.
    """
    service = get_service(service_type)
    if service is None or weight is None or service.is_visit:
        return 0

    base = price_table.get(weight, {}).get(service.id)
    if base is None:
        logger.warning("No price for %s x %s", weight.value, service.id.value)
        return 0

    prices = {a.id: a.price for a in addon_catalog}
    addons_total = 0
    for addon_id in enabled_addon_ids:
        price = prices.get(addon_id)
        if price is None:
            logger.warning("Unknown add-on id %r ignored in price calculation", addon_id)
            continue
        addons_total += price

    return base + addons_total
