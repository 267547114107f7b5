"""Service catalog with durations, weight-class pricing, and add-ons."""

import logging
from typing import Optional

from petshop_booking.schemas.catalog_schema import (
    AddonDefinition,
    PetWeight,
    ServiceCategory,
    ServiceDefinition,
    ServiceType,
)

logger = logging.getLogger(__name__)

SERVICE_CATALOG: dict[ServiceType, ServiceDefinition] = {
    ServiceType.BATH: ServiceDefinition(
        id=ServiceType.BATH, label="Só Banho", duration=1,
    ),
    ServiceType.BATH_AND_GROOMING: ServiceDefinition(
        id=ServiceType.BATH_AND_GROOMING, label="Banho & Tosa", duration=2,
    ),
    ServiceType.VISIT_DAYCARE: ServiceDefinition(
        id=ServiceType.VISIT_DAYCARE, label="Visita para Creche", duration=1,
        category=ServiceCategory.VISIT,
    ),
    ServiceType.VISIT_HOTEL: ServiceDefinition(
        id=ServiceType.VISIT_HOTEL, label="Visita para Hotel", duration=1,
        category=ServiceCategory.VISIT,
    ),
}

WEIGHT_LABELS: dict[PetWeight, str] = {
    PetWeight.UP_TO_5: "Até 5kg",
    PetWeight.KG_10: "Até 10kg",
    PetWeight.KG_15: "Até 15kg",
    PetWeight.KG_20: "Até 20kg",
    PetWeight.KG_25: "Até 25kg",
    PetWeight.KG_30: "Até 30kg",
    PetWeight.OVER_30: "Acima de 30kg",
}

_VISIT_PRICES: dict[ServiceType, int] = {
    ServiceType.VISIT_DAYCARE: 0,
    ServiceType.VISIT_HOTEL: 0,
}


def _prices(bath: int, bath_and_grooming: int) -> dict[ServiceType, int]:
    return {
        ServiceType.BATH: bath,
        ServiceType.BATH_AND_GROOMING: bath_and_grooming,
        **_VISIT_PRICES,
    }


BASE_PRICES: dict[PetWeight, dict[ServiceType, int]] = {
    PetWeight.UP_TO_5: _prices(65, 130),
    PetWeight.KG_10: _prices(75, 150),
    PetWeight.KG_15: _prices(85, 170),
    PetWeight.KG_20: _prices(95, 190),
    PetWeight.KG_25: _prices(105, 210),
    PetWeight.KG_30: _prices(115, 230),
    PetWeight.OVER_30: _prices(150, 300),
}

ADDON_CATALOG: list[AddonDefinition] = [
    # Scissor cut is only offered for small pets.
    AddonDefinition(
        id="tosa_tesoura", label="Tosa na Tesoura", price=160,
        requires_weight=frozenset({PetWeight.UP_TO_5}),
    ),
    AddonDefinition(id="aparacao", label="Aparação Contorno", price=35),
    AddonDefinition(
        id="hidratacao", label="Hidratação", price=25,
        excludes_weight=frozenset({PetWeight.UP_TO_5}),
    ),
    AddonDefinition(id="botinhas", label="Botinhas", price=25),
    AddonDefinition(id="desembolo", label="Desembolo", price=25),
    AddonDefinition(id="patacure1", label="Patacure (1 cor)", price=10),
    AddonDefinition(id="patacure2", label="Patacure (2 cores)", price=20),
    AddonDefinition(id="tintura", label="Tintura (1 parte)", price=20),
]

# Add-ons sharing a group id are mutually exclusive.
ADDON_EXCLUSION_GROUPS: dict[str, str] = {
    "patacure1": "patacure",
    "patacure2": "patacure",
}


def get_service(service_type: Optional[ServiceType]) -> Optional[ServiceDefinition]:
    """Look up a service definition; None when unset or unknown."""
    if service_type is None:
        return None
    return SERVICE_CATALOG.get(service_type)


def get_addon(addon_id: str) -> Optional[AddonDefinition]:
    """Find an add-on by id in the shipped catalog."""
    for addon in ADDON_CATALOG:
        if addon.id == addon_id:
            return addon
    return None


def match_service(query: str) -> Optional[ServiceType]:
    """Resolve a stored service id or display label to a ServiceType.

    Stored booking records carry the human label ("Banho & Tosa"), while
    the engine works with enum ids, so both are accepted.
    """
    normalized = query.strip().lower()
    for sid, info in SERVICE_CATALOG.items():
        if normalized in (sid.value.lower(), info.label.lower()):
            return sid
    return None


def find_price_table_gaps(
    price_table: dict[PetWeight, dict[ServiceType, int]] = BASE_PRICES,
) -> list[str]:
    """List problems with the price table: missing cells or negative prices."""
    problems = []
    for weight in PetWeight:
        row = price_table.get(weight, {})
        for service in ServiceType:
            if service not in row:
                problems.append(f"missing price for {weight.value} x {service.value}")
            elif row[service] < 0:
                problems.append(f"negative price for {weight.value} x {service.value}")
    return problems


def find_unselectable_addons(
    addons: list[AddonDefinition] = ADDON_CATALOG,
) -> list[str]:
    """List add-ons whose weight constraints rule out every weight class."""
    unselectable = []
    for addon in addons:
        allowed = [
            weight for weight in PetWeight
            if (addon.requires_weight is None or weight in addon.requires_weight)
            and (addon.excludes_weight is None or weight not in addon.excludes_weight)
        ]
        if not allowed:
            unselectable.append(addon.id)
    return unselectable
