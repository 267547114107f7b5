"""Catalog data models: services, weight classes, and add-ons."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ServiceType(str, Enum):
    BATH = "BATH"
    BATH_AND_GROOMING = "BATH_AND_GROOMING"
    VISIT_DAYCARE = "VISIT_DAYCARE"
    VISIT_HOTEL = "VISIT_HOTEL"


class ServiceCategory(str, Enum):
    GROOMING = "grooming"
    VISIT = "visit"


class PetWeight(str, Enum):
    """Weight bands in ascending order."""
    UP_TO_5 = "UP_TO_5"
    KG_10 = "KG_10"
    KG_15 = "KG_15"
    KG_20 = "KG_20"
    KG_25 = "KG_25"
    KG_30 = "KG_30"
    OVER_30 = "OVER_30"


class ServiceDefinition(BaseModel):
    """A bookable service with a fixed duration in whole hours."""
    model_config = ConfigDict(frozen=True)

    id: ServiceType
    label: str
    duration: int = Field(gt=0)
    category: ServiceCategory = ServiceCategory.GROOMING

    @property
    def is_visit(self) -> bool:
        """Visit check-ins skip weight pricing and add-ons."""
        return self.category == ServiceCategory.VISIT


class AddonDefinition(BaseModel):
    """Optional extra with its own price and eligibility constraints."""
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    price: int = Field(ge=0)
    requires_service: Optional[ServiceType] = None
    requires_weight: Optional[frozenset[PetWeight]] = None
    excludes_weight: Optional[frozenset[PetWeight]] = None
