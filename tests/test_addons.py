"""Tests for add-on eligibility, reconciliation, and mutual exclusion."""

from petshop_booking.schemas.catalog_schema import AddonDefinition, PetWeight, ServiceType
from petshop_booking.tools.addons import (
    addon_labels,
    eligible_addons,
    is_addon_eligible,
    reconcile_on_service_change,
    reconcile_on_weight_change,
    toggle_addon,
)
from petshop_booking.tools.services import ADDON_CATALOG, get_addon

ALL_IDS = {a.id for a in ADDON_CATALOG}


class TestEligibility:
    def test_requires_weight_and_service(self):
        assert eligible_addons(ADDON_CATALOG, None, PetWeight.KG_10) == set()
        assert eligible_addons(ADDON_CATALOG, ServiceType.BATH, None) == set()

    def test_small_pet_gets_scissor_cut_not_hydration(self):
        ids = eligible_addons(ADDON_CATALOG, ServiceType.BATH, PetWeight.UP_TO_5)
        assert "tosa_tesoura" in ids
        assert "hidratacao" not in ids

    def test_larger_pet_gets_hydration_not_scissor_cut(self):
        ids = eligible_addons(ADDON_CATALOG, ServiceType.BATH_AND_GROOMING, PetWeight.OVER_30)
        assert "hidratacao" in ids
        assert "tosa_tesoura" not in ids
        assert ids == ALL_IDS - {"tosa_tesoura"}

    def test_visit_services_take_no_addons(self):
        for service in (ServiceType.VISIT_DAYCARE, ServiceType.VISIT_HOTEL):
            assert eligible_addons(ADDON_CATALOG, service, PetWeight.KG_10) == set()

    def test_requires_service(self):
        addon = AddonDefinition(
            id="perfume", label="Perfume", price=5,
            requires_service=ServiceType.BATH_AND_GROOMING,
        )
        assert is_addon_eligible(addon, ServiceType.BATH_AND_GROOMING, PetWeight.KG_10)
        assert not is_addon_eligible(addon, ServiceType.BATH, PetWeight.KG_10)


class TestWeightReconciliation:
    def test_required_weight_lost_forces_addon_off(self):
        enabled = frozenset({"tosa_tesoura", "botinhas"})
        assert reconcile_on_weight_change(enabled, PetWeight.KG_10) == {"botinhas"}

    def test_excluded_weight_forces_addon_off(self):
        enabled = frozenset({"hidratacao"})
        assert reconcile_on_weight_change(enabled, PetWeight.UP_TO_5) == frozenset()

    def test_no_memory_of_prior_intent(self):
        enabled = reconcile_on_weight_change(frozenset({"tosa_tesoura"}), PetWeight.KG_15)
        assert reconcile_on_weight_change(enabled, PetWeight.UP_TO_5) == frozenset()

    def test_unknown_ids_are_left_alone(self):
        assert reconcile_on_weight_change({"mystery"}, PetWeight.KG_10) == {"mystery"}


class TestServiceReconciliation:
    def test_visit_clears_everything(self):
        enabled = frozenset({"botinhas", "patacure1"})
        assert reconcile_on_service_change(
            enabled, ServiceType.VISIT_HOTEL, PetWeight.KG_10
        ) == frozenset()

    def test_grooming_keeps_valid_addons(self):
        enabled = frozenset({"botinhas", "hidratacao"})
        assert reconcile_on_service_change(
            enabled, ServiceType.BATH, PetWeight.KG_10
        ) == enabled

    def test_service_restricted_addon_dropped(self):
        addon = AddonDefinition(
            id="perfume", label="Perfume", price=5,
            requires_service=ServiceType.BATH_AND_GROOMING,
        )
        kept = reconcile_on_service_change(
            {"perfume"}, ServiceType.BATH, PetWeight.KG_10, [addon]
        )
        assert kept == frozenset()


class TestToggle:
    def test_toggle_on_and_off(self):
        enabled = toggle_addon(frozenset(), "botinhas")
        assert enabled == {"botinhas"}
        assert toggle_addon(enabled, "botinhas") == frozenset()

    def test_two_color_disables_one_color(self):
        enabled = toggle_addon(frozenset({"patacure1", "botinhas"}), "patacure2")
        assert enabled == {"patacure2", "botinhas"}

    def test_one_color_disables_two_color(self):
        enabled = toggle_addon(frozenset({"patacure2"}), "patacure1")
        assert enabled == {"patacure1"}

    def test_never_both_patacure_variants(self):
        enabled = frozenset()
        for addon_id in ["patacure1", "patacure2", "patacure1", "tintura", "patacure2"]:
            enabled = toggle_addon(enabled, addon_id)
            assert not {"patacure1", "patacure2"} <= enabled

    def test_custom_exclusion_group(self):
        groups = {"botinhas": "feet", "desembolo": "feet"}
        enabled = toggle_addon(frozenset({"botinhas"}), "desembolo", groups)
        assert enabled == {"desembolo"}

    def test_ungrouped_addons_coexist(self):
        enabled = toggle_addon(frozenset({"botinhas"}), "tintura")
        assert enabled == {"botinhas", "tintura"}


class TestLabels:
    def test_labels_follow_catalog_order(self):
        labels = addon_labels({"tintura", "aparacao"})
        assert labels == [get_addon("aparacao").label, get_addon("tintura").label]
