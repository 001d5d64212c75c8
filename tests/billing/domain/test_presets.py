"""Tests for the plan preset catalog."""

from decimal import Decimal

import pytest
from planbilling.exceptions import UnknownPreset
from planbilling.plan.plan import Plan, PlanState
from planbilling.plan.presets import PRESETS, from_preset, preset_names
from protean import current_domain
from protean.exceptions import ObjectNotFoundError


class TestPresetCatalog:
    def test_lists_registered_presets(self):
        assert "professor_standard" in preset_names()

    def test_catalog_is_read_only(self):
        with pytest.raises(TypeError):
            PRESETS["custom"] = {"price": "1"}

    def test_bundles_are_read_only(self):
        with pytest.raises(TypeError):
            PRESETS["professor_standard"]["price"] = "0"


class TestFromPreset:
    def test_builds_an_active_plan(self):
        plan = from_preset("professor_standard")
        assert isinstance(plan, Plan)
        assert plan.current_state() == PlanState.ACTIVE

    def test_copies_preset_attributes(self):
        plan = from_preset("professor_standard")
        bundle = PRESETS["professor_standard"]
        assert plan.name == bundle["name"]
        assert plan.monthly_price() == Decimal(bundle["price"])
        assert Decimal(plan.yearly_price) == Decimal(bundle["yearly_price"])
        assert plan.members_limit == bundle["members_limit"]

    def test_accepts_associations(self):
        plan = from_preset("free", user_id="user-001", billable_type="Course", billable_id="course-001")
        assert str(plan.user_id) == "user-001"
        assert str(plan.billable_id) == "course-001"

    def test_plan_is_not_saved(self):
        plan = from_preset("professor_plus")
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Plan).get(plan.id)

    def test_unknown_preset(self):
        with pytest.raises(UnknownPreset) as exc_info:
            from_preset("enterprise_gold")
        assert exc_info.value.name == "enterprise_gold"

    def test_unknown_preset_is_a_lookup_error(self):
        with pytest.raises(LookupError):
            from_preset("")
