"""Unit tests for inheritance rule entity models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from herit.core.database.entities.rules import InheritanceRule, InheritanceRuleBase, RuleAllocation

DEFINITION = {"conditions": [], "event": {"type": "release-inheritance"}}


class TestInheritanceRuleBase:
    def test_defaults(self):
        rule = InheritanceRuleBase(user_email="a@example.ie", name="At 25", rule_definition=DEFINITION)

        assert rule.priority == 1
        assert rule.is_active is True
        assert rule.description is None

    @pytest.mark.parametrize("priority", [0, 101])
    def test_priority_bounds(self, priority):
        with pytest.raises(ValidationError):
            InheritanceRuleBase(user_email="a@example.ie", name="At 25", rule_definition=DEFINITION, priority=priority)

    def test_table_rows_get_ids_and_timestamps(self):
        rule = InheritanceRule(user_email="a@example.ie", name="At 25", rule_definition=DEFINITION)

        assert len(rule.id) == 36
        assert rule.created_at is not None
        assert InheritanceRule.__tablename__ == "inheritance_rules"


class TestRuleAllocation:
    def test_share_is_optional(self):
        allocation = RuleAllocation(rule_id="r", asset_id="a", beneficiary_id="b")

        assert allocation.allocation_percentage is None
        assert allocation.allocation_amount is None
        assert RuleAllocation.__tablename__ == "rule_allocations"
