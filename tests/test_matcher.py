"""
Tests for condition combination and rule matching.

Tests left-to-right logic folding, priority ordering with id tie-break,
inactive rules and first-match semantics.
"""

from opsboard.core.ontology import EvaluationContext
from opsboard.rules import (
    Condition,
    LogicOperator,
    Rule,
    RuleOutputs,
    combine_conditions,
    fold_results,
    match_order,
    match_rule,
)


def rule(rule_id: int, priority=0, conditions=(), active=True) -> Rule:
    return Rule(
        id=rule_id,
        name=f"Rule {rule_id}",
        conditions=conditions,
        outputs=RuleOutputs(speed_modifier=80),
        priority=priority,
        active=active,
    )


def size_over(value) -> Condition:
    return Condition(parameter="envelope_size", operator="greater_than", operand=value)


class TestCombineConditions:
    """Test folding per-condition results with AND/OR."""

    def test_empty_conditions_never_match(self):
        assert combine_conditions([], {"envelope_size": 10}) is False

    def test_single_condition(self):
        assert combine_conditions([size_over(8)], {"envelope_size": 10}) is True

    def test_missing_logic_defaults_to_and(self):
        conditions = [
            size_over(8),
            Condition(parameter="color", operator="equals", operand="red"),
        ]
        assert combine_conditions(conditions, {"envelope_size": 10, "color": "blue"}) is False

    def test_or(self):
        conditions = [
            size_over(8),
            Condition(parameter="color", operator="equals", operand="red", logic="OR"),
        ]
        assert combine_conditions(conditions, {"envelope_size": 3, "color": "red"}) is True

    def test_left_to_right_without_precedence(self):
        """a OR b AND c folds as (a OR b) AND c."""
        conditions = [
            size_over(8),
            Condition(parameter="color", operator="equals", operand="red", logic="OR"),
            Condition(parameter="weight", operator="less_than", operand=5, logic="AND"),
        ]
        ctx = {"envelope_size": 3, "color": "red", "weight": 10}
        assert combine_conditions(conditions, ctx) is False

    def test_first_condition_logic_is_ignored(self):
        conditions = [
            Condition(parameter="color", operator="equals", operand="red", logic="OR"),
            size_over(8),
        ]
        assert combine_conditions(conditions, {"color": "blue", "envelope_size": 10}) is False

    def test_missing_parameter_can_be_rescued_by_or(self):
        conditions = [
            Condition(parameter="absent", operator="equals", operand=1),
            Condition(parameter="color", operator="equals", operand="red", logic=LogicOperator.OR),
        ]
        assert combine_conditions(conditions, {"color": "red"}) is True

    def test_fold_results_directly(self):
        conditions = [
            size_over(1),
            size_over(1).model_copy(update={"logic": LogicOperator.OR}),
            size_over(1).model_copy(update={"logic": LogicOperator.AND}),
        ]
        assert fold_results(conditions, [True, False, True]) is True
        assert fold_results(conditions, [False, True, False]) is False
        assert fold_results([], []) is False


class TestMatchOrder:
    """Test candidate ordering."""

    def test_priority_descending(self):
        ordered = match_order([rule(1, priority=1), rule(2, priority=9), rule(3, priority=5)])
        assert [r.id for r in ordered] == [2, 3, 1]

    def test_tie_broken_by_lower_id(self):
        ordered = match_order([rule(7, priority=5), rule(3, priority=5), rule(5, priority=5)])
        assert [r.id for r in ordered] == [3, 5, 7]

    def test_inactive_rules_excluded(self):
        ordered = match_order([rule(1), rule(2, active=False)])
        assert [r.id for r in ordered] == [1]

    def test_input_order_irrelevant(self):
        rules = [rule(1, priority=2), rule(2, priority=2), rule(3, priority=4)]
        assert match_order(rules) == match_order(list(reversed(rules)))


class TestMatchRule:
    """Test single-winner selection."""

    def test_higher_priority_wins(self, rule_a, rule_b, envelope_context):
        winner = match_rule([rule_a, rule_b], envelope_context)
        assert winner.id == rule_b.id

    def test_no_match(self, rule_a, rule_b):
        ctx = EvaluationContext.from_sources({"envelope_size": None})
        assert match_rule([rule_a, rule_b], ctx) is None

    def test_empty_rule_list(self, envelope_context):
        assert match_rule([], envelope_context) is None

    def test_tie_breaks_to_earlier_rule(self, envelope_context):
        rules = [
            rule(20, priority=5, conditions=(size_over(1),)),
            rule(10, priority=5, conditions=(size_over(1),)),
        ]
        assert match_rule(rules, envelope_context).id == 10

    def test_inactive_rule_never_matches(self, envelope_context):
        rules = [
            rule(1, priority=100, conditions=(size_over(1),), active=False),
            rule(2, priority=1, conditions=(size_over(1),)),
        ]
        assert match_rule(rules, envelope_context).id == 2

    def test_rule_without_conditions_never_matches(self, envelope_context):
        rules = [rule(1, priority=100), rule(2, conditions=(size_over(1),))]
        assert match_rule(rules, envelope_context).id == 2

    def test_lower_priority_match_is_not_merged(self, rule_a, rule_b, envelope_context):
        winner = match_rule([rule_a, rule_b], envelope_context)
        assert winner.outputs == rule_b.outputs

    def test_idempotent(self, rule_a, rule_b, envelope_context):
        rules = [rule_a, rule_b]
        assert match_rule(rules, envelope_context) == match_rule(rules, envelope_context)
