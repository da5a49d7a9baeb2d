"""
Tests for condition evaluation.

Tests parameter resolution, every operator, and fail-closed behavior for
missing parameters and malformed operands.
"""

import pytest

from opsboard.core.ontology import EvaluationContext
from opsboard.rules import (
    Condition,
    ConditionIssue,
    Operator,
    RangeOperand,
    ScalarOperand,
    SetOperand,
    UnknownOperatorError,
    as_number,
    check_condition,
    coerce_operand,
    evaluate_condition,
    resolve,
)


def cond(parameter: str, operator: str, operand) -> Condition:
    return Condition(parameter=parameter, operator=operator, operand=operand)


class TestResolver:
    """Test parameter lookup."""

    def test_resolves_present_value(self):
        ctx = EvaluationContext.from_sources({"envelope_size": 10})
        assert resolve(ctx, "envelope_size") == 10

    def test_absent_parameter_is_none(self):
        ctx = EvaluationContext.from_sources({"envelope_size": 10})
        assert resolve(ctx, "pockets") is None

    def test_explicit_none_is_unresolved(self):
        ctx = EvaluationContext.from_sources({"color": None})
        assert resolve(ctx, "color") is None
        assert not ctx.has("color")

    def test_plain_mapping(self):
        assert resolve({"color": "red"}, "color") == "red"

    def test_names_are_exact(self):
        ctx = EvaluationContext.from_sources({"Envelope_Size": 10})
        assert resolve(ctx, "envelope_size") is None


class TestAsNumber:
    """Test numeric coercion."""

    @pytest.mark.parametrize("value,expected", [(5, 5.0), (2.5, 2.5), ("12", 12.0), (" 3.5 ", 3.5)])
    def test_numbers(self, value, expected):
        assert as_number(value) == expected

    @pytest.mark.parametrize("value", [True, False, "", "abc", None, [1], float("nan"), float("inf")])
    def test_non_numbers(self, value):
        assert as_number(value) is None


class TestOperandShaping:
    """Test raw operand coercion into tagged variants."""

    def test_scalar(self):
        assert coerce_operand(Operator.EQUALS, "red") == ScalarOperand(value="red")

    def test_between_list(self):
        assert coerce_operand(Operator.BETWEEN, [5, 8]) == RangeOperand(min=5, max=8)

    def test_between_mapping(self):
        assert coerce_operand(Operator.BETWEEN, {"min": "1", "max": 2}) == RangeOperand(min=1, max=2)

    def test_between_wrong_length(self):
        assert coerce_operand(Operator.BETWEEN, [5]) is None

    def test_between_non_numeric(self):
        assert coerce_operand(Operator.BETWEEN, ["a", 8]) is None

    def test_in_list(self):
        assert coerce_operand(Operator.IN, ["a", "b"]) == SetOperand(values=("a", "b"))

    def test_in_scalar_is_malformed(self):
        assert coerce_operand(Operator.IN, "a") is None

    def test_scalar_operator_with_list_is_malformed(self):
        assert coerce_operand(Operator.GREATER_THAN, [1, 2]) is None

    def test_tagged_mapping(self):
        operand = coerce_operand(Operator.IN, {"kind": "set", "values": [1, 2]})
        assert operand == SetOperand(values=(1, 2))

    def test_bad_tagged_mapping(self):
        assert coerce_operand(Operator.IN, {"kind": "bogus"}) is None

    def test_condition_keeps_malformed_operand_as_none(self):
        condition = cond("pockets", "between", "5-8")
        assert condition.operand is None


class TestScalarOperators:
    """Test equality and ordering operators."""

    def test_equals_string(self):
        assert evaluate_condition(cond("color", "equals", "red"), {"color": "red"})
        assert not evaluate_condition(cond("color", "equals", "red"), {"color": "blue"})

    def test_equals_numeric_across_types(self):
        assert evaluate_condition(cond("pockets", "equals", 6), {"pockets": "6"})
        assert evaluate_condition(cond("pockets", "equals", 6), {"pockets": 6.0})

    def test_equals_string_operand_numeric_value(self):
        assert evaluate_condition(cond("paper_size", "equals", "10"), {"paper_size": 10})

    def test_equals_bool_only_matches_bool(self):
        assert evaluate_condition(cond("duplex", "equals", True), {"duplex": True})
        assert not evaluate_condition(cond("duplex", "equals", True), {"duplex": 1})
        assert not evaluate_condition(cond("pockets", "equals", 1), {"pockets": True})

    def test_not_equals(self):
        assert evaluate_condition(cond("color", "not_equals", "red"), {"color": "blue"})
        assert not evaluate_condition(cond("color", "not_equals", "red"), {"color": "red"})

    def test_list_value_never_equals(self):
        ctx = {"inserts": ["bre"]}
        assert not evaluate_condition(cond("inserts", "equals", "bre"), ctx)
        assert not evaluate_condition(cond("inserts", "not_equals", "bre"), ctx)

    @pytest.mark.parametrize(
        "operator,operand,value,expected",
        [
            ("greater_than", 8, 10, True),
            ("greater_than", 10, 10, False),
            ("less_than", 12, 10, True),
            ("less_than", 10, 10, False),
            ("greater_than_or_equal", 10, 10, True),
            ("greater_than_or_equal", 10, 9.99, False),
            ("less_than_or_equal", 10, 10, True),
            ("less_than_or_equal", 10, 10.5, False),
            ("greater_than", "8", "10", True),
        ],
    )
    def test_ordering(self, operator, operand, value, expected):
        assert evaluate_condition(cond("x", operator, operand), {"x": value}) is expected

    def test_ordering_non_numeric_value(self):
        check = check_condition(cond("x", "greater_than", 5), {"x": "large"})
        assert check.result is False
        assert check.issue == ConditionIssue.NON_NUMERIC_VALUE

    def test_ordering_non_numeric_operand(self):
        check = check_condition(cond("x", "less_than", "big"), {"x": 3})
        assert check.result is False
        assert check.issue == ConditionIssue.OPERAND_SHAPE


class TestRangeAndSetOperators:
    """Test between, in and not_in."""

    @pytest.mark.parametrize("value,expected", [(5, True), (8, True), (6.5, True), (4.99, False), (9, False)])
    def test_between_inclusive(self, value, expected):
        assert evaluate_condition(cond("pockets", "between", [5, 8]), {"pockets": value}) is expected

    def test_between_non_numeric_value(self):
        assert not evaluate_condition(cond("pockets", "between", [5, 8]), {"pockets": "many"})

    def test_in(self):
        condition = cond("color", "in", ["red", "blue"])
        assert evaluate_condition(condition, {"color": "red"})
        assert not evaluate_condition(condition, {"color": "green"})

    def test_in_numeric_members(self):
        assert evaluate_condition(cond("pockets", "in", [4, 6]), {"pockets": "6"})

    def test_in_list_value_matches_any_element(self):
        condition = cond("inserts", "in", ["bre", "buckslip"])
        assert evaluate_condition(condition, {"inserts": ["coupon", "bre"]})
        assert not evaluate_condition(condition, {"inserts": ["coupon"]})

    def test_not_in(self):
        condition = cond("color", "not_in", ["red", "blue"])
        assert evaluate_condition(condition, {"color": "green"})
        assert not evaluate_condition(condition, {"color": "red"})

    def test_empty_list_value(self):
        assert not evaluate_condition(cond("inserts", "in", ["bre"]), {"inserts": []})
        assert evaluate_condition(cond("inserts", "not_in", ["bre"]), {"inserts": []})


class TestFailClosed:
    """Test that unusable conditions evaluate to False."""

    @pytest.mark.parametrize("operator", [op.value for op in Operator])
    def test_missing_parameter_is_false_for_every_operator(self, operator):
        operand = [1, 2] if operator in ("between", "in", "not_in") else 1
        check = check_condition(cond("absent", operator, operand), {"other": 1})
        assert check.result is False
        assert check.issue == ConditionIssue.MISSING_PARAMETER

    def test_none_value_is_false(self):
        check = check_condition(cond("color", "not_equals", "red"), {"color": None})
        assert check.result is False
        assert check.issue == ConditionIssue.MISSING_PARAMETER

    def test_malformed_operand_is_false(self):
        check = check_condition(cond("pockets", "between", "5-8"), {"pockets": 6})
        assert check.result is False
        assert check.actual == 6
        assert check.issue == ConditionIssue.OPERAND_SHAPE

    def test_variant_mismatch_is_false(self):
        condition = Condition(
            parameter="pockets", operator="between", operand=ScalarOperand(value=6)
        )
        check = check_condition(condition, {"pockets": 6})
        assert check.result is False
        assert check.issue == ConditionIssue.OPERAND_SHAPE

    def test_unknown_operator_raises(self, monkeypatch):
        from opsboard.rules import evaluator

        monkeypatch.delitem(evaluator.OPERATORS, Operator.IN)
        with pytest.raises(UnknownOperatorError):
            check_condition(cond("color", "in", ["red"]), {"color": "red"})
