"""Human-readable rendering of rule conditions."""

from __future__ import annotations

from collections.abc import Sequence

from .models import (
    Condition,
    LogicOperator,
    Operator,
    RangeOperand,
    ScalarOperand,
    SetOperand,
)

OPERATOR_SYMBOLS: dict[Operator, str] = {
    Operator.EQUALS: "=",
    Operator.NOT_EQUALS: "≠",
    Operator.GREATER_THAN: ">",
    Operator.LESS_THAN: "<",
    Operator.GREATER_THAN_OR_EQUAL: "≥",
    Operator.LESS_THAN_OR_EQUAL: "≤",
    Operator.BETWEEN: "between",
    Operator.IN: "is one of",
    Operator.NOT_IN: "is not one of",
}


def _value_text(value: object) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def describe_operand(condition: Condition) -> str:
    operand = condition.operand
    if isinstance(operand, RangeOperand):
        return f"{_value_text(operand.min)} and {_value_text(operand.max)}"
    if isinstance(operand, SetOperand):
        return ", ".join(_value_text(v) for v in operand.values)
    if isinstance(operand, ScalarOperand):
        return _value_text(operand.value)
    return "?"


def describe_condition(condition: Condition) -> str:
    """Render one condition, e.g. ``envelope_size ≥ 10``."""
    symbol = OPERATOR_SYMBOLS.get(condition.operator, str(condition.operator))
    return f"{condition.parameter} {symbol} {describe_operand(condition)}"


def describe_conditions(conditions: Sequence[Condition]) -> str:
    """Render a condition set in evaluation order.

    Each condition after the first is prefixed by the logic it joins with.
    """
    if not conditions:
        return "No conditions"

    parts = [describe_condition(conditions[0])]
    for condition in conditions[1:]:
        logic = condition.logic or LogicOperator.AND
        parts.append(logic.value)
        parts.append(describe_condition(condition))
    return " ".join(parts)
