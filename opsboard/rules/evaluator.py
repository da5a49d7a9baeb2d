"""
Condition evaluation and condition-set combination.

A condition that cannot be checked (parameter missing from the context,
operand of the wrong shape, non-numeric value under a numeric operator)
evaluates to ``False`` instead of raising, so one stale rule can only fail
to match; it can never block scheduling.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import UnknownOperatorError
from .models import (
    Condition,
    LogicOperator,
    Operator,
    RangeOperand,
    ScalarOperand,
    SetOperand,
    as_number,
)
from .resolver import ContextLike, resolve


class ConditionIssue(str, Enum):
    """Why a condition could not match, recorded in traces."""

    MISSING_PARAMETER = "missing_parameter"
    OPERAND_SHAPE = "operand_shape"
    NON_NUMERIC_VALUE = "non_numeric_value"


@dataclass(frozen=True)
class ConditionCheck:
    """Outcome of checking one condition."""

    result: bool
    actual: Any = None
    issue: ConditionIssue | None = None


Outcome = tuple[bool, ConditionIssue | None]


# Scalar comparison helpers
def _number_text(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _scalar_equals(actual: Any, expected: Any) -> bool:
    """Equality with numeric operands compared as numbers, text as text."""
    if isinstance(actual, bool) or isinstance(expected, bool):
        return isinstance(actual, bool) and isinstance(expected, bool) and actual == expected
    if isinstance(expected, (int, float)):
        value = as_number(actual)
        return value is not None and value == float(expected)
    if isinstance(actual, str):
        return actual == expected
    if isinstance(actual, (int, float)):
        return _number_text(actual) == expected
    return False


def _in_set(actual: Any, members: tuple) -> bool:
    if isinstance(actual, list):
        return any(_in_set(item, members) for item in actual)
    return any(_scalar_equals(actual, member) for member in members)


def _compare_numbers(
    actual: Any, operand: Any, compare: Callable[[float, float], bool]
) -> Outcome:
    if not isinstance(operand, ScalarOperand):
        return False, ConditionIssue.OPERAND_SHAPE
    expected = as_number(operand.value)
    if expected is None:
        return False, ConditionIssue.OPERAND_SHAPE
    value = as_number(actual)
    if value is None:
        return False, ConditionIssue.NON_NUMERIC_VALUE
    return compare(value, expected), None


# Operator implementations
def _eval_equals(actual: Any, operand: Any) -> Outcome:
    if not isinstance(operand, ScalarOperand):
        return False, ConditionIssue.OPERAND_SHAPE
    if isinstance(actual, list):
        return False, None
    return _scalar_equals(actual, operand.value), None


def _eval_not_equals(actual: Any, operand: Any) -> Outcome:
    if not isinstance(operand, ScalarOperand):
        return False, ConditionIssue.OPERAND_SHAPE
    if isinstance(actual, list):
        return False, None
    return not _scalar_equals(actual, operand.value), None


def _eval_gt(actual: Any, operand: Any) -> Outcome:
    return _compare_numbers(actual, operand, lambda a, b: a > b)


def _eval_lt(actual: Any, operand: Any) -> Outcome:
    return _compare_numbers(actual, operand, lambda a, b: a < b)


def _eval_gte(actual: Any, operand: Any) -> Outcome:
    return _compare_numbers(actual, operand, lambda a, b: a >= b)


def _eval_lte(actual: Any, operand: Any) -> Outcome:
    return _compare_numbers(actual, operand, lambda a, b: a <= b)


def _eval_between(actual: Any, operand: Any) -> Outcome:
    if not isinstance(operand, RangeOperand):
        return False, ConditionIssue.OPERAND_SHAPE
    value = as_number(actual)
    if value is None:
        return False, ConditionIssue.NON_NUMERIC_VALUE
    return operand.min <= value <= operand.max, None


def _eval_in(actual: Any, operand: Any) -> Outcome:
    if not isinstance(operand, SetOperand):
        return False, ConditionIssue.OPERAND_SHAPE
    return _in_set(actual, operand.values), None


def _eval_not_in(actual: Any, operand: Any) -> Outcome:
    if not isinstance(operand, SetOperand):
        return False, ConditionIssue.OPERAND_SHAPE
    return not _in_set(actual, operand.values), None


OPERATORS: dict[Operator, Callable[[Any, Any], Outcome]] = {
    Operator.EQUALS: _eval_equals,
    Operator.NOT_EQUALS: _eval_not_equals,
    Operator.GREATER_THAN: _eval_gt,
    Operator.LESS_THAN: _eval_lt,
    Operator.GREATER_THAN_OR_EQUAL: _eval_gte,
    Operator.LESS_THAN_OR_EQUAL: _eval_lte,
    Operator.BETWEEN: _eval_between,
    Operator.IN: _eval_in,
    Operator.NOT_IN: _eval_not_in,
}


def check_condition(condition: Condition, context: ContextLike) -> ConditionCheck:
    """Evaluate one condition and report why it failed, if it did.

    Raises:
        UnknownOperatorError: the condition's operator has no implementation.
    """
    handler = OPERATORS.get(condition.operator)
    if handler is None:
        raise UnknownOperatorError(condition.operator)

    actual = resolve(context, condition.parameter)
    if actual is None:
        return ConditionCheck(result=False, issue=ConditionIssue.MISSING_PARAMETER)
    if condition.operand is None:
        return ConditionCheck(result=False, actual=actual, issue=ConditionIssue.OPERAND_SHAPE)

    result, issue = handler(actual, condition.operand)
    return ConditionCheck(result=result, actual=actual, issue=issue)


def evaluate_condition(condition: Condition, context: ContextLike) -> bool:
    """Evaluate one condition against the context."""
    return check_condition(condition, context).result


def fold_results(conditions: Sequence[Condition], results: Sequence[bool]) -> bool:
    """Fold per-condition results left to right.

    Each condition after the first joins the running result with its own
    ``logic`` (AND when unset). There is no precedence and no grouping:
    ``a OR b AND c`` is ``(a OR b) AND c``.
    """
    if not results:
        return False
    combined = results[0]
    for condition, result in zip(conditions[1:], results[1:]):
        if condition.logic is LogicOperator.OR:
            combined = combined or result
        else:
            combined = combined and result
    return combined


def combine_conditions(conditions: Sequence[Condition], context: ContextLike) -> bool:
    """Evaluate and combine a rule's ordered conditions.

    An empty condition list never matches.
    """
    results = [evaluate_condition(condition, context) for condition in conditions]
    return fold_results(conditions, results)
