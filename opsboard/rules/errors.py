"""Exceptions raised by the rules domain.

Data-quality problems inside a rule (missing parameters, operand shape
mismatches) are never raised; they make a condition evaluate to ``False``
and show up as a ``ConditionIssue`` in the evaluation trace. Only
programming errors and unreadable rule files surface as exceptions.
"""

from __future__ import annotations


class RuleEngineError(Exception):
    """Base class for rule engine errors."""


class UnknownOperatorError(RuleEngineError, ValueError):
    """An operator string or value outside the closed operator set."""

    def __init__(self, operator: object):
        self.operator = operator
        super().__init__(f"Unknown rule operator: {operator!r}")


class RuleFileError(RuleEngineError):
    """A rule snapshot file could not be decoded into rules."""

    def __init__(self, path: object, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid rule file {path}: {reason}")
