"""
Evaluation tracing for rule matching.

Records which rules were tried, in match order, and how each condition
resolved, so the dashboard can explain why a machine runs at a given speed:
- which parameters were missing or malformed for a rule
- which rule won and why higher-priority rules did not
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class TraceStep(BaseModel):
    """A single condition check within a rule."""

    node_id: str
    """Position of the condition, e.g. 'rule_12.conditions[1]'."""

    description: str
    """Human-readable rendering of the condition."""

    parameter: str | None = None
    operator: str | None = None
    logic: str | None = None
    """Logic joining this condition onto the prior result (None for the first)."""

    expected_value: Any = None
    actual_value: Any = None
    result: bool | None = None

    issue: str | None = None
    """Why the condition could not match (missing parameter, operand shape)."""


class RuleTrace(BaseModel):
    """All condition checks performed for one candidate rule."""

    rule_id: int
    rule_name: str = ""
    priority: int | float = 0
    matched: bool = False
    steps: list[TraceStep] = Field(default_factory=list)


class EvaluationTrace(BaseModel):
    """Complete trace of one engine evaluation.

    Only rules tried before (and including) the winner appear; lower-ranked
    rules are never evaluated under first-match semantics.
    """

    started_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    completed_at: str | None = None

    candidates: int = 0
    """Number of rules handed to the engine."""

    skipped_inactive: list[int] = Field(default_factory=list)
    """Ids of candidate rules ignored because they are inactive."""

    rules: list[RuleTrace] = Field(default_factory=list)
    matched_rule_id: int | None = None

    context_used: dict[str, Any] = Field(default_factory=dict)
    """Parameter values referenced by the evaluated conditions."""

    def add_rule(self, rule_id: int, rule_name: str = "", priority: int | float = 0) -> RuleTrace:
        """Start tracing a candidate rule.

        Returns:
            The created RuleTrace
        """
        rule_trace = RuleTrace(rule_id=rule_id, rule_name=rule_name, priority=priority)
        self.rules.append(rule_trace)
        return rule_trace

    def complete(self, matched_rule_id: int | None) -> None:
        """Mark the trace as complete."""
        self.matched_rule_id = matched_rule_id
        self.completed_at = datetime.now(timezone.utc).isoformat()

    def failed_parameters(self) -> set[str]:
        """Parameters that blocked at least one rule for data-quality reasons."""
        return {
            step.parameter
            for rule_trace in self.rules
            for step in rule_trace.steps
            if step.issue is not None and step.parameter is not None
        }
