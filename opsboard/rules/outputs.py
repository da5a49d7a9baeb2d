"""Turn the winning rule (or no rule) into effective speed and staffing."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from opsboard.core.ontology import MachineBaseline
from .models import Rule


class Outcome(str, Enum):
    """How the effective outputs were produced."""

    MATCHED = "matched"
    NO_MATCH_FALLBACK = "no_match_fallback"


class EffectiveOutputs(BaseModel):
    """Speed and staffing the caller should schedule with."""

    model_config = ConfigDict(frozen=True)

    outcome: Outcome
    effective_speed: float
    effective_people: float
    base_speed: float
    speed_modifier: float = 100.0
    fixed_rate: float | None = None
    matched_rule_id: int | None = None
    matched_rule_name: str | None = None
    explanation: str = ""


def _fmt(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(round(value, 2))


def resolve_outputs(matched_rule: Rule | None, baseline: MachineBaseline) -> EffectiveOutputs:
    """Apply a matched rule to the machine baseline.

    ``fixed_rate`` replaces the modified speed entirely. Without a match the
    baseline is returned unmodified; that is an expected outcome, not an error.
    """
    if matched_rule is None:
        return EffectiveOutputs(
            outcome=Outcome.NO_MATCH_FALLBACK,
            effective_speed=baseline.speed_hr,
            effective_people=baseline.default_people_required,
            base_speed=baseline.speed_hr,
            explanation="No matching rules found. Using base speed.",
        )

    outputs = matched_rule.outputs
    people = outputs.people_required

    if outputs.fixed_rate is not None:
        speed = outputs.fixed_rate
        explanation = (
            f'Rule "{matched_rule.name}" applied: fixed rate of {_fmt(speed)}/hr. '
            f"Requires {_fmt(people)} people."
        )
    else:
        speed = baseline.speed_hr * outputs.speed_modifier / 100
        explanation = (
            f'Rule "{matched_rule.name}" applied: {_fmt(outputs.speed_modifier)}% of base speed '
            f"({_fmt(baseline.speed_hr)}/hr) = {_fmt(speed)}/hr. "
            f"Requires {_fmt(people)} people."
        )

    return EffectiveOutputs(
        outcome=Outcome.MATCHED,
        effective_speed=speed,
        effective_people=people,
        base_speed=baseline.speed_hr,
        speed_modifier=outputs.speed_modifier,
        fixed_rate=outputs.fixed_rate,
        matched_rule_id=matched_rule.id,
        matched_rule_name=matched_rule.name,
        explanation=explanation,
    )
