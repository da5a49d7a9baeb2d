"""Pydantic models for rules domain API requests and responses."""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from opsboard.core.ontology import MachineRef, Value
from opsboard.runtime.trace import EvaluationTrace
from .wire import WireRule


# =============================================================================
# Evaluation Models
# =============================================================================


class BaselineRequest(BaseModel):
    """Machine baseline supplied by the caller."""

    speed_hr: float = Field(..., ge=0, description="Base pieces per hour")
    default_people_required: float | None = Field(
        None, ge=0, description="Staffing when no rule matches (defaults to settings)"
    )


class EvaluateRequest(BaseModel):
    """Request to evaluate machine rules for a job."""

    rules: list[WireRule] | None = Field(
        None, description="Inline rule records; the loaded rule set is used when omitted"
    )
    context: dict[str, Value | None] = Field(
        default_factory=dict, description="Job and machine parameter values"
    )
    baseline: BaselineRequest | None = None
    machine: MachineRef | None = Field(
        None, description="Restricts rules to this machine's scope and supplies the baseline"
    )
    trace: bool = Field(False, description="Include the per-condition evaluation trace")

    @model_validator(mode="after")
    def _require_baseline(self) -> "EvaluateRequest":
        if self.baseline is None and self.machine is None:
            raise ValueError("Either 'baseline' or 'machine' is required")
        return self


class EvaluateResponse(BaseModel):
    """Effective speed and staffing for the job."""

    outcome: str
    effective_speed: float
    effective_people: float
    base_speed: float
    speed_modifier: float
    fixed_rate: float | None = None
    explanation: str
    matched_rule: dict[str, Any] | None = Field(None, description="Winning rule in wire form")
    trace: EvaluationTrace | None = None
