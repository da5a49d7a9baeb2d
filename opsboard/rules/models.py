"""Rule domain models - operators, operands, conditions and rules.

All models are frozen. Rules reach the engine as immutable snapshots and are
never modified during evaluation.
"""

from __future__ import annotations

import hashlib
import json
import math
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
)


# =============================================================================
# Operators
# =============================================================================


class Operator(str, Enum):
    """Comparison operators for rule conditions."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    BETWEEN = "between"
    IN = "in"
    NOT_IN = "not_in"


class LogicOperator(str, Enum):
    """How a condition joins onto the running result of the ones before it."""

    AND = "AND"
    OR = "OR"


SCALAR_OPERATORS = frozenset({
    Operator.EQUALS,
    Operator.NOT_EQUALS,
    Operator.GREATER_THAN,
    Operator.LESS_THAN,
    Operator.GREATER_THAN_OR_EQUAL,
    Operator.LESS_THAN_OR_EQUAL,
})
SET_OPERATORS = frozenset({Operator.IN, Operator.NOT_IN})


def as_number(value: Any) -> float | None:
    """Coerce a parameter or operand value to a finite float.

    Booleans, empty strings and non-numeric text are not numbers.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


# =============================================================================
# Operands
# =============================================================================


class ScalarOperand(BaseModel):
    """Single value for equality and ordering operators."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["scalar"] = "scalar"
    value: bool | int | float | str


class RangeOperand(BaseModel):
    """Inclusive numeric bounds for ``between``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["range"] = "range"
    min: float
    max: float


class SetOperand(BaseModel):
    """Allowed values for ``in`` / ``not_in``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["set"] = "set"
    values: tuple[bool | int | float | str, ...] = ()


Operand = Annotated[
    Union[ScalarOperand, RangeOperand, SetOperand],
    Field(discriminator="kind"),
]

_operand_adapter: TypeAdapter = TypeAdapter(Operand)


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (bool, int, float, str))


def coerce_operand(
    operator: Operator, raw: Any
) -> ScalarOperand | RangeOperand | SetOperand | None:
    """Shape a raw operand into the variant ``operator`` expects.

    Returns ``None`` when the raw value has the wrong shape; such a condition
    can never match. Operands that are already typed are passed through
    unchanged, the evaluator checks their variant.
    """
    if isinstance(raw, (ScalarOperand, RangeOperand, SetOperand)):
        return raw

    if isinstance(raw, Mapping) and "kind" in raw:
        try:
            return _operand_adapter.validate_python(raw)
        except ValidationError:
            return None

    if operator is Operator.BETWEEN:
        if isinstance(raw, Mapping):
            bounds = (raw.get("min"), raw.get("max"))
        elif isinstance(raw, (list, tuple)) and len(raw) == 2:
            bounds = (raw[0], raw[1])
        else:
            return None
        low, high = as_number(bounds[0]), as_number(bounds[1])
        if low is None or high is None:
            return None
        return RangeOperand(min=low, max=high)

    if operator in SET_OPERATORS:
        if isinstance(raw, (list, tuple, set, frozenset)) and all(_is_scalar(v) for v in raw):
            return SetOperand(values=tuple(raw))
        return None

    if _is_scalar(raw):
        return ScalarOperand(value=raw)
    return None


# =============================================================================
# Conditions and Rules
# =============================================================================


class Condition(BaseModel):
    """One comparison of a named parameter against an operand."""

    model_config = ConfigDict(frozen=True)

    parameter: str = Field(..., description="Context parameter name, e.g. 'envelope_size'")
    operator: Operator
    operand: Operand | None = Field(None, description="None when the raw operand was malformed")
    logic: LogicOperator | None = Field(
        None, description="Join onto the prior result; ignored on the first condition"
    )

    @field_validator("operand", mode="before")
    @classmethod
    def _shape_operand(cls, value: Any, info: ValidationInfo) -> Any:
        operator = info.data.get("operator")
        if operator is None or value is None:
            return None
        return coerce_operand(operator, value)


class RuleOutputs(BaseModel):
    """Performance impact applied when a rule matches."""

    model_config = ConfigDict(frozen=True)

    speed_modifier: float = Field(100.0, description="Percent of base speed, e.g. 80")
    people_required: float = Field(1.0, description="Fractional staffing, e.g. 0.25 steps")
    fixed_rate: float | None = Field(None, description="Overrides the modified speed when set")
    notes: str | None = None


class MachineScope(BaseModel):
    """Which machines a rule was authored for."""

    model_config = ConfigDict(frozen=True)

    machine_id: int | None = None
    machine_group_id: int | None = None

    @property
    def is_global(self) -> bool:
        return self.machine_id is None and self.machine_group_id is None


class Rule(BaseModel):
    """A prioritized condition set plus the outputs applied when it holds."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str = ""
    conditions: tuple[Condition, ...] = ()
    outputs: RuleOutputs = Field(default_factory=RuleOutputs)
    priority: int | float = 0
    scope: MachineScope = Field(default_factory=MachineScope)
    active: bool = True
    process_type_key: str | None = None


class RuleSet(BaseModel):
    """An immutable, versioned snapshot of rules.

    The version is a digest of the rules' content, so two snapshots with the
    same rules share a version regardless of where they were loaded from.
    """

    model_config = ConfigDict(frozen=True)

    rules: tuple[Rule, ...] = ()
    version: str

    @classmethod
    def from_rules(cls, rules: Iterable[Rule]) -> RuleSet:
        ordered = tuple(sorted(rules, key=lambda rule: rule.id))
        payload = json.dumps(
            [rule.model_dump(mode="json") for rule in ordered],
            sort_keys=True,
            separators=(",", ":"),
        )
        version = hashlib.sha256(payload.encode("utf-8")).hexdigest()
        return cls(rules=ordered, version=version)
