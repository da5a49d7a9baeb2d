"""JSON wire format for rule records.

The surrounding application exchanges rules as flat records with Title Case
operator names and a ``logicalOperator`` on every condition after the first:

    {
        "id": 12,
        "rule_name": "Large envelopes",
        "conditions": [
            {"field": "envelope_size", "operator": "Greater Than", "value": 8},
            {"field": "color", "operator": "In", "value": ["red", "blue"],
             "logicalOperator": "AND"}
        ],
        "speed_modifier": 90,
        "people_required": 1.5,
        "fixed_rate": null,
        "notes": "",
        "priority": 5,
        "machine_id": null,
        "machine_group_id": 3,
        "active": true
    }
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import UnknownOperatorError
from .models import (
    Condition,
    LogicOperator,
    MachineScope,
    Operator,
    RangeOperand,
    Rule,
    RuleOutputs,
    ScalarOperand,
    SetOperand,
)

WIRE_OPERATORS: dict[Operator, str] = {
    Operator.EQUALS: "Equals",
    Operator.NOT_EQUALS: "Not Equals",
    Operator.GREATER_THAN: "Greater Than",
    Operator.LESS_THAN: "Less Than",
    Operator.GREATER_THAN_OR_EQUAL: "Greater Than Or Equal",
    Operator.LESS_THAN_OR_EQUAL: "Less Than Or Equal",
    Operator.BETWEEN: "Between",
    Operator.IN: "In",
    Operator.NOT_IN: "Not In",
}

# Accepted spellings: Title Case labels (any case), snake_case enum values,
# and the wizard's display labels for set membership.
_OPERATOR_LOOKUP: dict[str, Operator] = {
    **{label.lower(): op for op, label in WIRE_OPERATORS.items()},
    **{op.value: op for op in Operator},
    "is one of": Operator.IN,
    "is not one of": Operator.NOT_IN,
}


def operator_from_wire(label: Any) -> Operator:
    """Map a wire operator string to the internal enum.

    Raises:
        UnknownOperatorError: the label is not a known operator.
    """
    if isinstance(label, Operator):
        return label
    if not isinstance(label, str):
        raise UnknownOperatorError(label)
    try:
        return _OPERATOR_LOOKUP[label.strip().lower()]
    except KeyError:
        raise UnknownOperatorError(label) from None


def operator_to_wire(operator: Operator) -> str:
    return WIRE_OPERATORS[operator]


# =============================================================================
# Wire Models
# =============================================================================


class WireCondition(BaseModel):
    """A condition as exchanged with the API layer."""

    model_config = ConfigDict(populate_by_name=True)

    field: str
    operator: str
    value: Any = None
    logical_operator: LogicOperator | None = Field(None, alias="logicalOperator")

    @field_validator("logical_operator", mode="before")
    @classmethod
    def _upper_logic(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper() or None
        return value


class WireRule(BaseModel):
    """A rule record as exchanged with the API layer."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    rule_name: str = Field("", validation_alias=AliasChoices("rule_name", "name"))
    conditions: list[WireCondition] = Field(default_factory=list)
    speed_modifier: float = 100.0
    people_required: float = 1.0
    fixed_rate: float | None = None
    notes: str | None = ""
    priority: int | float = 0
    machine_id: int | None = None
    machine_group_id: int | None = None
    active: bool = True
    process_type_key: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_outputs(cls, data: Any) -> Any:
        """Accept records that nest outputs under an ``outputs`` key."""
        if isinstance(data, Mapping) and isinstance(data.get("outputs"), Mapping):
            flat = {k: v for k, v in data.items() if k != "outputs"}
            for key, value in data["outputs"].items():
                flat.setdefault(key, value)
            return flat
        return data


# =============================================================================
# Conversion
# =============================================================================


def _plain_number(value: float) -> int | float:
    return int(value) if float(value).is_integer() else value


def operand_to_wire(condition: Condition) -> Any:
    operand = condition.operand
    if isinstance(operand, ScalarOperand):
        return operand.value
    if isinstance(operand, RangeOperand):
        return [_plain_number(operand.min), _plain_number(operand.max)]
    if isinstance(operand, SetOperand):
        return list(operand.values)
    return None


def rule_from_wire(data: Mapping[str, Any] | WireRule) -> Rule:
    """Decode one wire record into an immutable ``Rule``.

    Operand shape is not validated here; a malformed operand yields a
    condition that never matches.

    Raises:
        UnknownOperatorError: a condition uses an unknown operator.
        pydantic.ValidationError: the record itself is malformed.
    """
    record = data if isinstance(data, WireRule) else WireRule.model_validate(data)

    conditions = []
    for index, cond in enumerate(record.conditions):
        conditions.append(
            Condition(
                parameter=cond.field,
                operator=operator_from_wire(cond.operator),
                operand=cond.value,
                logic=cond.logical_operator if index > 0 else None,
            )
        )

    return Rule(
        id=record.id,
        name=record.rule_name,
        conditions=tuple(conditions),
        outputs=RuleOutputs(
            speed_modifier=record.speed_modifier,
            people_required=record.people_required,
            fixed_rate=record.fixed_rate,
            notes=record.notes or None,
        ),
        priority=record.priority,
        scope=MachineScope(
            machine_id=record.machine_id,
            machine_group_id=record.machine_group_id,
        ),
        active=record.active,
        process_type_key=record.process_type_key,
    )


def rules_from_wire(items: Iterable[Mapping[str, Any] | WireRule]) -> list[Rule]:
    return [rule_from_wire(item) for item in items]


def rule_to_wire(rule: Rule) -> dict[str, Any]:
    """Encode a ``Rule`` as a wire record."""
    conditions = []
    for index, cond in enumerate(rule.conditions):
        item: dict[str, Any] = {
            "field": cond.parameter,
            "operator": operator_to_wire(cond.operator),
            "value": operand_to_wire(cond),
        }
        if index > 0:
            item["logicalOperator"] = (cond.logic or LogicOperator.AND).value
        conditions.append(item)

    record = {
        "id": rule.id,
        "rule_name": rule.name,
        "conditions": conditions,
        "speed_modifier": rule.outputs.speed_modifier,
        "people_required": rule.outputs.people_required,
        "fixed_rate": rule.outputs.fixed_rate,
        "notes": rule.outputs.notes or "",
        "priority": rule.priority,
        "machine_id": rule.scope.machine_id,
        "machine_group_id": rule.scope.machine_group_id,
        "active": rule.active,
    }
    if rule.process_type_key is not None:
        record["process_type_key"] = rule.process_type_key
    return record
