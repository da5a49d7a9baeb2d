"""Evaluation context for rule matching."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

Scalar = bool | int | float | str
Value = Scalar | list[Scalar]


def _freeze(value: Any) -> Any:
    # Tag with the type so True and 1 stay distinct keys
    if isinstance(value, (list, tuple)):
        return ("list", tuple(_freeze(v) for v in value))
    return (type(value).__name__, value)


class EvaluationContext(BaseModel):
    """Flat parameter values a rule's conditions are checked against.

    Built once per evaluation from the job's requirement fields and any
    machine- or job-specific inputs. Later sources win on key collisions and
    ``None`` values are dropped, so a parameter is either resolvable or absent.

    Example:
        {
            "process_type": "insert",
            "envelope_size": 10,
            "paper_size": "9x12",
            "pockets": 6,
            "inserts": ["bre", "buckslip"]
        }
    """

    model_config = ConfigDict(frozen=True)

    values: dict[str, Value] = Field(default_factory=dict)

    @classmethod
    def from_sources(cls, *sources: Mapping[str, Any] | None) -> EvaluationContext:
        """Merge several parameter mappings into one context."""
        merged: dict[str, Any] = {}
        for source in sources:
            if not source:
                continue
            for name, value in source.items():
                if value is None:
                    continue
                merged[name] = list(value) if isinstance(value, tuple) else value
        return cls(values=merged)

    @classmethod
    def for_job(
        cls,
        requirements: Mapping[str, Any] | Sequence[Mapping[str, Any]],
        *,
        process_type: str | None = None,
        machine_inputs: Mapping[str, Any] | None = None,
    ) -> EvaluationContext:
        """Build a context from a job's parsed requirements.

        A job can carry one requirement block per process type. When a list is
        given, the block whose ``process_type`` matches is used; without a
        ``process_type`` the first block is used.
        """
        if isinstance(requirements, Mapping):
            block: Mapping[str, Any] | None = requirements
        else:
            block = None
            for candidate in requirements:
                if process_type is None or candidate.get("process_type") == process_type:
                    block = candidate
                    break
        return cls.from_sources(block, machine_inputs)

    def get(self, name: str, default: Any = None) -> Any:
        """Get a parameter value by exact name."""
        return self.values.get(name, default)

    def has(self, name: str) -> bool:
        """Check if a parameter resolves to a value."""
        return self.values.get(name) is not None

    def to_flat_dict(self) -> dict[str, Any]:
        return dict(self.values)

    def fingerprint(self) -> tuple:
        """Hashable, order-independent identity of the context's values."""
        return tuple(sorted((name, _freeze(value)) for name, value in self.values.items()))
