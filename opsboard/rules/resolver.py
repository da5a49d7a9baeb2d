"""Parameter lookup against an evaluation context."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from opsboard.core.ontology import EvaluationContext

ContextLike = EvaluationContext | Mapping[str, Any]


def resolve(context: ContextLike, name: str) -> Any:
    """Look up a parameter by exact name.

    Unresolved parameters, including ones explicitly set to ``None``, return
    ``None``; lookup never raises.
    """
    return context.get(name)


def as_context(context: ContextLike) -> EvaluationContext:
    """Normalize a plain mapping into an ``EvaluationContext``."""
    if isinstance(context, EvaluationContext):
        return context
    return EvaluationContext.from_sources(context)
