"""Ontology package - context and machine types shared by the rule engine."""

from .context import EvaluationContext, Scalar, Value
from .machine import MachineBaseline, MachineRef

__all__ = [
    "EvaluationContext",
    "Scalar",
    "Value",
    "MachineBaseline",
    "MachineRef",
]
