"""Core package - Shared configuration, logging, and domain types."""

from .config import Settings, get_settings
from .logging import configure_logging, get_logger
from .ontology import EvaluationContext, MachineBaseline, MachineRef

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    "get_logger",
    # Ontology
    "EvaluationContext",
    "MachineBaseline",
    "MachineRef",
]
