"""
Runtime package.

Provides evaluation tracing and memoization for the rule engine.
"""

from opsboard.runtime.cache import EvaluationCache, get_evaluation_cache, reset_evaluation_cache
from opsboard.runtime.trace import EvaluationTrace, RuleTrace, TraceStep

__all__ = [
    # Cache
    "EvaluationCache",
    "get_evaluation_cache",
    "reset_evaluation_cache",
    # Trace
    "EvaluationTrace",
    "RuleTrace",
    "TraceStep",
]
