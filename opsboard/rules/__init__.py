"""Rules domain - machine capability rule engine."""

from .errors import RuleEngineError, RuleFileError, UnknownOperatorError
from .models import (
    Operator,
    LogicOperator,
    ScalarOperand,
    RangeOperand,
    SetOperand,
    Operand,
    Condition,
    RuleOutputs,
    MachineScope,
    Rule,
    RuleSet,
    as_number,
    coerce_operand,
)
from .resolver import resolve, as_context
from .evaluator import (
    ConditionCheck,
    ConditionIssue,
    check_condition,
    evaluate_condition,
    combine_conditions,
    fold_results,
)
from .matcher import match_order, match_rule
from .outputs import EffectiveOutputs, Outcome, resolve_outputs
from .scope import rule_applies_to_machine, rules_for_machine
from .formatting import describe_condition, describe_conditions
from .wire import (
    WireCondition,
    WireRule,
    operator_from_wire,
    operator_to_wire,
    rule_from_wire,
    rule_to_wire,
    rules_from_wire,
)
from .loader import RuleLoader
from .engine import RuleEngine, RuleEvaluation
from .router import router, get_loader, get_engine

__all__ = [
    # Errors
    "RuleEngineError",
    "RuleFileError",
    "UnknownOperatorError",
    # Models
    "Operator",
    "LogicOperator",
    "ScalarOperand",
    "RangeOperand",
    "SetOperand",
    "Operand",
    "Condition",
    "RuleOutputs",
    "MachineScope",
    "Rule",
    "RuleSet",
    "as_number",
    "coerce_operand",
    # Resolver
    "resolve",
    "as_context",
    # Evaluator / combiner
    "ConditionCheck",
    "ConditionIssue",
    "check_condition",
    "evaluate_condition",
    "combine_conditions",
    "fold_results",
    # Matcher
    "match_order",
    "match_rule",
    # Outputs
    "EffectiveOutputs",
    "Outcome",
    "resolve_outputs",
    # Scope
    "rule_applies_to_machine",
    "rules_for_machine",
    # Formatting
    "describe_condition",
    "describe_conditions",
    # Wire
    "WireCondition",
    "WireRule",
    "operator_from_wire",
    "operator_to_wire",
    "rule_from_wire",
    "rule_to_wire",
    "rules_from_wire",
    # Services
    "RuleLoader",
    "RuleEngine",
    "RuleEvaluation",
    # API
    "router",
    "get_loader",
    "get_engine",
]
