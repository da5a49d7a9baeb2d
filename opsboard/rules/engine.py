"""Rule engine with trace generation and memoization."""

from __future__ import annotations

from collections.abc import Iterable

import structlog
from pydantic import BaseModel

from opsboard.core.config import get_settings
from opsboard.core.ontology import MachineBaseline, MachineRef
from opsboard.runtime.cache import EvaluationCache
from opsboard.runtime.trace import EvaluationTrace, TraceStep
from .evaluator import check_condition, fold_results
from .formatting import describe_condition
from .matcher import match_order, match_rule
from .models import LogicOperator, Rule, RuleSet
from .outputs import EffectiveOutputs, Outcome, resolve_outputs
from .resolver import ContextLike, as_context
from .scope import rules_for_machine
from .wire import operand_to_wire

logger = structlog.get_logger(__name__)

RuleSource = RuleSet | Iterable[Rule]


class RuleEvaluation(BaseModel):
    """Complete result of evaluating a rule set for one job and machine."""

    outputs: EffectiveOutputs
    matched_rule: Rule | None = None
    trace: EvaluationTrace | None = None

    @property
    def matched(self) -> bool:
        return self.outputs.outcome is Outcome.MATCHED


class RuleEngine:
    """Evaluates machine rules against job parameters.

    Evaluation is pure; the engine holds no state besides an optional cache
    of previous results, keyed by rule set version, context and baseline.
    Caching applies only to untraced evaluations of a ``RuleSet``.
    """

    def __init__(
        self,
        cache: EvaluationCache | None = None,
        default_people_required: float | None = None,
    ):
        self._cache = cache
        self._default_people_required = default_people_required

    @property
    def default_people_required(self) -> float:
        if self._default_people_required is not None:
            return self._default_people_required
        return get_settings().default_people_required

    def evaluate(
        self,
        rules: RuleSource,
        context: ContextLike,
        baseline: MachineBaseline,
        trace: bool = False,
    ) -> RuleEvaluation:
        """Pick the winning rule and compute effective speed and staffing."""
        version = rules.version if isinstance(rules, RuleSet) else None
        candidates = rules.rules if isinstance(rules, RuleSet) else tuple(rules)
        return self._evaluate(candidates, context, baseline, trace, version)

    def evaluate_for_machine(
        self,
        machine: MachineRef,
        rules: RuleSource,
        context: ContextLike,
        trace: bool = False,
    ) -> RuleEvaluation:
        """Evaluate only the rules scoped to ``machine``, against its own baseline."""
        version = None
        if isinstance(rules, RuleSet):
            version = (
                f"{rules.version}:{machine.id}:{machine.machine_group_id}:{machine.process_type_key}"
            )
            rules = rules.rules
        candidates = tuple(rules_for_machine(rules, machine))
        baseline = machine.baseline(self.default_people_required)
        return self._evaluate(candidates, context, baseline, trace, version)

    def _evaluate(
        self,
        candidates: tuple[Rule, ...],
        context: ContextLike,
        baseline: MachineBaseline,
        trace: bool,
        version: str | None,
    ) -> RuleEvaluation:
        ctx = as_context(context)

        cache_key = None
        if self._cache is not None and version is not None and not trace:
            cache_key = (
                version,
                ctx.fingerprint(),
                (baseline.speed_hr, baseline.default_people_required),
            )
            cached = self._cache.get(cache_key)
            if cached is not None:
                return cached

        evaluation_trace = None
        if trace:
            matched, evaluation_trace = self._match_with_trace(candidates, ctx)
        else:
            matched = match_rule(candidates, ctx)

        outputs = resolve_outputs(matched, baseline)
        logger.debug(
            "rule_evaluated",
            candidates=len(candidates),
            matched_rule_id=outputs.matched_rule_id,
            outcome=outputs.outcome.value,
            effective_speed=outputs.effective_speed,
        )

        result = RuleEvaluation(outputs=outputs, matched_rule=matched, trace=evaluation_trace)
        if cache_key is not None:
            self._cache.put(cache_key, result)
        return result

    def _match_with_trace(
        self, candidates: tuple[Rule, ...], context: ContextLike
    ) -> tuple[Rule | None, EvaluationTrace]:
        """Match like ``match_rule`` while recording every condition check."""
        trace = EvaluationTrace(candidates=len(candidates))
        trace.skipped_inactive = [rule.id for rule in candidates if not rule.active]

        for rule in match_order(candidates):
            rule_trace = trace.add_rule(rule.id, rule.name, rule.priority)
            results = []

            for index, condition in enumerate(rule.conditions):
                check = check_condition(condition, context)
                results.append(check.result)

                logic = None
                if index > 0:
                    logic = (condition.logic or LogicOperator.AND).value

                rule_trace.steps.append(
                    TraceStep(
                        node_id=f"rule_{rule.id}.conditions[{index}]",
                        description=describe_condition(condition),
                        parameter=condition.parameter,
                        operator=condition.operator.value,
                        logic=logic,
                        expected_value=operand_to_wire(condition),
                        actual_value=check.actual,
                        result=check.result,
                        issue=check.issue.value if check.issue else None,
                    )
                )
                if check.actual is not None:
                    trace.context_used[condition.parameter] = check.actual

            rule_trace.matched = fold_results(rule.conditions, results)
            if rule_trace.matched:
                trace.complete(rule.id)
                return rule, trace

        trace.complete(None)
        return None, trace
