"""Routes for rule evaluation."""

import structlog
from fastapi import APIRouter, HTTPException

from opsboard.core.config import get_settings
from opsboard.core.ontology import EvaluationContext, MachineBaseline
from opsboard.runtime.cache import get_evaluation_cache
from .engine import RuleEngine
from .errors import UnknownOperatorError
from .loader import RuleLoader
from .models import RuleSet
from .schemas import EvaluateRequest, EvaluateResponse
from .wire import rule_to_wire, rules_from_wire

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/rules", tags=["Rules"])

# Global instances
_loader: RuleLoader | None = None
_ruleset: RuleSet | None = None
_engine: RuleEngine | None = None


def get_loader() -> RuleLoader:
    """Get or create the rule loader instance."""
    global _loader
    if _loader is None:
        settings = get_settings()
        _loader = RuleLoader(settings.rules_dir)
        try:
            _loader.load_directory()
        except FileNotFoundError:
            logger.info("rules_dir_missing", rules_dir=settings.rules_dir)
    return _loader


def get_ruleset() -> RuleSet:
    """Snapshot of the loaded rules, built once per process."""
    global _ruleset
    if _ruleset is None:
        _ruleset = get_loader().ruleset()
    return _ruleset


def get_engine() -> RuleEngine:
    """Get or create the rule engine instance."""
    global _engine
    if _engine is None:
        _engine = RuleEngine(cache=get_evaluation_cache())
    return _engine


def reset_state() -> None:
    """Drop the cached loader, rule snapshot and engine."""
    global _loader, _ruleset, _engine
    _loader = None
    _ruleset = None
    _engine = None


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate_rules(request: EvaluateRequest) -> EvaluateResponse:
    """Evaluate machine rules for a job's parameters.

    Returns the effective speed and staffing, the winning rule and, on
    request, a trace of every condition check.
    """
    engine = get_engine()

    if request.rules is not None:
        try:
            rules = RuleSet.from_rules(rules_from_wire(request.rules))
        except UnknownOperatorError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
    else:
        rules = get_ruleset()

    context = EvaluationContext.from_sources(request.context)

    if request.machine is not None:
        evaluation = engine.evaluate_for_machine(
            request.machine, rules, context, trace=request.trace
        )
    else:
        people = request.baseline.default_people_required
        baseline = MachineBaseline(
            speed_hr=request.baseline.speed_hr,
            default_people_required=(
                people if people is not None else engine.default_people_required
            ),
        )
        evaluation = engine.evaluate(rules, context, baseline, trace=request.trace)

    outputs = evaluation.outputs
    return EvaluateResponse(
        outcome=outputs.outcome.value,
        effective_speed=outputs.effective_speed,
        effective_people=outputs.effective_people,
        base_speed=outputs.base_speed,
        speed_modifier=outputs.speed_modifier,
        fixed_rate=outputs.fixed_rate,
        explanation=outputs.explanation,
        matched_rule=(
            rule_to_wire(evaluation.matched_rule) if evaluation.matched_rule else None
        ),
        trace=evaluation.trace,
    )
