"""Pytest fixtures for test suite."""

import json

import pytest
from pathlib import Path

from opsboard.core.config import get_settings
from opsboard.core.ontology import EvaluationContext, MachineBaseline, MachineRef
from opsboard.rules import Condition, Rule, RuleOutputs, RuleSet, MachineScope
from opsboard.rules.router import reset_state
from opsboard.runtime.cache import reset_evaluation_cache


# =============================================================================
# Core Fixtures
# =============================================================================


@pytest.fixture
def baseline() -> MachineBaseline:
    """Inserter running 10,000 pieces per hour with one operator."""
    return MachineBaseline(speed_hr=10000, default_people_required=1)


@pytest.fixture
def envelope_context() -> EvaluationContext:
    """Context from the priority scenario."""
    return EvaluationContext.from_sources({"envelope_size": 10})


@pytest.fixture
def rule_a() -> Rule:
    """envelope_size > 8, priority 5."""
    return Rule(
        id=1,
        name="Rule A",
        conditions=(Condition(parameter="envelope_size", operator="greater_than", operand=8),),
        outputs=RuleOutputs(speed_modifier=90, people_required=1),
        priority=5,
    )


@pytest.fixture
def rule_b() -> Rule:
    """envelope_size < 12, priority 10."""
    return Rule(
        id=2,
        name="Rule B",
        conditions=(Condition(parameter="envelope_size", operator="less_than", operand=12),),
        outputs=RuleOutputs(speed_modifier=100, people_required=1.5),
        priority=10,
    )


@pytest.fixture
def group_rule() -> Rule:
    """Fixed-rate rule scoped to machine group 3."""
    return Rule(
        id=3,
        name="Group hand match",
        conditions=(Condition(parameter="match_type", operator="equals", operand="hand"),),
        outputs=RuleOutputs(speed_modifier=100, people_required=3, fixed_rate=2500),
        priority=20,
        scope=MachineScope(machine_group_id=3),
    )


@pytest.fixture
def ruleset(rule_a: Rule, rule_b: Rule, group_rule: Rule) -> RuleSet:
    return RuleSet.from_rules([rule_a, rule_b, group_rule])


@pytest.fixture
def inserter() -> MachineRef:
    """Machine 7 in group 3."""
    return MachineRef(
        id=7,
        line="7",
        machine_group_id=3,
        process_type_key="insert",
        speed_hr=8000,
    )


# =============================================================================
# Wire Fixtures
# =============================================================================


@pytest.fixture
def wire_rule() -> dict:
    """A rule record as the API layer sends it."""
    return {
        "id": 12,
        "rule_name": "Large envelopes",
        "conditions": [
            {"field": "envelope_size", "operator": "Greater Than", "value": 8},
            {"field": "color", "operator": "In", "value": ["red", "blue"], "logicalOperator": "OR"},
            {"field": "weight", "operator": "Between", "value": [1, 5], "logicalOperator": "AND"},
        ],
        "speed_modifier": 90,
        "people_required": 1.5,
        "fixed_rate": None,
        "notes": "Slower feed",
        "priority": 5,
        "machine_id": None,
        "machine_group_id": 3,
        "active": True,
    }


@pytest.fixture
def rules_dir(tmp_path: Path, wire_rule: dict) -> Path:
    """Directory with one JSON and one YAML rule file."""
    directory = tmp_path / "rules"
    directory.mkdir()
    (directory / "large.json").write_text(json.dumps([wire_rule]), encoding="utf-8")
    (directory / "pockets.yaml").write_text(
        "- id: 20\n"
        "  rule_name: Many pockets\n"
        "  process_type_key: insert\n"
        "  conditions:\n"
        "    - field: pockets\n"
        "      operator: Greater Than Or Equal\n"
        "      value: 6\n"
        "  speed_modifier: 70\n"
        "  people_required: 2\n"
        "  priority: 8\n",
        encoding="utf-8",
    )
    return directory


# =============================================================================
# Global State
# =============================================================================


@pytest.fixture
def clean_state(monkeypatch, rules_dir: Path):
    """Point settings at the fixture rules and drop cached globals."""
    monkeypatch.setenv("OPSBOARD_RULES_DIR", str(rules_dir))
    get_settings.cache_clear()
    reset_state()
    reset_evaluation_cache()
    yield
    get_settings.cache_clear()
    reset_state()
    reset_evaluation_cache()
