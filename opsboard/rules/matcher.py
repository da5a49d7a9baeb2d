"""Rule matching - picks the single winning rule for a context."""

from __future__ import annotations

from collections.abc import Iterable

from .evaluator import combine_conditions
from .models import Rule
from .resolver import ContextLike


def match_order(rules: Iterable[Rule]) -> list[Rule]:
    """Active rules in the order they are tried.

    Highest priority first; equal priorities fall back to the lower id, i.e.
    the earlier-created rule.
    """
    active = [rule for rule in rules if rule.active]
    return sorted(active, key=lambda rule: (-rule.priority, rule.id))


def match_rule(rules: Iterable[Rule], context: ContextLike) -> Rule | None:
    """Return the first rule, in match order, whose conditions hold.

    Strict first match: outputs of lower-ranked matching rules are never
    merged in. Returns ``None`` when nothing matches.
    """
    for rule in match_order(rules):
        if combine_conditions(rule.conditions, context):
            return rule
    return None
