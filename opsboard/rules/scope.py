"""Candidate selection by machine scope.

Rules are authored for a single machine, for a machine group (a shared
"variable combination"), or for every machine of a process type. The
matcher itself is scope-agnostic; callers narrow the candidate list here
first.
"""

from __future__ import annotations

from collections.abc import Iterable

from opsboard.core.ontology import MachineRef
from .models import Rule


def rule_applies_to_machine(rule: Rule, machine: MachineRef) -> bool:
    """Check whether a rule's scope covers the given machine."""
    if rule.process_type_key and machine.process_type_key:
        if rule.process_type_key != machine.process_type_key:
            return False

    scope = rule.scope
    if scope.machine_id is not None:
        return scope.machine_id == machine.id
    if scope.machine_group_id is not None:
        return scope.machine_group_id == machine.machine_group_id
    return True


def rules_for_machine(rules: Iterable[Rule], machine: MachineRef) -> list[Rule]:
    """Rules whose scope covers the machine, in their original order."""
    return [rule for rule in rules if rule_applies_to_machine(rule, machine)]
