"""Rule snapshot loader.

Reads wire-format rule records exported by the API layer from JSON or YAML
files and keeps them as immutable ``Rule`` snapshots indexed by id.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from .errors import RuleFileError, UnknownOperatorError
from .models import Rule, RuleSet
from .wire import rule_from_wire

logger = structlog.get_logger(__name__)

RULE_FILE_SUFFIXES = (".json", ".yaml", ".yml")


class RuleLoader:
    """Loads rule records from files or directories."""

    def __init__(self, rules_dir: str | Path | None = None):
        self.rules_dir = Path(rules_dir) if rules_dir else None
        self._rules: dict[int, Rule] = {}

    def load_file(self, path: str | Path) -> list[Rule]:
        """Load rules from a single JSON or YAML file.

        The file holds either one rule record or a list of them.

        Raises:
            FileNotFoundError: the file does not exist.
            RuleFileError: the content cannot be decoded into rules.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Rule file not found: {path}")

        # YAML is a superset of JSON, so one parser covers both formats
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise RuleFileError(path, f"unparseable content ({e})") from e

        if content is None:
            return []
        records = content if isinstance(content, list) else [content]

        rules = []
        for position, record in enumerate(records):
            rules.append(self._parse_rule(record, path, position))

        for rule in rules:
            self._rules[rule.id] = rule

        logger.debug("rule_file_loaded", path=str(path), rules=len(rules))
        return rules

    def load_directory(self, path: str | Path | None = None) -> list[Rule]:
        """Load all rule files from a directory.

        Files that fail to load are logged and skipped.
        """
        path = Path(path) if path else self.rules_dir
        if not path:
            raise ValueError("No rules directory specified")
        if not path.exists():
            raise FileNotFoundError(f"Rules directory not found: {path}")

        rules = []
        for rule_file in sorted(path.iterdir()):
            if rule_file.suffix.lower() not in RULE_FILE_SUFFIXES:
                continue
            try:
                rules.extend(self.load_file(rule_file))
            except RuleFileError as e:
                logger.warning("rule_file_skipped", path=str(rule_file), reason=e.reason)

        logger.info("rules_loaded", directory=str(path), rules=len(self._rules))
        return rules

    def get_rule(self, rule_id: int) -> Rule | None:
        """Get a loaded rule by ID."""
        return self._rules.get(rule_id)

    def get_all_rules(self) -> list[Rule]:
        """Get all loaded rules, ordered by id."""
        return [self._rules[rule_id] for rule_id in sorted(self._rules)]

    def get_rules_for_process(self, process_type_key: str) -> list[Rule]:
        """Get rules authored for a process type, plus rules without one."""
        return [
            rule for rule in self.get_all_rules()
            if rule.process_type_key in (None, process_type_key)
        ]

    def ruleset(self) -> RuleSet:
        """Snapshot of the currently loaded rules."""
        return RuleSet.from_rules(self._rules.values())

    def clear(self) -> None:
        self._rules.clear()

    def _parse_rule(self, record: Any, path: Path, position: int) -> Rule:
        if not isinstance(record, dict):
            raise RuleFileError(path, f"record {position} is not a mapping")
        try:
            return rule_from_wire(record)
        except (ValidationError, UnknownOperatorError) as e:
            raise RuleFileError(path, f"record {position}: {e}") from e
