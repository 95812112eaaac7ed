"""Bundled form rule set definitions.

Provides structured access to the rule sets shipped as JSON under
``formrules/data/forms``. All data is loaded at initialization -- a
malformed definition fails here, before any record is validated.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from formrules.models.rules import RuleSet

_DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "forms"


class FormCatalog:
    """Queryable interface over a directory of rule set JSON files.

    Each ``<name>.json`` file holds one RuleSet whose ``name`` must match
    the file stem.
    """

    def __init__(self, data_path: str | Path | None = None) -> None:
        data_dir = Path(data_path) if data_path else _DEFAULT_DATA_DIR

        if not data_dir.is_dir():
            msg = f"Form definitions directory not found at {data_dir}"
            raise FileNotFoundError(msg)

        rule_sets: dict[str, RuleSet] = {}
        for path in sorted(data_dir.glob("*.json")):
            rule_set = RuleSet.model_validate_json(path.read_text())
            if rule_set.name != path.stem:
                msg = f"Rule set name '{rule_set.name}' does not match file name '{path.name}'"
                raise ValueError(msg)
            rule_sets[rule_set.name] = rule_set
            logger.debug("Loaded form definition {} from {}", rule_set.name, path)

        self._rule_sets = rule_sets

    def list_forms(self) -> list[str]:
        """Return sorted list of available form names."""
        return sorted(self._rule_sets)

    def get_rule_set(self, name: str) -> RuleSet | None:
        """Return the rule set for a form, or None if not found."""
        return self._rule_sets.get(name)
