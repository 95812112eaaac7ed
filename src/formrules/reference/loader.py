"""Convenience loaders for bundled and user-supplied rule sets.

Usage:
    from formrules.reference import load_form_catalog, load_rule_set

    catalog = load_form_catalog()
    rule_set = load_rule_set("my_form.json")
"""

from __future__ import annotations

from pathlib import Path

from formrules.models.rules import RuleSet
from formrules.reference.forms import FormCatalog


def load_form_catalog() -> FormCatalog:
    """Load form definitions from the default bundled location."""
    return FormCatalog()


def load_rule_set(path: str | Path) -> RuleSet:
    """Load a single rule set from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If the definition is malformed.
    """
    path = Path(path)
    if not path.is_file():
        msg = f"Rule set file not found at {path}"
        raise FileNotFoundError(msg)
    return RuleSet.model_validate_json(path.read_text())
