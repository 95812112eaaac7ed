"""Validation engine.

``validate`` is the interpreter: it normalizes a record against a rule
set, runs local rules, then cross-field rules, and aggregates the issues.
It is a pure function -- no logging, no clock, no mutation of its inputs.

``ValidationEngine`` is a registry of named rule sets (one per form type)
for callers that look forms up by name.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from loguru import logger

from formrules.models.record import (
    Accepted,
    FieldType,
    FieldValue,
    Issue,
    Rejected,
)
from formrules.models.rules import RuleSet
from formrules.reference.forms import FormCatalog
from formrules.reference.loader import load_form_catalog
from formrules.validation.rules.cross_field import evaluate_cross_field
from formrules.validation.rules.local import evaluate_local


def _describe_value(value: object) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list | tuple):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def _describe_type(field_type: FieldType) -> str:
    return "array of strings" if field_type == FieldType.STRING_LIST else "string"


def normalize_record(
    record: Mapping[str, object],
    rule_set: RuleSet,
) -> tuple[dict[str, FieldValue], list[Issue]]:
    """Coerce a raw record to the rule set's declared field shapes.

    Undeclared keys are dropped. Absent (missing or None) values become the
    field type's empty value. A value of the wrong shape yields one issue
    and is carried through unchanged.

    Args:
        record: Raw field values as entered.
        rule_set: Rule set declaring the fields.

    Returns:
        Tuple of (normalized record in declaration order, shape issues).
    """
    normalized: dict[str, FieldValue] = {}
    issues: list[Issue] = []

    for name, spec in rule_set.fields.items():
        value = record.get(name)
        if value is None:
            normalized[name] = spec.type.empty_value
            continue

        if spec.type == FieldType.STRING_LIST:
            if isinstance(value, list | tuple) and all(isinstance(v, str) for v in value):
                normalized[name] = list(value)
                continue
        elif isinstance(value, str):
            normalized[name] = value
            continue

        received = _describe_value(value)
        if isinstance(value, list | tuple) and spec.type == FieldType.STRING_LIST:
            received = "array containing non-string values"
        normalized[name] = value  # type: ignore[assignment]
        issues.append(
            Issue(
                field=name,
                message=f"Expected {_describe_type(spec.type)}, received {received}",
            )
        )

    return normalized, issues


def validate(record: Mapping[str, object], rule_set: RuleSet) -> Accepted | Rejected:
    """Validate one record against a rule set.

    Processing order:
    1. Normalize field shapes (absent -> empty, wrong type -> issue).
    2. Local rules in declared order.
    3. Cross-field rules in declared order, skipping operands that
       already failed locally.

    Args:
        record: Mapping of field name to current value.
        rule_set: The rule set to evaluate.

    Returns:
        Accepted with the normalized record when no rule fails, otherwise
        Rejected with every issue in evaluation order.
    """
    normalized, issues = normalize_record(record, rule_set)
    malformed = {issue.field for issue in issues}
    invalid = set(malformed)

    for rule in rule_set.local_rules:
        if rule.field in malformed:
            continue
        issue = evaluate_local(rule, normalized[rule.field])
        if issue is not None:
            issues.append(issue)
            invalid.add(rule.field)

    for rule in rule_set.cross_field_rules:
        issues.extend(
            evaluate_cross_field(rule, normalized, invalid=invalid, malformed=malformed)
        )

    if issues:
        return Rejected(issues=issues)
    return Accepted(record=normalized)


class ValidationEngine:
    """Registry of named rule sets with validation by form name.

    The engine holds immutable rule sets only; it keeps no state between
    validation calls and may be shared across threads once configured.
    """

    def __init__(self, *, catalog: FormCatalog | None = None) -> None:
        """Initialize the engine and register the catalog's rule sets.

        Args:
            catalog: Source of rule sets to register. Defaults to the
                bundled form definitions.
        """
        self._catalog = catalog if catalog is not None else load_form_catalog()
        self._rule_sets: dict[str, RuleSet] = {}
        self.register_defaults()

    @property
    def rule_sets(self) -> list[RuleSet]:
        """Return the registered rule sets in registration order."""
        return list(self._rule_sets.values())

    def register(self, rule_set: RuleSet) -> None:
        """Register a rule set under its name.

        Raises:
            ValueError: If a rule set with the same name is already registered.
        """
        if rule_set.name in self._rule_sets:
            msg = f"Rule set '{rule_set.name}' is already registered"
            raise ValueError(msg)
        self._rule_sets[rule_set.name] = rule_set
        logger.debug(
            "Registered rule set: {} ({} fields, {} rules)",
            rule_set.name,
            len(rule_set.fields),
            len(rule_set.rules),
        )

    def register_defaults(self) -> None:
        """Register every rule set from the catalog."""
        for name in self._catalog.list_forms():
            rule_set = self._catalog.get_rule_set(name)
            if rule_set is not None:
                self.register(rule_set)

    def get(self, name: str) -> RuleSet:
        """Return a registered rule set.

        Raises:
            KeyError: If no rule set is registered under ``name``.
        """
        try:
            return self._rule_sets[name]
        except KeyError:
            known = ", ".join(sorted(self._rule_sets)) or "none"
            msg = f"Unknown rule set '{name}' (registered: {known})"
            raise KeyError(msg) from None

    def validate(self, name: str, record: Mapping[str, object]) -> Accepted | Rejected:
        """Validate a record against the rule set registered as ``name``."""
        return validate(record, self.get(name))

    def validate_many(
        self,
        name: str,
        records: Iterable[Mapping[str, object]],
    ) -> list[Accepted | Rejected]:
        """Validate a batch of records against one rule set, in order."""
        rule_set = self.get(name)
        return [validate(record, rule_set) for record in records]
