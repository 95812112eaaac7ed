"""Cross-field checks: conditional requiredness and date ordering.

Cross-field rules run after every local rule. They receive the set of
fields that already failed a local check so that a broken operand is
reported once, by its own local rule, and never again here.
"""

from __future__ import annotations

from formrules.models.record import FieldValue, Issue
from formrules.models.rules import ConditionalRule, CrossFieldRule, DateOrderRule
from formrules.transforms.dates import parse_iso_date
from formrules.validation.rules.local import evaluate_local


def evaluate_conditional(
    rule: ConditionalRule,
    record: dict[str, FieldValue],
    *,
    invalid: set[str],
    malformed: set[str],
) -> list[Issue]:
    """Apply the nested rules only when the discriminant matches.

    A discriminant that failed its own local rules never activates the
    nested rules. Fields whose nested rules fail are added to ``invalid``
    so later cross-field rules skip them.
    """
    if rule.discriminant in invalid:
        return []
    if record[rule.discriminant] != rule.equals:
        return []

    issues: list[Issue] = []
    for local in rule.then:
        # Values of the wrong type were already reported during normalization
        if local.field in malformed:
            continue
        issue = evaluate_local(local, record[local.field])
        if issue is not None:
            issues.append(issue)
            invalid.add(local.field)
    return issues


def evaluate_date_order(
    rule: DateOrderRule,
    record: dict[str, FieldValue],
    *,
    invalid: set[str],
) -> list[Issue]:
    """Check ``earlier <= later``; equal dates pass.

    Skipped when either operand is locally invalid or does not parse.
    """
    if rule.earlier in invalid or rule.later in invalid:
        return []

    earlier = parse_iso_date(record[rule.earlier])
    later = parse_iso_date(record[rule.later])
    if earlier is None or later is None:
        return []

    if later < earlier:
        return [Issue(field=rule.later, message=rule.message)]
    return []


def evaluate_cross_field(
    rule: CrossFieldRule,
    record: dict[str, FieldValue],
    *,
    invalid: set[str],
    malformed: set[str],
) -> list[Issue]:
    """Evaluate one cross-field rule, returning its issues in order."""
    if isinstance(rule, ConditionalRule):
        return evaluate_conditional(rule, record, invalid=invalid, malformed=malformed)
    return evaluate_date_order(rule, record, invalid=invalid)
