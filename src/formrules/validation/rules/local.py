"""Single-field checks: selection minimum, requiredness, dates, choices.

Each check receives a value that normalization has already coerced to the
declared field type, so no check special-cases absent values.
"""

from __future__ import annotations

from collections.abc import Callable

from formrules.models.record import FieldValue, Issue
from formrules.models.rules import (
    LocalRule,
    MinSelectionRule,
    OneOfRule,
    RequiredRule,
    ValidDateRule,
)
from formrules.transforms.dates import is_valid_iso_date


def check_min_selection(rule: MinSelectionRule, value: FieldValue) -> bool:
    """Pass when at least ``rule.minimum`` options are selected."""
    return len(value) >= rule.minimum


def check_required(rule: RequiredRule, value: FieldValue) -> bool:
    """Pass when the string has non-whitespace content."""
    return bool(str(value).strip())


def check_valid_date(rule: ValidDateRule, value: FieldValue) -> bool:
    """Pass when the string is blank or a real ``YYYY-MM-DD`` date."""
    if not str(value).strip():
        return True
    return is_valid_iso_date(value)


def check_one_of(rule: OneOfRule, value: FieldValue) -> bool:
    """Pass when the string is one of the permitted choices."""
    return value in rule.choices


LOCAL_CHECKS: dict[str, Callable[..., bool]] = {
    "min_selection": check_min_selection,
    "required": check_required,
    "valid_date": check_valid_date,
    "one_of": check_one_of,
}


def evaluate_local(rule: LocalRule, value: FieldValue) -> Issue | None:
    """Evaluate one local rule against its field's normalized value.

    Returns:
        An Issue on the rule's field if the check fails, otherwise None.
    """
    check = LOCAL_CHECKS[rule.kind]
    if check(rule, value):
        return None
    return Issue(field=rule.field, message=rule.message)
