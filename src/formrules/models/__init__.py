"""Pydantic data models shared across all formrules components.

All models are re-exported here for convenient imports:
    from formrules.models import RuleSet, FieldSpec, Issue, Accepted, Rejected
"""

from formrules.models.record import (
    Accepted,
    FieldSpec,
    FieldType,
    FieldValue,
    Issue,
    Rejected,
    ValidationResult,
)
from formrules.models.rules import (
    ConditionalRule,
    CrossFieldRule,
    DateOrderRule,
    LocalRule,
    MinSelectionRule,
    OneOfRule,
    RequiredRule,
    Rule,
    RuleFamily,
    RuleSet,
    ValidDateRule,
)

__all__ = [
    "Accepted",
    "ConditionalRule",
    "CrossFieldRule",
    "DateOrderRule",
    "FieldSpec",
    "FieldType",
    "FieldValue",
    "Issue",
    "LocalRule",
    "MinSelectionRule",
    "OneOfRule",
    "Rejected",
    "RequiredRule",
    "Rule",
    "RuleFamily",
    "RuleSet",
    "ValidDateRule",
    "ValidationResult",
]
