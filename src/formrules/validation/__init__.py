"""Deterministic form record validation.

Provides the rule interpreter (``validate``), a registry of named rule
sets (``ValidationEngine``), and batch reporting. Rules are organized by
phase (local, cross_field) and produce field-addressed issues.
"""

from formrules.validation.engine import ValidationEngine, normalize_record, validate
from formrules.validation.report import ValidationReport, messages_by_field

__all__ = [
    "ValidationEngine",
    "ValidationReport",
    "messages_by_field",
    "normalize_record",
    "validate",
]
