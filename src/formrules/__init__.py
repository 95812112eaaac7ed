"""Declarative cross-field validation for form records."""

__version__ = "0.1.0"
