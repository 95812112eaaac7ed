"""Check functions for each rule kind.

Rules are organized by evaluation phase:
- local: single-field checks (min_selection, required, valid_date, one_of)
- cross_field: multi-field checks (conditional, date_order)
"""

from formrules.validation.rules.cross_field import (
    evaluate_conditional,
    evaluate_cross_field,
    evaluate_date_order,
)
from formrules.validation.rules.local import LOCAL_CHECKS, evaluate_local

__all__ = [
    "LOCAL_CHECKS",
    "evaluate_conditional",
    "evaluate_cross_field",
    "evaluate_date_order",
    "evaluate_local",
]
