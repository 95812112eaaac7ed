"""Pure value transforms used by validation rules."""

from formrules.transforms.dates import is_valid_iso_date, parse_iso_date

__all__ = [
    "is_valid_iso_date",
    "parse_iso_date",
]
