"""Form rule set definitions.

Re-exports for convenient imports:
    from formrules.reference import FormCatalog
    from formrules.reference import load_form_catalog, load_rule_set
"""

from formrules.reference.forms import FormCatalog
from formrules.reference.loader import load_form_catalog, load_rule_set

__all__ = [
    "FormCatalog",
    "load_form_catalog",
    "load_rule_set",
]
