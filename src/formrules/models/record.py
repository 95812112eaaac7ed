"""Record field declarations and validation result models.

A record is a plain mapping of field name to value supplied by the form.
These models describe the declared shape of those fields and the
structured outcome of a validation pass.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

FieldValue = str | list[str]


class FieldType(StrEnum):
    """Value type of a declared form field.

    STRING: Text inputs, radio groups, date inputs.
    STRING_LIST: Checkbox groups and other multi-selects.
    """

    STRING = "string"
    STRING_LIST = "string_list"

    @property
    def empty_value(self) -> FieldValue:
        """Value an absent field normalizes to."""
        return [] if self is FieldType.STRING_LIST else ""


class FieldSpec(BaseModel):
    """Declaration of one field in a rule set.

    The initial value seeds the form in the UI. It is never used to fill
    absent values during validation.
    """

    model_config = ConfigDict(frozen=True)

    type: FieldType = Field(default=FieldType.STRING, description="Value type of the field")
    label: str | None = Field(default=None, description="Human-readable field label")
    initial: str | tuple[str, ...] | None = Field(
        default=None, description="Initial value used to seed the form"
    )

    @model_validator(mode="after")
    def _validate_initial_type(self) -> FieldSpec:
        """The initial value must match the declared field type."""
        if self.initial is None:
            return self
        if self.type == FieldType.STRING_LIST and not isinstance(self.initial, tuple):
            msg = f"initial value for a string_list field must be a list, got {self.initial!r}"
            raise ValueError(msg)
        if self.type == FieldType.STRING and not isinstance(self.initial, str):
            msg = f"initial value for a string field must be a string, got {self.initial!r}"
            raise ValueError(msg)
        return self

    def initial_value(self) -> FieldValue:
        """Return a fresh copy of the initial value, or the empty value."""
        value = self.initial if self.initial is not None else self.type.empty_value
        return list(value) if isinstance(value, tuple | list) else value


class Issue(BaseModel):
    """A single validation failure tied to one field."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(..., description="Name of the field the issue annotates")
    message: str = Field(..., description="Human-readable failure message")


class Accepted(BaseModel):
    """Validation outcome for a record that satisfied every rule."""

    model_config = ConfigDict(frozen=True)

    status: Literal["accepted"] = "accepted"
    record: dict[str, FieldValue] = Field(
        default_factory=dict, description="Normalized record, in field declaration order"
    )

    @property
    def accepted(self) -> bool:
        return True

    @property
    def issues(self) -> list[Issue]:
        return []


class Rejected(BaseModel):
    """Validation outcome for a record that failed at least one rule.

    Issues are kept in rule evaluation order. Several issues may
    annotate the same field.
    """

    model_config = ConfigDict(frozen=True)

    status: Literal["rejected"] = "rejected"
    issues: list[Issue] = Field(..., description="Failures in evaluation order")

    @model_validator(mode="after")
    def _validate_has_issues(self) -> Rejected:
        if not self.issues:
            msg = "a rejected result must carry at least one issue"
            raise ValueError(msg)
        return self

    @property
    def accepted(self) -> bool:
        return False


ValidationResult = Annotated[Accepted | Rejected, Field(discriminator="status")]
