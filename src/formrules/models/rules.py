"""Declarative rule variants and the RuleSet container.

Rules are plain data: a discriminated union keyed on ``kind``. They are
evaluated by the interpreter in formrules.validation.engine, never by
methods on the rules themselves, so a rule set can be serialized to JSON,
shipped as configuration, and loaded back unchanged.

Configuration mistakes (unknown fields, rules on fields of the wrong type,
empty rule lists, date ordering over fields with no date check) raise at
construction time.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Annotated, ClassVar, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from formrules.models.record import FieldSpec, FieldType


class RuleFamily(StrEnum):
    """Evaluation phase a rule belongs to.

    LOCAL: Reads a single field; runs before any cross-field rule.
    CROSS_FIELD: Reads two or more fields; runs after all local rules.
    """

    LOCAL = "local"
    CROSS_FIELD = "cross_field"


class _Rule(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    family: ClassVar[RuleFamily] = RuleFamily.LOCAL

    @property
    @abstractmethod
    def reads(self) -> tuple[str, ...]:
        """Names of every field the rule reads."""

    @property
    @abstractmethod
    def target(self) -> str:
        """Field the rule's issue attaches to."""


class _LocalRule(_Rule):
    field: str = Field(..., min_length=1, description="Field the rule reads and annotates")

    @property
    def reads(self) -> tuple[str, ...]:
        return (self.field,)

    @property
    def target(self) -> str:
        return self.field


class MinSelectionRule(_LocalRule):
    """A multi-select must have at least ``minimum`` entries."""

    kind: Literal["min_selection"] = "min_selection"
    minimum: int = Field(default=1, ge=1, description="Smallest accepted selection count")
    message: str = "At least one option must be selected"


class RequiredRule(_LocalRule):
    """A string field must be non-empty after stripping whitespace."""

    kind: Literal["required"] = "required"
    message: str = "This field is required"


class ValidDateRule(_LocalRule):
    """A non-blank string field must be a real ``YYYY-MM-DD`` date.

    Blank values pass; requiredness belongs to RequiredRule.
    """

    kind: Literal["valid_date"] = "valid_date"
    message: str = "Please enter a valid date"


class OneOfRule(_LocalRule):
    """A string field must equal one of the permitted choices."""

    kind: Literal["one_of"] = "one_of"
    choices: tuple[str, ...] = Field(..., min_length=1, description="Permitted values")
    message: str = "Please select a valid option"


LocalRule = Annotated[
    MinSelectionRule | RequiredRule | ValidDateRule | OneOfRule,
    Field(discriminator="kind"),
]


class ConditionalRule(_Rule):
    """Apply nested local rules only when a discriminant has a given value.

    When ``discriminant`` differs from ``equals`` the nested rules are
    skipped entirely and never produce an issue.
    """

    family: ClassVar[RuleFamily] = RuleFamily.CROSS_FIELD
    kind: Literal["conditional"] = "conditional"
    discriminant: str = Field(..., min_length=1, description="Field whose value guards the rules")
    equals: str = Field(..., description="Discriminant value that activates the rules")
    then: tuple[LocalRule, ...] = Field(..., min_length=1, description="Rules applied when active")

    @property
    def reads(self) -> tuple[str, ...]:
        fields = [self.discriminant]
        for rule in self.then:
            if rule.field not in fields:
                fields.append(rule.field)
        return tuple(fields)

    @property
    def target(self) -> str:
        return self.then[0].field


class DateOrderRule(_Rule):
    """The ``earlier`` date must not fall after the ``later`` date.

    Equal dates pass. The issue attaches to ``later``.
    """

    family: ClassVar[RuleFamily] = RuleFamily.CROSS_FIELD
    kind: Literal["date_order"] = "date_order"
    earlier: str = Field(..., min_length=1, description="Field holding the earlier date")
    later: str = Field(..., min_length=1, description="Field holding the later date")
    message: str = Field(..., description="Message attached to the later field")

    @model_validator(mode="after")
    def _validate_distinct_fields(self) -> DateOrderRule:
        if self.earlier == self.later:
            msg = f"date_order needs two different fields, got '{self.earlier}' twice"
            raise ValueError(msg)
        return self

    @property
    def reads(self) -> tuple[str, ...]:
        return (self.earlier, self.later)

    @property
    def target(self) -> str:
        return self.later


CrossFieldRule = Annotated[ConditionalRule | DateOrderRule, Field(discriminator="kind")]

Rule = Annotated[
    MinSelectionRule | RequiredRule | ValidDateRule | OneOfRule | ConditionalRule | DateOrderRule,
    Field(discriminator="kind"),
]

# Field type each rule kind may be applied to
_STRING_FIELD_KINDS = frozenset({"required", "valid_date", "one_of", "date_order", "conditional"})
_LIST_FIELD_KINDS = frozenset({"min_selection"})


class RuleSet(BaseModel):
    """An immutable, named set of fields and the rules over them.

    Rules keep their declared order. Local rules are evaluated before
    cross-field rules regardless of where they appear in the list.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Form type identifier")
    description: str = Field(default="", description="Human-readable summary")
    fields: dict[str, FieldSpec] = Field(..., min_length=1, description="Declared fields, in order")
    rules: tuple[Rule, ...] = Field(..., description="Rules in declared order")

    @field_validator("fields", mode="after")
    @classmethod
    def _freeze_fields(cls, value: dict[str, FieldSpec]) -> Mapping[str, FieldSpec]:
        """Expose declared fields as a read-only mapping."""
        return MappingProxyType(dict(value))

    @field_serializer("fields")
    def _serialize_fields(self, value: Mapping[str, FieldSpec]) -> dict[str, FieldSpec]:
        return dict(value)

    @model_validator(mode="after")
    def _validate_rule_references(self) -> RuleSet:
        """Reject rule sets that could silently pass bad records."""
        if not self.rules:
            msg = f"Rule set '{self.name}' must declare at least one rule"
            raise ValueError(msg)

        for rule in self.rules:
            for field_name in rule.reads:
                if field_name not in self.fields:
                    msg = (
                        f"Rule set '{self.name}': {rule.kind} rule references "
                        f"undeclared field '{field_name}'"
                    )
                    raise ValueError(msg)
            for local in _local_rules_of(rule):
                self._check_field_type(local.kind, local.field)
            if isinstance(rule, DateOrderRule):
                self._check_field_type(rule.kind, rule.earlier)
                self._check_field_type(rule.kind, rule.later)
            if isinstance(rule, ConditionalRule):
                self._check_field_type(rule.kind, rule.discriminant)

        date_checked = {
            local.field
            for rule in self.rules
            for local in _local_rules_of(rule)
            if isinstance(local, ValidDateRule)
        }
        for rule in self.cross_field_rules:
            if not isinstance(rule, DateOrderRule):
                continue
            for field_name in rule.reads:
                if field_name not in date_checked:
                    msg = (
                        f"Rule set '{self.name}': date_order rule reads '{field_name}', "
                        f"which has no valid_date rule"
                    )
                    raise ValueError(msg)
        return self

    def _check_field_type(self, kind: str, field_name: str) -> None:
        field_type = self.fields[field_name].type
        if kind in _LIST_FIELD_KINDS:
            expected = FieldType.STRING_LIST
        elif kind in _STRING_FIELD_KINDS:
            expected = FieldType.STRING
        else:
            return
        if field_type != expected:
            msg = (
                f"Rule set '{self.name}': {kind} rule needs a {expected} field, "
                f"but '{field_name}' is declared as {field_type}"
            )
            raise ValueError(msg)

    @property
    def local_rules(self) -> list[Rule]:
        """Top-level local rules in declared order."""
        return [r for r in self.rules if r.family == RuleFamily.LOCAL]

    @property
    def cross_field_rules(self) -> list[Rule]:
        """Cross-field rules in declared order."""
        return [r for r in self.rules if r.family == RuleFamily.CROSS_FIELD]

    def initial_record(self) -> dict[str, str | list[str]]:
        """Return the values a fresh form should be seeded with."""
        return {name: spec.initial_value() for name, spec in self.fields.items()}


def _local_rules_of(rule: Rule) -> tuple[Rule, ...]:
    if isinstance(rule, ConditionalRule):
        return rule.then
    if rule.family == RuleFamily.LOCAL:
        return (rule,)
    return ()
