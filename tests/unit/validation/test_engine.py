"""Tests for the validate interpreter and the ValidationEngine registry."""

from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from formrules.models.record import Accepted, FieldSpec, FieldType, Issue, Rejected
from formrules.models.rules import (
    DateOrderRule,
    MinSelectionRule,
    OneOfRule,
    RequiredRule,
    RuleSet,
    ValidDateRule,
)
from formrules.reference.forms import FormCatalog
from formrules.validation.engine import ValidationEngine, normalize_record, validate

# ---------------------------------------------------------------------------
# Test helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def picks_rule_set() -> RuleSet:
    return RuleSet(
        name="picks",
        fields={
            "picks": FieldSpec(type=FieldType.STRING_LIST),
            "note": FieldSpec(),
        },
        rules=(MinSelectionRule(field="picks"),),
    )


@pytest.fixture
def engine() -> ValidationEngine:
    return ValidationEngine()


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


class TestNormalizeRecord:
    def test_absent_fields_get_empty_values(self, picks_rule_set: RuleSet) -> None:
        normalized, issues = normalize_record({}, picks_rule_set)
        assert normalized == {"picks": [], "note": ""}
        assert issues == []

    def test_none_treated_as_absent(self, picks_rule_set: RuleSet) -> None:
        normalized, _ = normalize_record({"picks": None, "note": None}, picks_rule_set)
        assert normalized == {"picks": [], "note": ""}

    def test_undeclared_keys_dropped(self, picks_rule_set: RuleSet) -> None:
        normalized, _ = normalize_record({"picks": ["a"], "extra": "x"}, picks_rule_set)
        assert normalized == {"picks": ["a"], "note": ""}

    def test_declaration_order_kept(self, picks_rule_set: RuleSet) -> None:
        normalized, _ = normalize_record({"note": "n", "picks": ["a"]}, picks_rule_set)
        assert list(normalized) == ["picks", "note"]

    def test_tuple_becomes_list(self, picks_rule_set: RuleSet) -> None:
        normalized, _ = normalize_record({"picks": ("a", "b")}, picks_rule_set)
        assert normalized["picks"] == ["a", "b"]

    def test_string_for_list_field(self, picks_rule_set: RuleSet) -> None:
        _, issues = normalize_record({"picks": "a"}, picks_rule_set)
        assert issues == [Issue(field="picks", message="Expected array of strings, received string")]

    def test_list_with_non_strings(self, picks_rule_set: RuleSet) -> None:
        _, issues = normalize_record({"picks": ["a", 1]}, picks_rule_set)
        assert issues == [
            Issue(
                field="picks",
                message="Expected array of strings, received array containing non-string values",
            )
        ]

    @pytest.mark.parametrize(
        ("value", "received"),
        [(5, "number"), (1.5, "number"), (True, "boolean"), (["x"], "array"), ({"a": 1}, "object")],
    )
    def test_wrong_type_for_string_field(
        self, picks_rule_set: RuleSet, value: object, received: str
    ) -> None:
        _, issues = normalize_record({"picks": ["a"], "note": value}, picks_rule_set)
        assert issues == [Issue(field="note", message=f"Expected string, received {received}")]


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


class TestValidate:
    def test_accepted_carries_normalized_record(self, picks_rule_set: RuleSet) -> None:
        result = validate({"picks": ("a",), "junk": 1}, picks_rule_set)
        assert result == Accepted(record={"picks": ["a"], "note": ""})

    def test_rejected_carries_issue(self, picks_rule_set: RuleSet) -> None:
        result = validate({"picks": []}, picks_rule_set)
        assert result == Rejected(
            issues=[Issue(field="picks", message="At least one option must be selected")]
        )

    def test_malformed_field_skips_its_local_rules(self, picks_rule_set: RuleSet) -> None:
        result = validate({"picks": "a"}, picks_rule_set)
        assert isinstance(result, Rejected)
        assert [i.message for i in result.issues] == [
            "Expected array of strings, received string"
        ]

    def test_multiple_issues_on_one_field_all_kept(self) -> None:
        rule_set = RuleSet(
            name="radio",
            fields={"radio": FieldSpec()},
            rules=(
                RequiredRule(field="radio", message="Answer is required"),
                OneOfRule(field="radio", choices=("yes", "no"), message="Pick yes or no"),
            ),
        )
        result = validate({}, rule_set)
        assert result.issues == [
            Issue(field="radio", message="Answer is required"),
            Issue(field="radio", message="Pick yes or no"),
        ]

    def test_local_rules_run_before_cross_field_rules(self) -> None:
        rule_set = RuleSet(
            name="ordered",
            fields={"a": FieldSpec(), "b": FieldSpec()},
            rules=(
                DateOrderRule(earlier="a", later="b", message="b before a"),
                RequiredRule(field="a", message="a required"),
                ValidDateRule(field="b", message="b invalid"),
                ValidDateRule(field="a", message="a invalid"),
            ),
        )
        result = validate({"a": "", "b": "nope"}, rule_set)
        assert [i.message for i in result.issues] == ["a required", "b invalid"]

    def test_malformed_operand_skips_ordering(self) -> None:
        rule_set = RuleSet(
            name="ordered",
            fields={"a": FieldSpec(), "b": FieldSpec()},
            rules=(
                ValidDateRule(field="a"),
                ValidDateRule(field="b"),
                DateOrderRule(earlier="a", later="b", message="b before a"),
            ),
        )
        result = validate({"a": 20240110, "b": "2024-01-05"}, rule_set)
        assert result.issues == [Issue(field="a", message="Expected string, received number")]

    def test_does_not_mutate_input(self, picks_rule_set: RuleSet) -> None:
        record = {"picks": ["a"], "extra": "x"}
        result = validate(record, picks_rule_set)
        result.record["picks"].append("b")
        assert record == {"picks": ["a"], "extra": "x"}

    def test_idempotent(self, picks_rule_set: RuleSet) -> None:
        first = validate({"picks": ("a", "b")}, picks_rule_set)
        second = validate(first.record, picks_rule_set)
        assert second == first

    def test_deterministic(self, picks_rule_set: RuleSet) -> None:
        record = {"picks": [], "note": 3}
        first = validate(record, picks_rule_set)
        second = validate(record, picks_rule_set)
        assert first.model_dump_json() == second.model_dump_json()

    def test_parallel_calls_match_sequential(self, picks_rule_set: RuleSet) -> None:
        records = [{"picks": ["a"] * (i % 3)} for i in range(30)]
        sequential = [validate(r, picks_rule_set) for r in records]
        with ThreadPoolExecutor(max_workers=4) as pool:
            parallel = list(pool.map(lambda r: validate(r, picks_rule_set), records))
        assert parallel == sequential


# ---------------------------------------------------------------------------
# ValidationEngine registry
# ---------------------------------------------------------------------------


class TestValidationEngine:
    def test_registers_bundled_forms(self, engine: ValidationEngine) -> None:
        names = [r.name for r in engine.rule_sets]
        assert names == ["checkboxes", "conditional_date", "sign_off_dates"]

    def test_register_custom(self, engine: ValidationEngine, picks_rule_set: RuleSet) -> None:
        engine.register(picks_rule_set)
        assert engine.get("picks") is picks_rule_set

    def test_duplicate_name_rejected(self, engine: ValidationEngine) -> None:
        with pytest.raises(ValueError, match="already registered"):
            engine.register(engine.get("checkboxes"))

    def test_unknown_name(self, engine: ValidationEngine) -> None:
        with pytest.raises(KeyError, match="Unknown rule set 'nope'"):
            engine.get("nope")

    def test_validate_by_name(self, engine: ValidationEngine) -> None:
        result = engine.validate("checkboxes", {"checkboxes": ["option1"]})
        assert result == Accepted(record={"checkboxes": ["option1"]})

    def test_validate_many_keeps_order(self, engine: ValidationEngine) -> None:
        results = engine.validate_many(
            "checkboxes",
            [{"checkboxes": []}, {"checkboxes": ["option2"]}, {}],
        )
        assert [r.accepted for r in results] == [False, True, False]

    def test_custom_catalog(self, tmp_path: Path, picks_rule_set: RuleSet) -> None:
        (tmp_path / "picks.json").write_text(picks_rule_set.model_dump_json())
        engine = ValidationEngine(catalog=FormCatalog(tmp_path))
        assert [r.name for r in engine.rule_sets] == ["picks"]
        assert engine.validate("picks", {"picks": []}).accepted is False

    def test_empty_catalog(self, tmp_path: Path) -> None:
        engine = ValidationEngine(catalog=FormCatalog(tmp_path))
        assert engine.rule_sets == []

    def test_rule_sets_round_trip_through_json(self, engine: ValidationEngine) -> None:
        for rule_set in engine.rule_sets:
            data = json.loads(rule_set.model_dump_json())
            assert RuleSet.model_validate(data) == rule_set
