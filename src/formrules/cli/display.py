"""Rich display helpers for terminal output.

Provides formatted display functions for rule set listings, rule set
detail, per-record validation results and batch validation summaries
using Rich tables and panels.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from formrules.models.record import Accepted, Rejected
from formrules.models.rules import ConditionalRule, DateOrderRule, OneOfRule, RuleSet
from formrules.validation.report import ValidationReport


def display_forms(rule_sets: list[RuleSet], console: Console) -> None:
    """Print a summary table of available rule sets.

    Columns: Form, Fields, Rules, Description

    Args:
        rule_sets: Rule sets to list.
        console: Rich Console for output.
    """
    table = Table(title="Forms", show_lines=True)
    table.add_column("Form", style="bold cyan", no_wrap=True)
    table.add_column("Fields")
    table.add_column("Rules", justify="right", style="green")
    table.add_column("Description", max_width=50)

    for rule_set in sorted(rule_sets, key=lambda r: r.name):
        table.add_row(
            rule_set.name,
            ", ".join(rule_set.fields),
            str(len(rule_set.rules)),
            rule_set.description or "-",
        )

    console.print(table)
    console.print(f"\n[bold]{len(rule_sets)}[/bold] forms available")


def _rule_detail(rule: object) -> str:
    if isinstance(rule, ConditionalRule):
        nested = "; ".join(f"{r.kind} {r.field}: {r.message}" for r in rule.then)
        return f"when {rule.discriminant} == {rule.equals!r}: {nested}"
    if isinstance(rule, DateOrderRule):
        return f"{rule.earlier} <= {rule.later}: {rule.message}"
    if isinstance(rule, OneOfRule):
        return f"one of {', '.join(rule.choices)}: {rule.message}"
    return getattr(rule, "message", "")


def display_rule_set(rule_set: RuleSet, console: Console) -> None:
    """Print the fields and rules of one rule set.

    Args:
        rule_set: RuleSet to display.
        console: Rich Console for output.
    """
    header = Text()
    header.append(rule_set.name, style="bold cyan")
    if rule_set.description:
        header.append(f"\n{rule_set.description}")
    console.print(Panel(header, title="Form", expand=False))

    field_table = Table(title="Fields", show_lines=True)
    field_table.add_column("Field", style="bold", no_wrap=True)
    field_table.add_column("Type")
    field_table.add_column("Label")
    field_table.add_column("Initial", style="dim")

    for name, spec in rule_set.fields.items():
        field_table.add_row(
            name,
            str(spec.type),
            spec.label or "-",
            Text(repr(spec.initial_value())) if spec.initial is not None else "-",
        )
    console.print(field_table)

    rule_table = Table(title="Rules", show_lines=True)
    rule_table.add_column("#", justify="right", style="dim", width=4)
    rule_table.add_column("Phase", no_wrap=True)
    rule_table.add_column("Kind", style="bold", no_wrap=True)
    rule_table.add_column("Field", no_wrap=True)
    rule_table.add_column("Detail", max_width=60)

    for idx, rule in enumerate(rule_set.rules, 1):
        rule_table.add_row(
            str(idx),
            str(rule.family),
            rule.kind,
            rule.target,
            _rule_detail(rule),
        )
    console.print(rule_table)


def display_result(
    result: Accepted | Rejected,
    console: Console,
    *,
    title: str = "Record",
) -> None:
    """Print one validation result.

    Accepted results show a one-line status; rejected results list every
    issue in evaluation order.

    Args:
        result: Validation result to display.
        console: Rich Console for output.
        title: Label for the record (e.g., 'Record 3').
    """
    if result.accepted:
        console.print(f"[bold]{title}:[/bold] [bold green]ACCEPTED[/bold green]")
        return

    table = Table(title=f"{title}: REJECTED ({len(result.issues)} issues)", show_lines=True)
    table.add_column("#", justify="right", style="dim", width=4)
    table.add_column("Field", style="bold", no_wrap=True)
    table.add_column("Message", style="red")

    for idx, issue in enumerate(result.issues, 1):
        table.add_row(str(idx), issue.field, Text(issue.message))

    console.print(table)


def display_validation_summary(report: ValidationReport, console: Console) -> None:
    """Print a batch validation summary with Rich formatting.

    Shows record counts, acceptance rate, and a per-field issue breakdown.

    Args:
        report: ValidationReport to display.
        console: Rich Console for output.
    """
    table = Table(title="Validation Summary", show_lines=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Form", report.form)
    table.add_row("Records", str(report.record_count))
    table.add_row("Accepted", Text(str(report.accepted_count), style="green"))

    rejected_style = "bold red" if report.rejected_count > 0 else "green"
    table.add_row("Rejected", Text(str(report.rejected_count), style=rejected_style))
    table.add_row("Issues", str(report.issue_count))
    table.add_row("Acceptance Rate", f"{report.acceptance_rate:.0%}")

    console.print(table)

    if report.issues_by_field:
        field_table = Table(title="Issues by Field", show_lines=True)
        field_table.add_column("Field", style="bold cyan")
        field_table.add_column("Issues", justify="right", style="bold red")

        for field_name in sorted(report.issues_by_field):
            field_table.add_row(field_name, str(report.issues_by_field[field_name]))

        console.print(field_table)
