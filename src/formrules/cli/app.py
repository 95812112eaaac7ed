"""formrules CLI application entry point.

Provides commands for listing bundled form rule sets, inspecting their
rules, validating JSON records against them, and exporting rule sets as
JSON configuration.

Usage:
    formrules forms
    formrules rules <form>
    formrules check <records.json> --form <form>
    formrules check <records.json> --rules-file <rule_set.json>
    formrules export <form> --output <path>
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from formrules.models.rules import RuleSet

app = typer.Typer(
    name="formrules",
    help="Declarative cross-field validation for form records.",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Show debug logging on stderr"),
    ] = False,
) -> None:
    """Configure logging for every command."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


@app.command()
def version() -> None:
    """Show the current version."""
    from formrules import __version__

    console.print(f"formrules {__version__}")


@app.command()
def forms() -> None:
    """List the bundled form rule sets."""
    from formrules.cli.display import display_forms
    from formrules.validation.engine import ValidationEngine

    engine = ValidationEngine()
    display_forms(engine.rule_sets, console)


@app.command()
def rules(
    form: Annotated[
        str,
        typer.Argument(help="Form name (e.g., checkboxes, sign_off_dates)"),
    ],
) -> None:
    """Show the fields and rules of one form."""
    from formrules.cli.display import display_rule_set

    rule_set = _resolve_rule_set(form, None)
    display_rule_set(rule_set, console)


@app.command()
def check(
    records_path: Annotated[
        Path,
        typer.Argument(help="JSON file holding one record object or an array of records"),
    ],
    form: Annotated[
        str | None,
        typer.Option("--form", "-f", help="Bundled form to validate against"),
    ] = None,
    rules_file: Annotated[
        Path | None,
        typer.Option("--rules-file", "-r", help="Rule set JSON file to validate against"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write validation results as JSON to this file"),
    ] = None,
) -> None:
    """Validate records against a form's rule set.

    Exits with code 1 if any record is rejected.
    """
    from formrules.cli.display import display_result, display_validation_summary
    from formrules.validation.engine import validate
    from formrules.validation.report import ValidationReport

    if form is None and rules_file is None:
        console.print("[bold red]Error:[/bold red] Provide --form or --rules-file.")
        raise typer.Exit(code=1)
    if form is not None and rules_file is not None:
        console.print("[bold red]Error:[/bold red] Use either --form or --rules-file, not both.")
        raise typer.Exit(code=1)

    rule_set = _resolve_rule_set(form, rules_file)
    records = _read_records(records_path)

    results = [validate(record, rule_set) for record in records]
    logger.debug("Validated {} records against {}", len(results), rule_set.name)

    for idx, result in enumerate(results, 1):
        display_result(result, console, title=f"Record {idx}")

    report = ValidationReport.from_results(rule_set.name, results)
    console.print()
    display_validation_summary(report, console)

    if output is not None:
        json_data = [r.model_dump() for r in results]
        output.write_text(json.dumps(json_data, indent=2))
        console.print(f"\n[green]Results written to {output}[/green]")

    if not report.all_accepted:
        raise typer.Exit(code=1)


@app.command()
def export(
    form: Annotated[
        str,
        typer.Argument(help="Form name to export"),
    ],
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Destination JSON file"),
    ],
) -> None:
    """Export a bundled form's rule set as JSON."""
    rule_set = _resolve_rule_set(form, None)
    output.write_text(rule_set.model_dump_json(indent=2))
    console.print(f"[green]Rule set '{rule_set.name}' written to {output}[/green]")


def _resolve_rule_set(form: str | None, rules_file: Path | None) -> RuleSet:
    """Load a rule set from a file, or look it up among bundled forms."""
    from formrules.reference.loader import load_rule_set
    from formrules.validation.engine import ValidationEngine

    if rules_file is not None:
        try:
            return load_rule_set(rules_file)
        except FileNotFoundError as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(code=1) from e
        except ValidationError as e:
            console.print(
                f"[bold red]Error:[/bold red] Invalid rule set in {rules_file}:\n{escape(str(e))}"
            )
            raise typer.Exit(code=1) from e

    engine = ValidationEngine()
    try:
        return engine.get(form or "")
    except KeyError as e:
        console.print(f"[bold red]Error:[/bold red] Form '{form}' not found.")
        available = [r.name for r in engine.rule_sets]
        console.print(f"Available forms: {', '.join(available)}")
        raise typer.Exit(code=1) from e


def _read_records(path: Path) -> list[dict]:
    """Read one record or a list of records from a JSON file."""
    if not path.is_file():
        console.print(f"[bold red]Error:[/bold red] File not found: {path}")
        raise typer.Exit(code=1)

    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        console.print(f"[bold red]Error:[/bold red] Invalid JSON in {path}: {escape(str(e))}")
        raise typer.Exit(code=1) from e

    records = data if isinstance(data, list) else [data]
    if not all(isinstance(r, dict) for r in records):
        console.print(
            "[bold red]Error:[/bold red] Records must be JSON objects "
            "mapping field names to values."
        )
        raise typer.Exit(code=1)
    return records
