"""Validation report model.

Aggregates the results of validating a batch of records against one form
into counts per field and per message, plus an acceptance rate. Also
provides the field -> message mapping a form renderer needs.
"""

from __future__ import annotations

from collections import Counter

from pydantic import BaseModel, Field

from formrules.models.record import Accepted, Rejected


def messages_by_field(result: Accepted | Rejected, *, first: bool = False) -> dict[str, str]:
    """Map each field to the single message a renderer should show.

    Args:
        result: A validation result.
        first: Keep the first issue per field instead of the last one.

    Returns:
        Field name -> message, in order of each field's first issue.
    """
    messages: dict[str, str] = {}
    for issue in result.issues:
        if first and issue.field in messages:
            continue
        messages[issue.field] = issue.message
    return messages


class ValidationReport(BaseModel):
    """Aggregated validation report for a batch of records of one form.

    The all_accepted flag indicates whether every record in the batch
    passed validation.
    """

    form: str = Field(..., description="Name of the rule set used")
    results: list[Accepted | Rejected] = Field(
        default_factory=list, description="Per-record results, in input order"
    )
    record_count: int = Field(default=0, description="Number of records validated")
    accepted_count: int = Field(default=0, description="Number of accepted records")
    rejected_count: int = Field(default=0, description="Number of rejected records")
    issue_count: int = Field(default=0, description="Total issues across all records")
    acceptance_rate: float = Field(
        default=1.0,
        description="Fraction of records accepted (0.0 to 1.0)",
    )
    issues_by_field: dict[str, int] = Field(
        default_factory=dict, description="Field -> number of issues"
    )
    issues_by_message: dict[str, int] = Field(
        default_factory=dict, description="Message -> number of occurrences"
    )

    @property
    def all_accepted(self) -> bool:
        """True if no record was rejected."""
        return self.rejected_count == 0

    @classmethod
    def from_results(cls, form: str, results: list[Accepted | Rejected]) -> ValidationReport:
        """Create a ValidationReport by computing summaries from raw results.

        Args:
            form: Name of the rule set the records were validated against.
            results: Per-record validation results.

        Returns:
            ValidationReport with all counts populated.
        """
        accepted = sum(1 for r in results if r.accepted)
        by_field: Counter[str] = Counter()
        by_message: Counter[str] = Counter()
        for result in results:
            for issue in result.issues:
                by_field[issue.field] += 1
                by_message[issue.message] += 1

        return cls(
            form=form,
            results=list(results),
            record_count=len(results),
            accepted_count=accepted,
            rejected_count=len(results) - accepted,
            issue_count=sum(by_field.values()),
            acceptance_rate=accepted / len(results) if results else 1.0,
            issues_by_field=dict(by_field),
            issues_by_message=dict(by_message),
        )
