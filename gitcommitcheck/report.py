"""Build the aggregate report of a validation run."""
from typing import Sequence

from .models import CommitRange, Report, ValidationResult


class ReportBuilder:
    """Assembles a Report from a range and its validation results.

    Building is pure: the same range and results always give an equal
    report. A range without commits is valid by definition.
    """

    def build(self, commit_range: CommitRange, results: Sequence[ValidationResult]) -> Report:
        invalid_count = sum(1 for result in results if not result.valid)
        return Report(
            commits_valid=invalid_count == 0,
            total_count=len(results),
            invalid_count=invalid_count,
            range=commit_range,
            results=tuple(results),
        )
