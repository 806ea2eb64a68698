"""Shared models for git-commit-check."""
from typing import Tuple
from dataclasses import dataclass
from pydantic import BaseModel, ConfigDict, Field, model_validator

SHORT_SHA_LENGTH = 8


@dataclass(frozen=True)
class CommitRecord:
    sha: str
    message: str

    @property
    def short_sha(self) -> str:
        return self.sha[:SHORT_SHA_LENGTH]


class CommitRange(BaseModel):
    """Boundaries of the commits to inspect (exclusive from, inclusive to)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_ref: str = Field(alias="from", description="Exclusive start of the range")
    to_ref: str = Field(alias="to", description="Inclusive end of the range")
    base_branch: str = Field(description="Integration branch used for merge-base resolution")


class ValidationOutcome(BaseModel):
    """Verdict returned by a rule engine for a single message."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    sha: str
    short_sha: str = Field(serialization_alias="shortSha")
    message: str
    valid: bool
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()

    @classmethod
    def from_outcome(cls, commit: CommitRecord, outcome: ValidationOutcome) -> "ValidationResult":
        return cls(
            sha=commit.sha,
            short_sha=commit.short_sha,
            message=commit.message,
            valid=outcome.valid,
            errors=outcome.errors,
            warnings=outcome.warnings,
        )


class Report(BaseModel):
    """Aggregate summary of one validation run."""

    model_config = ConfigDict(frozen=True)

    commits_valid: bool
    total_count: int = Field(ge=0)
    invalid_count: int = Field(ge=0)
    range: CommitRange
    results: Tuple[ValidationResult, ...] = ()

    @model_validator(mode="after")
    def _check_counts(self) -> "Report":
        if self.total_count != len(self.results):
            raise ValueError("total_count must equal the number of results")
        if self.invalid_count != sum(1 for r in self.results if not r.valid):
            raise ValueError("invalid_count must equal the number of invalid results")
        if self.commits_valid != (self.invalid_count == 0):
            raise ValueError("commits_valid must be true exactly when invalid_count is 0")
        return self

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
