"""Result types with consistent, predictable behavior.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field as dataclass_field
from enum import Enum
from typing import Any

from .exceptions import RuleValidationError, StoreAccessError


class CheckStatus(Enum):
    """Outcome of evaluating a single check."""

    PASSED = "passed"
    FAILED = "failed"
    FAULT = "fault"


@dataclass
class CheckResult:
    """Uniform result of one check, whether it ran synchronously or not.

    A FAILED result carries the resolved failure message. A FAULT result
    carries the store error that prevented the check from deciding.
    """

    field: str
    status: CheckStatus
    value: Any = None
    check: str = ""
    message: str | None = None
    error: StoreAccessError | None = None

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check that the check passed."""
        return self.status is CheckStatus.PASSED

    @property
    def passed(self) -> bool:
        return self.status is CheckStatus.PASSED

    @property
    def failed(self) -> bool:
        return self.status is CheckStatus.FAILED

    @property
    def is_fault(self) -> bool:
        return self.status is CheckStatus.FAULT

    @classmethod
    def success(cls, field: str, value: Any, check: str = "") -> CheckResult:
        return cls(field=field, status=CheckStatus.PASSED, value=value, check=check)

    @classmethod
    def failure(cls, field: str, value: Any, message: str, check: str = "") -> CheckResult:
        return cls(
            field=field,
            status=CheckStatus.FAILED,
            value=value,
            check=check,
            message=message,
        )

    @classmethod
    def fault(cls, field: str, value: Any, error: StoreAccessError, check: str = "") -> CheckResult:
        return cls(
            field=field,
            status=CheckStatus.FAULT,
            value=value,
            check=check,
            message=str(error),
            error=error,
        )


@dataclass
class FieldReport:
    """Outcome of running one or more check chains against a field's value."""

    field: str
    value: Any = None
    results: list[CheckResult] = dataclass_field(default_factory=list)

    @property
    def valid(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def errors(self) -> list[str]:
        """Failure messages in check order (faults excluded)."""
        return [result.message for result in self.results if result.failed and result.message]

    @property
    def faults(self) -> list[StoreAccessError]:
        return [result.error for result in self.results if result.is_fault and result.error]

    def merge(self, other: FieldReport) -> FieldReport:
        """Combine reports for the same field.

        Args:
            other: Another FieldReport for this field

        Returns:
            New FieldReport with results of both, self first
        """
        return FieldReport(
            field=self.field,
            value=self.value,
            results=self.results + other.results,
        )


@dataclass
class ValidationReport:
    """Per-field aggregation of check outcomes for one record."""

    fields: dict[str, FieldReport] = dataclass_field(default_factory=dict)

    def __bool__(self) -> bool:
        """Allow 'if report:' usage to check validity."""
        return self.valid

    @property
    def valid(self) -> bool:
        return all(report.valid for report in self.fields.values())

    @property
    def errors(self) -> dict[str, list[str]]:
        """Failure messages keyed by field, only for fields with failures."""
        return {
            name: report.errors
            for name, report in self.fields.items()
            if report.errors
        }

    @property
    def faults(self) -> dict[str, list[StoreAccessError]]:
        return {
            name: report.faults
            for name, report in self.fields.items()
            if report.faults
        }

    @property
    def has_faults(self) -> bool:
        return any(report.faults for report in self.fields.values())

    def add(self, report: FieldReport) -> ValidationReport:
        """Add a field report, merging with an existing one (fluent API)."""
        existing = self.fields.get(report.field)
        self.fields[report.field] = existing.merge(report) if existing else report
        return self

    def raise_for_faults(self) -> None:
        """Re-raise the first store fault, if any."""
        for errors in self.faults.values():
            raise errors[0]

    def raise_for_errors(self) -> None:
        """Raise RuleValidationError if any field failed validation."""
        errors = self.errors
        if errors:
            raise RuleValidationError(errors)

    def to_dict(self) -> dict[str, Any]:
        """Convert the report to a JSON-friendly dictionary."""
        return {
            "valid": self.valid,
            "errors": self.errors,
            "faults": {
                name: [str(error) for error in errors]
                for name, errors in self.faults.items()
            },
        }


@dataclass
class ValidationContext:
    """Read-only view handed to every predicate during one validation pass.

    Checks never write to the context; it exists so predicates can see the
    record they belong to and any caller-supplied metadata.
    """

    record: dict[str, Any] = dataclass_field(default_factory=dict)
    field: str | None = None
    metadata: dict[str, Any] = dataclass_field(default_factory=dict)

    def for_field(self, name: str) -> ValidationContext:
        """Derive a context scoped to one field, sharing record and metadata."""
        return ValidationContext(record=self.record, field=name, metadata=self.metadata)

    def get_metadata(self, key: str, default: Any = None) -> Any:
        """Retrieve metadata from the context.

        Args:
            key: Metadata key
            default: Default value if key not found

        Returns:
            Metadata value or default
        """
        return self.metadata.get(key, default)
