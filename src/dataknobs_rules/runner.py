"""RuleSet: a small pipeline that evaluates check chains against a record.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from .check import CheckChain
from .result import FieldReport, ValidationContext, ValidationReport

logger = logging.getLogger(__name__)

_MISSING = object()


def get_value(record: Mapping[str, Any], path: str) -> Any:
    """Extract a field value, following dotted paths into nested mappings.

    A top-level key containing a dot wins over the nested interpretation.
    Missing values come back as None.
    """
    if path in record:
        return record[path]
    current: Any = record
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part, _MISSING)
        if current is _MISSING:
            return None
    return current


class RuleSet:
    """Named collection of check chains with a fluent API.

    Chains for different fields are evaluated concurrently. Chains for the
    same field run one after another in the order they were added, and the
    checks inside a chain always run in declaration order.
    """

    def __init__(self, name: str = "rules", bail: bool = False):
        """Initialize rule set.

        Args:
            name: Rule set name for identification
            bail: If True, stop evaluating a field after its first failing check
        """
        self.name = name
        self.bail = bail
        self.chains: dict[str, list[CheckChain]] = {}

    def add(self, *chains: CheckChain) -> RuleSet:
        """Add chains (fluent API).

        Returns:
            Self for chaining
        """
        for chain in chains:
            if not isinstance(chain, CheckChain):
                raise TypeError(f"Expected CheckChain, got {type(chain).__name__}")
            self.chains.setdefault(chain.field, []).append(chain)
        return self

    @property
    def fields(self) -> list[str]:
        return list(self.chains)

    def __len__(self) -> int:
        return sum(len(chain) for chains in self.chains.values() for chain in chains)

    async def validate_field(
        self,
        field: str,
        value: Any,
        context: ValidationContext | None = None,
    ) -> FieldReport:
        """Run every chain registered for one field.

        Args:
            field: Field name
            value: Value to validate
            context: Optional validation context

        Returns:
            FieldReport for the field
        """
        context = (context or ValidationContext()).for_field(field)
        report = FieldReport(field=field, value=value)
        for chain in self.chains.get(field, []):
            chain_report = await chain.run(value, context, bail=self.bail)
            report = report.merge(chain_report)
            if self.bail and not chain_report.valid:
                break
        logger.debug(
            f"Rule set '{self.name}' field '{field}': "
            f"{len(report.results)} checks, {len(report.errors)} errors"
        )
        return report

    async def validate(
        self,
        record: Mapping[str, Any],
        metadata: dict[str, Any] | None = None,
    ) -> ValidationReport:
        """Validate a record against every registered chain.

        Args:
            record: Mapping of field values
            metadata: Optional metadata made visible to predicates

        Returns:
            ValidationReport aggregating messages per field
        """
        context = ValidationContext(record=dict(record), metadata=dict(metadata or {}))
        reports = await asyncio.gather(*[
            self.validate_field(field, get_value(record, field), context)
            for field in self.chains
        ])

        result = ValidationReport()
        for report in reports:
            result.add(report)
        if not result.valid:
            logger.debug(f"Rule set '{self.name}' rejected fields: {sorted(result.errors)}")
        return result

    def validate_sync(
        self,
        record: Mapping[str, Any],
        metadata: dict[str, Any] | None = None,
    ) -> ValidationReport:
        """Validate from code that is not running an event loop."""
        return asyncio.run(self.validate(record, metadata))

    def to_dict(self) -> dict[str, Any]:
        """Describe the rule set: field names mapped to check names."""
        return {
            "name": self.name,
            "bail": self.bail,
            "fields": {
                field: [name for chain in chains for name in chain.names]
                for field, chains in self.chains.items()
            },
        }
