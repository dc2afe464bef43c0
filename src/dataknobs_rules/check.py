"""Check and CheckChain: the units builders produce and pipelines consume.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any, Union

from .exceptions import StoreAccessError
from .result import CheckResult, FieldReport, ValidationContext

Predicate = Callable[[Any, ValidationContext], Union[bool, Awaitable[bool]]]
Message = Union[str, Callable[[Any], str]]


@dataclass(frozen=True)
class Check:
    """A single predicate plus the message reported when it fails.

    Checks hold only immutable configuration captured when the builder ran,
    so one instance can be evaluated any number of times, concurrently, on
    different values.

    Attributes:
        field: Field the check applies to
        predicate: ``(value, context) -> bool`` or a coroutine function
            returning bool
        message: Failure message, or a function of the value returning one
        name: Short tag identifying the check within its chain
        prepare: Optional pure transform applied to the value before the
            predicate runs (trimming, case normalization)
    """

    field: str
    predicate: Predicate
    message: Message
    name: str = "check"
    prepare: Callable[[Any], Any] | None = None

    @property
    def is_async(self) -> bool:
        return inspect.iscoroutinefunction(self.predicate)

    def resolve_message(self, value: Any) -> str:
        """Produce the failure message for a value."""
        if callable(self.message):
            return self.message(value)
        return self.message

    async def evaluate(self, value: Any, context: ValidationContext | None = None) -> CheckResult:
        """Evaluate the check against a value.

        Sync and async predicates are handled the same way; the caller always
        awaits. Store errors become FAULT results rather than failures.

        Args:
            value: Value to validate
            context: Optional validation context

        Returns:
            CheckResult with the outcome
        """
        if context is None:
            context = ValidationContext(field=self.field)
        if self.prepare is not None:
            value = self.prepare(value)

        try:
            outcome = self.predicate(value, context)
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except StoreAccessError as e:
            return CheckResult.fault(self.field, value, e, check=self.name)

        if not isinstance(outcome, bool):
            return CheckResult.failure(
                self.field,
                value,
                f"Check '{self.name}' on {self.field} returned unexpected type: "
                f"{type(outcome).__name__}",
                check=self.name,
            )
        if outcome:
            return CheckResult.success(self.field, value, check=self.name)
        return CheckResult.failure(self.field, value, self.resolve_message(value), check=self.name)


class CheckChain(Sequence):
    """Ordered, immutable sequence of checks for one field.

    The chain never decides whether to stop after a failure; ``run`` only
    stops early when the caller asks it to with ``bail=True``.
    """

    def __init__(self, field: str, checks: Sequence[Check] = ()):
        """Initialize the chain.

        Args:
            field: Field all checks apply to
            checks: Checks in evaluation order
        """
        for check in checks:
            if check.field != field:
                raise ValueError(
                    f"Check '{check.name}' targets '{check.field}', not '{field}'"
                )
        self._field = field
        self._checks = tuple(checks)

    @property
    def field(self) -> str:
        return self._field

    @property
    def checks(self) -> tuple[Check, ...]:
        return self._checks

    @property
    def names(self) -> list[str]:
        return [check.name for check in self._checks]

    def __getitem__(self, index):  # type: ignore[override]
        if isinstance(index, slice):
            return CheckChain(self._field, self._checks[index])
        return self._checks[index]

    def __len__(self) -> int:
        return len(self._checks)

    def __iter__(self) -> Iterator[Check]:
        return iter(self._checks)

    def __add__(self, other: CheckChain) -> CheckChain:
        """Concatenate two chains for the same field."""
        if not isinstance(other, CheckChain):
            return NotImplemented
        if other.field != self._field:
            raise ValueError(f"Cannot join chains for '{self._field}' and '{other.field}'")
        return CheckChain(self._field, self._checks + other.checks)

    def __repr__(self) -> str:
        return f"CheckChain({self._field!r}, {self.names!r})"

    async def run(
        self,
        value: Any,
        context: ValidationContext | None = None,
        bail: bool = False,
    ) -> FieldReport:
        """Evaluate every check in declaration order.

        Args:
            value: Value to validate
            context: Optional validation context
            bail: If True, stop at the first check that does not pass

        Returns:
            FieldReport with one result per evaluated check
        """
        if context is None:
            context = ValidationContext(field=self._field)
        report = FieldReport(field=self._field, value=value)
        for check in self._checks:
            result = await check.evaluate(value, context)
            report.results.append(result)
            if bail and not result.passed:
                break
        return report
