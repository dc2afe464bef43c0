"""Exception hierarchy for the rules package.

Three kinds of failure are kept apart so that a pipeline never confuses a
misconfigured rule or an unreachable store with bad user input:

- Value-validation failures are not exceptions at all. They travel as
  failed ``CheckResult`` objects with a message.
- ``RuleConfigurationError`` is a programmer error raised while a chain is
  being built (for example a uniqueness builder called without a store).
- ``StoreAccessError`` wraps any error raised by a backing store lookup and
  is reported as a FAULT outcome for that check.

Example:
    ```python
    from dataknobs_rules import check_unique_email, RuleConfigurationError

    try:
        check_unique_email("email")  # no store supplied
    except RuleConfigurationError as e:
        logger.error(f"Bad rule setup: {e} ({e.context})")
    ```
"""

from typing import Any, Dict


class RulesError(Exception):
    """Base exception for the rules package.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context (field names, criteria, etc.)
        details: Alternative to context (both are supported)
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.context = details or context or {}
        self.details = self.context


class RuleConfigurationError(RulesError):
    """Raised when a builder is invoked with unusable configuration.

    Always raised at chain-construction time, never while a value is being
    validated.

    Example:
        ```python
        raise RuleConfigurationError(
            "check_unique requires a store with a find_one method",
            context={"field": "username", "builder": "check_unique"}
        )
        ```
    """

    pass


class StoreAccessError(RulesError):
    """Raised when a backing store lookup fails.

    Distinct from a value that is merely not unique: the store could not
    answer the question at all.
    """

    def __init__(self, field: str, criteria: Dict[str, Any], store: Any, message: str):
        self.field = field
        self.criteria = dict(criteria)
        super().__init__(
            f"Store lookup for '{field}' failed: {message}",
            context={
                "field": field,
                "criteria": self.criteria,
                "store": type(store).__name__,
            },
        )


class RuleValidationError(RulesError):
    """Raised on request when a validated record has failing fields."""

    def __init__(self, errors: Dict[str, list[str]]):
        self.errors = {name: list(messages) for name, messages in errors.items()}
        fields = ", ".join(sorted(self.errors))
        super().__init__(
            f"Validation failed for fields: {fields}",
            context={"errors": self.errors},
        )


__all__ = [
    "RulesError",
    "RuleConfigurationError",
    "StoreAccessError",
    "RuleValidationError",
]
