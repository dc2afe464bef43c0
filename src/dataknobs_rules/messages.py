"""Message formatting helpers.

Messages are built once, when a builder runs, from the field name and the
configured parameters.
"""

from collections.abc import Callable, Iterable
from typing import Any


def join_values(values: Iterable[Any]) -> str:
    """Render allowed values as a comma separated list."""
    return ", ".join(str(value) for value in values)


def between(field: str, min: Any, max: Any, unit: str = "") -> str:
    suffix = f" {unit}" if unit else ""
    return f"{field} must be between {min} and {max}{suffix}"


def name_charset(allow_spaces: bool, allow_special_chars: bool) -> str:
    """Describe the characters a name may contain."""
    allowed = "letters, spaces" if allow_spaces else "letters"
    if allow_special_chars:
        allowed += ", hyphens, apostrophes, and underscores"
    return allowed


def not_in_set(field: str, values: Iterable[Any], noun: str) -> Callable[[Any], str]:
    """Message naming the rejected value and the allowed set.

    The allowed set is rendered immediately; only the offending value is
    filled in at report time.
    """
    allowed = join_values(values)

    def render(value: Any) -> str:
        return f"{value} is not a valid {noun} ({field} must be one of: {allowed})"

    return render
