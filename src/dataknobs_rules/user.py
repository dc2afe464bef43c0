"""Composite builders for user account fields: name, email, password.

These builders assemble several checks per field. Which checks are included
depends on boolean options; the order of the included checks is fixed.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from . import validators
from .builders import value_check
from .check import Check, CheckChain
from .messages import between, join_values, name_charset
from .options import EmailOptions, NameOptions, PasswordOptions, configure

NAME_PATTERNS = {
    # (allow_spaces, allow_special_chars)
    (True, True): re.compile(r"^[a-zA-Z\s\-_']+\Z"),
    (False, True): re.compile(r"^[a-zA-Z\-_']+\Z"),
    (True, False): re.compile(r"^[a-zA-Z\s]+\Z"),
    (False, False): re.compile(r"^[a-zA-Z]+\Z"),
}


@dataclass(frozen=True)
class CheckSpec:
    """One entry of a builder's check menu.

    Attributes:
        name: Tag of the resulting check
        enabled: Option flag that switches the check on, or None if always on
        test: Pure function of the (prepared) value
        message: Message template; ``{field}`` is filled in at build time
    """

    name: str
    enabled: str | None
    test: Callable[[Any], bool]
    message: str

    def build(self, field: str, prepare: Callable[[Any], Any] | None = None) -> Check:
        return value_check(field, self.name, self.test, self.message.format(field=field), prepare)


def select(menu: list[CheckSpec], options: Any) -> list[CheckSpec]:
    """Entries whose flag is unset or true in options, in menu order."""
    return [spec for spec in menu if spec.enabled is None or getattr(options, spec.enabled)]


def check_name(field_name: str = "name", options: NameOptions | None = None, **overrides: Any) -> CheckChain:
    """Person name: trimmed length within bounds, then allowed characters.

    Example:
        ```python
        chain = check_name("first_name", allow_special_chars=True)
        ```
    """
    opts = configure(NameOptions, options, overrides, "check_name")
    regex = NAME_PATTERNS[(opts.allow_spaces, opts.allow_special_chars)]
    return CheckChain(field_name, [
        value_check(
            field_name,
            "length",
            lambda value: validators.length_between(value, opts.min, opts.max),
            between(field_name, opts.min, opts.max, "characters long"),
            prepare=validators.trim,
        ),
        value_check(
            field_name,
            "pattern",
            lambda value: validators.matches(value, regex),
            f"{field_name} can only contain {name_charset(opts.allow_spaces, opts.allow_special_chars)}",
            prepare=validators.trim,
        ),
    ])


def _optional(test: Callable[[Any], bool]) -> Callable[[Any], bool]:
    """Let empty values through so an optional field is only checked when present."""

    def wrapped(value: Any) -> bool:
        if not validators.is_not_empty(value):
            return True
        return test(value)

    return wrapped


def check_email(field_name: str = "email", options: EmailOptions | None = None, **overrides: Any) -> CheckChain:
    """E-mail address: present (if required), well-formed, from an allowed domain.

    The domain check is only added when ``allowed_domains`` is non-empty.
    """
    opts = configure(EmailOptions, options, overrides, "check_email")
    checks = []
    if opts.required:
        checks.append(value_check(
            field_name,
            "required",
            validators.is_not_empty,
            f"{field_name} is required",
            prepare=validators.trim,
        ))

    def guard(test: Callable[[Any], bool]) -> Callable[[Any], bool]:
        return test if opts.required else _optional(test)

    checks.append(value_check(
        field_name,
        "email",
        guard(validators.is_email),
        f"{field_name} must be a valid email address",
        prepare=validators.trim,
    ))
    if opts.allowed_domains:
        domains = validators.email_domain_pattern(opts.allowed_domains)
        checks.append(value_check(
            field_name,
            "domain",
            guard(lambda value: validators.matches(value, domains)),
            f"{field_name} must be from an allowed domain ({join_values(opts.allowed_domains)})",
            prepare=validators.trim,
        ))
    return CheckChain(field_name, checks)


def password_menu(options: PasswordOptions) -> list[CheckSpec]:
    """All password checks in precedence order, each tagged with its option flag."""
    special = re.compile(f"[{re.escape(options.special_chars)}]")
    return [
        CheckSpec(
            "length",
            None,
            lambda value: validators.length_between(value, options.min_length, options.max_length),
            "{field} must be between " f"{options.min_length} and {options.max_length} characters long",
        ),
        CheckSpec(
            "uppercase",
            "require_uppercase",
            lambda value: validators.matches(value, r"[A-Z]"),
            "{field} must contain at least one uppercase letter",
        ),
        CheckSpec(
            "lowercase",
            "require_lowercase",
            lambda value: validators.matches(value, r"[a-z]"),
            "{field} must contain at least one lowercase letter",
        ),
        CheckSpec(
            "number",
            "require_number",
            lambda value: validators.matches(value, r"\d"),
            "{field} must contain at least one number",
        ),
        CheckSpec(
            "special_char",
            "require_special_char",
            lambda value: validators.matches(value, special),
            "{field} must contain at least one special character",
        ),
    ]


def check_password(field_name: str = "password", options: PasswordOptions | None = None, **overrides: Any) -> CheckChain:
    """Password: trimmed length within bounds plus one check per required character class.

    Each enabled requirement is a separate check, so a password missing two
    classes yields two distinct messages.

    Example:
        ```python
        chain = check_password(min_length=12, require_special_char=False)
        chain.names  # ['length', 'uppercase', 'lowercase', 'number']
        ```
    """
    opts = configure(PasswordOptions, options, overrides, "check_password")
    return CheckChain(field_name, [
        spec.build(field_name, prepare=validators.trim)
        for spec in select(password_menu(opts), opts)
    ])
