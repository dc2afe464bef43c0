"""Builder catalog for common field rules.

Each builder takes a field name plus options and returns a ``CheckChain``.
The chain is opaque to callers; they hand it to a pipeline (for example
``RuleSet``) which evaluates it against the field's value.

Example:
    ```python
    from dataknobs_rules import RuleSet, check_url, check_unique_email

    rules = RuleSet("signup").add(
        check_url("homepage"),
        check_unique_email(store=users),
    )
    report = await rules.validate({"homepage": "https://acme.io", "email": "a@acme.io"})
    ```
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

import phonenumbers

from . import validators
from .check import Check, CheckChain, Message
from .exceptions import RuleConfigurationError
from .messages import between, join_values, not_in_set
from .options import (
    DEFAULT_POSTAL_LOCALE,
    DEFAULT_ROLES,
    DEFAULT_TIMEZONES,
    GENDER_OPTIONS,
    LOCALIZED_DATE_FORMAT,
    POSTAL_CODE_PATTERNS,
    ArrayOptions,
    CityOptions,
    CurrencyOptions,
    DateOptions,
    LengthOptions,
    LocalizedEmailOptions,
    MembershipOptions,
    PatternOptions,
    PhoneOptions,
    PostalCodeOptions,
    RangeOptions,
    UniqueOptions,
    UrlOptions,
    configure,
    fill_defaults,
)
from .uniqueness import require_store, unique_predicate


def value_check(
    field: str,
    name: str,
    test: Callable[[Any], bool],
    message: Message,
    prepare: Callable[[Any], Any] | None = None,
) -> Check:
    """Wrap a single-value test as a Check.

    Args:
        field: Field the check applies to
        name: Tag for the check within its chain
        test: Pure function of the value
        message: Failure message or message function
        prepare: Optional transform applied before the test

    Returns:
        Check whose predicate ignores the context
    """

    def predicate(value: Any, context: Any) -> bool:
        return test(value)

    return Check(field=field, predicate=predicate, message=message, name=name, prepare=prepare)


# Format checks

def check_url(field_name: str = "url", options: UrlOptions | None = None, **overrides: Any) -> CheckChain:
    opts = configure(UrlOptions, options, overrides, "check_url")
    return CheckChain(field_name, [
        value_check(
            field_name,
            "url",
            lambda value: validators.is_url(
                value,
                protocols=opts.protocols,
                require_protocol=opts.require_protocol,
                require_tld=opts.require_tld,
            ),
            f"{field_name} must be a valid URL",
        ),
    ])


def _phone_locale(locale: str, builder: str) -> str:
    region = validators.phone_region(locale)
    if region is not None and region not in phonenumbers.SUPPORTED_REGIONS:
        raise RuleConfigurationError(
            f"{builder} got an unsupported locale: {locale}",
            context={"builder": builder, "locale": locale},
        )
    return locale


def check_phone_number(field_name: str = "phone", options: PhoneOptions | None = None, **overrides: Any) -> CheckChain:
    """Mobile phone number in any region."""
    opts = configure(PhoneOptions, options, overrides, "check_phone_number")
    locale = _phone_locale(opts.locale, "check_phone_number")
    return CheckChain(field_name, [
        value_check(
            field_name,
            "phone",
            lambda value: validators.is_mobile_phone(value, locale),
            f"{field_name} must be a valid phone number",
        ),
    ])


def check_phone_number_by_locale(
    field_name: str = "phone",
    options: PhoneOptions | None = None,
    **overrides: Any,
) -> CheckChain:
    """Mobile phone number for a specific locale, e.g. ``en-GB``."""
    opts = configure(PhoneOptions, options, overrides, "check_phone_number_by_locale")
    locale = _phone_locale(opts.locale, "check_phone_number_by_locale")
    return CheckChain(field_name, [
        value_check(
            field_name,
            "phone",
            lambda value: validators.is_mobile_phone(value, locale),
            f"{field_name} must be a valid phone number for locale {locale}",
        ),
    ])


def check_date(field_name: str = "date", options: DateOptions | None = None, **overrides: Any) -> CheckChain:
    opts = configure(DateOptions, options, overrides, "check_date")
    opts = fill_defaults(opts, format=validators.DEFAULT_DATE_FORMAT)
    return CheckChain(field_name, [
        value_check(
            field_name,
            "date",
            lambda value: validators.is_date(value, opts.format, opts.strict),
            f"{field_name} must be a valid date",
        ),
    ])


def check_localized_date(field_name: str = "date", options: DateOptions | None = None, **overrides: Any) -> CheckChain:
    """Date in a caller-chosen format such as ``DD/MM/YYYY``. Defaults to ``YYYY-MM-DD``."""
    opts = configure(DateOptions, options, overrides, "check_localized_date")
    opts = fill_defaults(opts, format=LOCALIZED_DATE_FORMAT)
    return CheckChain(field_name, [
        value_check(
            field_name,
            "date",
            lambda value: validators.is_date(value, opts.format, opts.strict),
            f"{field_name} must be in the format {opts.format}",
        ),
    ])


def check_credit_card(field_name: str = "card") -> CheckChain:
    return CheckChain(field_name, [
        value_check(
            field_name,
            "credit_card",
            validators.is_credit_card,
            f"{field_name} must be a valid credit card number",
        ),
    ])


def check_json(field_name: str = "data") -> CheckChain:
    return CheckChain(field_name, [
        value_check(field_name, "json", validators.is_json, f"{field_name} must be a valid JSON string"),
    ])


def check_boolean(field_name: str = "flag") -> CheckChain:
    return CheckChain(field_name, [
        value_check(field_name, "boolean", validators.is_boolean, f"{field_name} must be a boolean value"),
    ])


def check_localized_email(
    field_name: str = "email",
    options: LocalizedEmailOptions | None = None,
    **overrides: Any,
) -> CheckChain:
    """Valid e-mail whose lower-cased form fits within ``max_length``."""
    opts = configure(LocalizedEmailOptions, options, overrides, "check_localized_email")
    return CheckChain(field_name, [
        value_check(field_name, "email", validators.is_email, f"{field_name} must be a valid email"),
        value_check(
            field_name,
            "max_length",
            lambda value: validators.length_between(value, max=opts.max_length),
            f"{field_name} cannot exceed {opts.max_length} characters",
            prepare=validators.lower,
        ),
    ])


# Membership and pattern checks

def check_alphanumeric(field_name: str = "text") -> CheckChain:
    return CheckChain(field_name, [
        value_check(
            field_name,
            "alphanumeric",
            validators.is_alphanumeric,
            f"{field_name} can only contain letters and numbers",
        ),
    ])


def check_alpha(field_name: str = "text") -> CheckChain:
    return CheckChain(field_name, [
        value_check(
            field_name,
            "alpha",
            validators.is_alpha,
            f"{field_name} can only contain alphabetic characters",
        ),
    ])


def check_city_name(field_name: str = "city", options: CityOptions | None = None, **overrides: Any) -> CheckChain:
    opts = configure(CityOptions, options, overrides, "check_city_name")
    pattern = validators.LATIN_TEXT if opts.allow_spaces else validators.ALPHA
    return CheckChain(field_name, [
        value_check(
            field_name,
            "alpha",
            lambda value: validators.matches(value, pattern),
            f"{field_name} can only contain alphabetic characters",
        ),
    ])


def check_latin_text(field_name: str = "text") -> CheckChain:
    return CheckChain(field_name, [
        value_check(
            field_name,
            "latin",
            lambda value: validators.matches(value, validators.LATIN_TEXT),
            f"{field_name} can only contain Latin letters",
        ),
    ])


def check_custom_pattern(field_name: str = "text", options: PatternOptions | None = None, **overrides: Any) -> CheckChain:
    """Match a caller-supplied regex, reporting the caller's message.

    A ``$`` in a string pattern matches only at the very end of the value,
    never before a trailing newline.

    Raises:
        RuleConfigurationError: If no pattern is configured, or it does not compile
    """
    opts = configure(PatternOptions, options, overrides, "check_custom_pattern")
    if opts.pattern is None:
        raise RuleConfigurationError(
            f"check_custom_pattern requires a pattern for field '{field_name}'",
            context={"field": field_name, "builder": "check_custom_pattern"},
        )
    try:
        regex = validators.compile_pattern(opts.pattern)
    except re.error as e:
        raise RuleConfigurationError(
            f"check_custom_pattern got an invalid pattern: {e}",
            context={"field": field_name, "pattern": opts.pattern},
        ) from e
    return CheckChain(field_name, [
        value_check(field_name, "pattern", lambda value: validators.matches(value, regex), opts.message),
    ])


def check_gender(field_name: str = "gender", options: MembershipOptions | None = None, **overrides: Any) -> CheckChain:
    opts = configure(MembershipOptions, options, overrides, "check_gender")
    opts = fill_defaults(opts, values=GENDER_OPTIONS)
    return CheckChain(field_name, [
        value_check(
            field_name,
            "gender",
            lambda value: validators.is_in(value, opts.values),
            f"{field_name} must be one of the valid gender options: {join_values(opts.values)}",
        ),
    ])


def check_timezone(field_name: str = "timezone", options: MembershipOptions | None = None, **overrides: Any) -> CheckChain:
    opts = configure(MembershipOptions, options, overrides, "check_timezone")
    opts = fill_defaults(opts, values=DEFAULT_TIMEZONES)
    return CheckChain(field_name, [
        value_check(
            field_name,
            "timezone",
            lambda value: validators.is_in(value, opts.values),
            not_in_set(field_name, opts.values, "timezone"),
        ),
    ])


def check_enum(field_name: str = "role", options: MembershipOptions | None = None, **overrides: Any) -> CheckChain:
    """Value must be one of ``values`` (default ``user``, ``admin``)."""
    opts = configure(MembershipOptions, options, overrides, "check_enum")
    opts = fill_defaults(opts, values=DEFAULT_ROLES)
    if not opts.values:
        raise RuleConfigurationError(
            f"check_enum requires at least one allowed value for field '{field_name}'",
            context={"field": field_name, "builder": "check_enum"},
        )
    return CheckChain(field_name, [
        value_check(
            field_name,
            "enum",
            lambda value: validators.is_in(value, opts.values),
            f"Invalid value for {field_name}. Allowed values are: {join_values(opts.values)}",
        ),
    ])


# Bounded checks

def check_number(field_name: str = "number", options: RangeOptions | None = None, **overrides: Any) -> CheckChain:
    opts = configure(RangeOptions, options, overrides, "check_number")
    return CheckChain(field_name, [
        value_check(
            field_name,
            "range",
            lambda value: validators.is_int(value, opts.min, opts.max),
            f"{field_name} must be a number between {opts.min} and {opts.max}",
        ),
    ])


def check_length(field_name: str = "text", options: LengthOptions | None = None, **overrides: Any) -> CheckChain:
    opts = configure(LengthOptions, options, overrides, "check_length")
    opts = fill_defaults(opts, min=4, max=16)
    return CheckChain(field_name, [
        value_check(
            field_name,
            "length",
            lambda value: validators.length_between(value, opts.min, opts.max),
            between(field_name, opts.min, opts.max, "characters"),
        ),
    ])


def check_street_address(field_name: str = "address", options: LengthOptions | None = None, **overrides: Any) -> CheckChain:
    opts = configure(LengthOptions, options, overrides, "check_street_address")
    opts = fill_defaults(opts, min=5, max=100)
    return CheckChain(field_name, [
        value_check(
            field_name,
            "length",
            lambda value: validators.length_between(value, opts.min, opts.max),
            between(field_name, opts.min, opts.max, "characters long"),
        ),
    ])


def check_array(field_name: str = "items", options: ArrayOptions | None = None, **overrides: Any) -> CheckChain:
    """Value must be a list; unless ``allow_empty``, it must also have items."""
    opts = configure(ArrayOptions, options, overrides, "check_array")
    checks = [value_check(field_name, "array", validators.is_array, f"{field_name} must be an array")]
    if not opts.allow_empty:
        checks.append(
            value_check(field_name, "not_empty", validators.is_not_empty, f"{field_name} cannot be empty")
        )
    return CheckChain(field_name, checks)


def check_currency(field_name: str = "amount", options: CurrencyOptions | None = None, **overrides: Any) -> CheckChain:
    """Symbol-prefixed amount with up to two fraction digits, e.g. ``$100.00``."""
    opts = configure(CurrencyOptions, options, overrides, "check_currency")
    regex = re.compile(rf"^{re.escape(opts.symbol)}\d+(\.\d{{1,2}})?\Z")
    return CheckChain(field_name, [
        value_check(
            field_name,
            "currency",
            lambda value: validators.matches(value, regex),
            f"{field_name} must be a valid currency amount (e.g., {opts.symbol}100.00)",
        ),
    ])


def check_postal_code(field_name: str = "postalCode", options: PostalCodeOptions | None = None, **overrides: Any) -> CheckChain:
    opts = configure(PostalCodeOptions, options, overrides, "check_postal_code")
    pattern = opts.pattern
    if pattern is None:
        region = opts.locale.replace("_", "-").split("-")[-1].upper()
        pattern = POSTAL_CODE_PATTERNS.get(region, POSTAL_CODE_PATTERNS[DEFAULT_POSTAL_LOCALE])
    regex = validators.compile_pattern(pattern, re.IGNORECASE)
    return CheckChain(field_name, [
        value_check(
            field_name,
            "postal_code",
            lambda value: validators.matches(value, regex),
            f"{field_name} must be a valid postal code for locale {opts.locale}",
        ),
    ])


# Uniqueness checks

def _unique_chain(field_name: str, store: Any, key: str, message: str, extra: dict[str, Any] | None = None) -> CheckChain:
    return CheckChain(field_name, [
        Check(
            field=field_name,
            predicate=unique_predicate(field_name, store, key, extra),
            message=message,
            name="unique",
        ),
    ])


def check_unique_email(field_name: str = "email", options: UniqueOptions | None = None, **overrides: Any) -> CheckChain:
    """No stored record may have this value as its ``email``.

    Raises:
        RuleConfigurationError: If no usable store is configured
    """
    opts = configure(UniqueOptions, options, overrides, "check_unique_email")
    store = require_store(opts.store, field_name, "check_unique_email")
    return _unique_chain(field_name, store, "email", opts.message or f"{field_name} is already taken")


def check_unique(field_name: str = "username", options: UniqueOptions | None = None, **overrides: Any) -> CheckChain:
    """No stored record may have this value at ``key`` (default ``username``).

    Raises:
        RuleConfigurationError: If no usable store is configured
    """
    opts = configure(UniqueOptions, options, overrides, "check_unique")
    store = require_store(opts.store, field_name, "check_unique")
    key = opts.key or "username"
    return _unique_chain(field_name, store, key, opts.message or f"{field_name} is already taken")


def check_custom_unique(field_name: str, options: UniqueOptions | None = None, **overrides: Any) -> CheckChain:
    """No stored record may have this value at an arbitrary attribute ``key``.

    Raises:
        RuleConfigurationError: If no usable store or no key is configured
    """
    opts = configure(UniqueOptions, options, overrides, "check_custom_unique")
    store = require_store(opts.store, field_name, "check_custom_unique")
    if not opts.key:
        raise RuleConfigurationError(
            f"check_custom_unique requires the record attribute to query for field '{field_name}'",
            context={"field": field_name, "builder": "check_custom_unique"},
        )
    return _unique_chain(field_name, store, opts.key, opts.message or f"{field_name} is already taken")


def check_unique_field_by_locale(
    field_name: str = "username",
    options: UniqueOptions | None = None,
    **overrides: Any,
) -> CheckChain:
    """Value must be unique among records of the configured locale only.

    Raises:
        RuleConfigurationError: If no usable store is configured
    """
    opts = configure(UniqueOptions, options, overrides, "check_unique_field_by_locale")
    store = require_store(opts.store, field_name, "check_unique_field_by_locale")
    return _unique_chain(
        field_name,
        store,
        opts.key or field_name,
        opts.message or f"{field_name} is already taken in the {opts.locale} region",
        extra={opts.locale_key: opts.locale},
    )
