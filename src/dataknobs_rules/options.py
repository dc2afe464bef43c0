"""Configuration dataclasses for the rule builders.

Every builder accepts one of these as its ``options`` argument. All fields
have defaults, so a builder is usable with no configuration at all, and
individual fields can be overridden by keyword:

    ```python
    check_password()                                   # defaults
    check_password(options=PasswordOptions(min_length=12))
    check_password(min_length=12, require_special_char=False)
    ```
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from re import Pattern as RegexPattern
from typing import Any, TypeVar

from .exceptions import RuleConfigurationError

OptionsT = TypeVar("OptionsT")

GENDER_OPTIONS = ("male", "female", "non-binary", "other")
DEFAULT_TIMEZONES = (
    "Africa/Abidjan",
    "Africa/Cairo",
    "Asia/Kolkata",
    "America/New_York",
    "Europe/London",
)
DEFAULT_ROLES = ("user", "admin")
LOCALIZED_DATE_FORMAT = "YYYY-MM-DD"
PASSWORD_SPECIAL_CHARS = '!@#$%^&*(),.?":{}|<>'

POSTAL_CODE_PATTERNS = {
    "US": r"^(\d{5})(?:[-\s]?\d{4})?\Z",
    "CA": r"^[ABCEGHJ-NPRSTVXY]\d[ABCEGHJ-NPRSTV-Z][\s-]?\d[ABCEGHJ-NPRSTV-Z]\d\Z",
    "GB": r"^[A-Z]{1,2}\d[A-Z\d]?\s?\d[A-Z]{2}\Z",
    "DE": r"^\d{5}\Z",
    "FR": r"^\d{2}\s?\d{3}\Z",
    "IN": r"^[1-9]\d{2}\s?\d{3}\Z",
    "JP": r"^\d{3}-?\d{4}\Z",
    "AU": r"^\d{4}\Z",
}
DEFAULT_POSTAL_LOCALE = "US"


def configure(options_class: type[OptionsT], options: OptionsT | None, overrides: dict[str, Any], builder: str) -> OptionsT:
    """Resolve a builder's options from an optional struct plus keyword overrides.

    Args:
        options_class: The builder's options dataclass
        options: Options passed by the caller, or None for defaults
        overrides: Keyword overrides for individual option fields
        builder: Builder name, used in error context

    Returns:
        Fully resolved options

    Raises:
        RuleConfigurationError: If options has the wrong type or an override
            names an unknown option
    """
    if options is None:
        options = options_class()
    elif not isinstance(options, options_class):
        raise RuleConfigurationError(
            f"{builder} expects {options_class.__name__}, got {type(options).__name__}",
            context={"builder": builder},
        )

    if not overrides:
        return options

    known = {f.name for f in dataclasses.fields(options_class)}  # type: ignore[arg-type]
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise RuleConfigurationError(
            f"{builder} got unknown options: {', '.join(unknown)}",
            context={"builder": builder, "unknown": unknown, "known": sorted(known)},
        )
    return dataclasses.replace(options, **overrides)  # type: ignore[type-var]


def fill_defaults(options: OptionsT, **defaults: Any) -> OptionsT:
    """Give option fields left unset (None) the calling builder's own defaults."""
    missing = {name: value for name, value in defaults.items() if getattr(options, name) is None}
    return dataclasses.replace(options, **missing) if missing else options  # type: ignore[type-var]


def _freeze(instance: Any, name: str) -> None:
    """Store a collection field as a tuple so options stay immutable."""
    value = getattr(instance, name)
    if value is not None and not isinstance(value, tuple):
        object.__setattr__(instance, name, tuple(value))


@dataclass(frozen=True)
class UrlOptions:
    """Options for check_url.

    Attributes:
        protocols: Accepted URL schemes (default http, https, ftp)
        require_protocol: Reject bare hosts such as ``example.com`` (default False)
        require_tld: Require a top-level domain on the host (default True)
    """

    protocols: tuple[str, ...] = ("http", "https", "ftp")
    require_protocol: bool = False
    require_tld: bool = True

    def __post_init__(self) -> None:
        _freeze(self, "protocols")


@dataclass(frozen=True)
class PhoneOptions:
    """Options for the phone builders. ``locale`` is ``any`` or a locale such as ``en-GB``."""

    locale: str = "any"


@dataclass(frozen=True)
class DateOptions:
    """Options for the date builders.

    Attributes:
        format: Date format using YYYY, YY, MM and DD tokens. None means the
            builder's own default (YYYY/MM/DD for check_date, YYYY-MM-DD for
            check_localized_date)
        strict: If False, ``/`` and ``-`` delimiters are interchangeable
    """

    format: str | None = None
    strict: bool = False


@dataclass(frozen=True)
class RangeOptions:
    """Inclusive integer bounds for check_number."""

    min: int = 1
    max: int = 100


@dataclass(frozen=True)
class LengthOptions:
    """Inclusive character-count bounds for check_length and check_street_address.

    Unset bounds take the builder's default: 4 to 16 for check_length, 5 to
    100 for check_street_address.
    """

    min: int | None = None
    max: int | None = None


@dataclass(frozen=True)
class PatternOptions:
    """Options for check_custom_pattern. ``pattern`` is required."""

    pattern: str | RegexPattern | None = None
    message: str = "Invalid input format"


@dataclass(frozen=True)
class CityOptions:
    allow_spaces: bool = False


@dataclass(frozen=True)
class MembershipOptions:
    """Allowed values for the membership builders (enum, gender, timezone).

    None means the builder's own default set.
    """

    values: tuple[Any, ...] | None = None

    def __post_init__(self) -> None:
        _freeze(self, "values")


@dataclass(frozen=True)
class CurrencyOptions:
    symbol: str = "$"


@dataclass(frozen=True)
class PostalCodeOptions:
    """Options for check_postal_code.

    Attributes:
        locale: Region whose pattern is used; unknown regions fall back to US
        pattern: Explicit regex overriding the locale's pattern
    """

    locale: str = DEFAULT_POSTAL_LOCALE
    pattern: str | RegexPattern | None = None


@dataclass(frozen=True)
class ArrayOptions:
    allow_empty: bool = False


@dataclass(frozen=True)
class LocalizedEmailOptions:
    max_length: int = 255


@dataclass(frozen=True)
class UniqueOptions:
    """Options for the uniqueness builders.

    Attributes:
        store: Object exposing ``find_one(criteria)``, sync or async. Required.
        key: Record attribute to query by (check_unique, check_custom_unique)
        message: Failure message overriding the default
        locale: Locale the value must be unique in (check_unique_field_by_locale)
        locale_key: Record attribute holding the locale
    """

    store: Any = field(default=None, compare=False)
    key: str | None = None
    message: str | None = None
    locale: str = "en-US"
    locale_key: str = "locale"


@dataclass(frozen=True)
class NameOptions:
    """Options for check_name.

    Attributes:
        min: Minimum trimmed length (default 2)
        max: Maximum trimmed length (default 50)
        allow_spaces: Permit whitespace between words (default True)
        allow_special_chars: Permit hyphens, apostrophes and underscores (default False)
    """

    min: int = 2
    max: int = 50
    allow_spaces: bool = True
    allow_special_chars: bool = False


@dataclass(frozen=True)
class EmailOptions:
    """Options for check_email.

    Attributes:
        required: Report an empty value as missing (default True). When False,
            an empty value skips the remaining checks.
        allowed_domains: If non-empty, the address must end in one of these
    """

    required: bool = True
    allowed_domains: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "allowed_domains")


@dataclass(frozen=True)
class PasswordOptions:
    """Options for check_password.

    The length check is always present. Each ``require_*`` flag adds one
    check with its own message.
    """

    min_length: int = 8
    max_length: int = 23
    require_uppercase: bool = True
    require_lowercase: bool = True
    require_number: bool = True
    require_special_char: bool = True
    special_chars: str = PASSWORD_SPECIAL_CHARS
