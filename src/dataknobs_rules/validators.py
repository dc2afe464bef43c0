"""Pure predicates over a single value.

None of these functions perform I/O or touch shared state. Each returns
``True`` when the value is acceptable and ``False`` otherwise; malformed
values (wrong type, unparsable text) are simply ``False``.
"""

from __future__ import annotations

import json
import re
from collections.abc import Collection, Iterable
from datetime import date, datetime
from re import Pattern as RegexPattern
from typing import Any

import phonenumbers
from email_validator import EmailNotValidError, validate_email
from marshmallow import ValidationError
from marshmallow.validate import URL

# \Z rather than $, which also matches before a trailing newline
ALPHA = re.compile(r"^[A-Za-z]+\Z")
ALPHANUMERIC = re.compile(r"^[A-Za-z0-9]+\Z")
LATIN_TEXT = re.compile(r"^[A-Za-z ]+\Z")
INTEGER = re.compile(r"^[-+]?(?:[1-9]\d*|0)\Z")

URL_PROTOCOLS = ("http", "https", "ftp")
MAX_URL_LENGTH = 2083

BOOLEAN_LITERALS = frozenset({"true", "false", "1", "0"})

DEFAULT_DATE_FORMAT = "YYYY/MM/DD"
DATE_DELIMITERS = ("/", "-")
_DATE_TOKENS = (("YYYY", "%Y"), ("YY", "%y"), ("MM", "%m"), ("DD", "%d"))

MOBILE_NUMBER_TYPES = frozenset({
    phonenumbers.PhoneNumberType.MOBILE,
    phonenumbers.PhoneNumberType.FIXED_LINE_OR_MOBILE,
})


def as_text(value: Any) -> str | None:
    """Return the value as text if it has a sensible string form."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return str(value)
    return None


def trim(value: Any) -> Any:
    """Strip surrounding whitespace from strings, leave other values alone."""
    return value.strip() if isinstance(value, str) else value


def lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def length_between(value: Any, min: int | None = None, max: int | None = None) -> bool:
    text = as_text(value)
    if text is None:
        return False
    if min is not None and len(text) < min:
        return False
    if max is not None and len(text) > max:
        return False
    return True


def is_int(value: Any, min: int | None = None, max: int | None = None) -> bool:
    """Whether the value is an integer (or integer text) within [min, max]."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and INTEGER.match(value):
        number = int(value)
    else:
        return False

    if min is not None and number < min:
        return False
    if max is not None and number > max:
        return False
    return True


def compile_pattern(pattern: str | RegexPattern, flags: int = 0) -> RegexPattern:
    """Compile a pattern whose end-of-line anchors match only at the end of the text.

    Each unescaped ``$`` outside a character class becomes ``\\Z``. Already
    compiled patterns are returned unchanged.
    """
    if not isinstance(pattern, str):
        return pattern

    chars = []
    escaped = False
    class_start = None
    for index, char in enumerate(pattern):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif class_start is not None:
            # A "]" right after "[" or "[^" is a literal member of the class
            if char == "]" and index > class_start + 1 and pattern[class_start + 1:index] != "^":
                class_start = None
        elif char == "[":
            class_start = index
        elif char == "$":
            chars.append(r"\Z")
            continue
        chars.append(char)
    return re.compile("".join(chars), flags)


def matches(value: Any, pattern: str | RegexPattern) -> bool:
    """Whether the regex finds a match anywhere in the string value."""
    if not isinstance(value, str):
        return False
    regex = compile_pattern(pattern)
    return regex.search(value) is not None


def is_alpha(value: Any) -> bool:
    return matches(value, ALPHA)


def is_alphanumeric(value: Any) -> bool:
    return matches(value, ALPHANUMERIC)


def is_in(value: Any, allowed: Collection[Any]) -> bool:
    try:
        return value in allowed
    except TypeError:
        # Unhashable value checked against a set
        return any(value == candidate for candidate in allowed)


def is_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    if isinstance(value, int):
        return value in (0, 1)
    return isinstance(value, str) and value in BOOLEAN_LITERALS


def is_json(value: Any) -> bool:
    if not isinstance(value, (str, bytes, bytearray)):
        return False
    try:
        json.loads(value)
    except ValueError:
        return False
    return True


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_not_empty(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value) > 0
    return True


def is_email(value: Any) -> bool:
    """Whether the value is a syntactically valid e-mail address.

    No DNS lookups are made.
    """
    if not isinstance(value, str) or not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def email_domain_pattern(domains: Iterable[str]) -> RegexPattern:
    """Build a regex matching addresses ending in one of the domains."""
    alternatives = "|".join(re.escape(domain) for domain in domains)
    return re.compile(f"@(?:{alternatives})\\Z", re.IGNORECASE)


def is_url(
    value: Any,
    protocols: Collection[str] = URL_PROTOCOLS,
    require_protocol: bool = False,
    require_tld: bool = True,
) -> bool:
    """Whether the value is a URL with an acceptable protocol and host.

    Args:
        value: Value to check
        protocols: Allowed schemes
        require_protocol: If False, a bare host such as ``example.com`` is accepted
        require_tld: If True, the host must end in a top-level domain
    """
    if not isinstance(value, str) or not value or len(value) > MAX_URL_LENGTH:
        return False
    if any(char.isspace() for char in value) or value.startswith("//"):
        return False
    if value.lower().startswith("mailto:"):
        return False

    if "://" not in value:
        if require_protocol:
            return False
        value = f"http://{value}"

    validator = URL(relative=False, schemes=set(protocols), require_tld=require_tld)
    try:
        validator(value)
    except ValidationError:
        return False
    return True


def strptime_format(format: str) -> str:
    """Translate a ``YYYY-MM-DD`` style format into a strptime format."""
    for token, directive in _DATE_TOKENS:
        format = format.replace(token, directive)
    return format


def is_date(
    value: Any,
    format: str = DEFAULT_DATE_FORMAT,
    strict: bool = False,
) -> bool:
    """Whether the value is a date object or text in the given date format.

    Unless ``strict``, the ``/`` and ``-`` delimiters are interchangeable.
    """
    if isinstance(value, date):
        return True
    if not isinstance(value, str) or not value:
        return False

    pattern = strptime_format(format)
    candidates = [pattern]
    if not strict:
        for delimiter in DATE_DELIMITERS:
            for replacement in DATE_DELIMITERS:
                variant = pattern.replace(delimiter, replacement)
                if variant not in candidates:
                    candidates.append(variant)

    for candidate in candidates:
        try:
            datetime.strptime(value, candidate)
        except ValueError:
            continue
        return True
    return False


def luhn_valid(digits: str) -> bool:
    total = 0
    for index, char in enumerate(reversed(digits)):
        number = int(char)
        if index % 2 == 1:
            number *= 2
            if number > 9:
                number -= 9
        total += number
    return total % 10 == 0


def is_credit_card(value: Any) -> bool:
    """Whether the value is a 13-19 digit card number passing the Luhn check.

    Spaces and dashes between digit groups are ignored.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return False
    digits = re.sub(r"[\s-]+", "", value)
    if not re.fullmatch(r"\d{13,19}", digits):
        return False
    return luhn_valid(digits)


def phone_region(locale: str) -> str | None:
    """Map a locale such as ``en-US`` or ``US`` to a phone region code.

    Returns None for ``any``.
    """
    if not locale or locale.lower() == "any":
        return None
    return locale.replace("_", "-").split("-")[-1].upper()


def is_mobile_phone(value: Any, locale: str = "any") -> bool:
    """Whether the value is a valid mobile number for the locale.

    With locale ``any``, numbers in international format are checked
    directly; national-format numbers are accepted if any supported region
    recognizes them.
    """
    if not isinstance(value, str) or not value.strip():
        return False

    region = phone_region(locale)
    if region is not None:
        regions: Iterable[str | None] = [region]
    elif value.strip().startswith("+"):
        regions = [None]
    else:
        regions = sorted(phonenumbers.SUPPORTED_REGIONS)

    for candidate in regions:
        try:
            number = phonenumbers.parse(value, candidate)
        except phonenumbers.NumberParseException:
            continue
        if not phonenumbers.is_valid_number(number):
            continue
        if candidate is not None and phonenumbers.region_code_for_number(number) != candidate:
            continue
        if phonenumbers.number_type(number) in MOBILE_NUMBER_TYPES:
            return True
    return False
