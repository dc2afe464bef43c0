"""Rules - configurable field validation rule builders.

This package provides a catalog of builders that turn a field name plus
options into an ordered chain of checks:
- Every builder works with zero configuration and is fully overridable
- Checks are sync or async predicates behind one awaitable interface
- Uniqueness checks query an injected store without shared state
- Store failures are reported apart from ordinary validation failures
"""

from .builders import (
    check_alpha,
    check_alphanumeric,
    check_array,
    check_boolean,
    check_city_name,
    check_credit_card,
    check_currency,
    check_custom_pattern,
    check_custom_unique,
    check_date,
    check_enum,
    check_gender,
    check_json,
    check_latin_text,
    check_length,
    check_localized_date,
    check_localized_email,
    check_number,
    check_phone_number,
    check_phone_number_by_locale,
    check_postal_code,
    check_street_address,
    check_timezone,
    check_unique,
    check_unique_email,
    check_unique_field_by_locale,
    check_url,
)
from .check import Check, CheckChain
from .exceptions import (
    RuleConfigurationError,
    RulesError,
    RuleValidationError,
    StoreAccessError,
)
from .factory import CATALOG, RuleSetFactory, load_rule_set, rule_set_factory
from .options import (
    ArrayOptions,
    CityOptions,
    CurrencyOptions,
    DateOptions,
    EmailOptions,
    LengthOptions,
    LocalizedEmailOptions,
    MembershipOptions,
    NameOptions,
    PasswordOptions,
    PatternOptions,
    PhoneOptions,
    PostalCodeOptions,
    RangeOptions,
    UniqueOptions,
    UrlOptions,
)
from .result import (
    CheckResult,
    CheckStatus,
    FieldReport,
    ValidationContext,
    ValidationReport,
)
from .runner import RuleSet
from .uniqueness import QueryDescriptor, RecordStore
from .user import check_email, check_name, check_password

__version__ = "0.1.0"

__all__ = [
    # Core types
    "Check",
    "CheckChain",
    "CheckResult",
    "CheckStatus",
    "FieldReport",
    "ValidationReport",
    "ValidationContext",
    # Errors
    "RulesError",
    "RuleConfigurationError",
    "RuleValidationError",
    "StoreAccessError",
    # Store
    "RecordStore",
    "QueryDescriptor",
    # Options
    "ArrayOptions",
    "CityOptions",
    "CurrencyOptions",
    "DateOptions",
    "EmailOptions",
    "LengthOptions",
    "LocalizedEmailOptions",
    "MembershipOptions",
    "NameOptions",
    "PasswordOptions",
    "PatternOptions",
    "PhoneOptions",
    "PostalCodeOptions",
    "RangeOptions",
    "UniqueOptions",
    "UrlOptions",
    # Builders
    "check_alpha",
    "check_alphanumeric",
    "check_array",
    "check_boolean",
    "check_city_name",
    "check_credit_card",
    "check_currency",
    "check_custom_pattern",
    "check_custom_unique",
    "check_date",
    "check_email",
    "check_enum",
    "check_gender",
    "check_json",
    "check_latin_text",
    "check_length",
    "check_localized_date",
    "check_localized_email",
    "check_name",
    "check_number",
    "check_password",
    "check_phone_number",
    "check_phone_number_by_locale",
    "check_postal_code",
    "check_street_address",
    "check_timezone",
    "check_unique",
    "check_unique_email",
    "check_unique_field_by_locale",
    "check_url",
    # Pipeline and configuration
    "RuleSet",
    "RuleSetFactory",
    "rule_set_factory",
    "load_rule_set",
    "CATALOG",
]
