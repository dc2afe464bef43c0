"""Tests for the pure value predicates."""

import re
from datetime import date, datetime

import phonenumbers
import pytest

from dataknobs_rules import validators


def example_number(region, number_type=phonenumbers.PhoneNumberType.MOBILE):
    number = phonenumbers.example_number_for_type(region, number_type)
    return phonenumbers.format_number(number, phonenumbers.PhoneNumberFormat.E164)


def national_number(region):
    number = phonenumbers.example_number_for_type(region, phonenumbers.PhoneNumberType.MOBILE)
    return phonenumbers.format_number(number, phonenumbers.PhoneNumberFormat.NATIONAL)


class TestLengthAndNumbers:
    """Test bounded predicates."""

    @pytest.mark.parametrize("text,expected", [
        ("abc", False),
        ("abcd", True),
        ("a" * 16, True),
        ("a" * 17, False),
    ])
    def test_length_boundaries(self, text, expected):
        assert validators.length_between(text, 4, 16) is expected

    def test_length_of_non_text(self):
        assert validators.length_between(12345, 4, 16)
        assert not validators.length_between(None, 0, 16)
        assert not validators.length_between(["a", "b", "c", "d"], 1, 16)

    def test_is_int(self):
        assert validators.is_int(1, 1, 100)
        assert validators.is_int(100, 1, 100)
        assert validators.is_int("42", 1, 100)
        assert validators.is_int(7.0)
        assert not validators.is_int(0, 1, 100)
        assert not validators.is_int(101, 1, 100)
        assert not validators.is_int("4.2")
        assert not validators.is_int("042")
        assert not validators.is_int(True)
        assert not validators.is_int(None)


class TestPatternsAndMembership:
    """Test regex and membership predicates."""

    def test_alpha(self):
        assert validators.is_alpha("Paris")
        assert not validators.is_alpha("New York")
        assert not validators.is_alpha("R2D2")
        assert not validators.is_alpha("")

    def test_alphanumeric(self):
        assert validators.is_alphanumeric("R2D2")
        assert not validators.is_alphanumeric("R2-D2")

    def test_matches_searches_anywhere(self):
        assert validators.matches("abc1", r"\d")
        assert not validators.matches("abc", r"\d")
        assert not validators.matches(None, r".*")

    def test_trailing_newline_is_not_an_end_of_text(self):
        assert not validators.is_alpha("abc\n")
        assert not validators.is_alphanumeric("abc123\n")
        assert not validators.matches("abc\n", validators.LATIN_TEXT)
        assert not validators.is_int("5\n")
        assert not validators.matches("123\n", r"^\d{3}$")
        assert validators.matches("123", r"^\d{3}$")

    def test_compile_pattern(self):
        assert validators.compile_pattern(r"^a$").pattern == r"^a\Z"
        assert validators.compile_pattern(r"^\$[$]$").pattern == r"^\$[$]\Z"
        assert validators.compile_pattern(r"[]$]x$").pattern == r"[]$]x\Z"
        compiled = re.compile(r"a$")
        assert validators.compile_pattern(compiled) is compiled

    def test_is_in(self):
        assert validators.is_in("admin", ("user", "admin"))
        assert not validators.is_in("root", ("user", "admin"))
        assert not validators.is_in(["admin"], frozenset({"admin"}))

    def test_email_domain_pattern_escapes_dots(self):
        pattern = validators.email_domain_pattern(["acme.io"])
        assert validators.matches("jane@acme.io", pattern)
        assert not validators.matches("jane@acmexio", pattern)
        assert not validators.matches("jane@acme.io.evil.com", pattern)


class TestFormats:
    """Test format predicates."""

    @pytest.mark.parametrize("value", [
        "https://example.com",
        "http://sub.example.co.uk/path?q=1#frag",
        "example.com",
        "ftp://files.acme.org/pub",
        "http://127.0.0.1:8080/health",
        "https://user:pw@acme.io",
    ])
    def test_valid_urls(self, value):
        assert validators.is_url(value)

    @pytest.mark.parametrize("value", [
        "not a url",
        "mailto:jane@acme.io",
        "gopher://acme.io",
        "//acme.io",
        "http://-bad-.com",
        "http://acme",
        "https://acme.io/a b",
        "",
        None,
    ])
    def test_invalid_urls(self, value):
        assert not validators.is_url(value)

    def test_url_require_protocol(self):
        assert not validators.is_url("example.com", require_protocol=True)
        assert validators.is_url("https://example.com", require_protocol=True)

    def test_url_require_tld(self):
        assert not validators.is_url("http://intranet")
        assert validators.is_url("http://intranet", require_tld=False)
        assert validators.is_url("http://localhost:8000/health")

    def test_url_protocols(self):
        assert not validators.is_url("ftp://files.acme.org", protocols=("https",))
        assert validators.is_url("HTTPS://acme.io", protocols=("https",))

    def test_email(self):
        assert validators.is_email("jane.doe@acme.io")
        assert not validators.is_email("jane.doe")
        assert not validators.is_email("jane@")
        assert not validators.is_email(None)

    def test_json(self):
        assert validators.is_json('{"a": [1, 2]}')
        assert validators.is_json("42")
        assert not validators.is_json("{'a': 1}")
        assert not validators.is_json({"a": 1})

    @pytest.mark.parametrize("value,expected", [
        (True, True),
        (False, True),
        ("true", True),
        ("0", True),
        (1, True),
        ("yes", False),
        ("True", False),
        (2, False),
        (None, False),
    ])
    def test_boolean(self, value, expected):
        assert validators.is_boolean(value) is expected

    def test_array_and_not_empty(self):
        assert validators.is_array([1])
        assert validators.is_array(())
        assert not validators.is_array("abc")
        assert validators.is_not_empty([1])
        assert not validators.is_not_empty([])
        assert not validators.is_not_empty(None)

    def test_credit_card(self):
        assert validators.is_credit_card("4111 1111 1111 1111")
        assert validators.is_credit_card("5500-0000-0000-0004")
        assert validators.is_credit_card(4111111111111111)
        assert not validators.is_credit_card("4111111111111112")
        assert not validators.is_credit_card("4111")
        assert not validators.is_credit_card("abcd efgh ijkl mnop")

    def test_dates(self):
        assert validators.is_date("2024/02/29")
        assert validators.is_date("2024-02-29")
        assert validators.is_date(date(2024, 1, 1))
        assert validators.is_date(datetime(2024, 1, 1, 12, 0))
        assert not validators.is_date("2023-02-29")
        assert not validators.is_date("29/02/2024")
        assert not validators.is_date("yesterday")
        assert not validators.is_date(20240101)

    def test_dates_with_format(self):
        assert validators.is_date("31/12/2024", "DD/MM/YYYY")
        assert validators.is_date("31-12-2024", "DD/MM/YYYY")
        assert not validators.is_date("31-12-2024", "DD/MM/YYYY", strict=True)
        assert not validators.is_date("2024-12-31", "DD/MM/YYYY")

    def test_strptime_format(self):
        assert validators.strptime_format("YYYY-MM-DD") == "%Y-%m-%d"
        assert validators.strptime_format("DD/MM/YY") == "%d/%m/%y"


class TestPhoneNumbers:
    """Test mobile phone predicates."""

    def test_phone_region(self):
        assert validators.phone_region("any") is None
        assert validators.phone_region("en-GB") == "GB"
        assert validators.phone_region("en_us") == "US"
        assert validators.phone_region("IN") == "IN"

    def test_international_number_any_locale(self):
        assert validators.is_mobile_phone(example_number("GB"))
        assert validators.is_mobile_phone(example_number("IN"))

    def test_national_number_any_locale(self):
        assert validators.is_mobile_phone(national_number("GB"))

    def test_locale_specific(self):
        assert validators.is_mobile_phone(national_number("GB"), "en-GB")
        assert validators.is_mobile_phone(example_number("GB"), "en-GB")
        assert not validators.is_mobile_phone(example_number("IN"), "en-GB")

    def test_invalid_numbers(self):
        assert not validators.is_mobile_phone("12")
        assert not validators.is_mobile_phone("call me")
        assert not validators.is_mobile_phone("")
        assert not validators.is_mobile_phone(None)
