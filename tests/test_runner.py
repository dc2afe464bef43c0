"""Tests for the RuleSet pipeline."""

import asyncio

import pytest

pytest_plugins = ("pytest_asyncio",)

from dataknobs_rules import (
    Check,
    CheckChain,
    RuleSet,
    RuleValidationError,
    StoreAccessError,
    check_length,
    check_name,
    check_password,
    check_unique_email,
    check_url,
)
from dataknobs_rules.runner import get_value


class TestGetValue:
    """Test field value extraction."""

    def test_top_level_and_nested(self):
        record = {"name": "Jane", "address": {"city": "Paris"}, "a.b": 1}
        assert get_value(record, "name") == "Jane"
        assert get_value(record, "address.city") == "Paris"
        assert get_value(record, "a.b") == 1
        assert get_value(record, "missing") is None
        assert get_value(record, "address.zip") is None
        assert get_value(record, "name.first") is None


class TestRuleSet:
    """Test evaluation of whole records."""

    def signup_rules(self, store):
        return RuleSet("signup").add(
            check_name("name"),
            check_password("password"),
            check_unique_email("email", store=store),
        )

    @pytest.mark.asyncio
    async def test_valid_record(self, store):
        report = await self.signup_rules(store).validate({
            "name": "Jane Doe",
            "password": "Abcdef1!",
            "email": "b@x.com",
        })
        assert report.valid
        assert report.errors == {}
        assert set(report.fields) == {"name", "password", "email"}

    @pytest.mark.asyncio
    async def test_errors_aggregate_per_field(self, store):
        report = await self.signup_rules(store).validate({
            "name": "J",
            "password": "abcdefgh",
            "email": "a@x.com",
        })
        assert not report.valid
        assert report.errors == {
            "name": ["name must be between 2 and 50 characters long"],
            "password": [
                "password must contain at least one uppercase letter",
                "password must contain at least one number",
                "password must contain at least one special character",
            ],
            "email": ["email is already taken"],
        }
        with pytest.raises(RuleValidationError) as exc_info:
            report.raise_for_errors()
        assert set(exc_info.value.context["errors"]) == {"name", "password", "email"}

    @pytest.mark.asyncio
    async def test_missing_field_is_validated_as_none(self, store):
        report = await RuleSet().add(check_url("homepage")).validate({})
        assert report.errors == {"homepage": ["homepage must be a valid URL"]}

    @pytest.mark.asyncio
    async def test_multiple_chains_for_one_field_run_in_order(self):
        rules = RuleSet().add(
            check_length("handle", min=3, max=8),
            check_name("handle", allow_spaces=False),
        )
        report = await rules.validate({"handle": "ab cd efgh"})
        assert report.errors == {"handle": [
            "handle must be between 3 and 8 characters",
            "handle can only contain letters",
        ]}
        assert len(rules) == 3
        assert rules.fields == ["handle"]

    @pytest.mark.asyncio
    async def test_bail_stops_each_field_at_first_failure(self):
        rules = RuleSet(bail=True).add(
            check_password("password"),
            check_length("password", min=1, max=2),
        )
        report = await rules.validate({"password": "abc"})
        assert report.errors == {"password": ["password must be between 8 and 23 characters long"]}

    @pytest.mark.asyncio
    async def test_store_fault_reported_apart_from_errors(self, failing_store):
        rules = RuleSet().add(
            check_name("name"),
            check_unique_email("email", store=failing_store),
        )
        report = await rules.validate({"name": "J", "email": "a@x.com"})
        assert report.errors == {"name": ["name must be between 2 and 50 characters long"]}
        assert list(report.faults) == ["email"]
        assert report.has_faults
        with pytest.raises(StoreAccessError):
            report.raise_for_faults()

    @pytest.mark.asyncio
    async def test_fields_are_evaluated_concurrently(self, async_store):
        rules = RuleSet().add(
            check_unique_email("email", store=async_store),
            check_unique_email("backup_email", store=async_store),
        )
        report = await rules.validate({"email": "b@x.com", "backup_email": "c@x.com"})
        assert report.valid
        assert async_store.max_in_flight == 2

    @pytest.mark.asyncio
    async def test_context_exposes_record_and_metadata(self):
        def matches_password(value, context):
            return value == context.record.get("password") and context.field == "confirm"

        confirm = CheckChain("confirm", [
            Check("confirm", matches_password, "confirm must match password", name="match"),
        ])
        rules = RuleSet().add(confirm)
        assert (await rules.validate({"password": "x", "confirm": "x"})).valid
        assert not (await rules.validate({"password": "x", "confirm": "y"})).valid

    @pytest.mark.asyncio
    async def test_rejects_non_chains(self):
        with pytest.raises(TypeError):
            RuleSet().add([check_url()])

    def test_validate_sync(self, store):
        report = self.signup_rules(store).validate_sync({
            "name": "Jane",
            "password": "Abcdef1!",
            "email": "a@x.com",
        })
        assert report.errors == {"email": ["email is already taken"]}

    def test_to_dict(self, store):
        described = self.signup_rules(store).to_dict()
        assert described["name"] == "signup"
        assert described["fields"]["password"] == [
            "length", "uppercase", "lowercase", "number", "special_char",
        ]
        assert described["fields"]["email"] == ["unique"]

    @pytest.mark.asyncio
    async def test_repeated_validation_is_stable(self, store):
        rules = self.signup_rules(store)
        record = {"name": "Jane_", "password": "Abcdef1!", "email": "a@x.com"}
        first, second = await asyncio.gather(rules.validate(record), rules.validate(record))
        assert first.errors == second.errors
