"""Factory for building rule sets from configuration."""

import inspect
import json
import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Union

import yaml  # type: ignore[import-untyped]

from . import builders, user
from .check import CheckChain
from .exceptions import RuleConfigurationError
from .runner import RuleSet

logger = logging.getLogger(__name__)

CATALOG: dict[str, Callable[..., CheckChain]] = {
    "url": builders.check_url,
    "phone": builders.check_phone_number,
    "phone_by_locale": builders.check_phone_number_by_locale,
    "date": builders.check_date,
    "localized_date": builders.check_localized_date,
    "number": builders.check_number,
    "length": builders.check_length,
    "alphanumeric": builders.check_alphanumeric,
    "alpha": builders.check_alpha,
    "city": builders.check_city_name,
    "latin_text": builders.check_latin_text,
    "pattern": builders.check_custom_pattern,
    "credit_card": builders.check_credit_card,
    "json": builders.check_json,
    "boolean": builders.check_boolean,
    "array": builders.check_array,
    "localized_email": builders.check_localized_email,
    "currency": builders.check_currency,
    "street_address": builders.check_street_address,
    "postal_code": builders.check_postal_code,
    "gender": builders.check_gender,
    "timezone": builders.check_timezone,
    "enum": builders.check_enum,
    "unique_email": builders.check_unique_email,
    "unique": builders.check_unique,
    "custom_unique": builders.check_custom_unique,
    "unique_by_locale": builders.check_unique_field_by_locale,
    "name": user.check_name,
    "email": user.check_email,
    "password": user.check_password,
}


def _accepts_options(builder: Callable[..., CheckChain]) -> bool:
    return any(
        parameter.kind is inspect.Parameter.VAR_KEYWORD
        for parameter in inspect.signature(builder).parameters.values()
    )


class RuleSetFactory:
    """Factory for creating rule sets from configuration.

    Configuration Options:
        name (str): Rule set name
        bail (bool): Stop a field at its first failing check (default: False)
        fields (list): List of field definitions

    Field Definition Options:
        name (str): Field name
        rules (list): Rule definitions, applied in order

    Rule Definition Options:
        type (str): Catalog entry, e.g. ``password`` or ``unique_email``
        store (str): For uniqueness rules, name of a store passed to ``create``
        any other key: Option of that builder (e.g. ``min_length``)

    Example Configuration:
        rule_sets:
          - name: signup
            factory: rules
            fields:
              - name: username
                rules:
                  - type: length
                    min: 3
                    max: 20
                  - type: unique
                    store: users
                    key: username
              - name: password
                rules:
                  - type: password
                    require_special_char: false
    """

    def create(self, stores: Mapping[str, Any] | None = None, **config: Any) -> RuleSet:
        """Create a RuleSet from configuration.

        Args:
            stores: Named stores that uniqueness rules may reference
            **config: Rule set configuration

        Returns:
            RuleSet instance

        Raises:
            RuleConfigurationError: If a rule names an unknown type, an unknown
                store, or options its builder does not accept
        """
        name = config.get("name", "rules")
        bail = config.get("bail", False)

        logger.info(f"Creating rule set: {name}")

        rule_set = RuleSet(name, bail=bail)
        for field_config in config.get("fields", []):
            self._add_field(rule_set, field_config, stores or {})
        return rule_set

    def _add_field(self, rule_set: RuleSet, field_config: dict[str, Any], stores: Mapping[str, Any]) -> None:
        field_name = field_config.get("name")
        if not field_name:
            logger.warning("Field configuration missing 'name', skipping")
            return

        for rule_config in field_config.get("rules", []):
            rule_set.add(self.build_chain(field_name, rule_config, stores))

    def build_chain(
        self,
        field_name: str,
        rule_config: dict[str, Any],
        stores: Mapping[str, Any] | None = None,
    ) -> CheckChain:
        """Build one chain from a rule definition.

        Args:
            field_name: Field the rule applies to
            rule_config: Rule definition with a ``type`` key
            stores: Named stores for uniqueness rules

        Returns:
            CheckChain for the field
        """
        params = dict(rule_config)
        rule_type = str(params.pop("type", "")).lower()
        builder = CATALOG.get(rule_type)
        if builder is None:
            raise RuleConfigurationError(
                f"Unknown rule type: {rule_type!r}",
                context={"field": field_name, "available": sorted(CATALOG)},
            )

        if "store" in params and isinstance(params["store"], str):
            store_name = params["store"]
            if store_name not in (stores or {}):
                raise RuleConfigurationError(
                    f"Rule {rule_type!r} on '{field_name}' references unknown store {store_name!r}",
                    context={"field": field_name, "store": store_name},
                )
            params["store"] = stores[store_name]  # type: ignore[index]

        if params and not _accepts_options(builder):
            raise RuleConfigurationError(
                f"Rule {rule_type!r} takes no options, got: {', '.join(sorted(params))}",
                context={"field": field_name, "type": rule_type},
            )
        return builder(field_name, **params)


def load_rule_set(path: Union[str, Path], stores: Mapping[str, Any] | None = None) -> RuleSet:
    """Load a rule set definition from a YAML or JSON file.

    Args:
        path: File path; ``.yaml``/``.yml`` is read as YAML, anything else as JSON
        stores: Named stores that uniqueness rules may reference

    Returns:
        RuleSet instance
    """
    path = Path(path)
    if not path.exists():
        raise RuleConfigurationError(f"Rule set file not found: {path}", context={"path": str(path)})

    with open(path) as f:
        if path.suffix.lower() in [".yaml", ".yml"]:
            data = yaml.safe_load(f) or {}
        else:
            data = json.load(f)

    logger.info(f"Loaded rule set definition from {path}")
    return rule_set_factory.create(stores=stores, **data)


# Create singleton instance for registration
rule_set_factory = RuleSetFactory()
