"""Uniqueness predicates backed by an external record store.

The store is any object with a ``find_one(criteria)`` method returning a
matching record or None. The method may be a plain function or a coroutine
function, so a pymongo collection, a motor collection, or a thin adapter
over an ORM all work. The library never opens or closes the store.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable

from .exceptions import RuleConfigurationError, StoreAccessError
from .result import ValidationContext

logger = logging.getLogger(__name__)


@runtime_checkable
class RecordStore(Protocol):
    """Lookup capability used by the uniqueness checks."""

    def find_one(self, criteria: Mapping[str, Any]) -> Any:
        """Return a record matching every criteria entry, or None.

        May return an awaitable resolving to the same.
        """
        ...


@dataclass(frozen=True)
class QueryDescriptor:
    """One uniqueness lookup: which store, which key, which value.

    Built fresh for every evaluation so concurrent checks never share a
    criteria mapping.
    """

    store: Any
    key: str
    value: Any
    extra: Mapping[str, Any] = field(default_factory=dict)

    def criteria(self) -> dict[str, Any]:
        criteria = {self.key: self.value}
        criteria.update(self.extra)
        return criteria


def require_store(store: Any, field: str, builder: str) -> Any:
    """Fail at construction time if the store cannot be queried.

    Raises:
        RuleConfigurationError: If store is missing or has no callable find_one
    """
    if store is None:
        raise RuleConfigurationError(
            f"{builder} requires a store for field '{field}'",
            context={"field": field, "builder": builder},
        )
    if not callable(getattr(store, "find_one", None)):
        raise RuleConfigurationError(
            f"{builder} requires a store with a find_one method, got {type(store).__name__}",
            context={"field": field, "builder": builder, "store": type(store).__name__},
        )
    return store


async def find_existing(query: QueryDescriptor, field: str) -> Any:
    """Run one lookup against the store.

    Args:
        query: The lookup to perform
        field: Field being validated, for error context

    Returns:
        The matching record, or None

    Raises:
        StoreAccessError: If the store raised while looking up
    """
    criteria = query.criteria()
    logger.debug(f"Uniqueness lookup for '{field}' with keys {sorted(criteria)}")
    try:
        found = query.store.find_one(criteria)
        if inspect.isawaitable(found):
            found = await found
    except Exception as e:
        logger.warning(f"Store lookup for '{field}' failed: {e}")
        raise StoreAccessError(field, criteria, query.store, str(e)) from e
    return found


def unique_predicate(
    field: str,
    store: Any,
    key: str,
    extra: Mapping[str, Any] | None = None,
) -> Callable[[Any, ValidationContext], Awaitable[bool]]:
    """Build an async predicate that passes when no record has ``key == value``.

    Args:
        field: Field being validated
        store: Object exposing find_one
        key: Record attribute to query by
        extra: Additional fixed criteria (e.g. a locale) merged into each query

    Returns:
        Coroutine function ``(value, context) -> bool``
    """
    fixed = MappingProxyType(dict(extra or {}))

    async def predicate(value: Any, context: ValidationContext) -> bool:
        existing = await find_existing(QueryDescriptor(store, key, value, fixed), field)
        return existing is None

    predicate.__name__ = f"unique_{key}"
    return predicate
