"""Pytest configuration for dataknobs_rules tests."""

import asyncio
import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


class MemoryStore:
    """Synchronous store keeping records in a list."""

    def __init__(self, records=None):
        self.records = list(records or [])
        self.queries = []

    def find_one(self, criteria):
        self.queries.append(dict(criteria))
        for record in self.records:
            if all(record.get(key) == value for key, value in criteria.items()):
                return record
        return None


class AsyncMemoryStore(MemoryStore):
    """Store whose lookups suspend before answering."""

    def __init__(self, records=None, delay=0.0):
        super().__init__(records)
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0

    async def find_one(self, criteria):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            return MemoryStore.find_one(self, criteria)
        finally:
            self.in_flight -= 1


class FailingStore:
    """Store that cannot be reached."""

    def __init__(self, error=None):
        self.error = error or ConnectionError("connection refused")

    async def find_one(self, criteria):
        raise self.error


USERS = [
    {"username": "jane", "email": "a@x.com", "locale": "en-US"},
    {"username": "pierre", "email": "p@x.fr", "locale": "fr-FR"},
]


@pytest.fixture
def store():
    return MemoryStore(USERS)


@pytest.fixture
def async_store():
    return AsyncMemoryStore(USERS, delay=0.01)


@pytest.fixture
def failing_store():
    return FailingStore()
