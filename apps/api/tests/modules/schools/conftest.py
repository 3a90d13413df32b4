"""
Fixtures for school registry tests.
"""

import asyncio
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from mwalimu.modules.schools.service import SchoolRegistry
from mwalimu.modules.schools.store import SchoolRecord, StoreError, StoreUniqueViolation


class InMemorySchoolStore:
    """
    School store kept in a list, for registry tests.

    Every operation yields to the event loop before touching the records so
    concurrent callers interleave the way they would over a network.
    """

    def __init__(self, records: list[SchoolRecord] | None = None, enforce_unique: bool = False):
        self.records: list[SchoolRecord] = list(records or [])
        self.enforce_unique = enforce_unique
        self.find_calls = 0
        self.list_calls = 0
        self.insert_calls = 0
        self.insert_error: StoreError | None = None

    @property
    def total_calls(self) -> int:
        return self.find_calls + self.list_calls + self.insert_calls

    def _match(self, name: str, county: str) -> SchoolRecord | None:
        for record in self.records:
            if record.county == county and record.name.lower() == name.lower():
                return record
        return None

    async def find_by_name(self, name: str, county: str) -> SchoolRecord | None:
        self.find_calls += 1
        await asyncio.sleep(0)
        return self._match(name, county)

    async def list_by_county(self, county: str, search: str | None = None) -> list[SchoolRecord]:
        self.list_calls += 1
        await asyncio.sleep(0)
        records = [record for record in self.records if record.county == county]
        if search:
            records = [record for record in records if search.lower() in record.name.lower()]
        return sorted(records, key=lambda record: record.name)

    async def insert(self, name: str, county: str) -> SchoolRecord:
        self.insert_calls += 1
        await asyncio.sleep(0)
        if self.insert_error is not None:
            raise self.insert_error
        if self.enforce_unique and self._match(name, county) is not None:
            raise StoreUniqueViolation("duplicate key value violates unique constraint", code="23505")
        record = SchoolRecord(id=str(uuid.uuid4()), name=name, county=county)
        self.records.append(record)
        return record


@pytest.fixture
def alpha_primary():
    """An existing school in Nairobi."""
    return SchoolRecord(id=str(uuid.uuid4()), name="Alpha Primary", county="Nairobi")


@pytest.fixture
def empty_store():
    """A store with no schools."""
    return InMemorySchoolStore()


@pytest.fixture
def populated_store(alpha_primary):
    """A store holding Alpha Primary."""
    return InMemorySchoolStore([alpha_primary])


@pytest.fixture
def mock_store():
    """A fully mocked school store."""
    store = MagicMock()
    store.find_by_name = AsyncMock(return_value=None)
    store.list_by_county = AsyncMock(return_value=[])
    store.insert = AsyncMock()
    return store


@pytest.fixture
def registry_for():
    """Build a registry over a given store."""

    def build(store) -> SchoolRegistry:
        return SchoolRegistry(store)

    return build


@pytest.fixture
def mock_session_maker():
    """
    Create a mock async session factory.

    Returns (session_maker, session); `async with session_maker()` yields session.
    """
    session = AsyncMock()
    session.add = MagicMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.execute = AsyncMock()

    session_maker = MagicMock()
    session_maker.return_value.__aenter__ = AsyncMock(return_value=session)
    session_maker.return_value.__aexit__ = AsyncMock(return_value=False)
    return session_maker, session
