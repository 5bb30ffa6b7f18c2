"""
Unit tests for certificate number allocation
"""

import asyncio
import itertools
import re
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import ProgrammingError
from sqlalchemy.ext.asyncio import AsyncSession

from equiptrack.services.certificate_allocator import (
    CertificateNumberAllocator,
    SOURCE_EMERGENCY,
    SOURCE_PREFERRED,
    SOURCE_SEQUENCE,
    SOURCE_TIMESTAMP,
    normalize_certificate_number,
)


def _sequence_db(*values):
    db = AsyncMock(spec=AsyncSession)
    results = []
    for value in values:
        result = MagicMock()
        result.scalar_one.return_value = value
        results.append(result)
    db.execute.side_effect = results
    return db


@pytest.fixture
def allocator():
    return CertificateNumberAllocator(sequence_name="service_certificate_seq", prefix="BWS-")


class TestNormalize:
    """Test cases for normalize_certificate_number"""

    def test_adds_prefix(self):
        assert normalize_certificate_number("24570", "BWS-") == "BWS-24570"

    def test_no_double_prefix(self):
        assert normalize_certificate_number("BWS-24570", "BWS-") == "BWS-24570"

    def test_strips_whitespace(self):
        assert normalize_certificate_number("  24570 ", "BWS-") == "BWS-24570"


class TestAllocate:
    """Test cases for CertificateNumberAllocator.allocate"""

    @pytest.mark.asyncio
    async def test_preferred_number_is_used(self, allocator):
        db = AsyncMock(spec=AsyncSession)

        allocation = await allocator.allocate(db, preferred="BWS-1001")

        assert allocation.number == "BWS-1001"
        assert allocation.source == SOURCE_PREFERRED
        db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_preferred_number_without_prefix(self, allocator):
        allocation = await allocator.allocate(AsyncMock(spec=AsyncSession), preferred="1001")
        assert allocation.number == "BWS-1001"

    @pytest.mark.asyncio
    async def test_blank_preferred_uses_sequence(self, allocator):
        db = _sequence_db("24570")

        allocation = await allocator.allocate(db, preferred="   ")

        assert allocation.number == "BWS-24570"
        assert allocation.source == SOURCE_SEQUENCE
        assert allocation.error is None
        assert not allocation.degraded

    @pytest.mark.asyncio
    async def test_sequence_read_uses_savepoint(self, allocator):
        db = _sequence_db("24571")

        await allocator.allocate(db)

        db.begin_nested.assert_called_once()
        statement = str(db.execute.call_args[0][0])
        assert "nextval('service_certificate_seq')::TEXT" in statement

    @pytest.mark.asyncio
    async def test_sequence_failure_falls_back_to_timestamp(self, allocator):
        db = AsyncMock(spec=AsyncSession)
        db.execute.side_effect = ProgrammingError(
            "SELECT nextval", {}, Exception('relation "service_certificate_seq" does not exist')
        )

        allocation = await allocator.allocate(db)

        assert re.fullmatch(r"BWS-\d{6}", allocation.number)
        assert allocation.source == SOURCE_TIMESTAMP
        assert allocation.degraded

    @pytest.mark.asyncio
    async def test_emergency_number_when_fallback_fails(self, allocator, monkeypatch):
        db = AsyncMock(spec=AsyncSession)
        db.execute.side_effect = RuntimeError("pool exhausted")

        def broken_clock():
            raise OSError("clock unavailable")

        monkeypatch.setattr(allocator, "timestamp_number", broken_clock)

        allocation = await allocator.allocate(db)

        assert re.fullmatch(r"BWS-EMG-\d{6}", allocation.number)
        assert allocation.source == SOURCE_EMERGENCY
        assert "clock unavailable" in allocation.error

    @pytest.mark.asyncio
    async def test_concurrent_allocations_are_distinct(self, allocator):
        """The database sequence hands out one value per nextval() call"""
        counter = itertools.count(24570)
        db = AsyncMock(spec=AsyncSession)

        def next_value(*args, **kwargs):
            result = MagicMock()
            result.scalar_one.return_value = str(next(counter))
            return result

        db.execute.side_effect = next_value

        allocations = await asyncio.gather(*(allocator.allocate(db) for _ in range(25)))
        numbers = [a.number for a in allocations]

        assert len(set(numbers)) == 25
        assert all(n.startswith("BWS-") and not n.startswith("BWS-BWS-") for n in numbers)
