"""
Certificate number allocation.

Numbers come from a PostgreSQL sequence so concurrent writers always get
distinct values. If the sequence cannot be read, a timestamp-derived number
is used instead so that record creation is never blocked.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings

logger = logging.getLogger(__name__)

SOURCE_PREFERRED = "preferred"
SOURCE_SEQUENCE = "sequence"
SOURCE_TIMESTAMP = "timestamp"
SOURCE_EMERGENCY = "emergency"


@dataclass(frozen=True)
class CertificateAllocation:
    """Result of a certificate number allocation"""
    number: str
    source: str
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.source in (SOURCE_TIMESTAMP, SOURCE_EMERGENCY)


def normalize_certificate_number(value: str, prefix: Optional[str] = None) -> str:
    """Prepend the certificate prefix unless it is already present"""
    prefix = prefix or settings.certificate_prefix
    value = str(value).strip()
    if value.startswith(prefix):
        return value
    return f"{prefix}{value}"


def _last_six_millis() -> str:
    return str(int(time.time() * 1000))[-6:]


class CertificateNumberAllocator:
    """
    Allocates human-facing certificate numbers (BWS-<digits>).

    Order of preference:
    1. the caller's own number, if non-empty
    2. nextval() on the shared certificate sequence
    3. last 6 digits of the current epoch milliseconds
    4. BWS-EMG-<digits> with an error marker, if everything else failed

    ``allocate`` never raises.
    """

    def __init__(self, sequence_name: Optional[str] = None, prefix: Optional[str] = None):
        self.sequence_name = sequence_name or settings.certificate_sequence
        self.prefix = prefix or settings.certificate_prefix

    async def next_sequence_value(self, db: AsyncSession) -> str:
        """Read the next value from the certificate sequence inside a savepoint"""
        # A failed nextval() aborts the enclosing transaction, so isolate it
        async with db.begin_nested():
            result = await db.execute(
                text(f"SELECT nextval('{self.sequence_name}')::TEXT AS certificate_number")
            )
            value = result.scalar_one()
        return str(value)

    def timestamp_number(self) -> str:
        return _last_six_millis()

    async def allocate(
        self,
        db: AsyncSession,
        preferred: Optional[str] = None
    ) -> CertificateAllocation:
        if preferred is not None and str(preferred).strip():
            return CertificateAllocation(
                number=normalize_certificate_number(preferred, self.prefix),
                source=SOURCE_PREFERRED
            )

        try:
            raw = await self.next_sequence_value(db)
            number = normalize_certificate_number(raw, self.prefix)
            logger.info(f"Allocated certificate number {number} from sequence")
            return CertificateAllocation(number=number, source=SOURCE_SEQUENCE)
        except Exception as e:
            logger.warning(
                f"Certificate sequence '{self.sequence_name}' unavailable, "
                f"using timestamp fallback: {e}"
            )

        try:
            number = normalize_certificate_number(self.timestamp_number(), self.prefix)
            logger.info(f"Allocated fallback certificate number {number}")
            return CertificateAllocation(number=number, source=SOURCE_TIMESTAMP)
        except Exception as e:
            emergency = f"{self.prefix}EMG-{str(time.time_ns())[-9:-3]}"
            logger.error(f"Certificate fallback failed, issuing {emergency}: {e}")
            return CertificateAllocation(
                number=emergency,
                source=SOURCE_EMERGENCY,
                error=str(e)
            )


# Singleton instance
certificate_allocator = CertificateNumberAllocator()
