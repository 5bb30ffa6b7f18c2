"""
Cross-category endpoints: combined equipment listing, certificate numbers,
retest date preview and the engineer roster
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..database.core import get_db
from ..dependencies import get_current_active_user
from ..middleware.rate_limiter import limiter, CERTIFICATE_NUMBER_LIMIT
from ..schemas.auth import TokenPayload
from ..schemas.service_record import (
    CertificateNumberResponse,
    EngineerRoster,
    EquipmentSummary,
    RetestDateResponse,
)
from ..services.certificate_allocator import certificate_allocator
from ..services.record_store import list_all_equipment
from ..services.retest_calculator import compute_retest_date, parse_date
from ..services.status_classifier import classify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Equipment"])


@router.get("/all-equipment", response_model=List[EquipmentSummary])
async def all_equipment(
    company_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: TokenPayload = Depends(get_current_active_user)
):
    """Every record of a company across all equipment categories"""
    return await list_all_equipment(db, company_id, current_user)


@router.get(
    "/generate-certificate-number",
    response_model=CertificateNumberResponse,
    response_model_exclude_none=True
)
@limiter.limit(CERTIFICATE_NUMBER_LIMIT)
async def generate_certificate_number(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_user: TokenPayload = Depends(get_current_active_user)
):
    """
    Reserve the next certificate number.

    Always answers 200; when the sequence is unavailable the number comes
    from the timestamp fallback and ``error`` may be set.
    """
    allocation = await certificate_allocator.allocate(db)
    # End the transaction the savepoint opened
    await db.commit()
    logger.info(f"User {current_user.user_id} reserved certificate number {allocation.number}")
    return CertificateNumberResponse(
        certificate_number=allocation.number,
        source=allocation.source,
        error=allocation.error
    )


@router.get("/retest-date", response_model=RetestDateResponse)
async def retest_date_preview(
    service_date: Optional[str] = Query(None, description="ISO date, e.g. 2024-01-01"),
    current_user: TokenPayload = Depends(get_current_active_user)
):
    """Preview the retest date and status a record with this service date would get"""
    parsed = parse_date(service_date)
    retest = compute_retest_date(parsed if parsed is not None else service_date)
    return RetestDateResponse(
        service_date=parsed,
        retest_date=retest,
        status=classify(retest),
        fallback=parsed is None
    )


@router.get("/engineers", response_model=EngineerRoster)
async def engineers(current_user: TokenPayload = Depends(get_current_active_user)):
    return EngineerRoster(
        engineers=settings.engineers,
        enforced=settings.enforce_engineer_roster
    )
