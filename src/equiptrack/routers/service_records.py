"""
Service record CRUD routers

The same set of routes is mounted once per equipment category.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.core import get_db
from ..dependencies import get_current_active_user
from ..schemas.auth import TokenPayload
from ..schemas.service_record import (
    DegradedCertificateRecord,
    RecordCreate,
    RecordRead,
    RecordUpdate,
    StatusSummary,
)
from ..services.equipment_registry import CATEGORY_REGISTRY, CategorySpec
from ..services.record_store import STORES

logger = logging.getLogger(__name__)


def build_record_router(spec: CategorySpec) -> APIRouter:
    """Create the list/get/create/update/delete routes for one category"""
    store = STORES[spec.category.value]
    router = APIRouter(prefix=spec.prefix, tags=[spec.label])

    @router.get("", response_model=List[RecordRead])
    async def list_records(
        company_id: Optional[UUID] = Query(None, description="Company whose records to list"),
        db: AsyncSession = Depends(get_db),
        current_user: TokenPayload = Depends(get_current_active_user)
    ):
        """List a company's records, newest service date first"""
        records = await store.list(db, company_id, current_user)
        return [RecordRead.model_validate(record) for record in records]

    # Declared before /{record_id} so the literal path wins
    @router.get("/status-summary", response_model=StatusSummary)
    async def status_summary(
        company_id: Optional[UUID] = Query(None),
        db: AsyncSession = Depends(get_db),
        current_user: TokenPayload = Depends(get_current_active_user)
    ):
        """Count a company's records per compliance status"""
        counts = await store.status_summary(db, company_id, current_user)
        return StatusSummary(company_id=company_id, equipment_type=store.name, counts=counts)

    @router.get("/{record_id}", response_model=RecordRead)
    async def get_record(
        record_id: UUID,
        db: AsyncSession = Depends(get_db),
        current_user: TokenPayload = Depends(get_current_active_user)
    ):
        record = await store.get(db, record_id, current_user)
        return RecordRead.model_validate(record)

    @router.post("", response_model=RecordRead, status_code=201)
    async def create_record(
        record_data: RecordCreate,
        db: AsyncSession = Depends(get_db),
        current_user: TokenPayload = Depends(get_current_active_user)
    ):
        """
        Create a record. The retest date and certificate number are derived
        when not supplied.

        If the database write fails the response is still 201, carrying the
        unsaved record, an ``error_info`` message and ``X-Database-Error: true``.
        An emergency certificate number is flagged the same way with
        ``X-Certificate-Error: true``.
        """
        outcome = await store.create(db, record_data, current_user)

        headers = {}
        if outcome.certificate_error:
            headers["X-Certificate-Error"] = "true"
        if not outcome.persisted:
            headers["X-Database-Error"] = "true"
            body = outcome.record
        elif outcome.certificate_error:
            body = DegradedCertificateRecord(
                **RecordRead.model_validate(outcome.record).model_dump(),
                error_info=outcome.certificate_error
            )
        else:
            return RecordRead.model_validate(outcome.record)

        return JSONResponse(status_code=201, content=jsonable_encoder(body), headers=headers)

    @router.put("/{record_id}", response_model=RecordRead)
    async def update_record(
        record_id: UUID,
        record_data: RecordUpdate,
        db: AsyncSession = Depends(get_db),
        current_user: TokenPayload = Depends(get_current_active_user)
    ):
        record = await store.update(db, record_id, record_data, current_user)
        return RecordRead.model_validate(record)

    @router.delete("/{record_id}", status_code=204)
    async def delete_record(
        record_id: UUID,
        db: AsyncSession = Depends(get_db),
        current_user: TokenPayload = Depends(get_current_active_user)
    ):
        """Delete a record; deleting an unknown id also returns 204"""
        await store.delete(db, record_id, current_user)
        return Response(status_code=204)

    return router


routers = [build_record_router(spec) for spec in CATEGORY_REGISTRY.values()]
