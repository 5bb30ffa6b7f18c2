"""
Service record store.

One generic CRUD adapter shared by every equipment category. It owns the
lifecycle rules: retest date derivation, certificate number allocation,
company scoping and the degraded "partial success" create.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..models.companies import Company
from ..models.service_records import EQUIPMENT_SLOT_FIELDS
from ..schemas.auth import TokenPayload
from ..schemas.service_record import (
    EquipmentSummary,
    PartialSuccessRecord,
    RecordCreate,
    RecordUpdate,
)
from ..utils.errors import ForbiddenError, NotFoundError, StoreError, ValidationError
from .certificate_allocator import CertificateAllocation, certificate_allocator, normalize_certificate_number
from .equipment_registry import CATEGORY_REGISTRY, CategorySpec, get_category
from .retest_calculator import compute_retest_date, parse_date
from .status_classifier import classify, summarize

logger = logging.getLogger(__name__)

UNDEFINED_TABLE = "42P01"
PARTIAL_SUCCESS_MESSAGE = (
    "Record may not have been saved to database. Please try again or contact support."
)
CERTIFICATE_ERROR_MESSAGE = (
    "Certificate number could not be allocated normally; an emergency number was "
    "issued. Please review it before issuing the certificate."
)


def is_missing_table(exc: Exception) -> bool:
    """True if a database error is PostgreSQL's 'relation does not exist'"""
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code == UNDEFINED_TABLE:
        return True
    return type(orig).__name__ == "UndefinedTableError"


def resolve_service_date(raw) -> date:
    """Parsed service date, or today (UTC) when the text is unparseable"""
    return parse_date(raw) or datetime.now(timezone.utc).date()


@dataclass
class CreateOutcome:
    """
    Result of RecordStore.create.

    ``persisted`` is False for the partial-success variant, where ``record``
    is a PartialSuccessRecord that was never written. ``certificate_error``
    is set when the certificate number is an emergency value.
    """
    record: Any
    persisted: bool
    allocation: CertificateAllocation
    error_info: Optional[str] = None
    certificate_error: Optional[str] = None


class RecordStore:
    """CRUD for one equipment category's service records"""

    def __init__(self, category: Union[CategorySpec, str]):
        self.spec = category if isinstance(category, CategorySpec) else get_category(category)
        self.model = self.spec.model

    @property
    def name(self) -> str:
        return self.spec.category.value

    def _authorize(self, requester: TokenPayload, company_id) -> None:
        if not requester.can_access_company(company_id):
            logger.warning(
                f"User {requester.user_id} (company {requester.company_id}) denied access "
                f"to {self.name} records of company {company_id}"
            )
            raise ForbiddenError("You do not have access to this company's records")

    def _check_engineer(self, engineer_name: Optional[str]) -> None:
        if not settings.enforce_engineer_roster or not engineer_name:
            return
        if engineer_name not in settings.engineers:
            raise ValidationError(f"Unknown engineer '{engineer_name}'")

    def _validate_details(self, details: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        try:
            validated = self.spec.details_schema.model_validate(details or {})
        except SchemaValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            raise ValidationError(f"details.{field}: {first['msg']}")
        return validated.model_dump(exclude_none=True)

    async def list(self, db: AsyncSession, company_id, requester: TokenPayload) -> List[Any]:
        """List a company's records, newest service date first"""
        if not company_id:
            raise ValidationError("company_id is required")
        self._authorize(requester, company_id)

        try:
            result = await db.execute(
                select(self.model)
                .where(self.model.company_id == company_id)
                .order_by(desc(self.model.service_date))
            )
            records = list(result.scalars().all())
        except SQLAlchemyError as e:
            if is_missing_table(e):
                logger.warning(f"Table {self.spec.table_name} does not exist, returning no records")
                await db.rollback()
                return []
            raise StoreError(internal=f"list {self.name}: {e}")

        logger.debug(f"Fetched {len(records)} {self.name} records for company {company_id}")
        return records

    async def _load(self, db: AsyncSession, record_id):
        try:
            return await db.get(self.model, record_id)
        except SQLAlchemyError as e:
            if is_missing_table(e):
                await db.rollback()
                return None
            raise StoreError(internal=f"get {self.name} {record_id}: {e}")

    async def get(self, db: AsyncSession, record_id, requester: TokenPayload):
        record = await self._load(db, record_id)
        if record is None:
            raise NotFoundError(f"{self.spec.label} record {record_id} not found")
        self._authorize(requester, record.company_id)
        return record

    async def create(
        self,
        db: AsyncSession,
        payload: RecordCreate,
        requester: TokenPayload
    ) -> CreateOutcome:
        if not payload.company_id:
            raise ValidationError("company_id is required")
        if not payload.service_date or not payload.service_date.strip():
            raise ValidationError("service_date is required")

        self._authorize(requester, payload.company_id)
        self._check_engineer(payload.engineer_name)
        details = self._validate_details(payload.details)

        service_date = resolve_service_date(payload.service_date)
        retest_date = payload.retest_date or compute_retest_date(payload.service_date)
        allocation = await certificate_allocator.allocate(db, payload.certificate_number)
        certificate_error = None
        if allocation.error:
            logger.error(f"Certificate allocation degraded for {self.name}: {allocation.error}")
            certificate_error = CERTIFICATE_ERROR_MESSAGE

        slots = {field: getattr(payload, field) or '' for field in EQUIPMENT_SLOT_FIELDS}
        record = self.model(
            id=uuid.uuid4(),
            company_id=payload.company_id,
            certificate_number=allocation.number,
            service_date=service_date,
            retest_date=retest_date,
            engineer_name=payload.engineer_name,
            details=details,
            notes=payload.notes or '',
            **slots
        )

        try:
            db.add(record)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(
                f"Failed to insert {self.name} record {allocation.number} "
                f"for company {payload.company_id}: {e}"
            )
            partial = PartialSuccessRecord(
                id=f"unsaved-{int(time.time() * 1000)}",
                company_id=payload.company_id,
                certificate_number=allocation.number,
                service_date=service_date,
                retest_date=retest_date,
                engineer_name=payload.engineer_name,
                details=details,
                notes=payload.notes or '',
                status=classify(retest_date),
                error_info=PARTIAL_SUCCESS_MESSAGE,
                **slots
            )
            return CreateOutcome(
                record=partial,
                persisted=False,
                allocation=allocation,
                error_info=PARTIAL_SUCCESS_MESSAGE,
                certificate_error=certificate_error
            )

        # The row is committed past this point; a failed reload is not a partial success
        try:
            await db.refresh(record)
        except SQLAlchemyError as e:
            raise StoreError(
                internal=f"reload {self.name} record {record.id} after insert: {e}",
                detail="Record was saved but could not be reloaded. Refresh the list before retrying."
            )

        logger.info(
            f"Created {self.name} record {record.id} ({allocation.number}, "
            f"source={allocation.source}) for company {payload.company_id}"
        )
        return CreateOutcome(
            record=record,
            persisted=True,
            allocation=allocation,
            certificate_error=certificate_error
        )

    async def update(
        self,
        db: AsyncSession,
        record_id,
        payload: RecordUpdate,
        requester: TokenPayload
    ):
        """
        Replace the editable fields of a record.

        company_id and id never change. The retest date follows the service
        date unless retest_date_override is set.
        """
        record = await self.get(db, record_id, requester)

        if not payload.service_date or not payload.service_date.strip():
            raise ValidationError("service_date is required")
        self._check_engineer(payload.engineer_name)
        details = self._validate_details(payload.details)

        service_date = resolve_service_date(payload.service_date)
        if payload.retest_date_override:
            if payload.retest_date is None:
                raise ValidationError("retest_date is required when retest_date_override is set")
            record.retest_date = payload.retest_date
        elif service_date != record.service_date or record.retest_date is None:
            record.retest_date = compute_retest_date(payload.service_date)

        record.service_date = service_date
        record.engineer_name = payload.engineer_name
        record.details = details
        record.notes = payload.notes or ''
        for field in EQUIPMENT_SLOT_FIELDS:
            setattr(record, field, getattr(payload, field) or '')
        if payload.certificate_number and payload.certificate_number.strip():
            record.certificate_number = normalize_certificate_number(payload.certificate_number)

        try:
            await db.commit()
            await db.refresh(record)
        except SQLAlchemyError as e:
            await db.rollback()
            raise StoreError(internal=f"update {self.name} {record_id}: {e}")

        logger.info(f"Updated {self.name} record {record_id}")
        return record

    async def delete(self, db: AsyncSession, record_id, requester: TokenPayload) -> None:
        """Delete a record. Unknown ids are treated as already deleted."""
        record = await self._load(db, record_id)
        if record is None:
            logger.info(f"{self.name} record {record_id} already absent, nothing to delete")
            return

        self._authorize(requester, record.company_id)

        try:
            await db.delete(record)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise StoreError(internal=f"delete {self.name} {record_id}: {e}")

        logger.info(f"Deleted {self.name} record {record_id}")

    async def status_summary(self, db: AsyncSession, company_id, requester: TokenPayload) -> Dict[str, int]:
        records = await self.list(db, company_id, requester)
        return summarize(record.retest_date for record in records)


STORES: Dict[str, RecordStore] = {
    category.value: RecordStore(spec) for category, spec in CATEGORY_REGISTRY.items()
}


def _display_identity(record) -> Dict[str, str]:
    """Primary name/serial: first equipment slot, else the category details"""
    details = record.details or {}
    return {
        "name": record.equipment1_name or details.get("model") or '',
        "serial_number": record.equipment1_serial or details.get("serial_number") or '',
    }


async def list_all_equipment(
    db: AsyncSession,
    company_id,
    requester: TokenPayload
) -> List[EquipmentSummary]:
    """Every record of a company across all categories, newest service date first"""
    if not company_id:
        raise ValidationError("company_id is required")

    try:
        company = await db.get(Company, company_id)
    except SQLAlchemyError as e:
        raise StoreError(internal=f"load company {company_id}: {e}")
    company_name = company.company_name if company is not None else None

    items = []
    for name, store in STORES.items():
        for record in await store.list(db, company_id, requester):
            items.append(EquipmentSummary(
                id=record.id,
                equipment_type=name,
                company_id=record.company_id,
                company_name=company_name,
                certificate_number=record.certificate_number,
                service_date=record.service_date,
                retest_date=record.retest_date,
                engineer_name=record.engineer_name,
                status=classify(record.retest_date),
                created_at=record.created_at,
                updated_at=record.updated_at,
                **_display_identity(record)
            ))

    items.sort(key=lambda item: item.service_date, reverse=True)
    return items
