"""
Pydantic schemas for service record API endpoints
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.service_records import EQUIPMENT_SLOT_FIELDS
from ..services.status_classifier import RecordStatus


class EquipmentSlots(BaseModel):
    """Eight flat name/serial slots attached to one record"""
    equipment1_name: str = ''
    equipment1_serial: str = ''
    equipment2_name: str = ''
    equipment2_serial: str = ''
    equipment3_name: str = ''
    equipment3_serial: str = ''
    equipment4_name: str = ''
    equipment4_serial: str = ''
    equipment5_name: str = ''
    equipment5_serial: str = ''
    equipment6_name: str = ''
    equipment6_serial: str = ''
    equipment7_name: str = ''
    equipment7_serial: str = ''
    equipment8_name: str = ''
    equipment8_serial: str = ''

    @field_validator(*EQUIPMENT_SLOT_FIELDS, mode='before')
    @classmethod
    def absent_slot_is_empty_string(cls, v):
        if v is None:
            return ''
        return str(v).strip()


def _service_date_as_text(v):
    """Service dates are parsed leniently by the store, so keep the raw text"""
    if v is None:
        return None
    if isinstance(v, (date, datetime)):
        return v.isoformat()
    return str(v)


class RecordCreate(EquipmentSlots):
    """
    Schema for creating a service record.

    company_id and service_date are required, but are checked by the store
    so the caller gets a 400 with a precise message. An unparseable
    service_date does not fail the request: the record is dated today and
    gets a retest date of today + 364 days. Any ``status`` sent by
    older clients is ignored; status is always derived.
    """
    model_config = ConfigDict(extra="ignore")

    company_id: Optional[UUID] = Field(None, description="Owning company")
    service_date: Optional[str] = Field(None, description="ISO service/test date; a time component is ignored")
    retest_date: Optional[date] = Field(None, description="Defaults to service_date + 364 days")
    certificate_number: Optional[str] = Field(None, max_length=50, description="Allocated when absent")
    engineer_name: Optional[str] = Field(None, max_length=255)
    details: Optional[Dict[str, Any]] = Field(None, description="Category-specific fields")
    notes: str = Field(default='', description="Free-text notes")

    @field_validator('notes', mode='before')
    @classmethod
    def null_notes(cls, v):
        return '' if v is None else v

    @field_validator('service_date', mode='before')
    @classmethod
    def lenient_service_date(cls, v):
        return _service_date_as_text(v)


class RecordUpdate(EquipmentSlots):
    """
    Schema for a full-record update (PUT).

    The retest date is recomputed from service_date unless
    retest_date_override is set, in which case retest_date is stored as sent.
    """
    model_config = ConfigDict(extra="ignore")

    service_date: Optional[str] = None
    retest_date: Optional[date] = None
    retest_date_override: bool = False
    certificate_number: Optional[str] = Field(None, max_length=50, description="Kept when absent")
    engineer_name: Optional[str] = Field(None, max_length=255)
    details: Optional[Dict[str, Any]] = None
    notes: str = ''

    @field_validator('notes', mode='before')
    @classmethod
    def null_notes(cls, v):
        return '' if v is None else v

    @field_validator('service_date', mode='before')
    @classmethod
    def lenient_service_date(cls, v):
        return _service_date_as_text(v)


class RecordRead(EquipmentSlots):
    """Schema for reading a service record, with its derived status"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    certificate_number: Optional[str] = None
    service_date: date
    retest_date: Optional[date] = None
    engineer_name: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    notes: str = ''
    status: RecordStatus = Field(..., description="Derived from retest_date at read time")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator('details', mode='before')
    @classmethod
    def null_details(cls, v):
        return {} if v is None else v


class PartialSuccessRecord(RecordRead):
    """
    Record returned when the database write failed.

    The certificate number and retest date are real allocations, but the row
    may not exist; clients should surface error_info and retry.
    """
    id: str
    persisted: bool = False
    error_info: str


class DegradedCertificateRecord(RecordRead):
    """Saved record whose certificate number is an emergency BWS-EMG- value"""
    error_info: str


class EquipmentSummary(BaseModel):
    """One row of the cross-category equipment listing"""
    id: UUID
    equipment_type: str
    company_id: UUID
    company_name: Optional[str] = None
    certificate_number: Optional[str] = None
    service_date: date
    retest_date: Optional[date] = None
    engineer_name: Optional[str] = None
    name: str = ''
    serial_number: str = ''
    status: RecordStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StatusSummary(BaseModel):
    company_id: UUID
    equipment_type: str
    counts: Dict[str, int]


class CertificateNumberResponse(BaseModel):
    certificate_number: str = Field(..., serialization_alias="certificateNumber")
    source: str
    error: Optional[str] = None


class RetestDateResponse(BaseModel):
    service_date: Optional[date] = None
    retest_date: date
    status: RecordStatus
    fallback: bool = Field(False, description="True when service_date was unparseable")


class EngineerRoster(BaseModel):
    engineers: List[str]
    enforced: bool
