"""
SQLAlchemy models for EquipTrack
"""

from .companies import Company
from .service_records import (
    ServiceRecordColumns,
    ServiceRecord,
    SpotWelderRecord,
    LiftServiceRecord,
    CompressorRecord,
    EQUIPMENT_SLOT_COUNT,
    EQUIPMENT_SLOT_FIELDS,
)

__all__ = [
    "Company",
    "ServiceRecordColumns",
    "ServiceRecord",
    "SpotWelderRecord",
    "LiftServiceRecord",
    "CompressorRecord",
    "EQUIPMENT_SLOT_COUNT",
    "EQUIPMENT_SLOT_FIELDS",
]
