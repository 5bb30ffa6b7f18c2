"""
SQLAlchemy models for equipment service records.

Every equipment category keeps its records in its own table, but the
tables share one column layout (ServiceRecordColumns). Category-specific
measurements live in the ``details`` JSONB column.
"""

import uuid
from sqlalchemy import Column, String, Date, DateTime, Text, ForeignKey
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import declared_attr
from sqlalchemy.sql import func

from ..database.core import Base
from ..services.status_classifier import classify

EQUIPMENT_SLOT_COUNT = 8

EQUIPMENT_SLOT_FIELDS = tuple(
    f"equipment{i}_{part}"
    for i in range(1, EQUIPMENT_SLOT_COUNT + 1)
    for part in ("name", "serial")
)


class ServiceRecordColumns:
    """Columns shared by every service record table"""

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=func.uuid_generate_v4()
    )

    @declared_attr
    def company_id(cls):
        return Column(
            UUID(as_uuid=True),
            ForeignKey('companies.id', ondelete='CASCADE'),
            nullable=False,
            index=True,
            doc="Owning company; fixed at creation"
        )

    certificate_number = Column(String(50), nullable=True, index=True, doc="BWS-<digits>")
    service_date = Column(Date, nullable=False, doc="Date the equipment was serviced/tested")
    retest_date = Column(Date, nullable=True, doc="service_date + 364 days unless overridden")
    engineer_name = Column(String(255), nullable=True)

    equipment1_name = Column(String(255), nullable=False, default='', server_default='')
    equipment1_serial = Column(String(100), nullable=False, default='', server_default='')
    equipment2_name = Column(String(255), nullable=False, default='', server_default='')
    equipment2_serial = Column(String(100), nullable=False, default='', server_default='')
    equipment3_name = Column(String(255), nullable=False, default='', server_default='')
    equipment3_serial = Column(String(100), nullable=False, default='', server_default='')
    equipment4_name = Column(String(255), nullable=False, default='', server_default='')
    equipment4_serial = Column(String(100), nullable=False, default='', server_default='')
    equipment5_name = Column(String(255), nullable=False, default='', server_default='')
    equipment5_serial = Column(String(100), nullable=False, default='', server_default='')
    equipment6_name = Column(String(255), nullable=False, default='', server_default='')
    equipment6_serial = Column(String(100), nullable=False, default='', server_default='')
    equipment7_name = Column(String(255), nullable=False, default='', server_default='')
    equipment7_serial = Column(String(100), nullable=False, default='', server_default='')
    equipment8_name = Column(String(255), nullable=False, default='', server_default='')
    equipment8_serial = Column(String(100), nullable=False, default='', server_default='')

    details = Column(JSONB, nullable=False, default=dict, server_default='{}')
    notes = Column(Text, nullable=False, default='', server_default='')

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    @property
    def status(self) -> str:
        """Compliance status projected from retest_date; never stored"""
        return classify(self.retest_date).value

    def __repr__(self):
        return (
            f"<{type(self).__name__}(id={self.id}, certificate='{self.certificate_number}', "
            f"retest={self.retest_date})>"
        )


class ServiceRecord(ServiceRecordColumns, Base):
    """Generic calibration/service certificate"""
    __tablename__ = 'service_records'


class SpotWelderRecord(ServiceRecordColumns, Base):
    """Spot welder service record"""
    __tablename__ = 'spot_welder_records'


class LiftServiceRecord(ServiceRecordColumns, Base):
    """Lift equipment (LOLER) service record"""
    __tablename__ = 'lift_service_records'


class CompressorRecord(ServiceRecordColumns, Base):
    """Compressor service record"""
    __tablename__ = 'compressors_records'
