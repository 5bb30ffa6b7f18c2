"""
SQLAlchemy model for Companies
"""

import uuid
from sqlalchemy import Column, String, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from ..database.core import Base


class Company(Base):
    """
    Customer company that owns equipment service records.

    Only the columns the service record API reads are mapped here; the
    wider customer profile lives in the front-office application.
    """
    __tablename__ = 'companies'

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=func.uuid_generate_v4()
    )
    company_name = Column(String(255), nullable=False, doc="Display name of the customer company")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Company(id={self.id}, name='{self.company_name}')>"
