"""
Authentication schemas for EquipTrack
"""

from pydantic import BaseModel, Field
import uuid
from typing import Optional

ADMIN_ROLE = "admin"


class TokenPayload(BaseModel):
    """Claims carried by an EquipTrack access token"""
    user_id: uuid.UUID = Field(..., description="User identifier")
    username: str = Field(..., description="Username or email")
    role: str = Field(default="user", description="User role (admin, engineer, customer, user)")
    company_id: Optional[uuid.UUID] = Field(None, description="Company the user belongs to; absent for staff admins")
    jti: Optional[str] = Field(None, description="JWT ID")
    exp: Optional[int] = Field(None, description="Expiration timestamp")

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    def can_access_company(self, company_id) -> bool:
        """Admins see every company; everyone else only their own"""
        if self.is_admin:
            return True
        if self.company_id is None or company_id is None:
            return False
        return str(self.company_id) == str(company_id)


__all__ = ["TokenPayload", "ADMIN_ROLE"]
