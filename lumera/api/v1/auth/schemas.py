"""
Authentication schemas
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

from lumera.models import UserRole

class UserResponse(BaseModel):
    """Current user as seen by the storefront"""
    id: str
    phone: str
    email: Optional[str] = None
    name: str
    role: UserRole
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
