"""
Authentication dependencies
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from lumera.core.database import get_db
from lumera.core.exceptions import UnauthorizedException
from lumera.core.security import SecurityUtils
from lumera.models import User

security = HTTPBearer(auto_error=False)

async def _load_user(token: str, db: AsyncSession) -> User:
    payload = SecurityUtils.decode_token(token)

    if payload.get("type") != "access":
        raise UnauthorizedException("Invalid token type")

    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedException("Invalid authentication credentials")

    result = await db.execute(
        select(User).where(User.id == user_id, User.is_active.is_(True))
    )
    user = result.scalar_one_or_none()

    if user is None:
        raise UnauthorizedException("User not found or inactive")

    return user

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Get current authenticated user (required)
    Raises 401 if not authenticated or user not found
    """
    if not credentials:
        raise UnauthorizedException()

    return await _load_user(credentials.credentials, db)
