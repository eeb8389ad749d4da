"""
Authentication routes
Session probing used by clients to derive their authenticated state
"""

from fastapi import APIRouter, Depends, status

from lumera.models import User
from .dependencies import get_current_user
from .schemas import UserResponse

router = APIRouter()

@router.get(
    "/me",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Get current user",
    description="Get currently authenticated user information"
)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current user information"""
    return UserResponse.model_validate(current_user)
