"""User management endpoints (admin desa)."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db
from src.repositories.user import UserRepository
from src.services.user import UserService
from src.schemas.user import UserCreate, UserResponse
from src.auth.permissions import admin_required

router = APIRouter()


async def get_user_service(session: AsyncSession = Depends(get_db)) -> UserService:
    """Get user service dependency."""
    return UserService(UserRepository(session))


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    current_user: dict = Depends(admin_required),
    user_service: UserService = Depends(get_user_service)
):
    """
    Create akun baru.

    **Accessible by**: Admin desa only.
    """
    return await user_service.create_user(user_data)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    current_user: dict = Depends(admin_required),
    user_service: UserService = Depends(get_user_service)
):
    return await user_service.get_user(user_id)
