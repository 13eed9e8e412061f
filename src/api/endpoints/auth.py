"""Authentication endpoints (bearer JWT)."""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db
from src.repositories.user import UserRepository
from src.services.user import UserService
from src.services.auth import AuthService
from src.schemas.user import UserLogin, Token, TokenRefresh, UserResponse
from src.auth.permissions import get_current_active_user

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_auth_service(session: AsyncSession = Depends(get_db)) -> AuthService:
    """Get auth service dependency."""
    user_repo = UserRepository(session)
    user_service = UserService(user_repo)
    return AuthService(user_service, user_repo)


async def get_user_service(session: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(UserRepository(session))


@router.post("/login", response_model=Token, summary="Login user")
async def login(
    login_data: UserLogin,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Login dengan username dan password.

    Returns JWT access token and refresh token along with user information.
    """
    result = await auth_service.login(login_data)
    logger.info(f"User {result.user.username} logged in")
    return result


@router.post("/refresh", response_model=Token, summary="Refresh access token")
async def refresh_token(
    refresh_data: TokenRefresh,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Get a new access token using a refresh token."""
    return await auth_service.refresh_token(refresh_data.refresh_token)


@router.get("/me", response_model=UserResponse, summary="Get current user info")
async def get_current_user_info(
    current_user: dict = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service)
):
    return await user_service.get_user(current_user["id"])
