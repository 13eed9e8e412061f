"""Authentication service (bearer tokens)."""

import logging
from datetime import timedelta
from fastapi import HTTPException, status
from jose import JWTError

from src.repositories.user import UserRepository
from src.services.user import UserService
from src.schemas.user import UserLogin, Token, UserResponse
from src.auth.jwt import create_access_token, create_refresh_token, verify_token
from src.models.enums import UserRole
from src.core.config import settings

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, user_service: UserService, user_repo: UserRepository):
        self.user_service = user_service
        self.user_repo = user_repo

    async def login(self, login_data: UserLogin) -> Token:
        """Login dan terbitkan access + refresh token."""
        user = await self.user_service.authenticate_user(login_data.username, login_data.password)

        if not user:
            logger.info(f"Failed login attempt for username '{login_data.username}'")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Username atau password salah",
                headers={"WWW-Authenticate": "Bearer"},
            )

        refresh_token = create_refresh_token(data={"sub": str(user.id), "type": "refresh"})
        return self._build_token(user, refresh_token)

    async def refresh_token(self, refresh_token: str) -> Token:
        """Terbitkan access token baru dari refresh token."""
        try:
            payload = verify_token(refresh_token)
        except JWTError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Refresh token tidak valid"
            )

        if payload.get("type") != "refresh":
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Jenis token tidak valid"
            )

        user_id = payload.get("sub")
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Payload token tidak valid"
            )

        user = await self.user_repo.get_by_id(user_id)
        if not user or not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User tidak ditemukan atau tidak aktif"
            )

        return self._build_token(user, refresh_token)

    def _build_token(self, user, refresh_token: str) -> Token:
        # Role terbaru dari DB
        token_data = {
            "sub": str(user.id),
            "username": user.username,
            "nama": user.nama,
            "role": UserRole(user.role).value,
            "type": "access"
        }
        access_token = create_access_token(
            data=token_data,
            expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        )

        return Token(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="bearer",
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user=UserResponse.from_user_model(user)
        )
