"""User service - akun petugas dan warga."""

import logging
from typing import Optional

from src.auth.jwt import verify_password
from src.core.exceptions import ConflictError, NotFoundError
from src.models.user import User
from src.models.enums import UserRole
from src.repositories.user import UserRepository
from src.schemas.user import UserCreate, UserResponse

logger = logging.getLogger(__name__)


class UserService:
    """Service untuk akun pengguna."""

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def create_user(self, user_data: UserCreate) -> UserResponse:
        """Create user; username dan email harus unik."""
        if await self.user_repo.get_by_username(user_data.username):
            raise ConflictError("Username sudah digunakan", details={"username": user_data.username})

        if user_data.email and await self.user_repo.get_by_email(user_data.email):
            raise ConflictError("Email sudah terdaftar", details={"email": user_data.email})

        user = await self.user_repo.create(user_data)
        logger.info(f"User created: {user.username} ({user.role})")
        return UserResponse.from_user_model(user)

    async def get_user(self, user_id: str) -> UserResponse:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User tidak ditemukan", details={"id": user_id})
        return UserResponse.from_user_model(user)

    async def authenticate_user(self, username: str, password: str) -> Optional[User]:
        """Return user bila username/password cocok dan akun aktif."""
        user = await self.user_repo.get_by_username(username.strip().lower())
        if not user or not user.is_active:
            return None
        if not verify_password(password, user.hashed_password):
            return None

        await self.user_repo.update_last_login(user.id)
        return user

    async def ensure_default_admin(self, username: str, password: str) -> Optional[UserResponse]:
        """Buat admin default jika belum ada admin sama sekali."""
        if await self.user_repo.admin_exists():
            return None

        user = await self.user_repo.create(UserCreate(
            nama="Administrator",
            username=username,
            password=password,
            role=UserRole.ADMIN_DESA
        ))
        logger.info(f"Default admin created: {user.username}")
        return UserResponse.from_user_model(user)
