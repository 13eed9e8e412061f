"""User Repository."""

from typing import Optional
from datetime import datetime, timezone
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.user import User
from src.models.enums import UserRole
from src.schemas.user import UserCreate
from src.auth.jwt import get_password_hash


class UserRepository:
    """Repository untuk akun pengguna."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user_data: UserCreate) -> User:
        """Create user dengan password yang di-hash."""
        user = User(
            nama=user_data.nama,
            username=user_data.username,
            jabatan=user_data.jabatan,
            hashed_password=get_password_hash(user_data.password),
            email=user_data.email.lower() if user_data.email else None,
            is_active=user_data.is_active,
            role=user_data.role
        )

        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by UUID."""
        query = select(User).where(
            and_(User.id == user_id, User.deleted_at.is_(None))
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username (untuk login)."""
        query = select(User).where(
            and_(User.username == username, User.deleted_at.is_(None))
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        query = select(User).where(
            and_(User.email == email.lower(), User.deleted_at.is_(None))
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def update_last_login(self, user_id: str) -> None:
        """Update last login timestamp."""
        user = await self.get_by_id(user_id)
        if user:
            user.last_login = datetime.now(timezone.utc)
            await self.session.commit()

    async def admin_exists(self) -> bool:
        """Check apakah sudah ada akun admin desa."""
        query = select(User.id).where(
            and_(User.role == UserRole.ADMIN_DESA, User.deleted_at.is_(None))
        ).limit(1)
        result = await self.session.execute(query)
        return result.scalar_one_or_none() is not None
