"""User model untuk akun aparatur desa dan warga."""

from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import DateTime, Enum as SQLEnum
import uuid as uuid_lib

from .base import BaseModel
from .enums import UserRole


class User(BaseModel, SQLModel, table=True):
    """Akun login. Staf (admin/perangkat desa) memproses surat."""

    __tablename__ = "users"

    id: str = Field(
        default_factory=lambda: str(uuid_lib.uuid4()),
        primary_key=True,
        max_length=36
    )

    nama: str = Field(max_length=200, index=True, description="Nama lengkap")
    username: str = Field(max_length=50, unique=True, index=True)
    jabatan: Optional[str] = Field(default=None, max_length=200, description="Jabatan di pemerintahan desa")

    # Authentication
    hashed_password: str = Field(description="Password yang sudah di-hash")
    email: Optional[str] = Field(default=None, unique=True, index=True, max_length=255)

    # Status
    is_active: bool = Field(default=True)
    last_login: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    role: UserRole = Field(
        sa_column=Column(SQLEnum(UserRole), nullable=False, index=True),
        description="Role pengguna: admin desa, perangkat desa, atau warga"
    )

    def get_role_display(self) -> str:
        """Get role display name."""
        role_display = {
            UserRole.ADMIN_DESA: "Admin Desa",
            UserRole.PERANGKAT_DESA: "Perangkat Desa",
            UserRole.WARGA: "Warga"
        }
        return role_display.get(self.role, self.role.value)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username}, role={self.role.value})>"
