"""User and authentication schemas."""

from typing import Optional
from pydantic import BaseModel, EmailStr, ConfigDict, field_validator, Field
from datetime import datetime
import re

from src.models.enums import UserRole


# ===== BASE SCHEMAS =====

class UserBase(BaseModel):
    """Base user schema dengan role field."""
    nama: str = Field(..., min_length=1, max_length=200, description="Nama lengkap")
    jabatan: Optional[str] = Field(None, max_length=200)
    email: Optional[EmailStr] = Field(None, description="Email is optional")
    is_active: bool = True
    role: UserRole = Field(..., description="Role: ADMIN_DESA, PERANGKAT_DESA, atau WARGA")

    @field_validator('nama')
    @classmethod
    def validate_nama(cls, nama: str) -> str:
        """Validate nama format."""
        nama = nama.strip()
        if not nama:
            raise ValueError("Nama cannot be empty")
        if not re.match(r"^[a-zA-Z\s.,'\-]+$", nama):
            raise ValueError("Nama can only contain letters, spaces, and common punctuation")
        return nama


# ===== REQUEST SCHEMAS =====

class UserCreate(UserBase):
    """Schema for creating a user."""
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator('username')
    @classmethod
    def validate_username(cls, username: str) -> str:
        username = username.strip().lower()
        if not re.match(r"^[a-z0-9_.]+$", username):
            raise ValueError("Username can only contain lowercase letters, digits, '_' and '.'")
        return username


class UserLogin(BaseModel):
    """Schema for login."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenRefresh(BaseModel):
    """Schema for refreshing tokens."""
    refresh_token: str


# ===== RESPONSE SCHEMAS =====

class UserResponse(UserBase):
    """Schema for user response."""
    id: str
    username: str
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    # Computed
    role_display: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_user_model(cls, user) -> "UserResponse":
        response = cls.model_validate(user)
        response.role_display = user.get_role_display()
        return response


class Token(BaseModel):
    """Token response schema."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
