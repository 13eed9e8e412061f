"""Auth module init."""

from .jwt import verify_password, get_password_hash, create_access_token, create_refresh_token, verify_token
from .permissions import (
    get_current_user,
    get_current_active_user,
    require_roles,
    admin_required,
    perangkat_desa_required
)

__all__ = [
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "create_refresh_token",
    "verify_token",
    "get_current_user",
    "get_current_active_user",
    "require_roles",
    "admin_required",
    "perangkat_desa_required"
]
