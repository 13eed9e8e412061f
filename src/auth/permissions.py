"""Authorization and role checking - single role per user."""

import logging
from typing import List, Dict
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.jwt import verify_token
from src.core.database import get_db
from src.models.enums import UserRole

logger = logging.getLogger(__name__)


class JWTBearer(HTTPBearer):
    """Bearer token from the Authorization header."""

    def __init__(self, auto_error: bool = True):
        super(JWTBearer, self).__init__(auto_error=auto_error)

    async def __call__(self, request: Request):
        try:
            credentials: HTTPAuthorizationCredentials = await super(
                JWTBearer, self
            ).__call__(request)
        except HTTPException:
            if self.auto_error:
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Not authenticated. Token required in Authorization header.",
                    headers={"WWW-Authenticate": "Bearer"},
                )
            return None

        if credentials is None:
            return None
        if credentials.scheme.lower() != "bearer":
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid authentication scheme.",
            )
        return credentials.credentials


jwt_bearer = JWTBearer()


async def get_current_user(
    token: str = Depends(jwt_bearer),
    session: AsyncSession = Depends(get_db)
) -> Dict:
    """Get the current authenticated user from JWT token."""
    # Import here to avoid circular import
    from src.repositories.user import UserRepository

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = verify_token(token)
    except (JWTError, ValueError):
        raise credentials_exception

    if payload.get("type") != "access":
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id:
        raise credentials_exception

    user_repo = UserRepository(session)
    user = await user_repo.get_by_id(user_id)

    if not user:
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is deactivated"
        )

    user_role = UserRole(user.role).value

    return {
        "id": user.id,
        "email": user.email,
        "username": user.username,
        "nama": user.nama,
        "role": user_role,
        "is_active": user.is_active,
        "jabatan": user.jabatan,
    }


async def get_current_active_user(
    current_user: Dict = Depends(get_current_user),
) -> Dict:
    """Ensure the current user is active."""
    if not current_user.get("is_active"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is deactivated"
        )
    return current_user


def require_roles(required_roles: List[str]):
    """
    Dependency factory to require specific roles.

    Args:
        required_roles: List of role names that are allowed access

    Returns:
        Dependency function that checks user roles
    """
    async def _check_roles(
        current_user: Dict = Depends(get_current_active_user),
    ) -> Dict:
        user_role = current_user.get("role")

        if user_role not in required_roles:
            logger.info(f"Access denied for user {current_user.get('id')} with role {user_role}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {', '.join(required_roles)}. Your role: {user_role}",
            )

        return current_user

    return _check_roles


# Common role dependencies
admin_required = require_roles([UserRole.ADMIN_DESA.value])
perangkat_desa_required = require_roles(UserRole.get_staff_values())
