"""
Domain exceptions untuk layanan surat desa.

Services raise these; the API layer maps them to HTTP responses in
``src.middleware.error_handler``.

Usage:
    from src.core.exceptions import NotFoundError

    if not surat:
        raise NotFoundError("Surat request tidak ditemukan", details={"id": surat_id})
"""

from typing import Any, Dict, Optional


class DesaServiceError(Exception):
    """Base exception for all domain errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


class InvalidArgumentError(DesaServiceError):
    """Malformed or out-of-enumeration input."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="INVALID_ARGUMENT", details=details)


class NotFoundError(DesaServiceError):
    """Referenced resident, request or tracking code does not exist."""

    def __init__(self, message: str = "Data tidak ditemukan", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="NOT_FOUND", details=details)


class InvalidTransitionError(DesaServiceError):
    """Requested status change is not reachable from the current status."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Status surat tidak dapat diubah dari '{current}' ke '{requested}'",
            code="INVALID_TRANSITION",
            details={"current": current, "requested": requested}
        )


class ConflictError(DesaServiceError):
    """Uniqueness violation or a refused re-assignment."""

    def __init__(self, message: str = "Data bentrok dengan data yang sudah ada", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONFLICT", details=details)
