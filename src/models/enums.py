"""Enums untuk database models - MATCH DATABASE UPPERCASE."""

from enum import Enum


class UserRole(str, Enum):
    """User role enum yang match dengan database UPPERCASE values."""
    ADMIN_DESA = "ADMIN_DESA"          # Kepala/admin desa
    PERANGKAT_DESA = "PERANGKAT_DESA"  # Staf pelayanan
    WARGA = "WARGA"

    @classmethod
    def get_staff_values(cls):
        """Roles yang boleh memproses surat."""
        return [cls.ADMIN_DESA.value, cls.PERANGKAT_DESA.value]
