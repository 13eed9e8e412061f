"""Models initialization."""

from .base import BaseModel, TimestampMixin, SoftDeleteMixin, AuditMixin
from .enums import UserRole
from .surat_enums import JenisSurat, StatusSurat
from .penduduk_enums import JenisKelamin, StatusPerkawinan, StatusHidup

from .user import User
from .penduduk import Penduduk
from .surat_request import SuratRequest

__all__ = [
    # Base classes
    "BaseModel",
    "TimestampMixin",
    "SoftDeleteMixin",
    "AuditMixin",

    # Enums
    "UserRole",
    "JenisSurat",
    "StatusSurat",
    "JenisKelamin",
    "StatusPerkawinan",
    "StatusHidup",

    # Tables
    "User",
    "Penduduk",
    "SuratRequest",
]

# Table creation order (foreign keys):
# 1. users
# 2. penduduk
# 3. surat_requests (depends on penduduk, users)
#
# UNIQUE: users.username, users.email, penduduk.nik,
#         surat_requests.tracking_code, surat_requests.nomor_surat
