"""Filter schemas untuk list endpoints."""

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from src.models.surat_enums import JenisSurat, StatusSurat


def _clean_search(search: Optional[str]) -> Optional[str]:
    if search is not None:
        search = search.strip()
        if not search:
            return None
        if len(search) > 100:
            raise ValueError("Search term too long (max 100 characters)")
    return search


class SuratFilterParams(BaseModel):
    """Filter parameters untuk daftar pengajuan surat."""

    # Pagination
    page: int = Field(1, ge=1, description="Page number")
    size: int = Field(20, ge=1, le=100, description="Page size (max 100)")

    search: Optional[str] = Field(None, description="Cari di nomor surat, kode tracking, keperluan")
    status: Optional[StatusSurat] = Field(None, description="Filter by status")
    jenis_surat: Optional[JenisSurat] = Field(None, description="Filter by jenis surat")
    pemohon_id: Optional[str] = Field(None, description="Filter by pemohon")
    tahun: Optional[int] = Field(None, ge=2000, le=2100, description="Tahun pengajuan")

    @field_validator('search')
    @classmethod
    def validate_search(cls, search: Optional[str]) -> Optional[str]:
        """Validate and clean search term."""
        return _clean_search(search)


class PendudukFilterParams(BaseModel):
    """Filter parameters untuk daftar penduduk."""

    page: int = Field(1, ge=1, description="Page number")
    size: int = Field(20, ge=1, le=100, description="Page size (max 100)")

    search: Optional[str] = Field(None, description="Cari berdasarkan nama atau NIK")
    rt: Optional[str] = Field(None, max_length=3)
    rw: Optional[str] = Field(None, max_length=3)

    @field_validator('search')
    @classmethod
    def validate_search(cls, search: Optional[str]) -> Optional[str]:
        """Validate and clean search term."""
        return _clean_search(search)
