"""Schemas untuk pengajuan surat."""

from typing import Any, Dict, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from src.models.surat_enums import JenisSurat, StatusSurat
from src.schemas.shared import BaseListResponse


# ===== REQUEST SCHEMAS =====

class SuratCreate(BaseModel):
    """Schema untuk mengajukan surat baru."""
    jenis_surat: str = Field(..., description=f"Salah satu dari: {', '.join(JenisSurat.get_all_values())}")
    pemohon_id: str = Field(..., description="ID penduduk pemohon")
    keperluan: str = Field(..., description="Keperluan pengajuan surat")
    template_data: Optional[Dict[str, Any]] = Field(None, description="Data isian template dokumen")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "jenis_surat": "SURAT_KETERANGAN_DOMISILI",
                "pemohon_id": "5b0c3c1e-8d6f-4c1a-9a47-2f0d1f3b6a11",
                "keperluan": "pengajuan KTP",
                "template_data": {}
            }
        }
    )


class SuratReject(BaseModel):
    """Schema untuk menolak surat."""
    keterangan: str = Field("", description="Alasan penolakan")


class SuratStatusUpdate(BaseModel):
    """Schema untuk ubah status via satu endpoint."""
    status: StatusSurat
    keterangan: Optional[str] = Field(None, description="Wajib dikirim saat menolak bila ada alasan")


# ===== RESPONSE SCHEMAS =====

class SuratResponse(BaseModel):
    """Schema lengkap pengajuan surat."""
    id: str
    jenis_surat: JenisSurat
    pemohon_id: str
    keperluan: str
    status: StatusSurat
    tracking_code: str
    nomor_surat: Optional[str] = None
    tanggal_pengajuan: datetime
    tanggal_disetujui: Optional[datetime] = None
    tanggal_selesai: Optional[datetime] = None
    keterangan: Optional[str] = None
    processed_by: Optional[str] = None
    approved_by: Optional[str] = None
    template_data: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Computed
    status_display: Optional[str] = None
    jenis_surat_display: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_model(cls, surat) -> "SuratResponse":
        response = cls.model_validate(surat)
        response.status_display = StatusSurat.get_display_name(StatusSurat(surat.status).value)
        response.jenis_surat_display = JenisSurat.get_display_name(JenisSurat(surat.jenis_surat).value)
        return response


class SuratTrackingResponse(BaseModel):
    """Status surat untuk cek publik via kode tracking (tanpa data pemohon)."""
    tracking_code: str
    jenis_surat: JenisSurat
    status: StatusSurat
    status_display: str
    nomor_surat: Optional[str] = None
    tanggal_pengajuan: datetime
    tanggal_selesai: Optional[datetime] = None
    keterangan: Optional[str] = None

    @classmethod
    def from_model(cls, surat) -> "SuratTrackingResponse":
        status = StatusSurat(surat.status)
        return cls(
            tracking_code=surat.tracking_code,
            jenis_surat=JenisSurat(surat.jenis_surat),
            status=status,
            status_display=StatusSurat.get_display_name(status.value),
            nomor_surat=surat.nomor_surat,
            tanggal_pengajuan=surat.tanggal_pengajuan,
            tanggal_selesai=surat.tanggal_selesai,
            keterangan=surat.keterangan
        )


class SuratListResponse(BaseListResponse[SuratResponse]):
    """Paginated surat list."""
    pass


class SuratStatistics(BaseModel):
    """Statistik pengajuan surat."""
    tahun: Optional[int] = None
    total: int
    by_status: Dict[str, int]
    by_jenis: Dict[str, int]
