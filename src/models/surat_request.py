"""Model untuk pengajuan surat oleh warga."""

from typing import Any, Dict, Optional
from datetime import datetime
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import JSON, DateTime, Enum as SQLEnum
import uuid as uuid_lib

from src.models.base import BaseModel
from src.models.surat_enums import JenisSurat, StatusSurat


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class SuratRequest(BaseModel, SQLModel, table=True):
    """Pengajuan surat beserta status, kode tracking dan nomor surat resmi."""

    __tablename__ = "surat_requests"

    id: str = Field(
        default_factory=lambda: str(uuid_lib.uuid4()),
        primary_key=True,
        max_length=36
    )

    jenis_surat: JenisSurat = Field(
        sa_column=Column(
            SQLEnum(JenisSurat, values_callable=_enum_values, name="jenis_surat"),
            nullable=False,
            index=True
        )
    )
    pemohon_id: str = Field(
        foreign_key="penduduk.id",
        index=True,
        max_length=36,
        description="ID penduduk yang mengajukan"
    )
    keperluan: str = Field(description="Keperluan pengajuan surat")

    status: StatusSurat = Field(
        default=StatusSurat.PENDING,
        sa_column=Column(
            SQLEnum(StatusSurat, values_callable=_enum_values, name="status_surat"),
            nullable=False,
            index=True,
            default=StatusSurat.PENDING.value
        )
    )

    # Identifier
    tracking_code: str = Field(
        max_length=20,
        unique=True,
        index=True,
        description="Kode untuk cek status tanpa login"
    )
    nomor_surat: Optional[str] = Field(
        default=None,
        max_length=100,
        unique=True,
        index=True,
        description="Nomor surat resmi, diisi saat disetujui"
    )

    # Tanggal
    tanggal_pengajuan: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    tanggal_disetujui: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True, index=True)
    )
    tanggal_selesai: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )

    keterangan: Optional[str] = Field(default=None, description="Catatan, misalnya alasan penolakan")

    # Staf yang memproses
    processed_by: Optional[str] = Field(default=None, foreign_key="users.id", max_length=36)
    approved_by: Optional[str] = Field(default=None, foreign_key="users.id", max_length=36)

    template_data: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False, default=dict),
        description="Data isian template dokumen, diteruskan apa adanya"
    )

    def __repr__(self) -> str:
        return f"<SuratRequest(tracking_code={self.tracking_code}, status={self.status})>"
