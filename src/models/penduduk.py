"""Model untuk data penduduk (warga desa)."""

from typing import Optional
from datetime import date
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import Enum as SQLEnum
import uuid as uuid_lib

from src.models.base import BaseModel
from src.models.penduduk_enums import JenisKelamin, StatusPerkawinan, StatusHidup


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Penduduk(BaseModel, SQLModel, table=True):
    """Data kependudukan; dirujuk sebagai pemohon surat."""

    __tablename__ = "penduduk"

    id: str = Field(
        default_factory=lambda: str(uuid_lib.uuid4()),
        primary_key=True,
        max_length=36
    )

    nik: str = Field(max_length=16, unique=True, index=True, description="Nomor Induk Kependudukan")
    no_kk: str = Field(max_length=16, index=True, description="Nomor Kartu Keluarga")
    nama: str = Field(max_length=100, index=True)
    tempat_lahir: str = Field(max_length=100)
    tanggal_lahir: date
    jenis_kelamin: JenisKelamin = Field(
        sa_column=Column(SQLEnum(JenisKelamin, values_callable=_enum_values, name="jenis_kelamin"), nullable=False)
    )
    agama: str = Field(max_length=20)
    status_perkawinan: StatusPerkawinan = Field(
        sa_column=Column(
            SQLEnum(StatusPerkawinan, values_callable=_enum_values, name="status_perkawinan"),
            nullable=False
        )
    )
    pekerjaan: Optional[str] = Field(default=None, max_length=100)
    alamat: str
    rt: str = Field(max_length=3, index=True)
    rw: str = Field(max_length=3, index=True)
    status_hidup: StatusHidup = Field(
        default=StatusHidup.HIDUP,
        sa_column=Column(
            SQLEnum(StatusHidup, values_callable=_enum_values, name="status_hidup"),
            nullable=False,
            default=StatusHidup.HIDUP.value
        )
    )

    def __repr__(self) -> str:
        return f"<Penduduk(nik={self.nik}, nama={self.nama})>"
