"""Schemas untuk data penduduk."""

from typing import Optional
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.penduduk_enums import JenisKelamin, StatusPerkawinan, StatusHidup
from src.schemas.shared import BaseListResponse


class PendudukBase(BaseModel):
    nik: str = Field(..., min_length=16, max_length=16, description="NIK 16 digit")
    no_kk: str = Field(..., min_length=16, max_length=16, description="Nomor KK 16 digit")
    nama: str = Field(..., min_length=2, max_length=100)
    tempat_lahir: str = Field(..., min_length=1, max_length=100)
    tanggal_lahir: date
    jenis_kelamin: JenisKelamin
    agama: str = Field(..., min_length=1, max_length=20)
    status_perkawinan: StatusPerkawinan
    pekerjaan: Optional[str] = Field(None, max_length=100)
    alamat: str = Field(..., min_length=1)
    rt: str = Field(..., min_length=1, max_length=3)
    rw: str = Field(..., min_length=1, max_length=3)


class PendudukCreate(PendudukBase):
    """Schema untuk mendaftarkan penduduk."""

    @field_validator('nik', 'no_kk')
    @classmethod
    def validate_numeric_16(cls, value: str) -> str:
        if not value.isdigit():
            raise ValueError("NIK/No KK harus berupa 16 digit angka")
        return value

    @field_validator('rt', 'rw')
    @classmethod
    def validate_rt_rw(cls, value: str) -> str:
        if not value.isdigit():
            raise ValueError("RT/RW harus berupa angka")
        return value

    @field_validator('nama')
    @classmethod
    def normalize_nama(cls, nama: str) -> str:
        """Nama disimpan huruf besar tanpa spasi di tepi."""
        nama = nama.strip().upper()
        if len(nama) < 2:
            raise ValueError("Nama minimal 2 karakter")
        return nama

    @field_validator('tanggal_lahir')
    @classmethod
    def validate_tanggal_lahir(cls, tanggal_lahir: date) -> date:
        if tanggal_lahir >= date.today():
            raise ValueError("Tanggal lahir harus sebelum hari ini")
        return tanggal_lahir


class PendudukResponse(PendudukBase):
    id: str
    status_hidup: StatusHidup
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PendudukListResponse(BaseListResponse[PendudukResponse]):
    pass


class PendudukUpdate(BaseModel):
    """Schema untuk mengubah data penduduk; NIK tidak bisa diubah."""
    no_kk: Optional[str] = Field(None, min_length=16, max_length=16)
    nama: Optional[str] = Field(None, min_length=2, max_length=100)
    tempat_lahir: Optional[str] = Field(None, min_length=1, max_length=100)
    tanggal_lahir: Optional[date] = None
    jenis_kelamin: Optional[JenisKelamin] = None
    agama: Optional[str] = Field(None, min_length=1, max_length=20)
    status_perkawinan: Optional[StatusPerkawinan] = None
    pekerjaan: Optional[str] = Field(None, max_length=100)
    alamat: Optional[str] = Field(None, min_length=1)
    rt: Optional[str] = Field(None, min_length=1, max_length=3)
    rw: Optional[str] = Field(None, min_length=1, max_length=3)
    status_hidup: Optional[StatusHidup] = None

    @field_validator('no_kk', 'rt', 'rw')
    @classmethod
    def validate_numeric(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.isdigit():
            raise ValueError("No KK/RT/RW harus berupa angka")
        return value

    @field_validator('nama')
    @classmethod
    def normalize_nama(cls, nama: Optional[str]) -> Optional[str]:
        if nama is not None:
            nama = nama.strip().upper()
            if len(nama) < 2:
                raise ValueError("Nama minimal 2 karakter")
        return nama

    @field_validator('tanggal_lahir')
    @classmethod
    def validate_tanggal_lahir(cls, tanggal_lahir: Optional[date]) -> Optional[date]:
        if tanggal_lahir is not None and tanggal_lahir >= date.today():
            raise ValueError("Tanggal lahir harus sebelum hari ini")
        return tanggal_lahir
