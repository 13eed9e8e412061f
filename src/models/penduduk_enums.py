"""Enums untuk data kependudukan."""

from enum import Enum


class JenisKelamin(str, Enum):
    LAKI_LAKI = "L"
    PEREMPUAN = "P"

    @classmethod
    def get_display_name(cls, value: str) -> str:
        return "Laki-laki" if value == cls.LAKI_LAKI.value else "Perempuan"


class StatusPerkawinan(str, Enum):
    BELUM_KAWIN = "belum_kawin"
    KAWIN = "kawin"
    CERAI_HIDUP = "cerai_hidup"
    CERAI_MATI = "cerai_mati"


class StatusHidup(str, Enum):
    HIDUP = "hidup"
    MENINGGAL = "meninggal"
