"""Tests untuk kode tracking dan format nomor surat."""

import re
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from src.models.surat_enums import JenisSurat
from src.utils.identifiers import (
    RandomIdentifierGenerator, SystemClock, build_tracking_code, epoch_millis,
    format_nomor_surat, parse_nomor_surat_sequence, to_base36
)


def test_to_base36():
    assert to_base36(0) == "0"
    assert to_base36(35) == "z"
    assert to_base36(36) == "10"
    assert to_base36(1_700_000_000_000) == "loyw3v28"


def test_to_base36_rejects_negative():
    with pytest.raises(ValueError):
        to_base36(-1)


def test_epoch_millis_treats_naive_as_utc():
    aware = datetime(2024, 1, 1, tzinfo=timezone.utc)
    naive = datetime(2024, 1, 1)
    assert epoch_millis(aware) == epoch_millis(naive) == 1_704_067_200_000


def test_tracking_code_layout():
    moment = datetime(2024, 3, 15, 9, 30, tzinfo=ZoneInfo("Asia/Jakarta"))
    code = build_tracking_code(JenisSurat.SURAT_KETERANGAN_DOMISILI.value, moment, "a1z")

    timestamp = to_base36(epoch_millis(moment)).upper()
    assert code == f"SU{timestamp}A1Z"
    assert re.fullmatch(r"[A-Z0-9]+", code)


def test_tracking_code_prefix_for_lainnya():
    moment = datetime(2024, 3, 15, tzinfo=timezone.utc)
    assert build_tracking_code(JenisSurat.LAINNYA.value, moment, "000").startswith("LA")


def test_format_nomor_surat():
    moment = datetime(2024, 3, 15, tzinfo=ZoneInfo("Asia/Jakarta"))
    assert format_nomor_surat(1, "SURAT_KETERANGAN_DOMISILI", moment) == "001/SUR/DESA/03/2024"
    assert format_nomor_surat(12, "LAINNYA", moment) == "012/LAI/DESA/03/2024"
    assert format_nomor_surat(1000, "LAINNYA", moment) == "1000/LAI/DESA/03/2024"


def test_parse_nomor_surat_sequence():
    assert parse_nomor_surat_sequence("007/SUR/DESA/11/2024") == 7


def test_kode_nomor_groups():
    sur = JenisSurat.sharing_kode_nomor(JenisSurat.SURAT_KETERANGAN_USAHA)
    assert JenisSurat.SURAT_KETERANGAN_DOMISILI in sur
    assert JenisSurat.SURAT_PENGANTAR_KTP in sur
    assert JenisSurat.LAINNYA not in sur
    assert JenisSurat.sharing_kode_nomor("LAINNYA") == [JenisSurat.LAINNYA]


def test_random_base36_charset():
    value = RandomIdentifierGenerator().random_base36(50)
    assert len(value) == 50
    assert re.fullmatch(r"[0-9a-z]+", value)


def test_system_clock_is_timezone_aware():
    now = SystemClock("Asia/Jakarta").now()
    assert now.tzinfo is not None
    assert now.utcoffset().total_seconds() == 7 * 3600
