"""Clock, random source and formatting of surat identifiers."""

import secrets
import string
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from src.core.config import settings

BASE36_ALPHABET = string.digits + string.ascii_lowercase


class SystemClock:
    """Wall clock in the configured village timezone (timezone-aware)."""

    def __init__(self, timezone: Optional[str] = None):
        self.tz = ZoneInfo(timezone or settings.TIMEZONE)

    def now(self) -> datetime:
        return datetime.now(self.tz)


class RandomIdentifierGenerator:
    """Random base-36 characters from the ``secrets`` module."""

    def random_base36(self, n: int) -> str:
        return "".join(secrets.choice(BASE36_ALPHABET) for _ in range(n))


def to_base36(value: int) -> str:
    """Encode a non-negative integer in lowercase base 36."""
    if value < 0:
        raise ValueError("Base36 encoding requires a non-negative integer")
    if value == 0:
        return "0"

    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def epoch_millis(moment: datetime) -> int:
    """Milliseconds since the Unix epoch; naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=ZoneInfo("UTC"))
    return int(moment.timestamp() * 1000)


def build_tracking_code(jenis_surat: str, moment: datetime, random_part: str) -> str:
    """
    Kode tracking: 2 huruf jenis surat + timestamp ms (base36) + 3 char acak,
    semuanya huruf besar.
    """
    prefix = jenis_surat[:2].upper()
    timestamp = to_base36(epoch_millis(moment)).upper()
    return f"{prefix}{timestamp}{random_part.upper()}"


def format_nomor_surat(sequence: int, jenis_surat: str, moment: datetime) -> str:
    """Nomor surat resmi: ``001/SUR/DESA/MM/YYYY``."""
    jenis = jenis_surat[:3].upper()
    return f"{sequence:03d}/{jenis}/DESA/{moment.month:02d}/{moment.year}"


def parse_nomor_surat_sequence(nomor_surat: str) -> int:
    """Ambil nomor urut dari nomor surat resmi."""
    return int(nomor_surat.split("/", 1)[0])
