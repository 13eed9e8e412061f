"""Enums untuk layanan surat desa."""

from enum import Enum


class JenisSurat(str, Enum):
    """Jenis surat yang dapat diajukan warga."""
    SURAT_KETERANGAN_DOMISILI = "SURAT_KETERANGAN_DOMISILI"
    SURAT_KETERANGAN_USAHA = "SURAT_KETERANGAN_USAHA"
    SURAT_KETERANGAN_TIDAK_MAMPU = "SURAT_KETERANGAN_TIDAK_MAMPU"
    SURAT_PENGANTAR_KTP = "SURAT_PENGANTAR_KTP"
    SURAT_PENGANTAR_KK = "SURAT_PENGANTAR_KK"
    SURAT_KETERANGAN_KELAHIRAN = "SURAT_KETERANGAN_KELAHIRAN"
    SURAT_KETERANGAN_KEMATIAN = "SURAT_KETERANGAN_KEMATIAN"
    SURAT_KETERANGAN_PINDAH = "SURAT_KETERANGAN_PINDAH"
    LAINNYA = "LAINNYA"

    @classmethod
    def get_all_values(cls):
        """Get all jenis surat values as list."""
        return [jenis.value for jenis in cls]

    @classmethod
    def get_display_name(cls, value: str) -> str:
        """Get judul surat untuk dokumen."""
        display_map = {
            cls.SURAT_KETERANGAN_DOMISILI.value: "Surat Keterangan Domisili",
            cls.SURAT_KETERANGAN_USAHA.value: "Surat Keterangan Usaha",
            cls.SURAT_KETERANGAN_TIDAK_MAMPU.value: "Surat Keterangan Tidak Mampu",
            cls.SURAT_PENGANTAR_KTP.value: "Surat Pengantar KTP",
            cls.SURAT_PENGANTAR_KK.value: "Surat Pengantar Kartu Keluarga",
            cls.SURAT_KETERANGAN_KELAHIRAN.value: "Surat Keterangan Kelahiran",
            cls.SURAT_KETERANGAN_KEMATIAN.value: "Surat Keterangan Kematian",
            cls.SURAT_KETERANGAN_PINDAH.value: "Surat Keterangan Pindah",
            cls.LAINNYA.value: "Surat Keterangan",
        }
        return display_map.get(value, value)

    @property
    def kode_nomor(self) -> str:
        """Kode jenis pada nomor surat: 3 huruf pertama."""
        return self.value[:3].upper()

    @classmethod
    def sharing_kode_nomor(cls, jenis) -> list:
        """Semua jenis surat dengan kode nomor yang sama (satu urutan nomor)."""
        kode = cls(jenis).kode_nomor
        return [member for member in cls if member.kode_nomor == kode]


class StatusSurat(str, Enum):
    """Status pengajuan surat."""
    PENDING = "pending"
    PROCESSING = "processing"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"

    @classmethod
    def get_all_values(cls):
        """Get all status values as list."""
        return [status.value for status in cls]

    @classmethod
    def get_display_name(cls, status: str) -> str:
        """Get display name untuk status."""
        display_map = {
            cls.PENDING.value: "Menunggu",
            cls.PROCESSING.value: "Diproses",
            cls.APPROVED.value: "Disetujui",
            cls.REJECTED.value: "Ditolak",
            cls.COMPLETED.value: "Selesai",
        }
        return display_map.get(status, status)

    def has_nomor_surat(self) -> bool:
        """Status yang sudah memegang nomor surat resmi."""
        return self in (StatusSurat.APPROVED, StatusSurat.COMPLETED)
