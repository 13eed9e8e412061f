"""
Lifecycle pengajuan surat: submit, perubahan status, dan penomoran.

State machine::

    pending    --approve---------> approved
    pending    --reject----------> rejected
    pending    --mark_processing-> processing
    processing --approve---------> approved
    processing --reject----------> rejected
    approved   --complete--------> completed

Every operation is a single unit of work against the repository
(``repository.transaction()``). Transitions load the record row-locked, check
the state machine, mutate and save before the unit of work commits. The
nomor surat counter is read and written under ``repository.numbering_lock``
keyed by (kode nomor, year), so concurrent approvals never share a sequence
number. Jenis surat with the same kode nomor (``SUR`` for most of them) draw
from one sequence, which keeps every nomor surat globally unique.

The workflow does no permission checks; ``staff_id`` is only stamped on the
record.
"""

import logging
from typing import Any, Dict, Optional

from src.core.config import settings
from src.core.exceptions import (
    ConflictError, InvalidArgumentError, InvalidTransitionError, NotFoundError
)
from src.models.surat_enums import JenisSurat, StatusSurat
from src.models.surat_request import SuratRequest
from src.utils.identifiers import (
    RandomIdentifierGenerator, SystemClock, build_tracking_code, format_nomor_surat
)

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS = {
    StatusSurat.PENDING: frozenset({StatusSurat.PROCESSING, StatusSurat.APPROVED, StatusSurat.REJECTED}),
    StatusSurat.PROCESSING: frozenset({StatusSurat.APPROVED, StatusSurat.REJECTED}),
    StatusSurat.APPROVED: frozenset({StatusSurat.COMPLETED}),
    StatusSurat.REJECTED: frozenset(),
    StatusSurat.COMPLETED: frozenset(),
}


def can_transition(current: StatusSurat, requested: StatusSurat) -> bool:
    """Check apakah perpindahan status diizinkan."""
    return StatusSurat(requested) in ALLOWED_TRANSITIONS[StatusSurat(current)]


class SuratWorkflow:
    """Owns the lifecycle of a single surat request."""

    def __init__(
        self,
        repository,
        clock=None,
        id_generator=None,
        max_tracking_attempts: Optional[int] = None
    ):
        self.repository = repository
        self.clock = clock or SystemClock()
        self.id_generator = id_generator or RandomIdentifierGenerator()
        self.max_tracking_attempts = max_tracking_attempts or settings.SURAT_TRACKING_CODE_MAX_ATTEMPTS

    # ===== SUBMIT =====

    async def submit(
        self,
        jenis_surat: str,
        pemohon_id: str,
        keperluan: str,
        template_data: Optional[Dict[str, Any]] = None
    ) -> SuratRequest:
        """
        Ajukan surat baru dengan status pending.

        Raises:
            InvalidArgumentError: jenis surat tidak dikenal atau keperluan kosong.
            NotFoundError: pemohon bukan penduduk terdaftar.
            ConflictError: kode tracking tetap bentrok setelah semua percobaan.
        """
        jenis = self._parse_jenis_surat(jenis_surat)

        if not await self.repository.resident_exists(pemohon_id):
            raise NotFoundError(
                "Pemohon tidak ditemukan",
                details={"pemohon_id": pemohon_id}
            )

        if keperluan is None or not str(keperluan).strip():
            raise InvalidArgumentError("Keperluan wajib diisi", details={"field": "keperluan"})

        for attempt in range(1, self.max_tracking_attempts + 1):
            now = self.clock.now()
            tracking_code = build_tracking_code(
                jenis.value, now, self.id_generator.random_base36(3)
            )
            surat = SuratRequest(
                jenis_surat=jenis,
                pemohon_id=pemohon_id,
                keperluan=str(keperluan).strip(),
                status=StatusSurat.PENDING,
                tracking_code=tracking_code,
                nomor_surat=None,
                tanggal_pengajuan=now,
                template_data=template_data if template_data is not None else {}
            )

            try:
                async with self.repository.transaction():
                    saved = await self.repository.save(surat)
            except ConflictError:
                logger.warning(
                    f"Tracking code collision ({tracking_code}), attempt {attempt}/{self.max_tracking_attempts}"
                )
                continue

            logger.info(f"Surat submitted: id={saved.id} jenis={jenis.value} tracking={saved.tracking_code}")
            return saved

        raise ConflictError(
            "Gagal membuat kode tracking unik, silakan coba lagi",
            details={"attempts": self.max_tracking_attempts}
        )

    # ===== TRANSITIONS =====

    async def mark_processing(self, request_id: str, staff_id) -> SuratRequest:
        """pending -> processing."""
        async with self.repository.transaction():
            surat = await self._load_for_transition(request_id, StatusSurat.PROCESSING)
            surat.status = StatusSurat.PROCESSING
            surat = await self.repository.save(surat)

        self._log_transition(surat, staff_id)
        return surat

    async def approve(self, request_id: str, staff_id) -> SuratRequest:
        """
        pending/processing -> approved, assigning the nomor surat exactly once.

        Sequence = (numbered surat with the same kode nomor in the approval year) + 1.
        A save conflict on nomor surat is surfaced, never retried.
        """
        async with self.repository.transaction():
            surat = await self._load_for_transition(request_id, StatusSurat.APPROVED)

            if surat.nomor_surat:
                raise ConflictError(
                    "Nomor surat sudah pernah diberikan",
                    details={"id": surat.id, "nomor_surat": surat.nomor_surat}
                )

            now = self.clock.now()
            jenis = JenisSurat(surat.jenis_surat)

            async with self.repository.numbering_lock(jenis, now.year):
                count = await self.repository.count_approved_by_type_and_year(jenis, now.year)
                surat.status = StatusSurat.APPROVED
                surat.approved_by = str(staff_id)
                surat.tanggal_disetujui = now
                surat.nomor_surat = format_nomor_surat(count + 1, jenis.value, now)
                surat = await self.repository.save(surat)

        logger.info(f"Nomor surat assigned: id={surat.id} nomor={surat.nomor_surat}")
        self._log_transition(surat, staff_id)
        return surat

    async def reject(self, request_id: str, staff_id, keterangan: Optional[str]) -> SuratRequest:
        """pending/processing -> rejected; keterangan disimpan apa adanya."""
        async with self.repository.transaction():
            surat = await self._load_for_transition(request_id, StatusSurat.REJECTED)
            surat.status = StatusSurat.REJECTED
            surat.processed_by = str(staff_id)
            surat.keterangan = keterangan
            surat.tanggal_selesai = self.clock.now()
            surat = await self.repository.save(surat)

        self._log_transition(surat, staff_id)
        return surat

    async def complete(self, request_id: str, staff_id) -> SuratRequest:
        """approved -> completed; nomor surat tidak berubah."""
        async with self.repository.transaction():
            surat = await self._load_for_transition(request_id, StatusSurat.COMPLETED)
            surat.status = StatusSurat.COMPLETED
            surat.processed_by = str(staff_id)
            surat.tanggal_selesai = self.clock.now()
            surat = await self.repository.save(surat)

        self._log_transition(surat, staff_id)
        return surat

    async def transition(
        self,
        request_id: str,
        requested_status,
        staff_id,
        keterangan: Optional[str] = None
    ) -> SuratRequest:
        """Dispatch a target status to its transition operation."""
        try:
            target = StatusSurat(requested_status)
        except ValueError:
            raise InvalidArgumentError(
                f"Status tidak dikenal: {requested_status}",
                details={"allowed": StatusSurat.get_all_values()}
            )

        if target == StatusSurat.PROCESSING:
            return await self.mark_processing(request_id, staff_id)
        if target == StatusSurat.APPROVED:
            return await self.approve(request_id, staff_id)
        if target == StatusSurat.REJECTED:
            return await self.reject(request_id, staff_id, keterangan)
        if target == StatusSurat.COMPLETED:
            return await self.complete(request_id, staff_id)

        # Nothing transitions back to pending
        async with self.repository.transaction():
            surat = await self._load_for_transition(request_id, target)
        raise InvalidTransitionError(StatusSurat(surat.status).value, target.value)

    # ===== LOOKUP =====

    async def lookup_by_tracking_code(self, tracking_code: str) -> SuratRequest:
        """Cari surat berdasarkan kode tracking (cek status publik)."""
        surat = await self.repository.get_by_tracking_code((tracking_code or "").strip())
        if surat is None:
            raise NotFoundError(
                "Kode tracking tidak ditemukan",
                details={"tracking_code": tracking_code}
            )
        return surat

    async def get(self, request_id: str) -> SuratRequest:
        surat = await self.repository.get_by_id(request_id)
        if surat is None:
            raise NotFoundError("Surat request tidak ditemukan", details={"id": request_id})
        return surat

    # ===== HELPERS =====

    @staticmethod
    def _parse_jenis_surat(jenis_surat) -> JenisSurat:
        try:
            return JenisSurat(jenis_surat)
        except ValueError:
            raise InvalidArgumentError(
                f"Jenis surat tidak valid: {jenis_surat}",
                details={"field": "jenis_surat", "allowed": JenisSurat.get_all_values()}
            )

    async def _load_for_transition(self, request_id: str, requested: StatusSurat) -> SuratRequest:
        surat = await self.repository.get_by_id(request_id, for_update=True)
        if surat is None:
            raise NotFoundError("Surat request tidak ditemukan", details={"id": request_id})

        current = StatusSurat(surat.status)
        if not can_transition(current, requested):
            raise InvalidTransitionError(current.value, requested.value)
        return surat

    @staticmethod
    def _log_transition(surat: SuratRequest, staff_id) -> None:
        logger.info(f"Surat {surat.id} -> {StatusSurat(surat.status).value} by staff {staff_id}")
