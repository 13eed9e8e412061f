"""Service layer untuk pengajuan surat (dipakai oleh endpoint)."""

import logging
from typing import Optional, Tuple

from src.core.exceptions import InvalidArgumentError, NotFoundError
from src.models.surat_enums import StatusSurat
from src.repositories.penduduk import PendudukRepository
from src.repositories.surat_request import SuratRequestRepository
from src.schemas.filters import SuratFilterParams
from src.schemas.surat import (
    SuratCreate, SuratResponse, SuratListResponse, SuratStatistics,
    SuratStatusUpdate, SuratTrackingResponse
)
from src.services.pdf_generator import SuratPDFGenerator
from src.services.surat_workflow import SuratWorkflow

logger = logging.getLogger(__name__)


class SuratService:
    """Menghubungkan workflow surat dengan schema API."""

    def __init__(
        self,
        workflow: SuratWorkflow,
        surat_repo: SuratRequestRepository,
        penduduk_repo: PendudukRepository,
        pdf_generator: Optional[SuratPDFGenerator] = None
    ):
        self.workflow = workflow
        self.surat_repo = surat_repo
        self.penduduk_repo = penduduk_repo
        self.pdf_generator = pdf_generator or SuratPDFGenerator()

    # ===== SUBMIT & LOOKUP =====

    async def create_surat(self, surat_data: SuratCreate) -> SuratResponse:
        surat = await self.workflow.submit(
            jenis_surat=surat_data.jenis_surat,
            pemohon_id=surat_data.pemohon_id,
            keperluan=surat_data.keperluan,
            template_data=surat_data.template_data
        )
        return SuratResponse.from_model(surat)

    async def get_surat(self, surat_id: str) -> SuratResponse:
        surat = await self.workflow.get(surat_id)
        return SuratResponse.from_model(surat)

    async def track_surat(self, tracking_code: str) -> SuratTrackingResponse:
        surat = await self.workflow.lookup_by_tracking_code(tracking_code)
        return SuratTrackingResponse.from_model(surat)

    async def list_surat(self, filters: SuratFilterParams) -> SuratListResponse:
        items, total = await self.surat_repo.get_all_filtered(filters)
        return SuratListResponse.create(
            items=[SuratResponse.from_model(item) for item in items],
            total=total,
            page=filters.page,
            size=filters.size
        )

    async def get_statistics(self, tahun: Optional[int] = None) -> SuratStatistics:
        stats = await self.surat_repo.get_statistics(tahun)
        return SuratStatistics(
            tahun=tahun,
            total=sum(stats["by_status"].values()),
            by_status=stats["by_status"],
            by_jenis=stats["by_jenis"]
        )

    # ===== STATUS CHANGES =====

    async def mark_processing(self, surat_id: str, staff_id: str) -> SuratResponse:
        surat = await self.workflow.mark_processing(surat_id, staff_id)
        return SuratResponse.from_model(surat)

    async def approve(self, surat_id: str, staff_id: str) -> SuratResponse:
        surat = await self.workflow.approve(surat_id, staff_id)
        return SuratResponse.from_model(surat)

    async def reject(self, surat_id: str, staff_id: str, keterangan: Optional[str]) -> SuratResponse:
        surat = await self.workflow.reject(surat_id, staff_id, keterangan)
        return SuratResponse.from_model(surat)

    async def complete(self, surat_id: str, staff_id: str) -> SuratResponse:
        surat = await self.workflow.complete(surat_id, staff_id)
        return SuratResponse.from_model(surat)

    async def update_status(self, surat_id: str, update_data: SuratStatusUpdate, staff_id: str) -> SuratResponse:
        surat = await self.workflow.transition(
            surat_id, update_data.status, staff_id, keterangan=update_data.keterangan
        )
        return SuratResponse.from_model(surat)

    # ===== DOCUMENT =====

    async def generate_pdf(self, surat_id: str) -> Tuple[bytes, str]:
        """Generate PDF untuk surat yang sudah disetujui; return (pdf_bytes, filename)."""
        surat = await self.workflow.get(surat_id)

        status = StatusSurat(surat.status)
        if not status.has_nomor_surat():
            raise InvalidArgumentError(
                "Surat belum disetujui",
                details={"id": surat.id, "status": status.value}
            )

        penduduk = await self.penduduk_repo.get_by_id(surat.pemohon_id)
        if not penduduk:
            raise NotFoundError("Pemohon tidak ditemukan", details={"pemohon_id": surat.pemohon_id})

        surat_data = SuratResponse.from_model(surat).model_dump()
        penduduk_data = penduduk.model_dump()

        pdf_bytes = self.pdf_generator.generate_surat_pdf(surat_data, penduduk_data)
        filename = f"{surat.nomor_surat.replace('/', '-')}.pdf"

        logger.info(f"PDF generated for surat {surat.id} ({len(pdf_bytes)} bytes)")
        return pdf_bytes, filename
