"""API endpoints untuk pengajuan surat dan perubahan statusnya."""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status, Path
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db
from src.repositories.surat_request import SuratRequestRepository
from src.repositories.penduduk import PendudukRepository
from src.services.surat import SuratService
from src.services.surat_workflow import SuratWorkflow
from src.schemas.surat import (
    SuratCreate, SuratReject, SuratStatusUpdate, SuratResponse,
    SuratListResponse, SuratStatistics, SuratTrackingResponse
)
from src.schemas.filters import SuratFilterParams
from src.auth.permissions import get_current_active_user, perangkat_desa_required

router = APIRouter()


async def get_surat_service(session: AsyncSession = Depends(get_db)) -> SuratService:
    """Dependency untuk SuratService."""
    surat_repo = SuratRequestRepository(session)
    penduduk_repo = PendudukRepository(session)
    workflow = SuratWorkflow(surat_repo)
    return SuratService(workflow, surat_repo, penduduk_repo)


# ===== PUBLIC =====

@router.get("/track/{tracking_code}", response_model=SuratTrackingResponse)
async def track_surat(
    tracking_code: str = Path(..., description="Kode tracking dari bukti pengajuan"),
    surat_service: SuratService = Depends(get_surat_service)
):
    """
    Cek status surat berdasarkan kode tracking.

    **Accessible by**: Publik (tanpa login). Data pemohon tidak ditampilkan.
    """
    return await surat_service.track_surat(tracking_code)


# ===== SUBMIT =====

@router.post("/", response_model=SuratResponse, status_code=status.HTTP_201_CREATED)
async def create_surat(
    surat_data: SuratCreate,
    current_user: dict = Depends(get_current_active_user),
    surat_service: SuratService = Depends(get_surat_service)
):
    """Ajukan surat baru. Status awal `pending`, nomor surat belum ada."""
    return await surat_service.create_surat(surat_data)


# ===== READ OPERATIONS =====

@router.get("/", response_model=SuratListResponse)
async def get_all_surat(
    filters: SuratFilterParams = Depends(),
    current_user: dict = Depends(get_current_active_user),
    surat_service: SuratService = Depends(get_surat_service)
):
    """
    Daftar pengajuan surat.

    **Query Parameters**:
    - page, size: Pagination
    - search: nomor surat, kode tracking, keperluan
    - status, jenis_surat, pemohon_id, tahun
    """
    return await surat_service.list_surat(filters)


@router.get("/stats", response_model=SuratStatistics)
async def get_surat_statistics(
    tahun: Optional[int] = Query(None, ge=2000, le=2100, description="Tahun pengajuan"),
    current_user: dict = Depends(get_current_active_user),
    surat_service: SuratService = Depends(get_surat_service)
):
    """Jumlah pengajuan per status dan per jenis surat."""
    return await surat_service.get_statistics(tahun)


@router.get("/{surat_id}", response_model=SuratResponse)
async def get_surat(
    surat_id: str,
    current_user: dict = Depends(get_current_active_user),
    surat_service: SuratService = Depends(get_surat_service)
):
    return await surat_service.get_surat(surat_id)


@router.get("/{surat_id}/pdf")
async def download_surat_pdf(
    surat_id: str,
    current_user: dict = Depends(get_current_active_user),
    surat_service: SuratService = Depends(get_surat_service)
):
    """Download PDF surat yang sudah disetujui atau selesai."""
    pdf_bytes, filename = await surat_service.generate_pdf(surat_id)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"'
        }
    )


# ===== STATUS CHANGES (perangkat desa) =====

@router.post("/{surat_id}/process", response_model=SuratResponse)
async def process_surat(
    surat_id: str,
    current_user: dict = Depends(perangkat_desa_required),
    surat_service: SuratService = Depends(get_surat_service)
):
    """pending -> processing."""
    return await surat_service.mark_processing(surat_id, current_user["id"])


@router.post("/{surat_id}/approve", response_model=SuratResponse)
async def approve_surat(
    surat_id: str,
    current_user: dict = Depends(perangkat_desa_required),
    surat_service: SuratService = Depends(get_surat_service)
):
    """Setujui surat dan berikan nomor surat resmi."""
    return await surat_service.approve(surat_id, current_user["id"])


@router.post("/{surat_id}/reject", response_model=SuratResponse)
async def reject_surat(
    surat_id: str,
    reject_data: SuratReject,
    current_user: dict = Depends(perangkat_desa_required),
    surat_service: SuratService = Depends(get_surat_service)
):
    """Tolak surat dengan alasan penolakan."""
    return await surat_service.reject(surat_id, current_user["id"], reject_data.keterangan)


@router.post("/{surat_id}/complete", response_model=SuratResponse)
async def complete_surat(
    surat_id: str,
    current_user: dict = Depends(perangkat_desa_required),
    surat_service: SuratService = Depends(get_surat_service)
):
    """approved -> completed (surat sudah diserahkan)."""
    return await surat_service.complete(surat_id, current_user["id"])


@router.put("/{surat_id}/status", response_model=SuratResponse)
async def update_surat_status(
    surat_id: str,
    update_data: SuratStatusUpdate,
    current_user: dict = Depends(perangkat_desa_required),
    surat_service: SuratService = Depends(get_surat_service)
):
    """Ubah status lewat satu endpoint; diteruskan ke transisi yang sesuai."""
    return await surat_service.update_status(surat_id, update_data, current_user["id"])
