"""API endpoints untuk data penduduk."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db
from src.repositories.penduduk import PendudukRepository
from src.services.penduduk import PendudukService
from src.schemas.penduduk import PendudukCreate, PendudukUpdate, PendudukResponse, PendudukListResponse
from src.schemas.shared import MessageResponse
from src.schemas.filters import PendudukFilterParams
from src.auth.permissions import get_current_active_user, perangkat_desa_required, admin_required

router = APIRouter()


async def get_penduduk_service(session: AsyncSession = Depends(get_db)) -> PendudukService:
    """Dependency untuk PendudukService."""
    return PendudukService(PendudukRepository(session))


@router.post("/", response_model=PendudukResponse, status_code=status.HTTP_201_CREATED)
async def create_penduduk(
    penduduk_data: PendudukCreate,
    current_user: dict = Depends(perangkat_desa_required),
    penduduk_service: PendudukService = Depends(get_penduduk_service)
):
    """Daftarkan penduduk baru. NIK harus unik."""
    return await penduduk_service.create_penduduk(penduduk_data, created_by=current_user["id"])


@router.get("/", response_model=PendudukListResponse)
async def get_all_penduduk(
    filters: PendudukFilterParams = Depends(),
    current_user: dict = Depends(get_current_active_user),
    penduduk_service: PendudukService = Depends(get_penduduk_service)
):
    """Daftar penduduk dengan pencarian nama/NIK dan filter RT/RW."""
    return await penduduk_service.list_penduduk(filters)


@router.get("/nik/{nik}", response_model=PendudukResponse)
async def get_penduduk_by_nik(
    nik: str,
    current_user: dict = Depends(get_current_active_user),
    penduduk_service: PendudukService = Depends(get_penduduk_service)
):
    return await penduduk_service.get_by_nik(nik)


@router.get("/{penduduk_id}", response_model=PendudukResponse)
async def get_penduduk(
    penduduk_id: str,
    current_user: dict = Depends(get_current_active_user),
    penduduk_service: PendudukService = Depends(get_penduduk_service)
):
    return await penduduk_service.get_penduduk(penduduk_id)


@router.put("/{penduduk_id}", response_model=PendudukResponse)
async def update_penduduk(
    penduduk_id: str,
    penduduk_data: PendudukUpdate,
    current_user: dict = Depends(perangkat_desa_required),
    penduduk_service: PendudukService = Depends(get_penduduk_service)
):
    """Ubah data penduduk. Hanya field yang dikirim yang diubah; NIK tetap."""
    return await penduduk_service.update_penduduk(penduduk_id, penduduk_data, updated_by=current_user["id"])


@router.delete("/{penduduk_id}", response_model=MessageResponse)
async def delete_penduduk(
    penduduk_id: str,
    current_user: dict = Depends(admin_required),
    penduduk_service: PendudukService = Depends(get_penduduk_service)
):
    """
    Hapus (soft delete) penduduk.

    **Accessible by**: Admin desa only.
    """
    return await penduduk_service.delete_penduduk(penduduk_id, deleted_by=current_user["id"])
