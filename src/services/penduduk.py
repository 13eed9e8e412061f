"""Service untuk registrasi penduduk."""

import logging
from typing import Optional

from src.core.exceptions import ConflictError, NotFoundError
from src.repositories.penduduk import PendudukRepository
from src.schemas.filters import PendudukFilterParams
from src.schemas.penduduk import PendudukCreate, PendudukUpdate, PendudukResponse, PendudukListResponse
from src.schemas.shared import MessageResponse

logger = logging.getLogger(__name__)


class PendudukService:
    """Service untuk data penduduk."""

    def __init__(self, penduduk_repo: PendudukRepository):
        self.penduduk_repo = penduduk_repo

    async def create_penduduk(self, penduduk_data: PendudukCreate, created_by: Optional[str] = None) -> PendudukResponse:
        """Daftarkan penduduk baru; NIK harus unik."""
        if await self.penduduk_repo.nik_exists(penduduk_data.nik):
            raise ConflictError("NIK sudah terdaftar", details={"nik": penduduk_data.nik})

        penduduk = await self.penduduk_repo.create(penduduk_data, created_by=created_by)
        logger.info(f"Penduduk registered: id={penduduk.id}")
        return PendudukResponse.model_validate(penduduk)

    async def get_penduduk(self, penduduk_id: str) -> PendudukResponse:
        penduduk = await self.penduduk_repo.get_by_id(penduduk_id)
        if not penduduk:
            raise NotFoundError("Penduduk tidak ditemukan", details={"id": penduduk_id})
        return PendudukResponse.model_validate(penduduk)

    async def get_by_nik(self, nik: str) -> PendudukResponse:
        penduduk = await self.penduduk_repo.get_by_nik(nik)
        if not penduduk:
            raise NotFoundError("Penduduk tidak ditemukan", details={"nik": nik})
        return PendudukResponse.model_validate(penduduk)

    async def list_penduduk(self, filters: PendudukFilterParams) -> PendudukListResponse:
        items, total = await self.penduduk_repo.get_all_filtered(filters)
        return PendudukListResponse.create(
            items=[PendudukResponse.model_validate(item) for item in items],
            total=total,
            page=filters.page,
            size=filters.size
        )

    async def update_penduduk(
        self, penduduk_id: str, penduduk_data: PendudukUpdate, updated_by: Optional[str] = None
    ) -> PendudukResponse:
        """Update data penduduk; NIK tetap."""
        penduduk = await self.penduduk_repo.update(penduduk_id, penduduk_data, updated_by=updated_by)
        if not penduduk:
            raise NotFoundError("Penduduk tidak ditemukan", details={"id": penduduk_id})
        logger.info(f"Penduduk updated: id={penduduk_id}")
        return PendudukResponse.model_validate(penduduk)

    async def delete_penduduk(self, penduduk_id: str, deleted_by: Optional[str] = None) -> MessageResponse:
        """
        Soft delete penduduk. Surat yang sudah diajukan tetap ada, tetapi
        penduduk tidak bisa lagi menjadi pemohon surat baru.
        """
        if not await self.penduduk_repo.soft_delete(penduduk_id, deleted_by=deleted_by):
            raise NotFoundError("Penduduk tidak ditemukan", details={"id": penduduk_id})
        logger.info(f"Penduduk deleted: id={penduduk_id} by {deleted_by}")
        return MessageResponse(message="Penduduk berhasil dihapus", data={"id": penduduk_id})
