"""Repository untuk data penduduk."""

from typing import List, Optional, Tuple
from datetime import datetime, timezone
from sqlalchemy import select, and_, or_, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import ConflictError
from src.models.penduduk import Penduduk
from src.schemas.penduduk import PendudukCreate, PendudukUpdate
from src.schemas.filters import PendudukFilterParams


class PendudukRepository:
    """Repository untuk operasi penduduk."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ===== CREATE OPERATIONS =====

    async def create(self, penduduk_data: PendudukCreate, created_by: Optional[str] = None) -> Penduduk:
        """Create penduduk baru."""
        penduduk = Penduduk(**penduduk_data.model_dump(), created_by=created_by)

        self.session.add(penduduk)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("NIK sudah terdaftar", details={"nik": penduduk_data.nik}) from e
        await self.session.refresh(penduduk)
        return penduduk

    # ===== READ OPERATIONS =====

    async def get_by_id(self, penduduk_id: str) -> Optional[Penduduk]:
        """Get penduduk by ID."""
        query = select(Penduduk).where(
            and_(Penduduk.id == penduduk_id, Penduduk.deleted_at.is_(None))
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_nik(self, nik: str) -> Optional[Penduduk]:
        """Get penduduk by NIK."""
        query = select(Penduduk).where(
            and_(Penduduk.nik == nik, Penduduk.deleted_at.is_(None))
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def nik_exists(self, nik: str) -> bool:
        """Check if NIK already registered."""
        query = select(Penduduk.id).where(Penduduk.nik == nik)
        result = await self.session.execute(query)
        return result.scalar_one_or_none() is not None

    async def get_all_filtered(self, filters: PendudukFilterParams) -> Tuple[List[Penduduk], int]:
        """Get penduduk dengan filter dan pagination."""
        query = select(Penduduk).where(Penduduk.deleted_at.is_(None))

        if filters.search:
            search_term = f"%{filters.search}%"
            query = query.where(
                or_(
                    Penduduk.nama.ilike(search_term),
                    Penduduk.nik.ilike(search_term)
                )
            )

        if filters.rt:
            query = query.where(Penduduk.rt == filters.rt)

        if filters.rw:
            query = query.where(Penduduk.rw == filters.rw)

        count_query = select(func.count()).select_from(query.subquery())
        total_result = await self.session.execute(count_query)
        total = total_result.scalar() or 0

        offset = (filters.page - 1) * filters.size
        query = query.order_by(Penduduk.nama.asc()).offset(offset).limit(filters.size)

        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    # ===== UPDATE OPERATIONS =====

    async def update(
        self, penduduk_id: str, penduduk_data: PendudukUpdate, updated_by: Optional[str] = None
    ) -> Optional[Penduduk]:
        """Update field yang dikirim saja."""
        penduduk = await self.get_by_id(penduduk_id)
        if not penduduk:
            return None

        for key, value in penduduk_data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(penduduk, key, value)

        penduduk.updated_by = updated_by
        penduduk.updated_at = datetime.now(timezone.utc)
        await self.session.commit()
        await self.session.refresh(penduduk)
        return penduduk

    # ===== DELETE OPERATIONS =====

    async def soft_delete(self, penduduk_id: str, deleted_by: Optional[str] = None) -> bool:
        """Soft delete penduduk by ID."""
        penduduk = await self.get_by_id(penduduk_id)
        if not penduduk:
            return False

        penduduk.deleted_at = datetime.now(timezone.utc)
        penduduk.deleted_by = deleted_by
        penduduk.updated_at = datetime.now(timezone.utc)
        await self.session.commit()
        return True
