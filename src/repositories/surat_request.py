"""Repository untuk pengajuan surat."""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Dict, Hashable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from sqlalchemy import and_, func, or_, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.core.exceptions import ConflictError
from src.models.penduduk import Penduduk
from src.models.surat_enums import JenisSurat, StatusSurat
from src.models.surat_request import SuratRequest
from src.schemas.filters import SuratFilterParams

logger = logging.getLogger(__name__)


class ProcessLockRegistry:
    """
    Named asyncio locks for dialects without advisory or row locks (SQLite).

    Locks are bound to the running event loop: the registry is rebuilt when the
    loop changes, so one process serves one loop at a time. Entries are
    dropped once no task holds or waits for them.
    """

    def __init__(self):
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._locks: Dict[Hashable, List] = {}

    def _entries(self) -> Dict[Hashable, List]:
        loop = asyncio.get_running_loop()
        if loop is not self._loop:
            self._loop = loop
            self._locks = {}
        return self._locks

    async def acquire(self, key: Hashable) -> None:
        entries = self._entries()
        entry = entries.get(key)
        if entry is None:
            entry = entries[key] = [asyncio.Lock(), 0]
        entry[1] += 1
        try:
            await entry[0].acquire()
        except BaseException:
            self._forget(key, entry)
            raise

    def release(self, key: Hashable) -> None:
        entry = self._entries().get(key)
        if entry is None:
            return
        entry[0].release()
        self._forget(key, entry)

    def _forget(self, key: Hashable, entry: List) -> None:
        entry[1] -= 1
        if entry[1] == 0 and self._locks.get(key) is entry:
            del self._locks[key]


process_locks = ProcessLockRegistry()


class SuratRequestRepository:
    """Repository untuk operasi surat request.

    Every workflow call runs inside :meth:`transaction`; locks taken via
    :meth:`numbering_lock` or ``for_update`` loads are held until that unit of
    work commits or rolls back.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self._held_locks: List[Hashable] = []

    # ===== UNIT OF WORK =====

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Commit on success, rollback on any exception, then release locks."""
        try:
            yield
            await self.session.commit()
        except BaseException:
            await self.session.rollback()
            raise
        finally:
            self._release_locks()

    @asynccontextmanager
    async def numbering_lock(self, jenis_surat: JenisSurat, year: int) -> AsyncIterator[None]:
        """
        Serialize nomor surat assignment per (kode nomor, year).

        PostgreSQL: transaction-scoped advisory lock. Other dialects: an
        in-process asyncio lock released together with the transaction.
        """
        kode = JenisSurat(jenis_surat).kode_nomor
        key = f"surat:{kode}:{year}"
        if self._dialect_name() == "postgresql":
            await self.session.execute(
                text("SELECT pg_advisory_xact_lock(hashtext(:key))"),
                {"key": key}
            )
        else:
            await self._acquire_process_lock(("numbering", kode, year))
        logger.debug(f"Numbering lock acquired: {key}")
        yield

    async def _acquire_process_lock(self, key: Hashable) -> None:
        if key in self._held_locks:
            return
        await process_locks.acquire(key)
        self._held_locks.append(key)

    def _release_locks(self) -> None:
        while self._held_locks:
            process_locks.release(self._held_locks.pop())

    def _dialect_name(self) -> str:
        return self.session.get_bind().dialect.name

    # ===== READ OPERATIONS =====

    async def get_by_id(self, surat_id: str, for_update: bool = False) -> Optional[SuratRequest]:
        """
        Get surat request by ID.

        ``for_update`` row-locks the record until the unit of work ends
        (``SELECT ... FOR UPDATE``; a per-id process lock where the dialect has
        no row locks) and reloads it over any stale copy in the session.
        """
        query = select(SuratRequest).where(
            and_(SuratRequest.id == surat_id, SuratRequest.deleted_at.is_(None))
        )
        if for_update:
            if self._dialect_name() != "postgresql":
                await self._acquire_process_lock(("surat", surat_id))
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_tracking_code(self, tracking_code: str) -> Optional[SuratRequest]:
        """Get surat request by kode tracking."""
        query = select(SuratRequest).where(
            and_(SuratRequest.tracking_code == tracking_code, SuratRequest.deleted_at.is_(None))
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def count_approved_by_type_and_year(self, jenis_surat: JenisSurat, year: int) -> int:
        """
        Count surat that already hold a nomor surat for ``year`` and share the
        kode nomor of ``jenis_surat`` (they draw from one sequence, so their
        nomor surat can never collide).

        Both approved and completed requests keep their number, so both count.
        The year window is taken on the approval moment in the village timezone.

        The name is kept for the workflow interface. The count is wider than
        "approved surat of this jenis by submission year" because a per-jenis
        count would mint duplicate ``001/SUR/...`` strings.
        """
        tz = ZoneInfo(settings.TIMEZONE)
        start = datetime(year, 1, 1, tzinfo=tz)
        end = datetime(year + 1, 1, 1, tzinfo=tz)

        query = select(func.count(SuratRequest.id)).where(
            and_(
                SuratRequest.jenis_surat.in_(JenisSurat.sharing_kode_nomor(jenis_surat)),
                SuratRequest.status.in_([StatusSurat.APPROVED, StatusSurat.COMPLETED]),
                SuratRequest.nomor_surat.is_not(None),
                SuratRequest.tanggal_disetujui >= start,
                SuratRequest.tanggal_disetujui < end
            )
        )
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def resident_exists(self, pemohon_id: str) -> bool:
        """Check pemohon terdaftar sebagai penduduk."""
        query = select(Penduduk.id).where(
            and_(Penduduk.id == pemohon_id, Penduduk.deleted_at.is_(None))
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none() is not None

    async def get_all_filtered(self, filters: SuratFilterParams) -> Tuple[List[SuratRequest], int]:
        """Get surat requests dengan filter dan pagination."""
        query = select(SuratRequest).where(SuratRequest.deleted_at.is_(None))

        if filters.status:
            query = query.where(SuratRequest.status == filters.status)

        if filters.jenis_surat:
            query = query.where(SuratRequest.jenis_surat == filters.jenis_surat)

        if filters.pemohon_id:
            query = query.where(SuratRequest.pemohon_id == filters.pemohon_id)

        if filters.tahun:
            tz = ZoneInfo(settings.TIMEZONE)
            query = query.where(
                and_(
                    SuratRequest.tanggal_pengajuan >= datetime(filters.tahun, 1, 1, tzinfo=tz),
                    SuratRequest.tanggal_pengajuan < datetime(filters.tahun + 1, 1, 1, tzinfo=tz)
                )
            )

        if filters.search:
            search_term = f"%{filters.search}%"
            query = query.where(
                or_(
                    SuratRequest.nomor_surat.ilike(search_term),
                    SuratRequest.tracking_code.ilike(search_term),
                    SuratRequest.keperluan.ilike(search_term)
                )
            )

        count_query = select(func.count()).select_from(query.subquery())
        total_result = await self.session.execute(count_query)
        total = total_result.scalar() or 0

        offset = (filters.page - 1) * filters.size
        query = (
            query
            .order_by(SuratRequest.tanggal_pengajuan.desc())
            .offset(offset)
            .limit(filters.size)
        )

        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def get_statistics(self, tahun: Optional[int] = None) -> Dict[str, Dict[str, int]]:
        """Jumlah surat per status dan per jenis surat."""
        conditions = [SuratRequest.deleted_at.is_(None)]
        if tahun:
            tz = ZoneInfo(settings.TIMEZONE)
            conditions.append(SuratRequest.tanggal_pengajuan >= datetime(tahun, 1, 1, tzinfo=tz))
            conditions.append(SuratRequest.tanggal_pengajuan < datetime(tahun + 1, 1, 1, tzinfo=tz))

        status_query = (
            select(SuratRequest.status, func.count(SuratRequest.id))
            .where(and_(*conditions))
            .group_by(SuratRequest.status)
        )
        jenis_query = (
            select(SuratRequest.jenis_surat, func.count(SuratRequest.id))
            .where(and_(*conditions))
            .group_by(SuratRequest.jenis_surat)
        )

        by_status = {status.value: 0 for status in StatusSurat}
        for status, count in (await self.session.execute(status_query)).all():
            by_status[StatusSurat(status).value] = count

        by_jenis = {jenis.value: 0 for jenis in JenisSurat}
        for jenis, count in (await self.session.execute(jenis_query)).all():
            by_jenis[JenisSurat(jenis).value] = count

        return {"by_status": by_status, "by_jenis": by_jenis}

    # ===== WRITE OPERATIONS =====

    async def save(self, surat: SuratRequest) -> SuratRequest:
        """
        Insert or update a surat request within the current transaction.

        Raises ConflictError on a unique violation (tracking code or nomor surat).
        """
        if surat in self.session:
            surat.updated_at = datetime.now(timezone.utc)

        self.session.add(surat)
        try:
            await self.session.flush()
        except IntegrityError as e:
            logger.warning(f"Unique constraint violated saving surat {surat.id}: {e.orig}")
            raise ConflictError(
                "Kode tracking atau nomor surat sudah digunakan",
                details={"id": surat.id, "tracking_code": surat.tracking_code, "nomor_surat": surat.nomor_surat}
            ) from e
        return surat
