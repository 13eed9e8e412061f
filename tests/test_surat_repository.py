"""SuratRequestRepository + SuratWorkflow against SQLite."""

import asyncio
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from src.core.exceptions import ConflictError, InvalidTransitionError
from src.models.surat_enums import JenisSurat, StatusSurat
from src.models.surat_request import SuratRequest
from src.repositories.surat_request import ProcessLockRegistry, SuratRequestRepository
from src.schemas.filters import SuratFilterParams
from src.services.surat_workflow import SuratWorkflow

from conftest import make_penduduk

JAKARTA = ZoneInfo("Asia/Jakarta")
DOMISILI = JenisSurat.SURAT_KETERANGAN_DOMISILI


@pytest.fixture
def repository(db_session: AsyncSession) -> SuratRequestRepository:
    return SuratRequestRepository(db_session)


@pytest.fixture
def workflow(repository, clock, id_generator) -> SuratWorkflow:
    return SuratWorkflow(repository, clock=clock, id_generator=id_generator)


def _surat(pemohon_id, tracking_code, **overrides) -> SuratRequest:
    data = dict(
        jenis_surat=DOMISILI,
        pemohon_id=pemohon_id,
        keperluan="pengajuan KTP",
        status=StatusSurat.PENDING,
        tracking_code=tracking_code,
        tanggal_pengajuan=datetime(2024, 3, 1, 10, 0, tzinfo=JAKARTA),
    )
    data.update(overrides)
    return SuratRequest(**data)


@pytest.mark.asyncio
async def test_example_scenario_end_to_end(workflow, resident):
    first = await workflow.submit(DOMISILI.value, resident.id, "pengajuan KTP")
    assert first.tracking_code.startswith("SU")
    assert first.created_at.tzinfo is not None
    assert first.status == StatusSurat.PENDING

    approved = await workflow.approve(first.id, "staff-1")
    assert approved.nomor_surat == "001/SUR/DESA/03/2024"

    second = await workflow.submit(DOMISILI.value, resident.id, "melamar kerja")
    approved_second = await workflow.approve(second.id, "staff-1")
    assert approved_second.nomor_surat == "002/SUR/DESA/03/2024"

    found = await workflow.lookup_by_tracking_code(first.tracking_code)
    assert found.id == first.id
    assert found.nomor_surat == "001/SUR/DESA/03/2024"


@pytest.mark.asyncio
async def test_failed_transition_leaves_record_unchanged(workflow, repository, resident):
    surat = await workflow.submit(DOMISILI.value, resident.id, "pengajuan KTP")
    surat_id = surat.id
    await workflow.reject(surat_id, "staff-1", "berkas kurang")

    with pytest.raises(InvalidTransitionError):
        await workflow.approve(surat_id, "staff-1")

    stored = await repository.get_by_id(surat_id)
    assert stored.status == StatusSurat.REJECTED
    assert stored.nomor_surat is None
    assert stored.keterangan == "berkas kurang"


@pytest.mark.asyncio
async def test_resident_exists(repository, resident):
    assert await repository.resident_exists(resident.id)
    assert not await repository.resident_exists("tidak-ada")


@pytest.mark.asyncio
async def test_save_duplicate_tracking_code_is_conflict(repository, resident):
    async with repository.transaction():
        await repository.save(_surat(resident.id, "SUDUPLIKAT1"))

    with pytest.raises(ConflictError):
        async with repository.transaction():
            await repository.save(_surat(resident.id, "SUDUPLIKAT1"))

    # Session still usable after the rollback
    assert await repository.get_by_tracking_code("SUDUPLIKAT1") is not None


@pytest.mark.asyncio
async def test_count_uses_approval_year_and_kode_nomor(repository, resident):
    approved_at = datetime(2024, 6, 1, 9, 0, tzinfo=JAKARTA)
    rows = [
        _surat(resident.id, "SU0001", status=StatusSurat.APPROVED,
               nomor_surat="001/SUR/DESA/06/2024", tanggal_disetujui=approved_at),
        _surat(resident.id, "SU0002", status=StatusSurat.COMPLETED,
               nomor_surat="002/SUR/DESA/06/2024", tanggal_disetujui=approved_at),
        _surat(resident.id, "SU0003", jenis_surat=JenisSurat.SURAT_KETERANGAN_USAHA,
               status=StatusSurat.APPROVED, nomor_surat="003/SUR/DESA/06/2024",
               tanggal_disetujui=approved_at),
        _surat(resident.id, "SU0004", status=StatusSurat.APPROVED,
               nomor_surat="001/SUR/DESA/06/2023",
               tanggal_disetujui=datetime(2023, 6, 1, 9, 0, tzinfo=JAKARTA)),
        _surat(resident.id, "SU0005", status=StatusSurat.PENDING),
        _surat(resident.id, "LA0006", jenis_surat=JenisSurat.LAINNYA, status=StatusSurat.APPROVED,
               nomor_surat="001/LAI/DESA/06/2024", tanggal_disetujui=approved_at),
    ]
    async with repository.transaction():
        for row in rows:
            await repository.save(row)

    assert await repository.count_approved_by_type_and_year(DOMISILI, 2024) == 3
    assert await repository.count_approved_by_type_and_year(DOMISILI, 2023) == 1
    assert await repository.count_approved_by_type_and_year(JenisSurat.LAINNYA, 2024) == 1
    assert await repository.count_approved_by_type_and_year(DOMISILI, 2025) == 0


@pytest.mark.asyncio
async def test_numbering_lock_released_after_transaction(repository):
    async with repository.transaction():
        async with repository.numbering_lock(DOMISILI, 2024):
            pass

    # Second acquisition would block forever if the first one leaked
    async def reacquire():
        async with repository.transaction():
            async with repository.numbering_lock(DOMISILI, 2024):
                return True

    assert await asyncio.wait_for(reacquire(), timeout=1)


@pytest.mark.asyncio
async def test_filter_and_statistics(workflow, repository, resident):
    first = await workflow.submit(DOMISILI.value, resident.id, "pengajuan KTP")
    await workflow.submit(JenisSurat.SURAT_KETERANGAN_USAHA.value, resident.id, "modal usaha")
    await workflow.approve(first.id, "staff-1")

    items, total = await repository.get_all_filtered(SuratFilterParams(status=StatusSurat.APPROVED))
    assert total == 1
    assert items[0].id == first.id

    items, total = await repository.get_all_filtered(SuratFilterParams(search="usaha"))
    assert total == 1

    items, total = await repository.get_all_filtered(SuratFilterParams(tahun=2024, size=1))
    assert total == 2
    assert len(items) == 1

    stats = await repository.get_statistics(2024)
    assert stats["by_status"]["approved"] == 1
    assert stats["by_status"]["pending"] == 1
    assert stats["by_jenis"]["SURAT_KETERANGAN_USAHA"] == 1
    assert stats["by_jenis"]["LAINNYA"] == 0


@pytest.mark.asyncio
async def test_concurrent_approvals_across_sessions_number_once(tmp_path, clock):
    # Separate connections to one database file, like the production engine
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'desa.db'}", poolclass=NullPool)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    try:
        async with session_factory() as session:
            penduduk = make_penduduk()
            session.add(penduduk)
            await session.commit()
            workflow = SuratWorkflow(SuratRequestRepository(session), clock=clock)
            surat = await workflow.submit(DOMISILI.value, penduduk.id, "pengajuan KTP")
            surat_id = surat.id

        async def approve(staff_id):
            async with session_factory() as session:
                workflow = SuratWorkflow(SuratRequestRepository(session), clock=clock)
                return await workflow.approve(surat_id, staff_id)

        results = await asyncio.gather(approve("staff-a"), approve("staff-b"), return_exceptions=True)

        approved = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(approved) == 1
        assert len(failures) == 1
        assert isinstance(failures[0], InvalidTransitionError)

        async with session_factory() as session:
            stored = await SuratRequestRepository(session).get_by_id(surat_id)
        assert stored.status == StatusSurat.APPROVED
        assert stored.nomor_surat == approved[0].nomor_surat == "001/SUR/DESA/03/2024"
        assert stored.approved_by == approved[0].approved_by
    finally:
        await engine.dispose()


def test_process_locks_follow_event_loop():
    registry = ProcessLockRegistry()

    async def contend():
        await registry.acquire("surat:1")
        waiter = asyncio.ensure_future(registry.acquire("surat:1"))
        await asyncio.sleep(0)
        registry.release("surat:1")
        await waiter
        registry.release("surat:1")
        return dict(registry._locks)

    # A lock contended in one loop must not break the next loop
    for _ in range(2):
        loop = asyncio.new_event_loop()
        try:
            assert loop.run_until_complete(contend()) == {}
        finally:
            loop.close()
