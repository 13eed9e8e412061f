"""In-memory repository for workflow unit tests."""

import asyncio
import copy
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from src.core.exceptions import ConflictError
from src.models.surat_enums import JenisSurat, StatusSurat
from src.models.surat_request import SuratRequest


def _clone(surat: SuratRequest) -> SuratRequest:
    return SuratRequest(**copy.deepcopy(surat.model_dump()))


class FakeSuratRepository:
    """
    Mirrors SuratRequestRepository: unique tracking code / nomor surat,
    numbering and row locks held until the unit of work ends, rollback of saves.
    """

    def __init__(self, residents=()):
        self.records: Dict[str, SuratRequest] = {}
        self.residents = set(residents)
        self.save_calls = 0
        self._locks: Dict[tuple, asyncio.Lock] = {}
        self._held: Dict[asyncio.Task, List[asyncio.Lock]] = {}
        self._undo: Dict[asyncio.Task, Dict[str, Optional[SuratRequest]]] = {}

    @asynccontextmanager
    async def transaction(self):
        task = asyncio.current_task()
        self._held[task] = []
        self._undo[task] = {}
        try:
            yield
        except BaseException:
            for surat_id, previous in self._undo[task].items():
                if previous is None:
                    self.records.pop(surat_id, None)
                else:
                    self.records[surat_id] = previous
            raise
        finally:
            for lock in self._held.pop(task):
                lock.release()
            self._undo.pop(task)

    @asynccontextmanager
    async def numbering_lock(self, jenis_surat, year):
        key = (JenisSurat(jenis_surat).kode_nomor, year)
        lock = self._locks.setdefault(key, asyncio.Lock())
        await lock.acquire()
        self._held[asyncio.current_task()].append(lock)
        yield

    async def get_by_id(self, surat_id, for_update=False):
        if for_update:
            # Row lock: held until the unit of work ends
            held = self._held[asyncio.current_task()]
            lock = self._locks.setdefault(("surat", surat_id), asyncio.Lock())
            if lock not in held:
                await lock.acquire()
                held.append(lock)
        stored = self.records.get(surat_id)
        return _clone(stored) if stored else None

    async def get_by_tracking_code(self, tracking_code):
        for stored in self.records.values():
            if stored.tracking_code == tracking_code:
                return _clone(stored)
        return None

    async def count_approved_by_type_and_year(self, jenis_surat, year):
        # Yield so concurrent approvals interleave unless serialized by the lock
        await asyncio.sleep(0)
        group = JenisSurat.sharing_kode_nomor(jenis_surat)
        return sum(
            1 for stored in self.records.values()
            if JenisSurat(stored.jenis_surat) in group
            and StatusSurat(stored.status) in (StatusSurat.APPROVED, StatusSurat.COMPLETED)
            and stored.nomor_surat is not None
            and stored.tanggal_disetujui.year == year
        )

    async def resident_exists(self, pemohon_id):
        return pemohon_id in self.residents

    async def save(self, surat: SuratRequest) -> SuratRequest:
        self.save_calls += 1
        for other in self.records.values():
            if other.id == surat.id:
                continue
            if other.tracking_code == surat.tracking_code or (
                surat.nomor_surat is not None and other.nomor_surat == surat.nomor_surat
            ):
                raise ConflictError("duplicate", details={"id": surat.id})

        undo = self._undo.get(asyncio.current_task())
        if undo is not None and surat.id not in undo:
            previous = self.records.get(surat.id)
            undo[surat.id] = _clone(previous) if previous else None

        self.records[surat.id] = _clone(surat)
        return surat
