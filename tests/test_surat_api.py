import re

import pytest
from httpx import AsyncClient

SURAT_URL = "/api/v1/surat"
NOMOR_PATTERN = r"\d{3}/SUR/DESA/\d{2}/\d{4}"


async def _submit(client: AsyncClient, headers: dict, pemohon_id: str, **overrides) -> dict:
    payload = {
        "jenis_surat": "SURAT_KETERANGAN_DOMISILI",
        "pemohon_id": pemohon_id,
        "keperluan": "pengajuan KTP",
    }
    payload.update(overrides)
    response = await client.post(f"{SURAT_URL}/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_submit_surat(client: AsyncClient, warga_headers, resident):
    data = await _submit(client, warga_headers, resident.id, template_data={"tujuan": "kecamatan"})

    assert data["status"] == "pending"
    assert data["status_display"] == "Menunggu"
    assert data["nomor_surat"] is None
    assert data["tracking_code"].startswith("SU")
    assert data["template_data"] == {"tujuan": "kecamatan"}


@pytest.mark.asyncio
async def test_submit_requires_authentication(client: AsyncClient, resident):
    response = await client.post(f"{SURAT_URL}/", json={
        "jenis_surat": "SURAT_KETERANGAN_DOMISILI",
        "pemohon_id": resident.id,
        "keperluan": "pengajuan KTP",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_submit_unknown_jenis_is_bad_request(client: AsyncClient, warga_headers, resident):
    response = await client.post(f"{SURAT_URL}/", json={
        "jenis_surat": "SURAT_IZIN_KERAMAIAN",
        "pemohon_id": resident.id,
        "keperluan": "hajatan",
    }, headers=warga_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "INVALID_ARGUMENT"


@pytest.mark.asyncio
async def test_submit_empty_keperluan_is_bad_request(client: AsyncClient, warga_headers, resident):
    response = await client.post(f"{SURAT_URL}/", json={
        "jenis_surat": "SURAT_KETERANGAN_USAHA",
        "pemohon_id": resident.id,
        "keperluan": "   ",
    }, headers=warga_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_submit_unknown_resident_is_not_found(client: AsyncClient, warga_headers):
    response = await client.post(f"{SURAT_URL}/", json={
        "jenis_surat": "SURAT_KETERANGAN_DOMISILI",
        "pemohon_id": "00000000-0000-0000-0000-000000000000",
        "keperluan": "pengajuan KTP",
    }, headers=warga_headers)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_public_tracking(client: AsyncClient, warga_headers, resident):
    created = await _submit(client, warga_headers, resident.id)

    response = await client.get(f"{SURAT_URL}/track/{created['tracking_code']}")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "pending"
    assert "pemohon_id" not in data

    missing = await client.get(f"{SURAT_URL}/track/XX123ABC")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_full_lifecycle(client: AsyncClient, warga_headers, staff_headers, resident):
    created = await _submit(client, warga_headers, resident.id)
    surat_id = created["id"]

    processed = await client.post(f"{SURAT_URL}/{surat_id}/process", headers=staff_headers)
    assert processed.status_code == 200
    assert processed.json()["status"] == "processing"

    approved = await client.post(f"{SURAT_URL}/{surat_id}/approve", headers=staff_headers)
    assert approved.status_code == 200
    approved_data = approved.json()
    assert approved_data["status"] == "approved"
    assert re.fullmatch(NOMOR_PATTERN, approved_data["nomor_surat"])
    assert approved_data["nomor_surat"].startswith("001/")
    assert approved_data["approved_by"] is not None

    completed = await client.post(f"{SURAT_URL}/{surat_id}/complete", headers=staff_headers)
    assert completed.status_code == 200
    completed_data = completed.json()
    assert completed_data["status"] == "completed"
    assert completed_data["nomor_surat"] == approved_data["nomor_surat"]
    assert completed_data["tanggal_selesai"] is not None

    second = await _submit(client, warga_headers, resident.id, jenis_surat="SURAT_KETERANGAN_USAHA")
    second_approved = await client.post(f"{SURAT_URL}/{second['id']}/approve", headers=staff_headers)
    assert second_approved.json()["nomor_surat"].startswith("002/SUR/")


@pytest.mark.asyncio
async def test_warga_cannot_change_status(client: AsyncClient, warga_headers, resident):
    created = await _submit(client, warga_headers, resident.id)

    response = await client.post(f"{SURAT_URL}/{created['id']}/approve", headers=warga_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_approve_rejected_surat_is_conflict(client: AsyncClient, warga_headers, staff_headers, resident):
    created = await _submit(client, warga_headers, resident.id)
    surat_id = created["id"]

    rejected = await client.post(
        f"{SURAT_URL}/{surat_id}/reject",
        json={"keterangan": "Berkas tidak lengkap"},
        headers=staff_headers
    )
    assert rejected.status_code == 200
    assert rejected.json()["keterangan"] == "Berkas tidak lengkap"

    response = await client.post(f"{SURAT_URL}/{surat_id}/approve", headers=staff_headers)

    assert response.status_code == 409
    error = response.json()["error"]
    assert error["code"] == "INVALID_TRANSITION"
    assert error["details"] == {"current": "rejected", "requested": "approved"}

    current = await client.get(f"{SURAT_URL}/{surat_id}", headers=staff_headers)
    assert current.json()["status"] == "rejected"
    assert current.json()["nomor_surat"] is None


@pytest.mark.asyncio
async def test_update_status_endpoint(client: AsyncClient, warga_headers, staff_headers, resident):
    created = await _submit(client, warga_headers, resident.id)
    surat_id = created["id"]

    back = await client.put(f"{SURAT_URL}/{surat_id}/status", json={"status": "pending"}, headers=staff_headers)
    assert back.status_code == 409

    approved = await client.put(f"{SURAT_URL}/{surat_id}/status", json={"status": "approved"}, headers=staff_headers)
    assert approved.status_code == 200
    assert approved.json()["nomor_surat"] is not None


@pytest.mark.asyncio
async def test_unknown_surat_is_not_found(client: AsyncClient, staff_headers):
    response = await client.post(f"{SURAT_URL}/tidak-ada/approve", headers=staff_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_pdf_only_for_approved(client: AsyncClient, warga_headers, staff_headers, resident):
    created = await _submit(client, warga_headers, resident.id, keperluan="melamar <kerja> & lainnya")
    surat_id = created["id"]

    not_yet = await client.get(f"{SURAT_URL}/{surat_id}/pdf", headers=staff_headers)
    assert not_yet.status_code == 400

    await client.post(f"{SURAT_URL}/{surat_id}/approve", headers=staff_headers)
    response = await client.get(f"{SURAT_URL}/{surat_id}/pdf", headers=staff_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")
    assert ".pdf" in response.headers["content-disposition"]


@pytest.mark.asyncio
async def test_list_and_statistics(client: AsyncClient, warga_headers, staff_headers, resident):
    first = await _submit(client, warga_headers, resident.id)
    await _submit(client, warga_headers, resident.id, jenis_surat="LAINNYA", keperluan="bantuan sosial")
    await client.post(f"{SURAT_URL}/{first['id']}/approve", headers=staff_headers)

    listing = await client.get(f"{SURAT_URL}/", params={"status": "approved"}, headers=staff_headers)
    assert listing.status_code == 200
    data = listing.json()
    assert data["total"] == 1
    assert data["items"][0]["id"] == first["id"]

    by_pemohon = await client.get(f"{SURAT_URL}/", params={"pemohon_id": resident.id}, headers=staff_headers)
    assert by_pemohon.json()["total"] == 2

    stats = await client.get(f"{SURAT_URL}/stats", headers=staff_headers)
    assert stats.status_code == 200
    stats_data = stats.json()
    assert stats_data["total"] == 2
    assert stats_data["by_status"]["approved"] == 1
    assert stats_data["by_jenis"]["LAINNYA"] == 1
