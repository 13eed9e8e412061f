"""API router configuration."""

from fastapi import APIRouter

from src.api.endpoints import auth, users, penduduk, surat

# Create main API router
api_router = APIRouter()

api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        422: {"description": "Validation Error"},
    }
)

api_router.include_router(
    users.router,
    prefix="/users",
    tags=["User Management"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden - Admin desa only"},
        404: {"description": "User not found"},
        409: {"description": "Username or email already used"},
        422: {"description": "Validation Error"},
    }
)

api_router.include_router(
    penduduk.router,
    prefix="/penduduk",
    tags=["Penduduk"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden - Perangkat desa only for write operations"},
        404: {"description": "Penduduk not found"},
        409: {"description": "NIK already registered"},
        422: {"description": "Validation Error"},
    }
)

api_router.include_router(
    surat.router,
    prefix="/surat",
    tags=["Layanan Surat"],
    responses={
        400: {"description": "Invalid argument"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden - Perangkat desa only for status changes"},
        404: {"description": "Surat or pemohon not found"},
        409: {"description": "Invalid status transition or conflict"},
    }
)

# ===== DOCUMENTATION METADATA =====

tags_metadata = [
    {
        "name": "Authentication",
        "description": "Login dengan JWT access token dan refresh token",
    },
    {
        "name": "User Management",
        "description": "Pembuatan akun admin desa, perangkat desa, dan warga",
    },
    {
        "name": "Penduduk",
        "description": "Registrasi data penduduk; pemohon surat harus terdaftar di sini",
    },
    {
        "name": "Layanan Surat",
        "description": """
        **Pengajuan surat dan siklus statusnya**

        - pending -> processing -> approved -> completed, atau ditolak (rejected)
        - Nomor surat diberikan sekali saat disetujui, berurutan per kode nomor (SUR, LAI) per tahun
        - Cek status publik via kode tracking
        - Download PDF untuk surat yang sudah disetujui
        """,
    },
]


def get_tags_metadata():
    """Get tags metadata untuk OpenAPI documentation."""
    return tags_metadata
