"""FastAPI application untuk layanan surat desa."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.core.config import settings
from src.core.database import init_db, get_session_local
from src.api.router import api_router, get_tags_metadata
from src.middleware.error_handler import add_error_handlers
from src.repositories.user import UserRepository
from src.services.user import UserService
from src.utils.logging import setup_logging

# Setup logging first
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"Starting {settings.PROJECT_NAME}...")

    try:
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    if settings.FIRST_ADMIN_PASSWORD:
        async with get_session_local()() as session:
            await UserService(UserRepository(session)).ensure_default_admin(
                settings.FIRST_ADMIN_USERNAME, settings.FIRST_ADMIN_PASSWORD
            )

    logger.info(f"Environment: {'Development' if settings.DEBUG else 'Production'}")
    logger.info(f"Timezone: {settings.TIMEZONE}, desa: {settings.DESA_NAMA}")

    yield

    logger.info(f"Shutting down {settings.PROJECT_NAME}")


def create_application() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="""
        **Layanan Surat Desa**

        * Warga mengajukan surat dan menerima **kode tracking**
        * Perangkat desa memproses, menyetujui, atau menolak pengajuan
        * Surat yang disetujui mendapat **nomor surat resmi** yang unik
        * Cek status publik tanpa login via kode tracking

        ## Authentication

        1. **Login**: POST `/api/v1/auth/login` with username and password
        2. **Use Bearer token**: Include `Authorization: Bearer <token>` in headers
        3. **Refresh token**: POST `/api/v1/auth/refresh` when token expires

        ## Roles

        * `ADMIN_DESA` - kelola akun dan semua fungsi perangkat desa
        * `PERANGKAT_DESA` - proses pengajuan surat dan data penduduk
        * `WARGA` - ajukan surat dan lihat status
        """,
        debug=settings.DEBUG,
        lifespan=lifespan,
        openapi_tags=get_tags_metadata(),
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS_LIST,
        allow_credentials=True,
        allow_methods=settings.CORS_METHODS_LIST,
        allow_headers=settings.CORS_HEADERS_LIST,
    )

    # Add error handlers
    add_error_handlers(app)

    # Include API router
    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API information."""
        return {
            "message": f"Welcome to {settings.PROJECT_NAME}",
            "version": settings.VERSION,
            "status": "operational",
            "documentation": "/docs" if settings.DEBUG else "Documentation disabled in production",
            "environment": "development" if settings.DEBUG else "production"
        }

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint for monitoring."""
        return {
            "status": "healthy",
            "service": settings.SERVICE_NAME,
            "version": settings.VERSION,
        }

    return app


# Create application instance
app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info" if not settings.DEBUG else "debug",
        access_log=True
    )
