"""
Layanan Surat Desa - Test Configuration and Fixtures
"""
import os
import tempfile
from datetime import datetime, timedelta
from typing import AsyncGenerator
from zoneinfo import ZoneInfo

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from faker import Faker

# Set testing environment
os.environ['DATABASE_URI'] = 'sqlite:///./test.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['TIMEZONE'] = 'Asia/Jakarta'
os.environ['LOG_DIRECTORY'] = os.path.join(tempfile.gettempdir(), 'desa-surat-test-logs')
os.environ['DESA_NAMA'] = 'Desa Sukamaju'

from main import app
from src.core.database import get_db
from src.auth.jwt import get_password_hash, create_access_token
from src.models.user import User
from src.models.enums import UserRole
from src.models.penduduk import Penduduk
from src.models.penduduk_enums import JenisKelamin, StatusPerkawinan

fake = Faker('id_ID')

JAKARTA = ZoneInfo('Asia/Jakarta')

# Test database setup: one shared in-memory SQLite connection
TEST_DATABASE_URL = 'sqlite+aiosqlite:///:memory:'
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={'check_same_thread': False},
    poolclass=StaticPool,
)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class FixedClock:
    """Clock yang bisa diatur dan dimajukan secara manual."""

    def __init__(self, moment: datetime = None):
        self.moment = moment or datetime(2024, 3, 15, 9, 30, tzinfo=JAKARTA)

    def now(self) -> datetime:
        return self.moment

    def advance(self, **kwargs) -> None:
        self.moment = self.moment + timedelta(**kwargs)

    def set(self, moment: datetime) -> None:
        self.moment = moment


class SequenceIdGenerator:
    """Keluarkan suffix acak dari daftar; ulangi yang terakhir bila habis."""

    def __init__(self, values=None):
        self.values = list(values or [])
        self.counter = 0
        self.calls = 0

    def random_base36(self, n: int) -> str:
        self.calls += 1
        if self.values:
            value = self.values.pop(0) if len(self.values) > 1 else self.values[0]
            return value[:n]
        self.counter += 1
        return format(self.counter, 'x').rjust(n, '0')[-n:]


def make_penduduk(**overrides) -> Penduduk:
    data = dict(
        nik=fake.numerify('################'),
        no_kk=fake.numerify('################'),
        nama=fake.name().upper()[:100],
        tempat_lahir=fake.city()[:100],
        tanggal_lahir=fake.date_of_birth(minimum_age=18, maximum_age=80),
        jenis_kelamin=JenisKelamin.LAKI_LAKI,
        agama='Islam',
        status_perkawinan=StatusPerkawinan.KAWIN,
        pekerjaan='Petani',
        alamat=fake.street_address(),
        rt='001',
        rw='002',
    )
    data.update(overrides)
    return Penduduk(**data)


def auth_headers_for(user: User) -> dict:
    token = create_access_token({
        'sub': str(user.id),
        'username': user.username,
        'role': user.role.value,
        'type': 'access',
    })
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def id_generator() -> SequenceIdGenerator:
    return SequenceIdGenerator()


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


async def create_user(db_session: AsyncSession, role: UserRole, password: str, username: str = None) -> User:
    username = username or f"{role.value.lower()}_{fake.unique.random_int(min=1000, max=9999)}"
    user = User(
        nama=f"Petugas {role.value.replace('_', ' ').title()}",
        username=username,
        jabatan='Kaur Umum' if role != UserRole.WARGA else None,
        hashed_password=get_password_hash(password),
        email=f"{username}@sukamaju.desa.id",
        is_active=True,
        role=role,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def staff_user(db_session: AsyncSession) -> User:
    """Perangkat desa yang memproses surat"""
    return await create_user(db_session, UserRole.PERANGKAT_DESA, 'staffpassword123')


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await create_user(db_session, UserRole.ADMIN_DESA, 'adminpassword123')


@pytest.fixture
async def warga_user(db_session: AsyncSession) -> User:
    return await create_user(db_session, UserRole.WARGA, 'wargapassword123')


@pytest.fixture
def staff_headers(staff_user: User) -> dict:
    return auth_headers_for(staff_user)


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return auth_headers_for(admin_user)


@pytest.fixture
def warga_headers(warga_user: User) -> dict:
    return auth_headers_for(warga_user)


@pytest.fixture
async def resident(db_session: AsyncSession) -> Penduduk:
    """Penduduk terdaftar yang bisa mengajukan surat"""
    penduduk = make_penduduk()
    db_session.add(penduduk)
    await db_session.commit()
    await db_session.refresh(penduduk)
    return penduduk
