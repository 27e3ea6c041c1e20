import os
import tempfile
from typing import AsyncGenerator

# Configuración de pruebas ANTES de importar la aplicación
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite+aiosqlite:///:memory:"
os.environ["BCRYPT_SALT_ROUNDS"] = "4"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="indovendor-uploads-")

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from indovendor.api import deps
from indovendor.core.config import settings
from indovendor.core.passwords import hash_password
from indovendor.core.permissions import UserRole
from indovendor.core.security import generate_token_pair
from indovendor.crud import user_crud
from indovendor.db.database import Base
from indovendor.db.models import user_model, vendor_model, category_model, product_model  # noqa: F401
from indovendor.main import app
from indovendor.services.region_service import region_service

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
DEFAULT_PASSWORD = "Sunflower#42"

# Respuestas de la API de regiones usadas en las pruebas
REGION_FIXTURES = {
    "/provinces.json": [{"id": "31", "name": "DKI JAKARTA"}, {"id": "32", "name": "JAWA BARAT"}],
    "/regencies/31.json": [{"id": "3171", "province_id": "31", "name": "KOTA JAKARTA SELATAN"}],
    "/districts/3171.json": [{"id": "3171010", "regency_id": "3171", "name": "JAGAKARSA"}],
    "/villages/3171010.json": [{"id": "3171010001", "district_id": "3171010", "name": "CIPEDAK"}],
}


@pytest_asyncio.fixture
async def test_engine():
    """Base de datos en memoria nueva para cada prueba."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture(name="session")
async def session_fixture(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture(name="client")
async def client_fixture(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP asíncrono contra la app con la base de datos de pruebas."""

    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[deps.get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Cada prueba guarda sus ficheros en un directorio temporal propio."""
    directory = tmp_path / "uploads"
    directory.mkdir()
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(directory))
    return directory


@pytest.fixture
def region_api(monkeypatch):
    """Sustituye la API de regiones por un transporte en memoria."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        for suffix, payload in REGION_FIXTURES.items():
            if path.endswith(suffix):
                calls.append(suffix)
                return httpx.Response(200, json=payload)
        return httpx.Response(404, json={"message": "not found"})

    monkeypatch.setattr(region_service, "transport", httpx.MockTransport(handler))
    return calls


@pytest.fixture
def create_user(session_maker):
    """Fábrica de usuarios persistidos."""
    counter = {"n": 0}

    async def _create(role: UserRole = UserRole.CLIENT, email: str = None, password: str = DEFAULT_PASSWORD, **kwargs):
        counter["n"] += 1
        email = email or f"{role.value.lower()}{counter['n']}@example.com"
        async with session_maker() as session:
            return await user_crud.create_user(
                session,
                email=email,
                password_hash=hash_password(password),
                role=role,
                **kwargs,
            )

    return _create


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {generate_token_pair(user)['access_token']}"}


@pytest.fixture
def headers_for():
    return auth_headers
