import os
from collections.abc import AsyncGenerator
from datetime import timedelta
from uuid import uuid4

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

# Load environment variables from .env file
load_dotenv()

from app.core.security import create_access_token, get_password_hash
from app.database import get_db, to_async_url
from app.dependencies import get_cache_manager
from app.main import app
from app.models import metadata
from app.models.categorias import categorias
from app.models.users import users

# In-memory SQLite unless TEST_DATABASE_URL points at a disposable database
TEST_DATABASE_URL = to_async_url(os.getenv("TEST_DATABASE_URL", "sqlite://"))

TEST_PASSWORD = "secret123"  # pragma: allowlist secret
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


def _test_engine():
    if TEST_DATABASE_URL.startswith("sqlite"):
        # One shared connection, so every session sees the same in-memory database
        return create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    # Use NullPool to avoid event loop issues with remote databases
    return create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session on freshly created tables."""
    engine = _test_engine()
    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
        await conn.run_sync(metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client with Redis disabled."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache_manager] = lambda: None

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def create_user(db_session: AsyncSession, **overrides) -> dict:
    """Insert a user row directly and return its values."""
    user_data = {
        "id": uuid4(),
        "email": f"user-{uuid4().hex[:8]}@example.com",
        "full_name": "Test User",
        "password_hash": TEST_PASSWORD_HASH,
        "tipo": "cliente",
        "ativo": True,
        "telefone": "11999990000",
    }
    user_data.update(overrides)
    await db_session.execute(insert(users).values(**user_data))
    await db_session.commit()
    return user_data


def token_for(user: dict) -> str:
    return create_access_token(data={"sub": str(user["id"])}, expires_delta=timedelta(minutes=30))


def headers_for(user: dict) -> dict:
    return {"Authorization": f"Bearer {token_for(user)}"}


@pytest.fixture
async def test_user(db_session: AsyncSession) -> dict:
    """A client account."""
    return await create_user(
        db_session,
        email="cliente@example.com",
        full_name="Cliente Teste",
        tipo="cliente",
    )


@pytest.fixture
async def provider_user(db_session: AsyncSession) -> dict:
    """A provider account with an address on file."""
    return await create_user(
        db_session,
        email="prestador@example.com",
        full_name="Prestador Teste",
        tipo="prestador",
        telefone="11988887777",
        rua="Rua das Flores",
        numero="100",
        bairro="Centro",
        cidade="São Paulo",
        estado="SP",
        cep="01001000",
    )


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> dict:
    """An admin account."""
    return await create_user(
        db_session,
        email="admin@example.com",
        full_name="Admin Teste",
        tipo="admin",
    )


@pytest.fixture
async def category(db_session: AsyncSession) -> dict:
    """An active category."""
    category_data = {"id": uuid4(), "nome": "Elétrica", "icone": "Zap", "ativo": True}
    await db_session.execute(insert(categorias).values(**category_data))
    await db_session.commit()
    return category_data


@pytest.fixture
def auth_headers(test_user) -> dict:
    """Authentication headers for the client account."""
    return headers_for(test_user)


@pytest.fixture
def provider_headers(provider_user) -> dict:
    """Authentication headers for the provider account."""
    return headers_for(provider_user)


@pytest.fixture
def admin_headers(admin_user) -> dict:
    """Authentication headers for the admin account."""
    return headers_for(admin_user)
