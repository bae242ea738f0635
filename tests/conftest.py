"""Shared test fixtures."""

from __future__ import annotations

import os

# Must be set before the app modules read their configuration.
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-long-enough-0123456789")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import get_async_session, init_models
from app.main import app
from app.storage import Storage


@pytest_asyncio.fixture
async def session_factory():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_models(engine)
    factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory
    await engine.dispose()


@pytest_asyncio.fixture
async def storage(session_factory) -> AsyncGenerator[Storage, None]:
    async with session_factory() as session:
        yield Storage(session)


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the per-test database."""

    async def _session_override():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = _session_override
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def register_user(
    client: AsyncClient, username: str, full_name: str | None = None, email: str | None = None
) -> dict:
    """Register through the API; returns {"id", "username", "headers"}."""
    response = await client.post("/api/register", json={
        "username": username,
        "password": "s3cret-pass",
        "fullName": full_name or username.title(),
        "email": email or f"{username}@pencraft.io",
    })
    assert response.status_code == 201, response.text
    data = response.json()
    return {
        "id": data["user"]["id"],
        "username": username,
        "headers": {"Authorization": f"Bearer {data['access_token']}"},
    }


async def make_admin(session_factory, user_id: int) -> None:
    async with session_factory() as session:
        storage = Storage(session)
        await storage.update_user(user_id, {"is_admin": True})
        await storage.commit()


def writing_payload(**overrides) -> dict:
    payload = {
        "title": "Glass Orchard",
        "content": "The trees grew windows instead of leaves, and we read the weather in them.",
        "description": "A short story about a strange orchard.",
        "category": "Fiction",
        "tags": ["Surreal", "Nature"],
        "readTime": 3,
    }
    payload.update(overrides)
    return payload


async def create_writing(client: AsyncClient, user: dict, **overrides) -> dict:
    response = await client.post("/api/writings", json=writing_payload(**overrides), headers=user["headers"])
    assert response.status_code == 201, response.text
    return response.json()
