import os

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Settings are read at import time, so the environment has to be in place first.
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["LOG_JSON"] = "false"

from typing import Any, AsyncGenerator, Awaitable, Callable  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from antiques_trail.api.deps import get_session  # noqa: E402
from antiques_trail.core.security import ADMIN_SUBJECT, create_access_token  # noqa: E402
from antiques_trail.db.models.place import Place, PlaceType  # noqa: E402
from antiques_trail.db.session import create_all, create_engine, create_sessionmaker  # noqa: E402
from antiques_trail.domain.places.service import create_place  # noqa: E402
from antiques_trail.main import app  # noqa: E402


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_engine(TEST_DATABASE_URL, poolclass=StaticPool, connect_args={"check_same_thread": False})
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_sessionmaker(engine)


@pytest_asyncio.fixture
async def session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(ADMIN_SUBJECT)}"}


@pytest_asyncio.fixture
async def place_type(session: AsyncSession) -> PlaceType:
    place_type = PlaceType(name="Antique Shop", description="Antiques and collectibles", specialties=[])
    session.add(place_type)
    await session.commit()
    return place_type


@pytest.fixture
def make_place(session: AsyncSession, place_type: PlaceType) -> Callable[..., Awaitable[Place]]:
    async def factory(**overrides: Any) -> Place:
        fields: dict[str, Any] = {
            "name": "Georgian Antiques",
            "address": "10 Pattison Street, Leith, Edinburgh EH6 7HF",
            "address_postcode": "EH6 7HF",
            "phone": "0131 553 7286",
            "lat": 55.9757,
            "lng": -3.1776,
            "type_id": place_type.id,
        }
        specialty_ids = overrides.pop("specialty_ids", None)
        hours = overrides.pop("hours", None)
        fields.update(overrides)
        return await create_place(session, fields, specialty_ids=specialty_ids, hours=hours)

    return factory
