"""
Pytest configuration and fixtures for testing.
"""
import os
import tempfile

# Settings are read at import time, so the test environment goes in first
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///./test_eventora.db")
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ["SUPABASE_JWT_SECRET"] = "test-supabase-jwt-secret"
os.environ["CACHE_BACKEND"] = "memory"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="eventora-uploads-"))
for key in ("GEMINI_API_KEY", "HUGGINGFACE_API_KEY", "UNSPLASH_ACCESS_KEY"):
    os.environ.pop(key, None)

import pytest
import pytest_asyncio
import uuid
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from eventora.main import app
from eventora.db.session import Base, get_session
from eventora.db.models.user import User
from eventora.db.models.event import Event, EventStatus, LocationType
from eventora.db.models.registration import Registration, RegistrationStatus
from eventora.cache import cache
from tests.utils import make_token


# Create test engine
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    poolclass=NullPool,  # Disable connection pooling for tests
    echo=False,
)

# Create test session factory
TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database for each test.
    Tables are dropped and recreated around every test for isolation.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async HTTP client for testing API endpoints.
    Overrides the database session dependency.
    """
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(db_session: AsyncSession, email: str, name: str) -> User:
    user = User(id=uuid.uuid4(), email=email, name=name)
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """An attendee."""
    return await _create_user(db_session, "attendee@example.com", "Test Attendee")


@pytest_asyncio.fixture
async def test_organizer(db_session: AsyncSession) -> User:
    """The creator of the fixture events."""
    return await _create_user(db_session, "organizer@example.com", "Test Organizer")


@pytest.fixture
def user_token(test_user: User) -> str:
    return make_token(test_user.id, test_user.email, test_user.name)


@pytest.fixture
def organizer_token(test_organizer: User) -> str:
    return make_token(test_organizer.id, test_organizer.email, test_organizer.name)


def build_event(creator: User, **overrides) -> Event:
    start = datetime.now(timezone.utc) + timedelta(days=overrides.pop("days_ahead", 7))
    values = dict(
        title="Test Event",
        description="A test event description",
        location_type=LocationType.physical,
        city="Nairobi",
        country="Kenya",
        start_time=start,
        end_time=start + timedelta(hours=2),
        timezone="Africa/Nairobi",
        capacity=50,
        ticket_price=0,
        status=EventStatus.PUBLISHED,
        cover_image={"url": "", "alt": ""},
        creator_id=creator.id,
    )
    values.update(overrides)
    return Event(**values)


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession, test_organizer: User) -> Event:
    """A published event owned by test_organizer."""
    event = build_event(test_organizer, categories=["Technology"])
    db_session.add(event)
    await db_session.commit()
    await db_session.refresh(event)
    return event


@pytest_asyncio.fixture
async def test_events(db_session: AsyncSession, test_organizer: User) -> list:
    """Five published events with distinct cities, prices and categories."""
    specs = [
        ("AI Summit", "Nairobi", "Kenya", 0, ["Technology", "AI"]),
        ("Jazz Night", "Lagos", "Nigeria", 25, ["Music"]),
        ("Startup Pitch", "Nairobi", "Kenya", 10, ["Business", "Networking"]),
        ("Marathon", "Kampala", "Uganda", 5, ["Sports"]),
        ("Data Workshop", "Accra", "Ghana", 15, ["Technology", "Education"]),
    ]
    events = []
    for i, (title, city, country, price, categories) in enumerate(specs):
        event = build_event(
            test_organizer,
            title=title,
            description=f"Description for {title}",
            city=city,
            country=country,
            ticket_price=price,
            categories=categories,
            days_ahead=i + 1,
        )
        db_session.add(event)
        events.append(event)

    await db_session.commit()
    for event in events:
        await db_session.refresh(event)
    return events


@pytest_asyncio.fixture
async def test_registration(db_session: AsyncSession, test_user: User, test_event: Event) -> Registration:
    registration = Registration(
        event_id=test_event.id,
        user_id=test_user.id,
        status=RegistrationStatus.CONFIRMED,
    )
    db_session.add(registration)
    await db_session.commit()
    await db_session.refresh(registration)
    return registration


@pytest_asyncio.fixture(autouse=True)
async def clear_cache():
    """Start every test with an empty cache."""
    await cache.delete_pattern("*")
    yield

