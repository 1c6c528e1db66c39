import json

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from careertrack import models  # noqa: F401
from careertrack.database import Base, get_db, enable_sqlite_savepoints
from careertrack.main import app
from careertrack.services.auth import AuthenticatedUser, get_current_user
from careertrack.services.resume_parser import get_resume_extractor

ALICE = AuthenticatedUser(id="user-alice", email="alice@example.com")
BOB = AuthenticatedUser(id="user-bob", email="bob@example.com")


class FakeExtractor:
    """Stands in for GeminiResumeExtractor; returns a canned model response."""

    def __init__(self, response: str = "{}"):
        self.response = response
        self.error = None
        self.received = []

    def respond_with(self, data: dict, fenced: bool = False):
        text = json.dumps(data)
        self.response = f"```json\n{text}\n```" if fenced else text

    async def complete(self, resume_text: str) -> str:
        self.received.append(resume_text)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_savepoints(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def fake_extractor():
    return FakeExtractor()


@pytest.fixture
def auth_state():
    """Mutable holder for the user the API sees; tests swap it to act as someone else."""
    return {"user": ALICE}


@pytest.fixture
async def client(session_maker, fake_extractor, auth_state):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: auth_state["user"]
    app.dependency_overrides[get_resume_extractor] = lambda: fake_extractor

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
