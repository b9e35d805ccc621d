"""
Pytest configuration and fixtures
"""
import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.orm import sessionmaker

from sympcheck.core.config import Settings
from sympcheck.core.exceptions import GenerativeCollaboratorError, ScoringCollaboratorError
from sympcheck.core.security import create_access_token
from sympcheck.db.base import Base
from sympcheck.db.session import build_engine
from sympcheck.ml.scoring.base import ScoringStrategy
from sympcheck.models.symptom_history import SymptomHistory
from sympcheck.services.auth_service import AuthService

import sympcheck.models  # noqa: F401

TEST_DATABASE_URL = "sqlite://"
TEST_PASSWORD = "testpassword123"


class FakeGenerativeClient:
    """Stand-in for GenerativeClient.

    ``responses`` is a list of ``(substring, reply)`` pairs matched against
    the prompt in order; ``default`` applies when nothing matches. A reply is
    a string, an exception instance to raise, ``None`` for "not configured",
    or a ``(delay_seconds, reply)`` tuple.
    """

    def __init__(self, responses: Optional[List] = None, default: Any = None):
        self.responses = responses or []
        self.default = default
        self.prompts: List[str] = []

    @property
    def is_configured(self) -> bool:
        return self.default is not None or bool(self.responses)

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        for needle, reply in self.responses:
            if needle in prompt:
                return await self._resolve(reply)
        return await self._resolve(self.default)

    async def _resolve(self, reply: Any) -> str:
        if isinstance(reply, tuple):
            delay, reply = reply
            await asyncio.sleep(delay)
        if reply is None:
            raise GenerativeCollaboratorError("Generative model is not configured")
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeScoringStrategy(ScoringStrategy):
    """Returns a canned payload or raises a canned error."""

    name = "fake"

    def __init__(self, payload: Optional[Dict[str, Any]] = None,
                 error: Optional[Exception] = None):
        self.payload = payload if payload is not None else {"predictions": []}
        self.error = error
        self.calls: List[List[str]] = []

    async def score(self, symptoms: List[str]) -> Dict[str, Any]:
        self.calls.append(list(symptoms))
        if self.error is not None:
            raise self.error
        return self.payload


class FailingHistoryService:
    """History store whose writes always fail."""

    def __init__(self):
        self.attempts = 0

    def create_record(self, **kwargs):
        self.attempts += 1
        raise RuntimeError("database is unavailable")


class RecordingHistoryService:
    """In-memory history store capturing created records."""

    def __init__(self):
        self.records: List[SymptomHistory] = []

    def create_record(self, **kwargs) -> SymptomHistory:
        record = SymptomHistory(id=len(self.records) + 1, **kwargs)
        self.records.append(record)
        return record


def scoring_error(message: str = "scoring script crashed") -> ScoringCollaboratorError:
    return ScoringCollaboratorError(message)


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment."""
    return Settings(
        _env_file=None,
        SECRET_KEY="test-secret-key-for-sympcheck-tests-0123456789",
        DATABASE_URL=TEST_DATABASE_URL,
        GEMINI_API_KEY=None,
        SCORING_STRATEGY="rule_based",
        MAX_PREDICTIONS=5,
        MAX_CONCURRENT_ADVICE=3,
    )


@pytest.fixture
def db_session():
    """Create a test database session on an in-memory SQLite database."""
    engine = build_engine(TEST_DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def test_user(db_session, settings):
    """A registered user."""
    return AuthService(db_session, settings).register(
        email="test@example.com", password=TEST_PASSWORD, name="Test User", age=34
    )


@pytest.fixture
def other_user(db_session, settings):
    """A second registered user."""
    return AuthService(db_session, settings).register(
        email="other@example.com", password=TEST_PASSWORD, name="Other User"
    )


def bearer_headers(user, settings: Settings) -> Dict[str, str]:
    token = create_access_token(data={"sub": str(user.id)}, settings=settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(test_user, settings) -> Dict[str, str]:
    return bearer_headers(test_user, settings)


@pytest.fixture
def fake_client() -> FakeGenerativeClient:
    """Generative collaborator that is unreachable by default."""
    return FakeGenerativeClient()


@pytest.fixture
def fake_scorer() -> FakeScoringStrategy:
    return FakeScoringStrategy(payload={
        "predictions": [
            {"disease": "Migraine", "probability": 70},
            {"disease": "Influenza", "probability": 90},
            {"disease": "Common Cold", "probability": 50},
        ]
    })


@pytest_asyncio.fixture
async def client(db_session, settings, fake_client, fake_scorer):
    """HTTP client bound to the app with collaborators overridden."""
    from sympcheck.dependencies import (
        get_app_settings,
        get_db,
        get_generative_client,
        get_scorer,
    )
    from sympcheck.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_app_settings] = lambda: settings
    app.dependency_overrides[get_generative_client] = lambda: fake_client
    app.dependency_overrides[get_scorer] = lambda: fake_scorer

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client

    app.dependency_overrides.clear()


def make_history(db_session, user, processed_symptoms, predictions=None,
                 timestamp: Optional[datetime] = None, original_input: str = "test input"):
    """Insert a history record directly."""
    record = SymptomHistory(
        user_id=user.id,
        original_input=original_input,
        processed_symptoms=processed_symptoms,
        predictions=predictions,
        timestamp=timestamp or datetime.now(timezone.utc),
    )
    db_session.add(record)
    db_session.commit()
    db_session.refresh(record)
    return record
