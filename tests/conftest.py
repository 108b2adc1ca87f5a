"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Generator, List, Optional, Union
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from finbridge_gateway.api.dependencies import get_classifier, get_narrator
from finbridge_gateway.api.main import create_app
from finbridge_gateway.domain.exceptions import CandidateFailure
from finbridge_gateway.infrastructure.database.models import Base
from finbridge_gateway.infrastructure.database.repositories import SqlRecordStore
from finbridge_gateway.infrastructure.database.session import get_db
from finbridge_gateway.services.executor import CommandExecutor
from finbridge_gateway.services.simulator import LoanSimulator


# In-memory database shared by every connection of the test engine
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TODAY = date(2024, 6, 15)


class FakeModel:
    """Scripted cascade candidate: returns text or raises CandidateFailure"""

    def __init__(self, name: str, output: Union[str, Exception]):
        self.name = name
        self.output = output
        self.calls: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.calls.append(prompt)
        if isinstance(self.output, Exception):
            raise self.output
        return self.output


class FakeClassifier:
    """Returns a fixed command, or raises the configured error"""

    def __init__(self, command=None, error: Optional[Exception] = None):
        self.command = command
        self.error = error
        self.calls = []

    async def classify(self, text, context=None):
        self.calls.append((text, context))
        if self.error is not None:
            raise self.error
        return self.command.model_copy()


def failing(name: str) -> FakeModel:
    return FakeModel(name, CandidateFailure(f"{name}: HTTP 503"))


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db: Session) -> SqlRecordStore:
    return SqlRecordStore(db)


@pytest.fixture
def executor(store: SqlRecordStore) -> CommandExecutor:
    """Executor pinned to a fixed date with template-only narration"""
    return CommandExecutor(
        store,
        LoanSimulator(None, default_income=50_000.0),
        default_loan_rate=10.0,
        default_loan_tenure_months=60,
        today=lambda: TODAY,
    )


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database and no remote models"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_classifier] = lambda: None
    app.dependency_overrides[get_narrator] = lambda: None
    return TestClient(app)
