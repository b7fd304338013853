import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ANTHROPIC_API_KEY", "test-key")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient

from advocate_ai.auth import get_current_user, get_password_hash
from advocate_ai.database import SessionLocal, engine, get_db
from advocate_ai.dependencies import get_generative_service
from advocate_ai.main import app
from advocate_ai.models.database import Base, Case, Client, User
from advocate_ai.services.generative_service import GenerationResult, GenerativeService


class FakeGenerativeService(GenerativeService):
    """Returns canned results in order and records every request it receives."""

    def __init__(self, *responses):
        self.responses = list(responses) or ["A formal answer."]
        self.calls = []

    async def invoke(self, contents, config):
        self.calls.append((list(contents), config))
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        if response is None or isinstance(response, GenerationResult):
            return response
        return GenerationResult(text=response)

    @property
    def last_contents(self):
        return self.calls[-1][0]

    @property
    def last_config(self):
        return self.calls[-1][1]


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def user(db_session):
    user = User(username="advocate", email="advocate@example.com",
                hashed_password=get_password_hash("password123"))
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def case(db_session, user):
    case = Case(owner_id=user.id, case_name="Smith v. Jones", case_number="CV-2024-001",
                description="Breach of a commercial lease")
    db_session.add(case)
    db_session.commit()
    db_session.refresh(case)
    return case


@pytest.fixture
def client_record(db_session, user):
    client = Client(owner_id=user.id, first_name="Jane", last_name="Smith",
                    email="jane@example.com", phone=None)
    db_session.add(client)
    db_session.commit()
    db_session.refresh(client)
    return client


@pytest.fixture
def fake_service():
    return FakeGenerativeService()


@pytest.fixture
def api_client(db_session, user, fake_service):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_generative_service] = lambda: fake_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
