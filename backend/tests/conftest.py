from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_ENABLED"] = "false"
os.environ["DEV_MODE"] = "true"
os.environ["WEBHOOK_URL"] = "http://webhook.test/hook"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from portfolio_ceo import models  # noqa: F401
from portfolio_ceo.clients.webhook import WebhookResponse, get_webhook_client
from portfolio_ceo.core.config import settings
from portfolio_ceo.db.base import Base
from portfolio_ceo.db.session import get_db
from portfolio_ceo.main import BlockedModeState, app
from portfolio_ceo.services.result import Err, ErrorKind, Ok
from portfolio_ceo.storage.memory import InMemoryStore


class FakeWebhookClient:
    """Stands in for the remote workflow; records every submitted payload."""

    def __init__(self) -> None:
        self.fetch_result = Err(ErrorKind.TRANSPORT, "Error: connection refused")
        self.post_result = Ok(WebhookResponse(status_code=200, text="ok"))
        self.fetch_calls = 0
        self.posted: list[dict] = []

    def fetch(self):
        self.fetch_calls += 1
        return self.fetch_result

    def post(self, payload):
        self.posted.append(payload)
        return self.post_result


@pytest.fixture()
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def store():
    return InMemoryStore()


@pytest.fixture()
def webhook():
    return FakeWebhookClient()


@pytest.fixture()
def client(db_session, webhook):
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_webhook_client] = lambda: webhook
    app.state.blocked_mode = BlockedModeState(
        is_blocked=False,
        database_url=settings.sqlalchemy_database_uri,
        missing_revisions=[],
        missing_by_table={},
    )
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
