import os

os.environ["ENV"] = "test"
os.environ.setdefault("WEBHOOK_DISPATCHER", "inline")

from contextlib import contextmanager  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.adapters import get_adapter_registry  # noqa: E402
from app.core.dispatcher import InlineDispatcher  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from app.db import Base, db_manager, get_db  # noqa: E402
from app.main import create_app  # noqa: E402
from app.services.inbound_processor import InboundProcessor  # noqa: E402
import app.models  # noqa: E402,F401

pytest_plugins = [
    "tests.fixtures.contact_fixtures",
    "tests.fixtures.conversation_fixtures",
    "tests.fixtures.meta_fixtures",
]

META_TEST_ENV = (
    "META_ACCESS_TOKEN",
    "META_APP_SECRET",
    "META_SIGNATURE_REQUIRED",
    "WHATSAPP_PHONE_ID",
    "INSTAGRAM_ACCOUNT_ID",
)


@pytest.fixture(autouse=True)
def clean_meta_env(monkeypatch):
    """Each test starts without Meta credentials; tests opt in with setenv."""
    for name in META_TEST_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="function")
def db():
    engine = db_manager.engine
    Base.metadata.create_all(bind=engine)
    session = Session(bind=engine)
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_scope(db):
    """Session scope for background processing bound to the test session."""

    @contextmanager
    def scope():
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise

    return scope


@pytest.fixture
def adapter_registry():
    """Adapters the app sees; tests add fakes per platform."""
    return {}


@pytest.fixture
def app(db, session_scope, adapter_registry):
    application = create_app(testing=True)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_adapter_registry] = lambda: adapter_registry
    application.state.webhook_dispatcher = InlineDispatcher(
        InboundProcessor(session_scope, adapter_registry)
    )
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
