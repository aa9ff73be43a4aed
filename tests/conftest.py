# tests/conftest.py
"""
Shared fixtures: in-memory SQLite, a temp-dir object store and a TestClient
wired to both through dependency overrides.
"""

import os
import tempfile

# settings are read at import time
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="catalog-test-")
os.environ["STORAGE_BACKEND"] = "local"
os.environ["ASSET_URL"] = "http://testserver/storage"
os.environ["API_PREFIX"] = "/api"
os.environ.pop("ADMIN_EMAIL", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.core.dependencies import get_object_store
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.services.auth_service import AuthService
from app.services.storage import LocalObjectStore
from app.schemas.user import RegisterRequest
from tests.factories import pdf_bytes, png_bytes


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(tmp_path):
    return LocalObjectStore(str(tmp_path / "public"), "http://testserver/storage")


@pytest.fixture
def client(session_factory, store):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_object_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(roles=None, email=None, password="secret123"):
        counter["n"] += 1
        svc = AuthService(db)
        user = svc.register(
            RegisterRequest(
                name=f"User {counter['n']}",
                email=email or f"user{counter['n']}@catalog.io",
                password=password,
            )
        )
        if roles is not None:
            svc.ensure_staff(user, roles)
        token = svc.issue_token(user)
        return user, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def auth_headers(make_user):
    _, headers = make_user()
    return headers


@pytest.fixture
def png():
    return png_bytes()


@pytest.fixture
def pdf():
    return pdf_bytes()
