# tests/conftest.py
import logging
import sys
from datetime import date

import pytest
from fastapi.testclient import TestClient

from config.settings import settings
from database.db import store
from database.seed import standard_classes
from schemas.students import StudentCreate
from services import student_service
from services.realtime import feed


# =========================
# Logging -> stdout
# =========================
@pytest.fixture(scope="session", autouse=True)
def _tests_log_to_stdout():
    root = logging.getLogger()
    if not any(isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stdout for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)


# ==============================================================
# Fresh in-memory database per test, no env / override leaking in
# ==============================================================
@pytest.fixture(autouse=True)
def data_store(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "SUPABASE_DB_URL", None)
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "test-key")
    monkeypatch.setattr(settings, "LOCAL_OVERRIDE_PATH", str(tmp_path / "override.json"))
    monkeypatch.setattr(settings, "ADMIN_USERNAME", "admin")
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "admin")
    monkeypatch.setattr(settings, "QUIZ_PASS_SCORE", 70)
    monkeypatch.setattr(settings, "LINEAR_PROGRESSION", True)

    store.seed = False
    store.local_engine = None
    store.reconnect("sqlite://")
    feed.forget()
    yield store
    if store.cloud_engine is not None:
        store.cloud_engine.dispose()


@pytest.fixture
def db(data_store):
    session = data_store.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def classes(db):
    db.add_all(standard_classes())
    db.commit()


@pytest.fixture
def student(db, classes):
    """Seven years old -> Rayon de Soleil (av4)"""
    payload = StudentCreate(
        full_name="Jean Dupont",
        birth_date=f"{date.today().year - 7}-03-14",
        club="AVENTURIERS",
    )
    return student_service.create_student(db, payload)


# =========================
# HTTP
# =========================
@pytest.fixture
def client():
    from main import app

    # no context manager: the startup hook would reconnect to the configured database
    return TestClient(app)


def _login(client, username, password):
    r = client.post("/v1/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}


@pytest.fixture
def admin_headers(client):
    return _login(client, "admin", "admin")


@pytest.fixture
def student_headers(client, student):
    return _login(client, "jean dupont", student.temporary_password)
