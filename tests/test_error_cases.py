import pytest
from fastapi.testclient import TestClient
import httpx
from pydantic import ValidationError
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker

from notestack import note_main, notebook_main
from notestack.core.config import (
    NotebookServiceSettings,
    NoteServiceSettings,
    get_note_settings,
    get_notebook_settings,
)
from notestack.database import get_db
from notestack.note_main import create_app as create_note_app
from notestack.notebook_main import create_app
from notestack.services.notebook_lookup import NotebookLookupClient

# 테이블을 만들지 않은 저장소: 모든 쿼리가 실패
broken_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
BrokenSession = sessionmaker(bind=broken_engine, autoflush=False, autocommit=False, future=True)


def override_get_db():
    db = BrokenSession()
    try:
        yield db
    finally:
        db.close()

app = create_app(NotebookServiceSettings(DATABASE_URL="sqlite://", PORT=3000))
app.dependency_overrides[get_db] = override_get_db
client = TestClient(app)

GENERIC_ERROR = "Error occurred at the server. Please try again later"


def test_store_failure_is_opaque_server_error():
    r = client.get("/notebooks")
    assert r.status_code == 500
    assert r.json() == {"error": GENERIC_ERROR}
    assert "no such table" not in r.text

    r = client.post("/notebooks", json={"title": "Work"})
    assert r.status_code == 500
    assert r.json() == {"error": GENERIC_ERROR}


def test_validation_runs_before_store_access():
    # 저장소가 깨져 있어도 입력 오류는 400
    assert client.get("/notebooks/not-an-id").status_code == 400
    assert client.post("/notebooks", json={}).status_code == 400


def test_unknown_route_uses_error_body():
    r = client.get("/does-not-exist")
    assert r.status_code == 404
    assert "error" in r.json()


def test_health_endpoints():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert r.json()["service"] == "Notebook Service"

    r = client.get("/health/db")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "database": "reachable"}


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("DATABASE_URL", "PORT", "NOTEBOOK_SERVICE_URL", "NOTEBOOK_LOOKUP_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(note_main, "setup_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(notebook_main, "setup_logging", lambda *args, **kwargs: None)
    get_note_settings.cache_clear()
    get_notebook_settings.cache_clear()
    yield monkeypatch
    get_note_settings.cache_clear()
    get_notebook_settings.cache_clear()


def test_note_settings_require_notebook_service_url(clean_env):
    clean_env.setenv("DATABASE_URL", "sqlite://")
    clean_env.setenv("PORT", "3001")
    with pytest.raises(ValidationError):
        NoteServiceSettings(_env_file=None)


def test_settings_reject_empty_values(clean_env):
    clean_env.setenv("DATABASE_URL", "")
    clean_env.setenv("PORT", "3000")
    with pytest.raises(ValidationError):
        NotebookServiceSettings(_env_file=None)


def test_services_refuse_to_start_without_config(clean_env):
    for module in (notebook_main, note_main):
        with pytest.raises(SystemExit) as exc:
            module.run()
        assert exc.value.code == 1


def test_note_service_starts_on_configured_port(clean_env):
    clean_env.setenv("DATABASE_URL", "sqlite://")
    clean_env.setenv("PORT", "3101")
    clean_env.setenv("NOTEBOOK_SERVICE_URL", "http://notebooks:3000")
    started = {}

    def fake_run(app, host, port):
        started["app"] = app
        started["port"] = port

    clean_env.setattr(note_main.uvicorn, "run", fake_run)
    note_main.run()

    assert started["port"] == 3101
    assert started["app"].state.notebook_lookup.base_url == "http://notebooks:3000"


lookup_calls = []


def _notebook_exists(request: httpx.Request) -> httpx.Response:
    lookup_calls.append(request)
    return httpx.Response(200, json={"data": {}})


note_app = create_note_app(
    NoteServiceSettings(DATABASE_URL="sqlite://", PORT=3001, NOTEBOOK_SERVICE_URL="http://notebook-service"),
    lookup=NotebookLookupClient("http://notebook-service", transport=httpx.MockTransport(_notebook_exists)),
)
note_app.dependency_overrides[get_db] = override_get_db
note_client = TestClient(note_app)

EXISTING_NOTEBOOK_ID = "65a1b2c3d4e5f60718293a4b"


def test_note_store_failure_after_successful_lookup():
    lookup_calls.clear()

    r = note_client.post("/notes", json={"title": "T", "content": "C", "notebookId": EXISTING_NOTEBOOK_ID})
    assert r.status_code == 500
    assert r.json() == {"error": GENERIC_ERROR}
    assert "no such table" not in r.text
    # 확인은 끝났고 쓰기에서 실패
    assert len(lookup_calls) == 1


def test_note_store_failure_on_read_update_delete():
    for r in (
        note_client.get("/notes"),
        note_client.get(f"/notes/{EXISTING_NOTEBOOK_ID}"),
        note_client.put(f"/notes/{EXISTING_NOTEBOOK_ID}", json={"title": "x"}),
        note_client.delete(f"/notes/{EXISTING_NOTEBOOK_ID}"),
    ):
        assert r.status_code == 500
        assert r.json() == {"error": GENERIC_ERROR}


def test_note_settings_reject_malformed_service_url(clean_env):
    clean_env.setenv("DATABASE_URL", "sqlite://")
    clean_env.setenv("PORT", "3001")
    for value in ("not a url", "notebooks:3000", ""):
        clean_env.setenv("NOTEBOOK_SERVICE_URL", value)
        with pytest.raises(ValidationError):
            NoteServiceSettings(_env_file=None)


def test_note_service_refuses_to_start_with_malformed_url(clean_env):
    clean_env.setenv("DATABASE_URL", "sqlite://")
    clean_env.setenv("PORT", "3001")
    clean_env.setenv("NOTEBOOK_SERVICE_URL", "::not-a-url::")
    with pytest.raises(SystemExit) as exc:
        note_main.run()
    assert exc.value.code == 1
