import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from beebright.app import create_app
from beebright.config import Settings
from beebright.context import build_context
from beebright.errors import RelayError, UploadError

SETTINGS_ENV = (
    "APP_ENV", "SECRET_KEY", "ADMIN_USER", "ADMIN_PASSWORD", "ADMIN_PASSWORD_HASH",
    "SESSION_MAX_AGE", "SESSION_REVOCATION", "DATABASE_URL", "EMAIL_TO", "ALLOWED_ORIGINS", "PUBLIC_DIR",
)


class RecordingMailer:
    """Stands in for SMTP; keeps every message instead of sending it."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, to, subject, body, reply_to=None):
        if self.fail:
            raise RelayError("smtp down")
        self.sent.append({"to": to, "subject": subject, "body": body, "reply_to": reply_to})


class FakeUploader:
    def __init__(self):
        self.calls = []
        self.fail = False

    def upload(self, data, filename):
        if self.fail:
            raise UploadError("cloudinary down")
        self.calls.append((filename, data))
        return f"https://res.cloudinary.com/demo/image/upload/{filename}"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    # Settings read the process environment; keep tests independent of it
    for key in SETTINGS_ENV:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def public_dir(tmp_path: Path) -> Path:
    d = tmp_path / "public"
    d.mkdir()
    (d / "admin.html").write_text("<h1>Administración</h1>", encoding="utf-8")
    (d / "login.html").write_text("<h1>Acceso</h1>", encoding="utf-8")
    (d / "index.html").write_text("<h1>Bee Bright</h1>", encoding="utf-8")
    return d


@pytest.fixture()
def settings(tmp_path: Path, public_dir: Path) -> Settings:
    return Settings(
        _env_file=None,
        APP_ENV="development",
        SECRET_KEY="test-secret",
        ADMIN_USER="admin",
        ADMIN_PASSWORD="123456",
        DATABASE_URL=f"sqlite:///{tmp_path / 'data' / 'site.db'}",
        EMAIL_TO="owner@example.com",
        PUBLIC_DIR=str(public_dir),
    )


@pytest.fixture()
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture()
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture()
def ctx(settings, mailer, uploader):
    return build_context(settings, uploader=uploader, mailer=mailer)


@pytest.fixture()
def client(ctx) -> TestClient:
    return TestClient(create_app(context=ctx))


@pytest.fixture()
def admin_client(client) -> TestClient:
    r = client.post("/api/login", json={"username": "admin", "password": "123456"})
    assert r.status_code == 200
    return client
