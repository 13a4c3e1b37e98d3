import os
import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from rolegate.auth.passwords import hash_password
from rolegate.auth.session import SessionData
from rolegate.infra import session_repo as session_repo_module
from rolegate.infra import user_repo as user_repo_module
from rolegate.infra.session_repo import SessionRepo
from rolegate.infra.user_repo import UserRepo


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self):
        self.now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def user_repo(tmp_path: Path) -> UserRepo:
    return UserRepo(tmp_path / "data" / "users.yml")


@pytest.fixture()
def session_repo(tmp_path: Path, clock: FakeClock) -> SessionRepo:
    return SessionRepo(tmp_path / "data" / "sessions.yml", ttl_seconds=3600, now=clock)


@pytest.fixture()
def session() -> SessionData:
    return SessionData()


@pytest.fixture()
def make_user(user_repo: UserRepo):
    def _make(name="Ann", email="ann@x.com", password="secret1", role="user"):
        return user_repo.insert(name=name, email=email, password_hash=hash_password(password), role=role)

    return _make


@pytest.fixture()
def client(user_repo: UserRepo, session_repo: SessionRepo, monkeypatch) -> TestClient:
    monkeypatch.setattr(user_repo_module, "_REPO", user_repo)
    monkeypatch.setattr(session_repo_module, "_REPO", session_repo)

    from rolegate.app import app

    return TestClient(app)
