from __future__ import annotations

import json
import time
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from starlette.testclient import TestClient

from hrdesk.core.dependencies import get_current_user
from hrdesk.main import app
from hrdesk.models.auth import UserInfo
from hrdesk.services.account_directory import AccountDirectory
from hrdesk.services.employee_directory import EmployeeDirectory
from hrdesk.store.document_store import DocumentStore, document_store

TEST_SECRET_KEY = "test-secret-key-for-hrdesk"
TEST_ALGORITHM = "HS256"


@pytest.fixture(autouse=True)
def _test_settings(tmp_path):
    from hrdesk.core.config import settings

    original = (
        settings.DATA_FILE,
        settings.JWT_SECRET_KEY,
        settings.JWT_ALGORITHM,
        settings.BCRYPT_ROUNDS,
        settings.CLOCK_TIMEZONE,
    )
    data_file = tmp_path / "data" / "users.json"
    settings.DATA_FILE = str(data_file)
    settings.JWT_SECRET_KEY = TEST_SECRET_KEY
    settings.JWT_ALGORITHM = TEST_ALGORITHM
    settings.BCRYPT_ROUNDS = 4

    document_store.path = data_file
    document_store.initialized = False
    yield
    document_store.initialized = False
    (
        settings.DATA_FILE,
        settings.JWT_SECRET_KEY,
        settings.JWT_ALGORITHM,
        settings.BCRYPT_ROUNDS,
        settings.CLOCK_TIMEZONE,
    ) = original


@pytest.fixture
def data_file(tmp_path) -> Path:
    return tmp_path / "data" / "users.json"


@pytest.fixture
def store(data_file) -> DocumentStore:
    return DocumentStore(data_file)


@pytest.fixture
def accounts(store) -> AccountDirectory:
    return AccountDirectory(store)


@pytest.fixture
def employees(store) -> EmployeeDirectory:
    return EmployeeDirectory(store)


def read_document(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def write_document(path: Path, document: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def _make_token(
    *,
    sub: str = "ACJODO20240001",
    name: str = "John Doe",
    email: str = "john@acme.io",
    roles: list[str] | None = None,
    company: str | None = "Acme Corp",
    expired: bool = False,
    secret: str = TEST_SECRET_KEY,
) -> str:
    now = int(time.time())
    claims = {
        "sub": sub,
        "name": name,
        "email": email,
        "company": company,
        "roles": roles or [],
        "iat": now - 60,
        "exp": now - 3600 if expired else now + 3600,
    }
    return jwt.encode(claims, secret, algorithm=TEST_ALGORITHM)


@pytest.fixture
def mock_user_admin():
    return UserInfo(
        id="ACJODO20240001", name="John Doe", email="john@acme.io", company="Acme Corp", roles=["Admin"]
    )


@pytest.fixture
def mock_user_employee():
    return UserInfo(
        id="ACJASM20240001", name="Jane Smith", email="jane@acme.io", company="Acme Corp", roles=["Employee"]
    )


@pytest.fixture
def authenticated_client(mock_user_admin):
    app.dependency_overrides[get_current_user] = lambda: mock_user_admin
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
