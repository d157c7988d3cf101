from __future__ import annotations

import os
import tempfile
from datetime import timedelta

# Point storage at a throwaway SQLite file before any app module is imported
_db_dir = tempfile.mkdtemp(prefix="expense-tracker-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["APP_ENV"] = "test"

import pytest  # noqa: E402

from api import create_app  # noqa: E402
from models import storage  # noqa: E402
from services.auth import AuthService  # noqa: E402
from utils.security import TokenService  # noqa: E402

ACCESS_SECRET = "unit-access-secret-0123456789abcdef"
REFRESH_SECRET = "unit-refresh-secret-0123456789abcdef"


@pytest.fixture(autouse=True)
def clean_db():
    storage.close()
    storage.drop_all()
    storage.reload()
    yield
    storage.close()


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(
        access_secret=ACCESS_SECRET,
        refresh_secret=REFRESH_SECRET,
        access_expires=timedelta(minutes=15),
        refresh_expires=timedelta(days=7),
    )


@pytest.fixture
def service(tokens) -> AuthService:
    return AuthService(storage, tokens)


@pytest.fixture
def app():
    return create_app("testing")


@pytest.fixture
def client(app):
    # Cookies are passed explicitly so each test controls which refresh token is sent
    return app.test_client(use_cookies=False)


def refresh_cookie_header(response) -> str | None:
    for header in response.headers.getlist("Set-Cookie"):
        if header.startswith("refreshToken="):
            return header
    return None


def refresh_cookie_value(response) -> str | None:
    header = refresh_cookie_header(response)
    if header is None:
        return None
    return header.split(";", 1)[0].split("=", 1)[1]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def signup(client, email="a@x.com", password="pw123456", name="A"):
    return client.post(
        "/api/v1/auth/signup",
        json={"email": email, "password": password, "name": name},
    )


@pytest.fixture
def auth_headers(client) -> dict:
    resp = signup(client, email="owner@x.com", name="Owner")
    assert resp.status_code == 201
    return bearer(resp.get_json()["data"]["accessToken"])
