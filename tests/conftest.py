"""
Shared fixtures for linesdk test suite.
"""

import json
from unittest.mock import MagicMock

import pytest

from linesdk import config
from linesdk.store import get_store
from linesdk.types import AccessToken

CHANNEL_ID = "1234567890"


@pytest.fixture(autouse=True)
def configured(tmp_path, monkeypatch):
    """Every test runs against a fresh configuration and token file."""
    for field in ("CHANNEL_ID", "TOKEN_PATH", "TOKEN_KEY", "API_BASE", "TIMEOUT"):
        name = config.ENV_PREFIX + field
        monkeypatch.delenv(name, raising=False)
    conf = config.configure(CHANNEL_ID, token_path=tmp_path / "token.json")
    yield conf
    config.reset()


@pytest.fixture
def channel_id():
    return CHANNEL_ID


# ── Token fixtures ───────────────────────────────────────────

@pytest.fixture
def access_token():
    return AccessToken(
        value="eyJhbGciOiJIUzI1NiJ9.access.test",
        refresh_token="refresh-test-0001",
        expires_in=2592000,
        scope="profile openid",
        id_token="eyJhbGciOiJFUzI1NiJ9.id.test",
        created_at=1700000000.0,
    )


@pytest.fixture
def stored_token(access_token):
    get_store().set_current_token(access_token)
    return access_token


@pytest.fixture
def refreshed_body():
    """Body returned by /oauth2/v2.1/token for a refresh."""
    return {
        "access_token": "eyJhbGciOiJIUzI1NiJ9.access.new",
        "refresh_token": "refresh-test-0002",
        "expires_in": 2592000,
        "token_type": "Bearer",
        "scope": "profile openid",
    }


@pytest.fixture
def verify_body(channel_id):
    return {"scope": "profile openid", "client_id": channel_id, "expires_in": 2591659}


@pytest.fixture
def profile_body():
    return {
        "userId": "U4af4980629",
        "displayName": "Brown",
        "pictureUrl": "https://profile.line-scdn.net/abcdefghijklmn",
        "statusMessage": "Hello, LINE!",
    }


# ── Mock response factory ────────────────────────────────────

@pytest.fixture
def make_response():
    def _make(status_code=200, body=None):
        resp = MagicMock()
        resp.status_code = status_code
        if body is None:
            resp.content = b""
            resp.json.side_effect = ValueError("no body")
        else:
            resp.content = json.dumps(body).encode()
            resp.json.return_value = body
        return resp

    return _make


@pytest.fixture
def results():
    """Collects results delivered to a completion callback."""
    return []
