"""Pytest shared fixtures for the Keycloak client tests."""
import json
import pathlib
import sys
from typing import Optional

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests
from authlib.oauth2.rfc6749 import OAuth2Token

from keycloak_admin.core.keycloak import KeycloakClient


def make_response(
    status_code: int = 200,
    payload=None,
    url: str = "http://kc/auth/admin/realms/demo",
    headers: Optional[dict] = None,
) -> requests.Response:
    """Build a real requests.Response so raise_for_status behaves as in production."""
    resp = requests.Response()
    resp.status_code = status_code
    resp.url = url
    resp.reason = "Stub"
    resp._content = b"" if payload is None else json.dumps(payload).encode()
    resp.headers.update(headers or {})
    return resp


class FakeExchange:
    """Records token requests and hands out OAuth2 tokens."""

    def __init__(self, token: str = "test-token", expires_in: Optional[int] = 300, error: Exception = None):
        self.token = token
        self.expires_in = expires_in
        self.error = error
        self.calls = []

    def fetch_token(self, grant_type, params):
        self.calls.append((grant_type, dict(params)))
        if self.error is not None:
            raise self.error
        payload = {"access_token": self.token, "token_type": "Bearer"}
        if self.expires_in is not None:
            payload["expires_in"] = self.expires_in
        return OAuth2Token(payload)


class FakeSession:
    """Stands in for requests.Session; replays queued responses or errors."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def request(self, method, url, headers=None, data=None, timeout=None):
        self.requests.append(
            {"method": method, "url": url, "headers": dict(headers or {}), "data": data, "timeout": timeout}
        )
        if not self.responses:
            return make_response(200, url=url)
        outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        outcome.url = url
        return outcome

    @property
    def last(self):
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last["data"])


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_network(monkeypatch, request):
    """
    Prevent unit tests from reaching a real Keycloak.

    Integration tests are explicitly marked with @pytest.mark.integration and
    are allowed to perform real HTTP calls by skipping this fixture.
    """
    if request.node.get_closest_marker("integration"):
        return

    def _refuse(self, method, url, *args, **kwargs):
        raise RuntimeError(f"Unexpected HTTP {method} in unit test: {url}")

    monkeypatch.setattr(requests.Session, "request", _refuse)


# ─────────────────────────────────────────────────────────────────────────────
# Client fixtures
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def exchange():
    return FakeExchange()


@pytest.fixture()
def session():
    return FakeSession()


@pytest.fixture()
def kc_client(exchange, session):
    """KeycloakClient wired to fake token exchange and transport."""
    return KeycloakClient(
        "automation-cli",
        "super-secret",
        "demo",
        "http://kc",
        session=session,
        token_exchange=exchange,
    )
