import logging
import time

import pytest
import requests
from authlib.oauth2.rfc6749 import OAuth2Token

from keycloak_admin.core.keycloak import tokens
from keycloak_admin.core.keycloak.credentials import CredentialStore
from keycloak_admin.core.keycloak.exceptions import (
    CredentialsRejectedError,
    NoUsableCredentialsError,
    UnsupportedGrantTypeError,
)
from keycloak_admin.core.keycloak.tokens import AuthlibTokenExchange, GrantType, TokenProvider

from conftest import FakeExchange


@pytest.fixture()
def store():
    store = CredentialStore()
    store.set("client_credentials", "automation-cli", "super-secret")
    return store


def test_grant_type_parameter_names():
    assert GrantType.CLIENT_CREDENTIALS.parameter_names == ("client_id", "client_secret")
    assert GrantType.PASSWORD.parameter_names == ("username", "password")


def test_grant_type_resolve_is_case_insensitive():
    assert GrantType.resolve("Password") is GrantType.PASSWORD


def test_grant_type_resolve_unknown():
    with pytest.raises(UnsupportedGrantTypeError) as excinfo:
        GrantType.resolve("flimflam")
    assert excinfo.value.grant_type == "flimflam"


def test_client_credentials_parameters(store):
    exchange = FakeExchange()
    provider = TokenProvider(exchange, store)

    token = provider.fetch_token("client_credentials")

    assert token["access_token"] == "test-token"
    assert exchange.calls == [
        ("client_credentials", {"client_id": "automation-cli", "client_secret": "super-secret"})
    ]


def test_password_parameters(store):
    store.set("password", "alice", "pw")
    exchange = FakeExchange()
    provider = TokenProvider(exchange, store)

    provider.fetch_token("password")

    assert exchange.calls == [("password", {"username": "alice", "password": "pw"})]


def test_unsupported_grant_type(store):
    store.set("flimflam", "foo", "bar")
    exchange = FakeExchange()
    with pytest.raises(UnsupportedGrantTypeError):
        TokenProvider(exchange, store).fetch_token("flimflam")
    assert exchange.calls == []


def test_missing_credentials_at_fetch_time(store):
    with pytest.raises(NoUsableCredentialsError) as excinfo:
        TokenProvider(FakeExchange(), store).fetch_token("password")
    assert excinfo.value.grant_type == "password"


def test_exchange_failure_is_opaque(store, caplog):
    caplog.set_level(logging.DEBUG)
    exchange = FakeExchange(error=requests.HTTPError("401 invalid_client: super-secret rejected"))
    with pytest.raises(CredentialsRejectedError) as excinfo:
        TokenProvider(exchange, store).fetch_token("client_credentials")

    assert "super-secret" not in str(excinfo.value)
    assert excinfo.value.__cause__ is None
    assert excinfo.value.__suppress_context__ is True
    assert "super-secret" not in caplog.text


def test_response_without_access_token_is_rejected(store):
    class EmptyExchange:
        def fetch_token(self, grant_type, params):
            return {"token_type": "Bearer"}

    with pytest.raises(CredentialsRejectedError):
        TokenProvider(EmptyExchange(), store).fetch_token("client_credentials")


def test_token_reused_while_valid(store):
    exchange = FakeExchange(expires_in=300)
    provider = TokenProvider(exchange, store)

    first = provider.fetch_token("client_credentials")
    second = provider.fetch_token("client_credentials")

    assert first is second
    assert len(exchange.calls) == 1


def test_token_refetched_after_credentials_change(store):
    exchange = FakeExchange(expires_in=300)
    provider = TokenProvider(exchange, store)

    provider.fetch_token("client_credentials")
    store.set("client_credentials", "automation-cli", "rotated")
    provider.fetch_token("client_credentials")

    assert len(exchange.calls) == 2
    assert exchange.calls[-1][1]["client_secret"] == "rotated"


def test_token_refetched_when_grant_changes(store):
    store.set("password", "alice", "pw")
    exchange = FakeExchange(expires_in=300)
    provider = TokenProvider(exchange, store)

    provider.fetch_token("client_credentials")
    provider.fetch_token("password")

    assert [call[0] for call in exchange.calls] == ["client_credentials", "password"]


def test_expiring_token_is_refetched(store):
    exchange = FakeExchange(expires_in=300)
    provider = TokenProvider(exchange, store)
    token = provider.fetch_token("client_credentials")

    token["expires_at"] = int(time.time()) + 5
    provider.fetch_token("client_credentials")

    assert len(exchange.calls) == 2


def test_token_without_expiry_is_not_cached(store):
    exchange = FakeExchange(expires_in=None)
    provider = TokenProvider(exchange, store)
    provider.fetch_token("client_credentials")
    provider.fetch_token("client_credentials")
    assert len(exchange.calls) == 2


def test_authlib_exchange_posts_to_token_endpoint(monkeypatch):
    captured = {}

    class FakeOAuth2Session:
        def __init__(self, client_id, client_secret, **kwargs):
            captured["client"] = (client_id, client_secret)
            captured["init"] = kwargs

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def fetch_token(self, url, **kwargs):
            captured["url"] = url
            captured["kwargs"] = kwargs
            return OAuth2Token({"access_token": "abc", "expires_in": 60})

    monkeypatch.setattr(tokens, "OAuth2Session", FakeOAuth2Session)
    exchange = AuthlibTokenExchange(
        "http://kc/auth/realms/demo/protocol/openid-connect/token", "automation-cli", "super-secret", timeout=3
    )

    token = exchange.fetch_token("password", {"username": "alice", "password": "pw"})

    assert token["access_token"] == "abc"
    assert captured["client"] == ("automation-cli", "super-secret")
    assert captured["init"] == {"token_endpoint_auth_method": "client_secret_post"}
    assert captured["url"] == "http://kc/auth/realms/demo/protocol/openid-connect/token"
    assert captured["kwargs"] == {"grant_type": "password", "timeout": 3, "username": "alice", "password": "pw"}


def test_authlib_exchange_client_params_override_client(monkeypatch):
    captured = {}

    class FakeOAuth2Session:
        def __init__(self, client_id, client_secret, **kwargs):
            captured["client"] = (client_id, client_secret)

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def fetch_token(self, url, **kwargs):
            captured["kwargs"] = kwargs
            return OAuth2Token({"access_token": "abc"})

    monkeypatch.setattr(tokens, "OAuth2Session", FakeOAuth2Session)
    exchange = AuthlibTokenExchange("http://kc/token", "automation-cli", "super-secret")

    exchange.fetch_token("client_credentials", {"client_id": "other", "client_secret": "other-secret"})

    assert captured["client"] == ("other", "other-secret")
    assert "client_id" not in captured["kwargs"]
    assert captured["kwargs"]["grant_type"] == "client_credentials"
