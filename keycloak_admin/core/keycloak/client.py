"""Low-level HTTP client for Keycloak Admin API.

Handles credentials, grant-type selection, token acquisition and HTTP
dispatch.
"""
from __future__ import annotations

import dataclasses
import json
import logging
from typing import Any, Dict, Optional, Sequence, Union

import requests
from pydantic import SecretStr

from .credentials import (
    CLIENT_CREDENTIALS,
    CredentialPair,
    CredentialStore,
    GrantSelector,
    normalize_grant_type,
)
from .exceptions import CredentialsRejectedError, ProtectedCredentialError, RequestFailedError
from .tokens import AuthlibTokenExchange, TokenProvider

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 5
DEFAULT_BASE_PATH = "/auth"


def build_base_url(url: str, base_path: Optional[str] = DEFAULT_BASE_PATH) -> str:
    """Combine the server URL with the relative base path.

    Keycloak 17+ dropped the fixed ``/auth`` prefix; ``""`` or ``"/"`` mean no
    prefix at all.
    """
    return (url.rstrip("/") + "/" + (base_path or "").lstrip("/")).strip("/")


def _jsonable(body: Any) -> Any:
    if hasattr(body, "to_json"):
        return body.to_json()
    if dataclasses.is_dataclass(body) and not isinstance(body, type):
        return dataclasses.asdict(body)
    if isinstance(body, (list, tuple)):
        return [_jsonable(item) for item in body]
    return body


class KeycloakClient:
    """HTTP client for Keycloak Admin API with grant-type aware authentication.

    The client owns the credential store and the active grant type. Every
    request asks the token provider for a token under the active grant and
    sends it as a bearer token.

    Instances are not thread-safe: one client is one logical caller. Switching
    grant types from another thread between ``set_grant_type`` and
    ``send_request`` changes which credentials authenticate the request.

    Usage:
        client = KeycloakClient("admin-cli", "secret", "demo", "http://keycloak:8080", base_path="")
        client.set_grant_type("password", ["alice", "pw"])
        response = client.send_request("GET", "users")
    """

    def __init__(
        self,
        client_id: str,
        client_secret: Union[str, SecretStr],
        realm: str,
        url: str,
        alt_auth_realm: Optional[str] = None,
        base_path: Optional[str] = DEFAULT_BASE_PATH,
        *,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
        token_exchange=None,
    ):
        """Initialize Keycloak client.

        Args:
            client_id: Client used for the client_credentials grant
            client_secret: Secret of that client
            realm: Realm that scoped requests operate on
            url: Keycloak server URL
            alt_auth_realm: Realm that issues tokens (defaults to ``realm``)
            base_path: Relative HTTP path Keycloak is served under
            timeout: Transport timeout in seconds
            session: requests session used for admin calls
            token_exchange: Object with ``fetch_token(grant_type, params)``
        """
        if isinstance(client_secret, SecretStr):
            client_secret = client_secret.get_secret_value()

        self.realm = realm
        self.auth_realm = alt_auth_realm or realm
        self.timeout = timeout
        self.base_url = build_base_url(url, base_path)
        self.token_url = f"{self.base_url}/realms/{self.auth_realm}/protocol/openid-connect/token"
        self.admin_url = f"{self.base_url}/admin/realms/"

        self._store = CredentialStore()
        self._store.set(CLIENT_CREDENTIALS, client_id, client_secret)
        self._grants = GrantSelector(self._store)
        if token_exchange is None:
            token_exchange = AuthlibTokenExchange(self.token_url, client_id, client_secret, timeout=timeout)
        self._tokens = TokenProvider(token_exchange, self._store)
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config, **kwargs) -> "KeycloakClient":
        """Build a client from a :class:`keycloak_admin.config.ClientConfig`."""
        return cls(
            config.client_id,
            config.client_secret,
            config.realm,
            config.url,
            alt_auth_realm=config.alt_auth_realm,
            base_path=config.base_path,
            timeout=config.timeout,
            **kwargs,
        )

    # ─────────────────────────────────────────────────────────────────────
    # Credentials and grant types
    # ─────────────────────────────────────────────────────────────────────
    @property
    def grant_type(self) -> str:
        return self._grants.active

    def get_client_credentials(self) -> CredentialPair:
        return self._store.get(CLIENT_CREDENTIALS)

    def get_credentials(self, grant_type: str) -> Optional[CredentialPair]:
        return self._store.get(grant_type)

    def set_credentials(
        self,
        grant_type: str,
        identity: str,
        secret: Union[str, SecretStr],
    ) -> "KeycloakClient":
        self._store.set(grant_type, identity, secret)
        return self

    def unset_credentials(self, grant_type: str) -> None:
        """Remove the credentials stored for ``grant_type``.

        Raises:
            ProtectedCredentialError: For ``client_credentials``
        """
        if normalize_grant_type(grant_type) == CLIENT_CREDENTIALS:
            raise ProtectedCredentialError(CLIENT_CREDENTIALS)
        self._store.unset(grant_type)

    def set_grant_type(
        self,
        grant_type: str,
        credentials: Optional[Sequence[Union[str, SecretStr]]] = None,
    ) -> "KeycloakClient":
        """Make ``grant_type`` authenticate subsequent requests.

        Args:
            grant_type: Grant type name (case-insensitive)
            credentials: Optional ``(identity, secret)`` pair, stored first

        Raises:
            MissingCredentialsError: Nothing stored and nothing supplied
        """
        self._grants.activate(grant_type, credentials)
        return self

    # ─────────────────────────────────────────────────────────────────────
    # Requests
    # ─────────────────────────────────────────────────────────────────────
    def send_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """Send a request scoped to the client's realm.

        ``path`` is relative to ``{admin_url}{realm}/``.
        """
        path = path.lstrip("/")
        scoped = f"{self.realm}/{path}" if path else self.realm
        return self.send_realmless_request(method, scoped, body, headers)

    def send_realmless_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """Send an authenticated request relative to the admin realms root.

        Args:
            method: HTTP method
            path: Path relative to ``admin_url``
            body: JSON-serialisable body, entity, or None for no body
            headers: Extra request headers

        Returns:
            The raw response

        Raises:
            CredentialsRejectedError: No token could be obtained
            RequestFailedError: Transport error or non-2xx status
        """
        try:
            token = self._tokens.fetch_token(self._grants.active)
        except CredentialsRejectedError:
            raise
        except Exception:
            raise CredentialsRejectedError() from None

        headers = dict(headers or {})
        data = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            data = json.dumps(_jsonable(body))
        headers["Authorization"] = f"Bearer {token['access_token']}"

        path = path.lstrip("/")
        url = f"{self.admin_url}{path}" if path else self.admin_url.rstrip("/")
        method = method.upper()
        logger.debug("%s %s (grant_type=%s)", method, url, self._grants.active)

        try:
            resp = self._session.request(method, url, headers=headers, data=data, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            response = getattr(exc, "response", None)
            status_code = response.status_code if response is not None else None
            logger.warning("%s %s failed with status %s", method, url, status_code)
            raise RequestFailedError(status_code, str(exc), url) from exc
        return resp
