"""Access-token acquisition for the supported OAuth2 grant types."""
from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Dict, Optional, Tuple

from authlib.integrations.requests_client import OAuth2Session
from authlib.oauth2.rfc6749 import OAuth2Token

from .credentials import CredentialPair, CredentialStore, normalize_grant_type
from .exceptions import (
    CredentialsRejectedError,
    NoUsableCredentialsError,
    UnsupportedGrantTypeError,
)

logger = logging.getLogger(__name__)

# Tokens this close to expiry are fetched again.
TOKEN_EXPIRY_LEEWAY = 10


class GrantType(str, Enum):
    """Grant types the token endpoint can be asked for."""
    CLIENT_CREDENTIALS = "client_credentials"
    PASSWORD = "password"

    @property
    def parameter_names(self) -> Tuple[str, str]:
        """Token-request field names for the (identity, secret) pair."""
        return _TOKEN_PARAMETERS[self]

    @classmethod
    def resolve(cls, name: str) -> "GrantType":
        try:
            return cls(normalize_grant_type(name))
        except ValueError:
            raise UnsupportedGrantTypeError(name) from None


_TOKEN_PARAMETERS = {
    GrantType.CLIENT_CREDENTIALS: ("client_id", "client_secret"),
    GrantType.PASSWORD: ("username", "password"),
}


class AuthlibTokenExchange:
    """Exchanges grant parameters for a token at the OpenID Connect token endpoint.

    The client authenticates with ``client_secret_post`` using the client it was
    built for. ``client_id``/``client_secret`` entries in the request parameters
    take precedence, which is how a replaced ``client_credentials`` pair is
    honoured.
    """

    def __init__(self, token_url: str, client_id: str, client_secret: str, timeout: float = 5):
        self.token_url = token_url
        self.client_id = client_id
        self._client_secret = client_secret
        self.timeout = timeout

    def fetch_token(self, grant_type: str, params: Dict[str, str]) -> OAuth2Token:
        params = dict(params)
        client_id = params.pop("client_id", self.client_id)
        client_secret = params.pop("client_secret", self._client_secret)
        with OAuth2Session(
            client_id,
            client_secret,
            token_endpoint_auth_method="client_secret_post",
        ) as session:
            return session.fetch_token(
                self.token_url,
                grant_type=grant_type,
                timeout=self.timeout,
                **params,
            )


class TokenProvider:
    """Fetches access tokens for the active grant type.

    The last token is reused while it is unexpired and was issued for the same
    grant type and credential pair. Anything else triggers a new exchange.
    """

    def __init__(self, exchange, store: CredentialStore):
        self.exchange = exchange
        self.store = store
        self._cached: Optional[Tuple[str, CredentialPair, OAuth2Token]] = None

    def fetch_token(self, grant_type: str) -> OAuth2Token:
        """Return a token for ``grant_type``.

        Raises:
            UnsupportedGrantTypeError: No parameter mapping for the grant type
            NoUsableCredentialsError: The store holds no pair for the grant type
            CredentialsRejectedError: The token exchange failed for any reason
        """
        grant = GrantType.resolve(grant_type)
        pair = self.store.get(grant.value)
        if pair is None:
            raise NoUsableCredentialsError(grant.value)

        cached = self._reusable(grant.value, pair)
        if cached is not None:
            return cached

        identity_key, secret_key = grant.parameter_names
        identity, secret = pair.reveal()
        logger.debug("Requesting access token (grant_type=%s, %s=%s)", grant.value, identity_key, identity)
        try:
            token = self.exchange.fetch_token(grant.value, {identity_key: identity, secret_key: secret})
            if not token or not token.get("access_token"):
                raise ValueError("token response carried no access_token")
        except Exception:
            logger.warning("Token request rejected (grant_type=%s, %s=%s)", grant.value, identity_key, identity)
            raise CredentialsRejectedError() from None

        if not isinstance(token, OAuth2Token):
            token = OAuth2Token.from_dict(token)
        self._cached = (grant.value, pair, token)
        return token

    def invalidate(self) -> None:
        self._cached = None

    def _reusable(self, grant_type: str, pair: CredentialPair) -> Optional[OAuth2Token]:
        if self._cached is None:
            return None
        cached_grant, cached_pair, token = self._cached
        if cached_grant != grant_type or cached_pair != pair:
            return None
        expires_at = token.get("expires_at")
        if not expires_at or expires_at - TOKEN_EXPIRY_LEEWAY <= time.time():
            return None
        return token
