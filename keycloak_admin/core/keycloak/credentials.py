"""Credential storage and grant-type selection.

Credential pairs are keyed by grant type, case-insensitively. Secrets are held
as ``pydantic.SecretStr`` so they render as ``**********`` in reprs, logs and
tracebacks.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Sequence, Tuple, Union

from pydantic import SecretStr

from .exceptions import MissingCredentialsError

logger = logging.getLogger(__name__)

CLIENT_CREDENTIALS = "client_credentials"


def normalize_grant_type(grant_type: str) -> str:
    return grant_type.strip().lower()


@dataclass(frozen=True)
class CredentialPair:
    """An (identity, secret) pair bound to one grant type."""
    identity: str
    secret: SecretStr

    @classmethod
    def of(cls, identity: str, secret: Union[str, SecretStr]) -> "CredentialPair":
        if not isinstance(secret, SecretStr):
            secret = SecretStr(secret)
        return cls(identity, secret)

    def reveal(self) -> Tuple[str, str]:
        """Return the plain (identity, secret) tuple for the token request."""
        return self.identity, self.secret.get_secret_value()


class CredentialStore:
    """Credential pairs keyed by lower-cased grant type."""

    def __init__(self) -> None:
        self._pairs: Dict[str, CredentialPair] = {}

    def set(self, grant_type: str, identity: str, secret: Union[str, SecretStr]) -> None:
        key = normalize_grant_type(grant_type)
        self._pairs[key] = CredentialPair.of(identity, secret)
        logger.debug("Stored credentials for grant type %s", key)

    def unset(self, grant_type: str) -> None:
        self._pairs.pop(normalize_grant_type(grant_type), None)

    def get(self, grant_type: str) -> Optional[CredentialPair]:
        return self._pairs.get(normalize_grant_type(grant_type))

    def __contains__(self, grant_type: object) -> bool:
        return isinstance(grant_type, str) and normalize_grant_type(grant_type) in self._pairs

    def __iter__(self) -> Iterator[str]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)


class GrantSelector:
    """Tracks which grant type authenticates the next request.

    A grant type can only become active when the store already holds
    credentials for it, or when exactly one ``(identity, secret)`` pair is
    supplied with the activation. Supplied credentials always overwrite the
    stored ones. Validation runs before any mutation, so a failed activation
    leaves both the store and the active grant untouched.
    """

    def __init__(self, store: CredentialStore, initial: str = CLIENT_CREDENTIALS):
        self.store = store
        self._active = normalize_grant_type(initial)

    @property
    def active(self) -> str:
        return self._active

    def activate(
        self,
        grant_type: str,
        credentials: Optional[Sequence[Union[str, SecretStr]]] = None,
    ) -> "GrantSelector":
        key = normalize_grant_type(grant_type)
        credentials = tuple(credentials or ())
        if credentials and len(credentials) != 2:
            raise ValueError("credentials must be a single (identity, secret) pair")
        if not credentials and key not in self.store:
            raise MissingCredentialsError(key)

        if credentials:
            identity, secret = credentials
            self.store.set(key, identity, secret)
        if key != self._active:
            logger.debug("Switching active grant type from %s to %s", self._active, key)
        self._active = key
        return self
