"""Base class for resource APIs built on a shared KeycloakClient."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import requests
from pydantic import SecretStr

from .client import KeycloakClient
from .exceptions import RequestFailedError, UnexpectedResponseError

logger = logging.getLogger(__name__)


class ResourceApi:
    """Service base for one family of admin endpoints.

    Holds no credential state of its own: credential and grant-type calls go
    straight to the client, so every API built on the same client sees the
    same credentials and the same active grant type.
    """

    def __init__(
        self,
        client: KeycloakClient,
        credentials: Optional[Dict[str, Tuple[str, Union[str, SecretStr]]]] = None,
    ):
        """Initialize the API.

        Args:
            client: Keycloak client shared by all resource APIs
            credentials: Extra ``{grant_type: (identity, secret)}`` pairs to store on the client
        """
        self.client = client
        for grant_type, (identity, secret) in (credentials or {}).items():
            self.client.set_credentials(grant_type, identity, secret)

    def set_credentials(self, grant_type: str, identity: str, secret: Union[str, SecretStr]) -> None:
        self.client.set_credentials(grant_type, identity, secret)

    def unset_credentials(self, grant_type: str) -> None:
        self.client.unset_credentials(grant_type)

    def set_grant_type(self, grant_type: str, credentials: Optional[Sequence[Any]] = None):
        self.client.set_grant_type(grant_type, credentials)
        return self

    def _send_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        return self.client.send_request(method, path, body, headers)

    def _send_or_none(
        self,
        method: str,
        path: str,
        body: Any = None,
    ) -> Optional[requests.Response]:
        """Send a request, mapping a 404 to ``None``.

        Only lookups that document "returns None when absent" go through here.
        Every other failure propagates.
        """
        try:
            return self._send_request(method, path, body)
        except RequestFailedError as exc:
            if exc.status_code != 404:
                raise
            logger.debug("%s %s: not found", method, path)
            return None

    @staticmethod
    def _json(resp: requests.Response) -> Any:
        if not resp.content:
            return None
        return resp.json()

    @staticmethod
    def _created_id(resp: requests.Response) -> str:
        """Return the id of a created resource from its Location header."""
        location = resp.headers.get("Location")
        if not location:
            raise UnexpectedResponseError(
                f"Create request answered {resp.status_code} without a Location header"
            )
        return location.rstrip("/").rsplit("/", 1)[-1]
