"""Keycloak-specific exceptions for error handling."""
from __future__ import annotations

from typing import Optional


class KeycloakError(Exception):
    """Base exception for all Keycloak operations."""
    pass


class KeycloakCredentialsError(KeycloakError):
    """Base exception for grant-type and credential failures."""
    pass


class MissingCredentialsError(KeycloakCredentialsError):
    """Grant type activated with no stored and no supplied credentials."""

    def __init__(self, grant_type: str):
        self.grant_type = grant_type
        super().__init__(
            f'Cannot use grant type "{grant_type}": credentials not found, and were not provided'
        )


class ProtectedCredentialError(KeycloakCredentialsError):
    """Attempt to remove the permanent client_credentials entry."""

    def __init__(self, grant_type: str = "client_credentials"):
        self.grant_type = grant_type
        super().__init__(f'"{grant_type}" grant type cannot be removed from the base client')


class UnsupportedGrantTypeError(KeycloakCredentialsError):
    """Grant type has no known token-request parameter mapping."""

    def __init__(self, grant_type: str):
        self.grant_type = grant_type
        super().__init__(f'Unsupported grant type: "{grant_type}"')


class NoUsableCredentialsError(KeycloakCredentialsError):
    """Active grant type lost its credentials before the token fetch."""

    def __init__(self, grant_type: str):
        self.grant_type = grant_type
        super().__init__(f'Unable to find usable authentication credentials for "{grant_type}"')


class CredentialsRejectedError(KeycloakCredentialsError):
    """Token exchange failed.

    The message is fixed and never carries the underlying cause, which may
    include secret material or provider diagnostics.
    """

    def __init__(self, message: str = "Unable to obtain an access token with the active credentials"):
        super().__init__(message)


class RequestFailedError(KeycloakError):
    """HTTP error from Keycloak Admin API.

    Attributes:
        status_code: HTTP status code, or None when no response was received
        message: Error message from the transport
        endpoint: API endpoint that failed
    """

    def __init__(self, status_code: Optional[int], message: str, endpoint: str):
        self.status_code = status_code
        self.message = message
        self.endpoint = endpoint
        super().__init__(f"[{status_code}] {endpoint}: {message}")


class UnexpectedResponseError(KeycloakError):
    """Keycloak answered successfully but not in the expected shape."""
    pass
