"""Keycloak Admin API client library.

Architecture:
- credentials.py: credential pairs keyed by grant type, active grant selection
- tokens.py: supported grant types and access-token acquisition
- client.py: HTTP client with bearer authentication and realm scoping
- api.py: base class shared by the resource APIs
- realm.py: realm, authentication flow and role operations
- users.py: user lifecycle and role mappings
- clients.py: client lookups
- entities.py: typed resource representations
- exceptions.py: typed exceptions for error handling

Usage:
    from keycloak_admin.core.keycloak import KeycloakClient, UserApi

    client = KeycloakClient("automation-cli", "secret", "demo", "http://keycloak:8080", base_path="")
    users = UserApi(client)
    alice = users.find_all({"username": "alice", "exact": "true"})
"""
from .api import ResourceApi
from .client import KeycloakClient, REQUEST_TIMEOUT, build_base_url
from .clients import ClientApi
from .credentials import CredentialPair, CredentialStore, GrantSelector
from .entities import (
    AuthenticationConfig,
    AuthenticationExecution,
    AuthenticationFlow,
    Client,
    NewAuthenticationConfig,
    NewAuthenticationExecution,
    NewAuthenticationFlow,
    NewUser,
    Role,
    User,
)
from .exceptions import (
    KeycloakError,
    KeycloakCredentialsError,
    MissingCredentialsError,
    ProtectedCredentialError,
    UnsupportedGrantTypeError,
    NoUsableCredentialsError,
    CredentialsRejectedError,
    RequestFailedError,
    UnexpectedResponseError,
)
from .realm import RealmApi
from .tokens import AuthlibTokenExchange, GrantType, TokenProvider
from .users import UserApi

__all__ = [
    # Client
    "KeycloakClient",
    "REQUEST_TIMEOUT",
    "build_base_url",

    # Credentials and tokens
    "CredentialPair",
    "CredentialStore",
    "GrantSelector",
    "GrantType",
    "TokenProvider",
    "AuthlibTokenExchange",

    # Exceptions
    "KeycloakError",
    "KeycloakCredentialsError",
    "MissingCredentialsError",
    "ProtectedCredentialError",
    "UnsupportedGrantTypeError",
    "NoUsableCredentialsError",
    "CredentialsRejectedError",
    "RequestFailedError",
    "UnexpectedResponseError",

    # Resource APIs
    "ResourceApi",
    "RealmApi",
    "UserApi",
    "ClientApi",

    # Entities
    "AuthenticationConfig",
    "AuthenticationExecution",
    "AuthenticationFlow",
    "Client",
    "NewAuthenticationConfig",
    "NewAuthenticationExecution",
    "NewAuthenticationFlow",
    "NewUser",
    "Role",
    "User",
]
