"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import SecretStr

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 5.0


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
        except OSError as e:
            logger.warning("Failed to read /run/secrets/%s: %s", secret_name, e)
        else:
            if secret_value:
                logger.debug("Loaded %s from /run/secrets", secret_name)
                return secret_value

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.debug("Loaded %s from environment (fallback)", env_var)
            return secret_value

    return None


def _require(var_name: str) -> str:
    value = os.environ.get(var_name, "").strip()
    if not value:
        raise RuntimeError(f"Environment variable {var_name} is required.")
    return value


@dataclass
class ClientConfig:
    """Construction parameters for a KeycloakClient."""
    url: str
    realm: str
    client_id: str
    client_secret: SecretStr
    alt_auth_realm: Optional[str] = None
    base_path: str = "/auth"
    timeout: float = DEFAULT_REQUEST_TIMEOUT

    @property
    def auth_realm(self) -> str:
        return self.alt_auth_realm or self.realm


def load_settings() -> ClientConfig:
    """Load client settings from environment and /run/secrets.

    Variables:
        KEYCLOAK_URL, KEYCLOAK_REALM, KEYCLOAK_SERVICE_CLIENT_ID (required)
        KEYCLOAK_SERVICE_CLIENT_SECRET or /run/secrets/keycloak_service_client_secret (required)
        KEYCLOAK_SERVICE_REALM (token realm, defaults to KEYCLOAK_REALM)
        KEYCLOAK_BASE_PATH (defaults to "/auth"; "" or "/" for none)
        KEYCLOAK_REQUEST_TIMEOUT (seconds, defaults to 5)
    """
    url = _require("KEYCLOAK_URL")
    realm = _require("KEYCLOAK_REALM")
    client_id = _require("KEYCLOAK_SERVICE_CLIENT_ID")

    client_secret = _load_secret_from_file(
        "keycloak_service_client_secret",
        "KEYCLOAK_SERVICE_CLIENT_SECRET",
    )
    if not client_secret:
        raise RuntimeError(
            "KEYCLOAK_SERVICE_CLIENT_SECRET not found in /run/secrets or environment"
        )

    alt_auth_realm = os.environ.get("KEYCLOAK_SERVICE_REALM", "").strip() or None
    base_path = os.environ.get("KEYCLOAK_BASE_PATH", "/auth")

    timeout_str = os.environ.get("KEYCLOAK_REQUEST_TIMEOUT", "").strip()
    try:
        timeout = float(timeout_str) if timeout_str else DEFAULT_REQUEST_TIMEOUT
    except ValueError:
        raise RuntimeError(f"KEYCLOAK_REQUEST_TIMEOUT must be a number, got {timeout_str!r}") from None

    logger.info(
        "Keycloak settings loaded; url=%s realm=%s auth_realm=%s client_id=%s",
        url,
        realm,
        alt_auth_realm or realm,
        client_id,
    )
    return ClientConfig(
        url=url,
        realm=realm,
        client_id=client_id,
        client_secret=SecretStr(client_secret),
        alt_auth_realm=alt_auth_realm,
        base_path=base_path,
        timeout=timeout,
    )
