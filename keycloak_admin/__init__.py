"""Typed client for the Keycloak admin REST API."""
from .config import ClientConfig, load_settings
from .core.keycloak import *  # noqa: F401,F403
from .core.keycloak import __all__ as _keycloak_all

__version__ = "0.1.0"

__all__ = ["ClientConfig", "load_settings", *_keycloak_all]
