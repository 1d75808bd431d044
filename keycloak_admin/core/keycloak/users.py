"""Keycloak user lifecycle and role-mapping operations."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlencode

from .api import ResourceApi
from .entities import NewUser, Role, User

logger = logging.getLogger(__name__)


class UserApi(ResourceApi):
    """Service for managing users of the client's realm."""

    def create(self, user: NewUser) -> str:
        """Create a user and return its id."""
        resp = self._send_request("POST", "users", user)
        user_id = self._created_id(resp)
        logger.info("User '%s' created", user.username)
        return user_id

    def find_all(self, query: Optional[Dict[str, Any]] = None) -> List[User]:
        """List users, optionally filtered by Keycloak's search parameters.

        Args:
            query: e.g. ``{"username": "alice", "exact": "true"}``
        """
        path = "users"
        if query:
            path = f"{path}?{urlencode(query)}"
        resp = self._send_request("GET", path)
        return [User.from_json(item) for item in self._json(resp) or []]

    def find(self, user_id: str) -> Optional[User]:
        """Return the user with ``user_id``, or None if it does not exist."""
        resp = self._send_or_none("GET", f"users/{user_id}")
        return User.from_json(resp.json()) if resp is not None else None

    def update(self, user: User) -> None:
        self._send_request("PUT", f"users/{user.id}", user)

    def delete(self, user_id: str) -> None:
        self._send_request("DELETE", f"users/{user_id}")
        logger.info("User '%s' deleted", user_id)

    def get_roles(self, user_id: str) -> List[Role]:
        """Return realm and client role mappings of the user as one list."""
        mappings = self._json(self._send_request("GET", f"users/{user_id}/role-mappings")) or {}
        roles = [Role.from_json(item) for item in mappings.get("realmMappings") or []]
        for client_mapping in (mappings.get("clientMappings") or {}).values():
            roles.extend(Role.from_json(item) for item in client_mapping.get("mappings") or [])
        return roles

    def get_client_roles(self, user_id: str, client_uuid: str) -> List[Role]:
        resp = self._send_request("GET", f"users/{user_id}/role-mappings/clients/{client_uuid}")
        return [Role.from_json(item) for item in self._json(resp) or []]

    def get_available_client_roles(self, user_id: str, client_uuid: str) -> List[Role]:
        resp = self._send_request("GET", f"users/{user_id}/role-mappings/clients/{client_uuid}/available")
        return [Role.from_json(item) for item in self._json(resp) or []]

    def add_client_roles(self, user_id: str, client_uuid: str, roles: Iterable[Role]) -> None:
        self._send_request("POST", f"users/{user_id}/role-mappings/clients/{client_uuid}", list(roles))

    def delete_client_roles(self, user_id: str, client_uuid: str, roles: Iterable[Role]) -> None:
        self._send_request("DELETE", f"users/{user_id}/role-mappings/clients/{client_uuid}", list(roles))
