"""Keycloak client (application) lookups."""
from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from .api import ResourceApi
from .entities import Client


class ClientApi(ResourceApi):
    """Read access to the clients of the client's realm."""

    def find_all(self, query: Optional[Dict[str, Any]] = None) -> List[Client]:
        path = "clients"
        if query:
            path = f"{path}?{urlencode(query)}"
        resp = self._send_request("GET", path)
        return [Client.from_json(item) for item in self._json(resp) or []]

    def find(self, client_uuid: str) -> Optional[Client]:
        """Return the client with internal id ``client_uuid``, or None if absent."""
        resp = self._send_or_none("GET", f"clients/{client_uuid}")
        return Client.from_json(resp.json()) if resp is not None else None

    def find_by_client_id(self, client_id: str) -> Optional[Client]:
        clients = self.find_all({"clientId": client_id})
        return clients[0] if clients else None
