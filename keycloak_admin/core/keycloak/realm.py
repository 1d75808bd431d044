"""Keycloak realm management operations."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .api import ResourceApi
from .entities import (
    AuthenticationConfig,
    AuthenticationExecution,
    AuthenticationFlow,
    NewAuthenticationConfig,
    NewAuthenticationExecution,
    NewAuthenticationFlow,
    Role,
)

logger = logging.getLogger(__name__)


class RealmApi(ResourceApi):
    """Realm-level operations for the client's realm."""

    def find(self) -> Optional[Dict[str, Any]]:
        """Return the realm representation, or None if the realm does not exist."""
        resp = self._send_or_none("GET", "")
        return self._json(resp) if resp is not None else None

    def create(self, enabled: bool = True, **attributes: Any) -> None:
        """Create the client's realm.

        Args:
            enabled: Whether the realm starts enabled
            **attributes: Extra RealmRepresentation fields (camelCase)
        """
        payload = {"realm": self.client.realm, "enabled": enabled, **attributes}
        self.client.send_realmless_request("POST", "", payload)
        logger.info("Realm '%s' created", self.client.realm)

    def delete(self) -> None:
        self.client.send_realmless_request("DELETE", self.client.realm)
        logger.info("Realm '%s' deleted", self.client.realm)

    # ─────────────────────────────────────────────────────────────────────
    # Authentication flows
    # ─────────────────────────────────────────────────────────────────────
    def create_authentication_flow(self, flow: NewAuthenticationFlow) -> str:
        resp = self._send_request("POST", "authentication/flows", flow)
        return self._created_id(resp)

    def get_authentication_flows(self) -> List[AuthenticationFlow]:
        resp = self._send_request("GET", "authentication/flows")
        return [AuthenticationFlow.from_json(item) for item in self._json(resp) or []]

    def get_authentication_flow(self, flow_id: str) -> Optional[AuthenticationFlow]:
        """Return the flow with ``flow_id``, or None if it does not exist."""
        resp = self._send_or_none("GET", f"authentication/flows/{flow_id}")
        return AuthenticationFlow.from_json(resp.json()) if resp is not None else None

    def get_authentication_flow_by_alias(self, alias: str) -> Optional[AuthenticationFlow]:
        for flow in self.get_authentication_flows():
            if flow.alias == alias:
                return flow
        return None

    def delete_authentication_flow(self, flow_id: str) -> None:
        self._send_request("DELETE", f"authentication/flows/{flow_id}")

    # ─────────────────────────────────────────────────────────────────────
    # Executions
    # ─────────────────────────────────────────────────────────────────────
    def create_authentication_flow_execution(
        self,
        flow_alias: str,
        execution: NewAuthenticationExecution,
    ) -> str:
        resp = self._send_request("POST", f"authentication/flows/{flow_alias}/executions/execution", execution)
        return self._created_id(resp)

    def get_authentication_flow_executions(self, flow_alias: str) -> List[AuthenticationExecution]:
        resp = self._send_request("GET", f"authentication/flows/{flow_alias}/executions")
        return [AuthenticationExecution.from_json(item) for item in self._json(resp) or []]

    def get_authentication_flow_execution(
        self,
        flow_alias: str,
        execution_id: str,
    ) -> Optional[AuthenticationExecution]:
        for execution in self.get_authentication_flow_executions(flow_alias):
            if execution.id == execution_id:
                return execution
        return None

    def update_authentication_flow_execution(
        self,
        flow_alias: str,
        execution: AuthenticationExecution,
    ) -> Optional[AuthenticationFlow]:
        """Update an execution of ``flow_alias``.

        Returns:
            The flow if Keycloak answers with one. None when the answer has no
            body (Keycloak's usual 204) or the flow does not exist.
        """
        resp = self._send_or_none("PUT", f"authentication/flows/{flow_alias}/executions", execution)
        if resp is None:
            return None
        payload = self._json(resp)
        return AuthenticationFlow.from_json(payload) if payload else None

    def delete_authentication_flow_execution(self, execution_id: str) -> None:
        self._send_request("DELETE", f"authentication/executions/{execution_id}")

    # ─────────────────────────────────────────────────────────────────────
    # Authenticator configs
    # ─────────────────────────────────────────────────────────────────────
    def get_authentication_config(self, config_id: str) -> Optional[AuthenticationConfig]:
        """Return the authenticator config, or None if it does not exist."""
        resp = self._send_or_none("GET", f"authentication/config/{config_id}")
        return AuthenticationConfig.from_json(resp.json()) if resp is not None else None

    def create_authentication_config(self, execution_id: str, config: NewAuthenticationConfig) -> str:
        resp = self._send_request("POST", f"authentication/executions/{execution_id}/config", config)
        return self._created_id(resp)

    def delete_authentication_config(self, config_id: str) -> None:
        self._send_request("DELETE", f"authentication/config/{config_id}")

    # ─────────────────────────────────────────────────────────────────────
    # Roles
    # ─────────────────────────────────────────────────────────────────────
    def get_roles(self) -> List[Role]:
        resp = self._send_request("GET", "roles")
        return [Role.from_json(item) for item in self._json(resp) or []]
