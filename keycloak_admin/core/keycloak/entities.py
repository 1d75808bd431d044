"""Typed representations of Keycloak admin resources.

Attributes use snake_case; the JSON form uses Keycloak's camelCase keys.
Optional keys fall back to the dataclass defaults, missing required keys
raise ``TypeError``.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

T = TypeVar("T", bound="JsonEntity")


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class JsonEntity:
    """Mixin mapping dataclass fields to and from Keycloak JSON."""

    @classmethod
    def from_json(cls: Type[T], data: Union[str, bytes, Dict[str, Any]]) -> T:
        if isinstance(data, (str, bytes)):
            data = json.loads(data)
        kwargs = {}
        for f in fields(cls):
            key = _camel(f.name)
            if key in data and data[key] is not None:
                kwargs[f.name] = data[key]
        return cls(**kwargs)

    def to_json(self) -> Dict[str, Any]:
        return {_camel(f.name): getattr(self, f.name) for f in fields(self)}


@dataclass
class Role(JsonEntity):
    id: str
    name: str
    client_role: bool
    container_id: str
    description: Optional[str] = None
    composite: bool = False


@dataclass
class AuthenticationExecution(JsonEntity):
    id: str
    requirement: str
    configurable: bool
    level: int
    index: int
    alias: str = ""
    requirement_choices: List[str] = field(default_factory=list)
    provider_id: str = ""
    display_name: str = ""
    authentication_config: Optional[str] = None


@dataclass
class NewAuthenticationExecution(JsonEntity):
    provider: str


@dataclass
class AuthenticationFlow(JsonEntity):
    id: str
    alias: str
    description: str = ""
    provider_id: str = "basic-flow"
    top_level: bool = True
    built_in: bool = False
    authentication_executions: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class NewAuthenticationFlow(JsonEntity):
    alias: str
    description: str = ""
    provider_id: str = "basic-flow"
    top_level: bool = True
    built_in: bool = False


@dataclass
class AuthenticationConfig(JsonEntity):
    id: str
    alias: str
    config: Dict[str, str] = field(default_factory=dict)


@dataclass
class NewAuthenticationConfig(JsonEntity):
    alias: str
    config: Dict[str, str] = field(default_factory=dict)


@dataclass
class User(JsonEntity):
    id: str
    username: str
    enabled: bool = True
    email_verified: bool = False
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    created_timestamp: Optional[int] = None
    attributes: Dict[str, List[str]] = field(default_factory=dict)
    required_actions: List[str] = field(default_factory=list)


@dataclass
class NewUser(JsonEntity):
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    enabled: bool = True
    email_verified: bool = False
    attributes: Dict[str, List[str]] = field(default_factory=dict)
    required_actions: List[str] = field(default_factory=list)


@dataclass
class Client(JsonEntity):
    id: str
    client_id: str
    name: Optional[str] = None
    description: Optional[str] = None
    enabled: bool = True
    protocol: str = "openid-connect"
    public_client: bool = False
    service_accounts_enabled: bool = False
    redirect_uris: List[str] = field(default_factory=list)
    web_origins: List[str] = field(default_factory=list)
    attributes: Dict[str, str] = field(default_factory=dict)
