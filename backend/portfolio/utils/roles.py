"""Typed role sets read from the identity provider's public metadata.

The provider stores roles in a loosely typed JSON bag, e.g.::

    {"roles": ["admin"], "superAdmin": true}

``parse_role_metadata`` validates that bag once, at the boundary, and hands
back a ``RoleSet``. ``superAdmin: true`` implies ``admin``.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, FrozenSet, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

ROLE_SET_VERSION = 1


class Role(str, Enum):
    admin = "admin"
    editor = "editor"
    viewer = "viewer"


class RoleMetadataError(ValueError):
    """The public metadata bag does not describe a valid role set."""


class RoleSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: int = ROLE_SET_VERSION
    roles: FrozenSet[Role] = frozenset()

    def has(self, role: Role) -> bool:
        return role in self.roles

    @property
    def is_admin(self) -> bool:
        return Role.admin in self.roles

    def sorted_names(self) -> List[str]:
        return sorted(r.value for r in self.roles)


class _PublicMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    roles: List[Role] = Field(default_factory=list)
    super_admin: bool = Field(default=False, alias="superAdmin")

    @field_validator("roles", mode="before")
    @classmethod
    def _lower_roles(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("roles must be a list")
        return [v.strip().lower() if isinstance(v, str) else v for v in value]

    @field_validator("super_admin", mode="before")
    @classmethod
    def _strict_flag(cls, value: Any) -> Any:
        if value is None:
            return False
        if not isinstance(value, bool):
            raise ValueError("superAdmin must be a boolean")
        return value


def parse_role_metadata(public_metadata: Optional[Mapping[str, Any]]) -> RoleSet:
    if public_metadata is None:
        return RoleSet()
    if not isinstance(public_metadata, Mapping):
        raise RoleMetadataError("public metadata must be an object")
    try:
        parsed = _PublicMetadata.model_validate(dict(public_metadata))
    except ValidationError as e:
        raise RoleMetadataError(str(e)) from e
    roles = set(parsed.roles)
    if parsed.super_admin:
        roles.add(Role.admin)
    return RoleSet(roles=frozenset(roles))
