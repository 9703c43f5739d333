"""Role-based access control operations: roles, user membership and privileges."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional

from .errors import Status, handle_resp_status, require_service


class PrivilegeObjectType(enum.IntEnum):
    """Kind of object a privilege is granted on."""

    COLLECTION = 0
    GLOBAL = 1
    USER = 2

    @property
    def object_name(self) -> str:
        """Name of the object type as the server spells it."""
        return self.name.capitalize()


class OperateUserRoleType(enum.IntEnum):
    """Whether a user is added to or removed from a role."""

    ADD_USER_TO_ROLE = 0
    REMOVE_USER_FROM_ROLE = 1


class OperatePrivilegeType(enum.IntEnum):
    """Whether a privilege is granted or revoked."""

    GRANT = 0
    REVOKE = 1


@dataclass(frozen=True)
class Role:
    """A role known to the server."""

    name: str


@dataclass(frozen=True)
class User:
    """A user known to the server."""

    name: str


@dataclass
class CreateRoleRequest:
    role_name: str = ""


@dataclass
class DropRoleRequest:
    role_name: str = ""


@dataclass
class OperateUserRoleRequest:
    username: str = ""
    role_name: str = ""
    type: OperateUserRoleType = OperateUserRoleType.ADD_USER_TO_ROLE


@dataclass
class SelectRoleRequest:
    include_user_info: bool = False


@dataclass
class SelectRoleResponse:
    status: Optional[Status] = None
    role_names: list[str] = field(default_factory=list)


@dataclass
class SelectUserRequest:
    include_role_info: bool = False


@dataclass
class SelectUserResponse:
    status: Optional[Status] = None
    user_names: list[str] = field(default_factory=list)


@dataclass
class GrantEntity:
    role_name: str = ""
    object_type: str = ""
    object_name: str = ""


@dataclass
class OperatePrivilegeRequest:
    entity: GrantEntity = field(default_factory=GrantEntity)
    type: OperatePrivilegeType = OperatePrivilegeType.GRANT


class RbacMixin:
    """Access-control calls; expects a ``service`` attribute."""

    service: Any = None

    def _invoke(self, method: str, request: Any) -> Any:
        service = require_service(self.service)
        return getattr(service, method)(request)

    def _execute(self, method: str, request: Any) -> None:
        handle_resp_status(self._invoke(method, request))

    def _query(self, method: str, request: Any) -> Any:
        response = self._invoke(method, request)
        handle_resp_status(response.status)
        return response

    def create_role(self, name: str) -> None:
        """Create a role."""
        self._execute("create_role", CreateRoleRequest(role_name=name))

    def drop_role(self, name: str) -> None:
        """Drop a role."""
        self._execute("drop_role", DropRoleRequest(role_name=name))

    def add_user_role(self, username: str, role: str) -> None:
        """Add a user to a role."""
        self._operate_user_role(username, role, OperateUserRoleType.ADD_USER_TO_ROLE)

    def remove_user_role(self, username: str, role: str) -> None:
        """Remove a user from a role."""
        self._operate_user_role(username, role, OperateUserRoleType.REMOVE_USER_FROM_ROLE)

    def _operate_user_role(
        self, username: str, role: str, kind: OperateUserRoleType
    ) -> None:
        request = OperateUserRoleRequest(username=username, role_name=role, type=kind)
        self._execute("operate_user_role", request)

    def list_roles(self) -> list[Role]:
        """Return every role in the system."""
        response = self._query("select_role", SelectRoleRequest())
        return [Role(name=name) for name in response.role_names]

    def list_users(self) -> list[User]:
        """Return every user in the system."""
        response = self._query("select_user", SelectUserRequest())
        return [User(name=name) for name in response.user_names]

    def grant(
        self, role: str, object_type: PrivilegeObjectType, object_name: str
    ) -> None:
        """Grant a role privileges on an object."""
        self._operate_privilege(role, object_type, object_name, OperatePrivilegeType.GRANT)

    def revoke(
        self, role: str, object_type: PrivilegeObjectType, object_name: str
    ) -> None:
        """Revoke a role's privileges on an object."""
        self._operate_privilege(role, object_type, object_name, OperatePrivilegeType.REVOKE)

    def _operate_privilege(
        self,
        role: str,
        object_type: PrivilegeObjectType,
        object_name: str,
        kind: OperatePrivilegeType,
    ) -> None:
        entity = GrantEntity(
            role_name=role,
            object_type=PrivilegeObjectType(object_type).object_name,
            object_name=object_name,
        )
        self._execute("operate_privilege", OperatePrivilegeRequest(entity=entity, type=kind))