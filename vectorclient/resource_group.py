"""Resource group management: listing, creating, describing and moving nodes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .errors import Status, handle_resp_status, require_service


@dataclass
class ResourceGroup:
    """Description of one resource group."""

    name: str = ""
    capacity: int = 0
    available_nodes_number: int = 0
    loaded_replica: dict[str, int] = field(default_factory=dict)
    outgoing_node_num: dict[str, int] = field(default_factory=dict)
    incoming_node_num: dict[str, int] = field(default_factory=dict)


@dataclass
class ResourceGroupInfo:
    """Resource group as the server reports it."""

    name: str = ""
    capacity: int = 0
    num_available_node: int = 0
    num_loaded_replica: dict[str, int] = field(default_factory=dict)
    num_outgoing_node: dict[str, int] = field(default_factory=dict)
    num_incoming_node: dict[str, int] = field(default_factory=dict)


@dataclass
class ListResourceGroupsRequest:
    pass


@dataclass
class ListResourceGroupsResponse:
    status: Optional[Status] = None
    resource_groups: list[str] = field(default_factory=list)


@dataclass
class _NamedGroupRequest:
    resource_group: str = ""


class CreateResourceGroupRequest(_NamedGroupRequest):
    """Request to create a resource group."""


class DescribeResourceGroupRequest(_NamedGroupRequest):
    """Request to describe a resource group."""


class DropResourceGroupRequest(_NamedGroupRequest):
    """Request to drop a resource group."""


@dataclass
class DescribeResourceGroupResponse:
    status: Optional[Status] = None
    resource_group: Optional[ResourceGroupInfo] = None


@dataclass
class TransferNodeRequest:
    source_resource_group: str = ""
    target_resource_group: str = ""
    num_node: int = 0


@dataclass
class TransferReplicaRequest:
    source_resource_group: str = ""
    target_resource_group: str = ""
    collection_name: str = ""
    num_replica: int = 0


class ResourceGroupMixin:
    """Resource group calls; expects a ``service`` attribute."""

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

    def list_resource_groups(self) -> list[str]:
        """Return the names of all resource groups."""
        response = self._query("list_resource_groups", ListResourceGroupsRequest())
        return list(response.resource_groups)

    def create_resource_group(self, name: str) -> None:
        """Create a resource group."""
        self._execute("create_resource_group", CreateResourceGroupRequest(resource_group=name))

    def describe_resource_group(self, name: str) -> ResourceGroup:
        """Return the description of a resource group."""
        response = self._query(
            "describe_resource_group", DescribeResourceGroupRequest(resource_group=name)
        )
        info = response.resource_group or ResourceGroupInfo()
        return ResourceGroup(
            name=info.name,
            capacity=info.capacity,
            available_nodes_number=info.num_available_node,
            loaded_replica=dict(info.num_loaded_replica),
            outgoing_node_num=dict(info.num_outgoing_node),
            incoming_node_num=dict(info.num_incoming_node),
        )

    def drop_resource_group(self, name: str) -> None:
        """Drop a resource group."""
        self._execute("drop_resource_group", DropResourceGroupRequest(resource_group=name))

    def transfer_node(self, source: str, target: str, num_nodes: int) -> None:
        """Move query nodes from one resource group to another."""
        self._execute(
            "transfer_node",
            TransferNodeRequest(
                source_resource_group=source,
                target_resource_group=target,
                num_node=num_nodes,
            ),
        )

    def transfer_replica(
        self, source: str, target: str, collection_name: str, num_replicas: int
    ) -> None:
        """Move replicas of a collection from one resource group to another."""
        self._execute(
            "transfer_replica",
            TransferReplicaRequest(
                source_resource_group=source,
                target_resource_group=target,
                collection_name=collection_name,
                num_replica=num_replicas,
            ),
        )