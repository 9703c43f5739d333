"""Client that ties together collection, partition, index and access-control calls."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .errors import MilvusError, Status, handle_resp_status, require_service
from .partition import PartitionMixin
from .rbac import RbacMixin
from .resource_group import ResourceGroupMixin
from .rows import FieldType, Schema

INDEX_TYPE_KEY = "index_type"


class IndexState(enum.IntEnum):
    """Build state of an index."""

    NONE = 0
    UNISSUED = 1
    IN_PROGRESS = 2
    FINISHED = 3
    FAILED = 4
    RETRY = 5


class GenericIndex:
    """An index described by its name, type and raw parameters."""

    def __init__(self, name: str, index_type: str, params: Optional[dict[str, str]] = None) -> None:
        self.name = name
        self.index_type = index_type
        self._params = dict(params or {})

    def params(self) -> dict[str, str]:
        """Return the index parameters, including the index type when known."""
        result: dict[str, str] = {}
        if self.index_type:
            result[INDEX_TYPE_KEY] = self.index_type
        result.update(self._params)
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GenericIndex):
            return NotImplemented
        return (
            self.name == other.name
            and self.index_type == other.index_type
            and self._params == other._params
        )

    def __repr__(self) -> str:
        return (
            f"GenericIndex(name={self.name!r}, index_type={self.index_type!r}, "
            f"params={self._params!r})"
        )


@dataclass
class IndexDescription:
    """An index as the server describes it."""

    index_name: str = ""
    index_id: int = 0
    field_name: str = ""
    params: dict[str, str] = field(default_factory=dict)
    state: IndexState = IndexState.NONE
    index_state_fail_reason: str = ""


@dataclass
class DescribeCollectionRequest:
    collection_name: str = ""


@dataclass
class DescribeCollectionResponse:
    status: Optional[Status] = None
    schema: Schema = field(default_factory=Schema)


@dataclass
class FlushRequest:
    collection_names: list[str] = field(default_factory=list)


@dataclass
class FlushResponse:
    status: Optional[Status] = None


@dataclass
class CreateIndexRequest:
    collection_name: str = ""
    field_name: str = ""
    index_name: str = ""
    extra_params: dict[str, str] = field(default_factory=dict)


@dataclass
class DescribeIndexRequest:
    collection_name: str = ""
    field_name: str = ""
    index_name: str = ""


@dataclass
class DescribeIndexResponse:
    status: Optional[Status] = None
    index_descriptions: list[IndexDescription] = field(default_factory=list)


@dataclass
class DropIndexRequest:
    collection_name: str = ""
    field_name: str = ""
    index_name: str = ""


@dataclass
class GetIndexStateRequest:
    collection_name: str = ""
    field_name: str = ""
    index_name: str = ""


@dataclass
class GetIndexStateResponse:
    status: Optional[Status] = None
    state: IndexState = IndexState.NONE
    fail_reason: str = ""


@dataclass
class GetIndexBuildProgressRequest:
    collection_name: str = ""
    field_name: str = ""
    index_name: str = ""


@dataclass
class GetIndexBuildProgressResponse:
    status: Optional[Status] = None
    total_rows: int = 0
    indexed_rows: int = 0


@dataclass
class _IndexDef:
    name: str = ""


IndexOption = Callable[[_IndexDef], None]


def with_index_name(name: str) -> IndexOption:
    """Select or name an index explicitly."""

    def apply(definition: _IndexDef) -> None:
        definition.name = name

    return apply


def _index_def(options: tuple[IndexOption, ...]) -> _IndexDef:
    definition = _IndexDef()
    for apply in options:
        apply(definition)
    return definition


_VECTOR_TYPES = (FieldType.FLOAT_VECTOR, FieldType.BINARY_VECTOR)


class GrpcClient(RbacMixin, ResourceGroupMixin, PartitionMixin):
    """Client talking to a vector database service object."""

    def __init__(self, service: Any = None, poll_interval: float = 0.1) -> None:
        self.service = service
        self.poll_interval = poll_interval

    def _describe_collection(self, collection_name: str) -> Schema:
        service = require_service(self.service)
        response = service.describe_collection(
            DescribeCollectionRequest(collection_name=collection_name)
        )
        handle_resp_status(response.status)
        return response.schema

    def _flush(self, collection_name: str) -> None:
        service = require_service(self.service)
        response = service.flush(FlushRequest(collection_names=[collection_name]))
        handle_resp_status(response.status)

    def _check_coll_field(self, collection_name: str, field_name: str) -> None:
        self._check_collection_exists(collection_name)
        schema = self._describe_collection(collection_name)
        found = next((f for f in schema.fields if f.name == field_name), None)
        if found is None:
            raise MilvusError(
                f"field {field_name} of collection {collection_name} does not exist"
            )
        if found.data_type not in _VECTOR_TYPES:
            raise MilvusError(
                f"field {field_name} of collection {collection_name} is not vector field"
            )

    def _describe_index(
        self, collection_name: str, field_name: str, options: tuple[IndexOption, ...]
    ) -> list[IndexDescription]:
        service = require_service(self.service)
        request = DescribeIndexRequest(
            collection_name=collection_name,
            field_name=field_name,
            index_name=_index_def(options).name,
        )
        response = service.describe_index(request)
        handle_resp_status(response.status)
        return list(response.index_descriptions)

    def create_index(
        self,
        collection_name: str,
        field_name: str,
        index: Any,
        async_: bool = False,
        *args: IndexOption,
    ) -> None:
        """Create an index on a vector field, waiting for the build unless ``async_``."""
        service = require_service(self.service)
        self._check_coll_field(collection_name, field_name)
        self._flush(collection_name)

        definition = _index_def(args)
        request = CreateIndexRequest(
            collection_name=collection_name,
            field_name=field_name,
            index_name=definition.name,
            extra_params=dict(index.params()),
        )
        handle_resp_status(service.create_index(request))
        if async_:
            return

        while True:
            for desc in self._describe_index(collection_name, field_name, args):
                matches = (
                    definition.name == "" and desc.field_name == field_name
                ) or definition.name == desc.index_name
                if not matches:
                    continue
                if desc.state == IndexState.FINISHED:
                    return
                if desc.state == IndexState.FAILED:
                    raise MilvusError(
                        f"create index failed, reason: {desc.index_state_fail_reason}"
                    )
            time.sleep(self.poll_interval)

    def describe_index(
        self, collection_name: str, field_name: str, *args: IndexOption
    ) -> list[GenericIndex]:
        """Return the indexes built on a vector field."""
        require_service(self.service)
        self._check_coll_field(collection_name, field_name)
        return [
            GenericIndex(desc.index_name, desc.params.get(INDEX_TYPE_KEY, ""), desc.params)
            for desc in self._describe_index(collection_name, field_name, args)
        ]

    def drop_index(self, collection_name: str, field_name: str, *args: IndexOption) -> None:
        """Drop an index from a vector field."""
        service = require_service(self.service)
        self._check_coll_field(collection_name, field_name)
        request = DropIndexRequest(
            collection_name=collection_name,
            field_name=field_name,
            index_name=_index_def(args).name,
        )
        handle_resp_status(service.drop_index(request))

    def get_index_state(
        self, collection_name: str, field_name: str, *args: IndexOption
    ) -> IndexState:
        """Return the build state of an index."""
        service = require_service(self.service)
        self._check_coll_field(collection_name, field_name)
        request = GetIndexStateRequest(
            collection_name=collection_name,
            field_name=field_name,
            index_name=_index_def(args).name,
        )
        response = service.get_index_state(request)
        handle_resp_status(response.status)
        return IndexState(response.state)

    def get_index_build_progress(
        self, collection_name: str, field_name: str, *args: IndexOption
    ) -> tuple[int, int]:
        """Return ``(total_rows, indexed_rows)`` of an index build."""
        service = require_service(self.service)
        self._check_coll_field(collection_name, field_name)
        request = GetIndexBuildProgressRequest(
            collection_name=collection_name,
            field_name=field_name,
            index_name=_index_def(args).name,
        )
        response = service.get_index_build_progress(request)
        handle_resp_status(response.status)
        return response.total_rows, response.indexed_rows