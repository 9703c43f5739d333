"""Partition operations: create, drop, list, load and release."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from .errors import (
    CollectionNotExistsError,
    ErrorCode,
    MilvusError,
    PartitionNotExistsError,
    ServiceError,
    Status,
    handle_resp_status,
    require_service,
)
from .retry import DeadlineExceededError

_POLL_INTERVAL = 0.1


@dataclass
class Partition:
    """A partition of a collection."""

    id: int = 0
    name: str = ""
    loaded: bool = False


@dataclass
class BoolResponse:
    status: Optional[Status] = None
    value: bool = False


@dataclass
class HasCollectionRequest:
    collection_name: str = ""


@dataclass
class HasPartitionRequest:
    collection_name: str = ""
    partition_name: str = ""


@dataclass
class CreatePartitionRequest:
    collection_name: str = ""
    partition_name: str = ""


@dataclass
class DropPartitionRequest:
    collection_name: str = ""
    partition_name: str = ""


@dataclass
class ShowPartitionsRequest:
    collection_name: str = ""


@dataclass
class ShowPartitionsResponse:
    status: Optional[Status] = None
    partition_ids: list[int] = field(default_factory=list)
    partition_names: list[str] = field(default_factory=list)
    in_memory_percentages: list[int] = field(default_factory=list)


@dataclass
class LoadPartitionsRequest:
    collection_name: str = ""
    partition_names: list[str] = field(default_factory=list)


@dataclass
class ReleasePartitionsRequest:
    collection_name: str = ""
    partition_names: list[str] = field(default_factory=list)


class PartitionMixin:
    """Partition calls; expects a ``service`` attribute."""

    service: Any = None

    def _check_collection_exists(self, collection_name: str) -> None:
        service = require_service(self.service)
        response = service.has_collection(HasCollectionRequest(collection_name=collection_name))
        handle_resp_status(response.status)
        if not response.value:
            raise CollectionNotExistsError(collection_name)

    def _check_partition_exists(self, collection_name: str, partition_name: str) -> None:
        if not self.has_partition(collection_name, partition_name):
            raise PartitionNotExistsError(collection_name, partition_name)

    def create_partition(self, collection_name: str, partition_name: str) -> None:
        """Create a partition; fails if it already exists."""
        service = require_service(self.service)
        self._check_collection_exists(collection_name)
        if self.has_partition(collection_name, partition_name):
            raise MilvusError(
                f"partition {partition_name} of collection {collection_name} already exists"
            )
        request = CreatePartitionRequest(
            collection_name=collection_name, partition_name=partition_name
        )
        handle_resp_status(service.create_partition(request))

    def drop_partition(self, collection_name: str, partition_name: str) -> None:
        """Drop an existing partition."""
        service = require_service(self.service)
        self._check_collection_exists(collection_name)
        self._check_partition_exists(collection_name, partition_name)
        request = DropPartitionRequest(
            collection_name=collection_name, partition_name=partition_name
        )
        handle_resp_status(service.drop_partition(request))

    def has_partition(self, collection_name: str, partition_name: str) -> bool:
        """Return whether the partition exists."""
        service = require_service(self.service)
        response = service.has_partition(
            HasPartitionRequest(collection_name=collection_name, partition_name=partition_name)
        )
        status = response.status
        if status is not None and status.error_code != ErrorCode.SUCCESS:
            raise ServiceError("request failed", status)
        return bool(response.value)

    def show_partitions(self, collection_name: str) -> list[Partition]:
        """Return every partition of a collection with its load state."""
        service = require_service(self.service)
        response = service.show_partitions(ShowPartitionsRequest(collection_name=collection_name))
        handle_resp_status(response.status)
        names = response.partition_names
        if not names or len(names) < len(response.partition_ids):
            raise MilvusError("length of PartitionNames")
        percentages = response.in_memory_percentages
        return [
            Partition(
                id=partition_id,
                name=names[idx],
                loaded=idx < len(percentages) and percentages[idx] == 100,
            )
            for idx, partition_id in enumerate(response.partition_ids)
        ]

    def load_partitions(
        self,
        collection_name: str,
        partition_names: Sequence[str],
        async_: bool = False,
        timeout: Optional[float] = None,
    ) -> None:
        """Load partitions into memory, waiting for them unless ``async_`` is set.

        ``timeout`` bounds the wait in seconds; DeadlineExceededError is
        raised when it runs out.
        """
        service = require_service(self.service)
        deadline = None if timeout is None else time.monotonic() + timeout
        self._check_collection_exists(collection_name)
        for name in partition_names:
            self._check_partition_exists(collection_name, name)

        ids_by_name = {p.name: p.id for p in self.show_partitions(collection_name)}
        wanted: set[int] = set()
        for name in partition_names:
            if name not in ids_by_name:
                raise MilvusError(
                    f"Collection {collection_name} does not has partitions {name}"
                )
            wanted.add(ids_by_name[name])

        request = LoadPartitionsRequest(
            collection_name=collection_name, partition_names=list(partition_names)
        )
        handle_resp_status(service.load_partitions(request))
        if async_:
            return

        while True:
            if deadline is not None and time.monotonic() >= deadline:
                raise DeadlineExceededError()
            relevant = [p for p in self.show_partitions(collection_name) if p.id in wanted]
            if all(p.loaded for p in relevant) and len(relevant) >= len(partition_names):
                return
            time.sleep(_POLL_INTERVAL)

    def release_partitions(
        self, collection_name: str, partition_names: Sequence[str]
    ) -> None:
        """Release loaded partitions from memory."""
        service = require_service(self.service)
        self._check_collection_exists(collection_name)
        for name in partition_names:
            self._check_partition_exists(collection_name, name)
        request = ReleasePartitionsRequest(
            collection_name=collection_name, partition_names=list(partition_names)
        )
        handle_resp_status(service.release_partitions(request))