"""Errors raised by the client and helpers for checking server replies."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, TypeVar

T = TypeVar("T")


class ErrorCode(enum.IntEnum):
    """Error codes carried in a server status."""

    SUCCESS = 0
    UNEXPECTED_ERROR = 1
    CONNECT_FAILED = 2
    PERMISSION_DENIED = 3
    COLLECTION_NOT_EXISTS = 4
    ILLEGAL_ARGUMENT = 5
    FORCE_DENY = 48
    RATE_LIMIT = 49


@dataclass(frozen=True)
class Status:
    """Status block attached to every server reply."""

    error_code: int = ErrorCode.SUCCESS
    reason: str = ""


class MilvusError(Exception):
    """Base class of every error raised by this package."""


class ClientNotReadyError(MilvusError):
    """The client has no service connection to talk to."""

    def __init__(self) -> None:
        super().__init__("client not ready")


class ServiceError(MilvusError):
    """The server answered with a failure status."""

    def __init__(self, message: str, status: Optional[Status] = None) -> None:
        super().__init__(message)
        self.status = status


class CollectionNotExistsError(MilvusError):
    """The named collection does not exist."""

    def __init__(self, collection_name: str) -> None:
        super().__init__(f"collection {collection_name} does not exist")
        self.collection_name = collection_name


class PartitionNotExistsError(MilvusError):
    """The named partition of a collection does not exist."""

    def __init__(self, collection_name: str, partition_name: str) -> None:
        super().__init__(
            f"partition {partition_name} of collection {collection_name} does not exist"
        )
        self.collection_name = collection_name
        self.partition_name = partition_name


class FieldTypeNotMatchError(MilvusError):
    """A field's declared type does not fit the data or the target."""

    def __init__(self) -> None:
        super().__init__("field type not matched")


def handle_resp_status(status: Optional[Status]) -> None:
    """Raise ServiceError unless the status reports success."""
    if status is None:
        raise ServiceError("response status is nil")
    if status.error_code != ErrorCode.SUCCESS:
        message = status.reason or f"server returned error code {int(status.error_code)}"
        raise ServiceError(message, status)


def require_service(service: Optional[T]) -> T:
    """Return the service, or raise ClientNotReadyError if there is none."""
    if service is None:
        raise ClientNotReadyError()
    return service