"""Per-call context carrying outgoing metadata, values and a deadline."""

from __future__ import annotations

import base64
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional

LOG_LEVEL_KEY = "log_level"
CLIENT_REQUEST_ID_KEY = "client_request_id"
AUTHORIZATION_KEY = "authorization"

DEBUG_LEVEL = "debug"
INFO_LEVEL = "info"
WARN_LEVEL = "warn"
ERROR_LEVEL = "error"

Invoker = Callable[["CallContext", str, Any], Any]
Interceptor = Callable[["CallContext", str, Any, Invoker], Any]


@dataclass(frozen=True, eq=False)
class CallContext:
    """Immutable call context; every change returns a new context.

    ``deadline`` is a ``time.monotonic()`` instant; ``cancel_event`` cancels
    the call when set.
    """

    metadata: tuple[tuple[str, str], ...] = ()
    values: dict[Any, Any] = field(default_factory=dict)
    deadline: Optional[float] = None
    cancel_event: Optional[threading.Event] = None

    def get(self, key: str) -> list[str]:
        """Return every metadata value stored under key, in order."""
        key = key.lower()
        return [value for k, value in self.metadata if k == key]

    def append(self, key: str, value: str) -> "CallContext":
        """Return a context with one more metadata pair."""
        return replace(self, metadata=self.metadata + ((key.lower(), value),))

    def with_value(self, key: Any, value: Any) -> "CallContext":
        """Return a context carrying an extra value."""
        return replace(self, values={**self.values, key: value})

    def value(self, key: Any) -> Any:
        """Return the value stored under key, or None."""
        return self.values.get(key)


def with_debug_log_level(ctx: CallContext) -> CallContext:
    """Ask the server to log this call at debug level."""
    return ctx.append(LOG_LEVEL_KEY, DEBUG_LEVEL)


def with_info_log_level(ctx: CallContext) -> CallContext:
    """Ask the server to log this call at info level."""
    return ctx.append(LOG_LEVEL_KEY, INFO_LEVEL)


def with_warn_log_level(ctx: CallContext) -> CallContext:
    """Ask the server to log this call at warn level."""
    return ctx.append(LOG_LEVEL_KEY, WARN_LEVEL)


def with_error_log_level(ctx: CallContext) -> CallContext:
    """Ask the server to log this call at error level."""
    return ctx.append(LOG_LEVEL_KEY, ERROR_LEVEL)


def with_client_request_id(ctx: CallContext, request_id: str) -> CallContext:
    """Tag the call with a client request id."""
    return ctx.append(CLIENT_REQUEST_ID_KEY, request_id)


def authentication_metadata(ctx: CallContext, username: str, password: str) -> CallContext:
    """Attach base64-encoded ``username:password`` credentials."""
    encoded = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return ctx.append(AUTHORIZATION_KEY, encoded)


def create_authentication_interceptor(username: str, password: str) -> Interceptor:
    """Return an interceptor that adds credentials to every call."""

    def intercept(ctx: CallContext, method: str, request: Any, invoker: Invoker) -> Any:
        return invoker(authentication_metadata(ctx, username, password), method, request)

    return intercept