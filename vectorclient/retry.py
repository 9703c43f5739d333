"""Retrying interceptor for calls rejected by server rate limiting."""

from __future__ import annotations

import enum
import time
from typing import Any, Callable, Optional

from .errors import ErrorCode, MilvusError, Status
from .metadata import CallContext, Interceptor, Invoker

MAX_BACKOFF = 60.0

Backoff = Callable[[CallContext, int], float]


class RetryContextKey(enum.Enum):
    """Keys of context values that steer retrying."""

    RETRY_ON_RATE_LIMIT = 0


class DeadlineExceededError(MilvusError):
    """The call's deadline passed while waiting."""

    def __init__(self) -> None:
        super().__init__("context deadline exceeded")


class CancelledError(MilvusError):
    """The call was cancelled while waiting."""

    def __init__(self) -> None:
        super().__init__("context canceled")


def _retry_enabled(ctx: CallContext) -> bool:
    flag = ctx.value(RetryContextKey.RETRY_ON_RATE_LIMIT)
    return flag if isinstance(flag, bool) else True


def get_result_status(reply: Any) -> Optional[Status]:
    """Return the status of a reply, or None if it carries none."""
    if isinstance(reply, Status):
        return reply
    status = getattr(reply, "status", None)
    return status if isinstance(status, Status) else None


def wait_retry_backoff(ctx: CallContext, attempt: int, backoff: Backoff) -> float:
    """Sleep before an attempt and return the time waited, in seconds.

    Raises DeadlineExceededError or CancelledError if the context ends first.
    """
    wait = backoff(ctx, attempt) if attempt > 0 else 0.0
    if wait <= 0:
        return wait
    wait = min(wait, MAX_BACKOFF)

    limit = wait
    expires = False
    if ctx.deadline is not None:
        remaining = ctx.deadline - time.monotonic()
        if remaining < wait:
            expires = True
            limit = max(remaining, 0.0)

    if ctx.cancel_event is not None:
        if ctx.cancel_event.wait(limit):
            raise CancelledError()
    elif limit > 0:
        time.sleep(limit)

    if expires:
        raise DeadlineExceededError()
    return wait


def retry_on_rate_limit_interceptor(max_retry: int, backoff: Backoff) -> Interceptor:
    """Return an interceptor that retries calls answered with a rate-limit status."""

    def intercept(ctx: CallContext, method: str, request: Any, invoker: Invoker) -> Any:
        if max_retry == 0:
            return invoker(ctx, method, request)
        reply = None
        for attempt in range(max_retry):
            wait_retry_backoff(ctx, attempt, backoff)
            reply = invoker(ctx, method, request)
            status = get_result_status(reply)
            if (
                _retry_enabled(ctx)
                and status is not None
                and status.error_code == ErrorCode.RATE_LIMIT
            ):
                continue
            return reply
        return reply

    return intercept