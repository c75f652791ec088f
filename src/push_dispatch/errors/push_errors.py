"""PushDispatchError — base exception class and its subclasses."""

from __future__ import annotations


class PushDispatchError(Exception):
    """Base error for all push dispatch operations.

    Attributes:
        message: Human-readable error description.
        status_code: Suggested HTTP status code.
        code: Machine-readable error code string.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 500,
        code: str = "push-dispatch-error",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class GatewayError(PushDispatchError):
    """Transport-level failure talking to the push gateway."""

    def __init__(self, message: str, *, status_code: int = 502) -> None:
        super().__init__(message, status_code=status_code, code="gateway-error")


class HookNotFoundError(PushDispatchError):
    """No hook is registered for the requested event."""

    def __init__(self, event: str) -> None:
        super().__init__(
            f"no hook registered for event: {event}",
            status_code=404,
            code="hook-not-found",
        )
        self.event = event
