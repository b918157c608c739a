"""
Results returned by the operations client.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class ResponseError:
    """A failed operation call.

    Attributes:
        message: What went wrong
        status_code: HTTP status of the response, None if no response was received
        errors: GraphQL errors returned by the server, verbatim
    """

    message: str
    status_code: int | None = None
    errors: list[dict[str, Any]] = field(default_factory=list)

    def __str__(self) -> str:
        status = f" (HTTP {self.status_code})" if self.status_code is not None else ""
        return f"{self.message}{status}"


@dataclass(frozen=True)
class ClientResponse(Generic[T]):
    """The outcome of one operation call or one subscription event."""

    data: T | None = None
    error: ResponseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def map_data(self, fn: Callable[[T], U]) -> ClientResponse[U]:
        """Convert the data, typically into a generated model. Errors and missing data pass through."""
        if self.data is None:
            return ClientResponse(data=None, error=self.error)
        return ClientResponse(data=fn(self.data), error=self.error)


ABORTED = ResponseError("aborted")


def response_from_payload(payload: Any, status_code: int | None = None) -> ClientResponse[Any]:
    """
    Convert a decoded response body into a ClientResponse.

    The body is ``{data?, error?, errors?}``. An ``error`` or a non-empty
    ``errors`` list makes the response an error; data sent alongside is kept.
    """
    if not isinstance(payload, dict):
        return ClientResponse(error=ResponseError("invalid response body", status_code))
    data = payload.get("data")
    errors = payload.get("errors") or []
    if payload.get("error"):
        error = payload["error"]
        message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
        return ClientResponse(data=data, error=ResponseError(message, status_code, errors))
    if errors:
        message = "; ".join(e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in errors)
        return ClientResponse(data=data, error=ResponseError(message, status_code, errors))
    return ClientResponse(data=data)
