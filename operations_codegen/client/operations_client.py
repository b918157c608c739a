"""
Client calling the operations of a deployed API over HTTP.

Every operation is a ``POST {base_url}/operations/{name}`` with the JSON body
``{"input": ..., "meta": {"clientRequestContext": ...}}``. Queries and
mutations return one ClientResponse. Subscriptions keep the request open and
receive JSON messages separated by a blank line.

Expected failures (network errors, non-2xx responses, malformed bodies,
server-reported errors, aborts) never raise: they come back as
``ClientResponse.error``.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from typing import Any

import httpx

from .result import ABORTED, ClientResponse, ResponseError, response_from_payload
from .subscription import Subscription

logger = logging.getLogger(__name__)

# Separates the JSON messages of a subscription stream
MESSAGE_SEPARATOR = "\n\n"

# Presence-only query parameters
SUBSCRIBE_ONCE_PARAM = "wg_subscribe_once"
LIVE_QUERY_PARAM = "wg_live"

EventCallback = Callable[[ClientResponse[Any]], Awaitable[None] | None]


class OperationsClient:
    """Untyped operations client. Generated clients wrap it with typed methods."""

    def __init__(
        self,
        base_url: str,
        *,
        extra_headers: Mapping[str, str] | None = None,
        client_request_context: Any = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Args:
            base_url: Deployment URL, without the /operations suffix
            extra_headers: Headers sent with every request
            client_request_context: Forwarded to the server as meta.clientRequestContext
            http_client: Connection pool to use. The client closes it only if it created it
        """
        self.base_url = base_url.rstrip("/")
        self.extra_headers = dict(extra_headers or {})
        self.client_request_context = client_request_context
        self._owns_http_client = http_client is None
        # Subscriptions stay open indefinitely, so reads never time out
        self.http_client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(10.0, read=None))
        self.open_subscriptions: list[Subscription] = []

    async def __aenter__(self) -> OperationsClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Cancel open subscriptions and close the connection pool if owned."""
        await self.cancel_subscriptions()
        if self._owns_http_client:
            await self.http_client.aclose()

    def operation_url(self, operation_name: str) -> str:
        return f"{self.base_url}/operations/{operation_name}"

    @property
    def headers(self) -> dict[str, str]:
        return {"Accept": "application/json", **self.extra_headers}

    def with_headers(self, headers: Mapping[str, str]) -> OperationsClient:
        """
        A client sending additional headers.

        The new client shares the base URL, request context and connection
        pool, but not the subscription registry. This client is unchanged.
        """
        return OperationsClient(
            self.base_url,
            extra_headers={**self.extra_headers, **headers},
            client_request_context=self.client_request_context,
            http_client=self.http_client,
        )

    async def query(
        self,
        operation_name: str,
        input: Any = None,
        *,
        subscribe_once: bool = False,
        abort_signal: asyncio.Event | None = None,
    ) -> ClientResponse[Any]:
        """
        Run a query.

        Args:
            operation_name: Name of the operation, e.g. "users/get"
            input: JSON-serializable operation input, omitted from the body when None
            subscribe_once: Ask a subscription operation for a single result
            abort_signal: Turns the call into an "aborted" error when set
        """
        params = {SUBSCRIBE_ONCE_PARAM: ""} if subscribe_once else None
        return await self._call(operation_name, input, params, abort_signal)

    async def mutate(
        self,
        operation_name: str,
        input: Any = None,
        *,
        abort_signal: asyncio.Event | None = None,
    ) -> ClientResponse[Any]:
        """Run a mutation. Same transport as query()."""
        return await self._call(operation_name, input, None, abort_signal)

    async def subscribe(
        self,
        operation_name: str,
        input: Any = None,
        *,
        subscribe_once: bool = False,
        live_query: bool = False,
        abort_signal: asyncio.Event | None = None,
        on_event: EventCallback | None = None,
    ) -> Subscription:
        """
        Subscribe to an operation.

        Args:
            operation_name: Name of the operation
            input: JSON-serializable operation input
            subscribe_once: Fetch a single result instead of a stream
            live_query: Subscribe to the updates of a live query
            abort_signal: Cancels the subscription when set
            on_event: If given, called for every event until the subscription
                ends; subscribe() then returns the finished subscription

        Returns:
            The started subscription
        """
        if subscribe_once:

            async def single_result() -> AsyncIterator[ClientResponse[Any]]:
                yield await self.query(operation_name, input, subscribe_once=True, abort_signal=abort_signal)

            subscription = Subscription(single_result, name=operation_name, abort_signal=abort_signal)
        else:
            params = {LIVE_QUERY_PARAM: ""} if live_query else None
            subscription = Subscription(
                lambda: self._stream(operation_name, input, params),
                name=operation_name,
                abort_signal=abort_signal,
                on_done=self._forget,
            )
            self.open_subscriptions.append(subscription)
        subscription.start()

        if on_event is not None:
            try:
                async for event in subscription:
                    result = on_event(event)
                    if inspect.isawaitable(result):
                        await result
            except BaseException:
                await subscription.aclose()
                raise
        return subscription

    async def cancel_subscriptions(self) -> None:
        """Cancel the subscriptions open at the time of the call and wait for them to close."""
        subscriptions = list(self.open_subscriptions)
        if not subscriptions:
            return
        logger.debug("Canceling %d subscriptions", len(subscriptions))
        for subscription in subscriptions:
            subscription.cancel()
        await asyncio.gather(*(s.wait_closed() for s in subscriptions))

    def _forget(self, subscription: Subscription) -> None:
        if subscription in self.open_subscriptions:
            self.open_subscriptions.remove(subscription)

    def _body(self, input: Any) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if input is not None:
            body["input"] = input
        body["meta"] = {"clientRequestContext": self.client_request_context}
        return body

    async def _call(
        self,
        operation_name: str,
        input: Any,
        params: dict[str, str] | None,
        abort_signal: asyncio.Event | None,
    ) -> ClientResponse[Any]:
        if abort_signal is None:
            return await self._post(operation_name, input, params)
        if abort_signal.is_set():
            return ClientResponse(error=ABORTED)
        return await _until_aborted(self._post(operation_name, input, params), abort_signal)

    async def _post(self, operation_name: str, input: Any, params: dict[str, str] | None) -> ClientResponse[Any]:
        url = self.operation_url(operation_name)
        logger.debug("POST %s", url)
        try:
            response = await self.http_client.post(url, params=params, json=self._body(input), headers=self.headers)
        except httpx.HTTPError as e:
            logger.debug("Request to %s failed: %s", url, e)
            return ClientResponse(error=ResponseError(f"request failed: {e}"))
        return decode_response(response)

    async def _stream(
        self,
        operation_name: str,
        input: Any,
        params: dict[str, str] | None,
    ) -> AsyncIterator[ClientResponse[Any]]:
        url = self.operation_url(operation_name)
        logger.debug("POST %s (stream)", url)
        try:
            async with self.http_client.stream(
                "POST", url, params=params, json=self._body(input), headers=self.headers
            ) as response:
                if not response.is_success:
                    await response.aread()
                    yield decode_response(response)
                    return
                async for message in split_messages(response.aiter_text()):
                    try:
                        payload = json.loads(message)
                    except ValueError:
                        yield ClientResponse(error=ResponseError("invalid JSON message", response.status_code))
                        continue
                    yield response_from_payload(payload, response.status_code)
        except httpx.HTTPError as e:
            logger.debug("Subscription to %s failed: %s", url, e)
            yield ClientResponse(error=ResponseError(f"subscription failed: {e}"))


def decode_response(response: httpx.Response) -> ClientResponse[Any]:
    """Convert an HTTP response into a ClientResponse."""
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if not response.is_success:
        if isinstance(payload, dict) and (payload.get("error") or payload.get("errors")):
            return response_from_payload(payload, response.status_code)
        return ClientResponse(
            error=ResponseError(
                f"unexpected status {response.status_code} {response.reason_phrase}".rstrip(),
                response.status_code,
            )
        )
    if payload is None:
        return ClientResponse(error=ResponseError("invalid JSON response", response.status_code))
    return response_from_payload(payload, response.status_code)


async def split_messages(chunks: AsyncIterator[str]) -> AsyncIterator[str]:
    """Split a text stream into the non-blank messages separated by MESSAGE_SEPARATOR.

    CRLF line endings are accepted, including a CR and LF split across chunks.
    """
    buffer = ""
    async for chunk in chunks:
        buffer = (buffer + chunk).replace("\r\n", "\n")
        while MESSAGE_SEPARATOR in buffer:
            message, buffer = buffer.split(MESSAGE_SEPARATOR, 1)
            if message.strip():
                yield message
    if buffer.strip():
        yield buffer


async def _until_aborted(request: Awaitable[ClientResponse[Any]], abort_signal: asyncio.Event) -> ClientResponse[Any]:
    task = asyncio.ensure_future(request)
    aborted = asyncio.ensure_future(abort_signal.wait())
    try:
        await asyncio.wait({task, aborted}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        aborted.cancel()
        if not task.done():
            task.cancel()
    if task.done() and not task.cancelled():
        return task.result()
    await asyncio.gather(task, return_exceptions=True)
    return ClientResponse(error=ABORTED)


def drop_unset(value: Any) -> Any:
    """Remove None-valued object members, recursively, so unset optional fields are not sent."""
    if isinstance(value, dict):
        return {k: drop_unset(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [drop_unset(v) for v in value]
    return value
