"""
Cancelable subscriptions.

A Subscription runs its event source in a background pump task that feeds a
queue; consumers read events with next() or ``async for``. The state only
moves forward:

    PENDING --first event--> STREAMING --upstream closed--> COMPLETED
       |                         |
       +--------cancel()---------+--> CANCELED
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from enum import Enum
from typing import Any

from .result import ClientResponse

logger = logging.getLogger(__name__)

# Marks the end of the event stream in the queue
_END = object()


class SubscriptionState(str, Enum):
    PENDING = "pending"
    STREAMING = "streaming"
    COMPLETED = "completed"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self in (SubscriptionState.COMPLETED, SubscriptionState.CANCELED)


class Subscription:
    """A stream of ClientResponse events that can be canceled at any time.

    Events still buffered when the subscription is canceled are dropped.
    Events already returned by next() stay delivered.
    """

    def __init__(
        self,
        source: Callable[[], AsyncIterator[ClientResponse[Any]]],
        *,
        name: str = "",
        abort_signal: asyncio.Event | None = None,
        on_done: Callable[[Subscription], None] | None = None,
    ):
        """
        Args:
            source: Factory of the async iterator producing the events
            name: Operation name, for logging
            abort_signal: Cancels the subscription when set
            on_done: Called once when the subscription completes or is canceled
        """
        self.name = name
        self.state = SubscriptionState.PENDING
        self._source = source
        self._abort_signal = abort_signal
        self._on_done = on_done
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._pump: asyncio.Task[None] | None = None
        self._watcher: asyncio.Task[None] | None = None
        self._failure: Exception | None = None
        self._drained = False

    def start(self) -> Subscription:
        """Start pumping events. Does nothing if already started or finished."""
        if self._pump is not None or self.state.is_terminal:
            return self
        self._pump = asyncio.create_task(self._run(), name=f"subscription:{self.name}")
        if self._abort_signal is not None:
            if self._abort_signal.is_set():
                self.cancel()
            else:
                self._watcher = asyncio.create_task(self._watch_abort())
        return self

    async def next(self) -> ClientResponse[Any] | None:
        """
        Wait for the next event.

        Returns:
            The event, or None once the subscription is completed or canceled

        Raises:
            Exception: The error that stopped the event source unexpectedly
        """
        if self.state is SubscriptionState.CANCELED or self._drained:
            return None
        self.start()
        item = await self._queue.get()
        if self.state is SubscriptionState.CANCELED:
            return None
        if item is _END:
            self._drained = True
            if self._failure is not None:
                raise self._failure
            return None
        return item

    def cancel(self) -> None:
        """Stop the subscription. Pending next() calls return None."""
        if self.state.is_terminal:
            return
        logger.debug("Canceling subscription %s", self.name)
        self.state = SubscriptionState.CANCELED
        if self._pump is not None:
            self._pump.cancel()
        if self._watcher is not None and self._watcher is not asyncio.current_task():
            self._watcher.cancel()
        # Wakes up readers even if the pump never got to run
        self._queue.put_nowait(_END)
        self._done()

    async def wait_closed(self) -> None:
        """Wait until the pump task has exited."""
        tasks = [t for t in (self._pump, self._watcher) if t is not None and t is not asyncio.current_task()]
        await asyncio.gather(*tasks, return_exceptions=True)

    async def aclose(self) -> None:
        self.cancel()
        await self.wait_closed()

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> ClientResponse[Any]:
        event = await self.next()
        if event is None:
            raise StopAsyncIteration
        return event

    async def _run(self) -> None:
        try:
            async for event in self._source():
                if self.state is SubscriptionState.PENDING:
                    self.state = SubscriptionState.STREAMING
                self._queue.put_nowait(event)
        except Exception as e:
            logger.error("Subscription %s failed: %s", self.name, e)
            self._failure = e
        finally:
            if not self.state.is_terminal:
                self.state = SubscriptionState.COMPLETED
                if self._watcher is not None:
                    self._watcher.cancel()
            self._queue.put_nowait(_END)
            self._done()

    async def _watch_abort(self) -> None:
        await self._abort_signal.wait()
        logger.debug("Subscription %s aborted", self.name)
        self.cancel()

    def _done(self) -> None:
        if self._on_done is not None:
            on_done, self._on_done = self._on_done, None
            on_done(self)

    def __repr__(self) -> str:
        return f"Subscription({self.name!r}, state={self.state.value})"
