"""Bounded event channel between background workers and the interface.

Design:
- Many producers (one per background worker), one consumer (the frame loop)
- Producers await while the queue is full; the consumer never blocks
- Closing is tracked on both ends so each side can tell the other is gone
"""

import asyncio
from typing import Any

from .config import EVENT_CHANNEL_CAPACITY
from .models import AppEvent


class ChannelClosed(Exception):
    """Raised on send once the consumer has closed the channel."""


class ChannelDisconnected(Exception):
    """Raised on receive once the queue is empty and every sender is gone."""


class EventSender:
    """Producer handle of an ``EventChannel``.

    Example:
        with channel.sender() as sender:
            await sender.send(Chunk("hello"))
    """

    def __init__(self, channel: "EventChannel") -> None:
        self._channel = channel
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, event: AppEvent) -> None:
        """Queue an event, waiting while the channel is full.

        Raises:
            ChannelClosed: If the consumer is gone or this handle was closed
        """
        if self._closed:
            raise ChannelClosed("Sender already closed")
        await self._channel._put(event)

    def clone(self) -> "EventSender":
        """Create another producer handle for the same channel."""
        return self._channel.sender()

    def close(self) -> None:
        """Release this handle. Safe to call more than once."""
        if not self._closed:
            self._closed = True
            self._channel._release()

    def __enter__(self) -> "EventSender":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


class EventChannel:
    """Multi-producer, single-consumer bounded queue of ``AppEvent``s."""

    def __init__(self, capacity: int = EVENT_CHANNEL_CAPACITY) -> None:
        self._queue: asyncio.Queue[AppEvent] = asyncio.Queue(maxsize=capacity)
        self._senders = 0
        self._closed = False
        # Producers parked on a full queue; woken when a slot frees or on close
        self._blocked: list[asyncio.Future[None]] = []

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def sender_count(self) -> int:
        return self._senders

    def sender(self) -> EventSender:
        """Create a producer handle."""
        self._senders += 1
        return EventSender(self)

    def try_recv(self) -> AppEvent | None:
        """Take the next event without waiting.

        Returns:
            The next event, or None if nothing is queued yet

        Raises:
            ChannelDisconnected: If nothing is queued and no sender remains
        """
        try:
            event = self._queue.get_nowait()
        except asyncio.QueueEmpty:
            if self._senders == 0:
                raise ChannelDisconnected("All event senders are gone") from None
            return None
        self._wake_blocked()
        return event

    def close(self) -> None:
        """Mark the consumer as gone.

        Later sends raise ``ChannelClosed``, and so do sends that are
        waiting on a full queue at this moment.
        """
        self._closed = True
        self._wake_blocked()

    def __len__(self) -> int:
        return self._queue.qsize()

    async def _put(self, event: AppEvent) -> None:
        while not self._closed and self._queue.full():
            waiter = asyncio.get_running_loop().create_future()
            self._blocked.append(waiter)
            try:
                await waiter
            finally:
                self._blocked.remove(waiter)
        if self._closed:
            raise ChannelClosed("Event channel closed by the consumer")
        self._queue.put_nowait(event)

    def _wake_blocked(self) -> None:
        for waiter in self._blocked:
            if not waiter.done():
                waiter.set_result(None)

    def _release(self) -> None:
        self._senders -= 1
