"""In-memory collectors fed by ``push``/``push_exit`` calls."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Any, Callable, Deque, List, Optional

from branchflow.core.channels import Message
from branchflow.core.collectors.base import Collector, CollectorEvent, CollectorEventKind

logger = logging.getLogger(__name__)


class QueueCollector(Collector):
    """
    Collector backed by an ``asyncio.Queue``.

    Transports push inbound messages from their own callbacks. When
    ``author_id`` is set (or inferred from the trigger message), messages
    from anyone else are dropped.
    """

    def __init__(
        self,
        channel: Any = None,
        trigger_message: Optional[Message] = None,
        *,
        author_id: Optional[str] = None,
        on_stop: Optional[Callable[["QueueCollector"], None]] = None,
    ):
        super().__init__(channel, trigger_message)
        if author_id is None and trigger_message is not None:
            author_id = trigger_message.author_id
        self.author_id = author_id
        self._on_stop = on_stop
        self._queue: asyncio.Queue[CollectorEvent] = asyncio.Queue()

    def accepts(self, message: Message) -> bool:
        """Whether ``message`` counts as a reply from the participant."""
        return self.author_id is None or message.author_id == self.author_id

    def push(self, message: Message | str) -> bool:
        """Queue an inbound message. Returns False if it was dropped."""
        if isinstance(message, str):
            message = Message(content=message, author_id=self.author_id)
        if self.stopped:
            logger.debug("Dropping message %s: collector stopped", message.id)
            return False
        if not self.accepts(message):
            logger.debug("Dropping message %s from author %s", message.id, message.author_id)
            return False
        self._queue.put_nowait(CollectorEvent.received(message))
        return True

    def push_exit(self, message: Optional[Message] = None) -> bool:
        """Queue a voluntary-exit event."""
        if self.stopped:
            return False
        self._queue.put_nowait(CollectorEvent.exited(message))
        return True

    def push_event(self, event: CollectorEvent) -> bool:
        """Queue a ready-made event. MESSAGE events go through the author filter."""
        if self.stopped:
            return False
        message = event.message
        if event.kind is CollectorEventKind.MESSAGE and message is not None and not self.accepts(message):
            logger.debug("Dropping buffered message %s from author %s", message.id, message.author_id)
            return False
        self._queue.put_nowait(event)
        return True

    async def next_event(self) -> CollectorEvent:
        return await self._queue.get()

    def drain(self) -> List[CollectorEvent]:
        """Remove and return every event not consumed yet."""
        events: List[CollectorEvent] = []
        while not self._queue.empty():
            events.append(self._queue.get_nowait())
        return events

    def stop(self) -> None:
        if self.stopped:
            return
        super().stop()
        if self._on_stop is not None:
            self._on_stop(self)

    @property
    def pending(self) -> int:
        return self._queue.qsize()


class Inbox:
    """
    Collector factory that routes pushed events to the active phase.

    Events pushed while no phase is collecting, or left unconsumed when a
    phase settles, are kept in order and handed to the next collector. This
    lets a whole conversation be scripted up front.
    """

    def __init__(self, author_id: Optional[str] = None):
        self.author_id = author_id
        self.collectors: List[QueueCollector] = []
        self._backlog: Deque[CollectorEvent] = deque()

    def __call__(self, channel: Any, trigger_message: Optional[Message] = None) -> QueueCollector:
        collector = QueueCollector(
            channel,
            trigger_message,
            author_id=self.author_id,
            on_stop=self._release,
        )
        while self._backlog:
            collector.push_event(self._backlog.popleft())
        self.collectors.append(collector)
        logger.debug("Created collector #%d with %d pending event(s)", len(self.collectors), collector.pending)
        return collector

    @property
    def current(self) -> Optional[QueueCollector]:
        """The collector of the phase in progress, if any."""
        if self.collectors and not self.collectors[-1].stopped:
            return self.collectors[-1]
        return None

    @property
    def backlog(self) -> int:
        return len(self._backlog)

    def push(self, message: Message | str) -> bool:
        if isinstance(message, str):
            message = Message(content=message, author_id=self.author_id)
        if self.author_id is not None and message.author_id != self.author_id:
            logger.debug("Dropping message %s from author %s", message.id, message.author_id)
            return False
        current = self.current
        if current is not None:
            return current.push(message)
        self._backlog.append(CollectorEvent.received(message))
        return True

    def push_exit(self, message: Optional[Message] = None) -> bool:
        current = self.current
        if current is not None:
            return current.push_exit(message)
        self._backlog.append(CollectorEvent.exited(message))
        return True

    def _release(self, collector: QueueCollector) -> None:
        leftovers = collector.drain()
        # Keep original order ahead of anything pushed later
        self._backlog.extendleft(reversed(leftovers))


__all__ = ["Inbox", "QueueCollector"]
