"""Collector boundary: the per-phase source of participant events."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel

from branchflow.core.channels import Message


class CollectorEventKind(str, Enum):
    """Kind of event a collector can produce."""

    MESSAGE = "message"  # A qualifying reply
    EXIT = "exit"  # Participant left voluntarily


class CollectorEvent(BaseModel):
    """Tagged result of a single ``Collector.next_event`` call."""

    kind: CollectorEventKind
    message: Optional[Message] = None

    @classmethod
    def received(cls, message: Message) -> "CollectorEvent":
        return cls(kind=CollectorEventKind.MESSAGE, message=message)

    @classmethod
    def exited(cls, message: Optional[Message] = None) -> "CollectorEvent":
        return cls(kind=CollectorEventKind.EXIT, message=message)


class Collector(ABC):
    """
    Event source bound to one channel for exactly one collection phase.

    Implementations decide which replies qualify (for example, only those
    written by the participant who triggered the flow). The inactivity
    deadline is owned by the step, not the collector.
    """

    def __init__(self, channel: Any, trigger_message: Optional[Message] = None):
        self.channel = channel
        self.trigger_message = trigger_message
        self._stopped = False

    @property
    def stopped(self) -> bool:
        return self._stopped

    @abstractmethod
    async def next_event(self) -> CollectorEvent:
        """Suspend until the next qualifying event is available."""
        raise NotImplementedError

    def stop(self) -> None:
        """Stop producing events. Called once the phase has settled."""
        self._stopped = True


CollectorFactory = Callable[[Any, Optional[Message]], Collector]


__all__ = ["Collector", "CollectorEvent", "CollectorEventKind", "CollectorFactory"]
