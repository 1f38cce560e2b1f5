"""
Shared fixtures for flow engine tests.
"""

import asyncio
from typing import Any, List

import pytest

from branchflow.core.channels import Format, Message
from branchflow.core.collectors.base import Collector, CollectorEvent
from branchflow.core.collectors.queue import Inbox


class RecordingChannel:
    """Channel double that records every Format it is asked to send."""

    def __init__(self) -> None:
        self.sent: List[Format] = []

    async def send(self, content: Format) -> Message:
        self.sent.append(content)
        return Message.from_format(content, author_id="bot")

    @property
    def texts(self) -> List[str]:
        return [content.text for content in self.sent]


class ScriptedCollector(Collector):
    """Collector yielding pre-scripted events after fixed delays (seconds)."""

    def __init__(self, script: List[Any], channel: Any = None):
        super().__init__(channel)
        self._script = list(script)

    async def next_event(self) -> CollectorEvent:
        if not self._script:
            await asyncio.Event().wait()  # Never resolves
        delay, event = self._script.pop(0)
        await asyncio.sleep(delay)
        if isinstance(event, str):
            return CollectorEvent.received(Message(content=event))
        return event


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def inbox() -> Inbox:
    return Inbox()


@pytest.fixture
def scripted():
    """Factory for ScriptedCollector: ``scripted([(delay_s, "reply"), ...])``."""
    return ScriptedCollector
