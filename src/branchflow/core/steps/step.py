"""
Step: one conversational unit.

A step renders outbound content for the current data and, when it has a
collection function, runs a collection phase:

    COLLECTING ──► ACCEPTED
        │  ▲
        │  └── REJECTED (feedback sent, keep collecting)
        ├────► EXITED    (exit token or exit event)
        ├────► INACTIVE  (phase deadline elapsed)
        └────► FAILED    (collection function raised, error propagates)

The deadline is armed once per phase and is never reset by rejections.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, Union

from branchflow.core.channels import Format, Message
from branchflow.core.collectors.base import Collector, CollectorEventKind, CollectorFactory
from branchflow.core.steps.results import CollectionResult, PhaseStatus
from branchflow.core.steps.strings import DEFAULT_STRINGS, FlowStrings
from branchflow.errors import FlowConfigurationError, Rejection
from branchflow.utils.awaitables import maybe_await

logger = logging.getLogger(__name__)

FormatGenerator = Callable[[Any], Union[Format, str, dict, Awaitable[Union[Format, str, dict]]]]
CollectionFunction = Callable[[Message, Any], Any]

DEFAULT_DURATION_MS = 60000


class Step:
    """A prompt sent to the participant, optionally followed by a collection phase."""

    def __init__(
        self,
        format_generator: FormatGenerator,
        function: Optional[CollectionFunction] = None,
        duration: Optional[int] = DEFAULT_DURATION_MS,
        *,
        collector_factory: Optional[CollectorFactory] = None,
        strings: Optional[FlowStrings] = None,
        name: Optional[str] = None,
    ):
        """
        Args:
            format_generator: Builds the outbound content from the current data
            function: Collection function ``(message, data) -> data``; may
                raise Rejection to ask for another reply
            duration: Phase deadline in milliseconds; None or 0 disables it
            collector_factory: Builds the collector for each phase
            strings: Overrides the runner's strings for this step
            name: Label used in logs and trace output
        """
        self.format_generator = format_generator
        self.function = function
        self.duration = duration
        self.collector_factory = collector_factory
        self.strings = strings
        self.name = name
        self.messages: List[Any] = []

    # =========================================================================
    # Sending
    # =========================================================================

    def should_run_collector(self) -> bool:
        """If this step collects replies."""
        return self.function is not None

    def store_message(self, message: Any) -> None:
        """Record a sent or received message."""
        self.messages.append(message)

    async def render(self, data: Any) -> Format:
        return Format.coerce(await maybe_await(self.format_generator(data)))

    async def send_format(self, channel: Any, data: Any = None) -> Any:
        """Render this step for ``data``, send it and record the sent message."""
        content = await self.render(data)
        logger.debug("Step %s sending: %s", self.describe(), content.describe())
        sent = await channel.send(content)
        self.store_message(sent)
        return sent

    async def send_text(self, channel: Any, text: str) -> Any:
        sent = await channel.send(Format(text=text))
        self.store_message(sent)
        return sent

    async def on_reject(self, channel: Any, message: Message, rejection: Rejection, strings: FlowStrings) -> None:
        """
        React to a rejected reply.

        Sends the rejection's message, or the default feedback when it has
        none. Override to change the feedback.
        """
        await self.send_text(channel, rejection.message or strings.rejected)

    # =========================================================================
    # Collection
    # =========================================================================

    def create_collector(
        self,
        channel: Any,
        trigger_message: Optional[Message] = None,
        fallback: Optional[CollectorFactory] = None,
    ) -> Collector:
        """Build the collector for one phase. Subclasses may override.

        The step's own factory wins over ``fallback`` (usually the runner's).
        """
        factory = self.collector_factory or fallback
        if factory is None:
            raise FlowConfigurationError(
                f"Step {self.describe()} collects replies but has no collector factory"
            )
        return factory(channel, trigger_message)

    def resolve_strings(self, strings: Optional[FlowStrings] = None) -> FlowStrings:
        return self.strings or strings or DEFAULT_STRINGS

    async def collect(
        self,
        channel: Any,
        data: Any = None,
        trigger_message: Optional[Message] = None,
        strings: Optional[FlowStrings] = None,
        collector_factory: Optional[CollectorFactory] = None,
    ) -> CollectionResult:
        """
        Run the collection phase for this step.

        Returns an ACCEPTED result carrying the new data, or a terminating
        EXITED/INACTIVE result after the termination message was sent.
        Errors other than Rejection propagate unchanged and no termination
        message is sent.
        """
        if not self.should_run_collector():
            return CollectionResult(status=PhaseStatus.ACCEPTED, data=data)

        strings = self.resolve_strings(strings)
        collector = self.create_collector(channel, trigger_message, collector_factory)
        timeout = self.duration / 1000 if self.duration else None
        phase = asyncio.ensure_future(self._collect_until_settled(collector, channel, data, strings))
        try:
            done, _ = await asyncio.wait({phase}, timeout=timeout)
            if phase in done:
                result = phase.result()
            else:
                phase.cancel()
                # Let the phase unwind before the collector is stopped
                await asyncio.wait({phase})
                result = CollectionResult(status=PhaseStatus.INACTIVE, data=data, duration_ms=self.duration)
        finally:
            if not phase.done():
                phase.cancel()
            collector.stop()

        if result.terminate:
            logger.warning("Step %s terminated the flow: %s", self.describe(), result.status.value)
            result.message = await self.send_text(channel, strings.termination_text(result.status))
        return result

    async def _collect_until_settled(
        self,
        collector: Collector,
        channel: Any,
        data: Any,
        strings: FlowStrings,
    ) -> CollectionResult:
        attempts = 0
        while True:
            event = await collector.next_event()
            if event.kind is CollectorEventKind.EXIT:
                if event.message is not None:
                    self.store_message(event.message)
                return CollectionResult(status=PhaseStatus.EXITED, data=data, message=event.message)

            message = event.message
            self.store_message(message)
            if message.content == strings.exit_token:
                return CollectionResult(status=PhaseStatus.EXITED, data=data, message=message)

            attempts += 1
            try:
                new_data = await maybe_await(self.function(message, data))
            except Rejection as rejection:
                logger.debug("Step %s rejected reply #%d: %s", self.describe(), attempts, rejection.message)
                await self.on_reject(channel, message, rejection, strings)
                continue
            logger.debug("Step %s accepted reply #%d", self.describe(), attempts)
            return CollectionResult(status=PhaseStatus.ACCEPTED, data=new_data, message=message)

    def describe(self) -> str:
        return self.name or getattr(self.format_generator, "__name__", None) or f"step@{id(self):x}"

    def __repr__(self) -> str:
        return f"Step({self.describe()!r})"


__all__ = ["CollectionFunction", "DEFAULT_DURATION_MS", "FormatGenerator", "Step"]
