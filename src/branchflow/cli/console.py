"""Terminal adapters: a rich console channel and a stdin-backed collector factory."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel

from branchflow.core.channels import Format, Message
from branchflow.core.collectors.queue import Inbox, QueueCollector

logger = logging.getLogger(__name__)

BOT_AUTHOR = "branchflow"
CONSOLE_AUTHOR = "console"


class ConsoleChannel:
    """Prints outbound content on a rich console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    async def send(self, content: Format) -> Message:
        if content.embed:
            embed = content.embed
            body = str(embed.get("description") or "")
            fields = embed.get("fields") or []
            lines = [body] if body else []
            for field in fields:
                lines.append(f"[bold]{field.get('name', '')}[/bold]: {field.get('value', '')}")
            self.console.print(Panel("\n".join(lines), title=embed.get("title"), expand=False))
        if content.text:
            self.console.print(f"[cyan]{content.text}[/cyan]")
        return Message.from_format(content, author_id=BOT_AUTHOR)


class ConsoleInput:
    """
    Collector factory reading participant replies from the terminal.

    A daemon thread reads lines for the whole session and pushes them into an
    Inbox, so a phase that times out never leaves a blocked reader behind.
    End of input counts as a voluntary exit.
    """

    def __init__(self, console: Optional[Console] = None, prompt: str = "> "):
        self.console = console or Console()
        self.prompt = prompt
        self.inbox = Inbox(author_id=CONSOLE_AUTHOR)
        self._thread: Optional[threading.Thread] = None

    def __call__(self, channel: Any, trigger_message: Optional[Message] = None) -> QueueCollector:
        self._ensure_reader()
        return self.inbox(channel, trigger_message)

    def _ensure_reader(self) -> None:
        if self._thread is not None:
            return
        loop = asyncio.get_running_loop()
        self._thread = threading.Thread(target=self._read_lines, args=(loop,), name="branchflow-stdin", daemon=True)
        self._thread.start()

    def _read_lines(self, loop: asyncio.AbstractEventLoop) -> None:
        while True:
            try:
                line = self.console.input(self.prompt)
            except (EOFError, KeyboardInterrupt, OSError):
                logger.debug("Console input closed")
                self._post(loop, self.inbox.push_exit)
                return
            if not self._post(loop, self.inbox.push, Message(content=line, author_id=CONSOLE_AUTHOR)):
                return

    @staticmethod
    def _post(loop: asyncio.AbstractEventLoop, callback: Any, *args: Any) -> bool:
        try:
            loop.call_soon_threadsafe(callback, *args)
        except RuntimeError:
            # Event loop already closed
            return False
        return True


__all__ = ["ConsoleChannel", "ConsoleInput"]
