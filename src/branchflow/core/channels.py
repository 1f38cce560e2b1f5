"""
Message and channel boundary types.

The engine never delivers messages itself. It renders a ``Format`` and hands
it to a ``Channel``; whatever the channel returns is recorded as the sent
``Message``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Protocol, runtime_checkable
from uuid import uuid4

from pydantic import BaseModel, Field


class Format(BaseModel):
    """Outbound content produced by a step's format generator."""

    text: str = ""
    embed: Optional[Dict[str, Any]] = None

    @classmethod
    def coerce(cls, value: Any) -> "Format":
        """Accept a Format, a plain string or a mapping of Format fields."""
        if isinstance(value, Format):
            return value
        if isinstance(value, str):
            return cls(text=value)
        if isinstance(value, dict):
            return cls.model_validate(value)
        raise TypeError(f"Cannot build a Format from {type(value).__name__}")

    def describe(self) -> str:
        """Short single-line description, used in logs."""
        if self.text:
            return self.text.splitlines()[0][:80]
        if self.embed:
            return str(self.embed.get("title") or "<embed>")
        return "<empty>"


class Message(BaseModel):
    """A message sent to or received from a channel."""

    content: str = ""
    author_id: Optional[str] = None
    id: str = Field(default_factory=lambda: uuid4().hex)
    created_at: datetime = Field(default_factory=datetime.now)
    embed: Optional[Dict[str, Any]] = None

    @classmethod
    def from_format(cls, content: Format, author_id: Optional[str] = None) -> "Message":
        return cls(content=content.text, embed=content.embed, author_id=author_id)


@runtime_checkable
class Channel(Protocol):
    """Anything that can deliver a ``Format`` and return the resulting message."""

    async def send(self, content: Format) -> Any:  # pragma: no cover - protocol
        ...


__all__ = ["Channel", "Format", "Message"]
