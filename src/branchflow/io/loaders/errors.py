"""Shared loader error utilities."""

from __future__ import annotations

import os
from typing import Iterable

from pydantic import ValidationError


class LoaderError(RuntimeError):
    """Wraps loader failures with source context (a file path or a flow reference)."""

    def __init__(self, source: str, message: str, *, cause: Exception | None = None):
        self.source = source
        self.message = message
        self.cause = cause
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        base = f"{self.message} ({self._display_source(self.source)})"
        if isinstance(self.cause, ValidationError):
            detail = self._format_validation_errors(self.cause.errors())
            return f"{base}: {detail}"
        if self.cause:
            return f"{base}: {self.cause}"
        return base

    @staticmethod
    def _display_source(source: str) -> str:
        if not os.path.exists(source):
            return source
        try:
            return os.path.relpath(source)
        except ValueError:  # pragma: no cover - different drive on Windows
            return source

    @staticmethod
    def _format_validation_errors(errors: Iterable[dict]) -> str:
        error_list = list(errors)
        snippets = []
        for err in error_list:
            loc = ".".join(str(entry) for entry in err.get("loc", [])) or "<root>"
            msg = err.get("msg") or err.get("type") or "validation error"
            snippets.append(f"{loc}: {msg}")
            if len(snippets) >= 3:
                break
        remaining = len(error_list) - len(snippets)
        if remaining > 0:
            snippets.append(f"... ({remaining} more)")
        return "; ".join(snippets)

    def __str__(self) -> str:
        return self._build_message()
