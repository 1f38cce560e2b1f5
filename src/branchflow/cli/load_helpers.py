"""Shared helpers for loading flows and strings with CLI-friendly errors."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

import typer
from rich.console import Console

from branchflow.io.loaders import LoaderError

T = TypeVar("T")


def load_or_exit(
    loader_fn: Callable[..., T],
    *args: Any,
    console: Console,
    verbose_errors: bool = False,
    **kwargs: Any,
) -> T:
    try:
        return loader_fn(*args, **kwargs)
    except LoaderError as err:
        if verbose_errors and err.cause:
            console.print(f"[red]Failed to load:[/red] {err.message}\n{err.cause!r}")
        else:
            console.print(f"[red]Failed to load:[/red] {err}")
        raise typer.Exit(code=1)


__all__ = ["load_or_exit"]
