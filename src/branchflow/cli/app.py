"""
branchflow CLI: validate, inspect and run conversation flows in the terminal.

Flows are referenced as ``package.module:attribute`` (or
``path/to/file.py:attribute``) where the attribute is a FlowNode, a list of
candidate FlowNodes, or a factory returning either.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

import typer
from rich.console import Console
from rich.logging import RichHandler

from branchflow.cli.console import ConsoleChannel, ConsoleInput
from branchflow.cli.formatters import build_data_table, build_flow_tree, build_trace_table, parse_key_values
from branchflow.cli.load_helpers import load_or_exit
from branchflow.core.runner import FlowRunner
from branchflow.core.steps.strings import FlowStrings
from branchflow.core.tree.models import FlowNode
from branchflow.core.tree.validators import TreeValidator
from branchflow.demo import build_demo_flow
from branchflow.errors import FlowError, FlowTerminated, InvalidTreeError
from branchflow.io.loaders import load_flow, load_strings

app = typer.Typer(help="branchflow CLI: validate, inspect and run conversation flows.")
console = Console()

EXIT_INVALID = 1
EXIT_BAD_ARGUMENT = 2
EXIT_TERMINATED = 3


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_nodes(flow: str, verbose: bool) -> List[FlowNode]:
    return load_or_exit(load_flow, flow, console=console, verbose_errors=verbose)


def _validation_errors(nodes: Sequence[FlowNode]) -> List[str]:
    errors: List[str] = []
    if len(nodes) > 1:
        missing = [node.describe() for node in nodes if node.condition is None]
        if missing:
            errors.append(f"Entry candidates without a condition: {', '.join(missing)}")
    for node in nodes:
        errors.extend(TreeValidator(node).validate_all())
    return errors


def _parse_data(items: Sequence[str]) -> Dict[str, Any]:
    try:
        return dict(parse_key_values(items))
    except ValueError as exc:
        console.print(f"[red]Bad --data[/red] (expected key=value): {exc}")
        raise typer.Exit(code=EXIT_BAD_ARGUMENT)


async def _run_flow(nodes: Sequence[FlowNode], runner: FlowRunner) -> Any:
    channel = ConsoleChannel(console)
    if len(nodes) == 1:
        return await runner.run(nodes[0], channel)
    return await runner.run_array(nodes, channel)


def _run_interactive(nodes: Sequence[FlowNode], initial_data: Dict[str, Any], strings: Optional[FlowStrings]) -> None:
    runner: FlowRunner[Dict[str, Any]] = FlowRunner(
        initial_data,
        strings,
        collector_factory=ConsoleInput(console),
    )
    try:
        data = asyncio.run(_run_flow(nodes, runner))
    except InvalidTreeError as err:
        console.print(f"[red]{err}[/red]")
        raise typer.Exit(code=EXIT_INVALID)
    except FlowTerminated as err:
        console.print(build_trace_table(runner))
        console.print(f"[yellow]Flow ended early:[/yellow] {err}")
        raise typer.Exit(code=EXIT_TERMINATED)
    except FlowError as err:
        console.print(f"[red]Flow failed:[/red] {err}")
        raise typer.Exit(code=EXIT_INVALID)

    console.print(build_trace_table(runner))
    data_table = build_data_table(data)
    if data_table is not None:
        console.print(data_table)
    console.print("[green]Flow complete[/green]")


@app.command()
def validate(
    flow: str = typer.Argument(..., help="Flow reference, e.g. 'mypkg.flows:build_flow'"),
    verbose: bool = typer.Option(False, "--verbose-load", help="Display full error on load failures"),
) -> None:
    """Check that every branching node has conditions on all of its children."""
    nodes = _load_nodes(flow, verbose)
    node_count = sum(1 for root in nodes for _ in root.walk())
    console.print(f"[green]OK[/green] Loaded {len(nodes)} entry node(s), {node_count} node(s) total")

    errors = _validation_errors(nodes)
    if errors:
        console.print("[red]Validation errors detected:[/red]")
        for error in errors:
            console.print(f" - {error}")
        raise typer.Exit(code=EXIT_INVALID)

    console.print("[green]All validations passed[/green]")


@app.command()
def show(
    flow: str = typer.Argument(..., help="Flow reference, e.g. 'mypkg.flows:build_flow'"),
    verbose: bool = typer.Option(False, "--verbose-load", help="Display full error on load failures"),
) -> None:
    """Print the flow tree."""
    nodes = _load_nodes(flow, verbose)
    console.print(build_flow_tree(nodes, title=flow))


@app.command()
def run(
    flow: str = typer.Argument(..., help="Flow reference, e.g. 'mypkg.flows:build_flow'"),
    data: List[str] = typer.Option([], "--data", "-d", help="Initial data as key=value pairs"),
    strings_path: Optional[str] = typer.Option(None, "--strings", help="YAML file overriding user-facing strings"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log traversal details"),
) -> None:
    """Run a flow interactively in the terminal."""
    _configure_logging(verbose)
    nodes = _load_nodes(flow, verbose)
    initial_data = _parse_data(data)
    strings = load_or_exit(load_strings, strings_path, console=console, verbose_errors=verbose) if strings_path else None

    errors = _validation_errors(nodes)
    if errors:
        console.print("[red]Validation errors detected:[/red]")
        for error in errors:
            console.print(f" - {error}")
        raise typer.Exit(code=EXIT_INVALID)

    _run_interactive(nodes, initial_data, strings)


@app.command()
def demo(
    strings_path: Optional[str] = typer.Option(None, "--strings", help="YAML file overriding user-facing strings"),
    timeout: int = typer.Option(60, "--timeout", help="Seconds to wait for each answer"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log traversal details"),
) -> None:
    """Run the built-in name/age demo flow."""
    _configure_logging(verbose)
    strings = load_or_exit(load_strings, strings_path, console=console, verbose_errors=verbose) if strings_path else None
    console.print(f"[dim]Type your answers. Send '{(strings or FlowStrings()).exit_token}' to leave.[/dim]")
    _run_interactive([build_demo_flow(duration=timeout * 1000)], {}, strings)


__all__ = ["app"]
