"""Formatting helpers for CLI presentation."""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from rich.table import Table
from rich.tree import Tree

from branchflow.core.runner import FlowRunner
from branchflow.core.tree.models import FlowNode


def format_node(node: FlowNode) -> str:
    """Format a node label: name, condition and whether it collects."""
    label = f"[bold]{node.describe()}[/bold]"
    if node.step.should_run_collector():
        label += " [dim](collects)[/dim]"
    if not node.has_valid_children():
        label += " [red]missing branch conditions[/red]"
    return label


def build_flow_tree(roots: Sequence[FlowNode], title: str = "Flow") -> Tree:
    """Render one or more flow roots as a rich Tree."""
    tree = Tree(title)
    seen: set = set()

    def _add(parent: Tree, node: FlowNode) -> None:
        if id(node) in seen:
            parent.add(f"{format_node(node)} [dim](see above)[/dim]")
            return
        seen.add(id(node))
        branch = parent.add(format_node(node))
        for child in node.children:
            _add(branch, child)

    for root in roots:
        _add(tree, root)
    return tree


def build_trace_table(runner: FlowRunner, title: str = "Trace") -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Node")
    table.add_column("Messages", justify="right")
    for index, node in enumerate(runner.ran):
        table.add_row(str(index), node.describe(), str(len(node.step.messages)))
    return table


def build_data_table(data: Any, title: str = "Collected data") -> Optional[Table]:
    if not isinstance(data, dict) or not data:
        return None
    table = Table(title=title)
    table.add_column("Key")
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(str(key), repr(value))
    return table


def parse_key_values(items: Sequence[str]) -> Dict[str, str]:
    """Parse ``key=value`` pairs; raises ValueError on a malformed item."""
    result: Dict[str, str] = {}
    for item in items:
        if "=" not in item:
            raise ValueError(item)
        key, value = item.split("=", 1)
        result[key.strip()] = value.strip()
    return result


__all__ = [
    "build_data_table",
    "build_flow_tree",
    "build_trace_table",
    "format_node",
    "parse_key_values",
]
