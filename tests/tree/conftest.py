"""
Shared fixtures for flow tree tests.
"""

from typing import Any, Callable, Optional

import pytest

from branchflow.core.steps.step import Step
from branchflow.core.tree.models import FlowNode


def _format(data: Any) -> str:
    return "prompt"


def _collect(message: Any, data: Any) -> Any:
    return data


@pytest.fixture
def make_node() -> Callable[..., FlowNode]:
    """Build a FlowNode with a collecting step and an optional condition."""

    def _make(condition: Optional[Callable[[Any], Any]] = None, name: Optional[str] = None, collects: bool = True):
        step = Step(_format, _collect if collects else None, name=name)
        return FlowNode(step, condition, name=name)

    return _make
