"""Error taxonomy for flow validation and execution."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from branchflow.core.tree.models import FlowNode


class FlowError(Exception):
    """Base class for all errors raised by branchflow."""


class InvalidTreeError(FlowError):
    """Raised before execution when a flow tree breaks the branching invariant."""

    def __init__(self, invalid_nodes: Sequence["FlowNode"] = ()):
        self.invalid_nodes: List["FlowNode"] = list(invalid_nodes)
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        base = (
            "Invalid flow tree. Nodes with more than 1 child must have a "
            "condition specified on every child."
        )
        if not self.invalid_nodes:
            return base
        names = ", ".join(node.describe() for node in self.invalid_nodes[:3])
        remaining = len(self.invalid_nodes) - 3
        if remaining > 0:
            names += f" ... ({remaining} more)"
        return f"{base} Offending node(s): {names}"


class Rejection(FlowError):
    """
    Raised by a collection function to reject a reply.

    The step sends feedback and keeps collecting within the same phase.
    An empty message means the configured default feedback is used.
    """

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


class FlowTerminated(FlowError):
    """Participant-driven end of a run (exit or inactivity)."""


class VoluntaryExit(FlowTerminated):
    """The participant asked to leave the flow."""

    def __init__(self, message: str = "Participant exited the flow"):
        super().__init__(message)


class InactivityTimeout(FlowTerminated):
    """No acceptable reply arrived before the phase deadline."""

    def __init__(self, duration_ms: Optional[int] = None):
        self.duration_ms = duration_ms
        if duration_ms is None:
            message = "Participant was inactive"
        else:
            message = f"Participant was inactive for {duration_ms}ms"
        super().__init__(message)


class NoNodeSelectedError(FlowError):
    """None of the candidate entry nodes was eligible for the data."""

    def __init__(self, candidate_count: int = 0):
        self.candidate_count = candidate_count
        super().__init__(f"No node selected out of {candidate_count} candidate(s)")


class FlowConfigurationError(FlowError):
    """A step is missing something it needs to run, such as a collector factory."""


__all__ = [
    "FlowConfigurationError",
    "FlowError",
    "FlowTerminated",
    "InactivityTimeout",
    "InvalidTreeError",
    "NoNodeSelectedError",
    "Rejection",
    "VoluntaryExit",
]
