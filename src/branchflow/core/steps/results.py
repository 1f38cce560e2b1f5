"""Outcome of one collection phase."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel

from branchflow.errors import FlowTerminated, InactivityTimeout, VoluntaryExit


class PhaseStatus(str, Enum):
    """How a collection phase settled."""

    ACCEPTED = "accepted"  # Collection function returned new data
    EXITED = "exited"  # Exit token or exit event
    INACTIVE = "inactive"  # Deadline elapsed first


class CollectionResult(BaseModel):
    """
    Result handed back to the runner after a collection phase.

    ``data`` is the new data for ACCEPTED and the unchanged input data
    otherwise. ``message`` is the accepted reply, or the termination message
    sent for EXITED/INACTIVE.
    """

    status: PhaseStatus
    data: Any = None
    message: Any = None
    duration_ms: Optional[int] = None

    model_config = {"arbitrary_types_allowed": True}

    @property
    def terminate(self) -> bool:
        """Whether the whole traversal must stop here."""
        return self.status is not PhaseStatus.ACCEPTED

    def error(self) -> Optional[FlowTerminated]:
        """The fatal exception for a terminal result, None for ACCEPTED."""
        if self.status is PhaseStatus.EXITED:
            return VoluntaryExit()
        if self.status is PhaseStatus.INACTIVE:
            return InactivityTimeout(self.duration_ms)
        return None


__all__ = ["CollectionResult", "PhaseStatus"]
