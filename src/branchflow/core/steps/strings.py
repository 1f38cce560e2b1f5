"""User-facing strings sent by the engine itself."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from branchflow.core.steps.results import PhaseStatus


class FlowStrings(BaseModel):
    """Termination and feedback texts plus the reserved exit token."""

    exit: str = "Menu has been closed."
    inactivity: str = "Menu has been closed due to inactivity."
    rejected: str = "That is not a valid input. Try again."
    exit_token: str = Field(default="exit", min_length=1)

    def termination_text(self, status: PhaseStatus) -> Optional[str]:
        """Text announcing the end of the flow for a terminal status."""
        if status is PhaseStatus.EXITED:
            return self.exit
        if status is PhaseStatus.INACTIVE:
            return self.inactivity
        return None


DEFAULT_STRINGS = FlowStrings()


__all__ = ["DEFAULT_STRINGS", "FlowStrings"]
