"""Branch selection shared by FlowNode.select_next and FlowRunner.run_array."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Sequence

from branchflow.utils.awaitables import maybe_await

if TYPE_CHECKING:
    from branchflow.core.tree.models import FlowNode

logger = logging.getLogger(__name__)


async def select_branch(candidates: Sequence["FlowNode"], data: Any) -> Optional["FlowNode"]:
    """
    Return the first eligible candidate, evaluating conditions in order.

    A candidate without a condition is always eligible. Evaluation stops at
    the first eligible candidate, so later conditions are never called.
    Conditions run one at a time and their errors propagate unchanged.
    """
    for index, candidate in enumerate(candidates):
        if candidate.condition is None:
            logger.debug("Selected %s (unconditional, index %d)", candidate.describe(), index)
            return candidate
        if await maybe_await(candidate.condition(data)):
            logger.debug("Selected %s (index %d)", candidate.describe(), index)
            return candidate
    logger.debug("No branch selected out of %d candidate(s)", len(candidates))
    return None


__all__ = ["select_branch"]
