"""
Flow runner.

Validates a flow tree, then walks a single path through it: each visited
node's step is sent, its collection phase (if any) is run, and the node's
branch conditions pick the next node from the resulting data.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, List, Optional, Sequence, TypeVar

from branchflow.core.channels import Message
from branchflow.core.collectors.base import CollectorFactory
from branchflow.core.steps.strings import FlowStrings
from branchflow.core.tree.models import FlowNode
from branchflow.core.tree.selection import select_branch
from branchflow.core.tree.validators import TreeValidator
from branchflow.errors import InvalidTreeError, NoNodeSelectedError
from branchflow.utils.logging import log_calls

logger = logging.getLogger(__name__)

DataT = TypeVar("DataT")


class FlowRunner(Generic[DataT]):
    """Runs one traversal of a flow tree and records the nodes it visited."""

    def __init__(
        self,
        initial_data: DataT,
        strings: Optional[FlowStrings] = None,
        *,
        collector_factory: Optional[CollectorFactory] = None,
        trigger_message: Optional[Message] = None,
    ):
        """
        Args:
            initial_data: Data handed to the first node
            strings: Default strings for steps that do not set their own
            collector_factory: Used by steps that have no collector factory
            trigger_message: Message that started the flow, passed to collectors
        """
        self.initial_data = initial_data
        self.strings = strings
        self.collector_factory = collector_factory
        self.trigger_message = trigger_message
        self.ran: List[FlowNode] = []

    # =========================================================================
    # Validation
    # =========================================================================

    @staticmethod
    @log_calls()
    def validate(root: FlowNode) -> bool:
        """
        Check the whole tree rooted at ``root``.

        A valid tree is one where every node with 2 or more children has a
        condition on all of its children.
        """
        return TreeValidator(root).is_valid()

    @staticmethod
    def find_invalid_nodes(root: FlowNode) -> List[FlowNode]:
        return TreeValidator(root).find_invalid_nodes()

    # =========================================================================
    # Trace
    # =========================================================================

    def index_of(self, node: FlowNode) -> int:
        """Position of ``node`` in the trace, or -1 if it never ran."""
        for index, ran in enumerate(self.ran):
            if ran is node:
                return index
        return -1

    def indexes_of(self, nodes: Sequence[FlowNode]) -> List[int]:
        return [self.index_of(node) for node in nodes]

    # =========================================================================
    # Execution
    # =========================================================================

    async def run(self, root: FlowNode, channel: Any) -> DataT:
        """Validate the tree, then execute it. Nothing is sent for an invalid tree."""
        invalid = self.find_invalid_nodes(root)
        if invalid:
            raise InvalidTreeError(invalid)
        return await self.execute(root, channel)

    async def run_array(self, nodes: Sequence[FlowNode], channel: Any) -> DataT:
        """
        Execute from the first eligible node of ``nodes``.

        ``nodes`` are treated as the children of a root with no step of its
        own, so their conditions are evaluated in order with the initial data.
        """
        selected = await select_branch(nodes, self.initial_data)
        if selected is None:
            raise NoNodeSelectedError(len(nodes))
        return await self.execute(selected, channel)

    async def execute(self, root: FlowNode, channel: Any) -> DataT:
        """
        Execute the tree without validating it.

        Returns the data after the last visited node. Raises VoluntaryExit or
        InactivityTimeout when a collection phase terminates the flow; any
        other error propagates as-is.
        """
        logger.info("Starting flow at %s", root.describe())
        node: Optional[FlowNode] = root
        data = self.initial_data
        while node is not None:
            await self._visit(node, channel, data)
            if node.step.should_run_collector():
                result = await node.step.collect(
                    channel,
                    data,
                    self.trigger_message,
                    strings=self.strings,
                    collector_factory=self.collector_factory,
                )
                if result.terminate:
                    logger.info("Flow terminated at %s (%s)", node.describe(), result.status.value)
                    raise result.error()
                data = result.data
            node = await node.select_next(data)
        logger.info("Flow finished after %d node(s)", len(self.ran))
        return data

    async def _visit(self, node: FlowNode, channel: Any, data: Any) -> None:
        self.ran.append(node)
        logger.debug("Visiting %s (trace index %d)", node.describe(), len(self.ran) - 1)
        await node.step.send_format(channel, data)


__all__ = ["FlowRunner"]
