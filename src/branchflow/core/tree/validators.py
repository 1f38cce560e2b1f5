from __future__ import annotations

from typing import List

from branchflow.core.tree.models import FlowNode


class TreeValidator:
    """Checks the branching invariant over a whole flow tree."""

    def __init__(self, root: FlowNode):
        self.root = root

    def find_invalid_nodes(self) -> List[FlowNode]:
        """Return every node whose children break the branching invariant."""
        return [node for node in self.root.walk() if not node.has_valid_children()]

    def validate_all(self) -> List[str]:
        """Return list of validation errors for the tree."""
        errors: List[str] = []
        for node in self.find_invalid_nodes():
            missing = [child.describe() for child in node.children if child.condition is None]
            errors.append(
                f"Node {node.describe()} has {len(node.children)} children but no condition on: {', '.join(missing)}"
            )
        return errors

    def is_valid(self) -> bool:
        return all(node.has_valid_children() for node in self.root.walk())


__all__ = ["TreeValidator"]
