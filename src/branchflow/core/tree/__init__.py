"""
Flow tree module.

Provides the node types a conversation is built from, the branch selection
routine and the structural validator.

Components:
- TreeNode: Ordered n-ary container
- FlowNode: TreeNode bound to a Step and a branch condition
- select_branch: Sequential short-circuit selection over candidates
- TreeValidator: Transitive check of the branching invariant

Example:
    from branchflow.core.tree import FlowNode

    ask_age = FlowNode(Step(ask_age_format, parse_age))
    ask_age.set_children([
        FlowNode(Step(adult_format), condition=lambda d: d["age"] >= 20),
        FlowNode(Step(minor_format), condition=lambda d: d["age"] < 20),
    ])
"""

from branchflow.core.tree.models import BranchCondition, FlowNode, TreeNode
from branchflow.core.tree.selection import select_branch
from branchflow.core.tree.validators import TreeValidator

__all__ = [
    "BranchCondition",
    "FlowNode",
    "TreeNode",
    "TreeValidator",
    "select_branch",
]
