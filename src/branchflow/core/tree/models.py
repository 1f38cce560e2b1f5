"""
Flow tree data models.

These models describe the shape of a conversation:
- TreeNode: A generic ordered n-ary container (no parent back-reference)
- FlowNode: A TreeNode bound to a Step plus an optional branch condition

Tree Structure:
    ask_name
    └── ask_age
        ├── adult     (condition: age >= 20)
        └── minor     (condition: age < 20)

A node's condition is evaluated by its parent when selecting the next node,
so a root's condition only matters when it is a candidate of ``run_array``.
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Generic,
    Iterator,
    List,
    Optional,
    Sequence,
    TypeVar,
    Union,
)

from branchflow.core.tree.selection import select_branch

if TYPE_CHECKING:
    from branchflow.core.steps.step import Step

NodeT = TypeVar("NodeT", bound="TreeNode")

BranchCondition = Callable[[Any], Union[bool, Awaitable[bool]]]


class TreeNode(Generic[NodeT]):
    """Ordered n-ary tree node. Identity is reference identity."""

    def __init__(self, children: Optional[Sequence[NodeT]] = None):
        self.children: List[NodeT] = list(children or [])

    @property
    def is_leaf(self) -> bool:
        """Check if this node has no children."""
        return len(self.children) == 0

    def set_children(self: NodeT, nodes: Sequence[NodeT]) -> NodeT:
        """Replace the children of this node."""
        self.children = list(nodes)
        return self

    def add_child(self: NodeT, node: NodeT) -> NodeT:
        """Append a child to this node."""
        self.children.append(node)
        return self

    def walk(self: NodeT) -> Iterator[NodeT]:
        """Depth-first pre-order iteration over this subtree.

        A node reachable through several parents is yielded once.
        """
        seen = set()
        stack: List[NodeT] = [self]
        while stack:
            node = stack.pop()
            if id(node) in seen:
                continue
            seen.add(id(node))
            yield node
            stack.extend(reversed(node.children))


class FlowNode(TreeNode["FlowNode"]):
    """
    A node in a conversation flow.

    Binds one Step and an optional branch condition. The condition decides
    whether traversal may enter this node from its parent.
    """

    def __init__(
        self,
        step: "Step",
        condition: Optional[BranchCondition] = None,
        children: Optional[Sequence["FlowNode"]] = None,
        *,
        name: Optional[str] = None,
    ):
        super().__init__(children)
        self.step = step
        self.condition = condition
        self.name = name

    def has_valid_children(self) -> bool:
        """
        Check the branching invariant for this node only.

        A node with 2 or more children needs a condition on every child,
        otherwise selection would be ambiguous.
        """
        if len(self.children) <= 1:
            return True
        return all(child.condition is not None for child in self.children)

    async def select_next(self, data: Any) -> Optional["FlowNode"]:
        """Select the first eligible child for ``data``, or None."""
        return await select_branch(self.children, data)

    def describe(self) -> str:
        """Human-readable description of this node."""
        label = self.name or getattr(self.step, "name", None) or f"node@{id(self):x}"
        if self.condition is not None:
            cond_name = getattr(self.condition, "__name__", "condition")
            return f"{label} [if {cond_name}]"
        return label

    def __repr__(self) -> str:
        return f"FlowNode({self.describe()!r}, children={len(self.children)})"


__all__ = ["BranchCondition", "FlowNode", "TreeNode"]
