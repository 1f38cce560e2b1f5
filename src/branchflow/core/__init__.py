from branchflow.core.channels import Channel, Format, Message
from branchflow.core.collectors import Collector, CollectorEvent, CollectorEventKind, Inbox, QueueCollector
from branchflow.core.runner import FlowRunner
from branchflow.core.steps import CollectionResult, FlowStrings, PhaseStatus, Step
from branchflow.core.tree import FlowNode, TreeNode, TreeValidator, select_branch

__all__ = [
    "Channel",
    "CollectionResult",
    "Collector",
    "CollectorEvent",
    "CollectorEventKind",
    "FlowNode",
    "FlowRunner",
    "FlowStrings",
    "Format",
    "Inbox",
    "Message",
    "PhaseStatus",
    "QueueCollector",
    "Step",
    "TreeNode",
    "TreeValidator",
    "select_branch",
]
