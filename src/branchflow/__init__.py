"""branchflow: a branching conversational-flow engine."""

from branchflow.core import (
    Channel,
    CollectionResult,
    Collector,
    CollectorEvent,
    CollectorEventKind,
    FlowNode,
    FlowRunner,
    FlowStrings,
    Format,
    Inbox,
    Message,
    PhaseStatus,
    QueueCollector,
    Step,
    TreeNode,
    TreeValidator,
    select_branch,
)
from branchflow.errors import (
    FlowConfigurationError,
    FlowError,
    FlowTerminated,
    InactivityTimeout,
    InvalidTreeError,
    NoNodeSelectedError,
    Rejection,
    VoluntaryExit,
)

__version__ = "0.1.0"

__all__ = [
    "Channel",
    "CollectionResult",
    "Collector",
    "CollectorEvent",
    "CollectorEventKind",
    "FlowConfigurationError",
    "FlowError",
    "FlowNode",
    "FlowRunner",
    "FlowStrings",
    "FlowTerminated",
    "Format",
    "InactivityTimeout",
    "Inbox",
    "InvalidTreeError",
    "Message",
    "NoNodeSelectedError",
    "PhaseStatus",
    "QueueCollector",
    "Rejection",
    "Step",
    "TreeNode",
    "TreeValidator",
    "VoluntaryExit",
    "select_branch",
]
