from branchflow.core.collectors.base import (
    Collector,
    CollectorEvent,
    CollectorEventKind,
    CollectorFactory,
)
from branchflow.core.collectors.queue import Inbox, QueueCollector

__all__ = [
    "Collector",
    "CollectorEvent",
    "CollectorEventKind",
    "CollectorFactory",
    "Inbox",
    "QueueCollector",
]
