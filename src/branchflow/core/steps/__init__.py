from branchflow.core.steps.results import CollectionResult, PhaseStatus
from branchflow.core.steps.step import DEFAULT_DURATION_MS, CollectionFunction, FormatGenerator, Step
from branchflow.core.steps.strings import DEFAULT_STRINGS, FlowStrings

__all__ = [
    "CollectionFunction",
    "CollectionResult",
    "DEFAULT_DURATION_MS",
    "DEFAULT_STRINGS",
    "FlowStrings",
    "FormatGenerator",
    "PhaseStatus",
    "Step",
]
