from branchflow.utils.awaitables import maybe_await
from branchflow.utils.logging import log_calls

__all__ = ["log_calls", "maybe_await"]
