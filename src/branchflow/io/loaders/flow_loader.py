"""Resolve ``module:attribute`` references to flow trees."""

from __future__ import annotations

import importlib
import importlib.util
import os
from types import ModuleType
from typing import Any, List

from branchflow.core.tree.models import FlowNode
from branchflow.io.loaders.errors import LoaderError
from branchflow.utils.logging import log_calls


def _import_module(module_ref: str) -> ModuleType:
    if module_ref.endswith(".py"):
        if not os.path.isfile(module_ref):
            raise LoaderError(module_ref, "Flow file not found")
        module_name = os.path.splitext(os.path.basename(module_ref))[0]
        spec = importlib.util.spec_from_file_location(module_name, module_ref)
        if spec is None or spec.loader is None:
            raise LoaderError(module_ref, "Cannot import flow file")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module
    return importlib.import_module(module_ref)


def _as_nodes(ref: str, value: Any) -> List[FlowNode]:
    if isinstance(value, FlowNode):
        return [value]
    if isinstance(value, (list, tuple)) and value and all(isinstance(v, FlowNode) for v in value):
        return list(value)
    raise LoaderError(ref, f"Expected a FlowNode or a list of FlowNodes, got {type(value).__name__}")


@log_calls()
def load_flow(ref: str) -> List[FlowNode]:
    """
    Load the entry node(s) of a flow.

    ``ref`` is ``package.module:attribute`` or ``path/to/file.py:attribute``.
    The attribute may be a FlowNode, a list of FlowNodes, or a zero-argument
    callable returning either. A single node is returned as a one-item list.
    """
    module_ref, sep, attr = ref.rpartition(":")
    if not sep or not module_ref or not attr:
        raise LoaderError(ref, "Flow reference must look like 'module:attribute'")
    try:
        module = _import_module(module_ref)
    except LoaderError:
        raise
    except Exception as exc:
        raise LoaderError(ref, "Failed to import flow module", cause=exc) from exc

    try:
        value = getattr(module, attr)
    except AttributeError as exc:
        raise LoaderError(ref, f"Module has no attribute '{attr}'") from exc

    if callable(value) and not isinstance(value, FlowNode):
        try:
            value = value()
        except Exception as exc:
            raise LoaderError(ref, "Flow factory raised an error", cause=exc) from exc
    return _as_nodes(ref, value)


__all__ = ["load_flow"]
