from __future__ import annotations

import os
from typing import Any, Dict

import yaml
from pydantic import BaseModel, Field, ValidationError

from branchflow.core.steps.strings import FlowStrings
from branchflow.io.loaders.errors import LoaderError
from branchflow.utils.logging import log_calls


class StringsFileSpec(BaseModel):
    strings: FlowStrings = Field(default_factory=FlowStrings)

    model_config = {"extra": "forbid"}


def _read_yaml_file(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@log_calls()
def load_strings(path: str) -> FlowStrings:
    """Load user-facing flow strings from a YAML file.

    Expected format (every key optional):
    strings:
      exit: Menu has been closed.
      inactivity: Menu has been closed due to inactivity.
      rejected: That is not a valid input. Try again.
      exit_token: exit
    """
    if not os.path.isfile(path):
        raise LoaderError(path, "Strings file not found")
    try:
        data = _read_yaml_file(path)
    except yaml.YAMLError as exc:
        raise LoaderError(path, "Invalid YAML in strings file", cause=exc) from exc
    if not isinstance(data, dict):
        raise LoaderError(path, "Strings file must contain a mapping")
    try:
        spec = StringsFileSpec.model_validate(data)
    except ValidationError as exc:
        raise LoaderError(path, "Invalid strings definition", cause=exc) from exc
    return spec.strings


__all__ = ["StringsFileSpec", "load_strings"]
