"""Built-in name/age flow used by ``branchflow demo`` and the test suite."""

from __future__ import annotations

from typing import Any, Dict, Optional

from branchflow.core.channels import Format, Message
from branchflow.core.collectors.base import CollectorFactory
from branchflow.core.steps.step import Step
from branchflow.core.tree.models import FlowNode
from branchflow.errors import Rejection

ADULT_AGE = 20


def ask_name_format(data: Dict[str, Any]) -> Format:
    return Format(text="What's your name?", embed={"title": "Introductions"})


def ask_age_format(data: Dict[str, Any]) -> Format:
    return Format(text=f"Nice to meet you, {data.get('name')}. How old are you?")


def adult_format(data: Dict[str, Any]) -> Format:
    return Format(text=f"Welcome aboard, {data.get('name')}.")


def minor_format(data: Dict[str, Any]) -> Format:
    return Format(text=f"Sorry {data.get('name')}, you must be {ADULT_AGE} or older.")


def store_name(message: Message, data: Dict[str, Any]) -> Dict[str, Any]:
    name = message.content.strip()
    if not name:
        raise Rejection("Please tell me your name.")
    return {**data, "name": name}


def store_age(message: Message, data: Dict[str, Any]) -> Dict[str, Any]:
    try:
        age = int(message.content.strip())
    except ValueError:
        raise Rejection()
    if age < 0:
        raise Rejection("Age cannot be negative.")
    return {**data, "age": age}


def is_adult(data: Dict[str, Any]) -> bool:
    return data.get("age", 0) >= ADULT_AGE


def is_minor(data: Dict[str, Any]) -> bool:
    return data.get("age", 0) < ADULT_AGE


def build_demo_flow(
    collector_factory: Optional[CollectorFactory] = None,
    duration: Optional[int] = 60000,
) -> FlowNode:
    """
    Build the demo tree:

        ask_name
        └── ask_age
            ├── adult  (age >= 20)
            └── minor  (age < 20)
    """
    ask_name = FlowNode(
        Step(ask_name_format, store_name, duration, collector_factory=collector_factory, name="ask_name")
    )
    ask_age = FlowNode(
        Step(ask_age_format, store_age, duration, collector_factory=collector_factory, name="ask_age")
    )
    adult = FlowNode(Step(adult_format, name="adult"), condition=is_adult)
    minor = FlowNode(Step(minor_format, name="minor"), condition=is_minor)
    ask_name.add_child(ask_age)
    ask_age.set_children([adult, minor])
    return ask_name


__all__ = ["build_demo_flow"]
