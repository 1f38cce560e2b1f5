"""
Tests for FlowRunner.

Tests cover:
- Full name/age traversal and the visit trace
- Display-only steps
- Validation before any I/O
- Termination by exit and inactivity
- Error propagation
"""

from unittest.mock import MagicMock

import pytest

from branchflow.core.channels import Format
from branchflow.core.runner import FlowRunner
from branchflow.core.steps.step import Step
from branchflow.core.steps.strings import DEFAULT_STRINGS, FlowStrings
from branchflow.core.tree.models import FlowNode
from branchflow.demo import build_demo_flow
from branchflow.errors import (
    FlowTerminated,
    InactivityTimeout,
    InvalidTreeError,
    Rejection,
    VoluntaryExit,
)


def text(value):
    return lambda data: Format(text=value)


def store(key, cast=str):
    def _store(message, data):
        try:
            value = cast(message.content)
        except ValueError:
            raise Rejection()
        return {**data, key: value}

    return _store


def name_age_tree(inbox, cond_old=None, cond_young=None, young_func=None):
    n0 = FlowNode(Step(text("name?"), store("name"), collector_factory=inbox, name="n0"))
    n1 = FlowNode(Step(text("age?"), store("age", int), collector_factory=inbox, name="n1"))
    n2 = FlowNode(Step(text("old"), name="n2"), cond_old or (lambda d: d["age"] >= 20))
    n3 = FlowNode(Step(text("young"), young_func, collector_factory=inbox, name="n3"), cond_young or (lambda d: d["age"] < 20))
    n0.add_child(n1)
    n1.set_children([n2, n3])
    return n0, n1, n2, n3


@pytest.mark.asyncio
class TestRun:
    """End-to-end traversal."""

    async def test_name_age_scenario(self, channel, inbox):
        """Only the taken branch runs; the other is never evaluated past the winner."""
        cond_old = MagicMock(return_value=True)
        cond_young = MagicMock(return_value=False)
        young_func = MagicMock()
        n0, n1, n2, n3 = name_age_tree(inbox, cond_old, cond_young, young_func)
        inbox.push("George")
        inbox.push("30")
        runner = FlowRunner({})

        data = await runner.run(n0, channel)

        assert data == {"name": "George", "age": 30}
        assert runner.indexes_of([n0, n1, n2, n3]) == [0, 1, 2, -1]
        cond_old.assert_called_once_with({"name": "George", "age": 30})
        cond_young.assert_not_called()
        young_func.assert_not_called()
        assert channel.texts == ["name?", "age?", "old"]

    async def test_other_branch(self, channel, inbox):
        n0, n1, n2, n3 = name_age_tree(inbox)
        n3.step.function = None
        inbox.push("Kim")
        inbox.push("12")
        runner = FlowRunner({})

        await runner.run(n0, channel)

        assert runner.indexes_of([n0, n1, n2, n3]) == [0, 1, -1, 2]

    async def test_rejection_during_run(self, channel, inbox):
        """A rejected reply is retried within the same node."""
        n0, n1, n2, n3 = name_age_tree(inbox)
        for reply in ["George", "old enough", "30"]:
            inbox.push(reply)
        runner = FlowRunner({})

        data = await runner.run(n0, channel)

        assert data["age"] == 30
        assert channel.texts == ["name?", "age?", DEFAULT_STRINGS.rejected, "old"]
        assert runner.ran == [n0, n1, n2]

    async def test_display_only_steps_pass_through(self, channel):
        """Steps without a collection function never create a collector and traversal continues."""
        factory = MagicMock()
        leaf = FlowNode(Step(text("b"), collector_factory=factory))
        root = FlowNode(Step(text("a"), collector_factory=factory)).add_child(leaf)
        runner = FlowRunner({"x": 1}, collector_factory=factory)

        data = await runner.run(root, channel)

        assert data == {"x": 1}
        assert channel.texts == ["a", "b"]
        assert runner.ran == [root, leaf]
        factory.assert_not_called()

    async def test_no_eligible_child_ends_normally(self, channel):
        """A node whose children all decline ends the flow without error."""
        root = FlowNode(Step(text("a"))).set_children(
            [FlowNode(Step(text("b")), lambda d: False), FlowNode(Step(text("c")), lambda d: False)]
        )
        runner = FlowRunner(None)

        assert await runner.run(root, channel) is None
        assert channel.texts == ["a"]

    async def test_invalid_tree_raises_before_io(self, channel):
        """Nothing is sent and nothing is traced for an invalid tree."""
        generator = MagicMock(return_value="never")
        root = FlowNode(Step(generator)).set_children([FlowNode(Step(text("x"))), FlowNode(Step(text("y")))])
        runner = FlowRunner({})

        with pytest.raises(InvalidTreeError) as excinfo:
            await runner.run(root, channel)

        assert excinfo.value.invalid_nodes == [root]
        assert channel.sent == []
        assert runner.ran == []
        generator.assert_not_called()

    async def test_execute_skips_validation(self, channel):
        """execute walks an invalid tree using the first eligible child."""
        first = FlowNode(Step(text("x")))
        root = FlowNode(Step(text("root"))).set_children([first, FlowNode(Step(text("y")))])
        runner = FlowRunner({})

        await runner.execute(root, channel)

        assert runner.ran == [root, first]

    async def test_voluntary_exit(self, channel, inbox):
        """The exit token aborts the run with VoluntaryExit after the exit string."""
        n0, n1, n2, n3 = name_age_tree(inbox)
        inbox.push("George")
        inbox.push("exit")
        runner = FlowRunner({})

        with pytest.raises(VoluntaryExit):
            await runner.run(n0, channel)

        assert runner.indexes_of([n0, n1, n2, n3]) == [0, 1, -1, -1]
        assert channel.texts[-1] == DEFAULT_STRINGS.exit

    async def test_inactivity(self, channel, inbox):
        """An unanswered prompt aborts the run with InactivityTimeout."""
        root = FlowNode(Step(text("name?"), store("name"), 50, collector_factory=inbox))
        runner = FlowRunner({})

        with pytest.raises(InactivityTimeout) as excinfo:
            await runner.run(root, channel)

        assert isinstance(excinfo.value, FlowTerminated)
        assert excinfo.value.duration_ms == 50
        assert channel.texts == ["name?", DEFAULT_STRINGS.inactivity]

    async def test_runner_strings_apply(self, channel, inbox):
        """Runner strings are used by steps without their own."""
        root = FlowNode(Step(text("q"), store("a"), collector_factory=inbox))
        inbox.push("bye")
        runner = FlowRunner({}, FlowStrings(exit="Goodbye.", exit_token="bye"))

        with pytest.raises(VoluntaryExit):
            await runner.run(root, channel)

        assert channel.texts == ["q", "Goodbye."]

    async def test_tree_untouched_after_exit(self, channel, inbox):
        """Termination leaves the tree as it was; a fresh run behaves the same."""
        n0, n1, n2, n3 = name_age_tree(inbox)
        inbox.push("exit")

        with pytest.raises(VoluntaryExit):
            await FlowRunner({}).run(n0, channel)

        assert n0.children == [n1]
        assert n1.children == [n2, n3]
        inbox.push("George")
        inbox.push("30")
        runner = FlowRunner({})
        await runner.run(n0, channel)
        assert runner.ran == [n0, n1, n2]

    async def test_send_failure_propagates(self, inbox):
        class BrokenChannel:
            async def send(self, content):
                raise ConnectionError("gone")

        n0, *_ = name_age_tree(inbox)
        runner = FlowRunner({})

        with pytest.raises(ConnectionError):
            await runner.run(n0, BrokenChannel())
        # Traced before the failed send
        assert runner.ran == [n0]

    async def test_condition_error_propagates(self, channel):
        def broken(data):
            raise KeyError("age")

        root = FlowNode(Step(text("a"))).set_children([FlowNode(Step(text("b")), broken), FlowNode(Step(text("c")), broken)])

        with pytest.raises(KeyError):
            await FlowRunner({}).run(root, channel)

    async def test_runner_collector_factory_fallback(self, channel, inbox):
        """The runner's factory serves steps that have none."""
        root = FlowNode(Step(text("q"), store("a")))
        inbox.push("hello")
        runner = FlowRunner({}, collector_factory=inbox)

        assert await runner.run(root, channel) == {"a": "hello"}

    async def test_reuse_accumulates_trace(self, channel):
        """Running twice appends to the same trace."""
        root = FlowNode(Step(text("a")))
        runner = FlowRunner({})

        await runner.run(root, channel)
        await runner.run(root, channel)

        assert runner.ran == [root, root]
        assert runner.index_of(root) == 0

    async def test_demo_flow(self, channel, inbox):
        root = build_demo_flow(collector_factory=inbox)
        inbox.push("George")
        inbox.push("-3")
        inbox.push("30")

        data = await FlowRunner({}).run(root, channel)

        assert data == {"name": "George", "age": 30}
        assert "Age cannot be negative." in channel.texts
        assert channel.texts[-1] == "Welcome aboard, George."


class TestTrace:
    """Pure trace lookups."""

    def test_index_of_is_identity_based(self):
        a = FlowNode(Step(text("a")))
        twin = FlowNode(Step(text("a")))
        runner = FlowRunner({})
        runner.ran.append(a)

        assert runner.index_of(a) == 0
        assert runner.index_of(twin) == -1
        assert runner.indexes_of([twin, a, a]) == [-1, 0, 0]
        assert runner.ran == [a]

    def test_empty_trace(self):
        runner = FlowRunner({})

        assert runner.indexes_of([]) == []
        assert runner.index_of(FlowNode(Step(text("a")))) == -1
