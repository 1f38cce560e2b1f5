"""
Tests for the branchflow CLI.
"""

import textwrap

from typer.testing import CliRunner

from branchflow.cli.app import app
from branchflow.cli.formatters import parse_key_values

runner = CliRunner()

DEMO_REF = "branchflow.demo:build_demo_flow"

INVALID_FLOW = """
from branchflow import FlowNode, Step

root = FlowNode(Step(lambda d: "root"), name="root")
root.set_children([FlowNode(Step(lambda d: "a")), FlowNode(Step(lambda d: "b"))])
"""

DISPLAY_FLOW = """
from branchflow import FlowNode, Step

root = FlowNode(Step(lambda d: "Hello " + d.get("who", "?")), name="hello")
"""


def _write(tmp_path, name, source):
    path = tmp_path / name
    path.write_text(textwrap.dedent(source))
    return str(path)


class TestValidateCommand:
    """Tests for the validate command."""

    def test_validate_demo(self):
        """The bundled demo flow passes validation."""
        result = runner.invoke(app, ["validate", DEMO_REF])

        assert result.exit_code == 0
        assert "All validations passed" in result.stdout

    def test_validate_invalid_flow(self, tmp_path):
        """A branching node without conditions fails with exit code 1."""
        path = _write(tmp_path, "invalid_flow.py", INVALID_FLOW)

        result = runner.invoke(app, ["validate", f"{path}:root"])

        assert result.exit_code == 1
        assert "Validation errors detected" in result.stdout

    def test_validate_bad_reference(self):
        """An unknown attribute is reported as a load failure."""
        result = runner.invoke(app, ["validate", "branchflow.demo:missing"])

        assert result.exit_code == 1
        assert "Failed to load" in result.stdout


class TestShowCommand:
    """Tests for the show command."""

    def test_show_demo(self):
        """The tree output names every node."""
        result = runner.invoke(app, ["show", DEMO_REF])

        assert result.exit_code == 0
        assert "ask_name" in result.stdout
        assert "adult" in result.stdout


class TestRunCommand:
    """Tests for the run command."""

    def test_run_display_only_flow_with_data(self, tmp_path):
        """--data values reach the format generators."""
        path = _write(tmp_path, "hello_flow.py", DISPLAY_FLOW)

        result = runner.invoke(app, ["run", f"{path}:root", "--data", "who=George"])

        assert result.exit_code == 0
        assert "Hello George" in result.stdout
        assert "Flow complete" in result.stdout

    def test_run_bad_data(self, tmp_path):
        """A --data item without '=' exits with code 2."""
        path = _write(tmp_path, "hello_flow.py", DISPLAY_FLOW)

        result = runner.invoke(app, ["run", f"{path}:root", "--data", "nokey"])

        assert result.exit_code == 2

    def test_run_invalid_flow(self, tmp_path):
        """Invalid flows are refused before anything is sent."""
        path = _write(tmp_path, "invalid_flow.py", INVALID_FLOW)

        result = runner.invoke(app, ["run", f"{path}:root"])

        assert result.exit_code == 1
        assert "Validation errors detected" in result.stdout
        assert "Flow complete" not in result.stdout

    def test_parse_key_values(self):
        """Only the first '=' splits key from value."""
        assert parse_key_values(["a=1", "b = two=2"]) == {"a": "1", "b": "two=2"}


class TestDemoCommand:
    """Tests for the demo command."""

    def test_demo_completes(self):
        """Answering both questions reaches the adult branch."""
        result = runner.invoke(app, ["demo"], input="George\n30\n")

        assert result.exit_code == 0
        assert "Welcome aboard, George." in result.stdout

    def test_demo_exit_token(self):
        """The exit token ends the run with exit code 3."""
        result = runner.invoke(app, ["demo"], input="exit\n")

        assert result.exit_code == 3
        assert "Menu has been closed." in result.stdout

    def test_demo_custom_strings(self, tmp_path):
        """A strings file changes the exit token and message."""
        path = _write(tmp_path, "strings.yaml", "strings:\n  exit: See you.\n  exit_token: bye\n")

        result = runner.invoke(app, ["demo", "--strings", path], input="bye\n")

        assert result.exit_code == 3
        assert "See you." in result.stdout
