"""Tests for the error handler and error taxonomy."""

from sitebuild.pipeline.errors import ErrorHandler, LintError, TaskError, ToolError


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send(self, title, message):
        self.sent.append((title, message))


class BrokenNotifier:
    def send(self, title, message):
        raise RuntimeError("no notification daemon")


def test_handler_notifies_with_task_title(capsys):
    """Test a failure produces a titled notification and a bell."""
    notifier = RecordingNotifier()
    ErrorHandler(notifier)("build:styles", ValueError("Undefined variable"))

    assert notifier.sent == [("Task Failed [build:styles]", "Undefined variable")]
    assert "\a" in capsys.readouterr().err


def test_handler_survives_notifier_failure(capsys):
    """Test a broken notification back-end does not raise."""
    ErrorHandler(BrokenNotifier(), bell=False)("fonts", OSError("disk full"))
    assert "\a" not in capsys.readouterr().err


def test_handler_without_notifier():
    """Test notifications can be disabled."""
    ErrorHandler(None, bell=False)("fonts", OSError("disk full"))


def test_error_messages():
    """Test error types describe what failed."""
    assert str(ToolError(["webpack"], 2)) == "webpack exited with status 2"
    assert str(ToolError(["svgo"], None)) == "svgo is not installed"
    assert str(LintError("eslint")) == "eslint reported errors"
    assert str(TaskError("styles", ValueError("bad"))) == "styles: bad"
