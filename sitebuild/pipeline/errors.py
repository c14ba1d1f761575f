"""
Pipeline error taxonomy and the shared error handler.

Every failure in watch mode passes through ``ErrorHandler``: it logs,
notifies, beeps and returns so the supervising loop keeps running.
"""

from sitebuild.utils.logging import logger
from sitebuild.utils.notify import DesktopNotifier, beep, notify_safely

NOTIFY_TITLE = "Task Failed [{task}]"


class PipelineError(Exception):
    """Base class for build pipeline failures."""


class ToolError(PipelineError):
    """An external tool could not be run or exited unsuccessfully."""

    def __init__(self, cmd: list[str], returncode: int | None, output: str = "") -> None:
        self.cmd = list(cmd)
        self.returncode = returncode
        self.output = output
        if returncode is None:
            message = f"{cmd[0]} is not installed"
        else:
            message = f"{cmd[0]} exited with status {returncode}"
        super().__init__(message)


class TransformError(PipelineError):
    """A compile, bundle or optimize stage failed."""


class LintError(PipelineError):
    """Static analysis reported findings at error severity."""

    def __init__(self, linter: str, output: str = "") -> None:
        self.linter = linter
        self.output = output
        super().__init__(f"{linter} reported errors")


class TaskError(PipelineError):
    """A task failed; carries the originating task name."""

    def __init__(self, task_name: str, cause: BaseException) -> None:
        self.task_name = task_name
        self.cause = cause
        super().__init__(f"{task_name}: {cause}")


class ErrorHandler:
    """
    Single chokepoint for task failures while watching.

    Args:
        notifier: Desktop notifier, or None to disable notifications
        bell: Whether to ring the terminal bell
    """

    def __init__(self, notifier: DesktopNotifier | None = None, *, bell: bool = True) -> None:
        self.notifier = notifier
        self.bell = bell

    def __call__(self, task_name: str, error: BaseException) -> None:
        message = str(error) or error.__class__.__name__
        logger.error(f"{task_name} failed: {message}")
        notify_safely(self.notifier, NOTIFY_TITLE.format(task=task_name), message)
        if self.bell:
            beep()
