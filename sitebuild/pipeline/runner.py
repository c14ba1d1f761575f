"""
Task execution.

Runs a task after its dependencies, in plan order. One-shot runs exit with
status 1 on the first failure; the watch orchestrator calls ``execute`` and
handles failures itself.
"""

import sys
import time

from sitebuild.core.graph import TaskGraph
from sitebuild.pipeline.errors import TaskError
from sitebuild.utils.logging import logger


def execute(graph: TaskGraph, name: str) -> list[str]:
    """
    Run a task and its dependencies, stopping at the first failure.

    Returns:
        Names of the tasks that ran

    Raises:
        TaskError: Wrapping the failure of the task that failed
    """
    plan = graph.plan(name)
    total = len(plan)
    completed: list[str] = []

    for i, task_name in enumerate(plan, 1):
        task = graph[task_name]
        if task.action is None:
            completed.append(task_name)
            continue

        logger.info(f"[{i}/{total}] Running {task_name}")
        started = time.perf_counter()
        try:
            task.action()
        except Exception as e:
            raise TaskError(task_name, e) from e
        elapsed = time.perf_counter() - started
        logger.info(f"{task_name} completed ({elapsed:.2f}s)")
        completed.append(task_name)

    return completed


def run_oneshot(graph: TaskGraph, name: str) -> None:
    """Run a task once; exit the process with status 1 on failure."""
    logger.info(f"Running {name}")
    try:
        execute(graph, name)
    except TaskError as e:
        logger.error(f"{e.task_name} failed: {e.cause}")
        sys.exit(1)

    logger.info(f"{name} completed successfully")
