"""
Task and task graph primitives.

The graph is built once at startup and validated up front: unique names,
known dependencies and no cycles.
"""

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from sitebuild.config.categories import AssetCategory


class GraphError(ValueError):
    """The declared tasks do not form a valid dependency graph."""


@dataclass(frozen=True)
class Task:
    """
    Named unit of work.

    ``action`` is None for alias tasks that only group dependencies.
    """

    name: str
    action: Callable[[], object] | None = None
    dependencies: tuple[str, ...] = ()
    description: str = ""
    category: AssetCategory | None = None


def topo_sort(nodes: Iterable[str], edges: Iterable[tuple[str, str]]) -> list[str]:
    """Order nodes so every edge (u, v) puts u before v."""
    nodes = list(nodes)
    incoming: dict[str, set[str]] = {n: set() for n in nodes}
    outgoing: dict[str, set[str]] = {n: set() for n in nodes}
    for u, v in edges:
        if u not in incoming or v not in incoming:
            raise GraphError(f"Edge references unknown node: {(u, v)}")
        outgoing[u].add(v)
        incoming[v].add(u)
    ordered: list[str] = []
    roots = [n for n in nodes if not incoming[n]]
    while roots:
        n = roots.pop(0)
        ordered.append(n)
        for m in sorted(outgoing[n]):
            incoming[m].discard(n)
            if not incoming[m]:
                roots.append(m)
        outgoing[n].clear()
    remaining = sorted(n for n in nodes if incoming[n])
    if remaining:
        raise GraphError(f"Cycle detected among tasks: {', '.join(remaining)}")
    return ordered


class TaskGraph:
    """
    Immutable set of tasks with validated dependencies.

    Raises:
        GraphError: On duplicate names, unknown or repeated dependencies, or cycles
    """

    def __init__(self, tasks: Iterable[Task]) -> None:
        self._tasks: dict[str, Task] = {}
        for task in tasks:
            if not task.name:
                raise GraphError("Task name must not be empty")
            if task.name in self._tasks:
                raise GraphError(f"Duplicate task name: {task.name}")
            self._tasks[task.name] = task

        for task in self._tasks.values():
            if len(set(task.dependencies)) != len(task.dependencies):
                raise GraphError(f"Task {task.name} lists a dependency twice")
            for dep in task.dependencies:
                if dep not in self._tasks:
                    raise GraphError(f"Task {task.name} depends on unknown task {dep}")

        edges = [
            (dep, task.name)
            for task in self._tasks.values()
            for dep in task.dependencies
        ]
        self.order = topo_sort(self._tasks, edges)

    def __getitem__(self, name: str) -> Task:
        try:
            return self._tasks[name]
        except KeyError:
            raise KeyError(f"Unknown task: {name}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def names(self) -> list[str]:
        return list(self._tasks)

    def plan(self, name: str) -> list[str]:
        """
        Execution order for a task: dependencies first, in declared order,
        each task once.
        """
        ordered: list[str] = []
        visited: set[str] = set()

        def visit(current: str) -> None:
            if current in visited:
                return
            visited.add(current)
            for dep in self[current].dependencies:
                visit(dep)
            ordered.append(current)

        visit(name)
        return ordered
