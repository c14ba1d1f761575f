"""
Watch orchestrator.

Maps file-system events on each category's input glob to that category's
task. Each binding gets a lane that debounces bursts of events, never runs
its task twice at once, and reruns once if a trigger fired mid-run. Task
failures go to the error handler and the dispatch loop keeps going.
"""

import threading
import time
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from sitebuild.config.categories import AssetCategory
from sitebuild.config.paths import PathTable
from sitebuild.config.settings import DEFAULT_DEBOUNCE
from sitebuild.core import globs
from sitebuild.core.graph import TaskGraph
from sitebuild.pipeline.errors import ErrorHandler, TaskError
from sitebuild.pipeline.runner import execute
from sitebuild.pipeline.tasks import CATEGORY_TASKS
from sitebuild.utils.logging import logger

CHANGE_EVENTS = {
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
}


class WatchState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"


@dataclass(frozen=True)
class WatchBinding:
    """Pairs a category's input glob with the task it triggers."""

    category: AssetCategory
    input_glob: str
    task_name: str


def default_bindings(table: PathTable) -> list[WatchBinding]:
    """One binding per category, targeting the category task."""
    return [
        WatchBinding(category, table[category].input_glob, CATEGORY_TASKS[category])
        for category in table
    ]


class Lane:
    """Debounced, serialized runner for one binding."""

    def __init__(
        self,
        binding: WatchBinding,
        run: Callable[[str], None],
        executor: ThreadPoolExecutor,
        delay: float,
    ) -> None:
        self.binding = binding
        self.delay = delay
        self._run = run
        self._executor = executor
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._generation = 0
        self._running = False
        self._pending = False

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._timer is not None or self._running or self._pending

    def trigger(self) -> None:
        """Restart the debounce window."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._timer = threading.Timer(self.delay, self._fire, args=(self._generation,))
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._generation += 1
            self._pending = False

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._timer = None
            if self._running:
                self._pending = True
                return
            self._running = True
        try:
            self._executor.submit(self._drain)
        except RuntimeError:
            # Executor already shut down by stop()
            with self._lock:
                self._running = False

    def _drain(self) -> None:
        while True:
            try:
                self._run(self.binding.task_name)
            finally:
                with self._lock:
                    rerun = self._pending
                    self._pending = False
                    if not rerun:
                        self._running = False
            if not rerun:
                return


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, orchestrator: "Orchestrator") -> None:
        super().__init__()
        self.orchestrator = orchestrator

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in CHANGE_EVENTS:
            return
        paths = [event.src_path]
        if event.event_type == EVENT_TYPE_MOVED:
            paths.append(event.dest_path)
        for path in paths:
            self.orchestrator.dispatch(Path(path))


class Orchestrator:
    """
    Long-running watch process.

    Args:
        graph: Task graph providing the bound tasks
        table: Path table of the project
        bindings: Watch bindings, one per category at most
        debounce: Quiet period in seconds before a burst triggers a run
        error_handler: Receives (task name, error) for every failed run
        server: Dev server with a blocking ``serve()``, or None
        observer_factory: Creates the watchdog observer
    """

    def __init__(
        self,
        graph: TaskGraph,
        table: PathTable,
        bindings: Iterable[WatchBinding] | None = None,
        *,
        debounce: float = DEFAULT_DEBOUNCE,
        error_handler: Callable[[str, BaseException], None] | None = None,
        server=None,
        observer_factory: Callable[[], object] = Observer,
    ) -> None:
        self.graph = graph
        self.table = table
        self.bindings = list(bindings) if bindings is not None else default_bindings(table)
        self.debounce = debounce
        self.error_handler = error_handler or ErrorHandler()
        self.server = server
        self.state = WatchState.IDLE
        self._observer_factory = observer_factory
        self._observer = None
        self._executor: ThreadPoolExecutor | None = None
        self.lanes: dict[AssetCategory, Lane] = {}
        self._validate_bindings()

    def _validate_bindings(self) -> None:
        seen: set[AssetCategory] = set()
        for binding in self.bindings:
            if binding.category in seen:
                raise ValueError(f"Duplicate watch binding for {binding.category.value}")
            if binding.task_name not in self.graph:
                raise ValueError(f"Watch binding targets unknown task {binding.task_name}")
            seen.add(binding.category)

    def run_task(self, task_name: str) -> bool:
        """
        Run a task under supervision.

        Returns:
            True on success; failures are passed to the error handler
        """
        try:
            execute(self.graph, task_name)
        except TaskError as e:
            self.error_handler(e.task_name, e.cause)
            return False
        logger.info(f"{task_name} rebuilt")
        return True

    def start(self) -> None:
        """Install watchers (idle -> active)."""
        if self.state is WatchState.ACTIVE:
            return

        self._executor = ThreadPoolExecutor(
            max_workers=max(len(self.bindings), 1), thread_name_prefix="sitebuild"
        )
        self.lanes = {
            b.category: Lane(b, self.run_task, self._executor, self.debounce)
            for b in self.bindings
        }

        self._observer = self._observer_factory()
        handler = _ChangeHandler(self)
        for watch_dir in self._watch_dirs():
            self._observer.schedule(handler, str(watch_dir), recursive=True)
            logger.info(f"Watching {watch_dir}")
        self._observer.start()

        self.state = WatchState.ACTIVE

    def _watch_dirs(self) -> list[Path]:
        """
        Directories to observe recursively.

        A binding whose base does not exist yet is covered by its nearest
        existing ancestor, so sources created later still trigger it.
        Directories nested in another watched one are dropped.
        """
        root = self.table.root
        candidates: set[Path] = set()
        for binding in self.bindings:
            base = root / globs.glob_base(binding.input_glob)
            watch_dir = base
            while not watch_dir.is_dir() and watch_dir != root:
                watch_dir = watch_dir.parent
            if not watch_dir.is_dir():
                logger.warning(f"Not watching {binding.category.value}: {root} does not exist")
                continue
            if watch_dir != base:
                logger.info(f"{binding.input_glob} does not exist yet, watching {watch_dir}")
            candidates.add(watch_dir)
        return sorted(
            d for d in candidates if not any(other in d.parents for other in candidates)
        )

    def dispatch(self, path: Path) -> list[AssetCategory]:
        """
        Trigger the lane of every binding whose glob matches path.

        Returns:
            Categories that were triggered
        """
        if self.state is not WatchState.ACTIVE:
            return []

        triggered = []
        for binding in self.bindings:
            if globs.matches(path, [binding.input_glob], self.table.root):
                logger.debug(f"{path} changed -> {binding.task_name}")
                self.lanes[binding.category].trigger()
                triggered.append(binding.category)
        return triggered

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until no lane is waiting or running."""
        deadline = None if timeout is None else time.monotonic() + timeout
        while any(lane.busy for lane in self.lanes.values()):
            if deadline is not None and time.monotonic() >= deadline:
                return False
            time.sleep(0.01)
        return True

    def run_forever(self) -> None:
        """Start watching and block until interrupted."""
        self.start()
        try:
            if self.server is not None:
                self.server.serve()
            else:
                while True:
                    time.sleep(1)
        except KeyboardInterrupt:
            logger.info("Stopping watch")
        finally:
            self.stop()

    def stop(self) -> None:
        """Tear down watchers and wait for in-flight runs."""
        if self.state is WatchState.IDLE:
            return
        for lane in self.lanes.values():
            lane.cancel()
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self.state = WatchState.IDLE
