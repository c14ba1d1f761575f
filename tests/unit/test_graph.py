"""Tests for task graph validation and planning."""

import pytest

from sitebuild.core.graph import GraphError, Task, TaskGraph, topo_sort


class TestValidation:
    """Errors raised when the graph is constructed."""

    def test_duplicate_task_name(self):
        with pytest.raises(GraphError, match="Duplicate"):
            TaskGraph([Task("fonts"), Task("fonts")])

    def test_empty_task_name(self):
        with pytest.raises(GraphError):
            TaskGraph([Task("")])

    def test_unknown_dependency(self):
        with pytest.raises(GraphError, match="unknown task clean:fonts"):
            TaskGraph([Task("fonts", dependencies=("clean:fonts",))])

    def test_repeated_dependency(self):
        with pytest.raises(GraphError, match="twice"):
            TaskGraph([Task("a"), Task("b", dependencies=("a", "a"))])

    def test_cycle(self):
        tasks = [
            Task("a", dependencies=("c",)),
            Task("b", dependencies=("a",)),
            Task("c", dependencies=("b",)),
        ]
        with pytest.raises(GraphError, match="Cycle"):
            TaskGraph(tasks)

    def test_self_dependency(self):
        with pytest.raises(GraphError, match="Cycle"):
            TaskGraph([Task("a", dependencies=("a",))])

    def test_graph_error_is_value_error(self):
        assert issubclass(GraphError, ValueError)


class TestPlan:
    """Execution order for a task."""

    def test_dependencies_run_first(self):
        graph = TaskGraph(
            [
                Task("clean:styles"),
                Task("build:styles", dependencies=("clean:styles",)),
                Task("minify:styles", dependencies=("build:styles",)),
                Task("styles", dependencies=("minify:styles",)),
            ]
        )
        assert graph.plan("styles") == [
            "clean:styles",
            "build:styles",
            "minify:styles",
            "styles",
        ]

    def test_shared_dependency_runs_once(self):
        graph = TaskGraph(
            [
                Task("base"),
                Task("left", dependencies=("base",)),
                Task("right", dependencies=("base",)),
                Task("all", dependencies=("left", "right")),
            ]
        )
        assert graph.plan("all") == ["base", "left", "right", "all"]

    def test_declared_order_is_kept(self):
        graph = TaskGraph([Task("b"), Task("a"), Task("all", dependencies=("b", "a"))])
        assert graph.plan("all") == ["b", "a", "all"]

    def test_unknown_task(self):
        graph = TaskGraph([Task("a")])
        with pytest.raises(KeyError):
            graph.plan("missing")


def test_topo_sort_orders_edges():
    """Test every edge's source precedes its target."""
    order = topo_sort(["c", "b", "a"], [("a", "b"), ("b", "c")])
    assert order == ["a", "b", "c"]


def test_graph_exposes_tasks():
    """Test container behavior of the graph."""
    graph = TaskGraph([Task("a", description="first"), Task("b", dependencies=("a",))])
    assert "a" in graph
    assert "z" not in graph
    assert len(graph) == 2
    assert graph.names == ["a", "b"]
    assert graph["a"].description == "first"
