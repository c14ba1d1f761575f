"""Tests for lint operations."""

import pytest

from sitebuild.config.categories import AssetCategory
from sitebuild.config.options import LintOptions
from sitebuild.operations import lint
from sitebuild.operations.lint import lint_scripts, lint_sources, run_linter
from sitebuild.pipeline.errors import LintError, ToolError
from sitebuild.utils import subprocess as subprocess_utils


def test_lint_sources_skip_excluded(table, project):
    """Test vendor and bootstrap sources are not linted."""
    (project / "src/scss/bootstrap").mkdir()
    (project / "src/scss/bootstrap/_grid.scss").write_text("")
    (project / "src/scss/_bootstrap-theme.scss").write_text("")

    files = lint_sources(table, AssetCategory.STYLES, LintOptions().style_excludes)

    assert [f.name for f in files] == ["_colors.scss", "style.scss"]


def test_linter_failure_raises_lint_error(project, monkeypatch):
    """Test error findings fail the task."""

    def fake_run(cmd, *args, **kwargs):
        raise ToolError(cmd, 1, "app.js: 1 error")

    monkeypatch.setattr(lint, "run_command", fake_run)

    with pytest.raises(LintError) as excinfo:
        run_linter("eslint", ["eslint"], [project / "src/javascript/app.js"], project)
    assert excinfo.value.output == "app.js: 1 error"


def test_missing_linter_is_a_tool_error(project, monkeypatch):
    """Test a linter that cannot run is not reported as findings."""

    def fake_run(cmd, *args, **kwargs):
        raise ToolError(cmd, None, "not found")

    monkeypatch.setattr(lint, "run_command", fake_run)

    with pytest.raises(ToolError):
        run_linter("eslint", ["eslint"], [project / "src/javascript/app.js"], project)


def test_lint_scripts_passes_relative_files(table, project, monkeypatch):
    """Test eslint receives the filtered file list."""
    (project / "src/javascript/vendor").mkdir()
    (project / "src/javascript/vendor/jquery.js").write_text("")
    calls = []

    class Result:
        stdout = ""

    def fake_run(cmd, *args, **kwargs):
        calls.append(cmd)
        return Result()

    monkeypatch.setattr(lint, "run_command", fake_run)
    monkeypatch.setattr(lint, "require_tool", lambda name, root: [name])

    lint_scripts(table, LintOptions())

    assert calls[0][-2:] == ["src/javascript/app.js", "src/javascript/util.js"]


def test_nothing_to_lint(project, monkeypatch):
    """Test an empty file list skips the linter."""
    monkeypatch.setattr(lint, "run_command", pytest.fail)
    run_linter("eslint", ["eslint"], [], project)


def test_uninstalled_linter_is_not_reported_as_findings(table, monkeypatch):
    """Test a missing eslint fails as a missing tool before running anything."""
    monkeypatch.setattr(subprocess_utils, "resolve_tool", lambda name, root: None)
    monkeypatch.setattr(lint, "run_command", pytest.fail)

    with pytest.raises(ToolError, match="eslint is not installed") as excinfo:
        lint_scripts(table, LintOptions())
    assert excinfo.value.returncode is None
