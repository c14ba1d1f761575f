"""
Lint operations.

Runs sass-lint and eslint over the sources minus their exclusion lists.
Lint tasks produce no output; they fail on error-severity findings. A linter
that is not installed fails with ToolError before anything runs.
"""

from pathlib import Path

from sitebuild.config.categories import AssetCategory
from sitebuild.config.options import LintOptions
from sitebuild.config.paths import PathTable
from sitebuild.core.globs import expand
from sitebuild.pipeline.errors import LintError, ToolError
from sitebuild.utils.logging import logger
from sitebuild.utils.subprocess import require_tool, run_command


def lint_sources(table: PathTable, category: AssetCategory, excludes: tuple[str, ...]) -> list[Path]:
    """Files of a category that are subject to linting."""
    patterns = [table[category].input_glob, *(f"!{p}" for p in excludes)]
    return expand(patterns, table.root)


def run_linter(name: str, cmd: list[str], files: list[Path], root: Path) -> None:
    """
    Run a linter over files and fail on a non-zero exit.

    Raises:
        LintError: If the linter reports errors
    """
    if not files:
        logger.info(f"{name}: nothing to lint")
        return

    try:
        result = run_command(
            [*cmd, *(str(f.relative_to(root)) for f in files)],
            f"{name}: checking {len(files)} files",
            cwd=root,
        )
    except ToolError as e:
        if e.returncode is None:
            raise
        raise LintError(name, e.output) from e

    if result.stdout.strip():
        logger.info(result.stdout.strip())
    logger.info(f"{name}: no errors")


def lint_styles(table: PathTable, options: LintOptions) -> None:
    """Lint Sass sources with sass-lint."""
    files = lint_sources(table, AssetCategory.STYLES, options.style_excludes)
    cmd = [*require_tool("sass-lint", table.root), "--verbose", "--format", "stylish"]
    run_linter("sass-lint", cmd, files, table.root)


def lint_scripts(table: PathTable, options: LintOptions) -> None:
    """Lint JavaScript sources with eslint."""
    files = lint_sources(table, AssetCategory.SCRIPTS, options.script_excludes)
    cmd = [*require_tool("eslint", table.root), "--format", "stylish"]
    run_linter("eslint", cmd, files, table.root)
