"""
Script bundling operations.

Bundles the JavaScript entry point with webpack in production mode, which
also minifies the bundle and sets NODE_ENV.
"""

from pathlib import Path

from sitebuild.config.categories import AssetCategory
from sitebuild.config.options import ScriptOptions
from sitebuild.config.paths import PathTable
from sitebuild.pipeline.errors import TransformError
from sitebuild.utils.logging import logger
from sitebuild.utils.subprocess import node_command, run_command


def webpack_command(table: PathTable, options: ScriptOptions) -> list[str]:
    """Build the webpack CLI invocation for the bundle."""
    output_dir = table[AssetCategory.SCRIPTS].output_dir
    cmd = [
        *node_command("webpack", table.root),
        "--mode",
        options.mode,
        "--entry",
        str(table.script_entry),
        "--output-path",
        str(output_dir),
        "--output-filename",
        options.bundle_name,
    ]
    config = table.root / options.config_file
    if config.exists():
        cmd += ["--config", str(config)]
    return cmd


def bundle_scripts(table: PathTable, options: ScriptOptions) -> Path:
    """
    Bundle and minify scripts.

    Returns:
        Path of the written bundle

    Raises:
        TransformError: If the entry point is missing or no bundle was produced
    """
    if not table.script_entry.exists():
        raise TransformError(f"Script entry point not found: {table.script_entry}")

    output_dir = table[AssetCategory.SCRIPTS].output_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    result = run_command(
        webpack_command(table, options),
        f"Bundling {table.script_entry.relative_to(table.root)}",
        cwd=table.root,
    )
    if result.stdout:
        logger.info(f"[webpack] {result.stdout.strip()}")

    bundle = output_dir / options.bundle_name
    if not bundle.exists():
        raise TransformError(f"webpack did not produce {bundle}")
    return bundle
