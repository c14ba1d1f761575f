"""
Subprocess execution utilities with consistent error handling.

External collaborators (PostCSS, webpack, linters, image optimizers) are run
through these helpers so failures surface as ``ToolError``.
"""

import shutil
import subprocess
from pathlib import Path

from sitebuild.pipeline.errors import ToolError
from sitebuild.utils.logging import logger

NODE_BIN_DIR = Path("node_modules") / ".bin"


def run_command(
    cmd: list[str],
    description: str | None = None,
    *,
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
    ok_codes: tuple[int, ...] = (0,),
) -> subprocess.CompletedProcess:
    """
    Run a subprocess command with consistent logging and error handling.

    Args:
        cmd: Command and arguments to run
        description: Optional description for logging
        cwd: Working directory for the command
        env: Full environment for the command (inherits when None)
        ok_codes: Exit statuses treated as success

    Returns:
        CompletedProcess result

    Raises:
        ToolError: If the command is missing or exits with another status
    """
    if description:
        logger.info(description)

    try:
        result = subprocess.run(
            cmd, cwd=cwd, env=env, capture_output=True, text=True, check=False
        )
    except FileNotFoundError as e:
        logger.error(f"Command not found: {cmd[0]}")
        raise ToolError(cmd, None, str(e)) from e

    if result.returncode not in ok_codes:
        logger.error(f"Command failed: {' '.join(cmd)}")
        output = (result.stderr or "") + (result.stdout or "")
        if output.strip():
            logger.error(output.strip())
        raise ToolError(cmd, result.returncode, output)

    if result.stdout:
        logger.debug(result.stdout)
    return result


def resolve_tool(name: str, root: Path) -> list[str] | None:
    """
    Find an executable, preferring the project's node_modules/.bin.

    Returns:
        Command prefix for the tool, or None if it is not installed
    """
    local = root / NODE_BIN_DIR / name
    if local.exists():
        return [str(local)]
    found = shutil.which(name)
    if found:
        return [found]
    return None


def node_command(name: str, root: Path) -> list[str]:
    """Command prefix for a node tool, falling back to npx without installing."""
    return resolve_tool(name, root) or ["npx", "--no", name]


def require_tool(name: str, root: Path) -> list[str]:
    """
    Command prefix for a tool that must be installed locally or on PATH.

    Raises:
        ToolError: If the tool cannot be found
    """
    tool = resolve_tool(name, root)
    if tool is None:
        logger.error(f"Command not found: {name}")
        raise ToolError([name], None, f"{name} not found in {NODE_BIN_DIR} or PATH")
    return tool
