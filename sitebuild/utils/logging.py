"""
Shared logging configuration for build tasks.
"""

import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[logging.StreamHandler()],
)

logger = logging.getLogger("sitebuild")


def set_verbose(verbose: bool) -> None:
    """Switch the package logger between INFO and DEBUG."""
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
