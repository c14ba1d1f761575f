"""
Cleanup operations.

Removes previously generated output before a category is rebuilt.
"""

from pathlib import Path

from sitebuild.config.categories import AssetCategory
from sitebuild.config.paths import PathTable
from sitebuild.core.files import remove_matching
from sitebuild.utils.logging import logger


def clean_patterns(patterns: list[str], root: Path) -> list[Path]:
    """Remove everything matching the patterns under the project root."""
    removed = remove_matching(patterns, root)
    if removed:
        logger.info(f"Removed {len(removed)} entries")
    else:
        logger.debug(f"Nothing to remove for {', '.join(patterns)}")
    return removed


def clean_category(table: PathTable, category: AssetCategory) -> list[Path]:
    """Delete the generated output of one category."""
    entry = table[category]
    logger.info(f"Cleaning {category.value} output in {entry.output_dir}")
    return clean_patterns(list(entry.clean_patterns), table.root)


def clean_all(table: PathTable) -> list[Path]:
    """Delete the whole public site."""
    logger.info(f"Cleaning {table.public_dir}")
    return clean_patterns(list(table.clean_all_patterns), table.root)
