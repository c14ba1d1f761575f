"""
Publish operations for categories that need no transform.

Fonts and markup are copied as-is into their output directories.
"""

from pathlib import Path

from sitebuild.config.categories import AssetCategory
from sitebuild.config.paths import PathTable
from sitebuild.core.files import copy_files
from sitebuild.utils.logging import logger


def publish(table: PathTable, category: AssetCategory) -> list[Path]:
    """
    Copy a category's sources into its output directory.

    Returns:
        Paths of the published files
    """
    entry = table[category]
    sources = entry.sources()
    if not sources:
        logger.warning(f"No {category.value} sources match {entry.input_glob}")
        return []

    written = copy_files(sources, entry.source_base, entry.output_dir)
    logger.info(f"Published {len(written)} {category.value} files to {entry.output_dir}")
    return written


def publish_fonts(table: PathTable) -> list[Path]:
    """Copy font files."""
    return publish(table, AssetCategory.FONTS)


def publish_markup(table: PathTable) -> list[Path]:
    """Copy HTML markup."""
    return publish(table, AssetCategory.MARKUP)
