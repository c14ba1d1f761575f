"""
Asset category definitions.
"""

from enum import Enum


class AssetCategory(str, Enum):
    """Asset types with their own input/output paths and task chain."""

    FONTS = "fonts"
    IMAGES = "images"
    MARKUP = "markup"
    STYLES = "styles"
    SCRIPTS = "scripts"


# Build order used by build:all
BUILD_ORDER = [
    AssetCategory.FONTS,
    AssetCategory.STYLES,
    AssetCategory.SCRIPTS,
    AssetCategory.IMAGES,
    AssetCategory.MARKUP,
]
