"""
Filesystem path table for asset categories.

Maps each category to its source glob and output directory. The table is
built once from the project root and sitename, then shared read-only.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path

from sitebuild.config.categories import AssetCategory
from sitebuild.config.settings import DEFAULT_SITENAME
from sitebuild.core import globs

SOURCE_DIR = "src"
PUBLIC_DIR = "public"
ASSETS_DIR = "assets"

# Source globs, relative to the project root
INPUT_GLOBS = {
    AssetCategory.FONTS: "src/fonts/**",
    AssetCategory.IMAGES: "src/images/**",
    AssetCategory.MARKUP: "src/html/**",
    AssetCategory.STYLES: "src/scss/**/*.scss",
    AssetCategory.SCRIPTS: "src/javascript/**/*.js",
}

# Output subdirectories under public/assets/<sitename>/; markup goes to public/
ASSET_SUBDIRS = {
    AssetCategory.FONTS: "fonts",
    AssetCategory.IMAGES: "images",
    AssetCategory.STYLES: "stylesheets",
    AssetCategory.SCRIPTS: "javascript",
}

SCRIPT_ENTRY = "src/javascript/app.js"
SASSDOC_SUBDIR = "sassdoc"


@dataclass(frozen=True)
class CategoryPaths:
    """Input and output locations for one asset category."""

    category: AssetCategory
    root: Path
    input_glob: str
    output_dir: Path
    clean_patterns: tuple[str, ...]

    @property
    def source_base(self) -> Path:
        """Directory that source-relative output paths are computed from."""
        return self.root / globs.glob_base(self.input_glob)

    def sources(self) -> list[Path]:
        """Files currently matching the input glob."""
        return globs.expand([self.input_glob], self.root)

    def destination_for(self, source: Path) -> Path:
        """Output path mirroring a source file's position under the glob base."""
        return self.output_dir / source.relative_to(self.source_base)


class PathTable(Mapping):
    """
    Read-only mapping of AssetCategory to CategoryPaths.

    Raises:
        ValueError: If two categories share an output directory
    """

    def __init__(self, root: Path, sitename: str = DEFAULT_SITENAME) -> None:
        self.root = Path(root).resolve()
        self.sitename = sitename
        self.public_dir = self.root / PUBLIC_DIR
        self.assets_dir = self.public_dir / ASSETS_DIR / sitename
        self.sassdoc_dir = self.assets_dir / SASSDOC_SUBDIR
        self.script_entry = self.root / SCRIPT_ENTRY
        self._entries = {
            category: self._build_entry(category) for category in AssetCategory
        }
        self._validate()

    def _build_entry(self, category: AssetCategory) -> CategoryPaths:
        if category is AssetCategory.MARKUP:
            output_dir = self.public_dir
            assets = self._rel(self.public_dir / ASSETS_DIR)
            clean = (
                f"{self._rel(output_dir)}/**/*",
                f"!{assets}",
                f"!{assets}/**/*",
            )
        else:
            output_dir = self.assets_dir / ASSET_SUBDIRS[category]
            clean = (f"{self._rel(output_dir)}/**/*",)
        return CategoryPaths(
            category=category,
            root=self.root,
            input_glob=INPUT_GLOBS[category],
            output_dir=output_dir,
            clean_patterns=clean,
        )

    def _rel(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()

    def _validate(self) -> None:
        seen: dict[Path, AssetCategory] = {}
        for category, entry in self._entries.items():
            other = seen.get(entry.output_dir)
            if other is not None:
                raise ValueError(
                    f"{category.value} and {other.value} share output directory {entry.output_dir}"
                )
            seen[entry.output_dir] = category

    @property
    def clean_all_patterns(self) -> tuple[str, ...]:
        """Patterns removing the whole public site."""
        return (f"{self._rel(self.public_dir)}/**/*",)

    def __getitem__(self, category: AssetCategory | str) -> CategoryPaths:
        try:
            return self._entries[AssetCategory(category)]
        except ValueError:
            raise KeyError(category) from None

    def __iter__(self) -> Iterator[AssetCategory]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
