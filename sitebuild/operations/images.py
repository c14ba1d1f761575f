"""
Image optimization operations.

Copies each source image to the output directory and runs the enabled
recompression passes for its format. A pass writes to a temporary file that
replaces the output only when it is smaller.
"""

import shutil
from dataclasses import dataclass
from pathlib import Path

from sitebuild.config.categories import AssetCategory
from sitebuild.config.options import ImageOptions
from sitebuild.config.paths import PathTable
from sitebuild.core.files import file_size_kb
from sitebuild.utils.logging import logger
from sitebuild.utils.subprocess import resolve_tool, run_command


@dataclass(frozen=True)
class ImagePass:
    """
    One external optimizer invocation.

    ``args`` may reference ``{src}`` (current output) and ``{dst}`` (temporary
    file, pre-filled with a copy of the current output for in-place tools).
    """

    option: str
    tool: str
    extensions: tuple[str, ...]
    args: tuple[str, ...]
    lossy: bool = False
    ok_codes: tuple[int, ...] = (0,)


PNG = (".png",)
JPEG = (".jpg", ".jpeg")

# Lossy passes come before lossless ones for the same format
IMAGE_PASSES = [
    # pngquant exits 98/99 when it declines to write a result
    ImagePass("pngquant", "pngquant", PNG, ("--force", "--strip", "--output", "{dst}", "--", "{src}"), lossy=True, ok_codes=(0, 98, 99)),
    ImagePass("zopflipng", "zopflipng", PNG, ("-y", "{src}", "{dst}")),
    ImagePass("optipng", "optipng", PNG, ("-quiet", "-o2", "{dst}")),
    ImagePass("advpng", "advpng", PNG, ("--recompress", "--shrink-extra", "--quiet", "{dst}")),
    ImagePass("jpeg_recompress", "jpeg-recompress", JPEG, ("--quiet", "--strip", "{src}", "{dst}"), lossy=True),
    ImagePass("mozjpeg", "cjpeg", JPEG, ("-quality", "80", "-optimize", "-progressive", "-outfile", "{dst}", "{src}"), lossy=True),
    ImagePass("jpegoptim", "jpegoptim", JPEG, ("--strip-all", "--all-progressive", "--quiet", "{dst}")),
    ImagePass("gifsicle", "gifsicle", (".gif",), ("--optimize=3", "--output", "{dst}", "{src}")),
    ImagePass("svgo", "svgo", (".svg",), ("--quiet", "--input", "{src}", "--output", "{dst}")),
]


def passes_for(path: Path, options: ImageOptions) -> list[ImagePass]:
    """Enabled passes that apply to a file's extension, in run order."""
    suffix = path.suffix.lower()
    return [
        p
        for p in IMAGE_PASSES
        if suffix in p.extensions and options.enabled(p.option, p.lossy)
    ]


def apply_pass(image_pass: ImagePass, command: list[str], target: Path) -> bool:
    """
    Run one pass against target.

    Returns:
        True if the optimized file replaced the target
    """
    temp = target.with_name(f"{target.stem}.opt{target.suffix}")
    shutil.copyfile(target, temp)
    try:
        args = [a.format(src=target, dst=temp) for a in image_pass.args]
        run_command([*command, *args], ok_codes=image_pass.ok_codes)
        if temp.stat().st_size < target.stat().st_size:
            temp.replace(target)
            return True
        return False
    finally:
        if temp.exists():
            temp.unlink()


def optimize_image(
    source: Path,
    target: Path,
    options: ImageOptions,
    tools: dict[str, list[str] | None],
) -> Path:
    """Copy one image and run its optimization passes."""
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, target)
    before = file_size_kb(target)

    for image_pass in passes_for(target, options):
        command = tools.get(image_pass.tool)
        if command is None:
            continue
        if apply_pass(image_pass, command, target):
            logger.debug(f"  {image_pass.option}: {target.name} reduced")

    after = file_size_kb(target)
    logger.info(f"Optimized {target.name} ({before:.1f} KB -> {after:.1f} KB)")
    return target


def find_tools(root: Path, options: ImageOptions) -> dict[str, list[str] | None]:
    """Resolve the optimizer binaries for every enabled pass."""
    tools: dict[str, list[str] | None] = {}
    for image_pass in IMAGE_PASSES:
        if image_pass.tool in tools or not options.enabled(image_pass.option, image_pass.lossy):
            continue
        tools[image_pass.tool] = resolve_tool(image_pass.tool, root)
        if tools[image_pass.tool] is None:
            logger.warning(f"{image_pass.tool} not found, skipping {image_pass.option} pass")
    return tools


def optimize_images(table: PathTable, options: ImageOptions) -> list[Path]:
    """
    Optimize all source images into the images output directory.

    Returns:
        Paths of the written images
    """
    entry = table[AssetCategory.IMAGES]
    sources = entry.sources()
    if not sources:
        logger.warning(f"No images match {entry.input_glob}")
        return []

    tools = find_tools(table.root, options)
    written = [
        optimize_image(source, entry.destination_for(source), options, tools)
        for source in sources
    ]
    logger.info(f"Optimized {len(written)} images")
    return written
