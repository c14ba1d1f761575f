"""
Stylesheet operations.

Compiles Sass with libsass, post-processes with PostCSS (vendor prefixes,
media query packing), writes minified copies and generates SassDoc.
"""

import json
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import sass

from sitebuild.config.categories import AssetCategory
from sitebuild.config.options import StyleOptions
from sitebuild.config.paths import PathTable
from sitebuild.core.globs import expand, glob_base
from sitebuild.pipeline.errors import TransformError
from sitebuild.utils.logging import logger
from sitebuild.utils.subprocess import node_command, run_command


def is_partial(path: Path) -> bool:
    """Sass partials (``_name.scss``) are only compiled through imports."""
    return path.name.startswith("_")


def compile_stylesheet(source: Path, target: Path, options: StyleOptions, root: Path) -> str:
    """
    Compile one Sass entry point to CSS.

    Raises:
        TransformError: If libsass rejects the source
    """
    include_paths = [
        str(root / p) for p in options.include_paths if (root / p).is_dir()
    ]
    kwargs = {
        "filename": str(source),
        "include_paths": include_paths,
        "output_style": options.output_style,
    }
    if options.source_maps:
        kwargs.update(
            source_map_filename=str(target.with_suffix(".css.map")),
            source_map_embed=True,
            source_map_contents=True,
            output_filename_hint=str(target),
        )

    try:
        result = sass.compile(**kwargs)
    except sass.CompileError as e:
        raise TransformError(f"Sass compilation failed for {source.name}: {e}") from e

    return result[0] if isinstance(result, tuple) else result


def postcss_config(plugins: list[tuple[str, dict]]) -> str:
    """Source of a postcss.config.js that loads plugins with their options."""
    lines = [f"    require({json.dumps(name)})({json.dumps(opts)})," for name, opts in plugins]
    return "module.exports = {\n  plugins: [\n" + "\n".join(lines) + "\n  ],\n};\n"


@contextmanager
def postcss_config_dir(plugins: list[tuple[str, dict]], root: Path) -> Iterator[Path]:
    """
    Temporary directory holding a generated PostCSS config.

    It lives under the project root so plugins resolve from node_modules.
    The dot prefix keeps it out of every source glob.
    """
    with tempfile.TemporaryDirectory(prefix=".postcss-", dir=root) as tmp:
        config_dir = Path(tmp)
        (config_dir / "postcss.config.js").write_text(postcss_config(plugins), encoding="utf-8")
        yield config_dir


def run_postcss(css_files: list[Path], options: StyleOptions, root: Path) -> None:
    """Run the configured PostCSS plugins over compiled files in place."""
    if not options.postcss_plugins or not css_files:
        return

    env = dict(os.environ, BROWSERSLIST=options.browsers)
    plugins = [(name, options.plugin_options.get(name, {})) for name in options.postcss_plugins]
    with postcss_config_dir(plugins, root) as config_dir:
        run_command(
            [
                *node_command("postcss", root),
                *(str(f) for f in css_files),
                "--replace",
                "--config",
                str(config_dir),
            ],
            f"PostCSS: {', '.join(options.postcss_plugins)}",
            cwd=root,
            env=env,
        )


def compile_styles(table: PathTable, options: StyleOptions) -> list[Path]:
    """
    Compile every non-partial Sass file into the stylesheets directory.

    Returns:
        Paths of the written CSS files
    """
    entry = table[AssetCategory.STYLES]
    sources = [s for s in entry.sources() if not is_partial(s)]
    if not sources:
        logger.warning(f"No Sass entry points match {entry.input_glob}")
        return []

    written: list[Path] = []
    for source in sources:
        target = entry.destination_for(source).with_suffix(".css")
        logger.info(f"Compiling {source.relative_to(table.root)}")
        css = compile_stylesheet(source, target, options, table.root)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(css, encoding="utf-8")
        written.append(target)

    run_postcss(written, options, table.root)
    logger.info(f"Compiled {len(written)} stylesheets")
    return written


def compiled_stylesheets(table: PathTable, options: StyleOptions) -> list[Path]:
    """Compiled (non-minified) CSS files currently in the output directory."""
    output = table[AssetCategory.STYLES].output_dir.relative_to(table.root).as_posix()
    return [
        p
        for p in expand([f"{output}/**/*.css"], table.root)
        if not p.name.endswith(options.minified_suffix)
    ]


def minify_styles(table: PathTable, options: StyleOptions) -> list[Path]:
    """
    Write a cssnano-minified copy next to every compiled stylesheet.

    Returns:
        Paths of the minified files
    """
    if not options.minify:
        logger.info("Stylesheet minification disabled")
        return []

    written: list[Path] = []
    with postcss_config_dir([("cssnano", options.cssnano_options)], table.root) as config_dir:
        for css in compiled_stylesheets(table, options):
            target = css.with_name(css.name[: -len(".css")] + options.minified_suffix)
            run_command(
                [
                    *node_command("postcss", table.root),
                    str(css),
                    "--config",
                    str(config_dir),
                    "--no-map",
                    "--output",
                    str(target),
                ],
                f"Minifying {css.name}",
                cwd=table.root,
            )
            written.append(target)
    return written


def document_styles(table: PathTable) -> Path:
    """Generate SassDoc documentation for the Sass sources."""
    source_dir = table.root / glob_base(table[AssetCategory.STYLES].input_glob)
    run_command(
        [
            *node_command("sassdoc", table.root),
            str(source_dir),
            "--dest",
            str(table.sassdoc_dir),
        ],
        f"Generating SassDoc into {table.sassdoc_dir}",
        cwd=table.root,
    )
    return table.sassdoc_dir
