"""
Option tables handed to the external transform and lint collaborators.
"""

from dataclasses import dataclass, field

# Sass include paths from the bourbon and bourbon-neat npm packages
SASS_INCLUDE_PATHS = [
    "node_modules/bourbon/core",
    "node_modules/bourbon-neat/core",
]

# PostCSS plugins run after Sass compilation
POSTCSS_PLUGINS = [
    "autoprefixer",  # Vendor prefixes for the target browsers
    "css-mqpacker",  # Pack identical media queries together
]

# Options passed to each plugin when PostCSS loads it
POSTCSS_PLUGIN_OPTIONS = {
    "css-mqpacker": {"sort": True},
}

# cssnano options for minified copies
CSSNANO_OPTIONS = {"safe": True}

# Style sources skipped by the linter
STYLE_LINT_EXCLUDES = [
    "src/scss/bootstrap/**",
    "src/scss/_bootstrap*.scss",
    "node_modules/**",
]

# Script sources skipped by the linter
SCRIPT_LINT_EXCLUDES = [
    "src/javascript/bootstrap*.js",
    "src/javascript/bootstrap/*.js",
    "src/javascript/vendor/*.js",
    "node_modules/**",
]


@dataclass(frozen=True)
class StyleOptions:
    """Sass, PostCSS and minification settings."""

    include_paths: tuple[str, ...] = tuple(SASS_INCLUDE_PATHS)
    output_style: str = "expanded"  # nested, expanded, compact, compressed
    source_maps: bool = True
    browsers: str = "last 2 versions"
    postcss_plugins: tuple[str, ...] = tuple(POSTCSS_PLUGINS)
    plugin_options: dict = field(default_factory=lambda: dict(POSTCSS_PLUGIN_OPTIONS), hash=False)
    cssnano_options: dict = field(default_factory=lambda: dict(CSSNANO_OPTIONS), hash=False)
    minify: bool = True
    minified_suffix: str = ".min.css"


@dataclass(frozen=True)
class ScriptOptions:
    """Webpack bundle settings."""

    bundle_name: str = "bundle.js"
    mode: str = "production"
    config_file: str = "webpack.config.js"


@dataclass(frozen=True)
class ImageOptions:
    """
    Image recompression passes.

    All enabled passes for a file's format run in sequence, lossy passes
    first. ``allow_lossy=False`` keeps only the lossless passes.
    """

    pngquant: bool = True
    optipng: bool = False
    zopflipng: bool = True
    advpng: bool = True
    jpeg_recompress: bool = False
    jpegoptim: bool = True
    mozjpeg: bool = True
    gifsicle: bool = True
    svgo: bool = True
    allow_lossy: bool = True

    def enabled(self, name: str, lossy: bool) -> bool:
        """Whether the pass with this option name should run."""
        if lossy and not self.allow_lossy:
            return False
        return bool(getattr(self, name))


@dataclass(frozen=True)
class LintOptions:
    """Linter exclusion lists."""

    style_excludes: tuple[str, ...] = tuple(STYLE_LINT_EXCLUDES)
    script_excludes: tuple[str, ...] = tuple(SCRIPT_LINT_EXCLUDES)


@dataclass(frozen=True)
class BuildOptions:
    """All collaborator options, grouped for the task graph."""

    styles: StyleOptions = field(default_factory=StyleOptions)
    scripts: ScriptOptions = field(default_factory=ScriptOptions)
    images: ImageOptions = field(default_factory=ImageOptions)
    lint: LintOptions = field(default_factory=LintOptions)
