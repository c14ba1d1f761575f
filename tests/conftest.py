"""Shared pytest fixtures."""

import pytest

from sitebuild.config.paths import PathTable

SOURCE_FILES = {
    "src/fonts/icons.woff": b"wOFF\x00\x01fontdata",
    "src/fonts/sub/icons.ttf": b"\x00\x01\x00\x00ttfdata",
    "src/html/index.html": b"<html><body>home</body></html>",
    "src/html/about/index.html": b"<html><body>about</body></html>",
    "src/scss/style.scss": b"@import 'colors';\nbody { color: $brand; }\n",
    "src/scss/_colors.scss": b"$brand: #c00;\n",
    "src/javascript/app.js": b"import './util';\n",
    "src/javascript/util.js": b"export default 1;\n",
    "src/images/logo.png": b"\x89PNG\r\n\x1a\nnotreallyapng",
}


@pytest.fixture
def project(tmp_path):
    """Create a project tree with one source file per category."""
    for rel, data in SOURCE_FILES.items():
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    return tmp_path.resolve()


@pytest.fixture
def table(project):
    """Path table for the sample project."""
    return PathTable(project, "demo")
