"""Tests for cleanup operations."""

from sitebuild.config.categories import AssetCategory
from sitebuild.operations.clean import clean_all, clean_category


def _touch(path, data="x"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data)
    return path


def test_markup_cleanup_keeps_assets(table, project):
    """Test deleting markup never touches public/assets."""
    _touch(project / "public/index.html")
    _touch(project / "public/about/index.html")
    font = _touch(project / "public/assets/demo/fonts/icons.woff")
    css = _touch(project / "public/assets/demo/stylesheets/style.css")

    clean_category(table, AssetCategory.MARKUP)

    assert not (project / "public/index.html").exists()
    assert not (project / "public/about").exists()
    assert font.exists()
    assert css.exists()


def test_category_cleanup_stays_in_output_dir(table, project):
    """Test a category only deletes inside its own output directory."""
    _touch(project / "public/assets/demo/fonts/sub/icons.woff")
    image = _touch(project / "public/assets/demo/images/logo.png")
    page = _touch(project / "public/index.html")

    removed = clean_category(table, AssetCategory.FONTS)

    fonts_dir = project / "public/assets/demo/fonts"
    assert removed
    assert all(fonts_dir in p.parents for p in removed)
    assert fonts_dir.is_dir()
    assert not any(fonts_dir.iterdir())
    assert image.exists()
    assert page.exists()


def test_cleanup_is_idempotent(table, project):
    """Test cleaning twice, or with nothing generated, is a no-op."""
    _touch(project / "public/assets/demo/javascript/bundle.js")
    clean_category(table, AssetCategory.SCRIPTS)
    assert clean_category(table, AssetCategory.SCRIPTS) == []
    assert clean_category(table, AssetCategory.IMAGES) == []


def test_clean_all_removes_public_contents(table, project):
    """Test clean:all empties the public directory."""
    _touch(project / "public/index.html")
    _touch(project / "public/assets/demo/fonts/icons.woff")

    clean_all(table)

    assert (project / "public").is_dir()
    assert list((project / "public").iterdir()) == []
    assert (project / "src/fonts/icons.woff").exists()
