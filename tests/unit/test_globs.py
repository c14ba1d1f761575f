"""Tests for glob matching and expansion."""

import pytest

from sitebuild.core.globs import (
    check_within_root,
    expand,
    glob_base,
    glob_to_regex,
    matches,
)


def test_double_star_slash_matches_zero_directories():
    """Test **/ matches files directly under the base."""
    regex = glob_to_regex("src/scss/**/*.scss")
    assert regex.match("src/scss/x.scss")
    assert regex.match("src/scss/a/b/x.scss")
    assert not regex.match("src/scss/x.css")
    assert not regex.match("src/scssx.scss")


def test_trailing_double_star_matches_everything_below():
    """Test a trailing ** matches nested files but not siblings."""
    regex = glob_to_regex("./src/fonts/**")
    assert regex.match("src/fonts/a.woff")
    assert regex.match("src/fonts/sub/a.ttf")
    assert not regex.match("src/fontsx/a.woff")


def test_single_star_stays_in_segment():
    """Test * does not cross directory separators."""
    regex = glob_to_regex("src/javascript/vendor/*.js")
    assert regex.match("src/javascript/vendor/jquery.js")
    assert not regex.match("src/javascript/vendor/sub/jquery.js")


def test_glob_base():
    """Test leading non-magic directory extraction."""
    assert glob_base("src/scss/**/*.scss") == "src/scss"
    assert glob_base("./src/fonts/**") == "src/fonts"
    assert glob_base("src/javascript/app.js") == "src/javascript"
    assert glob_base("*.js") == ""


def test_expand_applies_exclusions(project):
    """Test ! patterns remove matches."""
    (project / "src/javascript/vendor").mkdir()
    (project / "src/javascript/vendor/lib.js").write_text("x")

    files = expand(["src/javascript/**/*.js", "!src/javascript/vendor/*.js"], project)
    names = [f.relative_to(project).as_posix() for f in files]
    assert names == ["src/javascript/app.js", "src/javascript/util.js"]


def test_expand_missing_base_is_empty(project):
    """Test a glob over a missing directory yields nothing."""
    assert expand(["src/missing/**"], project) == []


def test_matches_outside_root(project, tmp_path_factory):
    """Test paths outside the project root never match."""
    other = tmp_path_factory.mktemp("other") / "src/scss/x.scss"
    assert not matches(other, ["src/scss/**/*.scss"], project)
    assert matches(project / "src/scss/x.scss", ["src/scss/**/*.scss"], project)


def test_patterns_escaping_root_are_rejected(project):
    """Test patterns reaching above the root raise."""
    with pytest.raises(ValueError, match="escapes"):
        check_within_root(["../elsewhere/**"], project)


def test_wildcards_skip_dotfiles():
    """Test * and ** never select hidden names."""
    assert not glob_to_regex("src/fonts/**").match("src/fonts/.DS_Store")
    assert not glob_to_regex("src/fonts/**").match("src/fonts/.cache/icons.woff")
    assert not glob_to_regex("src/scss/**/*.scss").match("src/scss/.#style.scss")
    assert not glob_to_regex("src/scss/**/*.scss").match("src/scss/.git/x.scss")
    assert not glob_to_regex("src/html/?tmp").match("src/html/.tmp")
    assert glob_to_regex("src/javascript/bootstrap*.js").match("src/javascript/bootstrap.min.js")


def test_explicit_dot_still_matches():
    """Test patterns that spell out the dot select hidden files."""
    assert glob_to_regex("src/html/.htaccess").match("src/html/.htaccess")
    assert glob_to_regex("src/**/.eslintrc").match("src/javascript/.eslintrc")


def test_expand_ignores_hidden_files(project):
    """Test OS metadata and editor swap files are not expanded."""
    (project / "src/fonts/.DS_Store").write_bytes(b"meta")
    (project / "src/fonts/.icons.woff.swp").write_bytes(b"swap")

    files = expand(["src/fonts/**"], project)
    assert [f.name for f in files] == ["icons.woff", "icons.ttf"]
