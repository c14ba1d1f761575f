"""
Glob matching for project-relative source and output patterns.

Patterns use POSIX separators and are relative to the project root:

- ``*`` matches within one path segment, ``?`` matches one character
- ``**/`` matches zero or more directories, a trailing ``**`` matches everything below
- wildcards skip names starting with ``.``
- a leading ``!`` turns a pattern into an exclusion
"""

import os
import re
from collections.abc import Iterable, Iterator
from functools import lru_cache
from pathlib import Path

MAGIC_CHARS = "*?["


# A path segment that does not start with a dot
SEGMENT = r"(?!\.)[^/]*"


@lru_cache(maxsize=256)
def glob_to_regex(pattern: str) -> re.Pattern:
    """
    Compile a glob into a regex matched against a relative POSIX path.

    Wildcards never match a leading dot, so hidden files and directories
    are only selected by patterns that name the dot explicitly.
    """
    pattern = normalize(pattern)
    out = []
    i = 0
    while i < len(pattern):
        segment_start = i == 0 or pattern[i - 1] == "/"
        if pattern.startswith("**/", i):
            out.append(f"(?:{SEGMENT}/)*")
            i += 3
        elif pattern.startswith("**", i):
            out.append(f"(?:{SEGMENT}(?:/{SEGMENT})*)?")
            i += 2
        elif pattern[i] == "*":
            out.append(SEGMENT if segment_start else "[^/]*")
            i += 1
        elif pattern[i] == "?":
            out.append(r"[^/.]" if segment_start else "[^/]")
            i += 1
        else:
            out.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(out) + r"\Z")


def normalize(pattern: str) -> str:
    """Strip a leading ``./`` and convert separators."""
    pattern = pattern.replace("\\", "/")
    while pattern.startswith("./"):
        pattern = pattern[2:]
    return pattern


def glob_base(pattern: str) -> str:
    """
    Leading directory of a glob before the first magic segment.

    ``src/scss/**/*.scss`` -> ``src/scss``; ``src/javascript/app.js`` -> ``src/javascript``
    """
    parts = normalize(pattern).split("/")
    base = []
    for part in parts[:-1]:
        if any(ch in part for ch in MAGIC_CHARS):
            break
        base.append(part)
    return "/".join(base)


def split_patterns(patterns: Iterable[str]) -> tuple[list[str], list[str]]:
    """Separate include patterns from ``!`` exclusions."""
    includes: list[str] = []
    excludes: list[str] = []
    for pattern in patterns:
        if pattern.startswith("!"):
            excludes.append(normalize(pattern[1:]))
        else:
            includes.append(normalize(pattern))
    return includes, excludes


def relative_posix(path: Path, root: Path) -> str | None:
    """Path relative to root as a POSIX string, or None if outside root."""
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return None


def matches(path: Path, patterns: Iterable[str], root: Path) -> bool:
    """Check a path against include patterns minus exclusions."""
    rel = relative_posix(path, root)
    if rel is None:
        return False
    includes, excludes = split_patterns(patterns)
    return _matches_rel(rel, includes, excludes)


def _matches_rel(rel: str, includes: list[str], excludes: list[str]) -> bool:
    if not any(glob_to_regex(p).match(rel) for p in includes):
        return False
    return not any(glob_to_regex(p).match(rel) for p in excludes)


def check_within_root(patterns: Iterable[str], root: Path) -> None:
    """Reject patterns whose base directory escapes the project root."""
    includes, _ = split_patterns(patterns)
    for pattern in includes:
        if pattern.startswith("/") or relative_posix(root / glob_base(pattern), root) is None:
            raise ValueError(f"Pattern escapes project root: {pattern}")


def walk(
    patterns: Iterable[str], root: Path, *, include_dirs: bool = False
) -> Iterator[Path]:
    """
    Yield paths under the pattern bases that match, deepest entries first.

    Bottom-up order lets callers remove files before their directories.
    """
    patterns = list(patterns)
    includes, excludes = split_patterns(patterns)
    check_within_root(patterns, root)

    seen: set[Path] = set()
    for pattern in includes:
        base = root / glob_base(pattern)
        if not base.is_dir():
            continue
        for path, is_dir in _walk_dir(base):
            if path in seen or (is_dir and not include_dirs):
                continue
            rel = path.relative_to(root).as_posix()
            if _matches_rel(rel, includes, excludes):
                seen.add(path)
                yield path


def _walk_dir(base: Path) -> list[tuple[Path, bool]]:
    entries: list[tuple[Path, bool]] = []
    for dirpath, dirnames, filenames in os.walk(base, topdown=False):
        current = Path(dirpath)
        for name in sorted(filenames):
            entries.append((current / name, False))
        for name in sorted(dirnames):
            entries.append((current / name, True))
    return entries


def expand(patterns: Iterable[str], root: Path) -> list[Path]:
    """Sorted list of files matching the patterns."""
    return sorted(walk(patterns, root))
