"""Tests for lexical path simplification and canonicalization."""

import os
from pathlib import Path

import pytest

from broken_md_links.core.paths import canonicalize, simplify_path


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("../a/b/../c", "../a/c"),
        ("a/../b", "b"),
        ("../..", "../.."),
        ("./a/./b", "a/b"),
        ("a/b/../../..", ".."),
        ("/a/../../b", "/b"),
        ("/..", "/"),
        ("docs/guide.md", "docs/guide.md"),
    ],
)
def test_simplify_path(raw: str, expected: str) -> None:
    """Parent components only cancel a preceding normal component."""
    assert simplify_path(raw) == expected


def test_simplify_path_accepts_path_objects() -> None:
    assert simplify_path(Path("x/y/../z.md")) == "x/z.md"


def test_simplify_path_does_not_touch_the_filesystem(tmp_path: Path) -> None:
    """Symlinks are not followed: simplification is purely lexical."""
    real = tmp_path / "real" / "nested"
    real.mkdir(parents=True)
    link = tmp_path / "link"
    link.symlink_to(real)

    simplified = simplify_path(link / ".." / "file.md")
    assert simplified == str(tmp_path / "file.md")
    assert os.path.realpath(link / ".." / "file.md") == str((tmp_path / "real" / "file.md").resolve())


def test_canonicalize_resolves_relative_spellings(tmp_path: Path) -> None:
    (tmp_path / "docs").mkdir()
    target = tmp_path / "docs" / "a.md"
    target.write_text("# A\n", encoding="utf-8")

    assert canonicalize(tmp_path / "docs" / ".." / "docs" / "a.md") == canonicalize(target)
    assert canonicalize(target).is_absolute()


def test_canonicalize_missing_path_raises(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        canonicalize(tmp_path / "missing.md")
