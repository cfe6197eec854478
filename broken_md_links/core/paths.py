"""Path helpers used for display strings and cache keys.

Two distinct notions of "normalized" path live here:

* ``simplify_path`` is purely lexical. It never touches the filesystem and is
  only meant to produce readable paths for diagnostics.
* ``canonicalize`` resolves symlinks, ``.`` and ``..`` against the real
  filesystem and fails when the path does not exist. Its output is used as the
  key of the slug cache so that different spellings of one file share an entry.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePath
from typing import TypeAlias

PathInput: TypeAlias = str | os.PathLike[str]

_CURRENT_DIR = "."
_PARENT_DIR = ".."


def simplify_path(path: PathInput) -> str:
    """Collapse ``.`` components and cancel ``name/..`` pairs without any I/O.

    A ``..`` only removes the component right before it when that component is
    a regular name. At the start of a relative path, or after another ``..``,
    it is preserved so the path keeps pointing to the same place. After the
    root of an absolute path it is dropped, as the root is its own parent.

    Examples:
        >>> simplify_path("../a/b/../c")
        '../a/c'
        >>> simplify_path("a/../b")
        'b'
        >>> simplify_path("../..")
        '../..'
    """
    pure = PurePath(path)
    anchor = pure.anchor
    out: list[str] = []

    for index, part in enumerate(pure.parts):
        if index == 0 and anchor and part == anchor:
            out.append(part)
        elif part == _CURRENT_DIR:
            continue
        elif part == _PARENT_DIR:
            if out and _is_normal(out[-1], anchor, len(out) == 1):
                out.pop()
            elif not pure.is_absolute():
                out.append(part)
        else:
            out.append(part)

    if not out:
        return ""
    return str(PurePath(*out))


def _is_normal(part: str, anchor: str, is_first: bool) -> bool:
    if part == _PARENT_DIR:
        return False
    return not (is_first and anchor and part == anchor)


def canonicalize(path: PathInput) -> Path:
    """Return the absolute, symlink-free form of an existing path.

    Raises:
        OSError: If the path does not exist or cannot be resolved.
    """
    try:
        return Path(path).resolve(strict=True)
    except RuntimeError as exc:
        # Symlink loops are reported as RuntimeError on older interpreters.
        raise OSError(f"Unable to resolve '{simplify_path(path)}': {exc}") from exc
