"""Detect broken links in Markdown files.

Links to missing files, and links to missing headers inside existing files,
are reported with their file and line. Check a file or a whole directory with
:func:`check_broken_links`, or from the command line::

    broken-md-links docs/
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

__version__ = "0.1.0"
__all__ = [
    "BrokenLinksError",
    "CheckerIOError",
    "CheckerOptions",
    "DetectedBrokenLink",
    "SlugCache",
    "check_broken_links",
]

_EXPORTS: dict[str, tuple[str, str]] = {
    "BrokenLinksError": ("broken_md_links.core.errors", "BrokenLinksError"),
    "CheckerIOError": ("broken_md_links.core.errors", "CheckerIOError"),
    "CheckerOptions": ("broken_md_links.core.config", "CheckerOptions"),
    "DetectedBrokenLink": ("broken_md_links.core.errors", "DetectedBrokenLink"),
    "SlugCache": ("broken_md_links.core.cache", "SlugCache"),
    "check_broken_links": ("broken_md_links.core.walker", "check_broken_links"),
}


def __getattr__(name: str) -> Any:
    """Lazily resolve exports so importing the package stays cheap."""
    try:
        module_path, attr_name = _EXPORTS[name]
    except KeyError as exc:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}") from exc
    module = import_module(module_path)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    """Expose dynamically-resolved attributes via dir()."""
    return sorted(list(globals().keys()) + __all__)
