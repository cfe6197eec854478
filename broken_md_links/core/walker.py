"""Recursive scanning of directories and the top-level entry point."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from broken_md_links.core.cache import SlugCache
from broken_md_links.core.checker import FileChecker
from broken_md_links.core.config import CheckerOptions
from broken_md_links.core.errors import BrokenLinksError, CheckerIOError, DetectedBrokenLink
from broken_md_links.core.paths import PathInput, simplify_path

MARKDOWN_EXTENSION = ".md"


class DirectoryWalker:
    """Checks every Markdown file below a directory.

    Subdirectories are visited recursively and ``.md`` files (extension
    compared case-insensitively) are handed to a :class:`FileChecker` sharing
    the walker's options and slug cache. Entries are visited in the order the
    filesystem lists them.
    """

    def __init__(
        self,
        options: CheckerOptions | None = None,
        cache: SlugCache | None = None,
        logger: logging.Logger | None = None,
        file_checker: FileChecker | None = None,
    ) -> None:
        """Initialize the walker.

        Args:
            options: Scan options, defaults to ``CheckerOptions()``
            cache: Slug cache shared by every checked file
            logger: Optional logger instance
            file_checker: Checker used for each Markdown file
        """
        self.options = options or CheckerOptions()
        self.cache = cache if cache is not None else SlugCache()
        self.logger: logging.Logger = logger or logging.getLogger(__name__)
        self.file_checker = file_checker or FileChecker(self.options, self.cache)

    def walk(self, path: PathInput) -> list[DetectedBrokenLink]:
        """Return the broken links of every Markdown file below ``path``.

        Raises:
            CheckerIOError: If a directory cannot be listed, an entry type
                cannot be read, or a file cannot be checked. The whole walk is
                aborted.
        """
        path = Path(path)
        display = simplify_path(path)
        self.logger.debug("Analyzing directory: %s", display)

        errors: list[DetectedBrokenLink] = []
        try:
            with os.scandir(path) as entries:
                for entry in entries:
                    errors.extend(self._check_entry(path / entry.name, entry, display))
        except OSError as exc:
            raise CheckerIOError(
                f"Failed to read input directory at '{display}': {exc}", path=path
            ) from exc
        return errors

    def _check_entry(
        self, path: Path, entry: os.DirEntry[str], parent_display: str
    ) -> list[DetectedBrokenLink]:
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = not is_dir and entry.is_file(follow_symlinks=False)
        except OSError as exc:
            raise CheckerIOError(
                f"Failed to read file type of item at '{simplify_path(path)}': {exc}",
                path=path,
            ) from exc

        if is_dir:
            return self.walk(path)
        if is_file:
            if path.suffix.lower() == MARKDOWN_EXTENSION:
                return self.file_checker.check(path)
            self.logger.debug("In '%s': skipping non-Markdown file '%s'", parent_display, entry.name)
            return []

        self.logger.warning(
            "Item at path '%s' is neither a file nor a directory so it will be ignored",
            simplify_path(path),
        )
        return []


def check_dir(
    path: PathInput,
    options: CheckerOptions | None = None,
    cache: SlugCache | None = None,
) -> list[DetectedBrokenLink]:
    """Return the broken links of every Markdown file below a directory."""
    return DirectoryWalker(options, cache).walk(path)


def check_broken_links(
    path: PathInput,
    options: CheckerOptions | None = None,
    cache: SlugCache | None = None,
) -> None:
    """Check broken links in a Markdown file or directory.

    Directories are scanned recursively, anything else is checked as a single
    Markdown file. A single slug cache is shared by the whole scan; pass one
    explicitly to reuse it across calls.

    Raises:
        CheckerIOError: If something cannot be read. No report is produced.
        BrokenLinksError: If at least one link is broken, with every detected
            problem in discovery order.
    """
    options = options or CheckerOptions()
    cache = cache if cache is not None else SlugCache()

    if Path(path).is_dir():
        errors = check_dir(path, options, cache)
    else:
        errors = FileChecker(options, cache).check(path)

    if errors:
        raise BrokenLinksError(errors)
