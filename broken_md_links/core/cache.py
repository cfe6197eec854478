"""Memoized heading slugs shared across a whole scan."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from typing import TypeAlias

from broken_md_links.core.paths import PathInput, canonicalize, simplify_path
from broken_md_links.core.slugs import generate_slugs

SlugGenerator: TypeAlias = Callable[[Path], list[str]]


class SlugCache(Mapping[Path, tuple[str, ...]]):
    """Mapping from canonical file paths to the slugs of their headings.

    Entries are computed on first access and never invalidated: file contents
    are assumed not to change during a scan. Keys are always canonical, so
    ``docs/../docs/a.md`` and ``docs/a.md`` share a single entry.

    The cache is not thread-safe. One instance is created per top-level scan
    and passed down explicitly to every file and directory check.
    """

    def __init__(
        self,
        generator: SlugGenerator | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize an empty cache.

        Args:
            generator: Function extracting slugs from a file, defaults to
                :func:`generate_slugs`
            logger: Optional logger instance
        """
        self._generator = generator
        self._entries: dict[Path, tuple[str, ...]] = {}
        self.logger: logging.Logger = logger or logging.getLogger(__name__)

        # Statistics
        self.hits: int = 0
        self.misses: int = 0

    def slugs_for(self, path: PathInput) -> tuple[str, ...]:
        """Return the slugs of ``path``, generating them on first access.

        Raises:
            OSError: If the path cannot be canonicalized or read.
            UnicodeDecodeError: If the file is not valid UTF-8.
        """
        key = canonicalize(path)
        cached = self._entries.get(key)
        if cached is not None:
            self.hits += 1
            self.logger.debug("Slug cache hit for '%s'", simplify_path(path))
            return cached

        self.misses += 1
        generator = self._generator or generate_slugs
        slugs = tuple(generator(key))
        self._entries[key] = slugs
        return slugs

    def __getitem__(self, key: Path) -> tuple[str, ...]:
        return self._entries[key]

    def __iter__(self) -> Iterator[Path]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __repr__(self) -> str:
        return f"SlugCache(entries={len(self)}, hits={self.hits}, misses={self.misses})"
