"""Heading slug extraction.

A slug is the anchor a renderer generates for a heading, e.g. ``## My header``
can be linked to with ``file.md#my-header``. Slugs are collected in document
order, and repeated headings get a numeric suffix (``intro``, ``intro-1``...).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum, auto
from pathlib import Path

from broken_md_links.core.markdown import Event, EventKind, iter_events
from broken_md_links.core.paths import PathInput, simplify_path

logger = logging.getLogger(__name__)

_TITLE_EVENTS = frozenset(
    {EventKind.TEXT, EventKind.CODE, EventKind.HTML, EventKind.FOOTNOTE_REFERENCE}
)


def slugify(header: str) -> str:
    """Slugify a Markdown header.

    Spaces become hyphens, ASCII letters are lowercased, ASCII digits, ``-``
    and ``_`` are kept, and every other character is dropped.

    Examples:
        >>> slugify("My super header")
        'my-super-header'
        >>> slugify("I love headers!")
        'i-love-headers'
    """
    return "".join(
        char
        for char in header.replace(" ", "-")
        if char.isascii() and (char.isalnum() or char in "-_")
    ).lower()


class _State(Enum):
    IDLE = auto()
    AWAITING_TITLE = auto()


class HeadingSlugCollector:
    """Two-state machine turning heading events into unique slugs."""

    def __init__(self, source: str = "<memory>") -> None:
        self.source = source
        self.slugs: list[str] = []
        self._state = _State.IDLE
        self._title: list[str] = []
        self._seen: set[str] = set()
        self._occurrences: dict[str, int] = {}

    def feed(self, event: Event) -> None:
        """Advance the state machine with a single event."""
        if event.kind is EventKind.START and event.tag == "heading":
            if self._state is _State.AWAITING_TITLE:
                logger.warning(
                    "In '%s': heading at line %d started before the previous one ended",
                    self.source,
                    event.line,
                )
            self._state = _State.AWAITING_TITLE
            self._title = []
        elif event.kind is EventKind.END and event.tag == "heading":
            if self._state is _State.AWAITING_TITLE:
                self._finish_heading(event.line)
            self._state = _State.IDLE
        elif self._state is _State.AWAITING_TITLE and event.kind in _TITLE_EVENTS:
            self._title.append(event.text)

    def feed_all(self, events: Iterable[Event]) -> list[str]:
        for event in events:
            self.feed(event)
        return self.slugs

    def _finish_heading(self, line: int) -> None:
        title = "".join(self._title)
        if not title.strip():
            logger.warning("In '%s': heading at line %d has no title", self.source, line)

        slug = slugify(title)
        count = self._occurrences.get(slug, 0)
        candidate = slug if count == 0 else f"{slug}-{count}"
        while candidate in self._seen:
            count += 1
            candidate = f"{slug}-{count}"
        self._occurrences[slug] = count + 1
        self._seen.add(candidate)
        self.slugs.append(candidate)
        logger.debug("In '%s': found header: #%s", self.source, candidate)


def slugs_from_content(content: str, source: str = "<memory>") -> list[str]:
    """Return the slugs of every heading in a Markdown string."""
    return HeadingSlugCollector(source).feed_all(iter_events(content))


def generate_slugs(path: PathInput) -> list[str]:
    """Get all headers of a Markdown file as slugs.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    display = simplify_path(path)
    logger.debug("Generating slugs for file: %s", display)
    content = Path(path).read_text(encoding="utf-8")
    logger.debug("In '%s': just read file, which is %d bytes long.", display, len(content))
    return slugs_from_content(content, display)
