"""Tests for heading slug extraction."""

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from broken_md_links.core.markdown import Event, EventKind
from broken_md_links.core.slugs import (
    HeadingSlugCollector,
    generate_slugs,
    slugify,
    slugs_from_content,
)


@pytest.mark.parametrize(
    "header,expected",
    [
        ("My super header", "my-super-header"),
        ("I love headers!", "i-love-headers"),
        ("C++ guide", "c-guide"),
        ("snake_case & kebab-case", "snake_case--kebab-case"),
        ("Version 2.0", "version-20"),
        ("Élan vital", "lan-vital"),
    ],
)
def test_slugify(header: str, expected: str) -> None:
    """Punctuation and non-ASCII characters are dropped, not replaced."""
    assert slugify(header) == expected


def test_duplicate_headings_are_suffixed_in_document_order() -> None:
    content = "# Intro\n\n## Intro\n\n### Other\n\n#### Intro\n"
    assert slugs_from_content(content) == ["intro", "intro-1", "other", "intro-2"]


def test_suffixed_slug_never_collides_with_a_real_heading() -> None:
    content = "# Intro\n\n# Intro\n\n# Intro-1\n"
    slugs = slugs_from_content(content)

    assert slugs == ["intro", "intro-1", "intro-1-1"]
    assert len(set(slugs)) == len(slugs)


def test_title_collects_every_text_bearing_event() -> None:
    content = "# Using `check()` with <kbd>Ctrl</kbd> and [links](x.md)[^n]\n\n[^n]: note\n"
    assert slugs_from_content(content) == ["using-check-with-kbdctrlkbd-and-linksn"]


def test_setext_and_emphasis_headings() -> None:
    content = "Setext *title*\n=============\n\n## **Bold** _move_\n"
    assert slugs_from_content(content) == ["setext-title", "bold-move"]


def test_heading_without_title_emits_warning(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="broken_md_links")

    slugs = slugs_from_content("#\n\n# Real\n", source="empty.md")

    assert slugs == ["", "real"]
    assert "heading at line 1 has no title" in caplog.text


def test_collector_ignores_events_outside_headings() -> None:
    collector = HeadingSlugCollector()
    collector.feed(Event(EventKind.TEXT, 1, text="Loose text"))
    collector.feed(Event(EventKind.START, 2, tag="heading"))
    collector.feed(Event(EventKind.TEXT, 2, text="Kept"))
    collector.feed(Event(EventKind.SOFT_BREAK, 2))
    collector.feed(Event(EventKind.START, 2, tag="emphasis"))
    collector.feed(Event(EventKind.TEXT, 2, text=" title"))
    collector.feed(Event(EventKind.END, 2, tag="emphasis"))
    collector.feed(Event(EventKind.END, 2, tag="heading"))
    collector.feed(Event(EventKind.END, 3, tag="heading"))

    assert collector.slugs == ["kept-title"]


def test_generate_slugs_reads_file(write_md: Callable[[str, str], Path]) -> None:
    path = write_md(
        "doc.md",
        """
        # Doc

        ## Section
        """,
    )
    assert generate_slugs(path) == ["doc", "section"]


def test_generate_slugs_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        generate_slugs(tmp_path / "missing.md")
