"""Tests for the Markdown event stream adapter."""

import textwrap

from broken_md_links.core.markdown import (
    BrokenLink,
    Event,
    EventKind,
    LinkDefinition,
    LinkType,
    default_parser,
    iter_events,
)


def _links(content: str) -> list[Event]:
    return [
        event
        for event in iter_events(textwrap.dedent(content).lstrip("\n"))
        if event.kind is EventKind.START and event.tag == "link"
    ]


def test_heading_events_wrap_title_text() -> None:
    events = list(iter_events("# My `code` title\n"))
    kinds = [(event.kind, event.tag) for event in events]

    assert kinds[0] == (EventKind.START, "heading")
    assert kinds[-1] == (EventKind.END, "heading")
    assert [event.text for event in events if event.kind is EventKind.CODE] == ["code"]


def test_link_types_are_distinguished() -> None:
    links = _links(
        """
        [inline](a.md) [full][ref] [ref][] [ref] <https://example.com> <me@example.com>

        [ref]: b.md
        """
    )

    assert [link.link_type for link in links] == [
        LinkType.INLINE,
        LinkType.REFERENCE,
        LinkType.COLLAPSED,
        LinkType.SHORTCUT,
        LinkType.AUTOLINK,
        LinkType.EMAIL,
    ]
    assert links[0].destination == "a.md"
    assert links[1].destination == "b.md"


def test_destinations_are_not_percent_encoded() -> None:
    links = _links("[x](<dossier/été.md#titre>)\n")
    assert links[0].destination == "dossier/été.md#titre"


def test_link_lines_follow_the_source() -> None:
    links = _links(
        """
        # Title

        Some text
        spanning [first](a.md) lines
        and [second](b.md).

        - item
        - [third](c.md)
        """
    )

    assert [link.line for link in links] == [4, 5, 8]


def test_broken_reference_callback_is_invoked() -> None:
    seen: list[BrokenLink] = []

    def callback(link: BrokenLink) -> LinkDefinition | None:
        seen.append(link)
        return None

    content = "Intro\n\nA [missing link] and [text][nowhere].\n"
    events = list(iter_events(content, callback))

    assert [(link.reference, link.link_type, link.line) for link in seen] == [
        ("missing link", LinkType.SHORTCUT, 3),
        ("nowhere", LinkType.REFERENCE, 3),
    ]
    assert not [event for event in events if event.tag == "link"]


def test_callback_skips_defined_references_footnotes_and_tasks() -> None:
    seen: list[BrokenLink] = []

    content = textwrap.dedent(
        """
        - [x] done
        - [ ] todo

        See [defined] and a note[^1].

        [defined]: a.md
        [^1]: The note.
        """
    )
    events = list(iter_events(content, lambda link: seen.append(link)))

    assert seen == []
    markers = [event for event in events if event.kind is EventKind.TASK_LIST_MARKER]
    assert [marker.checked for marker in markers] == [True, False]
    assert [event.text for event in events if event.kind is EventKind.FOOTNOTE_REFERENCE] == ["1"]


def test_callback_substitute_turns_reference_into_link() -> None:
    def callback(link: BrokenLink) -> LinkDefinition | None:
        return LinkDefinition(destination=f"{link.reference}.md")

    events = list(iter_events("[guide]\n", callback))
    links = [event for event in events if event.kind is EventKind.START and event.tag == "link"]

    assert len(links) == 1
    assert links[0].destination == "guide.md"
    assert links[0].link_type is LinkType.SHORTCUT


def test_breaks_and_rules_are_structural_events() -> None:
    events = list(iter_events("a  \nb\nc\n\n---\n"))
    kinds = [event.kind for event in events]

    assert EventKind.HARD_BREAK in kinds
    assert EventKind.SOFT_BREAK in kinds
    assert EventKind.RULE in kinds


def test_default_parser_is_shared_between_documents() -> None:
    seen: list[BrokenLink] = []

    list(iter_events("[first]\n", seen.append))
    list(iter_events("[second]\n"))
    list(iter_events("[third]: a.md\n\n[third]\n", seen.append))

    assert default_parser() is default_parser()
    assert [link.reference for link in seen] == ["first"]
