"""Markdown event stream built on top of markdown-it-py.

markdown-it-py produces a nested token tree. The checker wants a flat stream
of structural events (start/end of elements, text runs, breaks) where every
event knows the source line it starts on, and where links remember how they
were written (inline, reference, autolink...). This module adapts one to the
other and exposes a hook for reference links that have no definition.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from enum import StrEnum
from functools import cache
from typing import Any, TypeAlias

from markdown_it import MarkdownIt
from markdown_it.common.utils import normalizeReference
from markdown_it.rules_core import StateCore
from markdown_it.rules_inline import StateInline
from markdown_it.rules_inline import link as commonmark_link
from markdown_it.token import Token
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin


class EventKind(StrEnum):
    """Kinds of events yielded by :func:`iter_events`."""

    START = "start"
    END = "end"
    TEXT = "text"
    CODE = "code"
    HTML = "html"
    FOOTNOTE_REFERENCE = "footnote_reference"
    SOFT_BREAK = "soft_break"
    HARD_BREAK = "hard_break"
    RULE = "rule"
    TASK_LIST_MARKER = "task_list_marker"


class LinkType(StrEnum):
    """How a link was written in the source document."""

    INLINE = "inline"
    REFERENCE = "reference"
    COLLAPSED = "collapsed"
    SHORTCUT = "shortcut"
    AUTOLINK = "autolink"
    EMAIL = "email"


@dataclass(frozen=True)
class Event:
    """A single structural event of a Markdown document."""

    kind: EventKind
    line: int
    tag: str | None = None
    text: str = ""
    link_type: LinkType | None = None
    destination: str | None = None
    checked: bool = False


@dataclass(frozen=True)
class BrokenLink:
    """A reference-style link whose label has no definition."""

    reference: str
    link_type: LinkType
    line: int


@dataclass(frozen=True)
class LinkDefinition:
    """Substitute definition returned by a broken-link callback."""

    destination: str
    title: str = ""


BrokenLinkCallback: TypeAlias = Callable[[BrokenLink], LinkDefinition | None]

_ENV_KEY = "broken_md_links"
_TASK_MARKER_RE = re.compile(r"\[[ xX]\]\s")
_CHECKBOX_CLASS = 'class="task-list-item-checkbox"'


def _keep_destination(url: str) -> str:
    return url


def build_parser() -> MarkdownIt:
    """Create a markdown-it instance configured for link checking."""
    md = MarkdownIt("commonmark", {"html": True})
    md.enable(["table", "strikethrough"])
    md.use(footnote_plugin)
    md.use(tasklists_plugin)
    # Destinations are file paths, keep them exactly as written.
    md.normalizeLink = _keep_destination  # type: ignore[method-assign]
    md.core.ruler.at("inline", _inline_with_lines)
    md.inline.ruler.at("link", _link_with_callback)
    return md


@cache
def default_parser() -> MarkdownIt:
    """Return the parser shared by every call to :func:`iter_events` without ``parser``."""
    return build_parser()


def iter_events(
    content: str,
    broken_link_callback: BrokenLinkCallback | None = None,
    *,
    parser: MarkdownIt | None = None,
) -> Iterator[Event]:
    """Parse ``content`` and yield its events in document order.

    When ``broken_link_callback`` is given, it is called for every
    reference-style link whose label is not defined in the document. All
    callbacks fire during parsing, before the first event is yielded.
    """
    md = parser or default_parser()
    env: dict[str, Any] = {_ENV_KEY: {"callback": broken_link_callback, "line": 1}}
    tokens = md.parse(content, env)
    yield from _flatten(tokens, 1)


def _flatten(tokens: Sequence[Token], line: int) -> Iterator[Event]:
    current_line = line
    for token in tokens:
        if token.map:
            current_line = token.map[0] + 1
        meta_line = token.meta.get("line") if token.meta else None
        token_line = meta_line or current_line

        if token.type == "inline":
            yield from _flatten(token.children or [], current_line)
        elif token.type in ("softbreak", "hardbreak"):
            kind = EventKind.SOFT_BREAK if token.type == "softbreak" else EventKind.HARD_BREAK
            yield Event(kind, current_line)
            current_line += 1
        elif token.type == "text":
            yield Event(EventKind.TEXT, token_line, text=token.content)
        elif token.type == "code_inline":
            yield Event(EventKind.CODE, token_line, text=token.content)
        elif token.type in ("html_inline", "html_block"):
            if _CHECKBOX_CLASS in token.content:
                checked = 'checked="checked"' in token.content
                yield Event(EventKind.TASK_LIST_MARKER, token_line, checked=checked)
            else:
                yield Event(EventKind.HTML, token_line, text=token.content)
            if token.type == "html_inline":
                current_line += token.content.count("\n")
        elif token.type == "footnote_ref":
            yield Event(EventKind.FOOTNOTE_REFERENCE, token_line, text=str(token.meta["label"]))
        elif token.type == "hr":
            yield Event(EventKind.RULE, token_line)
        elif token.type in ("fence", "code_block"):
            yield Event(EventKind.START, token_line, tag="code_block")
            yield Event(EventKind.TEXT, token_line, text=token.content)
            yield Event(EventKind.END, token_line, tag="code_block")
        elif token.type == "image":
            yield Event(
                EventKind.START, token_line, tag="image", destination=token.attrGet("src")
            )
            yield from _flatten(token.children or [], token_line)
            yield Event(EventKind.END, token_line, tag="image")
        elif token.type == "link_open":
            yield Event(
                EventKind.START,
                token_line,
                tag="link",
                link_type=_link_type(token),
                destination=str(token.attrGet("href") or ""),
            )
        elif token.nesting == 1:
            yield Event(EventKind.START, token_line, tag=_strip_suffix(token.type, "_open"))
        elif token.nesting == -1:
            yield Event(EventKind.END, token_line, tag=_strip_suffix(token.type, "_close"))


def _strip_suffix(name: str, suffix: str) -> str:
    return name[: -len(suffix)] if name.endswith(suffix) else name


def _link_type(token: Token) -> LinkType:
    link_type = token.meta.get("link_type") if token.meta else None
    if link_type is not None:
        return LinkType(link_type)
    if token.info == "auto":
        href = str(token.attrGet("href") or "")
        return LinkType.EMAIL if href.startswith("mailto:") else LinkType.AUTOLINK
    return LinkType.INLINE


# ---------------------------------------------------------------------------#
# markdown-it rule overrides
# ---------------------------------------------------------------------------#
def _inline_with_lines(state: StateCore) -> None:
    """Core ``inline`` rule that records the source line of each inline block."""
    context = state.env.get(_ENV_KEY)
    tokens = state.tokens
    line = 1
    for index, token in enumerate(tokens):
        if token.map:
            line = token.map[0] + 1
        if token.type != "inline":
            continue
        if token.children is None:
            token.children = []
        if context is not None:
            context["line"] = line
            context["consumed"] = set()
            context["task_candidate"] = (
                index >= 2
                and tokens[index - 1].type == "paragraph_open"
                and tokens[index - 2].type == "list_item_open"
            )
        state.md.inline.parse(token.content, state.md, state.env, token.children)


def _link_with_callback(state: StateInline, silent: bool) -> bool:
    """CommonMark ``link`` rule that tags link tokens and reports broken references."""
    start = state.pos
    first_new_token = len(state.tokens)

    if commonmark_link(state, silent):
        if not silent:
            _annotate_link(state, start, first_new_token)
        return True

    context = state.env.get(_ENV_KEY)
    if silent or context is None or context.get("callback") is None:
        return False
    if start >= state.posMax or state.src[start] != "[":
        return False

    broken = _find_broken_reference(state, start, context)
    if broken is None:
        return False

    substitute = context["callback"](broken)
    if substitute is None:
        return False

    references = state.env.setdefault("references", {})
    label = normalizeReference(broken.reference)
    references[label] = {"href": substitute.destination, "title": substitute.title}
    try:
        matched = commonmark_link(state, silent)
    finally:
        del references[label]
    if matched:
        _annotate_link(state, start, first_new_token)
    return matched


def _annotate_link(state: StateInline, start: int, first_new_token: int) -> None:
    # Pending text is flushed before link_open, so it is not always the first new token.
    for token in state.tokens[first_new_token:]:
        if token.type == "link_open":
            token.meta["link_type"] = _written_link_type(state, start, state.pos)
            token.meta["line"] = _line_at(state, start)
            break


def _written_link_type(state: StateInline, start: int, end: int) -> LinkType:
    src = state.src
    if src[end - 1] == ")":
        return LinkType.INLINE
    label_end = state.md.helpers.parseLinkLabel(state, start, True)
    after = label_end + 1
    if src.startswith("[]", after):
        return LinkType.COLLAPSED
    if after < end and src[after] == "[":
        return LinkType.REFERENCE
    return LinkType.SHORTCUT


def _find_broken_reference(
    state: StateInline, start: int, context: dict[str, Any]
) -> BrokenLink | None:
    src = state.src
    label_end = state.md.helpers.parseLinkLabel(state, start, True)
    if label_end < 0:
        return None

    if start == 0 and context.get("task_candidate") and _TASK_MARKER_RE.match(src):
        return None
    # Second half of an already reported `[text][ref]`.
    if start in context.setdefault("consumed", set()):
        return None

    label: str | None = None
    link_type = LinkType.SHORTCUT
    after = label_end + 1
    if after < state.posMax and src[after] == "[":
        ref_end = state.md.helpers.parseLinkLabel(state, after)
        if ref_end >= 0:
            label = src[after + 1 : ref_end]
            link_type = LinkType.REFERENCE if label else LinkType.COLLAPSED
            if label:
                context["consumed"].add(after)
    if not label:
        label = src[start + 1 : label_end]

    if not normalizeReference(label):
        return None
    if label.startswith("^"):
        # Footnote references are handled by the footnote plugin.
        return None
    if normalizeReference(label) in state.env.get("references", {}):
        return None

    return BrokenLink(reference=label, link_type=link_type, line=_line_at(state, start))


def _line_at(state: StateInline, position: int) -> int:
    context = state.env.get(_ENV_KEY) or {}
    return int(context.get("line", 1)) + state.src.count("\n", 0, position)
