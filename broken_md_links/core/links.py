"""Classification of link destinations."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from broken_md_links.core.paths import PathInput

URL_PREFIXES = ("http://", "https://", "ftp://")

# RFC 5322 addr-spec, as commonly used for strict address validation.
EMAIL_RE = re.compile(
    r"^(?:[a-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[a-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r'|"(?:[\x01-\x08\x0b\x0c\x0e-\x1f\x21\x23-\x5b\x5d-\x7f]|\\[\x01-\x09\x0b\x0c\x0e-\x7f])*")'
    r"@(?:(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z0-9](?:[a-z0-9-]*[a-z0-9])?"
    r"|\[(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
    r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?|[a-z0-9-]*[a-z0-9]:"
    r"(?:[\x01-\x08\x0b\x0c\x0e-\x1f\x21-\x5a\x53-\x7f]|\\[\x01-\x09\x0b\x0c\x0e-\x7f])+)\])$",
    re.IGNORECASE,
)

_MAILTO = "mailto:"


class LinkKind(StrEnum):
    """Classification of a link destination."""

    URL = "url"
    EMAIL = "email"
    LOCAL = "local"


@dataclass(frozen=True)
class LinkTarget:
    """A classified link destination.

    Attributes:
        raw: Destination as written in the document
        kind: External URL, e-mail address or local path
        target: Destination without its fragment
        fragment: Header name after the first ``#``, if any
        path: Resolved local path, ``None`` for external links
    """

    raw: str
    kind: LinkKind
    target: str
    fragment: str | None = None
    path: Path | None = None

    @property
    def is_external(self) -> bool:
        return self.kind is not LinkKind.LOCAL


def split_target(destination: str) -> tuple[str, str | None]:
    """Split a destination on its first ``#``.

    >>> split_target("other.md#some-header")
    ('other.md', 'some-header')
    >>> split_target("other.md")
    ('other.md', None)
    """
    target, sep, fragment = destination.partition("#")
    return target, (fragment if sep else None)


def is_email(target: str) -> bool:
    """Return True for e-mail addresses, with or without a ``mailto:`` scheme."""
    if target[: len(_MAILTO)].lower() == _MAILTO:
        target = target[len(_MAILTO) :]
    return bool(EMAIL_RE.match(target))


def classify_link(destination: str, containing_file: PathInput) -> LinkTarget:
    """Classify a link destination found in ``containing_file``.

    Local targets are resolved relative to the directory of the containing
    file. An empty target (``#header`` alone) refers to the file itself.
    """
    target, fragment = split_target(destination)

    if target.lower().startswith(URL_PREFIXES):
        return LinkTarget(destination, LinkKind.URL, target, fragment)
    if target and is_email(target):
        return LinkTarget(destination, LinkKind.EMAIL, target, fragment)

    source = Path(containing_file)
    path = source if not target else source.parent / target
    return LinkTarget(destination, LinkKind.LOCAL, target, fragment, path)
