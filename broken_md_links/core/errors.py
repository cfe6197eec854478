"""Report records and exceptions raised by the link checker."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from broken_md_links.core.paths import PathInput, simplify_path


@dataclass(frozen=True)
class DetectedBrokenLink:
    """A broken or invalid link found in a Markdown file.

    Attributes:
        file: File containing the link
        line: 1-based line of the link in ``file``
        error: Human-readable description of the problem
    """

    file: Path
    line: int
    error: str

    def __str__(self) -> str:
        return f"{simplify_path(self.file)}:{self.line}: {self.error}"


class CheckerError(RuntimeError):
    """Base exception for link checker failures."""


class CheckerIOError(CheckerError):
    """Raised when a file or directory cannot be read.

    These errors abort the scan: no partial report is produced.
    """

    def __init__(self, message: str, *, path: PathInput | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class BrokenLinksError(CheckerError):
    """Raised at the end of a scan that found at least one broken link."""

    def __init__(self, errors: Sequence[DetectedBrokenLink]) -> None:
        self.errors: list[DetectedBrokenLink] = list(errors)
        count = len(self.errors)
        super().__init__(f"Detected {count} broken link{'s' if count > 1 else ''}")
