"""Broken link detection for a single Markdown file."""

from __future__ import annotations

import logging
from pathlib import Path

from broken_md_links.core.cache import SlugCache
from broken_md_links.core.config import CheckerOptions
from broken_md_links.core.errors import CheckerIOError, DetectedBrokenLink
from broken_md_links.core.links import LinkTarget, classify_link
from broken_md_links.core.markdown import BrokenLink, EventKind, LinkType, iter_events
from broken_md_links.core.paths import PathInput, canonicalize, simplify_path


class FileChecker:
    """Checks every inline link of one Markdown file.

    Problems with individual links are collected and returned together, so a
    broken link never hides the ones after it. Only I/O failures (unreadable
    file, link target whose type or headers cannot be read) abort the
    check, as :class:`CheckerIOError`.
    """

    def __init__(
        self,
        options: CheckerOptions | None = None,
        cache: SlugCache | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the checker.

        Args:
            options: Scan options, defaults to ``CheckerOptions()``
            cache: Slug cache shared with the rest of the scan
            logger: Optional logger instance
        """
        self.options = options or CheckerOptions()
        self.cache = cache if cache is not None else SlugCache()
        self.logger: logging.Logger = logger or logging.getLogger(__name__)

    def check(self, path: PathInput) -> list[DetectedBrokenLink]:
        """Return the broken links of a Markdown file.

        Raises:
            CheckerIOError: If the file, or a file whose headers are needed,
                cannot be read.
        """
        path = Path(path)
        display = simplify_path(path)
        self.logger.info("Analyzing: %s", display)

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise CheckerIOError(f"Failed to read file at '{display}': {exc}", path=path) from exc

        self.logger.debug("In '%s': just read file, which is %d bytes long.", display, len(content))

        errors: list[DetectedBrokenLink] = []

        def handle_missing_target(link: BrokenLink) -> None:
            errors.append(
                DetectedBrokenLink(path, link.line, f"missing target for link '{link.reference}'")
            )

        for event in iter_events(content, handle_missing_target):
            if event.kind is not EventKind.START or event.tag != "link":
                continue
            # Reference links, autolinks and e-mails are not checked on disk.
            if event.link_type is not LinkType.INLINE:
                continue

            target = classify_link(event.destination or "", path)
            if target.is_external:
                self.logger.debug("In '%s': skipping external link '%s'", display, target.raw)
                continue

            error = self._check_local_target(target, display)
            if error is not None:
                self.logger.debug("In '%s': line %d: %s", display, event.line, error)
                errors.append(DetectedBrokenLink(path, event.line, error))

        # Missing targets are reported while parsing, ahead of the link events.
        errors.sort(key=lambda detected: detected.line)
        return errors

    def _check_local_target(self, target: LinkTarget, display: str) -> str | None:
        assert target.path is not None
        target_display = simplify_path(target.path)

        try:
            canonical = canonicalize(target.path)
        except OSError:
            return f"path '{target_display}' does not exist"

        try:
            is_file = canonical.is_file()
        except OSError as exc:
            raise CheckerIOError(
                f"Failed to read file type of item at '{target_display}': {exc}",
                path=target.path,
            ) from exc

        if self.options.disallow_dir_links and not is_file:
            return f"path '{target_display}' is a directory but only file links are allowed"

        if self.options.ignore_header_links or target.fragment is None:
            self.logger.debug("In '%s': valid link found: %s", display, target_display)
            return None

        if not is_file:
            return f"path '{target_display}' exists but is not a file"

        self.logger.debug(
            "In '%s': now checking header '%s' in '%s'", display, target.fragment, target_display
        )
        try:
            slugs = self.cache.slugs_for(canonical)
        except (OSError, UnicodeDecodeError) as exc:
            raise CheckerIOError(
                f"Failed to generate slugs for file '{target_display}': {exc}",
                path=target.path,
            ) from exc

        if target.fragment not in slugs:
            return f"header '{target.fragment}' not found in '{target_display}'"

        self.logger.debug("In '%s': valid header link found: %s", display, target.fragment)
        return None


def check_file(
    path: PathInput,
    options: CheckerOptions | None = None,
    cache: SlugCache | None = None,
) -> list[DetectedBrokenLink]:
    """Return the broken links of a single Markdown file."""
    return FileChecker(options, cache).check(path)
