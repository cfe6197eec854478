"""Pytest configuration and shared fixtures for the link checker test suite.

Markdown trees are written under ``tmp_path`` by the ``write_md`` fixture so
each test describes the documents it needs inline.
"""

import logging
import textwrap
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from broken_md_links.core.cache import SlugCache
from broken_md_links.core.config import CheckerOptions
from broken_md_links.core.logger import ROOT_LOGGER_NAME


def pytest_configure(config: Any) -> None:
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")


@pytest.fixture
def write_md(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a helper writing a dedented Markdown file relative to ``tmp_path``."""

    def _write(relative: str, content: str = "") -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def options() -> CheckerOptions:
    """Default checker options."""
    return CheckerOptions()


@pytest.fixture
def counting_cache() -> SlugCache:
    """Slug cache recording every file whose slugs had to be generated."""
    from broken_md_links.core.slugs import generate_slugs

    generated: list[Path] = []

    def _generator(path: Path) -> list[str]:
        generated.append(path)
        return generate_slugs(path)

    cache = SlugCache(generator=_generator)
    cache.generated = generated  # type: ignore[attr-defined]
    return cache


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Undo logging configuration done by CLI tests."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
