"""broken-md-links Main Entry Point.

This module allows running the checker from a source checkout:
``python main.py docs/``.
"""

from __future__ import annotations

from broken_md_links.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
