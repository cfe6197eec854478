"""Allow ``python -m broken_md_links``."""

from broken_md_links.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
