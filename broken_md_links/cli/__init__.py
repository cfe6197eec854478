"""Command-line interface of the link checker."""

from .runtime import (
    build_arg_parser,
    main,
    parse_runtime_args,
    render_report,
    resolve_options,
    run,
)

__all__ = [
    "build_arg_parser",
    "parse_runtime_args",
    "resolve_options",
    "render_report",
    "run",
    "main",
]
