"""Command-line runtime for the link checker."""

from __future__ import annotations

import argparse
import os
from collections.abc import Mapping, Sequence

from dotenv import load_dotenv
from rich.console import Console
from rich.text import Text

from broken_md_links.core.cache import SlugCache
from broken_md_links.core.config import (
    CONFIG_ENV_VAR,
    CheckerOptions,
    ConfigError,
    load_options,
)
from broken_md_links.core.errors import BrokenLinksError, CheckerIOError, DetectedBrokenLink
from broken_md_links.core.logger import Verbosity, configure_logging, get_checker_logger
from broken_md_links.core.paths import simplify_path
from broken_md_links.core.walker import check_broken_links

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def build_arg_parser() -> argparse.ArgumentParser:
    """Create the argparse parser for the ``broken-md-links`` command."""
    parser = argparse.ArgumentParser(
        prog="broken-md-links",
        description="Detect broken links in Markdown files.",
    )
    parser.add_argument(
        "input",
        help="Input file or directory (directories are scanned recursively).",
    )
    parser.add_argument(
        "--ignore-header-links",
        action="store_true",
        default=None,
        help="Do not check if headers are valid in links (e.g. 'document.md#some-header').",
    )
    parser.add_argument(
        "--disallow-dir-links",
        action="store_true",
        default=None,
        help="Only accept links to files.",
    )
    parser.add_argument(
        "-v",
        "--verbosity",
        choices=[level.value for level in Verbosity],
        default=Verbosity.WARN.value,
        help="Verbosity level.",
    )
    parser.add_argument(
        "-c",
        "--config",
        help=f"YAML file with checker options (defaults to ${CONFIG_ENV_VAR}).",
    )
    parser.add_argument(
        "--no-error",
        action="store_true",
        help="Report broken links as warnings and exit successfully.",
    )
    parser.add_argument("--log-file", help="Also write log records to this file.")
    parser.add_argument("--log-json", action="store_true", help="Emit log records as JSON.")
    return parser


def parse_runtime_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments using the shared parser."""
    parser = build_arg_parser()
    return parser.parse_args(list(argv) if argv is not None else None)


def resolve_options(
    args: argparse.Namespace,
    env: Mapping[str, str] | None = None,
) -> CheckerOptions:
    """Merge the config file, environment and CLI flags into checker options."""
    env = os.environ if env is None else env
    config_source = args.config or env.get(CONFIG_ENV_VAR) or None
    return load_options(
        config_source,
        env=env,
        overrides={
            "ignore_header_links": args.ignore_header_links,
            "disallow_dir_links": args.disallow_dir_links,
        },
    )


def render_report(errors: Sequence[DetectedBrokenLink]) -> Text:
    """Render detected broken links the way they are printed on the console."""
    count = len(errors)
    report = Text(f"Detected {count} broken link{'s' if count > 1 else ''}:")
    for detected in errors:
        report.append("\n* In ")
        report.append(simplify_path(detected.file), style="bright_magenta")
        report.append(":")
        report.append(str(detected.line), style="bright_cyan")
        report.append(": ")
        report.append(detected.error, style="bright_yellow")
    return report


def run(
    argv: Sequence[str] | None = None,
    *,
    env: Mapping[str, str] | None = None,
    console: Console | None = None,
) -> int:
    """Run the checker and return the process exit code."""
    args = parse_runtime_args(argv)
    console = console or Console(stderr=True, highlight=False)
    if env is None:
        load_dotenv()
        env = os.environ

    configure_logging(args.verbosity, file_path=args.log_file, structured=args.log_json)
    logger = get_checker_logger("cli")

    try:
        options = resolve_options(args, env)
    except ConfigError as exc:
        console.print(f"[broken-md-links] {exc}", style="red", markup=False)
        return EXIT_CONFIG_ERROR

    if not os.path.exists(args.input):
        console.print("Input path not found", style="red")
        return EXIT_FAILURE

    logger.debug("Checking '%s' with %s", args.input, options)
    cache = SlugCache()
    try:
        check_broken_links(args.input, options, cache)
    except CheckerIOError as exc:
        console.print(f"IO error: {exc}", style="red", markup=False, soft_wrap=True)
        return EXIT_FAILURE
    except BrokenLinksError as exc:
        console.print(render_report(exc.errors), soft_wrap=True)
        if args.no_error:
            logger.warning("%s, ignored because of --no-error", exc)
            return EXIT_SUCCESS
        return EXIT_FAILURE
    finally:
        logger.debug("Slug cache: %r", cache)

    logger.info("No broken link found")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """Console-script entry point."""
    return run(argv)
