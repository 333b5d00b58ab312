#!/usr/bin/env python3
"""
Bookmark Exporter

Export Firefox and Chrome bookmarks as plain text or markdown-style links.
"""
import sys
import argparse
import logging
from pathlib import Path
from typing import List, Optional

import tomli
from rich.console import Console
from rich.logging import RichHandler

from bookmark_exporter import __version__
from bookmark_exporter.browser_import import CHROME, FIREFOX, BrowserExportManager
from bookmark_exporter.config import ExporterConfig, init_config
from bookmark_exporter.errors import ExporterError
from bookmark_exporter.exporters import OutputFormat, write_output

logger = logging.getLogger(__name__)


def make_console(color: bool = True) -> Console:
    """Console for diagnostics; bookmark text never goes through it."""
    return Console(stderr=True, no_color=not color, highlight=False)


def warning(console: Console, message: str) -> None:
    console.print(f"warning: {message}", style="yellow", markup=False, soft_wrap=True)


def error(console: Console, message: str) -> None:
    console.print(f"error: {message}", style="red", markup=False, soft_wrap=True)


def setup_logging(level: str, console: Console) -> None:
    """Route log records to stderr through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bookmark-exporter",
        description="Export Firefox and Chrome bookmarks as text",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bookmark-exporter                       # both browsers to stdout
  bookmark-exporter --firefox bookmarks.txt
  bookmark-exporter --chrome --format link
  bookmark-exporter --firefox-db ~/backup/places.sqlite --firefox

Configuration:
  Config file: ~/.config/bookmark-exporter/config.toml
  Environment: BOOKMARK_EXPORTER_OUTPUT_FORMAT, NO_CLI_COLOR
        """
    )

    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {__version__}")
    parser.add_argument("--firefox", dest="targets", action="append_const", const=FIREFOX,
                        help="Export Firefox bookmarks")
    parser.add_argument("--chrome", dest="targets", action="append_const", const=CHROME,
                        help="Export Chrome bookmarks")
    parser.add_argument("-f", "--format", choices=[f.value for f in OutputFormat],
                        help="Output format (default: plain)")
    parser.add_argument("-n", "--no-color", action="store_true",
                        help="Disable colors in output")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Show progress (-v) or debug (-vv) messages")
    parser.add_argument("--config", type=Path, help="Config file path")
    parser.add_argument("--keep-going", action="store_true", default=None,
                        help="Continue with the next browser when one fails")
    parser.add_argument("--firefox-db", metavar="PATH",
                        help="Read this places.sqlite instead of the default profile")
    parser.add_argument("--chrome-bookmarks", metavar="PATH",
                        help="Read this Bookmarks file instead of the default profile")
    parser.add_argument("output_file", nargs="?", type=Path, metavar="OUTPUT_FILE",
                        help="The output file (default: standard output)")
    return parser


def load_config(args: argparse.Namespace) -> ExporterConfig:
    overrides = {
        "output_format": args.format,
        "continue_on_error": args.keep_going,
        "firefox_places": args.firefox_db,
        "chrome_bookmarks": args.chrome_bookmarks,
    }
    if args.no_color:
        overrides["color_output"] = False
    if args.verbose:
        overrides["log_level"] = "DEBUG" if args.verbose > 1 else "INFO"
    return init_config(config_file=args.config, **overrides)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    console = make_console(color=not args.no_color)

    try:
        config = load_config(args)
        console = make_console(color=config.color_output)
        setup_logging(config.log_level, console)
        logger.debug(f"Configuration: {config}")
    except (OSError, tomli.TOMLDecodeError) as e:
        error(console, f"Unable to load configuration: {e}")
        return 1
    except ValueError as e:
        error(console, f"Invalid configuration: {e}")
        return 1

    manager = BrowserExportManager(config)
    try:
        text = manager.export(args.targets)
        if args.output_file:
            write_output(text, args.output_file)
        else:
            sys.stdout.write(text)
            sys.stdout.flush()
    except KeyboardInterrupt:
        warning(console, "Interrupted")
        return 130
    except (ExporterError, ValueError, OSError) as e:
        error(console, str(e))
        return 1

    for target, failure in manager.failures:
        warning(console, f"{target} bookmarks were not exported: {failure}")
    return 1 if manager.failures else 0


if __name__ == "__main__":
    sys.exit(main())
