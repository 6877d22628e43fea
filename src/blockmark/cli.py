#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Command line interface for blockmark.

Two subcommands wrap the export/import facade, using the built-in schema:

    $ blockmark export document.json --to markdown
    $ blockmark export document.json --to full-html --out document.html
    $ blockmark import notes.md --from markdown --out document.json

``-`` (the default input) reads from stdin. Options accept environment
variable defaults using the pattern ``BLOCKMARK_<OPTION_NAME>``::

    $ export BLOCKMARK_LOG_LEVEL=DEBUG
    $ export BLOCKMARK_NO_TABLES=true
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from blockmark import __version__
from blockmark.api import blocks_to_full_html, blocks_to_html, blocks_to_markdown, html_to_blocks, markdown_to_blocks
from blockmark.constants import MARKDOWN_EXTENSIONS
from blockmark.exceptions import BlockmarkError, ConversionError, SchemaError
from blockmark.logging_utils import configure_logging
from blockmark.options.markdown import MarkdownOptions
from blockmark.schema.defaults import default_schema
from blockmark.serialization import blocks_from_json, blocks_to_json

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_PARSING_ERROR = 6

ENV_PREFIX = "BLOCKMARK_"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_key(dest: str) -> str:
    return f"{ENV_PREFIX}{dest.upper().replace('-', '_')}"


class EnvDefaultAction(argparse.Action):
    """Store action taking its default from ``BLOCKMARK_<DEST>`` when set."""

    def __init__(
        self,
        option_strings: Sequence[str],
        dest: str,
        default: Optional[Any] = None,
        type: Optional[Callable[[str], Any]] = None,
        choices: Optional[Sequence[Any]] = None,
        **kwargs: Any,
    ) -> None:
        env_value = os.environ.get(_env_key(dest))
        if env_value is not None:
            try:
                candidate = type(env_value) if type is not None else env_value
            except (ValueError, TypeError) as e:
                logging.warning("Invalid environment variable %s=%s: %s", _env_key(dest), env_value, e)
            else:
                if choices is None or candidate in choices:
                    default = candidate
                else:
                    logging.warning("Ignoring %s=%s: expected one of %s", _env_key(dest), env_value, list(choices))
        super().__init__(option_strings=option_strings, dest=dest, default=default, type=type, choices=choices, **kwargs)

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Any,
        option_string: Optional[str] = None,
    ) -> None:
        setattr(namespace, self.dest, values)


class EnvDefaultStoreTrueAction(argparse.Action):
    """``store_true`` flag that is also switched on by ``BLOCKMARK_<DEST>=true``."""

    def __init__(self, option_strings: Sequence[str], dest: str, default: bool = False, **kwargs: Any) -> None:
        env_value = os.environ.get(_env_key(dest))
        if env_value is not None:
            default = env_value.strip().lower() in _TRUE_VALUES
        super().__init__(option_strings=option_strings, dest=dest, nargs=0, default=default, **kwargs)

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Any,
        option_string: Optional[str] = None,
    ) -> None:
        setattr(namespace, self.dest, True)


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with the ``export`` and ``import`` subcommands."""
    parser = argparse.ArgumentParser(
        prog="blockmark",
        description="Convert block documents (JSON) to HTML or Markdown and back.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        action=EnvDefaultAction,
        default="WARNING",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", action=EnvDefaultAction, help="Also write log records to this file")
    parser.add_argument(
        "--trace", action=EnvDefaultStoreTrueAction, help="Verbose log format with timestamps (implies DEBUG)"
    )

    markdown_flags = argparse.ArgumentParser(add_help=False)
    group = markdown_flags.add_argument_group("Markdown options")
    for extension in sorted(MARKDOWN_EXTENSIONS):
        group.add_argument(
            f"--no-{extension}",
            dest=f"no_{extension}",
            action=EnvDefaultStoreTrueAction,
            help=f"Disable the {extension} extension",
        )
    group.add_argument(
        "--bullet-symbol",
        action=EnvDefaultAction,
        default="-",
        choices=["-", "*", "+"],
        help="Bullet list marker for Markdown output (default: -)",
    )
    group.add_argument(
        "--emphasis-symbol",
        action=EnvDefaultAction,
        default="*",
        choices=["*", "_"],
        help="Emphasis delimiter for Markdown output (default: *)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser(
        "export", parents=[markdown_flags], help="Convert block JSON to Markdown or HTML"
    )
    export_parser.add_argument("input", nargs="?", default="-", help="Block JSON file (default: stdin)")
    export_parser.add_argument(
        "--to",
        dest="to_format",
        action=EnvDefaultAction,
        default="markdown",
        choices=["markdown", "html", "full-html"],
        help="Output format (default: markdown)",
    )
    export_parser.add_argument("-o", "--out", help="Output file (default: stdout)")

    import_parser = subparsers.add_parser(
        "import", parents=[markdown_flags], help="Convert Markdown or HTML to block JSON"
    )
    import_parser.add_argument("input", nargs="?", default="-", help="Markdown or HTML file (default: stdin)")
    import_parser.add_argument(
        "--from",
        dest="from_format",
        action=EnvDefaultAction,
        default=None,
        choices=["markdown", "html"],
        help="Input format (default: detected from the file extension, else markdown)",
    )
    import_parser.add_argument("-o", "--out", help="Output file (default: stdout)")

    return parser


def _markdown_options(parsed_args: argparse.Namespace) -> MarkdownOptions:
    extensions = frozenset(ext for ext in MARKDOWN_EXTENSIONS if not getattr(parsed_args, f"no_{ext}", False))
    return MarkdownOptions(
        extensions=extensions,
        bullet_symbol=parsed_args.bullet_symbol,
        emphasis_symbol=parsed_args.emphasis_symbol,
    )


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _write_output(text: str, path: Optional[str]) -> None:
    if path is None:
        sys.stdout.write(text)
        return
    Path(path).write_text(text, encoding="utf-8")
    logger.info("Wrote %s", path)


def _detect_input_format(path: str) -> str:
    if Path(path).suffix.lower() in (".html", ".htm", ".xhtml"):
        return "html"
    return "markdown"


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to a CLI exit code."""
    if isinstance(exception, (ValueError, SchemaError)):
        return EXIT_VALIDATION_ERROR
    if isinstance(exception, OSError):
        return EXIT_FILE_ERROR
    if isinstance(exception, ConversionError):
        return EXIT_PARSING_ERROR
    return EXIT_ERROR


def run_export(parsed_args: argparse.Namespace) -> int:
    schema = default_schema()
    blocks = blocks_from_json(_read_input(parsed_args.input))
    if parsed_args.to_format == "html":
        output = blocks_to_html(blocks, schema)
    elif parsed_args.to_format == "full-html":
        output = blocks_to_full_html(blocks, schema)
    else:
        output = blocks_to_markdown(blocks, schema, options=_markdown_options(parsed_args))
    _write_output(output, parsed_args.out)
    return EXIT_SUCCESS


def run_import(parsed_args: argparse.Namespace) -> int:
    schema = default_schema()
    source = _read_input(parsed_args.input)
    source_format = parsed_args.from_format or _detect_input_format(parsed_args.input)
    if source_format == "html":
        blocks = html_to_blocks(source, schema)
    else:
        blocks = markdown_to_blocks(source, schema, options=_markdown_options(parsed_args))
    logger.debug("Imported %d top-level blocks from %s", len(blocks), source_format)
    _write_output(blocks_to_json(blocks) + "\n", parsed_args.out)
    return EXIT_SUCCESS


def main(args: list[str] | None = None) -> int:
    """Run the command line interface.

    Parameters
    ----------
    args : list of str, optional
        Arguments to parse instead of ``sys.argv[1:]``

    Returns
    -------
    int
        Process exit code

    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    log_level = "DEBUG" if parsed_args.trace else parsed_args.log_level
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)

    handler = run_export if parsed_args.command == "export" else run_import
    try:
        return handler(parsed_args)
    except (BlockmarkError, OSError, ValueError) as e:
        message = e.message if isinstance(e, BlockmarkError) else str(e)
        logger.error("%s failed: %s", parsed_args.command, message)
        return get_exit_code_for_exception(e)
