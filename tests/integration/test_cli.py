#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the blockmark command line interface."""
import io
import logging

import pytest

from blockmark import blocks_from_json, blocks_to_json, build_block, default_schema
from blockmark.cli import (
    EXIT_FILE_ERROR,
    EXIT_PARSING_ERROR,
    EXIT_SUCCESS,
    create_parser,
    get_exit_code_for_exception,
    main,
)
from blockmark.exceptions import MarkupParseError, SchemaMismatch, UnresolvedReferenceError
from blockmark.logging_utils import configure_logging, resolve_level


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo the handlers installed by ``configure_logging``."""
    yield
    logger = logging.getLogger("blockmark")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def blocks_file(tmp_path):
    schema = default_schema()
    blocks = [
        build_block(schema, "heading", "Hi", props={"level": 2}),
        build_block(schema, "bulletListItem", "item"),
    ]
    path = tmp_path / "doc.json"
    path.write_text(blocks_to_json(blocks), encoding="utf-8")
    return path


@pytest.mark.integration
@pytest.mark.cli
class TestExportCommand:
    """Test the export subcommand."""

    def test_markdown_to_file(self, blocks_file, tmp_path) -> None:
        """Test the default Markdown output."""
        out = tmp_path / "doc.md"

        assert main(["export", str(blocks_file), "-o", str(out)]) == EXIT_SUCCESS
        assert out.read_text(encoding="utf-8") == "## Hi\n\n- item\n\n"

    def test_markdown_to_stdout(self, blocks_file, capsys) -> None:
        """Test writing to stdout with a bullet option."""
        assert main(["export", str(blocks_file), "--bullet-symbol", "+"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "## Hi\n\n+ item\n\n"

    def test_html(self, blocks_file, capsys) -> None:
        """Test semantic HTML output."""
        assert main(["export", str(blocks_file), "--to", "html"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "<h2>Hi</h2><ul><li>item</li></ul>"

    def test_full_html(self, blocks_file, capsys) -> None:
        """Test that internal HTML output carries block metadata."""
        assert main(["export", str(blocks_file), "--to", "full-html"]) == EXIT_SUCCESS

        html = capsys.readouterr().out
        assert 'data-block-type="heading"' in html
        assert blocks_from_json(blocks_file.read_text(encoding="utf-8"))[0].id in html

    def test_stdin(self, blocks_file, monkeypatch, capsys) -> None:
        """Test reading block JSON from stdin."""
        monkeypatch.setattr("sys.stdin", io.StringIO(blocks_file.read_text(encoding="utf-8")))

        assert main(["export"]) == EXIT_SUCCESS
        assert capsys.readouterr().out.startswith("## Hi")

    def test_env_defaults(self, blocks_file, monkeypatch, capsys) -> None:
        """Test options taken from BLOCKMARK_* variables."""
        monkeypatch.setenv("BLOCKMARK_BULLET_SYMBOL", "*")

        assert main(["export", str(blocks_file)]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "## Hi\n\n* item\n\n"

    def test_invalid_env_value_ignored(self, blocks_file, monkeypatch, capsys) -> None:
        """Test that a value outside the choices falls back to the default."""
        monkeypatch.setenv("BLOCKMARK_BULLET_SYMBOL", "#")

        assert main(["export", str(blocks_file)]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "## Hi\n\n- item\n\n"

    def test_missing_file(self, tmp_path) -> None:
        """Test the exit code for unreadable input."""
        assert main(["export", str(tmp_path / "missing.json")]) == EXIT_FILE_ERROR

    def test_invalid_json(self, tmp_path, capsys) -> None:
        """Test the exit code and message for malformed input."""
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")

        assert main(["export", str(path)]) == EXIT_PARSING_ERROR
        assert "export failed" in capsys.readouterr().err


@pytest.mark.integration
@pytest.mark.cli
class TestImportCommand:
    """Test the import subcommand."""

    def test_markdown(self, tmp_path) -> None:
        """Test importing a Markdown file."""
        source = tmp_path / "doc.md"
        source.write_text("# Title\n\nbody", encoding="utf-8")
        out = tmp_path / "doc.json"

        assert main(["import", str(source), "-o", str(out)]) == EXIT_SUCCESS

        blocks = blocks_from_json(out.read_text(encoding="utf-8"))
        assert [block.type for block in blocks] == ["heading", "paragraph"]

    def test_html_detected_by_extension(self, tmp_path, capsys) -> None:
        """Test that .html input is parsed as HTML."""
        source = tmp_path / "doc.html"
        source.write_text("<h3>Deep</h3>", encoding="utf-8")

        assert main(["import", str(source)]) == EXIT_SUCCESS

        blocks = blocks_from_json(capsys.readouterr().out)
        assert blocks[0].type == "heading"
        assert blocks[0].props["level"] == 3

    def test_explicit_format(self, tmp_path, capsys) -> None:
        """Test that --from overrides extension detection."""
        source = tmp_path / "doc.txt"
        source.write_text("<p>x</p>", encoding="utf-8")

        assert main(["import", str(source), "--from", "html"]) == EXIT_SUCCESS

        blocks = blocks_from_json(capsys.readouterr().out)
        assert [block.type for block in blocks] == ["paragraph"]

    def test_extension_disabled_by_env(self, tmp_path, monkeypatch, capsys) -> None:
        """Test that BLOCKMARK_NO_TABLES turns the table extension off."""
        monkeypatch.setenv("BLOCKMARK_NO_TABLES", "true")
        source = tmp_path / "doc.md"
        source.write_text("| a |\n| --- |\n| 1 |", encoding="utf-8")

        assert main(["import", str(source)]) == EXIT_SUCCESS

        blocks = blocks_from_json(capsys.readouterr().out)
        assert all(block.type != "table" for block in blocks)


@pytest.mark.unit
@pytest.mark.cli
class TestParserAndExitCodes:
    """Test argument parsing and exception mapping."""

    def test_subcommand_required(self) -> None:
        """Test that a subcommand must be given."""
        with pytest.raises(SystemExit):
            create_parser().parse_args([])

    def test_flags_parsed(self) -> None:
        """Test Markdown flags on a subcommand."""
        args = create_parser().parse_args(["import", "a.md", "--no-autolinks", "--emphasis-symbol", "_"])

        assert args.no_autolinks
        assert not args.no_tables
        assert args.emphasis_symbol == "_"
        assert args.from_format is None

    def test_log_level_upper_cased(self) -> None:
        """Test that log levels are case insensitive."""
        assert create_parser().parse_args(["--log-level", "debug", "export"]).log_level == "DEBUG"

    @pytest.mark.parametrize(
        "exception,code",
        [
            (ValueError("bad"), 3),
            (UnresolvedReferenceError("x", "y", "block"), 3),
            (FileNotFoundError("f"), 4),
            (MarkupParseError("m"), 6),
            (SchemaMismatch("callout", "block"), 6),
            (RuntimeError("r"), 1),
        ],
    )
    def test_exit_codes(self, exception, code) -> None:
        """Test the exception to exit code mapping."""
        assert get_exit_code_for_exception(exception) == code


@pytest.mark.unit
class TestLogging:
    """Test logging configuration."""

    def test_resolve_level(self) -> None:
        """Test names and numbers."""
        assert resolve_level("info") == logging.INFO
        assert resolve_level(logging.ERROR) == logging.ERROR

    def test_configure_replaces_handlers(self, tmp_path) -> None:
        """Test that repeated configuration does not stack handlers."""
        log_file = tmp_path / "run.log"
        configure_logging("INFO")
        logger = configure_logging("DEBUG", log_file=str(log_file))

        assert logger.name == "blockmark"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2

        logging.getLogger("blockmark.cli").debug("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in log_file.read_text(encoding="utf-8")
