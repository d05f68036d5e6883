"""Unit tests for the pagereflow command-line entry point."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from utils import create_docx, create_paged_docx, read_pdf_geometry

from pagereflow.cli import create_parser, get_exit_code_for_exception, main
from pagereflow.constants import (
    CONFIG_ENV_VAR,
    EXIT_CONVERSION_ERROR,
    EXIT_DEPENDENCY_ERROR,
    EXIT_ERROR,
    EXIT_FORMAT_ERROR,
    EXIT_SUCCESS,
    EXIT_UNREADABLE_ERROR,
    EXIT_VALIDATION_ERROR,
)
from pagereflow.exceptions import ConversionFailed, DependencyError, DocumentUnreadable, FormatError, ValidationError


@pytest.fixture(autouse=True)
def isolated_cli(monkeypatch):
    """Keep the CLI away from real config files and the root logger."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    with patch("pagereflow.cli.config.discover_config_file", return_value=None), patch(
        "pagereflow.cli.configure_logging"
    ):
        yield


@pytest.mark.unit
@pytest.mark.cli
class TestParser:
    """Test argument parsing."""

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args([])

    def test_write_requires_output(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["write", "text.txt"])

    def test_flags_default_to_none(self):
        args = create_parser().parse_args(["write", "text.txt", "-o", "out.pdf"])

        assert args.font_size is None
        assert args.break_at_markers is None
        assert args.fallback_on_missing_pages is None


@pytest.mark.unit
@pytest.mark.cli
class TestExitCodes:
    """Test mapping exceptions to exit codes."""

    @pytest.mark.parametrize(
        "error, code",
        [
            (DependencyError("pdf_read", [("pymupdf", "")]), EXIT_DEPENDENCY_ERROR),
            (ValidationError("bad"), EXIT_VALIDATION_ERROR),
            (DocumentUnreadable("gone"), EXIT_UNREADABLE_ERROR),
            (FormatError(format_type="pptx"), EXIT_FORMAT_ERROR),
            (ConversionFailed("broken"), EXIT_CONVERSION_ERROR),
            (RuntimeError("other"), EXIT_ERROR),
        ],
    )
    def test_mapping(self, error, code):
        assert get_exit_code_for_exception(error) == code


@pytest.mark.unit
@pytest.mark.cli
class TestCommands:
    """Test running each subcommand."""

    def test_extract_to_file(self, three_page_pdf, tmp_path: Path):
        output = tmp_path / "out.txt"

        assert main(["extract", str(three_page_pdf), "-o", str(output)]) == EXIT_SUCCESS
        assert output.read_text(encoding="utf-8") == "[PAGE:1]\nA\n\n[PAGE:2]\nB\n\n[PAGE:3]\nC\n\n"

    def test_extract_display_to_stdout(self, three_page_pdf, capsys):
        assert main(["extract", str(three_page_pdf), "--display"]) == EXIT_SUCCESS

        out = capsys.readouterr().out
        assert out.count("--- Page Break ---") == 3
        assert "[PAGE:" not in out

    def test_extract_plain_docx(self, tmp_path: Path, capsys):
        source = create_docx(tmp_path / "doc.docx", ["Hello", "World"])

        assert main(["extract", str(source), "--plain"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "Hello\n\nWorld"

    def test_extract_plain_paged_docx(self, tmp_path: Path, capsys):
        source = create_paged_docx(tmp_path / "paged.docx", [["Hello"], ["World"]])

        assert main(["extract", str(source), "--plain"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "[PAGE:1]\nHello\n\n[PAGE:2]\nWorld\n\n"

        assert main(["extract", str(source), "--plain", "--no-docx-page-breaks"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "Hello\n\nWorld"

    def test_extract_plain_unsupported_format(self, tmp_path: Path):
        source = tmp_path / "deck.pptx"
        source.write_bytes(b"x")

        assert main(["extract", str(source), "--plain"]) == EXIT_FORMAT_ERROR

    def test_extract_missing_file(self, tmp_path: Path):
        assert main(["extract", str(tmp_path / "missing.pdf")]) == EXIT_UNREADABLE_ERROR

    def test_write_matching(self, mixed_size_pdf, tmp_path: Path):
        text_file = tmp_path / "edited.txt"
        text_file.write_text("[PAGE:1]\none\n\n[PAGE:2]\ntwo\n\n[PAGE:3]\nthree\n\n", encoding="utf-8")
        output = tmp_path / "edited.pdf"

        code = main(["write", str(text_file), "-o", str(output), "--reference", str(mixed_size_pdf)])

        assert code == EXIT_SUCCESS
        assert read_pdf_geometry(output) == [(595.0, 842.0), (612.0, 792.0), (842.0, 595.0)]

    def test_write_default_with_layout_flags(self, tmp_path: Path):
        text_file = tmp_path / "notes.txt"
        text_file.write_text("Some notes\n\nMore notes", encoding="utf-8")
        output = tmp_path / "notes.pdf"

        code = main(["write", str(text_file), "-o", str(output), "--font-size", "9", "--margin", "54"])

        assert code == EXIT_SUCCESS
        assert read_pdf_geometry(output) == [(595.0, 842.0)]

    def test_write_invalid_layout_flag(self, tmp_path: Path):
        text_file = tmp_path / "notes.txt"
        text_file.write_text("x", encoding="utf-8")

        code = main(["write", str(text_file), "-o", str(tmp_path / "o.pdf"), "--font-size", "-4"])

        assert code == EXIT_VALIDATION_ERROR

    def test_write_unencodable_text(self, tmp_path: Path):
        text_file = tmp_path / "notes.txt"
        text_file.write_text("Привет мир", encoding="utf-8")
        output = tmp_path / "o.pdf"

        code = main(["write", str(text_file), "-o", str(output)])

        assert code == EXIT_CONVERSION_ERROR
        assert not output.exists()

    def test_write_missing_text_file(self, tmp_path: Path):
        code = main(["write", str(tmp_path / "missing.txt"), "-o", str(tmp_path / "o.pdf")])

        assert code == EXIT_UNREADABLE_ERROR

    def test_docx_from_pdf(self, three_page_pdf, tmp_path: Path):
        output = tmp_path / "out.docx"

        assert main(["docx", str(three_page_pdf), "-o", str(output)]) == EXIT_SUCCESS
        assert output.exists()

    def test_info_json(self, mixed_size_pdf, capsys):
        assert main(["info", str(mixed_size_pdf), "--json"]) == EXIT_SUCCESS

        info = json.loads(capsys.readouterr().out)
        assert info["page_count"] == 3
        assert info["pages"][1] == {"page": 2, "width": 612.0, "height": 792.0}

    def test_info_text(self, three_page_pdf, capsys):
        assert main(["info", str(three_page_pdf)]) == EXIT_SUCCESS

        out = capsys.readouterr().out
        assert "3 page(s)" in out
        assert "page 3: 595 x 842 pt" in out

    def test_info_rich_table(self, mixed_size_pdf, capsys):
        assert main(["info", str(mixed_size_pdf), "--rich"]) == EXIT_SUCCESS

        out = capsys.readouterr().out
        assert "612" in out
        assert "landscape" in out
        assert "portrait" in out

    def test_info_unreadable(self, corrupt_pdf):
        assert main(["info", str(corrupt_pdf)]) == EXIT_UNREADABLE_ERROR


@pytest.mark.unit
@pytest.mark.cli
class TestConfigIntegration:
    """Test that configuration files reach the commands."""

    def test_config_file_options_apply(self, three_page_pdf, tmp_path: Path):
        config = tmp_path / "settings.toml"
        config.write_text("[extract]\ninclude_first_marker = false\n")
        output = tmp_path / "out.txt"

        code = main(["--config", str(config), "extract", str(three_page_pdf), "-o", str(output)])

        assert code == EXIT_SUCCESS
        assert output.read_text(encoding="utf-8").startswith("A\n\n[PAGE:2]")

    def test_environment_variable_config(self, three_page_pdf, tmp_path: Path, monkeypatch):
        config = tmp_path / "env.json"
        config.write_text('{"extract": {"include_first_marker": false}}')
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config))
        output = tmp_path / "out.txt"

        assert main(["extract", str(three_page_pdf), "-o", str(output)]) == EXIT_SUCCESS
        assert output.read_text(encoding="utf-8").startswith("A\n")

    def test_invalid_config_setting(self, three_page_pdf, tmp_path: Path):
        config = tmp_path / "settings.json"
        config.write_text('{"reflow": {"font_colour": "red"}}')

        assert main(["--config", str(config), "info", str(three_page_pdf)]) == EXIT_VALIDATION_ERROR

    def test_missing_config_file(self, three_page_pdf, tmp_path: Path):
        code = main(["--config", str(tmp_path / "nope.toml"), "info", str(three_page_pdf)])

        assert code == EXIT_VALIDATION_ERROR
