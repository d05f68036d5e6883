"""Integration tests: extract a PDF, edit the text and write it back."""

from pathlib import Path

import pytest
from reportlab.pdfgen.canvas import Canvas
from utils import read_pdf_geometry, read_pdf_text

from pagereflow import (
    ConversionFailed,
    ReflowOptions,
    ReflowPdfWriter,
    extract_with_page_markers,
    page_count,
    write_default,
    write_matching,
)


def _failing_show_page(fail_on: int):
    """Return a Canvas.showPage replacement that raises on its ``fail_on``-th call."""
    original = Canvas.showPage
    calls = {"count": 0}

    def show_page(self):
        calls["count"] += 1
        if calls["count"] == fail_on:
            raise OSError("injected write failure")
        return original(self)

    return show_page


@pytest.mark.integration
class TestRoundTrip:
    """Test unedited and edited round trips in matched mode."""

    def test_three_page_scenario(self, three_page_pdf, tmp_path: Path):
        text = extract_with_page_markers(three_page_pdf)
        output = tmp_path / "out.pdf"

        result = write_matching(text, three_page_pdf, output)

        assert result == output
        assert page_count(output) == 3
        assert read_pdf_geometry(output) == read_pdf_geometry(three_page_pdf)
        assert read_pdf_text(output) == ["A", "B", "C"]

    def test_geometry_preserved_for_mixed_sizes(self, mixed_size_pdf, tmp_path: Path):
        output = tmp_path / "out.pdf"

        write_matching(extract_with_page_markers(mixed_size_pdf), mixed_size_pdf, output)

        assert read_pdf_geometry(output) == [(595.0, 842.0), (612.0, 792.0), (842.0, 595.0)]

    def test_output_can_be_extracted_again(self, three_page_pdf, tmp_path: Path):
        text = extract_with_page_markers(three_page_pdf)
        output = tmp_path / "out.pdf"

        write_matching(text, three_page_pdf, output)

        assert extract_with_page_markers(output) == text

    def test_edits_reach_the_right_page(self, mixed_size_pdf, tmp_path: Path):
        text = extract_with_page_markers(mixed_size_pdf).replace("Second page", "Second page, revised")
        output = tmp_path / "out.pdf"

        write_matching(text, mixed_size_pdf, output)

        assert read_pdf_text(output) == ["First page", "Second page, revised", "Third page"]

    def test_long_edit_keeps_page_count(self, three_page_pdf, tmp_path: Path):
        extra = "\n\n".join(f"Added paragraph {n}" for n in range(150))
        text = extract_with_page_markers(three_page_pdf).replace("[PAGE:2]\nB", f"[PAGE:2]\nB\n\n{extra}")
        output = tmp_path / "out.pdf"

        write_matching(text, three_page_pdf, output)

        assert page_count(output) == 3

    def test_writing_over_the_reference(self, three_page_pdf):
        text = extract_with_page_markers(three_page_pdf).replace("\nB\n", "\nBee\n")

        write_matching(text, three_page_pdf, three_page_pdf)

        assert read_pdf_text(three_page_pdf) == ["A", "Bee", "C"]


@pytest.mark.integration
class TestFallbackRule:
    """Test matched writes that fall back to free layout."""

    def test_unmarked_text_with_three_page_reference(self, three_page_pdf, tmp_path: Path):
        text = "\n\n".join(f"Unmarked paragraph {n} of the edited document." for n in range(100))
        output = tmp_path / "out.pdf"

        write_matching(text, three_page_pdf, output)

        expected = ReflowPdfWriter().plan_default(text).page_count
        assert expected > 1
        assert page_count(output) == expected
        assert set(read_pdf_geometry(output)) == {(595.0, 842.0)}

    def test_short_unmarked_text_is_one_free_page(self, three_page_pdf, tmp_path: Path):
        output = tmp_path / "out.pdf"

        write_matching("only a little text", three_page_pdf, output)

        assert page_count(output) == 1


@pytest.mark.integration
class TestAtomicWrites:
    """Test that failed writes leave nothing behind."""

    def test_failure_on_page_two_of_five_leaves_no_file(self, five_page_pdf, tmp_path: Path, monkeypatch):
        text = extract_with_page_markers(five_page_pdf)
        output = tmp_path / "out.pdf"
        monkeypatch.setattr(Canvas, "showPage", _failing_show_page(2))

        with pytest.raises(ConversionFailed) as exc_info:
            write_matching(text, five_page_pdf, output)

        assert not output.exists()
        assert list(tmp_path.glob("*.part")) == []
        assert exc_info.value.output_path == str(output)
        assert isinstance(exc_info.value.original_error, OSError)

    def test_failure_keeps_previous_output(self, tmp_path: Path, monkeypatch):
        output = tmp_path / "out.pdf"
        write_default("first version", output)
        before = output.read_bytes()
        monkeypatch.setattr(Canvas, "showPage", _failing_show_page(1))

        with pytest.raises(ConversionFailed):
            write_default("second version", output)

        assert output.read_bytes() == before

    def test_save_failure_leaves_no_file(self, tmp_path: Path, monkeypatch):
        def broken_save(self):
            raise OSError("disk full")

        monkeypatch.setattr(Canvas, "save", broken_save)
        output = tmp_path / "out.pdf"

        with pytest.raises(ConversionFailed):
            write_default("text", output)

        assert list(tmp_path.iterdir()) == []

    def test_unencodable_text_writes_nothing(self, three_page_pdf, tmp_path: Path):
        output = tmp_path / "out.pdf"
        text = "[PAGE:1]\nПривет мир 你好\n\n[PAGE:2]\nB\n\n[PAGE:3]\nC\n\n"

        with pytest.raises(ConversionFailed) as exc_info:
            write_matching(text, three_page_pdf, output)

        assert exc_info.value.conversion_stage == "encoding"
        assert not output.exists()
        assert list(tmp_path.glob("*.part")) == []


@pytest.mark.integration
class TestFreeMode:
    """Test free-mode output files."""

    def test_long_text_paginates_on_a4(self, tmp_path: Path):
        text = "\n\n".join(f"Paragraph {n}" for n in range(200))
        output = tmp_path / "free.pdf"

        write_default(text, output)

        geometry = read_pdf_geometry(output)
        assert len(geometry) > 1
        assert set(geometry) == {(595.0, 842.0)}
        assert read_pdf_text(output)[0].startswith("Paragraph 0")

    def test_break_at_markers(self, tmp_path: Path):
        output = tmp_path / "free.pdf"

        write_default("[PAGE:1]\nA\n\n[PAGE:2]\nB\n\n", output, ReflowOptions(break_at_markers=True))

        assert read_pdf_text(output) == ["A", "B"]

    def test_metadata(self, tmp_path: Path):
        import fitz

        output = tmp_path / "meta.pdf"
        write_default("text", output, ReflowOptions(title="Edited report"))

        with fitz.open(str(output)) as doc:
            assert doc.metadata["title"] == "Edited report"
            assert doc.metadata["creator"] == "pagereflow"
