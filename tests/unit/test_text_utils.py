"""Unit tests for text normalization and decoding helpers."""

import pytest

from pagereflow.utils.encoding import decode_text
from pagereflow.utils.text import normalize_newlines, normalize_page_text, split_paragraphs


@pytest.mark.unit
class TestNormalization:
    """Test newline and page text normalization."""

    def test_normalize_newlines(self):
        assert normalize_newlines("a\r\nb\rc\n") == "a\nb\nc\n"

    def test_page_text_is_trimmed(self):
        assert normalize_page_text("\n\nTitle  \r\n\r\nBody\t\n\f") == "Title\n\nBody"

    def test_page_text_keeps_leading_indentation(self):
        assert normalize_page_text("  indented\nline") == "  indented\nline"


@pytest.mark.unit
class TestSplitParagraphs:
    """Test blank-line paragraph splitting."""

    def test_splits_on_blank_lines(self):
        assert split_paragraphs("one\ntwo\n\n\nthree") == ["one\ntwo", "three"]

    def test_whitespace_only_lines_separate_paragraphs(self):
        assert split_paragraphs("one\n   \ntwo") == ["one", "two"]

    def test_empty_text(self):
        assert split_paragraphs("\n\n") == []


@pytest.mark.unit
class TestDecodeText:
    """Test byte decoding with fallbacks."""

    def test_utf8(self):
        assert decode_text("Grüße aus Köln, schöne Grüße".encode("utf-8")) == "Grüße aus Köln, schöne Grüße"

    def test_fallback_chain_without_detection(self):
        data = "café".encode("latin-1")

        assert decode_text(data, ("utf-8", "latin-1"), use_chardet=False) == "café"

    def test_undecodable_bytes_use_replacement(self):
        assert decode_text(b"ab\xff", ("ascii",), use_chardet=False) == "ab�"
