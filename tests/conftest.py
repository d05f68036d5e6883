"""Pytest configuration and shared fixtures for the pagereflow test suite."""

import logging
from pathlib import Path

import pytest
from utils import A4, A4_LANDSCAPE, LETTER, create_pdf, create_text_pdf


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - full extract/write round trips")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def three_page_pdf(tmp_path: Path) -> Path:
    """A4 PDF whose pages read "A", "B" and "C"."""
    return create_text_pdf(tmp_path / "three_pages.pdf", ["A", "B", "C"])


@pytest.fixture
def mixed_size_pdf(tmp_path: Path) -> Path:
    """Three pages of different sizes: A4, US Letter and A4 landscape."""
    return create_pdf(
        tmp_path / "mixed.pdf",
        [("First page", A4), ("Second page", LETTER), ("Third page", A4_LANDSCAPE)],
    )


@pytest.fixture
def five_page_pdf(tmp_path: Path) -> Path:
    return create_text_pdf(tmp_path / "five_pages.pdf", [f"Page{n}" for n in range(1, 6)])


@pytest.fixture
def corrupt_pdf(tmp_path: Path) -> Path:
    path = tmp_path / "corrupt.pdf"
    path.write_bytes(b"this is not a pdf document at all")
    return path


@pytest.fixture
def restore_root_logging():
    """Restore root logger handlers and level after a test reconfigures them."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
