"""Shared fixtures: EPUB archives written to temporary files."""

from pathlib import Path

import pytest

from epub_factory import nav_epub, ncx_epub, spine_only_epub


@pytest.fixture
def ncx_book(tmp_path: Path) -> Path:
    path = tmp_path / "ncx_book.epub"
    path.write_bytes(ncx_epub())
    return path


@pytest.fixture
def nav_book(tmp_path: Path) -> Path:
    path = tmp_path / "nav_book.epub"
    path.write_bytes(nav_epub())
    return path


@pytest.fixture
def spine_book(tmp_path: Path) -> Path:
    path = tmp_path / "spine_book.epub"
    path.write_bytes(spine_only_epub())
    return path
