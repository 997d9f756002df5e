"""Data models for extracted chapter output."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class ChapterMetadata(BaseModel):
    """Metadata accompanying chapter content."""

    chapter_id: str
    order: int
    title: str
    level: int = 0
    source_file: str
    source_path: str
    extracted_at: datetime = Field(default_factory=datetime.now)
    word_count: int
    character_count: int
    paragraph_count: int


class ChapterOutput(BaseModel):
    """Complete chapter output."""

    metadata: ChapterMetadata
    content: str
    format: Literal["markdown", "text", "html"] = "markdown"


class BookOutput(BaseModel):
    """Manifest written next to the extracted chapters."""

    book_title: str
    authors: list[str]
    version: str
    toc_source: str
    total_chapters: int
    extracted_chapters: list[str]
    output_directory: str
    created_at: datetime = Field(default_factory=datetime.now)
    chapters: list[ChapterMetadata]
