"""Data models."""

from epub_parts.models.epub import (
    BookMetadata,
    Chapter,
    Flow,
    FlowEntry,
    Item,
    Manifest,
    Parts,
    Spine,
    TableOfContents,
    TocSource,
)
from epub_parts.models.events import ParseEvent, prepare_emit
from epub_parts.models.output import BookOutput, ChapterMetadata, ChapterOutput

__all__ = [
    # EPUB models
    "Item",
    "Manifest",
    "Spine",
    "FlowEntry",
    "Flow",
    "Chapter",
    "TableOfContents",
    "TocSource",
    "BookMetadata",
    "Parts",
    # Events
    "ParseEvent",
    "prepare_emit",
    # Output models
    "ChapterMetadata",
    "ChapterOutput",
    "BookOutput",
]
