"""Parse EPUB archives into metadata, manifest, spine, flow and table of contents."""

from epub_parts.config import ParseConfig
from epub_parts.core.epub_parser import EpubParser, open_epub
from epub_parts.core.exceptions import (
    DanglingReferenceError,
    EmptyArchiveError,
    EntryNotFoundError,
    EpubError,
    MIMEError,
    MissingRootfileError,
    NoTableOfContentsError,
    UnknownItemError,
)
from epub_parts.core.retriever import Retriever
from epub_parts.models.epub import Parts, TocSource
from epub_parts.models.events import ParseEvent

__version__ = "0.1.0"

__all__ = [
    "open_epub",
    "EpubParser",
    "Retriever",
    "ParseConfig",
    "Parts",
    "TocSource",
    "ParseEvent",
    "EpubError",
    "MIMEError",
    "DanglingReferenceError",
    "UnknownItemError",
    "NoTableOfContentsError",
    "EntryNotFoundError",
    "EmptyArchiveError",
    "MissingRootfileError",
]
