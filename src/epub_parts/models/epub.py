"""Data models for EPUB structure."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Item(BaseModel):
    """Single manifest entry."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    id: str | None = None
    href: str = ""
    media_type: str = Field(default="", alias="media-type")
    properties: str | None = None

    def property_set(self) -> set[str]:
        """Whitespace separated ``properties`` as a set."""
        return set((self.properties or "").split())


# Manifest items keyed by id. An item declared without id ends up under None.
Manifest = dict[str | None, Item]


class Spine(BaseModel):
    """Reading order declared by the package document."""

    # Attributes of <spine> other than toc are kept as extra fields
    model_config = ConfigDict(extra="allow")

    toc: str = "ncx"
    contents: list[Item] = Field(default_factory=list)


class FlowEntry(BaseModel):
    """One step of the linear reading path."""

    index: int
    id: str
    href: str
    media_type: str


class Flow(BaseModel):
    """Linear reading path derived from the spine."""

    entries: list[FlowEntry] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def ids(self) -> list[str]:
        return [entry.id for entry in self.entries]


class TocSource(str, Enum):
    """Strategy that produced the table of contents."""

    NAV_MAP = "nav_map"
    NAV_DOCUMENT = "nav_document"
    SPINE = "spine"


class Chapter(BaseModel):
    """Single entry in table of contents."""

    id: str | None
    title: str
    order: int
    href: str | None = None
    media_type: str | None = None
    fragment: str | None = None
    level: int = 0
    properties: str | None = None


# Chapter id -> Chapter, insertion order is reading order
TableOfContents = dict[str, Chapter]


class BookMetadata(BaseModel):
    """Book-level metadata."""

    title: str = "Unknown Title"
    authors: list[str] = Field(default_factory=list)
    language: str | None = None
    publisher: str | None = None
    publication_date: str | None = None
    identifier: str | None = None
    description: str | None = None
    subjects: list[str] = Field(default_factory=list)
    meta: dict[str, str] = Field(default_factory=dict)


class Parts(BaseModel):
    """Complete parsed EPUB structure."""

    metadata: BookMetadata
    manifest: Manifest = Field(default_factory=dict)
    spine: Spine = Field(default_factory=Spine)
    flow: Flow = Field(default_factory=Flow)
    toc: TableOfContents = Field(default_factory=dict)
    toc_source: TocSource | None = None
    version: str = "2.0"
