"""Book metadata from the package document's <metadata> element."""

from typing import Any

from epub_parts.core.xml import attributes_of, text_of, to_list
from epub_parts.models.epub import BookMetadata


def parse_metadata(raw: Any) -> BookMetadata:
    """Extract Dublin Core fields and <meta> entries."""
    if not isinstance(raw, dict):
        raw = {}

    titles = _texts(raw.get("title"))
    languages = _texts(raw.get("language"))
    publishers = _texts(raw.get("publisher"))
    dates = _texts(raw.get("date"))
    identifiers = _texts(raw.get("identifier"))
    descriptions = _texts(raw.get("description"))

    return BookMetadata(
        title=titles[0] if titles else "Unknown Title",
        authors=_texts(raw.get("creator")),
        language=languages[0] if languages else None,
        publisher=publishers[0] if publishers else None,
        publication_date=dates[0] if dates else None,
        identifier=identifiers[0] if identifiers else None,
        description=descriptions[0] if descriptions else None,
        subjects=_texts(raw.get("subject")),
        meta=_parse_meta(raw.get("meta")),
    )


def _texts(value: Any) -> list[str]:
    texts = (text_of(node) for node in to_list(value))
    return [text for text in texts if text]


def _parse_meta(value: Any) -> dict[str, str]:
    # EPUB2: <meta name="cover" content="img"/>, EPUB3: <meta property="x">text</meta>
    meta: dict[str, str] = {}
    for node in to_list(value):
        attributes = attributes_of(node)
        if "name" in attributes:
            meta[attributes["name"]] = attributes.get("content", "")
        elif "property" in attributes:
            text = text_of(node)
            if text:
                meta[attributes["property"]] = text
    return meta
