"""Convenience lookups over a parsed EPUB's manifest."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Callable

from epub_parts.core.exceptions import MIMEError, UnknownItemError
from epub_parts.models.epub import Chapter, Item, Parts

if TYPE_CHECKING:
    from epub_parts.core.epub_parser import EpubParser

ALLOWED_MIMES = re.compile(r"^(application/xhtml\+xml|image/svg\+xml|text/css)$", re.I)
IMAGE_MIMES = re.compile(r"^image/", re.I)


class Retriever:
    """Search manifest entries and read the data behind them."""

    def __init__(self, parts: Parts, parser: EpubParser):
        self.parts = parts
        self.parser = parser

    def filter(self, predicate: Callable[[Item], bool]) -> list[Item]:
        return [item for item in self.parts.manifest.values() if predicate(item)]

    def match_all(self, pattern: str | re.Pattern[str]) -> list[Item]:
        """Items whose id contains ``pattern``, or matches it when compiled."""
        if isinstance(pattern, str):
            return self.filter(lambda item: item.id is not None and pattern in item.id)
        return self.filter(
            lambda item: item.id is not None and pattern.search(item.id) is not None
        )

    def search_manifest_or_panic(self, id: str) -> Item:
        item = self.parts.manifest.get(id)
        if item is None:
            raise UnknownItemError(id)
        return item

    def get_content(self, id: str) -> str:
        """Raw text of an XHTML, SVG or CSS manifest item."""
        item = self.search_manifest_or_panic(id)
        MIMEError.unless(id=id, actual=item.media_type, expected=ALLOWED_MIMES)
        return self.parser.load_text(item.href)

    def get_image(self, id: str) -> bytes:
        """Raw bytes of an image manifest item."""
        item = self.search_manifest_or_panic(id)
        MIMEError.unless(id=id, actual=item.media_type.strip(), expected=IMAGE_MIMES)
        return self.parser.load_bytes(item.href)

    def chapters(self) -> list[Chapter]:
        """Table of contents entries in reading order."""
        return list(self.parts.toc.values())

    def close(self) -> None:
        self.parser.close()
