"""Manifest parsing."""

from typing import Any

from epub_parts.core.xml import attributes_of, to_list
from epub_parts.models.epub import Item, Manifest


def parse_manifest(raw_items: Any) -> Manifest:
    """Map manifest item ids to ``Item``s.

    ``raw_items`` is the compact ``<item>`` list, or a single item when the
    manifest declares only one. Items without an id are kept under ``None``
    and are therefore unreachable by id.
    """
    manifest: Manifest = {}
    for raw in to_list(raw_items):
        item = Item.model_validate(attributes_of(raw))
        manifest[item.id] = item
    return manifest
