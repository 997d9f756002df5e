"""Spine parsing."""

from typing import Any

from epub_parts.core.exceptions import DanglingReferenceError
from epub_parts.core.xml import attributes_of, to_list
from epub_parts.models.epub import Manifest, Spine


def parse_spine(raw_spine: Any, manifest: Manifest) -> Spine:
    """Resolve the spine's itemrefs against the manifest.

    Attributes of ``<spine>`` override the defaults and are kept on the
    result. Raises ``DanglingReferenceError`` for an itemref whose idref
    is not a manifest id.
    """
    if not isinstance(raw_spine, dict):
        raw_spine = {}

    contents = []
    for index, itemref in enumerate(to_list(raw_spine.get("itemref"))):
        idref = attributes_of(itemref).get("idref")
        item = manifest.get(idref) if idref is not None else None

        if item is None or item.id is None:
            raise DanglingReferenceError(index=index, idref=idref, item=item)
        contents.append(item)

    return Spine.model_validate(
        {"toc": "ncx", **attributes_of(raw_spine), "contents": contents}
    )
