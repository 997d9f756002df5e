"""Table of contents resolution with cascading strategies."""

import logging
import posixpath
from dataclasses import dataclass
from typing import Any, Callable, Protocol
from urllib.parse import unquote

from bs4 import BeautifulSoup

from epub_parts.core.exceptions import NoTableOfContentsError
from epub_parts.core.xml import attributes_of, text_of, to_list
from epub_parts.models.epub import (
    Chapter,
    Item,
    Manifest,
    Spine,
    TableOfContents,
    TocSource,
)

log = logging.getLogger(__name__)

NCX_MEDIA_TYPE = "application/x-dtbncx+xml"


class DocumentLoader(Protocol):
    """Fetches documents by their package-relative href."""

    def load_xml(self, href: str) -> dict[str, Any]: ...

    def load_text(self, href: str) -> str: ...


class TocBuilder:
    """Accumulate chapters, numbering them in insertion order.

    Chapters without id are dropped. Adding an id a second time replaces
    the chapter but keeps its original position and order.
    """

    def __init__(self) -> None:
        self.toc: TableOfContents = {}

    def add(self, id: str | None, title: str, **fields: Any) -> Chapter | None:
        if id is None:
            return None
        existing = self.toc.get(id)
        order = existing.order if existing is not None else len(self.toc)
        chapter = Chapter(id=id, title=title, order=order, **fields)
        self.toc[id] = chapter
        return chapter


# =============================================================================
# Href resolution
# =============================================================================


def normalize_href(href: str, base: str = "") -> str:
    """Resolve ``href`` against the directory ``base`` without its fragment."""
    path = unquote(href.split("#", 1)[0])
    return posixpath.normpath(posixpath.join(base, path)) if path else ""


def _fragment(href: str) -> str | None:
    _, _, fragment = href.partition("#")
    return fragment or None


class _HrefIndex:
    """Manifest items by normalized href, with a case-insensitive fallback."""

    def __init__(self, manifest: Manifest):
        self._exact: dict[str, Item] = {}
        self._folded: dict[str, Item] = {}
        for item in manifest.values():
            if not item.href:
                continue
            path = normalize_href(item.href)
            self._exact.setdefault(path, item)
            self._folded.setdefault(path.lower(), item)

    def find(self, href: str | None, base: str) -> Item | None:
        if not href:
            return None
        path = normalize_href(href, base)
        return self._exact.get(path) or self._folded.get(path.lower())


# =============================================================================
# Strategy 1: NCX navigation map
# =============================================================================


def walk_nav_map(manifest: Manifest, spine: Spine, loader: DocumentLoader) -> TableOfContents:
    """Build the TOC from the NCX document named by ``spine.toc``.

    Nav points are visited depth-first, parents before children, keeping
    sibling order. Points whose target is not in the manifest are skipped.
    """
    item = manifest.get(spine.toc)
    if item is None:
        item = next(
            (i for i in manifest.values() if i.media_type == NCX_MEDIA_TYPE), None
        )
    if item is None:
        return {}

    ncx = loader.load_xml(item.href).get("ncx")
    if not isinstance(ncx, dict) or not isinstance(ncx.get("navMap"), dict):
        raise ValueError(f"{item.href} has no navMap")

    base = posixpath.dirname(normalize_href(item.href))
    hrefs = _HrefIndex(manifest)
    builder = TocBuilder()

    def walk(points: Any, level: int) -> None:
        for point in to_list(points):
            if not isinstance(point, dict):
                continue
            src = attributes_of(point.get("content")).get("src")
            target = hrefs.find(src, base)
            if target is not None:
                builder.add(
                    target.id,
                    _nav_label(point) or target.id,
                    href=target.href,
                    media_type=target.media_type,
                    fragment=_fragment(src),
                    level=level,
                    properties=target.properties,
                )
            else:
                log.debug(f"Nav point {src!r} does not match a manifest item")
            walk(point.get("navPoint"), level + 1)

    walk(ncx["navMap"].get("navPoint"), 0)
    return builder.toc


def _nav_label(point: dict) -> str | None:
    labels = to_list(point.get("navLabel"))
    if labels and isinstance(labels[0], dict):
        return text_of(labels[0].get("text"))
    return None


# =============================================================================
# Strategy 2: EPUB3 navigation document
# =============================================================================


def walk_nav_doc(manifest: Manifest, spine: Spine, loader: DocumentLoader) -> TableOfContents:
    """Build the TOC from the manifest item flagged with the ``nav`` property.

    Uses the ``<nav epub:type="toc">`` element, or the first ``<nav>``
    when none is typed, and visits its links in document order.
    """
    item = next((i for i in manifest.values() if "nav" in i.property_set()), None)
    if item is None:
        return {}

    soup = BeautifulSoup(loader.load_text(item.href), "html.parser")
    navs = soup.find_all("nav")
    if not navs:
        raise ValueError(f"{item.href} has no <nav> element")

    nav = next(
        (n for n in navs if "toc" in (n.get("epub:type") or "").split()), navs[0]
    )

    base = posixpath.dirname(normalize_href(item.href))
    hrefs = _HrefIndex(manifest)
    builder = TocBuilder()

    for anchor in nav.find_all("a"):
        href = anchor.get("href")
        target = hrefs.find(href, base)
        if target is None:
            continue
        builder.add(
            target.id,
            anchor.get_text(" ", strip=True) or target.id,
            href=target.href,
            media_type=target.media_type,
            fragment=_fragment(href),
            level=_list_depth(anchor, nav),
            properties=target.properties,
        )

    return builder.toc


def _list_depth(anchor, nav) -> int:
    depth = 0
    for parent in anchor.parents:
        if parent is nav:
            break
        if parent.name == "ol":
            depth += 1
    return max(depth - 1, 0)


# =============================================================================
# Strategy 3: spine order
# =============================================================================


def walk_spine(manifest: Manifest, spine: Spine, loader: DocumentLoader) -> TableOfContents:
    """Last resort: one chapter per spine item, titled by its id."""
    builder = TocBuilder()
    for item in spine.contents:
        builder.add(
            item.id,
            item.id,
            href=item.href,
            media_type=item.media_type,
            properties=item.properties,
        )
    return builder.toc


# =============================================================================
# Cascade
# =============================================================================


@dataclass
class TocStrategy:
    """Configuration for a TOC strategy."""

    name: str
    source: TocSource
    fn: Callable[[Manifest, Spine, DocumentLoader], TableOfContents]
    description: str


# Strategies in priority order
TOC_STRATEGIES: list[TocStrategy] = [
    TocStrategy(
        name="nav_map",
        source=TocSource.NAV_MAP,
        fn=walk_nav_map,
        description="NCX navigation map",
    ),
    TocStrategy(
        name="nav_document",
        source=TocSource.NAV_DOCUMENT,
        fn=walk_nav_doc,
        description="EPUB3 nav document",
    ),
    TocStrategy(
        name="spine",
        source=TocSource.SPINE,
        fn=walk_spine,
        description="Spine order",
    ),
]


def resolve_toc(
    manifest: Manifest,
    spine: Spine,
    loader: DocumentLoader,
    strategies: list[TocStrategy] | None = None,
) -> tuple[TableOfContents, TocSource]:
    """
    Run the strategies in order and return the first non-empty TOC.

    A strategy that raises is treated like one that found nothing.
    Raises NoTableOfContentsError when every strategy comes up empty.
    """
    if strategies is None:
        strategies = TOC_STRATEGIES

    for strategy in strategies:
        log.info(f"Trying toc strategy: {strategy.name} ({strategy.description})")

        try:
            toc = strategy.fn(manifest, spine, loader)
        except Exception as e:
            log.warning(f"Strategy {strategy.name} failed with error: {e}")
            continue

        if not toc:
            log.info(f"  Strategy {strategy.name}: No results")
            continue

        log.info(f"  Strategy {strategy.name}: SUCCESS - {len(toc)} chapters")
        return toc, strategy.source

    raise NoTableOfContentsError("No table of contents could be resolved")
