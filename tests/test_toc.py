"""Tests for table of contents resolution."""

import pytest

from epub_factory import nav_document, nav_point, ncx_document
from epub_parts.core.exceptions import NoTableOfContentsError
from epub_parts.core.toc import (
    TOC_STRATEGIES,
    TocBuilder,
    TocStrategy,
    normalize_href,
    resolve_toc,
    walk_nav_doc,
    walk_nav_map,
    walk_spine,
)
from epub_parts.core.xml import xml_to_dict
from epub_parts.models.epub import Item, Spine, TocSource

XHTML = "application/xhtml+xml"


class FakeLoader:
    """Serves documents from a dict and records what was requested."""

    def __init__(self, documents: dict[str, str]):
        self.documents = documents
        self.requested: list[str] = []

    def _get(self, href: str) -> str:
        self.requested.append(href)
        if href not in self.documents:
            raise FileNotFoundError(href)
        return self.documents[href]

    def load_xml(self, href):
        return xml_to_dict(self._get(href))

    def load_text(self, href):
        return self._get(href)


def make_manifest(*items: Item) -> dict:
    return {item.id: item for item in items}


def chapters(*ids: str) -> list[Item]:
    return [Item(id=i, href=f"text/{i}.xhtml", media_type=XHTML) for i in ids]


NCX_ITEM = Item(id="ncx", href="toc.ncx", media_type="application/x-dtbncx+xml")
NAV_ITEM = Item(id="nav", href="nav.xhtml", media_type=XHTML, properties="nav")


def assert_contiguous_orders(toc):
    assert [chapter.order for chapter in toc.values()] == list(range(len(toc)))


class TestTocBuilder:
    """Test ordering and id rules of the builder."""

    def test_orders_are_contiguous(self):
        builder = TocBuilder()
        builder.add("a", "A")
        builder.add(None, "skipped")
        builder.add("b", "B")

        assert list(builder.toc) == ["a", "b"]
        assert_contiguous_orders(builder.toc)

    def test_missing_id_is_skipped(self):
        builder = TocBuilder()

        assert builder.add(None, "Nothing") is None
        assert builder.toc == {}

    def test_revisited_id_keeps_position(self):
        """Should let the last write win without breaking the numbering."""
        builder = TocBuilder()
        builder.add("a", "First")
        builder.add("b", "B")
        builder.add("a", "Second", fragment="frag")

        assert list(builder.toc) == ["a", "b"]
        assert builder.toc["a"].title == "Second"
        assert builder.toc["a"].fragment == "frag"
        assert builder.toc["a"].order == 0
        assert_contiguous_orders(builder.toc)


class TestNormalizeHref:
    def test_relative_to_base(self):
        assert normalize_href("../text/a.xhtml#x", "misc") == "text/a.xhtml"

    def test_percent_encoding(self):
        assert normalize_href("my%20file.xhtml") == "my file.xhtml"

    def test_fragment_only(self):
        assert normalize_href("#top") == ""


class TestWalkNavMap:
    """Test the NCX strategy."""

    def test_depth_first_order(self):
        points = nav_point(
            "p1",
            "One",
            "text/a.xhtml",
            nav_point("p2", "Two", "text/b.xhtml#s") + nav_point("p3", "Three", "text/c.xhtml"),
        ) + nav_point("p4", "Four", "text/d.xhtml")
        manifest = make_manifest(*chapters("a", "b", "c", "d"), NCX_ITEM)
        loader = FakeLoader({"toc.ncx": ncx_document(points)})

        toc = walk_nav_map(manifest, Spine(), loader)

        assert list(toc) == ["a", "b", "c", "d"]
        assert [c.title for c in toc.values()] == ["One", "Two", "Three", "Four"]
        assert [c.level for c in toc.values()] == [0, 1, 1, 0]
        assert toc["b"].fragment == "s"
        assert toc["b"].href == "text/b.xhtml"
        assert_contiguous_orders(toc)

    def test_unknown_targets_are_skipped(self):
        points = (
            nav_point("p1", "One", "text/a.xhtml")
            + nav_point("p2", "Ghost", "text/ghost.xhtml")
            + nav_point("p3", "Two", "text/b.xhtml")
        )
        manifest = make_manifest(*chapters("a", "b"), NCX_ITEM)

        toc = walk_nav_map(manifest, Spine(), FakeLoader({"toc.ncx": ncx_document(points)}))

        assert list(toc) == ["a", "b"]
        assert_contiguous_orders(toc)

    def test_src_relative_to_ncx_location(self):
        ncx = Item(id="ncx", href="misc/toc.ncx", media_type="application/x-dtbncx+xml")
        manifest = make_manifest(*chapters("a"), ncx)
        loader = FakeLoader(
            {"misc/toc.ncx": ncx_document(nav_point("p1", "One", "../text/a.xhtml"))}
        )

        assert list(walk_nav_map(manifest, Spine(), loader)) == ["a"]

    def test_uses_spine_toc_id(self):
        ncx = Item(id="custom", href="nav.ncx", media_type="application/x-dtbncx+xml")
        manifest = make_manifest(*chapters("a"), ncx)
        loader = FakeLoader({"nav.ncx": ncx_document(nav_point("p1", "One", "text/a.xhtml"))})

        toc = walk_nav_map(manifest, Spine(toc="custom"), loader)

        assert list(toc) == ["a"]
        assert loader.requested == ["nav.ncx"]

    def test_falls_back_to_ncx_media_type(self):
        manifest = make_manifest(*chapters("a"), NCX_ITEM)
        loader = FakeLoader({"toc.ncx": ncx_document(nav_point("p1", "One", "text/a.xhtml"))})

        assert list(walk_nav_map(manifest, Spine(toc="wrong"), loader)) == ["a"]

    def test_missing_label_uses_item_id(self):
        ncx = ncx_document('<navPoint id="p1"><content src="text/a.xhtml"/></navPoint>')
        manifest = make_manifest(*chapters("a"), NCX_ITEM)

        toc = walk_nav_map(manifest, Spine(), FakeLoader({"toc.ncx": ncx}))

        assert toc["a"].title == "a"

    def test_target_without_id_is_skipped(self):
        """Should drop points whose manifest item has no id."""
        anonymous = Item(href="text/anon.xhtml", media_type=XHTML)
        points = (
            nav_point("p1", "One", "text/a.xhtml")
            + nav_point("p2", "Anonymous", "text/anon.xhtml")
            + nav_point("p3", "Two", "text/b.xhtml")
        )
        manifest = make_manifest(*chapters("a", "b"), anonymous, NCX_ITEM)

        toc = walk_nav_map(manifest, Spine(), FakeLoader({"toc.ncx": ncx_document(points)}))

        assert None in manifest
        assert list(toc) == ["a", "b"]
        assert "Anonymous" not in [c.title for c in toc.values()]
        assert_contiguous_orders(toc)

    def test_no_ncx_item(self):
        assert walk_nav_map(make_manifest(*chapters("a")), Spine(), FakeLoader({})) == {}

    def test_document_without_nav_map(self):
        manifest = make_manifest(*chapters("a"), NCX_ITEM)
        loader = FakeLoader({"toc.ncx": '<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/"/>'})

        with pytest.raises(ValueError):
            walk_nav_map(manifest, Spine(), loader)


class TestWalkNavDoc:
    """Test the EPUB3 nav document strategy."""

    def test_list_order_and_levels(self):
        entries = """<ol>
          <li><a href="text/a.xhtml">Alpha</a>
            <ol><li><a href="text/b.xhtml#p">Beta</a></li></ol></li>
          <li><span>Group</span></li>
          <li><a href="text/c.xhtml">Gamma</a></li>
        </ol>"""
        manifest = make_manifest(*chapters("a", "b", "c"), NAV_ITEM)

        toc = walk_nav_doc(manifest, Spine(), FakeLoader({"nav.xhtml": nav_document(entries)}))

        assert list(toc) == ["a", "b", "c"]
        assert [c.title for c in toc.values()] == ["Alpha", "Beta", "Gamma"]
        assert [c.level for c in toc.values()] == [0, 1, 0]
        assert toc["b"].fragment == "p"
        assert_contiguous_orders(toc)

    def test_prefers_toc_nav_over_landmarks(self):
        """Should ignore the landmarks nav that precedes the toc nav."""
        entries = '<ol><li><a href="text/a.xhtml">Alpha</a></li></ol>'
        manifest = make_manifest(*chapters("a", "b"), NAV_ITEM)

        toc = walk_nav_doc(manifest, Spine(), FakeLoader({"nav.xhtml": nav_document(entries)}))

        assert list(toc) == ["a"]

    def test_untyped_nav_is_used(self):
        html = '<html><body><nav><ol><li><a href="text/b.xhtml">B</a></li></ol></nav></body></html>'
        manifest = make_manifest(*chapters("b"), NAV_ITEM)

        assert list(walk_nav_doc(manifest, Spine(), FakeLoader({"nav.xhtml": html}))) == ["b"]

    def test_target_without_id_is_skipped(self):
        anonymous = Item(href="text/anon.xhtml", media_type=XHTML)
        entries = """<ol>
          <li><a href="text/anon.xhtml">Anonymous</a></li>
          <li><a href="text/a.xhtml">Alpha</a></li>
          <li><a href="text/b.xhtml">Beta</a></li>
        </ol>"""
        manifest = make_manifest(*chapters("a", "b"), anonymous, NAV_ITEM)

        toc = walk_nav_doc(manifest, Spine(), FakeLoader({"nav.xhtml": nav_document(entries)}))

        assert list(toc) == ["a", "b"]
        assert [c.order for c in toc.values()] == [0, 1]

    def test_no_nav_item(self):
        assert walk_nav_doc(make_manifest(*chapters("a")), Spine(), FakeLoader({})) == {}

    def test_document_without_nav(self):
        manifest = make_manifest(*chapters("a"), NAV_ITEM)
        loader = FakeLoader({"nav.xhtml": "<html><body><p>nothing</p></body></html>"})

        with pytest.raises(ValueError):
            walk_nav_doc(manifest, Spine(), loader)


class TestWalkSpine:
    """Test the spine fallback."""

    def test_one_chapter_per_item(self):
        items = chapters("x", "y", "z")

        toc = walk_spine(make_manifest(*items), Spine(contents=items), FakeLoader({}))

        assert list(toc) == ["x", "y", "z"]
        assert [c.title for c in toc.values()] == ["x", "y", "z"]
        assert [c.order for c in toc.values()] == [0, 1, 2]
        assert toc["y"].href == "text/y.xhtml"

    def test_empty_spine(self):
        assert walk_spine({}, Spine(), FakeLoader({})) == {}


class TestResolveToc:
    """Test the strategy cascade."""

    def test_nav_map_wins(self):
        """Should return the NCX result untouched and never try the others."""
        manifest = make_manifest(*chapters("a", "b"), NCX_ITEM, NAV_ITEM)
        spine = Spine(contents=chapters("a", "b"))
        loader = FakeLoader(
            {
                "toc.ncx": ncx_document(nav_point("p1", "Only A", "text/a.xhtml")),
                "nav.xhtml": nav_document('<ol><li><a href="text/b.xhtml">B</a></li></ol>'),
            }
        )

        toc, source = resolve_toc(manifest, spine, loader)

        assert source == TocSource.NAV_MAP
        assert toc == walk_nav_map(manifest, spine, FakeLoader(loader.documents))
        assert loader.requested == ["toc.ncx"]

    def test_broken_ncx_falls_through_to_nav_doc(self):
        manifest = make_manifest(*chapters("a"), NCX_ITEM, NAV_ITEM)
        loader = FakeLoader(
            {"nav.xhtml": nav_document('<ol><li><a href="text/a.xhtml">A</a></li></ol>')}
        )

        toc, source = resolve_toc(manifest, Spine(contents=chapters("a")), loader)

        assert source == TocSource.NAV_DOCUMENT
        assert toc["a"].title == "A"

    def test_spine_fallback(self):
        items = chapters("a", "b", "c")

        toc, source = resolve_toc(make_manifest(*items), Spine(contents=items), FakeLoader({}))

        assert source == TocSource.SPINE
        assert list(toc) == ["a", "b", "c"]
        assert [c.order for c in toc.values()] == [0, 1, 2]

    def test_nothing_resolves(self):
        with pytest.raises(NoTableOfContentsError):
            resolve_toc(make_manifest(*chapters("a")), Spine(), FakeLoader({}))

    def test_strategy_exceptions_are_contained(self):
        calls = []

        def explode(manifest, spine, loader):
            calls.append("explode")
            raise RuntimeError("boom")

        def works(manifest, spine, loader):
            calls.append("works")
            return walk_spine(manifest, spine, loader)

        strategies = [
            TocStrategy("explode", TocSource.NAV_MAP, explode, "always fails"),
            TocStrategy("works", TocSource.SPINE, works, "spine"),
        ]
        items = chapters("a")

        _, source = resolve_toc(make_manifest(*items), Spine(contents=items), FakeLoader({}), strategies)

        assert calls == ["explode", "works"]
        assert source == TocSource.SPINE

    def test_default_strategy_order(self):
        assert [s.source for s in TOC_STRATEGIES] == [
            TocSource.NAV_MAP,
            TocSource.NAV_DOCUMENT,
            TocSource.SPINE,
        ]
