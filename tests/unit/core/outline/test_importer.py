"""Tests for reconciling an existing outline into bookmark nodes."""
from bookmarker.core.exceptions import PDFError
from bookmarker.core.models.bookmark import Absent, ExplicitRef, NamedRef, OutlineItem
from bookmarker.core.outline.importer import map_outline, resolve_destination_page
from bookmarker.core.ports.pdf import PDFPort


class FakePDF(PDFPort):
    """Anchors are 0-indexed page numbers; names map to anchors."""

    def __init__(self, num_pages=10, names=None, failing_anchors=()):
        self.num_pages = num_pages
        self.names = names or {}
        self.failing_anchors = set(failing_anchors)

    def get_page_count(self, path):
        return self.num_pages

    def get_existing_outline(self, path):
        return None

    def resolve_named_destination(self, path, name):
        if name == "explode":
            raise PDFError("name tree is corrupt")
        anchor = self.names.get(name)
        return ExplicitRef(anchor) if anchor is not None else None

    def resolve_page_index(self, path, anchor):
        if anchor in self.failing_anchors:
            raise PDFError("bad reference")
        if isinstance(anchor, int) and 0 <= anchor < self.num_pages:
            return anchor + 1
        return None

    def embed_outline(self, path, descriptor):
        return b""

    def render_page_image(self, path, page, dpi=150):
        return b""


class TestResolveDestinationPage:
    def test_explicit(self):
        assert resolve_destination_page(FakePDF(), "doc.pdf", ExplicitRef(4)) == 5

    def test_named(self):
        pdf = FakePDF(names={"intro": 2})
        assert resolve_destination_page(pdf, "doc.pdf", NamedRef("intro")) == 3

    def test_unknown_name(self):
        assert resolve_destination_page(FakePDF(), "doc.pdf", NamedRef("nope")) is None

    def test_absent(self):
        assert resolve_destination_page(FakePDF(), "doc.pdf", Absent()) is None

    def test_lookup_exception_is_unknown(self):
        pdf = FakePDF(failing_anchors=[3])
        assert resolve_destination_page(pdf, "doc.pdf", ExplicitRef(3)) is None
        assert resolve_destination_page(pdf, "doc.pdf", NamedRef("explode")) is None


class TestMapOutline:
    def test_mirrors_nesting_without_sorting(self):
        items = [
            OutlineItem("Second", ExplicitRef(5), [
                OutlineItem("B", ExplicitRef(8)),
                OutlineItem("A", ExplicitRef(6)),
            ]),
            OutlineItem("First", ExplicitRef(0)),
        ]
        forest = map_outline(FakePDF(), "doc.pdf", items, 10)
        assert [(n.title, n.page) for n in forest] == [("Second", 6), ("First", 1)]
        assert [(n.title, n.page) for n in forest[0].children] == [("B", 9), ("A", 7)]

    def test_unresolved_pages_default_to_one_at_any_depth(self):
        items = [OutlineItem("Top", Absent(), [
            OutlineItem("Mid", NamedRef("missing"), [
                OutlineItem("Leaf", ExplicitRef(99)),
            ]),
        ])]
        forest = map_outline(FakePDF(), "doc.pdf", items, 10)
        assert forest[0].page == 1
        assert forest[0].children[0].page == 1
        assert forest[0].children[0].children[0].page == 1

    def test_page_beyond_bound_clamped_to_one(self):
        pdf = FakePDF(num_pages=50)
        forest = map_outline(pdf, "doc.pdf", [OutlineItem("Far", ExplicitRef(30))], 20)
        assert forest[0].page == 1

    def test_blank_titles_become_untitled(self):
        items = [OutlineItem(None, ExplicitRef(0)), OutlineItem("   ", ExplicitRef(1)), OutlineItem(" Kept ", ExplicitRef(2))]
        forest = map_outline(FakePDF(), "doc.pdf", items, 10)
        assert [n.title for n in forest] == ["Untitled", "Untitled", "Kept"]

    def test_failure_does_not_stop_siblings(self):
        pdf = FakePDF(failing_anchors=[1])
        items = [OutlineItem("Bad", ExplicitRef(1)), OutlineItem("Good", ExplicitRef(4))]
        forest = map_outline(pdf, "doc.pdf", items, 10)
        assert [(n.title, n.page) for n in forest] == [("Bad", 1), ("Good", 5)]

    def test_fresh_unique_ids(self):
        items = [OutlineItem("A", ExplicitRef(0), [OutlineItem("B", ExplicitRef(1))])]
        forest = map_outline(FakePDF(), "doc.pdf", items, 10)
        assert forest[0].id != forest[0].children[0].id
