"""
Tests for the host tree: documents, geometry, text and shadow queries.
"""

import pytest

from recordscraper.dom.document import Document, ShadowRoot
from recordscraper.dom.layout import Box, StaticLayout, parse_geometry
from recordscraper.dom.shadow import query_shadow, query_shadow_all, resolve_shadow_path
from recordscraper.exceptions import DetachedElementError, InvalidSelectorError, SnapshotError

BASE_URL = "https://shop.example/catalog/"


class TestElementHandles:
    """Tests for Element identity and tree access."""

    def test_identical_siblings_are_distinct(self):
        """Test that structurally equal siblings are different handles."""
        document = Document("<body><p>same</p><p>same</p></body>")

        first, second = document.query_all("p")

        assert first is not second
        assert first != second

    def test_handles_are_cached(self, list_document):
        """Test that repeated queries return the same handle."""
        assert list_document.query("li") is list_document.query_all("li")[0]

    def test_parent_chain(self, list_document):
        """Test parent references up to the document element."""
        item = list_document.query("li")

        assert item.parent.name == "ul"
        assert list_document.root.name == "html"
        assert list_document.root.parent is None

    def test_attributes(self):
        """Test attribute access and multi-valued class lists."""
        document = Document('<body><div id="main" class="a b" data-x="1"></div></body>')
        div = document.query("div")

        assert div.element_id == "main"
        assert div.class_list == ["a", "b"]
        assert div.get_attribute("class") == "a b"
        assert div.get_attribute("missing") is None
        assert div.has_attribute("data-x")
        assert div.tag_name == "DIV"

    def test_contains(self, list_document):
        """Test descendant containment."""
        ul = list_document.query("ul")
        link = list_document.query("a")

        assert ul.contains(link)
        assert ul.contains(ul)
        assert not link.contains(ul)

    def test_invalid_selector(self, list_document):
        """Test that selector syntax errors are host errors."""
        with pytest.raises(InvalidSelectorError):
            list_document.query_all("div[")

    def test_foreign_element_rejected(self, list_document):
        """Test that elements of another document are detached."""
        other = Document("<body><p>x</p></body>")

        with pytest.raises(DetachedElementError):
            list_document.box(other.query("p"))


class TestShadowRoots:
    """Tests for declarative shadow roots."""

    def test_open_root_attached(self, shadow_document):
        """Test that open templates become shadow roots."""
        host = shadow_document.query("product-card")

        assert isinstance(host.shadow_root, ShadowRoot)
        assert host.shadow_root.query(".price").inner_text == "$5"

    def test_closed_root_hidden(self, shadow_document):
        """Test that closed roots are not exposed."""
        assert shadow_document.query("secret-card").shadow_root is None

    def test_shadow_content_not_in_light_tree(self, shadow_document):
        """Test that document queries do not see shadow content."""
        assert shadow_document.query_all(".price") == []
        assert shadow_document.query_all("template") == []

    def test_parent_node_is_shadow_root(self, shadow_document):
        """Test that shadow tree tops report their root as parent node."""
        root = shadow_document.query("product-card").shadow_root
        price = root.query(".price")

        assert price.parent is None
        assert price.parent_node is root

    def test_resolve_shadow_path(self, shadow_document):
        """Test the strict segment walk."""
        prices = resolve_shadow_path(shadow_document, "product-card >> .price")

        assert [price.inner_text for price in prices] == ["$5", "$7"]

    def test_resolve_shadow_path_requires_root(self, shadow_document):
        """Test that hosts without an open root end the walk."""
        assert resolve_shadow_path(shadow_document, "body >> .price") == []

    def test_query_shadow_all_union(self, shadow_document):
        """Test that the permissive union reaches children's shadow roots."""
        body = shadow_document.body

        prices = query_shadow_all(body, "product-card >> .price")

        assert [price.inner_text for price in prices] == ["$5", "$7"]

    def test_query_shadow_first(self, shadow_document):
        """Test single lookups through shadow roots."""
        assert query_shadow(shadow_document, "product-card >> .price").inner_text == "$5"
        assert query_shadow(shadow_document, "secret-card >> .price") is None


class TestGeometry:
    """Tests for boxes, hit-testing and scrolling."""

    def test_captured_geometry(self):
        """Test that geometry attributes are read and stripped."""
        document = Document(
            '<html data-box="0,0,800,600"><body data-box="0,0,800,600">'
            '<div data-box="10,20,100,50"></div>'
            '<p data-box="0,0,0,0" data-box-hidden="">x</p>'
            "</body></html>",
            viewport_width=800,
            viewport_height=600,
        )
        div = document.query("div")

        assert div.box == Box(10, 20, 100, 50)
        assert div.area == 5000
        assert not div.has_attribute("data-box")
        assert not document.query("p").box.visible

    def test_hit_test_topmost(self):
        """Test that the deepest element containing the point wins."""
        document = Document(
            '<html data-box="0,0,800,600"><body data-box="0,0,800,600">'
            '<div class="outer" data-box="0,0,400,400">'
            '<span data-box="0,0,100,100">x</span>'
            "</div></body></html>",
            viewport_width=800,
            viewport_height=600,
        )

        assert document.element_from_point(50, 50).name == "span"
        assert document.element_from_point(200, 200).get_attribute("class") == "outer"
        assert document.element_from_point(500, 500).name == "body"
        assert document.element_from_point(900, 10) is None

    def test_hit_test_follows_scroll(self):
        """Test that viewport points are offset by the scroll position."""
        document = Document(
            '<html data-box="0,0,800,2000"><body data-box="0,0,800,2000">'
            '<div data-box="0,1000,800,100"></div>'
            "</body></html>",
            viewport_width=800,
            viewport_height=600,
        )

        assert document.element_from_point(10, 10).name == "body"
        document.scroll_to(0, 1000)
        assert document.element_from_point(10, 10).name == "div"

    def test_scroll_clamped(self):
        """Test that scrolling stops at the document edges."""
        document = Document(
            '<body><div style="height: 1000px"></div></body>',
            viewport_width=800,
            viewport_height=600,
        )

        document.scroll_to(-50, 5000)

        assert document.scroll_position == (0.0, 400.0)

    def test_static_layout_rows(self):
        """Test that flex children are laid out in wrapping rows."""
        document = Document(
            '<body><div style="display: flex">'
            '<div class="c" style="width: 500px; height: 100px"></div>'
            '<div class="c" style="width: 500px; height: 100px"></div>'
            '<div class="c" style="width: 500px; height: 100px"></div>'
            "</div></body>",
            viewport_width=1280,
        )

        boxes = [element.box for element in document.query_all(".c")]

        assert [(box.x, box.y) for box in boxes] == [(0, 0), (500, 0), (0, 100)]

    def test_static_layout_hidden(self):
        """Test that display:none subtrees get no box."""
        document = Document('<body><div style="display: none"><p>x</p></div></body>')

        assert not document.query("p").box.visible

    def test_static_layout_text_lines(self):
        """Test that text contributes line height."""
        root = Document("<body><p>one</p><p>two</p></body>").body.tag

        boxes = StaticLayout(line_height=10).compute(root, 300)

        assert boxes[id(root)].height == 20

    def test_parse_geometry_malformed(self):
        """Test that malformed geometry is hidden."""
        assert not parse_geometry("1,2,three").visible


class TestInnerText:
    """Tests for rendered text."""

    def test_whitespace_collapsed(self):
        """Test that whitespace runs collapse."""
        document = Document("<body><p>  a \n\n  b  </p></body>")

        assert document.query("p").inner_text == "a b"

    def test_blocks_break_lines(self):
        """Test that block children produce lines."""
        document = Document("<body><div><span>a</span><div>b</div>c</div></body>")

        assert document.query("div").inner_text == "a\nb\nc"

    def test_paragraphs_separated_by_blank_line(self):
        """Test that paragraphs get a two-newline break."""
        document = Document("<body><div><p>a</p><p>b</p></div></body>")

        assert document.query("div").inner_text == "a\n\nb"

    def test_adjacent_breaks_take_largest(self):
        """Test that a paragraph break next to a block break is not doubled up."""
        document = Document("<body><div><h2>t</h2><p>a</p><div>b</div></div></body>")

        assert document.query("div").inner_text == "t\n\na\n\nb"

    def test_hidden_children_skipped(self):
        """Test that hidden and non-rendered content is excluded."""
        document = Document(
            '<body><div>shown<span style="display: none">hidden</span>'
            "<script>var x = 1;</script></div></body>"
        )

        assert document.query("div").inner_text == "shown"

    def test_table_cells_tabbed(self):
        """Test that table cells are tab separated."""
        document = Document("<body><table><tr><td>a</td><td>b</td></tr></table></body>")

        assert document.query("tr").inner_text == "a\tb"

    def test_preformatted_kept(self):
        """Test that whitespace inside pre is preserved."""
        document = Document("<body><pre>a  b</pre></body>")

        assert document.query("pre").inner_text == "a  b"


class TestSnapshotPayload:
    """Tests for Document.from_snapshot."""

    def test_builds_document(self, snapshot_payload):
        """Test that a payload becomes a Document with its state."""
        payload = {**snapshot_payload, "scroll": {"x": 0, "y": 0}}

        document = Document.from_snapshot(payload)

        assert document.location == BASE_URL
        assert document.viewport == (1280, 720)
        assert len(document.query_all(".tile")) == 3

    def test_location_override(self, snapshot_payload):
        """Test that an explicit location wins over the captured URL."""
        document = Document.from_snapshot(snapshot_payload, location="https://other.example/")

        assert document.resolve_url("/x") == "https://other.example/x"

    def test_malformed_payload(self):
        """Test that a payload without html is a snapshot error."""
        with pytest.raises(SnapshotError):
            Document.from_snapshot({"url": BASE_URL, "viewport": {"width": 10, "height": 10}})
