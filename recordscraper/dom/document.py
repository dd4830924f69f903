"""
Read-only host tree for extraction.

A Document wraps a parsed HTML tree together with rendered geometry, a
viewport and a scroll offset, and exposes the host operations the
extractors need: selector queries (soupsieve), hit-testing, box sizes,
scroll get/set and text extraction.

Open and closed shadow roots are read from declarative shadow DOM
(`<template shadowrootmode="open">` as the first template child of the
host). They are detached from the light tree, so document-level queries
never see shadow content.
"""

from collections.abc import Mapping
from typing import Any

from bs4 import BeautifulSoup
from bs4.element import Tag
from soupsieve import SelectorSyntaxError

from recordscraper.dom.layout import (
    GEOMETRY_ATTRIBUTE,
    HIDDEN_ATTRIBUTE,
    NON_RENDERED_TAGS,
    Box,
    StaticLayout,
    parse_geometry,
)
from recordscraper.dom.text import render_inner_text
from recordscraper.exceptions import DetachedElementError, InvalidSelectorError, SnapshotError
from recordscraper.utils.url_utils import resolve_url

SHADOW_MODE_ATTRIBUTES = ("shadowrootmode", "shadowroot")


class Element:
    """
    Handle to one element of a Document.

    Handles compare by identity: two structurally identical sibling
    elements are distinct handles.
    """

    __slots__ = ("_tag", "_document")

    def __init__(self, tag: Tag, document: "Document"):
        self._tag = tag
        self._document = document

    def __repr__(self) -> str:
        classes = "".join(f".{cls}" for cls in self.class_list)
        return f"<Element {self.name}{classes}>"

    @property
    def tag(self) -> Tag:
        """Underlying parsed tag."""
        return self._tag

    @property
    def document(self) -> "Document":
        return self._document

    @property
    def name(self) -> str:
        """Lowercase tag name."""
        return self._tag.name.lower()

    @property
    def tag_name(self) -> str:
        """Uppercase tag name, as the DOM reports it."""
        return self._tag.name.upper()

    @property
    def parent(self) -> "Element | None":
        """Parent element; None at the tree root or the top of a shadow tree."""
        parent = self._tag.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        if self._document.shadow_root_for_template(parent) is not None:
            return None
        return self._document.wrap(parent)

    @property
    def parent_node(self) -> "Element | ShadowRoot | None":
        """Parent element, or the shadow root at the top of a shadow tree."""
        parent = self._tag.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        root = self._document.shadow_root_for_template(parent)
        if root is not None:
            return root
        return self._document.wrap(parent)

    @property
    def children(self) -> list["Element"]:
        return [self._document.wrap(child) for child in self._tag.children if isinstance(child, Tag)]

    @property
    def attributes(self) -> dict[str, str]:
        return {name: _attribute_text(value) for name, value in self._tag.attrs.items()}

    def get_attribute(self, name: str) -> str | None:
        value = self._tag.get(name)
        if value is None:
            return None
        return _attribute_text(value)

    def has_attribute(self, name: str) -> bool:
        return self._tag.has_attr(name)

    @property
    def element_id(self) -> str:
        return self.get_attribute("id") or ""

    @property
    def class_list(self) -> list[str]:
        value = self._tag.get("class")
        if not value:
            return []
        if isinstance(value, str):
            return value.split()
        return list(value)

    @property
    def box(self) -> Box:
        return self._document.box(self)

    @property
    def area(self) -> float:
        """Rendered width times height."""
        return self.box.area

    @property
    def inner_text(self) -> str:
        return self._document.inner_text(self)

    @property
    def text_content(self) -> str:
        return self._tag.get_text()

    @property
    def inner_html(self) -> str:
        return self._tag.decode_contents()

    @property
    def shadow_root(self) -> "ShadowRoot | None":
        """The element's open shadow root, if any."""
        return self._document.open_shadow_root(self)

    def query_all(self, selector: str) -> list["Element"]:
        return self._document.select(self._tag, selector)

    def query(self, selector: str) -> "Element | None":
        return self._document.select_one(self._tag, selector)

    def contains(self, other: "Element") -> bool:
        """Whether `other` is this element or one of its light descendants."""
        node = other.tag
        while node is not None:
            if node is self._tag:
                return True
            node = node.parent
        return False


class ShadowRoot:
    """Root of a shadow tree attached to a host element."""

    def __init__(self, host: Element, template: Tag, mode: str):
        self.host = host
        self.mode = mode
        self._template = template

    def __repr__(self) -> str:
        return f"<ShadowRoot {self.mode} of {self.host!r}>"

    @property
    def is_open(self) -> bool:
        return self.mode == "open"

    @property
    def tag(self) -> Tag:
        return self._template

    @property
    def parent_node(self) -> None:
        return None

    @property
    def children(self) -> list[Element]:
        document = self.host.document
        return [document.wrap(child) for child in self._template.children if isinstance(child, Tag)]

    @property
    def inner_html(self) -> str:
        return self._template.decode_contents()

    def query_all(self, selector: str) -> list[Element]:
        return self.host.document.select(self._template, selector)

    def query(self, selector: str) -> Element | None:
        return self.host.document.select_one(self._template, selector)

    def contains(self, other: Element) -> bool:
        node = other.tag
        while node is not None:
            if node is self._template:
                return True
            node = node.parent
        return False


class Document:
    """
    Parsed page with geometry, viewport and scroll state.

    The tree is never mutated after construction. The scroll offset is the
    only mutable state.
    """

    def __init__(
        self,
        html: str,
        url: str = "about:blank",
        viewport_width: int = 1280,
        viewport_height: int = 720,
        scroll_x: float = 0.0,
        scroll_y: float = 0.0,
        parser: str = "lxml",
    ):
        """
        Parse a document.

        Args:
            html: Page markup. Geometry attributes, when present, are used
                instead of the static layout.
            url: Document location, used to resolve relative URLs.
            viewport_width: Viewport width in CSS pixels.
            viewport_height: Viewport height in CSS pixels.
            scroll_x: Initial horizontal scroll offset.
            scroll_y: Initial vertical scroll offset.
            parser: BeautifulSoup tree builder.
        """
        self.location = url or "about:blank"
        self.viewport = (int(viewport_width), int(viewport_height))

        self._soup = BeautifulSoup(html, parser)
        self._handles: dict[int, Element] = {}
        self._shadow_by_host: dict[int, ShadowRoot] = {}
        self._shadow_by_template: dict[int, ShadowRoot] = {}

        self._boxes = self._read_geometry()
        self._attach_shadow_roots()

        root = self._soup.find(True)
        self._root = root if isinstance(root, Tag) else None
        if not self._boxes and self._root is not None:
            self._boxes = StaticLayout().compute(self._root, self.viewport[0])

        # Light-tree elements in paint order, for hit-testing
        self._paint_order: list[Tag] = self._soup.find_all(True)

        visible = [box for box in self._boxes.values() if box.visible]
        self.document_width = max((box.right for box in visible), default=0.0)
        self.document_height = max((box.bottom for box in visible), default=0.0)

        self._scroll = (0.0, 0.0)
        self.scroll_to(scroll_x, scroll_y)

    @classmethod
    def from_snapshot(cls, payload: Mapping[str, Any], location: str | None = None) -> "Document":
        """
        Build a Document from a live page snapshot payload.

        Args:
            payload: Mapping with html, url, viewport {width, height} and
                scroll {x, y}.
            location: Overrides the captured URL.

        Returns:
            The reconstructed Document.
        """
        url = location or (payload.get("url") if isinstance(payload, Mapping) else None) or "about:blank"
        try:
            html = payload["html"]
            viewport = payload["viewport"]
            scroll = payload.get("scroll") or {}
            width = int(viewport["width"])
            height = int(viewport["height"])
            scroll_x = float(scroll.get("x", 0.0))
            scroll_y = float(scroll.get("y", 0.0))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise SnapshotError(url, f"malformed snapshot payload: {e!r}") from e

        if not isinstance(html, str):
            raise SnapshotError(url, "snapshot html is not a string")

        return cls(
            html,
            url=url,
            viewport_width=width,
            viewport_height=height,
            scroll_x=scroll_x,
            scroll_y=scroll_y,
        )

    # =========================================================================
    # Construction
    # =========================================================================

    def _read_geometry(self) -> dict[int, Box]:
        boxes: dict[int, Box] = {}
        for tag in self._soup.find_all(True):
            raw = tag.attrs.pop(GEOMETRY_ATTRIBUTE, None)
            hidden = tag.attrs.pop(HIDDEN_ATTRIBUTE, None) is not None
            if raw is not None:
                boxes[id(tag)] = parse_geometry(_attribute_text(raw), hidden)
        return boxes

    def _attach_shadow_roots(self) -> None:
        for template in self._soup.find_all("template"):
            mode = next(
                (template.get(attr) for attr in SHADOW_MODE_ATTRIBUTES if template.has_attr(attr)),
                None,
            )
            host = template.parent
            if mode is None or host is None or isinstance(host, BeautifulSoup):
                continue
            if id(host) in self._shadow_by_host or id(host) in self._shadow_by_template:
                continue

            template.extract()
            root = ShadowRoot(self.wrap(host), template, _attribute_text(mode).strip().lower())
            self._shadow_by_host[id(host)] = root
            self._shadow_by_template[id(template)] = root

    # =========================================================================
    # Tree access
    # =========================================================================

    def wrap(self, tag: Tag) -> Element:
        """Return the unique handle for a parsed tag."""
        handle = self._handles.get(id(tag))
        if handle is None:
            handle = Element(tag, self)
            self._handles[id(tag)] = handle
        return handle

    @property
    def root(self) -> Element | None:
        """The document element (<html>)."""
        return self.wrap(self._root) if self._root is not None else None

    @property
    def body(self) -> Element | None:
        return self.query("body")

    @property
    def children(self) -> list[Element]:
        root = self.root
        return [root] if root is not None else []

    @property
    def shadow_root(self) -> None:
        """Documents never host a shadow root."""
        return None

    def open_shadow_root(self, element: Element) -> ShadowRoot | None:
        """The open shadow root hosted by `element`; closed roots are invisible."""
        self._check_owner(element, "shadow_root")
        root = self._shadow_by_host.get(id(element.tag))
        if root is None or not root.is_open:
            return None
        return root

    def shadow_root_for_template(self, tag: Tag) -> ShadowRoot | None:
        return self._shadow_by_template.get(id(tag))

    # =========================================================================
    # Queries
    # =========================================================================

    def select(self, scope: Tag, selector: str) -> list[Element]:
        try:
            found = scope.select(selector)
        except SelectorSyntaxError as e:
            raise InvalidSelectorError(selector, str(e)) from e
        return [self.wrap(tag) for tag in found]

    def select_one(self, scope: Tag, selector: str) -> Element | None:
        try:
            found = scope.select_one(selector)
        except SelectorSyntaxError as e:
            raise InvalidSelectorError(selector, str(e)) from e
        return self.wrap(found) if found is not None else None

    def query_all(self, selector: str) -> list[Element]:
        return self.select(self._soup, selector)

    def query(self, selector: str) -> Element | None:
        return self.select_one(self._soup, selector)

    # =========================================================================
    # Rendering
    # =========================================================================

    def box(self, element: Element) -> Box:
        self._check_owner(element, "box")
        return self._boxes.get(id(element.tag), Box())

    def is_hidden(self, tag: Tag) -> bool:
        if tag.name in NON_RENDERED_TAGS:
            return True
        box = self._boxes.get(id(tag))
        return box is not None and not box.visible

    def inner_text(self, element: Element) -> str:
        self._check_owner(element, "inner_text")
        return render_inner_text(element.tag, self.is_hidden)

    def element_from_point(self, x: float, y: float) -> Element | None:
        """
        Hit-test a viewport point.

        The topmost element is the last light-tree element in document
        order whose box contains the point.

        Args:
            x: Viewport x coordinate.
            y: Viewport y coordinate.

        Returns:
            The hit element, or None outside the viewport or the page.
        """
        width, height = self.viewport
        if x < 0 or y < 0 or x >= width or y >= height:
            return None

        doc_x = x + self._scroll[0]
        doc_y = y + self._scroll[1]
        hit = None
        for tag in self._paint_order:
            box = self._boxes.get(id(tag))
            if box is not None and box.contains(doc_x, doc_y):
                hit = tag
        return self.wrap(hit) if hit is not None else None

    # =========================================================================
    # Scroll
    # =========================================================================

    @property
    def scroll_position(self) -> tuple[float, float]:
        return self._scroll

    def scroll_to(self, x: float, y: float) -> None:
        """Scroll to a document offset, clamped to the scrollable range."""
        max_x = max(0.0, self.document_width - self.viewport[0])
        max_y = max(0.0, self.document_height - self.viewport[1])
        self._scroll = (
            min(max(0.0, float(x)), max_x),
            min(max(0.0, float(y)), max_y),
        )

    # =========================================================================
    # URLs
    # =========================================================================

    def resolve_url(self, relative_url: str) -> str:
        """Resolve a URL against the document location."""
        return resolve_url(self.location, relative_url)

    def _check_owner(self, element: Element, operation: str) -> None:
        if element.document is not self:
            raise DetachedElementError(element.name, operation)


def _attribute_text(value) -> str:
    """Flatten multi-valued attributes (class, rel) into their DOM string."""
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)
