"""
Rendered-box geometry for documents.

Boxes come from one of two sources:

- Geometry attributes (`data-box="x,y,w,h"`, `data-box-hidden`) written by the
  live page snapshot. They are in document coordinates and are stripped
  from the tree once read.
- A static flow layout for plain HTML. It honours px `width`/`height` from
  inline styles and size attributes, `display:none`, flex/grid rows,
  inline-block and absolutely positioned elements. Margins, padding, fonts
  and percentages are ignored, so boxes are approximations.
"""

import re
from dataclasses import dataclass

from bs4.element import NavigableString, PreformattedString, Tag

GEOMETRY_ATTRIBUTE = "data-box"
HIDDEN_ATTRIBUTE = "data-box-hidden"

# Height of one line of text in the static layout
LINE_HEIGHT = 20.0

NON_RENDERED_TAGS = frozenset([
    "head", "script", "style", "template", "noscript",
    "meta", "link", "title", "base",
])

# Elements whose width/height attributes size the rendered box
SIZED_BY_ATTRIBUTES = frozenset(["img", "video", "canvas", "iframe", "embed", "object", "svg"])

ROW_DISPLAYS = frozenset(["flex", "inline-flex", "grid", "inline-grid"])
INLINE_BLOCK_DISPLAYS = frozenset(["inline-block", "inline-flex", "inline-grid"])

PX_VALUE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*(px)?\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class Box:
    """Rendered box of an element in document coordinates."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    visible: bool = True

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, x: float, y: float) -> bool:
        """Whether a document-coordinate point falls inside the box."""
        if not self.visible or self.width <= 0 or self.height <= 0:
            return False
        return self.x <= x < self.right and self.y <= y < self.bottom


HIDDEN_BOX = Box(visible=False)


def is_text(node) -> bool:
    """Whether a node is character data (not a comment, doctype or CDATA)."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def parse_style(tag: Tag) -> dict[str, str]:
    """Parse an inline style attribute into lowercase property/value pairs."""
    style = tag.get("style")
    if not style:
        return {}

    declarations = {}
    for declaration in str(style).split(";"):
        name, sep, value = declaration.partition(":")
        if sep and name.strip():
            declarations[name.strip().lower()] = value.strip().lower()
    return declarations


def parse_px(value) -> float | None:
    """Parse a px (or unitless) length; other units yield None."""
    if value is None:
        return None
    match = PX_VALUE.match(str(value))
    if not match:
        return None
    return float(match.group(1))


def parse_geometry(raw: str, hidden: bool = False) -> Box:
    """
    Parse a geometry attribute value.

    Args:
        raw: Comma-separated "x,y,width,height".
        hidden: Whether the element is not rendered.

    Returns:
        The decoded Box. Malformed values yield a hidden empty box.
    """
    try:
        x, y, width, height = (float(part) for part in raw.split(","))
    except ValueError:
        return HIDDEN_BOX
    if hidden:
        return Box(x, y, 0.0, 0.0, visible=False)
    return Box(x, y, width, height)


def is_hidden(tag: Tag, style: dict[str, str] | None = None) -> bool:
    """Whether an element generates no box in the static layout."""
    if tag.name in NON_RENDERED_TAGS or tag.has_attr("hidden"):
        return True
    if tag.name == "input" and str(tag.get("type", "")).lower() == "hidden":
        return True
    if style is None:
        style = parse_style(tag)
    return style.get("display") == "none"


class StaticLayout:
    """
    Approximate flow layout for documents without captured geometry.

    Block children stack vertically; children of flex/grid containers,
    inline-blocks and floats fill rows and wrap when the row is full.
    """

    def __init__(self, line_height: float = LINE_HEIGHT):
        self.line_height = line_height

    def compute(self, root: Tag, viewport_width: float) -> dict[int, Box]:
        """
        Lay out a subtree.

        Args:
            root: Root element (usually <html>).
            viewport_width: Width available to the root.

        Returns:
            Mapping of id(tag) to its Box.
        """
        boxes: dict[int, Box] = {}
        if is_hidden(root):
            self._hide(root, boxes)
        else:
            self._layout(root, 0.0, 0.0, float(viewport_width), boxes)
        return boxes

    def _hide(self, tag: Tag, boxes: dict[int, Box]) -> None:
        boxes[id(tag)] = HIDDEN_BOX
        for descendant in tag.find_all(True):
            boxes[id(descendant)] = HIDDEN_BOX

    def _explicit_size(self, tag: Tag, style: dict[str, str], dimension: str) -> float | None:
        size = parse_px(style.get(dimension))
        if size is None and tag.name in SIZED_BY_ATTRIBUTES:
            size = parse_px(tag.get(dimension))
        return size

    def _layout(
        self,
        tag: Tag,
        x: float,
        y: float,
        available_width: float,
        boxes: dict[int, Box],
    ) -> Box:
        style = parse_style(tag)
        width = self._explicit_size(tag, style, "width")
        if width is None:
            width = available_width
        height = self._explicit_size(tag, style, "height")

        in_rows = style.get("display") in ROW_DISPLAYS
        cursor_y = y
        row_x = x
        row_height = 0.0

        for child in tag.children:
            if isinstance(child, Tag):
                child_style = parse_style(child)
                if is_hidden(child, child_style):
                    self._hide(child, boxes)
                    continue

                if child_style.get("position") in ("absolute", "fixed"):
                    left = parse_px(child_style.get("left")) or 0.0
                    top = parse_px(child_style.get("top")) or 0.0
                    self._layout(child, x + left, y + top, width, boxes)
                    continue

                flows_in_row = (
                    in_rows
                    or child_style.get("display") in INLINE_BLOCK_DISPLAYS
                    or child_style.get("float") in ("left", "right")
                )
                if flows_in_row:
                    child_width = self._explicit_size(child, child_style, "width")
                    if child_width is None:
                        child_width = width
                    if row_x > x and row_x + child_width > x + width:
                        cursor_y += row_height
                        row_x = x
                        row_height = 0.0
                    box = self._layout(child, row_x, cursor_y, child_width, boxes)
                    row_x += box.width
                    row_height = max(row_height, box.height)
                else:
                    cursor_y += row_height
                    row_x = x
                    row_height = 0.0
                    box = self._layout(child, x, cursor_y, width, boxes)
                    cursor_y += box.height

            elif is_text(child) and child.strip():
                cursor_y += row_height
                row_x = x
                row_height = 0.0
                cursor_y += self.line_height

        cursor_y += row_height
        if height is None:
            height = cursor_y - y

        box = Box(x, y, width, height)
        boxes[id(tag)] = box
        return box
