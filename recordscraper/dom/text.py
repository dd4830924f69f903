"""
Rendered text extraction.

Approximates the browser's innerText: whitespace runs collapse to one
space, block-level elements start and end lines, paragraphs are set off by
a blank line, <br> breaks lines, table cells are tab-separated, and
elements that are not rendered contribute nothing.
"""

import re
from collections.abc import Callable

from bs4.element import Tag

from recordscraper.dom.layout import is_text, parse_style

BLOCK_TAGS = frozenset([
    "address", "article", "aside", "blockquote", "body", "caption", "dd",
    "details", "dialog", "div", "dl", "dt", "fieldset", "figcaption", "figure",
    "footer", "form", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hgroup",
    "hr", "html", "legend", "li", "main", "menu", "nav", "ol", "option", "p",
    "pre", "section", "summary", "table", "tbody", "tfoot", "thead", "tr", "ul",
])

BLOCK_DISPLAYS = frozenset(["block", "flex", "grid", "list-item", "table", "table-row"])
INLINE_DISPLAYS = frozenset(["inline", "inline-block", "inline-flex", "inline-grid", "contents"])

CELL_TAGS = frozenset(["td", "th"])

WHITESPACE = re.compile(r"[ \t\n\r\f]+")

# Placeholders for required line breaks of one and two newlines. Adjacent
# placeholders collapse to the largest count among them.
_BREAK = "\x00"
_PARAGRAPH_BREAK = "\x01"
_REQUIRED = _BREAK + _PARAGRAPH_BREAK

# An optional forced newline, then a run of required breaks
BREAK_RUN = re.compile(r"\n? *[\x00\x01][\x00\x01 ]*")

PARAGRAPH_TAGS = frozenset(["p"])


def is_block(tag: Tag) -> bool:
    """Whether an element starts and ends a line of rendered text."""
    display = parse_style(tag).get("display")
    if display in BLOCK_DISPLAYS:
        return True
    if display in INLINE_DISPLAYS:
        return False
    return tag.name in BLOCK_TAGS


def _previous_cell(tag: Tag) -> bool:
    sibling = tag.find_previous_sibling(True)
    return sibling is not None and sibling.name in CELL_TAGS


def render_inner_text(tag: Tag, hidden: Callable[[Tag], bool]) -> str:
    """
    Render the visible text of an element.

    Args:
        tag: Element to render.
        hidden: Predicate telling whether a descendant is not rendered.

    Returns:
        Text with one rendered line per newline-separated line.
    """
    if hidden(tag):
        return tag.get_text()

    chunks: list[str] = []
    _collect(tag, chunks, hidden, preformatted=tag.name == "pre")

    text = "".join(chunks).strip(_REQUIRED + " ")
    # A forced newline counts towards the breaks that follow it
    text = BREAK_RUN.sub(_break_run, text)

    return "\n".join(line.strip(" ") for line in text.split("\n"))


def _break_run(match: re.Match) -> str:
    return "\n\n" if _PARAGRAPH_BREAK in match.group() else "\n"


def _collect(node: Tag, chunks: list[str], hidden: Callable[[Tag], bool], preformatted: bool) -> None:
    for child in node.children:
        if isinstance(child, Tag):
            if hidden(child):
                continue
            if child.name == "br":
                chunks.append("\n")
                continue
            if child.name in CELL_TAGS and _previous_cell(child):
                chunks.append("\t")

            marker = None
            if is_block(child):
                marker = _PARAGRAPH_BREAK if child.name in PARAGRAPH_TAGS else _BREAK
                chunks.append(marker)
            _collect(child, chunks, hidden, preformatted or child.name == "pre")
            if marker:
                chunks.append(marker)

        elif is_text(child):
            text = str(child)
            if not preformatted:
                text = WHITESPACE.sub(" ", text)
            chunks.append(text)
