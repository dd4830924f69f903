"""
Shadow-aware selector resolution.

Selectors may contain the shadow-descend delimiter `>>`: every segment after
it resolves inside open shadow roots. Two resolution rules exist:

- `resolve_shadow_path`: strict walk used for schema fields. Each
  non-final segment only keeps elements exposing an open shadow root, and
  the next segment is queried inside those roots.
- `query_shadow_all` / `query_shadow`: permissive union used for lists.
  Each segment is queried in the node's own subtree, its own shadow root
  and the shadow roots of its direct children.

A missing or closed shadow root just yields no candidates.
"""

from typing import Union

from recordscraper.dom.document import Document, Element, ShadowRoot
from recordscraper.models import split_selector

QueryRoot = Union[Document, Element, ShadowRoot]


def resolve_shadow_path(document: Document, selector: str) -> list[Element]:
    """
    Resolve a delimited selector segment by segment.

    Args:
        document: Document to start from.
        selector: Selector with `>>` delimiters.

    Returns:
        Elements matched by the final segment, in resolution order.
    """
    parts = split_selector(selector)
    current: list[QueryRoot] = [document]

    for index, part in enumerate(parts):
        is_last = index == len(parts) - 1
        found: list[Element] = []

        for node in current:
            if index == 0:
                targets = node.query_all(part)
            else:
                root = node.shadow_root
                if root is None:
                    continue
                targets = root.query_all(part)

            if not is_last:
                targets = [target for target in targets if target.shadow_root is not None]
            found.extend(targets)

        if not found:
            return []
        current = found

    return current


def _union_query(node: QueryRoot, part: str) -> list[Element]:
    matches = list(node.query_all(part))

    root = getattr(node, "shadow_root", None)
    if root is not None:
        matches.extend(root.query_all(part))

    for child in node.children:
        child_root = child.shadow_root
        if child_root is not None:
            matches.extend(child_root.query_all(part))

    return matches


def query_shadow_all(root: QueryRoot, selector: str) -> list[Element]:
    """
    Collect every element a delimited selector reaches from `root`.

    Args:
        root: Document, element or shadow root to search from.
        selector: Selector with optional `>>` delimiters.

    Returns:
        Matches in discovery order, without duplicates.
    """
    current: list[QueryRoot] = [root]

    for part in split_selector(selector):
        found: list[Element] = []
        seen: set[int] = set()
        for node in current:
            for match in _union_query(node, part):
                if id(match) not in seen:
                    seen.add(id(match))
                    found.append(match)
        current = found

    return current


def query_shadow(root: QueryRoot, selector: str) -> Element | None:
    """
    Find the first element a delimited selector reaches from `root`.

    At each segment the node's own subtree is tried first, then its own
    shadow root, then the shadow roots of its direct children.

    Args:
        root: Document, element or shadow root to search from.
        selector: Selector with optional `>>` delimiters.

    Returns:
        The matched element, or None.
    """
    current: QueryRoot | None = root

    for part in split_selector(selector):
        if current is None:
            return None

        found = current.query(part)

        own_root = getattr(current, "shadow_root", None)
        if found is None and own_root is not None:
            found = own_root.query(part)

        if found is None:
            for child in current.children:
                child_root = child.shadow_root
                if child_root is not None:
                    found = child_root.query(part)
                    if found is not None:
                        break

        current = found

    return current
