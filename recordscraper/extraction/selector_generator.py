"""
Structural selector generation.

A structural selector describes an element purely by the tag names on its
ancestor chain, e.g. `body > main > ul > li`. It deliberately carries no id
or class, so it matches every element of the same shape, including all
siblings of the described element. List discovery relies on that.
"""

from recordscraper.dom.document import Element

# The chain stops here; everything above it is shared by every element
CONTENT_ROOT = "body"


def structural_selector(element: Element) -> str:
    """
    Build the tag-ancestry selector for an element.

    Args:
        element: Element to describe.

    Returns:
        Child-combinator selector from the content root down to the element.
    """
    steps = []
    node: Element | None = element
    while node is not None:
        steps.append(node.name)
        if node.name == CONTENT_ROOT:
            break
        node = node.parent
    return " > ".join(reversed(steps))
