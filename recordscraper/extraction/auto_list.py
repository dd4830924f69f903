"""
Auto-list sampling.

Lists every direct child of the matched containers together with an
ad-hoc selector and its text. Meant as an aid for authoring field
schemas; nothing else consumes the output.
"""

from recordscraper.dom.document import Document, Element
from recordscraper.models import AutoListEntry
from recordscraper.utils.logging import ScraperLogger


def child_selector(element: Element) -> str:
    """
    Derive a selector for an element from its ancestry.

    Walks up to the document element. A step with an id is emitted as
    `tag#id` and ends the walk; other steps are `tag.class1.class2`.
    """
    steps = []
    node: Element | None = element
    while node is not None:
        if node.element_id:
            steps.append(f"{node.name}#{node.element_id}")
            break
        steps.append("".join([node.name, *(f".{cls}" for cls in node.class_list)]))
        node = node.parent
    return " > ".join(reversed(steps))


class AutoListExtractor:
    """Samples the children of list containers."""

    def __init__(
        self,
        document: Document,
        logger: ScraperLogger | None = None,
    ):
        self.document = document
        self.logger = logger or ScraperLogger("auto_list")

    def extract(self, list_selector: str) -> list[AutoListEntry]:
        """
        Sample every direct child of every matched container.

        Args:
            list_selector: Selector of the list containers.

        Returns:
            One entry per child, in document order.
        """
        entries = []
        for container in self.document.query_all(list_selector):
            for child in container.children:
                entries.append(AutoListEntry(
                    selector=child_selector(child),
                    inner_text=child.inner_text.strip(),
                ))

        self.logger.debug(
            "auto_list_sampled",
            list_selector=list_selector,
            entries=len(entries),
        )
        return entries
