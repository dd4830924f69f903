"""
List extraction.

Iterates the containers matched by a list selector and reads one record per
container from relative field selectors. When the list selector
under-matches, sibling containers are recovered by class similarity.
"""

import math
from collections.abc import Mapping
from typing import Any

from recordscraper.config import ListConfig
from recordscraper.dom.document import Document, Element
from recordscraper.dom.shadow import query_shadow, query_shadow_all
from recordscraper.exceptions import ConfigurationError
from recordscraper.extraction.values import read_value
from recordscraper.models import FieldConfig, Record, ScrapeResult, parse_fields, split_selector
from recordscraper.utils import metrics
from recordscraper.utils.logging import ScraperLogger


class ListExtractor:
    """
    Extracts records from a list of containers.

    Container and field lookups are shadow-aware: each `>>` segment is
    matched in the node's subtree, its own open shadow root and the open
    shadow roots of its direct children.
    """

    def __init__(
        self,
        document: Document,
        config: ListConfig | None = None,
        logger: ScraperLogger | None = None,
    ):
        """
        Initialize the list extractor.

        Args:
            document: Document to extract from.
            config: Default limit and class similarity threshold.
            logger: Logger instance.
        """
        self.document = document
        self.config = config or ListConfig()
        self.logger = logger or ScraperLogger("list_extractor")

    def extract(
        self,
        list_selector: str,
        fields: Mapping[str, FieldConfig | Mapping[str, Any]],
        limit: int | None = None,
    ) -> ScrapeResult:
        """
        Extract up to `limit` records.

        Args:
            list_selector: Selector of the list item containers.
            fields: Label to field configuration; field selectors are
                evaluated relative to each container.
            limit: Maximum number of records; defaults to the configured limit.

        Returns:
            Records in container order. Containers without any populated
            field are skipped.
        """
        if not isinstance(list_selector, str) or not list_selector.strip():
            raise ConfigurationError("list_selector", "expected a non-empty selector")

        limit = self.config.limit if limit is None else limit
        if limit <= 0:
            return []

        parsed = parse_fields(fields)
        containers = self.resolve_containers(list_selector, limit)

        # The container query does not change between passes, so one pass
        # over the containers yields every record there is to collect.
        records: ScrapeResult = []
        for container in containers:
            if len(records) >= limit:
                break
            record = self.read_record(container, parsed)
            if record:
                records.append(record)

        return records

    def resolve_containers(self, list_selector: str, limit: int) -> list[Element]:
        """Resolve list containers, recovering siblings when the selector under-matches."""
        containers = query_shadow_all(self.document, list_selector)
        if limit > 1 and len(containers) <= 1:
            siblings = self.similar_siblings(list_selector)
            if siblings:
                return siblings
        return containers

    def similar_siblings(self, list_selector: str) -> list[Element] | None:
        """
        Find siblings of the first match that share enough of its classes.

        A sibling is accepted when the number of class tokens it shares
        with the template is at least floor(len(template classes) * threshold).

        Returns:
            Accepted siblings, or None when the selector cannot anchor a
            template. Callers keep the exact matches when nothing is accepted.
        """
        leading = split_selector(list_selector)[0]
        if query_shadow(self.document, leading) is None:
            return None

        template = query_shadow(self.document, list_selector)
        if template is None:
            return None

        parent = template.parent_node
        if parent is None:
            return None

        template_classes = template.class_list
        required = math.floor(len(template_classes) * self.config.class_similarity)

        accepted = []
        # The matched template itself is not returned, only its look-alikes
        for child in parent.children:
            if child is template:
                continue
            shared = sum(1 for cls in template_classes if cls in child.class_list)
            if shared >= required:
                accepted.append(child)

        metrics.LIST_SIMILARITY_FALLBACK.inc()
        self.logger.similarity_fallback(
            list_selector=list_selector,
            template_classes=template_classes,
            accepted=len(accepted),
        )
        return accepted

    def read_record(self, container: Element, fields: Mapping[str, FieldConfig]) -> Record:
        """Read every field relative to one container; missing fields are omitted."""
        record: Record = {}
        for label, config in fields.items():
            relative = split_selector(config.selector)[-1]
            element = query_shadow(container, relative)
            if element is not None:
                record[label] = read_value(element, config.attribute)
        return record
