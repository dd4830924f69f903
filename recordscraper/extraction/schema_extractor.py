"""
Schema extraction.

Resolves named field selectors independently, then groups the resolved
elements into logical items. Grouping clusters around the minimal bounding
element (MBE) of every element of the seed field; when any item is left
without some field, the fields are zipped by position instead.
"""

from collections.abc import Mapping
from typing import Any

from recordscraper.dom.document import Document, Element, ShadowRoot
from recordscraper.dom.shadow import resolve_shadow_path
from recordscraper.extraction.values import read_value
from recordscraper.models import FieldConfig, Record, ScrapeResult, parse_fields
from recordscraper.utils import metrics
from recordscraper.utils.logging import ScraperLogger

# Marks a field that has no element inside an item's MBE
_MISSING = object()


class SchemaExtractor:
    """
    Extracts records from a mapping of field label to FieldConfig.

    Example:
        extractor = SchemaExtractor(document)
        records = extractor.extract({
            "title": {"selector": ".card h2"},
            "image": {"selector": ".card img", "attribute": "src"},
        })
    """

    def __init__(
        self,
        document: Document,
        logger: ScraperLogger | None = None,
    ):
        self.document = document
        self.logger = logger or ScraperLogger("schema_extractor")

    def extract(self, fields: Mapping[str, FieldConfig | Mapping[str, Any]]) -> ScrapeResult:
        """
        Extract one record per logical item.

        Args:
            fields: Label to field configuration, in declaration order.

        Returns:
            Records in seed element order, or zipped by position when
            MBE grouping leaves gaps.
        """
        parsed = parse_fields(fields)
        if not parsed:
            return []

        resolved = {label: self.resolve(config) for label, config in parsed.items()}

        seed = self.seed_field(resolved)
        mbes = self.minimal_bounding_elements(resolved[seed])

        grouped: list[dict[str, Any]] = []
        for mbe in mbes:
            item: dict[str, Any] = {}
            for label, elements in resolved.items():
                element = next((e for e in elements if mbe.contains(e)), None)
                item[label] = (
                    _MISSING if element is None
                    else self._value(element, parsed[label])
                )
            grouped.append(item)

        incomplete = sum(1 for item in grouped if _MISSING in item.values())
        if incomplete:
            metrics.SCHEMA_ZIP_FALLBACK.inc()
            self.logger.grouping_fallback(seed_field=seed, incomplete_items=incomplete)
            return self.zip_positional(resolved, parsed)

        return grouped

    def resolve(self, config: FieldConfig) -> list[Element]:
        """Resolve a field's elements, walking shadow roots when enabled."""
        if config.shadow and config.uses_shadow_delimiter:
            return resolve_shadow_path(self.document, config.selector)
        return self.document.query_all(config.selector)

    @staticmethod
    def seed_field(resolved: Mapping[str, list[Element]]) -> str:
        """The field with the most resolved elements; the first declared wins ties."""
        return max(resolved, key=lambda label: len(resolved[label]))

    @staticmethod
    def minimal_bounding_elements(seeds: list[Element]) -> list[Element | ShadowRoot]:
        """
        Compute the MBE of every seed element.

        Each seed walks up while its parent node still contains no other
        seed. The walk crosses into the shadow root at the top of a shadow
        tree but never beyond it.
        """
        mbes: list[Element | ShadowRoot] = []
        for seed in seeds:
            candidate: Element | ShadowRoot = seed
            while True:
                parent = candidate.parent_node
                if parent is None:
                    break
                contained = sum(1 for other in seeds if parent.contains(other))
                if contained != 1:
                    break
                candidate = parent
            mbes.append(candidate)
        return mbes

    def zip_positional(
        self,
        resolved: Mapping[str, list[Element]],
        fields: Mapping[str, FieldConfig],
    ) -> ScrapeResult:
        """Assemble item i from element i of every field; empty items are dropped."""
        results: list[Record] = []
        for label, elements in resolved.items():
            for index, element in enumerate(elements):
                while len(results) <= index:
                    results.append({})
                results[index][label] = self._value(element, fields[label])

        return [record for record in results if record]

    @staticmethod
    def _value(element: Element, config: FieldConfig) -> str | None:
        return read_value(element, config.attribute, raw_text_fallback=True)
