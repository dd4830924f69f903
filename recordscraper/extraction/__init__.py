"""Extraction components: selectors, list discovery and record extractors."""

from recordscraper.extraction.auto_list import AutoListExtractor, child_selector
from recordscraper.extraction.heuristics import (
    HeuristicLocator,
    HeuristicResult,
    preserved_scroll,
    scrapable_heuristics,
)
from recordscraper.extraction.list_extractor import ListExtractor
from recordscraper.extraction.record_extractor import RecordExtractor
from recordscraper.extraction.schema_extractor import SchemaExtractor
from recordscraper.extraction.selector_generator import structural_selector
from recordscraper.extraction.values import read_value

__all__ = [
    "AutoListExtractor",
    "HeuristicLocator",
    "HeuristicResult",
    "ListExtractor",
    "RecordExtractor",
    "SchemaExtractor",
    "child_selector",
    "preserved_scroll",
    "read_value",
    "scrapable_heuristics",
    "structural_selector",
]
