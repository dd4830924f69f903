"""Host tree: parsed documents, geometry, text and shadow-aware queries."""

from recordscraper.dom.document import Document, Element, ShadowRoot
from recordscraper.dom.layout import Box, StaticLayout
from recordscraper.dom.shadow import query_shadow, query_shadow_all, resolve_shadow_path
from recordscraper.dom.snapshot import SNAPSHOT_SCRIPT, snapshot_page

__all__ = [
    "Box",
    "Document",
    "Element",
    "SNAPSHOT_SCRIPT",
    "ShadowRoot",
    "StaticLayout",
    "query_shadow",
    "query_shadow_all",
    "resolve_shadow_path",
    "snapshot_page",
]
