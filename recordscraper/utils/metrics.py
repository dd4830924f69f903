"""
Prometheus metrics for the record scraper.

Provides instrumentation for monitoring extraction behaviour.
"""

from prometheus_client import Counter, Histogram, Info

# =============================================================================
# Scraper Info
# =============================================================================

SCRAPER_INFO = Info(
    "recordscraper",
    "Record scraper metadata",
)

# =============================================================================
# Extraction Metrics
# =============================================================================

EXTRACTION_TOTAL = Counter(
    "recordscraper_extraction_total",
    "Total number of extraction calls",
    ["mode", "outcome"],
)

RECORDS_EXTRACTED = Histogram(
    "recordscraper_records_extracted",
    "Number of records returned per extraction call",
    ["mode"],
    buckets=[0, 1, 5, 10, 25, 50, 100, 250],
)

EXTRACTION_DURATION = Histogram(
    "recordscraper_extraction_duration_seconds",
    "Extraction call duration",
    ["mode"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
)

# =============================================================================
# Heuristic Metrics
# =============================================================================

HEURISTIC_DURATION = Histogram(
    "recordscraper_heuristic_duration_seconds",
    "Heuristic list discovery duration",
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0],
)

HEURISTIC_SAMPLE_POINTS = Histogram(
    "recordscraper_heuristic_sample_points",
    "Grid points hit-tested per discovery",
    buckets=[10, 50, 100, 250, 500, 1000, 5000],
)

HEURISTIC_DEGENERATE = Counter(
    "recordscraper_heuristic_degenerate_total",
    "Discoveries that fell back to the whole-document selector",
)

# =============================================================================
# Fallback Metrics
# =============================================================================

SCHEMA_ZIP_FALLBACK = Counter(
    "recordscraper_schema_zip_fallback_total",
    "Schema extractions that fell back to positional zipping",
)

LIST_SIMILARITY_FALLBACK = Counter(
    "recordscraper_list_similarity_fallback_total",
    "List extractions that used class-similarity container matching",
)

# =============================================================================
# Snapshot Metrics
# =============================================================================

SNAPSHOT_TOTAL = Counter(
    "recordscraper_snapshot_total",
    "Page snapshots taken",
    ["status"],
)

SNAPSHOT_DURATION = Histogram(
    "recordscraper_snapshot_duration_seconds",
    "Page snapshot duration",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


def record_extraction(mode: str, records: int, duration_seconds: float) -> None:
    """
    Record metrics for a finished extraction call.

    Args:
        mode: Entry point name (scrape, schema, list, auto).
        records: Number of records returned.
        duration_seconds: Wall time spent.
    """
    outcome = "records" if records else "empty"
    EXTRACTION_TOTAL.labels(mode=mode, outcome=outcome).inc()
    RECORDS_EXTRACTED.labels(mode=mode).observe(records)
    EXTRACTION_DURATION.labels(mode=mode).observe(duration_seconds)


def set_scraper_info(version: str) -> None:
    """Set scraper metadata."""
    SCRAPER_INFO.info({"version": version})
