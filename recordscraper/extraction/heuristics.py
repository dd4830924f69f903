"""
Heuristic list discovery.

Finds a region of repeated, similarly sized items (product cards, search
results, tickets...) without any selector input, by hit-testing a grid of
viewport points and scoring the structural selector of whatever is hit.

Discovery scrolls the document while sampling. The scroll offset is
restored on every exit path, but callers must not run other
scroll-sensitive work on the same document concurrently.
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from recordscraper.config import HeuristicConfig
from recordscraper.dom.document import Document, Element
from recordscraper.exceptions import ConfigurationError
from recordscraper.extraction.selector_generator import structural_selector
from recordscraper.models import HeuristicMetric
from recordscraper.utils import metrics
from recordscraper.utils.logging import ScraperLogger

# Returned when no candidate scores above zero; callers should treat it as a miss
FALLBACK_SELECTOR = "body"


@contextmanager
def preserved_scroll(document: Document) -> Iterator[tuple[float, float]]:
    """Hold the current scroll offset and restore it when the block exits."""
    saved = document.scroll_position
    try:
        yield saved
    finally:
        document.scroll_to(*saved)


@dataclass
class HeuristicResult:
    """Outcome of list discovery."""

    selector: str
    metric: float
    elements: list[Element] = field(default_factory=list)
    sample_points: int = 0

    @property
    def degenerate(self) -> bool:
        """True when nothing list-like was found."""
        return self.metric <= 0


class HeuristicLocator:
    """
    Discovers the structural selector that best represents a list.

    For every sample point the hit element's structural selector is
    evaluated over the whole page. Candidates need at least three matches
    larger than `min_area` and fewer than `max_count_per_page` matches.
    """

    def __init__(
        self,
        document: Document,
        config: HeuristicConfig | None = None,
        logger: ScraperLogger | None = None,
    ):
        """
        Initialize the locator.

        Args:
            document: Document to sample.
            config: Sampling parameters.
            logger: Logger instance.
        """
        self.document = document
        self.config = config or HeuristicConfig()
        self.logger = logger or ScraperLogger("heuristics")

        if self.config.granularity <= 0:
            raise ConfigurationError("granularity", "must be positive")
        if self.config.scrolls < 0:
            raise ConfigurationError("scrolls", "must not be negative")

    def grid(self) -> list[tuple[float, float]]:
        """Uniform grid of viewport sample points."""
        width, height = self.document.viewport
        step = self.config.grid_step

        points = []
        x = 0.0
        while x < width:
            y = 0.0
            while y < height:
                points.append((x, y))
                y += step
            x += step
        return points

    def score(self, areas: list[float]) -> float:
        """
        Score a candidate from the areas of its matches.

        total_area favours large regions; size_deviation favours uniformly
        sized items and is 1.0 when all matches have the same area.
        """
        if not areas:
            return 0.0
        if self.config.metric is HeuristicMetric.TOTAL_AREA:
            return float(sum(areas))

        biggest = max(areas)
        if biggest <= 0:
            return 0.0
        return 1 - (biggest - min(areas)) / biggest

    def locate(self) -> HeuristicResult:
        """
        Run discovery.

        Returns:
            HeuristicResult with the chosen selector and its generalized
            elements. A degenerate result carries the whole-document
            fallback.
        """
        start_time = time.perf_counter()

        selector, metric, sample_points = self._sample()
        elements = self.generalize(self.document.query_all(selector))

        result = HeuristicResult(
            selector=selector,
            metric=metric,
            elements=elements,
            sample_points=sample_points,
        )

        metrics.HEURISTIC_DURATION.observe(time.perf_counter() - start_time)
        metrics.HEURISTIC_SAMPLE_POINTS.observe(sample_points)
        if result.degenerate:
            metrics.HEURISTIC_DEGENERATE.inc()

        self.logger.heuristic_result(
            selector=selector,
            metric=metric,
            elements=len(elements),
            degenerate=result.degenerate,
            sample_points=sample_points,
        )
        return result

    def _sample(self) -> tuple[str, float, int]:
        best_selector = FALLBACK_SELECTOR
        best_metric = 0.0
        sample_points = 0
        qualifying: dict[str, list[Element]] = {}
        viewport_height = self.document.viewport[1]

        with preserved_scroll(self.document):
            for iteration in range(self.config.scrolls):
                self.document.scroll_to(0, iteration * viewport_height)

                for x, y in self.grid():
                    sample_points += 1
                    element = self.document.element_from_point(x, y)
                    if element is None:
                        continue

                    selector = structural_selector(element)
                    if selector not in qualifying:
                        qualifying[selector] = [
                            match for match in self.document.query_all(selector)
                            if match.area > self.config.min_area
                        ]
                    matches = qualifying[selector]

                    if len(matches) < self.config.min_matches:
                        continue

                    metric = self.score([match.area for match in matches])
                    if metric > best_metric and len(matches) < self.config.max_count_per_page:
                        best_selector = selector
                        best_metric = metric
                        self.logger.heuristic_candidate(
                            selector=selector,
                            metric=metric,
                            matches=len(matches),
                        )

        return best_selector, best_metric, sample_points

    @staticmethod
    def generalize(elements: list[Element]) -> list[Element]:
        """
        Lift matches up to their repeating containers.

        While no two elements share a parent, every element is replaced by
        its parent. Lifting stops before two elements would collapse onto
        the same parent, or when an element has no parent.
        """
        current = list(elements)
        while len(current) > 1:
            parents = [element.parent for element in current]
            if any(parent is None for parent in parents):
                break
            if len({id(parent) for parent in parents}) < len(parents):
                break
            current = parents
        return current


def scrapable_heuristics(
    document: Document,
    max_count_per_page: int = 50,
    min_area: float = 20000,
    scrolls: int = 3,
    metric: HeuristicMetric | str = HeuristicMetric.SIZE_DEVIATION,
    logger: ScraperLogger | None = None,
) -> list[Element]:
    """
    Find the elements of the most list-like region of a document.

    Args:
        document: Document to sample.
        max_count_per_page: Candidates must match fewer elements than this.
        min_area: Matches must be larger than this many square pixels.
        scrolls: Number of viewport-height scroll steps to sample.
        metric: 'size_deviation' or 'total_area'.
        logger: Logger instance.

    Returns:
        The discovered elements; [body] when nothing qualified.
    """
    config = HeuristicConfig(
        max_count_per_page=max_count_per_page,
        min_area=min_area,
        scrolls=scrolls,
        metric=HeuristicMetric(metric),
    )
    return HeuristicLocator(document, config, logger).locate().elements
