"""
Tests for heuristic list discovery.
"""

import pytest

from recordscraper.config import HeuristicConfig
from recordscraper.dom.document import Document
from recordscraper.exceptions import ConfigurationError
from recordscraper.extraction.heuristics import (
    HeuristicLocator,
    preserved_scroll,
    scrapable_heuristics,
)
from recordscraper.models import HeuristicMetric

TALL_PAGE = '<body><div style="height: 3000px"><p>filler</p></div></body>'


class TestHeuristicLocator:
    """Tests for HeuristicLocator.locate."""

    def test_finds_equal_cards(self, cards_document):
        """Test that five equally sized cards are returned exactly."""
        result = HeuristicLocator(cards_document).locate()

        cards = cards_document.query_all(".card")
        assert len(result.elements) == 5
        assert all(a is b for a, b in zip(result.elements, cards))
        assert result.selector == "body > div > div"
        assert result.metric == pytest.approx(1.0)
        assert not result.degenerate

    def test_total_area_metric(self, cards_document):
        """Test that total_area scores by summed area."""
        config = HeuristicConfig(metric=HeuristicMetric.TOTAL_AREA)

        result = HeuristicLocator(cards_document, config).locate()

        assert result.metric == pytest.approx(5 * 300 * 300)
        assert len(result.elements) == 5

    def test_degenerate_fallback(self):
        """Test that a page without repeated items falls back to body."""
        document = Document("<body><p>Just one paragraph.</p></body>")

        result = HeuristicLocator(document).locate()

        assert result.degenerate
        assert result.selector == "body"
        assert [element.name for element in result.elements] == ["body"]

    def test_too_few_large_matches_is_degenerate(self):
        """Test that fewer than three qualifying matches never win."""
        document = Document(
            '<body><div style="display: flex">'
            '<div style="width: 300px; height: 300px">a</div>'
            '<div style="width: 300px; height: 300px">b</div>'
            "</div></body>"
        )

        assert HeuristicLocator(document).locate().degenerate

    def test_max_count_guard(self, cards_document):
        """Test that candidates with too many matches are rejected."""
        config = HeuristicConfig(max_count_per_page=5)

        assert HeuristicLocator(cards_document, config).locate().degenerate

    def test_small_items_ignored(self, cards_document):
        """Test that matches below min_area do not qualify."""
        config = HeuristicConfig(min_area=100000)

        assert HeuristicLocator(cards_document, config).locate().degenerate

    def test_counts_sample_points(self, cards_document):
        """Test that every grid point of every scroll step is sampled."""
        locator = HeuristicLocator(cards_document, HeuristicConfig(scrolls=2))

        result = locator.locate()

        assert result.sample_points == 2 * len(locator.grid())

    def test_rejects_bad_granularity(self, cards_document):
        """Test that a non-positive granularity is a configuration error."""
        with pytest.raises(ConfigurationError):
            HeuristicLocator(cards_document, HeuristicConfig(granularity=0))


class TestScrollRestoration:
    """Tests for scroll offset restoration during sampling."""

    def test_restored_after_locate(self):
        """Test that locate leaves the scroll offset unchanged."""
        document = Document(TALL_PAGE)
        document.scroll_to(0, 150)

        HeuristicLocator(document).locate()

        assert document.scroll_position == (0.0, 150.0)

    def test_restored_on_failure(self, monkeypatch):
        """Test that the offset is restored when hit-testing raises."""
        document = Document(TALL_PAGE)
        document.scroll_to(0, 150)

        def explode(x, y):
            raise RuntimeError("detached")

        monkeypatch.setattr(document, "element_from_point", explode)

        with pytest.raises(RuntimeError):
            HeuristicLocator(document).locate()

        assert document.scroll_position == (0.0, 150.0)

    def test_preserved_scroll_context(self):
        """Test the context manager directly."""
        document = Document(TALL_PAGE)

        with preserved_scroll(document) as saved:
            document.scroll_to(0, 900)
            assert document.scroll_position == (0.0, 900.0)

        assert saved == (0.0, 0.0)
        assert document.scroll_position == (0.0, 0.0)


class TestGeneralize:
    """Tests for lifting matches to their repeating containers."""

    def test_lifts_to_distinct_parents(self):
        """Test that lone children are replaced by their containers."""
        document = Document(
            "<body>"
            '<div class="row"><span>a</span></div>'
            '<div class="row"><span>b</span></div>'
            '<div class="row"><span>c</span></div>'
            "</body>"
        )

        lifted = HeuristicLocator.generalize(document.query_all("span"))

        assert all(element.name == "div" for element in lifted)
        assert len(lifted) == 3

    def test_stops_before_collapse(self, list_document):
        """Test that siblings are never merged into their shared parent."""
        items = list_document.query_all("li")

        assert HeuristicLocator.generalize(items) == items

    def test_single_element_unchanged(self, list_document):
        """Test that a single match is not lifted."""
        body = list_document.body

        assert HeuristicLocator.generalize([body]) == [body]


class TestScrapableHeuristics:
    """Tests for the functional entry point."""

    def test_returns_elements(self, cards_document):
        """Test that the function returns the discovered elements."""
        elements = scrapable_heuristics(cards_document)

        assert [element.get_attribute("class") for element in elements] == ["card"] * 5

    def test_accepts_metric_name(self, cards_document):
        """Test that the metric can be given by name."""
        elements = scrapable_heuristics(cards_document, metric="total_area")

        assert len(elements) == 5
