"""
Free-form record extraction.

Turns every matched element into an untyped record of image URLs and text
lines. The element set either comes from a caller selector or from
heuristic list discovery.
"""

from recordscraper.config import HeuristicConfig
from recordscraper.dom.document import Document, Element
from recordscraper.extraction.heuristics import HeuristicLocator
from recordscraper.models import Record, ScrapeResult
from recordscraper.utils.logging import ScraperLogger
from recordscraper.utils.url_utils import is_data_url, widest_srcset_candidate


class RecordExtractor:
    """
    Extracts loosely typed records from matched elements.

    Keys per record:
    - img_<i>: URL of the i-th image inside the element
    - record_<iiii>: i-th line of the element's rendered text
    """

    def __init__(
        self,
        document: Document,
        heuristic_config: HeuristicConfig | None = None,
        logger: ScraperLogger | None = None,
    ):
        """
        Initialize the record extractor.

        Args:
            document: Document to extract from.
            heuristic_config: Discovery parameters used when no selector is given.
            logger: Logger instance.
        """
        self.document = document
        self.heuristic_config = heuristic_config or HeuristicConfig()
        self.logger = logger or ScraperLogger("record_extractor")

    def extract(self, selector: str | None = None) -> ScrapeResult:
        """
        Extract one record per matched element.

        Args:
            selector: CSS selector of the items; discovered when omitted.

        Returns:
            Records in match order.
        """
        if selector is None:
            locator = HeuristicLocator(self.document, self.heuristic_config, self.logger)
            elements = locator.locate().elements
        else:
            elements = self.document.query_all(selector)

        return [self.to_record(element) for element in elements]

    def to_record(self, element: Element) -> Record:
        record: Record = {}

        for index, image in enumerate(element.query_all("img")):
            url = self.image_url(image)
            if url:
                record[f"img_{index}"] = url

        for index, line in enumerate(element.inner_text.split("\n")):
            record[f"record_{index:04d}"] = line.strip()

        return record

    def image_url(self, image: Element) -> str | None:
        """
        Pick the URL for an image.

        The widest srcset candidate wins over src. Inline data URIs are
        never reported.
        """
        srcset = image.get_attribute("srcset")
        if srcset:
            candidate = widest_srcset_candidate(srcset)
            if candidate and not is_data_url(candidate):
                return candidate

        src = image.get_attribute("src")
        if not src or not src.strip() or is_data_url(src):
            return None
        return self.document.resolve_url(src)
