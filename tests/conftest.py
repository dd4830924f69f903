"""
Pytest configuration and shared fixtures.
"""

from typing import Any

import pytest

from recordscraper.dom.document import Document

BASE_URL = "https://shop.example/catalog/"


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


# =============================================================================
# Sample HTML Fixtures
# =============================================================================


@pytest.fixture
def sample_html_cards() -> str:
    """Five equally sized product cards in a flex container."""
    cards = "\n".join(
        f"""
        <div class="card" style="width: 300px; height: 300px">
            <h2>Card {i}</h2>
        </div>"""
        for i in range(1, 6)
    )
    return f"""
<!DOCTYPE html>
<html>
<head><title>Cards</title></head>
<body>
    <div class="grid" style="display: flex">
        {cards}
    </div>
</body>
</html>
"""


@pytest.fixture
def sample_html_products() -> str:
    """Three product items, each with a title and an image."""
    return """
<!DOCTYPE html>
<html>
<head><title>Products</title></head>
<body>
    <div class="item"><h2>Lamp</h2><img src="/img/lamp.jpg" alt="Lamp"></div>
    <div class="item"><h2>Chair</h2><img src="/img/chair.jpg" alt="Chair"></div>
    <div class="item"><h2>Table</h2><img src="/img/table.jpg" alt="Table"></div>
</body>
</html>
"""


@pytest.fixture
def sample_html_list() -> str:
    """Ten uniform list items with a name and a link."""
    items = "\n".join(
        f'<li class="item"><h3>Item {i}</h3><a href="/p/{i}">details</a></li>'
        for i in range(1, 11)
    )
    return f"""
<!DOCTYPE html>
<html>
<body>
    <ul class="results">
        {items}
    </ul>
</body>
</html>
"""


@pytest.fixture
def sample_html_shadow() -> str:
    """Custom elements with open and closed declarative shadow roots."""
    return """
<!DOCTYPE html>
<html>
<body>
    <product-card>
        <template shadowrootmode="open">
            <span class="price">$5</span>
        </template>
    </product-card>
    <product-card>
        <template shadowrootmode="open">
            <span class="price">$7</span>
        </template>
    </product-card>
    <secret-card>
        <template shadowrootmode="closed">
            <span class="price">$9</span>
        </template>
    </secret-card>
</body>
</html>
"""


@pytest.fixture
def cards_document(sample_html_cards: str) -> Document:
    """Document over the card grid."""
    return Document(sample_html_cards, url=BASE_URL)


@pytest.fixture
def products_document(sample_html_products: str) -> Document:
    """Document over the product items."""
    return Document(sample_html_products, url=BASE_URL)


@pytest.fixture
def list_document(sample_html_list: str) -> Document:
    """Document over the ten list items."""
    return Document(sample_html_list, url=BASE_URL)


@pytest.fixture
def shadow_document(sample_html_shadow: str) -> Document:
    """Document with shadow roots."""
    return Document(sample_html_shadow, url=BASE_URL)


# =============================================================================
# Live Page Fixtures
# =============================================================================


class FakePage:
    """Stands in for a Playwright page; evaluate returns a canned snapshot."""

    def __init__(self, payload: Any, url: str = BASE_URL):
        self.payload = payload
        self.url = url
        self.evaluations = 0

    async def evaluate(self, script: str) -> Any:
        self.evaluations += 1
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


@pytest.fixture
def snapshot_payload() -> dict[str, Any]:
    """Snapshot of three 400x300 tiles in a row, as the page serializer emits it."""
    tiles = "".join(
        f'<div class="tile" data-box="{i * 400},0,400,300">'
        f'<h3 class="name" data-box="{i * 400},0,400,20">Tile {i}</h3>'
        f'<a href="/t/{i}" data-box="{i * 400},20,400,20">open</a>'
        "</div>"
        for i in range(3)
    )
    html = (
        "<!DOCTYPE html>"
        '<html data-box="0,0,1280,720"><head data-box="0,0,0,0" data-box-hidden=""></head>'
        f'<body data-box="0,0,1280,720"><section class="tiles" data-box="0,0,1280,300">{tiles}</section>'
        "</body></html>"
    )
    return {
        "url": BASE_URL,
        "viewport": {"width": 1280, "height": 720},
        "scroll": {"x": 0, "y": 0},
        "elements": 12,
        "html": html,
    }


@pytest.fixture
def fake_page(snapshot_payload: dict[str, Any]) -> FakePage:
    """Fake page returning the tile snapshot."""
    return FakePage(snapshot_payload)


@pytest.fixture
def fake_page_factory() -> type[FakePage]:
    """Build fake pages with custom payloads."""
    return FakePage
