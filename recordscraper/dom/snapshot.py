"""
Live page capture.

Serializes an already-loaded Playwright page into a Document: the light
DOM, open shadow roots as declarative templates, per-element boxes in
document coordinates, hidden markers, viewport size, scroll offset and
location. Capturing never navigates; page lifecycle belongs to the caller.
"""

import time

from playwright.async_api import Error as PlaywrightError

from recordscraper.dom.document import Document
from recordscraper.exceptions import SnapshotError
from recordscraper.utils import metrics
from recordscraper.utils.logging import ScraperLogger

SNAPSHOT_SCRIPT = """
() => {
    const VOID = new Set([
        'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input',
        'link', 'meta', 'param', 'source', 'track', 'wbr',
    ]);
    const SKIP_CONTENT = new Set(['script', 'style', 'noscript']);
    const RESERVED = new Set(['data-box', 'data-box-hidden']);

    const escapeText = (s) => s
        .replace(/&/g, '&amp;').replace(/</g, '&lt;').replace(/>/g, '&gt;');
    const escapeAttr = (s) => s.replace(/&/g, '&amp;').replace(/"/g, '&quot;');

    const scrollX = window.scrollX;
    const scrollY = window.scrollY;
    let count = 0;

    const serializeChildren = (node) => {
        let out = '';
        for (const child of node.childNodes) {
            out += serialize(child);
        }
        return out;
    };

    const serialize = (node) => {
        if (node.nodeType === Node.TEXT_NODE) {
            return escapeText(node.data);
        }
        if (node.nodeType !== Node.ELEMENT_NODE) {
            return '';
        }
        count += 1;

        const tag = node.localName;
        const rect = node.getBoundingClientRect();
        const style = window.getComputedStyle(node);
        const width = node.offsetWidth !== undefined ? node.offsetWidth : rect.width;
        const height = node.offsetHeight !== undefined ? node.offsetHeight : rect.height;

        let attrs = '';
        for (const attr of node.attributes) {
            if (!RESERVED.has(attr.name)) {
                attrs += ` ${attr.name}="${escapeAttr(attr.value)}"`;
            }
        }
        attrs += ` data-box="${rect.left + scrollX},${rect.top + scrollY},${width},${height}"`;
        if (style.display === 'none' || style.visibility === 'hidden') {
            attrs += ' data-box-hidden=""';
        }

        if (VOID.has(tag)) {
            return `<${tag}${attrs}>`;
        }

        let inner = '';
        if (node.shadowRoot) {
            inner += `<template shadowrootmode="open">${serializeChildren(node.shadowRoot)}</template>`;
        }
        if (!SKIP_CONTENT.has(tag)) {
            inner += tag === 'template' ? serializeChildren(node.content) : serializeChildren(node);
        }
        return `<${tag}${attrs}>${inner}</${tag}>`;
    };

    const html = '<!DOCTYPE html>' + serialize(document.documentElement);
    return {
        url: document.location.href,
        viewport: { width: window.innerWidth, height: window.innerHeight },
        scroll: { x: scrollX, y: scrollY },
        elements: count,
        html,
    };
}
"""


async def snapshot_page(
    page,
    location: str | None = None,
    logger: ScraperLogger | None = None,
) -> Document:
    """
    Capture a Playwright page into a Document.

    Args:
        page: playwright.async_api.Page that is already loaded.
        location: Overrides the page URL used for resolving relative links.
        logger: Logger instance.

    Returns:
        Document with captured geometry.
    """
    logger = logger or ScraperLogger("snapshot")
    start_time = time.perf_counter()
    url = location or getattr(page, "url", "") or "about:blank"

    try:
        payload = await page.evaluate(SNAPSHOT_SCRIPT)
    except PlaywrightError as e:
        metrics.SNAPSHOT_TOTAL.labels(status="error").inc()
        raise SnapshotError(url, str(e)) from e

    try:
        document = Document.from_snapshot(payload, location=location)
    except SnapshotError:
        metrics.SNAPSHOT_TOTAL.labels(status="error").inc()
        raise

    duration = time.perf_counter() - start_time
    metrics.SNAPSHOT_TOTAL.labels(status="success").inc()
    metrics.SNAPSHOT_DURATION.observe(duration)
    logger.snapshot_taken(
        url=document.location,
        elements=payload.get("elements", 0),
        duration_ms=duration * 1000,
    )
    return document
