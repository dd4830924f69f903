"""
URL utilities for the record scraper.

Provides URL resolution against the document location and responsive
image source parsing.
"""

import re
from urllib.parse import urljoin, urlparse

# Schemes urljoin can resolve relative references against
RESOLVABLE_SCHEMES = frozenset(["http", "https", "file"])

SRCSET_DESCRIPTOR = re.compile(r"^(\d+(?:\.\d+)?)([wx])$")

# Separators before a candidate, its URL token, and its descriptor list
SRCSET_GAP = re.compile(r"[\s,]*")
SRCSET_URL = re.compile(r"\S+")
SRCSET_DESCRIPTORS = re.compile(r"[^,]*")


def get_origin(url: str) -> str:
    """
    Extract the origin (scheme and host) from a URL.

    Args:
        url: The URL to extract the origin from.

    Returns:
        The origin, e.g. 'https://example.com', or '' for opaque URLs.
    """
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return ""
    return f"{parsed.scheme.lower()}://{parsed.netloc.lower()}"


def is_data_url(url: str) -> bool:
    """Check if a URL is an inline data URI."""
    return url.strip().lower().startswith("data:")


def resolve_url(base_url: str, relative_url: str) -> str:
    """
    Resolve a relative URL against a base URL.

    Bases without a hierarchical scheme (about:blank, data:) cannot anchor
    a relative reference, so the reference is returned unchanged.

    Args:
        base_url: The base URL to resolve against.
        relative_url: The relative URL to resolve.

    Returns:
        The resolved absolute URL.
    """
    relative_url = relative_url.strip()
    if urlparse(base_url).scheme.lower() not in RESOLVABLE_SCHEMES:
        return relative_url
    return urljoin(base_url, relative_url)


def parse_srcset(srcset: str) -> list[tuple[str, float | None, str | None]]:
    """
    Split a srcset attribute into its candidates.

    A URL runs to the next whitespace, so commas inside it (as in data URIs)
    do not end the candidate. A comma ends a candidate only when it trails
    the URL or follows the descriptors.

    Args:
        srcset: Raw srcset attribute value.

    Returns:
        List of (url, descriptor value, descriptor unit) tuples in source order.
        The value and unit are None when a candidate has no descriptor.
    """
    candidates = []
    position = 0
    while True:
        position = SRCSET_GAP.match(srcset, position).end()
        if position >= len(srcset):
            break

        url = SRCSET_URL.match(srcset, position).group()
        position += len(url)
        if url.endswith(","):
            url = url.rstrip(",")
            descriptors = []
        else:
            raw = SRCSET_DESCRIPTORS.match(srcset, position).group()
            position += len(raw)
            descriptors = raw.split()

        value = unit = None
        if descriptors:
            match = SRCSET_DESCRIPTOR.match(descriptors[0])
            if match:
                value = float(match.group(1))
                unit = match.group(2)
        candidates.append((url, value, unit))
    return candidates


def widest_srcset_candidate(srcset: str) -> str | None:
    """
    Pick the widest candidate from a srcset.

    Candidates with a width descriptor win; without any, the last
    candidate is taken.

    Args:
        srcset: Raw srcset attribute value.

    Returns:
        The chosen URL, or None if the srcset is empty.
    """
    candidates = parse_srcset(srcset)
    if not candidates:
        return None

    widths = [c for c in candidates if c[2] == "w"]
    if widths:
        return max(widths, key=lambda c: c[1])[0]
    return candidates[-1][0]
