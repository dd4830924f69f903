"""Field value reading shared by the schema and list extractors."""

from recordscraper.dom.document import Element
from recordscraper.models import AttributeKind, FieldAttribute


def read_value(
    element: Element,
    attribute: FieldAttribute | None,
    raw_text_fallback: bool = False,
) -> str | None:
    """
    Read one field value from an element.

    Args:
        element: Resolved field element.
        attribute: Dispatch rule; None reads the rendered text.
        raw_text_fallback: For RAW lookups, fall back to the rendered text
            when the attribute is missing or empty.

    Returns:
        The value, or None when a URL or raw attribute is absent.
    """
    if attribute is None:
        return element.inner_text.strip()

    kind = attribute.kind
    if kind is AttributeKind.INNER_TEXT:
        return element.inner_text.strip()
    if kind is AttributeKind.TEXT_CONTENT:
        return element.text_content.strip()
    if kind is AttributeKind.INNER_HTML:
        return element.inner_html.strip()
    if kind is AttributeKind.HREF or kind is AttributeKind.SRC:
        relative = element.get_attribute(kind.value)
        return element.document.resolve_url(relative) if relative else None

    value = element.get_attribute(attribute.name)
    if raw_text_fallback and not value:
        return element.inner_text.strip()
    return value
