"""
Core data models for the record scraper.

These models are used throughout the codebase for type safety and serialization.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from recordscraper.exceptions import ConfigurationError

# A record maps field labels to extracted values; records are loosely typed
# and may differ in width from item to item.
Record = dict[str, str | None]
ScrapeResult = list[Record]

# Separates selector segments that resolve inside an open shadow root
SHADOW_DELIMITER = ">>"


# =============================================================================
# Enums
# =============================================================================


class HeuristicMetric(str, Enum):
    """Scoring used to rank candidate list selectors."""

    TOTAL_AREA = "total_area"
    SIZE_DEVIATION = "size_deviation"


class AttributeKind(str, Enum):
    """How a field value is read from its element."""

    INNER_TEXT = "innerText"
    TEXT_CONTENT = "textContent"
    INNER_HTML = "innerHTML"
    HREF = "href"
    SRC = "src"
    RAW = "raw"


# =============================================================================
# Field Models
# =============================================================================


@dataclass(frozen=True)
class FieldAttribute:
    """
    Resolved attribute dispatch for a field.

    `name` is only set for RAW lookups and holds the attribute name.
    """

    kind: AttributeKind
    name: str | None = None

    @classmethod
    def parse(cls, value: "str | FieldAttribute | None") -> "FieldAttribute | None":
        """
        Resolve an attribute name into a FieldAttribute.

        Args:
            value: Attribute name as sent by the harness, or None.

        Returns:
            FieldAttribute, or None when no attribute was given.
        """
        if value is None or isinstance(value, FieldAttribute):
            return value
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError("attribute", f"expected a non-empty name, got {value!r}")

        value = value.strip()
        for kind in AttributeKind:
            if kind is not AttributeKind.RAW and kind.value == value:
                return cls(kind)
        return cls(AttributeKind.RAW, value)

    def __str__(self) -> str:
        return self.name if self.kind is AttributeKind.RAW else self.kind.value


@dataclass
class FieldConfig:
    """Selector and value-reading rule for one named field."""

    selector: str
    attribute: FieldAttribute | None = None
    shadow: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.selector, str) or not self.selector.strip():
            raise ConfigurationError("selector", f"expected a non-empty selector, got {self.selector!r}")
        self.attribute = FieldAttribute.parse(self.attribute)

    @property
    def uses_shadow_delimiter(self) -> bool:
        """Whether the selector descends into shadow roots."""
        return SHADOW_DELIMITER in self.selector

    @property
    def segments(self) -> list[str]:
        """Selector segments split on the shadow delimiter."""
        return split_selector(self.selector)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldConfig":
        """Create a FieldConfig from a harness-style mapping."""
        if "selector" not in data:
            raise ConfigurationError("field", "missing 'selector'")
        return cls(
            selector=data["selector"],
            attribute=data.get("attribute"),
            shadow=bool(data.get("shadow", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "selector": self.selector,
            "attribute": str(self.attribute) if self.attribute else None,
            "shadow": self.shadow,
        }


@dataclass
class AutoListEntry:
    """Derived selector and text for one child of a list container."""

    selector: str
    inner_text: str

    def to_dict(self) -> dict[str, str]:
        """Convert to the harness shape."""
        return {"selector": self.selector, "innerText": self.inner_text}


def split_selector(selector: str) -> list[str]:
    """Split a selector on the shadow delimiter, trimming each segment."""
    return [part.strip() for part in selector.split(SHADOW_DELIMITER)]


def parse_fields(fields: Mapping[str, "FieldConfig | Mapping[str, Any]"]) -> dict[str, FieldConfig]:
    """
    Normalize a field mapping into FieldConfig objects.

    Args:
        fields: Label to FieldConfig or plain dict.

    Returns:
        Ordered mapping of label to FieldConfig.
    """
    parsed: dict[str, FieldConfig] = {}
    for label, config in fields.items():
        if isinstance(config, FieldConfig):
            parsed[label] = config
        elif isinstance(config, Mapping):
            parsed[label] = FieldConfig.from_dict(config)
        else:
            raise ConfigurationError("field", f"{label!r} must be a FieldConfig or mapping")
    return parsed
