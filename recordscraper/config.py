"""
Configuration for the record scraper.

All configuration can be set via environment variables with the SCRAPER_ prefix.
"""

from dataclasses import dataclass, field

from pydantic_settings import BaseSettings, SettingsConfigDict

from recordscraper.models import HeuristicMetric


class ScraperSettings(BaseSettings):
    """Main settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SCRAPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Heuristic list discovery
    max_count_per_page: int = 50
    min_area: float = 20000.0
    scrolls: int = 3
    metric: HeuristicMetric = HeuristicMetric.SIZE_DEVIATION
    granularity: float = 0.005  # grid step is 1 / granularity pixels

    # List extraction
    list_limit: int = 10
    class_similarity: float = 0.7

    # Static documents
    viewport_width: int = 1280
    viewport_height: int = 720

    # Rendering local content in a headless browser
    headless: bool = True
    render_timeout_seconds: float = 30.0

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"


@dataclass
class HeuristicConfig:
    """Grid sampling parameters for list discovery."""

    max_count_per_page: int = 50
    min_area: float = 20000.0
    scrolls: int = 3
    metric: HeuristicMetric = HeuristicMetric.SIZE_DEVIATION
    granularity: float = 0.005

    # Qualifying matches below this count are too sparse to be a list
    min_matches: int = 3

    @property
    def grid_step(self) -> float:
        """Distance in pixels between neighbouring sample points."""
        return 1 / self.granularity


@dataclass
class ListConfig:
    """List extraction parameters."""

    limit: int = 10
    class_similarity: float = 0.7


@dataclass
class ScrapeConfig:
    """Complete extraction configuration."""

    heuristic: HeuristicConfig = field(default_factory=HeuristicConfig)
    list: ListConfig = field(default_factory=ListConfig)

    @classmethod
    def from_settings(cls, settings: ScraperSettings) -> "ScrapeConfig":
        """Build a ScrapeConfig from environment-backed settings."""
        return cls(
            heuristic=HeuristicConfig(
                max_count_per_page=settings.max_count_per_page,
                min_area=settings.min_area,
                scrolls=settings.scrolls,
                metric=settings.metric,
                granularity=settings.granularity,
            ),
            list=ListConfig(
                limit=settings.list_limit,
                class_similarity=settings.class_similarity,
            ),
        )


def load_config() -> ScraperSettings:
    """Load configuration from environment variables."""
    return ScraperSettings()
