"""Configuration management for the informes feed builder."""

import os
from dataclasses import dataclass

from .models import DEFAULT_SOURCE_URL, Channel


@dataclass
class ScraperConfig:
    """Configuration for fetching the informe page."""

    source_url: str = DEFAULT_SOURCE_URL
    timeout: int = 30


class Config:
    """Main configuration manager."""

    DEFAULT_MAX_ITEMS = 100
    DEFAULT_RUN_LOG = "rss.upd"

    def __init__(self):
        """Initialize configuration from environment variables.

        Raises:
            ValueError: If a numeric setting is not a positive integer
        """
        self.source_url = os.getenv("INFORMES_SOURCE_URL", DEFAULT_SOURCE_URL)
        self.max_items = self._positive_int("INFORMES_MAX_ITEMS", self.DEFAULT_MAX_ITEMS)
        self.timeout = self._positive_int("INFORMES_TIMEOUT", 30)
        self.run_log_path = os.getenv("INFORMES_RUN_LOG", self.DEFAULT_RUN_LOG)
        self.channel_title = os.getenv("INFORMES_CHANNEL_TITLE", Channel.title)
        self.channel_description = os.getenv(
            "INFORMES_CHANNEL_DESCRIPTION", Channel.description
        )
        self.log_level = os.getenv("LOG_LEVEL", "INFO")

    @staticmethod
    def _positive_int(name: str, default: int) -> int:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError:
            raise ValueError(f"{name} must be an integer, got {raw!r}")
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")
        return value

    def get_scraper_config(self) -> ScraperConfig:
        """Get scraper configuration."""
        return ScraperConfig(source_url=self.source_url, timeout=self.timeout)

    def get_channel(self) -> Channel:
        """Get channel metadata; the link always points at the source page."""
        return Channel(
            title=self.channel_title,
            link=self.source_url,
            description=self.channel_description,
        )
