"""Type definitions for the sitemap writer."""

from dataclasses import dataclass
from enum import Enum


class ChangeFrequency(Enum):
    """Sitemap change frequency values."""
    ALWAYS = "always"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    NEVER = "never"


@dataclass
class GeneratorConfig:
    """Configuration for multi-file sitemap generation."""
    # Keep in step with config.DEFAULT_* and config.MAX_LOC_LENGTH
    output_dir: str = "data/sitemap/"
    base_url: str = "http://www.example.com/"
    max_urls_per_sitemap: int = 50000
    max_loc_length: int = 2048
    pretty: bool = False
    compress: bool = False
