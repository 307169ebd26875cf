"""Protocol constants and configuration for the sitemap writer."""

import os
from urllib.parse import urlparse
from .types import GeneratorConfig

# sitemaps.org protocol
SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
MAX_BYTE_LENGTH = 52_428_800  # 50 MiB
MAX_NUMBER_OF_URLS = 50_000
MAX_NUMBER_OF_SITEMAPS = 50_000

# Upper bound on raw-text loc values; the maxLength facet of loc in
# sitemap.xsd. Trusted URL values are held to the same bound.
MAX_LOC_LENGTH = 2048

# Pretty-printing
INDENT = "  "

# Generator defaults
DEFAULT_OUTPUT_DIR = "data/sitemap/"
DEFAULT_BASE_URL = "http://www.example.com/"
DEFAULT_MAX_URLS_PER_SITEMAP = MAX_NUMBER_OF_URLS

# File names
SITEMAP_FILENAME = "sitemap.xml"
SITEMAP_PART_FILENAME = "sitemap_{index:03d}.xml"
SITEMAP_INDEX_FILENAME = "sitemap_index.xml"
COMPRESSED_SUFFIX = ".gz"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def get_config_from_env() -> GeneratorConfig:
    """
    Create configuration from environment variables with defaults.

    Raises ValueError when an integer variable does not parse.
    """
    return GeneratorConfig(
        output_dir=os.getenv("SITEMAP_OUTPUT_DIR", DEFAULT_OUTPUT_DIR),
        base_url=os.getenv("SITEMAP_BASE_URL", DEFAULT_BASE_URL),
        max_urls_per_sitemap=_env_int("SITEMAP_MAX_URLS_PER_SITEMAP", DEFAULT_MAX_URLS_PER_SITEMAP),
        max_loc_length=_env_int("SITEMAP_MAX_LOC_LENGTH", MAX_LOC_LENGTH),
        pretty=_env_flag("SITEMAP_PRETTY"),
        compress=_env_flag("SITEMAP_COMPRESS"),
    )


def validate_config(config: GeneratorConfig) -> None:
    """Validate generator configuration parameters."""
    if not 1 <= config.max_urls_per_sitemap <= MAX_NUMBER_OF_URLS:
        raise ValueError(
            f"max_urls_per_sitemap must be between 1 and {MAX_NUMBER_OF_URLS}"
        )

    if not 1 <= config.max_loc_length <= MAX_LOC_LENGTH:
        raise ValueError(f"max_loc_length must be between 1 and {MAX_LOC_LENGTH}")

    parsed = urlparse(config.base_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"base_url must be an absolute http(s) URL: {config.base_url}")

    if not config.output_dir:
        raise ValueError("output_dir must not be empty")
