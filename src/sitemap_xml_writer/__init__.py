"""
Sitemap XML Writer

A streaming writer for sitemaps.org XML sitemaps and sitemap index files.

Key Features:
- Validates loc, lastmod, changefreq and priority against the protocol grammar
- Streams output to any binary sink (files, gzip files, BytesIO, sockets)
- Enforces the 50,000 entry and 50 MiB (52,428,800 byte) limits atomically
- Compact or indented output
- Splits large URL sets over several files plus a sitemap index
"""

__version__ = "1.0.0"

from .types import ChangeFrequency, GeneratorConfig
from .entries import UrlEntry, SitemapEntry
from .exceptions import (
    SitemapError,
    InvalidLocError,
    InvalidLastmodError,
    InvalidChangefreqError,
    InvalidPriorityError,
    SitemapIOError,
    MaxByteLengthError,
    MaxNumberOfUrlsError,
    MaxNumberOfSitemapsError,
    WriterClosedError,
)
from .sitemap_writer import SitemapWriter, SitemapIndexWriter
from .generator import SitemapGenerator
from .config import get_config_from_env

__all__ = [
    "ChangeFrequency",
    "GeneratorConfig",
    "UrlEntry",
    "SitemapEntry",
    "SitemapError",
    "InvalidLocError",
    "InvalidLastmodError",
    "InvalidChangefreqError",
    "InvalidPriorityError",
    "SitemapIOError",
    "MaxByteLengthError",
    "MaxNumberOfUrlsError",
    "MaxNumberOfSitemapsError",
    "WriterClosedError",
    "SitemapWriter",
    "SitemapIndexWriter",
    "SitemapGenerator",
    "get_config_from_env",
]
