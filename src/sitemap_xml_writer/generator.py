"""Multi-file sitemap generation on top of the streaming writers."""

import csv
import gzip
import logging
import os
from typing import BinaryIO, Iterable, Iterator, List, Optional, Tuple, Union
from urllib.parse import urljoin

from .config import (
    COMPRESSED_SUFFIX,
    MAX_LOC_LENGTH,
    SITEMAP_FILENAME,
    SITEMAP_INDEX_FILENAME,
    SITEMAP_PART_FILENAME,
    validate_config,
)
from .entries import SitemapEntry, UrlEntry
from .exceptions import MaxByteLengthError, SitemapError
from .fields import validate_loc
from .sitemap_writer import SitemapWriter, open_writer
from .types import GeneratorConfig
from .utils import create_directory_if_not_exists, format_bytes, format_number, get_current_timestamp

logger = logging.getLogger(__name__)


class SitemapGenerator:
    """Splits a stream of URL entries over as many sitemap files as needed."""

    def __init__(self, config: GeneratorConfig):
        validate_config(config)
        self.config = config
        self.output_dir = config.output_dir
        self.index_file: Optional[str] = None

        # Ensure output directory exists
        create_directory_if_not_exists(self.output_dir)

    def _path(self, filename: str) -> str:
        if self.config.compress:
            filename += COMPRESSED_SUFFIX
        return os.path.join(self.output_dir, filename)

    def _open_sink(self, path: str) -> BinaryIO:
        if self.config.compress:
            return gzip.open(path, "wb")
        return open(path, "wb")

    def _start_document(self, path: str, index: bool = False):
        sink = self._open_sink(path)
        try:
            return open_writer(sink, index=index, pretty=self.config.pretty)
        except SitemapError:
            sink.close()
            raise

    @staticmethod
    def _finish_document(writer) -> None:
        writer.end()
        writer.into_sink().close()

    @staticmethod
    def _discard_document(writer) -> None:
        try:
            writer.into_sink().close()
        except (SitemapError, OSError) as e:
            logger.debug(f"Error closing abandoned sitemap: {e}")

    def _to_entry(self, entry: Union[UrlEntry, str]) -> UrlEntry:
        # The configured limit may be lower than the one records were built with
        if isinstance(entry, str):
            return UrlEntry(validate_loc(entry, self.config.max_loc_length))
        if isinstance(entry, UrlEntry):
            validate_loc(entry.loc, self.config.max_loc_length)
        return entry

    @staticmethod
    def _remove_partial_output(paths: List[str]) -> None:
        for path in paths:
            try:
                os.remove(path)
                logger.debug(f"Removed partial sitemap: {os.path.basename(path)}")
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning(f"Could not remove partial sitemap {path}: {e}")

    def generate_sitemaps(self, entries: Iterable[Union[UrlEntry, str]]) -> List[str]:
        """
        Generate sitemap files from URL entries.

        Entries are streamed into ``sitemap_001.xml``, ``sitemap_002.xml``...
        A new file is started when the current one holds
        ``max_urls_per_sitemap`` entries or the next entry would push it past
        the byte limit. A single file is renamed to ``sitemap.xml``; several
        files get a ``sitemap_index.xml`` listing them.
        If anything fails, the files written so far are removed before the
        error propagates.

        Args:
            entries: URL entries or bare loc strings

        Returns:
            List of generated sitemap file paths, excluding the index
        """
        self.index_file = None
        sitemap_files: List[str] = []
        writer: Optional[SitemapWriter] = None
        total_entries = 0
        total_bytes = 0

        try:
            for entry in entries:
                entry = self._to_entry(entry)

                if writer is not None and (
                    writer.entries_written >= self.config.max_urls_per_sitemap
                    or not writer.fits(entry)
                ):
                    total_bytes += writer.bytes_written
                    self._finish_document(writer)
                    writer = None

                if writer is None:
                    path = self._path(SITEMAP_PART_FILENAME.format(index=len(sitemap_files) + 1))
                    sitemap_files.append(path)
                    writer = self._start_document(path)
                    if not writer.fits(entry):
                        raise MaxByteLengthError(
                            f"entry for {entry.loc} does not fit in an empty sitemap"
                        )

                writer.write(entry)
                total_entries += 1

            if writer is not None:
                total_bytes += writer.bytes_written
                self._finish_document(writer)
                writer = None

            if not sitemap_files:
                logger.warning("No URLs provided for sitemap generation")
                return []

            if len(sitemap_files) == 1:
                single = self._path(SITEMAP_FILENAME)
                os.replace(sitemap_files[0], single)
                sitemap_files = [single]
                logger.info(f"Generated single sitemap: {os.path.basename(single)}")
            else:
                logger.info(f"Generated {len(sitemap_files)} sitemap files")
                self.index_file = self._generate_sitemap_index(sitemap_files)
                logger.info(f"Generated sitemap index: {os.path.basename(self.index_file)}")

        except Exception as e:
            logger.error(f"Error generating sitemaps in {self.output_dir}: {e}")
            if writer is not None:
                self._discard_document(writer)
            # A run either completes or leaves no sitemap files behind
            self._remove_partial_output(sitemap_files)
            raise

        logger.info(
            f"Wrote {format_number(total_entries)} URLs ({format_bytes(total_bytes)} uncompressed)"
        )
        return sitemap_files

    def _generate_sitemap_index(self, sitemap_files: List[str]) -> str:
        """Generate sitemap index file."""
        index_path = self._path(SITEMAP_INDEX_FILENAME)
        base_url = self.config.base_url.rstrip("/") + "/"
        lastmod = get_current_timestamp()

        writer = self._start_document(index_path, index=True)
        try:
            for sitemap_file in sitemap_files:
                loc = urljoin(base_url, os.path.basename(sitemap_file))
                writer.write(SitemapEntry(loc, lastmod=lastmod))
            self._finish_document(writer)
        except Exception as e:
            logger.error(f"Error writing sitemap index to {index_path}: {e}")
            self._discard_document(writer)
            self._remove_partial_output([index_path])
            raise

        return index_path

    def cleanup_old_sitemaps(self) -> None:
        """Remove old sitemap files from output directory."""
        for filename in os.listdir(self.output_dir):
            if filename.startswith("sitemap") and filename.endswith((".xml", ".xml.gz")):
                os.remove(os.path.join(self.output_dir, filename))
                logger.debug(f"Removed old sitemap: {filename}")

        logger.info("Cleaned up old sitemap files")


def _entry_from_row(row: dict, max_loc_length: int) -> UrlEntry:
    def field(name: str) -> Optional[str]:
        value = (row.get(name) or "").strip()
        return value or None

    loc = field("loc")
    if loc is None:
        raise ValueError("missing loc")
    return UrlEntry(
        validate_loc(loc, max_loc_length),
        lastmod=field("lastmod"),
        changefreq=field("changefreq"),
        priority=field("priority"),
    )


def _read_rows(path: str) -> Iterator[Tuple[int, dict]]:
    with open(path, newline="", encoding="utf-8") as f:
        if path.endswith(".csv"):
            reader = csv.DictReader(f)
            # Header is line 1
            for line_number, row in enumerate(reader, 2):
                yield line_number, row
        else:
            for line_number, line in enumerate(f, 1):
                line = line.strip()
                if line and not line.startswith("#"):
                    yield line_number, {"loc": line}


def load_entries(path: str, max_loc_length: int = MAX_LOC_LENGTH) -> Iterator[UrlEntry]:
    """
    Read URL entries from a file.

    Plain files hold one URL per line (blank lines and ``#`` comments are
    ignored). Files ending in ``.csv`` need a ``loc`` column and may carry
    ``lastmod``, ``changefreq`` and ``priority`` columns. Invalid rows are
    logged and skipped.
    """
    skipped = 0
    for line_number, row in _read_rows(path):
        try:
            entry = _entry_from_row(row, max_loc_length)
        except ValueError as e:
            skipped += 1
            logger.warning(f"Skipping {path}:{line_number}: {e}")
            continue
        yield entry

    if skipped:
        logger.warning(f"Skipped {format_number(skipped)} invalid entries in {path}")


def create_sitemap_generator(config: GeneratorConfig) -> SitemapGenerator:
    """Factory function to create sitemap generator."""
    return SitemapGenerator(config)
