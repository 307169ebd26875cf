"""Streaming writers for sitemap and sitemap index documents."""

import logging
from typing import BinaryIO, Union

from .config import MAX_BYTE_LENGTH, MAX_NUMBER_OF_SITEMAPS, MAX_NUMBER_OF_URLS
from .entries import SitemapEntry, UrlEntry
from .exceptions import (
    MaxNumberOfSitemapsError,
    MaxNumberOfUrlsError,
    SitemapIOError,
    WriterClosedError,
)
from .utils import format_number
from .xml_writer import StreamingXmlWriter

logger = logging.getLogger(__name__)


class _DocumentWriter:
    """Drives a StreamingXmlWriter through start, write and end."""

    root_tag: str
    entry_tag: str
    entry_type: type
    max_entries: int
    limit_error: type
    max_byte_length = MAX_BYTE_LENGTH

    def __init__(self, sink: BinaryIO, pretty: bool = False):
        self._writer = StreamingXmlWriter(sink, pretty, self.max_byte_length)
        self.entries_written = 0
        self._closed_reason = None
        try:
            self._writer.declaration()
            self._writer.start_tag_with_default_namespace(self.root_tag)
        except SitemapIOError:
            self._closed_reason = "aborted by a sink error"
            raise
        logger.debug(f"Started <{self.root_tag}> document (pretty={pretty})")

    @classmethod
    def start(cls, sink: BinaryIO, pretty: bool = False):
        """Write the XML declaration and the opening root tag."""
        return cls(sink, pretty)

    @property
    def pretty(self) -> bool:
        return self._writer.pretty

    @property
    def bytes_written(self) -> int:
        return self._writer.bytes_written

    @property
    def is_open(self) -> bool:
        return self._closed_reason is None

    def _ensure_open(self) -> None:
        if self._closed_reason is not None:
            raise WriterClosedError(f"<{self.root_tag}> document was {self._closed_reason}")

    def _coerce(self, entry):
        # Only validated records or bare loc strings are accepted
        if isinstance(entry, self.entry_type):
            return entry
        if isinstance(entry, str):
            return self.entry_type(entry)
        raise TypeError(
            f"expected {self.entry_type.__name__} or str, got {type(entry).__name__}"
        )

    def fits(self, entry) -> bool:
        """Check whether the entry and the closing root tag fit in the byte budget."""
        self._ensure_open()
        entry = self._coerce(entry)
        return self._writer.fits(
            self._writer.render_group(self.entry_tag, entry.children()),
            self._writer.render_end_tag(self.root_tag),
        )

    def write(self, entry) -> None:
        """Write one entry as a complete tag group."""
        self._ensure_open()
        entry = self._coerce(entry)

        if self.entries_written + 1 > self.max_entries:
            logger.warning(
                f"<{self.root_tag}> already holds {format_number(self.max_entries)} entries"
            )
            raise self.limit_error()

        try:
            self._writer.group(self.entry_tag, entry.children())
        except SitemapIOError:
            self._closed_reason = "aborted by a sink error"
            raise
        self.entries_written += 1

    def end(self) -> None:
        """Write the closing root tag."""
        self._ensure_open()
        try:
            self._writer.end_tag(self.root_tag)
        except SitemapIOError:
            self._closed_reason = "aborted by a sink error"
            raise
        self._closed_reason = "already ended"
        logger.debug(
            f"Ended <{self.root_tag}> document with {format_number(self.entries_written)} "
            f"entries, {format_number(self.bytes_written)} bytes"
        )

    def into_sink(self) -> BinaryIO:
        """
        Return the underlying sink.

        Nothing is written here; call ``end()`` first to get a complete
        document.
        """
        sink = self._writer.into_sink()
        if self._closed_reason is None:
            self._closed_reason = "handed back to the caller"
        return sink


class SitemapWriter(_DocumentWriter):
    """
    Writes a ``urlset`` sitemap document to a binary sink.

    Example::

        writer = SitemapWriter.start(io.BytesIO())
        writer.write(UrlEntry("http://www.example.com/", lastmod="2005-01-01"))
        writer.write("http://www.example.com/about")
        writer.end()
        xml = writer.into_sink().getvalue()
    """

    root_tag = "urlset"
    entry_tag = "url"
    entry_type = UrlEntry
    max_entries = MAX_NUMBER_OF_URLS
    limit_error = MaxNumberOfUrlsError

    def write(self, entry: Union[UrlEntry, str]) -> None:
        """
        Write a ``url`` element.

        Raises:
            MaxNumberOfUrlsError: 50,000 urls were already written; the
                document is unchanged and can still be ended.
            MaxByteLengthError: the element would push the document past
                52,428,800 bytes; nothing was written.
            SitemapIOError: the sink failed; the document is aborted.
        """
        super().write(entry)


class SitemapIndexWriter(_DocumentWriter):
    """Writes a ``sitemapindex`` document to a binary sink."""

    root_tag = "sitemapindex"
    entry_tag = "sitemap"
    entry_type = SitemapEntry
    max_entries = MAX_NUMBER_OF_SITEMAPS
    limit_error = MaxNumberOfSitemapsError

    def write(self, entry: Union[SitemapEntry, str]) -> None:
        """Write a ``sitemap`` element."""
        super().write(entry)


def open_writer(sink: BinaryIO, index: bool = False, pretty: bool = False) -> _DocumentWriter:
    """Factory function to start a sitemap or sitemap index writer."""
    cls = SitemapIndexWriter if index else SitemapWriter
    return cls.start(sink, pretty)

