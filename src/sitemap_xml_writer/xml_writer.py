"""Low-level streaming XML writer with a hard byte budget.

Every public method renders one fragment, checks it against the remaining
budget and then writes it to the sink in a single call. A fragment that does
not fit raises ``MaxByteLengthError`` before anything reaches the sink, so a
failed call leaves the sink, the byte counter and the tag stack untouched.
"""

import logging
from typing import BinaryIO, Iterable, List, Optional, Tuple
from xml.sax.saxutils import escape

from .config import INDENT, MAX_BYTE_LENGTH, SITEMAP_NAMESPACE, XML_DECLARATION
from .exceptions import MaxByteLengthError, SitemapIOError, WriterClosedError

logger = logging.getLogger(__name__)

# saxutils.escape always handles &, < and >
_TEXT_ENTITIES = {'"': "&quot;"}


def escape_text(text: str) -> str:
    """Escape ``&``, ``<``, ``>`` and ``"`` in a text node."""
    return escape(text, _TEXT_ENTITIES)


class StreamingXmlWriter:
    """Writes sitemap XML fragments to a binary sink."""

    def __init__(
        self,
        sink: BinaryIO,
        pretty: bool = False,
        max_byte_length: int = MAX_BYTE_LENGTH
    ):
        self._sink: Optional[BinaryIO] = sink
        self.pretty = pretty
        self.max_byte_length = max_byte_length
        self.bytes_written = 0
        self._stack: List[str] = []

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def remaining(self) -> int:
        """Bytes left in the budget."""
        return self.max_byte_length - self.bytes_written

    @property
    def open_tags(self) -> Tuple[str, ...]:
        return tuple(self._stack)

    # Rendering. Pure: nothing here touches the sink or the counters.

    def _indent(self, depth: int) -> str:
        # Nothing precedes the first fragment of a document
        if not self.pretty or self.bytes_written == 0:
            return ""
        return "\n" + INDENT * depth

    def render_start_tag(self, name: str, depth: Optional[int] = None) -> str:
        depth = self.depth if depth is None else depth
        return f"{self._indent(depth)}<{name}>"

    def render_end_tag(self, name: str, depth: Optional[int] = None) -> str:
        depth = self.depth - 1 if depth is None else depth
        return f"{self._indent(depth)}</{name}>"

    def render_element(self, name: str, text: str, depth: Optional[int] = None) -> str:
        depth = self.depth if depth is None else depth
        return f"{self._indent(depth)}<{name}>{escape_text(text)}</{name}>"

    def render_group(self, name: str, children: Iterable[Tuple[str, str]]) -> str:
        """Render ``<name>``, its child elements and ``</name>`` as one string."""
        depth = self.depth
        parts = [self.render_start_tag(name, depth)]
        parts.extend(
            self.render_element(child, text, depth + 1) for child, text in children
        )
        parts.append(self.render_end_tag(name, depth))
        return "".join(parts)

    # Emission

    def fits(self, *fragments: str) -> bool:
        """Check whether the fragments would fit in the remaining budget."""
        needed = sum(len(fragment.encode("utf-8")) for fragment in fragments)
        return needed <= self.remaining

    def _write(self, fragment: str) -> None:
        if self._sink is None:
            raise WriterClosedError("the sink was already handed back")

        data = fragment.encode("utf-8")
        if self.bytes_written + len(data) > self.max_byte_length:
            logger.debug(
                f"Fragment of {len(data)} bytes exceeds remaining budget of {self.remaining}"
            )
            raise MaxByteLengthError()

        try:
            accepted = self._write_all(data)
        except OSError as e:
            raise SitemapIOError(f"error writing to sink: {e}") from e
        if accepted < len(data):
            raise SitemapIOError(
                f"sink accepted no bytes after {accepted} of {len(data)}"
            )

        self.bytes_written += len(data)

    def _write_all(self, data: bytes) -> int:
        """Write until the sink has taken every byte or stops making progress."""
        offset = 0
        while offset < len(data):
            written = self._sink.write(data[offset:] if offset else data)
            # Buffered sinks return None and take everything
            if written is None:
                return len(data)
            # Raw sinks may accept fewer bytes than offered
            if written == 0:
                break
            offset += written
        return offset

    def declaration(self) -> None:
        self._write(XML_DECLARATION)

    def start_tag_with_default_namespace(self, name: str) -> None:
        """Open the root element, declaring the sitemap namespace."""
        if self._stack:
            raise AssertionError(
                f"<{name}> must be the root element, <{self._stack[-1]}> is open"
            )
        self._write(f'{self._indent(0)}<{name} xmlns="{SITEMAP_NAMESPACE}">')
        self._stack.append(name)

    def start_tag(self, name: str) -> None:
        self._write(self.render_start_tag(name))
        self._stack.append(name)

    def end_tag(self, name: str) -> None:
        if not self._stack or self._stack[-1] != name:
            current = self._stack[-1] if self._stack else None
            raise AssertionError(f"cannot close </{name}>, open element is {current!r}")
        self._write(self.render_end_tag(name))
        self._stack.pop()

    def element(self, name: str, text: str) -> None:
        self._write(self.render_element(name, text))

    def group(self, name: str, children: Iterable[Tuple[str, str]]) -> None:
        """Write a complete nested tag group in a single atomic call."""
        self._write(self.render_group(name, children))

    def into_sink(self) -> BinaryIO:
        """Detach and return the sink; nothing further is written."""
        if self._sink is None:
            raise WriterClosedError("the sink was already handed back")
        sink, self._sink = self._sink, None
        return sink
