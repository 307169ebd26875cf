"""Validated entry records for sitemap and sitemap index documents."""

from dataclasses import dataclass, replace
from typing import Optional

from .fields import (
    ChangefreqInput,
    LastmodInput,
    LocInput,
    PriorityInput,
    validate_changefreq,
    validate_lastmod,
    validate_loc,
    validate_priority,
)


@dataclass(frozen=True)
class UrlEntry:
    """
    A ``url`` entry of a sitemap.

    Every field is validated on construction and stored as the exact text
    that will be written, so a ``UrlEntry`` never holds invalid data::

        UrlEntry("http://www.example.com/", lastmod="2005-01-01",
                 changefreq="monthly", priority=0.8)

        UrlEntry("http://www.example.com/").with_changefreq(ChangeFrequency.DAILY)
    """
    loc: LocInput
    lastmod: Optional[LastmodInput] = None
    changefreq: Optional[ChangefreqInput] = None
    priority: Optional[PriorityInput] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "loc", validate_loc(self.loc))
        if self.lastmod is not None:
            object.__setattr__(self, "lastmod", validate_lastmod(self.lastmod))
        if self.changefreq is not None:
            object.__setattr__(self, "changefreq", validate_changefreq(self.changefreq))
        if self.priority is not None:
            object.__setattr__(self, "priority", validate_priority(self.priority))

    def with_lastmod(self, lastmod: LastmodInput) -> "UrlEntry":
        """Return a copy with ``lastmod`` set."""
        return replace(self, lastmod=lastmod)

    def with_changefreq(self, changefreq: ChangefreqInput) -> "UrlEntry":
        """Return a copy with ``changefreq`` set."""
        return replace(self, changefreq=changefreq)

    def with_priority(self, priority: PriorityInput) -> "UrlEntry":
        """Return a copy with ``priority`` set."""
        return replace(self, priority=priority)

    def children(self):
        """Child elements in protocol order, omitting absent fields."""
        children = [("loc", self.loc)]
        if self.lastmod is not None:
            children.append(("lastmod", self.lastmod))
        if self.changefreq is not None:
            children.append(("changefreq", self.changefreq.value))
        if self.priority is not None:
            children.append(("priority", self.priority))
        return children


@dataclass(frozen=True)
class SitemapEntry:
    """A ``sitemap`` entry of a sitemap index."""
    loc: LocInput
    lastmod: Optional[LastmodInput] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "loc", validate_loc(self.loc))
        if self.lastmod is not None:
            object.__setattr__(self, "lastmod", validate_lastmod(self.lastmod))

    def with_lastmod(self, lastmod: LastmodInput) -> "SitemapEntry":
        """Return a copy with ``lastmod`` set."""
        return replace(self, lastmod=lastmod)

    def children(self):
        children = [("loc", self.loc)]
        if self.lastmod is not None:
            children.append(("lastmod", self.lastmod))
        return children
