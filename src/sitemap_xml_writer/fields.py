"""Validators for the four sitemap entry fields.

Each validator turns loosely-typed caller input into the exact text that will
be written into the document, or raises the matching ``Invalid*Error``.
Valid text input is returned unchanged; typed values (``datetime.date``,
``float``, parsed URLs, ...) are rendered to text first and then go through
the same check as text input.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Union
from urllib.parse import ParseResult, SplitResult

from .config import MAX_LOC_LENGTH
from .exceptions import (
    InvalidChangefreqError,
    InvalidLastmodError,
    InvalidLocError,
    InvalidPriorityError,
)
from .types import ChangeFrequency

LocInput = Union[str, SplitResult, ParseResult]
LastmodInput = Union[str, date, datetime]
ChangefreqInput = Union[str, ChangeFrequency]
PriorityInput = Union[str, float, int, Decimal]

# XML Schema 1.1 date / dateTime lexical spaces.
_YEAR_MONTH_DAY = r"-?(?:[1-9][0-9]{3,}|0[0-9]{3})-(?:0[1-9]|1[0-2])-(?:0[1-9]|[12][0-9]|3[01])"
_TIMEZONE = r"(?:Z|[+-](?:(?:0[0-9]|1[0-3]):[0-5][0-9]|14:00))?"
_TIME = r"(?:(?:[01][0-9]|2[0-3]):[0-5][0-9]:[0-5][0-9](?:\.[0-9]+)?|24:00:00(?:\.0+)?)"

DATE_PATTERN = re.compile(_YEAR_MONTH_DAY + _TIMEZONE)
DATE_TIME_PATTERN = re.compile(_YEAR_MONTH_DAY + "T" + _TIME + _TIMEZONE)

# xsd:decimal
DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")

_PRIORITY_MIN = Decimal("0.0")
_PRIORITY_MAX = Decimal("1.0")


def validate_loc(value: LocInput, max_length: int = MAX_LOC_LENGTH) -> str:
    """
    Validate a ``loc`` value.

    Plain strings are assumed to already be absolute URLs; only their length
    is checked. Parsed ``urllib.parse`` results must carry a scheme and a
    network location. Escaping is left to the writer.
    """
    if isinstance(value, (SplitResult, ParseResult)):
        if not value.scheme or not value.netloc:
            raise InvalidLocError(f"URL is not absolute: {value.geturl()!r}")
        value = value.geturl()
    elif not isinstance(value, str):
        raise InvalidLocError(f"unsupported loc type: {type(value).__name__}")

    if len(value) > max_length:
        raise InvalidLocError(
            f"loc is {len(value)} characters long, the maximum is {max_length}"
        )
    return value


def is_valid_lastmod(value: str) -> bool:
    """Check text against the W3C date and dateTime grammars."""
    return bool(DATE_PATTERN.fullmatch(value) or DATE_TIME_PATTERN.fullmatch(value))


def validate_lastmod(value: LastmodInput) -> str:
    """Validate a ``lastmod`` value, returning the text to write."""
    # datetime is a subclass of date, both render through isoformat()
    if isinstance(value, date):
        value = value.isoformat()
    elif not isinstance(value, str):
        raise InvalidLastmodError(f"unsupported lastmod type: {type(value).__name__}")

    if not is_valid_lastmod(value):
        raise InvalidLastmodError(f"invalid lastmod: {value!r}")
    return value


def validate_changefreq(value: ChangefreqInput) -> ChangeFrequency:
    """Validate a ``changefreq`` token (case-sensitive)."""
    if isinstance(value, ChangeFrequency):
        return value
    if not isinstance(value, str):
        raise InvalidChangefreqError(
            f"unsupported changefreq type: {type(value).__name__}"
        )

    try:
        return ChangeFrequency(value)
    except ValueError:
        raise InvalidChangefreqError(f"invalid changefreq: {value!r}") from None


def format_priority(value: Union[float, int, Decimal]) -> str:
    """Format a number as the shortest decimal text that round-trips."""
    if isinstance(value, Decimal):
        number = value
    else:
        number = Decimal(repr(float(value)))
    if number.is_zero():
        return "0.0"
    text = format(number, "f")
    if "." not in text:
        text += ".0"
    return text


def validate_priority(value: PriorityInput) -> str:
    """Validate a ``priority`` value in the closed range [0.0, 1.0]."""
    if isinstance(value, str):
        if not DECIMAL_PATTERN.fullmatch(value):
            raise InvalidPriorityError(f"invalid priority: {value!r}")
        if not _PRIORITY_MIN <= Decimal(value) <= _PRIORITY_MAX:
            raise InvalidPriorityError(f"priority out of range: {value!r}")
        return value

    if isinstance(value, bool) or not isinstance(value, (float, int, Decimal)):
        raise InvalidPriorityError(f"unsupported priority type: {type(value).__name__}")

    try:
        in_range = _PRIORITY_MIN <= Decimal(value) <= _PRIORITY_MAX
    except InvalidOperation:
        # NaN cannot be ordered
        in_range = False
    if not in_range:
        raise InvalidPriorityError(f"priority out of range: {value!r}")
    return format_priority(value)
