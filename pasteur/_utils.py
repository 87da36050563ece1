from __future__ import annotations

import calendar
import typing as tp
from datetime import datetime, timezone
from email.utils import formatdate, parsedate_tz

from pasteur._exceptions import MalformedTimestamp

HEADERS_ENCODING = "iso-8859-1"


def parse_date(date: str) -> tp.Optional[int]:
    """
    Parse an HTTP-date into a POSIX timestamp.

    Returns None when the value is not a date, including the empty string.
    The zone offset carried by obsolete formats is honoured.

    Example:
        ```
        parse_date("Tue, 15 Nov 1994 08:12:31 GMT")  # 784887151
        parse_date("yesterday")  # None
        ```
    """
    try:
        parsed = parsedate_tz(date)
    except (TypeError, ValueError, IndexError):
        return None
    if parsed is None:
        return None
    # a missing zone means GMT, as every HTTP-date is
    offset = parsed[9] or 0
    try:
        return calendar.timegm(parsed[:6]) - offset
    except (ValueError, OverflowError):
        return None


def ensure_utc(moment: datetime) -> datetime:
    # naive datetimes are taken to be UTC already
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def to_timestamp(moment: datetime) -> int:
    """Whole seconds since the epoch, the precision an HTTP-date can carry."""
    return int(ensure_utc(moment).timestamp() // 1)


def format_http_date(moment: datetime) -> str:
    """
    Format a datetime as an IMF-fixdate (RFC 7231, Section 7.1.1.1).

    Example output: 'Tue, 15 Nov 1994 08:12:31 GMT'
    """
    return formatdate(timeval=to_timestamp(moment), localtime=False, usegmt=True)


def coerce_timestamp(value: tp.Any, source: str) -> datetime:
    """
    Turn a stored modification time into an aware UTC datetime.

    Datetimes pass through (naive ones are read as UTC), strings must be
    HTTP-dates. Anything else raises MalformedTimestamp.
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str):
        timestamp = parse_date(value)
        if timestamp is None:
            raise MalformedTimestamp(value, source)
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    raise MalformedTimestamp(value, source)
