from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime

from sessionjar.cookies.parser import CookieAttributes

_ISO_INSTANT = re.compile(
    r"(?P<base>\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(?::\d{2})?)"
    r"(?:[.,](?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}(?::?\d{2})?)?"
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    # Naive values are taken to be UTC already
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_http_date(text: str) -> datetime | None:
    """Parse an ``Expires`` value (RFC 1123 or ISO-8601) into a UTC datetime."""
    text = text.strip()
    if not text:
        return None
    try:
        return as_utc(parsedate_to_datetime(text))
    except (TypeError, ValueError, IndexError, OverflowError):
        pass
    return parse_iso_instant(text)


def _normalize_iso(text: str) -> str:
    # fromisoformat on 3.10 only takes 3 or 6 fraction digits and +HH:MM offsets
    match = _ISO_INSTANT.fullmatch(text.strip())
    if not match:
        return text
    base, fraction, offset = match.group("base", "fraction", "offset")
    if fraction:
        base += "." + fraction[:6].ljust(6, "0")
    if offset in ("Z", "z"):
        offset = "+00:00"
    elif offset:
        sign, digits = offset[0], offset[1:].replace(":", "")
        offset = f"{sign}{digits[:2]}:{digits[2:4] or '00'}"
    return base + (offset or "")


def parse_iso_instant(text: str) -> datetime | None:
    """Parse ISO-8601 such as ``2025-01-01T12:00:00.000Z``."""
    text = _normalize_iso(text)
    try:
        return as_utc(datetime.fromisoformat(text))
    except (ValueError, OverflowError):
        return None


def format_iso_instant(dt: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision and ``Z`` suffix."""
    iso = as_utc(dt).isoformat(timespec="milliseconds")
    return iso.removesuffix("+00:00") + "Z"


def _max_age_seconds(raw: str | None) -> float | None:
    if raw is None:
        return None
    try:
        seconds = float(raw)
    except ValueError:
        return None
    return seconds if math.isfinite(seconds) else None


def resolve_expiry(attrs: CookieAttributes, now: datetime | None = None) -> datetime | None:
    """Absolute expiry of a cookie, or None for a cookie that never expires.

    Max-Age wins over Expires. Zero or negative Max-Age yields an instant
    that is already past. Unparsable values are treated as absent.
    """
    now = as_utc(now) if now else utcnow()
    seconds = _max_age_seconds(attrs.max_age)
    if seconds is not None:
        try:
            return now + timedelta(seconds=seconds)
        except OverflowError:
            pass
    if attrs.expires is not None:
        return parse_http_date(attrs.expires)
    return None
