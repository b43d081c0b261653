"""Cookie snapshots: the persisted name -> {value, expires} mapping.

On the wire a snapshot is JSON text::

    {"session": {"value": "abc123", "expires": "2025-01-01T01:00:00.000Z"}}

Inside the package it is a ``dict[str, StoredCookie]``.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime

from sessionjar.api.models import SnapshotDecodeError
from sessionjar.cookies.expiry import (
    as_utc,
    format_iso_instant,
    parse_iso_instant,
    resolve_expiry,
    utcnow,
)
from sessionjar.cookies.parser import parse_set_cookie_header

Snapshot = dict[str, "StoredCookie"]


@dataclass(frozen=True)
class StoredCookie:
    value: str
    expires: datetime | None = None

    def is_valid(self, now: datetime) -> bool:
        return self.expires is None or self.expires >= now

    def to_json(self) -> dict:
        return {
            "value": self.value,
            "expires": format_iso_instant(self.expires) if self.expires is not None else None,
        }

    @classmethod
    def from_json(cls, data: object) -> StoredCookie | None:
        """Build from a decoded snapshot entry; None if the entry is malformed."""
        if not isinstance(data, dict) or not isinstance(data.get("value"), str):
            return None
        raw_expires = data.get("expires")
        if raw_expires is None:
            return cls(value=data["value"])
        if not isinstance(raw_expires, str):
            return None
        expires = parse_iso_instant(raw_expires)
        if expires is None:
            return None
        return cls(value=data["value"], expires=expires)


def decode_snapshot(text: str) -> Snapshot:
    """Decode snapshot text, dropping malformed entries.

    Raises SnapshotDecodeError if the text is not a JSON object.
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError, RecursionError) as exc:
        raise SnapshotDecodeError(f"Invalid cookie snapshot: {exc}") from exc
    if not isinstance(data, dict):
        raise SnapshotDecodeError(
            f"Invalid cookie snapshot: expected object, got {type(data).__name__}"
        )

    snapshot: Snapshot = {}
    for name, entry in data.items():
        cookie = StoredCookie.from_json(entry)
        if cookie is not None:
            snapshot[name] = cookie
    return snapshot


def load_snapshot(text: str | None) -> Snapshot:
    """Like decode_snapshot, but undecodable or missing text is an empty snapshot."""
    if not text:
        return {}
    try:
        return decode_snapshot(text)
    except SnapshotDecodeError:
        return {}


def dump_snapshot(snapshot: Snapshot) -> str:
    return json.dumps(
        {name: cookie.to_json() for name, cookie in snapshot.items()},
        ensure_ascii=False,
        separators=(",", ":"),
    )


def get_set_cookie(
    header: str,
    prev_cookie: str | None = None,
    now: datetime | None = None,
) -> str:
    """Merge a Set-Cookie header over a previous snapshot and return the new snapshot text.

    Cookies in ``header`` replace same-named entries of ``prev_cookie``;
    every other previous entry is kept as is.
    """
    now = as_utc(now) if now else utcnow()
    fresh: Snapshot = {
        name: StoredCookie(value=attrs.value, expires=resolve_expiry(attrs, now))
        for name, attrs in parse_set_cookie_header(header).items()
    }
    merged = {**load_snapshot(prev_cookie), **fresh}
    return dump_snapshot(merged)


def get_cookie(cookie: str | None, now: datetime | None = None) -> str:
    """Render the still-valid cookies of a snapshot as a Cookie request header."""
    now = as_utc(now) if now else utcnow()
    return "; ".join(
        f"{name}={stored.value}"
        for name, stored in load_snapshot(cookie).items()
        if stored.is_valid(now)
    )
