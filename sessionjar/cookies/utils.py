from __future__ import annotations

from collections.abc import Sequence

from sessionjar.api.models import SnapshotDecodeError
from sessionjar.cookies.parser import parse_set_cookie_header
from sessionjar.cookies.storage import decode_snapshot

SESSION_COOKIE_SUFFIXES = ("session_token", "session_data")
SECURE_PREFIX = "__Secure-"


def _is_session_key(name: str) -> bool:
    return any(suffix in name for suffix in SESSION_COOKIE_SUFFIXES)


def has_session_cookie_changed(prev_cookie: str | None, new_cookie: str) -> bool:
    """Check whether session cookie values differ between two snapshots.

    Only names containing ``session_token`` or ``session_data`` are compared,
    and only by value: expiry moves on every refresh without the session
    changing. Undecodable snapshots count as a change.
    """
    if not prev_cookie:
        return True

    try:
        prev = decode_snapshot(prev_cookie)
        new = decode_snapshot(new_cookie)
    except SnapshotDecodeError:
        return True

    session_keys = {key for key in (*prev, *new) if _is_session_key(key)}
    for key in session_keys:
        prev_value = prev[key].value if key in prev else None
        new_value = new[key].value if key in new else None
        if prev_value != new_value:
            return True
    return False


def has_auth_cookies(set_cookie: str, cookie_prefix: str | Sequence[str]) -> bool:
    """Check if a Set-Cookie header carries cookies of our auth server.

    ``__Secure-`` is ignored when matching. A non-empty prefix matches names
    starting with it; an empty prefix matches names ending in one of the
    session cookie suffixes.
    """
    prefixes = [cookie_prefix] if isinstance(cookie_prefix, str) else list(cookie_prefix)
    if not prefixes:
        return False

    for name in parse_set_cookie_header(set_cookie):
        if name.startswith(SECURE_PREFIX):
            name = name[len(SECURE_PREFIX):]
        for prefix in prefixes:
            if prefix:
                if name.startswith(prefix):
                    return True
            elif name.endswith(SESSION_COOKIE_SUFFIXES):
                return True
    return False


def normalize_cookie_name(name: str) -> str:
    """Replace colons, which some key-value stores reject in keys."""
    return name.replace(":", "_")
