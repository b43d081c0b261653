from sessionjar.cookies.expiry import resolve_expiry
from sessionjar.cookies.parser import (
    CookieAttributes,
    parse_cookie,
    parse_set_cookie_header,
    split_set_cookie_header,
)
from sessionjar.cookies.storage import (
    StoredCookie,
    decode_snapshot,
    dump_snapshot,
    get_cookie,
    get_set_cookie,
    load_snapshot,
)
from sessionjar.cookies.utils import (
    has_auth_cookies,
    has_session_cookie_changed,
    normalize_cookie_name,
)

__all__ = [
    "CookieAttributes",
    "StoredCookie",
    "decode_snapshot",
    "dump_snapshot",
    "get_cookie",
    "get_set_cookie",
    "has_auth_cookies",
    "has_session_cookie_changed",
    "load_snapshot",
    "normalize_cookie_name",
    "parse_cookie",
    "parse_set_cookie_header",
    "resolve_expiry",
    "split_set_cookie_header",
]
