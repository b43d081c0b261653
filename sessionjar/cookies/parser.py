"""Parse raw Set-Cookie header text into cookie names and attributes."""
from __future__ import annotations

from dataclasses import dataclass

# Attribute names as they appear on the wire (lower-cased) -> field names
_ATTRIBUTE_FIELDS = {
    "expires": "expires",
    "max-age": "max_age",
    "domain": "domain",
    "path": "path",
    "secure": "secure",
    "httponly": "httponly",
    "samesite": "samesite",
}


@dataclass(frozen=True)
class CookieAttributes:
    """Raw attribute strings of one cookie, exactly as sent after ``=``.

    Flag attributes (``Secure``, ``HttpOnly``) are stored as ``""``.
    """

    value: str
    expires: str | None = None
    max_age: str | None = None
    domain: str | None = None
    path: str | None = None
    secure: str | None = None
    httponly: str | None = None
    samesite: str | None = None

    def to_dict(self) -> dict[str, str]:
        """Wire-named mapping of the attributes that are present."""
        data = {"value": self.value}
        for wire_name, field_name in _ATTRIBUTE_FIELDS.items():
            attr = getattr(self, field_name)
            if attr is not None:
                data[wire_name] = attr
        return data


def split_set_cookie_header(header: str) -> list[str]:
    """Split a comma-joined Set-Cookie header into individual cookie strings.

    Commas inside an ``Expires`` date (``Wed, 21 Oct 2015 ...``) are kept:
    while the current cookie has ``expires=`` but no ``GMT`` yet, a comma
    belongs to the date.
    """
    parts: list[str] = []
    buffer = ""
    i = 0
    while i < len(header):
        char = header[i]
        if char == ",":
            recent = buffer.lower()
            if "expires=" in recent and "gmt" not in recent:
                buffer += char
                i += 1
                continue
            if buffer.strip():
                parts.append(buffer.strip())
            buffer = ""
            i += 1
            if header[i:i + 1] == " ":
                i += 1
            continue
        buffer += char
        i += 1
    if buffer.strip():
        parts.append(buffer.strip())
    return parts


def parse_cookie(cookie: str) -> tuple[str, CookieAttributes] | None:
    """Parse ``name=value; Attr=x; Flag`` into the name and its attributes.

    Returns None when the first segment has no ``=`` or the name is empty.
    """
    name_value, *attributes = [p.strip() for p in cookie.split(";")]
    name, sep, value = name_value.partition("=")
    name = name.strip()
    if not sep or not name:
        return None

    fields: dict[str, str] = {}
    for attr in attributes:
        attr_name, _, attr_value = attr.partition("=")
        field_name = _ATTRIBUTE_FIELDS.get(attr_name.strip().lower())
        if field_name:
            fields[field_name] = attr_value
    return name, CookieAttributes(value=value, **fields)


def parse_set_cookie_header(header: str) -> dict[str, CookieAttributes]:
    """Parse every cookie in a Set-Cookie header; a later duplicate name wins."""
    cookies: dict[str, CookieAttributes] = {}
    for cookie in split_set_cookie_header(header):
        parsed = parse_cookie(cookie)
        if parsed is None:
            continue
        name, attrs = parsed
        cookies[name] = attrs
    return cookies
