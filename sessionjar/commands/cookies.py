from __future__ import annotations

import sys

from sessionjar.api.client import SessionClient
from sessionjar.config import Config
from sessionjar.cookies import has_auth_cookies, parse_set_cookie_header, resolve_expiry
from sessionjar.cookies.expiry import format_iso_instant
from sessionjar.output import output_json, output_text, output_tsv

_DEFAULT_COLUMNS = "name,value,expiresAt,domain,path"


def _get_columns(args) -> list[str]:
    raw = getattr(args, "columns", None)
    if raw:
        return [c.strip() for c in raw.split(",") if c.strip()]
    return _DEFAULT_COLUMNS.split(",")


def _read_header(args) -> str | None:
    header = getattr(args, "header", None)
    if header is None or header == "-":
        try:
            header = sys.stdin.read()
        except KeyboardInterrupt:
            return None
    header = header.strip()
    if not header:
        print("No Set-Cookie header provided.", file=sys.stderr)
        return None
    return header


def handle_parse(args) -> int:
    header = _read_header(args)
    if header is None:
        return 1

    rows = []
    for name, attrs in parse_set_cookie_header(header).items():
        expires_at = resolve_expiry(attrs)
        rows.append({
            "name": name,
            **attrs.to_dict(),
            "expiresAt": format_iso_instant(expires_at) if expires_at is not None else None,
        })

    if args.format == "json":
        output_json(rows)
    elif args.format == "tsv":
        output_tsv(rows, columns=_get_columns(args))
    else:
        output_text(rows, columns=_get_columns(args))
    return 0


def handle_store(args, client: SessionClient, config: Config) -> int:
    header = _read_header(args)
    if header is None:
        return 1

    if not args.all and not has_auth_cookies(header, config.cookiePrefix):
        output_json({
            "stored": 0,
            "skipped": True,
            "sessionChanged": False,
        })
        return 0

    changed = client.store_set_cookie(header, force=True)
    output_json({
        "stored": len(parse_set_cookie_header(header)),
        "skipped": False,
        "sessionChanged": changed,
    })
    return 0


def handle_cookie(args, client: SessionClient) -> int:
    cookie = client.get_cookie()
    if args.format == "json":
        output_json({"cookie": cookie})
    else:
        print(cookie)
    return 0


def handle_clear(args, client: SessionClient) -> int:
    client.clear_session()
    output_json({"status": "ok", "message": "Session cleared"})
    return 0
