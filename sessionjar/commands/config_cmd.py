from __future__ import annotations

import dataclasses

from sessionjar.config import load_config, save_config
from sessionjar.output import output_json


def _parse_cookie_prefix(raw: str) -> str | list[str]:
    # "a,b" configures several prefixes; "" keeps the suffix-only mode
    if "," not in raw:
        return raw.strip()
    return [p.strip() for p in raw.split(",") if p.strip()]


def handle_config_show(args) -> int:
    config = load_config()
    data = dataclasses.asdict(config)

    if args.format == "json":
        output_json(data)
    else:
        for key, val in data.items():
            print(f"{key}: {val}")
    return 0


def handle_config_set(args) -> int:
    config = load_config()
    if args.base_url is not None:
        config.baseUrl = args.base_url
    if args.scheme is not None:
        config.scheme = args.scheme
    if args.storage_prefix is not None:
        config.storagePrefix = args.storage_prefix
    if args.cookie_prefix is not None:
        config.cookiePrefix = _parse_cookie_prefix(args.cookie_prefix)
    if args.disable_cache is not None:
        config.disableCache = args.disable_cache
    if args.debug is not None:
        config.debug = args.debug
    if args.output_format is not None:
        config.outputFormat = args.output_format
    save_config(config)
    output_json({"status": "ok", "message": "Configuration updated"})
    return 0
