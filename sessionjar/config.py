from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from pathlib import Path

CONFIG_DIR = Path.home() / ".sessionjar"
CONFIG_FILE = CONFIG_DIR / "config.json"
STORAGE_FILE = CONFIG_DIR / "storage.json"


@dataclass
class Config:
    baseUrl: str | None = None
    scheme: str | None = None
    storagePrefix: str = "better-auth"
    cookiePrefix: str | list[str] = "better-auth"
    disableCache: bool = False
    debug: bool = False
    outputFormat: str = "text"

    @property
    def cookieKey(self) -> str:
        return f"{self.storagePrefix or Config.storagePrefix}_cookie"

    @property
    def sessionCacheKey(self) -> str:
        return f"{self.storagePrefix or Config.storagePrefix}_session_data"


def _cookie_prefix(raw) -> str | list[str]:
    # null or a non-string, non-list value falls back to the default prefix
    if isinstance(raw, str):
        return raw
    if isinstance(raw, list):
        return [p for p in raw if isinstance(p, str)]
    return Config.cookiePrefix


def ensure_dirs() -> None:
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)


def load_config(path: Path | None = None) -> Config:
    path = path or CONFIG_FILE
    if not path.exists():
        return Config()
    data = json.loads(path.read_text(encoding="utf-8"))
    return Config(
        baseUrl=data.get("baseUrl"),
        scheme=data.get("scheme"),
        storagePrefix=data.get("storagePrefix", Config.storagePrefix),
        cookiePrefix=_cookie_prefix(data.get("cookiePrefix")),
        disableCache=bool(data.get("disableCache", Config.disableCache)),
        debug=bool(data.get("debug", Config.debug)),
        outputFormat=data.get("outputFormat", Config.outputFormat),
    )


def save_config(config: Config, path: Path | None = None) -> None:
    path = path or CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(config), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
