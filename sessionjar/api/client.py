from __future__ import annotations

import json
import sys
import time
from collections.abc import Callable

import httpx

from sessionjar.api.models import AuthenticationError, SessionJarError
from sessionjar.config import Config
from sessionjar.cookies import (
    get_cookie,
    get_set_cookie,
    has_auth_cookies,
    has_session_cookie_changed,
)
from sessionjar.storage import StorageAdapter, StorageBackend

EMPTY_SNAPSHOT = "{}"


class SessionClient:
    """HTTP client that keeps the auth session in a key-value store.

    The cookie jar lives in ``storage`` rather than in httpx: every request
    gets a Cookie header rendered from the stored snapshot, and Set-Cookie
    headers of our auth server are merged back into it.
    """

    def __init__(
        self,
        config: Config,
        storage: StorageBackend,
        verbose: bool = False,
        log: Callable[[str], None] | None = None,
        on_session_change: Callable[[], None] | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self._config = config
        self._storage = StorageAdapter(storage)
        self._verbose = verbose or config.debug
        self._log_sink = log
        self._on_session_change = on_session_change
        self._http = httpx.Client(
            base_url=config.baseUrl or "",
            transport=transport,
            timeout=30.0,
        )

    def __enter__(self) -> SessionClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # --- Stored session ---

    def get_cookie(self) -> str:
        """Cookie header for the current stored session."""
        stored = self._storage.get_item(self._config.cookieKey)
        return get_cookie(stored or EMPTY_SNAPSHOT)

    def get_session_data(self) -> dict | None:
        cached = self._storage.get_item(self._config.sessionCacheKey)
        if not cached:
            return None
        try:
            data = json.loads(cached)
        except ValueError:
            return None
        return data or None

    def store_set_cookie(self, set_cookie: str, force: bool = False) -> bool:
        """Merge a Set-Cookie header into storage.

        Returns True if the session changed. Unless ``force`` is set, headers
        without cookies of our auth server are ignored so that third-party
        cookies cannot trigger session refreshes.
        """
        if not force and not has_auth_cookies(set_cookie, self._config.cookiePrefix):
            self._log("Set-Cookie has no auth cookies, ignoring")
            return False

        prev_cookie = self._storage.get_item(self._config.cookieKey)
        to_set_cookie = get_set_cookie(set_cookie, prev_cookie)
        changed = has_session_cookie_changed(prev_cookie, to_set_cookie)
        self._storage.set_item(self._config.cookieKey, to_set_cookie)
        if changed:
            self._log("Session cookies changed")
            self._notify()
        else:
            self._log("Session cookies refreshed, values unchanged")
        return changed

    def clear_session(self) -> None:
        self._storage.set_item(self._config.cookieKey, EMPTY_SNAPSHOT)
        self._storage.set_item(self._config.sessionCacheKey, EMPTY_SNAPSHOT)
        self._log("Session cleared")
        self._notify()

    # --- HTTP layer ---

    def get(self, url: str, **kwargs) -> httpx.Response:
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs) -> httpx.Response:
        return self.request("POST", url, **kwargs)

    def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        headers["cookie"] = self.get_cookie()
        if self._config.scheme:
            headers["origin"] = f"{self._config.scheme}://"

        # The sign-out request itself still carries the old cookie
        if "/sign-out" in url:
            self.clear_session()

        self._log(f"{method} {url}")
        t0 = time.monotonic()
        resp = self._http.request(method, url, headers=headers, **kwargs)
        elapsed = time.monotonic() - t0
        self._log(f"Response: {resp.status_code} ({elapsed:.1f}s)")
        # httpx keeps its own jar; the stored snapshot is the only source of cookies
        self._http.cookies.clear()

        if resp.status_code == 401:
            raise AuthenticationError("Session expired or missing (401)")
        if resp.status_code >= 400:
            raise SessionJarError(
                message=f"API returned {resp.status_code}: {resp.text[:300]}",
                code="ApiException",
                userMessage=f"Auth server error ({resp.status_code}).",
            )

        set_cookie = resp.headers.get_list("set-cookie")
        if set_cookie:
            self.store_set_cookie(", ".join(set_cookie))

        if "/get-session" in url and not self._config.disableCache:
            self._cache_session(resp)
        return resp

    def _cache_session(self, resp: httpx.Response) -> None:
        try:
            data = resp.json()
        except ValueError:
            self._log("get-session response is not JSON, not cached")
            return
        self._storage.set_item(
            self._config.sessionCacheKey,
            json.dumps(data, ensure_ascii=False),
        )

    def _notify(self) -> None:
        if self._on_session_change:
            self._on_session_change()

    def _log(self, msg: str) -> None:
        if self._log_sink:
            self._log_sink(msg)
        elif self._verbose:
            print(msg, file=sys.stderr, flush=True)
