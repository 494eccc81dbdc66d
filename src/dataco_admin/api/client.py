# Rev 0.1.5
"""Async HTTP client for the DATACO admin REST API."""
from __future__ import annotations
import logging
import time
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, TypeVar

import httpx

from .errors import AuthRequiredError, ServerRejectedError, TransportError

if TYPE_CHECKING:
    from ..services.auth_session import AuthSession

log = logging.getLogger(__name__)

T = TypeVar("T")

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
}


def unwrap(body: Any, key: str) -> Any:
    """The API answers either ``{data: {key: ...}}`` or ``{key: ...}``."""
    if not isinstance(body, dict):
        return None
    data = body.get("data")
    if isinstance(data, dict) and data.get(key) is not None:
        return data[key]
    return body.get(key)


def parse_record(raw: Any, factory: Callable[[Dict[str, Any]], T], what: str) -> T:
    """Build an entity from a response record; shape errors surface as TransportError."""
    if not isinstance(raw, dict):
        raise TransportError(f"Malformed {what} in response")
    try:
        return factory(raw)
    except (TypeError, ValueError, AttributeError) as exc:
        raise TransportError(f"Malformed {what} in response: {exc}") from exc


def parse_records(raw: Any, factory: Callable[[Dict[str, Any]], T], what: str) -> List[T]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise TransportError(f"Malformed {what} list in response")
    return [parse_record(r, factory, what) for r in raw]


class ApiClient:
    """
    Every request carries the bearer token and cache-defeating headers;
    reads also carry ``_t=<epoch ms>`` so intermediary caches are bypassed.
    """

    def __init__(
        self,
        base_url: str,
        session: AuthSession,
        *,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._session = session
        self._clock = clock
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    @property
    def session(self) -> AuthSession:
        return self._session

    async def aclose(self) -> None:
        await self._http.aclose()

    def cache_buster(self) -> int:
        return int(self._clock() * 1000)

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        auth: bool = True,
        bust_cache: bool = False,
    ) -> Any:
        headers = dict(NO_CACHE_HEADERS)
        if auth:
            headers["Authorization"] = f"Bearer {self._session.require_token()}"
        params = dict(params or {})
        if bust_cache:
            params["_t"] = self.cache_buster()

        try:
            resp = await self._http.request(method, path, params=params or None, json=json, headers=headers)
        except httpx.HTTPError as exc:
            log.warning("%s %s failed: %s", method, path, exc)
            raise TransportError(f"Network error: {exc}") from exc

        body = self._decode(resp)
        if resp.status_code == 401:
            raise AuthRequiredError(self._message(body) or "Unauthorized", status=401)
        if resp.is_error:
            raise ServerRejectedError(self._message(body) or f"HTTP {resp.status_code}", status=resp.status_code)
        if isinstance(body, dict) and body.get("success") is False:
            raise ServerRejectedError(self._message(body) or "Request failed", status=resp.status_code)
        log.debug("%s %s -> %s", method, path, resp.status_code)
        return body

    async def get(self, path: str, *, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params, bust_cache=True)

    async def post(self, path: str, json: Any = None, *, auth: bool = True) -> Any:
        return await self.request("POST", path, json=json, auth=auth)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    # ---- internals ----
    @staticmethod
    def _decode(resp: httpx.Response) -> Any:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            if resp.is_error:
                return None
            raise TransportError(f"Malformed response body (HTTP {resp.status_code})", status=resp.status_code)

    @staticmethod
    def _message(body: Any) -> Optional[str]:
        if isinstance(body, dict):
            msg = body.get("error") or body.get("message")
            if msg:
                return str(msg)
        return None
