from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import requests

from ..core.exceptions import ApiError
from .cache import QueryCache, QueryKey

logger = logging.getLogger(__name__)


class ApiClient:
    """JSON client for the attendance REST backend.

    GET responses go through the shared ``QueryCache``; writes never touch the
    cache, callers invalidate the resources they changed.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str = "",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        cache: Optional[QueryCache] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = float(timeout)
        self._session = session or requests.Session()
        self._cache = cache if cache is not None else QueryCache()
        self._headers = {"Accept": "application/json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    @property
    def cache(self) -> QueryCache:
        return self._cache

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None, *, use_cache: bool = True) -> Any:
        clean = {k: v for k, v in (params or {}).items() if v is not None}
        key = QueryKey.build(path, clean)
        if use_cache:
            hit, value = self._cache.get(key)
            if hit:
                return value

        value = self._request("GET", path, params=clean)
        if use_cache:
            self._cache.put(key, value)
        return value

    def post(self, path: str, payload: Any) -> Any:
        return self._request("POST", path, payload=payload)

    def put(self, path: str, payload: Any) -> Any:
        return self._request("PUT", path, payload=payload)

    def delete(self, path: str) -> Any:
        return self._request("DELETE", path)

    def invalidate(self, path: str) -> None:
        self._cache.invalidate(path)

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        payload: Any = None,
    ) -> Any:
        url = f"{self._base_url}{path}"
        logger.debug("api %s %s params=%s", method, path, dict(params or {}))
        try:
            resp = self._session.request(
                method,
                url,
                params=params or None,
                json=payload,
                headers=self._headers,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.warning("api %s %s failed: %s", method, path, e)
            raise ApiError("Could not reach the attendance service") from e

        if resp.status_code >= 400:
            raise ApiError(self._error_message(resp), status_code=resp.status_code)

        if resp.status_code == 204 or not resp.content:
            return None

        try:
            return resp.json()
        except ValueError as e:
            raise ApiError("Invalid response from the attendance service", status_code=resp.status_code) from e

    @staticmethod
    def _error_message(resp) -> str:
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        text = (resp.text or "").strip()
        return f"{resp.status_code}: {text or resp.reason}"
