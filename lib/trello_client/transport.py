from __future__ import annotations

import json
import logging
from functools import partialmethod
from typing import Any, Mapping

import httpx

from . import debug
from .config_types import ClientConfig
from .errors import ApiError, AuthError, NetworkError

logger = logging.getLogger(__name__)

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "HEAD", "OPTIONS", "PATCH")


def _prepare(request: httpx.Request) -> None:
    request.headers["Content-Type"] = "application/json"


def _parse_body(r: httpx.Response) -> Any:
    if not r.content:
        return None
    try:
        return r.json()
    except ValueError:
        return r.text


class Transport:
    def __init__(self, cfg: ClientConfig, *, http_transport: httpx.BaseTransport | None = None):
        self._cfg = cfg
        self._client = httpx.Client(
            base_url=cfg.base_url.rstrip("/"),
            timeout=cfg.timeout_s,
            headers={"User-Agent": cfg.identifier},
            event_hooks={"request": [_prepare]},
            follow_redirects=True,
            transport=http_transport,
        )

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    def close(self) -> None:
        self._client.close()

    def _params(self, query: Mapping[str, Any] | None) -> dict[str, Any]:
        params: dict[str, Any] = {"key": self._cfg.key}
        if self._cfg.token:
            params["token"] = self._cfg.token
        if query:
            params.update(query)
        return params

    def _attempt(self, method: str, path: str, params: dict[str, Any], data: Any) -> httpx.Response:
        try:
            r = self._client.request(method, path, params=params, json=data)
        except httpx.RequestError as e:
            raise NetworkError(str(e)) from e

        if self._cfg.debug:
            debug.dump_request(r.request)
            debug.dump_response(r)
        return r

    def _send(self, method: str, path: str, params: dict[str, Any], data: Any) -> httpx.Response:
        retries = self._cfg.retries
        for attempt in range(1, retries + 1):
            try:
                r = self._attempt(method, path, params, data)
            except NetworkError as e:
                logger.warning("%s %s failed (%s), retry %d/%d", method, path, e, attempt, retries)
                continue
            if r.status_code < 400:
                return r
            logger.warning("%s %s returned %d, retry %d/%d", method, path, r.status_code, attempt, retries)
        # last attempt: errors propagate, error statuses are returned
        return self._attempt(method, path, params, data)

    def request(
            self,
            method: str,
            path: str,
            *,
            query: Mapping[str, Any] | None = None,
            data: Any | None = None,
    ) -> tuple[Any, httpx.Response]:
        logger.debug("%s %s", method, path)
        r = self._send(method, path, self._params(query), data)
        body = _parse_body(r)

        if r.status_code >= 400 and self._cfg.fatal:
            msg = f"{method} {path} failed with {r.status_code}"
            details = None
            if isinstance(body, dict):
                details = json.dumps(body, ensure_ascii=False)
                msg = str(body.get("message") or body.get("error") or msg)
            elif body:
                details = str(body)[:1000]

            if r.status_code in (401, 403):
                raise AuthError(r.status_code, msg, details, body)
            raise ApiError(r.status_code, msg, details, body)

        return body, r

    get = partialmethod(request, "GET")
    post = partialmethod(request, "POST")
    put = partialmethod(request, "PUT")
    delete = partialmethod(request, "DELETE")
    head = partialmethod(request, "HEAD")
    options = partialmethod(request, "OPTIONS")
    patch = partialmethod(request, "PATCH")
