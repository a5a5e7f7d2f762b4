from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Callable, Mapping, Optional

import httpx

from cluster_request.config import REQUEST_TIMEOUT_SEC
from cluster_request.core.models import TransportResponse

logger = logging.getLogger(__name__)

Callback = Callable[[Optional[BaseException], Optional[TransportResponse], Any], None]
Transport = Callable[[Mapping[str, Any], Callback], Any]


def _headers(req_options: Mapping[str, Any]) -> dict[str, str]:
    headers = {str(k): str(v) for k, v in (req_options.get("headers") or {}).items()}
    lowered = {k.lower() for k in headers}
    if "accept-encoding" not in lowered:
        headers["Accept-Encoding"] = "gzip" if req_options.get("gzip") else "identity"
    if req_options.get("json") is True and "accept" not in lowered:
        headers["Accept"] = "application/json"
    return headers


def to_transport_response(r: httpx.Response) -> TransportResponse:
    return TransportResponse(
        status_code=r.status_code,
        headers={k.lower(): v for k, v in r.headers.items()},
        href=str(r.url),
    )


class HttpxTransport:
    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout_sec: float = REQUEST_TIMEOUT_SEC):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_sec)
        self._tasks: set[asyncio.Task] = set()

    def build_request(self, req_options: Mapping[str, Any]) -> httpx.Request:
        payload = req_options.get("json")
        kwargs: dict[str, Any] = {
            "headers": _headers(req_options),
            "params": req_options.get("params", req_options.get("qs")),
        }
        if payload is not None and not isinstance(payload, bool):
            kwargs["json"] = payload
        elif req_options.get("form") is not None:
            kwargs["data"] = req_options["form"]
        elif req_options.get("body") is not None:
            kwargs["content"] = req_options["body"]
        if req_options.get("timeout") is not None:
            kwargs["timeout"] = req_options["timeout"]

        method = str(req_options.get("method") or "GET").upper()
        return self._client.build_request(method, req_options["url"], **kwargs)

    def __call__(self, req_options: Mapping[str, Any], callback: Optional[Callback] = None) -> None:
        if callback is None:
            raise TypeError("Callback expected")
        request = self.build_request(req_options)
        task = asyncio.get_running_loop().create_task(self._send(request, callback))
        self._tasks.add(task)
        task.add_done_callback(functools.partial(self._finish, callback))

    def _finish(self, callback: Callback, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            callback(asyncio.CancelledError(), None, None)

    async def _send(self, request: httpx.Request, callback: Callback) -> None:
        try:
            r = await self._client.send(request)
        except Exception as e:
            logger.warning("%s %s failed: %s", request.method, request.url, e)
            callback(e, None, None)
            return
        callback(None, to_transport_response(r), r.text)

    async def aclose(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        if self._owns_client:
            await self._client.aclose()
        logger.debug("transport closed")
