from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import Any, Mapping, Optional

from cluster_request.clients.transport import HttpxTransport, Transport
from cluster_request.config import TRACE, ClusterConfig
from cluster_request.core.decode import (
    decode_and_validate,
    get_field,
    response_is_valid,
    unwrap_envelope,
    validate_response_body,
)
from cluster_request.core.errors import (
    MalformedResponseError,
    SynchronousInvocationError,
    TransportError,
)
from cluster_request.core.models import DecodedOutcome
from cluster_request.core.options import bind_defaults, build_default_options, compose_options
from cluster_request.core.urls import resolve_url


_TRACE_KEYS = ("url", "method", "params", "qs")


def _attach(err: BaseException, **context: Any) -> None:
    for key, value in context.items():
        if not hasattr(err, key):
            with suppress(AttributeError):
                setattr(err, key, value)


class ClusterRequest:
    """Client for services inside the cluster.

    Requests are composed from defaults fixed at construction, sent through
    the transport collaborator, then decoded and validated into a
    DecodedOutcome. Any failure is raised as a ClusterRequestError.
    """

    def __init__(
        self,
        log: Optional[logging.Logger] = None,
        default_port: Optional[int] = None,
        default_req_options: Optional[Mapping[str, Any]] = None,
        transport: Optional[Transport] = None,
        config: Optional[ClusterConfig] = None,
    ):
        if config is None:
            settings: dict[str, Any] = {"log": log, "default_req_options": dict(default_req_options or {})}
            if default_port:
                settings["default_port"] = default_port
            config = ClusterConfig(**settings)

        self.config = config
        self.log = config.log
        self.default_port = config.default_port
        self.default_req_options = build_default_options(config.default_req_options)
        self._owns_transport = transport is None
        self.transport: Transport = transport if transport is not None else HttpxTransport()

    @classmethod
    def from_config(cls, config: ClusterConfig, transport: Optional[Transport] = None) -> "ClusterRequest":
        return cls(transport=transport, config=config)

    def get_url(self, host: str, path: str) -> str:
        return resolve_url(host, path, self.default_port)

    def get_request_options(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        return compose_options(self.default_req_options, url, headers, options)

    async def request(
        self,
        host: str,
        path: str,
        options: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ) -> DecodedOutcome:
        return await self.request_url(self.get_url(host, path), options, headers)

    async def request_url(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ) -> DecodedOutcome:
        req_options = self.get_request_options(url, options, headers)
        if self.log:
            self.log.log(TRACE, "%s", req_options)

        error, response, body = await self._invoke(req_options)

        if self.log:
            picked = {k: req_options[k] for k in _TRACE_KEYS if k in req_options}
            status = get_field(response, "status_code", "statusCode")
            self.log.log(TRACE, "%s %s", {"error": error, **picked, "status": status}, body)

        if error is not None:
            _attach(error, body=body, response=response, req_options=req_options)
            raise TransportError(
                f"{error}" or type(error).__name__,
                cause=error,
                body=body,
                response=response,
                req_options=req_options,
            ) from error

        if response is None or isinstance(response, str):
            raise MalformedResponseError(
                f"Invalid response: {response}",
                status_code=500,
                body=body,
                response=response,
                req_options=req_options,
            )

        headers_in = get_field(response, "headers") or {}
        if self.log and req_options.get("gzip") and headers_in.get("content-encoding") != "gzip":
            self.log.debug("No gzip encoded response from %s", req_options.get("url"))

        status_code = get_field(response, "status_code", "statusCode")
        return decode_and_validate(status_code, body, headers_in, req_options, response)

    async def _invoke(self, req_options: dict[str, Any]) -> tuple[Any, Any, Any]:
        loop = asyncio.get_running_loop()
        done: asyncio.Future = loop.create_future()

        def callback(error: Optional[BaseException], response: Any = None, body: Any = None) -> None:
            if not done.done():
                done.set_result((error, response, body))

        try:
            self.transport(req_options, callback)
        except Exception as e:
            raise SynchronousInvocationError(
                f"{e}" or type(e).__name__,
                cause=e,
                req_options=req_options,
            ) from e

        return await done

    def get_request(
        self,
        host: str,
        path: str,
        options: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ):
        """Return the transport bound to the composed options, without sending."""
        req_options = self.get_request_options(self.get_url(host, path), options, headers)
        if self.log:
            self.log.log(TRACE, "%s", req_options)
        return bind_defaults(self.transport, req_options)

    def response_is_valid(self, response: Any) -> bool:
        return response_is_valid(response)

    def validate_response_body(self, response: Any) -> Any:
        return validate_response_body(response)

    async def validate_response(self, response: Any) -> Any:
        return unwrap_envelope(self.validate_response_body(response))

    async def aclose(self) -> None:
        if self._owns_transport and hasattr(self.transport, "aclose"):
            await self.transport.aclose()

    async def __aenter__(self) -> "ClusterRequest":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.aclose()
        return False
