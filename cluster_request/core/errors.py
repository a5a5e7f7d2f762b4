"""Errors raised by the request pipeline.

Every failure of a call surfaces as exactly one ClusterRequestError subclass,
carrying enough context (status, body, request options) to diagnose it
without issuing the request again.
"""

from __future__ import annotations

from typing import Any, Optional


class ClusterRequestError(Exception):
    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Any = None,
        result: Any = None,
        req_options: Optional[dict] = None,
        response: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body
        self.result = result
        self.req_options = req_options
        self.response = response

    def __str__(self) -> str:
        return self.message


class TransportError(ClusterRequestError):
    """The transport reported a network level failure through its callback."""

    def __init__(self, message: str, *, cause: BaseException, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.cause = cause


class SynchronousInvocationError(ClusterRequestError):
    """The transport raised before accepting the callback."""

    def __init__(self, message: str, *, cause: BaseException, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.cause = cause


class ParseError(ClusterRequestError):
    pass


class DecodeError(ClusterRequestError):
    pass


class ValidationError(ClusterRequestError):
    """Non 2xx status. `str()` names the URL the response came from."""

    def __init__(self, message: str, *, url: str = "", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.url = url

    def __str__(self) -> str:
        if self.url:
            return f"{self.message} from {self.url}"
        return self.message


class MalformedResponseError(ValidationError):
    pass
