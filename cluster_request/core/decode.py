"""Decoding and validation of transport results."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from .errors import DecodeError, MalformedResponseError, ParseError, ValidationError
from .models import DecodedOutcome


class BodyKind(str, Enum):
    OBJECT = "object"
    ARRAY = "array"
    PRIMITIVE = "primitive"
    RAW_STRING = "raw_string"


def classify_body(value: Any) -> BodyKind:
    if isinstance(value, Mapping):
        return BodyKind.OBJECT
    if isinstance(value, (list, tuple)):
        return BodyKind.ARRAY
    return BodyKind.PRIMITIVE


def is_json_content_type(content_type: Any) -> bool:
    if not content_type:
        return False
    media = f"{content_type}".split(";", 1)[0].strip().lower()
    return media == "application/json" or media.endswith("+json")


def get_field(obj: Any, *names: str) -> Any:
    for name in names:
        if isinstance(obj, Mapping):
            if name in obj:
                return obj[name]
        elif hasattr(obj, name):
            return getattr(obj, name)
    return None


def decode_body(
    status_code: int,
    raw_body: Any,
    headers: Optional[Mapping[str, Any]],
    req_options: Optional[dict] = None,
    response: Any = None,
) -> Tuple[BodyKind, Any]:
    if not isinstance(raw_body, (str, bytes, bytearray)):
        if raw_body is None:
            raise DecodeError(
                f"Can't decode response body: {raw_body}",
                status_code=status_code,
                body=raw_body,
                result=DecodedOutcome(status_code, raw_body, response, req_options or {}),
                req_options=req_options,
                response=response,
            )
        return classify_body(raw_body), raw_body

    if isinstance(raw_body, (bytes, bytearray)):
        raw_body = raw_body.decode("utf-8", errors="replace")

    result = DecodedOutcome(status_code, raw_body, response, req_options or {})
    try:
        parsed = json.loads(raw_body)
    except ValueError:
        content_type = (headers or {}).get("content-type")
        if is_json_content_type(content_type):
            raise ParseError(
                f"Can't parse json: {raw_body}",
                status_code=status_code,
                body=raw_body,
                result=result,
                req_options=req_options,
                response=response,
            ) from None
        return BodyKind.RAW_STRING, raw_body

    if parsed is None:
        raise DecodeError(
            f"Can't decode response body: {raw_body}",
            status_code=status_code,
            body=raw_body,
            result=result,
            req_options=req_options,
            response=response,
        )
    return classify_body(parsed), parsed


def response_is_valid(response: Any) -> bool:
    if response is None or isinstance(response, str):
        return False
    status = get_field(response, "status_code", "statusCode")
    return isinstance(status, int) and 200 <= status <= 299


def _response_url(response: Any) -> str:
    href = get_field(response, "href")
    if not href:
        href = get_field(get_field(response, "response"), "href", "url")
    if not href:
        href = get_field(get_field(response, "req_options", "reqOptions"), "url")
    return f"{href}" if href else ""


def _error_text(body: Any) -> str:
    if isinstance(body, Mapping) and body.get("message"):
        return f"{body['message']}"
    if body is None:
        return "Invalid response"
    if isinstance(body, (Mapping, list, tuple)):
        return json.dumps(body, default=str)
    return f"{body}"


def validate_response_body(response: Any) -> Any:
    """Return the body of a 2xx response, raise a classified error otherwise."""
    if response is None or isinstance(response, str):
        raise MalformedResponseError(
            f"Invalid response: {response}",
            status_code=500,
            body=response,
            response=response,
        )

    body = get_field(response, "body")
    if response_is_valid(response):
        return body

    status = get_field(response, "status_code", "statusCode")
    if not isinstance(status, int):
        status = 500
    raise ValidationError(
        f"{_error_text(body)} ({status})",
        url=_response_url(response),
        status_code=status,
        body=body,
        result=response,
        req_options=get_field(response, "req_options", "reqOptions"),
        response=get_field(response, "response"),
    )


def unwrap_envelope(body: Any, kind: Optional[BodyKind] = None) -> Any:
    if kind is None:
        kind = classify_body(body)
    if kind is BodyKind.OBJECT and "data" in body:
        return body["data"]
    return body


def decode_and_validate(
    status_code: int,
    raw_body: Any,
    headers: Optional[Mapping[str, Any]],
    req_options: Optional[dict] = None,
    response: Any = None,
) -> DecodedOutcome:
    _, body = decode_body(status_code, raw_body, headers, req_options, response)
    outcome = DecodedOutcome(
        status_code=status_code,
        body=body,
        response=response,
        req_options=req_options or {},
    )
    validate_response_body(outcome)
    return outcome
