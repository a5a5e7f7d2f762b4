from __future__ import annotations

import copy
from typing import Any, Callable, Mapping, Optional


BASELINE_REQ_OPTIONS: dict[str, Any] = {
    "method": "GET",
    "json": True,
    "gzip": True,
}


def deep_merge(*layers: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """Merge mappings left to right into a new dict.

    Later layers win on conflicting keys. When both sides hold a mapping the
    two are merged recursively instead of replaced. Inputs are never mutated.
    """
    out: dict[str, Any] = {}
    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            prev = out.get(key)
            if isinstance(prev, dict) and isinstance(value, Mapping):
                out[key] = deep_merge(prev, value)
            elif isinstance(value, Mapping):
                out[key] = deep_merge(value)
            else:
                out[key] = copy.deepcopy(value)
    return out


def build_default_options(default_req_options: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
    return deep_merge(BASELINE_REQ_OPTIONS, default_req_options)


def compose_options(
    base_defaults: Mapping[str, Any],
    url: str,
    headers: Optional[Mapping[str, Any]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    return deep_merge(base_defaults, {"url": url, "headers": dict(headers or {})}, overrides)


def bind_defaults(transport: Callable[..., Any], req_options: Mapping[str, Any]) -> Callable[..., Any]:
    """Return `transport` with `req_options` applied under per-call overrides.

    The bound function keeps the transport calling convention, with the
    overrides first: `bound(overrides, callback)`.
    """
    bound_options = deep_merge(req_options)

    def bound(overrides: Optional[Mapping[str, Any]], callback: Callable[..., Any]) -> Any:
        return transport(deep_merge(bound_options, overrides), callback)

    bound.req_options = bound_options  # type: ignore[attr-defined]
    return bound
