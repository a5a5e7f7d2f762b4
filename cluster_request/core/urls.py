from __future__ import annotations

import re

_PORT_RE = re.compile(r":\d+")


def has_port(host: str) -> bool:
    return _PORT_RE.search(f"{host}") is not None


def resolve_url(host: str, path: str, default_port: int) -> str:
    port = "" if has_port(host) else f":{default_port}"
    req_path = f"{path}"
    if not req_path.startswith("/"):
        req_path = f"/{req_path}"
    return f"http://{host}{port}{req_path}"
