from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class TransportResponse:
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    href: Optional[str] = None


@dataclass
class DecodedOutcome:
    status_code: int
    body: Any
    response: Any
    req_options: dict[str, Any] = field(default_factory=dict)
