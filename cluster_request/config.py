from __future__ import annotations

import logging
import os
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_PORT = int(os.getenv("CLUSTER_DEFAULT_PORT", "80"))
REQUEST_TIMEOUT_SEC = float(os.getenv("CLUSTER_REQUEST_TIMEOUT_SEC", "5.0"))

TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class ClusterConfig(BaseModel):
    """Settings fixed once when a ClusterRequest is built."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    log: Optional[logging.Logger] = None
    default_port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    default_req_options: dict[str, Any] = Field(default_factory=dict)
