"""Configuration objects for the Zakkur Python SDK."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .errors import AUTH_REQUIRED, ZakkurError

SDK_VERSION = "3.0.0"
DEFAULT_BASE_URL = "http://localhost:8080/api"

BROWSER_CONTEXT = "Browser"
SERVER_CONTEXT = "Python"


def detect_execution_context() -> str:
    """Pyodide builds report ``emscripten``; everything else runs server-side."""
    if sys.platform == "emscripten":
        return BROWSER_CONTEXT
    return SERVER_CONTEXT


@dataclass(frozen=True)
class ClientConfig:
    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout_ms: int = 30000
    max_retries: int = 3
    user_agent: str = f"zakkur-sdk-python/{SDK_VERSION}"
    headers: Dict[str, str] = field(default_factory=dict)
    execution_context: str = field(default_factory=detect_execution_context)

    def __post_init__(self) -> None:
        if not self.api_key or not str(self.api_key).strip():
            raise ZakkurError("API Key is missing", 400, AUTH_REQUIRED)
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        if self.max_retries < 0:
            raise ValueError("max_retries must not be negative")
        object.__setattr__(self, "base_url", (self.base_url or DEFAULT_BASE_URL).rstrip("/"))

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientConfig":
        values: Dict[str, Any] = {
            "api_key": os.environ.get("ZAKKUR_API_KEY", ""),
            "base_url": os.environ.get("ZAKKUR_BASE_URL", DEFAULT_BASE_URL),
            "timeout_ms": int(os.environ.get("ZAKKUR_TIMEOUT_MS", "30000")),
            "max_retries": int(os.environ.get("ZAKKUR_MAX_RETRIES", "3")),
        }
        context = os.environ.get("ZAKKUR_CLIENT")
        if context:
            values["execution_context"] = context
        values.update(overrides)
        return cls(**values)


__all__ = [
    "BROWSER_CONTEXT",
    "ClientConfig",
    "DEFAULT_BASE_URL",
    "SDK_VERSION",
    "SERVER_CONTEXT",
    "detect_execution_context",
]
