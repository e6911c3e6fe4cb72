"""Request executor: the single path every SDK call takes to the network."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import httpx

from .config import SDK_VERSION, ClientConfig
from .retry import (
    AttemptState,
    Outcome,
    Phase,
    ResponseOutcome,
    TimeoutOutcome,
    TransportFailure,
    advance,
)

logger = logging.getLogger("zakkur_sdk.executor")

ALLOWED_METHODS = ("GET", "POST", "DELETE")

Sleeper = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class MultipartForm:
    """Form fields and files for a multipart upload, handed to httpx untouched."""

    data: Dict[str, str] = field(default_factory=dict)
    files: Dict[str, Tuple[str, bytes, Optional[str]]] = field(default_factory=dict)


@dataclass(frozen=True)
class RequestDescriptor:
    path: str
    method: str = "GET"
    payload: Any = None
    is_binary_upload: bool = False

    def __post_init__(self) -> None:
        method = self.method.upper()
        if method not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported method {self.method!r}; expected one of {ALLOWED_METHODS}")
        object.__setattr__(self, "method", method)
        if not self.path.startswith("/"):
            raise ValueError(f"Request path must start with '/': {self.path!r}")
        if self.is_binary_upload and not isinstance(self.payload, MultipartForm):
            raise ValueError("Binary uploads require a MultipartForm payload")
        if not self.is_binary_upload and isinstance(self.payload, MultipartForm):
            raise ValueError("MultipartForm payloads must be sent as binary uploads")


def _describe(outcome: Outcome) -> str:
    if isinstance(outcome, ResponseOutcome):
        return f"status={outcome.status_code}"
    if isinstance(outcome, TransportFailure):
        return f"transport_error={outcome.reason}"
    return "timeout"


class RequestExecutor:
    def __init__(self, config: ClientConfig, client: httpx.AsyncClient, *, sleep: Optional[Sleeper] = None) -> None:
        self._config = config
        self._client = client
        self._sleep = sleep or asyncio.sleep

    @property
    def config(self) -> ClientConfig:
        return self._config

    def url_for(self, path: str) -> str:
        return f"{self._config.base_url}{path}"

    def _headers(self) -> Dict[str, str]:
        headers = {"User-Agent": self._config.user_agent}
        headers.update(self._config.headers)
        headers.update(
            {
                "x-api-key": self._config.api_key,
                "X-SDK-Version": SDK_VERSION,
                "X-SDK-Client": self._config.execution_context,
            }
        )
        return headers

    def _build_request(self, descriptor: RequestDescriptor) -> Dict[str, Any]:
        headers = self._headers()
        request: Dict[str, Any] = {"headers": headers}
        if descriptor.is_binary_upload:
            form: MultipartForm = descriptor.payload
            request["data"] = dict(form.data)
            request["files"] = dict(form.files)
        elif descriptor.payload is not None:
            headers["Content-Type"] = "application/json"
            request["content"] = json.dumps(descriptor.payload, separators=(",", ":"))
        return request

    async def _attempt(self, descriptor: RequestDescriptor, url: str, request: Dict[str, Any]) -> Outcome:
        try:
            response = await asyncio.wait_for(
                self._client.request(descriptor.method, url, **request),
                timeout=self._config.timeout_seconds,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return TimeoutOutcome()
        except Exception as exc:
            return TransportFailure(str(exc) or exc.__class__.__name__)

        if not response.content:
            return ResponseOutcome(response.status_code, None)
        try:
            body = response.json()
        except ValueError as exc:
            return TransportFailure(f"Invalid JSON in response: {exc}")
        return ResponseOutcome(response.status_code, body)

    async def execute(self, descriptor: RequestDescriptor) -> Any:
        url = self.url_for(descriptor.path)
        request = self._build_request(descriptor)
        state = AttemptState(max_retries=self._config.max_retries)

        while not state.terminal:
            if state.phase is Phase.BACKOFF_WAIT:
                await self._sleep(state.pending_delay_ms / 1000)
                state.resume()
                continue

            logger.debug("method=%s path=%s attempt=%s", descriptor.method, descriptor.path, state.attempts_made)
            outcome = await self._attempt(descriptor, url, request)
            advance(state, outcome)

            if state.phase is Phase.BACKOFF_WAIT:
                logger.warning(
                    "Retrying method=%s path=%s attempt=%s/%s delay_ms=%s outcome=%s",
                    descriptor.method,
                    descriptor.path,
                    state.attempt_count,
                    state.max_retries,
                    state.pending_delay_ms,
                    _describe(outcome),
                )

        if state.phase is Phase.FAILED:
            logger.error(
                "Request failed method=%s path=%s status=%s code=%s attempts=%s",
                descriptor.method,
                descriptor.path,
                state.error.status,
                state.error.code,
                state.attempts_made,
            )
        return state.unwrap()


__all__ = ["ALLOWED_METHODS", "MultipartForm", "RequestDescriptor", "RequestExecutor"]
