"""Async Python client for the Zakkur decision service."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from .config import SDK_VERSION, ClientConfig
from .executor import RequestDescriptor, RequestExecutor, Sleeper
from .facades import AgentFacade, BoardFacade, KnowledgeFacade, agent_facade

logger = logging.getLogger("zakkur_sdk.client")


class ZakkurClient:
    """Entry point exposing the ``board``, ``knowledge`` and ``agent(role)`` facades.

    Either pass a ready :class:`ClientConfig` or the individual settings as
    keyword arguments. A missing credential raises ``ZakkurError`` with code
    ``AUTH_REQUIRED`` before any connection is opened.
    """

    version = SDK_VERSION

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[Sleeper] = None,
        **settings: Any,
    ) -> None:
        if config is None:
            config = ClientConfig(**settings)
        elif settings:
            raise TypeError("Pass either a ClientConfig or keyword settings, not both")
        self._config = config
        self._client = httpx.AsyncClient(timeout=config.timeout_seconds, transport=transport)
        self._executor = RequestExecutor(config, self._client, sleep=sleep)
        self.board = BoardFacade(self._executor)
        self.knowledge = KnowledgeFacade(self._executor)
        logger.debug(
            "Client ready base_url=%s context=%s timeout_ms=%s max_retries=%s",
            config.base_url,
            config.execution_context,
            config.timeout_ms,
            config.max_retries,
        )

    async def __aenter__(self) -> "ZakkurClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @property
    def config(self) -> ClientConfig:
        return self._config

    def agent(self, role: str) -> AgentFacade:
        return agent_facade(self._executor, role)

    async def execute(self, descriptor: RequestDescriptor) -> Any:
        return await self._executor.execute(descriptor)

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ["ZakkurClient"]
