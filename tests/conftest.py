from __future__ import annotations

from typing import Callable, List

import httpx
import pytest

from zakkur_sdk.client import ZakkurClient


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture()
def sleeps() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture()
def make_client(sleeps: SleepRecorder) -> Callable[..., ZakkurClient]:
    def factory(handler, **settings) -> ZakkurClient:
        settings.setdefault("api_key", "test-key")
        settings.setdefault("base_url", "https://api.example.com/api")
        return ZakkurClient(transport=httpx.MockTransport(handler), sleep=sleeps, **settings)

    return factory
