"""Resource facades mapping SDK calls onto service endpoints."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Optional, Tuple, Union
from urllib.parse import quote

from .executor import MultipartForm, RequestDescriptor, RequestExecutor
from .models import AgentConsultRequest, AgentExecuteRequest, DecisionRequest

FileInput = Union[str, os.PathLike, bytes, IO[bytes], Tuple[Any, ...]]


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


def _file_part(file: FileInput) -> Tuple[str, bytes, Optional[str]]:
    """Normalise the accepted upload inputs to an in-memory ``(name, content, type)`` part.

    Paths are read from disk, file objects are read in full and named after
    their ``name`` attribute, raw bytes become ``upload``. Reading up front
    lets a retried attempt resend the same body.
    """
    if isinstance(file, tuple):
        name, content = file[0], file[1]
        content_type = file[2] if len(file) > 2 else None
        if hasattr(content, "read"):
            content = content.read()
        return name, content, content_type
    if isinstance(file, (bytes, bytearray)):
        return "upload", bytes(file), None
    if isinstance(file, (str, os.PathLike)):
        path = Path(file)
        return path.name, path.read_bytes(), None
    if hasattr(file, "read"):
        content = file.read()
        if isinstance(content, str):
            content = content.encode("utf-8")
        name = os.path.basename(getattr(file, "name", "") or "") or "upload"
        return name, content, None
    raise TypeError(f"Unsupported upload type: {type(file).__name__}")


@dataclass(frozen=True)
class BoardFacade:
    executor: RequestExecutor

    async def consult(self, context: Any) -> Any:
        payload = DecisionRequest(context=context).to_payload()
        return await self.executor.execute(RequestDescriptor("/decision", "POST", payload))

    async def get_history(self) -> Any:
        return await self.executor.execute(RequestDescriptor("/history", "GET"))


@dataclass(frozen=True)
class AgentFacade:
    executor: RequestExecutor
    role: str

    def __post_init__(self) -> None:
        role = (self.role or "").strip().lower()
        if not role:
            raise ValueError("Agent role must not be empty")
        object.__setattr__(self, "role", role)

    def _path(self, action: str) -> str:
        return f"/agent/{_segment(self.role)}/{action}"

    async def consult(self, prompt: Any, thread_id: Optional[str] = None) -> Any:
        payload = AgentConsultRequest(context=prompt, thread_id=thread_id).to_payload()
        return await self.executor.execute(RequestDescriptor(self._path("consult"), "POST", payload))

    async def execute(self, task: Any, thread_id: Optional[str] = None) -> Any:
        payload = AgentExecuteRequest(task=task, thread_id=thread_id).to_payload()
        return await self.executor.execute(RequestDescriptor(self._path("execute"), "POST", payload))


def agent_facade(executor: RequestExecutor, role: str) -> AgentFacade:
    return AgentFacade(executor=executor, role=role)


@dataclass(frozen=True)
class KnowledgeFacade:
    executor: RequestExecutor

    async def upload(self, file: FileInput, title: Optional[str] = None) -> Any:
        form = MultipartForm(
            data={"title": title} if title else {},
            files={"file": _file_part(file)},
        )
        descriptor = RequestDescriptor("/knowledge/upload", "POST", form, is_binary_upload=True)
        return await self.executor.execute(descriptor)

    async def list(self) -> Any:
        return await self.executor.execute(RequestDescriptor("/knowledge", "GET"))

    async def delete(self, doc_id: Any) -> Any:
        return await self.executor.execute(RequestDescriptor(f"/knowledge/{_segment(doc_id)}", "DELETE"))


__all__ = ["AgentFacade", "BoardFacade", "KnowledgeFacade", "agent_facade"]
