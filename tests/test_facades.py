from __future__ import annotations

import io
import json
from pathlib import Path
from typing import List

import httpx
import pytest

from zakkur_sdk import AgentFacade


@pytest.fixture()
def recorded(make_client):
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"ok": True})

    return make_client(handler), requests


@pytest.mark.asyncio
async def test_board_routes(recorded) -> None:
    client, requests = recorded
    await client.board.consult("x")
    await client.board.get_history()

    consult, history = requests
    assert (consult.method, consult.url.path) == ("POST", "/api/decision")
    assert consult.content == b'{"context":"x"}'
    assert consult.headers["Content-Type"] == "application/json"
    assert (history.method, history.url.path) == ("GET", "/api/history")


@pytest.mark.asyncio
async def test_agent_roles_are_lowercased(recorded) -> None:
    client, requests = recorded
    cfo = client.agent("CFO")
    assert isinstance(cfo, AgentFacade)
    assert cfo.role == "cfo"

    await cfo.consult("Should we expand?", thread_id="t-1")
    await cfo.execute("Draft the budget")

    consult, execute = requests
    assert consult.url.path == "/api/agent/cfo/consult"
    assert json.loads(consult.content) == {"context": "Should we expand?", "threadId": "t-1"}
    assert execute.url.path == "/api/agent/cfo/execute"
    assert json.loads(execute.content) == {"task": "Draft the budget"}


def test_empty_role_rejected(recorded) -> None:
    client, _ = recorded
    with pytest.raises(ValueError):
        client.agent("  ")


@pytest.mark.asyncio
async def test_knowledge_upload_multipart(recorded) -> None:
    client, requests = recorded
    await client.knowledge.upload(("policy.txt", b"remote work policy", "text/plain"), "t")

    upload = requests[0]
    assert (upload.method, upload.url.path) == ("POST", "/api/knowledge/upload")
    assert upload.headers["Content-Type"].startswith("multipart/form-data; boundary=")
    body = upload.content
    assert b'name="file"; filename="policy.txt"' in body
    assert b"remote work policy" in body
    assert b'name="title"' in body


@pytest.mark.asyncio
async def test_knowledge_upload_accepts_paths_and_file_objects(recorded, tmp_path: Path) -> None:
    client, requests = recorded
    doc = tmp_path / "handbook.md"
    doc.write_bytes(b"# Handbook")

    await client.knowledge.upload(doc)
    await client.knowledge.upload(io.BytesIO(b"raw bytes"))

    from_path, from_buffer = requests
    assert b'filename="handbook.md"' in from_path.content
    assert b'name="title"' not in from_path.content
    assert b'filename="upload"' in from_buffer.content
    assert b"raw bytes" in from_buffer.content


@pytest.mark.asyncio
async def test_upload_body_survives_retry(make_client, sleeps) -> None:
    bodies: List[bytes] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(request.content)
        if len(bodies) == 1:
            return httpx.Response(503, json={})
        return httpx.Response(201, json={"docId": "d-1"})

    client = make_client(handler)
    result = await client.knowledge.upload(io.BytesIO(b"quarterly report"), "Q3")

    assert result == {"docId": "d-1"}
    assert len(bodies) == 2
    assert all(b"quarterly report" in body for body in bodies)


@pytest.mark.asyncio
async def test_knowledge_list_and_delete(recorded) -> None:
    client, requests = recorded
    await client.knowledge.list()
    await client.knowledge.delete("doc/42")

    listing, delete = requests
    assert (listing.method, listing.url.path) == ("GET", "/api/knowledge")
    assert delete.method == "DELETE"
    assert delete.url.raw_path == b"/api/knowledge/doc%2F42"


@pytest.mark.asyncio
async def test_null_context_and_non_string_thread_ids_pass_through(recorded) -> None:
    client, requests = recorded
    await client.board.consult(None)
    await client.agent("ops").execute("restart", thread_id=42)

    decision, execute = requests
    assert json.loads(decision.content) == {"context": None}
    assert json.loads(execute.content) == {"task": "restart", "threadId": 42}
