# tests/test_api_client.py

from __future__ import annotations

import json

import httpx
import pytest

from taskflow.api.client import HttpTodoBackend, TodoDecodeError, TodoTransportError
from taskflow.tasks.task_models import Attachment, TaskForm, TaskPriority, TaskStatus

from .fakes import make_task

BASE = "http://backend.test/api"


def _record(task_id=1, **overrides):
    raw = {
        "id": task_id,
        "title": "Buy milk",
        "description": "2%",
        "status": "pending",
        "priority": "low",
        "created_at": "2025-01-02T03:04:05Z",
        "file_path": None,
        "completed": False,
    }
    raw.update(overrides)
    return raw


class Recorder:
    """MockTransport handler that records requests and replies from a queue."""

    def __init__(self, *responses: httpx.Response) -> None:
        self.requests: list[httpx.Request] = []
        self._responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responses.pop(0)


def _backend(handler) -> HttpTodoBackend:
    return HttpTodoBackend(BASE, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_list_tasks_decodes_collection() -> None:
    rec = Recorder(httpx.Response(200, json=[_record(1), _record(2, status="completed", completed=True)]))
    backend = _backend(rec)

    tasks = await backend.list_tasks()
    await backend.aclose()

    assert [t.id for t in tasks] == ["1", "2"]
    assert tasks[1].completed is True
    req = rec.requests[0]
    assert req.method == "GET"
    assert str(req.url) == f"{BASE}/todos"


@pytest.mark.asyncio
async def test_create_sends_multipart_with_file() -> None:
    rec = Recorder(httpx.Response(201, json=_record(9, file_path="uploads/scan.pdf")))
    backend = _backend(rec)
    form = TaskForm(title="Buy milk", description="2%", priority=TaskPriority.LOW)
    pdf = Attachment(filename="scan.pdf", content_type="application/pdf", content=b"%PDF-1.4")

    task = await backend.create_task(form, pdf)
    await backend.aclose()

    assert task.id == "9"
    assert task.attachment_name == "scan.pdf"
    req = rec.requests[0]
    assert req.method == "POST"
    assert req.url.path == "/api/todos"
    assert req.headers["content-type"].startswith("multipart/form-data")
    body = req.content
    assert b'name="title"' in body and b"Buy milk" in body
    assert b'name="priority"' in body and b"low" in body
    assert b'filename="scan.pdf"' in body
    assert b"application/pdf" in body
    assert b"%PDF-1.4" in body


@pytest.mark.asyncio
async def test_create_without_file_is_still_multipart() -> None:
    rec = Recorder(httpx.Response(201, json=_record(3)))
    backend = _backend(rec)

    await backend.create_task(TaskForm(title="Buy milk"))
    await backend.aclose()

    req = rec.requests[0]
    assert req.headers["content-type"].startswith("multipart/form-data")
    assert b'name="file"' not in req.content


@pytest.mark.asyncio
async def test_update_uses_post_with_method_override() -> None:
    rec = Recorder(httpx.Response(200, json=_record(5, title="Changed", status="in_progress")))
    backend = _backend(rec)

    task = await backend.update_task("5", TaskForm(title="Changed", status=TaskStatus.IN_PROGRESS))
    await backend.aclose()

    assert task.status is TaskStatus.IN_PROGRESS
    req = rec.requests[0]
    assert req.method == "POST"
    assert req.url.path == "/api/todos/5"
    assert b'name="_method"' in req.content and b"PUT" in req.content


@pytest.mark.asyncio
async def test_replace_sends_json_put_with_completed_flag() -> None:
    rec = Recorder(httpx.Response(200, json=_record(4, status="completed", completed=True)))
    backend = _backend(rec)
    task = make_task("4", title="Buy milk", description="2%", status=TaskStatus.COMPLETED)

    updated = await backend.replace_task("4", task)
    await backend.aclose()

    assert updated.completed is True
    req = rec.requests[0]
    assert req.method == "PUT"
    assert req.url.path == "/api/todos/4"
    assert json.loads(req.content) == {
        "title": "Buy milk",
        "description": "2%",
        "status": "completed",
        "priority": "medium",
        "completed": True,
    }


@pytest.mark.asyncio
async def test_delete_accepts_no_content() -> None:
    rec = Recorder(httpx.Response(204))
    backend = _backend(rec)

    await backend.delete_task("4")
    await backend.aclose()

    assert rec.requests[0].method == "DELETE"
    assert rec.requests[0].url.path == "/api/todos/4"


@pytest.mark.asyncio
async def test_non_2xx_is_transport_error() -> None:
    backend = _backend(Recorder(httpx.Response(404, json={"message": "Not found"})))

    with pytest.raises(TodoTransportError) as info:
        await backend.delete_task("999")
    await backend.aclose()

    assert info.value.status_code == 404


@pytest.mark.asyncio
async def test_network_failure_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    backend = _backend(handler)
    with pytest.raises(TodoTransportError) as info:
        await backend.list_tasks()
    await backend.aclose()

    assert info.value.status_code is None


@pytest.mark.asyncio
async def test_bad_payloads_are_decode_errors() -> None:
    backend = _backend(
        Recorder(
            httpx.Response(200, text="<html>oops</html>"),
            httpx.Response(200, json={"data": []}),
            httpx.Response(201, json=_record(1, status="archived")),
        )
    )

    with pytest.raises(TodoDecodeError):
        await backend.list_tasks()
    with pytest.raises(TodoDecodeError):
        await backend.list_tasks()
    with pytest.raises(TodoDecodeError):
        await backend.create_task(TaskForm(title="x"))
    await backend.aclose()


def test_attachment_url_is_storage_sibling_of_api_path() -> None:
    backend = HttpTodoBackend("http://127.0.0.1:8000/api/")
    assert backend.attachment_url("uploads/a b.pdf").startswith("http://127.0.0.1:8000/storage/uploads/a")
    assert backend.attachment_url("x.pdf") == "http://127.0.0.1:8000/storage/x.pdf"


def test_attachment_url_escapes_path_segments() -> None:
    backend = HttpTodoBackend("http://127.0.0.1:8000/api")
    assert (
        backend.attachment_url("uploads/report #1?.pdf")
        == "http://127.0.0.1:8000/storage/uploads/report%20%231%3F.pdf"
    )
