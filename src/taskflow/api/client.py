# src/taskflow/api/client.py

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..tasks.task_models import (
    Attachment,
    Task,
    TaskDecodeError,
    TaskForm,
    task_from_api,
    tasks_from_api,
)

logger = logging.getLogger(__name__)

# Sent with multipart updates so the backend routes the POST as a PUT.
METHOD_OVERRIDE_FIELD = "_method"


class TodoApiError(Exception):
    """Any failure talking to the todo backend."""


class TodoTransportError(TodoApiError):
    """Network error or non-2xx response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TodoDecodeError(TodoApiError):
    """Response body is not JSON or does not match the task contract."""


def make_timeout(connect_s: float, read_s: float) -> httpx.Timeout:
    return httpx.Timeout(
        connect=connect_s,
        read=read_s,
        write=read_s,
        pool=connect_s,
    )


def _multipart_files(
        form: TaskForm,
        attachment: Attachment | None,
        extra: dict[str, str] | None = None,
) -> list[tuple[str, tuple[str | None, Any] | tuple[str, bytes, str]]]:
    """
    Build multipart parts.

    Plain fields go in as (None, value) so httpx always encodes multipart/form-data,
    even when no file is attached.
    """
    fields = form.to_fields()
    if extra:
        fields.update(extra)

    parts: list[Any] = [(name, (None, value)) for name, value in fields.items()]
    if attachment is not None:
        parts.append(("file", (attachment.filename, attachment.content, attachment.content_type)))
    return parts


class HttpTodoBackend:
    """
    TodoBackend over the REST surface:

    - GET    /todos
    - POST   /todos              (multipart)
    - POST   /todos/{id}         (multipart, _method=PUT)
    - PUT    /todos/{id}         (JSON, status toggle)
    - DELETE /todos/{id}

    No retries: every call is a single request.
    """

    def __init__(
            self,
            base_url: str,
            *,
            timeout: httpx.Timeout | float | None = None,
            transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout if timeout is not None else make_timeout(5.0, 15.0),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings) -> HttpTodoBackend:
        return cls(
            str(getattr(settings, "api_base_url")),
            timeout=make_timeout(
                float(getattr(settings, "connect_timeout", 5.0)),
                float(getattr(settings, "read_timeout", 15.0)),
            ),
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        await self._client.aclose()

    # ---- low-level helpers ----

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise TodoTransportError(f"{method} {path} failed: {e.__class__.__name__}: {e}") from e

        if resp.is_error:
            raise TodoTransportError(
                f"{method} {path} returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )
        logger.debug("%s %s -> %s", method, path, resp.status_code)
        return resp

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise TodoDecodeError(
                f"{resp.request.method} {resp.request.url.path} returned non-JSON body"
            ) from e

    @classmethod
    def _decode_task(cls, resp: httpx.Response) -> Task:
        try:
            return task_from_api(cls._json(resp))
        except TaskDecodeError as e:
            raise TodoDecodeError(f"Invalid task record: {e}") from e

    # ---- TodoBackend ----

    async def list_tasks(self) -> list[Task]:
        resp = await self._request("GET", "/todos")
        try:
            return tasks_from_api(self._json(resp))
        except TaskDecodeError as e:
            raise TodoDecodeError(f"Invalid task collection: {e}") from e

    async def create_task(self, form: TaskForm, attachment: Attachment | None = None) -> Task:
        resp = await self._request("POST", "/todos", files=_multipart_files(form, attachment))
        return self._decode_task(resp)

    async def update_task(
            self,
            task_id: str,
            form: TaskForm,
            attachment: Attachment | None = None,
    ) -> Task:
        parts = _multipart_files(form, attachment, extra={METHOD_OVERRIDE_FIELD: "PUT"})
        resp = await self._request("POST", f"/todos/{task_id}", files=parts)
        return self._decode_task(resp)

    async def replace_task(self, task_id: str, task: Task) -> Task:
        resp = await self._request("PUT", f"/todos/{task_id}", json=task.to_payload())
        return self._decode_task(resp)

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", f"/todos/{task_id}")

    def attachment_url(self, file_path: str) -> str:
        """Attachments are served from the `storage/` sibling of the API base path."""
        base = httpx.URL(self._base_url + "/")
        path = "/".join(quote(part, safe="") for part in file_path.lstrip("/").split("/"))
        return str(base.join(f"../storage/{path}"))
