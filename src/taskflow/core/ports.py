# src/taskflow/core/ports.py

"""
Ports (interfaces) used by the core.

The controller depends on Protocols instead of concrete implementations.
This keeps the HTTP backend and the notice surface swappable and makes testing easier.
"""

from __future__ import annotations

from typing import Protocol

from ..tasks.task_models import Attachment, Task, TaskForm


class TodoBackend(Protocol):
    """
    Remote task storage.

    Implementations raise taskflow.api.client.TodoApiError subclasses on failure
    and return fully decoded Task records on success.
    """

    async def list_tasks(self) -> list[Task]: ...

    async def create_task(self, form: TaskForm, attachment: Attachment | None = None) -> Task: ...

    async def update_task(
            self,
            task_id: str,
            form: TaskForm,
            attachment: Attachment | None = None,
    ) -> Task: ...

    async def replace_task(self, task_id: str, task: Task) -> Task: ...

    async def delete_task(self, task_id: str) -> None: ...

    def attachment_url(self, file_path: str) -> str: ...

    async def aclose(self) -> None: ...


class Notifier(Protocol):
    """User-visible notices (the console equivalent of toasts)."""

    def success(self, text: str) -> None: ...
    def error(self, text: str) -> None: ...
