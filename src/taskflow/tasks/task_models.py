# src/taskflow/tasks/task_models.py

from __future__ import annotations

import logging
import mimetypes
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


class TaskStatus(StrEnum):
    """Task lifecycle status as stored by the backend."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskDecodeError(ValueError):
    """Backend payload does not match the task record contract."""


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    created_at: datetime
    file_path: str | None = None

    @property
    def completed(self) -> bool:
        # Kept for backend compatibility; always derived from status.
        return self.status == TaskStatus.COMPLETED

    @property
    def status_label(self) -> str:
        return self.status.label

    @property
    def attachment_name(self) -> str | None:
        if not self.file_path:
            return None
        return self.file_path.split("/")[-1]

    def to_payload(self) -> dict[str, Any]:
        """JSON body used by the status-toggle update path."""
        return {
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "completed": self.completed,
        }


@dataclass(slots=True)
class TaskForm:
    """Transient create/edit form state."""

    title: str = ""
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM

    @classmethod
    def from_task(cls, task: Task) -> TaskForm:
        return cls(
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
        )

    def validate(self) -> str | None:
        """Return an error message, or None when the form can be submitted."""
        if not self.title.strip():
            return "Title is required."
        return None

    def to_fields(self) -> dict[str, str]:
        """Multipart form fields (without the attachment)."""
        return {
            "title": self.title,
            "description": self.description or "",
            "status": self.status.value,
            "priority": self.priority.value,
        }


@dataclass(frozen=True, slots=True)
class Attachment:
    filename: str
    content_type: str
    content: bytes = field(repr=False)

    @property
    def is_pdf(self) -> bool:
        return self.content_type == PDF_CONTENT_TYPE

    @classmethod
    def from_path(cls, path: str | Path) -> Attachment:
        """Read a local file; the media type is guessed from its name."""
        p = Path(path).expanduser()
        content_type, _ = mimetypes.guess_type(p.name)
        return cls(
            filename=p.name,
            content_type=content_type or "application/octet-stream",
            content=p.read_bytes(),
        )


# ---- boundary decoding ----


def _require_str(raw: Mapping[str, Any], key: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str):
        raise TaskDecodeError(f"field {key!r} must be a string, got {type(value).__name__}")
    return value


def _parse_timestamp(value: Any) -> datetime:
    if not isinstance(value, str) or not value.strip():
        raise TaskDecodeError(f"field 'created_at' must be an ISO-8601 string, got {value!r}")
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise TaskDecodeError(f"field 'created_at' is not a valid timestamp: {value!r}") from e


def task_from_api(raw: Any) -> Task:
    """
    Decode one backend task record.

    Raises TaskDecodeError on any contract violation. The backend's `completed`
    flag is checked against `status` and ignored on mismatch.
    """
    if not isinstance(raw, Mapping):
        raise TaskDecodeError(f"task record must be an object, got {type(raw).__name__}")

    raw_id = raw.get("id")
    if isinstance(raw_id, bool) or not isinstance(raw_id, (int, str)) or raw_id == "":
        raise TaskDecodeError(f"field 'id' must be a non-empty string or integer, got {raw_id!r}")

    title = _require_str(raw, "title")
    if not title.strip():
        raise TaskDecodeError("field 'title' must not be empty")

    description = raw.get("description")
    if description is None:
        description = ""
    elif not isinstance(description, str):
        raise TaskDecodeError("field 'description' must be a string")

    try:
        status = TaskStatus(raw.get("status"))
    except ValueError as e:
        raise TaskDecodeError(f"unknown status: {raw.get('status')!r}") from e

    try:
        priority = TaskPriority(raw.get("priority"))
    except ValueError as e:
        raise TaskDecodeError(f"unknown priority: {raw.get('priority')!r}") from e

    file_path = raw.get("file_path")
    if file_path is not None and not isinstance(file_path, str):
        raise TaskDecodeError("field 'file_path' must be a string or null")

    task = Task(
        id=str(raw_id),
        title=title,
        description=description,
        status=status,
        priority=priority,
        created_at=_parse_timestamp(raw.get("created_at")),
        file_path=file_path or None,
    )

    flag = raw.get("completed")
    if flag is not None and bool(flag) != task.completed:
        logger.warning(
            "Task id=%s has completed=%r but status=%s; using status.",
            task.id,
            flag,
            task.status,
        )
    return task


def tasks_from_api(raw: Any) -> list[Task]:
    if not isinstance(raw, list):
        raise TaskDecodeError(f"task collection must be a list, got {type(raw).__name__}")
    return [task_from_api(item) for item in raw]
