# src/taskflow/core/controller.py

"""
Task list controller.

Owns TaskListState and mediates every mutation through the backend:
- local state changes only after the backend acknowledged and the response decoded,
- failures leave state untouched and surface a generic notice,
- no retries, no optimistic updates, no request deduplication.

Operations return OpResult instead of raising; the console maps results to output.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace

from ..api.client import TodoApiError, TodoDecodeError
from ..tasks.task_filters import (
    TaskStats,
    compute_stats,
    filter_tasks,
    parse_priority_filter,
    parse_status_filter,
)
from ..tasks.task_models import Attachment, Task, TaskForm, TaskStatus
from .ports import Notifier, TodoBackend
from .results import ErrorKind, OpResult
from .state import TaskListState

logger = logging.getLogger(__name__)

MSG_CREATED = "Task created successfully!"
MSG_UPDATED = "Task updated successfully!"
MSG_DELETED = "Task deleted successfully!"
MSG_SAVE_FAILED = "Failed to save task. Please try again."
MSG_DELETE_FAILED = "Failed to delete task. Please try again."
MSG_TOGGLE_FAILED = "Failed to update task status. Please try again."
MSG_PDF_ONLY = "Please select a PDF file only."

EMPTY_COLLECTION_HINT = "Create your first task to get started with TaskFlow Pro"
EMPTY_FILTER_HINT = "Try adjusting your search or filter criteria"


def _error_kind(exc: TodoApiError) -> ErrorKind:
    return ErrorKind.DECODE if isinstance(exc, TodoDecodeError) else ErrorKind.TRANSPORT


class TaskListController:
    def __init__(
            self,
            backend: TodoBackend,
            notifier: Notifier,
            state: TaskListState | None = None,
    ) -> None:
        self.backend = backend
        self.notifier = notifier
        self.state = state if state is not None else TaskListState()

    # ---- derived views ----

    @property
    def tasks(self) -> Sequence[Task]:
        return tuple(self.state.tasks)

    def filtered_tasks(self) -> list[Task]:
        s = self.state
        return filter_tasks(s.tasks, s.search_term, s.status_filter, s.priority_filter)

    def stats(self) -> TaskStats:
        return compute_stats(self.state.tasks)

    def empty_state_message(self) -> str | None:
        """Hint for an empty list view, or None when something is visible."""
        if not self.state.tasks:
            return EMPTY_COLLECTION_HINT
        if not self.filtered_tasks():
            return EMPTY_FILTER_HINT
        return None

    def attachment_url(self, task: Task) -> str | None:
        if not task.file_path:
            return None
        return self.backend.attachment_url(task.file_path)

    # ---- filter selectors ----

    def set_search_term(self, term: str) -> None:
        self.state.search_term = term or ""

    def set_status_filter(self, raw: str) -> None:
        self.state.status_filter = parse_status_filter(raw)

    def set_priority_filter(self, raw: str) -> None:
        self.state.priority_filter = parse_priority_filter(raw)

    # ---- dialog / form ----

    def open_create_dialog(self) -> None:
        self.state.reset_form()
        self.state.dialog_open = True

    def begin_edit(self, task_id: str) -> OpResult[Task]:
        task = self.state.find_task(task_id)
        if task is None:
            return OpResult.failure(ErrorKind.NOT_FOUND, f"No task with id {task_id}.")
        self.state.form = TaskForm.from_task(task)
        self.state.selected_file = None
        self.state.editing_task_id = task.id
        self.state.dialog_open = True
        return OpResult.success(task)

    def close_dialog(self) -> None:
        self.state.dialog_open = False
        self.state.reset_form()

    def select_attachment(self, attachment: Attachment) -> OpResult[Attachment]:
        if not attachment.is_pdf:
            logger.info(
                "Rejected attachment %s (content_type=%s)",
                attachment.filename,
                attachment.content_type,
            )
            self.notifier.error(MSG_PDF_ONLY)
            return OpResult.failure(ErrorKind.REJECTED, MSG_PDF_ONLY)
        self.state.selected_file = attachment
        return OpResult.success(attachment)

    # ---- backend operations ----

    async def load(self) -> OpResult[list[Task]]:
        """
        Fetch the full collection.

        A failed load is logged only: the collection keeps its previous contents
        (empty before the first successful load) and no notice is shown.
        """
        try:
            tasks = await self.backend.list_tasks()
        except TodoApiError as e:
            logger.error("Error fetching tasks: %s", e)
            return OpResult.failure(_error_kind(e), str(e))

        self.state.tasks = list(tasks)
        logger.info("Loaded %d tasks.", len(tasks))
        return OpResult.success(list(tasks))

    async def submit(self) -> OpResult[Task]:
        """Submit the dialog form: update when editing, create otherwise."""
        s = self.state
        if s.editing_task_id is not None:
            return await self.update_task(s.editing_task_id, s.form, s.selected_file)
        return await self.create_task(s.form, s.selected_file)

    async def create_task(
            self,
            form: TaskForm,
            attachment: Attachment | None = None,
    ) -> OpResult[Task]:
        problem = form.validate()
        if problem:
            self.notifier.error(problem)
            return OpResult.failure(ErrorKind.VALIDATION, problem)

        try:
            created = await self.backend.create_task(form, attachment)
        except TodoApiError as e:
            logger.error("Error saving task: %s", e)
            self.notifier.error(MSG_SAVE_FAILED)
            return OpResult.failure(_error_kind(e), str(e))

        self.state.tasks.append(created)
        self.close_dialog()
        logger.info("Created task id=%s", created.id)
        self.notifier.success(MSG_CREATED)
        return OpResult.success(created)

    async def update_task(
            self,
            task_id: str,
            form: TaskForm,
            attachment: Attachment | None = None,
    ) -> OpResult[Task]:
        problem = form.validate()
        if problem:
            self.notifier.error(problem)
            return OpResult.failure(ErrorKind.VALIDATION, problem)

        try:
            updated = await self.backend.update_task(task_id, form, attachment)
        except TodoApiError as e:
            logger.error("Error saving task id=%s: %s", task_id, e)
            self.notifier.error(MSG_SAVE_FAILED)
            return OpResult.failure(_error_kind(e), str(e))

        self._replace(task_id, updated)
        self.close_dialog()
        logger.info("Updated task id=%s", task_id)
        self.notifier.success(MSG_UPDATED)
        return OpResult.success(updated)

    async def delete_task(self, task_id: str) -> OpResult[None]:
        try:
            await self.backend.delete_task(task_id)
        except TodoApiError as e:
            logger.error("Error deleting task id=%s: %s", task_id, e)
            self.notifier.error(MSG_DELETE_FAILED)
            return OpResult.failure(_error_kind(e), str(e))

        self.state.tasks = [t for t in self.state.tasks if t.id != task_id]
        logger.info("Deleted task id=%s", task_id)
        self.notifier.success(MSG_DELETED)
        return OpResult.success(None)

    async def toggle_status(self, task_id: str) -> OpResult[Task]:
        """
        Flip completed <-> pending. in_progress is never a target: it flips to completed.

        Unknown ids are a silent no-op (no notice).
        """
        task = self.state.find_task(task_id)
        if task is None:
            logger.debug("toggle_status: no local task id=%s", task_id)
            return OpResult.failure(ErrorKind.NOT_FOUND, f"No task with id {task_id}.")

        new_status = TaskStatus.PENDING if task.status == TaskStatus.COMPLETED else TaskStatus.COMPLETED
        try:
            updated = await self.backend.replace_task(task_id, replace(task, status=new_status))
        except TodoApiError as e:
            logger.error("Error updating task status id=%s: %s", task_id, e)
            self.notifier.error(MSG_TOGGLE_FAILED)
            return OpResult.failure(_error_kind(e), str(e))

        self._replace(task_id, updated)
        self.notifier.success(f"Task marked as {new_status.value}!")
        return OpResult.success(updated)

    # ---- internals ----

    def _replace(self, task_id: str, updated: Task) -> None:
        self.state.tasks = [updated if t.id == task_id else t for t in self.state.tasks]
