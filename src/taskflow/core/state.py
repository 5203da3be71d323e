# src/taskflow/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..tasks.task_filters import ALL, PriorityFilter, StatusFilter
from ..tasks.task_models import Attachment, Task, TaskForm

if TYPE_CHECKING:
    from .controller import TaskListController


@dataclass
class TaskListState:
    # Collection in backend order (append on create, replace in place on update).
    tasks: list[Task] = field(default_factory=list)

    # Filter selectors
    search_term: str = ""
    status_filter: StatusFilter = ALL
    priority_filter: PriorityFilter = ALL

    # Create/edit dialog
    form: TaskForm = field(default_factory=TaskForm)
    editing_task_id: str | None = None
    dialog_open: bool = False
    selected_file: Attachment | None = None

    def find_task(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def reset_form(self) -> None:
        self.form = TaskForm()
        self.selected_file = None
        self.editing_task_id = None


@dataclass
class AppState:
    # Store Settings on the state for easy access in commands/connectors.
    settings: Any
    controller: TaskListController
