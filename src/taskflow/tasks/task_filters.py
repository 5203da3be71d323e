# src/taskflow/tasks/task_filters.py

"""
Pure derivations over the task collection.

Nothing here touches the backend or the controller state; callers pass the
collection and selector values explicitly.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .task_models import Task, TaskPriority, TaskStatus

ALL = "all"

StatusFilter = TaskStatus | str
PriorityFilter = TaskPriority | str


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    in_progress: int
    pending: int


def parse_status_filter(raw: str) -> StatusFilter:
    value = (raw or "").strip().lower()
    if value == ALL:
        return ALL
    try:
        return TaskStatus(value)
    except ValueError:
        raise ValueError(f"Unknown status filter: {raw!r}") from None


def parse_priority_filter(raw: str) -> PriorityFilter:
    value = (raw or "").strip().lower()
    if value == ALL:
        return ALL
    try:
        return TaskPriority(value)
    except ValueError:
        raise ValueError(f"Unknown priority filter: {raw!r}") from None


def matches(
    task: Task,
    search_term: str = "",
    status_filter: StatusFilter = ALL,
    priority_filter: PriorityFilter = ALL,
) -> bool:
    needle = search_term.lower()
    matches_search = needle in task.title.lower() or needle in task.description.lower()
    matches_status = status_filter == ALL or task.status == status_filter
    matches_priority = priority_filter == ALL or task.priority == priority_filter
    return matches_search and matches_status and matches_priority


def filter_tasks(
    tasks: Iterable[Task],
    search_term: str = "",
    status_filter: StatusFilter = ALL,
    priority_filter: PriorityFilter = ALL,
) -> list[Task]:
    """Order-preserving subset of `tasks` matching all three selectors."""
    return [t for t in tasks if matches(t, search_term, status_filter, priority_filter)]


def compute_stats(tasks: Sequence[Task]) -> TaskStats:
    return TaskStats(
        total=len(tasks),
        completed=sum(1 for t in tasks if t.status == TaskStatus.COMPLETED),
        in_progress=sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS),
        pending=sum(1 for t in tasks if t.status == TaskStatus.PENDING),
    )
