# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskflow.core.controller import TaskListController
from taskflow.core.state import AppState
from taskflow.tasks.task_models import Task, TaskPriority, TaskStatus

from .fakes import FakeTodoBackend, RecordingNotifier, make_task


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and commands.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskflow-test",
        log_level="INFO",
        data_dir=tmp_path / "data",
        api_base_url="http://backend.test/api",
        connect_timeout=1.0,
        read_timeout=1.0,
        open_browser=False,
    )


@pytest.fixture()
def sample_tasks() -> list[Task]:
    return [
        make_task("1", title="Renew Passport", description="urgent", priority=TaskPriority.HIGH),
        make_task("2", title="Buy milk", description="2%", priority=TaskPriority.LOW),
        make_task(
            "3",
            title="Write report",
            description="Quarterly numbers",
            status=TaskStatus.IN_PROGRESS,
        ),
        make_task(
            "4",
            title="File taxes",
            status=TaskStatus.COMPLETED,
            priority=TaskPriority.HIGH,
            file_path="uploads/2025/taxes.pdf",
        ),
    ]


@pytest.fixture()
def backend(sample_tasks: list[Task]) -> FakeTodoBackend:
    return FakeTodoBackend(stored=list(sample_tasks))


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def controller(backend: FakeTodoBackend, notifier: RecordingNotifier) -> TaskListController:
    return TaskListController(backend, notifier)


@pytest.fixture()
def state(settings: SimpleNamespace, controller: TaskListController) -> AppState:
    """AppState wired with deterministic fakes."""
    return AppState(settings=settings, controller=controller)
