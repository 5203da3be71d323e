# src/taskflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the HTTP backend and the console notifier into the controller,
- closes the backend on shutdown.
"""

from __future__ import annotations

import logging

from ..api.client import HttpTodoBackend
from ..config import get_settings
from ..connectors.console_connector import ConsoleNotifier
from ..core.controller import TaskListController
from ..core.ports import Notifier, TodoBackend
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(
        *,
        settings=None,
        backend: TodoBackend | None = None,
        notifier: Notifier | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and collaborators injectable makes the app easier to test and
    avoids hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if backend is None:
        backend = HttpTodoBackend.from_settings(settings)
    if notifier is None:
        notifier = ConsoleNotifier()

    logger.info("Backend: %s", getattr(settings, "api_base_url", "?"))
    return AppState(settings=settings, controller=TaskListController(backend, notifier))


async def shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        await state.controller.backend.aclose()
    except Exception:
        logger.debug("Backend close failed.", exc_info=True)
