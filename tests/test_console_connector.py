# tests/test_console_connector.py

from __future__ import annotations

import io

import pytest

from taskflow.cli.bootstrap import create_initial_state, shutdown
from taskflow.connectors.console_connector import ConsoleNotifier, run_console_loop

from .fakes import FakeTodoBackend, RecordingNotifier


def _scripted(*lines: str):
    queue = list(lines)

    def read_line(prompt: str) -> str:
        if not queue:
            raise EOFError
        return queue.pop(0)

    return read_line


def test_console_notifier_prefixes_notices() -> None:
    buf = io.StringIO()
    n = ConsoleNotifier(stream=buf)
    n.success("Task created successfully!")
    n.error("Failed to save task. Please try again.")

    out = buf.getvalue().splitlines()
    assert out[0].endswith("[OK] Task created successfully!")
    assert out[1].endswith("[ERROR] Failed to save task. Please try again.")


@pytest.mark.asyncio
async def test_console_loop_runs_commands_until_exit(state, capsys) -> None:
    await state.controller.load()

    await run_console_loop(state, read_line=_scripted("/stats", "hello", "", "/exit", "/stats"))

    out = capsys.readouterr().out
    assert "Total: 4" in out
    assert "Commands start with '/'" in out
    assert out.count("Total: 4") == 1


@pytest.mark.asyncio
async def test_console_loop_stops_on_eof(state) -> None:
    await run_console_loop(state, read_line=_scripted("/new Walk dog", "/save"))
    assert [t.title for t in state.controller.tasks][-1] == "Walk dog"


@pytest.mark.asyncio
async def test_bootstrap_wires_injected_collaborators(settings) -> None:
    backend = FakeTodoBackend()
    notifier = RecordingNotifier()

    app = create_initial_state(settings=settings, backend=backend, notifier=notifier)

    assert app.controller.backend is backend
    assert app.controller.notifier is notifier
    assert settings.data_dir.is_dir()

    await shutdown(app)
    assert backend.closed
