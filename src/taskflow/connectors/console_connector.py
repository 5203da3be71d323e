# src/taskflow/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("/exit", "/quit")


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleNotifier:
    """Notifier printing success/error notices to the console."""

    def __init__(self, *, stream=None) -> None:
        self._stream = stream

    def _write(self, text: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(f"[{_ts_local()}] {text}\n")
        stream.flush()

    def success(self, text: str) -> None:
        self._write(f"[OK] {text}")

    def error(self, text: str) -> None:
        self._write(f"[ERROR] {text}")


async def run_console_loop(
        state: AppState,
        *,
        read_line: Callable[[str], str] = input,
) -> None:
    """
    Interactive loop: read a line off the event loop, run the command, print the reply.

    Each command is awaited before the next line is read, so controller state is
    only touched from this coroutine.
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands, /list to see tasks, /exit to quit.\n")

    app_name = str(getattr(getattr(state, "settings", None), "app_name", "taskflow"))

    def emit(text: str) -> None:
        # Immediate user-visible feedback for slower operations.
        _print_ts(text)

    while True:
        try:
            line = (await asyncio.to_thread(read_line, f"{app_name}> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not line:
            continue

        if line.lower() in EXIT_COMMANDS:
            logger.info("Console exit command received.")
            break

        if not line.startswith("/"):
            _print_ts("Commands start with '/'. Use /help to list available commands.")
            continue

        try:
            reply = await command_registry.handle(state, line, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply:
            _print_ts(reply)

    logger.info("Console connector finished.")
