# src/taskflow/cli/commands.py

from __future__ import annotations

import inspect
import logging
import webbrowser
from collections.abc import Awaitable, Callable

from ..core.state import AppState
from ..tasks.task_filters import ALL, TaskStats
from ..tasks.task_models import Attachment, Task, TaskPriority, TaskStatus

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[
    [AppState, list[str], CommandEmitter | None],
    str | None | Awaitable[str | None],
]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Handlers may be plain functions or coroutines.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        result = handler(state, args, emit)
        if inspect.isawaitable(result):
            result = await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting ----


def format_task(task: Task, *, url: str | None = None) -> str:
    mark = "[x]" if task.completed else "[ ]"
    lines = [
        f"{mark} #{task.id} {task.title}",
        f"    {task.status_label} | {task.priority.value} priority | {task.created_at:%Y-%m-%d}",
    ]
    if task.description:
        lines.insert(1, f"    {task.description}")
    if task.attachment_name:
        lines.append(f"    attachment: {task.attachment_name}" + (f" ({url})" if url else ""))
    return "\n".join(lines)


def format_stats(stats: TaskStats) -> str:
    return (
        f"Total: {stats.total} | Completed: {stats.completed} | "
        f"In progress: {stats.in_progress} | Pending: {stats.pending}"
    )


def _filters_line(state: AppState) -> str:
    s = state.controller.state
    search = s.search_term or "-"
    return f"Search: {search} | Status: {s.status_filter} | Priority: {s.priority_filter}"


# ---- view commands ----


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    ctl = state.controller
    lines = [format_stats(ctl.stats()), _filters_line(state), ""]
    hint = ctl.empty_state_message()
    if hint:
        lines.append(f"No tasks found. {hint}.")
        return "\n".join(lines)
    for task in ctl.filtered_tasks():
        lines.append(format_task(task, url=ctl.attachment_url(task)))
    return "\n".join(lines)


def cmd_stats(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return format_stats(state.controller.stats())


async def cmd_reload(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    result = await state.controller.load()
    if not result.ok:
        return "Could not load tasks (see log)."
    return f"Loaded {len(result.value or [])} tasks."


# ---- filters ----


def cmd_search(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /search          -> clear the search term
    /search <text>   -> match title or description (case-insensitive)
    """
    state.controller.set_search_term(" ".join(args))
    return _filters_line(state)


def cmd_status_filter(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    choices = " | ".join([ALL, *(s.value for s in TaskStatus)])
    if not args:
        return f"Usage: /status {choices}"
    try:
        state.controller.set_status_filter(args[0])
    except ValueError as e:
        return f"{e}. Usage: /status {choices}"
    return _filters_line(state)


def cmd_priority_filter(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    choices = " | ".join([ALL, *(p.value for p in TaskPriority)])
    if not args:
        return f"Usage: /priority {choices}"
    try:
        state.controller.set_priority_filter(args[0])
    except ValueError as e:
        return f"{e}. Usage: /priority {choices}"
    return _filters_line(state)


# ---- form dialog ----


def _format_form(state: AppState) -> str:
    s = state.controller.state
    if not s.dialog_open:
        return "No open form. Use /new or /edit <id>."
    header = f"Edit task #{s.editing_task_id}" if s.editing_task_id else "New task"
    attached = s.selected_file.filename if s.selected_file else "-"
    return (
        f"{header}:\n"
        f"  title: {s.form.title or '-'}\n"
        f"  description: {s.form.description or '-'}\n"
        f"  status: {s.form.status.value}\n"
        f"  priority: {s.form.priority.value}\n"
        f"  file: {attached}\n"
        "Use /set <field> <value>, /attach <path>, /save or /cancel."
    )


def cmd_new(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    state.controller.open_create_dialog()
    if args:
        state.controller.state.form.title = " ".join(args)
    return _format_form(state)


def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /edit <id>"
    result = state.controller.begin_edit(args[0])
    if not result.ok:
        return result.reason
    return _format_form(state)


def cmd_form(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return _format_form(state)


def cmd_set(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /set title <text>
    /set description <text>
    /set status pending|in_progress|completed
    /set priority low|medium|high
    """
    s = state.controller.state
    if not s.dialog_open:
        return "No open form. Use /new or /edit <id>."
    if not args:
        return "Usage: /set title|description|status|priority <value>"

    field_name = args[0].lower()
    value = " ".join(args[1:])

    if field_name == "title":
        s.form.title = value
    elif field_name in ("description", "desc"):
        s.form.description = value
    elif field_name == "status":
        try:
            s.form.status = TaskStatus(value.lower())
        except ValueError:
            return f"Unknown status: {value!r}."
    elif field_name == "priority":
        try:
            s.form.priority = TaskPriority(value.lower())
        except ValueError:
            return f"Unknown priority: {value!r}."
    else:
        return f"Unknown field: {field_name!r}."
    return _format_form(state)


def cmd_attach(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    if not state.controller.state.dialog_open:
        return "No open form. Use /new or /edit <id>."
    if not args:
        return "Usage: /attach <path-to-pdf>"
    path = " ".join(args)
    try:
        attachment = Attachment.from_path(path)
    except OSError as e:
        logger.info("Could not read attachment %s: %s", path, e)
        return f"Cannot read file: {path}"
    result = state.controller.select_attachment(attachment)
    if not result.ok:
        # The controller already showed the rejection notice.
        return None
    return f"Selected: {attachment.filename}"


async def cmd_save(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    if not state.controller.state.dialog_open:
        return "No open form. Use /new or /edit <id>."
    result = await state.controller.submit()
    if not result.ok:
        return None
    return format_task(result.value) if result.value else "Saved."


def cmd_cancel(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    state.controller.close_dialog()
    return "Form closed."


# ---- task actions ----


async def cmd_toggle(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    if not args:
        return "Usage: /toggle <id>"
    result = await state.controller.toggle_status(args[0])
    if result.ok and result.value is not None:
        return format_task(result.value)
    # Unknown ids are a silent no-op; backend failures already produced a notice.
    return None


async def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    if not args:
        return "Usage: /delete <id>"
    await state.controller.delete_task(args[0])
    return None


def cmd_open(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /open <id>"
    ctl = state.controller
    task = ctl.state.find_task(args[0])
    if task is None:
        return f"No task with id {args[0]}."
    url = ctl.attachment_url(task)
    if url is None:
        return f"Task #{task.id} has no attachment."

    if getattr(state.settings, "open_browser", True):
        if emit:
            emit(f"Opening {task.attachment_name}...")
        if webbrowser.open_new_tab(url):
            return f"Opened {url}"
        logger.info("No browser available for %s", url)
    return url


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show statistics and the filtered task list.", aliases=["ls"])
registry.register("stats", cmd_stats, help_text="Show task counts by status.")
registry.register("reload", cmd_reload, help_text="Fetch the task list from the backend again.")
registry.register("search", cmd_search, help_text="Filter by text: /search <text> (empty clears).")
registry.register(
    "status", cmd_status_filter, help_text="Filter by status: /status all|pending|in_progress|completed."
)
registry.register(
    "priority", cmd_priority_filter, help_text="Filter by priority: /priority all|low|medium|high."
)
registry.register("new", cmd_new, help_text="Open the form for a new task: /new [title].", aliases=["add"])
registry.register("edit", cmd_edit, help_text="Open the form for an existing task: /edit <id>.")
registry.register("form", cmd_form, help_text="Show the open form.")
registry.register("set", cmd_set, help_text="Set a form field: /set title|description|status|priority <value>.")
registry.register("attach", cmd_attach, help_text="Attach a PDF to the open form: /attach <path>.")
registry.register("save", cmd_save, help_text="Submit the open form.")
registry.register("cancel", cmd_cancel, help_text="Close the open form without saving.")
registry.register("toggle", cmd_toggle, help_text="Mark a task completed/pending: /toggle <id>.", aliases=["done"])
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("open", cmd_open, help_text="Open a task's attachment: /open <id>.")
