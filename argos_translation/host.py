"""
Host interfaces consumed by the plugin.

The host owns the program document, its transactions, the options UI and the
task/progress dialogs. The plugin only talks to it through these protocols;
`argos_translation.document`, `settings_store` and `task` provide standalone
implementations.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional, Protocol, TypeVar

T = TypeVar("T")

OptionsChangeListener = Callable[[str, Any, Any], None]


class StringDataUnit(Protocol):
    @property
    def string_value(self) -> Optional[str]:
        ...

    def set_translated_value(self, value: Optional[str]) -> None:
        ...

    def set_show_translated(self, show: bool) -> None:
        ...


class ProgramDocument(Protocol):
    def start_transaction(self, label: str) -> int:
        ...

    def end_transaction(self, transaction_id: int, commit: bool) -> None:
        ...

    def get_data_at(self, location: Any) -> Optional[StringDataUnit]:
        ...


class TaskMonitor(Protocol):
    @property
    def is_cancelled(self) -> bool:
        ...

    def set_message(self, message: str) -> None:
        ...

    def set_progress(self, progress: float, message: str = "") -> None:
        ...


TaskWork = Callable[[TaskMonitor], Awaitable[T]]


class TaskLauncher(Protocol):
    async def launch_modal(self, title: str, work: TaskWork[T]) -> T:
        ...


class OptionsGroup(Protocol):
    def register_option(self, name: str, default: str, help_text: str = "") -> None:
        ...

    def is_registered(self, name: str) -> bool:
        ...

    def get_string(self, name: str, default: Optional[str] = None) -> Optional[str]:
        ...

    def set_string(self, name: str, value: str) -> None:
        ...

    def add_change_listener(self, listener: OptionsChangeListener) -> None:
        ...

    def remove_change_listener(self, listener: OptionsChangeListener) -> None:
        ...


class OptionsBackend(Protocol):
    def get_options(self, category: str) -> OptionsGroup:
        ...


class PluginTool(Protocol):
    """The host tool a plugin is installed into."""

    options: OptionsBackend
    tasks: TaskLauncher


__all__ = [
    "OptionsBackend",
    "OptionsChangeListener",
    "OptionsGroup",
    "PluginTool",
    "ProgramDocument",
    "StringDataUnit",
    "TaskLauncher",
    "TaskMonitor",
    "TaskWork",
]
