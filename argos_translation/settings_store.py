from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .host import OptionsChangeListener

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisteredOption:
    name: str
    default: str
    help_text: str = ""


class JsonOptionsGroup:
    """One options category backed by a `JsonOptionsBackend`."""

    def __init__(self, backend: "JsonOptionsBackend", category: str) -> None:
        self._backend = backend
        self.category = category
        self._registered: dict[str, RegisteredOption] = {}
        self._listeners: list[OptionsChangeListener] = []

    def register_option(self, name: str, default: str, help_text: str = "") -> None:
        self._registered[name] = RegisteredOption(name=name, default=default, help_text=help_text)

    def is_registered(self, name: str) -> bool:
        return name in self._registered

    def registered_options(self) -> list[RegisteredOption]:
        return list(self._registered.values())

    def get_string(self, name: str, default: Optional[str] = None) -> Optional[str]:
        values = self._backend.load().get(self.category, {})
        if name in values:
            return values[name]
        registered = self._registered.get(name)
        if registered is not None:
            return registered.default
        return default

    def set_string(self, name: str, value: str) -> None:
        old_value = self.get_string(name)
        self._backend.update(self.category, name, str(value))
        if old_value != value:
            self._notify(name, old_value, value)

    def add_change_listener(self, listener: OptionsChangeListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_change_listener(self, listener: OptionsChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, name: str, old_value: Any, new_value: Any) -> None:
        for listener in list(self._listeners):
            try:
                listener(name, old_value, new_value)
            except Exception:
                logger.warning("options listener failed for %s/%s", self.category, name, exc_info=True)


class JsonOptionsBackend:
    """
    Persists option values as `{category: {name: value}}` in a JSON file.

    Only explicitly set values are written; registered defaults live in memory.
    """

    def __init__(self, file_path: Path) -> None:
        self._file_path = Path(file_path)
        self._groups: dict[str, JsonOptionsGroup] = {}
        self._lock = threading.Lock()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def get_options(self, category: str) -> JsonOptionsGroup:
        group = self._groups.get(category)
        if group is None:
            group = JsonOptionsGroup(self, category)
            self._groups[category] = group
        return group

    def load(self) -> dict[str, dict[str, str]]:
        if not self._file_path.exists():
            return {}
        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable settings file %s", self._file_path, exc_info=True)
            return {}
        if not isinstance(data, dict):
            return {}
        return {
            str(category): {str(k): str(v) for k, v in values.items()}
            for category, values in data.items()
            if isinstance(values, dict)
        }

    def save(self, data: dict[str, dict[str, str]]) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_path.write_text(
            json.dumps(data, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )

    def update(self, category: str, name: str, value: str) -> None:
        with self._lock:
            data = self.load()
            data.setdefault(category, {})[name] = value
            self.save(data)


__all__ = ["JsonOptionsBackend", "JsonOptionsGroup", "RegisteredOption"]
