from __future__ import annotations

import os
import platform
from dataclasses import dataclass
from pathlib import Path

DEFAULT_PLUGIN_ID = "argos-string-translation"


def _default_data_root() -> Path:
    env_dir = os.getenv("ARGOS_TRANSLATION_DATA_DIR", "").strip()
    if env_dir:
        return Path(env_dir).expanduser()

    system = platform.system()
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "ArgosTranslation"
    if system == "Windows":
        appdata = os.getenv("APPDATA")
        if appdata:
            return Path(appdata) / "ArgosTranslation"
        return Path.home() / "AppData" / "Roaming" / "ArgosTranslation"
    return Path.home() / ".local" / "share" / "argos-translation"


@dataclass(frozen=True)
class PluginDataPaths:
    plugin_id: str
    data_root: Path

    @classmethod
    def from_plugin_id(cls, plugin_id: str | None = None) -> "PluginDataPaths":
        resolved = plugin_id or os.getenv("ARGOS_TRANSLATION_PLUGIN_ID") or DEFAULT_PLUGIN_ID
        return cls(plugin_id=resolved, data_root=_default_data_root())

    @property
    def plugin_root(self) -> Path:
        return self.data_root / "plugins" / self.plugin_id

    @property
    def settings_file(self) -> Path:
        return self.plugin_root / "settings.json"

    @property
    def log_dir(self) -> Path:
        return self.plugin_root / "logs"

    def ensure_dirs(self) -> "PluginDataPaths":
        for directory in (self.plugin_root, self.log_dir):
            directory.mkdir(parents=True, exist_ok=True)
        return self


__all__ = ["PluginDataPaths", "DEFAULT_PLUGIN_ID"]
