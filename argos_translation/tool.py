from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .plugin_data import PluginDataPaths
from .settings_store import JsonOptionsBackend
from .task import ModalTaskLauncher, ProgressCallback


@dataclass
class StandaloneTool:
    """Host tool used when the plugin runs outside a disassembler."""

    options: JsonOptionsBackend
    tasks: ModalTaskLauncher = field(default_factory=ModalTaskLauncher)

    @classmethod
    def from_data_paths(
        cls,
        paths: Optional[PluginDataPaths] = None,
        *,
        on_progress: Optional[ProgressCallback] = None,
    ) -> "StandaloneTool":
        resolved = paths or PluginDataPaths.from_plugin_id()
        return cls(
            options=JsonOptionsBackend(resolved.settings_file),
            tasks=ModalTaskLauncher(on_progress=on_progress),
        )


__all__ = ["StandaloneTool"]
