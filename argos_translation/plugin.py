"""
Argos String Translation Plugin

Offline string translation for a reverse-engineering host. The host hands the
plugin a program and a list of string locations; each string is passed
through the `argos-translate` executable and the result is attached to the
string as its translated value.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Protocol

from .applier import TRANSACTION_LABEL, BatchResult, TranslateOptions, TranslationApplier
from .errors import OptionsError
from .host import ProgramDocument, PluginTool, TaskMonitor
from .options import TranslationConfig, TranslationOptions
from .translator import DEFAULT_TRANSLATE_TIMEOUT, Translator, translator_for

logger = logging.getLogger(__name__)

SERVICE_NAME = "Argos String Translation"

TranslatorFactory = Callable[[TranslationConfig], Translator]


class PluginStatus(str, Enum):
    RELEASED = "released"
    STABLE = "stable"
    UNSTABLE = "unstable"


@dataclass(frozen=True)
class PluginInfo:
    status: PluginStatus
    package_name: str
    category: str
    short_description: str
    description: str
    services_provided: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "package_name": self.package_name,
            "category": self.category,
            "short_description": self.short_description,
            "description": self.description,
            "services_provided": list(self.services_provided),
        }


class StringTranslationService(Protocol):
    def get_translation_service_name(self) -> str:
        ...

    async def translate(
        self,
        document: ProgramDocument,
        locations: Iterable[Any],
        options: Optional[TranslateOptions] = None,
    ) -> BatchResult:
        ...


class BasePlugin(ABC):
    """
    Base class for host plugins.

    The host calls `configure()` with the tool the plugin is installed into,
    then `start()`; `stop()` when the plugin is removed.
    """

    info: PluginInfo

    def __init__(self) -> None:
        self._tool: Optional[PluginTool] = None
        self._plugin_id: Optional[str] = None
        self._is_running: bool = False

    @property
    def tool(self) -> PluginTool:
        if self._tool is None:
            raise RuntimeError(f"{type(self).__name__} is not configured with a tool")
        return self._tool

    @property
    def plugin_id(self) -> Optional[str]:
        return self._plugin_id

    @property
    def is_running(self) -> bool:
        return self._is_running

    def configure(self, tool: PluginTool, plugin_id: Optional[str] = None) -> None:
        self._tool = tool
        self._plugin_id = plugin_id or type(self).__name__
        logger.info(f"Plugin configured: {self._plugin_id}")

    async def start(self) -> None:
        if self._is_running:
            logger.warning("Plugin is already running")
            return

        logger.info(f"Starting plugin: {self._plugin_id}")
        await self.on_start()
        self._is_running = True
        logger.info(f"Plugin started: {self._plugin_id}")

    async def stop(self) -> None:
        if not self._is_running:
            logger.warning("Plugin is not running")
            return

        logger.info(f"Stopping plugin: {self._plugin_id}")
        await self.on_stop()
        self._is_running = False
        logger.info(f"Plugin stopped: {self._plugin_id}")

    @abstractmethod
    async def on_start(self) -> None:
        pass

    @abstractmethod
    async def on_stop(self) -> None:
        pass

    async def on_config_change(self, new_config: dict) -> None:
        """Called by the host when settings are changed in bulk."""


class ArgosStringTranslationPlugin(BasePlugin):
    info = PluginInfo(
        status=PluginStatus.RELEASED,
        package_name="Miscellaneous",
        category="Common",
        short_description="Argos Translation",
        description="Offline String Translation Plugin using Argos.",
        services_provided=("StringTranslationService",),
    )

    def __init__(
        self,
        tool: Optional[PluginTool] = None,
        *,
        options: Optional[TranslationOptions] = None,
        translator_factory: Optional[TranslatorFactory] = None,
        translate_timeout: Optional[float] = DEFAULT_TRANSLATE_TIMEOUT,
    ) -> None:
        super().__init__()
        self.options = options or TranslationOptions()
        self._translate_timeout = translate_timeout
        self._translator_factory = translator_factory or self._default_translator
        if tool is not None:
            self.configure(tool)

    def _default_translator(self, config: TranslationConfig) -> Translator:
        return translator_for(config, timeout=self._translate_timeout)

    def init(self) -> TranslationConfig:
        return self.options.initialize(self.tool.options)

    async def on_start(self) -> None:
        self.init()

    async def on_stop(self) -> None:
        self.options.dispose()

    async def on_config_change(self, new_config: dict) -> None:
        for name, value in new_config.items():
            try:
                self.options.set_option(name, value)
            except OptionsError as exc:
                logger.warning(f"Ignoring config change: {exc}")

    def create_translator(self, config: TranslationConfig) -> Translator:
        return self._translator_factory(config)

    def get_translation_service_name(self) -> str:
        return SERVICE_NAME

    async def translate(
        self,
        document: ProgramDocument,
        locations: Iterable[Any],
        options: Optional[TranslateOptions] = None,
    ) -> BatchResult:
        if not self.options.is_initialized:
            self.init()

        config = self.options.snapshot()
        if options is not None:
            # Languages always come from the configured options.
            logger.debug("Translate options ignored for language selection: %s", options)

        applier = TranslationApplier(self.create_translator(config))
        items = list(locations)

        async def work(monitor: TaskMonitor) -> BatchResult:
            return await applier.apply(document, items, config, monitor)

        result = await self.tool.tasks.launch_modal(TRANSACTION_LABEL, work)
        logger.info(
            "Translation batch %s (%s -> %s): %s",
            result.status.value,
            config.source_lang,
            config.target_lang,
            result.summary(),
        )
        return result


__all__ = [
    "ArgosStringTranslationPlugin",
    "BasePlugin",
    "PluginInfo",
    "PluginStatus",
    "SERVICE_NAME",
    "StringTranslationService",
    "TranslatorFactory",
]
