"""
Argos String Translation

Offline string translation plugin for reverse-engineering hosts, backed by
the argos-translate executable.
"""

from .applier import (
    BatchResult,
    BatchStatus,
    ItemOutcome,
    ItemStatus,
    TranslateOptions,
    TranslationApplier,
)
from .document import StringData, StringDocument
from .errors import (
    ArgosPluginError,
    OptionsError,
    TransactionError,
    TranslatorCancelledError,
    TranslatorError,
    TranslatorExecutionError,
    TranslatorNotFoundError,
    TranslatorTimeoutError,
)
from .logging import setup_plugin_logging
from .options import TranslationConfig, TranslationOptions
from .plugin import (
    SERVICE_NAME,
    ArgosStringTranslationPlugin,
    BasePlugin,
    PluginInfo,
    StringTranslationService,
)
from .plugin_data import PluginDataPaths
from .settings_store import JsonOptionsBackend
from .task import ModalTaskLauncher, TaskSnapshot
from .tool import StandaloneTool
from .translator import ArgosTranslator, Translator

__version__ = "1.0.0"
__all__ = [
    # Plugin
    "ArgosStringTranslationPlugin",
    "BasePlugin",
    "PluginInfo",
    "SERVICE_NAME",
    "StringTranslationService",
    # Batch translation
    "TranslationApplier",
    "TranslateOptions",
    "BatchResult",
    "BatchStatus",
    "ItemOutcome",
    "ItemStatus",
    # Translators
    "Translator",
    "ArgosTranslator",
    # Configuration
    "TranslationConfig",
    "TranslationOptions",
    "JsonOptionsBackend",
    "PluginDataPaths",
    # Standalone host
    "StandaloneTool",
    "StringDocument",
    "StringData",
    "ModalTaskLauncher",
    "TaskSnapshot",
    # Exceptions
    "ArgosPluginError",
    "OptionsError",
    "TransactionError",
    "TranslatorError",
    "TranslatorNotFoundError",
    "TranslatorTimeoutError",
    "TranslatorCancelledError",
    "TranslatorExecutionError",
    "setup_plugin_logging",
]

# The HTTP surface needs FastAPI and is imported separately
# from argos_translation.api import create_translation_router, create_app
