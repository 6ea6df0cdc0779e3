from __future__ import annotations

import asyncio


class ArgosPluginError(Exception):
    pass


class TransactionError(ArgosPluginError):
    pass


class OptionsError(ArgosPluginError):
    def __init__(self, message: str, option_name: str | None = None):
        super().__init__(message)
        self.option_name = option_name


class TranslatorError(ArgosPluginError):
    """Base error for translator backend failures."""


class TranslatorNotFoundError(TranslatorError):
    """Raised when the translator executable cannot be started."""


class TranslatorTimeoutError(TranslatorError):
    """Raised when a translation call exceeds its timeout."""


class TranslatorCancelledError(TranslatorError):
    """Raised when a translation call or batch has been cancelled."""


class TranslatorExecutionError(TranslatorError):
    """Raised when the translator process fails while running."""



def map_translator_error(error: BaseException) -> TranslatorError:
    """Map arbitrary backend exceptions to the normalized TranslatorError hierarchy."""
    if isinstance(error, TranslatorError):
        return error

    if isinstance(error, FileNotFoundError):
        return TranslatorNotFoundError(str(error))

    if isinstance(error, (asyncio.TimeoutError, TimeoutError)):
        return TranslatorTimeoutError(str(error) or "translation timed out")

    if isinstance(error, asyncio.CancelledError):
        return TranslatorCancelledError(str(error) or "translation cancelled")

    message = str(error)
    if "timeout" in message.lower():
        return TranslatorTimeoutError(message)
    return TranslatorExecutionError(message or error.__class__.__name__)


__all__ = [
    "ArgosPluginError",
    "TransactionError",
    "OptionsError",
    "TranslatorError",
    "TranslatorNotFoundError",
    "TranslatorTimeoutError",
    "TranslatorCancelledError",
    "TranslatorExecutionError",
    "map_translator_error",
]
