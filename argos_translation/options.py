from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Any, Optional

from .errors import OptionsError
from .host import OptionsBackend, OptionsGroup

logger = logging.getLogger(__name__)

OPTIONS_TITLE = "Argos Translation"
SOURCE_LANG_OPTION = "Source Language"
TARGET_LANG_OPTION = "Target Language"
ARGOS_PATH_OPTION = "Argos Path"

DEFAULT_SOURCE_LANG = "ko"
DEFAULT_TARGET_LANG = "en"
DEFAULT_ARGOS_PATH = "argos-translate"


@dataclass(frozen=True)
class TranslationConfig:
    source_lang: str = DEFAULT_SOURCE_LANG
    target_lang: str = DEFAULT_TARGET_LANG
    argos_path: str = DEFAULT_ARGOS_PATH

    def to_dict(self) -> dict[str, str]:
        return {
            SOURCE_LANG_OPTION: self.source_lang,
            TARGET_LANG_OPTION: self.target_lang,
            ARGOS_PATH_OPTION: self.argos_path,
        }


@dataclass(frozen=True)
class OptionSpec:
    name: str
    field: str
    default: str
    help_text: str


OPTION_SPECS: tuple[OptionSpec, ...] = (
    OptionSpec(
        SOURCE_LANG_OPTION,
        "source_lang",
        DEFAULT_SOURCE_LANG,
        "Source language (e.g. ko for Korean)",
    ),
    OptionSpec(
        TARGET_LANG_OPTION,
        "target_lang",
        DEFAULT_TARGET_LANG,
        "Target language (e.g. en for English)",
    ),
    OptionSpec(
        ARGOS_PATH_OPTION,
        "argos_path",
        DEFAULT_ARGOS_PATH,
        "Path to the Argos Translate executable",
    ),
)

_SPECS_BY_NAME = {spec.name: spec for spec in OPTION_SPECS}


class TranslationOptions:
    """
    Owned store for the translation settings.

    Every change swaps in a new frozen `TranslationConfig`, so a batch that took
    a snapshot keeps seeing the same values until it finishes even if the host
    fires change notifications from another thread.
    """

    def __init__(self, config: Optional[TranslationConfig] = None) -> None:
        self._config = config or TranslationConfig()
        self._lock = threading.Lock()
        self._group: Optional[OptionsGroup] = None

    @property
    def is_initialized(self) -> bool:
        return self._group is not None

    def snapshot(self) -> TranslationConfig:
        with self._lock:
            return self._config

    def initialize(self, options_backend: OptionsBackend) -> TranslationConfig:
        """
        Register the options with the host, load their current values and
        subscribe to later changes.
        """
        group = options_backend.get_options(OPTIONS_TITLE)
        for spec in OPTION_SPECS:
            if not group.is_registered(spec.name):
                group.register_option(spec.name, spec.default, spec.help_text)

        values: dict[str, Any] = {}
        for spec in OPTION_SPECS:
            value = group.get_string(spec.name, spec.default)
            values[spec.field] = spec.default if value is None else value

        with self._lock:
            self._config = TranslationConfig(**values)
            config = self._config

        if self._group is not None:
            self._group.remove_change_listener(self.on_option_changed)
        group.add_change_listener(self.on_option_changed)
        self._group = group
        logger.info(
            "Translation options loaded: %s -> %s using %s",
            config.source_lang,
            config.target_lang,
            config.argos_path,
        )
        return config

    def on_option_changed(self, name: str, old_value: Any, new_value: Any) -> None:
        spec = _SPECS_BY_NAME.get(name)
        if spec is None:
            return
        value = "" if new_value is None else str(new_value)
        with self._lock:
            self._config = replace(self._config, **{spec.field: value})
        logger.debug("Option %r changed from %r to %r", name, old_value, value)

    def set_option(self, name: str, value: str) -> None:
        if name not in _SPECS_BY_NAME:
            raise OptionsError(f"Unknown option: {name}", option_name=name)
        if self._group is None:
            self.on_option_changed(name, None, value)
            return
        # The backend notifies us through on_option_changed.
        self._group.set_string(name, value)

    def dispose(self) -> None:
        if self._group is not None:
            self._group.remove_change_listener(self.on_option_changed)
            self._group = None


__all__ = [
    "ARGOS_PATH_OPTION",
    "DEFAULT_ARGOS_PATH",
    "DEFAULT_SOURCE_LANG",
    "DEFAULT_TARGET_LANG",
    "OPTIONS_TITLE",
    "OPTION_SPECS",
    "OptionSpec",
    "SOURCE_LANG_OPTION",
    "TARGET_LANG_OPTION",
    "TranslationConfig",
    "TranslationOptions",
]
