"""
Translator backends.

`Translator` is the capability the applier depends on. `ArgosTranslator` runs
the offline `argos-translate` executable once per string:

    argos-translate --from ko --to en "안녕하세요"

with ``ARGOS_DEVICE_TYPE=auto`` so the tool picks CPU or GPU by itself, and
takes the first line it prints as the translation.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Protocol

from .errors import (
    TranslatorExecutionError,
    TranslatorNotFoundError,
    TranslatorTimeoutError,
)
from .options import DEFAULT_ARGOS_PATH, TranslationConfig

logger = logging.getLogger(__name__)

DEFAULT_TRANSLATE_TIMEOUT = 60.0
DEVICE_TYPE_ENV = "ARGOS_DEVICE_TYPE"


class Translator(Protocol):
    async def translate(self, text: str, source_lang: str, target_lang: str) -> Optional[str]: ...


@dataclass(frozen=True)
class ArgosTranslator(Translator):
    argos_path: str = DEFAULT_ARGOS_PATH
    timeout: Optional[float] = DEFAULT_TRANSLATE_TIMEOUT
    device_type: str = "auto"
    extra_env: dict[str, str] = field(default_factory=dict)

    def build_command(self, text: str, source_lang: str, target_lang: str) -> list[str]:
        return [self.argos_path, "--from", source_lang, "--to", target_lang, text]

    def build_env(self) -> dict[str, str]:
        env = dict(os.environ)
        env.update(self.extra_env)
        env[DEVICE_TYPE_ENV] = self.device_type
        return env

    async def translate(self, text: str, source_lang: str, target_lang: str) -> Optional[str]:
        cmd = self.build_command(text, source_lang, target_lang)
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self.build_env(),
            )
        except FileNotFoundError as exc:
            raise TranslatorNotFoundError(f"Argos executable not found: {self.argos_path}") from exc
        except OSError as exc:
            raise TranslatorExecutionError(f"Failed to start {self.argos_path}: {exc}") from exc

        try:
            if self.timeout is None:
                return await self._read_translation(process)
            return await asyncio.wait_for(self._read_translation(process), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            await _terminate(process)
            raise TranslatorTimeoutError(
                f"{self.argos_path} did not answer within {self.timeout}s"
            ) from exc
        except asyncio.CancelledError:
            await _terminate(process)
            raise
        except OSError as exc:
            await _terminate(process)
            raise TranslatorExecutionError(f"I/O error talking to {self.argos_path}: {exc}") from exc

    async def _read_translation(self, process: asyncio.subprocess.Process) -> Optional[str]:
        # Read everything: a single line can exceed the stream reader limit.
        stdout, stderr = await process.communicate()

        if process.returncode:
            logger.debug(
                "%s exited with code %s: %s",
                self.argos_path,
                process.returncode,
                stderr.decode("utf-8", errors="replace").strip() if stderr else "",
            )

        if not stdout:
            return None
        first_line = stdout.split(b"\n", 1)[0]
        return first_line.decode("utf-8", errors="replace").rstrip("\r")


async def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    try:
        process.kill()
    except ProcessLookupError:
        return
    await process.wait()


def translator_for(config: TranslationConfig, *, timeout: Optional[float] = DEFAULT_TRANSLATE_TIMEOUT) -> ArgosTranslator:
    return ArgosTranslator(argos_path=config.argos_path, timeout=timeout)


__all__ = [
    "ArgosTranslator",
    "DEFAULT_TRANSLATE_TIMEOUT",
    "DEVICE_TYPE_ENV",
    "Translator",
    "translator_for",
]
