"""
Batch translation of string locations.

One batch runs inside a single document transaction. Items are handled
strictly in order, one translator call at a time. The first translator
failure stops the batch; whatever was annotated before it stays, and the
transaction is committed either way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional

from .errors import map_translator_error
from .host import ProgramDocument, TaskMonitor
from .options import TranslationConfig
from .translator import Translator

logger = logging.getLogger(__name__)

TRANSACTION_LABEL = "Translate strings"


class ItemStatus(str, Enum):
    TRANSLATED = "translated"
    EMPTY = "empty"
    SKIPPED = "skipped"
    FAILED = "failed"
    NOT_ATTEMPTED = "not_attempted"


class BatchStatus(str, Enum):
    COMPLETED = "completed"
    PARTIAL = "partial"
    ABORTED = "aborted"
    CANCELLED = "cancelled"


@dataclass
class TranslateOptions:
    """
    Options a caller passes along with a translation request.

    Language selection does not come from here: batches always use the
    configured source and target languages.
    """

    service_name: Optional[str] = None
    auto_translate: bool = False


@dataclass
class ItemOutcome:
    index: int
    location: Any
    status: ItemStatus = ItemStatus.NOT_ATTEMPTED
    original: Optional[str] = None
    translated: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "location": str(self.location),
            "status": self.status.value,
            "original": self.original,
            "translated": self.translated,
            "error": self.error,
        }


@dataclass
class BatchResult:
    config: TranslationConfig
    outcomes: list[ItemOutcome] = field(default_factory=list)
    committed: bool = False
    cancelled: bool = False
    error: Optional[str] = None

    @property
    def status(self) -> BatchStatus:
        if self.cancelled:
            return BatchStatus.CANCELLED
        if self.error is None:
            return BatchStatus.COMPLETED
        if self.count(ItemStatus.TRANSLATED):
            return BatchStatus.PARTIAL
        return BatchStatus.ABORTED

    @property
    def translated(self) -> list[ItemOutcome]:
        return [o for o in self.outcomes if o.status is ItemStatus.TRANSLATED]

    def count(self, status: ItemStatus) -> int:
        return sum(1 for o in self.outcomes if o.status is status)

    def summary(self) -> dict[str, int]:
        return {status.value: self.count(status) for status in ItemStatus}

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "committed": self.committed,
            "error": self.error,
            "source_lang": self.config.source_lang,
            "target_lang": self.config.target_lang,
            "summary": self.summary(),
            "items": [o.to_dict() for o in self.outcomes],
        }


class TranslationApplier:
    def __init__(self, translator: Translator) -> None:
        self._translator = translator

    async def apply(
        self,
        document: ProgramDocument,
        locations: Iterable[Any],
        config: TranslationConfig,
        monitor: Optional[TaskMonitor] = None,
    ) -> BatchResult:
        items = list(locations)
        result = BatchResult(
            config=config,
            outcomes=[ItemOutcome(index=i, location=loc) for i, loc in enumerate(items)],
        )
        total = len(items)
        current: Optional[ItemOutcome] = None

        transaction_id = document.start_transaction(TRANSACTION_LABEL)
        try:
            for outcome in result.outcomes:
                if monitor is not None and monitor.is_cancelled:
                    result.cancelled = True
                    logger.info("Translation cancelled after %d of %d strings", outcome.index, total)
                    break
                current = outcome
                await self._apply_one(document, outcome, config)
                current = None
                if monitor is not None:
                    monitor.set_progress(
                        (outcome.index + 1) / total,
                        f"Translated {outcome.index + 1} of {total} strings",
                    )
        except Exception as exc:
            error = map_translator_error(exc)
            result.error = str(error)
            if current is not None:
                current.status = ItemStatus.FAILED
                current.error = str(error)
            logger.error("Error during translation", exc_info=True)
        finally:
            document.end_transaction(transaction_id, True)
            result.committed = True

        return result

    async def _apply_one(self, document: ProgramDocument, outcome: ItemOutcome, config: TranslationConfig) -> None:
        data = document.get_data_at(outcome.location)
        value = data.string_value if data is not None else None
        if data is None or not value:
            outcome.status = ItemStatus.SKIPPED
            return

        outcome.original = value
        translated = await self._translator.translate(value, config.source_lang, config.target_lang)
        outcome.translated = translated
        logger.info("Original: %s, Translated: %s", value, translated)

        if translated:
            data.set_translated_value(translated)
            data.set_show_translated(True)
            outcome.status = ItemStatus.TRANSLATED
        else:
            outcome.status = ItemStatus.EMPTY


__all__ = [
    "BatchResult",
    "BatchStatus",
    "ItemOutcome",
    "ItemStatus",
    "TRANSACTION_LABEL",
    "TranslateOptions",
    "TranslationApplier",
]
