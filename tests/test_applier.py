import asyncio
import logging

import pytest

from argos_translation.applier import (
    TRANSACTION_LABEL,
    BatchStatus,
    ItemStatus,
    TranslationApplier,
)
from argos_translation.document import StringDocument
from argos_translation.errors import TranslatorExecutionError
from argos_translation.options import TranslationConfig


class _FakeTranslator:
    def __init__(self, answers=None, fail_on=None):
        self.answers = answers or {}
        self.fail_on = set(fail_on or ())
        self.calls = []
        self.events = []

    async def translate(self, text, source_lang, target_lang):
        self.calls.append((text, source_lang, target_lang))
        self.events.append(("start", text))
        await asyncio.sleep(0)
        self.events.append(("end", text))
        if text in self.fail_on:
            raise TranslatorExecutionError(f"cannot translate {text}")
        return self.answers.get(text, f"{text}-{target_lang}")


class _FakeMonitor:
    def __init__(self, cancel_after=None):
        self.cancel_after = cancel_after
        self.progress = []
        self.message = ""

    @property
    def is_cancelled(self):
        return self.cancel_after is not None and len(self.progress) >= self.cancel_after

    def set_message(self, message):
        self.message = message

    def set_progress(self, progress, message=""):
        self.progress.append(progress)
        self.message = message


def _document(*values):
    document = StringDocument(name="sample.bin")
    for index, value in enumerate(values):
        document.add_string(f"0x{0x1000 + index * 0x10:x}", value)
    return document


@pytest.mark.asyncio
async def test_korean_greeting_is_translated_and_shown():
    document = _document("안녕하세요")
    translator = _FakeTranslator({"안녕하세요": "Hello"})

    result = await TranslationApplier(translator).apply(
        document, document.addresses, TranslationConfig(source_lang="ko", target_lang="en")
    )

    data = document.get_data_at("0x1000")
    assert data.translated_value == "Hello"
    assert data.show_translated is True
    assert translator.calls == [("안녕하세요", "ko", "en")]
    assert result.status is BatchStatus.COMPLETED
    assert result.committed is True
    assert document.committed == [TRANSACTION_LABEL]


@pytest.mark.asyncio
async def test_null_and_unresolved_locations_are_skipped_silently(caplog):
    caplog.set_level(logging.INFO)
    document = _document(None, "")
    translator = _FakeTranslator()

    result = await TranslationApplier(translator).apply(
        document, ["0x1000", "0x1010", "0xdead"], TranslationConfig()
    )

    assert translator.calls == []
    assert [o.status for o in result.outcomes] == [ItemStatus.SKIPPED] * 3
    assert document.get_data_at("0x1000").translated_value is None
    assert result.status is BatchStatus.COMPLETED
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


@pytest.mark.asyncio
async def test_empty_translation_leaves_annotation_unset(caplog):
    caplog.set_level(logging.INFO)
    document = _document("abc", "def")
    translator = _FakeTranslator({"abc": "", "def": None})

    result = await TranslationApplier(translator).apply(document, document.addresses, TranslationConfig())

    for data in document.strings():
        assert data.translated_value is None
        assert data.show_translated is False
    assert result.count(ItemStatus.EMPTY) == 2
    assert result.status is BatchStatus.COMPLETED
    assert "Original: abc, Translated: " in caplog.text
    assert "Original: def, Translated: None" in caplog.text
    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


@pytest.mark.asyncio
async def test_items_are_translated_in_input_order_without_overlap():
    document = _document("A", "B", "C")
    translator = _FakeTranslator()

    await TranslationApplier(translator).apply(
        document, ["0x1020", "0x1000", "0x1010"], TranslationConfig()
    )

    assert translator.events == [
        ("start", "C"),
        ("end", "C"),
        ("start", "A"),
        ("end", "A"),
        ("start", "B"),
        ("end", "B"),
    ]


@pytest.mark.asyncio
async def test_failure_stops_batch_and_still_commits(caplog):
    caplog.set_level(logging.INFO)
    document = _document("one", "two", "three")
    translator = _FakeTranslator(fail_on={"two"})

    result = await TranslationApplier(translator).apply(document, document.addresses, TranslationConfig())

    assert document.get_data_at("0x1000").translated_value == "one-en"
    assert document.get_data_at("0x1010").translated_value is None
    assert document.get_data_at("0x1020").translated_value is None
    assert [c[0] for c in translator.calls] == ["one", "two"]
    assert [o.status for o in result.outcomes] == [
        ItemStatus.TRANSLATED,
        ItemStatus.FAILED,
        ItemStatus.NOT_ATTEMPTED,
    ]
    assert result.outcomes[1].error == "cannot translate two"
    assert result.status is BatchStatus.PARTIAL
    assert result.committed is True
    assert document.committed == [TRANSACTION_LABEL]
    assert not document.in_transaction
    assert "Error during translation" in caplog.text


@pytest.mark.asyncio
async def test_second_of_two_failing_keeps_first():
    document = _document("first", "second")
    translator = _FakeTranslator(answers={"first": "1st"}, fail_on={"second"})

    result = await TranslationApplier(translator).apply(document, document.addresses, TranslationConfig())

    assert document.get_data_at("0x1000").translated_value == "1st"
    assert document.get_data_at("0x1000").show_translated is True
    assert document.get_data_at("0x1010").translated_value is None
    assert result.committed is True
    assert document.committed == [TRANSACTION_LABEL]


@pytest.mark.asyncio
async def test_failure_on_first_item_is_aborted():
    document = _document("bad", "good")
    translator = _FakeTranslator(fail_on={"bad"})

    result = await TranslationApplier(translator).apply(document, document.addresses, TranslationConfig())

    assert result.status is BatchStatus.ABORTED
    assert result.count(ItemStatus.NOT_ATTEMPTED) == 1
    assert result.committed is True


@pytest.mark.asyncio
async def test_cancel_request_stops_before_next_item():
    document = _document("a", "b", "c")
    translator = _FakeTranslator()
    monitor = _FakeMonitor(cancel_after=1)

    result = await TranslationApplier(translator).apply(
        document, document.addresses, TranslationConfig(), monitor
    )

    assert [c[0] for c in translator.calls] == ["a"]
    assert result.status is BatchStatus.CANCELLED
    assert result.count(ItemStatus.NOT_ATTEMPTED) == 2
    assert document.get_data_at("0x1000").translated_value == "a-en"
    assert document.committed == [TRANSACTION_LABEL]


@pytest.mark.asyncio
async def test_progress_is_reported_per_item():
    document = _document("a", None)
    monitor = _FakeMonitor()

    await TranslationApplier(_FakeTranslator()).apply(document, document.addresses, TranslationConfig(), monitor)

    assert monitor.progress == [0.5, 1.0]
    assert monitor.message == "Translated 2 of 2 strings"


@pytest.mark.asyncio
async def test_result_serializes_outcomes():
    document = _document("x")
    result = await TranslationApplier(_FakeTranslator({"x": "y"})).apply(
        document, document.addresses, TranslationConfig(source_lang="ja", target_lang="fr")
    )

    payload = result.to_dict()
    assert payload["status"] == "completed"
    assert payload["source_lang"] == "ja"
    assert payload["summary"]["translated"] == 1
    assert payload["items"][0] == {
        "index": 0,
        "location": "0x1000",
        "status": "translated",
        "original": "x",
        "translated": "y",
        "error": None,
    }
