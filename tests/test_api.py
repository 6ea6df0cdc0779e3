import stat
import sys

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from argos_translation.api import create_translation_router
from argos_translation.errors import TranslatorNotFoundError
from argos_translation.plugin import ArgosStringTranslationPlugin
from argos_translation.settings_store import JsonOptionsBackend
from argos_translation.task import ModalTaskLauncher
from argos_translation.tool import StandaloneTool
from argos_translation.translator import ArgosTranslator


class _FakeTranslator:
    def __init__(self, fail=False, error=None):
        self.fail = fail
        self.error = error
        self.calls = []

    async def translate(self, text, source_lang, target_lang):
        self.calls.append((text, source_lang, target_lang))
        if self.fail:
            raise TranslatorNotFoundError("Argos executable not found: argos-translate")
        if self.error is not None:
            raise self.error
        return "" if text == "blank" else text.upper()


def _client(tmp_path, translator):
    tool = StandaloneTool(options=JsonOptionsBackend(tmp_path / "settings.json"), tasks=ModalTaskLauncher())
    plugin = ArgosStringTranslationPlugin(tool, translator_factory=lambda config: translator)
    plugin.init()
    app = FastAPI()
    app.include_router(create_translation_router(plugin))
    return TestClient(app), plugin


def test_service_describes_plugin(tmp_path):
    client, _ = _client(tmp_path, _FakeTranslator())

    response = client.get("/api/translation/service")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Argos String Translation"
    assert body["info"]["description"] == "Offline String Translation Plugin using Argos."
    assert body["config"] == {
        "Source Language": "ko",
        "Target Language": "en",
        "Argos Path": "argos-translate",
    }


def test_update_option(tmp_path):
    client, plugin = _client(tmp_path, _FakeTranslator())

    response = client.put("/api/translation/options/Target Language", json={"value": "de"})

    assert response.status_code == 200
    assert response.json()["options"]["Target Language"] == "de"
    assert plugin.options.snapshot().target_lang == "de"
    assert client.get("/api/translation/options").json()["category"] == "Argos Translation"


def test_update_unknown_option_is_404(tmp_path):
    client, _ = _client(tmp_path, _FakeTranslator())

    response = client.put("/api/translation/options/Model", json={"value": "big"})

    assert response.status_code == 404


def test_translate_texts(tmp_path):
    translator = _FakeTranslator()
    client, _ = _client(tmp_path, translator)

    response = client.post("/api/translation/translate", json={"texts": ["hello", "", "blank"]})

    assert response.status_code == 200
    body = response.json()
    assert body["source_lang"] == "ko"
    assert body["results"] == [
        {"text": "hello", "translated": "HELLO"},
        {"text": "", "translated": None},
        {"text": "blank", "translated": None},
    ]
    assert translator.calls == [("hello", "ko", "en"), ("blank", "ko", "en")]


def test_translate_requires_texts(tmp_path):
    client, _ = _client(tmp_path, _FakeTranslator())

    assert client.post("/api/translation/translate", json={"texts": []}).status_code == 422


def test_translator_failure_is_502(tmp_path):
    client, _ = _client(tmp_path, _FakeTranslator(fail=True))

    response = client.post("/api/translation/translate", json={"texts": ["hello"]})

    assert response.status_code == 502
    assert "not found" in response.json()["detail"]


def test_unexpected_translator_error_is_502(tmp_path):
    client, _ = _client(tmp_path, _FakeTranslator(error=RuntimeError("pipe closed")))

    response = client.post("/api/translation/translate", json={"texts": ["hello"]})

    assert response.status_code == 502
    assert response.json()["detail"] == "pipe closed"


def test_translate_timeout_must_be_positive(tmp_path):
    client, _ = _client(tmp_path, _FakeTranslator())

    response = client.post("/api/translation/translate", json={"texts": ["hello"], "timeout": 0})

    assert response.status_code == 422


@pytest.mark.skipif(sys.platform == "win32", reason="uses a shell script as fake argos-translate")
def test_request_timeout_bounds_each_string(tmp_path):
    script = tmp_path / "argos-translate"
    script.write_text("#!/bin/sh\nexec sleep 30\n", encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    tool = StandaloneTool(options=JsonOptionsBackend(tmp_path / "settings.json"), tasks=ModalTaskLauncher())
    plugin = ArgosStringTranslationPlugin(
        tool,
        translator_factory=lambda config: ArgosTranslator(argos_path=str(script), timeout=None),
    )
    plugin.init()
    app = FastAPI()
    app.include_router(create_translation_router(plugin))

    response = TestClient(app).post("/api/translation/translate", json={"texts": ["hello"], "timeout": 0.3})

    assert response.status_code == 502
    assert "did not answer within 0.3s" in response.json()["detail"]
