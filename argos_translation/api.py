from __future__ import annotations

import json
import sys
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import Any, Optional

from fastapi import APIRouter, FastAPI, HTTPException
from pydantic import BaseModel, Field

from .errors import OptionsError, map_translator_error
from .options import OPTIONS_TITLE
from .plugin import ArgosStringTranslationPlugin
from .translator import ArgosTranslator


class OptionUpdateRequest(BaseModel):
    value: str


class TranslateTextsRequest(BaseModel):
    texts: list[str] = Field(..., min_length=1, description="Strings to translate, in order")
    timeout: Optional[float] = Field(None, gt=0, description="Per-string timeout in seconds for this request")


def create_translation_router(
    plugin: ArgosStringTranslationPlugin,
    *,
    prefix: str = "/api/translation",
) -> APIRouter:
    """Expose the translation service to a host process over HTTP."""
    router = APIRouter(prefix=prefix)

    @router.get("/service")
    async def service_get() -> dict[str, Any]:
        return {
            "name": plugin.get_translation_service_name(),
            "info": plugin.info.to_dict(),
            "config": plugin.options.snapshot().to_dict(),
        }

    @router.get("/options")
    async def options_get() -> dict[str, Any]:
        return {"category": OPTIONS_TITLE, "options": plugin.options.snapshot().to_dict()}

    @router.put("/options/{name}")
    async def options_put(name: str, request: OptionUpdateRequest) -> dict[str, Any]:
        try:
            plugin.options.set_option(name, request.value)
        except OptionsError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {"category": OPTIONS_TITLE, "options": plugin.options.snapshot().to_dict()}

    @router.post("/translate")
    async def translate_texts(request: TranslateTextsRequest) -> dict[str, Any]:
        config = plugin.options.snapshot()
        translator = plugin.create_translator(config)
        if request.timeout is not None and isinstance(translator, ArgosTranslator):
            translator = replace(translator, timeout=request.timeout)
        results: list[dict[str, Any]] = []
        try:
            for text in request.texts:
                translated = None
                if text:
                    translated = await translator.translate(text, config.source_lang, config.target_lang)
                results.append({"text": text, "translated": translated or None})
        except Exception as exc:
            error = map_translator_error(exc)
            raise HTTPException(status_code=502, detail=str(error)) from exc
        return {
            "status": "success",
            "source_lang": config.source_lang,
            "target_lang": config.target_lang,
            "results": results,
        }

    return router


def create_app(plugin: ArgosStringTranslationPlugin) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await plugin.start()
        print(json.dumps({"status": "ready", "service": plugin.get_translation_service_name()}), file=sys.stderr, flush=True)
        try:
            yield
        finally:
            await plugin.stop()

    app = FastAPI(title=plugin.get_translation_service_name(), lifespan=lifespan)
    app.include_router(create_translation_router(plugin))
    return app


__all__ = ["OptionUpdateRequest", "TranslateTextsRequest", "create_app", "create_translation_router"]
