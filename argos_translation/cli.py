"""
Command line entry point.

    argos-string-translate translate strings.json --from ko --to en
    argos-string-translate options --set "Target Language=de"
    argos-string-translate serve --port 8080
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .applier import BatchStatus
from .document import StringDocument
from .errors import OptionsError
from .logging import setup_plugin_logging
from .options import ARGOS_PATH_OPTION, OPTIONS_TITLE, SOURCE_LANG_OPTION, TARGET_LANG_OPTION
from .plugin import ArgosStringTranslationPlugin
from .plugin_data import DEFAULT_PLUGIN_ID, PluginDataPaths
from .tool import StandaloneTool
from .translator import DEFAULT_TRANSLATE_TIMEOUT

logger = logging.getLogger("argos_translation.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="argos-string-translate",
        description="Offline string translation using Argos Translate.",
    )
    parser.add_argument("--data-dir", default=None, help="Directory holding plugin settings and logs")
    parser.add_argument("--plugin-id", default=DEFAULT_PLUGIN_ID)
    parser.add_argument("-v", "--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)

    translate = subparsers.add_parser("translate", help="Translate the strings of a JSON document")
    translate.add_argument("document", type=Path)
    translate.add_argument("--address", action="append", dest="addresses", default=None,
                           help="Address of a string to translate (repeatable, default: all)")
    translate.add_argument("--output", type=Path, default=None, help="Write the result here instead of in place")
    translate.add_argument("--from", dest="source_lang", default=None)
    translate.add_argument("--to", dest="target_lang", default=None)
    translate.add_argument("--argos-path", default=None)
    translate.add_argument("--timeout", type=float, default=DEFAULT_TRANSLATE_TIMEOUT)

    options = subparsers.add_parser("options", help="Show or change persisted options")
    options.add_argument("--set", action="append", dest="assignments", default=[], metavar="NAME=VALUE")
    options.add_argument("--describe", action="store_true", help="Include defaults and help text for each option")

    serve = subparsers.add_parser("serve", help="Serve the translation API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8080)
    return parser


def _data_paths(args: argparse.Namespace) -> PluginDataPaths:
    if args.data_dir:
        return PluginDataPaths(plugin_id=args.plugin_id, data_root=Path(args.data_dir).expanduser())
    return PluginDataPaths.from_plugin_id(args.plugin_id)


def _build_plugin(args: argparse.Namespace, paths: PluginDataPaths) -> ArgosStringTranslationPlugin:
    tool = StandaloneTool.from_data_paths(paths)
    timeout = getattr(args, "timeout", DEFAULT_TRANSLATE_TIMEOUT)
    plugin = ArgosStringTranslationPlugin(translate_timeout=timeout)
    plugin.configure(tool, plugin_id=paths.plugin_id)
    return plugin


async def _run_translate(args: argparse.Namespace, plugin: ArgosStringTranslationPlugin) -> int:
    try:
        document = StringDocument.load(args.document)
    except (OSError, ValueError) as exc:
        logger.error("Cannot read document %s: %s", args.document, exc)
        return 2

    await plugin.start()
    try:
        # Command line overrides apply to this run only.
        overrides = {
            SOURCE_LANG_OPTION: args.source_lang,
            TARGET_LANG_OPTION: args.target_lang,
            ARGOS_PATH_OPTION: args.argos_path,
        }
        for name, value in overrides.items():
            if value is not None:
                plugin.options.on_option_changed(name, None, value)

        locations = args.addresses or document.addresses
        result = await plugin.translate(document, locations)
    finally:
        await plugin.stop()

    document.save(args.output or args.document)
    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    return 0 if result.status is BatchStatus.COMPLETED else 1


def _run_options(args: argparse.Namespace, plugin: ArgosStringTranslationPlugin) -> int:
    plugin.init()
    try:
        for assignment in args.assignments:
            name, sep, value = assignment.partition("=")
            if not sep:
                logger.error("Expected NAME=VALUE, got %r", assignment)
                return 2
            plugin.options.set_option(name.strip(), value.strip())
    except OptionsError as exc:
        logger.error("%s", exc)
        return 2
    finally:
        plugin.options.dispose()

    values = plugin.options.snapshot().to_dict()
    if args.describe:
        group = plugin.tool.options.get_options(OPTIONS_TITLE)
        values = {
            option.name: {"value": values[option.name], "default": option.default, "help": option.help_text}
            for option in group.registered_options()
        }
    print(json.dumps(values, ensure_ascii=False, indent=2))
    return 0


def _run_serve(args: argparse.Namespace, plugin: ArgosStringTranslationPlugin) -> int:
    import uvicorn

    from .api import create_app

    uvicorn.run(create_app(plugin), host=args.host, port=args.port, reload=False)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    paths = _data_paths(args)
    if args.data_dir:
        paths.ensure_dirs()
    setup_plugin_logging(
        "argos_translation",
        level=logging.DEBUG if args.verbose else logging.INFO,
        plugin_id=paths.plugin_id,
        log_dir=str(paths.log_dir) if args.data_dir else None,
    )
    plugin = _build_plugin(args, paths)

    if args.command == "translate":
        return asyncio.run(_run_translate(args, plugin))
    if args.command == "options":
        return _run_options(args, plugin)
    return _run_serve(args, plugin)


if __name__ == "__main__":
    sys.exit(main())
