#!/usr/bin/env python
#
# Image Presets CLI
# © 2025 Shinichi Morita (shin3tky)
#
# CLI entry point for duration parsing and preset resolution.
# This module handles argument parsing and delegates to preset_core.
#

import os
import sys
import json
import argparse
import logging
from typing import Dict, List, Optional

from preset_core import (
    VERSION,
    CONTEXT_GENERAL,
    DurationError,
    DurationParser,
    InMemoryPresetStore,
    ParameterPackageDiscovery,
    PresetConfigError,
    PresetError,
    PresetResolver,
    ResolverSettings,
    format_error_for_user,
    load_presets,
    load_resolver_settings,
)
from preset_core.i18n import get_message
from preset_core.schema import DURATION_CONTEXTS, PRESET_APPLIED_KEY


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="image-presets",
        description="Parse durations and resolve image parameter presets",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging and show error context",
    )
    parser.add_argument(
        "--locale",
        default=None,
        help="Locale for messages (default: $IMAGE_PRESETS_LOCALE or en)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Parse a duration expression to seconds")
    parse_cmd.add_argument("text", help='Duration expression, e.g. "2 weeks" or "PT1H30M"')
    parse_cmd.add_argument(
        "--context",
        choices=DURATION_CONTEXTS,
        default=CONTEXT_GENERAL,
        help="Usage context the value must be valid for (default: general)",
    )

    format_cmd = subparsers.add_parser("format", help="Format seconds as readable text")
    format_cmd.add_argument("seconds", type=int, help="Duration in seconds (-1 forever, 0 disabled)")
    format_cmd.add_argument("--abbreviated", action="store_true", help="Use short units (2h, 3d)")

    examples_cmd = subparsers.add_parser("examples", help="Show example duration inputs")
    examples_cmd.add_argument(
        "context", nargs="?", choices=DURATION_CONTEXTS, default=CONTEXT_GENERAL
    )

    packages_cmd = subparsers.add_parser("packages", help="List parameter packages")
    packages_cmd.add_argument("--settings", default=None, help="Resolver settings file (YAML/JSON)")

    resolve_cmd = subparsers.add_parser("resolve", help="Resolve tag parameters against presets")
    resolve_cmd.add_argument("--presets", required=True, help="Preset definitions file (YAML/JSON)")
    resolve_cmd.add_argument("--settings", default=None, help="Resolver settings file (YAML/JSON)")
    resolve_cmd.add_argument(
        "--debug", action="store_true", help="Trace the resolution and print its summary"
    )
    resolve_cmd.add_argument(
        "params", nargs="*", metavar="key=value", help='Tag parameters, e.g. preset=hero width=300'
    )
    return parser


def _configure_logging(verbose: bool) -> None:
    """Configure logging for CLI execution.

    Verbose mode shows DEBUG-level logs from preset_core; otherwise the
    default warning level applies.
    """

    if not verbose:
        return

    logging.basicConfig(
        level=logging.DEBUG,
        format="%(levelname)s:%(name)s:%(message)s",
        force=True,
    )


def parse_key_values(items: List[str]) -> Dict[str, str]:
    """Turn ``["a=1", "b=x=y"]`` into ``{"a": "1", "b": "x=y"}``.

    Raises:
        PresetConfigError: If an item has no ``=`` or an empty key.
    """
    params: Dict[str, str] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise PresetConfigError(
                f"Parameter '{item}' must use key=value form",
                config_key=item,
            )
        params[key.strip()] = value
    return params


def _load_settings(path: Optional[str]) -> ResolverSettings:
    return load_resolver_settings(path) if path else ResolverSettings()


# ==========================================
# Commands
# ==========================================
def cmd_parse(args) -> int:
    parser = DurationParser(args.locale)
    result = parser.validate_input(args.text, args.context)
    if result.error:
        raise DurationError(result.error, input_value=args.text, duration_context=args.context)
    print(get_message("ui.parse.result", locale=args.locale, seconds=result.value))
    print(
        get_message("ui.parse.readable", locale=args.locale, readable=result.human_readable)
    )
    return 0


def cmd_format(args) -> int:
    parser = DurationParser(args.locale)
    print(parser.format_duration(args.seconds, args.abbreviated))
    return 0


def cmd_examples(args) -> int:
    parser = DurationParser(args.locale)
    print(get_message("ui.examples.header", locale=args.locale, context=args.context))
    for example in parser.get_examples(args.context):
        print(f"  {example}")
    return 0


def cmd_packages(args) -> int:
    discovery = ParameterPackageDiscovery(_load_settings(args.settings))
    print(get_message("ui.packages.header", locale=args.locale))
    for package in discovery.get_packages(enabled_only=False):
        row = get_message(
            "ui.packages.row",
            locale=args.locale,
            priority=package.priority(),
            name=package.plugin_name,
            category=package.category,
            count=len(package.owned_parameters()),
        )
        if not package.enabled:
            row += " " + get_message("ui.packages.disabled", locale=args.locale)
        print(row)
    return 0


def cmd_resolve(args) -> int:
    settings = _load_settings(args.settings)
    if args.debug:
        settings.debug_enabled = True
        settings.debug_verbose = True
    store = InMemoryPresetStore(load_presets(args.presets))
    resolver = PresetResolver(store, settings=settings)

    tag_parameters = parse_key_values(args.params)
    resolved = resolver.resolve_parameters(tag_parameters)

    preset_name = tag_parameters.get("preset")
    if preset_name:
        key = "ui.resolve.preset_applied" if resolved.get(PRESET_APPLIED_KEY) else (
            "ui.resolve.preset_not_applied"
        )
        print(get_message(key, locale=args.locale, name=preset_name), file=sys.stderr)
    if args.debug and resolver.debug_service.last_summary:
        print(json.dumps(resolver.debug_service.last_summary, indent=2), file=sys.stderr)

    print(json.dumps(resolved, indent=2, ensure_ascii=False))
    return 0


_COMMANDS = {
    "parse": cmd_parse,
    "format": cmd_format,
    "examples": cmd_examples,
    "packages": cmd_packages,
    "resolve": cmd_resolve,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    args.locale = args.locale or os.environ.get("IMAGE_PRESETS_LOCALE", "en")
    locale = args.locale

    _configure_logging(args.verbose)

    try:
        return _COMMANDS[args.command](args)
    except PresetError as e:
        print(
            format_error_for_user(e, verbose=args.verbose, locale=locale),
            file=sys.stderr,
        )
        return 1
    except KeyboardInterrupt:
        print("\n" + get_message("ui.interrupt.generic", locale=locale), file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
