#!/usr/bin/env python
#
# Image Presets - Configuration I/O
# © 2025 Shinichi Morita (shin3tky)
#

"""Load resolver settings and preset definitions from JSON or YAML files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .duration import DurationParser
from .exceptions import DurationError, PresetConfigError
from .schema import CONTEXT_CACHE, Preset, ResolverSettings

SUPPORTED_CONFIG_EXTENSIONS = {".json", ".yaml", ".yml"}


def _load_config_mapping(path: Path) -> Dict[str, Any]:
    suffix = path.suffix.lower()
    if suffix == ".json":
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise PresetConfigError(
                "Invalid JSON configuration file",
                filepath=str(path),
                original_error=exc,
            ) from exc
    if suffix in {".yaml", ".yml"}:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise PresetConfigError(
                "Invalid YAML configuration file",
                filepath=str(path),
                original_error=exc,
            ) from exc
        return data if data is not None else {}
    raise PresetConfigError(
        "Unsupported configuration file format",
        filepath=str(path),
        context={"supported_extensions": sorted(SUPPORTED_CONFIG_EXTENSIONS)},
    )


def _read_mapping(path: str | Path) -> tuple[Path, Dict[str, Any]]:
    config_path = Path(path)
    if not config_path.exists():
        raise PresetConfigError("Configuration file not found", filepath=str(config_path))
    if config_path.is_dir():
        raise PresetConfigError(
            "Configuration path must be a file, not a directory",
            filepath=str(config_path),
        )
    data = _load_config_mapping(config_path)
    if not isinstance(data, dict):
        raise PresetConfigError(
            "Configuration file must define an object at the top level",
            filepath=str(config_path),
        )
    return config_path, data


def load_resolver_settings(path: str | Path) -> ResolverSettings:
    """Load resolver settings from a YAML/JSON file.

    ``cache_ttl`` is checked with the duration parser so that a bad value
    is reported here rather than when the resolver is built.
    """
    config_path, data = _read_mapping(path)
    try:
        settings = ResolverSettings.from_dict(data)
    except (TypeError, ValueError, KeyError) as exc:
        raise PresetConfigError(
            "Invalid resolver settings",
            filepath=str(config_path),
            original_error=exc,
        ) from exc

    if settings.cache_ttl is not None:
        try:
            DurationParser(settings.locale).parse_or_raise(settings.cache_ttl, CONTEXT_CACHE)
        except DurationError as exc:
            raise PresetConfigError(
                f"Invalid cache_ttl: {exc.message}",
                filepath=str(config_path),
                config_key="cache_ttl",
            ) from exc
    return settings


def load_presets(path: str | Path) -> List[Preset]:
    """Load preset definitions from a YAML/JSON file.

    The file holds a ``presets`` key with either a mapping of preset name to
    ``{parameters, description}`` or a list of ``{name, parameters,
    description}`` objects.

    Example YAML::

        presets:
          hero:
            description: Large banner image
            parameters:
              width: 1200
              quality: 80
    """
    config_path, data = _read_mapping(path)
    entries = data.get("presets")
    if entries is None:
        raise PresetConfigError(
            "Preset file must define a 'presets' key",
            filepath=str(config_path),
            config_key="presets",
        )

    if isinstance(entries, dict):
        items = []
        for name, body in entries.items():
            if not isinstance(body, dict):
                raise PresetConfigError(
                    f"Preset '{name}' must be a mapping",
                    filepath=str(config_path),
                    config_key=f"presets.{name}",
                )
            items.append({"name": name, **body})
    elif isinstance(entries, list):
        items = entries
    else:
        raise PresetConfigError(
            "'presets' must be a mapping or a list",
            filepath=str(config_path),
            config_key="presets",
        )

    presets = []
    for index, item in enumerate(items):
        try:
            presets.append(Preset.from_dict(item))
        except (TypeError, ValueError, KeyError, AttributeError) as exc:
            raise PresetConfigError(
                "Invalid preset definition",
                filepath=str(config_path),
                config_key=f"presets[{index}]",
                original_error=exc,
            ) from exc
    return presets


__all__ = ["SUPPORTED_CONFIG_EXTENSIONS", "load_resolver_settings", "load_presets"]
