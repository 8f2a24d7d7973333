#!/usr/bin/env python
#
# Image Presets - Parameter Package Discovery
# © 2025 Shinichi Morita (shin3tky)
#

"""Discovery utilities for parameter package plugins."""

from __future__ import annotations

import importlib.util
import inspect
import warnings
from importlib import metadata
from pathlib import Path
from typing import Dict, Iterable, Tuple, Type

from .base import BaseParameterPackage, _is_valid_parameter_package
from .border import BorderParameterPackage
from .control import ControlParameterPackage
from .crop import CropParameterPackage
from .dimensional import DimensionalParameterPackage
from .reflection import ReflectionParameterPackage
from .rounded_corners import RoundedCornersParameterPackage
from .text import TextParameterPackage
from .transformational import TransformationalParameterPackage
from .watermark import WatermarkParameterPackage

PLUGIN_GROUP = "image_presets.parameter_package"
PLUGIN_DIR = Path.home() / ".image_presets" / "package_plugins"

BUILTIN_PACKAGES = (
    ControlParameterPackage,
    CropParameterPackage,
    DimensionalParameterPackage,
    ReflectionParameterPackage,
    WatermarkParameterPackage,
    RoundedCornersParameterPackage,
    BorderParameterPackage,
    TextParameterPackage,
    TransformationalParameterPackage,
)

# Abstract helpers that plugin modules commonly import
_SKIP_CLASSES = frozenset({"BaseParameterPackage", "ABC", "Generic"})

Discovered = Dict[str, Tuple[Type[BaseParameterPackage], str]]


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=PLUGIN_GROUP)


def _add_package(
    registry: Discovered,
    package_cls: Type[BaseParameterPackage],
    origin: str,
) -> None:
    """Add a package class to ``registry`` if it is a valid, new plugin.

    Args:
        registry: Mapping of lowercase plugin name to ``(class, origin)``.
        package_cls: Candidate class.
        origin: Where the class came from (for warnings and ``origin_of``).
    """
    if not inspect.isclass(package_cls) or package_cls.__name__ in _SKIP_CLASSES:
        return

    if not _is_valid_parameter_package(package_cls):
        if "package" in package_cls.__name__.lower():
            warnings.warn(
                f"Skipping parameter package from {origin}: "
                f"{package_cls.__module__}.{package_cls.__name__} does not inherit "
                "from BaseParameterPackage (or is abstract, or missing plugin_name).",
                stacklevel=3,
            )
        return

    key = package_cls.plugin_name.lower()
    if key in registry:
        existing = registry[key][0]
        warnings.warn(
            f"Duplicate parameter package name '{package_cls.plugin_name}' from {origin}; "
            f"keeping {existing.__module__}.{existing.__name__}",
            stacklevel=3,
        )
        return

    registry[key] = (package_cls, origin)


def _load_module_from_file(filepath: Path):
    """Load a Python module from a file path.

    Raises:
        ImportError: If the module cannot be loaded.
    """
    spec = importlib.util.spec_from_file_location(filepath.stem, filepath)
    if spec and spec.loader:
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module
    raise ImportError(f"Could not load spec for {filepath}")


def _discover_packages_internal(plugin_dir: Path | None = None) -> Discovered:
    """Discover parameter packages.

    Discovery order is deterministic:

    1. Built-in packages
    2. Entry points in ``image_presets.parameter_package`` sorted by name
    3. ``*.py`` files in the plugin directory sorted alphabetically

    Later discoveries with a duplicate ``plugin_name`` are ignored with a
    warning.

    Args:
        plugin_dir: Optional plugin directory. Defaults to
            ``~/.image_presets/package_plugins``.

    Returns:
        Mapping of lowercase plugin name to ``(class, origin)``.
    """
    directory = plugin_dir if plugin_dir is not None else PLUGIN_DIR
    registry: Discovered = {}

    for package_cls in BUILTIN_PACKAGES:
        _add_package(registry, package_cls, f"built-in {package_cls.__name__}")

    for ep in sorted(_iter_entry_points(), key=lambda e: e.name):
        try:
            package_cls = ep.load()
        except Exception as exc:  # pragma: no cover
            warnings.warn(
                f"Failed to load parameter package entry point '{ep.name}' "
                f"from {ep.value}: {exc}",
                stacklevel=2,
            )
            continue
        _add_package(registry, package_cls, f"entry point {ep.name}")

    if directory.is_dir():
        for path in sorted(directory.glob("*.py")):
            try:
                module = _load_module_from_file(path)
            except Exception as exc:
                warnings.warn(
                    f"Failed to load parameter package plugin module {path}: {exc}",
                    stacklevel=2,
                )
                continue
            for _, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ == module.__name__:
                    _add_package(registry, obj, f"plugin file {path}")

    return registry


__all__ = ["PLUGIN_DIR", "PLUGIN_GROUP", "BUILTIN_PACKAGES"]
