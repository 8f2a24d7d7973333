#!/usr/bin/env python
#
# Image Presets - Plugin Registry Base
# © 2025 Shinichi Morita (shin3tky)
#

"""Shared registry utilities for plugin-based components."""

from __future__ import annotations

import logging
import warnings
from dataclasses import is_dataclass
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from .plugin_registry import _PLUGIN_KIND_GENERIC

logger = logging.getLogger(__name__)

PluginType = TypeVar("PluginType")

ORIGIN_RUNTIME = "runtime"


class PluginRegistryBase(Generic[PluginType]):
    """Base class providing common registry behaviors.

    Subclasses implement ``_discover_internal`` (returning plugin classes and
    a description of where each came from) and ``_is_valid_plugin``.

    Lookup order is runtime registrations first, then discovered plugins.
    Names are case-insensitive. Plugins expose a ``ConfigType``; configs
    passed as mappings are coerced into it (dataclass or Pydantic model) and
    ``None`` means ``ConfigType()`` defaults.
    """

    _plugin_kind: str = _PLUGIN_KIND_GENERIC

    # Discovered plugins (built-ins, entry points, plugin dir), lazily filled
    _discovered: Optional[Dict[str, Type[PluginType]]] = None
    _origins: Dict[str, str] = {}

    # Runtime-registered plugins (tests, host applications)
    _custom: Dict[str, Type[PluginType]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # Each subclass keeps its own registry state
        cls._discovered = None
        cls._origins = {}
        cls._custom = {}

    # ========================================
    # Discovery & Registration
    # ========================================
    @classmethod
    def _discover_internal(cls) -> Dict[str, tuple]:
        """Return ``{name: (plugin_cls, origin)}``."""
        raise NotImplementedError

    @classmethod
    def _is_valid_plugin(cls, plugin_cls: Type[PluginType]) -> bool:
        raise NotImplementedError

    @classmethod
    def discover(cls, force: bool = False) -> Dict[str, Type[PluginType]]:
        """Discover available plugins (cached, lazy)."""

        if cls._discovered is None or force:
            logger.debug(
                "%s.discover: starting discovery (force=%s)", cls.__name__, force
            )
            found = cls._discover_internal()
            cls._discovered = {name: entry[0] for name, entry in found.items()}
            cls._origins = {name: entry[1] for name, entry in found.items()}
            logger.debug(
                "%s.discover: found %d %s(s): %s",
                cls.__name__,
                len(cls._discovered),
                cls._plugin_kind,
                ", ".join(sorted(cls._discovered)) or "none",
            )
        return cls._discovered

    @classmethod
    def get(cls, name: str) -> Type[PluginType]:
        """Get a plugin class by name.

        Raises:
            KeyError: If no plugin with that name is registered.
        """

        key = name.lower()
        if key in cls._custom:
            logger.debug("%s.get('%s'): runtime registration", cls.__name__, name)
            return cls._custom[key]

        discovered = cls.discover()
        if key in discovered:
            logger.debug(
                "%s.get('%s'): discovered (%s)",
                cls.__name__,
                name,
                cls._origins.get(key, "unknown origin"),
            )
            return discovered[key]

        available_str = ", ".join(cls.list_available()) or "none"
        logger.warning(
            "%s.get('%s'): %s not found. Available: %s",
            cls.__name__,
            name,
            cls._plugin_kind,
            available_str,
        )
        raise KeyError(f"Unknown {cls._plugin_kind} '{name}'. Available: {available_str}")

    @classmethod
    def origin_of(cls, name: str) -> Optional[str]:
        """Describe where a plugin came from, or None if unknown."""

        key = name.lower()
        if key in cls._custom:
            return ORIGIN_RUNTIME
        cls.discover()
        return cls._origins.get(key)

    @classmethod
    def register(cls, plugin_cls: Type[PluginType]) -> None:
        """Register a plugin class at runtime, overriding discovered ones.

        Raises:
            ValueError: If the class is not a valid plugin.
        """

        if not cls._is_valid_plugin(plugin_cls):
            logger.error(
                "%s.register: invalid %s class %s (must inherit from the proper "
                "base and have non-empty plugin_name)",
                cls.__name__,
                cls._plugin_kind,
                plugin_cls,
            )
            raise ValueError(
                f"Invalid {cls._plugin_kind} class: {plugin_cls}. "
                "Must inherit from the proper base and have non-empty plugin_name."
            )

        name = plugin_cls.plugin_name
        key = name.lower()
        if key in cls._custom:
            previous = cls._custom[key]
            logger.warning(
                "%s.register: overwriting runtime-registered %s '%s' (%s -> %s)",
                cls.__name__,
                cls._plugin_kind,
                name,
                previous.__qualname__,
                plugin_cls.__qualname__,
            )
            warnings.warn(
                f"Overwriting existing runtime-registered {cls._plugin_kind} '{name}'",
                stacklevel=2,
            )

        cls._custom[key] = plugin_cls
        logger.info(
            "%s.register: registered %s '%s' (%s.%s)",
            cls.__name__,
            cls._plugin_kind,
            name,
            plugin_cls.__module__,
            plugin_cls.__qualname__,
        )

    @classmethod
    def unregister(cls, name: str) -> bool:
        """Remove a runtime registration. Returns False if none existed."""

        removed = cls._custom.pop(name.lower(), None)
        if removed is None:
            logger.debug(
                "%s.unregister: %s '%s' not registered at runtime",
                cls.__name__,
                cls._plugin_kind,
                name,
            )
            return False
        logger.info(
            "%s.unregister: removed %s '%s'", cls.__name__, cls._plugin_kind, name
        )
        return True

    @classmethod
    def list_available(cls) -> List[str]:
        """List all available plugin names."""

        return sorted(set(cls.discover()) | set(cls._custom))

    # ========================================
    # Internal Methods
    # ========================================
    @classmethod
    def _coerce_config(
        cls,
        plugin_cls: Type[PluginType],
        config: Optional[Union[Dict[str, Any], Any]],
    ) -> Any:
        """Coerce ``config`` to the plugin's ``ConfigType``.

        Raises:
            TypeError: If defaults cannot be built or a mapping cannot be
                coerced into ``ConfigType``.
            ValueError: If Pydantic validation fails.
        """

        config_type = getattr(plugin_cls, "ConfigType", None)
        plugin_name = getattr(plugin_cls, "plugin_name", "unknown")

        if config_type is None:
            return config

        if config is None:
            try:
                return config_type()
            except TypeError as exc:
                logger.error(
                    "_coerce_config(%s): %s requires arguments - %s",
                    plugin_name,
                    config_type.__name__,
                    exc,
                )
                raise TypeError(
                    f"Failed to create default config for {cls._plugin_kind} "
                    f"'{plugin_name}': {config_type.__name__} requires arguments."
                ) from exc
            except ValueError as exc:
                # pydantic.ValidationError is a ValueError
                raise ValueError(
                    f"Failed to create default config for {cls._plugin_kind} "
                    f"'{plugin_name}': {exc}"
                ) from exc

        if isinstance(config, config_type):
            return config

        if not isinstance(config, dict):
            logger.debug(
                "_coerce_config(%s): passing %s through unchanged (expected %s)",
                plugin_name,
                type(config).__name__,
                config_type.__name__,
            )
            return config

        if is_dataclass(config_type):
            try:
                return config_type(**config)
            except TypeError as exc:
                logger.error(
                    "_coerce_config(%s): cannot build dataclass %s - %s",
                    plugin_name,
                    config_type.__name__,
                    exc,
                )
                raise TypeError(
                    f"Invalid config for {cls._plugin_kind} '{plugin_name}': {exc}"
                ) from exc

        if hasattr(config_type, "model_validate"):
            try:
                return config_type.model_validate(config)
            except ValueError as exc:
                logger.error(
                    "_coerce_config(%s): validation failed for %s - %s",
                    plugin_name,
                    config_type.__name__,
                    exc,
                )
                raise ValueError(
                    f"Config validation failed for {cls._plugin_kind} "
                    f"'{plugin_name}': {exc}"
                ) from exc

        logger.error(
            "_coerce_config(%s): %s is neither a dataclass nor a Pydantic model",
            plugin_name,
            config_type.__name__,
        )
        raise TypeError(
            f"Cannot coerce dict to {config_type.__name__} for {cls._plugin_kind} "
            f"'{plugin_name}': ConfigType is neither a dataclass nor a Pydantic model."
        )

    @classmethod
    def _reset(cls) -> None:
        """Reset registry state (for tests)."""

        cls._discovered = None
        cls._origins = {}
        cls._custom = {}
        logger.debug("%s._reset: cleared registry state", cls.__name__)


__all__ = ["PluginRegistryBase", "ORIGIN_RUNTIME"]
