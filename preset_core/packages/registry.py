#!/usr/bin/env python
#
# Image Presets - Parameter Package Registry
# © 2025 Shinichi Morita (shin3tky)
#

"""
Registry for parameter packages with discovery, registration, and
instantiation.

Packages are found among the built-ins, the ``image_presets.parameter_package``
entry point group and the local plugin directory. Tests and host
applications can add packages at runtime with ``register``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Type, Union

from ..parameter_registry import ParameterRegistry
from ..plugin_registry import _PLUGIN_KIND_PARAMETER_PACKAGE
from ..plugin_registry_base import PluginRegistryBase
from .base import BaseParameterPackage, _is_valid_parameter_package

logger = logging.getLogger(__name__)


class ParameterPackageRegistry(PluginRegistryBase[BaseParameterPackage]):
    """Parameter package registry.

    Example:
        >>> package = ParameterPackageRegistry.create("dimensional")
        >>> package.validate_parameters({"width": "abc"})
        {'width': "'width' must be a positive integer (got: abc)"}

        >>> ParameterPackageRegistry.register(MyPackage)
        >>> ParameterPackageRegistry.unregister("my_package")
    """

    _plugin_kind = _PLUGIN_KIND_PARAMETER_PACKAGE

    @classmethod
    def _discover_internal(cls) -> Dict[str, tuple]:
        # Deferred: discovery imports every built-in package module
        from .discovery import _discover_packages_internal

        return _discover_packages_internal()

    @classmethod
    def _is_valid_plugin(cls, package_cls: Type[BaseParameterPackage]) -> bool:
        return _is_valid_parameter_package(package_cls)

    @classmethod
    def create(
        cls,
        name: str,
        config: Optional[Union[Dict[str, Any], Any]] = None,
        *,
        parameter_registry: Optional[ParameterRegistry] = None,
    ) -> BaseParameterPackage:
        """Create a parameter package instance.

        Args:
            name: Package plugin_name.
            config: None for defaults, a mapping coerced into the package's
                ``ConfigType``, or a ``ConfigType`` instance.
            parameter_registry: Registry shared with the package.

        Returns:
            Package instance.

        Raises:
            KeyError: If the package is not found.
            TypeError: If the config type is incompatible.
            ValueError: If config validation fails.
        """
        logger.debug("Creating parameter package '%s' with config %r", name, config)
        package_cls = cls.get(name)
        try:
            coerced = cls._coerce_config(package_cls, config)
        except (TypeError, ValueError) as exc:
            logger.error(
                "Failed to coerce config for parameter package '%s': %s: %s",
                name,
                type(exc).__name__,
                exc,
            )
            raise

        try:
            instance = package_cls(coerced, parameter_registry=parameter_registry)
        except Exception as exc:
            logger.error(
                "Failed to instantiate parameter package '%s' (%s): %s: %s",
                name,
                package_cls.__name__,
                type(exc).__name__,
                exc,
            )
            raise

        logger.debug(
            "Created parameter package '%s' (%s) priority=%d",
            name,
            package_cls.__name__,
            instance.priority(),
        )
        return instance


__all__ = ["ParameterPackageRegistry"]
