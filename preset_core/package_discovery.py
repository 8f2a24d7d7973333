#!/usr/bin/env python
#
# Image Presets - Parameter Package Discovery Service
# © 2025 Shinichi Morita (shin3tky)
#

"""
Instance-level access to the parameter packages used for validation.

``ParameterPackageDiscovery`` builds each package once from the
:class:`ParameterPackageRegistry`, applies the per-package settings
(``enabled``/``priority``), and runs validation across all of them.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Iterable, List, Optional, Type

from .exceptions import PresetConfigError
from .packages.base import BaseParameterPackage
from .packages.registry import ParameterPackageRegistry
from .parameter_registry import ParameterRegistry
from .schema import ParameterSet, ResolverSettings

logger = logging.getLogger(__name__)


class ParameterPackageDiscovery:
    """Build, cache and query parameter package instances.

    Args:
        settings: Resolver settings; ``settings.packages`` holds per-package
            overrides such as ``{"text": {"enabled": False}}``.
        parameter_registry: Registry shared with every package.
        package_registry: Registry class used to look up package classes.

    Example:
        >>> discovery = ParameterPackageDiscovery()
        >>> [p.plugin_name for p in discovery.get_packages()][:3]
        ['control', 'crop', 'dimensional']
    """

    def __init__(
        self,
        settings: Optional[ResolverSettings] = None,
        *,
        parameter_registry: Optional[ParameterRegistry] = None,
        package_registry: Type[ParameterPackageRegistry] = ParameterPackageRegistry,
    ) -> None:
        self.settings = settings or ResolverSettings()
        self.parameter_registry = parameter_registry or ParameterRegistry()
        self.package_registry = package_registry
        self._lock = threading.RLock()
        self._instances: Dict[str, BaseParameterPackage] = {}

    # ========================================
    # Lookup
    # ========================================
    def _available_names(self) -> List[str]:
        return self.package_registry.list_available()

    def has_package(self, name: str) -> bool:
        return name.lower() in self._available_names()

    def get_package(self, name: str) -> Optional[BaseParameterPackage]:
        """Return the cached instance for ``name``, building it on first use.

        Returns:
            The package, or None if no package with that name exists.

        Raises:
            PresetConfigError: If the package settings are invalid.
        """
        key = name.lower()
        with self._lock:
            if key in self._instances:
                return self._instances[key]
            if not self.has_package(key):
                logger.debug("ParameterPackageDiscovery.get_package: unknown package '%s'", name)
                return None

            overrides = self.settings.packages.get(key)
            try:
                package = self.package_registry.create(
                    key, overrides, parameter_registry=self.parameter_registry
                )
            except (TypeError, ValueError) as exc:
                raise PresetConfigError(
                    f"Invalid settings for parameter package '{key}'",
                    config_key=f"packages.{key}",
                    plugin_name=key,
                    original_error=exc,
                ) from exc

            self._instances[key] = package
            logger.debug(
                "ParameterPackageDiscovery.get_package: instantiated '%s' (%s)",
                key,
                type(package).__name__,
            )
            return package

    def get_packages(self, enabled_only: bool = True) -> List[BaseParameterPackage]:
        """Return packages sorted ascending by priority."""
        packages = []
        for name in self._available_names():
            package = self.get_package(name)
            if package is None or (enabled_only and not package.enabled):
                continue
            packages.append(package)
        packages.sort(key=lambda p: p.priority())
        return packages

    def get_packages_by_category(
        self, category: str, enabled_only: bool = True
    ) -> List[BaseParameterPackage]:
        return [p for p in self.get_packages(enabled_only) if p.category == category]

    def get_parameter_owner(self, parameter: str) -> Optional[BaseParameterPackage]:
        """Return the enabled package that owns ``parameter``.

        When several packages claim the same name the highest priority wins.
        """
        owner = None
        for package in self.get_packages():
            if parameter in package.owned_parameters():
                if owner is None or package.priority() > owner.priority():
                    owner = package
        return owner

    # ========================================
    # Validation
    # ========================================
    def validate_all_parameters(
        self,
        params: ParameterSet,
        package_filter: Optional[Iterable[str]] = None,
    ) -> Dict[str, str]:
        """Validate ``params`` with every enabled package.

        Errors from all packages are combined. Packages run in priority order,
        so when two report the same key the later message is kept. A package
        that raises is logged and contributes no errors.

        Args:
            params: Parameters to validate.
            package_filter: Optional package names to restrict validation to.

        Returns:
            Mapping of parameter name to error message.
        """
        selected = {name.lower() for name in package_filter} if package_filter else None
        errors: Dict[str, str] = {}
        for package in self.get_packages():
            if selected is not None and package.plugin_name.lower() not in selected:
                continue
            try:
                package_errors = package.validate_parameters(params)
            except Exception as exc:
                logger.warning(
                    "ParameterPackageDiscovery.validate_all_parameters: package '%s' "
                    "failed: %s: %s",
                    package.plugin_name,
                    type(exc).__name__,
                    exc,
                )
                continue
            errors.update(package_errors)
        return errors

    # ========================================
    # Introspection
    # ========================================
    def get_package_configuration(self) -> Dict[str, Dict[str, Any]]:
        configuration = {}
        for package in self.get_packages(enabled_only=False):
            info = package.get_info()
            info["origin"] = self.package_registry.origin_of(package.plugin_name)
            configuration[package.plugin_name] = info
        return configuration

    def clear_cache(self) -> None:
        with self._lock:
            self._instances.clear()
        logger.debug("ParameterPackageDiscovery.clear_cache: cleared package instances")


__all__ = ["ParameterPackageDiscovery"]
