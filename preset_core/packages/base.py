#!/usr/bin/env python
#
# Image Presets - Parameter Package Base Class
# © 2025 Shinichi Morita (shin3tky)
#

"""
Abstract base class for parameter packages.

A parameter package owns a set of parameter names, belongs to a category,
reports a priority and validates the parameters it owns. Validation returns
a mapping of parameter name to error message; an empty mapping means valid.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel

from preset_core.parameter_registry import ParameterRegistry
from preset_core.plugin_contract import (
    forbid_unknown_keys as _forbid_unknown_keys,
    require_config_type,
    require_plugin_name,
)
from preset_core.schema import ParameterSet
from preset_core.utils import is_blank, is_numeric, to_number

ConfigType = TypeVar("ConfigType")

logger = logging.getLogger(__name__)

forbid_unknown_keys = _forbid_unknown_keys

YES_NO_VALUES = ("yes", "no", "y", "n", "1", "0")
DIMENSION_PATTERN = r"^\d+(?:px|%)?$"


@forbid_unknown_keys
class PackageConfig(BaseModel):
    """Per-package settings.

    Attributes:
        enabled: Whether discovery should include the package.
        priority: Overrides the package's default priority when set.
    """

    enabled: bool = True
    priority: Optional[int] = None


class BaseParameterPackage(ABC, Generic[ConfigType]):
    """Abstract base class for parameter validator packages.

    Subclasses set ``plugin_name``, ``category`` and ``default_priority`` and
    implement :meth:`owned_parameters` and :meth:`validate_parameter`.
    Packages are configured with a Pydantic ``ConfigType`` (``PackageConfig``
    by default) and may consult a :class:`ParameterRegistry` to list the
    parameters of their category.

    Attributes:
        plugin_name: Unique identifier used by the registry.
        name: Human-readable name.
        version: Version string of the package.
        category: Parameter category (control, dimensional, transformational).
        default_priority: Priority used unless the config overrides it.
    """

    plugin_name: str = ""
    name: str = "BaseParameterPackage"
    version: str = "1.0.0"
    category: str = ""
    default_priority: int = 100
    ConfigType: Type[BaseModel] = PackageConfig

    def __init__(
        self,
        config: Optional[ConfigType] = None,
        *,
        parameter_registry: Optional[ParameterRegistry] = None,
    ) -> None:
        require_plugin_name(self.__class__, kind="parameter package")

        config_type = require_config_type(self.__class__)
        if config is None:
            config = config_type()
        if not isinstance(config, config_type):
            logger.error(
                "Config instance %s does not match %s for package %s",
                type(config).__name__,
                config_type.__name__,
                self.__class__.__name__,
            )
            raise TypeError(f"config must be an instance of {config_type.__name__}.")
        self.config = config
        self.parameter_registry = parameter_registry or ParameterRegistry()

    # ========================================
    # Capability surface
    # ========================================
    @abstractmethod
    def owned_parameters(self) -> List[str]:
        """Return the parameter names this package validates."""

    def priority(self) -> int:
        override = getattr(self.config, "priority", None)
        return self.default_priority if override is None else override

    @property
    def enabled(self) -> bool:
        return bool(getattr(self.config, "enabled", True))

    def required_parameters(self) -> List[str]:
        return []

    def validate_parameters(self, params: ParameterSet) -> Dict[str, str]:
        """Validate the owned parameters present in ``params``.

        Blank values (see :func:`preset_core.utils.is_blank`) are skipped.
        Errors for parameters that are not owned are never reported.
        """
        errors: Dict[str, str] = {}
        for required in self.required_parameters():
            if is_blank(params.get(required)):
                errors[required] = f"Required parameter '{required}' is missing"

        for param in self.owned_parameters():
            if param in errors or param not in params:
                continue
            value = params[param]
            if is_blank(value):
                continue
            message = self.validate_parameter(param, value, params)
            if message:
                errors[param] = message
        errors.update(self.validate_relationships(params))
        return errors

    def validate_parameter(
        self, name: str, value: Any, params: ParameterSet
    ) -> Optional[str]:
        """Validate one parameter; return an error message or None."""
        return None

    def validate_relationships(self, params: ParameterSet) -> Dict[str, str]:
        """Hook for checks spanning several parameters."""
        return {}

    def get_parameter_documentation(self) -> Dict[str, Optional[str]]:
        return {
            param: self.parameter_registry.get_parameter_documentation_url(param)
            for param in self.owned_parameters()
        }

    def get_info(self) -> Dict[str, Any]:
        """Get information about the package."""
        return {
            "plugin_name": self.plugin_name,
            "name": self.name,
            "version": self.version,
            "category": self.category,
            "priority": self.priority(),
            "enabled": self.enabled,
            "parameters": len(self.owned_parameters()),
            "class": self.__class__.__name__,
        }


# ==========================================
# Shared value checks
# ==========================================
def split_parts(value: Any, separator: str = "|") -> List[str]:
    return [part.strip() for part in str(value).split(separator)]


def part(parts: Sequence[str], index: int) -> str:
    """Return ``parts[index]`` or ``""`` when absent."""
    return parts[index] if index < len(parts) else ""


def check_range(
    value: Any, low: float, high: float, label: str, *, found: bool = False
) -> Optional[str]:
    """Return an error unless ``value`` is numeric and within ``[low, high]``."""
    number = to_number(value)
    if number is None or number < low or number > high:
        message = f"{label} must be a number between {low:g} and {high:g}"
        return f"{message}. Found: {value}" if found else message
    return None


def check_rotation(value: Any, label: str) -> Optional[str]:
    if not is_numeric(value):
        return f"{label} rotation must be a number (degrees). Found: {value}"
    return None


def check_position(value: str, label: str) -> Optional[str]:
    """Validate a ``horizontal,vertical`` keyword position.

    Values without exactly one comma are left to the renderer.
    """
    pieces = [p.strip().lower() for p in value.split(",")]
    if len(pieces) != 2:
        return None
    horizontal, vertical = pieces
    if horizontal not in ("left", "center", "right"):
        return (
            f"{label} horizontal position must be one of: left, center, right. "
            f"Found: {horizontal}"
        )
    if vertical not in ("top", "center", "bottom"):
        return (
            f"{label} vertical position must be one of: top, center, bottom. "
            f"Found: {vertical}"
        )
    return None


def _is_valid_parameter_package(cls: type) -> bool:
    """Check if a class is a concrete parameter package with a plugin_name."""
    if not isinstance(cls, type):
        logger.debug("_is_valid_parameter_package: %r is not a type", cls)
        return False
    if not issubclass(cls, BaseParameterPackage):
        logger.debug(
            "_is_valid_parameter_package: %s does not inherit from BaseParameterPackage",
            cls.__name__,
        )
        return False
    if getattr(cls, "__abstractmethods__", None):
        logger.debug("_is_valid_parameter_package: %s is abstract", cls.__name__)
        return False
    plugin_name = getattr(cls, "plugin_name", "")
    if not isinstance(plugin_name, str) or not plugin_name:
        logger.debug("_is_valid_parameter_package: %s has empty plugin_name", cls.__name__)
        return False
    return True


__all__ = [
    "YES_NO_VALUES",
    "DIMENSION_PATTERN",
    "PackageConfig",
    "BaseParameterPackage",
    "forbid_unknown_keys",
    "split_parts",
    "part",
    "check_range",
    "check_rotation",
    "check_position",
    "_is_valid_parameter_package",
]
