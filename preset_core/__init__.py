#!/usr/bin/env python
#
# Image Presets - Core Package
# © 2025 Shinichi Morita (shin3tky)
#

"""
Image preset core library.

This package provides:
- duration: Natural-language duration parsing, formatting and context checks
- resolver: Preset resolution (cache, merge, validation, fallback)
- packages: Parameter validation packages and their registry
- package_discovery: Instance-level access to the enabled packages
- parameter_registry: Parameter name to category/package lookup
- debug: Resolution tracing
- store: Preset store and usage tracking
- config_io: Settings and preset file loading

Logging:
    This library uses Python's standard logging module. By default, a NullHandler
    is attached to prevent "No handler found" warnings. To see log output, configure
    logging in your application:

    Example:
        >>> import logging
        >>> logging.basicConfig(level=logging.DEBUG)

    Or attach a handler to the 'preset_core' logger:

        >>> import logging
        >>> logger = logging.getLogger('preset_core')
        >>> logger.addHandler(logging.StreamHandler())
        >>> logger.setLevel(logging.DEBUG)
"""

import logging

_logger = logging.getLogger(__name__)
_logger.addHandler(logging.NullHandler())

from .schema import (
    VERSION,
    DURATION_FOREVER,
    DURATION_DISABLED,
    CONTEXT_CACHE,
    CONTEXT_TIMEOUT,
    CONTEXT_AUDIT,
    CONTEXT_GENERAL,
    PRESET_APPLIED_KEY,
    PRESET_NAME_KEY,
    ParseResult,
    ContextValidation,
    DurationInput,
    Preset,
    ResolverSettings,
)
from .exceptions import (
    PresetError,
    DurationError,
    PresetValidationError,
    PresetConfigError,
    PresetNotFoundError,
    PresetStoreError,
    PresetImportError,
    format_error_for_user,
)
from .duration import (
    DurationParser,
    parse_to_seconds,
    format_duration,
    validate_for_context,
)
from .parameter_registry import ParameterDefinition, ParameterRegistry
from .packages import BaseParameterPackage, PackageConfig, ParameterPackageRegistry
from .package_discovery import ParameterPackageDiscovery
from .debug import PresetDebugService
from .store import (
    PresetStore,
    UsageTracker,
    InMemoryPresetStore,
    InMemoryUsageTracker,
    validate_preset_name,
)
from .resolver import PresetResolver
from .config_io import load_resolver_settings, load_presets

__version__ = VERSION

__all__ = [
    "VERSION",
    "__version__",
    # Schema
    "DURATION_FOREVER",
    "DURATION_DISABLED",
    "CONTEXT_CACHE",
    "CONTEXT_TIMEOUT",
    "CONTEXT_AUDIT",
    "CONTEXT_GENERAL",
    "PRESET_APPLIED_KEY",
    "PRESET_NAME_KEY",
    "ParseResult",
    "ContextValidation",
    "DurationInput",
    "Preset",
    "ResolverSettings",
    # Exceptions
    "PresetError",
    "DurationError",
    "PresetValidationError",
    "PresetConfigError",
    "PresetNotFoundError",
    "PresetStoreError",
    "PresetImportError",
    "format_error_for_user",
    # Durations
    "DurationParser",
    "parse_to_seconds",
    "format_duration",
    "validate_for_context",
    # Parameters and packages
    "ParameterDefinition",
    "ParameterRegistry",
    "BaseParameterPackage",
    "PackageConfig",
    "ParameterPackageRegistry",
    "ParameterPackageDiscovery",
    # Resolution
    "PresetDebugService",
    "PresetStore",
    "UsageTracker",
    "InMemoryPresetStore",
    "InMemoryUsageTracker",
    "validate_preset_name",
    "PresetResolver",
    # Config
    "load_resolver_settings",
    "load_presets",
]
