#!/usr/bin/env python
#
# Image Presets - Schema definitions
# © 2025 Shinichi Morita (shin3tky)
#

"""
Data structures, constants, and type definitions for duration parsing and
preset resolution.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

# ==========================================
# Version
# ==========================================
VERSION = "1.0.0"
PRESET_EXPORT_VERSION = "1.0"

# ==========================================
# Duration Constants
# ==========================================
DURATION_FOREVER = -1
DURATION_DISABLED = 0

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400
SECONDS_PER_WEEK = 604800
SECONDS_PER_MONTH = 2592000  # 30-day month
SECONDS_PER_YEAR = 31536000  # 365-day year

UNIT_SECONDS = {
    "second": 1,
    "minute": SECONDS_PER_MINUTE,
    "hour": SECONDS_PER_HOUR,
    "day": SECONDS_PER_DAY,
    "week": SECONDS_PER_WEEK,
    "month": SECONDS_PER_MONTH,
    "year": SECONDS_PER_YEAR,
}

SPECIAL_DURATIONS = {
    "forever": DURATION_FOREVER,
    "never expire": DURATION_FOREVER,
    "permanent": DURATION_FOREVER,
    "perpetual": DURATION_FOREVER,
    "never": DURATION_DISABLED,
    "disabled": DURATION_DISABLED,
    "no cache": DURATION_DISABLED,
    "no caching": DURATION_DISABLED,
    "off": DURATION_DISABLED,
    "daily": SECONDS_PER_DAY,
    "weekly": SECONDS_PER_WEEK,
    "monthly": SECONDS_PER_MONTH,
}

CONTEXT_CACHE = "cache"
CONTEXT_TIMEOUT = "timeout"
CONTEXT_AUDIT = "audit"
CONTEXT_GENERAL = "general"
DURATION_CONTEXTS = (CONTEXT_CACHE, CONTEXT_TIMEOUT, CONTEXT_AUDIT, CONTEXT_GENERAL)

MAX_TIMEOUT_SECONDS = SECONDS_PER_HOUR
MIN_AUDIT_SECONDS = SECONDS_PER_HOUR

# ==========================================
# Preset Resolution Constants
# ==========================================
PRESET_PARAMETER = "preset"
PRESET_APPLIED_KEY = "_preset_applied"
PRESET_NAME_KEY = "_preset_name"
PRESET_NAME_MAX_LENGTH = 100

DEFAULT_LOCALE = "en"
DEFAULT_PERFORMANCE_LOG_INTERVAL = 10

CATEGORY_CONTROL = "control"
CATEGORY_DIMENSIONAL = "dimensional"
CATEGORY_TRANSFORMATIONAL = "transformational"
PARAMETER_CATEGORIES = (
    CATEGORY_CONTROL,
    CATEGORY_DIMENSIONAL,
    CATEGORY_TRANSFORMATIONAL,
)

ParameterSet = Dict[str, Any]


# ==========================================
# Duration Results
# ==========================================
@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing a duration expression.

    When ``error`` is set, ``value`` is a placeholder (0) and must not be used.

    Attributes:
        value: Duration in seconds (-1 forever, 0 disabled, else positive).
        error: Human-readable parse error, or None on success.
        parsed_from: The original, unmodified input string.
    """

    value: int
    error: Optional[str]
    parsed_from: str

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "error": self.error,
            "parsed_from": self.parsed_from,
        }


@dataclass(frozen=True)
class ContextValidation:
    """Validity of a duration relative to a usage context."""

    valid: bool
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "error": self.error}


@dataclass(frozen=True)
class DurationInput:
    """Result of validating a user-entered duration for a context.

    Attributes:
        value: Accepted duration in seconds (0 when invalid).
        error: Parse or context error message, if any.
        human_readable: Verbose rendering of ``value`` when accepted.
    """

    value: int
    error: Optional[str]
    human_readable: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "error": self.error,
            "human_readable": self.human_readable,
        }


# ==========================================
# Presets
# ==========================================
@dataclass
class Preset:
    """A named bundle of default parameter values.

    Attributes:
        name: Unique preset name.
        parameters: Stored parameter values.
        id: Identifier assigned by the owning store.
        description: Optional free-form description.
    """

    name: str
    parameters: ParameterSet = field(default_factory=dict)
    id: Optional[int] = None
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "parameters": dict(self.parameters),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Preset":
        """Create a preset from a mapping.

        Args:
            data: Mapping with ``name`` and optional ``parameters``,
                ``id`` and ``description`` keys.

        Returns:
            Preset instance.
        """
        parameters = data.get("parameters") or {}
        if not isinstance(parameters, dict):
            raise TypeError(
                f"Preset parameters must be a mapping, got {type(parameters).__name__}"
            )
        return cls(
            name=str(data["name"]),
            parameters=dict(parameters),
            id=data.get("id"),
            description=str(data.get("description") or ""),
        )


# ==========================================
# Resolver Settings
# ==========================================
@dataclass
class ResolverSettings:
    """Runtime settings for the preset resolver and its collaborators.

    Attributes:
        debug_enabled: Record debug sessions for each resolution.
        debug_verbose: Include the step timeline in session summaries.
        locale: Locale for user-facing messages.
        performance_log_interval: Log performance metrics every N resolutions.
        cache_ttl: Resolution cache entry lifetime. Accepts seconds or a
            duration string; None keeps entries until explicitly cleared.
        packages: Per-package overrides keyed by package name, each a mapping
            with optional ``enabled`` and ``priority`` keys.

    Example:
        >>> settings = ResolverSettings(debug_enabled=True, cache_ttl="5 minutes")
    """

    debug_enabled: bool = False
    debug_verbose: bool = False
    locale: str = DEFAULT_LOCALE
    performance_log_interval: int = DEFAULT_PERFORMANCE_LOG_INTERVAL
    cache_ttl: Optional[Union[int, str]] = None
    packages: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.performance_log_interval < 1:
            raise ValueError(
                "performance_log_interval must be >= 1, "
                f"got {self.performance_log_interval}"
            )
        if not isinstance(self.packages, dict):
            raise TypeError("packages must be a mapping of package name to settings")
        for name, overrides in self.packages.items():
            if not isinstance(overrides, dict):
                raise TypeError(f"settings for package '{name}' must be a mapping")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "debug_enabled": self.debug_enabled,
            "debug_verbose": self.debug_verbose,
            "locale": self.locale,
            "performance_log_interval": self.performance_log_interval,
            "cache_ttl": self.cache_ttl,
            "packages": {name: dict(cfg) for name, cfg in self.packages.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResolverSettings":
        """Create settings from a mapping.

        The legacy keys ``preset_debug_enabled`` and
        ``preset_debug_verbose`` are accepted as aliases.

        Args:
            data: Dictionary containing settings values.

        Returns:
            ResolverSettings instance.
        """
        return cls(
            debug_enabled=bool(
                data.get("debug_enabled", data.get("preset_debug_enabled", False))
            ),
            debug_verbose=bool(
                data.get("debug_verbose", data.get("preset_debug_verbose", False))
            ),
            locale=data.get("locale") or DEFAULT_LOCALE,
            performance_log_interval=int(
                data.get("performance_log_interval", DEFAULT_PERFORMANCE_LOG_INTERVAL)
            ),
            cache_ttl=data.get("cache_ttl"),
            packages=dict(data.get("packages") or {}),
        )


__all__ = [
    "VERSION",
    "PRESET_EXPORT_VERSION",
    "DURATION_FOREVER",
    "DURATION_DISABLED",
    "SECONDS_PER_MINUTE",
    "SECONDS_PER_HOUR",
    "SECONDS_PER_DAY",
    "SECONDS_PER_WEEK",
    "SECONDS_PER_MONTH",
    "SECONDS_PER_YEAR",
    "UNIT_SECONDS",
    "SPECIAL_DURATIONS",
    "CONTEXT_CACHE",
    "CONTEXT_TIMEOUT",
    "CONTEXT_AUDIT",
    "CONTEXT_GENERAL",
    "DURATION_CONTEXTS",
    "MAX_TIMEOUT_SECONDS",
    "MIN_AUDIT_SECONDS",
    "PRESET_PARAMETER",
    "PRESET_APPLIED_KEY",
    "PRESET_NAME_KEY",
    "PRESET_NAME_MAX_LENGTH",
    "DEFAULT_LOCALE",
    "DEFAULT_PERFORMANCE_LOG_INTERVAL",
    "CATEGORY_CONTROL",
    "CATEGORY_DIMENSIONAL",
    "CATEGORY_TRANSFORMATIONAL",
    "PARAMETER_CATEGORIES",
    "ParameterSet",
    "ParseResult",
    "ContextValidation",
    "DurationInput",
    "Preset",
    "ResolverSettings",
]
