#!/usr/bin/env python
#
# Image Presets - Custom Exceptions
# © 2025 Shinichi Morita (shin3tky)
#

"""
Custom exception classes for duration parsing and preset handling.

This module provides a hierarchy of exceptions for structured error handling
throughout the preset_core package. The resolver itself never raises to its
callers; these exceptions are raised by the strict helpers (configuration
loading, preset stores, plugin registries) and surfaced by the CLI.

Exception Hierarchy:
    PresetError (base)
    ├── DurationError (unparseable or context-disallowed durations)
    ├── PresetValidationError (parameter/input validation)
    ├── PresetConfigError (configuration errors)
    ├── PresetNotFoundError (unknown preset name or id)
    └── PresetStoreError (preset store read/write failures)
        └── PresetImportError (malformed preset export payloads)

Example:
    >>> try:
    ...     settings = load_resolver_settings("settings.yaml")
    ... except PresetConfigError as e:
    ...     print(format_error_for_user(e, verbose=True))
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .i18n import DEFAULT_LOCALE, get_message


class PresetError(Exception):
    """Base exception for all preset_core errors.

    Attributes:
        message: Human-readable error message.
        filepath: Path to the related file (if applicable).
        original_error: The original exception that was caught (if wrapping).
        context: Additional context information as key-value pairs.

    Example:
        >>> raise PresetError("Something went wrong", context={"step": "merge"})
    """

    def __init__(
        self,
        message: str,
        *,
        filepath: Optional[str] = None,
        original_error: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.filepath = filepath
        self.original_error = original_error
        self.context = context or {}

        full_message = message
        if filepath:
            full_message = f"{message} (file: {filepath})"
        if original_error:
            full_message = (
                f"{full_message}: {type(original_error).__name__}: {original_error}"
            )

        super().__init__(full_message)

    def to_dict(self) -> Dict[str, Any]:
        """Return a serializable summary of the error."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "filepath": self.filepath,
            "original_error": (
                f"{type(self.original_error).__name__}: {self.original_error}"
                if self.original_error
                else None
            ),
            "context": dict(self.context),
        }


class DurationError(PresetError):
    """Exception raised when a duration cannot be parsed or is not allowed.

    Attributes:
        input_value: The duration expression that was rejected.
        duration_context: Usage context the value was checked against.
    """

    def __init__(
        self,
        message: str = "Invalid duration",
        *,
        input_value: Optional[str] = None,
        duration_context: Optional[str] = None,
        original_error: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.input_value = input_value
        self.duration_context = duration_context

        ctx = context.copy() if context else {}
        if input_value is not None:
            ctx["input_value"] = input_value
        if duration_context:
            ctx["duration_context"] = duration_context

        super().__init__(message, original_error=original_error, context=ctx)


class PresetValidationError(PresetError):
    """Exception raised when validation of parameters or inputs fails.

    Attributes:
        parameter_name: Name of the invalid parameter.
        provided_value: The value that was provided.
        expected: Description of what was expected.

    Example:
        >>> raise PresetValidationError(
        ...     "Invalid preset name",
        ...     parameter_name="name",
        ...     provided_value="9lives",
        ...     expected="name starting with a letter",
        ... )
    """

    def __init__(
        self,
        message: str = "Validation failed",
        *,
        filepath: Optional[str] = None,
        original_error: Optional[BaseException] = None,
        parameter_name: Optional[str] = None,
        provided_value: Any = None,
        expected: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.parameter_name = parameter_name
        self.provided_value = provided_value
        self.expected = expected

        ctx = context.copy() if context else {}
        if parameter_name:
            ctx["parameter_name"] = parameter_name
        if provided_value is not None:
            ctx["provided_value"] = repr(provided_value)
        if expected:
            ctx["expected"] = expected

        super().__init__(
            message,
            filepath=filepath,
            original_error=original_error,
            context=ctx,
        )


class PresetConfigError(PresetError):
    """Exception raised when configuration is invalid.

    Used for settings files, preset files and parameter package
    configuration problems.

    Attributes:
        config_key: The configuration key that has an issue.
        plugin_name: Name of the parameter package (if package-related).
    """

    def __init__(
        self,
        message: str = "Configuration error",
        *,
        filepath: Optional[str] = None,
        original_error: Optional[BaseException] = None,
        config_key: Optional[str] = None,
        plugin_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.config_key = config_key
        self.plugin_name = plugin_name

        ctx = context.copy() if context else {}
        if config_key:
            ctx["config_key"] = config_key
        if plugin_name:
            ctx["plugin_name"] = plugin_name

        super().__init__(
            message,
            filepath=filepath,
            original_error=original_error,
            context=ctx,
        )


class PresetNotFoundError(PresetError):
    """Exception raised when a preset lookup by name or id fails."""

    def __init__(
        self,
        message: str = "Preset not found",
        *,
        preset_name: Optional[str] = None,
        preset_id: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.preset_name = preset_name
        self.preset_id = preset_id

        ctx = context.copy() if context else {}
        if preset_name is not None:
            ctx["preset_name"] = preset_name
        if preset_id is not None:
            ctx["preset_id"] = preset_id

        super().__init__(message, context=ctx)


class PresetStoreError(PresetError):
    """Exception raised when a preset store operation fails.

    Attributes:
        preset_name: Name of the preset involved (if any).
    """

    def __init__(
        self,
        message: str = "Preset store error",
        *,
        preset_name: Optional[str] = None,
        filepath: Optional[str] = None,
        original_error: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.preset_name = preset_name

        ctx = context.copy() if context else {}
        if preset_name is not None:
            ctx["preset_name"] = preset_name

        super().__init__(
            message,
            filepath=filepath,
            original_error=original_error,
            context=ctx,
        )


class PresetImportError(PresetStoreError):
    """Exception raised when a preset export payload cannot be imported."""


def format_error_for_user(
    error: PresetError, *, verbose: bool = False, locale: str = DEFAULT_LOCALE
) -> str:
    """Format an error message for CLI display.

    Args:
        error: The PresetError to format.
        verbose: If True, include the error context.
        locale: Locale code for message localization.

    Returns:
        Formatted error message string.
    """
    lines: List[str] = [
        "",
        "=" * 60,
        get_message("ui.error.header", locale=locale, message=error.message),
        "=" * 60,
    ]

    if error.filepath:
        lines.append(
            get_message("ui.error.filepath", locale=locale, filepath=error.filepath)
        )

    if error.original_error:
        lines.append(
            get_message(
                "ui.error.cause",
                locale=locale,
                error_type=type(error.original_error).__name__,
                error_message=error.original_error,
            )
        )

    if verbose and error.context:
        lines.append("")
        lines.append(get_message("ui.error.context", locale=locale))
        for key in sorted(error.context):
            lines.append(f"  {key}: {error.context[key]}")
    elif not verbose:
        lines.extend(["", get_message("ui.error.hint.verbose", locale=locale)])

    lines.append("")
    return "\n".join(lines)


__all__ = [
    "PresetError",
    "DurationError",
    "PresetValidationError",
    "PresetConfigError",
    "PresetNotFoundError",
    "PresetStoreError",
    "PresetImportError",
    "format_error_for_user",
]
