"""Shared plugin contract helpers for preset_core plugins."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


def require_plugin_name(cls: type[Any], *, kind: str) -> str:
    """Validate and return the plugin name defined on a class.

    Args:
        cls: Class declaring the plugin.
        kind: Human-readable plugin kind (e.g. "parameter package").

    Returns:
        The validated plugin name.

    Raises:
        ValueError: If the plugin name is missing or empty.
    """

    plugin_name = getattr(cls, "plugin_name", "")
    if not isinstance(plugin_name, str) or not plugin_name:
        raise ValueError(
            f"{kind.capitalize()} subclasses must define a non-empty "
            "'plugin_name' string."
        )
    return plugin_name


def require_config_type(cls: type[Any]) -> Any:
    """Fetch the ConfigType declared on a plugin class (if any)."""

    return getattr(cls, "ConfigType", None)


def forbid_unknown_keys(model: type[Any]) -> type[Any]:
    """Force a Pydantic model to reject unknown fields at parse time.

    Usable as a class decorator.

    Raises:
        TypeError: If model is not a Pydantic BaseModel.
    """

    if not isinstance(model, type) or not issubclass(model, BaseModel):
        raise TypeError("Model must inherit from pydantic.BaseModel.")

    merged_config = dict(getattr(model, "model_config", None) or {})
    merged_config["extra"] = "forbid"
    model.model_config = merged_config
    model.model_rebuild(force=True)
    return model


__all__ = [
    "require_plugin_name",
    "require_config_type",
    "forbid_unknown_keys",
]
