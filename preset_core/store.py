#!/usr/bin/env python
#
# Image Presets - Preset Store and Usage Tracking
# © 2025 Shinichi Morita (shin3tky)
#

"""
Preset persistence and usage analytics.

The resolver depends only on the small :class:`PresetStore` and
:class:`UsageTracker` protocols. :class:`InMemoryPresetStore` and
:class:`InMemoryUsageTracker` are complete implementations used by the CLI
and tests; hosts with a database provide their own.
"""

from __future__ import annotations

import json
import logging
import re
import threading
import time
from datetime import datetime
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)

from .exceptions import (
    PresetImportError,
    PresetNotFoundError,
    PresetStoreError,
    PresetValidationError,
)
from .schema import PRESET_EXPORT_VERSION, PRESET_NAME_MAX_LENGTH, ParameterSet, Preset

logger = logging.getLogger(__name__)

EXPORT_ROOT_KEY = "image_presets_preset"

_NAME_CHARS_RE = re.compile(r"^[A-Za-z0-9_\-]+$")

# Called with the affected preset name after every write
ChangeListener = Callable[[str], None]


@runtime_checkable
class PresetStore(Protocol):
    """Read side of a preset store, as used by the resolver.

    Stores that also provide ``add_listener(callback)`` get their cached
    resolutions invalidated on writes.
    """

    def get_preset(self, name: str) -> Optional[Union[Preset, Mapping[str, Any]]]:
        """Return the preset called ``name`` or None.

        Either a :class:`Preset` or a mapping with ``parameters`` and an
        optional ``id`` key.
        """


@runtime_checkable
class UsageTracker(Protocol):
    def track_preset_usage(self, preset_id: Any, elapsed_ms: Optional[float] = None) -> None:
        ...

    def track_preset_error(self, preset_id: Any, message: str = "") -> None:
        ...


def validate_preset_name(name: str) -> Optional[str]:
    """Return an error message for an invalid preset name, or None.

    Example:
        >>> validate_preset_name("hero_large")
        >>> validate_preset_name("9lives")
        'Preset name must start with a letter'
    """
    if not name:
        return "Preset name is required"
    if len(name) > PRESET_NAME_MAX_LENGTH:
        return f"Preset name cannot exceed {PRESET_NAME_MAX_LENGTH} characters"
    if not _NAME_CHARS_RE.match(name):
        return (
            "Preset name can only contain letters, numbers, underscores, "
            "and hyphens (no spaces)"
        )
    if not name[0].isalpha():
        return "Preset name must start with a letter"
    return None


def _require_valid_name(name: str) -> None:
    error = validate_preset_name(name)
    if error:
        raise PresetValidationError(
            error,
            parameter_name="name",
            provided_value=name,
            expected="letters, digits, '_' or '-', starting with a letter",
        )


class InMemoryPresetStore:
    """Thread-safe preset store held in memory.

    Names are unique; ids are assigned sequentially from 1. Listeners added
    with :meth:`add_listener` are called with the preset name after each
    create, update, delete or import.

    Example:
        >>> store = InMemoryPresetStore()
        >>> store.create_preset("thumb", {"width": 150, "crop": "yes"})
        Preset(name='thumb', parameters={'width': 150, 'crop': 'yes'}, id=1, description='')
    """

    def __init__(self, presets: Optional[List[Preset]] = None) -> None:
        self._lock = threading.RLock()
        self._presets: Dict[str, Preset] = {}
        self._next_id = 1
        self._listeners: List[ChangeListener] = []
        for preset in presets or []:
            self.create_preset(preset.name, preset.parameters, preset.description)

    # ========================================
    # Listeners
    # ========================================
    def add_listener(self, listener: ChangeListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _notify(self, name: str) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(name)
            except Exception as exc:
                logger.warning(
                    "InMemoryPresetStore: change listener %r failed for '%s': %s",
                    listener,
                    name,
                    exc,
                )

    # ========================================
    # Reads
    # ========================================
    def get_preset(self, name: str) -> Optional[Preset]:
        with self._lock:
            return self._presets.get(name)

    def get_preset_by_id(self, preset_id: int) -> Optional[Preset]:
        with self._lock:
            for preset in self._presets.values():
                if preset.id == preset_id:
                    return preset
        return None

    def list_presets(self) -> List[Preset]:
        with self._lock:
            return sorted(self._presets.values(), key=lambda p: p.name)

    def preset_exists(self, name: str) -> bool:
        with self._lock:
            return name in self._presets

    def count(self) -> int:
        with self._lock:
            return len(self._presets)

    # ========================================
    # Writes
    # ========================================
    def create_preset(
        self, name: str, parameters: ParameterSet, description: str = ""
    ) -> Preset:
        """Create a preset.

        Raises:
            PresetValidationError: If the name is invalid.
            PresetStoreError: If a preset with that name already exists.
        """
        _require_valid_name(name)
        with self._lock:
            if name in self._presets:
                raise PresetStoreError(f"Preset '{name}' already exists", preset_name=name)
            preset = Preset(
                name=name,
                parameters=dict(parameters),
                id=self._next_id,
                description=description,
            )
            self._presets[name] = preset
            self._next_id += 1
        logger.info("InMemoryPresetStore: created preset '%s' (id %d)", name, preset.id)
        self._notify(name)
        return preset

    def update_preset(
        self,
        name: str,
        parameters: Optional[ParameterSet] = None,
        description: Optional[str] = None,
        new_name: Optional[str] = None,
    ) -> Preset:
        """Update a preset in place, optionally renaming it.

        Raises:
            PresetNotFoundError: If ``name`` does not exist.
            PresetValidationError: If ``new_name`` is invalid.
            PresetStoreError: If ``new_name`` is already taken.
        """
        if new_name is not None and new_name != name:
            _require_valid_name(new_name)
        with self._lock:
            preset = self._presets.get(name)
            if preset is None:
                raise PresetNotFoundError(f"Preset '{name}' not found", preset_name=name)
            if new_name and new_name != name:
                if new_name in self._presets:
                    raise PresetStoreError(
                        f"Preset '{new_name}' already exists", preset_name=new_name
                    )
                del self._presets[name]
                preset.name = new_name
                self._presets[new_name] = preset
            if parameters is not None:
                preset.parameters = dict(parameters)
            if description is not None:
                preset.description = description
        logger.info("InMemoryPresetStore: updated preset '%s'", name)
        self._notify(name)
        if new_name and new_name != name:
            self._notify(new_name)
        return preset

    def delete_preset(self, name: str) -> bool:
        """Delete a preset. Returns False if it did not exist."""
        with self._lock:
            removed = self._presets.pop(name, None)
        if removed is None:
            return False
        logger.info("InMemoryPresetStore: deleted preset '%s'", name)
        self._notify(name)
        return True

    def duplicate_preset(
        self, preset_id: int, new_name: str, description: str = ""
    ) -> Preset:
        """Copy a preset's parameters under a new name.

        The original description is reused when ``description`` is empty.

        Raises:
            PresetNotFoundError: If ``preset_id`` does not exist.
        """
        original = self.get_preset_by_id(preset_id)
        if original is None:
            raise PresetNotFoundError(
                "Original preset not found", preset_id=preset_id
            )
        return self.create_preset(
            new_name, original.parameters, description or original.description
        )

    # ========================================
    # Export / import
    # ========================================
    def export_preset(self, preset_id: int) -> str:
        """Serialize a preset to the JSON export format.

        Raises:
            PresetNotFoundError: If ``preset_id`` does not exist.
        """
        preset = self.get_preset_by_id(preset_id)
        if preset is None:
            raise PresetNotFoundError("Preset not found", preset_id=preset_id)
        payload = {
            EXPORT_ROOT_KEY: {
                "version": PRESET_EXPORT_VERSION,
                "export_date": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
                "preset": {
                    "name": preset.name,
                    "description": preset.description,
                    "parameters": preset.parameters,
                },
            }
        }
        return json.dumps(payload, indent=4)

    def import_preset(self, json_data: str, *, overwrite: bool = False) -> Preset:
        """Import a preset from the JSON export format.

        An existing preset with the same name is replaced when ``overwrite``
        is set; otherwise the import is renamed to ``<name>_<n>`` using the
        first free suffix.

        Raises:
            PresetImportError: If the payload is not valid JSON or lacks the
                preset data.
        """
        try:
            data = json.loads(json_data)
        except json.JSONDecodeError as exc:
            raise PresetImportError("Invalid JSON data", original_error=exc) from exc

        try:
            preset_data = data[EXPORT_ROOT_KEY]["preset"]
            name = str(preset_data["name"])
        except (KeyError, TypeError) as exc:
            raise PresetImportError(
                "Invalid preset format - missing preset data", original_error=exc
            ) from exc

        parameters = preset_data.get("parameters") or {}
        if not isinstance(parameters, dict):
            raise PresetImportError(
                "Invalid preset format - parameters must be a mapping", preset_name=name
            )
        description = str(preset_data.get("description") or "")

        with self._lock:
            if name in self._presets:
                if overwrite:
                    logger.info("InMemoryPresetStore: import overwrites preset '%s'", name)
                    return self.update_preset(name, parameters, description)
                base, counter = name, 1
                while f"{base}_{counter}" in self._presets:
                    counter += 1
                name = f"{base}_{counter}"
                logger.info(
                    "InMemoryPresetStore: import renamed '%s' to '%s'", base, name
                )
            return self.create_preset(name, parameters, description)


class InMemoryUsageTracker:
    """Usage and error counters per preset id."""

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._stats: Dict[Any, Dict[str, Any]] = {}

    @staticmethod
    def _new_entry() -> Dict[str, Any]:
        return {
            "usage_count": 0,
            "error_count": 0,
            "total_time_ms": 0.0,
            "timed_uses": 0,
            "last_used": None,
            "last_error": None,
            "last_error_message": None,
        }

    def _entry(self, preset_id: Any) -> Dict[str, Any]:
        return self._stats.setdefault(preset_id, self._new_entry())

    def track_preset_usage(self, preset_id: Any, elapsed_ms: Optional[float] = None) -> None:
        with self._lock:
            entry = self._entry(preset_id)
            entry["usage_count"] += 1
            entry["last_used"] = self._clock()
            if elapsed_ms is not None:
                entry["total_time_ms"] += elapsed_ms
                entry["timed_uses"] += 1

    def track_preset_error(self, preset_id: Any, message: str = "") -> None:
        with self._lock:
            entry = self._entry(preset_id)
            entry["error_count"] += 1
            entry["last_error"] = self._clock()
            entry["last_error_message"] = message or None
        if message:
            logger.debug("InMemoryUsageTracker: preset %s error: %s", preset_id, message)

    def get_preset_analytics(self, preset_id: Any) -> Dict[str, Any]:
        """Return usage statistics for ``preset_id`` (zeros when unused)."""
        with self._lock:
            entry = dict(self._stats.get(preset_id) or self._new_entry())
        timed = entry.pop("timed_uses")
        entry["preset_id"] = preset_id
        entry["average_time_ms"] = entry["total_time_ms"] / timed if timed else 0.0
        return entry

    def reset(self, preset_id: Any) -> None:
        with self._lock:
            self._stats.pop(preset_id, None)


__all__ = [
    "EXPORT_ROOT_KEY",
    "PresetStore",
    "UsageTracker",
    "validate_preset_name",
    "InMemoryPresetStore",
    "InMemoryUsageTracker",
]
