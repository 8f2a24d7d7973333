#!/usr/bin/env python
#
# Image Presets - Preset Resolver
# © 2025 Shinichi Morita (shin3tky)
#

"""
Preset resolution: merge a stored preset with call-time parameters.

Resolution flow for ``{"preset": name, ...explicit}``:

1. Look the preset up (resolution cache first, then the preset store).
2. Overlay the explicit parameters on the preset parameters.
3. Validate the merged set with every enabled parameter package.
4. Return the merged set tagged with ``_preset_applied``/``_preset_name``,
   or the caller's original parameters if anything failed.

``resolve_parameters`` never raises. Analytics tracking is best effort and
cannot change the result.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, Mapping, NamedTuple, Optional, Tuple

from .debug import PresetDebugService
from .duration import DurationParser
from .package_discovery import ParameterPackageDiscovery
from .schema import (
    CONTEXT_CACHE,
    DURATION_DISABLED,
    DURATION_FOREVER,
    PRESET_APPLIED_KEY,
    PRESET_NAME_KEY,
    PRESET_PARAMETER,
    ParameterSet,
    ResolverSettings,
)
from .store import PresetStore, UsageTracker
from .utils import is_blank

logger = logging.getLogger(__name__)

CACHE_HIT = "hit"
CACHE_MISS = "miss"


class _CacheEntry(NamedTuple):
    # parameters is None for a preset known to be absent
    parameters: Optional[ParameterSet]
    preset_id: Any
    stored_at: float


def _empty_stats() -> Dict[str, Any]:
    return {"resolutions": 0, "cache_hits": 0, "cache_misses": 0, "total_time": 0.0}


def _preset_fields(preset: Any) -> Tuple[ParameterSet, Any]:
    """Return ``(parameters, id)`` from a :class:`Preset` or a mapping."""
    if isinstance(preset, Mapping):
        return dict(preset.get("parameters") or {}), preset.get("id")
    return dict(preset.parameters), preset.id


class PresetResolver:
    """Resolve preset references in tag parameters.

    Args:
        store: Source of presets (``get_preset(name)``).
        discovery: Parameter package discovery used for validation.
        usage_tracker: Optional analytics sink.
        debug_service: Debug tracer; built from ``settings`` when omitted.
        settings: Resolver settings.
        clock: Monotonic clock in seconds, used for cache expiry.
        timer: High resolution timer in seconds, used for statistics.

    Raises:
        DurationError: If ``settings.cache_ttl`` is not a valid cache
            duration.

    Example:
        >>> store = InMemoryPresetStore()
        >>> store.create_preset("hero", {"width": 100, "quality": 80})
        >>> resolver = PresetResolver(store)
        >>> resolver.resolve_parameters({"preset": "hero", "quality": 90})
        {'width': 100, 'quality': 90, '_preset_applied': True, '_preset_name': 'hero'}
    """

    def __init__(
        self,
        store: PresetStore,
        discovery: Optional[ParameterPackageDiscovery] = None,
        *,
        usage_tracker: Optional[UsageTracker] = None,
        debug_service: Optional[PresetDebugService] = None,
        settings: Optional[ResolverSettings] = None,
        clock: Callable[[], float] = time.monotonic,
        timer: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.settings = settings or ResolverSettings()
        self.store = store
        self.discovery = discovery or ParameterPackageDiscovery(self.settings)
        self.usage_tracker = usage_tracker
        self.debug_service = debug_service or PresetDebugService(self.settings)
        self._clock = clock
        self._timer = timer
        self._lock = threading.Lock()
        self._cache: Dict[str, _CacheEntry] = {}
        # Bumped on invalidation so a fetch racing a store write is not cached
        self._epoch = 0
        self._generations: Dict[str, int] = {}
        self._stats = _empty_stats()
        self._cache_ttl = self._parse_cache_ttl(self.settings.cache_ttl)

        add_listener = getattr(store, "add_listener", None)
        if callable(add_listener):
            add_listener(self.invalidate)
            logger.debug("PresetResolver: subscribed to store change notifications")

    @staticmethod
    def _parse_cache_ttl(value: Any) -> Optional[int]:
        """None means entries never expire."""
        if value is None:
            return None
        seconds = DurationParser().parse_or_raise(value, CONTEXT_CACHE)
        if seconds == DURATION_FOREVER:
            return None
        return seconds

    # ========================================
    # Resolution
    # ========================================
    def resolve_parameters(self, tag_parameters: ParameterSet) -> ParameterSet:
        """Apply the preset named in ``tag_parameters``.

        Returns ``tag_parameters`` itself when there is no preset, when the
        preset does not exist, when the merged set fails validation, or when
        any step raises.
        """
        start = self._timer()
        with self._lock:
            self._stats["resolutions"] += 1

        preset_name = tag_parameters.get(PRESET_PARAMETER)
        if is_blank(preset_name):
            self._finish(start)
            return tag_parameters

        preset_name = str(preset_name)
        session = ""
        try:
            session = self.debug_service.start_preset_resolution(preset_name, tag_parameters)
            result = self._resolve(preset_name, tag_parameters, session, start)
        except Exception as exc:
            logger.error(
                "PresetResolver.resolve_parameters: resolving preset '%s' failed: %s: %s",
                preset_name,
                type(exc).__name__,
                exc,
            )
            self.debug_service.log_preset_error("resolution_error", preset_name, exc)
            self.debug_service.complete_preset_resolution(session, False)
            result = tag_parameters
        self._finish(start)
        return result

    def _resolve(
        self,
        preset_name: str,
        tag_parameters: ParameterSet,
        session: str,
        start: float,
    ) -> ParameterSet:
        debug = self.debug_service
        debug.log_resolution_step(session, "preset_lookup_start")
        entry = self._lookup(preset_name)

        if entry.parameters is None:
            logger.warning("PresetResolver: preset '%s' not found", preset_name)
            debug.log_preset_error("preset_not_found", preset_name, "Preset not found")
            debug.complete_preset_resolution(session, False)
            return tag_parameters

        preset_parameters = entry.parameters
        debug.log_resolution_step(
            session, "preset_loaded", {"param_count": len(preset_parameters)}
        )

        explicit = {k: v for k, v in tag_parameters.items() if k != PRESET_PARAMETER}
        merged = dict(preset_parameters)
        merged.update(explicit)
        debug.log_parameter_merge(session, preset_parameters, explicit, merged)

        debug.log_resolution_step(session, "validation_start")
        errors = self.discovery.validate_all_parameters(merged)
        debug.log_validation_result(session, errors)

        if errors:
            logger.warning(
                "PresetResolver: preset '%s' rejected, validation failed: %s",
                preset_name,
                errors,
            )
            debug.log_preset_error(
                "validation_failed", preset_name, "Parameter validation failed", errors
            )
            self._track_error(
                entry.preset_id,
                "Parameter validation failed: " + ", ".join(errors),
            )
            debug.complete_preset_resolution(session, False)
            return tag_parameters

        merged[PRESET_APPLIED_KEY] = True
        merged[PRESET_NAME_KEY] = preset_name
        debug.log_resolution_step(
            session, "metadata_added", {"preset_applied": True, "preset_name": preset_name}
        )
        self._track_usage(entry.preset_id, (self._timer() - start) * 1000)
        logger.debug(
            "PresetResolver: applied preset '%s' (%d preset parameters)",
            preset_name,
            len(preset_parameters),
        )
        debug.complete_preset_resolution(session, True, merged)
        return merged

    # ========================================
    # Cache
    # ========================================
    def _live_entry(self, name: str) -> Optional[_CacheEntry]:
        """Return the cached entry for ``name`` unless it has expired.

        Caller holds the lock.
        """
        entry = self._cache.get(name)
        if entry is None:
            return None
        if self._cache_ttl is not None and self._clock() - entry.stored_at >= self._cache_ttl:
            del self._cache[name]
            logger.debug("PresetResolver: cache entry for '%s' expired", name)
            return None
        return entry

    def _generation(self, name: str) -> Tuple[int, int]:
        """Caller holds the lock."""
        return self._epoch, self._generations.get(name, 0)

    def _lookup(self, name: str) -> _CacheEntry:
        with self._lock:
            entry = self._live_entry(name)
            if entry is not None:
                self._stats["cache_hits"] += 1
                logger.debug("PresetResolver: cache hit for '%s'", name)
                return entry
            self._stats["cache_misses"] += 1
            generation = self._generation(name)

        # The store is queried outside the lock
        preset = self.store.get_preset(name)
        if preset is None:
            entry = _CacheEntry(None, None, self._clock())
        else:
            parameters, preset_id = _preset_fields(preset)
            entry = _CacheEntry(parameters, preset_id, self._clock())

        if self._cache_ttl != DURATION_DISABLED:
            with self._lock:
                if self._generation(name) == generation:
                    self._cache[name] = entry
                else:
                    logger.debug(
                        "PresetResolver: '%s' changed during lookup, not caching", name
                    )
        logger.debug(
            "PresetResolver: cache miss for '%s' (%s)",
            name,
            "not found" if entry.parameters is None else "loaded",
        )
        return entry

    def clear_cache(self, name: Optional[str] = None) -> None:
        """Clear the whole resolution cache, or only the entry for ``name``."""
        with self._lock:
            if name is None:
                self._cache.clear()
                self._epoch += 1
                self._generations.clear()
            else:
                self._cache.pop(name, None)
                self._generations[name] = self._generations.get(name, 0) + 1
        logger.debug("PresetResolver.clear_cache: %s", name or "all entries")

    def invalidate(self, name: str) -> None:
        """Store change callback: forget the cached entry for ``name``."""
        self.clear_cache(name)

    def get_cache_contents(self) -> Dict[str, Optional[ParameterSet]]:
        with self._lock:
            return {
                name: None if entry.parameters is None else dict(entry.parameters)
                for name, entry in self._cache.items()
            }

    def get_cache_info(self) -> Dict[str, Any]:
        with self._lock:
            keys = sorted(self._cache)
        return {"entries": len(keys), "keys": keys}

    # ========================================
    # Statistics
    # ========================================
    def _finish(self, start: float) -> None:
        elapsed = self._timer() - start
        with self._lock:
            self._stats["total_time"] += elapsed
            due = self._stats["resolutions"] % self.settings.performance_log_interval == 0
        if due:
            self.debug_service.log_performance_metrics(self.get_performance_stats())

    def get_performance_stats(self) -> Dict[str, Any]:
        """Return counters plus average time and cache hit rate (percent)."""
        with self._lock:
            stats = dict(self._stats)
        resolutions = stats["resolutions"]
        lookups = stats["cache_hits"] + stats["cache_misses"]
        stats["average_time"] = stats["total_time"] / resolutions if resolutions else 0.0
        stats["cache_hit_rate"] = stats["cache_hits"] / lookups * 100 if lookups else 0.0
        return stats

    def reset_performance_stats(self) -> None:
        with self._lock:
            self._stats = _empty_stats()

    # ========================================
    # Analytics
    # ========================================
    def _track_usage(self, preset_id: Any, elapsed_ms: float) -> None:
        if self.usage_tracker is None or preset_id is None:
            return
        try:
            self.usage_tracker.track_preset_usage(preset_id, elapsed_ms)
        except Exception as exc:
            logger.warning("PresetResolver: usage tracking failed: %s", exc)

    def _track_error(self, preset_id: Any, message: str) -> None:
        if self.usage_tracker is None or preset_id is None:
            return
        try:
            self.usage_tracker.track_preset_error(preset_id, message)
        except Exception as exc:
            logger.warning("PresetResolver: error tracking failed: %s", exc)

    # ========================================
    # Diagnostics
    # ========================================
    def get_debug_info(self, preset_name: str, tag_parameters: ParameterSet) -> Dict[str, Any]:
        """Describe how ``preset_name`` would merge with ``tag_parameters``.

        Loads the preset through the cache like a real resolution but does
        not validate.
        """
        with self._lock:
            cache_status = CACHE_HIT if self._live_entry(preset_name) else CACHE_MISS

        info: Dict[str, Any] = {
            "preset_name": preset_name,
            "preset_exists": False,
            "preset_parameters": {},
            "tag_parameters": dict(tag_parameters),
            "merged_parameters": {},
            "overridden_parameters": {},
            "unknown_parameters": [],
            "cache_status": cache_status,
        }

        entry = self._lookup(preset_name)
        if entry.parameters is None:
            return info

        explicit = {k: v for k, v in tag_parameters.items() if k != PRESET_PARAMETER}
        merged = dict(entry.parameters)
        merged.update(explicit)
        info["preset_exists"] = True
        info["preset_parameters"] = dict(entry.parameters)
        info["merged_parameters"] = merged
        info["overridden_parameters"] = {
            key: {"preset_value": value, "tag_value": explicit[key]}
            for key, value in entry.parameters.items()
            if key in explicit
        }
        info["unknown_parameters"] = self.discovery.parameter_registry.unknown_parameters(
            merged
        )
        return info


__all__ = ["PresetResolver", "CACHE_HIT", "CACHE_MISS"]
