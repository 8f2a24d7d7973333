#!/usr/bin/env python
#
# Image Presets - Preset Debug Service
# © 2025 Shinichi Morita (shin3tky)
#

"""
Debug tracing for preset resolution.

Each resolution opens a session, records its steps (cache lookup, merge,
validation) and closes it with a summary. Events are written to this
module's logger as ``event name + payload`` records; the payload is also
attached to the record as ``record.payload`` for structured handlers.
Sessions live only for the duration of one resolution.
"""

import logging
import threading
import time
import uuid
from typing import Any, Callable, Dict, Mapping, Optional

from .schema import ParameterSet, ResolverSettings

logger = logging.getLogger(__name__)


class PresetDebugService:
    """Record and log the steps of preset resolutions.

    All methods are no-ops while ``settings.debug_enabled`` is False;
    ``start_preset_resolution`` then returns an empty session id.

    Args:
        settings: Supplies ``debug_enabled`` and ``debug_verbose``.
        clock: Monotonic clock in seconds (injectable for tests).
    """

    def __init__(
        self,
        settings: Optional[ResolverSettings] = None,
        *,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        settings = settings or ResolverSettings()
        self.enabled = settings.debug_enabled
        self.verbose = settings.debug_verbose
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: Dict[str, Dict[str, Any]] = {}
        self.last_summary: Optional[Dict[str, Any]] = None

    def _emit(self, event: str, payload: Mapping[str, Any], level: int = logging.DEBUG) -> None:
        logger.log(
            level,
            "PresetDebugService: %s %s",
            event,
            dict(payload),
            extra={"event": event, "payload": dict(payload)},
        )

    # ========================================
    # Sessions
    # ========================================
    def start_preset_resolution(self, preset_name: str, params: ParameterSet) -> str:
        if not self.enabled:
            return ""
        session_id = f"preset_debug_{uuid.uuid4().hex}"
        with self._lock:
            self._sessions[session_id] = {
                "preset_name": preset_name,
                "start_time": self._clock(),
                "tag_parameters": dict(params),
                "steps": [],
                "errors": [],
            }
        self._emit(
            "preset_resolution_start",
            {
                "session_id": session_id,
                "preset_name": preset_name,
                "parameter_count": len(params),
            },
        )
        return session_id

    def log_resolution_step(
        self, session_id: str, step: str, data: Optional[Mapping[str, Any]] = None
    ) -> None:
        if not self.enabled:
            return
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return
            session["steps"].append(
                {"step": step, "timestamp": self._clock(), "data": dict(data or {})}
            )
        self._emit(
            "preset_resolution_step",
            {"session_id": session_id, "step": step, "data": dict(data or {})},
        )

    def log_parameter_merge(
        self,
        session_id: str,
        preset_params: ParameterSet,
        tag_params: ParameterSet,
        merged: ParameterSet,
    ) -> None:
        if not self.enabled:
            return
        analysis = {
            "preset_param_count": len(preset_params),
            "tag_param_count": len(tag_params),
            "merged_param_count": len(merged),
            "overridden_params": [k for k in preset_params if k in tag_params],
            "preset_only_params": [k for k in preset_params if k not in tag_params],
            "tag_only_params": [k for k in tag_params if k not in preset_params],
        }
        self.log_resolution_step(session_id, "parameter_merge", analysis)
        if self.verbose:
            self._emit(
                "preset_merge_detail",
                {
                    "session_id": session_id,
                    "preset_parameters": dict(preset_params),
                    "tag_parameters": dict(tag_params),
                    "merged_parameters": dict(merged),
                },
            )

    def log_validation_result(self, session_id: str, errors: Mapping[str, str]) -> None:
        if not self.enabled:
            return
        passed = not errors
        self.log_resolution_step(
            session_id,
            "validation",
            {"passed": passed, "error_count": len(errors), "errors": dict(errors)},
        )
        if not passed:
            with self._lock:
                session = self._sessions.get(session_id)
                if session is not None:
                    session["errors"].append(
                        {
                            "type": "validation_error",
                            "errors": dict(errors),
                            "timestamp": self._clock(),
                        }
                    )

    def complete_preset_resolution(
        self,
        session_id: str,
        success: bool,
        final_params: Optional[ParameterSet] = None,
    ) -> Optional[Dict[str, Any]]:
        """Close a session and return its summary.

        The session is discarded afterwards. The step timeline is included
        only in verbose mode.
        """
        if not self.enabled:
            return None
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return None

        duration = self._clock() - session["start_time"]
        summary: Dict[str, Any] = {
            "session_id": session_id,
            "preset_name": session["preset_name"],
            "success": success,
            "duration_ms": round(duration * 1000, 2),
            "step_count": len(session["steps"]),
            "error_count": len(session["errors"]),
            "original_params": len(session["tag_parameters"]),
            "final_params": len(final_params or {}),
        }
        if self.verbose:
            summary["timeline"] = [
                {
                    "step": step["step"],
                    "time_ms": round((step["timestamp"] - session["start_time"]) * 1000, 2),
                }
                for step in session["steps"]
            ]
        self.last_summary = summary
        self._emit("preset_resolution_complete", summary, level=logging.INFO)
        return summary

    # ========================================
    # Metrics and errors
    # ========================================
    def log_performance_metrics(self, stats: Mapping[str, Any]) -> None:
        if not self.enabled:
            return
        self._emit("preset_performance_metrics", stats)
        resolutions = stats.get("resolutions", 0)
        if resolutions > 0:
            lookups = stats.get("cache_hits", 0) + stats.get("cache_misses", 0)
            self._emit(
                "preset_performance_analysis",
                {
                    "average_resolution_time": stats.get("total_time", 0.0) / resolutions,
                    "cache_hit_rate": stats.get("cache_hits", 0) / lookups if lookups else 0.0,
                    "total_operations": resolutions,
                    "total_cache_operations": lookups,
                },
            )

    def log_preset_error(
        self,
        error_type: str,
        preset_name: str,
        error: Any,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if not self.enabled:
            return
        details = {
            "type": error_type,
            "preset": preset_name,
            "context": dict(context or {}),
            "message": str(error),
        }
        if isinstance(error, BaseException):
            details["exception"] = type(error).__name__
        self._emit("preset_error", details, level=logging.WARNING)

    def get_debug_statistics(self) -> Dict[str, Any]:
        with self._lock:
            session_ids = list(self._sessions)
        return {
            "debug_enabled": self.enabled,
            "verbose_enabled": self.verbose,
            "active_sessions": len(session_ids),
            "session_ids": session_ids,
        }


__all__ = ["PresetDebugService"]
