#!/usr/bin/env python
#
# Image Presets - Reflection Parameter Package
# © 2025 Shinichi Morita (shin3tky)
#

"""Validation for ``reflection``: ``gap,start_opacity,end_opacity,height``."""

import re
from typing import Any, List, Optional

from preset_core.schema import CATEGORY_TRANSFORMATIONAL, ParameterSet
from preset_core.utils import is_blank

from .base import DIMENSION_PATTERN, BaseParameterPackage, PackageConfig, check_range

_GAP_RE = re.compile(r"^\d+(?:px)?$")
_HEIGHT_RE = re.compile(DIMENSION_PATTERN)


class ReflectionParameterPackage(BaseParameterPackage[PackageConfig]):
    plugin_name = "reflection"
    name = "ReflectionParameterPackage"
    version = "1.0.0"
    category = CATEGORY_TRANSFORMATIONAL
    default_priority = 21

    def owned_parameters(self) -> List[str]:
        return ["reflection"]

    def validate_parameter(
        self, name: str, value: Any, params: ParameterSet
    ) -> Optional[str]:
        text = str(value)
        if not text.strip():
            return None
        parts = [p.strip() for p in text.split(",", 3)]
        gap = parts[0]
        if not gap:
            return 'Reflection parameter requires a gap value (e.g., "0,80,0,50%")'
        if not _GAP_RE.match(gap):
            return f'Reflection gap must be a number optionally followed by "px". Found: {gap}'

        labels = ("Reflection start opacity", "Reflection end opacity")
        for label, opacity in zip(labels, parts[1:3]):
            if not is_blank(opacity):
                error = check_range(opacity, 0, 100, label, found=True)
                if error:
                    return error

        height = parts[3] if len(parts) > 3 else ""
        if not is_blank(height) and not _HEIGHT_RE.match(height):
            return (
                'Reflection height must be a number optionally followed by "px" '
                f'or "%". Found: {height}'
            )
        return None


__all__ = ["ReflectionParameterPackage"]
