#!/usr/bin/env python
#
# Image Presets - Rounded Corners Parameter Package
# © 2025 Shinichi Morita (shin3tky)
#

"""
Validation for ``rounded_corners``.

The value is one or more ``corner,radius[,color]`` groups separated by ``|``,
e.g. ``all,20`` or ``tl,10px|br,10px,#ffffff``.
"""

import re
from typing import Any, List, Optional

from preset_core.schema import CATEGORY_TRANSFORMATIONAL, ParameterSet
from preset_core.utils import is_blank, is_hex_color

from .base import DIMENSION_PATTERN, BaseParameterPackage, PackageConfig

CORNERS = ("all", "tl", "tr", "bl", "br")

_RADIUS_RE = re.compile(DIMENSION_PATTERN)
_RGB_RE = re.compile(r"^rgb\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*\)$", re.IGNORECASE)


class RoundedCornersParameterPackage(BaseParameterPackage[PackageConfig]):
    plugin_name = "rounded_corners"
    name = "RoundedCornersParameterPackage"
    version = "1.0.0"
    category = CATEGORY_TRANSFORMATIONAL
    default_priority = 23

    def owned_parameters(self) -> List[str]:
        return ["rounded_corners"]

    def validate_parameter(
        self, name: str, value: Any, params: ParameterSet
    ) -> Optional[str]:
        for group in str(value).split("|"):
            group = group.strip()
            if is_blank(group):
                continue
            error = self._check_group(group)
            if error:
                return error
        return None

    def _check_group(self, group: str) -> Optional[str]:
        pieces = [p.strip() for p in group.split(",")]
        if len(pieces) < 2:
            return (
                'Each rounded corners component must have format "corner,radius" '
                f'(e.g., "all,20"). Found: {group}'
            )
        corner, radius = pieces[0].lower(), pieces[1]
        if corner not in CORNERS:
            return f"Corner identifier must be one of: {', '.join(CORNERS)}. Found: {corner}"
        if not _RADIUS_RE.match(radius):
            return (
                'Radius value must be a number optionally followed by "px" or "%". '
                f"Found: {radius}"
            )
        color = pieces[2] if len(pieces) > 2 else ""
        if not is_blank(color):
            if not is_hex_color(color.lstrip("#"), allow_alpha=False) and not _RGB_RE.match(
                color
            ):
                return (
                    "Corner color must be a valid hex color (#RGB or #RRGGBB) "
                    f"or RGB format. Found: {color}"
                )
        return None


__all__ = ["RoundedCornersParameterPackage", "CORNERS"]
