#!/usr/bin/env python
#
# Image Presets - Border Parameter Package
# © 2025 Shinichi Morita (shin3tky)
#

"""Validation for ``border``: ``width|color``, e.g. ``10px|#000000``."""

import re
from typing import Any, List, Optional

from preset_core.schema import CATEGORY_TRANSFORMATIONAL, ParameterSet
from preset_core.utils import is_hex_color, is_blank

from .base import DIMENSION_PATTERN, BaseParameterPackage, PackageConfig

_WIDTH_RE = re.compile(DIMENSION_PATTERN)
_RGB_RE = re.compile(r"^rgb\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*\)$", re.IGNORECASE)
_RGBA_RE = re.compile(
    r"^rgba\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*,\s*(?:0|1|0?\.\d+)\s*\)$", re.IGNORECASE
)


def is_border_color(color: str) -> bool:
    """Hex (#RGB, #RGBA, #RRGGBB, #RRGGBBAA), rgb() or rgba() with alpha 0..1."""
    return (
        is_hex_color(color.lstrip("#"))
        or bool(_RGB_RE.match(color))
        or bool(_RGBA_RE.match(color))
    )


class BorderParameterPackage(BaseParameterPackage[PackageConfig]):
    plugin_name = "border"
    name = "BorderParameterPackage"
    version = "1.0.0"
    category = CATEGORY_TRANSFORMATIONAL
    default_priority = 24

    def owned_parameters(self) -> List[str]:
        return ["border"]

    def validate_parameter(
        self, name: str, value: Any, params: ParameterSet
    ) -> Optional[str]:
        text = str(value)
        if not text.strip():
            return None
        pieces = text.split("|", 1)
        width = pieces[0].strip()
        if not width:
            return 'Border parameter requires a width value (e.g., "10px|#000000")'
        if not _WIDTH_RE.match(width):
            return (
                'Border width must be a number optionally followed by "px" or "%". '
                f"Found: {width}"
            )

        color = pieces[1].strip() if len(pieces) > 1 else ""
        if not is_blank(color) and not is_border_color(color):
            return (
                "Border color must be a valid hex color (#RGB, #RRGGBB, #RGBA, "
                "#RRGGBBAA), RGB format (rgb(r,g,b)), or RGBA format "
                f"(rgba(r,g,b,a)). Found: {color}"
            )
        return None


__all__ = ["BorderParameterPackage", "is_border_color"]
