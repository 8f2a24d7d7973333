#!/usr/bin/env python
#
# Image Presets - Watermark Parameter Package
# © 2025 Shinichi Morita (shin3tky)
#

"""Validation for ``watermark``: ``source|offset|position|opacity|size|rotation``."""

from typing import Any, List, Optional

from preset_core.schema import CATEGORY_TRANSFORMATIONAL, ParameterSet
from preset_core.utils import is_blank

from .base import (
    BaseParameterPackage,
    PackageConfig,
    check_position,
    check_range,
    check_rotation,
    part,
    split_parts,
)


class WatermarkParameterPackage(BaseParameterPackage[PackageConfig]):
    plugin_name = "watermark"
    name = "WatermarkParameterPackage"
    version = "1.0.0"
    category = CATEGORY_TRANSFORMATIONAL
    default_priority = 22

    def owned_parameters(self) -> List[str]:
        return ["watermark"]

    def validate_parameter(
        self, name: str, value: Any, params: ParameterSet
    ) -> Optional[str]:
        if not str(value).strip():
            return None
        parts = split_parts(value)
        if not parts[0]:
            return (
                "Watermark parameter requires a source image path as the first "
                'value (e.g., "/path/to/watermark.png|...")'
            )

        position = part(parts, 2)
        if not is_blank(position):
            error = check_position(position, "Watermark")
            if error:
                return error

        opacity = part(parts, 3)
        if not is_blank(opacity):
            error = check_range(opacity, 0, 100, "Watermark opacity", found=True)
            if error:
                return error

        rotation = part(parts, 5)
        if not is_blank(rotation):
            return check_rotation(rotation, "Watermark")
        return None


__all__ = ["WatermarkParameterPackage"]
