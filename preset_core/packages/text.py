#!/usr/bin/env python
#
# Image Presets - Text Overlay Parameter Package
# © 2025 Shinichi Morita (shin3tky)
#

"""
Validation for the ``text`` overlay parameter.

The value is pipe separated; positions that matter here:
0 text, 6 alignment, 8 position, 10 opacity, 13 shadow opacity, 16 rotation.
"""

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

TEXT_ALIGNMENTS = ("left", "center", "right")


class TextParameterPackage(BaseParameterPackage[PackageConfig]):
    plugin_name = "text"
    name = "TextParameterPackage"
    version = "1.0.0"
    category = CATEGORY_TRANSFORMATIONAL
    default_priority = 25

    def owned_parameters(self) -> List[str]:
        return ["text"]

    def validate_parameter(
        self, name: str, value: Any, params: ParameterSet
    ) -> Optional[str]:
        if not str(value).strip():
            return None
        parts = split_parts(value)
        if not parts[0]:
            return (
                "Text parameter requires text content as the first value "
                '(e.g., "Hello World|...")'
            )

        alignment = part(parts, 6)
        if not is_blank(alignment) and alignment.lower() not in TEXT_ALIGNMENTS:
            return (
                "Text alignment must be one of: left, center, right. "
                f"Found: {alignment}"
            )

        position = part(parts, 8)
        if not is_blank(position):
            error = check_position(position, "Text")
            if error:
                return error

        for index, label in ((10, "Text opacity"), (13, "Shadow opacity")):
            opacity = part(parts, index)
            if not is_blank(opacity):
                error = check_range(opacity, 0, 100, label, found=True)
                if error:
                    return error

        rotation = part(parts, 16)
        if not is_blank(rotation):
            return check_rotation(rotation, "Text")
        return None


__all__ = ["TextParameterPackage", "TEXT_ALIGNMENTS"]
