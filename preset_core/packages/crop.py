#!/usr/bin/env python
#
# Image Presets - Crop Parameter Package
# © 2025 Shinichi Morita (shin3tky)
#

"""
Validation for the ``crop`` parameter.

Format: ``mode|position|offset|smart_scale``, e.g. ``yes|center,top|0,10px|yes``.
Only the mode is required; ``no`` and ``none`` disable cropping.
"""

import re
from typing import Any, List, Optional

from preset_core.schema import CATEGORY_TRANSFORMATIONAL, ParameterSet

from .base import BaseParameterPackage, PackageConfig, part, split_parts

CROP_MODES = ("yes", "y", "no", "n", "face_detect")
HORIZONTAL_POSITIONS = ("left", "center", "right", "face_detect")
VERTICAL_POSITIONS = ("top", "center", "bottom", "face_detect")
SINGLE_POSITIONS = ("left", "center", "right", "top", "bottom", "face_detect")
SMART_SCALE_VALUES = ("yes", "no", "y", "n")

_OFFSET_RE = re.compile(r"^-?\d+(?:\.\d+)?(?:px|%)?$", re.IGNORECASE)
_OFFSET_HINT = "Must be a number, optionally followed by 'px' or '%' (e.g., '10', '-5px', '2%')"


def _is_valid_offset(value: str) -> bool:
    return value in ("", "0") or bool(_OFFSET_RE.match(value))


def _check_crop_position(position: str) -> Optional[str]:
    if "," not in position:
        if position.lower() not in SINGLE_POSITIONS:
            return (
                f"Invalid crop position '{position}'. Must be 'left', 'center', "
                "'right', 'top', 'bottom', or 'face_detect'"
            )
        return None

    pieces = position.split(",")
    if len(pieces) != 2:
        return (
            f"Invalid crop position format '{position}'. "
            "Must be 'horizontal,vertical' (e.g., 'center,center')"
        )
    horizontal, vertical = (p.strip() for p in pieces)
    if horizontal.lower() not in HORIZONTAL_POSITIONS:
        return (
            f"Invalid horizontal crop position '{horizontal}'. "
            "Must be 'left', 'center', 'right', or 'face_detect'"
        )
    if vertical.lower() not in VERTICAL_POSITIONS:
        return (
            f"Invalid vertical crop position '{vertical}'. "
            "Must be 'top', 'center', 'bottom', or 'face_detect'"
        )
    return None


def _check_crop_offset(offset: str) -> Optional[str]:
    if "," not in offset:
        if not _is_valid_offset(offset):
            return f"Invalid crop offset '{offset}'. {_OFFSET_HINT}"
        return None

    pieces = offset.split(",")
    if len(pieces) != 2:
        return (
            f"Invalid crop offset format '{offset}'. "
            "Must be 'horizontal,vertical' (e.g., '0,0' or '10px,-5px')"
        )
    for axis, piece in zip(("horizontal", "vertical"), pieces):
        piece = piece.strip()
        if not _is_valid_offset(piece):
            return f"Invalid {axis} crop offset '{piece}'. {_OFFSET_HINT}"
    return None


class CropParameterPackage(BaseParameterPackage[PackageConfig]):
    plugin_name = "crop"
    name = "CropParameterPackage"
    version = "1.0.0"
    category = CATEGORY_TRANSFORMATIONAL
    default_priority = 19

    def owned_parameters(self) -> List[str]:
        return ["crop"]

    def validate_parameter(
        self, name: str, value: Any, params: ParameterSet
    ) -> Optional[str]:
        text = str(value).strip()
        if text.lower() in ("no", "none"):
            return None

        parts = split_parts(text)
        mode = parts[0].lower()
        if mode not in CROP_MODES:
            return (
                f"Invalid crop mode '{parts[0]}'. "
                "Must be 'yes', 'no', or 'face_detect'"
            )
        if mode in ("no", "n"):
            return None

        position = part(parts, 1)
        if position:
            error = _check_crop_position(position)
            if error:
                return error

        offset = part(parts, 2)
        if offset:
            error = _check_crop_offset(offset)
            if error:
                return error

        smart_scale = part(parts, 3)
        if smart_scale and smart_scale.lower() not in SMART_SCALE_VALUES:
            return (
                f"Invalid smart scaling value '{smart_scale}'. "
                "Must be 'yes' or 'no'"
            )
        return None


__all__ = ["CropParameterPackage", "CROP_MODES"]
