#!/usr/bin/env python
#
# Image Presets - Transformational Parameter Package
# © 2025 Shinichi Morita (shin3tky)
#

"""Validation for general image transformations (rotation, quality, filters)."""

from typing import Any, List, Optional

from preset_core.schema import CATEGORY_TRANSFORMATIONAL, ParameterSet
from preset_core.utils import is_valid_color, to_number

from .base import BaseParameterPackage, PackageConfig, YES_NO_VALUES

FLIP_VALUES = ("horizontal", "vertical", "both", "h", "v", "hv", "vh")
SCALE_LARGER_VALUES = ("y", "n", "yes", "no")
QUALITY_LOSSLESS = "lossless"

# name -> (low, high, message)
_RANGES = {
    "rotate": (-360, 360, "Rotation must be between -360 and 360 degrees"),
    "quality": (0, 100, 'Quality must be an integer between 0-100 or "lossless"'),
    "png_quality": (0, 9, "PNG quality must be between 0 and 9"),
    "brightness": (-100, 100, "Brightness must be between -100 and +100"),
    "contrast": (-100, 100, "Contrast must be between -100 and +100"),
    "saturation": (-100, 100, "Saturation must be between -100 and +100"),
    "hue": (0, 360, "Hue must be between 0 and 360 degrees"),
    "sharpen": (0, 100, "Sharpen amount must be between 0 and 100"),
}


class TransformationalParameterPackage(BaseParameterPackage[PackageConfig]):
    """Catch-all validator for the transformational category.

    ``crop``, ``text``, ``watermark``, ``border``, ``rounded_corners`` and
    ``reflection`` belong to dedicated packages; the remaining
    transformational parameters, plus the ``background`` alias of
    ``bg_color``, are checked here.
    """

    plugin_name = "transformational"
    name = "TransformationalParameterPackage"
    version = "1.0.0"
    category = CATEGORY_TRANSFORMATIONAL
    default_priority = 30

    def owned_parameters(self) -> List[str]:
        owned = self.parameter_registry.get_parameters_by_package(CATEGORY_TRANSFORMATIONAL)
        return owned + ["background"]

    def validate_parameter(
        self, name: str, value: Any, params: ParameterSet
    ) -> Optional[str]:
        if name == "quality" and str(value).strip().lower() == QUALITY_LOSSLESS:
            return None
        if name in _RANGES:
            low, high, message = _RANGES[name]
            number = to_number(value)
            if number is None or number < low or number > high:
                return message
            return None
        if name in ("bg_color", "background"):
            if not is_valid_color(str(value)):
                return (
                    "Background must be a valid color format "
                    "(hex, rgb, rgba, or transparent)"
                )
            return None
        if name == "allow_scale_larger":
            if str(value).lower() not in SCALE_LARGER_VALUES:
                return "Allow scale larger must be y, n, yes, or no"
            return None
        if name == "flip":
            if str(value).lower() not in FLIP_VALUES:
                return "Flip must be one of: horizontal, vertical, both (or h, v, hv)"
            return None
        if name == "blur":
            number = to_number(value)
            if number is None or number <= 0:
                return "Blur radius must be a positive number"
            return None
        if name == "pixelate":
            number = to_number(value)
            if number is None or int(number) <= 0:
                return "Pixelate size must be a positive integer"
            return None
        if name in ("interlace", "preload"):
            if str(value).lower() not in YES_NO_VALUES:
                return f"Invalid value for {name}. Use yes/no, y/n, 1/0"
            return None
        return None


__all__ = ["TransformationalParameterPackage", "FLIP_VALUES"]
