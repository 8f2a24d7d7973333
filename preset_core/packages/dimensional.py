#!/usr/bin/env python
#
# Image Presets - Dimensional Parameter Package
# © 2025 Shinichi Morita (shin3tky)
#

"""Validation for width, height and their min/max bounds."""

import re
from typing import Any, Dict, List, NamedTuple, Optional

from preset_core.schema import CATEGORY_DIMENSIONAL, ParameterSet
from preset_core.utils import is_blank, to_number

from .base import BaseParameterPackage, PackageConfig

MAX_DIMENSION = 10000
MAX_PERCENT = 1000

_LENGTH_UNIT_RE = re.compile(
    r"(?:px|pt|em|rem|pc|in|cm|mm|ex|ch|vw|vh|vmin|vmax)$", re.IGNORECASE
)

# (min parameter, max parameter, label)
_BOUNDS = (
    ("min_width", "max_width", "width"),
    ("min_height", "max_height", "height"),
    ("min", "max", "size"),
)


class Dimension(NamedTuple):
    value: int
    percent: bool = False


def parse_dimension(value: Any) -> Optional[Dimension]:
    """Parse ``"300"``, ``"300px"`` or ``"50%"``.

    Absolute sizes must be whole numbers from 1 to 10000; CSS length units are
    accepted and dropped. Percentages range over 1..1000.

    Returns:
        The parsed dimension, or None when the value is not a valid size.

    Example:
        >>> parse_dimension("250px")
        Dimension(value=250, percent=False)
    """
    if isinstance(value, bool):
        return None
    text = str(value).strip()
    percent = text.endswith("%")
    if percent:
        text = text[:-1].strip()
    else:
        text = _LENGTH_UNIT_RE.sub("", text).strip()

    number = to_number(text)
    if number is None or int(number) != number:
        return None
    number = int(number)
    upper = MAX_PERCENT if percent else MAX_DIMENSION
    if number < 1 or number > upper:
        return None
    return Dimension(number, percent)


class DimensionalParameterPackage(BaseParameterPackage[PackageConfig]):
    plugin_name = "dimensional"
    name = "DimensionalParameterPackage"
    version = "1.0.0"
    category = CATEGORY_DIMENSIONAL
    default_priority = 20

    def owned_parameters(self) -> List[str]:
        return self.parameter_registry.get_parameters_by_category(CATEGORY_DIMENSIONAL)

    def validate_parameter(
        self, name: str, value: Any, params: ParameterSet
    ) -> Optional[str]:
        if parse_dimension(value) is None:
            return f"'{name}' must be a positive integer (got: {value})"
        return None

    def validate_relationships(self, params: ParameterSet) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        for low_name, high_name, label in _BOUNDS:
            if is_blank(params.get(low_name)) or is_blank(params.get(high_name)):
                continue
            low = parse_dimension(params[low_name])
            high = parse_dimension(params[high_name])
            # Percentages depend on the source image and are not compared
            if low is None or high is None or low.percent or high.percent:
                continue
            if low.value > high.value:
                errors[low_name] = (
                    f"Minimum {label} ({low.value}) cannot be greater than "
                    f"maximum {label} ({high.value})"
                )
        return errors


__all__ = ["Dimension", "parse_dimension", "DimensionalParameterPackage"]
