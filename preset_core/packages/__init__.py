#!/usr/bin/env python
#
# Image Presets - Parameter Packages
# © 2025 Shinichi Morita (shin3tky)
#

"""
Parameter packages: pluggable validators that own groups of parameters.
"""

from .base import (
    BaseParameterPackage,
    PackageConfig,
    _is_valid_parameter_package,
    forbid_unknown_keys,
)
from .border import BorderParameterPackage
from .control import ControlParameterPackage
from .crop import CropParameterPackage
from .dimensional import DimensionalParameterPackage, parse_dimension
from .reflection import ReflectionParameterPackage
from .rounded_corners import RoundedCornersParameterPackage
from .text import TextParameterPackage
from .transformational import TransformationalParameterPackage
from .watermark import WatermarkParameterPackage
from .registry import ParameterPackageRegistry
from .discovery import BUILTIN_PACKAGES, PLUGIN_DIR, PLUGIN_GROUP

__all__ = [
    # Base class
    "BaseParameterPackage",
    "PackageConfig",
    "_is_valid_parameter_package",
    "forbid_unknown_keys",
    # Built-in packages
    "ControlParameterPackage",
    "CropParameterPackage",
    "DimensionalParameterPackage",
    "ReflectionParameterPackage",
    "WatermarkParameterPackage",
    "RoundedCornersParameterPackage",
    "BorderParameterPackage",
    "TextParameterPackage",
    "TransformationalParameterPackage",
    "parse_dimension",
    # Registry
    "ParameterPackageRegistry",
    # Discovery constants
    "BUILTIN_PACKAGES",
    "PLUGIN_DIR",
    "PLUGIN_GROUP",
]
