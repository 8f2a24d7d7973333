#!/usr/bin/env python
#
# Image Presets - Parameter Registry
# © 2025 Shinichi Morita (shin3tky)
#

"""Lookup table mapping parameter names to their category and owning package."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .schema import (
    CATEGORY_CONTROL,
    CATEGORY_DIMENSIONAL,
    CATEGORY_TRANSFORMATIONAL,
    PARAMETER_CATEGORIES,
)

logger = logging.getLogger(__name__)

DOCS_BASE_URL = "docs/parameters.md"

CONTROL_PARAMETERS = (
    "src",
    "filename",
    "filename_prefix",
    "filename_suffix",
    "hash_filename",
    "cache",
    "cache_dir",
    "overwrite_cache",
    "connection",
    "debug",
    "output",
    "save_type",
    "url_only",
    "lazy",
    "sizes",
    "srcset",
    "exclude_style",
    "exclude_regex",
    "image_path_prefix",
    "use_image_path_prefix",
    "svg_passthrough",
    "palette_size",
    "add_dims",
    "attributes",
    "add_dimensions",
    "consolidate_class_style",
    "create_tag",
    "disable_browser_checks",
    "exclude_class",
)

DIMENSIONAL_PARAMETERS = (
    "width",
    "height",
    "max",
    "max_width",
    "max_height",
    "min",
    "min_width",
    "min_height",
)

TRANSFORMATIONAL_PARAMETERS = (
    "allow_scale_larger",
    "aspect_ratio",
    "auto_sharpen",
    "bg_color",
    "border",
    "crop",
    "face_crop_margin",
    "face_detect_sensitivity",
    "fallback_src",
    "filter",
    "fit",
    "flip",
    "interlace",
    "png_quality",
    "preload",
    "quality",
    "reflection",
    "rotate",
    "rounded_corners",
    "text",
    "watermark",
    "face_detect_crop_focus",
    "sharpen",
    "contrast",
    "brightness",
    "hue",
    "saturation",
    "lightness",
    "blur",
    "pixelate",
    "emboss",
    "edge_enhance",
    "find_edges",
    "perspective",
    "distort",
    "skew",
    "progressive",
    "strip_meta",
    "optimize",
)

# Parameters owned by a specialised package rather than their category's
# general package.
_PACKAGE_OVERRIDES = {
    "border": "border",
    "crop": "crop",
    "reflection": "reflection",
    "rounded_corners": "rounded_corners",
    "text": "text",
    "watermark": "watermark",
}


@dataclass(frozen=True)
class ParameterDefinition:
    """Registered metadata for one parameter name."""

    name: str
    category: str
    package: str
    doc_url: Optional[str] = None


class ParameterRegistry:
    """Registry of known parameter names.

    Unknown parameters are reported as ``control`` parameters, matching how
    the tag layer treats anything it does not recognise.

    Example:
        >>> registry = ParameterRegistry()
        >>> registry.get_parameter_category("width")
        'dimensional'
        >>> registry.get_parameter_package("watermark")
        'watermark'
    """

    def __init__(self, *, include_builtins: bool = True) -> None:
        self._lock = threading.Lock()
        self._definitions: Dict[str, ParameterDefinition] = {}
        if include_builtins:
            self._register_builtins()

    def _register_builtins(self) -> None:
        groups = (
            (CATEGORY_CONTROL, CONTROL_PARAMETERS),
            (CATEGORY_DIMENSIONAL, DIMENSIONAL_PARAMETERS),
            (CATEGORY_TRANSFORMATIONAL, TRANSFORMATIONAL_PARAMETERS),
        )
        for category, names in groups:
            for name in names:
                self._definitions[name] = ParameterDefinition(
                    name=name,
                    category=category,
                    package=_PACKAGE_OVERRIDES.get(name, category),
                    doc_url=f"{DOCS_BASE_URL}#{name.replace('_', '-')}",
                )

    def register_parameter(
        self,
        name: str,
        category: str,
        package: Optional[str] = None,
        doc_url: Optional[str] = None,
    ) -> ParameterDefinition:
        """Register or replace a parameter definition.

        Raises:
            ValueError: If ``name`` is empty or ``category`` is unknown.
        """
        if not name:
            raise ValueError("Parameter name must be non-empty")
        if category not in PARAMETER_CATEGORIES:
            raise ValueError(
                f"Unknown parameter category '{category}'. "
                f"Available: {', '.join(PARAMETER_CATEGORIES)}"
            )
        definition = ParameterDefinition(
            name=name,
            category=category,
            package=package or category,
            doc_url=doc_url,
        )
        with self._lock:
            if name in self._definitions:
                logger.debug(
                    "ParameterRegistry.register_parameter: replacing definition for '%s'",
                    name,
                )
            self._definitions[name] = definition
        return definition

    def get_parameter_definition(self, name: str) -> Optional[ParameterDefinition]:
        with self._lock:
            return self._definitions.get(name)

    def parameter_exists(self, name: str) -> bool:
        with self._lock:
            return name in self._definitions

    def get_parameter_category(self, name: str) -> str:
        definition = self.get_parameter_definition(name)
        return definition.category if definition else CATEGORY_CONTROL

    def get_parameter_package(self, name: str) -> str:
        definition = self.get_parameter_definition(name)
        return definition.package if definition else CATEGORY_CONTROL

    def get_parameter_documentation_url(self, name: str) -> Optional[str]:
        definition = self.get_parameter_definition(name)
        return definition.doc_url if definition else None

    def get_parameters_by_category(self, category: str) -> List[str]:
        with self._lock:
            return [d.name for d in self._definitions.values() if d.category == category]

    def get_parameters_by_package(self, package: str) -> List[str]:
        with self._lock:
            return [d.name for d in self._definitions.values() if d.package == package]

    def get_all_parameters(self) -> Dict[str, ParameterDefinition]:
        with self._lock:
            return dict(self._definitions)

    def get_categories(self) -> List[str]:
        with self._lock:
            present = {d.category for d in self._definitions.values()}
        return [c for c in PARAMETER_CATEGORIES if c in present]

    def unknown_parameters(self, names: Iterable[str]) -> List[str]:
        """Return the names in ``names`` that are not registered."""
        with self._lock:
            return [n for n in names if n not in self._definitions]


__all__ = [
    "CONTROL_PARAMETERS",
    "DIMENSIONAL_PARAMETERS",
    "TRANSFORMATIONAL_PARAMETERS",
    "ParameterDefinition",
    "ParameterRegistry",
]
