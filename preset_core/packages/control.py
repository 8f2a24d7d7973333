#!/usr/bin/env python
#
# Image Presets - Control Parameter Package
# © 2025 Shinichi Morita (shin3tky)
#

"""Validation for control parameters (source, caching, output and naming)."""

import logging
from typing import Any, Dict, List, Optional

from preset_core.duration import DurationParser
from preset_core.schema import CATEGORY_CONTROL, CONTEXT_CACHE, ParameterSet
from preset_core.utils import to_number

from .base import YES_NO_VALUES, BaseParameterPackage, PackageConfig

logger = logging.getLogger(__name__)

OUTPUT_METHODS = ("tag", "url", "url_only", "responsive")
IMAGE_FORMATS = ("bmp", "gif", "jpeg", "jpg", "png", "webp", "avif")
LAZY_METHODS = ("no", "lqip", "dominant_color", "js_lqip", "js_dominant_color", "html5")
URL_ONLY_VALUES = YES_NO_VALUES + ("true", "false")

BOOLEAN_PARAMETERS = (
    "add_dims",
    "add_dimensions",
    "consolidate_class_style",
    "create_tag",
    "disable_browser_checks",
    "exclude_class",
    "exclude_style",
    "hash_filename",
    "overwrite_cache",
    "use_image_path_prefix",
)
FILENAME_PARAMETERS = ("filename", "filename_prefix", "filename_suffix")
STRING_PARAMETERS = (
    "cache_dir",
    "image_path_prefix",
    "attributes",
    "exclude_regex",
    "sizes",
    "srcset",
)

CACHE_CUSTOM = "custom"


class ControlParameterPackage(BaseParameterPackage[PackageConfig]):
    """Owns every control-category parameter plus ``cache_custom`` and ``save_as``.

    ``cache`` accepts seconds, any duration expression understood by
    :class:`DurationParser`, or ``custom`` together with a ``cache_custom``
    expression. The resulting value must be valid for the cache context.
    """

    plugin_name = "control"
    name = "ControlParameterPackage"
    version = "1.0.0"
    category = CATEGORY_CONTROL
    default_priority = 10

    def __init__(self, config: Optional[PackageConfig] = None, **kwargs: Any) -> None:
        super().__init__(config, **kwargs)
        self.duration_parser = DurationParser()

    def owned_parameters(self) -> List[str]:
        owned = self.parameter_registry.get_parameters_by_category(CATEGORY_CONTROL)
        return owned + ["cache_custom", "save_as"]

    def validate_parameters(self, params: ParameterSet) -> Dict[str, str]:
        errors = super().validate_parameters(params)
        if str(params.get("cache", "")).strip().lower() == CACHE_CUSTOM:
            message = self._check_cache_duration(params.get("cache_custom"))
            if message:
                errors["cache_custom"] = message
        # Blank values are skipped above, but an empty src is an error
        src = params.get("src")
        if "src" in params and (src is None or str(src).strip() == ""):
            errors["src"] = "Source image is required"
        return errors

    def validate_parameter(
        self, name: str, value: Any, params: ParameterSet
    ) -> Optional[str]:
        if name == "cache":
            if str(value).strip().lower() == CACHE_CUSTOM:
                return None
            return self._check_cache_duration(value)
        if name == "cache_custom":
            # Checked together with ``cache``
            return None
        if name == "output":
            if str(value).lower() not in OUTPUT_METHODS:
                return "Invalid output method. Valid options: " + ", ".join(OUTPUT_METHODS)
            return None
        if name in ("save_type", "save_as"):
            if str(value).lower() not in IMAGE_FORMATS:
                return "Invalid image format. Valid formats: " + ", ".join(IMAGE_FORMATS)
            return None
        if name == "lazy":
            if str(value).lower() not in LAZY_METHODS:
                return "Invalid lazy loading method. Valid options: " + ", ".join(
                    LAZY_METHODS
                )
            return None
        if name == "url_only":
            if str(value).lower() not in URL_ONLY_VALUES:
                return "Invalid value. Use yes/no, y/n, 1/0, or true/false"
            return None
        if name in BOOLEAN_PARAMETERS:
            if str(value).lower() not in YES_NO_VALUES:
                return f"Invalid value for {name}. Use yes/no, y/n, 1/0"
            return None
        if name in FILENAME_PARAMETERS:
            text = str(value)
            if "/" in text or "\\" in text:
                return f"{name.capitalize()} cannot contain path separators (/ or \\)"
            return None
        if name in STRING_PARAMETERS:
            if not isinstance(value, str):
                return f"{name.capitalize()} must be a string"
            return None
        if name == "palette_size":
            number = to_number(value)
            if number is None or int(number) != number or number < 2:
                return "Palette size must be an integer value of 2 or greater"
            return None
        # connection names are resolved by the host and not checked here
        return None

    def _check_cache_duration(self, value: Any) -> Optional[str]:
        result = self.duration_parser.parse_to_seconds(value)
        if result.error:
            logger.debug(
                "ControlParameterPackage: cache value %r rejected: %s", value, result.error
            )
            return result.error
        check = self.duration_parser.validate_for_context(result.value, CONTEXT_CACHE)
        return None if check.valid else check.error


__all__ = [
    "ControlParameterPackage",
    "OUTPUT_METHODS",
    "IMAGE_FORMATS",
    "LAZY_METHODS",
]
