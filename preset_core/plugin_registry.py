#!/usr/bin/env python
#
# Image Presets - Plugin Registry Constants
# © 2025 Shinichi Morita (shin3tky)

"""Shared constants for plugin registry kinds."""

_PLUGIN_KIND_GENERIC = "plugin"
_PLUGIN_KIND_PARAMETER_PACKAGE = "parameter package"


__all__ = [
    "_PLUGIN_KIND_GENERIC",
    "_PLUGIN_KIND_PARAMETER_PACKAGE",
]
