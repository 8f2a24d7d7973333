"""Internationalization helpers for preset_core.

Message templates live in ``preset_core/locales/<locale>/messages.yaml`` and
are rendered with a small ICU-style formatter: ``{count, plural, one {...}
other {...}}`` blocks pick a branch by count, ``#`` inside a branch is the
count, and unknown ``{placeholders}`` are left untouched.
"""

from __future__ import annotations

import re
from functools import lru_cache
from importlib import resources
from numbers import Number
from string import Template
from typing import Any, Dict, Mapping

import yaml

from .schema import DEFAULT_LOCALE

_LOCALES_PACKAGE = "preset_core.locales"
_NO_PLURAL_LANGUAGES = frozenset({"ja", "ko", "zh"})


class _SafeDict(dict):
    """Dictionary that leaves unknown format keys untouched."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def _normalize_locale(locale: str | None) -> str:
    normalized = (locale or DEFAULT_LOCALE).strip().replace("_", "-").lower()
    return normalized or DEFAULT_LOCALE


def _candidate_locales(locale: str) -> list[str]:
    normalized = _normalize_locale(locale)
    language = normalized.split("-")[0]

    candidates = [normalized]
    if language not in candidates:
        candidates.append(language)
    if DEFAULT_LOCALE not in candidates:
        candidates.append(DEFAULT_LOCALE)
    return candidates


def _flatten_messages(node: Mapping[str, Any], prefix: str = "") -> Dict[str, str]:
    flat: Dict[str, str] = {}
    for key, value in node.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(_flatten_messages(value, prefix=full_key))
        else:
            flat[full_key] = str(value)
    return flat


@lru_cache(maxsize=None)
def _load_catalog(locale: str) -> Dict[str, str]:
    """Load and flatten the locale catalog (empty when missing or malformed)."""
    try:
        base = resources.files(_LOCALES_PACKAGE)
    except ModuleNotFoundError:
        return {}

    path = base.joinpath(locale, "messages.yaml")
    if not path.is_file():
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError:
        return {}
    if not isinstance(data, Mapping):
        return {}
    return _flatten_messages(data)


def _coerce_number(value: Any) -> Number | None:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, Number):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except (TypeError, ValueError):
        pass
    try:
        return float(text)
    except (TypeError, ValueError):
        return None


def _plural_category(locale: str, count: Number) -> str:
    language = _normalize_locale(locale).split("-")[0]
    if language in _NO_PLURAL_LANGUAGES:
        return "other"
    return "one" if count == 1 else "other"


def _extract_braced(text: str, start_index: int) -> tuple[str, int] | None:
    """Extract content within balanced braces starting at start_index."""
    if start_index >= len(text) or text[start_index] != "{":
        return None

    depth = 0
    for idx in range(start_index, len(text)):
        char = text[idx]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start_index + 1 : idx], idx
    return None


def _parse_plural_options(source: str) -> Dict[str, str]:
    options: Dict[str, str] = {}
    cursor = 0
    while cursor < len(source):
        while cursor < len(source) and source[cursor].isspace():
            cursor += 1
        if cursor >= len(source):
            break

        key_match = re.match(r"[a-zA-Z0-9_=]+", source[cursor:])
        if not key_match:
            break

        key = key_match.group(0)
        cursor += len(key)
        while cursor < len(source) and source[cursor].isspace():
            cursor += 1

        extracted = _extract_braced(source, cursor)
        if not extracted:
            break

        value, cursor = extracted
        cursor += 1  # past closing brace
        options[key] = value
    return options


def _parse_plural_block(
    template: str, index: int, params: Mapping[str, Any], locale: str
) -> tuple[str, int] | None:
    parsed = _extract_braced(template, index)
    if not parsed:
        return None

    content, end_index = parsed
    parts = [part.strip() for part in content.split(",", 2)]
    if len(parts) < 2 or parts[1] != "plural":
        return None

    options = _parse_plural_options(parts[2] if len(parts) == 3 else "")
    if not options:
        return None

    raw_count = params.get(parts[0])
    count = _coerce_number(raw_count)
    if count is None:
        selected = options.get("other")
    else:
        explicit_key = f"={count}"
        if explicit_key in options:
            selected = options[explicit_key]
        else:
            category = _plural_category(locale, count)
            selected = options.get(category) or options.get("other")

    if selected is None:
        return None

    shown = "" if raw_count is None else str(raw_count)
    return selected.replace("#", shown), end_index


def _render_plurals(template: str, params: Mapping[str, Any], locale: str) -> str:
    rendered = []
    index = 0
    while index < len(template):
        if template[index] == "{":
            parsed = _parse_plural_block(template, index, params, locale)
            if parsed:
                replacement, end_index = parsed
                rendered.append(replacement)
                index = end_index + 1
                continue
        rendered.append(template[index])
        index += 1
    return "".join(rendered)


def _format_template(template: str, params: Mapping[str, Any], locale: str) -> str:
    rendered = _render_plurals(template, params, locale)
    try:
        return rendered.format_map(_SafeDict(params))
    except (ValueError, IndexError, AttributeError, KeyError):
        return Template(rendered).safe_substitute(**params)


def has_message(key: str, *, locale: str = DEFAULT_LOCALE) -> bool:
    """Return True if ``key`` is defined for ``locale`` or a fallback locale."""
    return any(key in _load_catalog(c) for c in _candidate_locales(locale))


def get_message(
    key: str,
    *,
    locale: str = DEFAULT_LOCALE,
    params: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> str:
    """Retrieve a localized message by key with ICU-style formatting.

    Falls back through ``<lang>-<region>``, ``<lang>`` and the default
    locale; an unknown key renders as the key itself.
    """

    merged_params: Dict[str, Any] = {}
    if params:
        merged_params.update(params)
    merged_params.update(kwargs)

    template: str | None = None
    for candidate in _candidate_locales(locale):
        catalog = _load_catalog(candidate)
        if key in catalog:
            template = catalog[key]
            break

    if template is None:
        template = key

    return _format_template(template, merged_params, locale)


__all__ = ["DEFAULT_LOCALE", "get_message", "has_message"]
