"""Chunk option parsing for fenced code blocks."""

from __future__ import annotations

import re
from dataclasses import fields, replace
from typing import Any, Dict, List, Mapping, Tuple

import yaml

from ..models import ChunkOptions

RESULTS_MODES: tuple[str, ...] = ("markup", "hidden", "raw")

_OPTION_NAMES = {item.name for item in fields(ChunkOptions)}
_BOOL_OPTIONS = {"echo", "eval", "error", "fig"}
_INFO_PATTERN = re.compile(r"^([A-Za-z0-9_+.-]*)\s*[;,]?\s*(.*)$", re.DOTALL)


class ChunkOptionError(ValueError):
    """Raised when a chunk header carries an unknown or malformed option."""


def parse_info(info: str) -> Tuple[str, str]:
    """Split a fence info string into ``(language, option text)``.

    Accepts ``python; echo=false`` as well as ``{python; echo=false}``.
    """
    text = info.strip()
    if text.startswith("{") and text.endswith("}"):
        text = text[1:-1].strip()
    match = _INFO_PATTERN.match(text)
    if match is None:
        return "", text
    return match.group(1).lower(), match.group(2).strip()


def split_options(text: str) -> Dict[str, Any]:
    """Parse ``key=value`` pairs separated by commas; values are YAML scalars."""
    options: Dict[str, Any] = {}
    for part in _split_top_level(text):
        if "=" not in part:
            raise ChunkOptionError(f"Expected key=value in chunk options, got {part!r}")
        key, raw_value = part.split("=", 1)
        key = key.strip()
        raw_value = raw_value.strip()
        try:
            value = yaml.safe_load(raw_value) if raw_value else None
        except yaml.YAMLError as exc:
            raise ChunkOptionError(f"Invalid value for chunk option {key!r}: {raw_value}") from exc
        options[key] = value
    return options


def build_options(overrides: Mapping[str, Any], base: ChunkOptions | None = None) -> ChunkOptions:
    """Return ``base`` with ``overrides`` applied after validation."""
    base = base or ChunkOptions()
    unknown = sorted(set(overrides) - _OPTION_NAMES)
    if unknown:
        raise ChunkOptionError(f"Unknown chunk option(s): {', '.join(unknown)}")

    values: Dict[str, Any] = {}
    for key, value in overrides.items():
        if key in _BOOL_OPTIONS:
            if not isinstance(value, bool):
                raise ChunkOptionError(f"Chunk option {key!r} must be true or false")
            values[key] = value
        elif key == "results":
            mode = str(value).lower()
            if mode not in RESULTS_MODES:
                raise ChunkOptionError(
                    f"Chunk option 'results' must be one of {', '.join(RESULTS_MODES)}"
                )
            values[key] = mode
        else:
            values[key] = None if value is None else str(value)
    return replace(base, **values)


def _split_top_level(text: str) -> List[str]:
    parts: List[str] = []
    current: List[str] = []
    in_quote: str | None = None
    for char in text:
        if char in {'"', "'"}:
            if in_quote == char:
                in_quote = None
            elif in_quote is None:
                in_quote = char
            current.append(char)
            continue
        if char == "," and in_quote is None:
            part = "".join(current).strip()
            if part:
                parts.append(part)
            current = []
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return parts


__all__ = ["ChunkOptionError", "RESULTS_MODES", "build_options", "parse_info", "split_options"]
