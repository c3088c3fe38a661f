"""Configuration loading for litweave (.litweave.yml)."""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILENAME = ".litweave.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class FrontMatterConfig:
    """Fixed header prepended to the copied document before weaving."""

    title: Optional[str] = None
    author: Optional[str] = None
    date: Optional[str] = None


@dataclass
class ExtractConfig:
    """Markdown extraction settings."""

    codefence: str = "python"
    credit: bool = True
    documenter: bool = False
    lint: bool = True


@dataclass
class WeaveConfig:
    """Report weaving settings."""

    doctype: str = "md2html"
    css: Optional[Path] = None
    template: Optional[Path] = None
    fig_path: str = "figures"
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class LitWeaveConfig:
    """Represents the settings defined in .litweave.yml."""

    root: Path
    out_dir: Optional[Path] = None
    front_matter: Optional[FrontMatterConfig] = None
    extract: ExtractConfig = field(default_factory=ExtractConfig)
    weave: WeaveConfig = field(default_factory=WeaveConfig)


def load_config(config_path: Path) -> LitWeaveConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return LitWeaveConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    out_dir_str = _as_str(data.get("out_dir"))
    out_dir = root / out_dir_str if out_dir_str else None

    front_data = _as_dict(data.get("front_matter"))
    front_matter = None
    if front_data:
        front_matter = FrontMatterConfig(
            title=_as_str(front_data.get("title")),
            author=_as_str(front_data.get("author")),
            date=_as_str(front_data.get("date")),
        )
        if not any((front_matter.title, front_matter.author, front_matter.date)):
            front_matter = None

    extract = ExtractConfig()
    extract_data = _as_dict(data.get("extract"))
    if extract_data:
        extract.codefence = _as_str(extract_data.get("codefence")) or extract.codefence
        extract.credit = _as_bool(extract_data.get("credit"), extract.credit)
        extract.documenter = _as_bool(extract_data.get("documenter"), extract.documenter)
        extract.lint = _as_bool(extract_data.get("lint"), extract.lint)

    weave = WeaveConfig()
    weave_data = _as_dict(data.get("weave"))
    if weave_data:
        weave.doctype = _as_str(weave_data.get("doctype")) or weave.doctype
        css = _as_str(weave_data.get("css"))
        template = _as_str(weave_data.get("template"))
        weave.css = root / css if css else None
        weave.template = root / template if template else None
        weave.fig_path = _as_str(weave_data.get("fig_path")) or weave.fig_path
        weave.options = dict(_as_dict(weave_data.get("options")))

    return LitWeaveConfig(
        root=root,
        out_dir=out_dir,
        front_matter=front_matter,
        extract=extract,
        weave=weave,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, (_dt.date, _dt.datetime)):
        return value.isoformat()
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return default


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ExtractConfig",
    "FrontMatterConfig",
    "LitWeaveConfig",
    "WeaveConfig",
    "load_config",
]
