"""Configuration loading for docmod (.docmod.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .links import STDLIB_SOURCE

CONFIG_FILENAME = ".docmod.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class DocModConfig:
    """Represents the settings defined in .docmod.yml."""

    root: Path
    module: Optional[str] = None
    output_dir: Optional[Path] = None
    package_template: Optional[Path] = None
    index_template: Optional[Path] = None
    exclude_paths: List[str] = field(default_factory=list)
    stdlib_url: str = STDLIB_SOURCE


def load_config(config_path: Path) -> DocModConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DocModConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    templates = _as_dict(data.get("templates"))
    output = _as_str(data.get("output"))
    package_template = _as_str(templates.get("package"))
    index_template = _as_str(templates.get("index"))

    return DocModConfig(
        root=root,
        module=_as_str(data.get("module")),
        output_dir=root / output if output else None,
        package_template=root / package_template if package_template else None,
        index_template=root / index_template if index_template else None,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        stdlib_url=_as_str(data.get("stdlib_url")) or STDLIB_SOURCE,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "DocModConfig", "load_config"]
