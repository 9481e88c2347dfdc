"""TOML config loading for typenote.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_NAME = "typenote.toml"

NULLABLE_STYLES = ("null", "undefined", "both")


@dataclass
class RenderConfig:
    nullable: str = "null"


@dataclass
class TypenoteConfig:
    replace: dict[str, str] = field(default_factory=dict)
    imports: dict[str, str] = field(default_factory=dict)
    render: RenderConfig = field(default_factory=RenderConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find typenote.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> TypenoteConfig:
    """Parse a typenote.toml file into a TypenoteConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = TypenoteConfig()

    if "replace" in data:
        config.replace = {str(k): str(v) for k, v in data["replace"].items()}

    if "imports" in data:
        config.imports = {str(k): str(v) for k, v in data["imports"].items()}

    if "render" in data:
        nullable = data["render"].get("nullable", "null")
        if nullable not in NULLABLE_STYLES:
            raise ValueError(
                f"{path}: render.nullable must be one of "
                f"{', '.join(NULLABLE_STYLES)}, got {nullable!r}"
            )
        config.render = RenderConfig(nullable=nullable)

    return config
