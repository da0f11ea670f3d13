"""Configuration loading for tokengen (.tokengen.yml + environment overrides)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

CONFIG_FILENAME = ".tokengen.yml"
SOURCE_ENV = "TOKEN_V2_PATH"
GROUP_DEPTH_ENV = "TOKEN_GROUP_DEPTH"

DEFAULT_SOURCE = "tokens/design-tokens.tokens-2.json"
DEFAULT_GENERATED = "tokens/tokens.generated.tokens.json"
DEFAULT_BUILD_DIR = "build"
DEFAULT_PACKAGE = "com.example.designtokens"
DEFAULT_CLASS_NAME = "Tokens"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ComposeConfig:
    """Naming options for the Kotlin/Compose output."""

    package_name: str = DEFAULT_PACKAGE
    class_name: str = DEFAULT_CLASS_NAME
    file_name: str = "Tokens.kt"
    templates_dir: Optional[Path] = None


@dataclass
class DirectoryCopy:
    """A build sub-directory mirrored into a target repository."""

    build_dir: str
    target_path: str
    clean: bool = False


@dataclass
class DeployTarget:
    """Repository receiving generated artifacts for one platform."""

    url: str
    branch: str = "design-tokens-update"
    base_branch: Optional[str] = None
    target_path: str = ""
    build_dir: Optional[str] = None
    files: List[str] = field(default_factory=list)
    directories: List[DirectoryCopy] = field(default_factory=list)


@dataclass
class DeployConfig:
    """Deploy targets keyed by platform name."""

    targets: Dict[str, DeployTarget] = field(default_factory=dict)


@dataclass
class TokenGenConfig:
    """Represents the effective settings for a tokengen run."""

    root: Path
    source: Path
    generated_path: Path
    build_dir: Path
    group_depth: Optional[int] = None
    formats: Optional[List[str]] = None
    compose: ComposeConfig = field(default_factory=ComposeConfig)
    deploy: DeployConfig = field(default_factory=DeployConfig)


def load_config(
    config_path: Path, *, environ: Mapping[str, str] | None = None
) -> TokenGenConfig:
    """Load configuration from disk, then apply environment overrides."""
    env = os.environ if environ is None else environ
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)

    source = root / (_as_str(data.get("source")) or DEFAULT_SOURCE)
    generated_path = root / (_as_str(data.get("generated")) or DEFAULT_GENERATED)
    build_dir = root / (_as_str(data.get("build_dir")) or DEFAULT_BUILD_DIR)
    group_depth = parse_group_depth(data.get("group_depth"))

    formats_data = data.get("formats")
    formats = _as_str_list(formats_data) if formats_data is not None else None

    compose_data = _as_dict(data.get("compose"))
    compose = ComposeConfig()
    if compose_data:
        compose.package_name = _as_str(compose_data.get("package_name")) or DEFAULT_PACKAGE
        compose.class_name = _as_str(compose_data.get("class_name")) or DEFAULT_CLASS_NAME
        compose.file_name = _as_str(compose_data.get("file_name")) or compose.file_name
        templates_dir = _as_str(compose_data.get("templates_dir"))
        compose.templates_dir = root / templates_dir if templates_dir else None

    deploy = DeployConfig()
    targets_data = _as_dict(_as_dict(data.get("deploy")).get("targets"))
    for name, raw in targets_data.items():
        deploy.targets[str(name)] = _parse_target(str(name), raw)

    if env.get(SOURCE_ENV):
        source = Path(env[SOURCE_ENV]).expanduser()
        if not source.is_absolute():
            source = (root / source).resolve()
    if env.get(GROUP_DEPTH_ENV):
        group_depth = parse_group_depth(env[GROUP_DEPTH_ENV])

    return TokenGenConfig(
        root=root,
        source=source,
        generated_path=generated_path,
        build_dir=build_dir,
        group_depth=group_depth,
        formats=formats,
        compose=compose,
        deploy=deploy,
    )


def parse_group_depth(value: Any) -> Optional[int]:
    """Return a positive depth, or None for absent, invalid, or non-positive values."""
    depth = _as_int(value)
    if depth is None or depth <= 0:
        return None
    return depth


def _parse_target(name: str, raw: Any) -> DeployTarget:
    data = _as_dict(raw)
    url = _as_str(data.get("url"))
    if not url:
        raise ConfigError(f"Deploy target '{name}' is missing a url")
    directories: List[DirectoryCopy] = []
    for entry in data.get("directories") or []:
        entry_data = _as_dict(entry)
        build_dir = _as_str(entry_data.get("build_dir"))
        target_path = _as_str(entry_data.get("target_path"))
        if not build_dir or target_path is None:
            raise ConfigError(
                f"Deploy target '{name}' has a directory entry without build_dir/target_path"
            )
        directories.append(
            DirectoryCopy(
                build_dir=build_dir,
                target_path=target_path,
                clean=_as_bool(entry_data.get("clean")) or False,
            )
        )
    return DeployTarget(
        url=url,
        branch=_as_str(data.get("branch")) or "design-tokens-update",
        base_branch=_as_str(data.get("base_branch")),
        target_path=_as_str(data.get("target_path")) or "",
        build_dir=_as_str(data.get("build_dir")),
        files=_as_str_list(data.get("files")),
        directories=directories,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME and config_path.suffix not in {".yml", ".yaml"}:
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
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "ComposeConfig",
    "ConfigError",
    "DeployConfig",
    "DeployTarget",
    "DirectoryCopy",
    "TokenGenConfig",
    "load_config",
    "parse_group_depth",
]
