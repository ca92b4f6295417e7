"""Settings for f90order and loading them from a configuration file."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

try:
    import tomllib
except ImportError:
    import toml as tomllib  # type: ignore

from errors import ConfigError
from graph.model import DEFAULT_MAX_EDGES_PER_NODE
from scanner.discovery import DEFAULT_EXTENSIONS, DEFAULT_MAX_FILES
from scanner.parser import DEFAULT_MAX_USES_PER_FILE


OUTPUT_FORMATS = ("order", "make", "json", "mermaid")
DEFAULT_DIR = "src"

# Section holding the settings when they live in pyproject.toml
PYPROJECT_SECTION = "f90order"

_SETTINGS_KEYS = {"dirs", "recursive_dirs", "extensions", "format", "limits"}
_LIMIT_KEYS = {"max_files", "max_uses_per_file", "max_edges_per_node"}


@dataclass
class Limits:
    """Hard ceilings on input size. Exceeding one aborts the run."""

    max_files: int = DEFAULT_MAX_FILES
    max_uses_per_file: int = DEFAULT_MAX_USES_PER_FILE
    max_edges_per_node: int = DEFAULT_MAX_EDGES_PER_NODE


@dataclass
class Settings:
    """Options for one run, from defaults, a config file and the command line."""

    dirs: List[str] = field(default_factory=list)
    recursive_dirs: List[str] = field(default_factory=list)
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    output_format: str = "order"
    limits: Limits = field(default_factory=Limits)

    def scan_targets(self) -> Tuple[List[str], List[str]]:
        """
        Return the (shallow, recursive) directories to scan.

        Falls back to scanning ``src`` non-recursively when no directory was
        configured.
        """
        if not self.dirs and not self.recursive_dirs:
            return [DEFAULT_DIR], []
        return list(self.dirs), list(self.recursive_dirs)


def split_dirs(value: str) -> List[str]:
    """Split a comma-separated directory list, dropping blank entries."""
    return [part.strip() for part in value.split(",") if part.strip()]


def load_config(path: Path) -> Settings:
    """
    Load settings from a TOML, YAML or JSON file.

    For ``pyproject.toml`` the settings are read from ``[tool.f90order]``.

    Raises:
        ConfigError: If the file cannot be read or parsed, or holds invalid
            settings.
    """
    data = _read_config_file(path)

    if path.name == "pyproject.toml":
        tool = data.get("tool", {})
        if not isinstance(tool, dict):
            raise ConfigError(f"{path}: 'tool' must be a table")
        data = tool.get(PYPROJECT_SECTION, {})

    return settings_from_mapping(data, source=str(path))


def _read_config_file(path: Path) -> Dict[str, Any]:
    """Parse a configuration file into a mapping."""
    suffix = path.suffix.lower()

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    try:
        if suffix == ".toml":
            data = tomllib.loads(content)
        elif suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(content)
        elif suffix == ".json":
            data = json.loads(content)
        else:
            raise ConfigError(f"Unsupported config file type: {path}")
    except ConfigError:
        raise
    except Exception as e:
        raise ConfigError(f"Cannot parse config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def settings_from_mapping(data: Dict[str, Any], source: str = "config") -> Settings:
    """
    Build Settings from a parsed configuration mapping.

    Raises:
        ConfigError: On unknown keys or values of the wrong type.
    """
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: settings must be a mapping")

    unknown = set(data) - _SETTINGS_KEYS
    if unknown:
        raise ConfigError(f"{source}: unknown setting(s): {', '.join(sorted(unknown))}")

    settings = Settings()

    if "dirs" in data:
        settings.dirs = _dir_list(data["dirs"], "dirs", source)
    if "recursive_dirs" in data:
        settings.recursive_dirs = _dir_list(data["recursive_dirs"], "recursive_dirs", source)

    if "extensions" in data:
        extensions = data["extensions"]
        if not isinstance(extensions, list) or not extensions or not all(
            isinstance(ext, str) and ext for ext in extensions
        ):
            raise ConfigError(f"{source}: 'extensions' must be a non-empty list of strings")
        settings.extensions = tuple(
            (ext if ext.startswith(".") else "." + ext).lower() for ext in extensions
        )

    if "format" in data:
        if data["format"] not in OUTPUT_FORMATS:
            raise ConfigError(
                f"{source}: 'format' must be one of {', '.join(OUTPUT_FORMATS)}"
            )
        settings.output_format = data["format"]

    if "limits" in data:
        settings.limits = _limits(data["limits"], source)

    return settings


def _dir_list(value: Any, key: str, source: str) -> List[str]:
    if isinstance(value, str):
        return split_dirs(value)
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return [item.strip() for item in value if item.strip()]
    raise ConfigError(f"{source}: '{key}' must be a list of directories or a comma-separated string")


def _limits(value: Any, source: str) -> Limits:
    if not isinstance(value, dict):
        raise ConfigError(f"{source}: 'limits' must be a mapping")

    unknown = set(value) - _LIMIT_KEYS
    if unknown:
        raise ConfigError(f"{source}: unknown limit(s): {', '.join(sorted(unknown))}")

    limits = Limits()
    for key, limit in value.items():
        # bool is an int subclass
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ConfigError(f"{source}: limit '{key}' must be a positive integer")
        setattr(limits, key, limit)
    return limits


def merge_cli_overrides(
    settings: Settings,
    dirs: Optional[List[str]] = None,
    recursive_dirs: Optional[List[str]] = None,
    output_format: Optional[str] = None,
) -> Settings:
    """Apply command-line values on top of loaded settings. None means unset."""
    if dirs is not None:
        settings.dirs = dirs
    if recursive_dirs is not None:
        settings.recursive_dirs = recursive_dirs
    if output_format is not None:
        settings.output_format = output_format
    return settings
