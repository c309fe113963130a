"""Folio configuration system.

Configuration is YAML-based with a few CLI overrides (--directory).
Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.folio/config.yaml
3. ./folio.yaml

Relative directories in a config file are resolved against the directory
holding that file.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from folio.engine import DEFAULT_FILE_EXTENSION

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class FolderConfig:
    """A named template folder.

    Attributes:
        path: Directory holding the folder's templates
        fallback: Fall back to the default directory for missing templates
    """

    path: str
    fallback: bool = False


@dataclass
class FolioConfig:
    """Root configuration.

    Attributes:
        directory: Default template directory
        file_extension: Extension appended to template names (None to disable)
        folders: Named template folders
        data: Data shared by every template
        template_data: Default data per template name
    """

    directory: str | None = None
    file_extension: str | None = DEFAULT_FILE_EXTENSION
    folders: dict[str, FolderConfig] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)
    template_data: dict[str, dict[str, Any]] = field(default_factory=dict)

    # Runtime overrides (set by load_config)
    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Environment Variable Substitution
# =============================================================================

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)\}")


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax, recursively through dicts and lists.

    Raises:
        ValueError: If a referenced variable is not set
    """
    if isinstance(value, str):

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return _ENV_VAR_RE.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find a configuration file in the standard locations.

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".folio" / "config.yaml",
        start_path / "folio.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def _resolve_dir(path: str | None, base_dir: Path | None) -> str | None:
    if path is None or base_dir is None or Path(path).is_absolute():
        return path
    return str(base_dir / path)


def load_config_from_dict(data: dict[str, Any], base_dir: Path | None = None) -> FolioConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary
        base_dir: Directory that relative paths are resolved against

    Returns:
        FolioConfig instance

    Raises:
        ValueError: If a section has the wrong shape
    """
    data = substitute_env_vars(data)

    config = FolioConfig()
    config.directory = _resolve_dir(data.get("directory"), base_dir)

    if "file_extension" in data:
        config.file_extension = data["file_extension"] or None

    for name, folder_data in (data.get("folders") or {}).items():
        if isinstance(folder_data, str):
            folder_data = {"path": folder_data}
        if not isinstance(folder_data, dict) or "path" not in folder_data:
            raise ValueError(f"Folder '{name}' must define a path")
        config.folders[name] = FolderConfig(
            path=_resolve_dir(str(folder_data["path"]), base_dir) or "",
            fallback=bool(folder_data.get("fallback", False)),
        )

    shared = data.get("data") or {}
    if not isinstance(shared, dict):
        raise ValueError("'data' must be a mapping")
    config.data = dict(shared)

    for template, template_data in (data.get("template_data") or {}).items():
        if not isinstance(template_data, dict):
            raise ValueError(f"Data for template '{template}' must be a mapping")
        config.template_data[template] = dict(template_data)

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> FolioConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        FolioConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        config = load_config_from_dict(data, base_dir=found_path.resolve().parent)
        config._config_path = found_path
    else:
        config = FolioConfig()

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return '''# Folio Configuration

# Default template directory (relative to this file)
directory: "templates"

# Extension appended to template names: "profile" -> "profile.py"
file_extension: "py"

# Named folders, used as "emails::welcome"
# folders:
#   emails:
#     path: "templates/emails"
#     fallback: true   # look in the default directory when missing

# Data available to every template
data: {}

# Default data for specific templates
# template_data:
#   layout:
#     title: "${SITE_TITLE}"
'''
