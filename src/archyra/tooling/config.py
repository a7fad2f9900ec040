"""
Settings loader for Archyra.

Runtime settings (reserved server name, launch descriptor, install command,
catalogue override, etc.) live under the ``tool.archyra`` section of a TOML
file so projects can tune the tooling without touching code. The file is
``$ARCHYRA_CONFIG`` when set, otherwise ``pyproject.toml`` in the current
directory. Missing files or entries fall back to built-in defaults.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

__all__ = [
    "ArchyraSettings",
    "DEFAULT_SETTINGS",
    "discover_settings_path",
    "load_settings",
    "reset_settings_cache",
]

LOGGER = logging.getLogger(__name__)

CONFIG_ENV_VAR = "ARCHYRA_CONFIG"
LOG_LEVEL_ENV_VAR = "ARCHYRA_LOG_LEVEL"


@dataclass(slots=True, frozen=True)
class ArchyraSettings:
    """Top-level Archyra configuration."""

    server_name: str = "archyra"
    package_spec: str = "archyra@latest"
    launch_command: str = "npx"
    components_dir: str = "./components"
    install_command: str = "npm install"
    catalog_path: Path | None = None
    log_level: str = "WARNING"

    def launch_descriptor(self) -> dict[str, Any]:
        """Return the ``{command, args}`` entry written into client configs."""
        return {
            "command": self.launch_command,
            "args": ["-y", self.package_spec, "serve"],
        }


DEFAULT_SETTINGS = ArchyraSettings()


def discover_settings_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.cwd() / "pyproject.toml"


def _project_data(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        LOGGER.warning("Ignoring unreadable settings file %s, using defaults: %s", path, exc)
        return {}


def _get_archyra_section(data: Mapping[str, Any]) -> Mapping[str, Any]:
    tool_section = data.get("tool") or {}
    return tool_section.get("archyra") or {}


def _string_setting(section: Mapping[str, Any], key: str, default: str) -> str:
    value = section.get(key)
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def _parse_catalog_path(value: Any, base_dir: Path) -> Path | None:
    if not value:
        return None
    path = Path(str(value)).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return path


@lru_cache(maxsize=1)
def load_settings() -> ArchyraSettings:
    """Load settings from the configured TOML file."""

    path = discover_settings_path()
    section = _get_archyra_section(_project_data(path))
    log_level = os.environ.get(LOG_LEVEL_ENV_VAR) or _string_setting(section, "log_level", DEFAULT_SETTINGS.log_level)
    return ArchyraSettings(
        server_name=_string_setting(section, "server_name", DEFAULT_SETTINGS.server_name),
        package_spec=_string_setting(section, "package_spec", DEFAULT_SETTINGS.package_spec),
        launch_command=_string_setting(section, "launch_command", DEFAULT_SETTINGS.launch_command),
        components_dir=_string_setting(section, "components_dir", DEFAULT_SETTINGS.components_dir),
        install_command=_string_setting(section, "install_command", DEFAULT_SETTINGS.install_command),
        catalog_path=_parse_catalog_path(section.get("catalog_path"), path.parent),
        log_level=log_level.upper(),
    )


def reset_settings_cache() -> None:
    load_settings.cache_clear()
