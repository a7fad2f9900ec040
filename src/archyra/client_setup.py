"""
Register the Archyra MCP server with AI coding assistants.

Each supported assistant (a client profile) reads MCP launch descriptors from a
JSON file at a well-known location. The merger reads that document, sets the
reserved ``mcpServers`` entry, and writes the whole document back while
leaving every other key untouched.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Literal, Mapping, MutableMapping, Sequence

from .tooling.config import ArchyraSettings, load_settings

LOGGER = logging.getLogger(__name__)

__all__ = [
    "ClientConfigError",
    "ClientProfile",
    "ConfigWriteError",
    "InitResult",
    "UnknownClientError",
    "client_profiles",
    "get_client_profile",
    "has_server_entry",
    "init_client",
    "merge_server_entry",
    "read_config_document",
    "resolve_config_path",
    "write_config_document",
]

MCP_SERVERS_KEY = "mcpServers"


class ClientConfigError(RuntimeError):
    """Base error for client configuration failures."""


class UnknownClientError(ClientConfigError):
    """Raised when a client profile key is not supported."""

    def __init__(self, key: str, available: Sequence[str]) -> None:
        self.key = key
        self.available = tuple(available)
        super().__init__(f"Unknown client: {key}. Supported clients: {', '.join(self.available)}")


class ConfigWriteError(ClientConfigError):
    """Raised when the merged configuration cannot be written."""


@dataclass(slots=True, frozen=True)
class ClientProfile:
    """An AI assistant and the candidate locations of its MCP config file."""

    key: str
    display_name: str
    description: str
    config_paths: tuple[Path, ...]


@dataclass(slots=True, frozen=True)
class InitResult:
    status: Literal["configured", "skipped"]
    profile: ClientProfile
    path: Path
    created: bool


def client_profiles(*, home: Path | None = None, cwd: Path | None = None) -> Mapping[str, ClientProfile]:
    """Return the supported profiles in presentation order."""

    home_dir = home or Path.home()
    work_dir = cwd or Path.cwd()
    profiles = (
        ClientProfile(
            key="claude",
            display_name="Claude Code",
            description="Anthropic Claude Code CLI",
            config_paths=(
                home_dir / ".claude" / "claude_desktop_config.json",
                home_dir / ".mcp.json",
            ),
        ),
        ClientProfile(
            key="cursor",
            display_name="Cursor",
            description="Cursor AI Editor",
            config_paths=(
                work_dir / ".cursor" / "mcp.json",
                home_dir / ".cursor" / "mcp.json",
            ),
        ),
        ClientProfile(
            key="windsurf",
            display_name="Windsurf",
            description="Codeium Windsurf Editor",
            config_paths=(home_dir / ".codeium" / "windsurf" / "mcp_config.json",),
        ),
    )
    return {profile.key: profile for profile in profiles}


def get_client_profile(key: str, profiles: Mapping[str, ClientProfile] | None = None) -> ClientProfile:
    available = profiles if profiles is not None else client_profiles()
    normalised = key.strip().lower()
    if normalised not in available:
        raise UnknownClientError(key, list(available))
    return available[normalised]


def resolve_config_path(profile: ClientProfile) -> tuple[Path, bool]:
    """Return the first existing candidate, else the first candidate and ``True`` for "will be created"."""

    for candidate in profile.config_paths:
        if candidate.is_file():
            return candidate, False
    return profile.config_paths[0], True


def read_config_document(path: Path) -> MutableMapping[str, Any]:
    """Load a JSON object from ``path``; missing or unparsable files yield ``{}``."""

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as exc:
        LOGGER.warning("Unable to read %s, starting from an empty config: %s", path, exc)
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        LOGGER.warning("Existing config %s is not valid JSON, starting from an empty config: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        LOGGER.warning("Existing config %s is not a JSON object, starting from an empty config", path)
        return {}
    return data


def merge_server_entry(
    document: MutableMapping[str, Any],
    server_name: str,
    descriptor: Mapping[str, Any],
) -> MutableMapping[str, Any]:
    """Set ``mcpServers[server_name]`` in place, creating ``mcpServers`` when needed."""

    servers = document.get(MCP_SERVERS_KEY)
    if not isinstance(servers, dict):
        if servers is not None:
            LOGGER.warning("Replacing non-object %s value", MCP_SERVERS_KEY)
        servers = {}
        document[MCP_SERVERS_KEY] = servers
    servers[server_name] = dict(descriptor)
    return document


def has_server_entry(document: Mapping[str, Any], server_name: str) -> bool:
    servers = document.get(MCP_SERVERS_KEY)
    return isinstance(servers, dict) and server_name in servers


def write_config_document(path: Path, document: Mapping[str, Any]) -> None:
    """Overwrite ``path`` with the full document, creating parent directories."""

    text = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ConfigWriteError(f"Failed to write {path}: {exc}") from exc
    LOGGER.debug("Wrote MCP config %s", path)


def init_client(
    profile: ClientProfile,
    *,
    confirm_overwrite: Callable[[ClientProfile, Path], bool],
    settings: ArchyraSettings | None = None,
) -> InitResult:
    """
    Register the server launch descriptor for ``profile``.

    ``confirm_overwrite`` is consulted only when the reserved entry already
    exists; returning ``False`` leaves the file untouched and reports a skip.
    """

    resolved = settings or load_settings()
    path, created = resolve_config_path(profile)
    document = read_config_document(path)

    if has_server_entry(document, resolved.server_name) and not confirm_overwrite(profile, path):
        LOGGER.info("Keeping existing %s entry in %s", resolved.server_name, path)
        return InitResult(status="skipped", profile=profile, path=path, created=False)

    merge_server_entry(document, resolved.server_name, resolved.launch_descriptor())
    write_config_document(path, document)
    return InitResult(status="configured", profile=profile, path=path, created=created)
