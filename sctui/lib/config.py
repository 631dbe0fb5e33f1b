"""
Configuration loader for sc-tui.

Reads workspace credentials from YAML:

    default_workspace: work
    workspaces:
      work:
        api_key: "..."
        user_id: "mention-name"
        fetch_limit: 50

Searched at ./sc-tui.yaml, then $XDG_CONFIG_HOME/sc-tui/config.yaml.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from sctui.lib import validate
from sctui.lib.constants import CONFIG_FILENAME, DEFAULT_BASE_URL, DEFAULT_FETCH_LIMIT, LOCAL_CONFIG_FILENAME

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Configuration missing or unusable."""


@dataclass
class WorkspaceConfig:
    name: str
    api_key: str
    user_id: str  # mention name used in owner:/requester: queries
    fetch_limit: int = DEFAULT_FETCH_LIMIT
    base_url: str = DEFAULT_BASE_URL


@dataclass
class Config:
    default_workspace: Optional[str] = None
    workspaces: dict[str, WorkspaceConfig] = field(default_factory=dict)
    path: Optional[Path] = None  # where it was loaded from


@dataclass
class Credentials:
    """Resolved token and user for this run."""
    api_key: str
    user_id: Optional[str]
    fetch_limit: int = DEFAULT_FETCH_LIMIT
    base_url: str = DEFAULT_BASE_URL
    workspace: Optional[str] = None


def config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "sc-tui"


def config_search_paths(cwd: Optional[Path] = None) -> list[Path]:
    cwd = cwd or Path.cwd()
    return [cwd / LOCAL_CONFIG_FILENAME, config_dir() / CONFIG_FILENAME]


def find_config_file(cwd: Optional[Path] = None) -> Optional[Path]:
    for path in config_search_paths(cwd):
        if path.is_file():
            return path
    return None


def load_config_file(path: Path) -> Config:
    """Parse and validate a config file.

    Raises:
        ConfigError: If the file cannot be read or parsed
        validate.ValidationError: If the content does not match the schema
    """
    try:
        data = yaml.safe_load(path.read_text())
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {"workspaces": {}}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")

    validate.validate(data, "config")

    workspaces = {
        name: WorkspaceConfig(
            name=name,
            api_key=ws["api_key"],
            user_id=ws["user_id"],
            fetch_limit=ws.get("fetch_limit", DEFAULT_FETCH_LIMIT),
            base_url=ws.get("base_url", DEFAULT_BASE_URL),
        )
        for name, ws in data.get("workspaces", {}).items()
    }
    default = data.get("default_workspace")
    if default is not None and default not in workspaces:
        raise ConfigError(f"{path}: default_workspace '{default}' is not defined")

    logger.debug(f"Loaded config from {path} ({len(workspaces)} workspaces)")
    return Config(default_workspace=default, workspaces=workspaces, path=path)


def load_config(cwd: Optional[Path] = None) -> Config:
    """Load the first config file found, or an empty Config if there is none."""
    path = find_config_file(cwd)
    if path is None:
        logger.debug("No config file found")
        return Config()
    return load_config_file(path)


def resolve_credentials(
    config: Config,
    workspace: Optional[str] = None,
    token: Optional[str] = None,
    username: Optional[str] = None,
) -> Credentials:
    """
    Pick credentials for this run.

    Precedence: an explicit workspace, then an explicit token (with optional
    username), then the config's default workspace.

    Raises:
        ConfigError: If nothing usable is configured
    """
    if workspace:
        ws = config.workspaces.get(workspace)
        if ws is None:
            known = ", ".join(sorted(config.workspaces)) or "none"
            raise ConfigError(f"Workspace '{workspace}' not found (configured: {known})")
        return _from_workspace(ws)

    if token:
        return Credentials(api_key=token, user_id=username)

    if config.default_workspace:
        return _from_workspace(config.workspaces[config.default_workspace])

    raise ConfigError(
        "No credentials: pass --workspace or --token, or set default_workspace in "
        f"{config_dir() / CONFIG_FILENAME}"
    )


def _from_workspace(ws: WorkspaceConfig) -> Credentials:
    return Credentials(
        api_key=ws.api_key,
        user_id=ws.user_id,
        fetch_limit=ws.fetch_limit,
        base_url=ws.base_url,
        workspace=ws.name,
    )
