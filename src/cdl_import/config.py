"""
Settings for applying CDL entries inside DaVinci Resolve.

CONFIGURATION OPTIONS:
- CDL_IMPORT_CONFIG: path to a YAML config file (optional). Without it,
  ~/.config/cdl_import/config.yaml and then ~/.cdl_import/config.yaml are tried.
- CDL_LUT_SEARCH_PATHS: LUT root directories, separated by os.pathsep
- CDL_MAX_LUT_SEARCH_DEPTH: how deep to recurse into each LUT root (default: 10)
- CDL_NODE_INDEX: grading node that receives the CDL (default: 1)
- CDL_LUT_NODE_INDEX: grading node that receives the LUT (default: 2)

Environment variables override values from the config file.
"""

import logging
import os
import sys
from dataclasses import dataclass, field, asdict
from typing import List, Optional

import yaml

from cdl_import.decisions import ConfigError
from cdl_import.lut_search import MAX_LUT_SEARCH_DEPTH

logger = logging.getLogger(__name__)

CONFIG_LOCATIONS = [
    "~/.config/cdl_import/config.yaml",
    "~/.cdl_import/config.yaml",
]


def default_lut_search_paths() -> List[str]:
    """Resolve's system LUT directory for the current platform."""
    if sys.platform == "darwin":
        return ["/Library/Application Support/Blackmagic Design/DaVinci Resolve/LUT"]
    if sys.platform.startswith("win"):
        program_data = os.environ.get("PROGRAMDATA", r"C:\ProgramData")
        return [os.path.join(program_data, "Blackmagic Design", "DaVinci Resolve", "Support", "LUT")]
    return ["/opt/resolve/LUT"]


@dataclass
class Settings:
    lut_search_paths: List[str] = field(default_factory=default_lut_search_paths)
    max_lut_search_depth: int = MAX_LUT_SEARCH_DEPTH
    cdl_node_index: int = 1
    lut_node_index: int = 2

    def to_dict(self) -> dict:
        return asdict(self)


def _positive_int(name: str, value) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None
    if number < 1:
        raise ConfigError(f"{name} must be at least 1, got {number}")
    return number


def find_config_file() -> Optional[str]:
    """Return the first config file that exists, or None."""
    explicit = os.environ.get("CDL_IMPORT_CONFIG")
    if explicit:
        return explicit
    for location in CONFIG_LOCATIONS:
        path = os.path.expanduser(location)
        if os.path.exists(path):
            return path
    return None


def read_config_file(path: str) -> dict:
    """
    Read a YAML config file into a dict.

    Missing or unreadable files are logged and treated as empty.
    """
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not read config file {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Ignoring config file {path}: top level is not a mapping")
        return {}
    return data


def load_settings(config_path: Optional[str] = None) -> Settings:
    """Build Settings from defaults, the config file, then environment variables."""
    settings = Settings()

    path = config_path or find_config_file()
    data = read_config_file(path) if path else {}

    if "lut_search_paths" in data:
        paths = data["lut_search_paths"]
        if isinstance(paths, str):
            paths = [paths]
        if not isinstance(paths, list):
            raise ConfigError("lut_search_paths must be a list of directories")
        settings.lut_search_paths = [os.path.expanduser(str(p)) for p in paths]
    for key in ("max_lut_search_depth", "cdl_node_index", "lut_node_index"):
        if key in data:
            setattr(settings, key, _positive_int(key, data[key]))

    env_paths = os.environ.get("CDL_LUT_SEARCH_PATHS")
    if env_paths:
        settings.lut_search_paths = [os.path.expanduser(p) for p in env_paths.split(os.pathsep) if p]
    env_overrides = {
        "CDL_MAX_LUT_SEARCH_DEPTH": "max_lut_search_depth",
        "CDL_NODE_INDEX": "cdl_node_index",
        "CDL_LUT_NODE_INDEX": "lut_node_index",
    }
    for env_name, attr in env_overrides.items():
        value = os.environ.get(env_name)
        if value:
            setattr(settings, attr, _positive_int(env_name, value))

    return settings
