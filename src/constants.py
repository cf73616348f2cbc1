"""Constants and configuration defaults used in the project."""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class MappingFiles(Enum):
    """File names that make up a mapping directory.

    Args:
        Enum (string): CSV file names.
    """

    FIELDS = "fields.csv"
    METHODS = "methods.csv"
    PARAMS = "params.csv"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    VERSION = "2.4.0"
    USER_AGENT = f"bonfetch/{VERSION}"
    LOG_FORMAT = "[%(levelname)s] %(message)s"

    # Artifact downloads
    CONNECT_TIMEOUT = 10
    READ_TIMEOUT = 30
    DOWNLOAD_CHUNK_SIZE = 8192
    SPOOL_MAX_BYTES = 16 * 1024 * 1024

    # Version catalog
    CATALOG_URL = "http://export.mcpbot.bspk.rs/versions.json"
    CATALOG_CONNECT_TIMEOUT = 5
    CATALOG_READ_TIMEOUT = 5

    # URL validation
    VALIDATION_TIMEOUT = 10
    VALIDATION_USER_AGENT = f"bonfetch-check/{VERSION}"

    # Libraries
    MAVEN_REPO_ROOT = "https://repo1.maven.org/maven2"
    LIBS_CONFIG_FILE = "libs.txt"

    # Mappings
    REQUIRED_MAPPING_FILES = (MappingFiles.FIELDS.value, MappingFiles.METHODS.value)
    MAPPING_ARCHIVE_ENTRIES = (
        MappingFiles.FIELDS.value,
        MappingFiles.METHODS.value,
        MappingFiles.PARAMS.value,
    )

    # Directories (None means derive from HOME_DIR)
    HOME_DIR = os.path.join(os.path.expanduser("~"), ".bonfetch")
    MAPPINGS_DIR: Optional[str] = None
    LIBS_DIR: Optional[str] = None
    GRADLE_MCP_DIR = os.path.join(
        os.path.expanduser("~"), ".gradle", "caches", "minecraft", "de", "oceanlabs", "mcp"
    )

    ENV_CONFIG = "BONFETCH_CONFIG"
    ENV_LOG_LEVEL = "BONFETCH_LOG_LEVEL"
    ENV_MAPPINGS_DIR = "BONFETCH_MAPPINGS_DIR"
    ENV_LIBS_DIR = "BONFETCH_LIBS_DIR"
    CONFIG_FILE_NAME = "bonfetch.yml"


def _as_path(value: Any) -> str:
    return os.path.expanduser(str(value))


# (section, key) -> (Constants attribute, coercion)
_CONFIG_KEYS = {
    ("http", "connect_timeout"): ("CONNECT_TIMEOUT", float),
    ("http", "read_timeout"): ("READ_TIMEOUT", float),
    ("http", "user_agent"): ("USER_AGENT", str),
    ("catalog", "url"): ("CATALOG_URL", str),
    ("catalog", "connect_timeout"): ("CATALOG_CONNECT_TIMEOUT", float),
    ("catalog", "read_timeout"): ("CATALOG_READ_TIMEOUT", float),
    ("maven", "repo_root"): ("MAVEN_REPO_ROOT", str),
    ("paths", "mappings_dir"): ("MAPPINGS_DIR", _as_path),
    ("paths", "libs_dir"): ("LIBS_DIR", _as_path),
    ("paths", "gradle_mcp_dir"): ("GRADLE_MCP_DIR", _as_path),
}


def _config_candidates() -> list:
    candidates = []
    env_path = os.environ.get(Constants.ENV_CONFIG)
    if env_path:
        candidates.append(env_path)
    candidates.append(os.path.join(os.getcwd(), Constants.CONFIG_FILE_NAME))
    candidates.append(
        os.path.join(os.path.expanduser("~"), ".config", "bonfetch", Constants.CONFIG_FILE_NAME)
    )
    return candidates


def _load_yaml_config() -> Dict[str, Any]:
    """Load the first YAML config found in the default locations.

    Returns:
        Parsed mapping, or an empty dict when no usable file exists.
    """
    import yaml  # pylint: disable=import-outside-toplevel

    for path in _config_candidates():
        if not os.path.isfile(path):
            continue
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Failed to load config %s: %s", path, exc)
            return {}
        if isinstance(data, dict):
            logger.debug("Loaded config from %s", path)
            return data
        logger.warning("Ignoring config %s: top level is not a mapping", path)
        return {}
    return {}


def apply_config(cfg: Optional[Dict[str, Any]] = None) -> None:
    """Copy recognised settings onto Constants; environment wins over YAML.

    Unknown sections and values that fail coercion are ignored.
    """
    if cfg is None:
        cfg = _load_yaml_config()
    for (section, key), (attr, coerce) in _CONFIG_KEYS.items():
        block = cfg.get(section) if isinstance(cfg, dict) else None
        if not isinstance(block, dict) or key not in block:
            continue
        try:
            setattr(Constants, attr, coerce(block[key]))
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid config value %s.%s=%r", section, key, block[key])

    env_mappings = os.environ.get(Constants.ENV_MAPPINGS_DIR)
    if env_mappings:
        Constants.MAPPINGS_DIR = env_mappings
    env_libs = os.environ.get(Constants.ENV_LIBS_DIR)
    if env_libs:
        Constants.LIBS_DIR = env_libs


def default_mappings_dir() -> str:
    """Directory holding bundled and downloaded mapping folders."""
    return Constants.MAPPINGS_DIR or os.path.join(Constants.HOME_DIR, "mappings")


def default_libs_dir() -> str:
    """Directory holding downloaded library jars and libs.txt."""
    return Constants.LIBS_DIR or os.path.join(Constants.HOME_DIR, "libs")
