import os
from pathlib import Path
from typing import Any, Dict

import yaml

from apdacl.errors import ConfigurationError

DEFAULT_CONFIG_PATH = Path("apdacl.config.yaml")
DATABASE_URL_ENV = "APDACL_DATABASE_URL"

BASE_DATABASE_DEFAULTS: Dict[str, Any] = {
    "url": None,
    "pool_size": 5,
    "max_overflow": 0,
    "pool_timeout_seconds": 30,
    "echo": False,
}


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load the service configuration from YAML.

    Args:
        path: Optional path to the config file. Defaults to apdacl.config.yaml

    Returns:
        Configuration dictionary (empty sections for an empty file)

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ConfigurationError: If the file is not a mapping
    """
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        config = yaml.safe_load(f)

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"Config file must contain a mapping: {cfg_path}")
    return config


def get_database_settings(config: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """
    Resolve the ``database`` section with built-in defaults.

    The APDACL_DATABASE_URL environment variable, when set, replaces the
    configured URL.
    """
    section = (config or {}).get("database") or {}
    if not isinstance(section, dict):
        raise ConfigurationError("Config 'database' must be a dictionary")

    settings = {**BASE_DATABASE_DEFAULTS, **section}
    env_url = os.getenv(DATABASE_URL_ENV)
    if env_url:
        settings["url"] = env_url.strip()

    if not settings.get("url"):
        raise ConfigurationError(
            "Database URL is not configured",
            hint=f"Set database.url in the config file or {DATABASE_URL_ENV}",
        )
    for key in ("pool_size", "max_overflow", "pool_timeout_seconds"):
        try:
            settings[key] = int(settings[key])
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"database.{key} must be an integer, got {settings[key]!r}") from exc
    settings["echo"] = bool(settings.get("echo"))
    return settings


def get_logging_level(config: Dict[str, Any] | None = None) -> str:
    section = (config or {}).get("logging") or {}
    return str(section.get("level", "INFO")).upper()
