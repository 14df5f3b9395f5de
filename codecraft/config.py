"""
Runtime configuration.

Values come from the environment (optionally seeded from a `.env` file) and from an
optional YAML file holding per-extension generation defaults, e.g.

    defaults:
      php:
        namespace: App\\Models
        extends: Model
"""

import logging
import os
import yaml

from dataclasses import dataclass, field
from dotenv import load_dotenv
from pathlib import Path

from codecraft.constants import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_INDENT,
    ENV_CONFIG,
    ENV_INDENT,
    ENV_LOG_LEVEL,
    ENV_PHP_STRICT_TYPES,
    FALSY_STRINGS,
)

load_dotenv()

logger = logging.getLogger(__name__)


def env_flag(name: str, default: bool = True) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() not in FALSY_STRINGS


@dataclass
class Settings:
    indent: str = DEFAULT_INDENT
    php_strict_types: bool = True
    log_level: str = "WARNING"
    defaults: dict[str, dict] = field(default_factory=dict)

    def __post_init__(self):
        indent = os.getenv(ENV_INDENT)
        if indent:
            # Allow "4" / "2" as shorthand for that many spaces
            self.indent = " " * int(indent) if indent.isdigit() else indent
        self.php_strict_types = env_flag(ENV_PHP_STRICT_TYPES, self.php_strict_types)
        log_level = os.getenv(ENV_LOG_LEVEL)
        if log_level:
            self.log_level = log_level.strip().upper()

    def defaults_for(self, ext: str) -> dict:
        return dict(self.defaults.get(ext.lstrip(".").lower(), {}))


def load_settings(config_path: str | Path | None = None) -> Settings:
    """
    Build Settings from the environment plus the YAML config file, if one exists.

    The file is looked up at `config_path`, then $CODECRAFT_CONFIG, then
    ./codecraft.yaml. A missing file is not an error.
    """
    path = Path(config_path or os.getenv(ENV_CONFIG) or DEFAULT_CONFIG_FILE)
    settings = Settings()
    if not path.is_file():
        return settings

    config = yaml.safe_load(path.read_text()) or {}
    if not isinstance(config, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    defaults = config.get("defaults") or {}
    settings.defaults = {
        str(ext).lstrip(".").lower(): dict(opts or {}) for ext, opts in defaults.items()
    }
    logger.debug(f"Loaded defaults for {sorted(settings.defaults)} from {path}")
    return settings
