"""Configuration for the review engine, CLI and portal.

Loads from YAML config file with environment variable overrides.
Pattern: CONFIG__{SECTION}__{KEY} overrides nested YAML keys.
Example: CONFIG__REVIEW__PAGE_SIZE=25

Dedicated variables win over both: DATABASE_URL, JWT_SECRET_KEY, LOG_LEVEL.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

DEFAULT_CONFIG_PATH = "config/recruiting.yml"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class DatabaseConfig(BaseModel):
    url: str = "sqlite:///data/recruiting.db"
    echo: bool = False


class ReviewConfig(BaseModel):
    page_size: int = Field(default=10, ge=1, description="List view rows per page")


class AuthConfig(BaseModel):
    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours


class LoggingConfig(BaseModel):
    level: str = "INFO"


class AppConfig(BaseModel):
    database: DatabaseConfig = DatabaseConfig()
    review: ReviewConfig = ReviewConfig()
    auth: AuthConfig = AuthConfig()
    logging: LoggingConfig = LoggingConfig()


def _apply_env_overrides(config_dict: dict, prefix: str = "CONFIG") -> dict:
    """Apply environment variable overrides to config dict.

    Pattern: CONFIG__SECTION__KEY=value maps to config[section][key] = value
    """
    for key, value in os.environ.items():
        if not key.startswith(f"{prefix}__"):
            continue
        parts = key[len(prefix) + 2 :].lower().split("__")
        target = config_dict
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        # Type coercion for common cases
        if value.lower() in ("true", "false"):
            value = value.lower() == "true"
        elif value.isdigit():
            value = int(value)
        target[parts[-1]] = value
    return config_dict


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load configuration from YAML file with env overrides.

    Priority: dedicated env vars > CONFIG__ env vars > YAML file > defaults
    """
    config_dict = {}

    # 1. Load YAML if exists
    if config_path is None:
        config_path = os.getenv("RECRUITING_CONFIG", DEFAULT_CONFIG_PATH)
    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            config_dict = yaml.safe_load(f) or {}

    # 2. Apply env overrides
    config_dict = _apply_env_overrides(config_dict)

    # 3. Dedicated env vars
    dedicated = {
        "DATABASE_URL": ("database", "url"),
        "JWT_SECRET_KEY": ("auth", "secret_key"),
        "LOG_LEVEL": ("logging", "level"),
    }
    for env_name, (section, key) in dedicated.items():
        value = os.getenv(env_name)
        if value:
            config_dict.setdefault(section, {})[key] = value

    return AppConfig(**config_dict)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for CLI and portal entry points."""
    level = (level or get_config().logging.level).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


# Singleton
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(config_path: Optional[str] = None) -> AppConfig:
    global _config
    _config = load_config(config_path)
    return _config
