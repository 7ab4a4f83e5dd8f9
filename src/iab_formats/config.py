"""
IAB Formats Configuration Module

Provides the parser configuration used by the document handles and a
pydantic-based settings layer with:
- YAML configuration file loading
- Environment-specific overrides
- Environment variable overrides (IAB_*)
"""

import os
from dataclasses import dataclass, fields
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, TypeAdapter
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass
class ParserConfig:
    """Configuration for XML conversion and document mapping.

    Attributes:
        encoding: Encoding used to turn str documents into bytes for lxml
        recover_on_error: Let lxml recover from broken markup instead of failing
        remove_blank_text: Drop ignorable whitespace between elements
        huge_tree: Lift lxml's safety limits for very large documents
        break_workers: Worker threads used to map VMAP ad breaks (1 = sequential)
        preview_length: Characters of the raw document kept in parsing errors
    """

    encoding: str = "utf-8"
    recover_on_error: bool = False
    remove_blank_text: bool = True
    huge_tree: bool = False
    break_workers: int = 1
    preview_length: int = 200

    def __post_init__(self):
        if self.break_workers < 1:
            raise ValueError("break_workers must be at least 1")

    @classmethod
    def from_settings(cls, settings: "Settings | None" = None) -> "ParserConfig":
        """Build a parser configuration from the ``parser`` settings section.

        Unknown keys are ignored so that settings files can be shared with
        other tools. Values are coerced, environment variables being strings.

        Raises:
            pydantic.ValidationError: If a value cannot be coerced or is out of range
        """
        if settings is None:
            settings = get_settings()
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in settings.parser.items() if k in known}
        return TypeAdapter(cls).validate_python(values)


class Settings(BaseSettings):
    """
    Library settings with multi-environment support.

    Configuration hierarchy (lowest to highest precedence):
    1. settings/config.yaml (base)
    2. settings/config.{environment}.yaml (environment-specific)
    3. Environment variables (IAB_*)

    Examples:
        >>> settings = get_settings()
        >>> settings.log_level
        'INFO'
        >>> ParserConfig.from_settings(settings).break_workers
        1
    """

    model_config = SettingsConfigDict(
        env_prefix="IAB_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="allow",
    )

    environment: str = "development"
    log_level: str = "INFO"
    log_json: bool = False

    parser: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        # Environment variables win over values loaded from YAML files
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def load_from_yaml(cls, config_path: Path | None = None) -> "Settings":
        """
        Load settings from YAML configuration file.

        Args:
            config_path: Path to config file (default: settings/config.yaml)

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = Path.cwd() / "settings" / "config.yaml"

        if not config_path.exists():
            return cls()

        with open(config_path, encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}

        env = os.getenv("IAB_ENVIRONMENT", config_data.get("environment", "development"))
        env_config_path = config_path.parent / f"config.{env}.yaml"

        if env_config_path.exists():
            with open(env_config_path, encoding="utf-8") as f:
                env_config = yaml.safe_load(f) or {}
                config_data = cls._deep_merge(config_data, env_config)

        return cls(**config_data)

    @staticmethod
    def _deep_merge(base: dict, override: dict) -> dict:
        """Deep merge two dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = Settings._deep_merge(result[key], value)
            else:
                result[key] = value
        return result


@lru_cache
def get_settings(config_path: Path | None = None) -> Settings:
    """
    Get cached settings instance.

    Args:
        config_path: Optional path to config file

    Returns:
        Settings instance
    """
    return Settings.load_from_yaml(config_path)


def reload_settings() -> Settings:
    """Reload settings by clearing cache."""
    get_settings.cache_clear()
    return get_settings()


__all__ = [
    "ParserConfig",
    "Settings",
    "get_settings",
    "reload_settings",
]
