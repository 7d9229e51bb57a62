"""Configuration management for skillkit."""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_PATH = "skillkit.yaml"


def _substitute_env_vars(value: Any) -> Any:
    """Recursively substitute environment variables in config values.

    Supports ${VAR_NAME} and ${VAR_NAME:-default} syntax.
    """
    if isinstance(value, str):
        pattern = r'\$\{([^}:]+)(?::-([^}]*))?\}'

        def replacer(match: re.Match) -> str:
            var_name = match.group(1)
            default = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default)

        return re.sub(pattern, replacer, value)
    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]
    return value


class SkillsConfig(BaseModel):
    """Skill discovery configuration."""
    roots: list[str] = Field(default_factory=lambda: ["./skills"])
    entry_document: str = "SKILL.md"
    max_body_bytes: int = 512 * 1024
    max_resource_bytes: int | None = 5 * 1024 * 1024
    disabled_skills: list[str] = Field(default_factory=list)


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    format: str = "text"


class Config(BaseSettings):
    """Main skillkit configuration.

    Nested values can also come from the environment, e.g.
    ``SKILLKIT_LOGGING__LEVEL=DEBUG``.
    """
    model_config = SettingsConfigDict(env_prefix="SKILLKIT_", env_nested_delimiter="__")

    skills: SkillsConfig = Field(default_factory=SkillsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: str | Path = DEFAULT_CONFIG_PATH) -> Config:
    """Load configuration from YAML file with environment variable substitution.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Loaded and validated Config object.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        # Return default config if file doesn't exist
        return Config()

    with open(config_path) as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        return Config()

    config_data = _substitute_env_vars(raw_config)

    return Config(**config_data)


DEFAULT_CONFIG = """\
# skillkit configuration
# Environment variables can be substituted with ${VAR_NAME} syntax

skills:
  # Directories holding one subdirectory per skill
  roots:
    - "${SKILLKIT_SKILLS_DIR:-./skills}"
  entry_document: "SKILL.md"
  max_body_bytes: 524288        # SKILL.md larger than this is rejected
  max_resource_bytes: 5242880   # per bundled file
  disabled_skills: []

logging:
  level: "INFO"
  format: "text"  # or "json"
"""


def generate_default_config(path: str | Path = DEFAULT_CONFIG_PATH) -> Path:
    """Write the default configuration file.

    Args:
        path: Path to write the configuration file.
    """
    path = Path(path)
    path.write_text(DEFAULT_CONFIG)
    return path
