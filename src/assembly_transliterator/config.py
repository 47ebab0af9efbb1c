"""
Configuration management for assembly-transliterator.

Handles loading configuration from YAML files and environment variables.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from assembly_transliterator.assembly import ASSEMBLY_FILE_NAME
from assembly_transliterator.languages import TargetLanguage

CONFIG_FILE_NAMES = ("transliterate.yaml", "transliterate.yml", ".transliterate.yaml")

_ENV_REFERENCE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

# Load .env file if present (before Settings initialization)
load_dotenv()


class TransliterationConfig(BaseModel):
    """Configuration for a transliteration run."""

    # Target languages; empty means every supported language
    languages: list[TargetLanguage] = Field(default_factory=list)
    # Tolerate missing fixtures instead of failing
    loose: bool = Field(default=False)
    # Fail the run if any example failed compilation
    strict: bool = Field(default=False)
    # Pre-built translation tablet consulted before live translation
    tablet: Path | None = Field(default=None)
    assembly_file_name: str = Field(default=ASSEMBLY_FILE_NAME, min_length=1)

    @field_validator("languages", mode="before")
    @classmethod
    def normalize_languages(cls, v: Any) -> Any:
        """Accept a single name and mixed-case names."""
        if isinstance(v, str):
            v = [v]
        if isinstance(v, list):
            return [item.lower() if isinstance(item, str) else item for item in v]
        return v

    @field_validator("tablet")
    @classmethod
    def expand_tablet(cls, v: Path | None) -> Path | None:
        """Expand user home directory in the tablet path."""
        return Path(v).expanduser() if v is not None else None


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO")
    file: Path | None = Field(default=None)
    format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    max_file_size_mb: int = Field(default=10, ge=1, le=100)
    backup_count: int = Field(default=5, ge=1, le=20)


class Settings(BaseSettings):
    """Main settings class that combines all configurations."""

    model_config = SettingsConfigDict(
        env_prefix="TRANSLITERATE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    transliteration: TransliterationConfig = Field(default_factory=TransliterationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> Settings:
        """Load settings from a YAML file, expanding ``${VAR}`` references."""
        path = Path(path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}

        return cls(**_expand_env_vars(yaml_config))


def _expand_env_vars(value: Any) -> Any:
    """Expand ``${VAR}`` references in every string of a YAML document, lists included."""
    if isinstance(value, dict):
        return {key: _expand_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    if isinstance(value, str):
        # Unset variables expand to an empty string
        return _ENV_REFERENCE.sub(lambda m: os.getenv(m.group(1), ""), value)
    return value


def find_config_file(directory: Path | str = ".") -> Path | None:
    """Return the first of CONFIG_FILE_NAMES present in ``directory``."""
    for name in CONFIG_FILE_NAMES:
        candidate = Path(directory) / name
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | str | None = None) -> Settings:
    """
    Load configuration from a YAML file, falling back to defaults.

    Args:
        path: Config file. If None, the current directory is searched for one of
            CONFIG_FILE_NAMES.

    Returns:
        Settings with merged YAML and environment configurations.
    """
    if path is None:
        path = find_config_file()
    if path is None:
        return Settings()
    return Settings.from_yaml(path)


def create_default_config(path: Path | str = "transliterate.yaml") -> None:
    """Create a default configuration file."""
    default_config = """# assembly-transliterator configuration
transliteration:
  # Target languages (python, csharp, java, go); empty selects all of them
  languages: []
  # Ignore missing fixture files instead of failing
  loose: false
  # Fail the run if any example failed compilation
  strict: false
  # Pre-built translation tablet (optional)
  tablet: null
  # Name of the assembly file inside each directory
  assembly_file_name: ".jsii"

logging:
  level: "INFO"
  # file: "./logs/transliterate.log"
"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(default_config)
