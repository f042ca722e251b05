"""Application settings loaded from flags, environment and a YAML file."""

import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CONFIG = """\
logging:
  level: warning
  format: text

dns:
  default_scope: active
  default_interfaces: []
  custom_presets:
    personal: ["1.1.1.1", "1.0.0.1"]
"""


def default_config_path() -> Path:
    """$CDNS_CONFIG, else $XDG_CONFIG_HOME/cdns/config.yaml, else ~/.config/cdns/config.yaml."""
    if path := os.getenv("CDNS_CONFIG"):
        return Path(path)
    base = os.getenv("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / "cdns" / "config.yaml"


def ensure_config_file(path: Path) -> bool:
    """Write the default configuration if `path` is missing. Returns True if created."""
    if path.exists():
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG)
    return True


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


class Scope(str, Enum):
    """Which interfaces `set` targets when none are named."""

    ACTIVE = "active"
    ALL = "all"
    EXPLICIT = "explicit"


class LoggingSettings(BaseModel):
    level: LogLevel = LogLevel.WARNING
    format: LogFormat = LogFormat.TEXT


class DNSSettings(BaseModel):
    default_scope: Scope = Scope.ACTIVE
    default_interfaces: list[str] = Field(default_factory=list)
    custom_presets: dict[str, list[str]] = Field(
        default_factory=lambda: {"personal": ["1.1.1.1", "1.0.0.1"]}
    )


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CDNS_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    dns: DNSSettings = Field(default_factory=DNSSettings)
    command_timeout: float = Field(default=30.0, gt=0, description="Seconds allowed per backend command")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Source order: init args (flags) > OS env > config.yaml
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls),
        )


def load_settings(config_file: Path | None = None, **overrides) -> Settings:
    """
    Load settings with `config_file` (or the default path) as the YAML source.

    A missing file is not an error; defaults and environment still apply.
    """
    path = config_file or default_config_path()

    class FileSettings(Settings):
        model_config = SettingsConfigDict(yaml_file=path)

    return FileSettings(**overrides)
