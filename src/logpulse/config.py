"""
Service settings and configuration loading.

Uses Pydantic Settings for environment variable handling; the monitored
websites, database and PV filter settings are read from the same YAML file.
"""

import os
from functools import lru_cache
from typing import Any, ClassVar, Dict, Optional, Tuple, Type

import structlog
import yaml
from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from .core.exceptions import ConfigurationError
from .models.configuration import Configuration

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"


def _resolve_config_path(config_path: Optional[str] = None) -> Optional[str]:
    if config_path:
        return config_path

    env_path = os.environ.get("LOGPULSE_CONFIG_PATH")
    if env_path:
        return env_path

    # Look for config.yaml in common locations
    possible_paths = [
        DEFAULT_CONFIG_PATH,  # Current directory
        "../../config.yaml",  # Project root from src/logpulse
    ]
    for path in possible_paths:
        if os.path.exists(path):
            return path
    return None


def load_config_file(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Returns an empty dict when no file is found. Raises ConfigurationError
    when the file exists but cannot be read or parsed.
    """
    path = _resolve_config_path(config_path)
    if path is None or not os.path.exists(path):
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read configuration file: {path}",
            details={"path": path, "error": str(e)},
        ) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Configuration file is not valid YAML: {path}",
            details={"path": path, "error": str(e)},
        ) from e

    if not isinstance(config_data, dict):
        raise ConfigurationError(
            f"Configuration file must contain a mapping at the top level: {path}",
            details={"path": path, "type": type(config_data).__name__},
        )
    return config_data


def parse_configuration(data: Dict[str, Any]) -> Configuration:
    """Build a Configuration tree from already-loaded data."""
    try:
        return Configuration.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigurationError(
            "Configuration does not match the expected structure",
            details={
                "errors": [
                    {
                        "field": ".".join(str(part) for part in err["loc"]),
                        "message": err["msg"],
                    }
                    for err in e.errors()
                ]
            },
        ) from e


def load_configuration(config_path: Optional[str] = None) -> Configuration:
    """
    Load the monitored-site configuration.

    Args:
        config_path: Explicit YAML path; falls back to the configured path

    Returns:
        Parsed Configuration (not yet validated)
    """
    path = config_path or get_settings().config_path
    if not os.path.exists(path):
        raise ConfigurationError(
            f"Configuration file not found: {path}",
            details={"path": path},
        )

    config_data = load_config_file(path)
    configuration = parse_configuration(config_data)
    logger.info(
        "Configuration loaded",
        path=path,
        websites=len(configuration.websites),
    )
    return configuration


class YamlSectionSource(PydanticBaseSettingsSource):
    """
    Settings source backed by one top-level section of the YAML file.

    The file is re-read every time settings are built, so a reload sees
    edits. Environment variables take precedence over this source.
    """

    def __init__(self, settings_cls: Type[BaseSettings], section: str) -> None:
        super().__init__(settings_cls)
        data = load_config_file().get(section) or {}
        self.section_data: Dict[str, Any] = data if isinstance(data, dict) else {}

    def get_field_value(self, field: FieldInfo, field_name: str) -> Tuple[Any, str, bool]:
        return self.section_data.get(field_name), field_name, False

    def __call__(self) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for field_name, field in self.settings_cls.model_fields.items():
            value, key, _ = self.get_field_value(field, field_name)
            if value is not None:
                values[key] = value
        return values


class YamlSectionSettings(BaseSettings):
    """Settings read from env vars first, then from a YAML section."""

    yaml_section: ClassVar[str] = ""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlSectionSource(settings_cls, cls.yaml_section),
            file_secret_settings,
        )


class SecuritySettings(YamlSectionSettings):
    """Security-related configuration (YAML ``security:`` section)."""

    yaml_section: ClassVar[str] = "security"

    admin_token: str = Field(default="", description="Admin token for reload endpoint")

    class Config:
        env_prefix = "LOGPULSE_SECURITY_"


class Settings(YamlSectionSettings):
    """Main service settings (YAML ``server:`` section)."""

    yaml_section: ClassVar[str] = "server"

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8088, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Log level")

    # Configuration handling
    config_path: str = Field(default=DEFAULT_CONFIG_PATH, description="Path of the websites configuration file")
    setup_mode: bool = Field(default=False, description="Tolerate missing log paths during first-time setup")
    check_paths: bool = Field(default=True, description="Check local log paths at startup")
    check_remote: bool = Field(default=False, description="Check remote source paths at startup")

    security: SecuritySettings = Field(default_factory=SecuritySettings)

    class Config:
        env_prefix = "LOGPULSE_"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance; env vars override the YAML file."""
    return Settings()


def reload_settings() -> Settings:
    """Reload settings (clears cache, re-reads the YAML file)."""
    get_settings.cache_clear()
    return get_settings()


def is_setup_mode() -> bool:
    """Whether first-time setup is in progress."""
    return get_settings().setup_mode
