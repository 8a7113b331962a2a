from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from abilityforge.exceptions import ConfigError
from abilityforge.logging import get_logger

__all__ = [
    "AbilityForgeConfig",
    "EditorConfig",
    "RegistryConfig",
    "PROJECT_CONFIG_NAME",
    "load_config",
    "get_user_config_path",
]

logger = get_logger(__name__)

PROJECT_CONFIG_NAME = "abilityforge.yaml"


class EditorConfig(BaseModel):
    """Settings for the editing surface boundary.

    Attributes:
        layout_origin_x: Horizontal position of the first deserialized block.
        layout_origin_y: Vertical position of the first deserialized block.
        json_indent: Indentation used when rendering documents as JSON.
    """

    layout_origin_x: int = 50
    layout_origin_y: int = 50
    json_indent: int = Field(default=2, ge=0, le=8)


class RegistryConfig(BaseModel):
    """Where the effect registry snapshot comes from when not given explicitly."""

    snapshot_path: Path | None = None

    @field_validator("snapshot_path")
    @classmethod
    def check_snapshot_exists(cls, v: Path | None) -> Path | None:
        if v is not None and not v.exists():
            logger.warning("registry_snapshot_missing", path=str(v))
        return v


class YamlConfigSource(PydanticBaseSettingsSource):
    """Settings source that reads one YAML file."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            try:
                loaded = yaml.safe_load(yaml_file.read_text(encoding="utf-8"))
            except yaml.YAMLError as e:
                raise ConfigError(
                    message=f"Invalid YAML in {yaml_file}: {e}",
                ) from e
            if loaded is None:
                logger.warning("config_file_empty", path=str(yaml_file))
            elif not isinstance(loaded, dict):
                raise ConfigError(
                    message=f"Config file {yaml_file} must contain a mapping",
                    value=type(loaded).__name__,
                )
            else:
                self._config_data = loaded

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._config_data


class AbilityForgeConfig(BaseSettings):
    """Root configuration object."""

    model_config = SettingsConfigDict(
        env_prefix="ABILITYFORGE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    editor: EditorConfig = Field(default_factory=EditorConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    verbosity: Literal["error", "warning", "info", "debug"] = "warning"

    @classmethod
    def project_config_path(cls) -> Path:
        return Path.cwd() / PROJECT_CONFIG_NAME

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority, highest first: init kwargs, ABILITYFORGE_* env vars,
        project YAML, user YAML.
        """
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, cls.project_config_path()),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


def get_user_config_path() -> Path:
    """Return ~/.config/abilityforge/config.yaml."""
    return Path.home() / ".config" / "abilityforge" / "config.yaml"


def load_config(config_path: Path | None = None) -> AbilityForgeConfig:
    """Load configuration with hierarchy: defaults -> user -> project -> env.

    Args:
        config_path: Project config file; defaults to ./abilityforge.yaml.

    Returns:
        Merged AbilityForgeConfig.

    Raises:
        ConfigError: If a config file is not valid YAML or a value fails
            validation.
    """
    settings_cls = AbilityForgeConfig
    if config_path is not None:
        explicit = Path(config_path)

        class _ExplicitProjectConfig(AbilityForgeConfig):
            @classmethod
            def project_config_path(cls) -> Path:
                return explicit

        settings_cls = _ExplicitProjectConfig

    project_path = settings_cls.project_config_path()
    if not project_path.exists():
        logger.info("project_config_not_found", path=str(project_path))

    try:
        return settings_cls()
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
