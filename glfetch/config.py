"""Configuration management for the glfetch application."""

from pathlib import Path
from typing import Any, Literal, cast

from pydantic import AnyHttpUrl, BaseModel, Field, SecretStr, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

DEFAULT_CONFIG_FILE = Path("config.toml")


class GitLabSettings(BaseModel):
    """Connection details for the GitLab instance."""

    url: AnyHttpUrl = Field(
        default=cast("AnyHttpUrl", "https://gitlab.com"),
        description="Origin of the GitLab instance, without the /api suffix.",
    )
    token: SecretStr = Field(
        default=SecretStr(""),
        description="Personal access token sent in the PRIVATE-TOKEN header.",
    )
    api_version: Literal["v3", "v4"] = Field(
        default="v3",
        description="REST API version segment used to build request paths.",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Per-request network timeout in seconds.",
    )


class ProjectSettings(BaseModel):
    """The single project every command operates on."""

    name: str = Field(
        default="",
        description="Project ID or full path, e.g. 'group/name'.",
    )


class AppSettings(BaseSettings):
    """Application settings loaded from init values, the environment, .env and config.toml."""

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_prefix="GLFETCH_",
        env_nested_delimiter="__",
        extra="ignore",
        toml_file=DEFAULT_CONFIG_FILE,
    )

    gitlab: GitLabSettings = Field(default_factory=GitLabSettings)
    project: ProjectSettings = Field(default_factory=ProjectSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Read the TOML config file after the environment-based sources."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @model_validator(mode="after")
    def _enforce_required_fields(self) -> "AppSettings":
        if not self.gitlab.token.get_secret_value():
            msg = "gitlab.token (GLFETCH_GITLAB__TOKEN) must be configured"
            raise ValueError(msg)
        if not self.project.name:
            msg = "project.name (GLFETCH_PROJECT__NAME) must be configured"
            raise ValueError(msg)
        return self


def load_settings(config_file: Path | None = None, *, project: str | None = None) -> AppSettings:
    """Load application settings.

    ``config_file`` replaces ./config.toml and ``project`` overrides the configured
    project name before the required fields are checked.
    """
    overrides: dict[str, Any] = {"project": {"name": project}} if project else {}
    if config_file is None:
        return AppSettings(**overrides)
    if not config_file.is_file():
        msg = f"configuration file not found: {config_file}"
        raise ValueError(msg)

    class _FileSettings(AppSettings):
        model_config = SettingsConfigDict(toml_file=config_file)

    return _FileSettings(**overrides)
