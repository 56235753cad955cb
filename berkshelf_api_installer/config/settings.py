"""Centralized configuration management using pydantic-settings.

This module is the process-wide attribute namespace of the installer. Every
server attribute that is not given explicitly falls back to a value from
here, resolved once when the server descriptor is built.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BerkshelfApiSettings(BaseSettings):
    """Defaults for Berkshelf API server declarations."""

    model_config = SettingsConfigDict(env_prefix="BERKSHELF_API_", extra="ignore")

    path: str = Field(
        default="/srv/berkshelf-api",
        description="Server home directory, also where config.json lives",
    )
    version: str = Field(
        default="1.2.1",
        description="Gem version, or a git ref to install from source",
    )
    port: int = Field(
        default=26200,
        description="TCP port the API server listens on",
    )
    user: str = Field(
        default="berkshelf-api",
        description="System user the service runs as",
    )
    group: str = Field(
        default="berkshelf-api",
        description="System group of the service user",
    )
    ruby_version: str = Field(
        default="2.0.0-p353",
        description="Ruby version installed through rbenv",
    )
    install_path: str = Field(
        default="/opt/berkshelf-api",
        description="Checkout directory used when installing from git",
    )
    config: dict[str, Any] = Field(
        default_factory=dict,
        description="Global config.json overrides (JSON object)",
    )
    opscode_url: str = Field(
        default="http://cookbooks.opscode.com/api/v1",
        description="Default community site URL for opscode endpoints",
    )
    chef_client_config: str = Field(
        default="/etc/chef/client.rb",
        description="Chef client config used to auto-discover a Chef Server endpoint",
    )

    @field_validator("path", "install_path")
    @classmethod
    def normalize_path(cls, v: str) -> str:
        if len(v) > 1:
            return v.rstrip("/")
        return v


class RbenvSettings(BaseSettings):
    """rbenv and ruby-build locations."""

    model_config = SettingsConfigDict(env_prefix="RBENV_", extra="ignore")

    root: str = Field(
        default="/opt/rbenv",
        description="RBENV_ROOT where rbenv is checked out",
    )
    git_url: str = Field(
        default="https://github.com/rbenv/rbenv.git",
        description="rbenv repository",
    )
    git_ref: str = Field(
        default="master",
        description="rbenv revision",
    )
    ruby_build_git_url: str = Field(
        default="https://github.com/rbenv/ruby-build.git",
        validation_alias="RUBY_BUILD_GIT_URL",
        description="ruby-build plugin repository",
    )

    @property
    def binary(self) -> str:
        return str(Path(self.root) / "bin" / "rbenv")

    @property
    def plugins_dir(self) -> str:
        return str(Path(self.root) / "plugins")


class RunitSettings(BaseSettings):
    """runit supervision directories."""

    model_config = SettingsConfigDict(env_prefix="RUNIT_", extra="ignore")

    sv_dir: str = Field(
        default="/etc/sv",
        description="Directory holding service definitions",
    )
    service_dir: str = Field(
        default="/etc/service",
        description="Directory scanned by runsvdir",
    )
    package: str = Field(
        default="runit",
        description="Package providing runit",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    debug_all: bool = Field(
        default=False,
        validation_alias="DEBUG_ALL",
        description="Enable debug logging for all libraries",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Log level for berkshelf_api namespace",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str) -> str:
        if isinstance(v, str):
            return v.upper()
        return v


class Settings(BaseSettings):
    """Root settings class with all nested configurations.

    Usage:
        from berkshelf_api_installer.config import get_settings

        settings = get_settings()
        port = settings.berkshelf_api.port
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    berkshelf_api: BerkshelfApiSettings = Field(default_factory=BerkshelfApiSettings)
    rbenv: RbenvSettings = Field(default_factory=RbenvSettings)
    runit: RunitSettings = Field(default_factory=RunitSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Singleton pattern for settings
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance.

    Returns:
        The singleton Settings instance with all configuration loaded.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
