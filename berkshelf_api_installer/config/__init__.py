"""Configuration module for berkshelf-api-installer.

This module provides centralized, type-safe configuration management
using pydantic-settings with environment variable loading.

Usage:
    from berkshelf_api_installer.config import get_settings

    settings = get_settings()

    # Server attribute defaults
    version = settings.berkshelf_api.version
    port = settings.berkshelf_api.port

    # rbenv and runit locations
    rbenv_root = settings.rbenv.root
    sv_dir = settings.runit.sv_dir
"""

from berkshelf_api_installer.config.settings import (
    BerkshelfApiSettings,
    LoggingSettings,
    RbenvSettings,
    RunitSettings,
    Settings,
    get_settings,
    reset_settings,
)

__all__ = [
    "BerkshelfApiSettings",
    "LoggingSettings",
    "RbenvSettings",
    "RunitSettings",
    "Settings",
    "get_settings",
    "reset_settings",
]
