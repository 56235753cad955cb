"""Berkshelf API server declaration.

A server is identified by its path. Attributes left out of a declaration are
filled in from the process-wide settings exactly once, when the declaration
is built, so a server never changes under a running install.
"""

import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from berkshelf_api_installer.const import (
    BERKSHELF_API_BINARY,
    BINSTUBS_DIR,
    CONFIG_FILENAME,
    RELEASE_VERSION_PATTERN,
)
from berkshelf_api_installer.resources.endpoints import (
    AutoChefServerEndpoint,
    ChefServerEndpoint,
    EndpointUnion,
    GithubEndpoint,
    OpscodeEndpoint,
)


def is_release_version(version: str) -> bool:
    """Check if a version string names a released gem (1, 1.2 or 1.2.3)."""
    return re.match(RELEASE_VERSION_PATTERN, version) is not None


class BerkshelfApiServer(BaseModel):
    """Desired state of one Berkshelf API server."""

    path: str
    version: str
    port: int | str
    user: str
    group: str
    ruby_version: str
    install_path: str
    install_from_git: bool | None = None
    config: dict[str, Any] = Field(default_factory=dict)
    endpoints: list[EndpointUnion] = Field(default_factory=list)

    # Defaults for endpoint helpers, taken from settings at construction
    opscode_url: str = Field(default="http://cookbooks.opscode.com/api/v1", exclude=True)
    chef_client_config: str = Field(default="/etc/chef/client.rb", exclude=True)

    @field_validator("path", "install_path")
    @classmethod
    def normalize_path(cls, v: str) -> str:
        if len(v) > 1:
            return v.rstrip("/")
        return v

    @model_validator(mode="after")
    def derive_install_from_git(self) -> "BerkshelfApiServer":
        if self.install_from_git is None:
            self.install_from_git = not is_release_version(self.version)
        return self

    @classmethod
    def from_settings(cls, path: str | None, settings, **attributes) -> "BerkshelfApiServer":
        """Build a server, filling unset attributes from settings.

        Args:
            path: Server path; the configured default path when None
            settings: Root Settings instance
            **attributes: Explicit attributes; None values count as unset

        Returns:
            A validated BerkshelfApiServer
        """
        defaults = settings.berkshelf_api
        values = {
            "path": path or defaults.path,
            "version": defaults.version,
            "port": defaults.port,
            "user": defaults.user,
            "group": defaults.group,
            "ruby_version": defaults.ruby_version,
            "install_path": defaults.install_path,
            "opscode_url": defaults.opscode_url,
            "chef_client_config": defaults.chef_client_config,
        }
        values.update({k: v for k, v in attributes.items() if v is not None})
        return cls.model_validate(values)

    @property
    def config_path(self) -> str:
        return str(Path(self.path) / CONFIG_FILENAME)

    @property
    def binary_path(self) -> str:
        if self.install_from_git:
            return str(Path(self.install_path) / BINSTUBS_DIR / BERKSHELF_API_BINARY)
        return BERKSHELF_API_BINARY

    # Helpers to declare endpoints

    def opscode_endpoint(self, url: str | None = None) -> OpscodeEndpoint:
        endpoint = OpscodeEndpoint(url=url or self.opscode_url)
        self.endpoints.append(endpoint)
        return endpoint

    def chef_server_endpoint(
        self, url: str, client_name: str | None = None, client_key: str | None = None
    ) -> ChefServerEndpoint:
        endpoint = ChefServerEndpoint(url=url, client_name=client_name, client_key=client_key)
        self.endpoints.append(endpoint)
        return endpoint

    def github_endpoint(self, organization: str, api_token: str | None = None) -> GithubEndpoint:
        endpoint = GithubEndpoint(organization=organization, api_token=api_token)
        self.endpoints.append(endpoint)
        return endpoint

    def auto_chef_server_endpoint(self) -> AutoChefServerEndpoint:
        endpoint = AutoChefServerEndpoint(client_config=self.chef_client_config)
        self.endpoints.append(endpoint)
        return endpoint

    def enabled_endpoints(self) -> list:
        return [endpoint for endpoint in self.endpoints if endpoint.enabled]

    def __str__(self) -> str:
        return f"berkshelf_api[{self.path}]"
