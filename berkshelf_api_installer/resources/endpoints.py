"""Berkshelf API endpoint declarations.

An endpoint is one upstream source the API server indexes cookbooks from.
Each variant turns its parameters into the ``{"type": ..., "options": ...}``
entry berkshelf-api expects in the ``endpoints`` list of its config.json.
"""

import re
import socket
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Discriminator, Field, Tag

from berkshelf_api_installer.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CHEF_CLIENT_CONFIG = "/etc/chef/client.rb"
DEFAULT_CLIENT_KEY = "/etc/chef/client.pem"

# chef_server_url "https://..." / node_name 'foo' lines in client.rb
CLIENT_RB_SETTING = re.compile(r"""^\s*(\w+)\s+["']([^"']*)["']\s*$""")


class Endpoint(BaseModel, ABC):
    """Base endpoint declaration."""

    type: str
    enabled: bool = True

    def enable(self) -> "Endpoint":
        self.enabled = True
        return self

    def disable(self) -> "Endpoint":
        self.enabled = False
        return self

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifying argument of the declaration."""

    @abstractmethod
    def endpoint_data(self) -> dict[str, Any]:
        """Mapping contributed to the server's endpoint list."""

    def format_label(self) -> str:
        state = "enabled" if self.enabled else "disabled"
        return f"[{self.type}] {self.name or '(auto)'} ({state})"


class OpscodeEndpoint(Endpoint):
    """Community site (Opscode / Supermarket) endpoint."""

    type: Literal["opscode"] = "opscode"
    url: str

    @property
    def name(self) -> str:
        return self.url

    def endpoint_data(self) -> dict[str, Any]:
        return {"type": "opscode", "options": {"url": self.url}}


class ChefServerEndpoint(Endpoint):
    """Private Chef Server endpoint."""

    type: Literal["chef_server"] = "chef_server"
    url: str
    client_name: str | None = None
    client_key: str | None = None

    @property
    def name(self) -> str:
        return self.url

    def endpoint_data(self) -> dict[str, Any]:
        return {
            "type": "chef_server",
            "options": {
                "url": self.url,
                "client_name": self.client_name,
                "client_key": self.client_key,
            },
        }


class GithubEndpoint(Endpoint):
    """GitHub organization endpoint."""

    type: Literal["github"] = "github"
    organization: str
    api_token: str | None = None

    @property
    def name(self) -> str:
        return self.organization

    def endpoint_data(self) -> dict[str, Any]:
        return {
            "type": "github",
            "options": {
                "organization": self.organization,
                "access_token": self.api_token,
            },
        }


def read_chef_client_config(path: str) -> dict[str, str]:
    """Read the string settings out of a Chef client.rb.

    Only simple ``key "value"`` lines are understood; anything else in the
    file is Ruby and is ignored.
    """
    settings = {}
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        match = CLIENT_RB_SETTING.match(line)
        if match:
            settings[match.group(1)] = match.group(2)
    return settings


class AutoChefServerEndpoint(Endpoint):
    """Chef Server endpoint discovered from the node's own Chef client.

    The server, client name and key are the ones the local chef-client uses,
    read from its client.rb when the configuration is assembled.
    """

    type: Literal["auto_chef_server"] = "auto_chef_server"
    client_config: str = DEFAULT_CHEF_CLIENT_CONFIG
    fqdn: str | None = Field(default=None, exclude=True)

    @property
    def name(self) -> str:
        return ""

    def endpoint_data(self) -> dict[str, Any]:
        settings = read_chef_client_config(self.client_config)
        url = settings.get("chef_server_url")
        if not url:
            raise RuntimeError(
                f"chef_server_url not set in {self.client_config}, cannot discover the Chef Server endpoint"
            )
        client_name = settings.get("node_name") or self.fqdn or socket.getfqdn()
        client_key = settings.get("client_key") or DEFAULT_CLIENT_KEY
        logger.debug(f"Discovered Chef Server {url} as {client_name}")
        return ChefServerEndpoint(url=url, client_name=client_name, client_key=client_key).endpoint_data()


# Discriminated union of all endpoint types
# Uses the 'type' field to determine which model to instantiate
EndpointUnion = Annotated[
    Annotated[OpscodeEndpoint, Tag("opscode")]
    | Annotated[ChefServerEndpoint, Tag("chef_server")]
    | Annotated[GithubEndpoint, Tag("github")]
    | Annotated[AutoChefServerEndpoint, Tag("auto_chef_server")],
    Discriminator("type"),
]
