"""Declarations of Berkshelf API servers and their endpoints."""

from berkshelf_api_installer.resources.endpoints import (
    AutoChefServerEndpoint,
    ChefServerEndpoint,
    Endpoint,
    EndpointUnion,
    GithubEndpoint,
    OpscodeEndpoint,
)
from berkshelf_api_installer.resources.server import BerkshelfApiServer, is_release_version

__all__ = [
    "AutoChefServerEndpoint",
    "BerkshelfApiServer",
    "ChefServerEndpoint",
    "Endpoint",
    "EndpointUnion",
    "GithubEndpoint",
    "OpscodeEndpoint",
    "is_release_version",
]
