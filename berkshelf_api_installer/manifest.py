"""Loading server declarations from a YAML manifest.

A manifest lists the servers to converge on this host together with their
endpoints::

    servers:
      - path: /srv/berkshelf-api
        version: "1.2.1"
        config:
          build_interval: 10
        endpoints:
          - type: opscode
          - type: github
            organization: acme
            api_token: secret
            enabled: false
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter, ValidationError

from berkshelf_api_installer.resources import BerkshelfApiServer, EndpointUnion
from berkshelf_api_installer.utils.logging import get_logger

logger = get_logger(__name__)

_endpoint_adapter = TypeAdapter(EndpointUnion)


def build_endpoint(server: BerkshelfApiServer, data: dict[str, Any]):
    """Validate one endpoint mapping, filling server-level defaults."""
    data = dict(data)
    if data.get("type") == "opscode":
        data.setdefault("url", server.opscode_url)
    elif data.get("type") == "auto_chef_server":
        data.setdefault("client_config", server.chef_client_config)
    return _endpoint_adapter.validate_python(data)


def build_server(data: dict[str, Any], settings) -> BerkshelfApiServer:
    """Build one server declaration from its manifest mapping."""
    if not isinstance(data, dict):
        raise ValueError(f"Server entry must be a mapping, got {type(data).__name__}")

    attributes = dict(data)
    endpoints = attributes.pop("endpoints", None) or []
    path = attributes.pop("path", None)

    server = BerkshelfApiServer.from_settings(path, settings, **attributes)
    for endpoint in endpoints:
        server.endpoints.append(build_endpoint(server, endpoint))
    return server


def load_manifest(manifest_path: str, settings) -> list[BerkshelfApiServer]:
    """
    Load all server declarations from a manifest file.

    Args:
        manifest_path: Path to the YAML manifest
        settings: Root Settings instance supplying attribute defaults

    Returns:
        Server declarations in manifest order

    Raises:
        FileNotFoundError: If the manifest does not exist
        ValueError: If the manifest is not a valid server list
    """
    path = Path(manifest_path)
    if not path.exists():
        raise FileNotFoundError(f"Manifest not found: {manifest_path}")

    try:
        document = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse manifest {manifest_path}: {e}") from e

    if not isinstance(document, dict) or not isinstance(document.get("servers"), list):
        raise ValueError(f"Manifest {manifest_path} must contain a 'servers' list")

    servers = []
    for index, entry in enumerate(document["servers"]):
        try:
            servers.append(build_server(entry, settings))
        except ValidationError as e:
            raise ValueError(f"Invalid server #{index} in {manifest_path}:\n{e}") from e

    logger.info(f"Loaded {len(servers)} server(s) from {manifest_path}")
    return servers
