"""Assembly of the berkshelf-api config.json document."""

import json
from typing import Any

from berkshelf_api_installer.utils.logging import get_logger

logger = get_logger(__name__)


def _without_endpoints(mapping: dict[str, Any], source: str) -> dict[str, Any]:
    """Drop an ``endpoints`` key from an override mapping.

    The endpoint list only ever comes from endpoint declarations.
    """
    if "endpoints" not in mapping:
        return mapping
    logger.warning(
        f"Ignoring 'endpoints' in {source} config, declare endpoints on the server instead",
        source=source,
    )
    return {k: v for k, v in mapping.items() if k != "endpoints"}


def assemble_config(server, global_config: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    Assemble the configuration document for one server.

    Enabled endpoint declarations contribute to ``endpoints`` in declaration
    order. Global settings are merged over that, and the server's own config
    over the global settings (shallow, last one wins).

    Args:
        server: BerkshelfApiServer declaration
        global_config: Process-wide config overrides

    Returns:
        The config.json document as a dict
    """
    config: dict[str, Any] = {"endpoints": []}
    for endpoint in server.endpoints:
        if endpoint.enabled:
            config["endpoints"].append(endpoint.endpoint_data())
        else:
            logger.debug(f"Skipping disabled endpoint {endpoint.format_label()}")

    config.update(_without_endpoints(global_config or {}, "global"))
    config.update(_without_endpoints(server.config, "server"))

    logger.debug(f"Assembled config with {len(config['endpoints'])} endpoints", server=server.path)
    return config


def render_config(server, global_config: dict[str, Any] | None = None) -> str:
    """Serialize the assembled configuration as JSON text."""
    return json.dumps(assemble_config(server, global_config), indent=2) + "\n"
