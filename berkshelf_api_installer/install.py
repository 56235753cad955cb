"""Entry points behind the CLI commands."""

import click

from berkshelf_api_installer.config import get_settings
from berkshelf_api_installer.manifest import load_manifest
from berkshelf_api_installer.provider import BerkshelfApiProvider, render_config
from berkshelf_api_installer.resources import BerkshelfApiServer
from berkshelf_api_installer.utils.logging import get_logger

logger = get_logger(__name__)


def resolve_servers(
    path: str | None,
    manifest: str | None,
    attributes: dict | None = None,
    opscode: bool = True,
) -> list[BerkshelfApiServer]:
    """Build the server declarations a command operates on.

    With a manifest, every server in it (or only the one at ``path``, when
    given). Without one, a single server at ``path`` built from settings and
    command line attributes, indexing the community site unless disabled.
    """
    settings = get_settings()

    if manifest:
        servers = load_manifest(manifest, settings)
        if path:
            servers = [s for s in servers if s.path == path.rstrip("/")]
            if not servers:
                raise ValueError(f"No server with path {path} in {manifest}")
        return servers

    server = BerkshelfApiServer.from_settings(path, settings, **(attributes or {}))
    if opscode:
        server.opscode_endpoint()
    logger.debug(f"Declared {server} from settings", endpoints=len(server.endpoints))
    return [server]


def install_servers(servers: list[BerkshelfApiServer], dry_run: bool = False, host=None) -> int:
    """Converge every server. Returns the number of changed resources."""
    settings = get_settings()
    changed = 0
    for server in servers:
        provider = BerkshelfApiProvider(server, settings, host=host, dry_run=dry_run)
        results = provider.action_install()
        click.echo(f"📦 {server}")
        click.echo(provider.runner.format_summary(results))
        changed += provider.runner.changed_count(results)

    if dry_run:
        click.echo(f"🔍 Dry run: {changed} resource(s) would change")
    else:
        click.echo(f"✅ Install complete: {changed} resource(s) changed")
    return changed


def uninstall_servers(servers: list[BerkshelfApiServer], dry_run: bool = False, host=None) -> int:
    """Remove the service accounts of every server."""
    settings = get_settings()
    changed = 0
    for server in servers:
        provider = BerkshelfApiProvider(server, settings, host=host, dry_run=dry_run)
        results = provider.action_uninstall()
        click.echo(f"🗑️  {server}")
        click.echo(provider.runner.format_summary(results))
        click.echo(f"   {server.config_path} and the {server.path} directory were kept")
        changed += provider.runner.changed_count(results)
    return changed


def render_server_configs(servers: list[BerkshelfApiServer]) -> None:
    """Print the config.json each server would get."""
    global_config = get_settings().berkshelf_api.config
    for server in servers:
        if len(servers) > 1:
            click.echo(f"# {server.config_path}")
        click.echo(render_config(server, global_config), nl=False)
