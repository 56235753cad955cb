#!/usr/bin/env python3

import sys

import click
from dotenv import load_dotenv

from berkshelf_api_installer.error_details import get_error_human_message
from berkshelf_api_installer.install import (
    install_servers,
    render_server_configs,
    resolve_servers,
    uninstall_servers,
)
from berkshelf_api_installer.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def fail(error: Exception) -> None:
    """Report an error to the user and exit non-zero."""
    logger.debug("Command failed", exc_info=error)
    click.echo(f"❌ {get_error_human_message(error)}", err=True)
    sys.exit(1)


manifest_option = click.option(
    "--manifest",
    type=click.Path(exists=True, file_okay=True, dir_okay=False),
    help="YAML manifest declaring servers and their endpoints",
)
dry_run_option = click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Report what would change without changing anything",
)


@click.group(invoke_without_command=True)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log every command and check at DEBUG level")
@click.pass_context
def cli(ctx, verbose) -> None:
    """Berkshelf API server installer"""
    setup_logging(verbose=verbose)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("path", required=False)
@manifest_option
@click.option("--version", "version", help="Gem version, or a git ref to install from source")
@click.option("--port", type=int, help="Port the API server listens on")
@click.option("--user", help="Service user")
@click.option("--group", help="Service group")
@click.option("--ruby-version", help="Ruby version built through rbenv")
@click.option("--install-path", help="Checkout directory for git installs")
@click.option(
    "--opscode/--no-opscode",
    default=True,
    help="Index the community site when no manifest is given (default: on)",
)
@dry_run_option
def install(path, manifest, version, port, user, group, ruby_version, install_path, opscode, dry_run) -> None:
    """Install and configure a Berkshelf API server.

    PATH is the server home directory holding config.json. Without --manifest
    a single server is declared from settings and the options above.
    """
    attributes = {
        "version": version,
        "port": port,
        "user": user,
        "group": group,
        "ruby_version": ruby_version,
        "install_path": install_path,
    }
    try:
        servers = resolve_servers(path, manifest, attributes, opscode=opscode)
        install_servers(servers, dry_run=dry_run)
    except Exception as e:
        fail(e)


@cli.command()
@click.argument("path", required=False)
@manifest_option
@dry_run_option
def uninstall(path, manifest, dry_run) -> None:
    """Remove the service user and group of a Berkshelf API server."""
    try:
        servers = resolve_servers(path, manifest, opscode=False)
        uninstall_servers(servers, dry_run=dry_run)
    except Exception as e:
        fail(e)


@cli.command("render-config")
@click.argument("path", required=False)
@manifest_option
@click.option(
    "--opscode/--no-opscode",
    default=True,
    help="Index the community site when no manifest is given (default: on)",
)
def render_config(path, manifest, opscode) -> None:
    """Print the config.json a server would get."""
    try:
        servers = resolve_servers(path, manifest, opscode=opscode)
        render_server_configs(servers)
    except Exception as e:
        fail(e)


def main() -> None:
    load_dotenv()
    cli()


if __name__ == "__main__":
    main()
