"""Install and uninstall actions for Berkshelf API servers."""

from berkshelf_api_installer.provider.config_assembler import assemble_config, render_config
from berkshelf_api_installer.provider.provider import BerkshelfApiProvider, needs_bundle_install

__all__ = [
    "BerkshelfApiProvider",
    "assemble_config",
    "needs_bundle_install",
    "render_config",
]
