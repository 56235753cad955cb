"""Provider that converges a Berkshelf API server.

Install order: group, user, Ruby, home directory, libarchive, application
(gem or git checkout + bundle), config.json, runit service. Every step is a
resource that checks the host first, so the whole sequence is rerun on each
pass and only does what is missing.
"""

from pathlib import Path

from berkshelf_api_installer.const import (
    BERKSHELF_API_GEM,
    BERKSHELF_API_REPOSITORY,
    BINSTUBS_DIR,
    BUNDLER_GEM,
    CONFIG_MODE,
    CONFIG_OWNER,
    GEMFILE,
    GEMFILE_LOCK,
    LIBARCHIVE_PACKAGES,
    SERVICE_NAME,
)
from berkshelf_api_installer.provider.config_assembler import render_config
from berkshelf_api_installer.provider.template_loader import get_template
from berkshelf_api_installer.utils.logging import get_logger
from converge import (
    ConvergeResult,
    ConvergeRunner,
    Directory,
    Execute,
    File,
    Git,
    Group,
    LocalHost,
    Package,
    RbenvGem,
    RbenvRuby,
    Resource,
    RunitService,
    User,
)
from converge.rbenv import rbenv_environment

logger = get_logger(__name__)


def needs_bundle_install(install_path: str) -> bool:
    """Check if ``bundle install`` has to run in a checkout.

    Returns:
        True if Gemfile.lock is missing or older than Gemfile
    """
    gemfile = Path(install_path) / GEMFILE
    gemfile_lock = Path(install_path) / GEMFILE_LOCK
    return not gemfile_lock.exists() or gemfile.stat().st_mtime > gemfile_lock.stat().st_mtime


class BerkshelfApiProvider:
    """Install and uninstall actions for one BerkshelfApiServer."""

    def __init__(self, server, settings, host=None, dry_run: bool = False):
        """
        Args:
            server: BerkshelfApiServer declaration
            settings: Root Settings instance
            host: Host to converge, the local machine by default
            dry_run: Report changes without making them
        """
        self.server = server
        self.settings = settings
        self.host = host or LocalHost()
        self.runner = ConvergeRunner(dry_run=dry_run)

    # Actions

    def action_install(self) -> list[ConvergeResult]:
        return self.runner.run(
            f"install a Berkshelf API server at {self.server.path}",
            self.install_resources(),
        )

    def action_uninstall(self) -> list[ConvergeResult]:
        results = self.runner.run(
            f"uninstall a Berkshelf API server at {self.server.path}",
            self.uninstall_resources(),
        )
        logger.info(
            "Application, config and service are left in place",
            path=self.server.path,
            config=self.server.config_path,
            service=SERVICE_NAME,
        )
        return results

    def install_resources(self) -> list[Resource]:
        resources = [
            *self.create_group(),
            *self.create_user(),
            *self.install_ruby(),
            *self.create_home_dir(),
            *self.install_libarchive(),
            *self.install_berkshelf_api(),
            *self.create_config(),
            *self.install_service(),
        ]
        return [resource.for_owner(self.server.path) for resource in resources]

    def uninstall_resources(self) -> list[Resource]:
        resources = [*self.remove_user(), *self.remove_group()]
        return [resource.for_owner(self.server.path) for resource in resources]

    # Steps

    def create_group(self) -> list[Resource]:
        return [Group(self.server.group, self.host, system=True)]

    def create_user(self) -> list[Resource]:
        return [
            User(
                self.server.user,
                self.host,
                comment=f"Berkshelf API service user for {self.server.path}",
                gid=self.server.group,
                system=True,
                shell="/bin/false",
                home=self.server.path,
            )
        ]

    def install_ruby(self) -> list[Resource]:
        rbenv = self.settings.rbenv
        return [
            Git(rbenv.root, self.host, repository=rbenv.git_url, revision=rbenv.git_ref),
            Git(
                str(Path(rbenv.plugins_dir) / "ruby-build"),
                self.host,
                repository=rbenv.ruby_build_git_url,
                revision="master",
            ),
            RbenvRuby(self.server.ruby_version, self.host, root=rbenv.root),
        ]

    def create_home_dir(self) -> list[Resource]:
        return [
            Directory(
                self.server.path,
                self.host,
                owner=self.server.user,
                group=self.server.group,
                mode=0o755,
            )
        ]

    def install_libarchive(self) -> list[Resource]:
        family = self.host.platform_family()
        if family not in LIBARCHIVE_PACKAGES:
            raise RuntimeError(f"Unknown platform family {family}, please update install_libarchive")
        return [Package(name, self.host) for name in LIBARCHIVE_PACKAGES[family]]

    def install_berkshelf_api(self) -> list[Resource]:
        if self.server.install_from_git:
            return self.install_from_git()
        return self.install_from_gems()

    def install_from_gems(self) -> list[Resource]:
        return [
            RbenvGem(
                BERKSHELF_API_GEM,
                self.host,
                ruby_version=self.server.ruby_version,
                root=self.settings.rbenv.root,
                version=self.server.version,
            )
        ]

    def install_from_git(self) -> list[Resource]:
        install_path = self.server.install_path
        rbenv_root = self.settings.rbenv.root
        return [
            Directory(install_path, self.host, owner="root", group="root", mode=0o755),
            Git(
                install_path,
                self.host,
                repository=BERKSHELF_API_REPOSITORY,
                revision=self.server.version,
            ),
            RbenvGem(
                BUNDLER_GEM,
                self.host,
                ruby_version=self.server.ruby_version,
                root=rbenv_root,
            ),
            Execute(
                "berks-api-bundle-install",
                self.host,
                command=[
                    str(Path(rbenv_root) / "bin" / "rbenv"),
                    "exec",
                    "bundle",
                    "install",
                    f"--binstubs={BINSTUBS_DIR}",
                    "--without",
                    "development",
                    "test",
                ],
                cwd=install_path,
                environment=rbenv_environment(rbenv_root, self.server.ruby_version),
                only_if=lambda: needs_bundle_install(install_path),
            ),
        ]

    def create_config(self) -> list[Resource]:
        return [
            File(
                self.server.config_path,
                self.host,
                content=render_config(self.server, self.settings.berkshelf_api.config),
                # never the service user
                owner=CONFIG_OWNER,
                group=self.server.group,
                mode=CONFIG_MODE,
            )
        ]

    def install_service(self) -> list[Resource]:
        runit = self.settings.runit
        run_script = get_template("runit/run").render(server=self.server, rbenv_root=self.settings.rbenv.root)
        log_script = get_template("runit/log-run").render(server=self.server)
        return [
            Package(runit.package, self.host),
            RunitService(
                SERVICE_NAME,
                self.host,
                run_script=run_script,
                log_script=log_script,
                sv_dir=runit.sv_dir,
                service_dir=runit.service_dir,
            ),
        ]

    def remove_user(self) -> list[Resource]:
        user = self.create_user()[0]
        user.action = "remove"
        return [user]

    def remove_group(self) -> list[Resource]:
        group = self.create_group()[0]
        group.action = "remove"
        return [group]
