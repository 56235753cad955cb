"""Ruby runtime and gem resources managed through rbenv."""

from pathlib import Path

from converge.base import Resource


def rbenv_environment(root: str, ruby_version: str | None = None) -> dict[str, str]:
    """Environment that pins rbenv commands to a root and a Ruby version."""
    env = {"RBENV_ROOT": root}
    if ruby_version:
        env["RBENV_VERSION"] = ruby_version
    return env


class RbenvRuby(Resource):
    """A Ruby version built by ruby-build under RBENV_ROOT."""

    resource_type = "rbenv_ruby"

    def __init__(self, version: str, host, root: str):
        super().__init__(version, host)
        self.version = version
        self.root = root

    @property
    def binary(self) -> str:
        return str(Path(self.root) / "bin" / "rbenv")

    @property
    def description(self) -> str:
        return f"build ruby {self.version}"

    def installed_versions(self) -> list[str]:
        result = self.host.run(
            [self.binary, "versions", "--bare"],
            env=rbenv_environment(self.root),
            check=False,
        )
        if result.returncode != 0:
            return []
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def check(self) -> bool:
        return self.version in self.installed_versions()

    def apply(self) -> None:
        self.host.run(
            [self.binary, "install", "--skip-existing", self.version],
            env=rbenv_environment(self.root),
        )


class RbenvGem(Resource):
    """A gem installed into one rbenv-managed Ruby."""

    resource_type = "rbenv_gem"

    def __init__(self, name: str, host, ruby_version: str, root: str, version: str | None = None):
        super().__init__(name, host)
        self.ruby_version = ruby_version
        self.root = root
        self.version = version

    @property
    def binary(self) -> str:
        return str(Path(self.root) / "bin" / "rbenv")

    @property
    def description(self) -> str:
        if self.version:
            return f"install gem {self.name} {self.version} for ruby {self.ruby_version}"
        return f"install gem {self.name} for ruby {self.ruby_version}"

    def _version_args(self) -> list[str]:
        if self.version:
            return ["--version", self.version]
        return []

    def check(self) -> bool:
        result = self.host.run(
            [self.binary, "exec", "gem", "list", "--exact", "--installed", self.name, *self._version_args()],
            env=rbenv_environment(self.root, self.ruby_version),
            check=False,
        )
        return result.returncode == 0

    def apply(self) -> None:
        env = rbenv_environment(self.root, self.ruby_version)
        self.host.run(
            [self.binary, "exec", "gem", "install", self.name, *self._version_args(), "--no-document"],
            env=env,
        )
        self.host.run([self.binary, "rehash"], env=env)
