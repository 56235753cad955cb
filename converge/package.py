"""OS package resource for the apt and yum families."""

from dataclasses import dataclass

from converge.base import Resource


@dataclass(frozen=True)
class PackageManager:
    """Commands used to query and install packages on one platform family."""

    name: str
    query: tuple[str, ...]
    install: tuple[str, ...]
    env: tuple[tuple[str, str], ...] = ()

    def is_installed(self, host, package: str) -> bool:
        result = host.run([*self.query, package], check=False)
        if result.returncode != 0:
            return False
        if self.name == "apt":
            return "install ok installed" in result.stdout
        return True

    def install_package(self, host, package: str) -> None:
        host.run([*self.install, package], env=dict(self.env) or None)


PACKAGE_MANAGERS = {
    "debian": PackageManager(
        name="apt",
        query=("dpkg-query", "-W", "-f=${Status}"),
        install=("apt-get", "install", "-y", "-q"),
        env=(("DEBIAN_FRONTEND", "noninteractive"),),
    ),
    "rhel": PackageManager(
        name="yum",
        query=("rpm", "-q"),
        install=("yum", "install", "-y"),
    ),
}


class Package(Resource):
    """An installed OS package."""

    resource_type = "package"

    def __init__(self, name: str, host):
        super().__init__(name, host)
        self._manager: PackageManager | None = None

    @property
    def manager(self) -> PackageManager:
        if self._manager is None:
            family = self.host.platform_family()
            if family not in PACKAGE_MANAGERS:
                raise RuntimeError(f"No package manager known for platform family {family}")
            self._manager = PACKAGE_MANAGERS[family]
        return self._manager

    @property
    def description(self) -> str:
        return f"install package {self.name}"

    def check(self) -> bool:
        return self.manager.is_installed(self.host, self.name)

    def apply(self) -> None:
        self.manager.install_package(self.host, self.name)
