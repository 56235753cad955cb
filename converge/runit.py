"""runit service definition resource."""

from pathlib import Path

from converge.base import Resource
from converge.files import Directory, File, Link


class RunitService(Resource):
    """A service supervised by runit.

    Converges ``<sv_dir>/<name>/run``, ``<sv_dir>/<name>/log/run`` and the
    ``<service_dir>/<name>`` link that makes runsvdir pick the service up.
    The package providing runit itself is a separate resource.
    """

    resource_type = "runit_service"

    def __init__(
        self,
        name: str,
        host,
        run_script: str,
        log_script: str,
        sv_dir: str = "/etc/sv",
        service_dir: str = "/etc/service",
    ):
        super().__init__(name, host)
        self.sv_path = Path(sv_dir) / name
        self.service_link = Path(service_dir) / name
        self.run_script = run_script
        self.log_script = log_script

    @property
    def description(self) -> str:
        return f"enable runit service {self.name}"

    def parts(self) -> list[Resource]:
        """The filesystem resources that make up the service definition."""
        return [
            Directory(str(self.sv_path), self.host, owner="root", group="root", mode=0o755),
            Directory(str(self.sv_path / "log"), self.host, owner="root", group="root", mode=0o755),
            Directory(str(self.sv_path / "log" / "main"), self.host, owner="root", group="root", mode=0o755),
            File(str(self.sv_path / "run"), self.host, self.run_script, owner="root", group="root", mode=0o755),
            File(
                str(self.sv_path / "log" / "run"),
                self.host,
                self.log_script,
                owner="root",
                group="root",
                mode=0o755,
            ),
            Link(str(self.service_link), self.host, to=str(self.sv_path)),
        ]

    def check(self) -> bool:
        return all(part.check() for part in self.parts())

    def apply(self) -> None:
        for part in self.parts():
            part.converge()
