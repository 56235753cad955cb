"""System group and user resources backed by shadow-utils."""

from typing import Literal

from converge.base import Resource

AccountAction = Literal["create", "remove"]


def getent(host, database: str, key: str) -> list[str] | None:
    """Look up one entry in a NSS database.

    Returns:
        The colon separated fields, or None if the entry does not exist
    """
    result = host.run(["getent", database, key], check=False)
    if result.returncode != 0 or not result.stdout.strip():
        return None
    return result.stdout.strip().splitlines()[0].split(":")


class Group(Resource):
    """A system group."""

    resource_type = "group"

    def __init__(self, name: str, host, system: bool = True, action: AccountAction = "create"):
        super().__init__(name, host)
        self.system = system
        self.action = action

    @property
    def description(self) -> str:
        if self.action == "remove":
            return f"remove group {self.name}"
        return f"create group {self.name}"

    def exists(self) -> bool:
        return getent(self.host, "group", self.name) is not None

    def check(self) -> bool:
        if self.action == "remove":
            return not self.exists()
        return self.exists()

    def apply(self) -> None:
        if self.action == "remove":
            self.host.run(["groupdel", self.name])
            return

        argv = ["groupadd"]
        if self.system:
            argv.append("--system")
        argv.append(self.name)
        self.host.run(argv)


class User(Resource):
    """A system user.

    Existing users are brought in line with the declared comment, home,
    shell and primary group instead of being recreated.
    """

    resource_type = "user"

    def __init__(
        self,
        name: str,
        host,
        comment: str = "",
        gid: str | None = None,
        home: str | None = None,
        shell: str = "/bin/false",
        system: bool = True,
        action: AccountAction = "create",
    ):
        super().__init__(name, host)
        self.comment = comment
        self.gid = gid
        self.home = home
        self.shell = shell
        self.system = system
        self.action = action

    @property
    def description(self) -> str:
        if self.action == "remove":
            return f"remove user {self.name}"
        return f"create user {self.name}"

    def _expected_gid(self) -> str | None:
        if self.gid is None:
            return None
        entry = getent(self.host, "group", self.gid)
        return entry[2] if entry else None

    def _differences(self, entry: list[str]) -> list[str]:
        # passwd fields: name, password, uid, gid, gecos, home, shell
        usermod_args = []
        if self.comment and entry[4] != self.comment:
            usermod_args += ["--comment", self.comment]
        if self.home and entry[5] != self.home:
            usermod_args += ["--home", self.home]
        if self.shell and entry[6] != self.shell:
            usermod_args += ["--shell", self.shell]
        expected_gid = self._expected_gid()
        if self.gid and entry[3] != expected_gid:
            usermod_args += ["--gid", self.gid]
        return usermod_args

    def check(self) -> bool:
        entry = getent(self.host, "passwd", self.name)
        if self.action == "remove":
            return entry is None
        if entry is None:
            return False
        return not self._differences(entry)

    def apply(self) -> None:
        if self.action == "remove":
            self.host.run(["userdel", self.name])
            return

        entry = getent(self.host, "passwd", self.name)
        if entry is not None:
            self.host.run(["usermod", *self._differences(entry), self.name])
            return

        argv = ["useradd"]
        if self.system:
            argv.append("--system")
        if self.comment:
            argv += ["--comment", self.comment]
        if self.gid:
            argv += ["--gid", self.gid]
        if self.home:
            argv += ["--home-dir", self.home, "--no-create-home"]
        argv += ["--shell", self.shell, self.name]
        self.host.run(argv)
