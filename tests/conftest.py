"""Pytest configuration and shared fixtures."""

import subprocess
from pathlib import Path

import pytest

from berkshelf_api_installer.config import Settings, reset_settings
from berkshelf_api_installer.utils.logging import setup_logging

# Commands that only read state
QUERY_COMMANDS = {
    ("getent",),
    ("dpkg-query",),
    ("rpm", "-q"),
    ("git", "fetch"),
    ("git", "rev-parse"),
    ("versions",),
    ("exec", "gem", "list"),
}


class FakeHost:
    """A simulated machine for running convergence steps in tests.

    Keeps users, groups, packages, rbenv rubies and gems in memory and
    answers the commands the resources issue. Git checkouts and bundler
    touch the real filesystem (below tmp_path) so file based checks work.
    """

    def __init__(self, family: str = "debian"):
        self.family = family
        self.groups: dict[str, int] = {}
        self.users: dict[str, dict] = {}
        self.packages: set[str] = set()
        self.rubies: set[str] = set()
        self.gems: dict[tuple[str, str], str | None] = {}
        self.owners: dict[str, tuple[str, str]] = {}
        self.heads: dict[str, str] = {}
        self.remote_head = "0" * 40
        self.commands: list[list[str]] = []
        self._next_id = 900

    # Host interface

    def run(self, argv, cwd=None, env=None, check=True):
        argv = [str(a) for a in argv]
        self.commands.append(argv)
        returncode, stdout = self._dispatch(argv, cwd, env or {})
        if check and returncode != 0:
            raise RuntimeError(f"{' '.join(argv)} failed with exit code {returncode}")
        return subprocess.CompletedProcess(argv, returncode, stdout, "")

    def chown(self, path, user, group):
        self.owners[str(path)] = (user, group)

    def owner_of(self, path):
        return self.owners.get(str(path), ("root", "root"))

    def platform_family(self):
        return self.family

    # Helpers for assertions

    def mutating_commands(self) -> list[list[str]]:
        """Commands that changed something, in order."""
        result = []
        for argv in self.commands:
            tail = argv[1:] if argv[0].endswith("rbenv") else argv
            if any(tuple(tail[: len(q)]) == q for q in QUERY_COMMANDS):
                continue
            result.append(argv)
        return result

    def reset_commands(self):
        self.commands = []

    # Command simulation

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    @staticmethod
    def _option(argv, name):
        if name in argv:
            return argv[argv.index(name) + 1]
        return None

    def _dispatch(self, argv, cwd, env):
        program = argv[0]
        if program.endswith("rbenv"):
            # <root>/bin/rbenv only exists once the rbenv checkout is cloned
            if not (Path(program).parent.parent / ".git").is_dir():
                return 127, ""
            return self._rbenv(argv[1:], cwd, env)
        handler = getattr(self, f"_cmd_{program.replace('-', '_')}", None)
        if handler is None:
            raise AssertionError(f"Unexpected command: {argv}")
        return handler(argv, cwd)

    def _cmd_getent(self, argv, cwd):
        database, key = argv[1], argv[2]
        if database == "group" and key in self.groups:
            return 0, f"{key}:x:{self.groups[key]}:\n"
        if database == "passwd" and key in self.users:
            u = self.users[key]
            gid = self.groups.get(u["gid"], 100)
            return 0, f"{key}:x:{u['uid']}:{gid}:{u['comment']}:{u['home']}:{u['shell']}\n"
        return 2, ""

    def _cmd_groupadd(self, argv, cwd):
        self.groups[argv[-1]] = self._new_id()
        return 0, ""

    def _cmd_groupdel(self, argv, cwd):
        self.groups.pop(argv[-1], None)
        return 0, ""

    def _cmd_useradd(self, argv, cwd):
        self.users[argv[-1]] = {
            "uid": self._new_id(),
            "gid": self._option(argv, "--gid") or argv[-1],
            "comment": self._option(argv, "--comment") or "",
            "home": self._option(argv, "--home-dir") or f"/home/{argv[-1]}",
            "shell": self._option(argv, "--shell") or "/bin/sh",
        }
        return 0, ""

    def _cmd_usermod(self, argv, cwd):
        user = self.users[argv[-1]]
        for option, key in (("--comment", "comment"), ("--home", "home"), ("--shell", "shell"), ("--gid", "gid")):
            if option in argv:
                user[key] = self._option(argv, option)
        return 0, ""

    def _cmd_userdel(self, argv, cwd):
        self.users.pop(argv[-1], None)
        return 0, ""

    def _cmd_dpkg_query(self, argv, cwd):
        if argv[-1] in self.packages:
            return 0, "install ok installed"
        return 1, ""

    def _cmd_apt_get(self, argv, cwd):
        self.packages.add(argv[-1])
        return 0, ""

    def _cmd_rpm(self, argv, cwd):
        return (0, f"{argv[-1]}-1.0\n") if argv[-1] in self.packages else (1, "")

    def _cmd_yum(self, argv, cwd):
        self.packages.add(argv[-1])
        return 0, ""

    def _cmd_git(self, argv, cwd):
        command = argv[1]
        if command == "clone":
            path = Path(argv[-1])
            (path / ".git").mkdir(parents=True, exist_ok=True)
            if "berkshelf-api" in argv[-2]:
                (path / "Gemfile").write_text("source 'https://rubygems.org'\ngemspec\n")
            self.heads[str(path)] = self.remote_head
            return 0, ""
        if command == "fetch":
            return 0, ""
        if command == "rev-parse":
            if argv[2] == "HEAD":
                return 0, f"{self.heads[cwd]}\n"
            return 0, f"{self.remote_head}\n"
        if command == "checkout":
            self.heads[cwd] = argv[-1]
            return 0, ""
        raise AssertionError(f"Unexpected git command: {argv}")

    def _rbenv(self, args, cwd, env):
        ruby = env.get("RBENV_VERSION")
        if args[:2] == ["versions", "--bare"]:
            return 0, "".join(f"{v}\n" for v in sorted(self.rubies))
        if args[0] == "install":
            self.rubies.add(args[-1])
            return 0, ""
        if args[0] == "rehash":
            return 0, ""
        if args[:3] == ["exec", "gem", "list"]:
            name = args[5]
            version = self._option(args, "--version")
            installed = (ruby, name) in self.gems
            if installed and version:
                installed = self.gems[(ruby, name)] == version
            return (0, "true\n") if installed else (1, "false\n")
        if args[:3] == ["exec", "gem", "install"]:
            self.gems[(ruby, args[3])] = self._option(args, "--version")
            return 0, ""
        if args[:3] == ["exec", "bundle", "install"]:
            (Path(cwd) / "Gemfile.lock").write_text("GEM\n  specs:\n")
            return 0, ""
        raise AssertionError(f"Unexpected rbenv command: {args}")


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Route structlog through stdlib logging so CLI output stays clean."""
    setup_logging()


@pytest.fixture(autouse=True)
def reset_config_settings():
    """Reset the settings singleton before and after each test.

    This ensures that environment variable changes made by monkeypatch
    are properly reflected in the settings, since pydantic-settings
    reads env vars at instantiation time.
    """
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def fake_host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def rbenv_root(tmp_path) -> str:
    """An rbenv checkout the fake host answers rbenv commands for."""
    root = tmp_path / "rbenv"
    (root / ".git").mkdir(parents=True)
    return str(root)


@pytest.fixture
def settings(tmp_path, monkeypatch) -> Settings:
    """Settings with every host path below tmp_path."""
    monkeypatch.setenv("BERKSHELF_API_PATH", str(tmp_path / "srv" / "berkshelf-api"))
    monkeypatch.setenv("BERKSHELF_API_INSTALL_PATH", str(tmp_path / "opt" / "berkshelf-api"))
    monkeypatch.setenv("BERKSHELF_API_CHEF_CLIENT_CONFIG", str(tmp_path / "client.rb"))
    monkeypatch.setenv("RBENV_ROOT", str(tmp_path / "rbenv"))
    monkeypatch.setenv("RUNIT_SV_DIR", str(tmp_path / "sv"))
    monkeypatch.setenv("RUNIT_SERVICE_DIR", str(tmp_path / "service"))
    return Settings()
