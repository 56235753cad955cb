"""Filesystem resources: directories, files and symlinks."""

import os
import tempfile
from pathlib import Path

from converge.base import Resource


def current_mode(path: Path) -> int:
    return path.stat().st_mode & 0o7777


class Directory(Resource):
    """A directory with ownership and permissions."""

    resource_type = "directory"

    def __init__(self, path: str, host, owner: str | None = None, group: str | None = None, mode: int = 0o755):
        super().__init__(path, host)
        self.path = Path(path)
        self.owner = owner
        self.group = group
        self.mode = mode

    @property
    def description(self) -> str:
        return f"create directory {self.path} ({self.owner}:{self.group} {self.mode:o})"

    def check(self) -> bool:
        if not self.path.is_dir():
            return False
        if current_mode(self.path) != self.mode:
            return False
        if self.owner and self.group:
            return self.host.owner_of(str(self.path)) == (self.owner, self.group)
        return True

    def apply(self) -> None:
        self.path.mkdir(parents=True, exist_ok=True)
        self.path.chmod(self.mode)
        if self.owner and self.group:
            self.host.chown(str(self.path), self.owner, self.group)


class File(Resource):
    """A file with exact content, ownership and permissions.

    Content is written to a temporary file in the same directory that already
    carries the final mode, then renamed over the target, so the target is
    never visible with looser permissions than declared.
    """

    resource_type = "file"

    def __init__(
        self,
        path: str,
        host,
        content: str,
        owner: str | None = None,
        group: str | None = None,
        mode: int = 0o644,
    ):
        super().__init__(path, host)
        self.path = Path(path)
        self.content = content
        self.owner = owner
        self.group = group
        self.mode = mode

    @property
    def description(self) -> str:
        return f"write {self.path} ({self.owner}:{self.group} {self.mode:o})"

    def check(self) -> bool:
        if not self.path.is_file():
            return False
        if self.path.read_bytes() != self.content.encode("utf-8"):
            return False
        if current_mode(self.path) != self.mode:
            return False
        if self.owner and self.group:
            return self.host.owner_of(str(self.path)) == (self.owner, self.group)
        return True

    def apply(self) -> None:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(self.content)
            os.chmod(tmp_name, self.mode)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        if self.owner and self.group:
            self.host.chown(str(self.path), self.owner, self.group)


class Link(Resource):
    """A symbolic link pointing at a fixed target."""

    resource_type = "link"

    def __init__(self, path: str, host, to: str):
        super().__init__(path, host)
        self.path = Path(path)
        self.to = to

    @property
    def description(self) -> str:
        return f"link {self.path} -> {self.to}"

    def check(self) -> bool:
        return self.path.is_symlink() and os.readlink(self.path) == self.to

    def apply(self) -> None:
        if self.path.is_symlink() or self.path.is_file():
            self.path.unlink()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.symlink_to(self.to)
