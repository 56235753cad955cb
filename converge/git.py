"""Git checkout resource."""

from pathlib import Path

from converge.base import Resource


class Git(Resource):
    """A working tree checked out at a given revision.

    The revision may be a branch, a tag or a commit SHA. Branches are
    followed: every run fetches and moves the checkout when the remote
    branch has advanced.
    """

    resource_type = "git"

    def __init__(self, path: str, host, repository: str, revision: str = "master"):
        super().__init__(path, host)
        self.path = Path(path)
        self.repository = repository
        self.revision = revision
        self._target: str | None = None

    @property
    def description(self) -> str:
        return f"check out {self.repository} at {self.revision} into {self.path}"

    def is_cloned(self) -> bool:
        return (self.path / ".git").is_dir()

    def _git(self, *args: str, check: bool = True):
        return self.host.run(["git", *args], cwd=str(self.path), check=check)

    def head(self) -> str:
        return self._git("rev-parse", "HEAD").stdout.strip()

    def target_revision(self) -> str:
        """Fetch and resolve the declared revision to a commit SHA."""
        if self._target:
            return self._target

        self._git("fetch", "--quiet", "--tags", "origin")
        for ref in (f"origin/{self.revision}", self.revision):
            result = self._git("rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}", check=False)
            if result.returncode == 0 and result.stdout.strip():
                self._target = result.stdout.strip()
                return self._target

        raise RuntimeError(f"Revision {self.revision} not found in {self.repository}")

    def check(self) -> bool:
        if not self.is_cloned():
            return False
        return self.head() == self.target_revision()

    def apply(self) -> None:
        if not self.is_cloned():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.host.run(["git", "clone", "--quiet", self.repository, str(self.path)])

        target = self.target_revision()
        self.log.debug(f"Checking out {target}")
        self._git("checkout", "--quiet", "--force", target)
