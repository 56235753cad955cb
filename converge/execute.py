"""Guarded command execution."""

from collections.abc import Callable

from converge.base import Resource


class Execute(Resource):
    """Run a command when its guard says the work is needed.

    Without a guard the command runs on every pass, like any unguarded
    execute; with ``only_if`` it runs only when the guard returns True.
    """

    resource_type = "execute"

    def __init__(
        self,
        name: str,
        host,
        command: list[str],
        cwd: str | None = None,
        environment: dict[str, str] | None = None,
        only_if: Callable[[], bool] | None = None,
    ):
        super().__init__(name, host)
        self.command = command
        self.cwd = cwd
        self.environment = environment or {}
        self.only_if = only_if

    @property
    def description(self) -> str:
        return f"run {' '.join(self.command)}"

    def check(self) -> bool:
        if self.only_if is None:
            return False
        return not self.only_if()

    def apply(self) -> None:
        result = self.host.run(self.command, cwd=self.cwd, env=self.environment or None)
        if result.stdout:
            self.log.debug(f"{self.name} output: {result.stdout.strip()}")
