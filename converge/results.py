"""Convergence result types.

Each resource run yields one immutable result so the runner, the CLI and
the tests can reason about what a pass actually changed.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ConvergeResult:
    """Immutable outcome of converging one resource."""

    resource: str
    changed: bool
    message: str
    dry_run: bool = False

    @property
    def up_to_date(self) -> bool:
        """Check if the resource was already converged."""
        return not self.changed

    def format_line(self) -> str:
        """Format the result as one line of a run summary."""
        if not self.changed:
            return f"  - {self.resource}: up to date"
        prefix = "would change" if self.dry_run else "changed"
        return f"  * {self.resource}: {prefix} ({self.message})"
