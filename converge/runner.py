"""Runner for ordered convergence steps.

This module provides a service layer that converges a list of resources in
order and aggregates their results.
"""

from berkshelf_api_installer.utils.logging import get_logger
from converge.results import ConvergeResult

logger = get_logger(__name__)


class ConvergeRunner:
    """Converges resources one after another.

    The first exception aborts the run and propagates unchanged; resources
    after it are not touched. There are no retries, the next run starts over
    and skips everything that is already in place.
    """

    def __init__(self, dry_run: bool = False):
        """Initialize runner.

        Args:
            dry_run: Report what would change without changing anything
        """
        self.dry_run = dry_run

    def run(self, description: str, resources: list) -> list[ConvergeResult]:
        """Converge all resources.

        Args:
            description: What the whole run does, for the log
            resources: Resource instances in the order they must be converged

        Returns:
            One ConvergeResult per resource, in order
        """
        logger.info(description, dry_run=self.dry_run)
        results = []
        for resource in resources:
            results.append(resource.converge(dry_run=self.dry_run))

        logger.info(
            f"Finished: {self.changed_count(results)}/{len(results)} resources "
            f"{'would change' if self.dry_run else 'changed'}"
        )
        return results

    def changed_count(self, results: list[ConvergeResult]) -> int:
        """Count results that changed (or would change) something."""
        return sum(1 for r in results if r.changed)

    def format_summary(self, results: list[ConvergeResult]) -> str:
        """Format a run summary.

        Args:
            results: Results of one run

        Returns:
            Summary text, one line per resource
        """
        if not results:
            return "Nothing to converge"

        verb = "would change" if self.dry_run else "changed"
        header = f"{self.changed_count(results)}/{len(results)} resources {verb}"
        return "\n".join([header, *(r.format_line() for r in results)])
