"""Base resource class with resource-aware structured logging."""

from __future__ import annotations

from abc import ABC, abstractmethod

from berkshelf_api_installer.utils.logging import get_logger
from converge.results import ConvergeResult


class Resource(ABC):
    """Base class for all convergence primitives.

    A resource describes one piece of desired state. ``check()`` inspects the
    host and returns True when that state is already in place; ``apply()``
    brings it about. Both must be safe to call on every run.

    Provides a ``log`` property bound to the resource, and, when set, the
    server path it is converged for::

        slog = self.log.bind(path=path)
        slog.info("wrote file")
    """

    resource_type: str = "resource"

    def __init__(self, name: str, host):
        self.name = name
        self.host = host
        self._owner: str = ""

    def for_owner(self, owner: str) -> Resource:
        """Bind the declaring server path for structured logging.

        Returns *self* so it can be used inline::

            step = Group("berkshelf-api", host).for_owner("/srv/berkshelf-api")
        """
        self._owner = owner
        return self

    @property
    def log(self):
        """Return a structlog logger bound to this resource (and owner, if set)."""
        bindings: dict[str, str] = {"resource": str(self)}
        if self._owner:
            bindings["owner"] = self._owner
        return get_logger(self.__class__.__module__).bind(**bindings)

    @property
    def description(self) -> str:
        """Human readable action, used in run summaries."""
        return f"converge {self}"

    @abstractmethod
    def check(self) -> bool:
        """Return True if the host is already in the desired state."""

    @abstractmethod
    def apply(self) -> None:
        """Bring the host into the desired state."""

    def converge(self, dry_run: bool = False) -> ConvergeResult:
        """Check and, if needed, apply this resource.

        Args:
            dry_run: Report what would change without changing it

        Returns:
            ConvergeResult describing whether anything changed
        """
        if self.check():
            self.log.debug("already converged")
            return ConvergeResult(str(self), False, "up to date", dry_run)

        if dry_run:
            self.log.info(f"would {self.description}")
            return ConvergeResult(str(self), True, self.description, dry_run)

        self.log.info(self.description)
        self.apply()
        return ConvergeResult(str(self), True, self.description, dry_run)

    def __str__(self) -> str:
        return f"{self.resource_type}[{self.name}]"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}('{self.name}')"
