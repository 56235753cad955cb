"""Access to the machine being converged.

Resources never call subprocess or chown directly; they go through a Host so
that a whole install pass can be exercised against a simulated machine.
"""

import os
import platform
import shutil
import subprocess
from pathlib import Path

from berkshelf_api_installer.utils.logging import get_logger

logger = get_logger(__name__)

# os-release IDs folded into the families the recipes care about
PLATFORM_FAMILIES = {
    "rhel": {"rhel", "centos", "fedora", "amzn", "rocky", "almalinux", "ol", "scientific"},
    "debian": {"debian", "ubuntu", "linuxmint", "raspbian"},
}


def platform_family_for(os_id: str, id_like: str = "") -> str:
    """Map an os-release ID (and ID_LIKE list) to a platform family name."""
    candidates = [os_id, *id_like.split()]
    for candidate in candidates:
        for family, members in PLATFORM_FAMILIES.items():
            if candidate in members:
                return family
    return os_id


class LocalHost:
    """Host implementation for the machine the installer runs on."""

    def run(
        self,
        argv: list[str],
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        check: bool = True,
    ) -> subprocess.CompletedProcess:
        """
        Run a command.

        Args:
            argv: Command and arguments
            cwd: Working directory
            env: Extra environment variables merged over the current environment
            check: Raise on non-zero exit status

        Returns:
            The completed process with text stdout/stderr

        Raises:
            RuntimeError: If check is set and the command fails or is missing,
                or if cwd does not exist. An unchecked missing command
                returns exit code 127 like a shell would.
        """
        full_env = None
        if env:
            full_env = {**os.environ, **env}

        logger.debug(f"Running: {' '.join(argv)}", cwd=cwd)
        try:
            return subprocess.run(
                argv,
                cwd=cwd,
                env=full_env,
                capture_output=True,
                text=True,
                check=check,
            )
        except subprocess.CalledProcessError as e:
            logger.error(f"{argv[0]} failed: {e.stderr}")
            raise RuntimeError(
                f"{' '.join(argv)} failed with exit code {e.returncode}: {(e.stderr or '').strip()}"
            ) from e
        except FileNotFoundError as e:
            if cwd and not Path(cwd).is_dir():
                raise RuntimeError(f"Working directory {cwd} for {argv[0]} does not exist") from e
            if check:
                raise RuntimeError(f"{argv[0]} not found in PATH") from e
            logger.debug(f"{argv[0]} not found, reporting exit code 127")
            return subprocess.CompletedProcess(argv, 127, "", str(e))

    def chown(self, path: str, user: str, group: str) -> None:
        shutil.chown(path, user=user, group=group)

    def owner_of(self, path: str) -> tuple[str, str]:
        """Return (user, group) names owning path."""
        p = Path(path)
        return (p.owner(), p.group())

    def platform_family(self) -> str:
        """Detect the platform family from /etc/os-release."""
        try:
            release = platform.freedesktop_os_release()
        except OSError:
            return platform.system().lower()
        return platform_family_for(release.get("ID", ""), release.get("ID_LIKE", ""))
