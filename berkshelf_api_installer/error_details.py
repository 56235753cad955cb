"""Error message formatting for user-friendly exception handling."""

import subprocess

from pydantic import ValidationError


def _format_called_process_error(error: subprocess.CalledProcessError) -> str:
    """Format a failed command."""
    command = " ".join(str(part) for part in error.cmd)
    stderr = (error.stderr or "").strip()
    message = f"Command failed with exit code {error.returncode}: {command}"
    if stderr:
        message += f"\n{stderr}"
    return message


ERROR_TYPES = {
    subprocess.CalledProcessError: _format_called_process_error,
    ValidationError: lambda e: f"Invalid server declaration:\n{e}",
    RuntimeError: lambda e: str(e),
    FileNotFoundError: lambda e: str(e),
    ValueError: lambda e: str(e),
    KeyError: lambda e: f"Missing required field '{str(e).strip(chr(39))}' in configuration.",
    PermissionError: lambda e: f"Permission denied: {e!s}\nThe installer usually needs to run as root.",
    OSError: lambda e: f"System error: {e!s}",
}


def get_error_human_message(error: Exception) -> str:
    """
    Get user-friendly error message based on exception type.

    Args:
        error: The exception to format

    Returns:
        Formatted error message suitable for end users
    """
    for error_type, handler in ERROR_TYPES.items():
        if isinstance(error, error_type):
            return handler(error)
    return str(error)
