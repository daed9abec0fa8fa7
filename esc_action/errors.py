from __future__ import annotations


class EscActionError(Exception):
    """Base class for action errors."""


class ValidationError(EscActionError):
    """Raised when configuration, a boolean input, or a mapping token fails validation."""


class NotConfiguredError(EscActionError):
    """Raised when a required collaborator is not available in the current runtime."""


class CommandError(EscActionError):
    """Raised when the secrets CLI exits with a non-zero status."""

    def __init__(self, command: str, returncode: int, stderr: str) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or "no output on stderr"
        super().__init__(f"`{command}` failed with exit code {returncode}: {detail}")


class SinkError(EscActionError):
    """Raised when a value cannot be written to an Actions file safely."""
