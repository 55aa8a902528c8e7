"""Exception types shared across the clone pipeline.

Every fatal condition derives from ``SparseCloneError`` so the CLI can report
it uniformly. Invalid keystrokes and unrecognised answers are not errors.
"""

from __future__ import annotations


class SparseCloneError(Exception):
    """Base class for failures reported to the user as ``Error: <message>``."""


class ConfigurationError(SparseCloneError):
    """A key layout is unusable (duplicate or reserved keys, unknown name)."""


class CollaboratorFailure(SparseCloneError):
    """A git invocation exited non-zero or could not be started."""

    def __init__(self, command: list[str], returncode: int | None, stderr: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = f" ({self.stderr})" if self.stderr else ""
        status = "could not be started" if returncode is None else f"exited with status {returncode}"
        super().__init__(f"`{' '.join(self.command)}` {status}{detail}")


class CloneAborted(SparseCloneError):
    """The user chose not to continue."""
