"""Scoped ownership of the clone target and scratch files.

``CloneWorkspace`` is entered before anything touches the filesystem. On any
exit that did not ``commit()`` (git failure, user abort, interrupt) it removes
the target directory it created. Scratch files are always removed.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import TextIO

logger = logging.getLogger(__name__)

SCRATCH_PREFIX = "sparse_clone."


class CloneWorkspace:
    """Tracks resources that must not outlive one clone attempt."""

    def __init__(self, target: Path, scratch_dir: Path | None = None, out: TextIO | None = None) -> None:
        self.target = target
        self.out = out
        self.scratch_dir = scratch_dir
        self.scratch_files: list[Path] = []
        self.owns_target = False
        self.committed = False

    def __enter__(self) -> CloneWorkspace:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def scratch_file(self) -> Path:
        """Create an empty scratch file that is deleted on release."""
        fd, name = tempfile.mkstemp(
            prefix=SCRATCH_PREFIX,
            dir=None if self.scratch_dir is None else str(self.scratch_dir),
        )
        os.close(fd)
        path = Path(name)
        self.scratch_files.append(path)
        return path

    def claim_target(self) -> None:
        """Mark the target as created by this run, so failures remove it."""
        self.owns_target = True

    def commit(self) -> None:
        """Keep the target directory on release."""
        self.committed = True

    def remove_target(self) -> bool:
        """Delete the target directory; return whether it is gone."""
        if not self.target.exists():
            return True
        logger.debug("removing %s", self.target)
        if self.out is not None:
            self.out.write(f"Cleaning up repository in '{self.target}'...\n")
        try:
            shutil.rmtree(self.target)
        except OSError as exc:
            logger.warning("Cleanup of '%s' may have failed: %s", self.target, exc)
            return False
        return True

    def release(self) -> None:
        """Unlink scratch files and drop an uncommitted target this run created."""
        for path in self.scratch_files:
            try:
                path.unlink()
            except FileNotFoundError:
                pass
            except OSError as exc:
                logger.warning("Could not remove scratch file '%s': %s", path, exc)
        self.scratch_files.clear()

        if self.owns_target and not self.committed:
            self.remove_target()
            self.owns_target = False
