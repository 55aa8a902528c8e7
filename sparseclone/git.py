"""Git adapter: every git invocation and every parse of git output.

Callers above this module only see names, branches and ``CollaboratorFailure``.
Listing output is captured into workspace scratch files, then parsed.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from .errors import CollaboratorFailure
from .workspace import CloneWorkspace

logger = logging.getLogger(__name__)

REMOTE_NAME = "origin"
_REMOTE_HEAD_PREFIX = f"refs/remotes/{REMOTE_NAME}/"
_PREFERRED_BRANCHES = ("main", "master")


def run_git(
    args: list[str],
    *,
    repo: Path | None = None,
    stdout=subprocess.PIPE,
    capture_stderr: bool = True,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Run one git command; raise ``CollaboratorFailure`` on non-zero exit when ``check``."""
    command = ["git"]
    if repo is not None:
        command += ["-C", str(repo)]
    command += args
    logger.debug("running %s", " ".join(command))
    try:
        proc = subprocess.run(
            command,
            stdout=stdout,
            stderr=subprocess.PIPE if capture_stderr else None,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as exc:
        raise CollaboratorFailure(command, None, str(exc)) from exc
    if check and proc.returncode != 0:
        raise CollaboratorFailure(command, proc.returncode, proc.stderr or "")
    return proc


def repository_name_from_url(url: str) -> str:
    """Return the directory name git would pick, e.g. ``solito`` for ``.../solito.git``."""
    tail = url.strip().rstrip("/").replace("\\", "/")
    tail = tail.rsplit("/", 1)[-1]
    tail = tail.rsplit(":", 1)[-1]
    if tail.endswith(".git"):
        tail = tail[: -len(".git")]
    return tail


def parse_ls_tree_names(output: str) -> list[str]:
    """Split ``git ls-tree -z --name-only`` output into entry names."""
    return [name for name in output.split("\0") if name.strip()]


def parse_remote_branches(output: str, remote: str = REMOTE_NAME) -> list[str]:
    """Return branch names of ``remote`` from ``git branch -r`` output.

    Symbolic ``origin/HEAD -> origin/main`` rows are skipped.
    """
    prefix = f"{remote}/"
    branches: list[str] = []
    for raw_line in output.splitlines():
        line = raw_line.strip()
        if not line or "->" in line:
            continue
        if not line.startswith(prefix):
            continue
        name = line[len(prefix):]
        if name and name != "HEAD":
            branches.append(name)
    return branches


def choose_default_branch(symbolic_ref: str | None, remote_branches: list[str]) -> str | None:
    """Pick the default branch from the remote HEAD, else main/master, else the first branch."""
    if symbolic_ref:
        ref = symbolic_ref.strip()
        if ref.startswith(_REMOTE_HEAD_PREFIX):
            ref = ref[len(_REMOTE_HEAD_PREFIX):]
        if ref:
            return ref
    for preferred in _PREFERRED_BRANCHES:
        if preferred in remote_branches:
            return preferred
    return remote_branches[0] if remote_branches else None


class GitRepository:
    """A local clone driven through the git CLI."""

    def __init__(self, path: Path, workspace: CloneWorkspace | None = None) -> None:
        self.path = path
        self.workspace = workspace

    def _capture(self, args: list[str], *, check: bool = True) -> str:
        if self.workspace is None:
            return run_git(args, repo=self.path, check=check).stdout or ""
        scratch = self.workspace.scratch_file()
        with scratch.open("w", encoding="utf-8") as handle:
            proc = run_git(args, repo=self.path, stdout=handle, check=check)
        if proc.returncode != 0:
            return ""
        return scratch.read_text(encoding="utf-8", errors="replace")

    def list_subdirectories(self, reference: str, path: str) -> list[str]:
        """Immediate subdirectory names of ``path`` (``""`` for the root) at ``reference``."""
        path = path.strip("/")
        tree_ish = reference if path in ("", ".") else f"{reference}:{path}"
        return parse_ls_tree_names(self._capture(["ls-tree", "-z", "--name-only", "-d", tree_ish]))

    def default_branch(self) -> str | None:
        """Name of the remote default branch, or None when the clone has none."""
        symbolic_ref = self._capture(["symbolic-ref", f"refs/remotes/{REMOTE_NAME}/HEAD"], check=False)
        remote_branches: list[str] = []
        if not symbolic_ref.strip():
            remote_branches = parse_remote_branches(self._capture(["branch", "-r"]))
        return choose_default_branch(symbolic_ref, remote_branches)

    def init_sparse_checkout(self, cone: bool) -> None:
        """Enable sparse checkout in cone or pattern mode."""
        # Plain `init` defaults to cone mode on git 2.37+, so pattern mode is explicit.
        run_git(["sparse-checkout", "init", "--cone" if cone else "--no-cone"], repo=self.path)

    def set_sparse_patterns(self, patterns: list[str]) -> None:
        """Replace the sparse-checkout patterns."""
        run_git(["sparse-checkout", "set", *patterns], repo=self.path)

    def checkout(self, branch: str) -> None:
        """Materialize ``branch`` through the configured sparse patterns."""
        run_git(["checkout", branch], repo=self.path, capture_stderr=False)


def clone_repository(url: str, target: Path, workspace: CloneWorkspace) -> GitRepository:
    """Blob-less, shallow, no-checkout clone of ``url`` into ``target``."""
    workspace.claim_target()
    run_git(
        ["clone", "--depth", "1", "--no-checkout", "--filter=blob:none", url, str(target)],
        capture_stderr=False,
    )
    return GitRepository(target, workspace)
