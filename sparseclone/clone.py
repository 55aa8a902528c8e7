"""End-to-end sparse clone: clone, pick a folder, configure sparse-checkout, check out.

``run_sparse_clone`` sequences the git adapter, the folder picker and the root
inclusion prompt inside one ``CloneWorkspace`` so that every failure path
(git error, user abort, interrupt) removes what this run created.
"""

from __future__ import annotations

import logging
import shutil
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, TextIO

from .errors import CloneAborted, CollaboratorFailure, SparseCloneError
from .git import REMOTE_NAME, GitRepository, clone_repository, repository_name_from_url
from .keymap import KeyMap
from .root_prompt import is_yes, run_root_inclusion_prompt
from .selection import Selected, run_selection
from .ui_theme import PLAIN_THEME, MenuTheme
from .workspace import CloneWorkspace

logger = logging.getLogger(__name__)


class Prompter(Protocol):
    """Source of keystrokes and answer lines."""

    def read_keystroke(self, prompt: str) -> str: ...

    def read_line(self, prompt: str) -> str: ...


@dataclass(frozen=True)
class CloneRequest:
    repo_url: str
    folder: str | None = None


@dataclass(frozen=True)
class CloneOutcome:
    target: Path
    branch: str
    folder: str
    include_root: bool
    patterns: tuple[str, ...]


def normalize_folder(folder: str) -> str:
    """Strip surrounding slashes; an empty folder means the repository root."""
    stripped = folder.strip().strip("/")
    return stripped or "."


def sparse_patterns(folder: str, include_root: bool) -> tuple[bool, tuple[str, ...]]:
    """Return ``(cone_mode, patterns)`` for the chosen folder.

    Cone mode always materializes root-level files, so it is used exactly when
    root items were requested. The whole repository is matched with ``/*``.
    """
    if folder == ".":
        return False, ("/*",)
    if include_root:
        return True, (folder,)
    return False, (f"/{folder}/",)


class SparseCloneOrchestrator:
    """Runs one sparse clone from URL to checked-out folder."""

    def __init__(
        self,
        prompter: Prompter,
        keymap: KeyMap,
        *,
        out: TextIO | None = None,
        theme: MenuTheme = PLAIN_THEME,
        cwd: Path | None = None,
        clone: Callable[[str, Path, CloneWorkspace], GitRepository] = clone_repository,
    ) -> None:
        self.prompter = prompter
        self.keymap = keymap
        self.out = sys.stdout if out is None else out
        self.theme = theme
        self.cwd = Path.cwd() if cwd is None else cwd
        self.clone = clone

    def _say(self, text: str = "") -> None:
        self.out.write(text + "\n")
        self.out.flush()

    def resolve_target(self, repo_url: str) -> Path:
        """Directory the clone goes into, named after the repository."""
        name = repository_name_from_url(repo_url)
        if not name:
            raise SparseCloneError(f"Could not extract a valid repository name from the URL: '{repo_url}'.")
        return self.cwd / name

    def clear_existing_target(self, target: Path) -> None:
        """Remove a pre-existing target after confirmation, else abort."""
        if not target.exists():
            return
        self._say(f"Target directory '{target}' already exists.")
        if not is_yes(self.prompter.read_line("Do you want to remove it and continue? (y/N): ")):
            raise CloneAborted("Operation aborted by user. Target directory not removed.")
        self._say(f"Removing existing directory '{target}'...")
        try:
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
            else:
                target.unlink()
        except OSError as exc:
            raise SparseCloneError(f"Failed to remove existing directory '{target}': {exc}") from exc
        self._say("Directory removed.")

    def choose_folder(self, repo: GitRepository, reference: str, requested: str | None) -> str:
        """Use the requested folder, or let the user pick one interactively."""
        if requested is not None:
            folder = normalize_folder(requested)
            self._say(f"Folder specified via argument: '{folder}'")
            return folder

        self._say("No specific folder argument provided. Starting interactive folder selection...")
        result = run_selection(
            reference,
            keymap=self.keymap,
            tree_provider=repo,
            read_keystroke=self.prompter.read_keystroke,
            out=self.out,
            theme=self.theme,
        )
        if not isinstance(result, Selected):
            raise CloneAborted("No folder was selected or specified. Aborting operation.")
        return result.path

    def ask_include_root(self, repo: GitRepository, reference: str, folder: str) -> bool:
        """Ask whether root-level items come along; False when there are none."""
        try:
            root_entries = repo.list_subdirectories(reference, "")
        except CollaboratorFailure as exc:
            logger.warning("Could not list root directories, not offering root items: %s", exc)
            return False
        if not root_entries:
            return False
        return run_root_inclusion_prompt(
            root_entries,
            read_line=self.prompter.read_line,
            folder=folder,
            out=self.out,
            theme=self.theme,
        )

    def configure_sparse_checkout(self, repo: GitRepository, folder: str, include_root: bool) -> tuple[str, ...]:
        """Initialize sparse checkout and apply the patterns for ``folder``."""
        cone, patterns = sparse_patterns(folder, include_root)
        if cone:
            self._say(f"Initializing sparse-checkout in CONE mode to include '{folder}' AND all root-level items.")
        else:
            self._say("Initializing sparse-checkout in NON-CONE mode for precise folder selection.")
        repo.init_sparse_checkout(cone=cone)
        self._say(f"Setting sparse-checkout patterns: {' '.join(patterns)}")
        repo.set_sparse_patterns(list(patterns))
        return patterns

    def run(self, request: CloneRequest) -> CloneOutcome:
        """Clone, select, configure and check out; the target is removed on failure."""
        target = self.resolve_target(request.repo_url)
        self.clear_existing_target(target)

        with CloneWorkspace(target, out=self.out) as workspace:
            self._say(f"Preparing to clone from '{request.repo_url}'...")
            repo = self.clone(request.repo_url, target, workspace)

            self._say("Identifying the default remote branch...")
            branch = repo.default_branch()
            if not branch:
                raise SparseCloneError("Could not automatically determine the default remote branch.")
            self._say(f"Determined remote default branch as: '{branch}'.")
            reference = f"{REMOTE_NAME}/{branch}"

            folder = self.choose_folder(repo, reference, request.folder)
            include_root = self.ask_include_root(repo, reference, folder)
            patterns = self.configure_sparse_checkout(repo, folder, include_root)

            self._say(f"Checking out files for the specified patterns from branch '{branch}'...")
            repo.checkout(branch)
            workspace.commit()

        outcome = CloneOutcome(
            target=target,
            branch=branch,
            folder=folder,
            include_root=include_root,
            patterns=patterns,
        )
        self.print_summary(request, outcome)
        return outcome

    def print_summary(self, request: CloneRequest, outcome: CloneOutcome) -> None:
        """Print what was checked out and where."""
        rule = "-" * 71
        self._say()
        self._say(rule)
        self._say(self.theme.paint("success", "Sparse clone and checkout completed successfully."))
        self._say(f"Patterns applied: {' '.join(outcome.patterns)}")
        self._say(f"From repository '{request.repo_url}' (branch '{outcome.branch}')")
        self._say()
        self._say(f"Repository is located at: {outcome.target}")
        self._say(f"To navigate here in your shell, run:\ncd {outcome.target}")
        self._say(rule)


def run_sparse_clone(request: CloneRequest, prompter: Prompter, keymap: KeyMap, **kwargs) -> CloneOutcome:
    """Run one sparse clone with a fresh orchestrator."""
    return SparseCloneOrchestrator(prompter, keymap, **kwargs).run(request)
