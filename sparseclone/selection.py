"""Interactive folder picker over a lazily listed repository tree.

One ``SelectionState`` walks the tree of a single git reference. Every turn it
lists the subdirectories under the cursor, renders them with ergonomic keys,
reads one keystroke and either moves the cursor or finishes with
``Selected``/``Aborted``. Nothing is cached between turns.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol, TextIO, Union

from .keymap import QUIT_KEY, SELECT_KEY, UP_KEY, KeyMap
from .ui_theme import PLAIN_THEME, MenuTheme

ROOT_DISPLAY_NAME = "<root>"


class TreeProvider(Protocol):
    """Lists the immediate subdirectories of a path at a git reference."""

    def list_subdirectories(self, reference: str, path: str) -> list[str]: ...


@dataclass
class PathCursor:
    """Current position in the tree as a stack of path segments."""

    segments: list[str] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        """True when no folder has been entered yet."""
        return not self.segments

    @property
    def display_path(self) -> str:
        """Human-readable location, ``<root>`` at the top."""
        return ROOT_DISPLAY_NAME if self.is_root else "/".join(self.segments)

    @property
    def selection_path(self) -> str:
        """Folder reported on select; ``.`` means the repository root."""
        return "." if self.is_root else "/".join(self.segments)

    @property
    def tree_path(self) -> str:
        """Path handed to the tree provider; empty string for the root."""
        return "/".join(self.segments)

    def push(self, name: str) -> None:
        """Descend into ``name``."""
        self.segments.append(name)

    def pop(self) -> str:
        """Go up one level and return the segment left."""
        return self.segments.pop()


@dataclass(frozen=True)
class MenuEntry:
    name: str
    key: str


@dataclass(frozen=True)
class Selected:
    path: str


@dataclass(frozen=True)
class Aborted:
    pass


SelectionResult = Union[Selected, Aborted]


def build_menu_entries(names: Sequence[str], keymap: KeyMap) -> tuple[list[MenuEntry], bool]:
    """Bind the first ``len(keymap)`` names to keys; report whether any were cut."""
    visible = min(len(names), len(keymap))
    entries = [MenuEntry(name=names[index], key=keymap.assign(index)) for index in range(visible)]
    return entries, len(names) > visible


class SelectionState:
    """Folder-picker state machine.

    ``cursor`` is only ever pushed with names the provider returned for the
    level above, so it always points at a directory as last observed.
    """

    def __init__(
        self,
        keymap: KeyMap,
        tree_provider: TreeProvider,
        reference: str,
        read_keystroke: Callable[[str], str],
        *,
        out: TextIO | None = None,
        theme: MenuTheme = PLAIN_THEME,
    ) -> None:
        self.keymap = keymap
        self.tree_provider = tree_provider
        self.reference = reference
        self.read_keystroke = read_keystroke
        self.out = sys.stdout if out is None else out
        self.theme = theme
        self.cursor = PathCursor()
        self.result: SelectionResult | None = None
        self.notice: str | None = None

    def _write(self, text: str = "") -> None:
        self.out.write(text + "\n")

    def load_entries(self) -> tuple[list[MenuEntry], bool]:
        """List the folders under the cursor and bind them to keys."""
        names = self.tree_provider.list_subdirectories(self.reference, self.cursor.tree_path)
        return build_menu_entries([name for name in names if name], self.keymap)

    def render(self, entries: list[MenuEntry], truncated: bool) -> None:
        """Print the menu for the current folder."""
        theme = self.theme
        self._write()
        self._write(
            theme.paint(
                "heading",
                f"Currently browsing: '{self.cursor.display_path}' in '{self.reference}'",
            )
        )
        self._write("Choose an action:")
        for entry in entries:
            self._write(f"  {theme.paint('key', entry.key)}) {theme.paint('directory', entry.name)}")
        if truncated:
            self._write(theme.paint("notice", "  ... (more directories available)"))
        self._write(
            f"  {theme.paint('key', SELECT_KEY)}) "
            + theme.paint("action", f"[Select this folder: {self.cursor.display_path}]")
        )
        if not self.cursor.is_root:
            self._write(f"  {theme.paint('key', UP_KEY)}) " + theme.paint("action", "[Up to parent folder]"))
        self._write(f"  {theme.paint('key', QUIT_KEY)}) " + theme.paint("action", "[Quit selection]"))

    def dispatch(self, key: str, entries: list[MenuEntry]) -> SelectionResult | None:
        """Apply one keystroke to the state; return the result once terminal.

        Invalid keys leave the cursor untouched and set ``notice``.
        """
        self.notice = None
        if key == QUIT_KEY:
            self.result = Aborted()
        elif key == SELECT_KEY:
            self.result = Selected(self.cursor.selection_path)
        elif key == UP_KEY:
            if self.cursor.is_root:
                self.notice = "Already at the repository root; there is no parent folder."
            else:
                self.cursor.pop()
        else:
            index = self.keymap.reverse_lookup(key)
            if index is not None and index < len(entries):
                self.cursor.push(entries[index].name)
            else:
                self.notice = f"Invalid selection: '{key}'. Please try again."
        return self.result

    def step(self) -> SelectionResult | None:
        """Run one list/render/read/dispatch turn."""
        entries, truncated = self.load_entries()
        self.render(entries, truncated)
        key = self.read_keystroke("Enter key: ")
        result = self.dispatch(key, entries)
        if self.notice:
            self._write(self.theme.paint("error", self.notice))
        return result

    def run(self) -> SelectionResult:
        """Turn until the user selects a folder or quits, then report the outcome."""
        while self.result is None:
            self.step()
        if isinstance(self.result, Selected):
            if self.result.path == ".":
                self._write(self.theme.paint("success", "Selected repository root (.) as the target folder."))
            else:
                self._write(self.theme.paint("success", f"You selected folder: '{self.result.path}'"))
        else:
            self._write("Folder selection aborted by user.")
        return self.result


def run_selection(
    initial_reference: str,
    *,
    keymap: KeyMap,
    tree_provider: TreeProvider,
    read_keystroke: Callable[[str], str],
    out: TextIO | None = None,
    theme: MenuTheme = PLAIN_THEME,
) -> SelectionResult:
    """Walk the tree of ``initial_reference`` until the user selects or quits."""
    state = SelectionState(
        keymap,
        tree_provider,
        initial_reference,
        read_keystroke,
        out=out,
        theme=theme,
    )
    return state.run()
