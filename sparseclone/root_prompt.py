"""Yes/no prompt for pulling root-level items into the checkout."""

from __future__ import annotations

import re
import sys
from collections.abc import Callable, Sequence
from typing import TextIO

from .ui_theme import PLAIN_THEME, MenuTheme

MAX_LISTED_ENTRIES = 5
_YES_RE = re.compile(r"^(y|yes)$", re.IGNORECASE)


def is_yes(answer: str) -> bool:
    """True for ``y`` or ``yes`` in any case."""
    return bool(_YES_RE.match(answer.strip()))


def run_root_inclusion_prompt(
    entries: Sequence[str],
    *,
    read_line: Callable[[str], str],
    folder: str = ".",
    out: TextIO | None = None,
    theme: MenuTheme = PLAIN_THEME,
) -> bool:
    """List a few root entries and ask whether to include all root-level items.

    Callers skip this entirely when ``entries`` is empty. Any answer other
    than yes, including a bare Enter, means no; there is no re-prompt.
    """
    out = sys.stdout if out is None else out
    out.write("\nThe following top-level directories were found at the repository root:\n")
    for name in entries[:MAX_LISTED_ENTRIES]:
        out.write(f"  - {theme.paint('directory', name)}\n")
    if len(entries) > MAX_LISTED_ENTRIES:
        out.write("  - ...and more.\n")
    out.write("\n")

    folder_label = "<repository root>" if folder == "." else folder
    answer = read_line(
        "Do you want to include ALL root-level items (files and top-level directories at the root) "
        f"along with '{folder_label}'? (y/N): "
    )
    return is_yes(answer)
