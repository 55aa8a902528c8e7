"""Command-line front door for git-sparse-clone.

Parses CLI options, resolves layout and theme from flags and saved config,
then runs the sparse clone. Maps failures and interrupts to exit statuses.
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys

from . import config
from .clone import CloneRequest, run_sparse_clone
from .errors import SparseCloneError
from .keymap import KeyMap, available_layout_names, parse_layout
from .logging_config import configure_logging
from .terminal import TerminalPrompter
from .ui_theme import available_theme_names, resolve_theme

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

EPILOG = """\
examples:
  git-sparse-clone https://github.com/nandorojo/solito.git apps/web
  git-sparse-clone https://github.com/nandorojo/solito.git
"""


def _raise_keyboard_interrupt(signum, frame) -> None:
    """SIGTERM handler: unwind through the same path as Ctrl+C."""
    raise KeyboardInterrupt


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="git-sparse-clone",
        description=(
            "Clone a repository and sparsely check out a single folder. "
            "Without a folder argument an interactive tree walker lets you pick one; "
            "you are then asked whether to include root-level repository items."
        ),
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("repo_url", help="Repository URL to clone.")
    parser.add_argument("folder", nargs="?", default=None, help="Folder to check out. Omit to choose interactively.")
    parser.add_argument(
        "--layout",
        choices=available_layout_names(),
        default=None,
        help="Keyboard layout for menu keys (default: saved layout, else qwerty).",
    )
    parser.add_argument(
        "--theme",
        choices=available_theme_names(),
        default=None,
        help="Menu colour theme (default: saved theme, else default).",
    )
    parser.add_argument(
        "--save-defaults",
        action="store_true",
        help="Remember the given --layout and --theme for future runs.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log git commands and cleanup steps to stderr.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run one sparse clone; exits non-zero on failure."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    layout = parse_layout(args.layout) if args.layout is not None else config.load_layout()
    theme_name = args.theme if args.theme is not None else config.load_theme_name()
    if args.save_defaults:
        if args.layout is not None:
            config.save_layout(layout)
        if args.theme is not None:
            config.save_theme_name(args.theme)

    out = sys.stdout
    theme = resolve_theme(theme_name, no_color=args.no_color, is_tty=out.isatty())
    previous_sigterm = signal.signal(signal.SIGTERM, _raise_keyboard_interrupt)
    try:
        keymap = KeyMap.for_layout(layout)
        run_sparse_clone(
            CloneRequest(repo_url=args.repo_url, folder=args.folder),
            TerminalPrompter(out=out),
            keymap,
            out=out,
            theme=theme,
        )
    except KeyboardInterrupt:
        out.write("\nOperation cancelled by user (Ctrl+C). Cleanup performed.\n")
        out.flush()
        raise SystemExit(EXIT_INTERRUPTED)
    except EOFError:
        sys.stderr.write("\nError: Input closed before a selection was made.\n")
        raise SystemExit(EXIT_FAILURE)
    except SparseCloneError as exc:
        logger.debug("sparse clone failed", exc_info=True)
        sys.stderr.write(f"\nError: {exc}\n")
        raise SystemExit(EXIT_FAILURE)
    finally:
        signal.signal(signal.SIGTERM, previous_sigterm)


if __name__ == "__main__":
    main()
