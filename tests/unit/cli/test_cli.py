"""CLI argument handling and exit statuses of ``sparseclone.cli.main``.

The clone itself is mocked; these tests cover option resolution and the
mapping of errors and interrupts onto process exit codes.
"""

from __future__ import annotations

import io
import os
import signal
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from sparseclone import cli, config
from sparseclone.errors import CloneAborted, CollaboratorFailure
from sparseclone.keymap import Layout


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        config_patch = mock.patch("sparseclone.config.CONFIG_PATH", Path(self._tmp.name) / "config.json")
        config_patch.start()
        self.addCleanup(config_patch.stop)
        self.addCleanup(self._tmp.cleanup)

    def test_folder_and_layout_are_passed_to_clone(self) -> None:
        with mock.patch("sparseclone.cli.run_sparse_clone") as run_sparse_clone:
            cli.main(["https://github.com/nandorojo/solito.git", "apps/web", "--layout", "colemak-dh"])

        run_sparse_clone.assert_called_once()
        request, _prompter, keymap = run_sparse_clone.call_args.args
        self.assertEqual(request.repo_url, "https://github.com/nandorojo/solito.git")
        self.assertEqual(request.folder, "apps/web")
        self.assertIs(keymap.layout, Layout.COLEMAK_DH)

    def test_saved_layout_is_used_when_flag_missing(self) -> None:
        with mock.patch("sparseclone.cli.run_sparse_clone") as run_sparse_clone:
            cli.main(["https://x/repo.git", "--layout", "dvorak", "--save-defaults"])
            cli.main(["https://x/repo.git"])

        request, _prompter, keymap = run_sparse_clone.call_args.args
        self.assertIs(keymap.layout, Layout.DVORAK)
        self.assertIsNone(request.folder)

    def test_default_layout_is_qwerty(self) -> None:
        with mock.patch("sparseclone.cli.run_sparse_clone") as run_sparse_clone:
            cli.main(["https://x/repo.git"])
        self.assertIs(run_sparse_clone.call_args.args[2].layout, Layout.QWERTY)

    def test_unknown_layout_is_rejected_by_argparse(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["https://x/repo.git", "--layout", "azerty"])
        self.assertEqual(ctx.exception.code, 2)

    def test_collaborator_failure_exits_with_status_one(self) -> None:
        stderr = io.StringIO()
        failure = CollaboratorFailure(["git", "clone"], 128, "repository not found")
        with (
            mock.patch("sparseclone.cli.run_sparse_clone", side_effect=failure),
            mock.patch("sys.stderr", stderr),
        ):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["https://x/repo.git"])

        self.assertEqual(ctx.exception.code, cli.EXIT_FAILURE)
        self.assertIn("Error: `git clone` exited with status 128 (repository not found)", stderr.getvalue())

    def test_user_abort_exits_with_status_one(self) -> None:
        stderr = io.StringIO()
        with (
            mock.patch("sparseclone.cli.run_sparse_clone", side_effect=CloneAborted("No folder was selected.")),
            mock.patch("sys.stderr", stderr),
        ):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["https://x/repo.git"])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("No folder was selected.", stderr.getvalue())

    def test_interrupt_exits_with_status_130(self) -> None:
        stdout = io.StringIO()
        with (
            mock.patch("sparseclone.cli.run_sparse_clone", side_effect=KeyboardInterrupt),
            mock.patch("sys.stdout", stdout),
        ):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["https://x/repo.git"])

        self.assertEqual(ctx.exception.code, cli.EXIT_INTERRUPTED)
        self.assertIn("Operation cancelled by user", stdout.getvalue())

    def test_sigterm_unwinds_like_interrupt_and_restores_handler(self) -> None:
        previous = signal.getsignal(signal.SIGTERM)
        installed = []

        def terminate(*_args, **_kwargs):
            installed.append(signal.getsignal(signal.SIGTERM))
            os.kill(os.getpid(), signal.SIGTERM)

        stdout = io.StringIO()
        with (
            mock.patch("sparseclone.cli.run_sparse_clone", side_effect=terminate),
            mock.patch("sys.stdout", stdout),
        ):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["https://x/repo.git"])

        self.assertEqual(ctx.exception.code, cli.EXIT_INTERRUPTED)
        self.assertEqual(installed, [cli._raise_keyboard_interrupt])
        self.assertEqual(signal.getsignal(signal.SIGTERM), previous)
        self.assertIn("Operation cancelled by user", stdout.getvalue())

    def test_unknown_theme_is_rejected_and_not_saved(self) -> None:
        with (
            mock.patch("sparseclone.cli.run_sparse_clone") as run_sparse_clone,
            mock.patch("sys.stderr", io.StringIO()),
        ):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["https://x/repo.git", "--theme", "bogus", "--save-defaults"])

        self.assertEqual(ctx.exception.code, 2)
        run_sparse_clone.assert_not_called()
        self.assertIsNone(config.load_theme_name())

    def test_known_theme_is_saved(self) -> None:
        with mock.patch("sparseclone.cli.run_sparse_clone"):
            cli.main(["https://x/repo.git", "--theme", "ocean", "--save-defaults"])
        self.assertEqual(config.load_theme_name(), "ocean")

    def test_closed_input_exits_with_status_one(self) -> None:
        with (
            mock.patch("sparseclone.cli.run_sparse_clone", side_effect=EOFError),
            mock.patch("sys.stderr", io.StringIO()),
        ):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["https://x/repo.git"])
        self.assertEqual(ctx.exception.code, 1)


if __name__ == "__main__":
    unittest.main()
