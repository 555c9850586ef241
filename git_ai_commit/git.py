"""Thin wrapper around the git command line.

Each operation runs exactly one git command and returns its trimmed
standard output. Commands are written as strings, the way they are shown
to the user, and split with :mod:`shlex` before execution; no shell is
involved.
"""

import logging
import shlex
from pathlib import Path
from typing import Optional, Union

from rich.markup import escape

from .errors import GitCommandError
from .utils import GitChanges, SubprocessHandler, console

LOG = logging.getLogger(__name__)


def quote_message(message: str) -> str:
    """Wrap a commit message in double quotes for a git command string.

    Backslashes and double quotes are escaped so the message stays a
    single argument whatever it contains.
    """
    escaped = message.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class GitOperations:
    """Version-control adapter used by the workflow."""

    def __init__(self, verbose: bool = False,
                 cwd: Optional[Union[str, Path]] = None,
                 handler: Optional[SubprocessHandler] = None) -> None:
        self.verbose = verbose
        self.handler = handler or SubprocessHandler(cwd=cwd)

    def exec(self, command: str, silent: bool = False, ignore_error: bool = False) -> str:
        """Run a git command string and return its trimmed stdout.

        Args:
            command: Full command line, e.g. ``git status --short``.
            silent: Do not echo the command in verbose mode.
            ignore_error: Return an empty string instead of raising on failure.

        Raises:
            GitCommandError: If the command fails and ``ignore_error`` is False.
        """
        if self.verbose and not silent:
            console.print(f"[dim]\\[GIT][/dim] {escape(command)}")
        LOG.debug("Running git command: %s", command)

        try:
            stdout, stderr, code = self.handler.run_command(shlex.split(command))
        except OSError as exc:
            if ignore_error:
                return ""
            raise GitCommandError(command, str(exc)) from exc

        if code != 0:
            LOG.debug("git stderr: %s", stderr.strip())
            if ignore_error:
                return ""
            raise GitCommandError(command, stderr.strip())
        return stdout.strip()

    def _succeeds(self, command: str) -> bool:
        try:
            self.exec(command, silent=True)
        except GitCommandError:
            return False
        return True

    def is_repository(self) -> bool:
        """Check if we're inside a git work tree."""
        return self._succeeds("git rev-parse --is-inside-work-tree")

    def get_status(self) -> str:
        return self.exec("git status --short")

    def get_diff(self) -> str:
        """Unstaged diff; empty on failure."""
        return self.exec("git diff", ignore_error=True)

    def get_staged_diff(self) -> str:
        """Staged diff; empty on failure."""
        return self.exec("git diff --cached", ignore_error=True)

    def get_changes(self) -> GitChanges:
        """Collect status and diffs for the current working tree."""
        status = self.get_status()
        staged_diff = self.get_staged_diff()
        unstaged_diff = self.get_diff()

        return GitChanges(
            status=status,
            diff=staged_diff or unstaged_diff,
            has_staged_changes=bool(staged_diff),
            has_unstaged_changes=bool(unstaged_diff),
        )

    def has_changes(self) -> bool:
        return bool(self.get_status())

    def branch_exists(self, branch_name: str) -> bool:
        return self._succeeds(f"git rev-parse --verify {shlex.quote(branch_name)}")

    def create_branch(self, branch_name: str) -> None:
        """Create and check out a new branch."""
        self.exec(f"git checkout -b {shlex.quote(branch_name)}")

    def stage_all(self) -> None:
        self.exec("git add .")

    def commit(self, message: str) -> None:
        self.exec(f"git commit -m {quote_message(message)}")

    def push(self, branch_name: str) -> None:
        self.exec(f"git push origin {shlex.quote(branch_name)}")

    def get_current_branch(self) -> str:
        return self.exec("git branch --show-current")
