import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["console", "err_console", "configure_logging", "GitChanges", "SubprocessHandler"]

console = Console()

err_console = Console(stderr=True)


def configure_logging(verbose: bool = False) -> None:
    """Route log records through rich on stderr.

    DEBUG when verbose, WARNING otherwise.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@dataclass(frozen=True)
class GitChanges:
    """Snapshot of the working tree taken once per run.

    ``diff`` holds the staged diff when there is one, otherwise the
    unstaged diff.
    """
    status: str
    diff: str
    has_staged_changes: bool
    has_unstaged_changes: bool


class SubprocessHandler:
    """Dedicated class for running external commands.

    Commands are argument lists and never go through a shell. There is no
    timeout unless one is given, so a slow ``git push`` is allowed to finish.
    """

    def __init__(self, cwd: Optional[Union[str, Path]] = None,
                 timeout: Optional[float] = None) -> None:
        """Initialize the handler.

        Args:
            cwd: Directory to run commands in (defaults to the process cwd).
            timeout: Maximum time in seconds to wait for a command, or None.
        """
        self.cwd: Optional[str] = str(cwd) if cwd is not None else None
        self.timeout: Optional[float] = timeout

    @staticmethod
    def create_env() -> Dict[str, str]:
        """Create environment with explicit encoding settings for subprocess.

        Returns:
            Dict[str, str]: Environment variables dictionary with encoding settings.
        """
        env = os.environ.copy()
        env['PYTHONIOENCODING'] = 'utf-8'
        return env

    def run_command(self, command: List[str], encoding: str = 'utf-8',
                    errors: str = 'replace') -> Tuple[str, str, int]:
        """Execute a command and return its output.

        Undecodable bytes are replaced rather than raising, git happily
        prints file contents in any encoding.

        Args:
            command: Command to execute as a list of strings.
            encoding: Character encoding to use.
            errors: How to handle encoding/decoding errors.

        Returns:
            Tuple[str, str, int]: stdout, stderr, and return code.

        Raises:
            TimeoutError: If a timeout was configured and the command exceeds it.
        """
        process: Optional[subprocess.Popen[Any]] = None
        try:
            process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding=encoding,
                errors=errors,
                env=self.create_env(),
                cwd=self.cwd,
            )
            stdout, stderr = process.communicate(timeout=self.timeout)
            return stdout, stderr, process.returncode
        except subprocess.TimeoutExpired:
            process.kill()
            process.communicate()
            raise TimeoutError(f"Command timed out after {self.timeout} seconds: {' '.join(command)}")
        finally:
            self._cleanup_process(process)

    @staticmethod
    def _cleanup_process(process: Optional[subprocess.Popen[Any]]) -> None:
        """Close the pipes of a finished process."""
        if process is None:
            return

        for fd in [process.stdout, process.stderr]:
            if fd is not None:
                try:
                    fd.close()
                except OSError:
                    pass
