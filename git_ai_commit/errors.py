"""Exception types for git-ai-commit.

Everything the tool raises on purpose derives from GitAICommitError so the
CLI can tell expected failures apart from bugs.
"""


class GitAICommitError(Exception):
    """Base class for all git-ai-commit errors."""


class ConfigError(GitAICommitError):
    """Raised for an invalid provider name or an unwritable config file."""


class GitCommandError(GitAICommitError):
    """Raised when a git command exits with a non-zero status."""

    def __init__(self, command: str, detail: str = "") -> None:
        self.command = command
        self.detail = detail
        message = f"Git command failed: {command}"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


class NotAGitRepositoryError(GitAICommitError):
    """Raised when the working directory is not inside a git work tree."""


class ProviderError(GitAICommitError):
    """Raised when a provider cannot be constructed."""
